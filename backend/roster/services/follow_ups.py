"""
Follow-up reads and writes.

FollowUpRepository answers "current follow-up" lookups; FollowUpService
creates follow-ups on behalf of the user behind an identity token and
leaves an audit note on the patient.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from roster.db.postgres import get_db_session
from roster.errors import NotFoundError, UpstreamError, ValidationError
from roster.models import AppUser, FollowUp, FollowUpStatus, Patient
from roster.services.identity import IdentityService, get_identity_service
from roster.services.notes import NoteService

FOLLOW_UP_NOTE = "Follow UP created"


class FollowUpRepository:
    """Lookups over the follow_up table."""

    def first_pending(self, session: DbSession, patient_id: int) -> Optional[FollowUp]:
        """Earliest-due Pending follow-up; ties go to the oldest row."""
        return (
            session.query(FollowUp)
            .filter(
                FollowUp.patient_id == patient_id,
                FollowUp.status == FollowUpStatus.PENDING,
            )
            .order_by(FollowUp.due_date.asc(), FollowUp.id.asc())
            .first()
        )


class FollowUpService:
    """Creates follow-ups for patients."""

    def __init__(
        self,
        db_session: Optional[DbSession] = None,
        identity: Optional[IdentityService] = None,
        notes: Optional[NoteService] = None,
    ):
        self._explicit_db = db_session
        self.identity = identity or get_identity_service()
        self.notes = notes or NoteService(db_session)
        self.logger = logging.getLogger("service.FollowUpService")

    @property
    def db(self) -> DbSession:
        if self._explicit_db is not None:
            return self._explicit_db
        return get_db_session()

    def create_follow_up(
        self,
        patient_id: int,
        due_date: datetime,
        assignee: Optional[str],
        description: Optional[str],
        author_token: str,
    ) -> FollowUp:
        """
        Persist a Pending follow-up authored by the token's user.

        The audit note is best-effort: a note failure is logged and the
        follow-up stays committed.
        """
        author_id = self.identity.resolve_user(author_token, "id")
        db = self.db

        user = db.query(AppUser).filter(AppUser.id == int(author_id)).first()
        if user is None:
            raise NotFoundError(
                "Author not found",
                context={"author_id": author_id},
            )
        if db.get(Patient, patient_id) is None:
            raise ValidationError(
                f"Unknown patient: {patient_id}",
                context={"patient_id": patient_id},
            )

        follow_up = FollowUp(
            patient_id=patient_id,
            author=user.id,
            assignee=assignee,
            created_at=datetime.utcnow(),
            due_date=due_date,
            description=description,
            status=FollowUpStatus.PENDING,
        )
        try:
            db.add(follow_up)
            db.commit()
            db.refresh(follow_up)
        except SQLAlchemyError as e:
            db.rollback()
            self.logger.error(f"Failed to create follow-up for patient {patient_id}: {e}")
            raise UpstreamError(
                "Failed to create follow-up",
                context={"patient_id": patient_id},
            ) from e

        try:
            self.notes.create_note(patient_id, user.username, FOLLOW_UP_NOTE)
        except Exception as e:
            self.logger.warning(
                f"Follow-up {follow_up.id} created but note failed for patient {patient_id}: {e}"
            )

        self.logger.info(f"Follow-up {follow_up.id} created for patient {patient_id}")
        return follow_up
