"""
NoteService: append-only notes on a patient's timeline.

INSERT-only; notes are never updated or deleted.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session as DbSession

from roster.db.postgres import get_db_session
from roster.models import PatientNote


class NoteService:
    """Writes patient notes."""

    def __init__(self, db_session: Optional[DbSession] = None):
        self._explicit_db = db_session  # Only set if explicitly passed
        self.logger = logging.getLogger("service.NoteService")

    @property
    def db(self) -> DbSession:
        if self._explicit_db is not None:
            return self._explicit_db
        return get_db_session()

    def create_note(self, patient_id: int, author_username: str, text: str) -> PatientNote:
        """Append a note; rolls back its own transaction on failure."""
        db = self.db
        note = PatientNote(
            patient_id=patient_id,
            author_username=author_username,
            text=text,
        )
        try:
            db.add(note)
            db.commit()
        except Exception:
            db.rollback()
            raise
        self.logger.debug(f"Note added for patient {patient_id} by {author_username}")
        return note
