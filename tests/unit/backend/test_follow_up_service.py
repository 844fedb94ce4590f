"""
Unit tests for follow-up creation and identity resolution.

Covers:
- IdentityService token issue / resolve
- FollowUpService.create_follow_up happy path and audit note
- Identity and store failures
- Best-effort note writing
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import jwt
import pytest

from roster.errors import NotFoundError, ValidationError
from roster.models import AppUser, FollowUp, FollowUpStatus, PatientNote
from roster.services.follow_ups import FOLLOW_UP_NOTE, FollowUpService
from roster.services.identity import IdentityService
from roster.services.notes import NoteService

SECRET = "test-secret"


@pytest.fixture
def identity():
    return IdentityService(secret=SECRET, algorithm="HS256")


@pytest.fixture
def author(db_session):
    user = AppUser(username="frontdesk", email="fd@acme.test", display_name="Front Desk")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def token(identity, author):
    return identity.create_access_token(author.id, author.username)


# =============================================================================
# IdentityService
# =============================================================================

class TestIdentityService:

    def test_resolves_id_from_token(self, identity):
        token = identity.create_access_token(42, "frontdesk")

        assert identity.resolve_user(token, "id") == "42"
        assert identity.resolve_user(f"Bearer {token}", "username") == "frontdesk"

    @pytest.mark.parametrize("bad", [None, "", "Bearer ", "not-a-jwt"])
    def test_unusable_token_is_not_found(self, identity, bad):
        with pytest.raises(NotFoundError):
            identity.resolve_user(bad, "id")

    def test_expired_token_is_not_found(self, identity):
        expired = jwt.encode(
            {"sub": "1", "type": "access", "exp": datetime.utcnow() - timedelta(minutes=1)},
            SECRET, algorithm="HS256",
        )
        with pytest.raises(NotFoundError):
            identity.resolve_user(expired, "id")

    def test_wrong_secret_is_not_found(self, identity):
        other = IdentityService(secret="someone-else").create_access_token(1)
        with pytest.raises(NotFoundError):
            identity.resolve_user(other, "id")

    def test_non_access_token_is_not_found(self, identity):
        refresh = jwt.encode(
            {"sub": "1", "type": "refresh", "exp": datetime.utcnow() + timedelta(minutes=5)},
            SECRET, algorithm="HS256",
        )
        with pytest.raises(NotFoundError):
            identity.resolve_user(refresh, "id")

    def test_missing_field_is_not_found(self, identity):
        token = identity.create_access_token(1)
        with pytest.raises(NotFoundError):
            identity.resolve_user(token, "email")


# =============================================================================
# FollowUpService
# =============================================================================

class TestCreateFollowUp:

    def test_creates_pending_follow_up_and_note(self, db_session, roster, identity, author, token):
        patient_id = roster["overdue"].id
        due = datetime(2024, 2, 1, 9, 0)
        service = FollowUpService(db_session, identity=identity)

        created = service.create_follow_up(patient_id, due, "Dr. Lee", "Call about recall", token)

        stored = db_session.get(FollowUp, created.id)
        assert stored.status == FollowUpStatus.PENDING
        assert stored.author == author.id
        assert stored.assignee == "Dr. Lee"
        assert stored.due_date == due

        notes = db_session.query(PatientNote).filter_by(patient_id=patient_id).all()
        assert [(n.author_username, n.text) for n in notes] == [("frontdesk", FOLLOW_UP_NOTE)]

    def test_invalid_token_creates_nothing(self, db_session, roster, identity):
        service = FollowUpService(db_session, identity=identity)

        with pytest.raises(NotFoundError):
            service.create_follow_up(
                roster["overdue"].id, datetime(2024, 2, 1), None, None, "garbage"
            )
        assert db_session.query(FollowUp).count() == 0

    def test_token_for_unknown_user(self, db_session, roster, identity):
        token = identity.create_access_token(9999)
        service = FollowUpService(db_session, identity=identity)

        with pytest.raises(NotFoundError):
            service.create_follow_up(roster["overdue"].id, datetime(2024, 2, 1), None, None, token)

    def test_unknown_patient(self, db_session, roster, identity, token):
        service = FollowUpService(db_session, identity=identity)

        with pytest.raises(ValidationError):
            service.create_follow_up(123456, datetime(2024, 2, 1), None, None, token)
        assert db_session.query(FollowUp).count() == 0

    def test_note_failure_keeps_follow_up(self, db_session, roster, identity, token):
        notes = MagicMock(spec=NoteService)
        notes.create_note.side_effect = RuntimeError("notes unavailable")
        service = FollowUpService(db_session, identity=identity, notes=notes)

        created = service.create_follow_up(
            roster["novisit"].id, datetime(2024, 2, 1), None, None, token
        )

        notes.create_note.assert_called_once_with(roster["novisit"].id, "frontdesk", FOLLOW_UP_NOTE)
        assert db_session.get(FollowUp, created.id) is not None
        assert db_session.query(PatientNote).count() == 0

    def test_mocked_identity_is_used(self, db_session, roster, author):
        identity = MagicMock()
        identity.resolve_user.return_value = str(author.id)
        service = FollowUpService(db_session, identity=identity)

        service.create_follow_up(roster["new"].id, datetime(2024, 2, 1), None, None, "Bearer abc")

        identity.resolve_user.assert_called_once_with("Bearer abc", "id")
