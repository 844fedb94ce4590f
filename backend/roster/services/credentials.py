"""Credential store for payer-portal scraper logins."""

from typing import Optional

from sqlalchemy.orm import Session as DbSession

from roster.db.postgres import get_db_session
from roster.models import ScraperCredential, ScraperUser, ScraperUserStatus


class CredentialStore:
    """Reads stored portal logins and their validation status."""

    def __init__(self, db_session: Optional[DbSession] = None):
        self._explicit_db = db_session

    @property
    def db(self) -> DbSession:
        if self._explicit_db is not None:
            return self._explicit_db
        return get_db_session()

    def get_credentials(
        self,
        company: str,
        practice_id: int,
        website: str,
        facility_id: Optional[str] = None,
    ) -> Optional[ScraperCredential]:
        """Login for the company/practice/website, narrowed to a facility if given."""
        query = self.db.query(ScraperCredential).filter(
            ScraperCredential.company == company,
            ScraperCredential.practice_id == practice_id,
            ScraperCredential.website == website,
        )
        if facility_id is not None:
            query = query.filter(ScraperCredential.facility_id == facility_id)
        return query.order_by(ScraperCredential.id.asc()).first()

    def is_user_valid(self, username: str) -> bool:
        """True when the portal login has been validated."""
        return (
            self.db.query(ScraperUser)
            .filter(
                ScraperUser.username == username,
                ScraperUser.status == ScraperUserStatus.VALID,
            )
            .first()
            is not None
        )
