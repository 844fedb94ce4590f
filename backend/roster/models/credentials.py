"""
Payer-portal scraper credentials.

ScraperCredential stores the login used for a (company, practice, website
[, facility]) tuple. ScraperUser tracks whether that login has been
validated against the portal.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer

from roster.db.postgres import Base


class ScraperUserStatus:
    """Validation state of a portal login."""
    VALID = "Valid"
    INVALID = "Invalid"
    PENDING = "Pending"


class ScraperCredential(Base):
    """Stored portal login for a company/practice/website[/facility]."""

    __tablename__ = "scraper_credential"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company = Column(String(255), nullable=False)
    practice_id = Column(Integer, ForeignKey("practice.id"), nullable=False)
    website = Column(String(20), nullable=False)
    facility_id = Column(String(100), nullable=True)
    username = Column(String(255), nullable=False)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "username": self.username,
            "password": self.password,
            "website": self.website,
            "facility_id": self.facility_id,
        }


class ScraperUser(Base):
    """Validation status of a portal username."""

    __tablename__ = "scraper_user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    status = Column(String(20), default=ScraperUserStatus.PENDING, nullable=False)
    validated_at = Column(DateTime, nullable=True)
