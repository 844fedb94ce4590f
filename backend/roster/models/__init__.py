"""
SQLAlchemy models for the patient roster backend.

These are the authoritative PostgreSQL tables.
"""

from .practice import Practice, AppUser
from .patient import (
    Website,
    Patient,
    PatientGeneralInfo,
    PatientMedicalInfo,
    PatientPDBInfo,
    PatientFamily,
    Eligibility,
)
from .follow_up import FollowUpStatus, FollowUp, PatientNote
from .credentials import ScraperUserStatus, ScraperCredential, ScraperUser

__all__ = [
    # Practice/user
    "Practice",
    "AppUser",
    # Patient roster
    "Website",
    "Patient",
    "PatientGeneralInfo",
    "PatientMedicalInfo",
    "PatientPDBInfo",
    "PatientFamily",
    "Eligibility",
    # Follow-ups
    "FollowUpStatus",
    "FollowUp",
    "PatientNote",
    # Scraper credentials
    "ScraperUserStatus",
    "ScraperCredential",
    "ScraperUser",
]
