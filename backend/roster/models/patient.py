"""
Patient roster models.

A Patient row is created by the upstream scraping/sync process and carries
scraping metadata. Its satellites:
- PatientGeneralInfo: demographics and subscriber flags (exactly one)
- PatientMedicalInfo: insurance (exactly one)
- PatientPDBInfo: third-party activity snapshot (zero or one; absence
  means "never serviced" to the roster views)
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Boolean, Text
from sqlalchemy.orm import relationship

from roster.db.postgres import Base
from roster.models._serialize import iso


class Website:
    """Payer portal a patient record was scraped from."""
    DENTAQUEST = "dentaquest"
    MCNA = "mcna"
    OTHER = "other"


class Patient(Base):
    """Patient roster entry for a practice."""

    __tablename__ = "patient"

    id = Column(Integer, primary_key=True, autoincrement=True)
    practice_id = Column(Integer, ForeignKey("practice.id"), nullable=False, index=True)

    # Scraping metadata
    website = Column(String(20), nullable=True)  # dentaquest | mcna | other
    facility_id = Column(String(100), nullable=True)
    last_service_date = Column(DateTime, nullable=True)
    next_service = Column(DateTime, nullable=True)
    last_touch = Column(DateTime, nullable=True)
    insert_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    contact_status = Column(String(255), nullable=True)

    # Relationships
    practice = relationship("Practice", back_populates="patients")
    general_info = relationship(
        "PatientGeneralInfo", back_populates="patient", uselist=False
    )
    medical_info = relationship(
        "PatientMedicalInfo", back_populates="patient", uselist=False
    )
    pdb_info = relationship("PatientPDBInfo", back_populates="patient", uselist=False)
    follow_ups = relationship("FollowUp", back_populates="patient")

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses (satellites nested)."""
        return {
            "id": self.id,
            "practiceId": self.practice_id,
            "website": self.website,
            "facilityId": self.facility_id,
            "lastServiceDate": iso(self.last_service_date),
            "nextService": iso(self.next_service),
            "lastTouch": iso(self.last_touch),
            "insertDate": iso(self.insert_date),
            "contactStatus": self.contact_status,
            "generalInfo": self.general_info.to_dict() if self.general_info else None,
            "medicalInfo": self.medical_info.to_dict() if self.medical_info else None,
            "pdbInfo": self.pdb_info.to_dict() if self.pdb_info else None,
        }


class PatientGeneralInfo(Base):
    """Demographic and subscriber attributes (1:1 with Patient)."""

    __tablename__ = "patient_general_info"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, unique=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    dob = Column(String(10), nullable=True)  # YYYY-MM-DD as scraped
    subscriber_id = Column(String(100), nullable=True)
    mco_status = Column(Boolean, nullable=True)
    multi_practice = Column(Boolean, default=False, nullable=False)

    patient = relationship("Patient", back_populates="general_info")

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "dob": self.dob,
            "subscriberId": self.subscriber_id,
            "mcoStatus": self.mco_status,
            "multiPractice": self.multi_practice,
        }


class PatientMedicalInfo(Base):
    """Insurance attributes (1:1 with Patient)."""

    __tablename__ = "patient_medical_info"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, unique=True)
    insurance = Column(String(255), nullable=True)

    patient = relationship("Patient", back_populates="medical_info")

    def to_dict(self) -> dict:
        return {"insurance": self.insurance}


class PatientPDBInfo(Base):
    """Third-party practice database activity snapshot (0:1 with Patient)."""

    __tablename__ = "patient_pdb_info"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, unique=True)
    last_service_date_pdb = Column(DateTime, nullable=True)
    last_prophylaxis_date_pdb = Column(DateTime, nullable=True)
    tx_planned = Column(Integer, nullable=True)
    total_visits = Column(Integer, nullable=True)

    patient = relationship("Patient", back_populates="pdb_info")

    def to_dict(self) -> dict:
        return {
            "lastServiceDatePdb": iso(self.last_service_date_pdb),
            "lastProphylaxisDatePdb": iso(self.last_prophylaxis_date_pdb),
            "txPlanned": self.tx_planned,
            "totalVisits": self.total_visits,
        }


class PatientFamily(Base):
    """
    Guarantor/dependent grouping.

    One row per dependent, keyed by the dependent's patient_id and pointing
    at the guarantor. A guarantor has no row of its own.
    """

    __tablename__ = "patient_family"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, unique=True)
    guarantor_id = Column(Integer, ForeignKey("patient.id"), nullable=False, index=True)

    patient = relationship("Patient", foreign_keys=[patient_id])
    guarantor = relationship("Patient", foreign_keys=[guarantor_id])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "patientId": self.patient_id,
            "guarantorId": self.guarantor_id,
            "patient": self.patient.to_dict() if self.patient else None,
        }


class Eligibility(Base):
    """Insurance eligibility snapshot (read-only here)."""

    __tablename__ = "eligibility"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, index=True)
    payer = Column(String(255), nullable=True)
    plan_name = Column(String(255), nullable=True)
    coverage_status = Column(String(50), nullable=True)
    effective_date = Column(DateTime, nullable=True)
    termination_date = Column(DateTime, nullable=True)
    details = Column(Text, nullable=True)
    checked_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "patientId": self.patient_id,
            "payer": self.payer,
            "planName": self.plan_name,
            "coverageStatus": self.coverage_status,
            "effectiveDate": iso(self.effective_date),
            "terminationDate": iso(self.termination_date),
            "details": self.details,
            "checkedAt": iso(self.checked_at),
        }
