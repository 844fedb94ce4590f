"""
Follow-up reminders and patient notes.

The "current" follow-up of a patient is the Pending row with the lowest
due_date; ties go to the lowest id (insertion order).
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from roster.db.postgres import Base
from roster.models._serialize import iso


class FollowUpStatus:
    """Follow-up status values."""
    PENDING = "Pending"
    DONE = "Done"
    CANCELLED = "Cancelled"


class FollowUp(Base):
    """Follow-up reminder for a patient."""

    __tablename__ = "follow_up"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, index=True)
    author = Column(Integer, ForeignKey("app_user.id"), nullable=True)
    assignee = Column(String(255), nullable=True)
    due_date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), default=FollowUpStatus.PENDING, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    patient = relationship("Patient", back_populates="follow_ups")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "patientId": self.patient_id,
            "author": self.author,
            "assignee": self.assignee,
            "dueDate": iso(self.due_date),
            "description": self.description,
            "status": self.status,
            "createdAt": iso(self.created_at),
        }


class PatientNote(Base):
    """Append-only note on a patient's timeline."""

    __tablename__ = "patient_note"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, index=True)
    author_username = Column(String(255), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
