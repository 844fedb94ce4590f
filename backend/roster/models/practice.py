"""
Practice and user models.

A practice owns its patient roster; users author follow-ups.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.orm import relationship

from roster.db.postgres import Base


class Practice(Base):
    """Dental/medical practice owning a roster of patients."""

    __tablename__ = "practice"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company = Column(String(255), nullable=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    patients = relationship("Patient", back_populates="practice")


class AppUser(Base):
    """Back-office user; resolved from identity tokens."""

    __tablename__ = "app_user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    email = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    status = Column(String(50), default="active", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
