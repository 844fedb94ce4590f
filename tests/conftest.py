"""
Pytest configuration for all tests.
Sets up Python path to find the backend roster package and provides a
SQLite-backed record store plus a roster with one patient per view.
"""

import sys
import os
from datetime import datetime, timedelta

import pytest

# Add backend directory to Python path
backend_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'backend'))
if backend_path not in sys.path:
    sys.path.insert(0, backend_path)

from roster.db.postgres import configure_engine, get_session_factory, init_db  # noqa: E402
from roster.models import (  # noqa: E402
    Patient,
    PatientGeneralInfo,
    PatientMedicalInfo,
    PatientPDBInfo,
    Practice,
    Website,
)


FIXED_NOW = datetime(2024, 1, 10, 12, 0, 0)


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite store so worker threads get their own connections."""
    engine = configure_engine(f"sqlite:///{tmp_path / 'roster.db'}")
    init_db()
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = get_session_factory()()
    yield session
    session.close()


@pytest.fixture
def now():
    return FIXED_NOW


def add_patient(
    session,
    practice,
    first_name,
    last_name,
    website=Website.OTHER,
    subscriber_id=None,
    mco_status=None,
    multi_practice=False,
    insurance="Medicaid",
    pdb=None,
    **patient_fields,
):
    """Insert a patient with its general/medical info and optional PDB row."""
    patient = Patient(practice_id=practice.id, website=website, **patient_fields)
    session.add(patient)
    session.flush()
    session.add(PatientGeneralInfo(
        patient_id=patient.id,
        first_name=first_name,
        last_name=last_name,
        dob="1990-05-17",
        subscriber_id=subscriber_id,
        mco_status=mco_status,
        multi_practice=multi_practice,
    ))
    session.add(PatientMedicalInfo(patient_id=patient.id, insurance=insurance))
    if pdb is not None:
        session.add(PatientPDBInfo(patient_id=patient.id, **pdb))
    session.flush()
    return patient


@pytest.fixture
def patient_factory(db_session):
    """Bind add_patient to the test session."""
    def factory(practice, first_name, last_name, **kwargs):
        return add_patient(db_session, practice, first_name, last_name, **kwargs)
    return factory


@pytest.fixture
def roster(db_session, now):
    """
    Practice roster where each named patient falls in exactly one view.

    Keys: new, novisit, unscheduled, overdue, inactive, inactive_no_pdb,
    noshow, multi, closed, scheduled, dq_not_mco, other_practice.
    """
    def ago(days):
        return now - timedelta(days=days)

    practice = Practice(company="Acme Dental", name="Acme Main St")
    other_practice = Practice(company="Acme Dental", name="Acme Elm St")
    db_session.add_all([practice, other_practice])
    db_session.flush()

    patients = {
        "new": add_patient(
            db_session, practice, "Nina", "Newman",
            subscriber_id="SUB-1", insert_date=ago(10),
            last_service_date=ago(30), next_service=now + timedelta(days=20),
            insurance="CHIP",
        ),
        "novisit": add_patient(
            db_session, practice, "Victor", "Novak", insert_date=ago(400),
        ),
        "unscheduled": add_patient(
            db_session, practice, "Uma", "Ulrich", website=Website.MCNA,
            subscriber_id="SUB-3", mco_status=True, insert_date=ago(400),
            last_service_date=ago(20),
            pdb={"tx_planned": 2, "last_service_date_pdb": ago(20), "total_visits": 4},
        ),
        "overdue": add_patient(
            db_session, practice, "Oscar", "Overton", insert_date=ago(400),
            last_service_date=ago(200), next_service=now + timedelta(days=3),
            pdb={"last_service_date_pdb": ago(190), "total_visits": 9},
        ),
        "inactive": add_patient(
            db_session, practice, "Ivy", "Ingram", insert_date=ago(800),
            last_service_date=ago(500),
            pdb={"last_service_date_pdb": ago(500), "last_prophylaxis_date_pdb": ago(520),
                 "total_visits": 1},
        ),
        "inactive_no_pdb": add_patient(
            db_session, practice, "Ian", "Irving", insert_date=ago(800),
            last_service_date=ago(500),
        ),
        "noshow": add_patient(
            db_session, practice, "Ned", "Nash", website=Website.DENTAQUEST,
            mco_status=True, insert_date=ago(400), last_service_date=ago(90),
            next_service=ago(2), last_touch=ago(10),
            pdb={"last_service_date_pdb": ago(90), "total_visits": 6},
        ),
        "multi": add_patient(
            db_session, practice, "Mia", "Moreau", website=Website.DENTAQUEST,
            multi_practice=True, insert_date=ago(400), last_service_date=ago(40),
        ),
        "closed": add_patient(
            db_session, practice, "Carl", "Cole", insert_date=ago(400),
            contact_status="patient MOVED AWAY in 2023",
        ),
        "scheduled": add_patient(
            db_session, practice, "Sara", "Stone", insert_date=ago(400),
            last_service_date=ago(10), next_service=now + timedelta(hours=6),
        ),
        "dq_not_mco": add_patient(
            db_session, practice, "Dana", "Doyle", website=Website.DENTAQUEST,
            mco_status=False, insert_date=ago(400),
        ),
        "other_practice": add_patient(
            db_session, other_practice, "Olga", "Olsen", multi_practice=True,
            insert_date=ago(10), subscriber_id="SUB-9",
        ),
    }
    db_session.commit()
    patients["_practice"] = practice
    patients["_other_practice"] = other_practice
    return patients
