#!/usr/bin/env python3
"""
Database seeding script.

Creates a demo practice, a back-office user, a roster of patients that
lands in each roster view, a few follow-ups, a family, and scraper
credentials for development/testing.

Usage:
    cd backend
    source venv/bin/activate
    python scripts/seed_roster.py
"""

import sys
import random
from pathlib import Path
from datetime import datetime, timedelta

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from roster.db.postgres import get_db_session, init_db
from roster.models import (
    AppUser,
    FollowUp,
    FollowUpStatus,
    Patient,
    PatientFamily,
    PatientGeneralInfo,
    PatientMedicalInfo,
    PatientPDBInfo,
    Practice,
    ScraperCredential,
    ScraperUser,
    ScraperUserStatus,
    Website,
)
from roster.services.identity import get_identity_service

NOW = datetime.utcnow()


def days_ago(n: int) -> datetime:
    return NOW - timedelta(days=n)


# One patient per roster view, plus a closed-status patient for the list-all view
ROSTER = [
    {"first_name": "Nina", "last_name": "Newman", "website": Website.OTHER,
     "subscriber_id": "SUB-1001", "mco_status": None, "insert_date": days_ago(10),
     "last_service_date": days_ago(30), "next_service": NOW + timedelta(days=20)},
    {"first_name": "Victor", "last_name": "Novisit", "website": Website.OTHER,
     "insert_date": days_ago(400)},
    {"first_name": "Uma", "last_name": "Unscheduled", "website": Website.MCNA, "mco_status": True,
     "insert_date": days_ago(400), "last_service_date": days_ago(20),
     "pdb": {"tx_planned": 2, "last_service_date_pdb": days_ago(20), "total_visits": 4}},
    {"first_name": "Oscar", "last_name": "Overdue", "website": Website.OTHER,
     "insert_date": days_ago(400), "last_service_date": days_ago(200),
     "next_service": NOW + timedelta(days=3),
     "pdb": {"last_service_date_pdb": days_ago(190), "total_visits": 7}},
    {"first_name": "Ivy", "last_name": "Inactive", "website": Website.OTHER,
     "insert_date": days_ago(800), "last_service_date": days_ago(500),
     "pdb": {"last_service_date_pdb": days_ago(500), "last_prophylaxis_date_pdb": days_ago(520)}},
    {"first_name": "Ned", "last_name": "Noshow", "website": Website.DENTAQUEST, "mco_status": True,
     "insert_date": days_ago(400), "last_service_date": days_ago(90),
     "next_service": days_ago(2), "last_touch": days_ago(10),
     "pdb": {"last_service_date_pdb": days_ago(90)}},
    {"first_name": "Mia", "last_name": "Multipractice", "website": Website.DENTAQUEST,
     "multi_practice": True, "insert_date": days_ago(400), "last_service_date": days_ago(40)},
    {"first_name": "Carl", "last_name": "Closed", "website": Website.OTHER,
     "contact_status": "Moved Away", "insert_date": days_ago(400)},
]


def seed_patient(db, practice: Practice, data: dict) -> Patient:
    patient = Patient(
        practice_id=practice.id,
        website=data.get("website"),
        facility_id=random.choice(["F-100", "F-200"]) if data.get("website") == Website.MCNA else None,
        last_service_date=data.get("last_service_date"),
        next_service=data.get("next_service"),
        last_touch=data.get("last_touch"),
        insert_date=data["insert_date"],
        contact_status=data.get("contact_status"),
    )
    db.add(patient)
    db.flush()

    db.add(PatientGeneralInfo(
        patient_id=patient.id,
        first_name=data["first_name"],
        last_name=data["last_name"],
        dob=f"19{random.randint(60, 99)}-0{random.randint(1, 9)}-1{random.randint(0, 9)}",
        subscriber_id=data.get("subscriber_id"),
        mco_status=data.get("mco_status"),
        multi_practice=data.get("multi_practice", False),
    ))
    db.add(PatientMedicalInfo(
        patient_id=patient.id,
        insurance=random.choice(["Medicaid", "CHIP", "Commercial"]),
    ))
    if "pdb" in data:
        db.add(PatientPDBInfo(patient_id=patient.id, **data["pdb"]))
    return patient


def main():
    print("=" * 60)
    print("Roster Database Seeding")
    print("=" * 60)

    init_db()
    db = get_db_session()

    practice = Practice(company="Demo Dental Group", name="Demo Dental - Main St")
    user = AppUser(username="frontdesk", email="frontdesk@demo.dental", display_name="Front Desk")
    db.add_all([practice, user])
    db.flush()

    patients = [seed_patient(db, practice, data) for data in ROSTER]
    print(f"\n1. Seeded {len(patients)} patients for practice {practice.id}")

    # Two pending follow-ups on the first patient: the day-5 one is current
    db.add_all([
        FollowUp(patient_id=patients[0].id, author=user.id, assignee="frontdesk",
                 due_date=NOW + timedelta(days=10), description="Confirm insurance",
                 status=FollowUpStatus.PENDING),
        FollowUp(patient_id=patients[0].id, author=user.id, assignee="frontdesk",
                 due_date=NOW + timedelta(days=5), description="Call to schedule",
                 status=FollowUpStatus.PENDING),
    ])
    print("2. Seeded follow-ups")

    # Ned is the guarantor of Mia and Victor
    db.add_all([
        PatientFamily(patient_id=patients[6].id, guarantor_id=patients[5].id),
        PatientFamily(patient_id=patients[1].id, guarantor_id=patients[5].id),
    ])
    print("3. Seeded family")

    db.add_all([
        ScraperCredential(company="Demo Dental Group", practice_id=practice.id,
                          website=Website.MCNA, facility_id="F-100",
                          username="mcna-f100", password="changeme"),
        ScraperCredential(company="Demo Dental Group", practice_id=practice.id,
                          website=Website.DENTAQUEST, username="dq-main", password="changeme"),
        ScraperUser(username="mcna-f100", status=ScraperUserStatus.VALID, validated_at=NOW),
        ScraperUser(username="dq-main", status=ScraperUserStatus.PENDING),
    ])
    print("4. Seeded scraper credentials")

    db.commit()

    token = get_identity_service().create_access_token(user.id, user.username)

    print("\n" + "=" * 60)
    print("Seeding complete!")
    print("=" * 60)

    print("\nTo list overdue patients:")
    print(f"  curl 'http://localhost:5001/api/v1/patients/details?practice={practice.id}&page=1&perPage=10&filter=overdue'")

    print("\nTo create a follow-up:")
    print("  curl -X POST http://localhost:5001/api/v1/patients/follow-up \\")
    print(f"    -H 'Authorization: Bearer {token}' -H 'Content-Type: application/json' \\")
    print(f"    -d '{{\"patient_id\": {patients[1].id}, \"date\": \"{(NOW + timedelta(days=7)).date()}\"}}'")


if __name__ == "__main__":
    main()
