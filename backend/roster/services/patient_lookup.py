"""
PatientLookupService: single-purpose patient reads behind the API.

- eligibility snapshots by patient
- name search within a practice
- family members (guarantor / dependents)
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session as DbSession, joinedload

from roster.db.postgres import get_db_session
from roster.models import Eligibility, Patient, PatientFamily, PatientGeneralInfo
from roster.query.compiler import compile_predicate
from roster.query.predicates import general, iregex, or_


class PatientLookupService:
    """Read-only patient lookups."""

    def __init__(self, db_session: Optional[DbSession] = None):
        self._explicit_db = db_session

    @property
    def db(self) -> DbSession:
        if self._explicit_db is not None:
            return self._explicit_db
        return get_db_session()

    def get_eligibility(self, patient_id: int) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(Eligibility)
            .filter(Eligibility.patient_id == patient_id)
            .order_by(Eligibility.checked_at.desc())
            .all()
        )
        return [row.to_dict() for row in rows]

    def search_by_name(self, practice_id: int, pattern: str) -> List[Dict[str, Any]]:
        """Case-insensitive regex over first or last name."""
        clause = compile_predicate(or_(
            iregex(general("last_name"), pattern),
            iregex(general("first_name"), pattern),
        ))
        rows = (
            self.db.query(Patient.id, PatientGeneralInfo.first_name, PatientGeneralInfo.last_name)
            .join(Patient.general_info)
            .filter(Patient.practice_id == practice_id, clause)
            .order_by(PatientGeneralInfo.last_name.asc(), Patient.id.asc())
            .all()
        )
        return [
            {"id": row.id, "firstName": row.first_name, "lastName": row.last_name}
            for row in rows
        ]

    def _family_query(self):
        return self.db.query(PatientFamily).options(
            joinedload(PatientFamily.patient).joinedload(Patient.general_info)
        )

    def get_family_members(self, patient_id: int) -> List[Dict[str, Any]]:
        """
        Family of a patient.

        A guarantor gets its dependents. A dependent gets its siblings
        followed by its own guarantor row. Anyone else gets [].
        """
        dependents = (
            self._family_query()
            .filter(PatientFamily.guarantor_id == patient_id)
            .order_by(PatientFamily.id.asc())
            .all()
        )
        if dependents:
            return [row.to_dict() for row in dependents]

        own_row = self._family_query().filter(PatientFamily.patient_id == patient_id).first()
        if own_row is None:
            return []

        siblings = (
            self._family_query()
            .filter(
                PatientFamily.guarantor_id == own_row.guarantor_id,
                PatientFamily.patient_id != patient_id,
            )
            .order_by(PatientFamily.id.asc())
            .all()
        )
        return [row.to_dict() for row in siblings] + [own_row.to_dict()]
