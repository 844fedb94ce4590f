"""Free-text field filter composed with the roster view predicate."""

from typing import Optional

from roster.query.predicates import TRUE, Predicate, general, medical, patient, regex

# Request aliases (camelCase API names) for roster columns.
FIELD_ALIASES = {
    "fname": "first_name",
    "lname": "last_name",
    "firstName": "first_name",
    "lastName": "last_name",
    "lastServiceDatePdb": "last_service_date_pdb",
    "totalVisits": "total_visits",
    "lastServiceDate": "last_service_date",
    "nextService": "next_service",
    "lastTouch": "last_touch",
    "insertDate": "insert_date",
    "contactStatus": "contact_status",
    "facilityId": "facility_id",
}

GENERAL_INFO_FIELDS = frozenset({"first_name", "last_name", "dob"})
MEDICAL_INFO_FIELDS = frozenset({"insurance"})


def build_field_filter(field_name: Optional[str], pattern: Optional[str]) -> Predicate:
    """
    Case-sensitive regex match of ``pattern`` against one field.

    Identity fields resolve to general info, ``insurance`` to medical info,
    and anything else is taken as a patient column without validation.
    Without a field or pattern the filter is TRUE.
    """
    if not field_name or pattern is None or pattern == "":
        return TRUE

    name = FIELD_ALIASES.get(field_name, field_name)
    if name in GENERAL_INFO_FIELDS:
        return regex(general(name), pattern)
    if name in MEDICAL_INFO_FIELDS:
        return regex(medical(name), pattern)
    return regex(patient(name), pattern)
