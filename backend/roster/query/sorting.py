"""Sort key resolution across the patient and satellite record sets."""

import enum
from dataclasses import dataclass
from typing import Optional

from roster.query.field_filter import FIELD_ALIASES
from roster.query.predicates import Entity


class SortDirection(enum.Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"
    UNSPECIFIED = ""

    @classmethod
    def from_type_sort(cls, type_sort: Optional[str]) -> "SortDirection":
        """``typeSort`` request value: "1" ascending, "-1" descending."""
        value = str(type_sort).strip() if type_sort is not None else ""
        if value == "1":
            return cls.ASCENDING
        if value == "-1":
            return cls.DESCENDING
        return cls.UNSPECIFIED


@dataclass(frozen=True)
class SortSpec:
    entity: Entity
    field: str
    direction: SortDirection


_SORT_ENTITIES = {
    "last_name": Entity.GENERAL_INFO,
    "first_name": Entity.GENERAL_INFO,
    "dob": Entity.GENERAL_INFO,
    "insurance": Entity.MEDICAL_INFO,
    "last_service_date_pdb": Entity.PDB_INFO,
    "total_visits": Entity.PDB_INFO,
}


def resolve_sort(sort_key: Optional[str], type_sort: Optional[str] = None) -> Optional[SortSpec]:
    """
    Map a single sort key to its owning entity.

    Returns None when no key is given or the direction is unspecified; the
    store order then applies.
    """
    if not sort_key:
        return None
    direction = SortDirection.from_type_sort(type_sort)
    if direction is SortDirection.UNSPECIFIED:
        return None
    name = FIELD_ALIASES.get(sort_key, sort_key)
    return SortSpec(_SORT_ENTITIES.get(name, Entity.PATIENT), name, direction)
