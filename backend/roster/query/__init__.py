"""
Patient roster query engine.

request parameters -> windows + view predicate + field filter -> compiled
clause -> executor (count + page). Enrichment lives in
roster.services.follow_up_enricher.
"""

from .windows import TemporalWindows, compute_windows
from .predicates import TRUE, Entity, Field, FieldCompare, And, Or, Not, Op
from .categories import (
    FilterCategory,
    CLOSED_CONTACT_STATUSES,
    parse_category,
    build_category_predicate,
)
from .field_filter import build_field_filter
from .sorting import SortDirection, SortSpec, resolve_sort
from .executor import QueryExecutor, QueryResult

__all__ = [
    "TemporalWindows",
    "compute_windows",
    "TRUE",
    "Entity",
    "Field",
    "FieldCompare",
    "And",
    "Or",
    "Not",
    "Op",
    "FilterCategory",
    "CLOSED_CONTACT_STATUSES",
    "parse_category",
    "build_category_predicate",
    "build_field_filter",
    "SortDirection",
    "SortSpec",
    "resolve_sort",
    "QueryExecutor",
    "QueryResult",
]
