"""
RosterService: the patient list pipeline.

request parameters -> temporal windows + view predicate + field filter
-> sort spec -> executor (count + page) -> follow-up enrichment.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session as DbSession

from roster.errors import ValidationError
from roster.query.categories import build_category_predicate, parse_category
from roster.query.executor import QueryExecutor
from roster.query.field_filter import build_field_filter
from roster.query.predicates import and_
from roster.query.sorting import resolve_sort
from roster.query.windows import compute_windows
from roster.services.follow_up_enricher import FollowUpEnricher

DEFAULT_PER_PAGE = 10


def parse_int(name: str, value: Any, default: Optional[int] = None) -> int:
    """Integer request parameter; missing uses ``default`` when given."""
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"Missing required parameter: {name}")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Parameter {name} must be an integer",
            context={name: value},
        ) from None


class RosterService:
    """Lists, filters, sorts and enriches a practice's patients."""

    def __init__(
        self,
        db_session: Optional[DbSession] = None,
        executor: Optional[QueryExecutor] = None,
        enricher: Optional[FollowUpEnricher] = None,
    ):
        self.executor = executor or QueryExecutor(db_session)
        self.enricher = enricher or FollowUpEnricher()
        self.logger = logging.getLogger("service.RosterService")

    def list_patients(
        self,
        practice: Any,
        page: Any = None,
        per_page: Any = None,
        filter: Optional[str] = None,
        field_filter: Optional[str] = None,
        filter_by: Optional[str] = None,
        sort_by: Optional[str] = None,
        type_sort: Optional[str] = None,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, Any]:
        """Return ``{"patients": [...], "countPatients": n}`` for one page."""
        practice_id = parse_int("practice", practice)
        page_number = parse_int("page", page, default=1)
        page_size = parse_int("perPage", per_page, default=DEFAULT_PER_PAGE)

        windows = compute_windows(now)
        predicate = and_(
            build_category_predicate(parse_category(filter), windows),
            build_field_filter(field_filter, filter_by),
        )
        sort_spec = resolve_sort(sort_by, type_sort)

        result = self.executor.execute(
            predicate, sort_spec, practice_id, page_number, page_size
        )
        patients = self.enricher.enrich(result.records, cancel_event=cancel_event)

        self.logger.info(
            f"Listed practice={practice_id} filter={filter or '-'} page={page_number}: "
            f"{len(patients)} of {result.total_count}"
        )
        return {"patients": patients, "countPatients": result.total_count}
