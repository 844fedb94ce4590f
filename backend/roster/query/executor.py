"""
Query executor: one filtered/sorted/paged fetch over the patient roster.

Count and page come from the same joined, filtered query so they never
drift: general info and medical info are required joins, PDB info is an
outer join (its absence is meaningful to the roster views).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession, contains_eager

from roster.db.postgres import get_db_session
from roster.errors import UpstreamError, ValidationError
from roster.models import Patient
from roster.query.compiler import compile_predicate, resolve_column
from roster.query.predicates import Field, Predicate
from roster.query.sorting import SortDirection, SortSpec


@dataclass
class QueryResult:
    total_count: int
    records: List[Patient]


class QueryExecutor:
    """Runs roster predicates against the record store."""

    def __init__(self, db_session: Optional[DbSession] = None):
        self._explicit_db = db_session  # Only set if explicitly passed
        self.logger = logging.getLogger("query.QueryExecutor")

    @property
    def db(self) -> DbSession:
        if self._explicit_db is not None:
            return self._explicit_db
        return get_db_session()

    @staticmethod
    def _joined(query):
        return (
            query.join(Patient.general_info)
            .join(Patient.medical_info)
            .outerjoin(Patient.pdb_info)
        )

    def _order_by(self, sort_spec: Optional[SortSpec]):
        if sort_spec is None or sort_spec.direction is SortDirection.UNSPECIFIED:
            return [Patient.id.asc()]
        column = resolve_column(Field(sort_spec.entity, sort_spec.field))
        primary = column.asc() if sort_spec.direction is SortDirection.ASCENDING else column.desc()
        # Patient id keeps paging deterministic among equal sort values.
        return [primary, Patient.id.asc()]

    def execute(
        self,
        predicate: Predicate,
        sort_spec: Optional[SortSpec],
        practice_id: int,
        page: int,
        per_page: int,
    ) -> QueryResult:
        """
        Count every matching patient of the practice and fetch one page.

        The page window is ``[(page - 1) * per_page, page * per_page)``.
        """
        if page < 1:
            raise ValidationError("page must be >= 1", context={"page": page})
        if per_page < 1:
            raise ValidationError("perPage must be >= 1", context={"per_page": per_page})

        clause = compile_predicate(predicate)
        order_by = self._order_by(sort_spec)
        scope = Patient.practice_id == practice_id
        db = self.db

        try:
            total_count = (
                self._joined(db.query(func.count(Patient.id)).select_from(Patient))
                .filter(scope, clause)
                .scalar()
            )
            records = (
                self._joined(db.query(Patient))
                .options(
                    contains_eager(Patient.general_info),
                    contains_eager(Patient.medical_info),
                    contains_eager(Patient.pdb_info),
                )
                .filter(scope, clause)
                .order_by(*order_by)
                .offset((page - 1) * per_page)
                .limit(per_page)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(
                f"Roster query failed for practice={practice_id} page={page}: {e}"
            )
            raise UpstreamError(
                "Failed to load patients",
                context={"practice_id": practice_id, "page": page},
            ) from e

        self.logger.debug(
            f"Roster query practice={practice_id} page={page} "
            f"returned {len(records)}/{total_count}"
        )
        return QueryResult(total_count=total_count or 0, records=records)
