"""
FollowUpEnricher: attach each patient's current follow-up to a roster page.

One lookup per record runs on a bounded thread pool, each with its own
session. Results land in the slot of the record's index, so the output
order always matches the input order. A failed lookup marks only its own
record (``followUpError``) and never fails the page.
"""

import logging
import threading
from concurrent.futures import CancelledError, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy.orm import sessionmaker

from roster.config import config
from roster.db.postgres import get_session_factory
from roster.errors import PartialEnrichmentFailure
from roster.models import Patient
from roster.services.follow_ups import FollowUpRepository


class EnrichmentCancelled(CancelledError):
    """The request was cancelled while follow-up lookups were in flight."""


class FollowUpEnricher:
    """
    Fan-out/fan-in of per-patient follow-up lookups.

    Usage:
        enricher = FollowUpEnricher()
        rows = enricher.enrich(result.records)
        rows[0]["followUpDate"], rows[0]["followedUp"]
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        max_workers: Optional[int] = None,
        repository: Optional[FollowUpRepository] = None,
        serializer: Callable[[Patient], Dict[str, Any]] = lambda p: p.to_dict(),
    ):
        self._session_factory = session_factory
        self.max_workers = max_workers or config.ENRICHMENT_MAX_WORKERS
        self.repository = repository or FollowUpRepository()
        self.serializer = serializer
        self.logger = logging.getLogger("service.FollowUpEnricher")

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    def _lookup(self, patient_id: int, cancel_event: Optional[threading.Event]):
        if cancel_event is not None and cancel_event.is_set():
            return None
        with self.session_factory() as session:
            follow_up = self.repository.first_pending(session, patient_id)
            return follow_up.due_date if follow_up is not None else None

    def enrich(
        self,
        records: Sequence[Patient],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Dict[str, Any]]:
        """
        Return serialized records with ``patientId``, ``followUpDate`` and
        ``followedUp`` added.

        Waits for every lookup before returning. Setting ``cancel_event``
        stops lookups that have not started yet and raises
        EnrichmentCancelled once the in-flight ones finish.
        """
        enriched = [self.serializer(record) for record in records]
        if not records:
            return enriched

        workers = max(1, min(self.max_workers, len(records)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="follow-up") as pool:
            futures = [
                pool.submit(self._lookup, record.id, cancel_event)
                for record in records
            ]

            for index, future in enumerate(futures):
                row = enriched[index]
                row["patientId"] = records[index].id
                try:
                    due_date = future.result()
                except Exception as e:
                    failure = PartialEnrichmentFailure(records[index].id, e)
                    self.logger.error(f"{failure.message}: {e}", extra=failure.context)
                    row["followUpDate"] = ""
                    row["followedUp"] = False
                    row["followUpError"] = True
                    continue

                if due_date is None:
                    row["followUpDate"] = ""
                    row["followedUp"] = False
                else:
                    row["followUpDate"] = due_date.isoformat()
                    row["followedUp"] = True

        if cancel_event is not None and cancel_event.is_set():
            raise EnrichmentCancelled("Follow-up enrichment cancelled")
        return enriched
