"""
SyncDispatcher: queue scraper jobs that refresh patients from payer portals.

Patients are grouped by website. mcna gets one job per distinct facility;
dentaquest gets a single job with facility ids stripped. Other websites
are not scraped. Each group checks its own credentials and is submitted
independently, so one group's failure never blocks its siblings.
"""

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from roster.config import config
from roster.errors import NotFoundError, RosterError
from roster.models import Website
from roster.services.credentials import CredentialStore
from roster.services.job_queue import JobQueueClient

JOB_PROJECT = "medical_scraper"
SCRAPE_MODE = "partial"

_FACILITY_KEYS = ("facility_id", "facilityId", "fid")


def _facility_of(patient: Dict[str, Any]) -> Optional[str]:
    for key in _FACILITY_KEYS:
        if key in patient:
            return patient[key]
    return None


@dataclass
class JobGroup:
    website: str
    facility_id: Optional[str]
    patients: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class DispatchResult:
    website: str
    facility_id: Optional[str]
    ok: bool
    job_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "website": self.website,
            "facilityId": self.facility_id,
            "ok": self.ok,
            "jobId": self.job_id,
            "error": self.error,
        }


class SyncDispatcher:
    """Groups patients and submits one scraper job per group."""

    def __init__(
        self,
        queue: JobQueueClient,
        credentials: Optional[CredentialStore] = None,
        max_workers: Optional[int] = None,
    ):
        self.queue = queue
        self.credentials = credentials or CredentialStore()
        self.max_workers = max_workers or config.DISPATCH_MAX_WORKERS
        self.logger = logging.getLogger("service.SyncDispatcher")

    @staticmethod
    def group_patients(patients: List[Dict[str, Any]]) -> List[JobGroup]:
        """mcna groups (first-seen facility order), then the dentaquest group."""
        mcna = [p for p in patients if p.get("website") == Website.MCNA]
        dentaquest = [p for p in patients if p.get("website") == Website.DENTAQUEST]

        groups = []
        for facility_id in dict.fromkeys(_facility_of(p) for p in mcna):
            groups.append(JobGroup(
                Website.MCNA,
                facility_id,
                [p for p in mcna if _facility_of(p) == facility_id],
            ))
        if dentaquest:
            stripped = [
                {k: v for k, v in p.items() if k not in _FACILITY_KEYS}
                for p in dentaquest
            ]
            groups.append(JobGroup(Website.DENTAQUEST, None, stripped))
        return groups

    def _resolve_credentials(self, group: JobGroup, company: str, practice_id: int) -> Dict[str, Any]:
        creds = self.credentials.get_credentials(
            company, practice_id, group.website, group.facility_id
        )
        if creds is None:
            target = group.website if group.facility_id is None else f"{group.website}/{group.facility_id}"
            raise NotFoundError(
                f"User for {target} not found for company {company}",
                context={"company": company, "practice_id": practice_id,
                         "website": group.website, "facility_id": group.facility_id},
            )
        if not self.credentials.is_user_valid(creds.username):
            raise NotFoundError(
                f"Please validate user credentials first for {creds.username} "
                f"from company {company}!",
                context={"company": company, "username": creds.username},
            )
        return creds.to_dict()

    def _build_job(self, group: JobGroup, creds: Dict[str, Any]) -> Dict[str, Any]:
        job_id = str(uuid.uuid1())
        return {
            "creds": {**creds, "jobid": job_id},
            "website": group.website,
            "jobid": job_id,
            "patients": group.patients,
            "project": JOB_PROJECT,
            "spider": group.website,
            "scrape_mode": SCRAPE_MODE,
        }

    def _submit(self, group: JobGroup, job: Dict[str, Any]) -> DispatchResult:
        self.queue.submit(job)
        return DispatchResult(group.website, group.facility_id, ok=True, job_id=job["jobid"])

    def _failed(self, group: JobGroup, error: RosterError) -> DispatchResult:
        self.logger.error(
            f"Sync dispatch failed for {group.website} facility={group.facility_id}: "
            f"{error.message} {error.context}"
        )
        return DispatchResult(group.website, group.facility_id, ok=False, error=error.message)

    def dispatch(
        self, patients: List[Dict[str, Any]], company: str, practice_id: int
    ) -> List[DispatchResult]:
        """
        Queue one job per group and report each group's outcome.

        Credentials are checked on the calling thread; queue submissions
        run concurrently.
        """
        groups = self.group_patients(patients)
        results: List[Optional[DispatchResult]] = [None] * len(groups)

        jobs = []
        for index, group in enumerate(groups):
            try:
                creds = self._resolve_credentials(group, company, practice_id)
            except RosterError as e:
                results[index] = self._failed(group, e)
                continue
            jobs.append((index, group, self._build_job(group, creds)))

        if jobs:
            workers = max(1, min(self.max_workers, len(jobs)))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sync-dispatch") as pool:
                futures = [(index, group, pool.submit(self._submit, group, job))
                           for index, group, job in jobs]
                for index, group, future in futures:
                    try:
                        results[index] = future.result()
                    except RosterError as e:
                        results[index] = self._failed(group, e)

        return results
