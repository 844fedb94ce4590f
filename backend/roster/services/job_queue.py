"""
Job queue gateway client.

Posts scraper job descriptions to the queue's HTTP intake. One client is
built at startup (see server.create_app) and handed to the dispatcher.
"""

import logging
from typing import Any, Dict, Optional

import requests

from roster.config import config
from roster.errors import UpstreamError


class JobQueueClient:
    """HTTP client for the scraper request queue."""

    def __init__(
        self,
        url: Optional[str] = None,
        code: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or config.JOB_QUEUE_URL
        self.code = code if code is not None else config.JOB_QUEUE_CODE
        self.timeout = timeout or config.JOB_QUEUE_TIMEOUT
        self.session = session or requests.Session()
        self.logger = logging.getLogger("service.JobQueueClient")

    def submit(self, job: Dict[str, Any]) -> None:
        """Enqueue one job. The response body is not needed."""
        params = {"code": self.code} if self.code else None
        try:
            response = self.session.post(
                self.url, json=job, params=params, timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise UpstreamError(
                "Job queue request timed out", context={"jobid": job.get("jobid")}
            ) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamError(
                "Failed to reach job queue", context={"jobid": job.get("jobid")}
            ) from e

        if not response.ok:
            raise UpstreamError(
                f"Job queue rejected job: {response.status_code}",
                context={"jobid": job.get("jobid"), "body": response.text[:500]},
            )
        self.logger.info(f"Queued {job.get('website')} job {job.get('jobid')}")

    def close(self) -> None:
        self.session.close()
