"""
Backend services for the patient roster.

- RosterService: list/filter/sort/enrich pipeline
- FollowUpEnricher: concurrent current-follow-up lookups
- FollowUpService: follow-up creation with audit note
- SyncDispatcher: scraper job dispatch per website/facility
- PatientLookupService: eligibility, name search, family
"""

from .roster_service import RosterService
from .follow_up_enricher import FollowUpEnricher, EnrichmentCancelled
from .follow_ups import FollowUpRepository, FollowUpService
from .identity import IdentityService, get_identity_service
from .notes import NoteService
from .credentials import CredentialStore
from .job_queue import JobQueueClient
from .sync_dispatcher import SyncDispatcher, DispatchResult
from .patient_lookup import PatientLookupService

__all__ = [
    "RosterService",
    "FollowUpEnricher",
    "EnrichmentCancelled",
    "FollowUpRepository",
    "FollowUpService",
    "IdentityService",
    "get_identity_service",
    "NoteService",
    "CredentialStore",
    "JobQueueClient",
    "SyncDispatcher",
    "DispatchResult",
    "PatientLookupService",
]
