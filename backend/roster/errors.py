"""
Error taxonomy for the roster backend.

Every error carries the HTTP status it surfaces with and renders to the
structured body returned by the API error handlers.
"""

from typing import Any, Dict, Optional


class RosterError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400
    error_type = "roster_error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        # Server-side context for logging only; never sent to the client.
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.error_type, "message": self.message}


class ValidationError(RosterError):
    """Malformed or missing request parameter."""

    status_code = 400
    error_type = "validation_error"


class NotFoundError(RosterError):
    """No matching credential, user or identity."""

    status_code = 404
    error_type = "not_found"


class UpstreamError(RosterError):
    """Record store or external service failure."""

    status_code = 400
    error_type = "upstream_error"


class PartialEnrichmentFailure(RosterError):
    """
    One record's follow-up lookup failed while the others succeeded.

    Never raised to the client: the enricher records it on the affected
    row (``followUpError``) and keeps the page.
    """

    error_type = "partial_enrichment_failure"

    def __init__(self, patient_id: int, cause: BaseException):
        super().__init__(
            f"Follow-up lookup failed for patient {patient_id}",
            context={"patient_id": patient_id, "cause": repr(cause)},
        )
        self.patient_id = patient_id
        self.cause = cause
