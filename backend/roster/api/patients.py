"""
Patient roster API endpoints.

Provides endpoints for:
- Eligibility snapshots by patient
- The paginated roster list (views, field filter, sort, follow-ups)
- Creating follow-ups
- Name search within a practice
- Dispatching portal sync jobs
- Family lookup
"""

import logging
import threading
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request

from roster.config import config
from roster.errors import UpstreamError, ValidationError
from roster.services.follow_up_enricher import EnrichmentCancelled
from roster.services.follow_ups import FollowUpService
from roster.services.patient_lookup import PatientLookupService
from roster.services.roster_service import RosterService, parse_int
from roster.services.sync_dispatcher import SyncDispatcher

bp = Blueprint("patients", __name__, url_prefix="/api/v1/patients")
logger = logging.getLogger("api.patients")


def _parse_due_date(value) -> datetime:
    if not value:
        raise ValidationError("Missing required field: date")
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        raise ValidationError("date must be an ISO-8601 date", context={"date": value}) from None


# =============================================================================
# GET Endpoints
# =============================================================================

@bp.route("/eligibility", methods=["GET"])
def get_eligibility():
    """Eligibility snapshots for ``?id=<patient_id>``."""
    patient_id = parse_int("id", request.args.get("id"))
    return jsonify({"data": PatientLookupService().get_eligibility(patient_id)})


@bp.route("/details", methods=["GET"])
def get_patient_details():
    """
    Paginated roster list.

    Query: practice, page, perPage, filter, fieldFilter, filterBy, sortBy, typeSort.
    """
    args = request.args

    # Past the deadline, lookups not yet started are skipped.
    cancel = threading.Event()
    deadline = threading.Timer(config.ENRICHMENT_DEADLINE, cancel.set)
    deadline.daemon = True
    deadline.start()
    try:
        result = RosterService().list_patients(
            practice=args.get("practice"),
            page=args.get("page"),
            per_page=args.get("perPage"),
            filter=args.get("filter"),
            field_filter=args.get("fieldFilter"),
            filter_by=args.get("filterBy"),
            sort_by=args.get("sortBy"),
            type_sort=args.get("typeSort"),
            cancel_event=cancel,
        )
    except EnrichmentCancelled as e:
        raise UpstreamError(
            "Follow-up lookups exceeded the request deadline",
            context={"deadline": config.ENRICHMENT_DEADLINE, "practice": args.get("practice")},
        ) from e
    finally:
        deadline.cancel()
    return jsonify(result)


@bp.route("/practice/<practice_id>/search/<path:name_filter>", methods=["GET"])
def search_patients_by_name(practice_id: str, name_filter: str):
    """Patients of a practice whose first or last name matches."""
    patients = PatientLookupService().search_by_name(
        parse_int("practice_id", practice_id), name_filter
    )
    return jsonify({"patients": patients})


@bp.route("/<patient_id>/family", methods=["GET"])
def get_family_members(patient_id: str):
    members = PatientLookupService().get_family_members(parse_int("id", patient_id))
    return jsonify({"familyMembers": members})


# =============================================================================
# POST Endpoints
# =============================================================================

@bp.route("/follow-up", methods=["POST"])
def follow_up_patient():
    """Create a Pending follow-up authored by the Authorization token's user."""
    data = request.get_json(silent=True) or {}
    FollowUpService().create_follow_up(
        patient_id=parse_int("patient_id", data.get("patient_id")),
        due_date=_parse_due_date(data.get("date")),
        assignee=data.get("assignee"),
        description=data.get("description"),
        author_token=request.headers.get("Authorization", ""),
    )
    return jsonify({"message": "Patient followed successful!"})


@bp.route("/sync", methods=["POST"])
def sync_patient_files():
    """Queue scraper jobs; each website/facility group reports separately."""
    data = request.get_json(silent=True) or {}
    patients = data.get("patients")
    if not isinstance(patients, list):
        raise ValidationError("patients must be a list")
    company = data.get("company")
    if not company:
        raise ValidationError("Missing required field: company")

    dispatcher = SyncDispatcher(current_app.extensions["job_queue"])
    results = dispatcher.dispatch(patients, company, parse_int("practice", data.get("practice")))

    ok = all(r.ok for r in results)
    body = {
        "ok": ok,
        "message": "Sync patient files successful!" if ok else "Some sync jobs failed",
        "jobs": [r.to_dict() for r in results],
    }
    return jsonify(body), (200 if ok else 400)
