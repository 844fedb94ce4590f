"""
Named roster views ("filter categories") and their business rules.

Exactly one view applies per request. With no view selected the roster
lists every patient of the practice except administratively closed
contact statuses; that exclusion is NOT applied once a view is selected.
"""

import enum
from typing import Callable, Dict, Optional

from roster.errors import ValidationError
from roster.models.patient import Website
from roster.query.predicates import (
    Predicate,
    and_,
    or_,
    not_,
    patient,
    general,
    pdb,
    eq,
    lt,
    gt,
    between,
    is_null,
    not_null,
    icontains,
    not_in,
)
from roster.query.windows import TemporalWindows


class FilterCategory(enum.Enum):
    NEW_TO_ROSTER = "new_to_roster"
    NO_VISIT = "no_visit"
    UNSCHEDULED = "unscheduled"
    OVERDUE = "overdue"
    INACTIVE = "inactive"
    NO_SHOWD = "no show'd"
    SCHEDULED_TODAY = "scheduled_today"
    EXISTING_IN_ANOTHER_PRACTICES = "existing_in_another_practices"


# Matched case-insensitively as substrings of patient.contact_status.
CLOSED_CONTACT_STATUSES = (
    "Do Not Contact",
    "Changed Dentists",
    "Moved Away",
    "Placed on Books!",
    "Already Scheduled",
)


def parse_category(value: Optional[str]) -> Optional[FilterCategory]:
    """Map the ``filter`` request value to a category; empty means none."""
    if value is None or value == "":
        return None
    try:
        return FilterCategory(value)
    except ValueError:
        raise ValidationError(
            f"Unknown filter category: {value}",
            context={"filter": value},
        ) from None


# -----------------------------------------------------------------------------
# Shared sub-predicates
# -----------------------------------------------------------------------------

def eligible_for_roster_review() -> Predicate:
    """MCO patients, or patients not sourced from dentaquest/mcna."""
    website = patient("website")
    return or_(
        eq(general("mco_status"), True),
        is_null(website),
        not_in(website, (Website.DENTAQUEST, Website.MCNA)),
    )


def closed_status_exclusion() -> Predicate:
    """Drop patients whose contact status marks them administratively closed."""
    status = patient("contact_status")
    return and_(*[
        or_(is_null(status), not_(icontains(status, closed)))
        for closed in CLOSED_CONTACT_STATUSES
    ])


def _no_service_dates_anywhere() -> Predicate:
    return and_(
        is_null(patient("last_service_date")),
        is_null(pdb("last_service_date_pdb")),
        is_null(pdb("last_prophylaxis_date_pdb")),
    )


# -----------------------------------------------------------------------------
# Category rules
# -----------------------------------------------------------------------------

def _new_to_roster(w: TemporalWindows) -> Predicate:
    mco = general("mco_status")
    return and_(
        not_null(general("subscriber_id")),
        or_(is_null(mco), eq(mco, False)),
        gt(patient("insert_date"), w.past60),
    )


def _no_visit(w: TemporalWindows) -> Predicate:
    return and_(eligible_for_roster_review(), _no_service_dates_anywhere())


def _unscheduled(w: TemporalWindows) -> Predicate:
    return and_(
        eligible_for_roster_review(),
        gt(pdb("tx_planned"), 0),
        is_null(patient("next_service")),
    )


def _overdue(w: TemporalWindows) -> Predicate:
    own = patient("last_service_date")
    third_party = pdb("last_service_date_pdb")
    return and_(
        eligible_for_roster_review(),
        or_(
            and_(gt(third_party, w.past365), lt(third_party, w.past180), lt(own, w.past180)),
            and_(gt(own, w.past365), lt(own, w.past180), lt(third_party, w.past180)),
        ),
    )


def _inactive(w: TemporalWindows) -> Predicate:
    own = patient("last_service_date")
    third_party = pdb("last_service_date_pdb")
    return and_(
        eligible_for_roster_review(),
        is_null(patient("next_service")),
        or_(lt(own, w.past365), lt(third_party, w.past365)),
        or_(not_null(pdb("last_prophylaxis_date_pdb")), not_null(third_party)),
    )


def _no_showd(w: TemporalWindows) -> Predicate:
    next_service = patient("next_service")
    return and_(
        eq(general("mco_status"), True),
        lt(next_service, w.now),
        gt(next_service, patient("last_touch")),
    )


def _scheduled_today(w: TemporalWindows) -> Predicate:
    # Bounds kept in their historical order (tomorrow first, now second).
    # SQL BETWEEN is not symmetric, so this matches no rows.
    return between(patient("next_service"), w.tomorrow, w.now)


def _existing_in_another_practices(w: TemporalWindows) -> Predicate:
    return eq(general("multi_practice"), True)


_RULES: Dict[FilterCategory, Callable[[TemporalWindows], Predicate]] = {
    FilterCategory.NEW_TO_ROSTER: _new_to_roster,
    FilterCategory.NO_VISIT: _no_visit,
    FilterCategory.UNSCHEDULED: _unscheduled,
    FilterCategory.OVERDUE: _overdue,
    FilterCategory.INACTIVE: _inactive,
    FilterCategory.NO_SHOWD: _no_showd,
    FilterCategory.SCHEDULED_TODAY: _scheduled_today,
    FilterCategory.EXISTING_IN_ANOTHER_PRACTICES: _existing_in_another_practices,
}


def build_category_predicate(
    category: Optional[FilterCategory], windows: TemporalWindows
) -> Predicate:
    """Predicate for a roster view, or the list-all rule when ``category`` is None."""
    if category is None:
        return closed_status_exclusion()
    return _RULES[category](windows)
