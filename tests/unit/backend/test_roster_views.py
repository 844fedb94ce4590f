"""
Unit tests for the roster views (filter categories).

Covers:
- Temporal window derivation
- Category parsing
- Each view's membership over a roster with one patient per view
- Each branch of the multi-branch view rules
- The list-all closed-status exclusion and its asymmetry with views
- The inverted scheduled_today window
"""

from datetime import datetime, timedelta

import pytest

from roster.errors import ValidationError
from roster.models import Practice, Website
from roster.query import (
    CLOSED_CONTACT_STATUSES,
    FieldCompare,
    FilterCategory,
    Op,
    QueryExecutor,
    build_category_predicate,
    compute_windows,
    parse_category,
)
from roster.query.categories import _RULES


def _view_ids(db_session, practice_id, category, now):
    predicate = build_category_predicate(category, compute_windows(now))
    result = QueryExecutor(db_session).execute(
        predicate, None, practice_id, page=1, per_page=100
    )
    assert result.total_count == len(result.records)
    return {record.id for record in result.records}


def _ids_for(db_session, roster, category, now, practice_key="_practice"):
    return _view_ids(db_session, roster[practice_key].id, category, now)


def _names(roster, *keys):
    return {roster[key].id for key in keys}


# =============================================================================
# Temporal windows
# =============================================================================

class TestComputeWindows:

    def test_cutoffs_derive_from_now(self, now):
        windows = compute_windows(now)

        assert windows.now == now
        assert windows.past60 == now - timedelta(days=60)
        assert windows.past180 == now - timedelta(days=180)
        assert windows.past365 == now - timedelta(days=365)
        assert windows.tomorrow == now + timedelta(days=1)

    def test_clock_used_when_now_missing(self):
        fixed = datetime(2023, 6, 1, 8, 30)
        windows = compute_windows(clock=lambda: fixed)

        assert windows.now == fixed
        assert windows.past60 == datetime(2023, 4, 2, 8, 30)

    def test_windows_are_ordered(self, now):
        w = compute_windows(now)
        assert w.past365 < w.past180 < w.past60 < w.now < w.tomorrow


# =============================================================================
# Category parsing
# =============================================================================

class TestParseCategory:

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_means_no_view(self, value):
        assert parse_category(value) is None

    def test_wire_values(self):
        assert parse_category("no show'd") is FilterCategory.NO_SHOWD
        assert parse_category("existing_in_another_practices") is (
            FilterCategory.EXISTING_IN_ANOTHER_PRACTICES
        )

    def test_unknown_value_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_category("everyone")
        assert "everyone" in exc_info.value.message

    def test_every_category_has_a_rule(self):
        assert set(_RULES) == set(FilterCategory)


# =============================================================================
# View membership
# =============================================================================

class TestViewMembership:

    @pytest.mark.parametrize("category,expected", [
        (FilterCategory.NEW_TO_ROSTER, ("new",)),
        (FilterCategory.NO_VISIT, ("novisit", "closed")),
        (FilterCategory.UNSCHEDULED, ("unscheduled",)),
        (FilterCategory.OVERDUE, ("overdue",)),
        (FilterCategory.INACTIVE, ("inactive",)),
        (FilterCategory.NO_SHOWD, ("noshow",)),
        (FilterCategory.EXISTING_IN_ANOTHER_PRACTICES, ("multi",)),
    ])
    def test_view_selects_expected_patients(self, db_session, roster, now, category, expected):
        assert _ids_for(db_session, roster, category, now) == _names(roster, *expected)

    def test_views_are_mutually_exclusive_on_roster(self, db_session, roster, now):
        seen = {}
        for category in FilterCategory:
            for patient_id in _ids_for(db_session, roster, category, now):
                seen.setdefault(patient_id, []).append(category)

        assert all(len(categories) == 1 for categories in seen.values()), seen

    def test_inactive_requires_third_party_activity(self, db_session, roster, now):
        ids = _ids_for(db_session, roster, FilterCategory.INACTIVE, now)

        assert roster["inactive"].id in ids
        assert roster["inactive_no_pdb"].id not in ids

    def test_no_visit_skips_non_mco_portal_patients(self, db_session, roster, now):
        ids = _ids_for(db_session, roster, FilterCategory.NO_VISIT, now)

        assert roster["dq_not_mco"].id not in ids

    def test_views_scoped_to_practice(self, db_session, roster, now):
        ids = _ids_for(
            db_session, roster, FilterCategory.EXISTING_IN_ANOTHER_PRACTICES, now,
            practice_key="_other_practice",
        )
        assert ids == _names(roster, "other_practice")

    def test_new_to_roster_moves_with_now(self, db_session, roster, now):
        later = now + timedelta(days=90)
        assert _ids_for(db_session, roster, FilterCategory.NEW_TO_ROSTER, later) == set()


# =============================================================================
# Rule branches
# =============================================================================

class TestViewBranches:
    """Each disjunct of a view rule, isolated on its own practice."""

    @pytest.fixture
    def practice(self, db_session):
        practice = Practice(company="Acme Dental", name="Acme Branch Rd")
        db_session.add(practice)
        db_session.flush()
        return practice

    @pytest.fixture
    def ago(self, now):
        return lambda days: now - timedelta(days=days)

    def _view(self, db_session, practice, category, now):
        db_session.commit()
        return _view_ids(db_session, practice.id, category, now)

    def test_overdue_branches(self, db_session, practice, patient_factory, ago, now):
        upcoming = now + timedelta(days=5)
        third_party_in_window = patient_factory(
            practice, "Paula", "Pdb", last_service_date=ago(400), next_service=upcoming,
            pdb={"last_service_date_pdb": ago(200)},
        )
        own_in_window = patient_factory(
            practice, "Owen", "Own", last_service_date=ago(200), next_service=upcoming,
            pdb={"last_service_date_pdb": ago(400)},
        )
        patient_factory(
            practice, "Rita", "Recent", last_service_date=ago(200), next_service=upcoming,
            pdb={"last_service_date_pdb": ago(100)},
        )
        patient_factory(
            practice, "Nora", "Nopdb", last_service_date=ago(200), next_service=upcoming,
        )
        patient_factory(
            practice, "Dirk", "Dq", website=Website.DENTAQUEST, mco_status=False,
            last_service_date=ago(200), next_service=upcoming,
            pdb={"last_service_date_pdb": ago(200)},
        )

        assert self._view(db_session, practice, FilterCategory.OVERDUE, now) == {
            third_party_in_window.id, own_in_window.id,
        }

    def test_new_to_roster_mco_status(self, db_session, practice, patient_factory, ago, now):
        mco_false = patient_factory(
            practice, "Fay", "False", subscriber_id="SUB-F", mco_status=False, insert_date=ago(5),
        )
        mco_null = patient_factory(
            practice, "Nell", "Null", subscriber_id="SUB-N", insert_date=ago(5),
        )
        patient_factory(
            practice, "Tom", "True", subscriber_id="SUB-T", mco_status=True, insert_date=ago(5),
        )
        patient_factory(practice, "Sam", "Nosub", mco_status=False, insert_date=ago(5))

        assert self._view(db_session, practice, FilterCategory.NEW_TO_ROSTER, now) == {
            mco_false.id, mco_null.id,
        }

    def test_unscheduled_non_mco_branch(self, db_session, practice, patient_factory, ago, now):
        other_site = patient_factory(
            practice, "Otto", "Other", pdb={"tx_planned": 1}, insert_date=ago(400),
        )
        no_site = patient_factory(
            practice, "Nia", "Nosite", website=None, pdb={"tx_planned": 3}, insert_date=ago(400),
        )
        patient_factory(
            practice, "Quinn", "Dq", website=Website.DENTAQUEST, mco_status=False,
            pdb={"tx_planned": 1}, insert_date=ago(400),
        )
        patient_factory(
            practice, "Zed", "Zero", pdb={"tx_planned": 0}, insert_date=ago(400),
        )
        patient_factory(
            practice, "Bea", "Booked", pdb={"tx_planned": 2}, insert_date=ago(400),
            next_service=now + timedelta(days=7),
        )

        assert self._view(db_session, practice, FilterCategory.UNSCHEDULED, now) == {
            other_site.id, no_site.id,
        }

    def test_no_showd_requires_visit_after_last_touch(self, db_session, practice, patient_factory, ago, now):
        missed = patient_factory(
            practice, "Max", "Missed", mco_status=True,
            next_service=ago(3), last_touch=ago(20),
        )
        patient_factory(
            practice, "Tia", "Touched", mco_status=True,
            next_service=ago(5), last_touch=ago(2),
        )
        patient_factory(
            practice, "Fred", "Future", mco_status=True,
            next_service=now + timedelta(days=2), last_touch=ago(10),
        )
        patient_factory(
            practice, "Noah", "Nonmco", next_service=ago(3), last_touch=ago(20),
        )

        assert self._view(db_session, practice, FilterCategory.NO_SHOWD, now) == {missed.id}


# =============================================================================
# List-all (no view) and closed contact statuses
# =============================================================================

class TestListAll:

    def test_excludes_closed_statuses_only(self, db_session, roster, now):
        ids = _ids_for(db_session, roster, None, now)

        expected = {
            p.id for key, p in roster.items()
            if not key.startswith("_") and key not in ("closed", "other_practice")
        }
        assert ids == expected

    def test_closed_status_match_is_case_insensitive_substring(self, db_session, roster, now):
        assert "moved away" in roster["closed"].contact_status.lower()
        assert "Moved Away" in CLOSED_CONTACT_STATUSES
        assert roster["closed"].id not in _ids_for(db_session, roster, None, now)

    def test_selected_view_keeps_closed_statuses(self, db_session, roster, now):
        assert roster["closed"].id in _ids_for(db_session, roster, FilterCategory.NO_VISIT, now)


# =============================================================================
# scheduled_today
# =============================================================================

class TestScheduledToday:

    def test_bounds_are_tomorrow_then_now(self, now):
        predicate = build_category_predicate(
            FilterCategory.SCHEDULED_TODAY, compute_windows(now)
        )

        assert isinstance(predicate, FieldCompare)
        assert predicate.op is Op.BETWEEN
        assert predicate.field.name == "next_service"
        assert predicate.value == (now + timedelta(days=1), now)

    def test_matches_nothing_even_with_visit_today(self, db_session, roster, now):
        assert roster["scheduled"].next_service.date() == now.date()
        assert _ids_for(db_session, roster, FilterCategory.SCHEDULED_TODAY, now) == set()
