"""Tests for the workforce summaries."""

from datetime import date

import pytest

from src.org_hierarchy.models import Location, Position
from src.roster_pipeline.summaries import WorkforceSummarizer


# ── Helpers ──────────────────────────────────────────────────────────

def _make_position(pid, **overrides):
    defaults = {
        "position_id": pid,
        "occupancy_status": "Occupied",
        "tenure_type": "Indeterminate",
        "classification_group": "EC",
        "funding_source": "A-Base",
        "salary": 100.0,
    }
    defaults.update(overrides)
    return Position(**defaults)


def _make_roster():
    return [
        _make_position("P1", is_critical=True, location=Location(region="NCR"),
                       language_profile="BBB/BBB"),
        _make_position("P2", occupancy_status="Occupied-Acting", tenure_type="Term",
                       end_date=date(2026, 11, 1), location=Location(region="NCR")),
        _make_position("P3", occupancy_status="Vacant", tenure_type=None,
                       is_critical=True, salary=80.0),
        _make_position("P4", funding_source="Sunset", tenure_type="Term",
                       funding_sunset_date=date(2027, 3, 31),
                       end_date=date(2026, 10, 19), is_double_banked=True,
                       classification_group="AS"),
        _make_position("P5", funding_source="Sunset", end_date=date(2028, 1, 1)),
    ]


REFERENCE = date(2026, 10, 19)


# ── headline ─────────────────────────────────────────────────────────

class TestHeadline:
    def test_counts(self):
        h = WorkforceSummarizer(_make_roster()).headline()
        assert h.total == 5
        assert h.occupied == 4
        assert h.acting == 1
        assert h.vacant == 1
        assert h.vacancy_rate == pytest.approx(20.0)
        assert h.critical_total == 2
        assert h.critical_vacant == 1
        assert h.sunset_count == 2
        assert h.double_banked == 1
        assert h.total_salary == pytest.approx(480.0)

    def test_empty_roster(self):
        h = WorkforceSummarizer([]).headline()
        assert h.total == 0
        assert h.vacancy_rate == 0.0
        assert h.total_salary == 0.0


# ── counts_by ────────────────────────────────────────────────────────

class TestCountsBy:
    def test_tenure_counts_occupied_only(self):
        counts = WorkforceSummarizer(_make_roster()).counts_by("tenure_type")
        assert counts == {"Indeterminate": 2, "Term": 2}

    def test_region_unknown_for_missing(self):
        counts = WorkforceSummarizer(_make_roster()).counts_by("location.region")
        assert counts == {"Unknown": 3, "NCR": 2}
        assert list(counts) == ["Unknown", "NCR"]

    def test_classification_group_descending(self):
        counts = WorkforceSummarizer(_make_roster()).counts_by("classification_group")
        assert list(counts.items()) == [("EC", 4), ("AS", 1)]

    def test_funding_source(self):
        counts = WorkforceSummarizer(_make_roster()).counts_by("funding_source")
        assert counts == {"A-Base": 3, "Sunset": 2}

    def test_language_profile(self):
        counts = WorkforceSummarizer(_make_roster()).counts_by("language_profile")
        assert counts == {"Unknown": 4, "BBB/BBB": 1}

    def test_unsupported_field(self):
        with pytest.raises(ValueError, match="Unsupported breakdown"):
            WorkforceSummarizer(_make_roster()).counts_by("salary")

    def test_empty_roster(self):
        assert WorkforceSummarizer([]).counts_by("funding_source") == {}


# ── planning lists ───────────────────────────────────────────────────

class TestEndingWithin:
    def test_window_inclusive_and_sorted(self):
        ending = WorkforceSummarizer(_make_roster()).ending_within(365, REFERENCE)
        assert [p.position_id for p in ending] == ["P4", "P2"]

    def test_longer_window(self):
        ending = WorkforceSummarizer(_make_roster()).ending_within(1000, REFERENCE)
        assert [p.position_id for p in ending] == ["P4", "P2", "P5"]

    def test_limit(self):
        ending = WorkforceSummarizer(_make_roster()).ending_within(1000, REFERENCE, limit=1)
        assert [p.position_id for p in ending] == ["P4"]

    def test_past_end_dates_excluded(self):
        ending = WorkforceSummarizer(_make_roster()).ending_within(30, date(2026, 10, 20))
        assert [p.position_id for p in ending] == ["P2"]

    def test_reference_date_required(self):
        with pytest.raises(ValueError):
            WorkforceSummarizer(_make_roster()).ending_within(30)

    def test_returns_original_objects(self):
        roster = _make_roster()
        ending = WorkforceSummarizer(roster).ending_within(365, REFERENCE)
        assert ending[0] is roster[3]

    def test_empty_roster(self):
        assert WorkforceSummarizer([]).ending_within(30, REFERENCE) == []


class TestSunsetPositions:
    def test_missing_dates_first(self):
        sunset = WorkforceSummarizer(_make_roster()).sunset_positions()
        assert [p.position_id for p in sunset] == ["P5", "P4"]

    def test_limit(self):
        sunset = WorkforceSummarizer(_make_roster()).sunset_positions(limit=1)
        assert [p.position_id for p in sunset] == ["P5"]


# ── employment equity ────────────────────────────────────────────────

def _make_equity_roster():
    return [
        _make_position("E1", branch_code="B1", ee_gender="Woman", ee_visible_minority=True),
        _make_position("E2", branch_code="B1", ee_gender="Woman"),
        _make_position("E3", branch_code="B1", ee_gender="Man"),
        _make_position("E4", branch_code="B2", ee_disability=True),
        _make_position("E5", branch_code="B2", occupancy_status="Vacant",
                       ee_gender="Woman", ee_indigenous=True),
    ]


class TestEquity:
    def test_groups_over_occupied_only(self):
        groups = {g.group: g for g in WorkforceSummarizer(_make_equity_roster()).equity()}
        assert list(groups) == ["women", "visible_minority", "indigenous", "disability"]
        assert groups["women"].count == 2
        assert groups["women"].total == 4
        assert groups["women"].pct == pytest.approx(50.0)
        assert groups["indigenous"].count == 0

    def test_targets(self):
        groups = {g.group: g for g in WorkforceSummarizer(_make_equity_roster()).equity()}
        assert groups["women"].target == 48.0
        assert groups["women"].meets_target
        assert groups["visible_minority"].meets_target
        assert not groups["indigenous"].meets_target
        assert groups["disability"].meets_target

    def test_target_met_exactly(self):
        roster = [
            _make_position(f"W{i}", ee_gender="Woman" if i < 12 else "Man")
            for i in range(25)
        ]
        women = WorkforceSummarizer(roster).equity()[0]
        assert women.pct == pytest.approx(48.0)
        assert women.meets_target

    def test_empty_roster(self):
        groups = WorkforceSummarizer([]).equity()
        assert all(g.total == 0 and g.pct == 0.0 for g in groups)
        assert not any(g.meets_target for g in groups)

    def test_by_branch_rounded(self):
        by_branch = WorkforceSummarizer(_make_equity_roster()).equity_by_branch()
        assert list(by_branch) == ["B1", "B2"]
        assert by_branch["B1"]["total"] == 3
        assert by_branch["B1"]["women"] == 66.7
        assert by_branch["B1"]["visible_minority"] == 33.3
        assert by_branch["B2"] == {
            "total": 1, "women": 0.0, "visible_minority": 0.0,
            "indigenous": 0.0, "disability": 100.0,
        }

    def test_gender_distribution(self):
        genders = WorkforceSummarizer(_make_equity_roster()).gender_distribution()
        assert list(genders.items()) == [
            ("Woman", 2), ("Man", 1), ("Prefer not to say", 1),
        ]
