"""Tests for position filter criteria and predicate composition."""

from src.org_hierarchy.models import Position
from src.position_table.criteria import (
    FilterCriteria,
    compose_predicate,
    filter_positions,
)


# ── Helpers ──────────────────────────────────────────────────────────

def _make_position(pid, **overrides):
    defaults = {
        "position_id": pid,
        "position_title": "Policy Analyst",
        "classification_group": "EC",
        "classification": "EC-05",
        "occupancy_status": "Occupied",
        "incumbent_name": "Jane Doe",
        "branch_code": "B1",
        "directorate_code": "D1",
        "division_code": "V1",
        "funding_source": "A-Base",
    }
    defaults.update(overrides)
    return Position(**defaults)


# ── FilterCriteria ───────────────────────────────────────────────────

class TestFilterCriteria:
    def test_empty_criteria(self):
        assert FilterCriteria().is_empty()
        assert FilterCriteria(branch_code="", query="  ").is_empty()
        assert not FilterCriteria(branch_code="B1").is_empty()

    def test_with_changes_returns_copy(self):
        base = FilterCriteria(branch_code="B1")
        changed = base.with_changes(query="x")
        assert base.query is None
        assert changed.branch_code == "B1"
        assert changed.query == "x"

    def test_categorical_exact_match(self):
        p = _make_position("P1")
        assert FilterCriteria(branch_code="B1").matches(p)
        assert not FilterCriteria(branch_code="B").matches(p)
        assert not FilterCriteria(occupancy_status="Vacant").matches(p)

    def test_all_fields_anded(self):
        p = _make_position("P1")
        assert FilterCriteria(
            branch_code="B1", directorate_code="D1", division_code="V1",
            classification_group="EC", funding_source="A-Base", query="jane",
        ).matches(p)
        assert not FilterCriteria(branch_code="B1", funding_source="Sunset").matches(p)

    def test_query_substring_case_insensitive(self):
        p = _make_position("P1")
        for q in ("POLICY", "jane", "ec-05", "p1"):
            assert FilterCriteria(query=q).matches(p), q
        assert not FilterCriteria(query="finance").matches(p)

    def test_query_ignores_missing_incumbent(self):
        vacant = _make_position("P2", incumbent_name=None, occupancy_status="Vacant")
        assert not FilterCriteria(query="none").matches(vacant)


# ── compose_predicate / filter_positions ─────────────────────────────

class TestComposePredicate:
    def test_empty_criteria_accepts_everything(self):
        predicate = compose_predicate(FilterCriteria())
        assert predicate(_make_position("P1"))
        assert predicate(Position(position_id="bare"))

    def test_predicate_equals_matches(self):
        criteria = FilterCriteria(branch_code="B2")
        predicate = compose_predicate(criteria)
        for p in (_make_position("P1"), _make_position("P2", branch_code="B2")):
            assert predicate(p) == criteria.matches(p)

    def test_filter_preserves_order(self):
        positions = [
            _make_position("P3", branch_code="B2"),
            _make_position("P1"),
            _make_position("P2", branch_code="B2"),
        ]
        result = filter_positions(positions, FilterCriteria(branch_code="B2"))
        assert [p.position_id for p in result] == ["P3", "P2"]
