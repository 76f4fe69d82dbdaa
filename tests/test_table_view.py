"""Tests for the tabular position view and its controller."""

import pytest

from src.org_hierarchy.models import Location, Position
from src.position_table.criteria import FilterCriteria
from src.position_table.table_view import (
    InvalidSortKeyError,
    PositionTableController,
    compare_values,
    sort_positions,
    summarize_rows,
    table_view,
    total_pages_for,
)


# ── Helpers ──────────────────────────────────────────────────────────

def _make_position(pid, **overrides):
    defaults = {"position_id": pid, "salary": 0.0}
    defaults.update(overrides)
    return Position(**defaults)


def _make_roster(count):
    return [_make_position(f"P{i:03d}", salary=float(i)) for i in range(count)]


def _ids(rows):
    return [p.position_id for p in rows]


# ── Comparator ───────────────────────────────────────────────────────

class TestCompareValues:
    def test_numbers_compare_numerically(self):
        assert compare_values(9, 10) < 0
        assert compare_values(10.5, 10) > 0
        assert compare_values(3, 3.0) == 0

    def test_strings_not_lexicographic_numbers(self):
        assert compare_values("9", "10") > 0

    def test_none_is_empty_string(self):
        assert compare_values(None, "a") < 0
        assert compare_values(None, 10) < 0
        assert compare_values(None, None) == 0

    def test_case_and_accent_insensitive(self):
        assert compare_values("apple", "Banana") < 0
        assert compare_values("Montréal", "Montreal") != 0
        assert compare_values("Montréal", "Monaco") > 0
        assert compare_values("Écoles", "Fraser") < 0


# ── Sorting ──────────────────────────────────────────────────────────

class TestSortPositions:
    def test_null_salary_first_ascending(self):
        rows = [
            _make_position("A", salary=50.0),
            _make_position("B", salary=None),
            _make_position("C", salary=10.0),
        ]
        assert [p.salary for p in sort_positions(rows, "salary", "asc")] == [None, 10.0, 50.0]

    def test_null_salary_last_descending(self):
        rows = [
            _make_position("A", salary=50.0),
            _make_position("B", salary=None),
            _make_position("C", salary=10.0),
        ]
        assert [p.salary for p in sort_positions(rows, "salary", "desc")] == [50.0, 10.0, None]

    def test_ties_stable_both_directions(self):
        rows = [
            _make_position("X", salary=1.0),
            _make_position("Y", salary=1.0),
            _make_position("Z", salary=0.5),
        ]
        assert _ids(sort_positions(rows, "salary", "asc")) == ["Z", "X", "Y"]
        assert _ids(sort_positions(rows, "salary", "desc")) == ["X", "Y", "Z"]

    def test_sort_by_location_city(self):
        rows = [
            _make_position("A", location=Location(city="Toronto")),
            _make_position("B", location=None),
            _make_position("C", location=Location(city="Halifax")),
        ]
        assert _ids(sort_positions(rows, "location.city")) == ["B", "C", "A"]

    def test_invalid_key_raises(self):
        with pytest.raises(InvalidSortKeyError):
            sort_positions([], "not_a_field")

    def test_invalid_direction_raises(self):
        with pytest.raises(InvalidSortKeyError):
            sort_positions([], "salary", "sideways")

    def test_invalid_key_is_value_error(self):
        with pytest.raises(ValueError):
            sort_positions([], "location")


# ── table_view ───────────────────────────────────────────────────────

class TestTableView:
    def test_pagination_bounds(self):
        roster = _make_roster(120)
        first = table_view(roster, sort_key="salary", page=1)
        last = table_view(roster, sort_key="salary", page=3)
        beyond = table_view(roster, sort_key="salary", page=4)

        assert first.total_pages == 3
        assert first.total_count == 120
        assert len(first.rows) == 50
        assert len(last.rows) == 20
        assert beyond.rows == []
        assert beyond.total_pages == 3

    def test_empty_roster_has_one_page(self):
        page = table_view([])
        assert page.rows == []
        assert page.total_count == 0
        assert page.total_pages == 1

    def test_page_below_one_clamped(self):
        page = table_view(_make_roster(5), page=0)
        assert page.page == 1
        assert len(page.rows) == 5

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            table_view(_make_roster(5), page_size=0)

    def test_invalid_sort_rejected_before_work(self):
        with pytest.raises(InvalidSortKeyError):
            table_view(_make_roster(5), sort_key="bogus")

    def test_filter_then_sort(self):
        roster = [
            _make_position("A", branch_code="B1", salary=3.0),
            _make_position("B", branch_code="B2", salary=1.0),
            _make_position("C", branch_code="B1", salary=2.0),
        ]
        page = table_view(roster, FilterCriteria(branch_code="B1"),
                          sort_key="salary", sort_dir="desc")
        assert _ids(page.rows) == ["A", "C"]
        assert page.total_count == 2

    def test_total_pages_for(self):
        assert total_pages_for(0, 50) == 1
        assert total_pages_for(50, 50) == 1
        assert total_pages_for(51, 50) == 2


class TestSummarizeRows:
    def test_counts_and_mixes(self):
        rows = [
            _make_position("A", salary=10.0, classification_group="EC"),
            _make_position("B", salary=5.0, occupancy_status="Vacant",
                           classification_group="EC", funding_source="Sunset"),
            _make_position("C", salary=None, classification_group=None),
        ]
        summary = summarize_rows(rows)
        assert summary.filtered == 3
        assert summary.occupied == 2
        assert summary.vacant == 1
        assert summary.total_salary == 15.0
        assert summary.by_classification_group == {"EC": 2, "Unknown": 1}
        assert summary.by_funding_source == {"A-Base": 2, "Sunset": 1}

    def test_mixes_sorted_largest_first(self):
        rows = [
            _make_position("A", funding_source="A-Base", classification_group="AS"),
            _make_position("B", funding_source="Sunset", classification_group="EC"),
            _make_position("C", funding_source="Sunset", classification_group="EC"),
            _make_position("D", funding_source="Program", classification_group="EC"),
        ]
        summary = summarize_rows(rows)
        assert list(summary.by_funding_source.items()) == [
            ("Sunset", 2), ("A-Base", 1), ("Program", 1),
        ]
        assert list(summary.by_classification_group.items()) == [("EC", 3), ("AS", 1)]

    def test_empty(self):
        summary = summarize_rows([])
        assert summary.filtered == 0
        assert summary.by_classification_group == {}


# ── Controller ───────────────────────────────────────────────────────

class TestPositionTableController:
    def test_defaults(self):
        ctl = PositionTableController()
        assert ctl.page == 1
        assert ctl.sort_key == "position_id"
        assert ctl.sort_dir == "asc"
        assert ctl.criteria.is_empty()

    def test_criteria_change_resets_page(self):
        ctl = PositionTableController()
        ctl.go_to_page(3, total_pages=3)
        ctl.update_criteria(query="P01")
        assert ctl.page == 1
        assert ctl.criteria.query == "P01"

    def test_sort_change_resets_page(self):
        ctl = PositionTableController()
        ctl.go_to_page(2, total_pages=3)
        ctl.set_sort("salary", "desc")
        assert ctl.page == 1

    def test_toggle_sort(self):
        ctl = PositionTableController()
        ctl.toggle_sort("position_id")
        assert ctl.sort_dir == "desc"
        ctl.toggle_sort("position_id")
        assert ctl.sort_dir == "asc"
        ctl.toggle_sort("salary")
        assert (ctl.sort_key, ctl.sort_dir) == ("salary", "asc")

    def test_invalid_sort_keeps_state(self):
        ctl = PositionTableController()
        with pytest.raises(InvalidSortKeyError):
            ctl.set_sort("bogus")
        assert ctl.sort_key == "position_id"

    def test_paging_clamped(self):
        ctl = PositionTableController()
        ctl.next_page(total_pages=2)
        ctl.next_page(total_pages=2)
        assert ctl.page == 2
        ctl.previous_page()
        ctl.previous_page()
        assert ctl.page == 1

    def test_render(self):
        ctl = PositionTableController(page_size=10)
        ctl.set_sort("salary", "desc")
        page = ctl.render(_make_roster(25))
        assert page.total_pages == 3
        assert page.rows[0].position_id == "P024"
