"""Tabular position view: filter, sort and page slicing.

The comparator mirrors how the position table has always sorted: numbers
compare numerically, everything else compares as text with missing values
treated as the empty string. That puts missing values first in ascending
order and last in descending order.
"""

import logging
import math
import unicodedata
from dataclasses import dataclass, field, fields
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional

from src.org_hierarchy.models import Position
from src.position_table.config import (
    DEFAULT_SORT_DIR,
    DEFAULT_SORT_KEY,
    LOCATION_CITY_KEY,
    PAGE_SIZE,
    SORT_DIRECTIONS,
)
from src.position_table.criteria import FilterCriteria, filter_positions

logger = logging.getLogger(__name__)

SORTABLE_KEYS = frozenset(
    [f.name for f in fields(Position) if f.name != "location"]
    + [LOCATION_CITY_KEY]
)


class InvalidSortKeyError(ValueError):
    """Raised when a sort key or direction is not recognized."""


@dataclass
class TablePage:
    """One page of rows plus pagination metadata."""

    rows: List[Position]
    total_count: int
    total_pages: int
    page: int
    page_size: int


@dataclass
class TableSummary:
    """Headline counts over the filtered rows."""

    filtered: int = 0
    occupied: int = 0
    vacant: int = 0
    total_salary: float = 0.0
    by_classification_group: Dict[str, int] = field(default_factory=dict)
    by_funding_source: Dict[str, int] = field(default_factory=dict)


# ------------------------------------------------------------------
# Comparator
# ------------------------------------------------------------------

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _collation_key(text: str) -> str:
    """Accent- and case-insensitive key ("Montréal" sorts with "Montreal")."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_values(a, b) -> int:
    """Three-way comparison of two cell values.

    Numeric when both are numbers, otherwise a locale-aware text comparison
    with ``None`` coerced to ``""``. Text that collates equal falls back to
    its raw form so the ordering stays total.
    """
    if _is_number(a) and _is_number(b):
        return _cmp(a, b)
    sa = "" if a is None else str(a)
    sb = "" if b is None else str(b)
    return _cmp(_collation_key(sa), _collation_key(sb)) or _cmp(sa, sb)


def sort_value(position: Position, sort_key: str):
    """Value of *sort_key* on *position*, resolving the derived city key."""
    if sort_key == LOCATION_CITY_KEY:
        return position.location.city if position.location else None
    return getattr(position, sort_key)


def validate_sort(sort_key: str, sort_dir: str):
    """Raise :class:`InvalidSortKeyError` for an unknown key or direction."""
    if sort_key not in SORTABLE_KEYS:
        raise InvalidSortKeyError(
            f"Invalid sort key {sort_key!r}. "
            f"Must be one of: {sorted(SORTABLE_KEYS)}"
        )
    if sort_dir not in SORT_DIRECTIONS:
        raise InvalidSortKeyError(
            f"Invalid sort direction {sort_dir!r}. Must be 'asc' or 'desc'."
        )


def sort_positions(
    positions: Iterable[Position], sort_key: str, sort_dir: str = "asc"
) -> List[Position]:
    """Stable sort by *sort_key*; ties keep their input order either way."""
    validate_sort(sort_key, sort_dir)
    sign = 1 if sort_dir == "asc" else -1

    def _compare(pa: Position, pb: Position) -> int:
        return sign * compare_values(sort_value(pa, sort_key), sort_value(pb, sort_key))

    return sorted(positions, key=cmp_to_key(_compare))


# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------

def total_pages_for(total_count: int, page_size: int = PAGE_SIZE) -> int:
    """Page count, never less than 1."""
    return max(1, math.ceil(total_count / page_size))


def table_view(
    positions: Iterable[Position],
    criteria: Optional[FilterCriteria] = None,
    sort_key: str = DEFAULT_SORT_KEY,
    sort_dir: str = DEFAULT_SORT_DIR,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> TablePage:
    """Filter, sort and slice *positions* into one page.

    Args:
        positions: The full roster.
        criteria: Filter to apply; ``None`` keeps everything.
        sort_key: A name in :data:`SORTABLE_KEYS`.
        sort_dir: ``"asc"`` or ``"desc"``.
        page: 1-based page number. Values below 1 are treated as 1; a page
            past the end returns no rows.
        page_size: Rows per page.

    Returns:
        :class:`TablePage` for the requested page.

    Raises:
        InvalidSortKeyError: If *sort_key* or *sort_dir* is not recognized.
    """
    validate_sort(sort_key, sort_dir)
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")

    filtered = filter_positions(positions, criteria or FilterCriteria())
    ordered = sort_positions(filtered, sort_key, sort_dir)

    total_count = len(ordered)
    total_pages = total_pages_for(total_count, page_size)
    page = max(1, page)
    start = (page - 1) * page_size
    rows = ordered[start:start + page_size]

    logger.debug(
        "Table page %d/%d: %d of %d rows (sort=%s %s)",
        page, total_pages, len(rows), total_count, sort_key, sort_dir,
    )
    return TablePage(
        rows=rows,
        total_count=total_count,
        total_pages=total_pages,
        page=page,
        page_size=page_size,
    )


def summarize_rows(positions: Iterable[Position]) -> TableSummary:
    """Counts and mixes shown above the table for the filtered rows."""
    summary = TableSummary()
    for p in positions:
        summary.filtered += 1
        if p.is_vacant:
            summary.vacant += 1
        else:
            summary.occupied += 1
        summary.total_salary += p.salary or 0.0
        group = p.classification_group or "Unknown"
        summary.by_classification_group[group] = (
            summary.by_classification_group.get(group, 0) + 1
        )
        source = p.funding_source or "Unknown"
        summary.by_funding_source[source] = (
            summary.by_funding_source.get(source, 0) + 1
        )

    # Largest first, ties in first-seen order
    summary.by_classification_group = dict(
        sorted(summary.by_classification_group.items(), key=lambda kv: -kv[1])
    )
    summary.by_funding_source = dict(
        sorted(summary.by_funding_source.items(), key=lambda kv: -kv[1])
    )
    return summary


# ------------------------------------------------------------------
# Stateful controller
# ------------------------------------------------------------------

class PositionTableController:
    """Holds the table's criteria, sort and page between renders.

    Any change to the criteria or the sort resets the page to 1 so a stale
    page number can never point past the end of a smaller result set.
    """

    def __init__(self, page_size: int = PAGE_SIZE):
        self.page_size = page_size
        self.criteria = FilterCriteria()
        self.sort_key = DEFAULT_SORT_KEY
        self.sort_dir = DEFAULT_SORT_DIR
        self.page = 1

    def set_criteria(self, criteria: FilterCriteria):
        self.criteria = criteria
        self.page = 1

    def update_criteria(self, **changes):
        """Replace individual criteria fields (e.g. ``query="policy"``)."""
        self.set_criteria(self.criteria.with_changes(**changes))

    def set_sort(self, sort_key: str, sort_dir: str = "asc"):
        validate_sort(sort_key, sort_dir)
        self.sort_key = sort_key
        self.sort_dir = sort_dir
        self.page = 1

    def toggle_sort(self, sort_key: str):
        """Flip direction on the current key, or sort ascending by a new one."""
        if sort_key == self.sort_key:
            self.set_sort(sort_key, "desc" if self.sort_dir == "asc" else "asc")
        else:
            self.set_sort(sort_key, "asc")

    def go_to_page(self, page: int, total_pages: int):
        self.page = min(max(1, page), max(1, total_pages))

    def next_page(self, total_pages: int):
        self.go_to_page(self.page + 1, total_pages)

    def previous_page(self):
        self.page = max(1, self.page - 1)

    def render(self, positions: Iterable[Position]) -> TablePage:
        """Produce the current page for *positions*."""
        return table_view(
            positions,
            criteria=self.criteria,
            sort_key=self.sort_key,
            sort_dir=self.sort_dir,
            page=self.page,
            page_size=self.page_size,
        )
