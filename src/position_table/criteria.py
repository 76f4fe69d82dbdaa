"""Filter criteria for positions and the predicate built from them."""

from dataclasses import dataclass, fields, replace
from typing import Callable, Iterable, List, Optional

from src.org_hierarchy.models import Position
from src.position_table.config import SEARCH_FIELDS

# Criteria fields matched by exact equality against the Position field of
# the same name
_CATEGORICAL_FIELDS = (
    "branch_code",
    "directorate_code",
    "division_code",
    "occupancy_status",
    "classification_group",
    "funding_source",
)


def _is_set(value) -> bool:
    return value is not None and not (isinstance(value, str) and value.strip() == "")


@dataclass(frozen=True)
class FilterCriteria:
    """Independent optional constraints; ``None`` means no constraint."""

    branch_code: Optional[str] = None
    directorate_code: Optional[str] = None
    division_code: Optional[str] = None
    occupancy_status: Optional[str] = None
    classification_group: Optional[str] = None
    funding_source: Optional[str] = None
    query: Optional[str] = None

    def is_empty(self) -> bool:
        """True when no field constrains anything."""
        return not any(_is_set(getattr(self, f.name)) for f in fields(self))

    def with_changes(self, **changes) -> "FilterCriteria":
        """Copy with some fields replaced."""
        return replace(self, **changes)

    def matches(self, position: Position) -> bool:
        """Whether *position* satisfies every populated field."""
        for name in _CATEGORICAL_FIELDS:
            wanted = getattr(self, name)
            if _is_set(wanted) and getattr(position, name) != wanted:
                return False

        if _is_set(self.query):
            q = self.query.strip().lower()
            # Absent values (e.g. a vacant position's incumbent) never match
            if not any(
                value and q in str(value).lower()
                for value in (getattr(position, f) for f in SEARCH_FIELDS)
            ):
                return False

        return True


def compose_predicate(criteria: FilterCriteria) -> Callable[[Position], bool]:
    """Single predicate equivalent to all populated criteria ANDed together."""
    if criteria.is_empty():
        return lambda position: True
    return criteria.matches


def filter_positions(
    positions: Iterable[Position], criteria: FilterCriteria
) -> List[Position]:
    """Positions satisfying *criteria*, in their original order."""
    predicate = compose_predicate(criteria)
    return [p for p in positions if predicate(p)]
