"""Position and hierarchy data models."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

# Occupancy statuses
OCCUPIED = "Occupied"
OCCUPIED_ACTING = "Occupied-Acting"
VACANT = "Vacant"
OCCUPANCY_STATUSES = (OCCUPIED, OCCUPIED_ACTING, VACANT)

# Funding sources
A_BASE = "A-Base"
B_BASE = "B-Base"
PROGRAM = "Program"
SUNSET = "Sunset"
FUNDING_SOURCES = (A_BASE, B_BASE, PROGRAM, SUNSET)

INDETERMINATE = "Indeterminate"
TEMPORARY_TENURE_TYPES = frozenset(
    {"Term", "Casual", "Student", "Assignment", "Secondment"}
)


@dataclass(frozen=True)
class Location:
    """Work location of a position."""

    city: Optional[str] = None
    province: Optional[str] = None
    region: Optional[str] = None


@dataclass(frozen=True)
class Position:
    """A single role in the organization, occupied or vacant.

    Read-only: positions are inputs to every computation and are never
    mutated here.
    """

    position_id: str
    position_title: str = ""
    classification_group: Optional[str] = None
    classification_level: Optional[int] = None
    classification: Optional[str] = None
    occupancy_status: str = OCCUPIED
    incumbent_name: Optional[str] = None
    incumbent_id: Optional[str] = None
    tenure_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    language_profile: Optional[str] = None
    location: Optional[Location] = None
    branch_code: Optional[str] = None
    directorate_code: Optional[str] = None
    division_code: Optional[str] = None
    fund_centre_code: Optional[str] = None
    reporting_to_position_id: Optional[str] = None
    funding_source: str = A_BASE
    funding_sunset_date: Optional[date] = None
    salary: float = 0.0
    is_critical: bool = False
    is_double_banked: bool = False
    # Employment equity self-identification
    ee_gender: Optional[str] = None
    ee_visible_minority: bool = False
    ee_indigenous: bool = False
    ee_disability: bool = False

    @property
    def is_vacant(self) -> bool:
        return self.occupancy_status == VACANT

    @property
    def is_acting(self) -> bool:
        return self.occupancy_status == OCCUPIED_ACTING

    @property
    def is_temporary(self) -> bool:
        """True for time-bounded tenures (term, casual, student, ...)."""
        return self.tenure_type in TEMPORARY_TENURE_TYPES


@dataclass
class TreeNode:
    """One position in the hierarchy, owning its ordered children.

    The wrapped position is held by reference. Rollups are kept in a
    separate ``{position_id: Rollup}`` map (see ``rollups.py``) so a
    rebuilt tree never carries stale totals.
    """

    position: Position
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def node_id(self) -> str:
        return self.position.position_id

    @property
    def has_children(self) -> bool:
        return bool(self.children)


@dataclass(frozen=True)
class Rollup:
    """Aggregated totals over a node and all of its descendants."""

    total_salary: float = 0.0
    total_fte: int = 0
    total_positions: int = 0
    vacant_count: int = 0

    @classmethod
    def for_position(cls, position: Position) -> "Rollup":
        """Contribution of a single position, excluding its subtree."""
        return cls(
            total_salary=position.salary or 0.0,
            total_fte=0 if position.is_vacant else 1,
            total_positions=1,
            vacant_count=1 if position.is_vacant else 0,
        )

    def __add__(self, other: "Rollup") -> "Rollup":
        if not isinstance(other, Rollup):
            return NotImplemented
        return Rollup(
            total_salary=self.total_salary + other.total_salary,
            total_fte=self.total_fte + other.total_fte,
            total_positions=self.total_positions + other.total_positions,
            vacant_count=self.vacant_count + other.vacant_count,
        )

    @property
    def vacancy_rate(self) -> float:
        """Vacant share of the subtree as a percentage (0.0 when empty)."""
        if not self.total_positions:
            return 0.0
        return self.vacant_count / self.total_positions * 100
