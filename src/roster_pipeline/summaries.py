"""Workforce summaries over a position list.

Headline counts, breakdowns by category, employment equity representation
against targets, and the two planning lists (positions ending soon and
sunset-funded positions). Dates are always compared against an explicit
reference date.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

import pandas as pd

from src.org_hierarchy.models import OCCUPIED_ACTING, SUNSET, VACANT, Position
from src.roster_pipeline.config import (
    DEFAULT_ENDING_WINDOW_DAYS,
    DEFAULT_LIST_LIMIT,
    EE_TARGETS,
    EE_WOMAN,
)

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
GENDER_NOT_STATED = "Prefer not to say"

_FRAME_COLUMNS = [
    "position_id", "occupancy_status", "tenure_type", "region",
    "language_profile", "classification_group", "funding_source",
    "end_date", "funding_sunset_date", "salary", "is_critical",
    "is_double_banked", "branch_code", "ee_gender", "ee_visible_minority",
    "ee_indigenous", "ee_disability",
]

# Breakdown name -> frame column, and whether only occupied rows count
_BREAKDOWNS = {
    "tenure_type": ("tenure_type", True),
    "location.region": ("region", False),
    "language_profile": ("language_profile", False),
    "classification_group": ("classification_group", False),
    "funding_source": ("funding_source", False),
}


@dataclass
class WorkforceHeadline:
    """Top-line workforce numbers."""

    total: int
    occupied: int
    acting: int
    vacant: int
    vacancy_rate: float
    critical_total: int
    critical_vacant: int
    sunset_count: int
    double_banked: int
    total_salary: float


@dataclass
class EquityGroup:
    """Representation of one designated group among occupied positions."""

    group: str
    count: int
    total: int
    pct: float
    target: float
    meets_target: bool


class WorkforceSummarizer:
    """Computes summaries for one snapshot of positions."""

    def __init__(self, positions: Iterable[Position]):
        self._positions = {p.position_id: p for p in positions}
        rows = [
            {
                "position_id": p.position_id,
                "occupancy_status": p.occupancy_status,
                "tenure_type": p.tenure_type,
                "region": p.location.region if p.location else None,
                "language_profile": p.language_profile,
                "classification_group": p.classification_group,
                "funding_source": p.funding_source,
                "end_date": p.end_date,
                "funding_sunset_date": p.funding_sunset_date,
                "salary": p.salary or 0.0,
                "is_critical": p.is_critical,
                "is_double_banked": p.is_double_banked,
                "branch_code": p.branch_code,
                "ee_gender": p.ee_gender,
                "ee_visible_minority": p.ee_visible_minority,
                "ee_indigenous": p.ee_indigenous,
                "ee_disability": p.ee_disability,
            }
            for p in self._positions.values()
        ]
        self.df = pd.DataFrame(rows, columns=_FRAME_COLUMNS)

    # ------------------------------------------------------------------
    # Headline
    # ------------------------------------------------------------------
    def headline(self) -> WorkforceHeadline:
        df = self.df
        vacant_mask = df["occupancy_status"] == VACANT
        critical_mask = df["is_critical"].astype(bool)
        total = len(df)
        vacant = int(vacant_mask.sum())

        result = WorkforceHeadline(
            total=total,
            occupied=total - vacant,
            acting=int((df["occupancy_status"] == OCCUPIED_ACTING).sum()),
            vacant=vacant,
            vacancy_rate=round(vacant / total * 100, 1) if total else 0.0,
            critical_total=int(critical_mask.sum()),
            critical_vacant=int((critical_mask & vacant_mask).sum()),
            sunset_count=int((df["funding_source"] == SUNSET).sum()),
            double_banked=int(df["is_double_banked"].astype(bool).sum()),
            total_salary=float(df["salary"].astype(float).sum()),
        )
        logger.debug("Headline: %s", result)
        return result

    # ------------------------------------------------------------------
    # Breakdowns
    # ------------------------------------------------------------------
    def counts_by(self, field: str) -> Dict[str, int]:
        """Counts per value of *field*, largest first.

        Missing values are counted as ``"Unknown"``. Tenure is counted over
        occupied positions only.

        Raises:
            ValueError: if *field* is not a supported breakdown.
        """
        if field not in _BREAKDOWNS:
            raise ValueError(
                f"Unsupported breakdown '{field}'; expected one of {sorted(_BREAKDOWNS)}"
            )
        column, occupied_only = _BREAKDOWNS[field]
        df = self.df
        if occupied_only:
            df = df[df["occupancy_status"] != VACANT]
        if df.empty:
            return {}

        values = df[column].astype(object).where(df[column].notna(), UNKNOWN)
        counts = values.value_counts(sort=False)
        ordered = sorted(counts.items(), key=lambda kv: (-kv[1], str(kv[0])))
        return {str(k): int(v) for k, v in ordered}

    # ------------------------------------------------------------------
    # Employment equity
    # ------------------------------------------------------------------
    def _occupied(self) -> pd.DataFrame:
        return self.df[self.df["occupancy_status"] != VACANT]

    @staticmethod
    def _group_masks(df: pd.DataFrame) -> Dict[str, pd.Series]:
        return {
            "women": df["ee_gender"] == EE_WOMAN,
            "visible_minority": df["ee_visible_minority"].astype(bool),
            "indigenous": df["ee_indigenous"].astype(bool),
            "disability": df["ee_disability"].astype(bool),
        }

    def equity(self) -> List[EquityGroup]:
        """Designated-group representation among occupied positions.

        A group meets its target when its share is at or above it.
        """
        occupied = self._occupied()
        total = len(occupied)
        groups = []
        for group, mask in self._group_masks(occupied).items():
            count = int(mask.sum())
            pct = count / total * 100 if total else 0.0
            target = EE_TARGETS[group]
            groups.append(EquityGroup(
                group=group,
                count=count,
                total=total,
                pct=round(pct, 1),
                target=target,
                meets_target=pct >= target,
            ))
        return groups

    def equity_by_branch(self) -> Dict[str, Dict[str, float]]:
        """Per-branch occupied total and group shares (percent, 1 decimal)."""
        occupied = self._occupied()
        branches = occupied["branch_code"].astype(object).where(
            occupied["branch_code"].notna(), UNKNOWN
        )
        result: Dict[str, Dict[str, float]] = {}
        for branch in sorted(branches.unique(), key=str):
            rows = occupied[branches == branch]
            total = len(rows)
            shares: Dict[str, float] = {"total": total}
            for group, mask in self._group_masks(rows).items():
                shares[group] = round(int(mask.sum()) / total * 100, 1) if total else 0.0
            result[str(branch)] = shares
        return result

    def gender_distribution(self) -> Dict[str, int]:
        """Occupied positions per self-identified gender, largest first."""
        occupied = self._occupied()
        if occupied.empty:
            return {}
        values = occupied["ee_gender"].astype(object).where(
            occupied["ee_gender"].notna(), GENDER_NOT_STATED
        )
        ordered = sorted(values.value_counts(sort=False).items(), key=lambda kv: (-kv[1], str(kv[0])))
        return {str(k): int(v) for k, v in ordered}

    # ------------------------------------------------------------------
    # Planning lists
    # ------------------------------------------------------------------
    def ending_within(
        self,
        days: int = DEFAULT_ENDING_WINDOW_DAYS,
        reference_date: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[Position]:
        """Positions whose end date falls within *days* of *reference_date*.

        The window is inclusive at both ends. Results are ordered by end
        date, soonest first, and capped at *limit*.

        Raises:
            ValueError: if no reference date is given.
        """
        if reference_date is None:
            raise ValueError("reference_date is required")
        horizon = reference_date + timedelta(days=days)

        df = self.df[self.df["end_date"].notna()]
        in_window = [
            reference_date <= d <= horizon for d in df["end_date"]
        ]
        df = df[in_window] if len(df) else df
        df = df.sort_values("end_date", kind="stable").head(limit)
        return [self._positions[pid] for pid in df["position_id"]]

    def sunset_positions(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Position]:
        """Sunset-funded positions by sunset date; missing dates first."""
        df = self.df[self.df["funding_source"] == SUNSET]
        dated = [
            (pid, None if pd.isna(d) else d)
            for pid, d in zip(df["position_id"], df["funding_sunset_date"])
        ]
        ordered = sorted(
            dated, key=lambda pair: (pair[1] is not None, pair[1] or date.min)
        )
        return [self._positions[pid] for pid, _ in ordered[:limit]]
