"""Record store: typed positions, org units and finance rows from cleaned frames."""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from src.org_hierarchy.models import Location, Position
from src.roster_pipeline.cleaning import RosterCleaner
from src.roster_pipeline.ingestion import RosterIngester

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrgUnit:
    """One row of the org hierarchy lookup."""

    branch_code: str
    directorate_code: str
    branch_name: Optional[str] = None
    directorate_name: Optional[str] = None
    division_code: Optional[str] = None
    division_name: Optional[str] = None
    fund_centre_code: Optional[str] = None


@dataclass(frozen=True)
class FinanceRecord:
    """One fund-centre line of the finance export, for one vote type."""

    fund_centre_code: str
    vote_type: str
    budget: float = 0.0
    forecast: float = 0.0
    actuals: float = 0.0
    commitments: float = 0.0
    free_balance: float = 0.0
    directorate_code: Optional[str] = None
    directorate_name: Optional[str] = None
    fiscal_year: Optional[str] = None


def _safe(val, default=None):
    """Return *default* when *val* is NaN/None/pd.NA/NaT, else the value."""
    if val is None or val is pd.NA or val is pd.NaT:
        return default
    if isinstance(val, float) and math.isnan(val):
        return default
    return val


def _safe_int(val) -> Optional[int]:
    val = _safe(val)
    if val is None:
        return None
    try:
        return int(val)
    except (ValueError, TypeError):
        return None


def position_from_row(row: pd.Series) -> Position:
    """Convert a single cleaned position row to a :class:`Position`."""
    sf = _safe
    city, province, region = sf(row.get("city")), sf(row.get("province")), sf(row.get("region"))
    location = Location(city, province, region) if (city or province or region) else None

    return Position(
        position_id=str(row["position_id"]),
        position_title=sf(row.get("position_title"), ""),
        classification_group=sf(row.get("classification_group")),
        classification_level=_safe_int(row.get("classification_level")),
        classification=sf(row.get("classification")),
        occupancy_status=row["occupancy_status"],
        incumbent_name=sf(row.get("incumbent_name")),
        incumbent_id=sf(row.get("incumbent_id")),
        tenure_type=sf(row.get("tenure_type")),
        start_date=sf(row.get("start_date")),
        end_date=sf(row.get("end_date")),
        language_profile=sf(row.get("language_profile")),
        location=location,
        branch_code=sf(row.get("branch_code")),
        directorate_code=sf(row.get("directorate_code")),
        division_code=sf(row.get("division_code")),
        fund_centre_code=sf(row.get("fund_centre_code")),
        reporting_to_position_id=sf(row.get("reporting_to_position_id")),
        funding_source=row["funding_source"],
        funding_sunset_date=sf(row.get("funding_sunset_date")),
        salary=float(sf(row.get("salary"), 0.0)),
        is_critical=bool(sf(row.get("is_critical"), False)),
        is_double_banked=bool(sf(row.get("is_double_banked"), False)),
        ee_gender=sf(row.get("ee_gender")),
        ee_visible_minority=bool(sf(row.get("ee_visible_minority"), False)),
        ee_indigenous=bool(sf(row.get("ee_indigenous"), False)),
        ee_disability=bool(sf(row.get("ee_disability"), False)),
    )


def positions_from_frame(df: pd.DataFrame) -> List[Position]:
    """Convert every row of a cleaned positions frame."""
    return [position_from_row(row) for _, row in df.iterrows()]


def org_units_from_frame(df: pd.DataFrame) -> List[OrgUnit]:
    """Convert every row of a cleaned org-unit frame."""
    units = []
    for _, row in df.iterrows():
        units.append(OrgUnit(
            branch_code=row["branch_code"],
            directorate_code=row["directorate_code"],
            branch_name=_safe(row.get("branch_name")),
            directorate_name=_safe(row.get("directorate_name")),
            division_code=_safe(row.get("division_code")),
            division_name=_safe(row.get("division_name")),
            fund_centre_code=_safe(row.get("fund_centre_code")),
        ))
    return units


def finance_from_frame(df: pd.DataFrame) -> List[FinanceRecord]:
    """Convert every row of a cleaned finance frame."""
    records = []
    for _, row in df.iterrows():
        records.append(FinanceRecord(
            fund_centre_code=row["fund_centre_code"],
            vote_type=row["vote_type"],
            budget=float(_safe(row.get("budget"), 0.0)),
            forecast=float(_safe(row.get("forecast"), 0.0)),
            actuals=float(_safe(row.get("actuals"), 0.0)),
            commitments=float(_safe(row.get("commitments"), 0.0)),
            free_balance=float(_safe(row.get("free_balance"), 0.0)),
            directorate_code=_safe(row.get("directorate_code")),
            directorate_name=_safe(row.get("directorate_name")),
            fiscal_year=_safe(row.get("fiscal_year")),
        ))
    return records


class RecordStore:
    """Holds the roster for the duration of one computation.

    Callers get copies of the lists, so nothing downstream can change the
    roster another computation sees.
    """

    def __init__(
        self,
        positions: List[Position],
        org_units: Optional[List[OrgUnit]] = None,
        finance: Optional[List[FinanceRecord]] = None,
    ):
        self._positions = list(positions)
        self._org_units = list(org_units or [])
        self._finance = list(finance or [])

    @classmethod
    def from_frames(
        cls,
        positions_df: pd.DataFrame,
        org_units_df: Optional[pd.DataFrame] = None,
        finance_df: Optional[pd.DataFrame] = None,
        cleaner: Optional[RosterCleaner] = None,
    ) -> "RecordStore":
        """Clean raw ingested frames and build a store from them."""
        cleaner = cleaner or RosterCleaner()
        positions = positions_from_frame(cleaner.clean_positions(positions_df))
        org_units = (
            org_units_from_frame(cleaner.clean_org_units(org_units_df))
            if org_units_df is not None else []
        )
        finance = (
            finance_from_frame(cleaner.clean_finance(finance_df))
            if finance_df is not None else []
        )
        return cls(positions, org_units, finance)

    @classmethod
    def load(cls, data_dir: Path) -> "RecordStore":
        """Ingest, clean and convert the roster exports in *data_dir*."""
        raw = RosterIngester(data_dir).read_all()
        store = cls.from_frames(raw["positions"], raw["org_units"], raw.get("finance"))
        logger.info(
            "Record store ready: %d positions, %d org units, %d finance rows",
            len(store._positions), len(store._org_units), len(store._finance),
        )
        return store

    def get_positions(self) -> List[Position]:
        return list(self._positions)

    def get_org_units(self) -> List[OrgUnit]:
        return list(self._org_units)

    def get_finance(self) -> List[FinanceRecord]:
        return list(self._finance)

    def org_unit_names(self) -> Dict[str, str]:
        """Display names keyed by branch, directorate and division code."""
        names: Dict[str, str] = {}
        for unit in self._org_units:
            if unit.branch_name:
                names.setdefault(unit.branch_code, unit.branch_name)
            if unit.directorate_name:
                names.setdefault(unit.directorate_code, unit.directorate_name)
            if unit.division_code and unit.division_name:
                names.setdefault(unit.division_code, unit.division_name)
        return names
