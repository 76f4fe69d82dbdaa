"""Data cleaning for roster exports.

Turns the all-string frames from :class:`RosterIngester` into typed,
internally consistent records:
- Canonical occupancy status and funding source spellings
- Numeric salary and classification level, ISO dates, boolean flags
- Classification derived from group and level when missing (EC + 5 -> EC-05)
- Incumbent and tenure cleared for vacant positions, sunset date kept only
  for sunset funding
- Finance rows with canonical vote types and numeric amounts

Values that cannot be interpreted are never dropped silently: every
coercion is counted and logged as a warning.
"""

import calendar
import logging
import re
from datetime import date, datetime
from typing import Optional

import pandas as pd

from src.org_hierarchy.models import A_BASE, SUNSET, VACANT
from src.roster_pipeline.config import (
    FUNDING_ALIASES,
    STATUS_ALIASES,
    TRUE_STRINGS,
    VOTE_TYPE_ALIASES,
)

logger = logging.getLogger(__name__)

_STRING_COLUMNS = (
    "position_id", "position_title", "classification_group", "classification",
    "incumbent_name", "incumbent_id", "tenure_type", "language_profile",
    "city", "province", "region",
    "branch_code", "directorate_code", "division_code", "fund_centre_code",
    "reporting_to_position_id", "ee_gender",
)
_DATE_COLUMNS = ("start_date", "end_date", "funding_sunset_date")
_FLAG_COLUMNS = (
    "is_critical", "is_double_banked",
    "ee_visible_minority", "ee_indigenous", "ee_disability",
)
_VACANT_CLEARED = ("incumbent_name", "incumbent_id", "tenure_type", "start_date")

_FINANCE_STRING_COLUMNS = (
    "fund_centre_code", "directorate_code", "directorate_name", "fiscal_year",
)
_FINANCE_AMOUNT_COLUMNS = (
    "budget", "forecast", "actuals", "commitments", "free_balance",
    "p6_forecast", "prior_year_actuals",
)

_SEPARATORS = re.compile(r"[\s_\-]+")
_AMOUNT_NOISE = re.compile(r"[\s$,]")
_ISO_DAY = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")


def _written_day(text) -> Optional[int]:
    """Day-of-month as written in an ISO-style date string, if any."""
    if text is None:
        return None
    match = _ISO_DAY.match(text)
    return int(match.group(3)) if match else None


class RosterCleaner:
    """Cleans and standardizes roster exports."""

    # ------------------------------------------------------------------
    # Value helpers
    # ------------------------------------------------------------------
    @staticmethod
    def blank_to_none(value) -> Optional[str]:
        """Strip a string value, mapping blanks and NaN to None."""
        if value is None or pd.isna(value):
            return None
        value = str(value).strip()
        return value or None

    @staticmethod
    def normalize_status(value) -> Optional[str]:
        """Canonical occupancy status, or None when unrecognized.

        Examples:
            "Occupied - Acting" -> "Occupied-Acting"
            "VACANT"            -> "Vacant"
        """
        if value is None or pd.isna(value):
            return None
        key = " ".join(str(value).split()).lower()
        return STATUS_ALIASES.get(key)

    @staticmethod
    def normalize_funding(value) -> Optional[str]:
        """Canonical funding source ("a base" -> "A-Base"), None if unknown."""
        if value is None or pd.isna(value):
            return None
        key = _SEPARATORS.sub("", str(value)).lower()
        return FUNDING_ALIASES.get(key)

    @staticmethod
    def normalize_vote_type(value) -> Optional[str]:
        """Canonical finance vote type ("o & m" -> "O&M"), None if unknown."""
        if value is None or pd.isna(value):
            return None
        key = _SEPARATORS.sub("", str(value)).lower()
        return VOTE_TYPE_ALIASES.get(key)

    @staticmethod
    def parse_flag(value) -> bool:
        """Interpret export flags ("true", "Y", "1", ...) as booleans."""
        if value is None or pd.isna(value):
            return False
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUE_STRINGS

    @staticmethod
    def parse_amount(value) -> Optional[float]:
        """Parse a money amount, tolerating ``$`` and thousands separators.

        Examples:
            "95,000"     -> 95000.0
            "$1,250.50"  -> 1250.5
            "n/a"        -> None
        """
        if value is None or pd.isna(value):
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        text = _AMOUNT_NOISE.sub("", str(value))
        if not text:
            return None
        try:
            amount = float(text)
        except ValueError:
            return None
        return None if pd.isna(amount) else amount

    @staticmethod
    def parse_date(value) -> Optional[date]:
        """Parse an ISO 8601 date or timestamp to a calendar date.

        A day past the end of its month ("2026-04-31") is pulled back to
        the month's last day; exports generate month ends that way.
        Anything else unparseable returns None.
        """
        if value is None or pd.isna(value):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = str(value).strip()
        if not text:
            return None
        try:
            return pd.to_datetime(text, format="ISO8601").date()
        except (ValueError, TypeError):
            pass

        match = _ISO_DAY.match(text)
        if not match:
            return None
        year, month, day = (int(g) for g in match.groups())
        if not 1 <= month <= 12 or day < 1:
            return None
        last_day = calendar.monthrange(year, month)[1]
        if day <= last_day:
            # Date part is valid, so the rest of the string was the problem
            return None
        return date(year, month, last_day)

    @staticmethod
    def derive_classification(group, level) -> Optional[str]:
        """Build a classification code from group and level (EC, 5 -> EC-05)."""
        if group is None or pd.isna(group) or level is None or pd.isna(level):
            return None
        return f"{group}-{int(level):02d}"

    # ------------------------------------------------------------------
    # Column helpers
    # ------------------------------------------------------------------
    def _parse_amount_column(self, df: pd.DataFrame, col: str, id_col: str) -> pd.Series:
        raw = df[col].map(self.blank_to_none)
        parsed = raw.map(self.parse_amount).astype(float)
        unparsed = raw.notna() & parsed.isna()
        if unparsed.any():
            logger.warning(
                "%d unparseable %s values treated as 0: %s",
                unparsed.sum(), col,
                list(zip(df.loc[unparsed, id_col], raw[unparsed])),
            )
        return parsed

    def _parse_date_column(self, df: pd.DataFrame, col: str) -> list:
        raw = [self.blank_to_none(v) for v in df[col]]
        parsed = [self.parse_date(v) for v in raw]

        unparsed = [
            (pid, r) for pid, r, d in zip(df["position_id"], raw, parsed)
            if r is not None and d is None
        ]
        if unparsed:
            logger.warning(
                "%d unparseable %s values cleared: %s", len(unparsed), col, unparsed,
            )
        clamped = [
            (pid, r) for pid, r, d in zip(df["position_id"], raw, parsed)
            if d is not None and _written_day(r) not in (None, d.day)
        ]
        if clamped:
            logger.warning(
                "%d %s values past month end moved to the last day: %s",
                len(clamped), col, clamped,
            )
        return parsed

    # ------------------------------------------------------------------
    # DataFrame-level cleaning
    # ------------------------------------------------------------------
    def clean_positions(self, df: pd.DataFrame) -> pd.DataFrame:
        """Clean the positions DataFrame.

        Rows whose occupancy status cannot be recognized are dropped with a
        warning, since vacancy drives every headcount downstream. Missing
        values come out as ``None``.
        """
        out = df.astype(object).copy()
        for col in _STRING_COLUMNS + _DATE_COLUMNS + _FLAG_COLUMNS + (
            "occupancy_status", "funding_source", "salary", "classification_level",
        ):
            if col not in out.columns:
                out[col] = None

        for col in _STRING_COLUMNS:
            out[col] = out[col].map(self.blank_to_none)

        out["occupancy_status"] = out["occupancy_status"].map(self.normalize_status)
        unknown = out["occupancy_status"].isna()
        if unknown.any():
            logger.warning(
                "Dropping %d positions with unrecognized occupancy status: %s",
                unknown.sum(),
                out.loc[unknown, "position_id"].tolist(),
            )
            out = out[~unknown].reset_index(drop=True)

        out["funding_source"] = out["funding_source"].map(self.normalize_funding)
        no_funding = out["funding_source"].isna()
        if no_funding.any():
            logger.warning(
                "%d positions with missing/unknown funding source treated as %s",
                no_funding.sum(), A_BASE,
            )
            out.loc[no_funding, "funding_source"] = A_BASE

        salary = self._parse_amount_column(out, "salary", "position_id")
        negative = salary < 0
        if negative.any():
            logger.warning(
                "%d negative salaries treated as 0: %s",
                negative.sum(), out.loc[negative, "position_id"].tolist(),
            )
        out["salary"] = salary.fillna(0.0).clip(lower=0.0).astype(float)

        level = pd.to_numeric(out["classification_level"], errors="coerce")
        out["classification_level"] = level.round().astype("Int64")

        out["classification"] = [
            cls if not pd.isna(cls) else self.derive_classification(group, lvl)
            for cls, group, lvl in zip(
                out["classification"],
                out["classification_group"],
                out["classification_level"],
            )
        ]

        for col in _DATE_COLUMNS:
            out[col] = self._parse_date_column(out, col)

        for col in _FLAG_COLUMNS:
            out[col] = out[col].map(self.parse_flag).astype(bool)

        vacant = out["occupancy_status"] == VACANT
        for col in _VACANT_CLEARED:
            out.loc[vacant, col] = None
        out.loc[out["funding_source"] != SUNSET, "funding_sunset_date"] = None

        out = out.astype(object).where(out.notna(), None)
        logger.info("Cleaned positions: %d rows (%d vacant)", len(out), vacant.sum())
        return out

    def clean_org_units(self, df: pd.DataFrame) -> pd.DataFrame:
        """Clean the org-unit lookup: blanks to None, duplicate rows dropped."""
        out = df.copy()
        for col in out.columns:
            out[col] = out[col].map(self.blank_to_none).astype(object)
        out = out.drop_duplicates().reset_index(drop=True)
        logger.info("Cleaned org units: %d rows", len(out))
        return out

    def clean_finance(self, df: pd.DataFrame) -> pd.DataFrame:
        """Clean the fund-centre finance export.

        Rows with an unrecognized vote type are dropped with a warning.
        Amounts accept ``$`` and thousands separators; blanks become 0.
        """
        out = df.astype(object).copy()
        for col in _FINANCE_STRING_COLUMNS + _FINANCE_AMOUNT_COLUMNS + ("vote_type",):
            if col not in out.columns:
                out[col] = None

        for col in _FINANCE_STRING_COLUMNS:
            out[col] = out[col].map(self.blank_to_none)

        out["vote_type"] = out["vote_type"].map(self.normalize_vote_type)
        unknown = out["vote_type"].isna()
        if unknown.any():
            logger.warning(
                "Dropping %d finance rows with unrecognized vote type: %s",
                unknown.sum(), out.loc[unknown, "fund_centre_code"].tolist(),
            )
            out = out[~unknown].reset_index(drop=True)

        for col in _FINANCE_AMOUNT_COLUMNS:
            out[col] = self._parse_amount_column(out, col, "fund_centre_code").fillna(0.0)

        out = out.astype(object).where(out.notna(), None)
        logger.info("Cleaned finance: %d rows", len(out))
        return out

    def clean_all(self, data: dict[str, pd.DataFrame]) -> dict[str, pd.DataFrame]:
        """Clean every frame returned by RosterIngester.read_all()."""
        cleaned = {
            "positions": self.clean_positions(data["positions"]),
            "org_units": self.clean_org_units(data["org_units"]),
        }
        finance = data.get("finance")
        cleaned["finance"] = self.clean_finance(
            finance if finance is not None else pd.DataFrame()
        )
        return cleaned
