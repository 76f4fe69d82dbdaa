"""CSV ingestion for roster exports.

Handles the quirks of the HR position, org-unit and finance exports:
- camelCase or snake_case headers
- Surrounding quotes and stray whitespace in values
- Codes that look numeric ("101001") but must stay strings
"""

import logging
from pathlib import Path

import pandas as pd

from src.roster_pipeline.config import COLUMN_ALIASES, FILE_PATTERNS, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


class RosterIngester:
    """Reads roster CSV exports as all-string DataFrames.

    Each read method returns a DataFrame with:
    - Column names mapped to snake_case field names
    - Every value a stripped string ("" for blanks); typing is left to
      :class:`~src.roster_pipeline.cleaning.RosterCleaner`
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _resolve_path(self, file_key: str) -> Path:
        """Build the full file path for a given file key, raising if missing."""
        filepath = self.data_dir / FILE_PATTERNS[file_key]
        if not filepath.exists():
            raise FileNotFoundError(
                f"Expected file not found: {filepath}"
            )
        return filepath

    def _read(self, file_key: str) -> pd.DataFrame:
        filepath = self._resolve_path(file_key)
        logger.info("Reading %s: %s", file_key, filepath.name)

        df = pd.read_csv(
            filepath,
            dtype=str,
            keep_default_na=False,
            quotechar='"',
        )
        df.columns = [str(c).strip() for c in df.columns]
        df = df.rename(columns=COLUMN_ALIASES)

        missing = REQUIRED_COLUMNS[file_key] - set(df.columns)
        if missing:
            raise IngestionError(
                f"{filepath.name} is missing required columns: {sorted(missing)}"
            )

        for col in df.columns:
            df[col] = df[col].str.strip('"').str.strip()

        return df

    def read_positions(self) -> pd.DataFrame:
        """Read the position roster.

        Rows with a blank ``position_id`` are dropped.
        """
        df = self._read("positions")
        blank = df["position_id"] == ""
        if blank.any():
            logger.warning("Dropping %d position rows with no id", blank.sum())
            df = df[~blank].reset_index(drop=True)
        logger.info("Loaded %d positions", len(df))
        return df

    def read_org_units(self) -> pd.DataFrame:
        """Read the org-unit lookup (branch / directorate / division)."""
        df = self._read("org_units")
        logger.info("Loaded %d org units", len(df))
        return df

    def read_finance(self) -> pd.DataFrame:
        """Read the fund-centre finance export.

        The export is optional: when no finance file is present an empty
        frame with the required columns is returned so downstream
        summaries report zeros instead of failing.
        """
        if not (self.data_dir / FILE_PATTERNS["finance"]).exists():
            logger.info("No finance export in %s; skipping", self.data_dir)
            return pd.DataFrame(columns=sorted(REQUIRED_COLUMNS["finance"]), dtype=str)
        df = self._read("finance")
        logger.info("Loaded %d finance rows", len(df))
        return df

    def read_all(self) -> dict[str, pd.DataFrame]:
        """Read every export.

        Returns:
            dict with keys: 'positions', 'org_units', 'finance'

        Raises:
            IngestionError: if a required file cannot be read.
        """
        try:
            return {
                "positions": self.read_positions(),
                "org_units": self.read_org_units(),
                "finance": self.read_finance(),
            }
        except IngestionError:
            raise
        except Exception as e:
            raise IngestionError(f"Failed to read roster files: {e}") from e
