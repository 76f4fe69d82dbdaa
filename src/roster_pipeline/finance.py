"""Financial overview: budget totals, vote-type mix and salary reconciliation.

Finance rows come from the fund-centre export, one row per fund centre and
vote type. Salary-vote budgets are reconciled against what the position
roster says the same fund centre costs.
"""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Dict, Iterable, List, Optional

import pandas as pd

from src.org_hierarchy.models import VACANT, Position
from src.roster_pipeline.config import ALIGNMENT_TOLERANCE, SALARY_VOTE
from src.roster_pipeline.records import FinanceRecord, OrgUnit

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
DEFAULT_DIRECTORATE_LIMIT = 10

_FINANCE_COLUMNS = [f.name for f in fields(FinanceRecord)]


@dataclass
class FinanceTotals:
    """Budget, forecast and spend across the selected finance rows."""

    budget: float = 0.0
    forecast: float = 0.0
    actuals: float = 0.0
    surplus_deficit: float = 0.0
    burn_rate: float = 0.0


@dataclass
class FundCentreReconciliation:
    """Salary-vote budget of one fund centre against its roster cost."""

    fund_centre_code: str
    directorate_name: Optional[str]
    positions: int
    occupied: int
    vacant: int
    hr_salary_cost: float
    finance_budget: float
    variance: float
    aligned: bool


def filter_finance(
    records: Iterable[FinanceRecord],
    branch_code: Optional[str] = None,
    directorate_code: Optional[str] = None,
    org_units: Iterable[OrgUnit] = (),
) -> List[FinanceRecord]:
    """Restrict finance rows to a directorate, or to a branch's directorates.

    A directorate filter wins over a branch filter. Finance rows carry no
    branch, so branch membership goes through the org-unit lookup.
    """
    records = list(records)
    if directorate_code:
        return [r for r in records if r.directorate_code == directorate_code]
    if branch_code:
        directorates = {u.directorate_code for u in org_units if u.branch_code == branch_code}
        if not directorates:
            logger.warning("Branch %s has no directorates in the org-unit lookup", branch_code)
        return [r for r in records if r.directorate_code in directorates]
    return records


class FinanceSummarizer:
    """Computes the financial overview for one set of finance rows."""

    def __init__(self, finance: Iterable[FinanceRecord], positions: Iterable[Position] = ()):
        self.df = pd.DataFrame(
            [asdict(r) for r in finance], columns=_FINANCE_COLUMNS
        )
        self.positions_df = pd.DataFrame(
            [
                {
                    "fund_centre_code": p.fund_centre_code,
                    "vacant": p.occupancy_status == VACANT,
                    "salary": p.salary or 0.0,
                }
                for p in positions
            ],
            columns=["fund_centre_code", "vacant", "salary"],
        )

    def totals(self) -> FinanceTotals:
        """Totals plus surplus (budget - forecast) and burn rate (% of forecast spent)."""
        budget = float(self.df["budget"].sum())
        forecast = float(self.df["forecast"].sum())
        actuals = float(self.df["actuals"].sum())
        return FinanceTotals(
            budget=budget,
            forecast=forecast,
            actuals=actuals,
            surplus_deficit=budget - forecast,
            burn_rate=actuals / forecast * 100 if forecast else 0.0,
        )

    def by_vote_type(self) -> Dict[str, Dict[str, float]]:
        """Budget, forecast and actuals per vote type, in first-seen order."""
        grouped = self.df.groupby("vote_type", sort=False)[["budget", "forecast", "actuals"]].sum()
        return {
            str(vote): {col: float(val) for col, val in row.items()}
            for vote, row in grouped.iterrows()
        }

    def budget_by_directorate(self, limit: int = DEFAULT_DIRECTORATE_LIMIT) -> Dict[str, float]:
        """Budget per directorate name, largest first, capped at *limit*."""
        if self.df.empty:
            return {}
        names = self.df["directorate_name"].where(
            self.df["directorate_name"].notna(), self.df["directorate_code"]
        ).fillna(UNKNOWN)
        budgets = self.df["budget"].groupby(names, sort=False).sum()
        ordered = sorted(budgets.items(), key=lambda kv: -kv[1])[:limit]
        return {str(k): float(v) for k, v in ordered}

    def salary_reconciliation(self) -> List[FundCentreReconciliation]:
        """Compare each fund centre's salary budget with its roster salary cost.

        HR cost sums the salaries of occupied positions charged to the fund
        centre. A fund centre is aligned when the variance is within 10% of
        its budget. Rows come out ordered by fund centre code.
        """
        salary_rows = self.df[self.df["vote_type"] == SALARY_VOTE]
        if salary_rows.empty:
            return []

        budgets = salary_rows.groupby("fund_centre_code")["budget"].sum()
        names = salary_rows.groupby("fund_centre_code")["directorate_name"].first()
        pos = self.positions_df

        results = []
        for fc, budget in budgets.items():
            charged = pos[pos["fund_centre_code"] == fc]
            occupied = charged[~charged["vacant"].astype(bool)]
            hr_cost = float(occupied["salary"].sum())
            variance = float(budget) - hr_cost
            name = names.get(fc)
            results.append(FundCentreReconciliation(
                fund_centre_code=str(fc),
                directorate_name=None if pd.isna(name) else name,
                positions=len(charged),
                occupied=len(occupied),
                vacant=len(charged) - len(occupied),
                hr_salary_cost=hr_cost,
                finance_budget=float(budget),
                variance=variance,
                aligned=abs(variance) < float(budget) * ALIGNMENT_TOLERANCE,
            ))

        misaligned = [r.fund_centre_code for r in results if not r.aligned]
        if misaligned:
            logger.info("%d fund centres outside salary tolerance: %s", len(misaligned), misaligned)
        return results
