"""Build the workforce report from roster exports.

Usage:
    python -m src.roster_pipeline.run_report [data_dir] [reduction_pct] [query]

Examples:
    python -m src.roster_pipeline.run_report
    python -m src.roster_pipeline.run_report data/raw
    python -m src.roster_pipeline.run_report data/raw 10 "policy"
"""

import json
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from src.logging_config import setup_logging
from src.org_hierarchy.models import Position, Rollup
from src.org_hierarchy.rollups import total_rollup
from src.org_hierarchy.search_filter import search_forest
from src.org_hierarchy.tree_builder import build_tree
from src.roster_pipeline.config import (
    DEFAULT_ENDING_WINDOW_DAYS,
    RAW_DATA_DIR,
    REPORTS_DIR,
)
from src.roster_pipeline.finance import FinanceSummarizer
from src.roster_pipeline.records import RecordStore
from src.roster_pipeline.summaries import WorkforceSummarizer
from src.scenario_engine.config import DEFAULT_REDUCTION_PCT
from src.scenario_engine.models import ScenarioParameters
from src.scenario_engine.reduction_ranker import ReductionRanker

logger = logging.getLogger(__name__)

REPORT_FILENAME = "workforce_report.json"


def _position_to_dict(p: Position) -> dict:
    """Convert a position to the compact JSON structure used in reports."""
    return {
        "position_id": p.position_id,
        "title": p.position_title,
        "classification": p.classification,
        "occupancy_status": p.occupancy_status,
        "incumbent_name": p.incumbent_name,
        "tenure_type": p.tenure_type,
        "branch_code": p.branch_code,
        "funding_source": p.funding_source,
        "end_date": p.end_date.isoformat() if p.end_date else None,
        "funding_sunset_date": (
            p.funding_sunset_date.isoformat() if p.funding_sunset_date else None
        ),
        "salary": p.salary,
        "is_critical": p.is_critical,
    }


def _rollup_to_dict(rollup: Rollup) -> dict:
    data = asdict(rollup)
    data["vacancy_rate"] = rollup.vacancy_rate
    return data


def run_report(
    data_dir: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    reduction_pct: float = DEFAULT_REDUCTION_PCT,
    query: Optional[str] = None,
    reference_date: Optional[date] = None,
) -> Path:
    """Run the full workforce report.

    Args:
        data_dir: Directory containing ``positions.csv``, ``org_units.csv``
            and optionally ``finance.csv``.
            Defaults to ``data/raw/``.
        output_dir: Directory for JSON output. Defaults to ``data/reports/``.
        reduction_pct: Reduction scenario target, percent of occupied pool.
        query: Optional hierarchy search; matches keep their ancestors.
        reference_date: Date the "ending soon" window starts from.

    Returns:
        Path to the generated JSON file.

    Raises:
        FileNotFoundError: If the data directory doesn't exist.
        ValueError: If no reference date is given.
    """
    data_dir = Path(data_dir) if data_dir is not None else RAW_DATA_DIR
    if output_dir is None:
        output_dir = REPORTS_DIR
    output_dir = Path(output_dir)

    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")
    if reference_date is None:
        raise ValueError("reference_date is required")

    logger.info("Starting workforce report (data: %s)", data_dir)

    # 1. Load
    logger.info("Step 1/5: Loading roster...")
    store = RecordStore.load(data_dir)
    positions = store.get_positions()

    # 2. Hierarchy
    logger.info("Step 2/5: Building hierarchy...")
    forest = build_tree(positions)

    # 3. Search + rollups
    logger.info("Step 3/5: Applying search %r and computing rollups...", query or "")
    search = search_forest(forest.roots, query)
    names = store.org_unit_names()
    roots = [
        {
            "position_id": root.node_id,
            "title": root.position.position_title,
            "branch": names.get(root.position.branch_code or "", root.position.branch_code),
            "rollup": _rollup_to_dict(search.rollups[root.node_id]),
        }
        for root in search.roots
    ]

    # 4. Scenario
    logger.info("Step 4/5: Running %s%% reduction scenario...", reduction_pct)
    scenario = ReductionRanker(ScenarioParameters(reduction_pct=reduction_pct)).run(positions)

    # 5. Summaries + output
    logger.info("Step 5/5: Summarizing and writing JSON...")
    summarizer = WorkforceSummarizer(positions)
    finance = FinanceSummarizer(store.get_finance(), positions)

    output_data = {
        "metadata": {
            "version": "1.0",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "reference_date": reference_date.isoformat(),
            "total_positions": len(positions),
            "query": query or "",
        },
        "headline": asdict(summarizer.headline()),
        "breakdowns": {
            name: summarizer.counts_by(name)
            for name in ("tenure_type", "location.region", "language_profile",
                         "classification_group", "funding_source")
        },
        "hierarchy": {
            "root_count": len(forest.roots),
            "matches": search.match_ids,
            "total": _rollup_to_dict(total_rollup(search.roots)),
            "roots": roots,
        },
        "scenario": {
            "reduction_pct": scenario.reduction_pct,
            "pool_size": scenario.pool_size,
            "affected_count": scenario.affected_count,
            "salary_savings": scenario.salary_savings,
            "critical_impacted": scenario.critical_impacted,
            "indeterminate_impacted": scenario.indeterminate_impacted,
            "by_branch": scenario.by_branch,
            "by_classification_group": scenario.by_classification_group,
            "affected": [_position_to_dict(p) for p in scenario.affected],
        },
        "ending_soon": [
            _position_to_dict(p)
            for p in summarizer.ending_within(DEFAULT_ENDING_WINDOW_DAYS, reference_date)
        ],
        "sunset": [_position_to_dict(p) for p in summarizer.sunset_positions()],
        "equity": {
            "groups": [asdict(g) for g in summarizer.equity()],
            "by_branch": summarizer.equity_by_branch(),
            "gender": summarizer.gender_distribution(),
        },
        "finance": {
            "totals": asdict(finance.totals()),
            "by_vote_type": finance.by_vote_type(),
            "by_directorate": finance.budget_by_directorate(),
            "salary_reconciliation": [asdict(r) for r in finance.salary_reconciliation()],
        },
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / REPORT_FILENAME

    with open(output_file, "w") as f:
        json.dump(output_data, f, indent=2, default=str)

    logger.info("Report complete! Output: %s", output_file)
    logger.info(
        "  Positions: %d, vacant: %d, affected by scenario: %d",
        len(positions), output_data["headline"]["vacant"], scenario.affected_count,
    )

    return output_file


if __name__ == "__main__":
    setup_logging()

    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    reduction_pct = float(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_REDUCTION_PCT
    query = sys.argv[3] if len(sys.argv) > 3 else None

    try:
        output = run_report(
            data_dir,
            reduction_pct=reduction_pct,
            query=query,
            reference_date=date.today(),
        )
        print(f"Report complete: {output}")
    except Exception:
        logger.exception("Report failed")
        sys.exit(1)
