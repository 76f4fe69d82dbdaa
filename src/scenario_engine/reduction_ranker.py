"""Workforce reduction scenario ranking.

Orders the occupied pool by a protection policy and selects the first
``ceil(pool_size * pct / 100)`` positions as affected. The policy, from
first removed to last:

* **Sunset** funded positions.
* **Temporary** tenures (term, casual, student, assignment, secondment).
* Everything else (indeterminate, ongoing funding).
* **Critical** positions, whatever their funding or tenure.

Within a tier the cheapest positions go first. The critical and
indeterminate counts in the result are informational: once the lower tiers
run out, a larger target will reach critical positions too.
"""

import logging
import math
from typing import Dict, Iterable, List, Optional

from src.org_hierarchy.models import INDETERMINATE, SUNSET, Position
from src.scenario_engine.config import (
    MAX_REDUCTION_PCT,
    TIER_CRITICAL,
    TIER_STANDARD,
    TIER_SUNSET,
    TIER_TEMPORARY,
    TIER_VACANT,
)
from src.scenario_engine.models import ScenarioParameters, ScenarioResult

logger = logging.getLogger(__name__)


def priority_tier(position: Position) -> int:
    """Removal tier of *position*; lower tiers are removed first."""
    if position.is_critical:
        return TIER_CRITICAL
    if position.is_vacant:
        return TIER_VACANT
    if position.funding_source == SUNSET:
        return TIER_SUNSET
    if position.is_temporary:
        return TIER_TEMPORARY
    return TIER_STANDARD


def build_pool(
    positions: Iterable[Position], params: Optional[ScenarioParameters] = None
) -> List[Position]:
    """Occupied positions, optionally restricted to one branch."""
    branch = params.branch_code if params else None
    return [
        p for p in positions
        if not p.is_vacant and (not branch or p.branch_code == branch)
    ]


def _count_by(positions: Iterable[Position], attr: str) -> Dict[str, int]:
    """Counts per value of *attr*, largest first."""
    counts: Dict[str, int] = {}
    for p in positions:
        key = getattr(p, attr) or "Unknown"
        counts[key] = counts.get(key, 0) + 1
    return dict(sorted(counts.items(), key=lambda kv: -kv[1]))


def rank_for_reduction(
    pool: Iterable[Position], reduction_pct: float
) -> ScenarioResult:
    """Select the positions affected by a *reduction_pct* reduction.

    Args:
        pool: Occupied positions eligible for reduction (see
            :func:`build_pool`).
        reduction_pct: Target as a percentage of the pool (1-100). Values
            outside 0-100 are clamped.

    Returns:
        :class:`ScenarioResult` with the affected positions in removal order
        and the derived totals. An empty pool yields an empty result.
    """
    pool = list(pool)
    pct = reduction_pct
    if pct < 0 or pct > MAX_REDUCTION_PCT:
        pct = min(max(pct, 0), MAX_REDUCTION_PCT)
        logger.warning(
            "Reduction target %s%% out of range, clamped to %s%%",
            reduction_pct, pct,
        )

    ordered = sorted(pool, key=lambda p: (priority_tier(p), p.salary or 0.0))
    count = math.ceil(len(pool) * pct / 100)
    affected = ordered[:count]

    result = ScenarioResult(
        affected=affected,
        pool_size=len(pool),
        reduction_pct=pct,
        salary_savings=sum(p.salary or 0.0 for p in affected),
        critical_impacted=sum(1 for p in affected if p.is_critical),
        indeterminate_impacted=sum(
            1 for p in affected if p.tenure_type == INDETERMINATE
        ),
        by_branch=_count_by(affected, "branch_code"),
        by_classification_group=_count_by(affected, "classification_group"),
    )

    logger.info(
        "Reduction %s%%: %d of %d positions affected, savings %.0f, "
        "%d critical impacted",
        pct, result.affected_count, result.pool_size,
        result.salary_savings, result.critical_impacted,
    )
    return result


class ReductionRanker:
    """Runs a reduction scenario for fixed parameters.

    Stateless apart from the parameters: every call ranks the positions it
    is given.
    """

    def __init__(self, params: ScenarioParameters):
        self.params = params

    def run(self, positions: Iterable[Position]) -> ScenarioResult:
        """Build the pool from *positions* and rank it."""
        pool = build_pool(positions, self.params)
        logger.debug(
            "Scenario pool: %d occupied positions (branch=%s)",
            len(pool), self.params.branch_code or "all",
        )
        return rank_for_reduction(pool, self.params.reduction_pct)
