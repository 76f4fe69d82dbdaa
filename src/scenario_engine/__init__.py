from src.scenario_engine.models import ScenarioParameters, ScenarioResult
from src.scenario_engine.reduction_ranker import (
    ReductionRanker,
    build_pool,
    priority_tier,
    rank_for_reduction,
)

__all__ = [
    "ReductionRanker",
    "ScenarioParameters",
    "ScenarioResult",
    "build_pool",
    "priority_tier",
    "rank_for_reduction",
]
