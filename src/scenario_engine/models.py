"""Data models for the reduction scenario engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.org_hierarchy.models import Position
from src.scenario_engine.config import DEFAULT_REDUCTION_PCT


@dataclass(frozen=True)
class ScenarioParameters:
    """Reduction target and optional branch restriction."""

    reduction_pct: float = DEFAULT_REDUCTION_PCT
    branch_code: Optional[str] = None


@dataclass
class ScenarioResult:
    """Positions selected for a reduction scenario, in removal order."""

    affected: List[Position]
    pool_size: int
    reduction_pct: float
    salary_savings: float
    critical_impacted: int
    indeterminate_impacted: int
    by_branch: Dict[str, int] = field(default_factory=dict)
    by_classification_group: Dict[str, int] = field(default_factory=dict)

    @property
    def affected_count(self) -> int:
        return len(self.affected)
