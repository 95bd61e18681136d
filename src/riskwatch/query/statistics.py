"""Collection statistics for list views.

Statistics are always computed over the full collection, never the
filtered view, in a single pass.
"""

from typing import Dict, Iterable, TypeVar
from pydantic import BaseModel, Field

from riskwatch.core.types import RiskLevel
from riskwatch.scoring.rounding import round_half_up
from riskwatch.query.accessors import EntityAccessor
from riskwatch.scoring.classifier import classify_level

T = TypeVar("T")


class CollectionStats(BaseModel):
    """Summary of a risk or asset collection."""
    total: int = Field(default=0, ge=0)
    low: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    high: int = Field(default=0, ge=0)
    critical: int = Field(default=0, ge=0)
    open: int = Field(default=0, ge=0, description="Records still needing attention")
    average_score: int = Field(default=0, ge=0, description="Mean score, rounded half up; 0 when empty")
    by_status: Dict[str, int] = Field(default_factory=dict)

    def level_counts(self) -> Dict[RiskLevel, int]:
        return {
            RiskLevel.LOW: self.low,
            RiskLevel.MEDIUM: self.medium,
            RiskLevel.HIGH: self.high,
            RiskLevel.CRITICAL: self.critical,
        }

    def level_count(self, level: RiskLevel) -> int:
        return self.level_counts()[RiskLevel(level)]


def compute_statistics(records: Iterable[T], accessor: EntityAccessor[T]) -> CollectionStats:
    """Totals, per-band counts, open count, per-status counts and mean score."""
    total = 0
    score_sum = 0
    open_count = 0
    levels: Dict[RiskLevel, int] = {level: 0 for level in RiskLevel}
    by_status: Dict[str, int] = {}

    for record in records:
        score = accessor.score(record)
        total += 1
        score_sum += score
        levels[classify_level(score)] += 1
        if accessor.is_open(record):
            open_count += 1
        status = accessor.status(record)
        by_status[status] = by_status.get(status, 0) + 1

    return CollectionStats(
        total=total,
        low=levels[RiskLevel.LOW],
        medium=levels[RiskLevel.MEDIUM],
        high=levels[RiskLevel.HIGH],
        critical=levels[RiskLevel.CRITICAL],
        open=open_count,
        average_score=round_half_up(score_sum / total) if total else 0,
        by_status=by_status,
    )
