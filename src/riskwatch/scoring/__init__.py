"""Scoring - severity classification, risk matrix and mitigation aggregation."""

from riskwatch.scoring.classifier import (
    ScoreClassification,
    classify,
    classify_level,
    level_bounds,
    level_filter_options,
    status_bucket,
)
from riskwatch.scoring.risk_matrix import SEVERITY_RANKS, matrix_score, severity_rank
from riskwatch.scoring.rounding import round_half_up
from riskwatch.scoring.mitigation import (
    EffectiveScore,
    duplicate_mitigation_ids,
    effective_score,
    total_reduction,
)

__all__ = [
    "ScoreClassification",
    "classify",
    "classify_level",
    "level_bounds",
    "level_filter_options",
    "status_bucket",
    "SEVERITY_RANKS",
    "matrix_score",
    "severity_rank",
    "EffectiveScore",
    "duplicate_mitigation_ids",
    "effective_score",
    "total_reduction",
    "round_half_up",
]
