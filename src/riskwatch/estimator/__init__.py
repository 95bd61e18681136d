"""Base-score estimator - interface, HTTP client and coordination."""

from riskwatch.estimator.base import BaseScoreEstimator, EstimatorResult
from riskwatch.estimator.coordinator import EstimateOutcome, ScoringCoordinator
from riskwatch.estimator.defaults import (
    assemble_ai_score,
    default_estimate,
    derive_predictions,
    reapply_mitigations,
)

__all__ = [
    "BaseScoreEstimator",
    "EstimatorResult",
    "EstimateOutcome",
    "ScoringCoordinator",
    "assemble_ai_score",
    "default_estimate",
    "derive_predictions",
    "reapply_mitigations",
]
