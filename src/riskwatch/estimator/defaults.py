"""Fallback score structure and assembly of an asset's AI risk score."""

from datetime import datetime, timezone
from typing import Optional, Sequence

from riskwatch.common.constants import EstimatorConstants
from riskwatch.core.types import ScoreTrend
from riskwatch.data.schemas.asset import AIRiskScore, ScoreComponents, ScorePredictions
from riskwatch.data.schemas.mitigation import AppliedMitigation
from riskwatch.estimator.base import EstimatorResult
from riskwatch.scoring.mitigation import effective_score
from riskwatch.scoring.rounding import round_half_up


def default_estimate() -> EstimatorResult:
    """Conservative estimate used when the estimator cannot be reached."""
    return EstimatorResult(
        score=EstimatorConstants.DEFAULT_OVERALL,
        components=ScoreComponents(),
        trend=ScoreTrend.STABLE,
        confidence=EstimatorConstants.DEFAULT_CONFIDENCE,
        predictions=ScorePredictions(
            next_week=EstimatorConstants.DEFAULT_NEXT_WEEK,
            next_month=EstimatorConstants.DEFAULT_NEXT_MONTH,
        ),
    )


def derive_predictions(score: int, trend: ScoreTrend) -> ScorePredictions:
    """Predictions for an estimate that did not include any."""
    week_drift, month_drift = EstimatorConstants.PREDICTION_DRIFT[ScoreTrend(trend).value]
    return ScorePredictions(
        next_week=max(0, round_half_up(score * (1 + week_drift))),
        next_month=max(0, round_half_up(score * (1 + month_drift))),
    )


def assemble_ai_score(
    estimate: Optional[EstimatorResult],
    mitigations: Optional[Sequence[AppliedMitigation]] = None,
    now: Optional[datetime] = None,
) -> AIRiskScore:
    """Combine an estimate (or the default) with mitigations.

    Args:
        estimate: Estimator output; None means the estimator failed
        mitigations: Currently applied mitigations
        now: Timestamp for ``last_updated``

    Returns:
        AIRiskScore whose ``overall`` is the effective score and whose
        ``original_score`` is the estimate's base score
    """
    estimate = estimate or default_estimate()
    trend = estimate.trend or ScoreTrend.STABLE
    outcome = effective_score(estimate.score, mitigations)
    return AIRiskScore(
        overall=outcome.effective,
        original_score=outcome.base,
        total_risk_reduction=outcome.total_reduction,
        mitigation_applied=outcome.mitigated,
        components=estimate.components or ScoreComponents(),
        trend=trend,
        confidence=estimate.confidence,
        predictions=estimate.predictions or derive_predictions(estimate.score, trend),
        explanation=estimate.explanation,
        last_updated=now or datetime.now(timezone.utc),
    )


def reapply_mitigations(
    score: AIRiskScore,
    mitigations: Optional[Sequence[AppliedMitigation]],
) -> AIRiskScore:
    """Re-derive the effective score from the stored original and new mitigations.

    ``original_score`` is carried over untouched.
    """
    outcome = effective_score(score.original_score, mitigations)
    return score.model_copy(update={
        "overall": outcome.effective,
        "total_risk_reduction": outcome.total_reduction,
        "mitigation_applied": outcome.mitigated,
        "last_updated": datetime.now(timezone.utc),
    })
