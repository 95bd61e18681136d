"""Base-score estimator contract."""

from abc import ABC, abstractmethod
from typing import Optional
from pydantic import BaseModel, Field

from riskwatch.core.types import ScoreTrend
from riskwatch.data.schemas.asset import AssetSnapshot, ScoreComponents, ScorePredictions


class EstimatorResult(BaseModel):
    """What an estimator returns for an asset snapshot.

    Components, trend and predictions are optional; missing pieces are
    filled from defaults when the asset score is assembled.
    """
    score: int = Field(..., ge=0, description="Base risk score")
    components: Optional[ScoreComponents] = Field(default=None)
    trend: Optional[ScoreTrend] = Field(default=None)
    confidence: int = Field(..., ge=0, le=100, description="Confidence percentage")
    predictions: Optional[ScorePredictions] = Field(default=None)
    explanation: Optional[str] = Field(default=None)


class BaseScoreEstimator(ABC):
    """Abstract source of asset base scores.

    Implementations may be slow or fail; they must raise
    ``EstimatorError`` rather than return partial results.
    """

    name: str = "estimator"

    @abstractmethod
    async def estimate(self, snapshot: AssetSnapshot) -> EstimatorResult:
        """Estimate the base risk score of an asset.

        Args:
            snapshot: Asset attributes relevant to scoring

        Returns:
            EstimatorResult

        Raises:
            EstimatorError: On timeout, transport failure or malformed reply
        """
        pass

    async def aclose(self) -> None:
        """Release any held resources."""
        return None
