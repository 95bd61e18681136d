"""Estimator coordination - bounded waits and last-request-wins.

Each request for a given key (normally an asset id, or a draft token
while an asset is being created) gets a generation number. When a
response arrives for a generation that is no longer the newest, it is
discarded rather than applied, even if it arrived first.

Estimator timeouts and errors of any kind are recoverable: the outcome
carries no estimate and the caller falls back to a default.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from riskwatch.common.constants import EstimatorConstants
from riskwatch.common.exceptions import EstimatorError
from riskwatch.data.schemas.asset import AssetSnapshot
from riskwatch.estimator.base import BaseScoreEstimator, EstimatorResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EstimateOutcome:
    """Result of one coordinated estimator call."""
    key: str
    generation: int
    estimate: Optional[EstimatorResult] = None
    superseded: bool = False
    failure_reason: Optional[str] = None

    @property
    def fell_back(self) -> bool:
        """True when the caller should use the default score."""
        return not self.superseded and self.estimate is None


class ScoringCoordinator:
    """Runs estimator calls with a timeout and discards stale responses."""

    def __init__(
        self,
        estimator: Optional[BaseScoreEstimator],
        timeout: float = EstimatorConstants.DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize the coordinator.

        Args:
            estimator: Score source; None means always use the default
            timeout: Maximum seconds to wait for one estimate
        """
        self.estimator = estimator
        self.timeout = timeout
        self._latest: Dict[str, int] = {}
        self._in_flight: Dict[str, int] = {}

    def latest_generation(self, key: str) -> Optional[int]:
        return self._latest.get(key)

    def _begin(self, key: str) -> int:
        generation = self._latest.get(key, 0) + 1
        self._latest[key] = generation
        self._in_flight[key] = self._in_flight.get(key, 0) + 1
        return generation

    def _finish(self, key: str, generation: int) -> bool:
        """Mark a request done; return True when it is still the newest."""
        current = self._latest.get(key) == generation
        remaining = self._in_flight.get(key, 1) - 1
        if remaining <= 0:
            self._in_flight.pop(key, None)
            self._latest.pop(key, None)
        else:
            self._in_flight[key] = remaining
        return current

    async def _call(self, snapshot: AssetSnapshot) -> EstimatorResult:
        if self.estimator is None:
            raise EstimatorError("No estimator configured", "none")
        return await asyncio.wait_for(self.estimator.estimate(snapshot), timeout=self.timeout)

    async def request(self, key: str, snapshot: AssetSnapshot) -> EstimateOutcome:
        """Request a base score for ``key``.

        Returns:
            EstimateOutcome. ``superseded`` is True when a newer request for
            the same key was issued while this one was pending; its
            estimate must not be applied.
        """
        generation = self._begin(key)
        estimate: Optional[EstimatorResult] = None
        failure: Optional[str] = None
        try:
            estimate = await self._call(snapshot)
        except asyncio.TimeoutError:
            failure = f"timed out after {self.timeout}s"
        except EstimatorError as e:
            failure = e.message
        except Exception as e:
            logger.exception(f"Unexpected estimator error for {key}")
            failure = f"{type(e).__name__}: {e}"
        finally:
            is_current = self._finish(key, generation)

        if not is_current:
            logger.debug(f"Discarding superseded estimate for {key} (generation {generation})")
            return EstimateOutcome(key=key, generation=generation, superseded=True)

        if failure is not None:
            logger.warning(f"Estimator failed for {key}, using default score: {failure}")
        return EstimateOutcome(
            key=key,
            generation=generation,
            estimate=estimate,
            failure_reason=failure,
        )
