"""HTTP client for the AI base-score estimation service."""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from riskwatch.common.exceptions import EstimatorError
from riskwatch.data.schemas.asset import AssetSnapshot
from riskwatch.estimator.base import BaseScoreEstimator, EstimatorResult

logger = logging.getLogger(__name__)


class HttpScoreEstimator(BaseScoreEstimator):
    """Posts asset snapshots to a remote scoring endpoint.

    No retries are attempted here: the caller bounds the wait and falls
    back to a default score, so a retry loop would only delay that.
    """

    name = "http_estimator"

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the estimator client.

        Args:
            url: Scoring endpoint accepting a JSON asset snapshot
            api_key: Bearer token sent in the Authorization header
            timeout: Transport-level timeout in seconds
            client: Pre-built client (tests inject a MockTransport here)
        """
        self.url = url
        self.api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def estimate(self, snapshot: AssetSnapshot) -> EstimatorResult:
        payload = snapshot.model_dump(mode="json")
        try:
            response = await self._client.post(self.url, json=payload, headers=self._headers())
            response.raise_for_status()
            body: Any = response.json()
        except httpx.TimeoutException as e:
            raise EstimatorError("Estimator request timed out", self.name) from e
        except httpx.HTTPStatusError as e:
            raise EstimatorError(
                f"Estimator returned HTTP {e.response.status_code}",
                self.name,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            raise EstimatorError(f"Estimator unreachable: {e}", self.name) from e
        except ValueError as e:
            raise EstimatorError("Estimator returned invalid JSON", self.name) from e

        try:
            result = EstimatorResult.model_validate(body)
        except PydanticValidationError as e:
            raise EstimatorError(
                "Estimator returned a malformed score",
                self.name,
                details={"errors": e.error_count()},
            ) from e

        logger.debug(f"Estimator scored {snapshot.type.value} asset at {result.score}")
        return result

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
