"""Tests for the HTTP estimator client."""

import json

import httpx
import pytest

from riskwatch.common.exceptions import EstimatorError
from riskwatch.core.types import ScoreTrend
from riskwatch.estimator.http_estimator import HttpScoreEstimator


def _estimator(handler) -> HttpScoreEstimator:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpScoreEstimator(url="https://scoring.test/v1/score", api_key="secret", client=client)


class TestHttpScoreEstimator:

    @pytest.mark.asyncio
    async def test_parses_score(self, asset_draft):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "score": 42,
                "trend": "deteriorating",
                "confidence": 77,
                "explanation": "Perimeter camera coverage below target",
            })

        estimator = _estimator(handler)
        result = await estimator.estimate(asset_draft.snapshot())

        assert result.score == 42
        assert result.trend == ScoreTrend.DETERIORATING
        assert result.components is None
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["type"] == "data-center"
        assert seen["body"]["location"]["city"] == "Dublin"

    @pytest.mark.asyncio
    async def test_http_error_raises_estimator_error(self, asset_draft):
        estimator = _estimator(lambda request: httpx.Response(503, json={"error": "busy"}))
        with pytest.raises(EstimatorError) as exc_info:
            await estimator.estimate(asset_draft.snapshot())
        assert exc_info.value.details["status_code"] == 503

    @pytest.mark.asyncio
    async def test_malformed_body_raises_estimator_error(self, asset_draft):
        estimator = _estimator(lambda request: httpx.Response(200, json={"score": "high"}))
        with pytest.raises(EstimatorError):
            await estimator.estimate(asset_draft.snapshot())

    @pytest.mark.asyncio
    async def test_invalid_json_raises_estimator_error(self, asset_draft):
        estimator = _estimator(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(EstimatorError):
            await estimator.estimate(asset_draft.snapshot())

    @pytest.mark.asyncio
    async def test_transport_error_raises_estimator_error(self, asset_draft):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(EstimatorError):
            await _estimator(handler).estimate(asset_draft.snapshot())
