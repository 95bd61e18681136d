"""Integration tests for RiskWatch.

End-to-end tests that run the services against in-memory stores, the
background audit writer and a file-backed audit log.
"""

import pytest

from riskwatch.common.exceptions import AuditError
from riskwatch.core.types import AuditAction, RiskLevel
from riskwatch.api.service import RiskWatchServices
from riskwatch.governance.audit import (
    BackgroundAuditWriter,
    FileAuditStore,
    InMemoryAuditStore,
)
from riskwatch.services import asset_dashboard_view, risk_register_view

from fixtures.records import StaticEstimator, mitigation


class FailingAuditStore(InMemoryAuditStore):
    """Audit store whose writes always fail."""

    def __init__(self):
        super().__init__()
        self.attempts = 0

    async def append_event(self, event):
        self.attempts += 1
        raise AuditError("audit bucket unreachable")


def _writer(store) -> BackgroundAuditWriter:
    return BackgroundAuditWriter(store=store, retry_attempts=2, retry_min_wait=0, retry_max_wait=0)


RISK = {
    "title": "Vendor outage",
    "description": "Primary payment vendor unavailable",
    "category": "operational",
    "impact": "high",
    "likelihood": "medium",
}


class TestRiskRegisterFlow:

    @pytest.mark.asyncio
    async def test_create_classify_and_delete_with_audit_log(self, tmp_path, context):
        audit_store = FileAuditStore(log_dir=str(tmp_path / "audit"))
        services = RiskWatchServices(audit_writer=_writer(audit_store), estimator=StaticEstimator())
        services.start()

        risk = await services.risks.create_risk(RISK, context)
        assert risk.risk_score == 12
        assert risk.level == RiskLevel.MEDIUM

        view = risk_register_view(services.risks.list_risks)
        await view.load()
        view.select(risk.id)

        snapshot = await services.risks.delete_risk(risk.id, context, confirmed=True)
        view.record_deleted(snapshot.id)
        assert view.selected_id is None
        assert await services.risks.list_risks() == []

        await services.shutdown()

        deleted = list(audit_store.get_events(action=AuditAction.RISK_DELETED))
        assert len(deleted) == 1
        assert deleted[0].resource_id == risk.id
        assert deleted[0].details["risk_details"]["title"] == "Vendor outage"
        assert audit_store.verify_integrity() is True

    @pytest.mark.asyncio
    async def test_audit_failure_does_not_block_delete(self, context):
        audit_store = FailingAuditStore()
        writer = _writer(audit_store)
        services = RiskWatchServices(audit_writer=writer, estimator=StaticEstimator())
        services.start()

        risk = await services.risks.create_risk(RISK, context)
        await services.risks.delete_risk(risk.id, context, confirmed=True)

        assert await services.risks.list_risks() == []

        await services.shutdown()
        stats = writer.get_stats()
        assert stats["events_written"] == 0
        assert stats["events_dropped"] == 2
        assert audit_store.attempts == 4


class TestAssetFlow:

    @pytest.mark.asyncio
    async def test_score_mitigate_and_rescore(self, context, asset_draft):
        audit_store = InMemoryAuditStore()
        estimator = StaticEstimator(score=40)
        services = RiskWatchServices(audit_writer=_writer(audit_store), estimator=estimator)
        services.start()

        asset = await services.assets.create_asset(asset_draft, context)
        assert asset.mitigations is None
        assert asset.ai_risk_score.overall == 40

        asset = await services.assets.update_mitigations(
            asset.id,
            [mitigation("m1", 15), mitigation("m2", 10)],
            context,
        )
        assert (asset.ai_risk_score.overall, asset.ai_risk_score.total_risk_reduction) == (15, 25)
        assert asset.ai_risk_score.mitigation_applied is True

        estimator.score = 10
        asset = await services.assets.update_mitigations(
            asset.id, [mitigation("m3", 30)], context
        )
        asset = await services.assets.rescore_asset(asset.id, context)
        assert asset.ai_risk_score.overall == 0
        assert asset.ai_risk_score.total_risk_reduction == 30

        view = asset_dashboard_view(services.assets.list_assets)
        await view.load()
        assert view.render().stats.total == 1

        await services.shutdown()
        assert [e.action for e in audit_store.events] == [
            AuditAction.ASSET_CREATED,
            AuditAction.ASSET_UPDATED,
            AuditAction.ASSET_UPDATED,
            AuditAction.ASSET_UPDATED,
        ]

    @pytest.mark.asyncio
    async def test_no_estimator_uses_default_score(self, context, asset_draft):
        services = RiskWatchServices(audit_writer=_writer(InMemoryAuditStore()))
        services.start()

        asset = await services.assets.create_asset(asset_draft, context)
        assert asset.ai_risk_score.overall == 25
        assert asset.ai_risk_score.confidence == 85
        await services.shutdown()
