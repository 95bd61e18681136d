"""Service container - wires stores, estimator, audit writer and services.

The API layer talks only to this container. Audit writes go through a
background writer so a slow or failing audit store never delays or
fails a request.
"""

import logging
from typing import Optional

from riskwatch.common.config import Config, get_config
from riskwatch.core.types import EntityKind
from riskwatch.data.schemas.asset import Asset
from riskwatch.data.schemas.risk import Risk
from riskwatch.estimator.base import BaseScoreEstimator
from riskwatch.estimator.coordinator import ScoringCoordinator
from riskwatch.governance.audit import (
    AuditEmitter,
    AuditStore,
    BackgroundAuditWriter,
    create_audit_writer,
)
from riskwatch.services.asset_service import AssetService
from riskwatch.services.risk_service import RiskService
from riskwatch.storage.store import InMemoryRecordStore, RecordStore

logger = logging.getLogger(__name__)


def create_estimator(config: Config) -> Optional[BaseScoreEstimator]:
    """HTTP estimator when a URL is configured, otherwise None (default scores)."""
    if not config.estimator_url:
        logger.warning("RISKWATCH_ESTIMATOR_URL not set, assets get the default score")
        return None

    from riskwatch.estimator.http_estimator import HttpScoreEstimator

    return HttpScoreEstimator(
        url=config.estimator_url,
        api_key=config.estimator_api_key,
        timeout=config.estimator_timeout_seconds,
    )


class RiskWatchServices:
    """Everything a request handler needs.

    Stores and collaborators can be injected; anything not given is
    built from configuration.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        risk_store: Optional[RecordStore[Risk]] = None,
        asset_store: Optional[RecordStore[Asset]] = None,
        audit_store: Optional[AuditStore] = None,
        audit_writer: Optional[BackgroundAuditWriter] = None,
        estimator: Optional[BaseScoreEstimator] = None,
    ):
        self.config = config or get_config()
        if risk_store is None:
            risk_store = InMemoryRecordStore(Risk, EntityKind.RISK.value)
        if asset_store is None:
            asset_store = InMemoryRecordStore(Asset, EntityKind.ASSET.value)
        if audit_writer is None:
            audit_writer = create_audit_writer(store=audit_store, config=self.config)
        self.risk_store = risk_store
        self.asset_store = asset_store
        self.audit_writer = audit_writer
        self.estimator = estimator if estimator is not None else create_estimator(self.config)

        self.emitter = AuditEmitter(self.audit_writer)
        self.coordinator = ScoringCoordinator(
            self.estimator, timeout=self.config.estimator_timeout_seconds
        )
        self.risks = RiskService(self.risk_store, self.emitter)
        self.assets = AssetService(
            self.asset_store,
            self.emitter,
            self.coordinator,
            duplicate_policy=self.config.duplicate_mitigation_policy,
        )

    def start(self) -> None:
        """Start background work. Must run inside the event loop."""
        self.audit_writer.start()

    async def shutdown(self) -> None:
        """Flush pending audit events and close the estimator client."""
        await self.audit_writer.shutdown()
        if self.estimator is not None:
            await self.estimator.aclose()
        logger.info("RiskWatch services shutdown complete")
