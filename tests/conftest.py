"""Shared fixtures for RiskWatch tests."""

import pytest

from riskwatch.common.config import reset_config
from riskwatch.core.types import AssetType, EntityKind
from riskwatch.data.schemas.asset import Asset, AssetDraft, Location, ResponsibleOfficer
from riskwatch.data.schemas.risk import Risk
from riskwatch.estimator.coordinator import ScoringCoordinator
from riskwatch.governance.audit import AuditContext, AuditEmitter, CollectingSink
from riskwatch.storage.store import InMemoryRecordStore

from fixtures.records import StaticEstimator


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Every test starts from a clean, file-free configuration."""
    for name in (
        "RISKWATCH_ENVIRONMENT",
        "RISKWATCH_ESTIMATOR_URL",
        "RISKWATCH_DUPLICATE_MITIGATIONS",
        "RISKWATCH_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RISKWATCH_AUDIT_STORAGE_TYPE", "memory")
    monkeypatch.setenv("RISKWATCH_AUDIT_LOG_DIR", str(tmp_path / "audit"))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def context() -> AuditContext:
    return AuditContext(
        actor_id="user_123",
        organization_id="org_acme",
        department="Finance",
        user_agent="pytest",
    )


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def emitter(sink) -> AuditEmitter:
    return AuditEmitter(sink)


@pytest.fixture
def risk_store() -> InMemoryRecordStore:
    return InMemoryRecordStore(Risk, EntityKind.RISK.value)


@pytest.fixture
def asset_store() -> InMemoryRecordStore:
    return InMemoryRecordStore(Asset, EntityKind.ASSET.value)


@pytest.fixture
def estimator() -> StaticEstimator:
    return StaticEstimator(score=40)


@pytest.fixture
def coordinator(estimator) -> ScoringCoordinator:
    return ScoringCoordinator(estimator, timeout=1.0)


@pytest.fixture
def asset_draft() -> AssetDraft:
    return AssetDraft(
        name="Data Center East",
        type=AssetType.DATA_CENTER,
        location=Location(address="9 Harbour Rd", city="Dublin", country="Ireland"),
        responsible_officer=ResponsibleOfficer(name="Sam Okafor", email="sam@example.com"),
    )
