"""Data schemas - canonical Pydantic definitions."""

from riskwatch.data.schemas.mitigation import AppliedMitigation
from riskwatch.data.schemas.risk import Risk, RiskDraft, RiskUpdate
from riskwatch.data.schemas.asset import (
    AIRiskScore,
    Asset,
    AssetDraft,
    AssetSnapshot,
    ComplianceRecord,
    IncidentSummary,
    Location,
    Personnel,
    ResponsibleOfficer,
    ScoreComponents,
    ScorePredictions,
    SecuritySystemState,
    SecuritySystems,
)

__all__ = [
    "AppliedMitigation",
    "Risk",
    "RiskDraft",
    "RiskUpdate",
    "AIRiskScore",
    "Asset",
    "AssetDraft",
    "AssetSnapshot",
    "ComplianceRecord",
    "IncidentSummary",
    "Location",
    "Personnel",
    "ResponsibleOfficer",
    "ScoreComponents",
    "ScorePredictions",
    "SecuritySystemState",
    "SecuritySystems",
]
