"""Core types."""

from riskwatch.core.types import (
    AssetStatus,
    AssetType,
    AuditAction,
    DisplayBucket,
    EntityKind,
    IncidentSeverity,
    RiskCategory,
    RiskLevel,
    RiskStatus,
    ScoreTrend,
    SecuritySubsystem,
    Severity,
    SortDirection,
    SubsystemStatus,
    display_label,
)

__all__ = [
    "AssetStatus",
    "AssetType",
    "AuditAction",
    "DisplayBucket",
    "EntityKind",
    "IncidentSeverity",
    "RiskCategory",
    "RiskLevel",
    "RiskStatus",
    "ScoreTrend",
    "SecuritySubsystem",
    "Severity",
    "SortDirection",
    "SubsystemStatus",
    "display_label",
]
