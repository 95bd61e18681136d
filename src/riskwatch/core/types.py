"""Core types and enums."""

from enum import Enum


class RiskLevel(str, Enum):
    """Severity bands derived from a numeric score."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class DisplayBucket(str, Enum):
    """Colour tokens used by presentation code."""
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    BLUE = "blue"
    PURPLE = "purple"
    GRAY = "gray"


class Severity(str, Enum):
    """Shared scale for risk impact and likelihood."""
    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class RiskCategory(str, Enum):
    OPERATIONAL = "operational"
    FINANCIAL = "financial"
    STRATEGIC = "strategic"
    COMPLIANCE = "compliance"
    SECURITY = "security"
    TECHNICAL = "technical"
    ENVIRONMENTAL = "environmental"
    REPUTATIONAL = "reputational"


class RiskStatus(str, Enum):
    """Risk lifecycle states."""
    IDENTIFIED = "identified"
    ASSESSED = "assessed"
    MITIGATED = "mitigated"
    MONITORING = "monitoring"
    CLOSED = "closed"


class AssetType(str, Enum):
    BUILDING = "building"
    FACILITY = "facility"
    VEHICLE = "vehicle"
    EQUIPMENT = "equipment"
    DATA_CENTER = "data-center"
    EMBASSY = "embassy"


class AssetStatus(str, Enum):
    SECURE = "secure"
    ALERT = "alert"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"
    COMPROMISED = "compromised"


class SubsystemStatus(str, Enum):
    """State of an asset security subsystem."""
    ONLINE = "online"
    OFFLINE = "offline"
    DEGRADED = "degraded"


class SecuritySubsystem(str, Enum):
    CCTV = "cctv"
    ACCESS_CONTROL = "access_control"
    ALARMS = "alarms"
    FIRE_SUPPRESSION = "fire_suppression"
    NETWORK_SECURITY = "network_security"


class IncidentSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ScoreTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DETERIORATING = "deteriorating"


class EntityKind(str, Enum):
    """Record kinds held by the record store."""
    RISK = "risk"
    ASSET = "asset"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.ASC if self is SortDirection.DESC else SortDirection.DESC


class AuditAction(str, Enum):
    """Audit action tags for mutating operations."""
    RISK_CREATED = "risk_created"
    RISK_UPDATED = "risk_updated"
    RISK_DELETED = "risk_deleted"
    ASSET_CREATED = "asset_created"
    ASSET_UPDATED = "asset_updated"
    ASSET_DELETED = "asset_deleted"


def display_label(value: str) -> str:
    """Render an enum value for display, e.g. ``very_high`` -> ``Very high``."""
    return value.replace("_", " ").replace("-", " ").capitalize()
