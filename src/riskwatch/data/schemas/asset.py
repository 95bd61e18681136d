"""Asset schemas - canonical definitions."""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple, Union
from pydantic import BaseModel, Field, field_validator, model_validator

from riskwatch.common.constants import AssetConstants, EstimatorConstants
from riskwatch.core.types import (
    AssetStatus,
    AssetType,
    IncidentSeverity,
    RiskLevel,
    ScoreTrend,
    SecuritySubsystem,
    SubsystemStatus,
)
from riskwatch.data.schemas.mitigation import AppliedMitigation
from riskwatch.scoring.classifier import classify_level


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _next_audit() -> date:
    return date.today() + timedelta(days=AssetConstants.NEXT_AUDIT_DAYS)


class Location(BaseModel):
    """Where an asset is."""
    address: str = Field(default="")
    city: str = Field(default="")
    country: str = Field(default="")
    coordinates: Tuple[float, float] = Field(default=(0.0, 0.0), description="(latitude, longitude)")


class Personnel(BaseModel):
    """Occupancy of an asset.

    ``authorized`` has set semantics; duplicates are dropped keeping the
    first occurrence.
    """
    current: int = Field(default=0, ge=0)
    capacity: int = Field(default=0, ge=0)
    authorized: List[str] = Field(default_factory=list, description="Authorized personnel ids")

    @field_validator("authorized")
    @classmethod
    def unique_ids(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class SecuritySystemState(BaseModel):
    """State of one security subsystem plus its coverage/count metric."""
    status: SubsystemStatus = Field(default=SubsystemStatus.ONLINE)
    metric: str = Field(..., description="What ``value`` measures, e.g. coverage or zones")
    value: int = Field(default=0, ge=0)


class SecuritySystems(BaseModel):
    cctv: SecuritySystemState = Field(
        default_factory=lambda: SecuritySystemState(metric="coverage", value=90)
    )
    access_control: SecuritySystemState = Field(
        default_factory=lambda: SecuritySystemState(metric="zones", value=5)
    )
    alarms: SecuritySystemState = Field(
        default_factory=lambda: SecuritySystemState(metric="sensors", value=20)
    )
    fire_suppression: SecuritySystemState = Field(
        default_factory=lambda: SecuritySystemState(metric="coverage", value=100)
    )
    network_security: SecuritySystemState = Field(
        default_factory=lambda: SecuritySystemState(metric="threats", value=0)
    )

    def state(self, subsystem: SecuritySubsystem) -> SecuritySystemState:
        return {
            SecuritySubsystem.CCTV: self.cctv,
            SecuritySubsystem.ACCESS_CONTROL: self.access_control,
            SecuritySubsystem.ALARMS: self.alarms,
            SecuritySubsystem.FIRE_SUPPRESSION: self.fire_suppression,
            SecuritySubsystem.NETWORK_SECURITY: self.network_security,
        }[SecuritySubsystem(subsystem)]

    def with_state(self, subsystem: SecuritySubsystem, state: SecuritySystemState) -> "SecuritySystems":
        """Copy with one subsystem replaced."""
        field_name = {
            SecuritySubsystem.CCTV: "cctv",
            SecuritySubsystem.ACCESS_CONTROL: "access_control",
            SecuritySubsystem.ALARMS: "alarms",
            SecuritySubsystem.FIRE_SUPPRESSION: "fire_suppression",
            SecuritySubsystem.NETWORK_SECURITY: "network_security",
        }[SecuritySubsystem(subsystem)]
        return self.model_copy(update={field_name: state})


class ComplianceRecord(BaseModel):
    last_audit: date = Field(default_factory=date.today)
    next_audit: date = Field(default_factory=_next_audit)
    score: int = Field(default=AssetConstants.DEFAULT_COMPLIANCE_SCORE, ge=0, le=100)
    issues: List[str] = Field(default_factory=list, description="Open compliance issues")


class IncidentSummary(BaseModel):
    total: int = Field(default=0, ge=0)
    last_incident: str = Field(default=AssetConstants.DEFAULT_LAST_INCIDENT)
    severity: IncidentSeverity = Field(default=IncidentSeverity.LOW)


class ResponsibleOfficer(BaseModel):
    name: str = Field(default="")
    email: str = Field(default="")
    phone: str = Field(default="")
    department: str = Field(default="")


class ScoreComponents(BaseModel):
    """Independently scored components of the AI risk score."""
    physical_security: int = Field(default=EstimatorConstants.DEFAULT_COMPONENTS["physical_security"], ge=0)
    cyber_security: int = Field(default=EstimatorConstants.DEFAULT_COMPONENTS["cyber_security"], ge=0)
    access_control: int = Field(default=EstimatorConstants.DEFAULT_COMPONENTS["access_control"], ge=0)
    environmental_risk: int = Field(default=EstimatorConstants.DEFAULT_COMPONENTS["environmental_risk"], ge=0)
    personnel_risk: int = Field(default=EstimatorConstants.DEFAULT_COMPONENTS["personnel_risk"], ge=0)


class ScorePredictions(BaseModel):
    next_week: int = Field(default=EstimatorConstants.DEFAULT_NEXT_WEEK, ge=0)
    next_month: int = Field(default=EstimatorConstants.DEFAULT_NEXT_MONTH, ge=0)


class AIRiskScore(BaseModel):
    """Composite AI risk score owned by an asset.

    ``overall`` is the effective score. ``original_score`` is the base the
    estimator produced and ``total_risk_reduction`` the summed mitigation
    reductions; both are kept for explainability.
    """
    overall: int = Field(..., ge=0, description="Effective score after mitigations")
    original_score: int = Field(..., ge=0, description="Base score before mitigations")
    total_risk_reduction: int = Field(default=0, ge=0)
    mitigation_applied: bool = Field(default=False)
    components: ScoreComponents = Field(default_factory=ScoreComponents)
    trend: ScoreTrend = Field(default=ScoreTrend.STABLE)
    confidence: int = Field(default=EstimatorConstants.DEFAULT_CONFIDENCE, ge=0, le=100)
    predictions: ScorePredictions = Field(default_factory=ScorePredictions)
    explanation: Optional[str] = Field(default=None)
    last_updated: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def effective_is_derived(self) -> "AIRiskScore":
        expected = max(0, self.original_score - self.total_risk_reduction)
        if self.overall != expected:
            raise ValueError(
                f"overall {self.overall} does not equal max(0, "
                f"{self.original_score} - {self.total_risk_reduction})"
            )
        if self.mitigation_applied != (self.total_risk_reduction > 0):
            raise ValueError("mitigation_applied must reflect total_risk_reduction > 0")
        return self


class AssetSnapshot(BaseModel):
    """Attributes sent to the base-score estimator."""
    type: AssetType
    location: Location
    status: AssetStatus
    personnel_current: int = Field(default=0, ge=0)
    personnel_capacity: int = Field(default=0, ge=0)
    security_systems: SecuritySystems
    compliance: ComplianceRecord
    incidents: IncidentSummary

    @classmethod
    def of(cls, record: "Union[AssetDraft, Asset]") -> "AssetSnapshot":
        return cls(
            type=record.type,
            location=record.location,
            status=record.status,
            personnel_current=record.personnel.current,
            personnel_capacity=record.personnel.capacity,
            security_systems=record.security_systems,
            compliance=record.compliance,
            incidents=record.incidents,
        )


class AssetDraft(BaseModel):
    """User-supplied fields for creating an asset.

    Required-field checks (name, city, country, officer name) happen in the
    validators, so a half-filled draft can still be constructed.
    """
    name: str = Field(default="")
    type: AssetType = Field(default=AssetType.BUILDING)
    location: Location = Field(default_factory=Location)
    status: AssetStatus = Field(default=AssetStatus.SECURE)
    personnel: Personnel = Field(default_factory=Personnel)
    security_systems: SecuritySystems = Field(default_factory=SecuritySystems)
    compliance: ComplianceRecord = Field(default_factory=ComplianceRecord)
    incidents: IncidentSummary = Field(default_factory=IncidentSummary)
    responsible_officer: ResponsibleOfficer = Field(default_factory=ResponsibleOfficer)
    mitigations: List[AppliedMitigation] = Field(default_factory=list)

    def snapshot(self) -> AssetSnapshot:
        return AssetSnapshot.of(self)


class Asset(BaseModel):
    """Asset entity schema.

    ``mitigations`` is None until mitigations have been evaluated; an
    empty list means evaluated with none applied.
    """
    id: str = Field(..., description="Store-assigned identifier")
    organization_id: Optional[str] = Field(default=None)
    name: str = Field(..., min_length=1)
    type: AssetType
    location: Location
    status: AssetStatus = Field(default=AssetStatus.SECURE)
    personnel: Personnel = Field(default_factory=Personnel)
    ai_risk_score: AIRiskScore
    security_systems: SecuritySystems = Field(default_factory=SecuritySystems)
    compliance: ComplianceRecord = Field(default_factory=ComplianceRecord)
    incidents: IncidentSummary = Field(default_factory=IncidentSummary)
    responsible_officer: ResponsibleOfficer
    mitigations: Optional[List[AppliedMitigation]] = Field(default=None)
    created_at: Optional[datetime] = Field(default=None)

    @model_validator(mode="after")
    def reduction_matches_mitigations(self) -> "Asset":
        reduction = sum(m.applied_risk_reduction_score for m in self.mitigations or ())
        if reduction != self.ai_risk_score.total_risk_reduction:
            raise ValueError(
                f"total_risk_reduction {self.ai_risk_score.total_risk_reduction} "
                f"does not match applied mitigations ({reduction})"
            )
        return self

    @property
    def overall_score(self) -> int:
        return self.ai_risk_score.overall

    @property
    def level(self) -> RiskLevel:
        return classify_level(self.ai_risk_score.overall)

    def snapshot(self) -> AssetSnapshot:
        return AssetSnapshot.of(self)

    def audit_snapshot(self) -> dict:
        return {
            "name": self.name,
            "type": self.type.value,
            "status": self.status.value,
            "overall_score": self.ai_risk_score.overall,
            "original_score": self.ai_risk_score.original_score,
            "mitigation_count": len(self.mitigations or ()),
        }
