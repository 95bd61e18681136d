"""Risk schemas - canonical definitions."""

from datetime import date, datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from riskwatch.core.types import RiskCategory, RiskLevel, RiskStatus, Severity
from riskwatch.scoring.classifier import classify_level
from riskwatch.scoring.risk_matrix import matrix_score


class RiskDraft(BaseModel):
    """User-supplied fields for creating a risk.

    ``risk_score`` is not accepted here; it is derived from impact and
    likelihood when the record is written.
    """
    title: str = Field(..., min_length=1, description="Short risk title")
    description: str = Field(default="", description="Risk description")
    category: RiskCategory = Field(..., description="Risk category")
    impact: Severity = Field(..., description="Impact if the risk materialises")
    likelihood: Severity = Field(..., description="Likelihood of the risk materialising")
    status: RiskStatus = Field(default=RiskStatus.IDENTIFIED)
    owner_id: Optional[str] = Field(default=None, description="Owning user; defaults to the actor")
    department: Optional[str] = Field(default=None)
    due_date: Optional[date] = Field(default=None)
    mitigation_plan: Optional[str] = Field(default=None)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value

    @property
    def risk_score(self) -> int:
        return matrix_score(self.impact, self.likelihood)


class RiskUpdate(BaseModel):
    """Partial update of a risk. Unset fields are left unchanged."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[RiskCategory] = None
    impact: Optional[Severity] = None
    likelihood: Optional[Severity] = None
    status: Optional[RiskStatus] = None
    owner_id: Optional[str] = None
    department: Optional[str] = None
    due_date: Optional[date] = None
    mitigation_plan: Optional[str] = None

    @field_validator("title", "category", "impact", "likelihood", "status")
    @classmethod
    def not_cleared(cls, value: Any, info: ValidationInfo) -> Any:
        # Runs only for supplied fields, so omitted ones stay unset
        if value is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return value

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True)


class Risk(BaseModel):
    """Risk entity schema.

    ``risk_score`` must equal impact rank x likelihood rank. The level is
    computed from the score on access and never stored.
    """
    id: str = Field(..., description="Store-assigned identifier")
    organization_id: Optional[str] = Field(default=None, description="Owning organization")
    title: str = Field(..., min_length=1)
    description: str = Field(default="")
    category: RiskCategory
    impact: Severity
    likelihood: Severity
    risk_score: int = Field(..., ge=1, le=25)
    status: RiskStatus = Field(default=RiskStatus.IDENTIFIED)
    owner_id: Optional[str] = None
    identified_by: Optional[str] = None
    department: Optional[str] = None
    due_date: Optional[date] = None
    mitigation_plan: Optional[str] = None
    last_reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = Field(default=None, description="Server-assigned creation time")

    @model_validator(mode="after")
    def score_matches_matrix(self) -> "Risk":
        expected = matrix_score(self.impact, self.likelihood)
        if self.risk_score != expected:
            raise ValueError(
                f"risk_score {self.risk_score} does not match "
                f"{self.impact.value} x {self.likelihood.value} = {expected}"
            )
        return self

    @property
    def level(self) -> RiskLevel:
        return classify_level(self.risk_score)

    def audit_snapshot(self) -> Dict[str, Any]:
        """The facts recorded when this risk is deleted."""
        return {
            "title": self.title,
            "category": self.category.value,
            "risk_score": self.risk_score,
            "status": self.status.value,
        }

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "r1",
                "organization_id": "org_acme",
                "title": "Vendor outage",
                "description": "Primary payment vendor unavailable for more than 4 hours",
                "category": "operational",
                "impact": "high",
                "likelihood": "medium",
                "risk_score": 12,
                "status": "assessed",
                "owner_id": "user_123",
                "department": "Finance",
            }
        }
    }
