"""API request/response schemas for the RiskWatch gateway."""

from typing import List, Optional
from pydantic import BaseModel, Field

from riskwatch.data.schemas.asset import Asset
from riskwatch.data.schemas.mitigation import AppliedMitigation
from riskwatch.data.schemas.risk import Risk
from riskwatch.query.statistics import CollectionStats


class RiskListResponse(BaseModel):
    """Filtered and sorted risks plus statistics over all risks."""
    items: List[Risk] = Field(default_factory=list)
    stats: CollectionStats
    matched: int = Field(..., description="Number of risks passing the filters")
    sort_field: str
    sort_direction: str


class AssetListResponse(BaseModel):
    """Filtered and sorted assets plus statistics over all assets."""
    items: List[Asset] = Field(default_factory=list)
    stats: CollectionStats
    matched: int = Field(..., description="Number of assets passing the filters")
    sort_field: str
    sort_direction: str


class MitigationsRequest(BaseModel):
    """Full replacement of an asset's applied mitigations."""
    mitigations: List[AppliedMitigation] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "mitigations": [
                    {
                        "mitigation_id": "mit_cctv_upgrade",
                        "description": "Upgrade perimeter CCTV",
                        "applied_risk_reduction_score": 15,
                    },
                    {
                        "mitigation_id": "mit_badge_audit",
                        "description": "Quarterly badge audit",
                        "applied_risk_reduction_score": 10,
                    },
                ]
            }
        }
    }


class RescoreResponse(BaseModel):
    """Result of a rescore request."""
    applied: bool = Field(..., description="False when a newer rescore superseded this one")
    asset: Optional[Asset] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    fields: List[str] = Field(default_factory=list, description="Offending fields, if any")
    request_id: Optional[str] = Field(
        default=None, description="Request ID for debugging"
    )
