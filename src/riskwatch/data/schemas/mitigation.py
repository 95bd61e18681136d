"""Applied mitigation schema."""

from pydantic import BaseModel, Field


class AppliedMitigation(BaseModel):
    """A control applied to an asset that lowers its effective score.

    The same mitigation id may appear more than once in an asset's list;
    whether that is accepted is decided by the asset service, not here.
    """
    mitigation_id: str = Field(..., min_length=1, description="Mitigation catalogue identifier")
    description: str = Field(default="", description="What the control does")
    applied_risk_reduction_score: int = Field(
        ..., ge=0, description="Points subtracted from the base score"
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "mitigation_id": "mit_perimeter_fence",
                "description": "Perimeter fencing with anti-climb topping",
                "applied_risk_reduction_score": 15,
            }
        },
    }
