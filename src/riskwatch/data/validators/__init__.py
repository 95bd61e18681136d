"""Data validators."""

from riskwatch.data.validators.record_validator import (
    REQUIRED_FIELDS_MESSAGE,
    missing_asset_fields,
    validate_asset_draft,
    validate_risk_draft,
    validate_risk_update,
)

__all__ = [
    "REQUIRED_FIELDS_MESSAGE",
    "missing_asset_fields",
    "validate_asset_draft",
    "validate_risk_draft",
    "validate_risk_update",
]
