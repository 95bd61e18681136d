"""Record validation for RiskWatch.

Every check here runs before any store call. Failures are raised as
``riskwatch.common.exceptions.ValidationError`` carrying a user-facing
message and the offending field paths.
"""

from typing import Any, Dict, List, Union
from pydantic import ValidationError as PydanticValidationError

from riskwatch.common.exceptions import ValidationError
from riskwatch.data.schemas.asset import AssetDraft
from riskwatch.data.schemas.risk import RiskDraft, RiskUpdate

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


def _field_paths(error: PydanticValidationError) -> List[str]:
    return [".".join(str(part) for part in item["loc"]) for item in error.errors()]


def validate_risk_draft(draft: Union[RiskDraft, Dict[str, Any]]) -> RiskDraft:
    """Validate a risk creation payload.

    Args:
        draft: RiskDraft object or dictionary

    Returns:
        The validated draft

    Raises:
        ValidationError: If a required field is missing or a value is invalid
    """
    if isinstance(draft, RiskDraft):
        return draft
    if not isinstance(draft, dict):
        raise ValidationError(f"Expected RiskDraft or dict, got {type(draft).__name__}")
    try:
        return RiskDraft.model_validate(draft)
    except PydanticValidationError as e:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE, fields=_field_paths(e)) from e


def validate_risk_update(update: Union[RiskUpdate, Dict[str, Any]]) -> RiskUpdate:
    """Validate a partial risk update."""
    if isinstance(update, RiskUpdate):
        return update
    if not isinstance(update, dict):
        raise ValidationError(f"Expected RiskUpdate or dict, got {type(update).__name__}")
    try:
        return RiskUpdate.model_validate(update)
    except PydanticValidationError as e:
        raise ValidationError("Invalid risk update", fields=_field_paths(e)) from e


def missing_asset_fields(draft: AssetDraft) -> List[str]:
    """Required asset fields that are blank."""
    required = {
        "name": draft.name,
        "location.city": draft.location.city,
        "location.country": draft.location.country,
        "responsible_officer.name": draft.responsible_officer.name,
    }
    return [path for path, value in required.items() if not value.strip()]


def validate_asset_draft(draft: Union[AssetDraft, Dict[str, Any]]) -> AssetDraft:
    """Validate an asset creation payload.

    Name, city, country and the responsible officer's name are required.
    """
    if isinstance(draft, dict):
        try:
            draft = AssetDraft.model_validate(draft)
        except PydanticValidationError as e:
            raise ValidationError("Invalid asset data", fields=_field_paths(e)) from e
    elif not isinstance(draft, AssetDraft):
        raise ValidationError(f"Expected AssetDraft or dict, got {type(draft).__name__}")

    missing = missing_asset_fields(draft)
    if missing:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE, fields=missing)
    return draft
