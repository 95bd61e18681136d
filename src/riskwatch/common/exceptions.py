"""Custom exceptions for RiskWatch.

Provides a hierarchy of exceptions for different error types.
All RiskWatch exceptions inherit from RiskWatchException.

Validation and store failures propagate to the caller. Estimator and
audit failures are contained inside their components and never reach
the user.
"""

from typing import Any, Dict, List, Optional


class RiskWatchException(Exception):
    """Base exception for all RiskWatch errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: str = "RISKWATCH_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RiskWatchException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIG_ERROR", details=details)


class ValidationError(RiskWatchException):
    """Raised when a record fails validation before any store call.

    The message is meant to be shown to the user as-is.
    """

    def __init__(
        self,
        message: str,
        fields: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        self.fields = list(fields or [])
        if self.fields:
            details["fields"] = self.fields
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class StoreError(RiskWatchException):
    """Raised when the record store rejects a create/read/update/delete."""

    def __init__(
        self,
        message: str,
        operation: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        details["operation"] = operation
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        self.operation = operation
        super().__init__(message, code="STORE_ERROR", details=details)


class RecordNotFoundError(StoreError):
    """Raised when a record id is not present in the store."""

    def __init__(self, resource_type: str, resource_id: str, operation: str = "read"):
        super().__init__(
            f"{resource_type} {resource_id} not found",
            operation=operation,
            resource_type=resource_type,
            resource_id=resource_id,
        )
        self.code = "NOT_FOUND"


class ConfirmationRequiredError(RiskWatchException):
    """Raised when a destructive operation is attempted without confirmation."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"Deleting {resource_type} {resource_id} requires explicit confirmation. "
            f"This action cannot be undone.",
            code="CONFIRMATION_REQUIRED",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class EstimatorError(RiskWatchException):
    """Raised when the base-score estimator times out, errors or replies garbage."""

    def __init__(
        self,
        message: str,
        estimator_name: str,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        details["estimator_name"] = estimator_name
        super().__init__(message, code="ESTIMATOR_ERROR", details=details)


class AuditError(RiskWatchException):
    """Raised when audit persistence fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="AUDIT_ERROR", details=details)
