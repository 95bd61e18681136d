"""Common utilities - logging, config, exceptions."""

from riskwatch.common.logging.logger import get_logger
from riskwatch.common.config import Config, get_config, reset_config
from riskwatch.common.exceptions import (
    RiskWatchException,
    ConfigurationError,
    ValidationError,
    StoreError,
    RecordNotFoundError,
    ConfirmationRequiredError,
    EstimatorError,
    AuditError,
)

__all__ = [
    # Logging
    "get_logger",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Exceptions
    "RiskWatchException",
    "ConfigurationError",
    "ValidationError",
    "StoreError",
    "RecordNotFoundError",
    "ConfirmationRequiredError",
    "EstimatorError",
    "AuditError",
]
