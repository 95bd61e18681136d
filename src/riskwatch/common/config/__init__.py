"""Configuration module - Centralized config management."""

from riskwatch.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    AuditStorageType,
    DuplicateMitigationPolicy,
    get_config,
    reset_config,
)

__all__ = [
    "Config",
    "Environment",
    "LogLevel",
    "AuditStorageType",
    "DuplicateMitigationPolicy",
    "get_config",
    "reset_config",
]
