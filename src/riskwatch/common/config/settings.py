"""Configuration management - Centralized configuration for RiskWatch.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from riskwatch.common.constants import AuditConstants, EstimatorConstants
from riskwatch.common.exceptions import ConfigurationError


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AuditStorageType(str, Enum):
    """Audit storage backend types."""
    MEMORY = "memory"
    LOCAL = "local"
    S3 = "s3"


class DuplicateMitigationPolicy(str, Enum):
    """What to do when the same mitigation id is applied twice to an asset."""
    STACK = "stack"
    REJECT = "reject"


def _get_project_root() -> Path:
    """Get the project root directory."""
    # settings.py -> config -> common -> riskwatch -> src -> project_root
    current = Path(__file__).resolve()
    return current.parent.parent.parent.parent.parent


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Config:
    """Central configuration object for RiskWatch.

    All settings can be overridden via environment variables prefixed with RISKWATCH_.

    Example:
        RISKWATCH_ENVIRONMENT=production
        RISKWATCH_LOG_LEVEL=INFO
        RISKWATCH_ESTIMATOR_URL=https://scoring.internal/v1/assets/score
    """

    # Core settings
    environment: Environment = field(
        default_factory=lambda: Environment(
            os.getenv("RISKWATCH_ENVIRONMENT", "development")
        )
    )
    debug: bool = field(
        default_factory=lambda: _env_bool("RISKWATCH_DEBUG")
    )
    log_level: LogLevel = field(
        default_factory=lambda: LogLevel(os.getenv("RISKWATCH_LOG_LEVEL", "INFO"))
    )

    # Paths
    project_root: Path = field(default_factory=_get_project_root)

    # API settings
    api_host: str = field(
        default_factory=lambda: os.getenv("RISKWATCH_API_HOST", "0.0.0.0")
    )
    api_port: int = field(
        default_factory=lambda: int(os.getenv("RISKWATCH_API_PORT", "8000"))
    )
    cors_origins: List[str] = field(
        default_factory=lambda: _env_list("RISKWATCH_CORS_ORIGINS")
    )

    # Audit settings
    audit_storage_type: AuditStorageType = field(
        default_factory=lambda: AuditStorageType(
            os.getenv("RISKWATCH_AUDIT_STORAGE_TYPE", "local")
        )
    )
    audit_log_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("RISKWATCH_AUDIT_LOG_DIR", "./logs/audit")
        )
    )
    audit_s3_bucket: Optional[str] = field(
        default_factory=lambda: os.getenv("RISKWATCH_AUDIT_S3_BUCKET")
    )
    audit_s3_prefix: str = field(
        default_factory=lambda: os.getenv("RISKWATCH_AUDIT_S3_PREFIX", "audit-events/")
    )
    audit_queue_size: int = field(
        default_factory=lambda: int(
            os.getenv("RISKWATCH_AUDIT_QUEUE_SIZE", str(AuditConstants.QUEUE_SIZE))
        )
    )
    audit_retry_attempts: int = field(
        default_factory=lambda: int(
            os.getenv("RISKWATCH_AUDIT_RETRY_ATTEMPTS", str(AuditConstants.RETRY_ATTEMPTS))
        )
    )
    audit_retry_min_wait: float = field(
        default_factory=lambda: float(
            os.getenv("RISKWATCH_AUDIT_RETRY_MIN_WAIT", str(AuditConstants.RETRY_MIN_WAIT_SECONDS))
        )
    )
    audit_retry_max_wait: float = field(
        default_factory=lambda: float(
            os.getenv("RISKWATCH_AUDIT_RETRY_MAX_WAIT", str(AuditConstants.RETRY_MAX_WAIT_SECONDS))
        )
    )

    # AWS settings (for S3)
    aws_region: str = field(
        default_factory=lambda: os.getenv("AWS_DEFAULT_REGION", "us-east-1")
    )
    aws_profile: Optional[str] = field(
        default_factory=lambda: os.getenv("AWS_PROFILE")
    )

    # Estimator settings
    estimator_url: Optional[str] = field(
        default_factory=lambda: os.getenv("RISKWATCH_ESTIMATOR_URL")
    )
    estimator_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("RISKWATCH_ESTIMATOR_API_KEY")
    )
    estimator_timeout_seconds: float = field(
        default_factory=lambda: float(
            os.getenv(
                "RISKWATCH_ESTIMATOR_TIMEOUT",
                str(EstimatorConstants.DEFAULT_TIMEOUT_SECONDS),
            )
        )
    )

    # Mitigation policy
    duplicate_mitigation_policy: DuplicateMitigationPolicy = field(
        default_factory=lambda: DuplicateMitigationPolicy(
            os.getenv("RISKWATCH_DUPLICATE_MITIGATIONS", "stack")
        )
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.audit_storage_type == AuditStorageType.S3 and not self.audit_s3_bucket:
            raise ConfigurationError(
                "RISKWATCH_AUDIT_S3_BUCKET must be set when using S3 audit storage"
            )

        if self.estimator_timeout_seconds <= 0:
            raise ConfigurationError(
                "RISKWATCH_ESTIMATOR_TIMEOUT must be positive",
                details={"value": self.estimator_timeout_seconds},
            )

        if self.audit_queue_size <= 0:
            raise ConfigurationError(
                "RISKWATCH_AUDIT_QUEUE_SIZE must be positive",
                details={"value": self.audit_queue_size},
            )

        # Warn about debug in production
        if self.environment == Environment.PRODUCTION and self.debug:
            import warnings
            warnings.warn(
                "Debug mode is enabled in production environment",
                RuntimeWarning,
                stacklevel=2
            )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def rejects_duplicate_mitigations(self) -> bool:
        return self.duplicate_mitigation_policy == DuplicateMitigationPolicy.REJECT


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
