"""Tests for configuration settings.

Tests the Config class and environment variable handling.
"""

import os
import pytest
from pathlib import Path
from unittest.mock import patch

from riskwatch.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    AuditStorageType,
    DuplicateMitigationPolicy,
    get_config,
    reset_config,
)
from riskwatch.common.exceptions import ConfigurationError


class TestEnums:
    """Tests for configuration enums."""

    def test_environment_values(self):
        assert Environment("development") == Environment.DEVELOPMENT
        assert Environment("production") == Environment.PRODUCTION

    def test_log_level_values(self):
        assert LogLevel.DEBUG.value == "DEBUG"
        assert LogLevel.CRITICAL.value == "CRITICAL"

    def test_storage_type_values(self):
        """Test AuditStorageType enum values."""
        assert AuditStorageType.MEMORY.value == "memory"
        assert AuditStorageType.LOCAL.value == "local"
        assert AuditStorageType.S3.value == "s3"


class TestConfig:
    """Tests for Config class."""

    def test_default_config(self):
        """Test Config with default values."""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

            assert config.environment == Environment.DEVELOPMENT
            assert config.debug is False
            assert config.log_level == LogLevel.INFO
            assert config.api_host == "0.0.0.0"
            assert config.api_port == 8000
            assert config.audit_storage_type == AuditStorageType.LOCAL
            assert config.estimator_url is None
            assert config.duplicate_mitigation_policy == DuplicateMitigationPolicy.STACK
            assert config.cors_origins == []

    def test_environment_from_env_var(self):
        with patch.dict(os.environ, {"RISKWATCH_ENVIRONMENT": "production"}):
            config = Config()
            assert config.environment == Environment.PRODUCTION
            assert config.is_production is True
            assert config.is_development is False

    def test_debug_mode(self):
        with patch.dict(os.environ, {"RISKWATCH_DEBUG": "true"}):
            assert Config().debug is True

        with patch.dict(os.environ, {"RISKWATCH_DEBUG": "false"}):
            assert Config().debug is False

    def test_api_config(self):
        """Test API configuration from environment."""
        with patch.dict(os.environ, {
            "RISKWATCH_API_HOST": "127.0.0.1",
            "RISKWATCH_API_PORT": "9000",
            "RISKWATCH_CORS_ORIGINS": "https://risk.example.com, https://ops.example.com",
        }):
            config = Config()
            assert config.api_host == "127.0.0.1"
            assert config.api_port == 9000
            assert config.cors_origins == ["https://risk.example.com", "https://ops.example.com"]

    def test_audit_local_storage(self):
        with patch.dict(os.environ, {
            "RISKWATCH_AUDIT_STORAGE_TYPE": "local",
            "RISKWATCH_AUDIT_LOG_DIR": "/tmp/audit",
        }):
            config = Config()
            assert config.audit_storage_type == AuditStorageType.LOCAL
            assert config.audit_log_dir == Path("/tmp/audit")

    def test_audit_s3_storage_requires_bucket(self):
        """Test that S3 storage requires bucket configuration."""
        with patch.dict(os.environ, {"RISKWATCH_AUDIT_STORAGE_TYPE": "s3"}):
            os.environ.pop("RISKWATCH_AUDIT_S3_BUCKET", None)
            with pytest.raises(ConfigurationError, match="RISKWATCH_AUDIT_S3_BUCKET"):
                Config()

    def test_audit_s3_storage_with_bucket(self):
        with patch.dict(os.environ, {
            "RISKWATCH_AUDIT_STORAGE_TYPE": "s3",
            "RISKWATCH_AUDIT_S3_BUCKET": "my-audit-bucket",
        }):
            config = Config()
            assert config.audit_storage_type == AuditStorageType.S3
            assert config.audit_s3_bucket == "my-audit-bucket"

    def test_estimator_timeout_must_be_positive(self):
        with patch.dict(os.environ, {"RISKWATCH_ESTIMATOR_TIMEOUT": "0"}):
            with pytest.raises(ConfigurationError):
                Config()

    def test_audit_queue_size_must_be_positive(self):
        with patch.dict(os.environ, {"RISKWATCH_AUDIT_QUEUE_SIZE": "-1"}):
            with pytest.raises(ConfigurationError):
                Config()

    def test_audit_retry_backoff_bounds(self):
        with patch.dict(os.environ, {"RISKWATCH_AUDIT_RETRY_MIN_WAIT": "0"}):
            config = Config()
            assert config.audit_retry_min_wait == 0.0
            assert config.audit_retry_max_wait == 8.0

    def test_duplicate_mitigation_policy(self):
        with patch.dict(os.environ, {"RISKWATCH_DUPLICATE_MITIGATIONS": "reject"}):
            config = Config()
            assert config.duplicate_mitigation_policy == DuplicateMitigationPolicy.REJECT
            assert config.rejects_duplicate_mitigations is True

    def test_debug_in_production_warns(self):
        with patch.dict(os.environ, {
            "RISKWATCH_ENVIRONMENT": "production",
            "RISKWATCH_DEBUG": "true",
        }):
            with pytest.warns(RuntimeWarning):
                Config()


class TestGetConfig:
    """Tests for get_config singleton function."""

    def test_get_config_returns_same_instance(self):
        reset_config()
        config1 = get_config()
        config2 = get_config()
        assert isinstance(config1, Config)
        assert config1 is config2

    def test_reset_config_clears_singleton(self):
        reset_config()
        config1 = get_config()
        reset_config()
        config2 = get_config()
        assert config1 is not config2
