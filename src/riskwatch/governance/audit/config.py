"""Audit Layer Configuration and Initialization.

Builds the audit store and background writer from ``Config``:

- RISKWATCH_AUDIT_STORAGE_TYPE: "local" (default), "s3", or "memory"
- RISKWATCH_AUDIT_LOG_DIR: directory for local JSONL logs
- RISKWATCH_AUDIT_S3_BUCKET / RISKWATCH_AUDIT_S3_PREFIX: S3 location
- RISKWATCH_AUDIT_QUEUE_SIZE, RISKWATCH_AUDIT_RETRY_ATTEMPTS and the
  RISKWATCH_AUDIT_RETRY_MIN_WAIT/MAX_WAIT backoff bounds: writer tuning
"""

import logging
from typing import Optional

from riskwatch.common.config import AuditStorageType, Config, get_config
from riskwatch.governance.audit.background_writer import BackgroundAuditWriter
from riskwatch.governance.audit.store import AuditStore, FileAuditStore, InMemoryAuditStore

logger = logging.getLogger(__name__)


def create_audit_store(
    storage_type: Optional[AuditStorageType] = None,
    config: Optional[Config] = None,
) -> AuditStore:
    """Factory method to create audit store based on configuration.

    Raises:
        ValueError: If the storage type is unknown
    """
    config = config or get_config()
    storage_type = AuditStorageType(storage_type or config.audit_storage_type)

    if storage_type == AuditStorageType.S3:
        from riskwatch.governance.audit.s3_store import S3AuditStore

        return S3AuditStore(
            bucket_name=config.audit_s3_bucket,
            prefix=config.audit_s3_prefix,
            environment=config.environment.value,
            region=config.aws_region,
            aws_profile=config.aws_profile,
        )

    if storage_type == AuditStorageType.LOCAL:
        return FileAuditStore(log_dir=str(config.audit_log_dir))

    if storage_type == AuditStorageType.MEMORY:
        return InMemoryAuditStore()

    raise ValueError(f"Unknown storage type: {storage_type}")


def create_audit_writer(
    store: Optional[AuditStore] = None,
    config: Optional[Config] = None,
) -> BackgroundAuditWriter:
    """Create a background writer over the configured (or given) store."""
    config = config or get_config()
    if store is None:
        store = create_audit_store(config=config)

    logger.info(
        f"Audit writer configured: store={type(store).__name__}, "
        f"queue_size={config.audit_queue_size}, retries={config.audit_retry_attempts}"
    )
    return BackgroundAuditWriter(
        store=store,
        max_queue_size=config.audit_queue_size,
        retry_attempts=config.audit_retry_attempts,
        retry_min_wait=config.audit_retry_min_wait,
        retry_max_wait=config.audit_retry_max_wait,
    )


__all__ = [
    "create_audit_store",
    "create_audit_writer",
]
