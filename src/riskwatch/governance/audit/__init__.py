"""Audit events for record mutations.

Events are built by ``AuditEmitter`` and handed to a
``BackgroundAuditWriter``, which drains them to an ``AuditStore``
(local JSONL with a hash chain, S3, or memory).
"""

from riskwatch.governance.audit.schemas import AuditContext, AuditEvent
from riskwatch.governance.audit.store import (
    AuditLogIntegrityError,
    AuditStore,
    FileAuditStore,
    InMemoryAuditStore,
)
from riskwatch.governance.audit.background_writer import BackgroundAuditWriter
from riskwatch.governance.audit.emitter import AuditEmitter, AuditSink, CollectingSink
from riskwatch.governance.audit.config import create_audit_store, create_audit_writer

__all__ = [
    "AuditContext",
    "AuditEvent",
    "AuditLogIntegrityError",
    "AuditStore",
    "FileAuditStore",
    "InMemoryAuditStore",
    "BackgroundAuditWriter",
    "AuditEmitter",
    "AuditSink",
    "CollectingSink",
    "create_audit_store",
    "create_audit_writer",
]
