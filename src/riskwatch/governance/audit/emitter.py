"""Audit emitter - turns mutations into audit events handed to a sink."""

import logging
from typing import Any, Dict, List, Optional, Protocol

from riskwatch.core.types import AuditAction, EntityKind
from riskwatch.governance.audit.schemas import AuditContext, AuditEvent

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    """Anything that accepts events without blocking the caller."""

    def submit(self, event: AuditEvent) -> bool:
        ...


class CollectingSink:
    """Keeps submitted events in memory. Used by tests and local runs."""

    def __init__(self):
        self.events: List[AuditEvent] = []

    def submit(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True


class AuditEmitter:
    """Builds audit events for mutations and hands them to a sink.

    ``emit`` is fire-and-forget: it returns the event it handed off, or
    None when nothing was handed off, and never raises.
    """

    def __init__(self, sink: AuditSink, default_resource_type: EntityKind = EntityKind.RISK):
        self.sink = sink
        self.default_resource_type = default_resource_type

    def emit(
        self,
        context: AuditContext,
        action: AuditAction,
        resource_id: Optional[str],
        details: Optional[Dict[str, Any]] = None,
        resource_type: Optional[EntityKind] = None,
    ) -> Optional[AuditEvent]:
        if not context.organization_id:
            logger.warning(
                f"No organization scope for {action.value} on {resource_id}, audit event skipped"
            )
            return None

        try:
            event = AuditEvent(
                actor_id=context.actor_id,
                organization_id=context.organization_id,
                action=action,
                resource_type=resource_type or self.default_resource_type,
                resource_id=resource_id,
                details=details or {},
                user_agent=context.user_agent,
                ip_address=context.ip_address,
            )
            if not self.sink.submit(event):
                logger.error(f"Audit sink rejected {action.value} event for {resource_id}")
                return None
        except Exception as e:
            logger.error(f"Failed to emit {action.value} audit event for {resource_id}: {e}")
            return None

        logger.debug(f"Emitted {action.value} audit event {event.event_id}")
        return event
