"""Audit event schema."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from uuid import uuid4

from riskwatch.core.types import AuditAction, EntityKind


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditContext(BaseModel):
    """Who is acting, and for which organization.

    ``actor_id`` None means the system itself. Without an
    ``organization_id`` no audit event can be written.
    """
    actor_id: Optional[str] = Field(default=None, description="Acting user, None for the system")
    organization_id: Optional[str] = Field(default=None, description="Organization scope")
    department: Optional[str] = Field(default=None, description="Actor's department")
    user_agent: Optional[str] = Field(default=None)
    ip_address: Optional[str] = Field(default=None)


class AuditEvent(BaseModel):
    """A single append-only audit record of a mutating action."""
    event_id: str = Field(
        default_factory=lambda: f"aud_{uuid4().hex[:12]}",
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the action happened"
    )
    actor_id: Optional[str] = Field(default=None, description="Acting user, None for the system")
    organization_id: str = Field(..., min_length=1, description="Organization scope")
    action: AuditAction = Field(..., description="What happened")
    resource_type: EntityKind = Field(..., description="Kind of record acted on")
    resource_id: Optional[str] = Field(default=None, description="Record acted on")
    details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Before/after facts relevant to the action"
    )
    user_agent: Optional[str] = Field(default=None)
    ip_address: Optional[str] = Field(default=None)

    # Integrity
    previous_hash: Optional[str] = Field(
        default=None,
        description="Hash of previous event (for chain integrity)"
    )
    entry_hash: Optional[str] = Field(
        default=None,
        description="Hash of this event"
    )

    def to_jsonl(self) -> str:
        """Serialize event to JSONL format."""
        return json.dumps(self.model_dump(mode="json"), default=str)

    @classmethod
    def from_jsonl(cls, line: str) -> "AuditEvent":
        """Deserialize event from JSONL format."""
        return cls.model_validate(json.loads(line))
