"""Risk Register Service - create, update and delete risks with audit.

Validation runs before any store call. Store failures propagate to the
caller. Audit emission is fire-and-forget and never affects the outcome
of the mutation it describes.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Union

from riskwatch.common.exceptions import ConfirmationRequiredError
from riskwatch.core.types import AuditAction, EntityKind
from riskwatch.data.schemas.risk import Risk, RiskDraft, RiskUpdate
from riskwatch.data.validators import validate_risk_draft, validate_risk_update
from riskwatch.governance.audit import AuditContext, AuditEmitter
from riskwatch.scoring.risk_matrix import matrix_score
from riskwatch.storage.store import RecordStore

logger = logging.getLogger(__name__)


class RiskService:
    """Operations on the risk register.

    Every create, update and delete emits exactly one audit event. On
    delete the record's snapshot is read before the delete is issued,
    since it is gone afterwards.
    """

    def __init__(self, store: RecordStore[Risk], emitter: AuditEmitter):
        self.store = store
        self.emitter = emitter

    async def list_risks(self) -> List[Risk]:
        return await self.store.list()

    async def get_risk(self, risk_id: str) -> Risk:
        return await self.store.get(risk_id)

    async def create_risk(
        self,
        draft: Union[RiskDraft, Dict[str, Any]],
        context: AuditContext,
    ) -> Risk:
        """Create a risk from a draft.

        The score is derived from impact and likelihood. Owner and
        department default to the acting user's.

        Raises:
            ValidationError: Draft is incomplete or invalid (nothing is written)
            StoreError: The store rejected the write
        """
        draft = validate_risk_draft(draft)

        data = draft.model_dump()
        data["risk_score"] = draft.risk_score
        data["organization_id"] = context.organization_id
        data["identified_by"] = context.actor_id
        data["owner_id"] = draft.owner_id or context.actor_id
        data["department"] = draft.department or context.department

        risk = await self.store.create(data)
        logger.info(f"Created risk {risk.id} ({risk.title}, score {risk.risk_score})")

        self.emitter.emit(
            context,
            AuditAction.RISK_CREATED,
            risk.id,
            {
                "title": risk.title,
                "category": risk.category.value,
                "risk_score": risk.risk_score,
            },
            resource_type=EntityKind.RISK,
        )
        return risk

    async def update_risk(
        self,
        risk_id: str,
        update: Union[RiskUpdate, Dict[str, Any]],
        context: AuditContext,
    ) -> Risk:
        """Apply a partial update and re-derive the score.

        Raises:
            ValidationError: The update is invalid (nothing is written)
            RecordNotFoundError: No risk with this id
            StoreError: The store rejected the write
        """
        update = validate_risk_update(update)
        current = await self.store.get(risk_id)

        changes = update.changes()
        impact = changes.get("impact", current.impact)
        likelihood = changes.get("likelihood", current.likelihood)
        changes["risk_score"] = matrix_score(impact, likelihood)
        changes["last_reviewed_at"] = datetime.now(timezone.utc)

        risk = await self.store.update(risk_id, changes)
        logger.info(f"Updated risk {risk_id}: {sorted(update.changes())}")

        self.emitter.emit(
            context,
            AuditAction.RISK_UPDATED,
            risk_id,
            {
                "title": risk.title,
                "category": risk.category.value,
                "risk_score": risk.risk_score,
                "previous_risk_score": current.risk_score,
                "previous_status": current.status.value,
                "new_status": risk.status.value,
            },
            resource_type=EntityKind.RISK,
        )
        return risk

    async def delete_risk(self, risk_id: str, context: AuditContext, confirmed: bool = False) -> Risk:
        """Delete a risk. Requires ``confirmed=True``.

        Returns:
            The risk as it was before deletion

        Raises:
            ConfirmationRequiredError: Not confirmed (no store call is made)
            RecordNotFoundError: No risk with this id
            StoreError: The store rejected the delete
        """
        if not confirmed:
            raise ConfirmationRequiredError(EntityKind.RISK.value, risk_id)

        snapshot = await self.store.get(risk_id)
        await self.store.delete(risk_id)
        logger.info(f"Deleted risk {risk_id} ({snapshot.title})")

        self.emitter.emit(
            context,
            AuditAction.RISK_DELETED,
            risk_id,
            {
                "title": snapshot.title,
                "risk_details": snapshot.audit_snapshot(),
                "deleted_at": datetime.now(timezone.utc).isoformat(),
            },
            resource_type=EntityKind.RISK,
        )
        return snapshot
