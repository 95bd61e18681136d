"""Asset Service - asset lifecycle with AI risk scoring and mitigations.

The effective score is always re-derived from the stored original score
and the current mitigation list, so applying the same list twice gives
the same result. Only a rescore replaces the original score.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union
from uuid import uuid4

from riskwatch.common.config import Config, DuplicateMitigationPolicy, get_config
from riskwatch.common.exceptions import ConfirmationRequiredError, ValidationError
from riskwatch.core.types import AuditAction, EntityKind
from riskwatch.data.schemas.asset import Asset, AssetDraft
from riskwatch.data.schemas.mitigation import AppliedMitigation
from riskwatch.data.validators import validate_asset_draft
from riskwatch.estimator.coordinator import ScoringCoordinator
from riskwatch.estimator.defaults import assemble_ai_score, reapply_mitigations
from riskwatch.governance.audit import AuditContext, AuditEmitter
from riskwatch.scoring.mitigation import duplicate_mitigation_ids
from riskwatch.storage.store import RecordStore

logger = logging.getLogger(__name__)


class AssetService:
    """Operations on monitored assets."""

    def __init__(
        self,
        store: RecordStore[Asset],
        emitter: AuditEmitter,
        coordinator: ScoringCoordinator,
        duplicate_policy: Optional[DuplicateMitigationPolicy] = None,
        config: Optional[Config] = None,
    ):
        self.store = store
        self.emitter = emitter
        self.coordinator = coordinator
        if duplicate_policy is None:
            duplicate_policy = (config or get_config()).duplicate_mitigation_policy
        self.duplicate_policy = duplicate_policy

    def _check_duplicates(self, mitigations: Sequence[AppliedMitigation]) -> None:
        duplicates = duplicate_mitigation_ids(mitigations)
        if not duplicates:
            return
        if self.duplicate_policy == DuplicateMitigationPolicy.REJECT:
            raise ValidationError(
                "The same mitigation cannot be applied twice",
                fields=["mitigations"],
                details={"duplicate_ids": duplicates},
            )
        logger.warning(f"Mitigations applied more than once, reductions stack: {duplicates}")

    async def list_assets(self) -> List[Asset]:
        return await self.store.list()

    async def get_asset(self, asset_id: str) -> Asset:
        return await self.store.get(asset_id)

    async def create_asset(
        self,
        draft: Union[AssetDraft, Dict[str, Any]],
        context: AuditContext,
        draft_key: Optional[str] = None,
    ) -> Optional[Asset]:
        """Score and create an asset.

        Args:
            draft: Asset fields
            context: Acting user and organization
            draft_key: Identifies the form being submitted; a newer
                submission with the same key supersedes this one

        Returns:
            The created asset, or None when superseded by a newer submission

        Raises:
            ValidationError: Required fields missing (nothing is written)
            StoreError: The store rejected the write
        """
        draft = validate_asset_draft(draft)
        self._check_duplicates(draft.mitigations)

        outcome = await self.coordinator.request(draft_key or f"draft:{uuid4().hex}", draft.snapshot())
        if outcome.superseded:
            return None

        ai_risk_score = assemble_ai_score(outcome.estimate, draft.mitigations)

        data = draft.model_dump(exclude={"mitigations"})
        data["organization_id"] = context.organization_id
        data["ai_risk_score"] = ai_risk_score
        # Not yet evaluated until mitigations are actually applied
        data["mitigations"] = list(draft.mitigations) or None

        asset = await self.store.create(data)
        logger.info(
            f"Created asset {asset.id} ({asset.name}), score {ai_risk_score.overall}"
            f"{' (default)' if outcome.fell_back else ''}"
        )

        self.emitter.emit(
            context,
            AuditAction.ASSET_CREATED,
            asset.id,
            {
                "name": asset.name,
                "type": asset.type.value,
                "overall_score": ai_risk_score.overall,
                "original_score": ai_risk_score.original_score,
                "estimator_fallback": outcome.fell_back,
            },
            resource_type=EntityKind.ASSET,
        )
        return asset

    async def update_mitigations(
        self,
        asset_id: str,
        mitigations: Sequence[AppliedMitigation],
        context: AuditContext,
    ) -> Asset:
        """Replace the asset's mitigation list and re-derive its effective score.

        Raises:
            ValidationError: Duplicate ids under the reject policy
            RecordNotFoundError: No asset with this id
            StoreError: The store rejected the write
        """
        mitigations = list(mitigations)
        self._check_duplicates(mitigations)

        current = await self.store.get(asset_id)
        ai_risk_score = reapply_mitigations(current.ai_risk_score, mitigations)

        asset = await self.store.update(asset_id, {
            "mitigations": mitigations,
            "ai_risk_score": ai_risk_score,
        })
        logger.info(
            f"Applied {len(mitigations)} mitigations to asset {asset_id}: "
            f"{current.overall_score} -> {ai_risk_score.overall}"
        )

        self.emitter.emit(
            context,
            AuditAction.ASSET_UPDATED,
            asset_id,
            {
                "name": asset.name,
                "change": "mitigations",
                "previous_overall_score": current.overall_score,
                "overall_score": ai_risk_score.overall,
                "original_score": ai_risk_score.original_score,
                "total_risk_reduction": ai_risk_score.total_risk_reduction,
                "mitigation_ids": [m.mitigation_id for m in mitigations],
            },
            resource_type=EntityKind.ASSET,
        )
        return asset

    async def rescore_asset(self, asset_id: str, context: AuditContext) -> Optional[Asset]:
        """Ask the estimator for a fresh base score.

        If another rescore of the same asset is requested while this one
        is pending, this one's result is discarded and None is returned.
        When the estimator fails the stored base score is kept.

        Raises:
            RecordNotFoundError: No asset with this id
            StoreError: The store rejected the write
        """
        current = await self.store.get(asset_id)
        outcome = await self.coordinator.request(asset_id, current.snapshot())
        if outcome.superseded:
            return None

        # Mitigations may have changed while the estimate was pending
        latest = await self.store.get(asset_id)
        if outcome.fell_back:
            # The stored base score stands in for the missing estimate
            ai_risk_score = reapply_mitigations(latest.ai_risk_score, latest.mitigations)
        else:
            ai_risk_score = assemble_ai_score(outcome.estimate, latest.mitigations)

        asset = await self.store.update(asset_id, {"ai_risk_score": ai_risk_score})
        logger.info(
            f"Rescored asset {asset_id}: base {latest.ai_risk_score.original_score} -> "
            f"{ai_risk_score.original_score}"
        )

        self.emitter.emit(
            context,
            AuditAction.ASSET_UPDATED,
            asset_id,
            {
                "name": asset.name,
                "change": "rescore",
                "previous_overall_score": latest.overall_score,
                "overall_score": ai_risk_score.overall,
                "previous_original_score": latest.ai_risk_score.original_score,
                "original_score": ai_risk_score.original_score,
                "estimator_fallback": outcome.fell_back,
            },
            resource_type=EntityKind.ASSET,
        )
        return asset

    async def delete_asset(self, asset_id: str, context: AuditContext, confirmed: bool = False) -> Asset:
        """Delete an asset. Requires ``confirmed=True``.

        Raises:
            ConfirmationRequiredError: Not confirmed (no store call is made)
            RecordNotFoundError: No asset with this id
        """
        if not confirmed:
            raise ConfirmationRequiredError(EntityKind.ASSET.value, asset_id)

        snapshot = await self.store.get(asset_id)
        await self.store.delete(asset_id)
        logger.info(f"Deleted asset {asset_id} ({snapshot.name})")

        self.emitter.emit(
            context,
            AuditAction.ASSET_DELETED,
            asset_id,
            {
                "name": snapshot.name,
                "asset_details": snapshot.audit_snapshot(),
                "deleted_at": datetime.now(timezone.utc).isoformat(),
            },
            resource_type=EntityKind.ASSET,
        )
        return snapshot
