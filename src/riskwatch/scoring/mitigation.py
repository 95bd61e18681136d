"""Mitigation aggregator - effective score from a base score and mitigations.

The effective score is always re-derived from its two inputs, the
original base score and the current mitigation list:

    total_reduction = sum(m.applied_risk_reduction_score for m in mitigations)
    effective       = max(0, base - total_reduction)

Repeated mitigation ids are each counted. No upper clamp is applied.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from riskwatch.data.schemas.mitigation import AppliedMitigation


@dataclass(frozen=True)
class EffectiveScore:
    """Outcome of applying mitigations to a base score."""
    base: int
    effective: int
    total_reduction: int
    mitigated: bool


def total_reduction(mitigations: Iterable[AppliedMitigation]) -> int:
    """Sum of reductions; order independent, no de-duplication."""
    return sum(m.applied_risk_reduction_score for m in mitigations)


def effective_score(
    base: int,
    mitigations: Optional[Sequence[AppliedMitigation]] = None,
) -> EffectiveScore:
    """Compute the effective score of an asset.

    Args:
        base: Base score from the estimator (or its fallback)
        mitigations: Applied mitigations; None and [] both mean no reduction

    Returns:
        EffectiveScore with the floored effective value and total reduction
    """
    reduction = total_reduction(mitigations or ())
    return EffectiveScore(
        base=base,
        effective=max(0, base - reduction),
        total_reduction=reduction,
        mitigated=reduction > 0,
    )


def duplicate_mitigation_ids(mitigations: Sequence[AppliedMitigation]) -> List[str]:
    """Ids that appear more than once, in first-repeat order."""
    seen = set()
    duplicates: List[str] = []
    for mitigation in mitigations:
        if mitigation.mitigation_id in seen and mitigation.mitigation_id not in duplicates:
            duplicates.append(mitigation.mitigation_id)
        seen.add(mitigation.mitigation_id)
    return duplicates
