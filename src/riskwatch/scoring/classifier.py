"""Severity classifier - maps a numeric score to a risk level.

Bands use inclusive upper bounds:

    score <= 5    -> Low
    6  .. 12      -> Medium
    13 .. 20      -> High
    >= 21         -> Critical

The function is total: asset scores are not bounded by the 5x5 matrix, so
anything above 25 is still Critical. It never triggers recomputation of
the score it is given.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from riskwatch.common.constants import ScoringConstants
from riskwatch.core.types import DisplayBucket, RiskLevel, RiskStatus


# (level, inclusive upper bound); None means unbounded
_BANDS: Tuple[Tuple[RiskLevel, Optional[int]], ...] = (
    (RiskLevel.LOW, ScoringConstants.LOW_MAX),
    (RiskLevel.MEDIUM, ScoringConstants.MEDIUM_MAX),
    (RiskLevel.HIGH, ScoringConstants.HIGH_MAX),
    (RiskLevel.CRITICAL, None),
)

_LEVEL_BUCKETS: Dict[RiskLevel, DisplayBucket] = {
    RiskLevel.LOW: DisplayBucket.GREEN,
    RiskLevel.MEDIUM: DisplayBucket.YELLOW,
    RiskLevel.HIGH: DisplayBucket.ORANGE,
    RiskLevel.CRITICAL: DisplayBucket.RED,
}

_STATUS_BUCKETS: Dict[RiskStatus, DisplayBucket] = {
    RiskStatus.IDENTIFIED: DisplayBucket.BLUE,
    RiskStatus.ASSESSED: DisplayBucket.YELLOW,
    RiskStatus.MITIGATED: DisplayBucket.GREEN,
    RiskStatus.MONITORING: DisplayBucket.PURPLE,
    RiskStatus.CLOSED: DisplayBucket.GRAY,
}


@dataclass(frozen=True)
class ScoreClassification:
    """Result of classifying a score."""
    score: int
    level: RiskLevel
    display_bucket: DisplayBucket

    @property
    def label(self) -> str:
        return self.level.label


def classify_level(score: int) -> RiskLevel:
    """Return the severity band for ``score``."""
    for level, upper in _BANDS:
        if upper is None or score <= upper:
            return level
    return RiskLevel.CRITICAL


def classify(score: int) -> ScoreClassification:
    """Classify a score into a level and display bucket."""
    level = classify_level(score)
    return ScoreClassification(
        score=score,
        level=level,
        display_bucket=_LEVEL_BUCKETS[level],
    )


def level_bounds(level: RiskLevel) -> Tuple[int, Optional[int]]:
    """Inclusive (lower, upper) score bounds of a band; upper None is open."""
    lower = ScoringConstants.MATRIX_MIN
    for band, upper in _BANDS:
        if band == level:
            return lower, upper
        lower = upper + 1
    raise ValueError(f"Unknown risk level: {level}")


def level_filter_options(ceiling: int = ScoringConstants.MATRIX_MAX) -> List[Dict[str, str]]:
    """Options for a level filter control, e.g. ``Critical (21-25)``."""
    options = []
    for level, _ in _BANDS:
        lower, upper = level_bounds(level)
        options.append({
            "value": level.value,
            "label": f"{level.label} ({lower}-{upper if upper is not None else ceiling})",
        })
    return options


def status_bucket(status: str) -> DisplayBucket:
    """Display bucket for a risk status; unknown statuses are gray."""
    try:
        return _STATUS_BUCKETS[RiskStatus(status)]
    except ValueError:
        return DisplayBucket.GRAY
