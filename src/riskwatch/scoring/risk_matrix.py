"""Impact x likelihood risk matrix."""

from typing import Dict

from riskwatch.core.types import Severity

SEVERITY_RANKS: Dict[Severity, int] = {
    Severity.VERY_LOW: 1,
    Severity.LOW: 2,
    Severity.MEDIUM: 3,
    Severity.HIGH: 4,
    Severity.VERY_HIGH: 5,
}


def severity_rank(value: Severity) -> int:
    """Rank of a severity on the 1-5 scale."""
    return SEVERITY_RANKS[Severity(value)]


def matrix_score(impact: Severity, likelihood: Severity) -> int:
    """Risk score in 1..25 as impact rank times likelihood rank."""
    return severity_rank(impact) * severity_rank(likelihood)
