"""RiskWatch - Risk scoring, mitigation aggregation and query engine."""

__version__ = "0.1.0"
__author__ = "RiskWatch Team"

# Core exports
from riskwatch.core.types import RiskLevel, RiskCategory, RiskStatus, AssetType, AssetStatus

__all__ = [
    "RiskLevel",
    "RiskCategory",
    "RiskStatus",
    "AssetType",
    "AssetStatus",
]
