"""Application services for risks and assets."""

from riskwatch.services.asset_service import AssetService
from riskwatch.services.risk_service import RiskService
from riskwatch.services.views import RegisterView, asset_dashboard_view, risk_register_view

__all__ = [
    "AssetService",
    "RiskService",
    "RegisterView",
    "asset_dashboard_view",
    "risk_register_view",
]
