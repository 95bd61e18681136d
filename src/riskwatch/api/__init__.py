"""HTTP API for RiskWatch."""
