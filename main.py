#!/usr/bin/env python3
"""Main entry point for RiskWatch: serves the HTTP API."""

from riskwatch.common.logging import get_logger
from riskwatch.common.config import get_config

logger = get_logger(__name__)


def main():
    """Main entry point."""
    import uvicorn

    config = get_config()
    logger.info(f"RiskWatch starting in {config.environment.value} mode")
    logger.info(f"Audit storage: {config.audit_storage_type.value}")
    if not config.estimator_url:
        logger.warning("No estimator configured; new assets receive the default score")

    uvicorn.run(
        "riskwatch.api.gateway:app",
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
