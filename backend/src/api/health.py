"""
Health check endpoints for monitoring and connectivity verification.
"""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog
from fastapi import APIRouter, Depends

from ..core.config import Settings, get_settings

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """
    Health check endpoint.

    Reports which data sources and integrations are configured. Nothing
    external is called; a missing credential shows up as "degraded".
    """
    logger.info("Health check requested")

    configuration = {
        "kite_configured": settings.kite_configured,
        "llm_configured": settings.llm_configured,
        "spreadsheet_present": Path(settings.vested_holdings_path).exists(),
        "analyses_dir": settings.analyses_dir,
        "home_currency": settings.home_currency,
    }
    healthy = settings.kite_configured

    if not healthy:
        logger.warning("Health check degraded", reason="Kite credentials missing")

    return {
        "status": "ok" if healthy else "degraded",
        "environment": settings.environment,
        "version": "0.1.0",
        "timestamp": datetime.now(UTC).isoformat(),
        "configuration": configuration,
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, Any]:
    """Simple check that the application is running."""
    return {"alive": True, "status": "ok"}
