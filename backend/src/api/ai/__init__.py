"""
AI analysis API module.

Aggregates the analysis and history sub-routers:
    from src.api.ai import router
"""

from fastapi import APIRouter

from .analyze import router as analyze_router
from .history import router as history_router

router = APIRouter(prefix="/api/ai", tags=["ai"])

router.include_router(analyze_router)
router.include_router(history_router)

__all__ = ["router"]
