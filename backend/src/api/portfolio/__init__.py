"""
Portfolio API module.

Provides REST API access to the aggregated portfolio:
- Holdings: Normalized equities, mutual funds and foreign holdings
- Analytics: Metrics (allocation, concentration, risk, tax) and insights

Every request refreshes the sources; nothing is cached between requests.

This module aggregates all portfolio sub-routers into a single main router:
    from src.api.portfolio import router
"""

from fastapi import APIRouter

from .analytics import router as analytics_router
from .holdings import router as holdings_router

# Create main portfolio router
router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])

# Include all sub-routers
router.include_router(holdings_router)
router.include_router(analytics_router)

__all__ = ["router"]
