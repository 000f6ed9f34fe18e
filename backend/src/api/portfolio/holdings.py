"""
Portfolio holdings endpoint.

Provides:
- GET /holdings: Normalized holdings from every source, optionally by kind
"""

import structlog
from fastapi import APIRouter, Depends, Query

from ...services.portfolio_service import PortfolioService
from ..dependencies.services import get_portfolio_service
from ..schemas.portfolio_models import HoldingKindFilter, HoldingsResponse, SnapshotInfo

logger = structlog.get_logger()

router = APIRouter()


@router.get("/holdings", response_model=HoldingsResponse)
async def get_holdings(
    kind: HoldingKindFilter = Query("all", description="all | equity | fund"),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingsResponse:
    """
    Refresh and return normalized holdings.

    Equities, mutual funds and foreign (converted) holdings share one shape.
    Foreign holdings are equities with sector "International".

    Args:
        kind: Instrument kind filter
        portfolio_service: Portfolio service

    Returns:
        Holdings plus FX rate and source metadata
    """
    snapshot = await portfolio_service.refresh()
    holdings = snapshot.by_kind(None if kind == "all" else kind)

    logger.info("Holdings retrieved", kind=kind, count=len(holdings))
    return HoldingsResponse(
        holdings=list(holdings),
        count=len(holdings),
        kind=kind,
        snapshot=SnapshotInfo.from_snapshot(snapshot),
    )
