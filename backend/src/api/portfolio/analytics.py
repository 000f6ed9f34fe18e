"""
Portfolio analytics endpoints.

Provides:
- GET /metrics: Allocation, concentration, risk scores and tax summary
- GET /insights: Rule-based advisory insights, high impact first
"""

from typing import Literal

import structlog
from fastapi import APIRouter, Depends, Query

from ...services.insights import filter_insights
from ...services.portfolio_service import PortfolioService
from ..dependencies.services import get_portfolio_service
from ..schemas.portfolio_models import InsightsResponse, MetricsResponse, SnapshotInfo

logger = structlog.get_logger()

router = APIRouter()


@router.get("/metrics", response_model=MetricsResponse)
async def get_metrics(
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> MetricsResponse:
    """Refresh holdings and compute portfolio metrics."""
    snapshot = await portfolio_service.refresh()
    metrics, _ = portfolio_service.analyze(snapshot)

    logger.info(
        "Portfolio metrics computed",
        holdings=metrics.number_of_holdings,
        diversification_score=round(metrics.diversification_score, 1),
    )
    return MetricsResponse(metrics=metrics, snapshot=SnapshotInfo.from_snapshot(snapshot))


@router.get("/insights", response_model=InsightsResponse)
async def get_insights(
    filter: Literal["all", "actionable", "warnings"] = Query(
        "all", description="all | actionable | warnings"
    ),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> InsightsResponse:
    """
    Refresh holdings and evaluate the insight rules.

    Args:
        filter: View to return
        portfolio_service: Portfolio service

    Returns:
        Insights ordered high, medium, low impact
    """
    snapshot = await portfolio_service.refresh()
    _, insights = portfolio_service.analyze(snapshot)
    selected = filter_insights(insights, filter)

    logger.info("Insights evaluated", filter=filter, total=len(insights), returned=len(selected))
    return InsightsResponse(
        insights=selected,
        count=len(selected),
        filter=filter,
        total=len(insights),
        snapshot=SnapshotInfo.from_snapshot(snapshot),
    )
