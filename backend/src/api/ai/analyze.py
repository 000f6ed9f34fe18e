"""
LLM analysis endpoint.

Provides:
- POST /analyze: Narrative analysis of the portfolio or one holding
"""

import structlog
from fastapi import APIRouter, Depends

from ...agent.portfolio_analyst import PortfolioAnalyst
from ...services.portfolio_service import PortfolioService
from ..dependencies.services import get_portfolio_analyst, get_portfolio_service
from ..schemas.ai_models import AnalyzeRequest, AnalyzeResponse

logger = structlog.get_logger()

router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_portfolio(
    body: AnalyzeRequest,
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
    analyst: PortfolioAnalyst = Depends(get_portfolio_analyst),
) -> AnalyzeResponse:
    """
    Refresh holdings and request an LLM analysis.

    The prompt carries allocation percentages only. The result is saved to
    the analysis history unless `save` is false.
    """
    snapshot = await portfolio_service.refresh()
    result = await analyst.analyze(snapshot.holdings, symbol=body.symbol, save=body.save)

    logger.info(
        "Analysis generated",
        symbol=result.symbol,
        saved=result.record.filename if result.record else None,
        total_tokens=result.total_tokens,
    )
    return AnalyzeResponse(
        analysis=result.content,
        symbol=result.symbol,
        model=result.model,
        saved=result.record,
        total_tokens=result.total_tokens,
    )
