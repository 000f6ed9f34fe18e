"""
LLM narrative analysis of the portfolio.

Builds the percentage-only briefing from portfolio metrics, sends it to the
chat model and stores the answer in the flat-file history.
"""

from collections.abc import Sequence
from datetime import datetime

import structlog
from pydantic import BaseModel, Field

from ..core.analytics.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from ..core.analytics.metrics import MetricsEngine
from ..core.exceptions import ExternalServiceError, ValidationError
from ..models.analysis import AnalysisRecord
from ..models.holding import Holding
from ..services.analysis_history import AnalysisHistoryStore
from .llm_client import DashScopeClient
from .prompts import (
    PORTFOLIO_ANALYST_SYSTEM_PROMPT,
    build_holding_analysis_prompt,
    build_portfolio_analysis_prompt,
)

logger = structlog.get_logger()


class AnalysisResult(BaseModel):
    """Generated analysis and where it was stored."""

    content: str = Field(..., description="Markdown returned by the model")
    symbol: str | None = Field(None, description="Analyzed holding, None for the portfolio")
    model: str = Field(..., description="Model that produced the analysis")
    record: AnalysisRecord | None = Field(None, description="History entry when saved")
    total_tokens: int | None = None


class PortfolioAnalyst:
    """Runs portfolio and single-holding analyses through the LLM."""

    def __init__(
        self,
        llm_client: DashScopeClient,
        history_store: AnalysisHistoryStore | None = None,
        config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
        temperature: float = 0.7,
        max_tokens: int = 8000,
    ):
        """
        Initialize analyst.

        Args:
            llm_client: Chat model client
            history_store: Where analyses are saved (saving disabled when None)
            config: Thresholds used to compute the metrics in the prompt
            temperature: Sampling temperature
            max_tokens: Response budget
        """
        self.llm_client = llm_client
        self.history_store = history_store
        self.metrics_engine = MetricsEngine(config)
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def analyze(
        self,
        holdings: Sequence[Holding],
        symbol: str | None = None,
        save: bool = True,
        as_of: datetime | None = None,
    ) -> AnalysisResult:
        """
        Generate an analysis.

        Args:
            holdings: Current normalized holdings
            symbol: Analyze one holding instead of the whole portfolio
            save: Persist the result to the history store
            as_of: Date shown in the prompt

        Returns:
            AnalysisResult with content and optional history record

        Raises:
            ValidationError: No holdings
            NotFoundError: Symbol not held
            ExternalServiceError: Model failed or returned nothing
        """
        if not holdings:
            raise ValidationError("No holdings to analyze")

        metrics = self.metrics_engine.compute(holdings)
        if symbol:
            prompt = build_holding_analysis_prompt(metrics, symbol, as_of)
        else:
            prompt = build_portfolio_analysis_prompt(metrics, as_of)

        logger.info(
            "Starting LLM analysis",
            symbol=symbol,
            holdings=len(holdings),
            prompt_chars=len(prompt),
        )

        content = await self.llm_client.generate(
            [
                {"role": "system", "content": PORTFOLIO_ANALYST_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not content or not content.strip():
            raise ExternalServiceError(
                "No response from LLM", service="dashscope", model=self.llm_client.model
            )

        record = None
        if save and self.history_store is not None:
            record = self.history_store.save(content, symbol=symbol)

        usage = self.llm_client.get_last_token_usage()
        return AnalysisResult(
            content=content,
            symbol=symbol.strip().upper() if symbol else None,
            model=self.llm_client.model,
            record=record,
            total_tokens=usage.total_tokens if usage else None,
        )
