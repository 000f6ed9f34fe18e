"""
Portfolio service for holdings refresh and analysis.

Coordinates the broker client, the foreign spreadsheet importer and the FX
rate service, then hands a complete holdings tuple to the analytics core.
"""

import asyncio
from collections.abc import Awaitable
from datetime import UTC, datetime
from typing import TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ..core.analytics.classifier import DEFAULT_CLASSIFIER, SectorClassifier
from ..core.analytics.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from ..core.analytics.metrics import MetricsEngine, PortfolioMetrics
from ..core.analytics.normalizer import FxRate, HoldingNormalizer
from ..core.exceptions import AppError
from ..models.holding import Holding, InstrumentKind
from .fx_rate_service import FxRateService
from .holdings_import import ForeignHoldingsImporter
from .insights import Insight, InsightEngine
from .kite import KiteConnectClient

logger = structlog.get_logger()

T = TypeVar("T")


class PortfolioSnapshot(BaseModel):
    """Immutable result of one refresh cycle."""

    model_config = ConfigDict(frozen=True)

    holdings: tuple[Holding, ...] = Field(default_factory=tuple)
    fx_rate: FxRate
    fetched_at: datetime
    source_counts: dict[str, int] = Field(
        default_factory=dict, description="Records fetched per source"
    )
    warnings: tuple[str, ...] = Field(
        default_factory=tuple, description="Degraded optional sources"
    )

    def by_kind(self, kind: InstrumentKind | str | None = None) -> tuple[Holding, ...]:
        """Holdings of one instrument kind; all holdings when kind is None."""
        if kind is None:
            return self.holdings
        kind = InstrumentKind(kind)
        return tuple(h for h in self.holdings if h.kind == kind)


class PortfolioService:
    """Service for refreshing and analyzing the aggregated portfolio."""

    def __init__(
        self,
        kite_client: KiteConnectClient,
        fx_service: FxRateService,
        importer: ForeignHoldingsImporter | None = None,
        config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
        classifier: SectorClassifier = DEFAULT_CLASSIFIER,
        home_currency: str = "INR",
    ):
        """
        Initialize portfolio service.

        Args:
            kite_client: Broker client (equities are mandatory, funds optional)
            fx_service: Rate source for foreign holdings
            importer: Optional foreign holdings spreadsheet importer
            config: Thresholds for metrics and insights
            classifier: Sector/category tables
            home_currency: Currency of broker-fed values
        """
        self.kite_client = kite_client
        self.fx_service = fx_service
        self.importer = importer
        self.config = config
        self.classifier = classifier
        self.home_currency = home_currency
        self.metrics_engine = MetricsEngine(config)
        self.insight_engine = InsightEngine(config)

    async def _optional(
        self, source: str, fetch: Awaitable[list[T]], warnings: list[str]
    ) -> list[T]:
        """Await an optional source, degrading to an empty list on failure."""
        try:
            return await fetch
        except AppError as e:
            logger.warning(
                "Optional holdings source failed",
                source=source,
                error_type=e.error_type,
                error=e.message,
            )
            warnings.append(f"{source}: {e.message}")
            return []

    async def _no_records(self) -> list:
        return []

    async def refresh(self) -> PortfolioSnapshot:
        """
        Fetch every source concurrently and normalize the result.

        Equity holdings are mandatory: their failure propagates. Mutual funds
        and the spreadsheet degrade to empty lists, the FX rate to the
        fallback constant; each degradation is recorded in `warnings`.

        Returns:
            PortfolioSnapshot with holdings ordered equities, funds, foreign
        """
        warnings: list[str] = []
        foreign_fetch = (
            self.importer.get_holdings() if self.importer is not None else self._no_records()
        )

        equities, funds, foreign, fx_rate = await asyncio.gather(
            self.kite_client.get_holdings(),
            self._optional("broker_fund", self.kite_client.get_mf_holdings(), warnings),
            self._optional("spreadsheet_foreign", foreign_fetch, warnings),
            self.fx_service.get_rate(),
        )
        if fx_rate.is_fallback:
            warnings.append(f"fx_rate: using fallback rate {fx_rate.rate}")

        normalizer = HoldingNormalizer(
            fx_rate=fx_rate,
            classifier=self.classifier,
            home_currency=self.home_currency,
        )
        holdings = normalizer.normalize_all([*equities, *funds, *foreign])

        snapshot = PortfolioSnapshot(
            holdings=holdings,
            fx_rate=fx_rate,
            fetched_at=datetime.now(UTC),
            source_counts={
                "broker_equity": len(equities),
                "broker_fund": len(funds),
                "spreadsheet_foreign": len(foreign),
            },
            warnings=tuple(warnings),
        )
        logger.info(
            "Portfolio refreshed",
            holdings=len(holdings),
            fx_rate=fx_rate.rate,
            fx_fallback=fx_rate.is_fallback,
            warnings=len(warnings),
        )
        return snapshot

    def analyze(
        self, snapshot: PortfolioSnapshot
    ) -> tuple[PortfolioMetrics, list[Insight]]:
        """Compute metrics and insights for a snapshot (pure, synchronous)."""
        metrics = self.metrics_engine.compute(snapshot.holdings)
        insights = self.insight_engine.evaluate(metrics)
        return metrics, insights
