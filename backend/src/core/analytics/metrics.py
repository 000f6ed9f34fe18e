"""
Portfolio metrics engine.

Pure, single-pass aggregation over a holdings sequence: per-holding weights
and returns, sector rollups, Herfindahl-Hirschman concentration, effective
diversification, top-N concentration, diversification and risk scores, and
a cost-basis tax summary.

Every ratio goes through `safe_divide`, so zero totals, zero cost bases and
empty portfolios produce 0 rather than NaN, infinity or an exception.
"""

import math
from collections.abc import Sequence
from enum import Enum

import structlog
from pydantic import BaseModel, ConfigDict

from ...models.holding import Holding, InstrumentKind
from .config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig

logger = structlog.get_logger()


class RiskLevel(str, Enum):
    """Risk bands used for holdings, sectors and overall concentration."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning `default` for a zero denominator or non-finite result."""
    if denominator == 0:
        return default
    result = numerator / denominator
    if not math.isfinite(result):
        return default
    return result


def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    return max(lower, min(upper, value))


def herfindahl_index(weights_pct: Sequence[float]) -> float:
    """Sum of squared weights as a fraction (weights given in percent)."""
    return sum((weight / 100) ** 2 for weight in weights_pct)


def top_k_concentration(weights_pct: Sequence[float], k: int) -> float:
    """Combined weight (percent) of the k largest positions."""
    return sum(sorted(weights_pct, reverse=True)[:k])


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class HoldingMetrics(_Frozen):
    """Derived per-holding figures."""

    holding: Holding
    investment: float
    current_value: float
    pnl: float
    return_pct: float
    weight_pct: float
    hhi_contribution_pct: float
    is_overweight: bool
    risk_level: RiskLevel

    @property
    def symbol(self) -> str:
        return self.holding.symbol

    @property
    def sector(self) -> str:
        return self.holding.sector


class SectorAggregate(_Frozen):
    """Rollup of all holdings sharing a sector or fund category label."""

    name: str
    count: int
    investment: float
    current_value: float
    pnl: float
    return_pct: float
    weight_pct: float
    max_holding_weight_pct: float
    deviation_from_equal_pct: float
    risk_level: RiskLevel
    symbols: tuple[str, ...]


class AssetBreakdown(_Frozen):
    """Equity vs mutual fund split."""

    kind: InstrumentKind
    count: int
    investment: float
    current_value: float
    pnl: float
    weight_pct: float


class HoldingReference(_Frozen):
    symbol: str
    weight_pct: float
    return_pct: float


class TaxSummary(_Frozen):
    """Unrealized gains and the illustrative tax picture derived from them."""

    total_unrealized_gain: float
    total_unrealized_gain_pct: float
    total_profits: float
    total_losses: float
    profitable_count: int
    losing_count: int
    taxable_gain: float
    estimated_tax: float
    potential_tax_savings: float


class PortfolioMetrics(_Frozen):
    """Portfolio-level aggregates; a pure function of the holdings."""

    total_investment: float
    current_value: float
    total_pnl: float
    total_pnl_pct: float
    day_change: float
    day_change_pct: float

    number_of_holdings: int
    number_of_sectors: int

    concentration_index: float
    effective_diversification: float
    top5_concentration: float
    top10_concentration: float
    max_sector_weight: float
    diversification_score: float
    concentration_risk: RiskLevel
    overall_risk_score: float
    sector_balance_score: float

    largest_holding: HoldingReference | None
    top_gainer: HoldingReference | None
    top_loser: HoldingReference | None
    top_gainers: tuple[HoldingReference, ...]
    top_losers: tuple[HoldingReference, ...]

    asset_breakdown: tuple[AssetBreakdown, ...]
    holdings: tuple[HoldingMetrics, ...]
    sectors: tuple[SectorAggregate, ...]
    tax: TaxSummary

    @property
    def is_empty(self) -> bool:
        return self.number_of_holdings == 0

    def sector(self, name: str) -> SectorAggregate | None:
        for aggregate in self.sectors:
            if aggregate.name == name:
                return aggregate
        return None


class MetricsEngine:
    """Computes PortfolioMetrics under a fixed AnalyticsConfig."""

    def __init__(self, config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG) -> None:
        self.config = config

    def compute(self, holdings: Sequence[Holding]) -> PortfolioMetrics:
        """
        Compute all portfolio metrics.

        Args:
            holdings: Normalized holdings (not mutated)

        Returns:
            PortfolioMetrics; a zeroed instance for an empty sequence
        """
        total_investment = sum(h.investment for h in holdings)
        current_value = sum(h.current_value for h in holdings)
        total_pnl = sum(h.pnl for h in holdings)
        day_change = sum(h.day_change_value for h in holdings)

        weights = [safe_divide(h.current_value, current_value) * 100 for h in holdings]
        hhi = herfindahl_index(weights)
        concentration_index = hhi * 100

        holding_metrics = tuple(
            self._holding_metrics(holding, weight, hhi)
            for holding, weight in zip(holdings, weights)
        )
        sectors = self._sector_aggregates(holding_metrics)
        max_sector_weight = max((s.weight_pct for s in sectors), default=0.0)
        top5 = top_k_concentration(weights, 5)
        gainers, losers = self._movers(holding_metrics)

        metrics = PortfolioMetrics(
            total_investment=total_investment,
            current_value=current_value,
            total_pnl=total_pnl,
            total_pnl_pct=safe_divide(total_pnl, total_investment) * 100,
            day_change=day_change,
            day_change_pct=safe_divide(day_change, current_value) * 100,
            number_of_holdings=len(holdings),
            number_of_sectors=len(sectors),
            concentration_index=concentration_index,
            effective_diversification=(
                safe_divide(1, hhi) if hhi > 0 else float(len(holdings))
            ),
            top5_concentration=top5,
            top10_concentration=top_k_concentration(weights, 10),
            max_sector_weight=max_sector_weight,
            diversification_score=self._diversification_score(
                current_value, concentration_index, max_sector_weight
            ),
            concentration_risk=self._concentration_risk(concentration_index),
            overall_risk_score=self._overall_risk_score(
                len(holdings), concentration_index, max_sector_weight, top5
            ),
            sector_balance_score=self._sector_balance_score(sectors),
            largest_holding=self._largest_holding(holding_metrics),
            top_gainer=gainers[0] if gainers else None,
            top_loser=losers[0] if losers else None,
            top_gainers=gainers,
            top_losers=losers,
            asset_breakdown=self._asset_breakdown(holding_metrics, current_value),
            holdings=holding_metrics,
            sectors=sectors,
            tax=self._tax_summary(holding_metrics, total_investment),
        )

        logger.debug(
            "Portfolio metrics computed",
            holdings=metrics.number_of_holdings,
            sectors=metrics.number_of_sectors,
            concentration_index=round(concentration_index, 2),
        )
        return metrics

    # ===== Per-holding =====

    def _holding_metrics(self, holding: Holding, weight: float, hhi: float) -> HoldingMetrics:
        config = self.config
        if weight > config.stock_high_risk_pct:
            risk_level = RiskLevel.HIGH
        elif weight > config.stock_medium_risk_pct:
            risk_level = RiskLevel.MEDIUM
        else:
            risk_level = RiskLevel.LOW

        return HoldingMetrics(
            holding=holding,
            investment=holding.investment,
            current_value=holding.current_value,
            pnl=holding.pnl,
            return_pct=holding.return_pct,
            weight_pct=weight,
            hhi_contribution_pct=safe_divide((weight / 100) ** 2, hhi) * 100,
            is_overweight=weight > config.stock_overweight_pct,
            risk_level=risk_level,
        )

    # ===== Sectors =====

    def _sector_aggregates(
        self, holdings: Sequence[HoldingMetrics]
    ) -> tuple[SectorAggregate, ...]:
        grouped: dict[str, list[HoldingMetrics]] = {}
        for item in holdings:
            grouped.setdefault(item.sector, []).append(item)

        equal_weight = safe_divide(100, len(grouped))
        aggregates = []
        for name, members in grouped.items():
            investment = sum(m.investment for m in members)
            pnl = sum(m.pnl for m in members)
            weight = sum(m.weight_pct for m in members)

            if weight > self.config.sector_concentration_pct:
                risk_level = RiskLevel.HIGH
            elif weight > self.config.sector_medium_risk_pct:
                risk_level = RiskLevel.MEDIUM
            else:
                risk_level = RiskLevel.LOW

            aggregates.append(
                SectorAggregate(
                    name=name,
                    count=len(members),
                    investment=investment,
                    current_value=sum(m.current_value for m in members),
                    pnl=pnl,
                    return_pct=safe_divide(pnl, investment) * 100,
                    weight_pct=weight,
                    max_holding_weight_pct=max(m.weight_pct for m in members),
                    deviation_from_equal_pct=weight - equal_weight,
                    risk_level=risk_level,
                    symbols=tuple(m.symbol for m in members),
                )
            )

        aggregates.sort(key=lambda s: s.current_value, reverse=True)
        return tuple(aggregates)

    # ===== Scores =====

    def _diversification_score(
        self, current_value: float, concentration_index: float, max_sector_weight: float
    ) -> float:
        """100 minus HHI%, less a penalty when one sector dominates; clamped."""
        # No value means no allocation to score
        if current_value <= 0:
            return 0.0
        penalty = (
            self.config.diversification_sector_penalty
            if max_sector_weight > self.config.diversification_sector_threshold_pct
            else 0.0
        )
        return clamp(100 - concentration_index - penalty)

    def _concentration_risk(self, concentration_index: float) -> RiskLevel:
        if concentration_index > self.config.concentration_high_pct:
            return RiskLevel.HIGH
        if concentration_index > self.config.concentration_medium_pct:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def _overall_risk_score(
        self,
        count: int,
        concentration_index: float,
        max_sector_weight: float,
        top5: float,
    ) -> float:
        if count == 0:
            return 0.0
        config = self.config
        score = concentration_index
        if max_sector_weight > config.risk_sector_threshold_pct:
            score += config.risk_sector_penalty
        if top5 > config.risk_top5_threshold_pct:
            score += config.risk_top5_penalty
        return clamp(score)

    def _sector_balance_score(self, sectors: Sequence[SectorAggregate]) -> float:
        """How close sector weights sit to an equal split across held sectors."""
        if not sectors:
            return 0.0
        avg_deviation = sum(abs(s.deviation_from_equal_pct) for s in sectors) / len(sectors)
        return clamp(100 - avg_deviation * 2)

    # ===== References =====

    @staticmethod
    def _largest_holding(holdings: Sequence[HoldingMetrics]) -> HoldingReference | None:
        if not holdings:
            return None
        largest = max(holdings, key=lambda m: m.current_value)
        return HoldingReference(
            symbol=largest.symbol,
            weight_pct=largest.weight_pct,
            return_pct=largest.return_pct,
        )

    def _movers(
        self, holdings: Sequence[HoldingMetrics]
    ) -> tuple[tuple[HoldingReference, ...], tuple[HoldingReference, ...]]:
        """
        Top gainers and losers by price move since acquisition.

        Gainers are holdings up, best first; losers are holdings down, worst
        first. Flat holdings appear in neither list.
        """
        limit = self.config.top_k_related
        ranked = sorted(holdings, key=lambda m: m.holding.price_return_pct, reverse=True)
        gainers = [m for m in ranked if m.holding.price_return_pct > 0][:limit]
        losers = [m for m in reversed(ranked) if m.holding.price_return_pct < 0][:limit]
        return self._references(gainers), self._references(losers)

    @staticmethod
    def _references(holdings: Sequence[HoldingMetrics]) -> tuple[HoldingReference, ...]:
        return tuple(
            HoldingReference(
                symbol=m.symbol,
                weight_pct=m.weight_pct,
                return_pct=m.holding.price_return_pct,
            )
            for m in holdings
        )

    @staticmethod
    def _asset_breakdown(
        holdings: Sequence[HoldingMetrics], current_value: float
    ) -> tuple[AssetBreakdown, ...]:
        breakdown = []
        for kind in InstrumentKind:
            members = [m for m in holdings if m.holding.kind == kind]
            value = sum(m.current_value for m in members)
            breakdown.append(
                AssetBreakdown(
                    kind=kind,
                    count=len(members),
                    investment=sum(m.investment for m in members),
                    current_value=value,
                    pnl=sum(m.pnl for m in members),
                    weight_pct=safe_divide(value, current_value) * 100,
                )
            )
        return tuple(breakdown)

    def _tax_summary(
        self, holdings: Sequence[HoldingMetrics], total_investment: float
    ) -> TaxSummary:
        config = self.config
        gains = [m.pnl for m in holdings if m.pnl > 0]
        losses = [abs(m.pnl) for m in holdings if m.pnl < 0]
        total_profits = sum(gains)
        total_losses = sum(losses)
        total_gain = sum(m.pnl for m in holdings)
        taxable_gain = max(0.0, total_profits - config.ltcg_exemption)

        return TaxSummary(
            total_unrealized_gain=total_gain,
            total_unrealized_gain_pct=safe_divide(total_gain, total_investment) * 100,
            total_profits=total_profits,
            total_losses=total_losses,
            profitable_count=len(gains),
            losing_count=len(losses),
            taxable_gain=taxable_gain,
            estimated_tax=taxable_gain * config.ltcg_rate,
            potential_tax_savings=min(total_losses, total_profits) * config.ltcg_rate,
        )


def compute_portfolio_metrics(
    holdings: Sequence[Holding],
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> PortfolioMetrics:
    """Convenience wrapper around MetricsEngine.compute."""
    return MetricsEngine(config).compute(holdings)
