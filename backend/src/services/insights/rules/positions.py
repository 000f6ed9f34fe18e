"""Position-level insight rules.

Rules that look at individual holdings: oversized positions, large winners,
large losers, dust positions and momentum names.
"""

from ....core.analytics.config import AnalyticsConfig
from ....core.analytics.metrics import PortfolioMetrics
from ....shared.formatters import format_currency
from ..base import InsightRule
from ..models import Insight, InsightCategory, InsightImpact, InsightType
from ..registry import register_rule


@register_rule
class OverweightPositionRule(InsightRule):
    """Holdings above the overweight threshold, all of them listed."""

    RULE_ID = "overweight-positions"
    RULE_NAME = "Overweight Positions"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        overweight = [
            h for h in metrics.holdings if h.weight_pct > config.overweight_position_pct
        ]
        if not overweight:
            return None

        count = len(overweight)
        return Insight(
            id=self.RULE_ID,
            type=InsightType.WARNING,
            category=InsightCategory.REBALANCING,
            title=f"{count} Overweight {self.plural(count, 'Position')}",
            description=(
                f"These holdings exceed {config.overweight_position_pct:g}% of your "
                "portfolio, creating concentration risk."
            ),
            impact=InsightImpact.HIGH,
            actionable=True,
            symbols=self.symbols_of(overweight),
            metrics={
                "count": count,
                "max_weight_pct": max(h.weight_pct for h in overweight),
                "total_overweight_pct": sum(h.weight_pct for h in overweight),
            },
        )


@register_rule
class ProfitBookingRule(InsightRule):
    """Material winners above the profit-booking return."""

    RULE_ID = "profit-booking"
    RULE_NAME = "Profit Booking"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        candidates = [
            h
            for h in metrics.holdings
            if h.return_pct > config.profit_booking_return_pct
            and h.current_value > config.profit_booking_min_value
        ]
        top = sorted(candidates, key=lambda h: h.return_pct, reverse=True)[
            : config.top_k_related
        ]
        if not top:
            return None

        return Insight(
            id=self.RULE_ID,
            type=InsightType.OPPORTUNITY,
            category=InsightCategory.OPPORTUNITY,
            title="Consider Profit Booking",
            description=(
                f"{len(top)} {self.plural(len(top), 'holding')} gained over "
                f"{config.profit_booking_return_pct:g}%. Consider booking partial "
                "profits to lock in gains."
            ),
            impact=InsightImpact.MEDIUM,
            actionable=True,
            symbols=self.symbols_of(top),
            metrics={
                "avg_gain_pct": self.average(h.return_pct for h in top),
                "total_profit": sum(h.pnl for h in top),
            },
        )


@register_rule
class UnderperformerRule(InsightRule):
    """Worst holdings below the underperformance return."""

    RULE_ID = "underperformers"
    RULE_NAME = "Underperformers"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        losers = [
            h for h in metrics.holdings if h.return_pct < config.underperformer_return_pct
        ]
        worst = sorted(losers, key=lambda h: h.return_pct)[: config.top_k_related]
        if not worst:
            return None

        return Insight(
            id=self.RULE_ID,
            type=InsightType.WARNING,
            category=InsightCategory.PERFORMANCE,
            title="Underperforming Holdings",
            description=(
                f"{len(worst)} {self.plural(len(worst), 'holding')} down more than "
                f"{abs(config.underperformer_return_pct):g}%. Review your investment "
                "thesis for these positions."
            ),
            impact=InsightImpact.HIGH,
            actionable=True,
            symbols=self.symbols_of(worst),
            metrics={
                "avg_loss_pct": self.average(h.return_pct for h in worst),
                "total_loss": sum(h.pnl for h in worst),
            },
        )


@register_rule
class SmallPositionRule(InsightRule):
    """Many tiny positions worth consolidating."""

    RULE_ID = "small-positions"
    RULE_NAME = "Small Positions"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        small = sorted(
            (
                h
                for h in metrics.holdings
                if h.current_value < config.small_position_max_value
                and h.weight_pct < config.small_position_max_weight_pct
            ),
            key=lambda h: h.current_value,
        )
        # Fires only when strictly more than the minimum count qualify
        if len(small) <= config.small_position_min_count:
            return None

        return Insight(
            id=self.RULE_ID,
            type=InsightType.INFO,
            category=InsightCategory.REBALANCING,
            title="Consider Consolidating Small Positions",
            description=(
                f"You have {len(small)} positions under "
                f"{format_currency(config.small_position_max_value)}. Consider "
                "consolidating to simplify portfolio management."
            ),
            impact=InsightImpact.LOW,
            actionable=True,
            symbols=self.symbols_of(small, config.top_k_related),
            metrics={
                "count": len(small),
                "total_value": sum(h.current_value for h in small),
                "portfolio_weight_pct": sum(h.weight_pct for h in small),
            },
        )


@register_rule
class MomentumRule(InsightRule):
    """Several holdings with strong but not extreme gains."""

    RULE_ID = "momentum"
    RULE_NAME = "Momentum"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        movers = [
            h
            for h in metrics.holdings
            if config.momentum_min_return_pct < h.return_pct < config.momentum_max_return_pct
        ]
        top = sorted(movers, key=lambda h: h.return_pct, reverse=True)[
            : config.top_k_related
        ]
        if len(top) < config.momentum_min_count:
            return None

        return Insight(
            id=self.RULE_ID,
            type=InsightType.SUCCESS,
            category=InsightCategory.OPPORTUNITY,
            title="Strong Momentum Holdings",
            description=(
                f"{len(top)} holdings showing strong momentum "
                f"({config.momentum_min_return_pct:g}-{config.momentum_max_return_pct:g}% "
                "gains). Consider riding the trend."
            ),
            impact=InsightImpact.LOW,
            actionable=False,
            symbols=self.symbols_of(top),
            metrics={
                "count": len(top),
                "avg_gain_pct": self.average(h.return_pct for h in top),
            },
        )
