"""Portfolio-wide insight rules: health check and rebalancing."""

from ....core.analytics.config import AnalyticsConfig
from ....core.analytics.metrics import PortfolioMetrics
from ..base import InsightRule
from ..models import Insight, InsightCategory, InsightImpact, InsightType
from ..registry import register_rule


@register_rule
class PortfolioHealthRule(InsightRule):
    """Share of holdings in profit.

    At or above the healthy ratio emits a success, below the unhealthy
    ratio a warning. The band in between stays silent.
    """

    RULE_ID = "portfolio-health"
    CONCERN_ID = "portfolio-concern"
    RULE_NAME = "Portfolio Health"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        total = metrics.number_of_holdings
        profitable = sum(1 for h in metrics.holdings if h.pnl > 0)
        ratio = profitable / total * 100 if total else 0.0

        if ratio >= config.healthy_profit_ratio_pct:
            return Insight(
                id=self.RULE_ID,
                type=InsightType.SUCCESS,
                category=InsightCategory.PERFORMANCE,
                title="Strong Portfolio Performance",
                description=(
                    f"{ratio:.0f}% of your holdings are in profit. Your stock "
                    "selection has been effective."
                ),
                impact=InsightImpact.LOW,
                actionable=False,
                metrics={
                    "profit_ratio_pct": ratio,
                    "profitable_count": profitable,
                    "total_count": total,
                    "total_pnl": metrics.total_pnl,
                },
            )

        if ratio < config.unhealthy_profit_ratio_pct:
            return Insight(
                id=self.CONCERN_ID,
                type=InsightType.WARNING,
                category=InsightCategory.PERFORMANCE,
                title="Portfolio Health Concern",
                description=(
                    f"Only {ratio:.0f}% of your holdings are profitable. Consider "
                    "reviewing your investment strategy."
                ),
                impact=InsightImpact.HIGH,
                actionable=True,
                metrics={
                    "profit_ratio_pct": ratio,
                    "profitable_count": profitable,
                    "losing_count": total - profitable,
                },
            )

        return None


@register_rule
class RebalancingRule(InsightRule):
    """Average distance of holding weights from an equal split."""

    RULE_ID = "rebalancing"
    RULE_NAME = "Rebalancing"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        count = metrics.number_of_holdings
        # Weights are all 0 without market value
        if count == 0 or metrics.current_value <= 0:
            return None

        ideal_weight = 100 / count
        avg_deviation = self.average(
            abs(h.weight_pct - ideal_weight) for h in metrics.holdings
        )
        if avg_deviation <= config.rebalance_deviation_pct:
            return None

        return Insight(
            id=self.RULE_ID,
            type=InsightType.INFO,
            category=InsightCategory.REBALANCING,
            title="Portfolio Rebalancing Recommended",
            description=(
                "Your portfolio has significant weight deviations from equal "
                "allocation. Consider periodic rebalancing."
            ),
            impact=InsightImpact.MEDIUM,
            actionable=True,
            metrics={
                "avg_deviation_pct": avg_deviation,
                "ideal_weight_pct": ideal_weight,
            },
        )
