"""Tax insight rules."""

from ....core.analytics.config import AnalyticsConfig
from ....core.analytics.metrics import PortfolioMetrics
from ....shared.formatters import format_currency
from ..base import InsightRule
from ..models import Insight, InsightCategory, InsightImpact, InsightType
from ..registry import register_rule


@register_rule
class TaxLossHarvestingRule(InsightRule):
    """Material unrealized losses that could offset capital gains.

    The offset is illustrative: total harvestable loss times a fixed
    assumed rate.
    """

    RULE_ID = "tax-loss"
    RULE_NAME = "Tax Loss Harvesting"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        losers = [h for h in metrics.holdings if h.pnl < -config.tax_loss_min_loss]
        worst = sorted(losers, key=lambda h: h.pnl)[: config.top_k_related]
        if not worst:
            return None

        total_loss = sum(abs(h.pnl) for h in worst)
        return Insight(
            id=self.RULE_ID,
            type=InsightType.INFO,
            category=InsightCategory.TAX,
            title="Tax Loss Harvesting Opportunity",
            description=(
                f"You have {format_currency(total_loss)} in unrealized losses that "
                "could be used to offset capital gains."
            ),
            impact=InsightImpact.MEDIUM,
            actionable=True,
            symbols=self.symbols_of(worst),
            metrics={
                "harvestable_loss": total_loss,
                "potential_tax_offset": total_loss * config.tax_offset_rate,
                "eligible_count": len(worst),
            },
        )
