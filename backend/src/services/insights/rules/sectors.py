"""Sector-level insight rules.

Sector concentration plus the best and worst performing sector. Best and
worst are taken from one ranking by sector return, so a single-sector
portfolio is both at once (the thresholds keep them from firing together).
"""

from ....core.analytics.config import AnalyticsConfig
from ....core.analytics.metrics import PortfolioMetrics, SectorAggregate
from ..base import InsightRule
from ..models import Insight, InsightCategory, InsightImpact, InsightType
from ..registry import register_rule


def _ranked_by_return(metrics: PortfolioMetrics) -> list[SectorAggregate]:
    return sorted(metrics.sectors, key=lambda s: s.return_pct, reverse=True)


@register_rule
class SectorConcentrationRule(InsightRule):
    """Sectors holding more than the concentration threshold."""

    RULE_ID = "sector-concentration"
    RULE_NAME = "Sector Concentration"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        heavy = [s for s in metrics.sectors if s.weight_pct > config.sector_concentration_pct]
        if not heavy:
            return None

        names = ", ".join(s.name for s in heavy)
        verb = "is" if len(heavy) == 1 else "are"
        return Insight(
            id=self.RULE_ID,
            type=InsightType.WARNING,
            category=InsightCategory.RISK,
            title="Sector Concentration Risk",
            description=(
                f"{names} {self.plural(len(heavy), 'sector')} {verb} overweight "
                f"(>{config.sector_concentration_pct:g}%). Consider diversifying."
            ),
            impact=InsightImpact.HIGH,
            actionable=True,
            metrics={
                "overweight_sectors": len(heavy),
                "max_sector_weight_pct": max(s.weight_pct for s in heavy),
            },
        )


@register_rule
class BestSectorRule(InsightRule):
    RULE_ID = "best-sector"
    RULE_NAME = "Best Performing Sector"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        ranked = _ranked_by_return(metrics)
        if not ranked:
            return None
        best = ranked[0]
        if best.return_pct <= config.best_sector_return_pct:
            return None

        return Insight(
            id=self.RULE_ID,
            type=InsightType.SUCCESS,
            category=InsightCategory.PERFORMANCE,
            title=f"{best.name} is Your Best Performing Sector",
            description=f"Your {best.name} holdings are up {best.return_pct:.0f}% overall.",
            impact=InsightImpact.LOW,
            actionable=False,
            symbols=best.symbols[: config.sector_related],
            metrics={
                "sector_return_pct": best.return_pct,
                "sector_weight_pct": best.weight_pct,
            },
        )


@register_rule
class WorstSectorRule(InsightRule):
    RULE_ID = "worst-sector"
    RULE_NAME = "Worst Performing Sector"

    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        ranked = _ranked_by_return(metrics)
        if not ranked:
            return None
        worst = ranked[-1]
        if worst.return_pct >= config.worst_sector_return_pct:
            return None

        return Insight(
            id=self.RULE_ID,
            type=InsightType.WARNING,
            category=InsightCategory.PERFORMANCE,
            title=f"{worst.name} Needs Attention",
            description=(
                f"Your {worst.name} holdings are down {abs(worst.return_pct):.0f}%. "
                "Review individual positions."
            ),
            impact=InsightImpact.MEDIUM,
            actionable=True,
            symbols=worst.symbols[: config.sector_related],
            metrics={
                "sector_return_pct": worst.return_pct,
                "sector_weight_pct": worst.weight_pct,
            },
        )
