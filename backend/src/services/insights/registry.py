"""Rule registry and insight engine.

The registry provides plugin-style discovery of insight rules. Rules are
registered when their module in rules/ is imported; the engine evaluates
every registered rule against one PortfolioMetrics and returns the fired
insights ordered by impact.
"""

from collections.abc import Iterable, Sequence

import structlog

from ...core.analytics.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from ...core.analytics.metrics import MetricsEngine, PortfolioMetrics
from ...models.holding import Holding
from .base import InsightRule
from .models import Insight, InsightFilter, InsightType

logger = structlog.get_logger()

# Global registry of rule classes, in registration order
_rule_registry: dict[str, type[InsightRule]] = {}


def register_rule(rule_class: type[InsightRule]) -> type[InsightRule]:
    """Decorator to register a rule class.

    Usage:
        @register_rule
        class OverweightPositionRule(InsightRule):
            RULE_ID = "overweight-positions"
            ...
    """
    rule_id = rule_class.RULE_ID
    if not rule_id:
        raise ValueError(f"Rule class {rule_class.__name__} must define RULE_ID")

    if rule_id in _rule_registry:
        logger.warning(
            "Rule already registered, overwriting",
            rule_id=rule_id,
            old_class=_rule_registry[rule_id].__name__,
            new_class=rule_class.__name__,
        )

    _rule_registry[rule_id] = rule_class
    logger.debug("Rule registered", rule_id=rule_id, class_name=rule_class.__name__)
    return rule_class


def get_registered_rules() -> dict[str, type[InsightRule]]:
    """Get all registered rule classes.

    Returns:
        Dict mapping rule_id to rule class
    """
    # Import rules module to trigger registration
    from . import rules  # noqa: F401

    return _rule_registry.copy()


def sort_by_impact(insights: Iterable[Insight]) -> list[Insight]:
    """Stable sort, high impact first."""
    return sorted(insights, key=lambda insight: insight.impact.rank)


def filter_insights(
    insights: Iterable[Insight], mode: InsightFilter | str = InsightFilter.ALL
) -> list[Insight]:
    """Select the insights shown for a view.

    Args:
        insights: Insights in display order
        mode: all | actionable | warnings

    Returns:
        Matching insights, order preserved
    """
    mode = InsightFilter(mode)
    if mode == InsightFilter.ACTIONABLE:
        return [insight for insight in insights if insight.actionable]
    if mode == InsightFilter.WARNINGS:
        return [insight for insight in insights if insight.type == InsightType.WARNING]
    return list(insights)


class InsightEngine:
    """Evaluates a battery of rules under one AnalyticsConfig."""

    def __init__(
        self,
        config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
        rules: Sequence[InsightRule] | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            config: Thresholds shared by the metrics engine and every rule
            rules: Rule instances to evaluate; all registered rules when None
        """
        self.config = config
        if rules is None:
            rules = [rule_class() for rule_class in get_registered_rules().values()]
        self.rules: tuple[InsightRule, ...] = tuple(rules)

    @property
    def rule_ids(self) -> list[str]:
        return [rule.RULE_ID for rule in self.rules]

    def evaluate(self, metrics: PortfolioMetrics) -> list[Insight]:
        """Run every rule and return fired insights, high impact first.

        An empty portfolio yields no insights.
        """
        if metrics.is_empty:
            return []

        fired = []
        for rule in self.rules:
            insight = rule.evaluate(metrics, self.config)
            if insight is not None:
                fired.append(insight)

        insights = sort_by_impact(fired)
        logger.debug(
            "Insights evaluated",
            rules=len(self.rules),
            fired=len(insights),
            ids=[insight.id for insight in insights],
        )
        return insights

    def evaluate_holdings(self, holdings: Sequence[Holding]) -> list[Insight]:
        """Compute metrics with this engine's config, then evaluate."""
        return self.evaluate(MetricsEngine(self.config).compute(holdings))
