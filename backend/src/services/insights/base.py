"""Abstract base class for insight rules.

All insight rules must inherit from InsightRule and implement `evaluate`.
This enables the plugin architecture where a new rule is added by defining
one class in the rules/ package.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ...core.analytics.config import AnalyticsConfig
from ...core.analytics.metrics import HoldingMetrics, PortfolioMetrics
from .models import Insight


class InsightRule(ABC):
    """Abstract base class for all insight rules.

    Rules are stateless and independent: each one reads the portfolio
    metrics and the thresholds, and fires at most one insight.

    To create a new rule:
    1. Add a class to a module in rules/
    2. Inherit from InsightRule and set RULE_ID
    3. Decorate it with @register_rule
    4. Make sure the module is imported in rules/__init__.py

    Example:
        @register_rule
        class CashDragRule(InsightRule):
            RULE_ID = "cash-drag"
            RULE_NAME = "Cash Drag"

            def evaluate(self, metrics, config):
                ...
    """

    # Subclasses must override these class attributes
    RULE_ID: str = ""
    RULE_NAME: str = ""

    @abstractmethod
    def evaluate(
        self, metrics: PortfolioMetrics, config: AnalyticsConfig
    ) -> Insight | None:
        """Evaluate the rule.

        Args:
            metrics: Metrics of a non-empty portfolio
            config: Thresholds to compare against

        Returns:
            The insight when the rule fires, None otherwise
        """
        ...

    @staticmethod
    def symbols_of(holdings: Iterable[HoldingMetrics], limit: int | None = None) -> tuple[str, ...]:
        """Symbols of the given holdings, optionally capped."""
        symbols = tuple(item.symbol for item in holdings)
        return symbols if limit is None else symbols[:limit]

    @staticmethod
    def average(values: Iterable[float]) -> float:
        values = list(values)
        if not values:
            return 0.0
        return sum(values) / len(values)

    @staticmethod
    def plural(count: int, singular: str, plural: str | None = None) -> str:
        return singular if count == 1 else (plural or f"{singular}s")
