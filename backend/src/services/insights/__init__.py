"""Portfolio insights service module.

This module provides the advisory rule engine of the dashboard, featuring
an extensible rule system with plugin-style registration.

Key Components:
- InsightRule: Abstract base class for rules
- InsightEngine: Evaluates all rules against PortfolioMetrics
- Models: Insight plus its type, category, impact and filter enums

Usage:
    from src.core.analytics import MetricsEngine
    from src.services.insights import InsightEngine, filter_insights

    metrics = MetricsEngine(config).compute(holdings)
    insights = InsightEngine(config).evaluate(metrics)
    warnings = filter_insights(insights, "warnings")

Adding New Rules:
    1. Add a class to a module in rules/
    2. Inherit from InsightRule
    3. Use @register_rule decorator
    4. Import in rules/__init__.py
"""

from .base import InsightRule
from .models import (
    Insight,
    InsightCategory,
    InsightFilter,
    InsightImpact,
    InsightType,
)
from .registry import (
    InsightEngine,
    filter_insights,
    get_registered_rules,
    register_rule,
    sort_by_impact,
)

__all__ = [
    # Base class
    "InsightRule",
    # Engine and registry
    "InsightEngine",
    "filter_insights",
    "get_registered_rules",
    "register_rule",
    "sort_by_impact",
    # Models
    "Insight",
    "InsightCategory",
    "InsightFilter",
    "InsightImpact",
    "InsightType",
]
