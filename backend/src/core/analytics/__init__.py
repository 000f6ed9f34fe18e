"""
Portfolio analytics core.

Pure, synchronous derivations over normalized holdings: classification,
normalization of raw source records, and portfolio metrics.
"""

from .classifier import DEFAULT_CLASSIFIER, SectorClassifier, get_fund_category, get_sector
from .config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from .metrics import (
    HoldingMetrics,
    MetricsEngine,
    PortfolioMetrics,
    RiskLevel,
    SectorAggregate,
    TaxSummary,
    compute_portfolio_metrics,
    safe_divide,
)
from .normalizer import FxRate, HoldingNormalizer

__all__ = [
    "AnalyticsConfig",
    "DEFAULT_ANALYTICS_CONFIG",
    "DEFAULT_CLASSIFIER",
    "FxRate",
    "HoldingMetrics",
    "HoldingNormalizer",
    "MetricsEngine",
    "PortfolioMetrics",
    "RiskLevel",
    "SectorAggregate",
    "SectorClassifier",
    "TaxSummary",
    "compute_portfolio_metrics",
    "get_fund_category",
    "get_sector",
    "safe_divide",
]
