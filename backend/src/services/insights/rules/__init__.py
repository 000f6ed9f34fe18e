"""Insight rules module.

This module imports all rule implementations to trigger registration
with the rule registry. Registration order is evaluation order; the
engine sorts the fired insights by impact afterwards.

To add a new rule:
1. Define a class inheriting from InsightRule in one of these modules
   (or a new one)
2. Use the @register_rule decorator
3. Import it in this file
"""

from .positions import (
    MomentumRule,
    OverweightPositionRule,
    ProfitBookingRule,
    SmallPositionRule,
    UnderperformerRule,
)
from .tax import TaxLossHarvestingRule
from .sectors import BestSectorRule, SectorConcentrationRule, WorstSectorRule
from .portfolio import PortfolioHealthRule, RebalancingRule

__all__ = [
    "BestSectorRule",
    "MomentumRule",
    "OverweightPositionRule",
    "PortfolioHealthRule",
    "ProfitBookingRule",
    "RebalancingRule",
    "SectorConcentrationRule",
    "SmallPositionRule",
    "TaxLossHarvestingRule",
    "UnderperformerRule",
    "WorstSectorRule",
]
