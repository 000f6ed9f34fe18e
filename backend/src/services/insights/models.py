"""Pydantic models for portfolio insights.

This module defines the advisory record produced by the insight rules and
the enums used to classify, rank and filter it.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class InsightType(str, Enum):
    """Tone of an insight."""

    WARNING = "warning"
    OPPORTUNITY = "opportunity"
    INFO = "info"
    SUCCESS = "success"


class InsightCategory(str, Enum):
    """Area of the portfolio an insight concerns."""

    REBALANCING = "rebalancing"
    PERFORMANCE = "performance"
    RISK = "risk"
    TAX = "tax"
    OPPORTUNITY = "opportunity"


class InsightImpact(str, Enum):
    """Severity used to order insights (high first)."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _IMPACT_RANK[self]


_IMPACT_RANK = {
    InsightImpact.HIGH: 0,
    InsightImpact.MEDIUM: 1,
    InsightImpact.LOW: 2,
}


class InsightFilter(str, Enum):
    """Views supported when listing insights."""

    ALL = "all"
    ACTIONABLE = "actionable"
    WARNINGS = "warnings"


class Insight(BaseModel):
    """Advisory record generated fresh on every analysis pass."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "overweight-positions",
                "type": "warning",
                "category": "rebalancing",
                "title": "2 Overweight Positions",
                "description": "These holdings exceed 12% of your portfolio, creating concentration risk.",
                "impact": "high",
                "actionable": True,
                "symbols": ["RELIANCE", "HDFCBANK"],
                "metrics": {"max_weight_pct": 18.4, "total_overweight_pct": 31.2},
            }
        },
    )

    id: str = Field(..., description="Stable rule identifier (e.g., 'tax-loss')")
    type: InsightType = Field(..., description="warning | opportunity | info | success")
    category: InsightCategory = Field(..., description="Portfolio area")
    title: str = Field(..., description="Short headline")
    description: str = Field(..., description="One or two sentences of detail")
    impact: InsightImpact = Field(..., description="high | medium | low")
    actionable: bool = Field(..., description="Whether the user is expected to act")
    symbols: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Related holdings, capped at the configured top K",
    )
    metrics: dict[str, float] = Field(
        default_factory=dict,
        description="Numeric figures backing the insight",
    )

    @property
    def is_warning(self) -> bool:
        return self.type == InsightType.WARNING
