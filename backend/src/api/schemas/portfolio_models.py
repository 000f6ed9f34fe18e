"""
Portfolio API request/response models.

Separates API layer from domain models for clean architecture.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from ...core.analytics.metrics import PortfolioMetrics
from ...core.analytics.normalizer import FxRate
from ...models.holding import Holding
from ...services.insights import Insight
from ...services.portfolio_service import PortfolioSnapshot

HoldingKindFilter = Literal["all", "equity", "fund"]


class SnapshotInfo(BaseModel):
    """Refresh metadata shared by every portfolio response."""

    fx_rate: FxRate = Field(..., description="Rate applied to foreign holdings")
    fetched_at: datetime = Field(..., description="When the sources were read")
    source_counts: dict[str, int] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list, description="Degraded sources")

    @classmethod
    def from_snapshot(cls, snapshot: PortfolioSnapshot) -> "SnapshotInfo":
        return cls(
            fx_rate=snapshot.fx_rate,
            fetched_at=snapshot.fetched_at,
            source_counts=snapshot.source_counts,
            warnings=list(snapshot.warnings),
        )


class HoldingsResponse(BaseModel):
    """Normalized holdings."""

    holdings: list[Holding] = Field(..., description="Holdings in home currency")
    count: int = Field(..., description="Number of holdings returned")
    kind: HoldingKindFilter = Field("all", description="Applied kind filter")
    snapshot: SnapshotInfo

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "holdings": [
                    {
                        "symbol": "INFY",
                        "quantity": 25,
                        "average_price": 1450.0,
                        "last_price": 1612.5,
                        "pnl": 4062.5,
                        "sector": "IT",
                        "kind": "equity",
                        "currency": "INR",
                    }
                ],
                "count": 1,
                "kind": "equity",
                "snapshot": {
                    "fx_rate": {"rate": 87.9, "base": "USD", "quote": "INR", "is_fallback": False},
                    "fetched_at": "2025-10-19T08:07:14Z",
                    "source_counts": {"broker_equity": 1, "broker_fund": 0, "spreadsheet_foreign": 0},
                    "warnings": [],
                },
            }
        }


class MetricsResponse(BaseModel):
    """Portfolio metrics with the cost-basis tax summary inside."""

    metrics: PortfolioMetrics
    snapshot: SnapshotInfo


class InsightsResponse(BaseModel):
    """Insights ordered by impact."""

    insights: list[Insight]
    count: int
    filter: Literal["all", "actionable", "warnings"] = "all"
    total: int = Field(..., description="Insights before filtering")
    snapshot: SnapshotInfo
