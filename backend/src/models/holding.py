"""
Holding model for the portfolio dashboard.

Represents one position in one instrument, normalized to home currency.
Holdings are immutable: every refresh builds a new tuple of them.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class InstrumentKind(str, Enum):
    """Instrument kinds supported by the dashboard."""

    EQUITY = "equity"
    FUND = "fund"


class Holding(BaseModel):
    """
    Canonical position in home currency.

    Monetary fields are already converted; `currency` records the source
    currency for display only. `pnl` is the figure reported by the source
    and may legitimately differ from `current_value - investment`.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "symbol": "INFY",
                "quantity": 25,
                "average_price": 1450.0,
                "last_price": 1612.5,
                "pnl": 4062.5,
                "sector": "IT",
                "kind": "equity",
                "currency": "INR",
                "day_change": -12.3,
                "day_change_percentage": -0.76,
                "exchange": "NSE",
            }
        },
    )

    symbol: str = Field(..., description="Trading symbol or fund display name")
    quantity: float = Field(..., description="Units held")
    average_price: float = Field(..., description="Average acquisition price (home currency)")
    last_price: float = Field(..., description="Last traded price (home currency)")
    pnl: float = Field(0.0, description="Profit and loss reported by the source (home currency)")
    sector: str = Field(..., description="Sector or mutual fund category label")
    kind: InstrumentKind = Field(InstrumentKind.EQUITY, description="equity | fund")
    currency: str = Field("INR", description="Source currency (audit only)")

    day_change: float = Field(0.0, description="Per-unit price change today (home currency)")
    day_change_percentage: float | None = Field(None, description="Price change today (%)")
    exchange: str | None = Field(None, description="Listing exchange")
    isin: str | None = Field(None, description="ISIN when provided by the broker")
    folio: str | None = Field(None, description="Mutual fund folio number")

    @property
    def investment(self) -> float:
        """Cost basis (quantity * average price)."""
        return self.quantity * self.average_price

    @property
    def current_value(self) -> float:
        """Market value (quantity * last price)."""
        return self.quantity * self.last_price

    @property
    def return_pct(self) -> float:
        """Reported P&L as a percentage of cost basis, 0 when cost basis is 0."""
        investment = self.investment
        if investment == 0:
            return 0.0
        return self.pnl / investment * 100

    @property
    def price_return_pct(self) -> float:
        """Price move since acquisition, 0 when average price is 0."""
        if self.average_price == 0:
            return 0.0
        return (self.last_price - self.average_price) / self.average_price * 100

    @property
    def day_change_value(self) -> float:
        """Position-level change today."""
        return self.day_change * self.quantity

    @property
    def is_fund(self) -> bool:
        return self.kind == InstrumentKind.FUND
