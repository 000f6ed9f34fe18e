"""
Raw holding records as delivered by each data source.

One model per source, discriminated on `source`. Numeric fields are parsed
leniently: a missing or non-numeric value becomes 0 so that one malformed
row never aborts a refresh. Only the normalizer consumes these models.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..shared.formatters import safe_float, safe_optional_float


class _RawRecord(BaseModel):
    """Common lenient parsing for monetary and quantity fields."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    quantity: float = 0.0
    average_price: float = 0.0
    last_price: float = 0.0
    pnl: float = 0.0

    @field_validator("quantity", "average_price", "last_price", "pnl", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> float:
        return safe_float(value)


class BrokerEquityRecord(_RawRecord):
    """Equity position from the Kite Connect holdings endpoint."""

    source: Literal["broker_equity"] = "broker_equity"

    tradingsymbol: str = ""
    exchange: str | None = None
    isin: str | None = None
    sector: str | None = None
    day_change: float = 0.0
    day_change_percentage: float | None = None

    @field_validator("tradingsymbol", mode="before")
    @classmethod
    def _symbol_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("day_change", mode="before")
    @classmethod
    def _lenient_day_change(cls, value: Any) -> float:
        return safe_float(value)

    @field_validator("day_change_percentage", mode="before")
    @classmethod
    def _optional_percentage(cls, value: Any) -> float | None:
        return safe_optional_float(value)


class BrokerFundRecord(_RawRecord):
    """Mutual fund position from the Kite Connect MF holdings endpoint."""

    source: Literal["broker_fund"] = "broker_fund"

    fund: str | None = None
    tradingsymbol: str = ""  # ISIN for mutual funds
    folio: str | None = None

    @field_validator("tradingsymbol", mode="before")
    @classmethod
    def _symbol_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()


class ForeignSpreadsheetRecord(_RawRecord):
    """Row of the overseas brokerage workbook, in foreign currency."""

    source: Literal["spreadsheet_foreign"] = "spreadsheet_foreign"

    ticker: str = "UNKNOWN"
    currency: str = "USD"
    day_change: float = 0.0
    day_change_percentage: float | None = None

    @field_validator("ticker", mode="before")
    @classmethod
    def _ticker_or_unknown(cls, value: Any) -> str:
        if value is None:
            return "UNKNOWN"
        text = str(value).strip()
        if not text or text.lower() == "nan":
            return "UNKNOWN"
        return text

    @field_validator("day_change", mode="before")
    @classmethod
    def _lenient_day_change(cls, value: Any) -> float:
        return safe_float(value)

    @field_validator("day_change_percentage", mode="before")
    @classmethod
    def _optional_percentage(cls, value: Any) -> float | None:
        return safe_optional_float(value)


RawHoldingRecord = Annotated[
    BrokerEquityRecord | BrokerFundRecord | ForeignSpreadsheetRecord,
    Field(discriminator="source"),
]
