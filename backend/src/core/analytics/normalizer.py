"""
Holding normalizer.

Converts raw source records (broker equity, broker mutual fund, foreign
spreadsheet row) into canonical home-currency `Holding` values. This is the
only place the raw record union is visible; metrics and insights only ever
see `Holding`.
"""

from collections.abc import Iterable

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ...models.holding import Holding, InstrumentKind
from ...models.raw_records import (
    BrokerEquityRecord,
    BrokerFundRecord,
    ForeignSpreadsheetRecord,
)
from .classifier import DEFAULT_CLASSIFIER, SectorClassifier
from .sectors import INTERNATIONAL

logger = structlog.get_logger()


class FxRate(BaseModel):
    """Home-currency units per unit of foreign currency."""

    model_config = ConfigDict(frozen=True)

    rate: float = Field(..., gt=0, description="e.g. INR per USD")
    base: str = Field("USD", description="Foreign currency")
    quote: str = Field("INR", description="Home currency")
    is_fallback: bool = Field(
        False, description="True when the configured fallback constant was used"
    )
    source: str = Field("exchangerate-api", description="Where the rate came from")


class HoldingNormalizer:
    """Maps raw records to canonical holdings for one refresh cycle."""

    def __init__(
        self,
        fx_rate: FxRate,
        classifier: SectorClassifier = DEFAULT_CLASSIFIER,
        home_currency: str = "INR",
    ) -> None:
        """
        Initialize normalizer.

        Args:
            fx_rate: Conversion rate applied to foreign-currency records
            classifier: Sector/category classifier (tables are injectable)
            home_currency: Currency of broker-fed records
        """
        self.fx_rate = fx_rate
        self.classifier = classifier
        self.home_currency = home_currency

    def normalize(
        self, record: BrokerEquityRecord | BrokerFundRecord | ForeignSpreadsheetRecord
    ) -> Holding:
        """Convert one raw record into a Holding."""
        if isinstance(record, BrokerEquityRecord):
            return self._from_equity(record)
        if isinstance(record, BrokerFundRecord):
            return self._from_fund(record)
        if isinstance(record, ForeignSpreadsheetRecord):
            return self._from_foreign(record)
        raise TypeError(f"Unsupported record type: {type(record).__name__}")

    def normalize_all(
        self,
        records: Iterable[BrokerEquityRecord | BrokerFundRecord | ForeignSpreadsheetRecord],
    ) -> tuple[Holding, ...]:
        """Convert records, preserving input order."""
        holdings = tuple(self.normalize(record) for record in records)
        logger.debug(
            "Holdings normalized",
            count=len(holdings),
            fx_rate=self.fx_rate.rate,
            fx_fallback=self.fx_rate.is_fallback,
        )
        return holdings

    def _from_equity(self, record: BrokerEquityRecord) -> Holding:
        return Holding(
            symbol=record.tradingsymbol,
            quantity=record.quantity,
            average_price=record.average_price,
            last_price=record.last_price,
            pnl=record.pnl,
            sector=record.sector or self.classifier.classify_symbol(record.tradingsymbol),
            kind=InstrumentKind.EQUITY,
            currency=self.home_currency,
            day_change=record.day_change,
            day_change_percentage=record.day_change_percentage,
            exchange=record.exchange,
            isin=record.isin,
        )

    def _from_fund(self, record: BrokerFundRecord) -> Holding:
        # The fund's display name doubles as its symbol
        name = record.fund or record.tradingsymbol
        pnl = record.pnl or (record.last_price - record.average_price) * record.quantity
        return Holding(
            symbol=name,
            quantity=record.quantity,
            average_price=record.average_price,
            last_price=record.last_price,
            pnl=pnl,
            sector=self.classifier.classify_fund(name),
            kind=InstrumentKind.FUND,
            currency=self.home_currency,
            isin=record.tradingsymbol or None,
            folio=record.folio,
        )

    def _from_foreign(self, record: ForeignSpreadsheetRecord) -> Holding:
        rate = self.fx_rate.rate
        return Holding(
            symbol=record.ticker,
            quantity=record.quantity,
            average_price=record.average_price * rate,
            last_price=record.last_price * rate,
            pnl=record.pnl * rate,
            sector=INTERNATIONAL,
            kind=InstrumentKind.EQUITY,
            currency=record.currency,
            day_change=record.day_change * rate,
            day_change_percentage=record.day_change_percentage,
            exchange="US",
        )
