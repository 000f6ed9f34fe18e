"""
Pydantic models for portfolio holdings and stored analyses.
Provides type safety and validation between the data sources and analytics.
"""

from .analysis import AnalysisDocument, AnalysisRecord
from .holding import Holding, InstrumentKind
from .raw_records import (
    BrokerEquityRecord,
    BrokerFundRecord,
    ForeignSpreadsheetRecord,
    RawHoldingRecord,
)

__all__ = [
    "Holding",
    "InstrumentKind",
    "BrokerEquityRecord",
    "BrokerFundRecord",
    "ForeignSpreadsheetRecord",
    "RawHoldingRecord",
    "AnalysisRecord",
    "AnalysisDocument",
]
