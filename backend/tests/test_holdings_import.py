"""
Unit tests for the foreign holdings spreadsheet importer.

Tests DataFrame parsing with the Vested column layout, workbook reading via
openpyxl, and error mapping for missing or unreadable files.
"""

import pandas as pd
import pytest

from src.core.exceptions import NotFoundError, ValidationError
from src.services.holdings_import import VESTED_COLUMN_MAP, ForeignHoldingsImporter

# ===== Fixtures =====


@pytest.fixture
def vested_frame():
    """Worksheet as exported by the overseas broker"""
    return pd.DataFrame(
        [
            {
                "Ticker": "AAPL",
                "Name": "Apple Inc",
                "Total Shares Held": 2.5,
                "Average Cost (USD)": 150.0,
                "Current Price (USD)": 200.0,
                "Investment Returns (USD)": 125.0,
                "Daily Change (USD)": 1.5,
                "Daily Change (%)": 0.75,
            },
            {
                "Ticker": None,
                "Name": "Cash sweep",
                "Total Shares Held": None,
                "Average Cost (USD)": "n/a",
                "Current Price (USD)": 1.0,
                "Investment Returns (USD)": None,
                "Daily Change (USD)": None,
                "Daily Change (%)": None,
            },
        ]
    )


@pytest.fixture
def importer(tmp_path):
    """Importer pointed at a temporary workbook path"""
    return ForeignHoldingsImporter(tmp_path / "Vested_Holdings.xlsx")


# ===== parse_frame =====


class TestParseFrame:
    """Test DataFrame to record conversion"""

    def test_columns_mapped(self, importer, vested_frame):
        """Test Vested headers map to record fields"""
        records = importer.parse_frame(vested_frame)
        apple = records[0]

        assert apple.ticker == "AAPL"
        assert apple.quantity == 2.5
        assert apple.average_price == 150.0
        assert apple.last_price == 200.0
        assert apple.pnl == 125.0
        assert apple.day_change == 1.5
        assert apple.day_change_percentage == 0.75
        assert apple.currency == "USD"

    def test_blank_cells_are_neutral(self, importer, vested_frame):
        """Test empty and junk cells become 0 and UNKNOWN"""
        cash = importer.parse_frame(vested_frame)[1]

        assert cash.ticker == "UNKNOWN"
        assert cash.quantity == 0.0
        assert cash.average_price == 0.0
        assert cash.pnl == 0.0
        assert cash.day_change_percentage is None

    def test_missing_columns_tolerated(self, importer):
        """Test absent columns fall back to defaults"""
        records = importer.parse_frame(pd.DataFrame([{"Ticker": "MSFT"}]))

        assert records[0].ticker == "MSFT"
        assert records[0].quantity == 0.0

    def test_row_order_preserved(self, importer):
        """Test one record per row in sheet order"""
        frame = pd.DataFrame([{"Ticker": t} for t in ("C", "A", "B")])
        assert [r.ticker for r in importer.parse_frame(frame)] == ["C", "A", "B"]

    def test_custom_column_map(self, tmp_path):
        """Test another broker's layout"""
        importer = ForeignHoldingsImporter(
            tmp_path / "x.xlsx",
            currency="EUR",
            column_map={"Symbol": "ticker", "Qty": "quantity"},
        )
        records = importer.parse_frame(pd.DataFrame([{"Symbol": "SAP", "Qty": 3}]))

        assert records[0].ticker == "SAP"
        assert records[0].quantity == 3
        assert records[0].currency == "EUR"


# ===== read =====


class TestRead:
    """Test reading workbooks from disk"""

    def test_reads_first_sheet(self, importer, vested_frame):
        """Test a workbook written with openpyxl is read back"""
        vested_frame.to_excel(importer.path, index=False, engine="openpyxl")

        records = importer.read()

        assert [r.ticker for r in records] == ["AAPL", "UNKNOWN"]
        assert records[0].last_price == 200.0

    def test_missing_file(self, importer):
        """Test absent workbook raises NotFoundError"""
        with pytest.raises(NotFoundError):
            importer.read()

    def test_unreadable_file(self, importer):
        """Test a non-workbook file raises ValidationError"""
        importer.path.write_text("not a workbook")

        with pytest.raises(ValidationError):
            importer.read()

    @pytest.mark.asyncio
    async def test_get_holdings(self, importer, vested_frame):
        """Test async wrapper returns the same records"""
        vested_frame.to_excel(importer.path, index=False, engine="openpyxl")

        records = await importer.get_holdings()

        assert len(records) == 2

    def test_default_map_covers_record_fields(self):
        """Test every mapped field exists on the record"""
        from src.models.raw_records import ForeignSpreadsheetRecord

        assert set(VESTED_COLUMN_MAP.values()) <= set(ForeignSpreadsheetRecord.model_fields)
