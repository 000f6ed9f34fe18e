"""
Foreign holdings spreadsheet import.

Reads the overseas brokerage export (Vested "Holdings" workbook) into raw
ForeignSpreadsheetRecord rows. Values stay in the foreign currency; the
normalizer converts them.
"""

import asyncio
from pathlib import Path
from typing import IO, Any
from zipfile import BadZipFile

import pandas as pd
import structlog
from openpyxl.utils.exceptions import InvalidFileException

from ..core.exceptions import NotFoundError, ValidationError
from ..models.raw_records import ForeignSpreadsheetRecord

logger = structlog.get_logger()

# Workbook header -> record field
VESTED_COLUMN_MAP: dict[str, str] = {
    "Ticker": "ticker",
    "Total Shares Held": "quantity",
    "Average Cost (USD)": "average_price",
    "Current Price (USD)": "last_price",
    "Investment Returns (USD)": "pnl",
    "Daily Change (USD)": "day_change",
    "Daily Change (%)": "day_change_percentage",
}


class ForeignHoldingsImporter:
    """Parses the first sheet of a foreign holdings workbook."""

    def __init__(
        self,
        path: str | Path,
        currency: str = "USD",
        column_map: dict[str, str] | None = None,
    ):
        """
        Initialize importer.

        Args:
            path: Workbook location
            currency: Currency the workbook is denominated in
            column_map: Header to field mapping (defaults to the Vested export)
        """
        self.path = Path(path)
        self.currency = currency
        self.column_map = column_map or VESTED_COLUMN_MAP

    def parse_frame(self, df: pd.DataFrame) -> list[ForeignSpreadsheetRecord]:
        """Convert a worksheet DataFrame into records, one per row."""
        present = {column: field for column, field in self.column_map.items() if column in df.columns}
        missing = sorted(set(self.column_map) - set(present))
        if missing:
            logger.warning("Spreadsheet columns missing", missing=missing, path=str(self.path))

        records = []
        for row in df.to_dict(orient="records"):
            values: dict[str, Any] = {field: row.get(column) for column, field in present.items()}
            records.append(ForeignSpreadsheetRecord(currency=self.currency, **values))
        return records

    def read(self, source: str | Path | IO[bytes] | None = None) -> list[ForeignSpreadsheetRecord]:
        """
        Read the workbook.

        Args:
            source: Path or binary stream; the configured path when None

        Returns:
            Raw foreign records in sheet order

        Raises:
            NotFoundError: Workbook file does not exist
            ValidationError: File is not a readable workbook
        """
        target = self.path if source is None else source
        if isinstance(target, (str, Path)) and not Path(target).exists():
            raise NotFoundError("Holdings spreadsheet not found", path=str(target))

        try:
            df = pd.read_excel(target, sheet_name=0, engine="openpyxl")
        except (ValueError, OSError, BadZipFile, InvalidFileException) as e:
            raise ValidationError(f"Unreadable holdings spreadsheet: {e}", path=str(target)) from e

        records = self.parse_frame(df)
        logger.info("Spreadsheet holdings parsed", rows=len(records), path=str(target))
        return records

    async def get_holdings(self) -> list[ForeignSpreadsheetRecord]:
        """Read the configured workbook without blocking the event loop."""
        return await asyncio.to_thread(self.read)
