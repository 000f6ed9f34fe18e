"""
Flat-file history of LLM analyses.

One markdown file per analysis in a single directory:
    analysis-<epoch ms>.md           (portfolio analysis)
    analysis-<SYMBOL>-<epoch ms>.md  (single-holding analysis)

Each file starts with a small header:
    # INFY Analysis
    **Generated:** 19/10/2025, 13:37:14

    ---

Listing enumerates the directory; there is no index file and no locking.
"""

import re
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import structlog

from ..core.exceptions import NotFoundError, StorageError, ValidationError
from ..models.analysis import AnalysisDocument, AnalysisRecord

logger = structlog.get_logger()

ANALYSIS_FILENAME_PATTERN = re.compile(r"^analysis-(?:(.*)-)?(\d+)\.md$")
GENERATED_FORMAT = "%d/%m/%Y, %H:%M:%S"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _validate_id(analysis_id: str) -> str:
    if not analysis_id or ".." in analysis_id or "/" in analysis_id or "\\" in analysis_id:
        raise ValidationError("Invalid analysis id", analysis_id=analysis_id)
    return analysis_id


class AnalysisHistoryStore:
    """Stores analyses as markdown files under one directory."""

    def __init__(self, directory: str | Path, clock: Callable[[], datetime] = _utc_now):
        """
        Initialize store.

        Args:
            directory: Directory holding the markdown files (created on write)
            clock: Source of the current time
        """
        self.directory = Path(directory)
        self._clock = clock

    def _path(self, analysis_id: str) -> Path:
        return self.directory / f"{_validate_id(analysis_id)}.md"

    @staticmethod
    def parse_filename(filename: str) -> AnalysisRecord | None:
        """Metadata from a filename, None when it is not an analysis file."""
        match = ANALYSIS_FILENAME_PATTERN.match(filename)
        if not match:
            return None
        symbol, timestamp = match.group(1) or None, int(match.group(2))
        return AnalysisRecord(
            id=filename.removesuffix(".md"),
            filename=filename,
            symbol=symbol,
            timestamp=timestamp,
            created_at=datetime.fromtimestamp(timestamp / 1000, UTC),
        )

    def save(self, content: str, symbol: str | None = None) -> AnalysisRecord:
        """
        Persist an analysis with its metadata header.

        Args:
            content: Markdown body
            symbol: Holding symbol for single-holding analyses

        Returns:
            Metadata of the written file
        """
        if not content or not content.strip():
            raise ValidationError("Analysis content is required")

        symbol = symbol.strip().upper() if symbol else None
        if symbol is not None:
            _validate_id(symbol)

        created_at = self._clock()
        timestamp = int(created_at.timestamp() * 1000)
        filename = f"analysis-{symbol}-{timestamp}.md" if symbol else f"analysis-{timestamp}.md"
        title = f"{symbol} Analysis" if symbol else "Portfolio Analysis"
        document = (
            f"# {title}\n"
            f"**Generated:** {created_at.strftime(GENERATED_FORMAT)}\n"
            "\n---\n\n"
            f"{content}"
        )

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / filename).write_text(document, encoding="utf-8")
        except OSError as e:
            logger.error("Failed to save analysis", filename=filename, error=str(e))
            raise StorageError("Failed to save analysis", filename=filename) from e

        logger.info("Analysis saved", filename=filename, symbol=symbol)
        return AnalysisRecord(
            id=filename.removesuffix(".md"),
            filename=filename,
            symbol=symbol,
            timestamp=timestamp,
            created_at=datetime.fromtimestamp(timestamp / 1000, UTC),
        )

    def list(self) -> list[AnalysisRecord]:
        """All stored analyses, newest first."""
        if not self.directory.exists():
            return []

        try:
            filenames = [p.name for p in self.directory.iterdir() if p.is_file()]
        except OSError as e:
            logger.error("Failed to read analyses history", error=str(e))
            raise StorageError("Failed to read analyses history") from e

        records = [r for r in map(self.parse_filename, filenames) if r is not None]
        records.sort(key=lambda r: r.timestamp, reverse=True)
        return records

    def get(self, analysis_id: str) -> AnalysisDocument:
        """Read one analysis including its header."""
        path = self._path(analysis_id)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise NotFoundError("Analysis not found", analysis_id=analysis_id) from e
        except OSError as e:
            raise StorageError("Failed to read analysis", analysis_id=analysis_id) from e

        record = self.parse_filename(path.name)
        if record is None:
            raise NotFoundError("Analysis not found", analysis_id=analysis_id)
        return AnalysisDocument(**record.model_dump(), content=content)

    def delete(self, analysis_id: str) -> None:
        """Remove one analysis file."""
        path = self._path(analysis_id)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError("Analysis not found", analysis_id=analysis_id) from e
        except OSError as e:
            raise StorageError("Failed to delete analysis", analysis_id=analysis_id) from e

        logger.info("Analysis deleted", analysis_id=analysis_id)
