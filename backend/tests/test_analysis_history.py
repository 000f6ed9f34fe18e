"""
Unit tests for the flat-file analysis history store.

Uses pytest's tmp_path and a fixed clock so filenames are predictable.
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.core.exceptions import NotFoundError, ValidationError
from src.services.analysis_history import AnalysisHistoryStore

FIXED_NOW = datetime(2025, 10, 19, 13, 37, 14, tzinfo=UTC)
FIXED_MS = int(FIXED_NOW.timestamp() * 1000)


class SteppingClock:
    """Clock that advances one second per call."""

    def __init__(self, start=FIXED_NOW):
        self.current = start

    def __call__(self):
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


# ===== Fixtures =====


@pytest.fixture
def store(tmp_path):
    """Store under a not-yet-existing directory"""
    return AnalysisHistoryStore(tmp_path / "analyses", clock=SteppingClock())


# ===== save =====


class TestSave:
    """Test writing analyses"""

    def test_portfolio_analysis(self, store):
        """Test filename, header and directory creation"""
        record = store.save("## Summary\nAll good.")

        assert record.filename == f"analysis-{FIXED_MS}.md"
        assert record.id == f"analysis-{FIXED_MS}"
        assert record.symbol is None
        assert record.timestamp == FIXED_MS
        assert record.created_at == FIXED_NOW

        text = (store.directory / record.filename).read_text(encoding="utf-8")
        assert text == (
            "# Portfolio Analysis\n"
            "**Generated:** 19/10/2025, 13:37:14\n"
            "\n---\n\n"
            "## Summary\nAll good."
        )

    def test_symbol_analysis(self, store):
        """Test symbol is upper-cased into filename and title"""
        record = store.save("Looks fine.", symbol=" infy ")

        assert record.filename == f"analysis-INFY-{FIXED_MS}.md"
        assert record.symbol == "INFY"
        assert store.get(record.id).content.startswith("# INFY Analysis\n")

    @pytest.mark.parametrize("content", ["", "   \n"])
    def test_empty_content_rejected(self, store, content):
        """Test content is required"""
        with pytest.raises(ValidationError):
            store.save(content)

    def test_symbol_with_path_separator_rejected(self, store):
        """Test symbols cannot escape the directory"""
        with pytest.raises(ValidationError):
            store.save("x", symbol="../etc")


# ===== list =====


class TestList:
    """Test enumerating analyses"""

    def test_missing_directory(self, store):
        """Test no directory means no analyses"""
        assert store.list() == []

    def test_newest_first(self, store):
        """Test ordering by embedded timestamp"""
        first = store.save("one")
        second = store.save("two", symbol="TCS")

        records = store.list()

        assert [r.id for r in records] == [second.id, first.id]
        assert records[0].symbol == "TCS"

    def test_ignores_unrelated_files(self, store):
        """Test non-matching filenames are skipped"""
        store.save("one")
        (store.directory / "notes.txt").write_text("x")
        (store.directory / "analysis-draft.md").write_text("x")

        assert len(store.list()) == 1


# ===== get and delete =====


class TestGetDelete:
    """Test reading and removing analyses"""

    def test_get(self, store):
        """Test document includes header and metadata"""
        record = store.save("Body text", symbol="HDFCBANK")

        document = store.get(record.id)

        assert document.symbol == "HDFCBANK"
        assert document.timestamp == FIXED_MS
        assert document.content.endswith("Body text")

    def test_get_missing(self, store):
        """Test unknown id raises NotFoundError"""
        with pytest.raises(NotFoundError):
            store.get("analysis-1")

    def test_delete(self, store):
        """Test delete removes the file"""
        record = store.save("Body")

        store.delete(record.id)

        assert store.list() == []
        with pytest.raises(NotFoundError):
            store.delete(record.id)

    @pytest.mark.parametrize("analysis_id", ["", "../secret", "a/b", "a\\b", ".."])
    def test_traversal_rejected(self, store, analysis_id):
        """Test ids with path components are rejected"""
        with pytest.raises(ValidationError):
            store.get(analysis_id)
        with pytest.raises(ValidationError):
            store.delete(analysis_id)


# ===== parse_filename =====


class TestParseFilename:
    """Test filename metadata"""

    def test_symbol_with_hyphen(self):
        """Test symbols like BAJAJ-AUTO survive parsing"""
        record = AnalysisHistoryStore.parse_filename("analysis-BAJAJ-AUTO-1760881034000.md")

        assert record.symbol == "BAJAJ-AUTO"
        assert record.timestamp == 1760881034000

    def test_not_an_analysis(self):
        """Test other files return None"""
        assert AnalysisHistoryStore.parse_filename("readme.md") is None
