"""
Persisted LLM analysis records.

Each analysis is one markdown file named `analysis-[SYMBOL-]<epoch ms>.md`;
these models describe what the history store reports about them.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class AnalysisRecord(BaseModel):
    """Metadata of one stored analysis."""

    id: str = Field(..., description="Filename without extension")
    filename: str = Field(..., description="Markdown filename")
    symbol: str | None = Field(None, description="Symbol for single-holding analyses")
    timestamp: int = Field(..., description="Creation time in epoch milliseconds")
    created_at: datetime = Field(..., description="Creation time (UTC)")

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "id": "analysis-INFY-1760861234567",
                "filename": "analysis-INFY-1760861234567.md",
                "symbol": "INFY",
                "timestamp": 1760861234567,
                "created_at": "2025-10-19T08:07:14.567Z",
            }
        }


class AnalysisDocument(AnalysisRecord):
    """Stored analysis with its markdown content."""

    content: str = Field(..., description="Markdown including the metadata header")
