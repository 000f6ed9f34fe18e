"""
AI analysis and analysis history request/response models.
"""

from pydantic import BaseModel, Field

from ...models.analysis import AnalysisRecord


class AnalyzeRequest(BaseModel):
    """Request model for an LLM analysis."""

    symbol: str | None = Field(
        None, description="Analyze one holding instead of the whole portfolio", max_length=100
    )
    save: bool = Field(True, description="Store the result in the analysis history")

    class Config:
        """Pydantic config."""

        json_schema_extra = {"example": {"symbol": "INFY", "save": True}}


class AnalyzeResponse(BaseModel):
    """Generated analysis."""

    analysis: str = Field(..., description="Markdown analysis")
    symbol: str | None = None
    model: str = Field(..., description="LLM model used")
    saved: AnalysisRecord | None = Field(None, description="History entry when saved")
    total_tokens: int | None = None


class SaveAnalysisRequest(BaseModel):
    """Request model for storing an analysis produced elsewhere."""

    content: str = Field(..., description="Markdown body", min_length=1)
    symbol: str | None = Field(None, max_length=100)


class AnalysisHistoryResponse(BaseModel):
    """Stored analyses, newest first."""

    analyses: list[AnalysisRecord]
    count: int
