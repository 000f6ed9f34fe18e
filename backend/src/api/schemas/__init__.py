"""API request/response schemas."""

from .ai_models import (
    AnalysisHistoryResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    SaveAnalysisRequest,
)
from .kite_models import LoginUrlResponse, SessionRequest, SessionResponse
from .portfolio_models import (
    HoldingsResponse,
    InsightsResponse,
    MetricsResponse,
    SnapshotInfo,
)

__all__ = [
    "AnalysisHistoryResponse",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "HoldingsResponse",
    "InsightsResponse",
    "LoginUrlResponse",
    "MetricsResponse",
    "SaveAnalysisRequest",
    "SessionRequest",
    "SessionResponse",
    "SnapshotInfo",
]
