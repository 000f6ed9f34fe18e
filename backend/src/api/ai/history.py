"""
Analysis history endpoints.

Provides:
- GET /history: Stored analyses, newest first
- POST /history: Store an analysis
- GET /history/{analysis_id}: One analysis with content
- DELETE /history/{analysis_id}: Remove one analysis

Handlers are sync; FastAPI runs them in its threadpool since the store does
blocking file I/O.
"""

import structlog
from fastapi import APIRouter, Depends, status

from ...models.analysis import AnalysisDocument, AnalysisRecord
from ...services.analysis_history import AnalysisHistoryStore
from ..dependencies.services import get_history_store
from ..schemas.ai_models import AnalysisHistoryResponse, SaveAnalysisRequest

logger = structlog.get_logger()

router = APIRouter()


@router.get("/history", response_model=AnalysisHistoryResponse)
def list_analyses(
    store: AnalysisHistoryStore = Depends(get_history_store),
) -> AnalysisHistoryResponse:
    """List stored analyses, newest first."""
    analyses = store.list()
    return AnalysisHistoryResponse(analyses=analyses, count=len(analyses))


@router.post("/history", response_model=AnalysisRecord, status_code=status.HTTP_201_CREATED)
def save_analysis(
    body: SaveAnalysisRequest,
    store: AnalysisHistoryStore = Depends(get_history_store),
) -> AnalysisRecord:
    """Store an analysis with its metadata header."""
    return store.save(body.content, symbol=body.symbol)


@router.get("/history/{analysis_id}", response_model=AnalysisDocument)
def get_analysis(
    analysis_id: str,
    store: AnalysisHistoryStore = Depends(get_history_store),
) -> AnalysisDocument:
    """Read one analysis by id (filename without .md)."""
    return store.get(analysis_id)


@router.delete("/history/{analysis_id}")
def delete_analysis(
    analysis_id: str,
    store: AnalysisHistoryStore = Depends(get_history_store),
) -> dict[str, bool]:
    """Delete one analysis by id."""
    store.delete(analysis_id)
    return {"success": True}
