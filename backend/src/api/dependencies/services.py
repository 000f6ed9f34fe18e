"""
Dependencies for portfolio, broker and AI endpoints.

Services are created once in the application lifespan and stored on
app.state; these providers hand them to the routers and are the seams tests
override with app.dependency_overrides.
"""

from fastapi import Depends, Request

from ...agent.llm_client import DashScopeClient
from ...agent.portfolio_analyst import PortfolioAnalyst
from ...core.config import Settings, get_settings
from ...services.analysis_history import AnalysisHistoryStore
from ...services.kite import KiteConnectClient
from ...services.portfolio_service import PortfolioService


def get_portfolio_service(request: Request) -> PortfolioService:
    """Get portfolio service singleton from app state."""
    service: PortfolioService = request.app.state.portfolio_service
    return service


def get_kite_client(request: Request) -> KiteConnectClient:
    """Get Kite client singleton from app state."""
    client: KiteConnectClient = request.app.state.kite_client
    return client


def get_history_store(request: Request) -> AnalysisHistoryStore:
    """Get analysis history store from app state."""
    store: AnalysisHistoryStore = request.app.state.history_store
    return store


def get_portfolio_analyst(
    request: Request,
    settings: Settings = Depends(get_settings),
    history_store: AnalysisHistoryStore = Depends(get_history_store),
) -> PortfolioAnalyst:
    """Get the LLM analyst, created on first use.

    Raises ConfigurationError (via DashScopeClient) when no API key is set,
    so the rest of the API works without LLM credentials.
    """
    analyst: PortfolioAnalyst | None = getattr(request.app.state, "portfolio_analyst", None)
    if analyst is None:
        analyst = PortfolioAnalyst(
            llm_client=DashScopeClient(settings),
            history_store=history_store,
            config=settings.analytics,
            temperature=settings.default_llm_temperature,
            max_tokens=settings.analysis_max_tokens,
        )
        request.app.state.portfolio_analyst = analyst
    return analyst
