"""
FastAPI application entry point for the Portfolio Dashboard Backend.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.ai import router as ai_router
from .api.health import router as health_router
from .api.kite import router as kite_router
from .api.portfolio import router as portfolio_router
from .core.config import get_settings
from .core.exceptions import AppError
from .services.analysis_history import AnalysisHistoryStore
from .services.fx_rate_service import FxRateService
from .services.holdings_import import ForeignHoldingsImporter
from .services.kite import KiteConnectClient
from .services.portfolio_service import PortfolioService

# Set the root logger level to INFO so we can see detailed logs
logging.basicConfig(level=logging.INFO)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: one shared HTTP client and the service graph."""
    settings = get_settings()

    logger.info("Starting Portfolio Dashboard Backend", environment=settings.environment)

    http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    try:
        kite_client = KiteConnectClient(
            api_key=settings.kite_api_key,
            api_secret=settings.kite_api_secret,
            access_token=settings.kite_access_token,
            base_url=settings.kite_base_url,
            login_url=settings.kite_login_url,
            client=http_client,
        )
        fx_service = FxRateService(
            fallback_rate=settings.fx_fallback_rate,
            url=settings.fx_rate_url,
            base_currency=settings.foreign_currency,
            quote_currency=settings.home_currency,
            client=http_client,
        )
        importer = ForeignHoldingsImporter(
            settings.vested_holdings_path, currency=settings.foreign_currency
        )

        app.state.kite_client = kite_client
        app.state.portfolio_service = PortfolioService(
            kite_client=kite_client,
            fx_service=fx_service,
            importer=importer,
            config=settings.analytics,
            home_currency=settings.home_currency,
        )
        app.state.history_store = AnalysisHistoryStore(settings.analyses_dir)
        # Created on first /api/ai/analyze call (needs DASHSCOPE_API_KEY)
        app.state.portfolio_analyst = None

        if not settings.kite_configured:
            logger.warning("Kite credentials missing; run scripts/kite_auth.py")

        logger.info(
            "Services initialized",
            kite_configured=settings.kite_configured,
            llm_configured=settings.llm_configured,
            analyses_dir=settings.analyses_dir,
        )

        yield

    finally:
        await http_client.aclose()
        logger.info("HTTP client closed")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Portfolio Dashboard API",
        description="Aggregated holdings, portfolio analytics and AI analysis",
        version="0.1.0",
        docs_url="/docs" if settings.environment == "development" else None,
        redoc_url="/redoc" if settings.environment == "development" else None,
        lifespan=lifespan,
    )

    # CORS middleware for frontend communication
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # Global exception handler for custom app errors
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """
        Handle all custom AppError exceptions with proper HTTP status codes.

        Broker, FX, LLM and storage failures surface with their own status
        instead of a generic 500.
        """
        error_dict = exc.to_dict()

        # Log error with full context
        logger.error(
            "Application error occurred",
            path=request.url.path,
            method=request.method,
            **error_dict,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error_type": exc.error_type},
        )

    # Include routers
    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(kite_router)  # Broker login flow
    app.include_router(portfolio_router)  # Holdings, metrics, insights
    app.include_router(ai_router)  # LLM analysis and history

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint for basic connectivity check."""
        return {
            "message": "Portfolio Dashboard API",
            "version": "0.1.0",
            "environment": settings.environment,
        }

    return app


# Create app instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.environment == "development",
        log_config=None,  # Use structlog configuration
    )
