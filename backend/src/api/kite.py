"""
Kite Connect login flow endpoints.

Provides:
- GET /login-url: Browser URL that starts the broker login
- POST /session: Exchange the redirect's request_token for an access token
"""

import structlog
from fastapi import APIRouter, Depends

from ..services.kite import KiteConnectClient
from .dependencies.services import get_kite_client
from .schemas.kite_models import LoginUrlResponse, SessionRequest, SessionResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api/kite", tags=["kite"])


@router.get("/login-url", response_model=LoginUrlResponse)
async def get_login_url(
    kite_client: KiteConnectClient = Depends(get_kite_client),
) -> LoginUrlResponse:
    """Return the broker login URL for the configured API key."""
    return LoginUrlResponse(login_url=kite_client.login_url())


@router.post("/session", response_model=SessionResponse)
async def create_session(
    body: SessionRequest,
    kite_client: KiteConnectClient = Depends(get_kite_client),
) -> SessionResponse:
    """
    Exchange a request token for an access token.

    The new token is used by this process immediately; persist it as
    KITE_ACCESS_TOKEN (scripts/kite_auth.py does this) to survive restarts.
    """
    session = await kite_client.generate_session(body.request_token)
    logger.info("Kite session created via API", user_id=session.user_id)
    return SessionResponse(
        access_token=session.access_token,
        user_id=session.user_id,
        user_name=session.user_name,
    )
