"""
Kite Connect REST client.

Covers the single-user developer token flow and the two holdings endpoints
the dashboard reads:
- GET  /portfolio/holdings  (equities)
- GET  /mf/holdings         (mutual funds)
- POST /session/token       (request token -> access token)

Responses are wrapped as {"status": "success", "data": ...}; failures carry
{"status": "error", "message": ..., "error_type": ...}.
"""

import hashlib
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog
from pydantic import BaseModel, Field

from ...core.exceptions import AuthenticationError, ConfigurationError, ExternalServiceError
from ...models.raw_records import BrokerEquityRecord, BrokerFundRecord

logger = structlog.get_logger()

KITE_API_VERSION = "3"


class KiteSession(BaseModel):
    """Subset of the session payload the dashboard keeps."""

    access_token: str = Field(..., description="Token valid until the next morning")
    user_id: str | None = None
    user_name: str | None = None
    login_time: str | None = None


def generate_checksum(api_key: str, request_token: str, api_secret: str) -> str:
    """SHA-256 hex digest of api_key + request_token + api_secret."""
    return hashlib.sha256(f"{api_key}{request_token}{api_secret}".encode()).hexdigest()


class KiteConnectClient:
    """
    Kite Connect API client.

    Holdings are returned as raw broker records; normalization happens in
    the analytics core.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str = "",
        access_token: str = "",
        base_url: str = "https://api.kite.trade",
        login_url: str = "https://kite.zerodha.com/connect/login",
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        """
        Initialize Kite client.

        Args:
            api_key: Kite Connect app key
            api_secret: App secret (only needed for the session exchange)
            access_token: Daily access token
            base_url: REST API root
            login_url: Browser login page
            client: Optional httpx AsyncClient for connection pooling
            timeout: Timeout for a self-created client
        """
        self.api_key = api_key
        self.api_secret = api_secret
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self._login_url = login_url
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _auth_headers(self) -> dict[str, str]:
        if not self.api_key or not self.access_token:
            raise ConfigurationError(
                "Kite credentials not configured",
                missing="KITE_API_KEY" if not self.api_key else "KITE_ACCESS_TOKEN",
            )
        return {
            "X-Kite-Version": KITE_API_VERSION,
            "Authorization": f"token {self.api_key}:{self.access_token}",
        }

    def login_url(self) -> str:
        """Browser URL that starts the login flow and redirects with a request token."""
        if not self.api_key:
            raise ConfigurationError("Kite API key not configured", missing="KITE_API_KEY")
        return f"{self._login_url}?{urlencode({'v': KITE_API_VERSION, 'api_key': self.api_key})}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and unwrap the `data` envelope."""
        client = await self._get_client()
        url = f"{self.base_url}{path}"

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error("Kite request error", path=path, error=str(e))
            raise ExternalServiceError(
                f"Kite request failed: {e}", service="kite", path=path
            ) from e

        try:
            payload = response.json()
        except ValueError:
            payload = {"message": "Failed to parse response"}
        if not isinstance(payload, dict):
            payload = {"data": payload}

        if response.status_code in (401, 403):
            logger.warning("Kite rejected credentials", path=path, status_code=response.status_code)
            raise AuthenticationError(
                payload.get("message") or "Kite session expired or invalid",
                path=path,
                kite_error_type=payload.get("error_type"),
            )

        if response.is_error or payload.get("status") == "error":
            logger.error(
                "Kite API error",
                path=path,
                status_code=response.status_code,
                message=payload.get("message"),
            )
            raise ExternalServiceError(
                payload.get("message")
                or f"Kite request failed (status {response.status_code})",
                service="kite",
                path=path,
                status_code=response.status_code,
            )

        return payload.get("data")

    async def generate_session(self, request_token: str) -> KiteSession:
        """
        Exchange a request token for an access token.

        Args:
            request_token: Token from the login redirect

        Returns:
            KiteSession with the new access token
        """
        if not request_token:
            raise AuthenticationError("Missing request_token")
        if not self.api_key or not self.api_secret:
            raise ConfigurationError(
                "Kite API key and secret are required for the session exchange",
                missing="KITE_API_SECRET" if self.api_key else "KITE_API_KEY",
            )

        data = await self._request(
            "POST",
            "/session/token",
            data={
                "api_key": self.api_key,
                "request_token": request_token,
                "checksum": generate_checksum(self.api_key, request_token, self.api_secret),
            },
            headers={"X-Kite-Version": KITE_API_VERSION},
        )
        if not isinstance(data, dict) or not data.get("access_token"):
            raise ExternalServiceError(
                "Kite session response missing access_token", service="kite"
            )
        session = KiteSession.model_validate(data)
        self.access_token = session.access_token

        logger.info("Kite session generated", user_id=session.user_id)
        return session

    async def get_holdings(self) -> list[BrokerEquityRecord]:
        """Fetch equity holdings."""
        data = await self._request("GET", "/portfolio/holdings", headers=self._auth_headers())
        records = [BrokerEquityRecord.model_validate(item) for item in data or []]
        logger.info("Kite holdings fetched", count=len(records))
        return records

    async def get_mf_holdings(self) -> list[BrokerFundRecord]:
        """Fetch mutual fund holdings."""
        data = await self._request("GET", "/mf/holdings", headers=self._auth_headers())
        records = [BrokerFundRecord.model_validate(item) for item in data or []]
        logger.info("Kite MF holdings fetched", count=len(records))
        return records
