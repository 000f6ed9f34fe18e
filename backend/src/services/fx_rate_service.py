"""
Foreign exchange rate lookup.

Fetches the home-currency rate for one unit of the foreign currency from an
exchangerate-api style endpoint ({"base": "USD", "rates": {"INR": 87.9}}).
The dashboard must keep working when the rate source is down, so every
failure degrades to the configured fallback constant, flagged on the
returned FxRate.
"""

import httpx
import structlog

from ..core.analytics.normalizer import FxRate
from ..shared.formatters import safe_float

logger = structlog.get_logger()

DEFAULT_FX_RATE_URL = "https://api.exchangerate-api.com/v4/latest/USD"


class FxRateService:
    """Exchange rate client with an explicit fallback."""

    def __init__(
        self,
        fallback_rate: float,
        url: str = DEFAULT_FX_RATE_URL,
        base_currency: str = "USD",
        quote_currency: str = "INR",
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        """
        Initialize FX rate service.

        Args:
            fallback_rate: Rate used when the lookup fails (must be positive)
            url: Rate endpoint returning a `rates` mapping
            base_currency: Foreign currency (one unit)
            quote_currency: Home currency read from `rates`
            client: Optional httpx AsyncClient for connection pooling
            timeout: Timeout for a self-created client
        """
        if fallback_rate <= 0:
            raise ValueError("fallback_rate must be positive")
        self.fallback_rate = fallback_rate
        self.url = url
        self.base_currency = base_currency
        self.quote_currency = quote_currency
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

    def fallback(self, reason: str) -> FxRate:
        """Fallback rate, logged so the substitution is never silent."""
        logger.warning(
            "Using fallback FX rate",
            base=self.base_currency,
            quote=self.quote_currency,
            rate=self.fallback_rate,
            reason=reason,
        )
        return FxRate(
            rate=self.fallback_rate,
            base=self.base_currency,
            quote=self.quote_currency,
            is_fallback=True,
            source="fallback",
        )

    async def get_rate(self) -> FxRate:
        """
        Fetch the current rate.

        Returns:
            FxRate from the endpoint, or the fallback with is_fallback=True
        """
        client = await self._get_client()

        try:
            response = await client.get(self.url)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            return self.fallback(f"HTTP {e.response.status_code}")
        except httpx.RequestError as e:
            return self.fallback(f"request failed: {e}")
        except ValueError:
            return self.fallback("malformed JSON")

        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            return self.fallback("malformed rates")

        rate = safe_float(rates.get(self.quote_currency))
        if rate <= 0:
            return self.fallback(f"no positive {self.quote_currency} rate in response")

        logger.info(
            "FX rate fetched",
            base=self.base_currency,
            quote=self.quote_currency,
            rate=rate,
        )
        return FxRate(
            rate=rate,
            base=self.base_currency,
            quote=self.quote_currency,
            source=self.url,
        )
