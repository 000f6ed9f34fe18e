"""
Application configuration using Pydantic Settings.
Following Factor 1: Own Your Configuration.

Supports hierarchical environment configuration:
- .env.base: Common non-secret defaults (committed to git)
- .env.{ENVIRONMENT}: Environment-specific overrides (gitignored)
- Environment variables: Highest priority

Analytics thresholds are nested: ANALYTICS__OVERWEIGHT_POSITION_PCT=15
overrides AnalyticsConfig.overweight_position_pct.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .analytics.config import AnalyticsConfig

# Get environment from env var, default to development
ENV = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    """Application settings with hierarchical env file support."""

    model_config = SettingsConfigDict(
        # Load base first, then environment-specific override
        env_file=[
            ".env.base",  # Common defaults (committed)
            f".env.{ENV}",  # Environment overrides (gitignored)
        ],
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "test", "production"] = "development"
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Broker - Kite Connect (single-user developer token flow)
    kite_api_key: str = ""
    kite_api_secret: str = ""
    kite_access_token: str = ""  # Refreshed daily via scripts/kite_auth.py
    kite_base_url: str = "https://api.kite.trade"
    kite_login_url: str = "https://kite.zerodha.com/connect/login"

    # Foreign holdings (US brokerage spreadsheet export)
    vested_holdings_path: str = "Vested_Holdings.xlsx"

    # Currency conversion
    home_currency: str = "INR"
    foreign_currency: str = "USD"
    fx_rate_url: str = "https://api.exchangerate-api.com/v4/latest/USD"
    fx_fallback_rate: float = 87.5  # Used when the rate API is unreachable

    # Flat-file analysis history
    analyses_dir: str = "public/analyses"

    # External APIs - LLM
    dashscope_api_key: str = ""  # Alibaba Cloud DashScope API key
    default_llm_model: str = "qwen-plus-latest"
    default_llm_temperature: float = 0.7
    analysis_max_tokens: int = 8000

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Metrics and insight thresholds
    analytics: AnalyticsConfig = AnalyticsConfig()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def kite_configured(self) -> bool:
        """Check if broker credentials are present."""
        return bool(self.kite_api_key and self.kite_access_token)

    @property
    def llm_configured(self) -> bool:
        """Check if the LLM API key is present."""
        return bool(self.dashscope_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
