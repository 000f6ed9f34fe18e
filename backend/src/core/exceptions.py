"""
Custom exception hierarchy for proper error categorization and HTTP status mapping.

Distinguishes:
- User errors (400-level): Client sent bad data or an unknown analysis id
- Server errors (500-level): Misconfiguration or flat-file storage failures
- External errors (503): Broker, FX rate or LLM service failed

The analytics core (classifier, normalizer, metrics, insights) never raises
these for data problems; malformed input degrades to neutral values instead.

Usage:
    from src.core.exceptions import ExternalServiceError, NotFoundError

    raise ExternalServiceError("Kite holdings request failed", service="kite")
    raise NotFoundError("Analysis not found", analysis_id="analysis-123")
"""

from typing import Any


class AppError(Exception):
    """
    Base application error with HTTP status mapping.

    All custom exceptions inherit from this to enable consistent error handling.
    """

    # Default status code (subclasses override)
    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, **context: Any):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error description
            **context: Additional key-value pairs for logging (e.g., symbol, path)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON response and structured logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            **self.context,
        }


# ===== 400-level: Client Errors =====


class ValidationError(AppError):
    """User provided invalid input (e.g., empty analysis content, bad filename)."""

    status_code = 400
    error_type = "validation_error"


class AuthenticationError(AppError):
    """Broker rejected the credentials (expired access token, bad request token)."""

    status_code = 401
    error_type = "authentication_error"


class NotFoundError(AppError):
    """Requested resource does not exist."""

    status_code = 404
    error_type = "not_found_error"


# ===== 500-level: Server Errors =====


class ConfigurationError(AppError):
    """
    Application misconfigured (e.g., missing API key).

    Raised when an operation needs a credential that was never set.
    """

    status_code = 500
    error_type = "configuration_error"


class StorageError(AppError):
    """Flat-file analysis history could not be read or written."""

    status_code = 500
    error_type = "storage_error"


# ===== 503: External Service Errors =====


class ExternalServiceError(AppError):
    """
    External service unavailable or returned error.

    Examples:
        - Kite Connect holdings endpoint timeout
        - Exchange rate API returned malformed JSON
        - DashScope model error

    Maps to 503 Service Unavailable (third-party problem, retry may help).
    """

    status_code = 503
    error_type = "external_service_error"

    def __init__(self, message: str, service: str, **context: Any):
        """
        Initialize with service name for easier debugging.

        Args:
            message: Error description
            service: Service identifier (e.g., "kite", "fx_rate", "dashscope")
            **context: Additional context (e.g., status_code, url)
        """
        super().__init__(message, service=service, **context)
