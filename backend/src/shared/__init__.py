"""
Shared utilities module.

Provides common utility functions used across the backend codebase.
Centralizes duplicate logic to ensure consistency and maintainability.
"""

from .formatters import (
    allocation_bar,
    format_currency,
    format_indian_number,
    format_percentage,
    safe_float,
    safe_optional_float,
)

__all__ = [
    "safe_float",
    "safe_optional_float",
    "format_currency",
    "format_indian_number",
    "format_percentage",
    "allocation_bar",
]
