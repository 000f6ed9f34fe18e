"""
Shared formatting utilities.

Provides lenient number parsing for broker and spreadsheet payloads, plus the
Indian-numbering display helpers used by insight descriptions and LLM prompts.
"""

import math
from typing import Any


def safe_float(value: Any, default: float = 0.0) -> float:
    """
    Safely convert a value to float.

    Handles string values from API responses, None, empty cells, the literal
    string "None" and NaN/infinity (pandas fills empty spreadsheet cells
    with NaN).

    Args:
        value: Value to convert (string, number, or None)
        default: Default value if conversion fails

    Returns:
        Finite float value or default

    Examples:
        >>> safe_float("123.45")
        123.45
        >>> safe_float(None)
        0.0
        >>> safe_float("None", -1.0)
        -1.0
        >>> safe_float("invalid")
        0.0
        >>> safe_float(float("nan"))
        0.0
    """
    if value is None or value == "None" or value == "":
        return default
    if isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (ValueError, TypeError):
        return default
    if not math.isfinite(result):
        return default
    return result


def safe_optional_float(value: Any) -> float | None:
    """
    Convert a value to float, keeping "absent" as None.

    Examples:
        >>> safe_optional_float("1.5")
        1.5
        >>> safe_optional_float("")
        None
    """
    sentinel = float("nan")
    result = safe_float(value, default=sentinel)
    return None if math.isnan(result) else result


def format_currency(value: float | None, symbol: str = "₹") -> str:
    """
    Format a value as currency with Indian digit grouping.

    Examples:
        >>> format_currency(1234567.5)
        "₹12,34,567.50"
        >>> format_currency(-5000)
        "-₹5,000"
    """
    if value is None:
        return "N/A"

    sign = "-" if value < 0 else ""
    digits, fraction = f"{abs(value):.2f}".split(".")

    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups) + "," + tail

    if fraction != "00":
        return f"{sign}{symbol}{digits}.{fraction}"
    return f"{sign}{symbol}{digits}"


def format_indian_number(value: float | None) -> str:
    """
    Format large numbers with K, L, Cr suffixes (Indian numbering).

    Examples:
        >>> format_indian_number(25_000_000)
        "₹2.50 Cr"
        >>> format_indian_number(150_000)
        "₹1.50 L"
        >>> format_indian_number(-2500)
        "-₹2.50 K"
    """
    if value is None:
        return "N/A"

    abs_value = abs(value)
    sign = "-" if value < 0 else ""

    if abs_value >= 10_000_000:
        return f"{sign}₹{abs_value / 10_000_000:.2f} Cr"
    if abs_value >= 100_000:
        return f"{sign}₹{abs_value / 100_000:.2f} L"
    if abs_value >= 1000:
        return f"{sign}₹{abs_value / 1000:.2f} K"
    return f"{sign}₹{abs_value:.2f}"


def format_percentage(
    value: float | None,
    decimal_places: int = 1,
    include_sign: bool = True,
) -> str:
    """
    Format a value as a percentage string.

    Args:
        value: Percentage value (already multiplied by 100)
        decimal_places: Number of decimal places
        include_sign: Whether to include +/- sign

    Returns:
        Formatted percentage string (e.g., "+5.2%", "-2.1%")

    Examples:
        >>> format_percentage(5.234)
        "+5.2%"
        >>> format_percentage(-2.1, decimal_places=2)
        "-2.10%"
        >>> format_percentage(None)
        "N/A"
    """
    if value is None:
        return "N/A"

    sign = ""
    if include_sign and value >= 0:
        sign = "+"

    return f"{sign}{value:.{decimal_places}f}%"


def allocation_bar(percentage: float, width: int = 20) -> str:
    """Render a text bar with one block per 100/width percent."""
    filled = max(0, min(width, round(percentage / (100 / width))))
    return "█" * filled + "░" * (width - filled)
