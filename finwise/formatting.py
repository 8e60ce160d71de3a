"""Formatting and parsing utilities for currency and form input."""

from __future__ import annotations

import math
from typing import Optional, Union


def format_currency(amount: Union[float, int], include_sign: bool = True, decimals: int = 0) -> str:
    """Format a currency amount in US dollars.

    Args:
        amount: The amount to format
        include_sign: Whether to include the dollar sign
        decimals: Number of fraction digits (whole dollars by default)

    Returns:
        Formatted currency string (e.g., "$1,500" or "-$42")

    Example:
        >>> format_currency(1500)
        '$1,500'
        >>> format_currency(3.5, decimals=2)
        '$3.50'
        >>> format_currency(1234.56, include_sign=False)
        '1,235'
    """
    formatted = f"{abs(amount):,.{decimals}f}"
    if include_sign:
        formatted = f"${formatted}"
    if amount < 0 and round(abs(amount), decimals) != 0:
        formatted = f"-{formatted}"
    return formatted


def format_percentage(value: float) -> str:
    """Format a percentage with one decimal place (e.g., "30.0%")."""
    return f"{value:.1f}%"


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not treat them as LaTeX.

    Example:
        >>> escape_dollar_for_markdown(format_currency(1500))
        '\\\\$1,500'
    """
    return text.replace("$", "\\$")


def parse_amount(value: object) -> Optional[float]:
    """Leniently parse a monetary form field.

    Accepts numbers and strings such as ``"1,500"`` or ``"$42.50"``.  Returns
    ``None`` for empty, unparsable or non-finite input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = str(value).strip().replace(",", "").replace("$", "")
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def parse_price(value: object) -> float:
    """Parse a grocery price, treating anything unusable as zero."""
    number = parse_amount(value)
    if number is None or number < 0:
        return 0.0
    return number
