from __future__ import annotations

"""Display formatting for reward payloads."""

import math
from typing import Any, Optional

PLACEHOLDER = "N/A"
NO_COMPARISON = "Box office comparison unavailable."


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def format_currency(amount: float) -> str:
    """Format a dollar amount with a B/M/K suffix and one decimal.

    >>> format_currency(1_500_000_000)
    '$1.5B'
    >>> format_currency(700)
    '$700'
    """
    if amount >= 1_000_000_000:
        return f"${amount / 1_000_000_000:.1f}B"
    if amount >= 1_000_000:
        return f"${amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"${amount / 1_000:.1f}K"
    return f"${amount:g}"


def format_money(value: Any) -> str:
    """Like format_currency, but returns a placeholder for non-numeric input."""
    amount = _as_number(value)
    if amount is None:
        return PLACEHOLDER
    return format_currency(amount)


def box_office_comparison(hollywood: Any, bollywood: Any) -> str:
    """Describe how the Hollywood total compares with the Bollywood one."""
    h = _as_number(hollywood)
    b = _as_number(bollywood)
    if h is None or b is None or b <= 0:
        return NO_COMPARISON
    ratio = h / b
    if ratio > 2:
        return f"Hollywood earned {ratio:.1f}x more than Bollywood!"
    if ratio > 1.5:
        return "Hollywood had a strong lead over Bollywood earnings."
    if ratio > 1.1:
        return "Hollywood slightly outperformed Bollywood."
    return "Both markets performed similarly well!"
