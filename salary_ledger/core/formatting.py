"""Helper functions for formatting amounts and salary periods."""

from __future__ import annotations
from decimal import Decimal

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def format_amount(value: int | float | Decimal, decimals: int = 2) -> str:
    """Format a number with thousands separators.

    Trailing zero decimals are dropped, so ``52000`` renders as ``52,000`` and
    ``1200.5`` as ``1,200.50``.

    Args:
        value: The number to format
        decimals: Number of decimal places shown for non-integral values
    """
    d = Decimal(str(value))
    if d == d.to_integral():
        return f"{d:,.0f}"
    return f"{d:,.{decimals}f}"


def format_currency(value: int | float | Decimal, symbol: str = "₹") -> str:
    """Format a currency value for display, e.g. ``₹52,000``."""

    text = format_amount(abs(Decimal(str(value))))
    sign = "-" if Decimal(str(value)) < 0 else ""
    return f"{sign}{symbol}{text}"


def month_name(month: int) -> str:
    """Return the English month name for a zero-based month index."""

    if not 0 <= month <= 11:
        raise ValueError(f"month must be between 0 and 11, got {month}")
    return MONTH_NAMES[month]


def period_label(month: int, year: int) -> str:
    return f"{month_name(month)} {year}"
