"""Formatting utilities for currency and percentage display."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount with thousands separators.

    Negative amounts keep their minus sign ahead of the dollar sign.

    Args:
        amount: The amount to format, in raw dollars
        include_sign: Whether to include the dollar sign

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "1,234.56")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-50000)
        '-$50,000.00'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{abs(amount):,.2f}"
    sign = "-" if amount < 0 else ""
    return f"{sign}${formatted}" if include_sign else f"{sign}{formatted}"


def format_percent(value: Union[float, int], decimals: int = 1) -> str:
    """Format a percentage value that is already scaled to 0-100.

    Example:
        >>> format_percent(12.345)
        '12.3%'
    """
    return f"{value:.{decimals}f}%"


def variance_class(
    variance: Union[float, int],
    neutral_amount: float = 1.0,
    danger_amount: float = 5000.0,
) -> str:
    """Display class for a variance amount.

    Returns ``'neutral'`` for amounts under ``neutral_amount`` in magnitude
    (which also absorbs ``-0.0``), ``'positive'`` when under budget,
    ``'danger'`` when over budget by more than ``danger_amount`` and
    ``'negative'`` otherwise.

    Example:
        >>> variance_class(-0.4)
        'neutral'
        >>> variance_class(-7500)
        'danger'
    """
    if abs(variance) < neutral_amount:
        return 'neutral'
    if variance > 0:
        return 'positive'
    if variance < -danger_amount:
        return 'danger'
    return 'negative'
