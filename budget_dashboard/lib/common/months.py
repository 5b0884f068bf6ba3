"""Month and quarter helpers shared by the rollups and display code."""

from __future__ import annotations

from typing import List

MONTH_NAMES = [
    "",
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
]

_QUARTER_MONTHS = {
    1: [1, 2, 3],
    2: [4, 5, 6],
    3: [7, 8, 9],
    4: [10, 11, 12],
}


def quarter_months(quarter: int) -> List[int]:
    """Return the calendar months of a quarter.

    Unknown quarter numbers give an empty list so callers degrade to an
    all-zero rollup instead of failing.

    Example:
        >>> quarter_months(2)
        [4, 5, 6]
        >>> quarter_months(7)
        []
    """
    return list(_QUARTER_MONTHS.get(quarter, []))


def quarter_for_month(month: int) -> int:
    """Return the quarter (1-4) containing ``month``; 0 for out-of-range months."""
    if not 1 <= month <= 12:
        return 0
    return (month - 1) // 3 + 1


def month_name(month: int) -> str:
    """Full English month name, or an empty string for month 0 / out of range."""
    if 1 <= month <= 12:
        return MONTH_NAMES[month]
    return ""


def ytd_label(last_month_with_actuals: int, prefix: str = "YTD") -> str:
    """Label a YTD figure, e.g. ``"YTD through May"``.

    Example:
        >>> ytd_label(5)
        'YTD through May'
        >>> ytd_label(0)
        'YTD'
    """
    name = month_name(last_month_with_actuals)
    return f"{prefix} through {name}" if name else prefix


def months_through(last_month: int, first_month: int = 1) -> List[int]:
    """Inclusive month range ``first_month..last_month`` clipped to 1..12."""
    start = max(1, first_month)
    end = min(12, last_month)
    return list(range(start, end + 1))
