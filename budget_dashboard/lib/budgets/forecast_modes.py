"""Helpers over the caller-supplied Final/Forecast month map.

A month flagged ``True`` is Final (actuals are authoritative); ``False`` or
missing means Forecast (reforecast is authoritative).
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from ..common.months import month_name
from .frames import EntriesLike, as_entry_frame
from .models import ForecastModeMap


def is_final_month(modes: Optional[ForecastModeMap], year: int, month: int) -> bool:
    """Whether ``month`` of ``year`` is Final; unflagged months are Forecast."""
    if not modes:
        return False
    return bool((modes.get(year) or {}).get(month, False))


def all_months_final(
    modes: Optional[ForecastModeMap], year: int, months: Iterable[int]
) -> bool:
    """True when every month in ``months`` is Final."""
    return all(is_final_month(modes, year, month) for month in months)


def final_months(modes: Optional[ForecastModeMap], year: int) -> List[int]:
    """Sorted months of ``year`` flagged Final."""
    return [m for m in range(1, 13) if is_final_month(modes, year, m)]


def last_final_month(
    modes: Optional[ForecastModeMap],
    entries: EntriesLike,
    year: int,
    today: Optional[date] = None,
) -> int:
    """Last month to treat as closed for ``year``.

    Looks for the latest month flagged Final. Without one, falls back to
    the latest month with an entered, non-zero actual, and finally to the
    calendar month of ``today``.
    """
    flagged = final_months(modes, year)
    if flagged:
        return flagged[-1]

    frame = as_entry_frame(entries)
    actual = frame['actual_amount']
    with_actuals = frame.loc[
        (frame['year'] == year)
        & frame['month'].between(1, 12)
        & actual.notna()
        & (actual != 0),
        'month',
    ]
    if not with_actuals.empty:
        return int(with_actuals.max())

    return (today or date.today()).month


def last_final_month_name(
    modes: Optional[ForecastModeMap],
    entries: EntriesLike,
    year: int,
    today: Optional[date] = None,
) -> str:
    return month_name(last_final_month(modes, entries, year, today)) or "Current"
