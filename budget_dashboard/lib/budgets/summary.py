"""Category summary calculations.

Reduces the entries of one category over a period into a
:class:`~.models.CategorySummary`. Variance is framed so that a positive
number always means under budget, whichever value it was compared with.

Two entry points:

* :func:`calculate_category_summary` filters on any combination of
  quarter/month/year and applies the variance rule to the period sums.
* :func:`summarize_category_months` walks an explicit list of months and
  applies one of the :class:`VarianceConvention` strategies, which need the
  per-month figures.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional

import pandas as pd

from .frames import AMOUNT_COLUMNS, EntriesLike, as_entry_frame
from .models import BudgetCategory, CategorySummary

logger = logging.getLogger(__name__)


class VarianceConvention(str, Enum):
    """How a multi-month summary picks the value compared with budget."""

    #: Period sums: actual if the summed actual is non-zero, else reforecast.
    PERIOD = 'period'
    #: Per month: actual if that month's actual is non-zero, else reforecast.
    MIXED = 'mixed'
    #: Summed actual only; reforecast never enters the variance.
    ACTUAL_ONLY = 'actual-only'
    #: Summed actual against budget of months up to a cutoff month; adjustments stay 0.
    THROUGH_ACTUALS = 'through-actuals'


class AmountSums(NamedTuple):
    budget: float = 0.0
    actual: float = 0.0
    reforecast: float = 0.0
    adjustments: float = 0.0


def calculate_variance(comparison: float, budget: float) -> float:
    """Budget minus the comparison value; positive means under budget.

    Example:
        >>> calculate_variance(90000, 100000)
        10000
    """
    return budget - comparison


def calculate_variance_percent(variance: float, budget: float) -> float:
    """Variance as a percentage of ``|budget|``; 0 when budget is 0."""
    if budget == 0:
        return 0.0
    return variance / abs(budget) * 100.0


def period_comparison_value(actual: float, reforecast: float) -> float:
    """Actual when it is non-zero, otherwise reforecast."""
    return actual if actual != 0 else reforecast


# ---------------------------------------------------------------------------
# Frame helpers
# ---------------------------------------------------------------------------


def _sum_amounts(
    frame: pd.DataFrame,
    category_id: str,
    *,
    quarter: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> AmountSums:
    """Sum amount columns of matching rows; NaN (not entered) counts as 0."""
    mask = frame['category_id'] == category_id
    if year is not None:
        mask &= frame['year'] == year
    if quarter is not None:
        mask &= frame['quarter'] == quarter
    if month is not None:
        mask &= frame['month'] == month

    sums = frame.loc[mask, AMOUNT_COLUMNS].sum()
    return AmountSums(
        budget=float(sums['budget_amount']),
        actual=float(sums['actual_amount']),
        reforecast=float(sums['reforecast_amount']),
        adjustments=float(sums['adjustment_amount']),
    )


def _build_summary(
    category: BudgetCategory,
    sums: AmountSums,
    comparison: float,
) -> CategorySummary:
    variance = calculate_variance(comparison, sums.budget)
    return CategorySummary(
        category_id=category.id,
        category_name=category.name,
        budget=sums.budget,
        actual=sums.actual,
        reforecast=sums.reforecast,
        adjustments=sums.adjustments,
        variance=variance,
        variance_percent=calculate_variance_percent(variance, sums.budget),
        is_negative=category.is_negative,
    )


def summarize_frame(
    frame: pd.DataFrame,
    category: BudgetCategory,
    quarter: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> CategorySummary:
    """:func:`calculate_category_summary` over an already normalized frame."""
    sums = _sum_amounts(frame, category.id, quarter=quarter, month=month, year=year)
    return _build_summary(category, sums, period_comparison_value(sums.actual, sums.reforecast))


def summarize_frame_months(
    frame: pd.DataFrame,
    category: BudgetCategory,
    year: int,
    months: Iterable[int],
    convention: VarianceConvention = VarianceConvention.MIXED,
    cutoff_month: Optional[int] = None,
) -> CategorySummary:
    """:func:`summarize_category_months` over an already normalized frame."""
    convention = VarianceConvention(convention)
    months = list(months)
    logger.debug(
        "Summarizing %s over %d months of %s (%s, cutoff=%s)",
        category.id, len(months), year, convention.value, cutoff_month,
    )
    # Through-actuals summaries report no adjustments
    sum_adjustments = convention is not VarianceConvention.THROUGH_ACTUALS
    budget = actual = reforecast = adjustments = mixed_base = 0.0

    for month in months:
        month_sums = _sum_amounts(frame, category.id, month=month, year=year)
        include_budget = (
            convention is not VarianceConvention.THROUGH_ACTUALS
            or cutoff_month is None
            or month <= cutoff_month
        )
        if include_budget:
            budget += month_sums.budget
        actual += month_sums.actual
        reforecast += month_sums.reforecast
        if sum_adjustments:
            adjustments += month_sums.adjustments
        mixed_base += period_comparison_value(month_sums.actual, month_sums.reforecast)

    if convention is VarianceConvention.MIXED:
        comparison = mixed_base
    elif convention is VarianceConvention.PERIOD:
        comparison = period_comparison_value(actual, reforecast)
    else:
        comparison = actual

    return _build_summary(
        category,
        AmountSums(budget=budget, actual=actual, reforecast=reforecast, adjustments=adjustments),
        comparison,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def calculate_category_summary(
    entries: EntriesLike,
    category: BudgetCategory,
    quarter: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> CategorySummary:
    """Summarize one category over the entries matching the given period.

    Omitted period fields are wildcards. Absent optional amounts count as
    zero and unmatched filters give an all-zero summary.

    Args:
        entries: Budget entries or an entry DataFrame
        category: Category to summarize
        quarter: Optional quarter filter (1-4)
        month: Optional month filter (1-12)
        year: Optional year filter

    Returns:
        Summary whose variance uses actual when the summed actual is
        non-zero, otherwise reforecast

    Example:
        >>> entries = [BudgetEntry('opex-bonus', 2025, 1, 100000, actual_amount=90000)]
        >>> summary = calculate_category_summary(entries, bonus, year=2025)
        >>> summary.variance, summary.variance_percent
        (10000.0, 10.0)
    """
    return summarize_frame(as_entry_frame(entries), category, quarter, month, year)


def summarize_category_months(
    entries: EntriesLike,
    category: BudgetCategory,
    year: int,
    months: Iterable[int],
    convention: VarianceConvention = VarianceConvention.MIXED,
    cutoff_month: Optional[int] = None,
) -> CategorySummary:
    """Summarize one category month by month under a variance convention.

    Budget, actual, reforecast and adjustments are summed over ``months``,
    except that adjustments are not summed under ``THROUGH_ACTUALS``.
    Under ``THROUGH_ACTUALS`` only months on or before ``cutoff_month``
    contribute budget; a ``None`` cutoff excludes nothing.

    Args:
        entries: Budget entries or an entry DataFrame
        category: Category to summarize
        year: Year of the months
        months: Months to include, e.g. ``quarter_months(2)``
        convention: Variance strategy
        cutoff_month: Last month whose budget counts (``THROUGH_ACTUALS`` only)
    """
    return summarize_frame_months(
        as_entry_frame(entries), category, year, months, convention, cutoff_month
    )


def summarize_categories(
    entries: EntriesLike,
    categories: Iterable[BudgetCategory],
    quarter: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> List[CategorySummary]:
    """:func:`calculate_category_summary` for each category, in order."""
    frame = as_entry_frame(entries)
    return [summarize_frame(frame, c, quarter, month, year) for c in categories]
