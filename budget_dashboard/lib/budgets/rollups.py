"""Monthly, quarterly and year-to-date rollups.

All rollups go through :func:`calculate_period_rollup`, which pairs a month
selection with a :class:`~.summary.VarianceConvention`. The named wrappers
pick the convention each view needs. Variance compares budget with:

* ``calculate_monthly_data``: actual, or reforecast if there is no actual
* ``calculate_quarterly_data``: per-month actual/reforecast mix
* ``calculate_quarterly_non_forecast_data``: actual only
* ``calculate_quarterly_through_actuals_data``: actual, against budget up to a cutoff
* ``calculate_ytd_data``: actual only, January through the last actual month
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from ..common.months import months_through, quarter_months
from .aggregation import build_period_data, build_sub_group
from .frames import EntriesLike, as_entry_frame
from .models import BudgetCategory, PeriodData, SubCategoryGroup, YTDResult
from .registry import CategoryClassification, load_default_classification
from .summary import VarianceConvention, summarize_frame, summarize_frame_months

logger = logging.getLogger(__name__)

COMP_AND_BENEFITS = 'comp-and-benefits'
OTHER = 'other'
YTD_PREFIX = 'ytd-'


# ---------------------------------------------------------------------------
# Months with actuals
# ---------------------------------------------------------------------------


def _months_with_actuals(
    frame: pd.DataFrame, year: int, include_zero_actuals: bool
) -> pd.Series:
    in_year = frame[(frame['year'] == year) & frame['month'].between(1, 12)]
    actual = in_year['actual_amount']
    # NaN (not entered) compares False either way
    reached = actual >= 0 if include_zero_actuals else actual > 0
    return in_year.loc[reached, 'month']


def find_last_month_with_actuals(
    entries: EntriesLike, year: int, include_zero_actuals: bool = False
) -> int:
    """Highest month (1-12) of ``year`` with any actual greater than zero.

    An entered actual of exactly zero is indistinguishable from "no actual
    yet" unless ``include_zero_actuals`` is set. Returns 0 when no month
    qualifies.

    Example:
        >>> entries = [
        ...     BudgetEntry('opex-bonus', 2025, 5, 0, actual_amount=500),
        ...     BudgetEntry('opex-bonus', 2025, 6, 0, actual_amount=0),
        ... ]
        >>> find_last_month_with_actuals(entries, 2025)
        5
    """
    months = _months_with_actuals(as_entry_frame(entries), year, include_zero_actuals)
    return int(months.max()) if not months.empty else 0


def last_month_with_actuals_in_quarter(
    entries: EntriesLike, year: int, quarter: int, include_zero_actuals: bool = False
) -> int:
    """Like :func:`find_last_month_with_actuals` but limited to one quarter."""
    months = _months_with_actuals(as_entry_frame(entries), year, include_zero_actuals)
    in_quarter = months[months.isin(quarter_months(quarter))]
    return int(in_quarter.max()) if not in_quarter.empty else 0


# ---------------------------------------------------------------------------
# Generic rollup
# ---------------------------------------------------------------------------


def calculate_period_rollup(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    year: int,
    months: Iterable[int],
    convention: VarianceConvention = VarianceConvention.MIXED,
    *,
    cutoff_month: Optional[int] = None,
    classification: Optional[CategoryClassification] = None,
    month: Optional[int] = None,
    quarter: Optional[int] = None,
    sub_group_prefix: str = '',
) -> PeriodData:
    """Roll every category up over ``months`` of ``year``.

    Args:
        entries: Budget entries or an entry DataFrame
        categories: Category registry
        year: Year of the months
        months: Month selection, summed month by month
        convention: Variance strategy applied to each category
        cutoff_month: Budget cutoff for ``THROUGH_ACTUALS``
        classification: Opex subgroup table; defaults to the bundled one
        month: Month tag of the result
        quarter: Quarter tag of the result (0 for YTD)
        sub_group_prefix: Prefix for subgroup ids

    Returns:
        The period's rollup
    """
    frame = as_entry_frame(entries)
    months = list(months)
    convention = VarianceConvention(convention)
    logger.debug(
        "Rolling up %d categories for %s months %s (%s, cutoff=%s)",
        len(categories), year, months, convention.value, cutoff_month,
    )

    def summarize(category: BudgetCategory):
        return summarize_frame_months(frame, category, year, months, convention, cutoff_month)

    return build_period_data(
        categories,
        summarize,
        classification,
        month=month,
        quarter=quarter,
        sub_group_prefix=sub_group_prefix,
    )


# ---------------------------------------------------------------------------
# Monthly
# ---------------------------------------------------------------------------


def calculate_monthly_data(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    month: int,
    year: int,
    classification: Optional[CategoryClassification] = None,
) -> PeriodData:
    """Rollup of a single month using the standard variance rule."""
    return calculate_period_rollup(
        entries, categories, year, [month], VarianceConvention.PERIOD,
        classification=classification, month=month,
    )


def calculate_year_of_months(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    year: int,
    classification: Optional[CategoryClassification] = None,
) -> List[PeriodData]:
    """Monthly rollups for January through December."""
    frame = as_entry_frame(entries)
    return [
        calculate_monthly_data(frame, categories, month, year, classification)
        for month in range(1, 13)
    ]


# ---------------------------------------------------------------------------
# Quarterly
# ---------------------------------------------------------------------------


def calculate_quarterly_data(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    quarter: int,
    year: int,
    classification: Optional[CategoryClassification] = None,
) -> PeriodData:
    """Quarter rollup for quarters that mix Final and Forecast months.

    Each month contributes its actual when non-zero, otherwise its
    reforecast, to the value compared with the quarter's budget.
    """
    return calculate_period_rollup(
        entries, categories, year, quarter_months(quarter), VarianceConvention.MIXED,
        classification=classification, quarter=quarter,
    )


def calculate_quarterly_non_forecast_data(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    quarter: int,
    year: int,
    classification: Optional[CategoryClassification] = None,
) -> PeriodData:
    """Quarter rollup whose variance ignores reforecast entirely."""
    return calculate_period_rollup(
        entries, categories, year, quarter_months(quarter), VarianceConvention.ACTUAL_ONLY,
        classification=classification, quarter=quarter,
    )


def calculate_quarterly_through_actuals_data(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    quarter: int,
    year: int,
    last_month_with_actuals_in_quarter: int,
    classification: Optional[CategoryClassification] = None,
) -> PeriodData:
    """Quarter rollup comparing actuals with budget up to a cutoff month.

    Budget of months after ``last_month_with_actuals_in_quarter`` is left
    out while actual and reforecast still cover the whole quarter.
    Adjustments are not summed and report as 0.
    """
    return calculate_period_rollup(
        entries, categories, year, quarter_months(quarter), VarianceConvention.THROUGH_ACTUALS,
        cutoff_month=last_month_with_actuals_in_quarter,
        classification=classification, quarter=quarter,
    )


# ---------------------------------------------------------------------------
# Year to date
# ---------------------------------------------------------------------------


def calculate_ytd_data(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    year: int,
    classification: Optional[CategoryClassification] = None,
    include_zero_actuals: bool = False,
) -> YTDResult:
    """Year-to-date rollup from January through the last month with actuals.

    Variance compares actuals with budget only. The result is tagged
    ``quarter=0`` and its subgroup ids carry a ``ytd-`` prefix.

    Returns:
        ``YTDResult(data, last_month_with_actuals)``; callers use the month
        to label the view (see :func:`~..common.months.ytd_label`)
    """
    frame = as_entry_frame(entries)
    last_month = find_last_month_with_actuals(frame, year, include_zero_actuals)
    data = calculate_period_rollup(
        frame, categories, year, months_through(last_month), VarianceConvention.ACTUAL_ONLY,
        classification=classification, quarter=0, sub_group_prefix=YTD_PREFIX,
    )
    return YTDResult(data=data, last_month_with_actuals=last_month)


# ---------------------------------------------------------------------------
# Standalone subgroups
# ---------------------------------------------------------------------------


def create_sub_group(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    subgroup_id: str,
    quarter: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    classification: Optional[CategoryClassification] = None,
) -> SubCategoryGroup:
    """One opex subgroup for a filtered period (standard variance rule).

    Raises:
        KeyError: If ``subgroup_id`` is not in the classification table.
    """
    classification = classification or load_default_classification()
    definition = classification.get(subgroup_id)
    if definition is None:
        raise KeyError(f"Unknown subgroup '{subgroup_id}'")
    frame = as_entry_frame(entries)

    def summarize(category: BudgetCategory):
        return summarize_frame(frame, category, quarter, month, year)

    return build_sub_group(definition, categories, classification, summarize)


def create_comp_and_benefits_sub_group(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    quarter: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    classification: Optional[CategoryClassification] = None,
) -> SubCategoryGroup:
    return create_sub_group(
        entries, categories, COMP_AND_BENEFITS, quarter, month, year, classification
    )


def create_other_sub_group(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    quarter: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    classification: Optional[CategoryClassification] = None,
) -> SubCategoryGroup:
    return create_sub_group(entries, categories, OTHER, quarter, month, year, classification)
