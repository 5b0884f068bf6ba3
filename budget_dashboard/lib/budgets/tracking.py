"""Budget tracking: net totals with manual adjustments taken back out.

Adjustments are shown in the actual column for Final months and in the
reforecast column for Forecast months. The tracking view removes them again
so the KPI displays compare like with like:

* budget is never adjusted;
* actual always has adjustments subtracted;
* reforecast has adjustments subtracted only while there is no actual.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.months import quarter_months
from .forecast_modes import all_months_final, is_final_month
from .frames import EntriesLike, as_entry_frame
from .models import BudgetCategory, ColumnTotals, ForecastModeMap, PeriodData, Totals
from .registry import CategoryClassification
from .rollups import calculate_monthly_data, calculate_year_of_months


def calculate_budget_tracking(net_total: Totals, is_forecast_mode: bool = False) -> ColumnTotals:
    """Tracking view of a net total.

    Args:
        net_total: Totals of a rollup (usually ``PeriodData.net_total``)
        is_forecast_mode: Compare budget with the tracking reforecast instead
            of the tracking actual

    Returns:
        Budget, adjusted actual, adjusted reforecast and the variance
        ``budget - base`` where base follows ``is_forecast_mode``

    Example:
        >>> calculate_budget_tracking(Totals(budget=60000, actual=50000, adjustments=5000)).actual
        45000
    """
    budget = net_total.budget
    actual = net_total.actual - net_total.adjustments
    if net_total.actual == 0:
        reforecast = net_total.reforecast - net_total.adjustments
    else:
        reforecast = net_total.reforecast

    base = reforecast if is_forecast_mode else actual
    return ColumnTotals(
        budget=budget,
        actual=actual,
        reforecast=reforecast,
        variance=budget - base,
    )


# ---------------------------------------------------------------------------
# Quarter column summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QuarterSummary:
    """Column totals of a run of months with adjustments reallocated."""

    cost_of_sales: ColumnTotals
    opex: ColumnTotals
    net_total: ColumnTotals
    adjustments: ColumnTotals
    budget_tracking: ColumnTotals
    all_final: bool


def summarize_months(
    monthly_data: Sequence[PeriodData],
    modes: Optional[ForecastModeMap],
    year: int,
) -> QuarterSummary:
    """Accumulate monthly rollups into Final/Forecast-aware columns.

    For a Final month the net adjustments and the tracking actual go to the
    actual column; for a Forecast month they go to the reforecast column.
    Tracking budget and variance always accumulate, with each month's
    tracking computed in forecast mode unless the month is Final.

    Args:
        monthly_data: Monthly rollups (each must carry ``month``)
        modes: Final/Forecast map
        year: Year the months belong to
    """
    cost_of_sales = ColumnTotals()
    opex = ColumnTotals()
    net_total = ColumnTotals()
    adjustments = ColumnTotals()
    tracking = ColumnTotals()

    for data in monthly_data:
        final = is_final_month(modes, year, data.month)

        cost_of_sales = cost_of_sales + ColumnTotals.from_totals(data.cost_of_sales.total)
        opex = opex + ColumnTotals.from_totals(data.opex.total)
        net_total = net_total + ColumnTotals.from_totals(data.net_total)

        month_adjustments = data.net_total.adjustments
        month_tracking = calculate_budget_tracking(data.net_total, is_forecast_mode=not final)
        if final:
            adjustments = adjustments + ColumnTotals(actual=month_adjustments)
            tracking = tracking + ColumnTotals(actual=month_tracking.actual)
        else:
            adjustments = adjustments + ColumnTotals(reforecast=month_adjustments)
            tracking = tracking + ColumnTotals(reforecast=month_tracking.reforecast)

        tracking = tracking + ColumnTotals(
            budget=month_tracking.budget, variance=month_tracking.variance
        )

    return QuarterSummary(
        cost_of_sales=cost_of_sales,
        opex=opex,
        net_total=net_total,
        adjustments=adjustments,
        budget_tracking=tracking,
        all_final=all_months_final(modes, year, [d.month for d in monthly_data]),
    )


def calculate_quarter_summary(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    quarter: int,
    year: int,
    modes: Optional[ForecastModeMap],
    classification: Optional[CategoryClassification] = None,
) -> QuarterSummary:
    """:func:`summarize_months` over the monthly rollups of one quarter."""
    frame = as_entry_frame(entries)
    monthly = [
        calculate_monthly_data(frame, categories, month, year, classification)
        for month in quarter_months(quarter)
    ]
    return summarize_months(monthly, modes, year)


def calculate_full_year_forecast(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    year: int,
    modes: Optional[ForecastModeMap],
    classification: Optional[CategoryClassification] = None,
) -> float:
    """Projected spend for the year from the quarter tracking columns.

    Each quarter contributes its tracking actual, plus its tracking
    reforecast unless all of its months are Final.
    """
    frame = as_entry_frame(entries)
    monthly = calculate_year_of_months(frame, categories, year, classification)

    total = 0.0
    for quarter in range(1, 5):
        months = quarter_months(quarter)
        summary = summarize_months([m for m in monthly if m.month in months], modes, year)
        total += summary.budget_tracking.actual
        if not summary.all_final:
            total += summary.budget_tracking.reforecast
    return total
