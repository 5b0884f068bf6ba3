"""Headline KPIs for the yearly dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.months import ytd_label
from .frames import EntriesLike, as_entry_frame
from .models import BudgetCategory, ForecastModeMap
from .registry import CategoryClassification
from .rollups import calculate_ytd_data
from .tracking import calculate_budget_tracking, calculate_full_year_forecast

OVER_BUDGET = "Over Budget"
UNDER_BUDGET = "Under Budget"


@dataclass(frozen=True)
class KPIData:
    annual_budget_target: float
    ytd_actual: float
    ytd_budget: float
    variance: float
    variance_percent: float
    annual_variance: float
    annual_variance_percent: float
    budget_utilization: float
    full_year_forecast: float
    forecast_vs_target_variance: float
    remaining_budget: float
    burn_rate: float
    months_remaining: float
    ytd_budget_performance: float
    ytd_performance_label: str
    last_month_with_actuals: int

    @property
    def ytd_label(self) -> str:
        return ytd_label(self.last_month_with_actuals)


def _percent(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole > 0 else 0.0


def calculate_kpis(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    year: int,
    modes: Optional[ForecastModeMap] = None,
    annual_target: float = 0.0,
    classification: Optional[CategoryClassification] = None,
) -> KPIData:
    """Compute the dashboard KPIs for ``year``.

    YTD actual is the budget tracking actual of the YTD net total, so manual
    adjustments are excluded. Variances follow the usual sign: positive
    means under budget (or under target).

    Args:
        entries: Budget entries or an entry DataFrame
        categories: Category registry
        year: Year to report
        modes: Final/Forecast map used for the full-year forecast
        annual_target: Yearly budget target entered by the user
        classification: Opex subgroup table; defaults to the bundled one
    """
    frame = as_entry_frame(entries)
    ytd = calculate_ytd_data(frame, categories, year, classification)
    tracking = calculate_budget_tracking(ytd.data.net_total)

    ytd_actual = tracking.actual
    ytd_budget = ytd.data.net_total.budget
    variance = ytd_budget - ytd_actual
    # YTD variance % divides by the signed budget, unlike category variance %
    variance_percent = variance / ytd_budget * 100.0 if ytd_budget else 0.0

    annual_variance = annual_target - ytd_actual
    full_year_forecast = calculate_full_year_forecast(
        frame, categories, year, modes, classification
    )
    remaining_budget = annual_target - ytd_actual

    months_elapsed = ytd.last_month_with_actuals
    burn_rate = ytd_actual / months_elapsed if months_elapsed > 0 else 0.0
    months_remaining = (
        remaining_budget / burn_rate if burn_rate > 0 and remaining_budget > 0 else 0.0
    )

    performance = (ytd_actual / ytd_budget - 1) * 100.0 if ytd_budget > 0 else 0.0

    return KPIData(
        annual_budget_target=annual_target,
        ytd_actual=ytd_actual,
        ytd_budget=ytd_budget,
        variance=variance,
        variance_percent=variance_percent,
        annual_variance=annual_variance,
        annual_variance_percent=_percent(annual_variance, annual_target),
        budget_utilization=_percent(ytd_actual, annual_target),
        full_year_forecast=full_year_forecast,
        forecast_vs_target_variance=annual_target - full_year_forecast,
        remaining_budget=remaining_budget,
        burn_rate=burn_rate,
        months_remaining=months_remaining,
        ytd_budget_performance=performance,
        ytd_performance_label=OVER_BUDGET if performance >= 0 else UNDER_BUDGET,
        last_month_with_actuals=months_elapsed,
    )
