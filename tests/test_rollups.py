"""Unit tests for the monthly, quarterly and YTD rollups."""

from __future__ import annotations

import pandas as pd

from budget_dashboard.lib.budgets.models import BudgetCategory, BudgetEntry
from budget_dashboard.lib.budgets.registry import CategoryClassification
from budget_dashboard.lib.budgets.rollups import (
    calculate_monthly_data,
    calculate_period_rollup,
    calculate_quarterly_data,
    calculate_quarterly_non_forecast_data,
    calculate_quarterly_through_actuals_data,
    calculate_year_of_months,
    calculate_ytd_data,
    find_last_month_with_actuals,
    last_month_with_actuals_in_quarter,
)
from budget_dashboard.lib.budgets.summary import VarianceConvention
from budget_dashboard.lib.budgets.tracking import calculate_budget_tracking

BONUS = BudgetCategory('opex-bonus', 'Bonus', 'opex')
SOFTWARE = BudgetCategory('cos-software', 'Software', 'cost-of-sales')
CATEGORIES = [SOFTWARE, BONUS]
CLASSIFICATION = CategoryClassification.from_table(
    {'opex-bonus': 'comp-and-benefits'},
    names={'comp-and-benefits': 'Comp and Benefits', 'other': 'Other'},
)


def _mixed_quarter():
    return [
        BudgetEntry('opex-bonus', 2025, 1, 25000, actual_amount=30000),
        BudgetEntry('opex-bonus', 2025, 2, 20000, reforecast_amount=20000),
        BudgetEntry('opex-bonus', 2025, 3, 10000),
    ]


def test_mixed_quarter_variance() -> None:
    data = calculate_quarterly_data(_mixed_quarter(), CATEGORIES, 1, 2025, CLASSIFICATION)

    bonus = data.comp_and_benefits.categories[0]
    assert bonus.budget == 55000
    assert bonus.actual == 30000
    assert bonus.reforecast == 20000
    assert bonus.variance == 5000
    assert data.net_total.variance == 5000
    assert data.quarter == 1


def test_non_forecast_quarter_ignores_reforecast() -> None:
    data = calculate_quarterly_non_forecast_data(
        _mixed_quarter(), CATEGORIES, 1, 2025, CLASSIFICATION
    )

    assert data.net_total.variance == 25000
    assert data.net_total.reforecast == 20000


def test_through_actuals_quarter_limits_budget() -> None:
    entries = _mixed_quarter() + [
        BudgetEntry('opex-bonus', 2025, 3, 0, adjustment_amount=250),
    ]
    cutoff = last_month_with_actuals_in_quarter(entries, 2025, 1)
    data = calculate_quarterly_through_actuals_data(
        entries, CATEGORIES, 1, 2025, cutoff, CLASSIFICATION
    )

    assert cutoff == 1
    assert data.net_total.budget == 25000
    assert data.net_total.actual == 30000
    assert data.net_total.variance == -5000
    assert data.net_total.adjustments == 0


def test_through_actuals_quarter_reports_no_adjustments() -> None:
    entries = [
        BudgetEntry('opex-bonus', 2025, 1, 25000, actual_amount=30000, adjustment_amount=1000),
        BudgetEntry('opex-bonus', 2025, 2, 20000, adjustment_amount=500),
    ]
    data = calculate_quarterly_through_actuals_data(
        entries, CATEGORIES, 1, 2025, 1, CLASSIFICATION
    )

    assert data.net_total.adjustments == 0
    assert data.comp_and_benefits.categories[0].adjustments == 0
    # tracking actual is therefore the raw actual
    assert calculate_budget_tracking(data.net_total).actual == 30000

    mixed = calculate_quarterly_data(entries, CATEGORIES, 1, 2025, CLASSIFICATION)
    assert mixed.net_total.adjustments == 1500


def test_monthly_data_uses_period_rule() -> None:
    entries = _mixed_quarter() + [
        BudgetEntry('cos-software', 2025, 2, 700, actual_amount=0, reforecast_amount=650),
    ]

    january = calculate_monthly_data(entries, CATEGORIES, 1, 2025, CLASSIFICATION)
    february = calculate_monthly_data(entries, CATEGORIES, 2, 2025, CLASSIFICATION)

    assert january.month == 1
    assert january.net_total.variance == -5000
    assert february.cost_of_sales.total.variance == 50
    assert february.opex.total.variance == 0


def test_year_of_months_covers_twelve_months() -> None:
    months = calculate_year_of_months(_mixed_quarter(), CATEGORIES, 2025, CLASSIFICATION)

    assert [m.month for m in months] == list(range(1, 13))
    assert months[11].net_total.budget == 0


def test_unknown_quarter_gives_zero_rollup() -> None:
    data = calculate_quarterly_data(_mixed_quarter(), CATEGORIES, 5, 2025, CLASSIFICATION)

    assert data.net_total.budget == 0
    assert data.net_total.variance == 0


def test_last_month_detection_ignores_zero_actuals() -> None:
    entries = [
        BudgetEntry('opex-bonus', 2025, 6, 100, actual_amount=0),
        BudgetEntry('opex-bonus', 2025, 5, 100, actual_amount=500),
        BudgetEntry('opex-bonus', 2026, 9, 100, actual_amount=500),
    ]

    assert find_last_month_with_actuals(entries, 2025) == 5
    assert find_last_month_with_actuals(entries, 2025, include_zero_actuals=True) == 6
    assert find_last_month_with_actuals(entries, 2024) == 0
    assert last_month_with_actuals_in_quarter(entries, 2025, 2) == 5
    assert last_month_with_actuals_in_quarter(entries, 2025, 3) == 0


def test_ytd_sums_through_last_actual_month() -> None:
    entries = [
        BudgetEntry('opex-bonus', 2025, 1, 1000, actual_amount=900),
        BudgetEntry('opex-bonus', 2025, 5, 1000, actual_amount=500),
        BudgetEntry('opex-bonus', 2025, 6, 1000, actual_amount=0, reforecast_amount=1200),
        BudgetEntry('cos-software', 2025, 3, 400, reforecast_amount=380),
    ]
    result = calculate_ytd_data(entries, CATEGORIES, 2025, CLASSIFICATION)

    assert result.last_month_with_actuals == 5
    data = result.data
    assert data.is_ytd
    assert data.quarter == 0
    assert data.net_total.budget == 2400
    assert data.net_total.actual == 1400
    # reforecast is summed but never compared
    assert data.net_total.reforecast == 380
    assert data.net_total.variance == 1000
    assert [g.id for g in data.opex.sub_groups] == ['ytd-comp-and-benefits', 'ytd-other']
    assert data.comp_and_benefits.total.actual == 1400


def test_ytd_without_actuals_is_empty() -> None:
    entries = [BudgetEntry('opex-bonus', 2025, 1, 1000, reforecast_amount=900)]
    result = calculate_ytd_data(entries, CATEGORIES, 2025, CLASSIFICATION)

    assert result.last_month_with_actuals == 0
    assert result.data.net_total.budget == 0


def test_period_rollup_matches_named_wrappers() -> None:
    generic = calculate_period_rollup(
        _mixed_quarter(), CATEGORIES, 2025, [1, 2, 3], VarianceConvention.ACTUAL_ONLY,
        classification=CLASSIFICATION, quarter=1,
    )
    named = calculate_quarterly_non_forecast_data(
        _mixed_quarter(), CATEGORIES, 1, 2025, CLASSIFICATION
    )

    assert generic == named


def test_rollups_are_idempotent_and_do_not_mutate_input() -> None:
    entries = _mixed_quarter()
    snapshot = list(entries)

    first = calculate_quarterly_data(entries, CATEGORIES, 1, 2025, CLASSIFICATION)
    second = calculate_quarterly_data(entries, CATEGORIES, 1, 2025, CLASSIFICATION)
    assert first == second
    assert entries == snapshot

    ytd_first = calculate_ytd_data(entries, CATEGORIES, 2025, CLASSIFICATION)
    ytd_second = calculate_ytd_data(entries, CATEGORIES, 2025, CLASSIFICATION)
    assert ytd_first == ytd_second


def test_rollup_accepts_dataframe_without_modifying_it() -> None:
    df = pd.DataFrame([
        {'category_id': 'opex-bonus', 'year': 2025, 'month': 1,
         'budget_amount': 25000, 'actual_amount': 30000},
        {'category_id': 'opex-bonus', 'year': 2025, 'month': 2,
         'budget_amount': 20000, 'reforecast_amount': 20000},
    ])
    before = df.copy()

    data = calculate_quarterly_data(df, CATEGORIES, 1, 2025, CLASSIFICATION)

    assert data.net_total.variance == -5000
    pd.testing.assert_frame_equal(df, before)


def test_monthly_data_is_a_single_month_period_rollup() -> None:
    entries = _mixed_quarter() + [
        BudgetEntry('cos-software', 2025, 2, 700, actual_amount=0, reforecast_amount=650),
    ]

    monthly = calculate_monthly_data(entries, CATEGORIES, 2, 2025, CLASSIFICATION)
    generic = calculate_period_rollup(
        entries, CATEGORIES, 2025, [2], VarianceConvention.PERIOD,
        classification=CLASSIFICATION, month=2,
    )

    assert monthly == generic
    assert monthly.quarter is None
