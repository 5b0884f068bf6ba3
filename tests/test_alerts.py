"""Unit tests for budget alert generation."""

from __future__ import annotations

from budget_dashboard.lib.budgets.alerts import (
    NO_ACTUALS_MESSAGE,
    AlertThresholds,
    generate_alerts,
    load_alert_thresholds,
    sort_alerts,
)
from budget_dashboard.lib.budgets.frames import alerts_to_dataframe
from budget_dashboard.lib.budgets.models import BudgetAlert, BudgetCategory, BudgetEntry


def _category(suffix):
    return BudgetCategory(f'opex-{suffix}', suffix.title(), 'opex')


def _entry(category, budget, actual=None, reforecast=None, month=1):
    return BudgetEntry(
        category.id, 2025, month, budget, actual_amount=actual, reforecast_amount=reforecast
    )


def test_small_variance_is_suppressed_despite_percent() -> None:
    marketing = _category('marketing')
    # 20% under budget but only $40,000
    alerts = generate_alerts(
        [_entry(marketing, 200000, actual=160000)], [marketing], 2025, AlertThresholds()
    )

    assert alerts == []


def test_warning_and_danger_levels() -> None:
    warning = _category('travel')
    danger = _category('facilities')
    entries = [
        _entry(warning, 400000, actual=320000),
        _entry(danger, 200000, actual=300000),
    ]
    alerts = generate_alerts(entries, [warning, danger], 2025, AlertThresholds())

    assert [(a.id, a.type) for a in alerts] == [
        ('variance-opex-facilities', 'danger'),
        ('variance-opex-travel', 'warning'),
    ]
    assert alerts[0].message == '50.0% variance from budget'
    assert alerts[0].variance == -100000
    assert alerts[1].message == '20.0% variance from budget'
    assert alerts[1].category == 'Travel'


def test_variance_alert_uses_reforecast_when_no_actual() -> None:
    corporate = _category('corporate')
    alerts = generate_alerts(
        [_entry(corporate, 300000, reforecast=400000)], [corporate], 2025, AlertThresholds()
    )

    types = [a.type for a in alerts]
    assert types == ['danger', 'info']
    assert alerts[1].id == 'no-actuals-opex-corporate'
    assert alerts[1].message == NO_ACTUALS_MESSAGE
    assert alerts[1].variance == 300000


def test_info_alert_needs_budget() -> None:
    empty = _category('empty')
    assert generate_alerts([_entry(empty, 0)], [empty], 2025, AlertThresholds()) == []


def test_alerts_cover_whole_year_only() -> None:
    bonus = _category('bonus')
    entries = [
        _entry(bonus, 100000, actual=100000, month=1),
        BudgetEntry(bonus.id, 2024, 1, 500000, actual_amount=1),
    ]
    assert generate_alerts(entries, [bonus], 2025, AlertThresholds()) == []


def test_custom_thresholds() -> None:
    bonus = _category('bonus')
    thresholds = AlertThresholds(variance_percent=5, variance_amount=50, danger_percent=50)
    alerts = generate_alerts([_entry(bonus, 1000, actual=1100)], [bonus], 2025, thresholds)

    assert [a.type for a in alerts] == ['warning']


def test_sort_is_stable_within_severity() -> None:
    alerts = [
        BudgetAlert('1', 'info', 'A', '', 0),
        BudgetAlert('2', 'warning', 'B', '', 0),
        BudgetAlert('3', 'danger', 'C', '', 0),
        BudgetAlert('4', 'warning', 'D', '', 0),
        BudgetAlert('5', 'danger', 'E', '', 0),
    ]
    assert [a.id for a in sort_alerts(alerts)] == ['3', '5', '2', '4', '1']


def test_thresholds_from_config() -> None:
    assert load_alert_thresholds() == AlertThresholds(15, 50000, 25)
    assert AlertThresholds.from_mapping({'variance_amount': 10}).variance_percent == 15
    assert AlertThresholds.from_mapping(None) == AlertThresholds()


def test_alerts_to_dataframe() -> None:
    df = alerts_to_dataframe([BudgetAlert('x', 'info', 'Bonus', NO_ACTUALS_MESSAGE, 10.0)])
    assert list(df.columns) == ['id', 'type', 'category', 'message', 'variance']
    assert alerts_to_dataframe([]).empty
