"""Unit tests for the pandas adapters."""

from __future__ import annotations

import io
import math

import pandas as pd
import pytest

from budget_dashboard.lib.budgets.frames import (
    AMOUNT_COLUMNS,
    as_entry_frame,
    entries_from_dataframe,
    entries_to_dataframe,
    period_to_dataframe,
    read_entries,
    summaries_to_dataframe,
)
from budget_dashboard.lib.budgets.models import BudgetCategory, BudgetEntry
from budget_dashboard.lib.budgets.registry import CategoryClassification
from budget_dashboard.lib.budgets.rollups import calculate_quarterly_data
from budget_dashboard.lib.budgets.summary import summarize_categories

CATEGORIES = [
    BudgetCategory('cos-software', 'Software', 'cost-of-sales'),
    BudgetCategory('opex-bonus', 'Bonus', 'opex'),
    BudgetCategory('opex-misc', 'Misc', 'opex'),
]
CLASSIFICATION = CategoryClassification.from_table(
    {'opex-bonus': 'comp-and-benefits'}, names={'comp-and-benefits': 'Comp and Benefits'}
)


def test_entries_from_dataframe_keeps_missing_distinct_from_zero() -> None:
    df = pd.DataFrame([
        {'category_id': 'opex-bonus', 'year': 2025, 'month': 3, 'budget_amount': 100,
         'actual_amount': 0.0, 'reforecast_amount': None},
        {'category_id': 'opex-bonus', 'year': 2025, 'month': 4, 'budget_amount': None,
         'actual_amount': None, 'reforecast_amount': 50},
    ])
    entries = entries_from_dataframe(df)

    assert entries[0].actual_amount == 0.0
    assert entries[0].has_actual
    assert entries[0].reforecast_amount is None
    assert entries[0].quarter == 1
    assert entries[1].budget_amount == 0.0
    assert entries[1].actual_amount is None
    assert entries[1].quarter == 2


def test_rows_without_period_are_dropped() -> None:
    df = pd.DataFrame([
        {'category_id': 'opex-bonus', 'year': 2025, 'month': None, 'budget_amount': 1},
        {'category_id': 'opex-bonus', 'year': 'n/a', 'month': 2, 'budget_amount': 1},
        {'category_id': 'opex-bonus', 'year': 2025, 'month': 2, 'budget_amount': 1},
    ])
    assert len(entries_from_dataframe(df)) == 1


def test_missing_required_column_raises() -> None:
    with pytest.raises(ValueError):
        as_entry_frame(pd.DataFrame([{'category_id': 'x', 'year': 2025, 'month': 1}]))


def test_entry_frame_columns_and_nan() -> None:
    frame = entries_to_dataframe([BudgetEntry('opex-bonus', 2025, 11, 10)])

    for column in AMOUNT_COLUMNS:
        assert column in frame.columns
    assert frame.loc[0, 'quarter'] == 4
    assert math.isnan(frame.loc[0, 'actual_amount'])


def test_empty_entries_give_empty_frame() -> None:
    frame = as_entry_frame([])
    assert frame.empty
    assert 'budget_amount' in frame.columns


def test_read_entries_from_csv() -> None:
    buffer = io.StringIO(
        "category_id,year,month,budget_amount,actual_amount,reforecast_amount,notes\n"
        "opex-bonus,2025,1,1000,900,,january\n"
        "cos-software,2025,2,500,,450,\n"
    )
    entries = read_entries(buffer)

    assert entries[0] == BudgetEntry(
        'opex-bonus', 2025, 1, 1000.0, actual_amount=900.0, quarter=1, notes='january'
    )
    assert entries[1].actual_amount is None
    assert entries[1].reforecast_amount == 450.0


def test_summaries_to_dataframe() -> None:
    entries = [BudgetEntry('opex-bonus', 2025, 1, 100, actual_amount=80)]
    df = summaries_to_dataframe(summarize_categories(entries, CATEGORIES, year=2025))

    assert list(df['category_id']) == ['cos-software', 'opex-bonus', 'opex-misc']
    assert df.loc[1, 'variance'] == 20
    assert summaries_to_dataframe([]).empty


def test_period_to_dataframe_rows_in_display_order() -> None:
    entries = [
        BudgetEntry('cos-software', 2025, 1, 500, actual_amount=400),
        BudgetEntry('opex-bonus', 2025, 1, 1000, actual_amount=1100),
        BudgetEntry('opex-misc', 2025, 2, 200, reforecast_amount=150),
    ]
    data = calculate_quarterly_data(entries, CATEGORIES, 1, 2025, CLASSIFICATION)
    df = period_to_dataframe(data)

    assert list(df['Category']) == [
        'Software',
        'Total Cost of Sales',
        'Bonus',
        'Total Comp and Benefits',
        'Misc',
        'Total OpEx',
        'Net Total',
    ]
    net = df.iloc[-1]
    assert net['Budget'] == 1700
    assert net['Variance'] == 50
    assert net['Variance %'] == pytest.approx(50 / 1700 * 100)

    bare = period_to_dataframe(data, include_totals=False)
    assert list(bare['Category ID']) == ['cos-software', 'opex-bonus', 'opex-misc']
    assert list(bare['Subgroup']) == ['', 'Comp and Benefits', '']


def test_rows_without_category_id_are_dropped() -> None:
    buffer = io.StringIO(
        "category_id,year,month,budget_amount\n"
        ",2025,1,1000\n"
        "opex-bonus,2025,1,500\n"
    )
    entries = read_entries(buffer)

    assert [e.category_id for e in entries] == ['opex-bonus']


def test_blank_category_id_stays_missing_in_frame() -> None:
    df = pd.DataFrame([{'category_id': None, 'year': 2025, 'month': 1, 'budget_amount': 1}])
    frame = as_entry_frame(df)

    assert frame['category_id'].isna().all()


def test_read_entries_rejects_legacy_xls() -> None:
    with pytest.raises(ValueError):
        read_entries('budget_export.xls')
