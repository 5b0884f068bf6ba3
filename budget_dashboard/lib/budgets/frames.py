"""pandas adapters between caller tables and the engine's records.

Calculations run over a normalized entry frame: one row per
:class:`~.models.BudgetEntry` with float amount columns in which ``NaN``
stands for "not entered". The ``*_to_dataframe`` helpers flatten rollups and
alerts into tables for exporters; amounts stay in raw dollars.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from ..common.months import quarter_for_month
from .models import BudgetAlert, BudgetEntry, CategorySummary, PeriodData, Totals

KEY_COLUMNS = ['category_id', 'year', 'month', 'quarter']
AMOUNT_COLUMNS = ['budget_amount', 'actual_amount', 'reforecast_amount', 'adjustment_amount']
OPTIONAL_AMOUNT_COLUMNS = AMOUNT_COLUMNS[1:]
REQUIRED_COLUMNS = ['category_id', 'year', 'month', 'budget_amount']
ENTRY_COLUMNS = KEY_COLUMNS + AMOUNT_COLUMNS + ['notes', 'id']

EntriesLike = Union[Sequence[BudgetEntry], pd.DataFrame]


# ---------------------------------------------------------------------------
# Entry frames
# ---------------------------------------------------------------------------


def _normalize_entry_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Coerce types on a frame that already holds the entry columns."""
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Entry table is missing required columns: {missing}")

    frame = df.copy()
    frame['category_id'] = frame['category_id'].map(lambda v: None if pd.isna(v) else str(v))
    frame['year'] = pd.to_numeric(frame['year'], errors='coerce').astype('float64')
    frame['month'] = pd.to_numeric(frame['month'], errors='coerce').astype('float64')
    derived_quarter = frame['month'].map(
        lambda m: float(quarter_for_month(int(m))) if pd.notna(m) else float('nan')
    ).astype('float64')
    if 'quarter' in frame.columns:
        stored = pd.to_numeric(frame['quarter'], errors='coerce').astype('float64')
        frame['quarter'] = stored.fillna(derived_quarter)
    else:
        frame['quarter'] = derived_quarter

    frame['budget_amount'] = (
        pd.to_numeric(frame['budget_amount'], errors='coerce').astype('float64').fillna(0.0)
    )
    for col in OPTIONAL_AMOUNT_COLUMNS:
        if col in frame.columns:
            frame[col] = pd.to_numeric(frame[col], errors='coerce').astype('float64')
        else:
            frame[col] = float('nan')

    for col in ('notes', 'id'):
        if col not in frame.columns:
            frame[col] = None
    return frame.reset_index(drop=True)


def as_entry_frame(entries: EntriesLike) -> pd.DataFrame:
    """Return a normalized entry frame for ``entries``.

    Accepts a sequence of :class:`BudgetEntry` or a DataFrame with the
    entry columns. The input is never modified.

    Raises:
        ValueError: If a DataFrame lacks one of ``REQUIRED_COLUMNS``.
    """
    if isinstance(entries, pd.DataFrame):
        return _normalize_entry_frame(entries)

    records = [asdict(entry) for entry in entries]
    if not records:
        return _normalize_entry_frame(pd.DataFrame(columns=ENTRY_COLUMNS))
    return _normalize_entry_frame(pd.DataFrame.from_records(records, columns=ENTRY_COLUMNS))


def _optional(value: Any) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def entries_from_dataframe(df: pd.DataFrame) -> List[BudgetEntry]:
    """Convert a caller table into :class:`BudgetEntry` records.

    Rows without a category id or a usable year or month are dropped. Blank
    optional amounts become ``None`` (not entered); a blank budget becomes
    ``0.0``.

    Example:
        >>> df = pd.DataFrame([{'category_id': 'opex-bonus', 'year': 2025,
        ...                     'month': 3, 'budget_amount': 1000}])
        >>> entries_from_dataframe(df)[0].quarter
        1
    """
    frame = _normalize_entry_frame(df)
    frame = frame[
        frame['category_id'].notna() & frame['year'].notna() & frame['month'].notna()
    ]

    entries: List[BudgetEntry] = []
    for row in frame.itertuples(index=False):
        entries.append(
            BudgetEntry(
                category_id=row.category_id,
                year=int(row.year),
                month=int(row.month),
                budget_amount=float(row.budget_amount),
                actual_amount=_optional(row.actual_amount),
                reforecast_amount=_optional(row.reforecast_amount),
                adjustment_amount=_optional(row.adjustment_amount),
                quarter=None if pd.isna(row.quarter) else int(row.quarter),
                notes=None if pd.isna(row.notes) else str(row.notes),
                id=None if pd.isna(row.id) else str(row.id),
            )
        )
    return entries


def entries_to_dataframe(entries: Sequence[BudgetEntry]) -> pd.DataFrame:
    """Inverse of :func:`entries_from_dataframe`; ``None`` amounts become NaN."""
    return as_entry_frame(entries)


def read_entries(path_or_buffer) -> List[BudgetEntry]:
    """Load entries from a CSV or ``.xlsx`` export.

    Raises:
        ValueError: For legacy ``.xls`` workbooks.
    """
    name = str(getattr(path_or_buffer, 'name', path_or_buffer)).lower()
    if name.endswith('.xls'):
        raise ValueError(f"Legacy .xls workbooks are not supported, save {name} as .xlsx or .csv")
    if name.endswith('.xlsx'):
        df = pd.read_excel(path_or_buffer, engine='openpyxl')
    else:
        df = pd.read_csv(path_or_buffer, index_col=False)
    return entries_from_dataframe(df)


# ---------------------------------------------------------------------------
# Output tables
# ---------------------------------------------------------------------------


def _summary_row(summary: CategorySummary, group: str, sub_group: str = '') -> Dict[str, Any]:
    return {
        'Group': group,
        'Subgroup': sub_group,
        'Category ID': summary.category_id,
        'Category': summary.category_name,
        'Budget': summary.budget,
        'Actual': summary.actual,
        'Reforecast': summary.reforecast,
        'Adjustments': summary.adjustments,
        'Variance': summary.variance,
        'Variance %': summary.variance_percent,
    }


def _total_row(totals: Totals, label: str, group: str, sub_group: str = '') -> Dict[str, Any]:
    budget = totals.budget
    return {
        'Group': group,
        'Subgroup': sub_group,
        'Category ID': '',
        'Category': label,
        'Budget': budget,
        'Actual': totals.actual,
        'Reforecast': totals.reforecast,
        'Adjustments': totals.adjustments,
        'Variance': totals.variance,
        'Variance %': (totals.variance / abs(budget) * 100.0) if budget else 0.0,
    }


def summaries_to_dataframe(summaries: Iterable[CategorySummary]) -> pd.DataFrame:
    """One row per category summary."""
    rows = [asdict(summary) for summary in summaries]
    if not rows:
        return pd.DataFrame(columns=[
            'category_id', 'category_name', 'budget', 'actual', 'reforecast',
            'adjustments', 'variance', 'variance_percent', 'is_negative',
        ])
    return pd.DataFrame(rows)


def period_to_dataframe(data: PeriodData, include_totals: bool = True) -> pd.DataFrame:
    """Flatten a rollup into a table in display order.

    Cost of sales categories come first, then opex subgroups and the
    remaining opex categories. With ``include_totals`` a total row follows
    each subgroup and parent group, and a final ``Net Total`` row closes the
    table.
    """
    rows: List[Dict[str, Any]] = []

    cos = data.cost_of_sales
    rows.extend(_summary_row(s, cos.name) for s in cos.categories)
    if include_totals:
        rows.append(_total_row(cos.total, f"Total {cos.name}", cos.name))

    opex = data.opex
    for sub_group in opex.sub_groups:
        rows.extend(_summary_row(s, opex.name, sub_group.name) for s in sub_group.categories)
        if include_totals:
            rows.append(
                _total_row(sub_group.total, f"Total {sub_group.name}", opex.name, sub_group.name)
            )
    rows.extend(_summary_row(s, opex.name) for s in opex.categories)
    if include_totals:
        rows.append(_total_row(opex.total, f"Total {opex.name}", opex.name))
        rows.append(_total_row(data.net_total, 'Net Total', 'Net Total'))

    return pd.DataFrame(rows)


def alerts_to_dataframe(alerts: Iterable[BudgetAlert]) -> pd.DataFrame:
    """One row per alert, keeping the alert order."""
    rows = [asdict(alert) for alert in alerts]
    if not rows:
        return pd.DataFrame(columns=['id', 'type', 'category', 'message', 'variance'])
    return pd.DataFrame(rows)
