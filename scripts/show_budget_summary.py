#!/usr/bin/env python3
"""Print YTD totals, a quarter rollup and alerts for a CSV of budget entries."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_dashboard.config import configure_logging
from budget_dashboard.lib.budgets import (
    calculate_budget_tracking,
    calculate_quarterly_data,
    calculate_ytd_data,
    generate_alerts,
    load_registry,
    period_to_dataframe,
    read_entries,
)
from budget_dashboard.lib.common import format_currency, format_percent, variance_class, ytd_label
from budget_dashboard.lib.config import get_config_value


def main(path: str, year: int, quarter: int) -> None:
    registry = load_registry()
    entries = read_entries(path)
    print(f"Loaded {len(entries)} entries from {path}")

    display = get_config_value('budgets', 'variance_display', default={}) or {}
    neutral = float(display.get('neutral_amount', 1))
    danger = float(display.get('danger_amount', 5000))

    ytd = calculate_ytd_data(entries, registry.categories, year, registry.classification)
    tracking = calculate_budget_tracking(ytd.data.net_total)
    print(f"\n{ytd_label(ytd.last_month_with_actuals)} {year}")
    print(f"  Budget:   {format_currency(tracking.budget)}")
    print(f"  Actual:   {format_currency(tracking.actual)}")
    print(
        f"  Variance: {format_currency(tracking.variance)} "
        f"({variance_class(tracking.variance, neutral, danger)})"
    )

    data = calculate_quarterly_data(
        entries, registry.categories, quarter, year, registry.classification
    )
    table = period_to_dataframe(data)
    for column in ('Budget', 'Actual', 'Reforecast', 'Adjustments', 'Variance'):
        table[column] = table[column].map(format_currency)
    table['Variance %'] = table['Variance %'].map(format_percent)
    print(f"\nQ{quarter} {year}")
    print(table.drop(columns=['Category ID']).to_string(index=False))

    alerts = generate_alerts(entries, registry.categories, year)
    print(f"\nAlerts: {len(alerts)}")
    for alert in alerts:
        print(f"  [{alert.type}] {alert.category}: {alert.message} ({format_currency(alert.variance)})")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show budget rollups for a CSV of entries.')
    parser.add_argument('path', help='CSV or Excel file with budget entries')
    parser.add_argument('--year', type=int, required=True, help='Year to report')
    parser.add_argument('--quarter', type=int, default=1, help='Quarter to roll up (1-4)')
    parser.add_argument('--log-level', default=None, help='Override BUDGET_DASHBOARD_LOG_LEVEL')
    args = parser.parse_args()
    configure_logging(args.log_level)
    main(args.path, year=args.year, quarter=args.quarter)
