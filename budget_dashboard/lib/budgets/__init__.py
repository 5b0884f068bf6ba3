"""Budget aggregation and variance engine.

This module provides all budget-related calculations including:
- Category summaries and variance conventions
- Subgroup and parent-group aggregation
- Monthly, quarterly and year-to-date rollups
- Budget tracking, quarter columns and full-year forecast
- KPIs and budget alerts
- pandas adapters for entry tables and exports
"""

from .models import (
    ALERT_DANGER,
    ALERT_INFO,
    ALERT_WARNING,
    COST_OF_SALES,
    OPEX,
    BudgetAlert,
    BudgetCategory,
    BudgetEntry,
    CategoryGroup,
    CategorySummary,
    ColumnTotals,
    ForecastModeMap,
    PeriodData,
    SubCategoryGroup,
    Totals,
    YTDResult,
)
from .registry import (
    CategoryClassification,
    CategoryRegistry,
    CategoryTaxonomyError,
    SubgroupDefinition,
    load_default_categories,
    load_default_classification,
    load_registry,
)
from .summary import (
    VarianceConvention,
    calculate_category_summary,
    calculate_variance,
    calculate_variance_percent,
    summarize_categories,
    summarize_category_months,
)
from .aggregation import build_period_data, category_percentages, sum_summaries
from .rollups import (
    calculate_monthly_data,
    calculate_period_rollup,
    calculate_quarterly_data,
    calculate_quarterly_non_forecast_data,
    calculate_quarterly_through_actuals_data,
    calculate_year_of_months,
    calculate_ytd_data,
    create_comp_and_benefits_sub_group,
    create_other_sub_group,
    create_sub_group,
    find_last_month_with_actuals,
    last_month_with_actuals_in_quarter,
)
from .forecast_modes import (
    all_months_final,
    final_months,
    is_final_month,
    last_final_month,
    last_final_month_name,
)
from .tracking import (
    QuarterSummary,
    calculate_budget_tracking,
    calculate_full_year_forecast,
    calculate_quarter_summary,
    summarize_months,
)
from .kpis import KPIData, calculate_kpis
from .alerts import AlertThresholds, generate_alerts, load_alert_thresholds, sort_alerts
from .frames import (
    alerts_to_dataframe,
    as_entry_frame,
    entries_from_dataframe,
    entries_to_dataframe,
    period_to_dataframe,
    read_entries,
    summaries_to_dataframe,
)

__all__ = [
    # Models
    'ALERT_DANGER',
    'ALERT_INFO',
    'ALERT_WARNING',
    'COST_OF_SALES',
    'OPEX',
    'BudgetAlert',
    'BudgetCategory',
    'BudgetEntry',
    'CategoryGroup',
    'CategorySummary',
    'ColumnTotals',
    'ForecastModeMap',
    'PeriodData',
    'SubCategoryGroup',
    'Totals',
    'YTDResult',
    # Registry
    'CategoryClassification',
    'CategoryRegistry',
    'CategoryTaxonomyError',
    'SubgroupDefinition',
    'load_default_categories',
    'load_default_classification',
    'load_registry',
    # Summaries
    'VarianceConvention',
    'calculate_category_summary',
    'calculate_variance',
    'calculate_variance_percent',
    'summarize_categories',
    'summarize_category_months',
    # Aggregation
    'build_period_data',
    'category_percentages',
    'sum_summaries',
    # Rollups
    'calculate_monthly_data',
    'calculate_period_rollup',
    'calculate_quarterly_data',
    'calculate_quarterly_non_forecast_data',
    'calculate_quarterly_through_actuals_data',
    'calculate_year_of_months',
    'calculate_ytd_data',
    'create_comp_and_benefits_sub_group',
    'create_other_sub_group',
    'create_sub_group',
    'find_last_month_with_actuals',
    'last_month_with_actuals_in_quarter',
    # Forecast modes
    'all_months_final',
    'final_months',
    'is_final_month',
    'last_final_month',
    'last_final_month_name',
    # Tracking
    'QuarterSummary',
    'calculate_budget_tracking',
    'calculate_full_year_forecast',
    'calculate_quarter_summary',
    'summarize_months',
    # KPIs and alerts
    'KPIData',
    'calculate_kpis',
    'AlertThresholds',
    'generate_alerts',
    'load_alert_thresholds',
    'sort_alerts',
    # Frames
    'alerts_to_dataframe',
    'as_entry_frame',
    'entries_from_dataframe',
    'entries_to_dataframe',
    'period_to_dataframe',
    'read_entries',
    'summaries_to_dataframe',
]
