"""Common utilities shared across the engine modules.

This module provides month/quarter helpers and formatting utilities
that are used by multiple modules and scripts.
"""

from .formatting import format_currency, format_percent, variance_class
from .months import (
    MONTH_NAMES,
    month_name,
    months_through,
    quarter_for_month,
    quarter_months,
    ytd_label,
)

__all__ = [
    'format_currency',
    'format_percent',
    'variance_class',
    'MONTH_NAMES',
    'month_name',
    'months_through',
    'quarter_for_month',
    'quarter_months',
    'ytd_label',
]
