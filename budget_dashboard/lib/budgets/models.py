"""Data model for budget entries and the rollups derived from them.

Reference data (:class:`BudgetCategory`) and facts (:class:`BudgetEntry`)
are supplied by the caller. Everything else in this module is derived on
every query and never persisted. All records are frozen dataclasses holding
tuples, so two calculations over the same inputs compare equal.

Optional entry amounts use ``None`` for "not entered", which is distinct
from an entered ``0.0``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, NamedTuple, Optional, Tuple

from ..common.months import quarter_for_month

COST_OF_SALES = 'cost-of-sales'
OPEX = 'opex'
PARENT_CATEGORIES = (COST_OF_SALES, OPEX)

ALERT_DANGER = 'danger'
ALERT_WARNING = 'warning'
ALERT_INFO = 'info'

# year -> month -> True (Final, actuals authoritative) / False (Forecast)
ForecastModeMap = Dict[int, Dict[int, bool]]

TOTAL_FIELDS = ('budget', 'actual', 'reforecast', 'adjustments', 'variance')


# ---------------------------------------------------------------------------
# Reference data and facts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BudgetCategory:
    id: str
    name: str
    parent_category: Optional[str] = None
    is_negative: bool = False
    description: Optional[str] = None


@dataclass(frozen=True)
class BudgetEntry:
    """One category's figures for one month.

    ``quarter`` is stored redundantly; it is derived from ``month`` when not
    supplied.
    """

    category_id: str
    year: int
    month: int
    budget_amount: float
    actual_amount: Optional[float] = None
    reforecast_amount: Optional[float] = None
    adjustment_amount: Optional[float] = None
    quarter: Optional[int] = None
    notes: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.quarter is None:
            object.__setattr__(self, 'quarter', quarter_for_month(self.month))

    @property
    def has_actual(self) -> bool:
        return self.actual_amount is not None

    @property
    def has_reforecast(self) -> bool:
        return self.reforecast_amount is not None

    @property
    def has_adjustment(self) -> bool:
        return self.adjustment_amount is not None


# ---------------------------------------------------------------------------
# Derived records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Totals:
    budget: float = 0.0
    actual: float = 0.0
    reforecast: float = 0.0
    adjustments: float = 0.0
    variance: float = 0.0

    def __add__(self, other: 'Totals') -> 'Totals':
        if not isinstance(other, Totals):
            return NotImplemented
        return Totals(
            budget=self.budget + other.budget,
            actual=self.actual + other.actual,
            reforecast=self.reforecast + other.reforecast,
            adjustments=self.adjustments + other.adjustments,
            variance=self.variance + other.variance,
        )

    @classmethod
    def combine(cls, items: Iterable['Totals']) -> 'Totals':
        """Field-wise sum of ``items``; an empty iterable gives all zeros."""
        result = cls()
        for item in items:
            result = result + item
        return result

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in TOTAL_FIELDS}


@dataclass(frozen=True)
class CategorySummary:
    category_id: str
    category_name: str
    budget: float = 0.0
    actual: float = 0.0
    reforecast: float = 0.0
    adjustments: float = 0.0
    variance: float = 0.0
    variance_percent: float = 0.0
    is_negative: bool = False

    @property
    def totals(self) -> Totals:
        return Totals(
            budget=self.budget,
            actual=self.actual,
            reforecast=self.reforecast,
            adjustments=self.adjustments,
            variance=self.variance,
        )


@dataclass(frozen=True)
class SubCategoryGroup:
    id: str
    name: str
    categories: Tuple[CategorySummary, ...] = ()
    total: Totals = field(default_factory=Totals)


@dataclass(frozen=True)
class CategoryGroup:
    """A parent group (cost of sales or opex).

    ``categories`` holds only the categories reported directly under the
    parent; categories that belong to a subgroup appear in ``sub_groups``.
    """

    id: str
    name: str
    categories: Tuple[CategorySummary, ...] = ()
    sub_groups: Tuple[SubCategoryGroup, ...] = ()
    total: Totals = field(default_factory=Totals)

    def sub_group(self, group_id: str) -> Optional[SubCategoryGroup]:
        """Find a subgroup by id, ignoring a ``ytd-`` prefix."""
        for group in self.sub_groups:
            if group.id == group_id or group.id == f"ytd-{group_id}":
                return group
        return None

    def all_categories(self) -> Tuple[CategorySummary, ...]:
        """Direct categories followed by every subgroup's categories."""
        nested = tuple(c for group in self.sub_groups for c in group.categories)
        return self.categories + nested


@dataclass(frozen=True)
class PeriodData:
    """Monthly, quarterly or YTD rollup.

    ``quarter == 0`` marks a YTD result; monthly results carry ``month``.
    """

    cost_of_sales: CategoryGroup
    opex: CategoryGroup
    net_total: Totals
    month: Optional[int] = None
    quarter: Optional[int] = None

    @property
    def is_ytd(self) -> bool:
        return self.quarter == 0

    @property
    def comp_and_benefits(self) -> Optional[SubCategoryGroup]:
        return self.opex.sub_group('comp-and-benefits')

    @property
    def other(self) -> Optional[SubCategoryGroup]:
        return self.opex.sub_group('other')


class YTDResult(NamedTuple):
    data: PeriodData
    last_month_with_actuals: int


@dataclass(frozen=True)
class ColumnTotals:
    """Budget/actual/reforecast/variance columns of a tracking view."""

    budget: float = 0.0
    actual: float = 0.0
    reforecast: float = 0.0
    variance: float = 0.0

    def __add__(self, other: 'ColumnTotals') -> 'ColumnTotals':
        if not isinstance(other, ColumnTotals):
            return NotImplemented
        return ColumnTotals(
            budget=self.budget + other.budget,
            actual=self.actual + other.actual,
            reforecast=self.reforecast + other.reforecast,
            variance=self.variance + other.variance,
        )

    @classmethod
    def from_totals(cls, totals: Totals) -> 'ColumnTotals':
        return cls(
            budget=totals.budget,
            actual=totals.actual,
            reforecast=totals.reforecast,
            variance=totals.variance,
        )


@dataclass(frozen=True)
class BudgetAlert:
    id: str
    type: str
    category: str
    message: str
    variance: float
