"""Subgroup and parent-group aggregation.

Every rollup shares the same shape: cost of sales categories, the opex
subgroups from the classification table, the remaining opex categories,
and the totals that tie them together. The only thing that changes between
rollups is the summarizer mapped over each category, so the builders here
take that summarizer as an argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from .models import (
    COST_OF_SALES,
    OPEX,
    BudgetCategory,
    CategoryGroup,
    CategorySummary,
    PeriodData,
    SubCategoryGroup,
    Totals,
)
from .registry import CategoryClassification, SubgroupDefinition, load_default_classification

COST_OF_SALES_NAME = 'Cost of Sales'
OPEX_NAME = 'OpEx'

Summarizer = Callable[[BudgetCategory], CategorySummary]


def sum_summaries(summaries: Iterable[CategorySummary]) -> Totals:
    """Field-wise total of budget, actual, reforecast, adjustments and variance."""
    return Totals.combine(summary.totals for summary in summaries)


def build_sub_group(
    definition: SubgroupDefinition,
    categories: Sequence[BudgetCategory],
    classification: CategoryClassification,
    summarize: Summarizer,
    id_prefix: str = '',
) -> SubCategoryGroup:
    """Summarize a subgroup's members (registry order) and total them."""
    members = classification.members(definition.id, categories)
    summaries = tuple(summarize(category) for category in members)
    return SubCategoryGroup(
        id=f"{id_prefix}{definition.id}",
        name=definition.name,
        categories=summaries,
        total=sum_summaries(summaries),
    )


def build_period_data(
    categories: Sequence[BudgetCategory],
    summarize: Summarizer,
    classification: Optional[CategoryClassification] = None,
    *,
    month: Optional[int] = None,
    quarter: Optional[int] = None,
    sub_group_prefix: str = '',
) -> PeriodData:
    """Assemble a full rollup from a per-category summarizer.

    Args:
        categories: Category registry (order is preserved in the output)
        summarize: Produces the summary of one category for the period
        classification: Opex subgroup table; defaults to the bundled one
        month: Month tag for monthly rollups
        quarter: Quarter tag; 0 marks YTD
        sub_group_prefix: Prefix for subgroup ids (``'ytd-'`` for YTD)

    Returns:
        Rollup where ``net_total = cost_of_sales.total + opex.total`` and
        ``opex.total`` adds subgroup totals and remaining opex categories
    """
    classification = classification or load_default_classification()

    cos_summaries = tuple(
        summarize(c) for c in categories if c.parent_category == COST_OF_SALES
    )
    cos_total = sum_summaries(cos_summaries)

    sub_groups = tuple(
        build_sub_group(definition, categories, classification, summarize, sub_group_prefix)
        for definition in classification.subgroups
    )
    remaining = tuple(summarize(c) for c in classification.remaining(categories, OPEX))
    opex_total = Totals.combine(g.total for g in sub_groups) + sum_summaries(remaining)

    return PeriodData(
        cost_of_sales=CategoryGroup(
            id=COST_OF_SALES,
            name=COST_OF_SALES_NAME,
            categories=cos_summaries,
            total=cos_total,
        ),
        opex=CategoryGroup(
            id=OPEX,
            name=OPEX_NAME,
            categories=remaining,
            sub_groups=sub_groups,
            total=opex_total,
        ),
        net_total=cos_total + opex_total,
        month=month,
        quarter=quarter,
    )


# ---------------------------------------------------------------------------
# Category share of parent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryShare:
    summary: CategorySummary
    budget_percent: float
    actual_percent: float
    reforecast_percent: float


def _share(part: float, whole: float) -> float:
    return (part / whole * 100.0) if whole != 0 else 0.0


def category_percentages(
    summaries: Iterable[CategorySummary], parent_total: Totals
) -> List[CategoryShare]:
    """Each category's share of its parent group, adjustments included.

    Both the category and the parent amounts have their adjustments added
    before dividing. A zero parent total gives 0%.
    """
    parent_budget = parent_total.budget + parent_total.adjustments
    parent_actual = parent_total.actual + parent_total.adjustments
    parent_reforecast = parent_total.reforecast + parent_total.adjustments

    shares = []
    for summary in summaries:
        shares.append(
            CategoryShare(
                summary=summary,
                budget_percent=_share(summary.budget + summary.adjustments, parent_budget),
                actual_percent=_share(summary.actual + summary.adjustments, parent_actual),
                reforecast_percent=_share(
                    summary.reforecast + summary.adjustments, parent_reforecast
                ),
            )
        )
    return shares
