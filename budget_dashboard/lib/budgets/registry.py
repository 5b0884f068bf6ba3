"""Category registry and opex subgroup classification.

The registry is the static list of spending categories. The classification
table assigns opex categories to the named subgroups ("Comp and Benefits",
"Other"); opex categories without an assignment are reported directly under
opex. Both come from ``lib/config/budgets.json`` by default and can be
replaced by callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..config import get_budget_config
from .models import OPEX, PARENT_CATEGORIES, BudgetCategory

logger = logging.getLogger(__name__)


class CategoryTaxonomyError(ValueError):
    """Raised when the subgroup classification disagrees with the registry."""


# ---------------------------------------------------------------------------
# Classification table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubgroupDefinition:
    id: str
    name: str
    category_ids: Tuple[str, ...]


class CategoryClassification:
    """Maps category ids to subgroup tags, keeping subgroup display order."""

    def __init__(self, subgroups: Sequence[SubgroupDefinition]) -> None:
        self.subgroups: Tuple[SubgroupDefinition, ...] = tuple(subgroups)
        self._tags: Dict[str, str] = {}
        seen_ids = set()
        for group in self.subgroups:
            if group.id in seen_ids:
                raise CategoryTaxonomyError(f"Subgroup '{group.id}' defined more than once")
            seen_ids.add(group.id)
            for category_id in group.category_ids:
                if category_id in self._tags:
                    raise CategoryTaxonomyError(
                        f"Category '{category_id}' assigned to both "
                        f"'{self._tags[category_id]}' and '{group.id}'"
                    )
                self._tags[category_id] = group.id

    # Construction -----------------------------------------------------------

    @classmethod
    def from_table(
        cls,
        table: Mapping[str, str],
        names: Optional[Mapping[str, str]] = None,
    ) -> 'CategoryClassification':
        """Build from a ``{category_id: subgroup_id}`` table.

        Args:
            table: Category id to subgroup id
            names: Optional subgroup id to display name; missing names fall
                back to the id. Subgroups are ordered as listed in ``names``,
                then by first appearance in ``table``.
        """
        names = dict(names or {})
        order: List[str] = list(names)
        for subgroup_id in table.values():
            if subgroup_id not in order:
                order.append(subgroup_id)

        subgroups = [
            SubgroupDefinition(
                id=subgroup_id,
                name=names.get(subgroup_id, subgroup_id),
                category_ids=tuple(c for c, tag in table.items() if tag == subgroup_id),
            )
            for subgroup_id in order
        ]
        return cls(subgroups)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'CategoryClassification':
        """Build from the ``subgroups`` block of a budget config dictionary."""
        subgroups = []
        for raw in config.get('subgroups', []) or []:
            if 'id' not in raw:
                raise CategoryTaxonomyError(f"Subgroup definition without an id: {raw!r}")
            subgroups.append(
                SubgroupDefinition(
                    id=str(raw['id']),
                    name=str(raw.get('name', raw['id'])),
                    category_ids=tuple(str(c) for c in raw.get('categories', []) or []),
                )
            )
        return cls(subgroups)

    # Lookups ---------------------------------------------------------------

    def as_table(self) -> Dict[str, str]:
        return dict(self._tags)

    def subgroup_for(self, category_id: str) -> Optional[str]:
        return self._tags.get(category_id)

    def get(self, subgroup_id: str) -> Optional[SubgroupDefinition]:
        for group in self.subgroups:
            if group.id == subgroup_id:
                return group
        return None

    def members(
        self, subgroup_id: str, categories: Iterable[BudgetCategory]
    ) -> List[BudgetCategory]:
        """Categories of ``subgroup_id`` in registry order."""
        return [c for c in categories if self._tags.get(c.id) == subgroup_id]

    def remaining(
        self, categories: Iterable[BudgetCategory], parent: str = OPEX
    ) -> List[BudgetCategory]:
        """Categories of ``parent`` that belong to no subgroup."""
        return [
            c for c in categories
            if c.parent_category == parent and c.id not in self._tags
        ]

    def validate(self, categories: Iterable[BudgetCategory]) -> None:
        """Check every classified id against the registry.

        Raises:
            CategoryTaxonomyError: If a classified id is unknown or its
                category is not an opex category.
        """
        by_id = {c.id: c for c in categories}
        problems: List[str] = []
        for category_id, subgroup_id in self._tags.items():
            category = by_id.get(category_id)
            if category is None:
                problems.append(f"'{category_id}' ({subgroup_id}) is not in the registry")
            elif category.parent_category != OPEX:
                problems.append(
                    f"'{category_id}' ({subgroup_id}) has parent "
                    f"'{category.parent_category}', expected '{OPEX}'"
                )
        if problems:
            raise CategoryTaxonomyError("Invalid subgroup classification: " + "; ".join(problems))

    def __repr__(self) -> str:
        groups = ', '.join(f"{g.id}={len(g.category_ids)}" for g in self.subgroups)
        return f"CategoryClassification({groups})"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class CategoryRegistry:
    """The session's category list plus its subgroup classification."""

    def __init__(
        self,
        categories: Sequence[BudgetCategory],
        classification: Optional[CategoryClassification] = None,
        *,
        validate: bool = True,
    ) -> None:
        self.categories: Tuple[BudgetCategory, ...] = tuple(categories)
        self.classification = classification or load_default_classification()
        self._by_id = {c.id: c for c in self.categories}
        if len(self._by_id) != len(self.categories):
            raise CategoryTaxonomyError("Category ids must be unique")
        if validate:
            self.validate()

    def validate(self) -> None:
        for category in self.categories:
            if category.parent_category not in PARENT_CATEGORIES:
                logger.warning(
                    "Category '%s' has parent '%s'; it is excluded from rollups",
                    category.id, category.parent_category,
                )
        self.classification.validate(self.categories)

    def get(self, category_id: str) -> Optional[BudgetCategory]:
        return self._by_id.get(category_id)

    def by_parent(self, parent: str) -> List[BudgetCategory]:
        return [c for c in self.categories if c.parent_category == parent]

    def __iter__(self):
        return iter(self.categories)

    def __len__(self) -> int:
        return len(self.categories)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def categories_from_config(config: Mapping[str, Any]) -> List[BudgetCategory]:
    """Build :class:`BudgetCategory` objects from a config ``categories`` list."""
    categories = []
    for raw in config.get('categories', []) or []:
        categories.append(
            BudgetCategory(
                id=str(raw['id']),
                name=str(raw.get('name', raw['id'])),
                parent_category=raw.get('parent_category'),
                is_negative=bool(raw.get('is_negative', False)),
                description=raw.get('description'),
            )
        )
    return categories


def load_default_categories() -> List[BudgetCategory]:
    """Category registry shipped in ``budgets.json``."""
    return categories_from_config(get_budget_config())


def load_default_classification() -> CategoryClassification:
    """Subgroup classification shipped in ``budgets.json``."""
    return CategoryClassification.from_config(get_budget_config())


def load_registry() -> CategoryRegistry:
    """Load and validate the default registry and classification together."""
    config = get_budget_config()
    registry = CategoryRegistry(
        categories_from_config(config),
        CategoryClassification.from_config(config),
    )
    logger.info(
        "Loaded %d categories with %r", len(registry), registry.classification
    )
    return registry
