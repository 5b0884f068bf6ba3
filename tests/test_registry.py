"""Unit tests for the category registry and subgroup classification."""

from __future__ import annotations

import logging

import pytest

from budget_dashboard.lib.budgets.models import COST_OF_SALES, OPEX, BudgetCategory
from budget_dashboard.lib.budgets.registry import (
    CategoryClassification,
    CategoryRegistry,
    CategoryTaxonomyError,
    SubgroupDefinition,
    categories_from_config,
    load_default_categories,
    load_default_classification,
    load_registry,
)

CATEGORIES = [
    BudgetCategory('cos-software', 'Software', COST_OF_SALES),
    BudgetCategory('opex-bonus', 'Bonus', OPEX),
    BudgetCategory('opex-travel', 'Travel', OPEX),
]


def test_default_registry_loads_and_validates() -> None:
    registry = load_registry()

    assert len(registry) == 21
    assert len(registry.by_parent(COST_OF_SALES)) == 6
    assert len(registry.by_parent(OPEX)) == 15
    assert registry.get('opex-bonus').name == 'Bonus'
    assert registry.classification.subgroup_for('opex-bonus') == 'comp-and-benefits'
    assert registry.classification.subgroup_for('opex-marketing') == 'other'
    assert [g.name for g in registry.classification.subgroups] == ['Comp and Benefits', 'Other']


def test_default_loaders_agree() -> None:
    categories = load_default_categories()
    classification = load_default_classification()

    classification.validate(categories)
    assert classification.remaining(categories) == []


def test_from_table_orders_subgroups_by_names_then_table() -> None:
    classification = CategoryClassification.from_table(
        {'opex-travel': 'other', 'opex-bonus': 'comp'},
        names={'comp': 'Comp'},
    )

    assert [g.id for g in classification.subgroups] == ['comp', 'other']
    assert classification.get('other').name == 'other'
    assert classification.as_table() == {'opex-travel': 'other', 'opex-bonus': 'comp'}
    assert classification.get('missing') is None


def test_members_follow_registry_order() -> None:
    classification = CategoryClassification.from_table(
        {'opex-travel': 'all', 'opex-bonus': 'all'}
    )
    assert [c.id for c in classification.members('all', CATEGORIES)] == [
        'opex-bonus',
        'opex-travel',
    ]


def test_category_cannot_be_in_two_subgroups() -> None:
    with pytest.raises(CategoryTaxonomyError):
        CategoryClassification([
            SubgroupDefinition('a', 'A', ('opex-bonus',)),
            SubgroupDefinition('b', 'B', ('opex-bonus',)),
        ])


def test_duplicate_subgroup_ids_rejected() -> None:
    with pytest.raises(CategoryTaxonomyError):
        CategoryClassification([
            SubgroupDefinition('a', 'A', ()),
            SubgroupDefinition('a', 'Again', ()),
        ])


def test_validate_rejects_unknown_and_non_opex_ids() -> None:
    classification = CategoryClassification.from_table(
        {'opex-unknown': 'other', 'cos-software': 'other'}
    )
    with pytest.raises(CategoryTaxonomyError) as excinfo:
        classification.validate(CATEGORIES)

    message = str(excinfo.value)
    assert 'opex-unknown' in message
    assert 'cos-software' in message
    assert isinstance(excinfo.value, ValueError)


def test_registry_rejects_duplicate_ids() -> None:
    with pytest.raises(CategoryTaxonomyError):
        CategoryRegistry(CATEGORIES + [CATEGORIES[0]], CategoryClassification([]))


def test_registry_warns_about_unknown_parent(caplog) -> None:
    categories = CATEGORIES + [BudgetCategory('loose', 'Loose')]
    with caplog.at_level(logging.WARNING, logger='budget_dashboard.lib.budgets.registry'):
        registry = CategoryRegistry(categories, CategoryClassification([]))

    assert list(registry) == categories
    assert "loose" in caplog.text


def test_registry_validates_classification() -> None:
    bad = CategoryClassification.from_table({'opex-missing': 'other'})
    with pytest.raises(CategoryTaxonomyError):
        CategoryRegistry(CATEGORIES, bad)

    registry = CategoryRegistry(CATEGORIES, bad, validate=False)
    assert registry.classification is bad


def test_from_config_requires_subgroup_id() -> None:
    with pytest.raises(CategoryTaxonomyError):
        CategoryClassification.from_config({'subgroups': [{'name': 'No id'}]})


def test_categories_from_config_defaults() -> None:
    categories = categories_from_config({
        'categories': [{'id': 'opex-x', 'parent_category': 'opex', 'is_negative': True}]
    })

    assert categories == [BudgetCategory('opex-x', 'opex-x', 'opex', True, None)]
