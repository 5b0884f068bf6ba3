#!/usr/bin/env python3
"""Lightweight validator for the bundled category taxonomy."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_dashboard.lib.budgets.models import PARENT_CATEGORIES
from budget_dashboard.lib.budgets.registry import (
    CategoryClassification,
    CategoryTaxonomyError,
    categories_from_config,
)
from budget_dashboard.lib.config import get_budget_config


def validate_config(config: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    raw_categories = config.get("categories")
    if not isinstance(raw_categories, list) or not raw_categories:
        return ["missing 'categories' list"]

    for index, raw in enumerate(raw_categories):
        if "id" not in raw:
            errors.append(f"categories[{index}] has no id")
        elif raw.get("parent_category") not in PARENT_CATEGORIES:
            errors.append(
                f"category '{raw['id']}' has parent {raw.get('parent_category')!r}"
            )
    if errors:
        return errors

    categories = categories_from_config(config)
    ids = [c.id for c in categories]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        errors.append(f"duplicate category ids: {', '.join(duplicates)}")

    try:
        CategoryClassification.from_config(config).validate(categories)
    except CategoryTaxonomyError as exc:
        errors.append(str(exc))

    return errors


def main() -> int:
    try:
        config = get_budget_config()
    except FileNotFoundError as exc:
        print(exc)
        return 1

    errors = validate_config(config)
    if errors:
        print("Category validation failed:")
        for message in errors:
            print(f"  - {message}")
        return 1

    print(f"All {len(config['categories'])} categories validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
