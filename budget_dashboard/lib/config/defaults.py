"""JSON defaults for the budget engine.

``budgets.json`` ships the category registry, the opex subgroup table, the
alert thresholds and the variance display limits. Point
``BUDGET_DASHBOARD_CONFIG_DIR`` at another directory to replace them.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ...config import CONFIG_DIR

logger = logging.getLogger(__name__)

BUDGETS_CONFIG = 'budgets'


def load_config(config_name: str, config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Read ``<config_dir>/<config_name>.json``.

    Args:
        config_name: File stem, e.g. ``'budgets'``
        config_dir: Overrides the configured ``CONFIG_DIR``

    Raises:
        FileNotFoundError: If there is no such file
        json.JSONDecodeError: If the file is not valid JSON

    Example:
        >>> load_config('budgets')['alert_thresholds']['variance_percent']
        15
    """
    config_path = (config_dir or CONFIG_DIR) / f"{config_name}.json"

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.debug("Loading configuration from %s", config_path)
    with open(config_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_budget_config() -> Dict[str, Any]:
    """The ``budgets.json`` document (registry, subgroups, thresholds)."""
    return load_config(BUDGETS_CONFIG)


def get_config_value(config_name: str, *keys: str, default: Any = None) -> Any:
    """Look up a nested value such as an alert threshold.

    Missing files and keys give ``default``, as does a key path that runs
    into a non-mapping value.

    Example:
        >>> get_config_value('budgets', 'variance_display', 'danger_amount')
        5000
        >>> get_config_value('budgets', 'alert_thresholds', 'unknown', default=0)
        0
    """
    try:
        value: Any = load_config(config_name)
    except FileNotFoundError:
        return default

    for key in keys:
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]
    return value
