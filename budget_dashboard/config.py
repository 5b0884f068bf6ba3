"""Configuration management for the budget dashboard engine.

This module centralizes configuration values including the location of
the JSON defaults, the log level, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

# Base package root - assumes this file is in budget_dashboard/
_PACKAGE_ROOT = Path(__file__).parent.resolve()

# JSON defaults (category registry, subgroups, alert thresholds)
CONFIG_DIR = Path(
    os.getenv("BUDGET_DASHBOARD_CONFIG_DIR", _PACKAGE_ROOT / "lib" / "config")
).resolve()

# Logging
LOG_LEVEL = os.getenv("BUDGET_DASHBOARD_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_config_dir() -> str:
    """Get the configuration directory as a string."""
    return str(CONFIG_DIR)


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """Configure root logging for scripts and interactive sessions.

    The library itself never calls this; it only emits records through
    module-level loggers.

    Args:
        level: Log level name or number. Defaults to ``BUDGET_DASHBOARD_LOG_LEVEL``.
    """
    resolved = level if level is not None else LOG_LEVEL
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.WARNING
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
