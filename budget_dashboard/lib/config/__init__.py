"""JSON-backed defaults for the budget engine."""

from .defaults import get_budget_config, get_config_value, load_config

__all__ = ['get_budget_config', 'get_config_value', 'load_config']
