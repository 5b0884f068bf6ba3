"""Budget alerts derived from full-year category summaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from ..config import get_config_value
from .frames import EntriesLike, as_entry_frame
from .models import ALERT_DANGER, ALERT_INFO, ALERT_WARNING, BudgetAlert, BudgetCategory
from .summary import summarize_frame

logger = logging.getLogger(__name__)

SEVERITY_ORDER = {ALERT_DANGER: 3, ALERT_WARNING: 2, ALERT_INFO: 1}
NO_ACTUALS_MESSAGE = "No actual expenses recorded yet"


@dataclass(frozen=True)
class AlertThresholds:
    variance_percent: float = 15.0
    variance_amount: float = 50000.0
    danger_percent: float = 25.0

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> 'AlertThresholds':
        raw = raw or {}
        defaults = cls()
        return cls(
            variance_percent=float(raw.get('variance_percent', defaults.variance_percent)),
            variance_amount=float(raw.get('variance_amount', defaults.variance_amount)),
            danger_percent=float(raw.get('danger_percent', defaults.danger_percent)),
        )


def load_alert_thresholds() -> AlertThresholds:
    """Thresholds from ``budgets.json``; built-in defaults if absent."""
    return AlertThresholds.from_mapping(get_config_value('budgets', 'alert_thresholds'))


def sort_alerts(alerts: Sequence[BudgetAlert]) -> List[BudgetAlert]:
    """Danger first, then warning, then info; ties keep their order."""
    return sorted(alerts, key=lambda alert: -SEVERITY_ORDER.get(alert.type, 0))


def generate_alerts(
    entries: EntriesLike,
    categories: Sequence[BudgetCategory],
    year: int,
    thresholds: Optional[AlertThresholds] = None,
) -> List[BudgetAlert]:
    """Scan each category's full-year summary for alert conditions.

    A variance alert needs both ``|variance %|`` above
    ``thresholds.variance_percent`` and ``|variance|`` above
    ``thresholds.variance_amount``; it is ``danger`` past
    ``thresholds.danger_percent`` and ``warning`` otherwise. An ``info``
    alert flags categories with budget but no actuals, independently of the
    variance check.

    Args:
        entries: Budget entries or an entry DataFrame
        categories: Categories to scan, in order
        year: Year to summarize
        thresholds: Alert limits; defaults to the configured ones

    Returns:
        Alerts sorted by severity
    """
    thresholds = thresholds or load_alert_thresholds()
    frame = as_entry_frame(entries)
    alerts: List[BudgetAlert] = []

    for category in categories:
        summary = summarize_frame(frame, category, year=year)
        percent = abs(summary.variance_percent)

        if percent > thresholds.variance_percent and abs(summary.variance) > thresholds.variance_amount:
            alerts.append(
                BudgetAlert(
                    id=f"variance-{category.id}",
                    type=ALERT_DANGER if percent > thresholds.danger_percent else ALERT_WARNING,
                    category=category.name,
                    message=f"{percent:.1f}% variance from budget",
                    variance=summary.variance,
                )
            )

        if summary.budget != 0 and summary.actual == 0:
            alerts.append(
                BudgetAlert(
                    id=f"no-actuals-{category.id}",
                    type=ALERT_INFO,
                    category=category.name,
                    message=NO_ACTUALS_MESSAGE,
                    variance=summary.budget,
                )
            )

    logger.debug("Generated %d alerts for %d categories in %s", len(alerts), len(categories), year)
    return sort_alerts(alerts)
