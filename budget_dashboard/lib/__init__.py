"""Engine library modules.

Structure:
    - common/: Month/quarter helpers and display formatting
    - config/: JSON defaults (category registry, subgroups, alert thresholds)
    - budgets/: Summaries, rollups, tracking, KPIs and alerts
"""

__all__ = ['common', 'config', 'budgets']
