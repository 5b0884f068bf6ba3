"""Top-level package for the budget dashboard engine.

Turns monthly budget entries into category summaries, subgroup and
parent-group rollups, budget tracking figures, KPIs and variance alerts.
The primary modules are:

* ``config`` - environment overrides and logging setup
* ``lib.budgets`` - the calculation engine
* ``lib.common`` - month/quarter helpers and formatting

To print a summary of a CSV export from the command line you can execute:

```bash
python scripts/show_budget_summary.py entries.csv --year 2025
```
"""

from . import config  # noqa: F401  # re-exported for convenience
from .lib import budgets  # noqa: F401  # re-exported for convenience

__version__ = "0.1.0"

__all__ = ["config", "budgets"]
