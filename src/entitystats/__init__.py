"""
entitystats: descriptive statistics over analyzed-entity records.

This package provides:
- Grouping of records by a selectable key, ordered by group size
- Top-N selection with the remainder merged into an "other" group
- Cross-tabulation of a second key against the selected groups
- Stacked, pixel-normalized histograms of numeric keys
- Logging utilities for library and application use

Typical use:
    ```python
    from entitystats import StatsState, run_stats
    result = run_stats(records, StatsState(pick_top=5))
    ```

For logging configuration in standalone scripts:
    ```python
    from entitystats.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from entitystats.utils.logging import configure_logging, get_logger

from entitystats.stats import (
    DEFAULT_GROUPINGS,
    Grouping,
    StatsResult,
    StatsState,
    format_stats_summary_to_str,
    get_grouping,
    run_stats,
)

# Ensure entitystats logger has NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("entitystats")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_GROUPINGS",
    "Grouping",
    "StatsResult",
    "StatsState",
    "configure_logging",
    "format_stats_summary_to_str",
    "get_grouping",
    "get_logger",
    "run_stats",
]

__version__ = "0.1.0"
