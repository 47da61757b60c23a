"""Full stats pipeline: records + state -> StatsResult.

run_stats() recomputes every stage from scratch; it is a pure function of
its inputs (records are copied before the column stamp, state is read only).
Absent data (records=None) yields None for every output except that
histogram is also None whenever the counting dimension is not numeric.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from entitystats.stats.buckets import CountedBucket, GroupedBucket, HistogramBin
from entitystats.stats.cross_tab import count_records, filter_selected
from entitystats.stats.grouper import group_records
from entitystats.stats.histogram import build_histogram
from entitystats.stats.records import RowDict, to_records
from entitystats.stats.selection import StatsState, resolve_selected
from entitystats.stats.top_selector import select_top
from entitystats.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class StatsResult:
    """Outputs of one pipeline run (None = no data loaded)."""
    grouped: Optional[list[GroupedBucket]]
    top: Optional[list[GroupedBucket]]
    total: Optional[int]
    selected: Optional[list[GroupedBucket]]
    filtered: Optional[list[RowDict]]
    counted: Optional[list[CountedBucket]]
    histogram: Optional[list[HistogramBin]]


def run_stats(data: Any, state: Optional[StatsState] = None) -> StatsResult:
    """Run grouping, top selection, cross-tabulation and histogram binning.

    Args:
        data: None, list of record dicts, pandas DataFrame or Polars DataFrame.
        state: Grouping / counting / pick_top / selection override. Defaults to StatsState().

    Returns:
        StatsResult with every stage's output.
    """
    state = state or StatsState()
    records = to_records(data)

    grouped = group_records(records, state.grouping)
    top = select_top(grouped, state.pick_top)
    selected = resolve_selected(top, state.override(top))
    filtered = filter_selected(selected)
    counted = count_records(filtered, selected, state.counting)
    histogram = build_histogram(counted, selected, state.counting)

    if records is not None:
        logger.debug(
            "stats run: %d records, %d groups, %d selected, %d counted",
            len(records), len(grouped), len(selected), len(counted),
        )

    return StatsResult(
        grouped=grouped,
        top=top,
        total=None if records is None else len(records),
        selected=selected,
        filtered=filtered,
        counted=counted,
        histogram=histogram,
    )
