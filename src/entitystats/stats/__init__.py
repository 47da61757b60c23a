"""Grouping, top-N selection, cross-tabulation and histogram binning of entity records."""

from entitystats.stats.buckets import CountedBucket, GroupedBucket, HistogramBin
from entitystats.stats.cross_tab import count_records, filter_selected
from entitystats.stats.grouper import group_records
from entitystats.stats.grouping import DEFAULT_GROUPINGS, Grouping, get_grouping
from entitystats.stats.histogram import HISTOGRAM_WIDTH, build_histogram
from entitystats.stats.pipeline import StatsResult, run_stats
from entitystats.stats.records import to_records
from entitystats.stats.selection import DEFAULT_PICK_TOP, StatsState, resolve_selected
from entitystats.stats.summary import format_stats_summary_to_str
from entitystats.stats.top_selector import OTHER_TITLE, aggregate, select_top

__all__ = [
    "CountedBucket",
    "DEFAULT_GROUPINGS",
    "DEFAULT_PICK_TOP",
    "GroupedBucket",
    "Grouping",
    "HISTOGRAM_WIDTH",
    "HistogramBin",
    "OTHER_TITLE",
    "StatsResult",
    "StatsState",
    "aggregate",
    "build_histogram",
    "count_records",
    "filter_selected",
    "format_stats_summary_to_str",
    "get_grouping",
    "group_records",
    "resolve_selected",
    "run_stats",
    "select_top",
    "to_records",
]
