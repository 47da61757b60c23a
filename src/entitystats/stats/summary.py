"""Tabular views of a StatsResult for table widgets and text reports.

Builds pandas DataFrames from pipeline output and formats them as a
tab-separated report (pastes into spreadsheets as columns). Does not
render charts.
"""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd

from entitystats.stats.buckets import CountedBucket, GroupedBucket, HistogramBin
from entitystats.stats.pipeline import StatsResult
from entitystats.stats.selection import StatsState

GROUPED_COLUMNS = [
    "title", "total", "paths", "tags", "definitions", "methods",
    "summaries", "descriptions", "description_lengths", "summary_lengths",
]


def grouped_table(buckets: Optional[Sequence[GroupedBucket]]) -> pd.DataFrame:
    """One row per group with its aggregate metrics (NaN ratios kept)."""
    if not buckets:
        return pd.DataFrame(columns=GROUPED_COLUMNS)
    return pd.DataFrame([b.metrics() for b in buckets], columns=GROUPED_COLUMNS)


def counted_table(
    counted: Optional[Sequence[CountedBucket]],
    selected: Optional[Sequence[GroupedBucket]],
) -> pd.DataFrame:
    """One row per counted bucket: title, total, then one count column per active group."""
    groups = [s.title for s in selected or []]
    columns = ["title", "total"] + groups
    if not counted:
        return pd.DataFrame(columns=columns)
    rows = [
        {"title": c.title, "total": c.total, **{g: c.counts.get(g, 0) for g in groups}}
        for c in counted
    ]
    return pd.DataFrame(rows, columns=columns)


def histogram_table(
    histogram: Optional[Sequence[HistogramBin]],
    selected: Optional[Sequence[GroupedBucket]],
) -> pd.DataFrame:
    """Long format: one row per (bin, active group) with stacked sum and offset."""
    columns = ["x0", "x1", "x", "width", "group", "hist_sum", "hist_pos", "hist_max"]
    if not histogram:
        return pd.DataFrame(columns=columns)
    rows = []
    for hbin in histogram:
        for s in selected or []:
            rows.append({
                "x0": hbin.x0,
                "x1": hbin.x1,
                "x": hbin.x,
                "width": hbin.width,
                "group": s.title,
                "hist_sum": hbin.hist_sum.get(s.title, 0),
                "hist_pos": hbin.hist_pos.get(s.title, 0),
                "hist_max": hbin.hist_max,
            })
    return pd.DataFrame(rows, columns=columns)


def _table_to_tsv(df: pd.DataFrame) -> str:
    if df is None or len(df) == 0:
        return "(none)"
    return df.to_csv(path_or_buf=None, sep="\t", index=False).rstrip("\n")


def format_stats_summary_to_str(result: StatsResult, state: StatsState) -> str:
    """Plain-text report: params, grouped table, counted table, histogram table."""
    lines: list[str] = []
    lines.append("=== Params ===")
    for k, v in state.to_dict().items():
        lines.append(f"{k}\t{v}")
    lines.append(f"total\t{result.total}")

    lines.append("")
    lines.append("=== Grouped ===")
    lines.append(_table_to_tsv(grouped_table(result.top)))

    lines.append("")
    lines.append("=== Counted ===")
    lines.append(_table_to_tsv(counted_table(result.counted, result.selected)))

    lines.append("")
    lines.append("=== Histogram ===")
    lines.append(_table_to_tsv(histogram_table(result.histogram, result.selected)))
    return "\n".join(lines)
