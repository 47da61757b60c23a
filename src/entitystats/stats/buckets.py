"""Result types produced by the stats pipeline.

GroupedBucket: one group of records (Grouper / TopSelector output).
CountedBucket: one counting-dimension bucket with per-group counts.
HistogramBin: one numeric bin of CountedBuckets with stacked sums.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from entitystats.stats.records import RowDict


@dataclass
class GroupedBucket:
    """Named partition of records sharing a group key.

    Aggregate fields stay at their defaults until aggregate() runs.
    min is the size threshold used when this is the merged 'other' bucket.
    """
    title: str
    records: list[RowDict]
    prop: str
    min: Optional[int] = None
    total: int = 0
    paths_total: float = 0
    paths: float = 0.0
    tags_total: float = 0
    tags: float = 0.0
    definitions_total: float = 0
    definitions: float = 0.0
    methods_total: float = 0
    methods: float = 0.0
    summaries_total: float = 0
    summaries: float = 0.0
    descriptions_total: float = 0
    descriptions: float = 0.0
    description_lengths_total: float = 0
    description_lengths: float = 0.0
    summary_lengths_total: float = 0
    summary_lengths: float = 0.0

    @property
    def size(self) -> int:
        return len(self.records)

    def metrics(self) -> dict[str, Any]:
        """Aggregate fields as a flat dict (title first)."""
        return {
            "title": self.title,
            "total": self.total,
            "paths": self.paths,
            "tags": self.tags,
            "definitions": self.definitions,
            "methods": self.methods,
            "summaries": self.summaries,
            "descriptions": self.descriptions,
            "description_lengths": self.description_lengths,
            "summary_lengths": self.summary_lengths,
        }


@dataclass
class CountedBucket:
    """Counting-dimension bucket.

    counts maps active-group title -> number of this bucket's records owned by that group.
    """
    title: Union[str, int]
    prop: str
    records: list[RowDict]
    total: int
    value: Optional[int] = None
    counts: dict[str, int] = field(default_factory=dict)


@dataclass
class HistogramBin:
    """Numeric bin [x0, x1) over the counting dimension (last bin includes x1)."""
    x0: float
    x1: float
    items: list[CountedBucket] = field(default_factory=list)
    x: float = 0.0
    width: float = 0.0
    hist_sum: dict[str, float] = field(default_factory=dict)
    hist_pos: dict[str, float] = field(default_factory=dict)
    hist_max: float = 0.0

    def __len__(self) -> int:
        return len(self.items)
