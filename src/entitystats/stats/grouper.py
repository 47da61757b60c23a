"""Grouper: partition records into ordered GroupedBuckets."""

from __future__ import annotations

from typing import Optional, Sequence

from entitystats.stats.buckets import GroupedBucket
from entitystats.stats.grouping import Grouping
from entitystats.stats.records import RowDict, flatten, key_title, prop_name
from entitystats.utils.logging import get_logger

logger = get_logger(__name__)


def expand_records(records: Sequence[RowDict], grouping: Grouping) -> list[RowDict]:
    """Apply grouping.expand to every record (identity when the grouping has none)."""
    if grouping.expand is None:
        return list(records)
    return flatten(grouping.expand(r) for r in records)


def partition(records: Sequence[RowDict], grouping: Grouping) -> dict[str, list[RowDict]]:
    """Map title -> records, in first-seen order of titles."""
    buckets: dict[str, list[RowDict]] = {}
    for record in records:
        buckets.setdefault(key_title(grouping.select(record)), []).append(record)
    return buckets


def group_records(
    records: Optional[Sequence[RowDict]],
    grouping: Grouping,
) -> Optional[list[GroupedBucket]]:
    """Group records by grouping key.

    Args:
        records: Loaded records, or None when nothing is loaded.
        grouping: Grouping definition to partition by.

    Returns:
        None if records is None, else buckets ordered by size (desc) then title (asc).
    """
    if records is None:
        return None

    data = expand_records(records, grouping)
    grouped = [
        GroupedBucket(title=title, records=rows, prop=prop_name(title))
        for title, rows in partition(data, grouping).items()
    ]
    grouped.sort(key=lambda b: (-b.size, b.title))
    logger.debug("grouping %r: %d records -> %d buckets", grouping.name, len(data), len(grouped))
    return grouped
