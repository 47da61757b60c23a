"""CrossTabulator: count the active groups' records along a second grouping."""

from __future__ import annotations

from typing import Optional, Sequence, Union

import pandas as pd

from entitystats.stats.buckets import CountedBucket, GroupedBucket
from entitystats.stats.grouping import Grouping
from entitystats.stats.records import COLUMN_FIELD, RowDict, key_title, parse_int, prop_name
from entitystats.utils.logging import get_logger

logger = get_logger(__name__)


def filter_selected(selected: Optional[Sequence[GroupedBucket]]) -> Optional[list[RowDict]]:
    """Flatten the active groups' records, stamping each copy with its group title.

    Source records are not modified; each returned row is a shallow copy with
    COLUMN_FIELD set. If a record appears under several active groups, it is
    returned once per group.
    """
    if selected is None:
        return None
    return [
        {**record, COLUMN_FIELD: bucket.title}
        for bucket in selected
        for record in bucket.records
    ]


def _owned_rows(filtered: Sequence[RowDict], counting: Grouping) -> list[tuple[str, RowDict]]:
    """(owning group title, row) pairs after the counting grouping's expand.

    Expanded virtual rows inherit the owner of the row they came from.
    """
    if counting.expand is None:
        return [(row.get(COLUMN_FIELD), row) for row in filtered]
    return [
        (row.get(COLUMN_FIELD), virtual)
        for row in filtered
        for virtual in counting.expand(row)
    ]


def _sort_key(bucket: CountedBucket) -> tuple[int, tuple[int, Union[int, str]]]:
    # numeric titles before unparsed strings so mixed titles stay comparable
    if bucket.value is not None:
        return (-bucket.total, (0, bucket.value))
    return (-bucket.total, (1, str(bucket.title)))


def count_records(
    filtered: Optional[Sequence[RowDict]],
    selected: Optional[Sequence[GroupedBucket]],
    counting: Grouping,
) -> Optional[list[CountedBucket]]:
    """Partition filtered rows by the counting grouping, with per-group counts.

    Args:
        filtered: Column-stamped rows from filter_selected(), or None.
        selected: Active groups, in selection order.
        counting: Counting dimension.

    Returns:
        None if filtered is None, else buckets ordered by total (desc) then title (asc).
        For a numeric counting dimension, title and value are the key as int.
    """
    if filtered is None:
        return None

    owned = _owned_rows(filtered, counting)
    active = list(dict.fromkeys(s.title for s in selected or []))
    if not owned:
        logger.debug("counting %r: no rows", counting.name)
        return []

    frame = pd.DataFrame(
        {
            "title": [key_title(counting.select(row)) for _, row in owned],
            "owner": [owner for owner, _ in owned],
        }
    )
    # first-seen title order; rows without an owner still count toward total
    by_title = frame.groupby("title", sort=False)
    totals = by_title.size()
    positions = by_title.indices
    per_owner = (
        frame.dropna(subset=["owner"])
        .groupby(["title", "owner"], sort=False)
        .size()
        .unstack(fill_value=0)
        .reindex(index=totals.index, columns=active, fill_value=0)
    )

    counted: list[CountedBucket] = []
    for title, total in totals.items():
        value = parse_int(title) if counting.number else None
        counted.append(
            CountedBucket(
                title=value if value is not None else title,
                prop=prop_name(title),
                records=[owned[i][1] for i in positions[title]],
                total=int(total),
                value=value,
                counts={s: int(n) for s, n in per_owner.loc[title].items()},
            )
        )

    counted.sort(key=_sort_key)
    logger.debug("counting %r: %d rows -> %d buckets", counting.name, len(filtered), len(counted))
    return counted
