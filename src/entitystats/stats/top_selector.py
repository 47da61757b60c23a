"""TopSelector: reduce ordered groups to the top N plus a merged 'other' bucket.

Selection rule
--------------
With the groups sorted by size (desc), the size at position pick_top - 1
(clamped to the list) is the threshold. Groups strictly larger than the
threshold are kept; every group at or below it is merged into 'other'. Ties
at the threshold therefore spill entirely into 'other', so the number of
real groups never exceeds pick_top. When merging happens, a real group
titled 'other' is merged too so titles stay unique.

Aggregate metrics
-----------------
Per bucket: paths, tags, definitions, methods are per-record averages
rounded to one decimal; summaries and descriptions are unrounded averages;
description_lengths and summary_lengths are averages per description /
summary and are NaN when the bucket has none.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

import pandas as pd

from entitystats.stats.buckets import GroupedBucket
from entitystats.stats.records import RowDict, flatten, method_count, number_field, prop_name
from entitystats.utils.logging import get_logger

logger = get_logger(__name__)

OTHER_TITLE = "other"

# Record field -> frame column summed by aggregate().
METRIC_FIELDS = {
    "paths": "paths",
    "tags": "tags",
    "definitions": "definitions",
    "summaries": "summaries",
    "descriptions": "descriptions",
    "descriptionsLength": "description_lengths",
    "summariesLength": "summary_lengths",
}


def round1(value: float) -> float:
    """Round half up to one decimal (NaN passes through)."""
    if math.isnan(value) or math.isinf(value):
        return value
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, NaN when the denominator is zero."""
    if denominator == 0:
        return float("nan")
    return float(numerator) / float(denominator)


def metric_frame(records: Sequence[RowDict]) -> pd.DataFrame:
    """One row per record, one column per summed metric (missing fields are 0)."""
    columns = {
        column: [number_field(r, field) for r in records]
        for field, column in METRIC_FIELDS.items()
    }
    columns["methods"] = [method_count(r) for r in records]
    return pd.DataFrame(columns, dtype=float)


def aggregate(bucket: GroupedBucket) -> GroupedBucket:
    """Fill the total and metric fields of a bucket in place and return it."""
    total = len(bucket.records)
    sums = metric_frame(bucket.records).sum()
    bucket.total = total

    bucket.paths_total = float(sums["paths"])
    bucket.paths = round1(_ratio(bucket.paths_total, total))

    bucket.tags_total = float(sums["tags"])
    bucket.tags = round1(_ratio(bucket.tags_total, total))

    bucket.definitions_total = float(sums["definitions"])
    bucket.definitions = round1(_ratio(bucket.definitions_total, total))

    bucket.methods_total = float(sums["methods"])
    bucket.methods = round1(_ratio(bucket.methods_total, total))

    bucket.summaries_total = float(sums["summaries"])
    bucket.summaries = _ratio(bucket.summaries_total, total)

    bucket.descriptions_total = float(sums["descriptions"])
    bucket.descriptions = _ratio(bucket.descriptions_total, total)

    bucket.description_lengths_total = float(sums["description_lengths"])
    bucket.description_lengths = _ratio(bucket.description_lengths_total, bucket.descriptions_total)

    bucket.summary_lengths_total = float(sums["summary_lengths"])
    bucket.summary_lengths = _ratio(bucket.summary_lengths_total, bucket.summaries_total)
    return bucket


def select_top(
    grouped: Optional[Sequence[GroupedBucket]],
    pick_top: int,
) -> Optional[list[GroupedBucket]]:
    """Keep at most pick_top groups, merging the rest into an 'other' bucket.

    Args:
        grouped: Buckets ordered by size (desc) then title, or None.
        pick_top: Maximum number of real buckets (>= 0).

    Returns:
        None if grouped is None, else aggregated buckets ordered by total (desc)
        then title (asc), with 'other' appended when merging occurred.
    """
    if grouped is None:
        return None

    if len(grouped) <= pick_top:
        top = list(grouped)
    else:
        pick = max(0, min(pick_top - 1, len(grouped) - 1))
        threshold = grouped[pick].size
        # a real group titled 'other' folds into the synthetic bucket; titles stay unique
        top = [b for b in grouped if b.size > threshold and b.title != OTHER_TITLE]
        merged = [b for b in grouped if b.size <= threshold or b.title == OTHER_TITLE]
        if any(b.title == OTHER_TITLE and b.size > threshold for b in grouped):
            logger.warning(f"Group titled {OTHER_TITLE!r} merged into the synthetic {OTHER_TITLE!r} bucket")
        top.append(
            GroupedBucket(
                title=OTHER_TITLE,
                records=flatten(b.records for b in merged),
                prop=prop_name(OTHER_TITLE),
                min=threshold,
            )
        )
        logger.debug(
            "top %d: kept %d buckets, merged %d at threshold %d",
            pick_top, len(top) - 1, len(merged), threshold,
        )

    for bucket in top:
        aggregate(bucket)

    return sorted(top, key=lambda b: (-b.total, b.title))
