"""HistogramBuilder: stacked histogram of a numeric counting dimension.

Steps
-----
1. Extent [lo, hi] of the counted buckets' numeric values.
2. Linear scale [lo, hi] -> [0, HISTOGRAM_WIDTH], rounded to whole pixels.
3. Thresholds: "nice" ticks over the domain, tick count min(hi - lo, 32).
4. Bin the counted buckets by value. Thresholds at or below lo and above hi
   are dropped; the first bin starts at lo, the last ends at hi and also
   holds values equal to hi.
5. Per bin and active group, sum the group's counts (negatives count as 0).
6. Stack offsets per group in selection order; hist_max = stack height.
7. Scale every bin so the tallest stack is HISTOGRAM_WIDTH units. Skipped
   when every stack is empty.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from entitystats.stats.buckets import CountedBucket, GroupedBucket, HistogramBin
from entitystats.stats.grouping import Grouping
from entitystats.utils.logging import get_logger

logger = get_logger(__name__)

HISTOGRAM_WIDTH = 320
MAX_HISTOGRAM_BINS = 32

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


class LinearScale:
    """Linear map from a numeric domain to a pixel range, rounding the output."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float] = (0, HISTOGRAM_WIDTH)) -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> int:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        # a degenerate domain maps everything to the middle of the range
        t = (value - d0) / span if span else 0.5
        return math.floor(r0 * (1 - t) + r1 * t + 0.5)

    def ticks(self, count: int) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)


def tick_increment(start: float, stop: float, count: int) -> float:
    """Tick step for about count ticks over [start, stop].

    Positive values are the step itself; negative values are the inverse of
    a fractional step (-10 means 0.1) so small steps stay exact.
    """
    step = (stop - start) / count
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def ticks(start: float, stop: float, count: int) -> list[float]:
    """Evenly spaced round values in [start, stop], about count of them."""
    if not count > 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start

    step = tick_increment(start, stop, count)
    if step == 0 or not math.isfinite(step):
        return []

    if step > 0:
        first, last = math.ceil(start / step), math.floor(stop / step)
        values = [(first + i) * step for i in range(last - first + 1)]
    else:
        step = -step
        first, last = math.ceil(start * step), math.floor(stop * step)
        values = [(first + i) / step for i in range(last - first + 1)]

    return values[::-1] if reverse else values


def bin_counted(
    counted: Sequence[CountedBucket],
    domain: tuple[float, float],
    thresholds: Sequence[float],
) -> list[HistogramBin]:
    """Place counted buckets into contiguous bins split at thresholds."""
    x0, x1 = domain
    tz = [t for t in thresholds if x0 < t <= x1]
    edges = [x0, *tz, x1]
    bins = [HistogramBin(x0=edges[i], x1=edges[i + 1]) for i in range(len(edges) - 1)]

    values = np.array([c.value for c in counted], dtype=float)
    slots = np.searchsorted(np.array(tz, dtype=float), values, side="right")
    for bucket, value, slot in zip(counted, values, slots):
        if x0 <= value <= x1:
            bins[int(slot)].items.append(bucket)
    return bins


def stack_bin(hbin: HistogramBin, selected: Sequence[GroupedBucket]) -> None:
    """Fill hist_sum, hist_pos and hist_max of one bin, stacking in selection order."""
    titles = list(dict.fromkeys(s.title for s in selected))
    hbin.hist_sum = {title: 0 for title in titles}
    for item in hbin.items:
        for title in titles:
            contribution = item.counts.get(title, 0)
            hbin.hist_sum[title] += contribution if contribution > 0 else 0

    offset = 0
    hbin.hist_pos = {}
    for title in titles:
        hbin.hist_pos[title] = offset
        offset += hbin.hist_sum[title]
    hbin.hist_max = offset


def normalize(bins: Sequence[HistogramBin], height: float = HISTOGRAM_WIDTH) -> float:
    """Scale stacks so the tallest bin spans height units; returns the pre-scaling maximum."""
    peak = max((b.hist_max for b in bins), default=0)
    if not peak:
        return peak
    factor = height / peak
    for hbin in bins:
        for title in hbin.hist_sum:
            hbin.hist_pos[title] *= factor
            hbin.hist_sum[title] *= factor
    return peak


def build_histogram(
    counted: Optional[Sequence[CountedBucket]],
    selected: Optional[Sequence[GroupedBucket]],
    counting: Grouping,
) -> Optional[list[HistogramBin]]:
    """Build the stacked histogram for a numeric counting dimension.

    Returns:
        None unless counting is numeric and counted is present; an empty list
        when no counted bucket has a numeric value.
    """
    if not counting.number or counted is None:
        return None

    numeric = [c for c in counted if c.value is not None]
    if not numeric:
        return []

    lo = min(c.value for c in numeric)
    hi = max(c.value for c in numeric)
    scale = LinearScale((lo, hi))
    thresholds = scale.ticks(min(hi - lo, MAX_HISTOGRAM_BINS))
    bins = bin_counted(numeric, (lo, hi), thresholds)

    active = list(selected or [])
    for hbin in bins:
        hbin.x = scale(hbin.x0)
        hbin.width = scale(hbin.x1) - scale(hbin.x0)
        stack_bin(hbin, active)

    peak = normalize(bins)
    logger.debug("histogram %r: extent [%s, %s], %d bins, peak %s", counting.name, lo, hi, len(bins), peak)
    return bins
