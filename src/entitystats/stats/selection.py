"""Selection state for the stats pipeline.

StatsState holds every user-settable input except the records themselves:
the group and counting dimensions, pick_top, and the optional override of
which groups are active. Changing the grouping or pick_top clears the
override, since the old titles mean nothing under a new key space.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from entitystats.stats.buckets import GroupedBucket
from entitystats.stats.grouping import (
    DEFAULT_COUNTING_INDEX,
    DEFAULT_GROUPING_INDEX,
    DEFAULT_GROUPINGS,
    Grouping,
    get_grouping,
)
from entitystats.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PICK_TOP = 10


def validate_pick_top(pick_top: Any) -> int:
    """Return pick_top as an int.

    Raises:
        ValueError: If pick_top is not a non-negative integer.
    """
    if isinstance(pick_top, bool) or not isinstance(pick_top, int):
        raise ValueError(f"pick_top must be an integer, got {pick_top!r}")
    if pick_top < 0:
        raise ValueError(f"pick_top must be >= 0, got {pick_top}")
    return pick_top


def resolve_selected(
    top: Optional[Sequence[GroupedBucket]],
    override: Sequence[GroupedBucket],
) -> Optional[list[GroupedBucket]]:
    """Active groups: the override when non-empty, else top; None when top is None."""
    if top is None:
        return None
    return list(override) if override else list(top)


def buckets_for_titles(
    titles: Sequence[str],
    top: Optional[Sequence[GroupedBucket]],
) -> list[GroupedBucket]:
    """Buckets of top matching titles, in titles order; unknown titles are skipped."""
    if not titles or top is None:
        return []
    by_title = {b.title: b for b in top}
    missing = [t for t in titles if t not in by_title]
    if missing:
        logger.warning(f"Selection titles not in current groups, ignoring: {missing}")
    return [by_title[t] for t in titles if t in by_title]


@dataclass
class StatsState:
    """User-settable pipeline inputs.

    selection is the override list of active buckets. pending_titles holds
    override titles restored by from_dict(); they are matched against the
    groups of the next pipeline run while selection is empty.

    Use the set_* methods rather than assigning fields directly so the
    override is cleared on grouping / pick_top changes.
    """
    grouping: Grouping = DEFAULT_GROUPINGS[DEFAULT_GROUPING_INDEX]
    counting: Grouping = DEFAULT_GROUPINGS[DEFAULT_COUNTING_INDEX]
    pick_top: int = DEFAULT_PICK_TOP
    selection: list[GroupedBucket] = field(default_factory=list)
    pending_titles: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.pick_top = validate_pick_top(self.pick_top)
        self.selection = list(self.selection)

    def set_grouping(self, grouping: Grouping) -> None:
        logger.debug("grouping %r -> %r, clearing selection", self.grouping.name, grouping.name)
        self.grouping = grouping
        self.clear_selection()

    def set_counting(self, counting: Grouping) -> None:
        self.counting = counting

    def set_pick_top(self, pick_top: int) -> None:
        self.pick_top = validate_pick_top(pick_top)
        self.clear_selection()

    def set_selection(self, buckets: Optional[Sequence[GroupedBucket]]) -> None:
        self.selection = list(buckets) if buckets else []
        self.pending_titles = []

    def clear_selection(self) -> None:
        self.selection = []
        self.pending_titles = []

    def override(self, top: Optional[Sequence[GroupedBucket]]) -> list[GroupedBucket]:
        """Override buckets for this run: selection, else pending titles resolved against top."""
        if self.selection:
            return list(self.selection)
        return buckets_for_titles(self.pending_titles, top)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict (groupings by name, selection by title)."""
        titles = [b.title for b in self.selection] if self.selection else list(self.pending_titles)
        return {
            "grouping": self.grouping.name,
            "counting": self.counting.name,
            "pick_top": self.pick_top,
            "selection": titles,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        groupings: Sequence[Grouping] = DEFAULT_GROUPINGS,
    ) -> "StatsState":
        """Deserialize from to_dict() output; missing keys take defaults.

        Raises:
            ValueError: If a grouping name is unknown or pick_top is invalid.
        """
        known_keys = {"grouping", "counting", "pick_top", "selection"}
        for key in data:
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in stats state, ignoring")

        grouping = groupings[DEFAULT_GROUPING_INDEX]
        if "grouping" in data:
            grouping = get_grouping(str(data["grouping"]), groupings)
        counting = groupings[DEFAULT_COUNTING_INDEX]
        if "counting" in data:
            counting = get_grouping(str(data["counting"]), groupings)

        titles = data.get("selection") or []
        if not isinstance(titles, list):
            logger.warning("selection is not a list, using empty list")
            titles = []

        return cls(
            grouping=grouping,
            counting=counting,
            pick_top=data.get("pick_top", DEFAULT_PICK_TOP),
            pending_titles=[str(t) for t in titles],
        )
