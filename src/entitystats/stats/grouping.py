"""Grouping definitions and the default grouping catalog.

A Grouping names a key-extraction function used to partition records. The
catalog is configuration: callers may pass any sequence of Grouping objects
to get_grouping() / StatsState; DEFAULT_GROUPINGS is what ships.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from entitystats.stats.records import Record, method_count, number_field

GroupKey = Union[str, int, float]


@dataclass(frozen=True)
class Grouping:
    """Named key-extraction definition.

    Attributes:
        name: Catalog name (unique within a catalog).
        select: Record -> key (string or number).
        expand: Optional Record -> sequence of virtual records, applied before select.
        number: True if the key is numeric and histogram-eligible.
    """
    name: str
    select: Callable[[Record], GroupKey]
    expand: Optional[Callable[[Record], Sequence[Record]]] = None
    number: bool = False


def _expand_list_field(field: str, as_field: str) -> Callable[[Record], list[dict[str, Any]]]:
    """Build an expand function yielding one virtual record per entry of record[field]."""
    def expand(record: Record) -> list[dict[str, Any]]:
        values = record.get(field) or []
        if isinstance(values, Mapping):
            values = list(values.keys())
        elif isinstance(values, str):
            values = [values]
        return [{**record, as_field: value} for value in values]
    return expand


DEFAULT_GROUPINGS: tuple[Grouping, ...] = (
    Grouping("all", select=lambda r: "all"),
    Grouping("provider", select=lambda r: r.get("provider", "unknown")),
    Grouping("paths", select=lambda r: number_field(r, "paths"), number=True),
    Grouping(
        "category",
        select=lambda r: r.get("category", "unknown"),
        expand=_expand_list_field("categories", "category"),
    ),
    Grouping("version", select=lambda r: r.get("version", "unknown")),
    Grouping(
        "method",
        select=lambda r: r.get("method", "unknown"),
        expand=_expand_list_field("methods", "method"),
    ),
    Grouping("tags", select=lambda r: number_field(r, "tags"), number=True),
    Grouping("definitions", select=lambda r: number_field(r, "definitions"), number=True),
    Grouping("methods", select=method_count, number=True),
)

# Index into the catalog of the default group / counting dimensions.
DEFAULT_GROUPING_INDEX = 1
DEFAULT_COUNTING_INDEX = 2


def get_grouping(name: str, groupings: Sequence[Grouping] = DEFAULT_GROUPINGS) -> Grouping:
    """Look up a grouping by name.

    Raises:
        ValueError: If no grouping in the catalog has that name.
    """
    for grouping in groupings:
        if grouping.name == name:
            return grouping
    known = ", ".join(g.name for g in groupings)
    raise ValueError(f"Unknown grouping {name!r}; expected one of: {known}")
