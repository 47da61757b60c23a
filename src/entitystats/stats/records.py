"""Record access helpers and input adapters.

Records are plain mappings (one dict per analyzed entity). They may arrive
as a list of dicts, a pandas DataFrame or a Polars DataFrame; to_records()
normalizes all three to a list of dicts.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional, TYPE_CHECKING

import pandas as pd

# Optional polars
try:  # pragma: no cover - import guard
    import polars as _pl  # type: ignore[import]
    HAS_POLARS = True
except Exception:  # pragma: no cover - polars optional
    _pl = None  # type: ignore[assignment]
    HAS_POLARS = False

if TYPE_CHECKING:  # for type checkers only
    import polars as pl
else:  # runtime alias (may be None)
    pl = _pl  # type: ignore[assignment]


Record = Mapping[str, Any]
RowDict = dict[str, Any]

# Field written onto filtered record copies, naming the owning group.
COLUMN_FIELD = "column"


def to_records(data: Any) -> Optional[list[RowDict]]:
    """Normalize input data into a list of record dicts.

    Args:
        data: None, list of mappings, pandas DataFrame, or Polars DataFrame.

    Returns:
        None when data is None (no data loaded), otherwise a list of dicts.

    Raises:
        TypeError: If data is of an unsupported type.
    """
    if data is None:
        return None

    if isinstance(data, (list, tuple)):
        if all(isinstance(row, Mapping) for row in data):
            return [dict(row) for row in data]
        raise TypeError("List input must contain mapping/dict-like rows.")

    if isinstance(data, pd.DataFrame):
        return data.to_dict(orient="records")

    if HAS_POLARS and pl is not None and isinstance(data, pl.DataFrame):
        return data.to_dicts()

    raise TypeError(
        "Unsupported data type for records. "
        "Expected list[dict], pandas.DataFrame, or polars.DataFrame."
    )


def number_field(record: Record, name: str) -> float:
    """Numeric field value; missing, None and NaN count as 0."""
    value = record.get(name)
    if value is None:
        return 0
    if isinstance(value, float) and math.isnan(value):
        return 0
    return value


def method_count(record: Record) -> float:
    """Sum of the per-method counts in record['methods']."""
    methods = record.get("methods")
    if not isinstance(methods, Mapping):
        return 0
    return sum(v for v in methods.values() if v is not None)


def key_title(key: Any) -> str:
    """String form of a grouping key, used as bucket title.

    Integral floats render without a fractional part so 3.0 and 3 share a bucket.
    """
    if isinstance(key, float) and key.is_integer():
        return str(int(key))
    return str(key)


def prop_name(title: str) -> str:
    """Field-safe name for a group title: '$' + title with dots as underscores."""
    return "$" + str(title).replace(".", "_")


def parse_int(title: str) -> Optional[int]:
    """Integer value of a numeric title, truncating toward zero; None if not numeric."""
    try:
        value = float(title)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return int(value)


def flatten(groups: Iterable[Iterable[Any]]) -> list[Any]:
    """Concatenate nested sequences, preserving order."""
    return [item for group in groups for item in group]
