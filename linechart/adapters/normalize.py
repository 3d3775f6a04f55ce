from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any, Callable

import numpy as np

from linechart.errors import ChartDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


Series = tuple[Any, ...]


def normalize_data(data: Any, *, series_key: Any = None) -> tuple[Series, ...]:
    """Arrange chart input into a tuple of series, each a tuple of point records.

    Accepted shapes: a sequence of series, a flat sequence of records (one series, or grouped by
    `series_key` in first-seen order), or a pandas DataFrame whose rows become records.
    """

    if data is None:
        return ()
    if pd is not None and isinstance(data, pd.DataFrame):
        data = data.to_dict(orient="records")
    if isinstance(data, np.ndarray):
        data = data.tolist()
    if not isinstance(data, Sequence) or isinstance(data, (str, bytes, bytearray)):
        raise ChartDataError(f"unsupported chart data type: {type(data)!r}")
    if not data:
        return ()

    if all(_is_series(entry) for entry in data):
        return tuple(tuple(series) for series in data)
    if series_key is None:
        return (tuple(data),)

    groups: dict[Any, list[Any]] = {}
    for record in data:
        try:
            group = record[series_key]
        except (KeyError, IndexError, TypeError) as exc:
            raise ChartDataError(f"record is missing series key {series_key!r}: {record!r}") from exc
        groups.setdefault(group, []).append(record)
    return tuple(tuple(records) for records in groups.values())


def numeric(value: Any, *, label: str = "value") -> float:
    if torch is not None and isinstance(value, torch.Tensor):
        if value.numel() != 1:
            raise ChartDataError(f"{label} must be a scalar tensor")
        out = float(value.detach().cpu().item())
    elif isinstance(value, (bool, int, float, Decimal, np.integer, np.floating)):
        out = float(value)
    else:
        raise ChartDataError(f"{label} is not numeric: {value!r}")
    if not np.isfinite(out):
        raise ChartDataError(f"{label} is not finite: {value!r}")
    return out


def field_accessor(key: Any) -> Callable[[Any], float]:
    """Accessor reading `record[key]` as a float."""

    label = str(key)

    def access(record: Any) -> float:
        try:
            raw = record[key]
        except (KeyError, IndexError, TypeError) as exc:
            raise ChartDataError(f"record has no field {key!r}: {record!r}") from exc
        return numeric(raw, label=label)

    return access


def _is_series(entry: Any) -> bool:
    if isinstance(entry, (Mapping, str, bytes, bytearray)):
        return False
    return isinstance(entry, Sequence) and all(_is_record(item) for item in entry)


def _is_record(item: Any) -> bool:
    if isinstance(item, Mapping):
        return True
    return isinstance(item, Sequence) and not isinstance(item, (str, bytes, bytearray))
