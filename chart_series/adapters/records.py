from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Callable

import numpy as np

from chart_series.errors import SeriesDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_records(data: Any) -> tuple[Any, ...]:
    """Turn common tabular containers into an ordered tuple of records.

    DataFrames yield named tuples (one per row), Series yield ``(index, value)``
    pairs, and 2-D arrays or tensors yield one float64 row vector per record.
    """

    if data is None:
        return ()
    if torch is not None and isinstance(data, torch.Tensor):
        tensor = data.detach()
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return _array_records(tensor.to(torch.float64).numpy(), label="tensor")
    if pd is not None and isinstance(data, pd.DataFrame):
        return tuple(data.itertuples(index=False, name="Record"))
    if pd is not None and isinstance(data, pd.Series):
        return tuple(data.items())
    if isinstance(data, np.ndarray):
        return _array_records(data, label="array")
    if isinstance(data, (str, bytes, bytearray, Mapping)):
        raise SeriesDataError(f"unsupported records input type: {type(data)!r}")
    if isinstance(data, Iterable):
        return tuple(data)
    raise SeriesDataError(f"unsupported records input type: {type(data)!r}")


def field_getter(key: str | int) -> Callable[[Any], Any]:
    """Accessor reading ``key`` from mappings, tuples, structured rows or attributes.

    A key missing from a mapping or object reads as ``None`` (an absent value).
    """

    def get(record: Any) -> Any:
        if isinstance(record, Mapping):
            return record.get(key)
        if isinstance(key, int):
            try:
                return record[key]
            except IndexError:
                return None
        if isinstance(record, np.void):
            names = record.dtype.names or ()
            return record[key] if key in names else None
        return getattr(record, key, None)

    get.__name__ = f"field_{key}"
    return get


def _array_records(arr: np.ndarray, *, label: str) -> tuple[Any, ...]:
    if arr.ndim == 1:
        return tuple(arr)
    if arr.ndim == 2:
        return tuple(arr[i] for i in range(arr.shape[0]))
    raise SeriesDataError(f"{label} records must be 1-D or 2-D, got {arr.ndim}-D")
