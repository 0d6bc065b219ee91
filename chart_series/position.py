from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Iterable, Protocol, runtime_checkable

import numpy as np

from chart_series.errors import SeriesDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NS_PER_S = 1_000_000_000


@runtime_checkable
class Positioned(Protocol):
    """Domain values that know their own scalar position."""

    def position(self) -> float:
        ...


def position(value: Any) -> float:
    """Map one domain value to the scalar used for ordering, ranges and distance.

    Numbers map to themselves and timestamps to epoch seconds (with the
    sub-second part kept to nanosecond resolution). ``None`` is absence and
    maps to NaN so it never takes part in range extrema.
    """

    if value is None:
        return float("nan")
    if isinstance(value, Positioned):
        return float(value.position())
    if isinstance(value, (bool, int, float, Decimal, np.bool_, np.number)):
        return float(value)
    if pd is not None:
        if value is pd.NaT:
            return float("nan")
        if isinstance(value, pd.Timestamp):
            return _ns_to_seconds(int(value.value))
    if isinstance(value, datetime):
        return _datetime_position(value)
    if isinstance(value, date):
        return _datetime_position(datetime.combine(value, time(), tzinfo=timezone.utc))
    if isinstance(value, timedelta):
        return _timedelta_position(value)
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return float("nan")
        return _ns_to_seconds(int(value.astype("datetime64[ns]").astype(np.int64)))
    if isinstance(value, np.timedelta64):
        if np.isnat(value):
            return float("nan")
        return _ns_to_seconds(int(value.astype("timedelta64[ns]").astype(np.int64)))
    raise SeriesDataError(f"cannot derive a position from value of type {type(value)!r}")


def positions(values: Iterable[Any]) -> np.ndarray:
    """Vectorized ``position`` returning a float64 array."""

    if isinstance(values, np.ndarray) and values.ndim == 1:
        kind = values.dtype.kind
        if kind in {"i", "u", "f", "b"}:
            return values.astype(np.float64, copy=True)
        if kind in {"M", "m"}:
            nat = np.isnat(values)
            unit = "datetime64[ns]" if kind == "M" else "timedelta64[ns]"
            ns = values.astype(unit).astype(np.int64)
            out = ns.astype(np.float64) / 1e9
            out[nat] = np.nan
            return out
    out = [position(v) for v in values]
    return np.asarray(out, dtype=np.float64)


def _datetime_position(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return _timedelta_position(value - _EPOCH)


def _timedelta_position(delta: timedelta) -> float:
    # Whole seconds first, then the sub-second part.
    seconds = delta.days * 86_400 + delta.seconds
    return float(seconds) + (delta.microseconds * 1_000) / 1e9


def _ns_to_seconds(ns: int) -> float:
    seconds, nanos = divmod(ns, _NS_PER_S)
    return float(seconds) + nanos / 1e9
