from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

import numpy as np

from chart_series.bounds import Bounds
from chart_series.errors import UnregisteredLineError
from chart_series.nearest import NearestPoint, nearest_index
from chart_series.position import position, positions
from chart_series.series import GetX, LineHandle, Series, YAccessor


V = TypeVar("V")

Projector = Callable[[float, float], tuple[float, float]]


@dataclass(frozen=True)
class Range(Generic[V]):
    """Domain values at the lower and upper end of one axis."""

    min: V
    max: V

    @property
    def min_position(self) -> float:
        return position(self.min)

    @property
    def max_position(self) -> float:
        return position(self.max)

    def as_tuple(self) -> tuple[V, V]:
        return (self.min, self.max)


def data_range(values: Sequence[V], value_positions: np.ndarray) -> Range[V] | None:
    """Values at the smallest and largest finite position, or ``None``.

    NaN and infinite positions are skipped. When several values share the
    extreme position the first one seen is kept.
    """

    pos = np.asarray(value_positions, dtype=np.float64)
    finite = np.flatnonzero(np.isfinite(pos))
    if finite.size == 0:
        return None
    # argmin/argmax return the first occurrence, matching a strict left-to-right scan.
    lo = int(finite[int(np.argmin(pos[finite]))])
    hi = int(finite[int(np.argmax(pos[finite]))])
    return Range(min=values[lo], max=values[hi])


def extend_range(observed: Range[V] | None, min_value: V | None, max_value: V | None) -> Range[V] | None:
    """Widen ``observed`` so it covers the override bounds. Never shrinks it.

    A single override collapses to a one-value range before combining, and the
    comparison is made on positions so ordered non-numeric domains work too.
    """

    if min_value is not None and max_value is not None:
        specified: Range[V] | None = Range(min=min_value, max=max_value)
    elif min_value is not None:
        specified = Range(min=min_value, max=min_value)
    elif max_value is not None:
        specified = Range(min=max_value, max=max_value)
    else:
        specified = None

    if observed is None:
        return specified
    if specified is None:
        return observed
    lower = observed.min if observed.min_position < specified.min_position else specified.min
    upper = observed.max if observed.max_position > specified.max_position else specified.max
    return Range(min=lower, max=upper)


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class SeriesData:
    """Immutable snapshot of everything derived from one set of inputs.

    Rows of ``data_y``/``data_y_cumulative`` and columns of ``positions_y`` are
    indexed by line id. ``None`` in ``data_y`` marks an absent value and shows
    up as NaN in ``positions_y``.
    """

    registered: tuple[LineHandle, ...]
    lines: tuple[LineHandle, ...]
    data_x: tuple[Any, ...]
    data_y: tuple[tuple[Any, ...], ...]
    data_y_cumulative: tuple[tuple[Any, ...], ...]
    positions_x: np.ndarray
    positions_y: np.ndarray
    range_x: Range | None
    range_y: Range | None
    position_bounds: Bounds
    revision: int = 0

    def __len__(self) -> int:
        return len(self.data_x)

    def is_empty(self) -> bool:
        return len(self.data_x) == 0

    def line(self, line_id: int) -> LineHandle:
        self._check_line(line_id)
        return self.registered[line_id]

    def y_value(self, index: int, line_id: int) -> Any:
        self._check_line(line_id)
        return self.data_y[index][line_id]

    def nearest_index(self, pos_x: float) -> int | None:
        return nearest_index(self.positions_x, pos_x)

    def nearest_data_x(self, pos_x: float) -> Any:
        index = self.nearest_index(pos_x)
        if index is None:
            return None
        return self.data_x[index]

    def nearest_position_x(self, pos_x: float) -> float:
        index = self.nearest_index(pos_x)
        if index is None:
            return float("nan")
        return float(self.positions_x[index])

    def nearest_data_y(self, pos_x: float) -> list[tuple[LineHandle, Any]]:
        return list(self._ys_at(self.nearest_index(pos_x)))

    def nearest(self, pos_x: float) -> NearestPoint | None:
        index = self.nearest_index(pos_x)
        if index is None:
            return None
        return NearestPoint(
            index=index,
            data_x=self.data_x[index],
            position_x=float(self.positions_x[index]),
            data_y=self._ys_at(index),
        )

    def line_coordinates(self, line_id: int, project: Projector) -> list[tuple[float, float]]:
        """Project each record of one line through ``project(position_x, position_y)``."""

        self._check_line(line_id)
        column = self.positions_y[:, line_id]
        return [project(float(x), float(y)) for x, y in zip(self.positions_x, column)]

    def _ys_at(self, index: int | None) -> tuple[tuple[LineHandle, Any], ...]:
        if index is None:
            return tuple((line, None) for line in self.lines)
        row = self.data_y[index]
        return tuple((line, row[line.id]) for line in self.lines)

    def _check_line(self, line_id: int) -> None:
        if not isinstance(line_id, (int, np.integer)) or not 0 <= line_id < len(self.registered):
            raise UnregisteredLineError(line_id, len(self.registered))


def build_series_data(
    lines: Sequence[tuple[LineHandle, YAccessor]],
    get_x: GetX,
    records: Iterable[Any],
    *,
    min_x: Any = None,
    max_x: Any = None,
    min_y: Any = None,
    max_y: Any = None,
    revision: int = 0,
) -> SeriesData:
    """Derive values, positions and ranges for ``records`` as one snapshot."""

    records = tuple(records)
    registered = tuple(handle for handle, _ in lines)
    accessors = [accessor for _, accessor in lines]
    line_count = len(registered)

    data_x = tuple(get_x(record) for record in records)
    data_y = tuple(tuple(accessor.value(record) for accessor in accessors) for record in records)
    data_y_cumulative = tuple(
        tuple(accessor.cumulative_value(record) for accessor in accessors) for record in records
    )

    positions_x = positions(data_x)
    positions_y = np.empty((len(records), line_count), dtype=np.float64)
    for i, ys in enumerate(data_y_cumulative):
        for line_id, y in enumerate(ys):
            positions_y[i, line_id] = position(y)

    range_x = extend_range(data_range(data_x, positions_x), min_x, max_x)
    # Row-major: all lines of record 0, then record 1, and so on.
    flat_y = [y for ys in data_y_cumulative for y in ys]
    range_y = extend_range(data_range(flat_y, positions_y.ravel()), min_y, max_y)

    if range_x is None or range_y is None:
        position_bounds = Bounds()
    else:
        position_bounds = Bounds.from_points(
            range_x.min_position,
            range_y.min_position,
            range_x.max_position,
            range_y.max_position,
        )

    return SeriesData(
        registered=registered,
        lines=tuple(sorted(registered, key=lambda line: line.name)),
        data_x=data_x,
        data_y=data_y,
        data_y_cumulative=data_y_cumulative,
        positions_x=_frozen(positions_x),
        positions_y=_frozen(positions_y),
        range_x=range_x,
        range_y=range_y,
        position_bounds=position_bounds,
        revision=revision,
    )


def map_series(series: Series, records: Iterable[Any], *, revision: int = 0) -> SeriesData:
    return build_series_data(
        series.to_lines(),
        series.get_x,
        records,
        min_x=series.min_x,
        max_x=series.max_x,
        min_y=series.min_y,
        max_y=series.max_y,
        revision=revision,
    )
