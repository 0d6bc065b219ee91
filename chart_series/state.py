from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Iterable, Literal

from chart_series.bounds import Bounds
from chart_series.colors import ColorScheme
from chart_series.data import SeriesData, map_series
from chart_series.nearest import NearestPoint
from chart_series.projection import Projection
from chart_series.series import Series


LOGGER = logging.getLogger(__name__)

PointerEventType = Literal["pointer_move", "pointer_leave"]

Subscriber = Callable[[SeriesData], None]


class _Unset:
    pass


_UNSET = _Unset()


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in local chart coordinates (pixels, top-left origin)."""

    event_type: PointerEventType
    x: float | None = None
    y: float | None = None


class ChartDataState:
    """Owns the chart inputs and republishes a fresh snapshot on every change.

    Every input change rebuilds the whole ``SeriesData`` synchronously, so a
    subscriber never sees ranges and positions from different inputs. When a
    subscriber changes an input while being notified, the older snapshot is
    not delivered to the remaining subscribers.
    """

    def __init__(
        self,
        series: Series,
        records: Iterable[Any] = (),
        *,
        viewport: Bounds | None = None,
    ) -> None:
        self._series = series.copy()
        self._records = tuple(records)
        self._viewport = _check_viewport(viewport)
        self._revision = 0
        self._subscribers: list[Subscriber] = []
        self._pointer: tuple[float, float] | None = None
        self._data = map_series(self._series, self._records, revision=self._revision)
        self._hover: NearestPoint | None = None

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def data(self) -> SeriesData:
        return self._data

    @property
    def series(self) -> Series:
        return self._series

    @property
    def records(self) -> tuple[Any, ...]:
        return self._records

    @property
    def viewport(self) -> Bounds | None:
        return self._viewport

    @property
    def hover(self) -> NearestPoint | None:
        return self._hover

    @property
    def projection(self) -> Projection | None:
        if self._viewport is None:
            return None
        return Projection(inner=self._viewport, position_range=self._data.position_bounds)

    @property
    def mouse_hover_inner(self) -> bool:
        if self._pointer is None or self._viewport is None:
            return False
        return self._viewport.contains(*self._pointer)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set_records(self, records: Iterable[Any]) -> SeriesData:
        return self._invalidate("records", records=tuple(records))

    def set_series(self, series: Series) -> SeriesData:
        return self._invalidate("series", series=series.copy())

    def set_x_range(self, min_x: Any = None, max_x: Any = None) -> SeriesData:
        return self._invalidate("x_range", series=self._series.copy().with_x_range(min_x, max_x))

    def set_y_range(self, min_y: Any = None, max_y: Any = None) -> SeriesData:
        return self._invalidate("y_range", series=self._series.copy().with_y_range(min_y, max_y))

    def set_colors(self, colors: Iterable[Any] | ColorScheme) -> SeriesData:
        return self._invalidate("colors", series=self._series.copy().with_colors(colors))

    def set_viewport(self, viewport: Bounds | None) -> SeriesData:
        return self._invalidate("viewport", viewport=_check_viewport(viewport))

    def pointer_event(self, event: PointerEvent) -> NearestPoint | None:
        if event.event_type == "pointer_leave" or event.x is None or event.y is None:
            self._pointer = None
        else:
            self._pointer = (float(event.x), float(event.y))
        self._hover = self._resolve_hover()
        return self._hover

    def _invalidate(
        self,
        reason: str,
        *,
        series: Series | None = None,
        records: tuple[Any, ...] | None = None,
        viewport: Bounds | None | _Unset = _UNSET,
    ) -> SeriesData:
        # Nothing is committed until the rebuild succeeds.
        revision = self._revision + 1
        next_series = self._series if series is None else series
        next_records = self._records if records is None else records
        data = map_series(next_series, next_records, revision=revision)

        self._series = next_series
        self._records = next_records
        if not isinstance(viewport, _Unset):
            self._viewport = viewport
        self._revision = revision
        self._data = data
        self._hover = self._resolve_hover()
        LOGGER.debug(
            "rebuilt series data revision=%d reason=%s records=%d lines=%d",
            revision,
            reason,
            len(data),
            len(data.registered),
        )
        for callback in list(self._subscribers):
            if self._revision != revision:
                LOGGER.debug("dropping stale revision=%d superseded by revision=%d", revision, self._revision)
                break
            try:
                callback(data)
            except Exception:
                LOGGER.warning("series data subscriber %r failed at revision=%d", callback, revision)
                raise
        return self._data

    def _resolve_hover(self) -> NearestPoint | None:
        if not self.mouse_hover_inner:
            return None
        assert self._viewport is not None and self._pointer is not None
        range_x = self._data.range_x
        if range_x is None:
            return None
        # Only X picks the record, so an undefined Y range must not collapse the mapping.
        x_only = Bounds.from_points(range_x.min_position, 0.0, range_x.max_position, 0.0)
        pos_x, _ = Projection(inner=self._viewport, position_range=x_only).svg_to_position(*self._pointer)
        return self._data.nearest(pos_x)


def _check_viewport(viewport: Bounds | None) -> Bounds | None:
    if viewport is not None and not isinstance(viewport, Bounds):
        raise ValueError(f"viewport must be Bounds or None, got {type(viewport)!r}")
    return viewport
