from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, Iterable, Protocol, TypeVar, Union

from chart_series.colors import SERIES_COLOR_SCHEME, Color, ColorScheme, validate_color_scheme
from chart_series.errors import SeriesDataError


T = TypeVar("T")
X = TypeVar("X")
Y = TypeVar("Y")

GetX = Callable[[T], X]
GetY = Callable[[T], Y]


@dataclass(frozen=True)
class LineHandle:
    """Stable identity of a registered line.

    ``id`` is dense, zero-based and follows registration order. The colour is
    not stored: it is looked up from the scheme each time it is read. That is
    the scheme active when the handle was registered, so a handle kept from an
    older snapshot still reports its old colour after the palette changes.
    """

    id: int
    name: str
    scheme: ColorScheme = field(default=SERIES_COLOR_SCHEME, repr=False, compare=False)

    @property
    def color(self) -> Color:
        return self.scheme.by_index(self.id)


class YAccessor(Protocol[T, Y]):
    def value(self, record: T) -> Y | None:
        ...

    def cumulative_value(self, record: T) -> Y | None:
        ...


@dataclass(frozen=True)
class LineAccessor(Generic[T, Y]):
    get_y: GetY

    def value(self, record: T) -> Y | None:
        return self.get_y(record)

    def cumulative_value(self, record: T) -> Y | None:
        return self.get_y(record)


@dataclass(frozen=True)
class StackedAccessor(Generic[T, Y]):
    """Raw value of one stacked line plus the running total of its stack."""

    get_y: GetY
    below: tuple[GetY, ...] = ()

    def value(self, record: T) -> Y | None:
        return self.get_y(record)

    def cumulative_value(self, record: T) -> Y | None:
        total = None
        for get_y in (*self.below, self.get_y):
            y = get_y(record)
            if y is None:
                return None
            total = y if total is None else total + y
        return total


@dataclass(frozen=True)
class Line(Generic[T, Y]):
    """A single named series. ``get_y`` may return NaN or ``None`` for gaps."""

    get_y: GetY
    name: str = ""

    def __post_init__(self) -> None:
        if not callable(self.get_y):
            raise SeriesDataError(f"line accessor must be callable, got {type(self.get_y)!r}")

    def with_name(self, name: str) -> "Line[T, Y]":
        return replace(self, name=str(name))

    def apply(self, acc: "SeriesAccumulator[T, Y]") -> None:
        acc.push(self.name, LineAccessor(self.get_y))


@dataclass(frozen=True)
class Stack(Generic[T, Y]):
    """Lines drawn on top of each other, in order: the first line is the bottom."""

    lines: tuple[Line, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(_coerce_line(line) for line in self.lines))

    def line(self, line: "Line[T, Y] | GetY") -> "Stack[T, Y]":
        return replace(self, lines=(*self.lines, _coerce_line(line)))

    def __len__(self) -> int:
        return len(self.lines)

    def apply(self, acc: "SeriesAccumulator[T, Y]") -> None:
        below: list[GetY] = []
        for line in self.lines:
            acc.push(line.name, StackedAccessor(line.get_y, tuple(below)))
            below.append(line.get_y)


SeriesDefinition = Union[Line, Stack]


class SeriesAccumulator(Generic[T, Y]):
    """Hands out sequential line ids while walking the series definitions."""

    def __init__(self, scheme: ColorScheme = SERIES_COLOR_SCHEME) -> None:
        self._scheme = scheme
        self.lines: list[tuple[LineHandle, YAccessor]] = []

    def push(self, name: str, accessor: YAccessor) -> LineHandle:
        handle = LineHandle(id=len(self.lines), name=name, scheme=self._scheme)
        self.lines.append((handle, accessor))
        return handle


def accumulate(
    definitions: Iterable[SeriesDefinition],
    scheme: ColorScheme = SERIES_COLOR_SCHEME,
) -> list[tuple[LineHandle, YAccessor]]:
    acc: SeriesAccumulator[Any, Any] = SeriesAccumulator(scheme)
    for definition in definitions:
        definition.apply(acc)
    return acc.lines


class Series(Generic[T, X, Y]):
    """Describes how to turn a sequence of records into lines on shared axes.

    Each record yields one X value (via ``get_x``) and one Y value per line::

        series = (
            Series(lambda r: r.interval)
            .line(Line(lambda r: r.in_octets, name="Rx"))
            .line(Line(lambda r: r.out_octets, name="Tx"))
        )

    Range overrides only ever widen the axis derived from the data.
    """

    def __init__(self, get_x: GetX) -> None:
        if not callable(get_x):
            raise SeriesDataError(f"x accessor must be callable, got {type(get_x)!r}")
        self.get_x = get_x
        self.definitions: list[SeriesDefinition] = []
        self.min_x: X | None = None
        self.max_x: X | None = None
        self.min_y: Y | None = None
        self.max_y: Y | None = None
        self.colors: ColorScheme = SERIES_COLOR_SCHEME

    def with_colors(self, colors: Iterable[Any] | ColorScheme) -> "Series[T, X, Y]":
        self.colors = validate_color_scheme(colors)
        return self

    def with_min_x(self, min_x: X | None) -> "Series[T, X, Y]":
        self.min_x = min_x
        return self

    def with_max_x(self, max_x: X | None) -> "Series[T, X, Y]":
        self.max_x = max_x
        return self

    def with_min_y(self, min_y: Y | None) -> "Series[T, X, Y]":
        self.min_y = min_y
        return self

    def with_max_y(self, max_y: Y | None) -> "Series[T, X, Y]":
        self.max_y = max_y
        return self

    def with_x_range(self, min_x: X | None, max_x: X | None) -> "Series[T, X, Y]":
        return self.with_min_x(min_x).with_max_x(max_x)

    def with_y_range(self, min_y: Y | None, max_y: Y | None) -> "Series[T, X, Y]":
        return self.with_min_y(min_y).with_max_y(max_y)

    def line(self, line: Line | GetY) -> "Series[T, X, Y]":
        self.definitions.append(_coerce_line(line))
        return self

    def lines(self, lines: Iterable[Line | GetY]) -> "Series[T, X, Y]":
        for line in lines:
            self.line(line)
        return self

    def stack(self, stack: Stack | Iterable[Line | GetY]) -> "Series[T, X, Y]":
        if not isinstance(stack, Stack):
            stack = Stack(lines=tuple(stack))
        self.definitions.append(stack)
        return self

    def __len__(self) -> int:
        return len(self.definitions)

    def is_empty(self) -> bool:
        return not self.definitions

    def copy(self) -> "Series[T, X, Y]":
        out: Series[T, X, Y] = Series(self.get_x)
        out.definitions = list(self.definitions)
        out.min_x, out.max_x = self.min_x, self.max_x
        out.min_y, out.max_y = self.min_y, self.max_y
        out.colors = self.colors
        return out

    def to_lines(self) -> list[tuple[LineHandle, YAccessor]]:
        return accumulate(self.definitions, self.colors)


def _coerce_line(line: Any) -> Line:
    if isinstance(line, Line):
        return line
    if callable(line):
        return Line(get_y=line)
    raise SeriesDataError(f"expected a Line or a callable, got {type(line)!r}")
