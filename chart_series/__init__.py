from chart_series.adapters import field_getter, normalize_records
from chart_series.bounds import Bounds
from chart_series.colors import SERIES_COLOR_SCHEME, ColorScheme, color_for, validate_color_scheme
from chart_series.data import Range, SeriesData, build_series_data, data_range, extend_range, map_series
from chart_series.errors import SeriesDataError, UnregisteredLineError
from chart_series.nearest import NearestPoint, nearest_index
from chart_series.position import Positioned, position, positions
from chart_series.projection import Projection
from chart_series.series import Line, LineHandle, Series, SeriesAccumulator, Stack, accumulate
from chart_series.state import ChartDataState, PointerEvent

__all__ = [
    "Bounds",
    "ChartDataState",
    "ColorScheme",
    "Line",
    "LineHandle",
    "NearestPoint",
    "PointerEvent",
    "Positioned",
    "Projection",
    "Range",
    "SERIES_COLOR_SCHEME",
    "Series",
    "SeriesAccumulator",
    "SeriesData",
    "SeriesDataError",
    "Stack",
    "UnregisteredLineError",
    "accumulate",
    "build_series_data",
    "color_for",
    "data_range",
    "extend_range",
    "field_getter",
    "map_series",
    "nearest_index",
    "normalize_records",
    "position",
    "positions",
    "validate_color_scheme",
]
