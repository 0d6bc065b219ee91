from __future__ import annotations

import math
import unittest

from chart_series import (
    SERIES_COLOR_SCHEME,
    ColorScheme,
    Line,
    LineHandle,
    Series,
    SeriesDataError,
    Stack,
    accumulate,
    color_for,
    validate_color_scheme,
)
from chart_series.colors import parse_hex_color, to_hex


def _field(name: str):
    return lambda record: record[name]


class SeriesAccumulatorTests(unittest.TestCase):
    def test_ids_are_dense_and_follow_registration_order(self) -> None:
        series = (
            Series(_field("x"))
            .line(Line(_field("a"), name="a"))
            .stack([Line(_field("b"), name="b"), Line(_field("c"), name="c"), _field("d")])
            .line(_field("e"))
        )
        lines = series.to_lines()
        self.assertEqual([handle.id for handle, _ in lines], [0, 1, 2, 3, 4])
        self.assertEqual([handle.name for handle, _ in lines], ["a", "b", "c", "", ""])
        self.assertEqual(len(series), 3)
        self.assertFalse(series.is_empty())

    def test_stack_cumulative_follows_sibling_order(self) -> None:
        stack = Stack([_field("y0"), _field("y1"), _field("y2")])
        lines = accumulate([stack])
        record = {"y0": 1.0, "y1": 2.0, "y2": 4.0}
        self.assertEqual([acc.value(record) for _, acc in lines], [1.0, 2.0, 4.0])
        self.assertEqual([acc.cumulative_value(record) for _, acc in lines], [1.0, 3.0, 7.0])

    def test_standalone_line_cumulative_equals_raw(self) -> None:
        lines = accumulate([Line(_field("y"))])
        _, acc = lines[0]
        self.assertEqual(acc.value({"y": 5.5}), 5.5)
        self.assertEqual(acc.cumulative_value({"y": 5.5}), 5.5)

    def test_separate_stacks_do_not_share_totals(self) -> None:
        lines = accumulate([Stack([_field("a"), _field("b")]), Stack([_field("c"), _field("d")])])
        record = {"a": 1, "b": 2, "c": 10, "d": 20}
        self.assertEqual([acc.cumulative_value(record) for _, acc in lines], [1, 3, 10, 30])

    def test_stack_nan_propagates_upward(self) -> None:
        lines = accumulate([Stack([_field("a"), _field("b"), _field("c")])])
        record = {"a": 1.0, "b": float("nan"), "c": 4.0}
        cumulative = [acc.cumulative_value(record) for _, acc in lines]
        self.assertEqual(cumulative[0], 1.0)
        self.assertTrue(math.isnan(cumulative[1]))
        self.assertTrue(math.isnan(cumulative[2]))

    def test_stack_absent_value_makes_totals_above_absent(self) -> None:
        lines = accumulate([Stack([_field("a"), _field("b"), _field("c")])])
        record = {"a": 1.0, "b": None, "c": 4.0}
        self.assertEqual([acc.value(record) for _, acc in lines], [1.0, None, 4.0])
        self.assertEqual([acc.cumulative_value(record) for _, acc in lines], [1.0, None, None])

    def test_colors_cycle_through_palette(self) -> None:
        scheme = validate_color_scheme(["#FF0000", "#00FF00", "#0000FF"])
        series = Series(_field("x")).with_colors(scheme).lines([_field("y")] * 7)
        handles = [handle for handle, _ in series.to_lines()]
        for handle in handles:
            self.assertEqual(handle.color, scheme.colors[handle.id % 3])
        self.assertEqual(handles[0].color, handles[3].color)
        self.assertEqual(handles[1].color, handles[4].color)
        self.assertNotEqual(handles[0].color, handles[1].color)

    def test_color_is_derived_from_current_scheme(self) -> None:
        series = Series(_field("x")).line(_field("y")).line(_field("z"))
        before = [handle for handle, _ in series.to_lines()]
        self.assertEqual(before[1].color, SERIES_COLOR_SCHEME.colors[1])
        series.with_colors([(1, 2, 3)])
        after = [handle for handle, _ in series.to_lines()]
        self.assertEqual(after[1].color, (1, 2, 3, 255))
        # Identity does not depend on the palette.
        self.assertEqual(before, after)
        self.assertEqual(color_for(12, SERIES_COLOR_SCHEME), SERIES_COLOR_SCHEME.colors[2])

    def test_line_handle_equality_ignores_scheme(self) -> None:
        a = LineHandle(id=0, name="rx")
        b = LineHandle(id=0, name="rx", scheme=ColorScheme(colors=((0, 0, 0, 255),)))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a.color, b.color)

    def test_accumulation_is_deterministic(self) -> None:
        series = Series(_field("x")).stack([_field("a"), _field("b")]).line(_field("c"))
        first = [handle for handle, _ in series.to_lines()]
        second = [handle for handle, _ in series.to_lines()]
        self.assertEqual(first, second)

    def test_line_with_name_returns_copy(self) -> None:
        line = Line(_field("y"))
        named = line.with_name("tx")
        self.assertEqual(line.name, "")
        self.assertEqual(named.name, "tx")

    def test_stack_line_appends(self) -> None:
        stack = Stack([_field("a")]).line(Line(_field("b"), name="b"))
        self.assertEqual(len(stack), 2)
        self.assertEqual(stack.lines[1].name, "b")

    def test_stack_keeps_its_name(self) -> None:
        stack = Stack([_field("a")], name="traffic")
        self.assertEqual(stack.name, "traffic")
        self.assertEqual(stack.line(_field("b")).name, "traffic")
        self.assertEqual(Stack().name, "")

    def test_series_copy_is_independent(self) -> None:
        series = Series(_field("x")).line(Line(_field("y"), name="a")).with_x_range(0.0, 5.0)
        copied = series.copy()
        copied.line(Line(_field("z"), name="b")).with_x_range(-1.0, None).with_colors(["#000000"])
        self.assertEqual(len(series), 1)
        self.assertEqual((series.min_x, series.max_x), (0.0, 5.0))
        self.assertIs(series.colors, SERIES_COLOR_SCHEME)
        self.assertEqual(len(copied), 2)
        self.assertEqual((copied.min_x, copied.max_x), (-1.0, None))

    def test_rejects_non_callable_accessors(self) -> None:
        with self.assertRaises(SeriesDataError):
            Series(_field("x")).line(42)
        with self.assertRaises(SeriesDataError):
            Series("x")
        with self.assertRaises(SeriesDataError):
            Stack([_field("a"), "b"])


class ColorSchemeTests(unittest.TestCase):
    def test_default_scheme(self) -> None:
        self.assertIs(validate_color_scheme(), SERIES_COLOR_SCHEME)
        self.assertEqual(len(SERIES_COLOR_SCHEME), 10)

    def test_parse_hex_color(self) -> None:
        self.assertEqual(parse_hex_color("#12A5ED"), (0x12, 0xA5, 0xED, 255))
        self.assertEqual(parse_hex_color("#12a5ed80"), (0x12, 0xA5, 0xED, 0x80))
        self.assertEqual(to_hex((0x12, 0xA5, 0xED, 255)), "#12A5ED")
        self.assertEqual(to_hex((0x12, 0xA5, 0xED, 0x80)), "#12A5ED80")

    def test_rejects_invalid_hex_color(self) -> None:
        with self.assertRaisesRegex(ValueError, "hex color"):
            validate_color_scheme(["red"])

    def test_rejects_out_of_range_channel(self) -> None:
        with self.assertRaisesRegex(ValueError, "outside 0..255"):
            validate_color_scheme([(0, 0, 300)])

    def test_rejects_empty_scheme(self) -> None:
        with self.assertRaisesRegex(ValueError, "at least one color"):
            validate_color_scheme([])
        with self.assertRaises(ValueError):
            ColorScheme(colors=())

    def test_rejects_single_string(self) -> None:
        with self.assertRaisesRegex(ValueError, "single string"):
            validate_color_scheme("#FFFFFF")


if __name__ == "__main__":
    unittest.main()
