from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, Iterable, Sequence, TypeAlias


Color: TypeAlias = tuple[int, int, int, int]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


@dataclass(frozen=True)
class ColorScheme:
    """Immutable series palette. Lines beyond the palette size repeat colours."""

    colors: tuple[Color, ...]

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("color scheme must contain at least one color")

    def __len__(self) -> int:
        return len(self.colors)

    def by_index(self, index: int) -> Color:
        return self.colors[index % len(self.colors)]


# Categorical palette, repeats after ten lines.
SERIES_COLOR_SCHEME = ColorScheme(
    colors=(
        (0x12, 0xA5, 0xED, 255),  # blue
        (0xF5, 0x32, 0x5B, 255),  # red
        (0x71, 0xC6, 0x14, 255),  # green
        (0xFF, 0x84, 0x00, 255),  # orange
        (0x7B, 0x4D, 0xFF, 255),  # purple
        (0xDB, 0x4C, 0xB2, 255),  # magenta
        (0x92, 0xB4, 0x2C, 255),  # darker green
        (0xFF, 0xCA, 0x00, 255),  # yellow
        (0x22, 0xD2, 0xBA, 255),  # turquoise
        (0xEA, 0x60, 0xDF, 255),  # pink
    )
)


def color_for(line_id: int, scheme: ColorScheme) -> Color:
    return scheme.by_index(line_id)


def parse_hex_color(value: str) -> Color:
    if not isinstance(value, str) or not _HEX_COLOR.match(value):
        raise ValueError(f"color `{value}` must be a hex color (#RRGGBB or #RRGGBBAA)")
    raw = value[1:]
    r, g, b = int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)
    a = int(raw[6:8], 16) if len(raw) == 8 else 255
    return (r, g, b, a)


def to_hex(color: Color) -> str:
    r, g, b, a = color
    out = f"#{r:02X}{g:02X}{b:02X}"
    if a != 255:
        out += f"{a:02X}"
    return out


def validate_color_scheme(colors: Iterable[Any] | ColorScheme | None = None) -> ColorScheme:
    """Validate a user palette; ``None`` yields the default series scheme.

    Entries may be hex strings or RGB/RGBA tuples with 0..255 channels.
    """

    if colors is None:
        return SERIES_COLOR_SCHEME
    if isinstance(colors, ColorScheme):
        return colors
    if isinstance(colors, (str, bytes)):
        raise ValueError("color scheme must be a sequence of colors, not a single string")
    out: list[Color] = []
    for i, raw in enumerate(colors):
        if isinstance(raw, str):
            out.append(parse_hex_color(raw))
            continue
        out.append(_coerce_rgba(raw, index=i))
    if not out:
        raise ValueError("color scheme must contain at least one color")
    return ColorScheme(colors=tuple(out))


def _coerce_rgba(raw: Any, *, index: int) -> Color:
    if not isinstance(raw, Sequence) or len(raw) not in {3, 4}:
        raise ValueError(f"color at index {index} must be a hex string or an RGB/RGBA tuple")
    channels = [int(c) for c in raw]
    if any(c < 0 or c > 255 for c in channels):
        raise ValueError(f"color at index {index} has a channel outside 0..255")
    if len(channels) == 3:
        channels.append(255)
    r, g, b, a = channels
    return (r, g, b, a)
