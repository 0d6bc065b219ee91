from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box: ``x``/``y`` is the minimum corner."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Bounds width/height must be >= 0")

    @classmethod
    def from_points(cls, x1: float, y1: float, x2: float, y2: float) -> "Bounds":
        left, right = (x1, x2) if x1 <= x2 else (x2, x1)
        top, bottom = (y1, y2) if y1 <= y2 else (y2, y1)
        return cls(x=left, y=top, width=right - left, height=bottom - top)

    @property
    def left_x(self) -> float:
        return self.x

    @property
    def right_x(self) -> float:
        return self.x + self.width

    @property
    def top_y(self) -> float:
        return self.y

    @property
    def bottom_y(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height
