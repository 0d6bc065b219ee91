from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from chart_series.bounds import Bounds


@dataclass(frozen=True)
class Projection:
    """Linear map from position space onto the inner chart area in pixels.

    Pixel Y grows downward, so the largest Y position lands on ``inner.top_y``.
    An axis whose position range has zero extent is drawn through the middle.
    """

    inner: Bounds
    position_range: Bounds

    @property
    def sx(self) -> float:
        if self.position_range.width == 0:
            return 0.0
        return self.inner.width / self.position_range.width

    @property
    def sy(self) -> float:
        if self.position_range.height == 0:
            return 0.0
        return self.inner.height / self.position_range.height

    def position_to_svg(self, x: float, y: float) -> tuple[float, float]:
        if self.position_range.width == 0:
            px = self.inner.x + self.inner.width / 2.0
        else:
            px = self.inner.left_x + (x - self.position_range.left_x) * self.sx
        if self.position_range.height == 0:
            py = self.inner.y + self.inner.height / 2.0
        else:
            py = self.inner.bottom_y - (y - self.position_range.top_y) * self.sy
        return (px, py)

    def svg_to_position(self, px: float, py: float) -> tuple[float, float]:
        if self.sx == 0:
            x = self.position_range.x
        else:
            x = self.position_range.left_x + (px - self.inner.left_x) / self.sx
        if self.sy == 0:
            y = self.position_range.y
        else:
            y = self.position_range.top_y + (self.inner.bottom_y - py) / self.sy
        return (x, y)

    def map_positions(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        if self.position_range.width == 0:
            px = np.full(xs.shape, self.inner.x + self.inner.width / 2.0, dtype=np.float64)
        else:
            px = self.inner.left_x + (xs - self.position_range.left_x) * self.sx
        if self.position_range.height == 0:
            py = np.full(ys.shape, self.inner.y + self.inner.height / 2.0, dtype=np.float64)
        else:
            py = self.inner.bottom_y - (ys - self.position_range.top_y) * self.sy
        return px, py
