from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Sequence

import numpy as np

from chart_series.errors import UnregisteredLineError
from chart_series.series import LineHandle


@dataclass(frozen=True)
class NearestPoint:
    """Everything a tooltip needs for one pointer position, taken from one record."""

    index: int
    data_x: Any
    position_x: float
    data_y: tuple[tuple[LineHandle, Any], ...]

    def y_for(self, line_id: int) -> Any:
        for line, y in self.data_y:
            if line.id == line_id:
                return y
        raise UnregisteredLineError(line_id, len(self.data_y))


def nearest_index(positions_x: Sequence[float] | np.ndarray, pos_x: float) -> int | None:
    """Index of the record whose X position is closest to ``pos_x``.

    ``positions_x`` must be non-decreasing; it is not checked or re-sorted.
    When ``pos_x`` is exactly halfway between two records the earlier one wins.
    """

    positions = np.asarray(positions_x, dtype=np.float64)
    count = positions.shape[0]
    if count == 0:
        return None
    pos_x = float(pos_x)
    if math.isnan(pos_x):
        # No position compares below NaN, so the partition point is the start.
        index = 0
    else:
        index = int(np.searchsorted(positions, pos_x, side="left"))
    if index == 0:
        return 0
    if index == count:
        return count - 1
    ahead = float(positions[index]) - pos_x
    before = pos_x - float(positions[index - 1])
    if ahead < before:
        return index
    return index - 1
