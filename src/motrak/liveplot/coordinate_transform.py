from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .viewport import ViewportState

DEFAULT_PADDING_PX = 80.0


@dataclass(frozen=True)
class ValueRange:
    """Fixed ``[min, max]`` value domain mapped onto the chart height."""

    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class ChartGeometry:
    """Chart interior inside the view, in screen pixels (y grows downward)."""

    view_width: float
    view_height: float
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_view_size(
        cls, view_width: float, view_height: float, padding_px: float = DEFAULT_PADDING_PX
    ) -> "ChartGeometry":
        """Chart interior of a view with equal padding on every side."""
        return cls(
            view_width=float(view_width),
            view_height=float(view_height),
            left=float(padding_px),
            top=float(padding_px),
            width=max(0.0, view_width - 2 * padding_px),
            height=max(0.0, view_height - 2 * padding_px),
        )

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


class CoordinateTransform:
    """
    Maps ``(buffer index, value)`` pairs to screen points.

    Stateless given its inputs: geometry, value range, buffer capacity and a
    viewport state. The horizontal interval is derived from the buffer
    *capacity*, not its current length, so the full chart width always stands
    for ``capacity`` samples of history and a partially filled buffer occupies
    only the left part of the chart.
    """

    def __init__(
        self,
        geometry: ChartGeometry,
        value_range: ValueRange,
        capacity: int,
        viewport: ViewportState = ViewportState(),
    ):
        self.geometry = geometry
        self.value_range = value_range
        self.capacity = int(capacity)
        self.viewport = viewport

    @property
    def x_interval(self) -> float:
        """Horizontal distance between consecutive samples."""
        slots = max(1, self.capacity - 1)
        return self.geometry.width * self.viewport.scale / slots

    @property
    def visible_start_px(self) -> float:
        """Pan offset clamped to the zoomed content."""
        clamp_max = max(
            0.0, self.geometry.width * self.viewport.scale - self.geometry.width
        )
        return max(0.0, min(self.viewport.pan_offset_px, clamp_max))

    def x_for_index(self, index):
        """Screen x of a buffer index (scalar or array)."""
        return self.geometry.left + index * self.x_interval - self.visible_start_px

    def y_for_value(self, value):
        """
        Screen y of a channel value (scalar or array).

        Values are normalised into ``[0, 1]`` over the value range and then
        inverted, since screen y grows downward. Out-of-range values are not
        clamped; the render pipeline clips them to the chart box.
        """
        normalized = (value - self.value_range.min) / self.value_range.span
        return self.geometry.top + self.geometry.height - normalized * self.geometry.height

    @property
    def zero_y(self) -> float:
        """Screen y of the value 0, the baseline for filled areas."""
        return float(self.y_for_value(0.0))

    def to_screen(self, index: int, value: float) -> Tuple[float, float]:
        return float(self.x_for_index(index)), float(self.y_for_value(value))

    def index_at_x(self, x: float) -> float:
        """Fractional buffer index under a screen x (inverse of :meth:`x_for_index`)."""
        interval = self.x_interval
        if interval == 0:
            return 0.0
        return (x - self.geometry.left + self.visible_start_px) / interval

    def channel_points(self, values: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Screen coordinates of a whole channel.

        Parameters
        ----------
        values : np.ndarray
            Channel values, oldest first.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray]
            Screen x and y arrays of the polyline vertices.
        """
        values = np.asarray(values, dtype=np.float64)
        indices = np.arange(values.size, dtype=np.float64)
        return self.x_for_index(indices), self.y_for_value(values)

    def area_polygon(self, values: np.ndarray) -> np.ndarray:
        """
        Closed polygon between the zero baseline and a channel polyline.

        Starts on the baseline at the chart's left edge, follows the data and
        drops back to the baseline under the last sample.

        Returns
        -------
        np.ndarray
            ``(n + 2, 2)`` array of vertices, empty if there are no values.
        """
        xs, ys = self.channel_points(values)
        if xs.size == 0:
            return np.empty((0, 2), dtype=np.float64)

        zero_y = self.zero_y
        start = (float(self.x_for_index(0)), zero_y)
        end = (float(xs[-1]), zero_y)
        return np.vstack([start, np.column_stack([xs, ys]), end])
