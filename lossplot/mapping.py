from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from lossplot.errors import ChartConfigError
from lossplot.scales import AxisRange
from lossplot.style import Margins


@dataclass(frozen=True)
class PlotRect:
    left: int
    top: int
    width: int
    height: int

    @classmethod
    def from_margins(cls, width: int, height: int, margins: Margins) -> "PlotRect":
        plot_w = width - margins.left - margins.right
        plot_h = height - margins.top - margins.bottom
        if plot_w <= 0 or plot_h <= 0:
            raise ChartConfigError(
                f"margins {margins} leave no plot area inside a {width}x{height} chart"
            )
        return cls(left=margins.left, top=margins.top, width=plot_w, height=plot_h)

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height


class CoordinateMapper:
    """Affine data-to-pixel mapping for one plot rectangle.

    Pixel y grows downward, so the y axis is inverted: larger data values map
    to smaller pixel rows. Offsets are taken on halved values so ranges whose
    width overflows a float still map.
    """

    def __init__(self, x_range: AxisRange, y_range: AxisRange, rect: PlotRect) -> None:
        x_half = x_range.vmax / 2.0 - x_range.vmin / 2.0
        y_half = y_range.vmax / 2.0 - y_range.vmin / 2.0
        if not (x_half > 0 and y_half > 0 and np.isfinite(x_half) and np.isfinite(y_half)):
            raise ValueError("axis ranges must have vmax > vmin")
        self.x_range = x_range
        self.y_range = y_range
        self.rect = rect
        self._sx = rect.width / x_half
        self._sy = rect.height / y_half

    def to_pixel(self, x: float, y: float) -> tuple[float, float]:
        px = self.rect.left + (x / 2.0 - self.x_range.vmin / 2.0) * self._sx
        py = self.rect.top + self.rect.height - (y / 2.0 - self.y_range.vmin / 2.0) * self._sy
        return (px, py)

    def to_data(self, px: float, py: float) -> tuple[float, float]:
        x = (self.x_range.vmin / 2.0 + (px - self.rect.left) / self._sx) * 2.0
        y = (self.y_range.vmin / 2.0 + (self.rect.top + self.rect.height - py) / self._sy) * 2.0
        return (x, y)

    def map_x(self, x: float) -> float:
        return self.to_pixel(x, self.y_range.vmin)[0]

    def map_y(self, y: float) -> float:
        return self.to_pixel(self.x_range.vmin, y)[1]

    def map_arrays(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        half_x = np.asarray(xs, dtype=np.float64) / 2.0
        half_y = np.asarray(ys, dtype=np.float64) / 2.0
        px = self.rect.left + (half_x - self.x_range.vmin / 2.0) * self._sx
        py = self.rect.top + self.rect.height - (half_y - self.y_range.vmin / 2.0) * self._sy
        return px, py
