from __future__ import annotations

from functools import partial
import logging
import numbers
from typing import Any

import numpy as np

from lossplot.adapters import normalize_pairs, normalize_xy
from lossplot.errors import ChartConfigError
from lossplot.export import ORIGIN_BOTTOM_LEFT, ORIGIN_TOP_LEFT, RasterExporter
from lossplot.mapping import PlotRect
from lossplot.renderer import Renderer, resolve_axis_ranges
from lossplot.scales import AxisRange
from lossplot.series import Series
from lossplot.style import (
    DEFAULT_HEIGHT,
    DEFAULT_LINE_WIDTH,
    DEFAULT_SERIES_COLOR,
    DEFAULT_WIDTH,
    ChartStyle,
    ColorLike,
    Margins,
    coerce_color,
)
from lossplot.surface import RasterSurface, SurfaceFactory, open_surface


LOGGER = logging.getLogger(__name__)


def _pixel_count(value: Any, *, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ChartConfigError(f"{name} must be an integer pixel count, got {value!r}")
    if value <= 0:
        raise ChartConfigError(f"{name} must be > 0, got {value}")
    return int(value)


class ChartModel:
    """Configuration and series for one line chart.

    Configuration calls return ``self`` so a chart can be built in one
    expression::

        rgba = (
            ChartModel(600, 400)
            .set_title("Training Loss")
            .set_x_label("epoch")
            .plot(losses, color=(220, 50, 50), label="train")
            .render()
        )

    Adding a series with a non-empty label turns the legend on.
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        *,
        margins: Margins | None = None,
        style: ChartStyle | None = None,
        surface_factory: SurfaceFactory | None = None,
    ) -> None:
        self._width = _pixel_count(width, name="width")
        self._height = _pixel_count(height, name="height")
        self._margins = margins if margins is not None else Margins()
        PlotRect.from_margins(self._width, self._height, self._margins)
        self._style = style if style is not None else ChartStyle()
        self._surface_factory = surface_factory
        self._title = ""
        self._x_label = ""
        self._y_label = ""
        self._show_grid = True
        self._show_legend = False
        self._series: list[Series] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def margins(self) -> Margins:
        return self._margins

    @property
    def style(self) -> ChartStyle:
        return self._style

    @property
    def title(self) -> str:
        return self._title

    @property
    def x_label(self) -> str:
        return self._x_label

    @property
    def y_label(self) -> str:
        return self._y_label

    @property
    def grid_enabled(self) -> bool:
        return self._show_grid

    @property
    def legend_enabled(self) -> bool:
        return self._show_legend

    @property
    def series(self) -> tuple[Series, ...]:
        return tuple(self._series)

    def set_title(self, title: str) -> "ChartModel":
        self._title = title or ""
        return self

    def set_x_label(self, label: str) -> "ChartModel":
        self._x_label = label or ""
        return self

    def set_y_label(self, label: str) -> "ChartModel":
        self._y_label = label or ""
        return self

    def show_grid(self, show: bool) -> "ChartModel":
        self._show_grid = bool(show)
        return self

    def show_legend(self, show: bool) -> "ChartModel":
        self._show_legend = bool(show)
        return self

    def set_margins(
        self,
        *,
        left: int | None = None,
        right: int | None = None,
        top: int | None = None,
        bottom: int | None = None,
    ) -> "ChartModel":
        current = self._margins
        margins = Margins(
            left=current.left if left is None else int(left),
            right=current.right if right is None else int(right),
            top=current.top if top is None else int(top),
            bottom=current.bottom if bottom is None else int(bottom),
        )
        PlotRect.from_margins(self._width, self._height, margins)
        self._margins = margins
        return self

    def set_style(self, style: ChartStyle) -> "ChartModel":
        self._style = style
        return self

    def plot(
        self,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        color: ColorLike = DEFAULT_SERIES_COLOR,
        label: str | None = None,
        line_width: float = DEFAULT_LINE_WIDTH,
        alpha: float = 1.0,
    ) -> "ChartModel":
        """Add a series of y values; x defaults to the sample index 0, 1, 2, ..."""
        xs, ys = normalize_xy(y, x=x, data=data)
        return self._add_series(xs, ys, color=color, label=label, line_width=line_width, alpha=alpha)

    def plot_xy(
        self,
        points: Any,
        *,
        color: ColorLike = DEFAULT_SERIES_COLOR,
        label: str | None = None,
        line_width: float = DEFAULT_LINE_WIDTH,
        alpha: float = 1.0,
    ) -> "ChartModel":
        """Add a series from explicit ``(x, y)`` pairs."""
        xs, ys = normalize_pairs(points)
        return self._add_series(xs, ys, color=color, label=label, line_width=line_width, alpha=alpha)

    def _add_series(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
        *,
        color: ColorLike,
        label: str | None,
        line_width: float,
        alpha: float,
    ) -> "ChartModel":
        if not np.isfinite(line_width) or line_width <= 0:
            raise ChartConfigError(f"line_width must be > 0, got {line_width}")
        series = Series(
            x=xs,
            y=ys,
            color=coerce_color(color, alpha=alpha),
            label=label if label else None,
            line_width=float(line_width),
        )
        self._series.append(series)
        LOGGER.debug("added series %d: %d samples, label=%r", len(self._series) - 1, xs.size, series.label)
        if series.has_label:
            self._show_legend = True
        return self

    def clear(self) -> "ChartModel":
        self._series.clear()
        return self

    def plot_rect(self) -> PlotRect:
        return PlotRect.from_margins(self._width, self._height, self._margins)

    def axis_ranges(self) -> tuple[AxisRange, AxisRange] | None:
        """Resolved (x, y) ranges for the current series, or None without data."""
        return resolve_axis_ranges(self.series, target_ticks=self._style.target_ticks)

    def render(self) -> np.ndarray:
        """Rasterize to a fresh (height, width, 4) uint8 RGBA array, top-left origin."""
        return self._render(ORIGIN_TOP_LEFT)

    def render_bottom_up(self) -> np.ndarray:
        """Like :meth:`render` but with row 0 at the bottom of the chart."""
        return self._render(ORIGIN_BOTTOM_LEFT)

    def render_tensor(self, *, bottom_up: bool = False) -> Any:
        """Render straight into a torch ``uint8`` tensor for texture upload."""
        origin = ORIGIN_BOTTOM_LEFT if bottom_up else ORIGIN_TOP_LEFT
        return self._render(origin, as_tensor=True)

    def _render(self, origin: str, *, as_tensor: bool = False) -> Any:
        factory = self._resolve_surface_factory()
        exporter = RasterExporter(origin)
        with open_surface(self._width, self._height, factory=factory) as surface:
            Renderer(self).draw(surface)
            if as_tensor:
                return exporter.to_tensor(surface)
            return exporter.export(surface)

    def _resolve_surface_factory(self) -> SurfaceFactory:
        if self._surface_factory is not None:
            return self._surface_factory
        return partial(RasterSurface, font_family=self._style.font_family)
