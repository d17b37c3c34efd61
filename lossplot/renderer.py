from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

import numpy as np

from lossplot.mapping import CoordinateMapper, PlotRect
from lossplot.scales import AxisRange, compute_axis_range, format_ticks, generate_ticks
from lossplot.series import Series
from lossplot.style import RGBA
from lossplot.surface import DrawingSurface

if TYPE_CHECKING:
    from lossplot.chart import ChartModel


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: RGBA


@dataclass(frozen=True)
class LegendLayout:
    entries: tuple[LegendEntry, ...]
    x: int
    y: int
    width: int
    height: int
    text_width: int


@dataclass(frozen=True)
class RenderPlan:
    rect: PlotRect
    x_range: AxisRange
    y_range: AxisRange
    x_ticks: np.ndarray
    y_ticks: np.ndarray
    mapper: CoordinateMapper


def contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    """Half-open ``[start, end)`` index runs where ``mask`` is True."""
    runs: list[tuple[int, int]] = []
    start: int | None = None
    for i, value in enumerate(mask.tolist()):
        if value and start is None:
            start = i
        elif not value and start is not None:
            runs.append((start, i))
            start = None
    if start is not None:
        runs.append((start, mask.size))
    return runs


def resolve_axis_ranges(series: tuple[Series, ...], *, target_ticks: int) -> tuple[AxisRange, AxisRange] | None:
    extents = [ext for ext in (s.extent() for s in series) if ext is not None]
    x_range = compute_axis_range((ext[0] for ext in extents), target_ticks=target_ticks)
    y_range = compute_axis_range((ext[1] for ext in extents), target_ticks=target_ticks)
    if x_range is None or y_range is None:
        return None
    return x_range, y_range


class Renderer:
    """Draws one chart model onto a surface in a fixed layer order.

    Layers, back to front: background, grid, axes and tick labels, series
    polylines, title, axis labels, legend. A model without any finite point
    produces the background layer only.
    """

    def __init__(self, model: "ChartModel") -> None:
        self._model = model

    def plan(self) -> RenderPlan | None:
        model = self._model
        target = model.style.target_ticks
        ranges = resolve_axis_ranges(model.series, target_ticks=target)
        if ranges is None:
            return None
        x_range, y_range = ranges
        rect = model.plot_rect()
        return RenderPlan(
            rect=rect,
            x_range=x_range,
            y_range=y_range,
            x_ticks=generate_ticks(x_range.vmin, x_range.vmax, target),
            y_ticks=generate_ticks(y_range.vmin, y_range.vmax, target),
            mapper=CoordinateMapper(x_range, y_range, rect),
        )

    def draw(self, surface: DrawingSurface) -> None:
        model = self._model
        surface.clear(model.style.background)

        plan = self.plan()
        if plan is None:
            LOGGER.debug("no finite points across %d series; background only", len(model.series))
            return
        LOGGER.debug(
            "rendering %d series: x=[%g, %g] step %g, y=[%g, %g] step %g",
            len(model.series),
            plan.x_range.vmin,
            plan.x_range.vmax,
            plan.x_range.interval,
            plan.y_range.vmin,
            plan.y_range.vmax,
            plan.y_range.interval,
        )

        if model.grid_enabled:
            self._draw_grid(surface, plan)
        self._draw_axes(surface, plan)
        for index, series in enumerate(model.series):
            self._draw_series(surface, plan, series, index)
        if model.title:
            self._draw_title(surface)
        self._draw_axis_labels(surface, plan.rect)
        if model.legend_enabled:
            self._draw_legend(surface, plan.rect)

    def _draw_grid(self, surface: DrawingSurface, plan: RenderPlan) -> None:
        style = self._model.style
        rect = plan.rect
        for yv in plan.y_ticks.tolist():
            y = round(plan.mapper.map_y(yv))
            surface.draw_line(rect.left, y, rect.right, y, style.grid_color, style.grid_width)
        for xv in plan.x_ticks.tolist():
            x = round(plan.mapper.map_x(xv))
            surface.draw_line(x, rect.top, x, rect.bottom, style.grid_color, style.grid_width)

    def _draw_axes(self, surface: DrawingSurface, plan: RenderPlan) -> None:
        style = self._model.style
        rect = plan.rect
        surface.draw_line(rect.left, rect.bottom, rect.right, rect.bottom, style.axis_color, style.axis_width)
        surface.draw_line(rect.left, rect.top, rect.left, rect.bottom, style.axis_color, style.axis_width)

        for xv, label in zip(plan.x_ticks.tolist(), format_ticks(plan.x_ticks), strict=True):
            surface.draw_text(
                plan.mapper.map_x(xv),
                rect.bottom + style.x_tick_label_offset,
                label,
                style.text_color,
                size_px=style.tick_font_px,
                anchor="mb",
            )
        for yv, label in zip(plan.y_ticks.tolist(), format_ticks(plan.y_ticks), strict=True):
            surface.draw_text(
                rect.left - style.y_tick_label_gap,
                plan.mapper.map_y(yv),
                label,
                style.text_color,
                size_px=style.tick_font_px,
                anchor="rm",
            )

    def _draw_series(self, surface: DrawingSurface, plan: RenderPlan, series: Series, index: int) -> None:
        if series.point_count < 2:
            LOGGER.debug("series %d has %d finite points; not drawn", index, series.point_count)
            return
        px, py = plan.mapper.map_arrays(series.x, series.y)
        for start, end in contiguous_true_runs(series.mask):
            if end - start < 2:
                continue
            surface.draw_polyline(px[start:end], py[start:end], series.color, series.line_width)

    def _draw_title(self, surface: DrawingSurface) -> None:
        model = self._model
        surface.draw_text(
            model.width / 2.0,
            model.style.title_baseline,
            model.title,
            model.style.text_color,
            size_px=model.style.title_font_px,
            anchor="mb",
            bold=True,
        )

    def _draw_axis_labels(self, surface: DrawingSurface, rect: PlotRect) -> None:
        model = self._model
        style = model.style
        if model.x_label:
            surface.draw_text(
                rect.left + rect.width / 2.0,
                model.height - style.x_label_baseline_inset,
                model.x_label,
                style.text_color,
                size_px=style.label_font_px,
                anchor="mb",
            )
        if model.y_label:
            surface.draw_text(
                style.y_label_center_x,
                rect.top + rect.height / 2.0,
                model.y_label,
                style.text_color,
                size_px=style.label_font_px,
                anchor="mm",
                rotate_deg=90,
            )

    def legend_layout(self, surface: DrawingSurface, rect: PlotRect | None = None) -> LegendLayout | None:
        model = self._model
        style = model.style
        entries = tuple(LegendEntry(label=s.label, color=s.color) for s in model.series if s.label)
        if not entries:
            return None
        if rect is None:
            rect = model.plot_rect()
        text_width = max(surface.measure_text(entry.label, size_px=style.legend_font_px)[0] for entry in entries)
        width = style.legend_indicator_width + text_width + style.legend_padding
        height = len(entries) * style.legend_row_height + style.legend_padding
        return LegendLayout(
            entries=entries,
            x=rect.right - width - style.legend_inset,
            y=rect.top + style.legend_inset,
            width=width,
            height=height,
            text_width=text_width,
        )

    def _draw_legend(self, surface: DrawingSurface, rect: PlotRect) -> None:
        layout = self.legend_layout(surface, rect)
        if layout is None:
            return
        style = self._model.style
        surface.fill_rect(layout.x, layout.y, layout.width, layout.height, style.legend_fill)
        surface.stroke_rect(layout.x, layout.y, layout.width, layout.height, style.legend_border)

        half_pad = style.legend_padding // 2
        swatch_x0 = layout.x + half_pad
        swatch_x1 = layout.x + style.legend_indicator_width - half_pad
        for i, entry in enumerate(layout.entries):
            row_y = layout.y + half_pad + style.legend_row_height // 2 + i * style.legend_row_height
            surface.draw_line(swatch_x0, row_y, swatch_x1, row_y, entry.color, style.legend_swatch_width)
            surface.draw_text(
                layout.x + style.legend_indicator_width,
                row_y,
                entry.label,
                style.text_color,
                size_px=style.legend_font_px,
                anchor="lm",
            )
