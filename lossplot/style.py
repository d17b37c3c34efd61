from __future__ import annotations

from dataclasses import dataclass, replace
import operator
from typing import Any

from lossplot.errors import ChartConfigError


RGBA = tuple[int, int, int, int]
ColorLike = tuple[int, int, int] | tuple[int, int, int, int]

DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 400
DEFAULT_LINE_WIDTH = 2.0
DEFAULT_SERIES_COLOR: RGBA = (31, 119, 180, 255)


def coerce_color(color: ColorLike, *, alpha: float = 1.0) -> RGBA:
    if isinstance(color, (str, bytes)):
        raise ChartConfigError(f"color must be an RGB or RGBA tuple, got {color!r}")
    try:
        channels = [operator.index(c) for c in color]
    except TypeError as exc:
        raise ChartConfigError(f"color must be an RGB or RGBA tuple of integers, got {color!r}") from exc
    if len(channels) not in (3, 4):
        raise ChartConfigError(f"color must be an RGB or RGBA tuple, got {color!r}")
    if any(c < 0 or c > 255 for c in channels):
        raise ChartConfigError(f"color channels must be in [0, 255], got {color!r}")
    a = channels[3] if len(channels) == 4 else 255
    out_a = int(max(0.0, min(1.0, alpha)) * a)
    return (channels[0], channels[1], channels[2], out_a)


@dataclass(frozen=True)
class Margins:
    left: int = 70
    right: int = 20
    top: int = 40
    bottom: int = 50

    def __post_init__(self) -> None:
        if min(self.left, self.right, self.top, self.bottom) < 0:
            raise ChartConfigError("margins must be >= 0")


@dataclass(frozen=True)
class ChartStyle:
    background: RGBA = (255, 255, 255, 255)
    grid_color: RGBA = (220, 220, 220, 255)
    axis_color: RGBA = (0, 0, 0, 255)
    text_color: RGBA = (0, 0, 0, 255)
    legend_fill: RGBA = (255, 255, 255, 230)
    legend_border: RGBA = (128, 128, 128, 255)

    font_family: str = "DejaVu Sans"
    tick_font_px: float = 12.0
    label_font_px: float = 14.0
    title_font_px: float = 18.0
    legend_font_px: float = 12.0

    grid_width: float = 1.0
    axis_width: float = 2.0
    target_ticks: int = 5

    # tick label placement, px from the plot edge
    x_tick_label_offset: int = 20
    y_tick_label_gap: int = 8

    # title and axis label anchors, px from the figure edge
    title_baseline: int = 25
    x_label_baseline_inset: int = 10
    y_label_center_x: int = 15

    legend_indicator_width: int = 30
    legend_row_height: int = 20
    legend_padding: int = 10
    legend_inset: int = 10
    legend_swatch_width: float = 3.0

    def __post_init__(self) -> None:
        if self.target_ticks <= 0:
            raise ChartConfigError("target_ticks must be > 0")
        if self.grid_width <= 0 or self.axis_width <= 0:
            raise ChartConfigError("grid/axis stroke widths must be > 0")

    def replace(self, **changes: Any) -> "ChartStyle":
        return replace(self, **changes)
