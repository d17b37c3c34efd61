from __future__ import annotations

from lossplot.chart import ChartModel
from lossplot.style import DEFAULT_HEIGHT, DEFAULT_WIDTH, ChartStyle, Margins


def chart(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    *,
    margins: Margins | None = None,
    style: ChartStyle | None = None,
) -> ChartModel:
    return ChartModel(width=width, height=height, margins=margins, style=style)
