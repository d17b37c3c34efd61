from lossplot.api import chart
from lossplot.chart import ChartModel
from lossplot.errors import ChartConfigError, PlotDataError, SurfaceClosedError, SurfaceUnavailableError
from lossplot.export import ORIGIN_BOTTOM_LEFT, ORIGIN_TOP_LEFT, RasterExporter
from lossplot.mapping import CoordinateMapper, PlotRect
from lossplot.renderer import LegendLayout, Renderer
from lossplot.scales import AxisRange, compute_axis_range, format_number, generate_ticks, nice_tick_interval
from lossplot.series import Series
from lossplot.style import ChartStyle, Margins
from lossplot.surface import DrawingSurface, RasterSurface, open_surface

__all__ = [
    "AxisRange",
    "ChartConfigError",
    "ChartModel",
    "ChartStyle",
    "CoordinateMapper",
    "DrawingSurface",
    "LegendLayout",
    "Margins",
    "ORIGIN_BOTTOM_LEFT",
    "ORIGIN_TOP_LEFT",
    "PlotDataError",
    "PlotRect",
    "RasterExporter",
    "RasterSurface",
    "Renderer",
    "Series",
    "SurfaceClosedError",
    "SurfaceUnavailableError",
    "chart",
    "compute_axis_range",
    "format_number",
    "generate_ticks",
    "nice_tick_interval",
    "open_surface",
]
