from __future__ import annotations


class ChartConfigError(ValueError):
    """Raised when a chart is configured with a size or style it cannot render."""


class PlotDataError(ValueError):
    """Raised when series input cannot be normalized into numeric x/y arrays."""


class SurfaceUnavailableError(RuntimeError):
    """Raised when a drawing surface cannot be acquired for a render pass."""


class SurfaceClosedError(RuntimeError):
    """Raised when drawing is attempted on a surface that was already released."""
