from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
import logging

import numpy as np

from lossplot.errors import SurfaceClosedError, SurfaceUnavailableError
from lossplot.raster import (
    draw_hline,
    draw_polyline,
    draw_text,
    draw_vline,
    fill,
    fill_rect,
    new_canvas,
    stroke_rect,
    text_size,
)
from lossplot.raster.draw_lines import brush_span, draw_line as stroke_segment
from lossplot.raster.draw_text import DEFAULT_FONT_FAMILY
from lossplot.style import RGBA


LOGGER = logging.getLogger(__name__)


class DrawingSurface(ABC):
    """Drawing capability the renderer targets.

    Coordinates are pixels with a top-left origin; y grows downward.
    """

    @property
    @abstractmethod
    def width(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def height(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def clear(self, color: RGBA) -> None:
        raise NotImplementedError

    @abstractmethod
    def draw_line(self, x0: float, y0: float, x1: float, y1: float, color: RGBA, width: float = 1.0) -> None:
        raise NotImplementedError

    @abstractmethod
    def draw_polyline(self, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: float = 1.0) -> None:
        raise NotImplementedError

    @abstractmethod
    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        raise NotImplementedError

    @abstractmethod
    def stroke_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        raise NotImplementedError

    @abstractmethod
    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        color: RGBA,
        *,
        size_px: float,
        anchor: str = "lt",
        bold: bool = False,
        rotate_deg: int = 0,
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def measure_text(self, text: str, *, size_px: float, rotate_deg: int = 0) -> tuple[int, int]:
        raise NotImplementedError

    @abstractmethod
    def pixels(self) -> np.ndarray:
        """Current (H, W, 4) uint8 RGBA contents, top-left origin."""
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    @property
    def closed(self) -> bool:
        return False


SurfaceFactory = Callable[[int, int], DrawingSurface]


class RasterSurface(DrawingSurface):
    """numpy-backed RGBA surface with Pillow text."""

    def __init__(self, width: int, height: int, *, font_family: str = DEFAULT_FONT_FAMILY) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self._width = int(width)
        self._height = int(height)
        self._font_family = font_family
        self._canvas: np.ndarray | None = new_canvas(self._width, self._height, color=(0, 0, 0, 0))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def closed(self) -> bool:
        return self._canvas is None

    def _target(self) -> np.ndarray:
        if self._canvas is None:
            raise SurfaceClosedError("drawing surface has been released")
        return self._canvas

    def clear(self, color: RGBA) -> None:
        fill(self._target(), color)

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, color: RGBA, width: float = 1.0) -> None:
        canvas = self._target()
        ix0, iy0, ix1, iy1 = (int(round(v)) for v in (x0, y0, x1, y1))
        if brush_span(width) == 1 and iy0 == iy1:
            draw_hline(canvas, ix0, ix1, iy0, color)
        elif brush_span(width) == 1 and ix0 == ix1:
            draw_vline(canvas, ix0, iy0, iy1, color)
        else:
            stroke_segment(canvas, x0, y0, x1, y1, color, width)

    def draw_polyline(self, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: float = 1.0) -> None:
        draw_polyline(self._target(), xs, ys, color, width)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        if w <= 0 or h <= 0:
            return
        x0, y0 = int(round(x)), int(round(y))
        fill_rect(self._target(), x0, y0, x0 + int(round(w)) - 1, y0 + int(round(h)) - 1, color)

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        if w <= 0 or h <= 0:
            return
        x0, y0 = int(round(x)), int(round(y))
        stroke_rect(self._target(), x0, y0, x0 + int(round(w)) - 1, y0 + int(round(h)) - 1, color)

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        color: RGBA,
        *,
        size_px: float,
        anchor: str = "lt",
        bold: bool = False,
        rotate_deg: int = 0,
    ) -> None:
        draw_text(
            self._target(),
            int(round(x)),
            int(round(y)),
            text,
            color,
            anchor=anchor,
            font_family=self._font_family,
            font_size_px=size_px,
            embolden_px=2 if bold else 1,
            rotate_deg=rotate_deg,
        )

    def measure_text(self, text: str, *, size_px: float, rotate_deg: int = 0) -> tuple[int, int]:
        return text_size(text, font_family=self._font_family, font_size_px=size_px, rotate_deg=rotate_deg)

    def pixels(self) -> np.ndarray:
        return self._target()

    def close(self) -> None:
        self._canvas = None


@contextmanager
def open_surface(width: int, height: int, factory: SurfaceFactory | None = None) -> Iterator[DrawingSurface]:
    """Acquire a surface for one render pass and release it on every exit path."""
    make = factory if factory is not None else RasterSurface
    try:
        surface = make(width, height)
    except Exception as exc:
        raise SurfaceUnavailableError(f"could not acquire a {width}x{height} drawing surface") from exc
    LOGGER.debug("acquired %dx%d %s", width, height, type(surface).__name__)
    try:
        yield surface
    finally:
        surface.close()
