from __future__ import annotations

import numpy as np

from lossplot.raster.canvas import RGBA, blend_mask


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: float = 1.0) -> None:
    """Stroke connected segments through pixel positions.

    Positions are rounded to the nearest pixel. Overlapping brush stamps are
    merged into one coverage mask so translucent strokes blend once.
    """
    if xs.size < 2:
        return
    mask = np.zeros(dst.shape[:2], dtype=bool)
    px = np.rint(xs).astype(np.int64)
    py = np.rint(ys).astype(np.int64)
    span = brush_span(width)
    for i in range(px.size - 1):
        _stamp_segment(mask, int(px[i]), int(py[i]), int(px[i + 1]), int(py[i + 1]), span=span)
    blend_mask(dst, mask, color)


def draw_line(dst: np.ndarray, x0: float, y0: float, x1: float, y1: float, color: RGBA, width: float = 1.0) -> None:
    draw_polyline(dst, np.asarray([x0, x1], dtype=np.float64), np.asarray([y0, y1], dtype=np.float64), color, width)


def brush_span(width: float) -> int:
    return max(1, int(round(width)))


def _stamp_segment(mask: np.ndarray, x0: int, y0: int, x1: int, y1: int, *, span: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _stamp_square(mask, x0, y0, span)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _stamp_square(mask: np.ndarray, x: int, y: int, span: int) -> None:
    lo = -((span - 1) // 2)
    xa = max(0, x + lo)
    ya = max(0, y + lo)
    xb = min(mask.shape[1], x + lo + span)
    yb = min(mask.shape[0], y + lo + span)
    if xa >= xb or ya >= yb:
        return
    mask[ya:yb, xa:xb] = True
