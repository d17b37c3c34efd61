from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    fill(canvas, color)
    return canvas


def fill(dst: np.ndarray, color: RGBA) -> None:
    dst[:, :, 0] = color[0]
    dst[:, :, 1] = color[1]
    dst[:, :, 2] = color[2]
    dst[:, :, 3] = color[3]


def blend_mask(dst: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    """Composite ``color`` over every pixel where ``mask`` is set, once per pixel."""
    if color[3] <= 0 or not np.any(mask):
        return
    a = color[3] / 255.0
    inv = 1.0 - a
    src = np.asarray(color[0:3], dtype=np.float32)
    current = dst[mask][:, :3].astype(np.float32)
    dst[mask, 0:3] = (src * a + current * inv).astype(np.uint8)
    dst[mask, 3] = 255


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    segment = dst[y, xa : xb + 1]
    a = color[3] / 255.0
    inv = 1.0 - a
    segment[:, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + segment[:, :3].astype(np.float32) * inv).astype(np.uint8)
    segment[:, 3] = 255


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    segment = dst[ya : yb + 1, x]
    a = color[3] / 255.0
    inv = 1.0 - a
    segment[:, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + segment[:, :3].astype(np.float32) * inv).astype(np.uint8)
    segment[:, 3] = 255


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    left = max(0, min(x0, x1))
    right = min(dst.shape[1] - 1, max(x0, x1))
    top = max(0, min(y0, y1))
    bottom = min(dst.shape[0] - 1, max(y0, y1))
    if right < left or bottom < top:
        return
    mask = np.zeros(dst.shape[:2], dtype=bool)
    mask[top : bottom + 1, left : right + 1] = True
    blend_mask(dst, mask, color)


def stroke_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    left, right = min(x0, x1), max(x0, x1)
    top, bottom = min(y0, y1), max(y0, y1)
    mask = np.zeros(dst.shape[:2], dtype=bool)
    h, w = mask.shape
    xa, xb = max(0, left), min(w - 1, right)
    ya, yb = max(0, top), min(h - 1, bottom)
    if xa > xb or ya > yb:
        return
    if 0 <= top < h:
        mask[top, xa : xb + 1] = True
    if 0 <= bottom < h:
        mask[bottom, xa : xb + 1] = True
    if 0 <= left < w:
        mask[ya : yb + 1, left] = True
    if 0 <= right < w:
        mask[ya : yb + 1, right] = True
    blend_mask(dst, mask, color)
