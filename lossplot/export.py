from __future__ import annotations

from typing import Any

import numpy as np

from lossplot.surface import DrawingSurface


try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


ORIGIN_TOP_LEFT = "top_left"
ORIGIN_BOTTOM_LEFT = "bottom_left"
_ORIGINS = (ORIGIN_TOP_LEFT, ORIGIN_BOTTOM_LEFT)


def flip_rows(frame_rgba: np.ndarray) -> np.ndarray:
    """Return a copy of ``frame_rgba`` with its rows in reverse order."""
    _check_frame(frame_rgba)
    return np.ascontiguousarray(frame_rgba[::-1])


def _check_frame(frame_rgba: np.ndarray) -> None:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")


class RasterExporter:
    """Copies a surface into a caller-owned 8-bit RGBA buffer.

    Surfaces draw with a top-left origin. Consumers that address rows from
    the bottom (GL textures, most game engines) ask for ``bottom_left`` and
    get one row-reversal pass; the surface itself is never modified.
    """

    def __init__(self, origin: str = ORIGIN_TOP_LEFT) -> None:
        if origin not in _ORIGINS:
            raise ValueError(f"origin must be one of {_ORIGINS}, got {origin!r}")
        self.origin = origin

    def export(self, surface: DrawingSurface, origin: str | None = None) -> np.ndarray:
        origin = self.origin if origin is None else origin
        if origin not in _ORIGINS:
            raise ValueError(f"origin must be one of {_ORIGINS}, got {origin!r}")
        frame = surface.pixels()
        _check_frame(frame)
        if origin == ORIGIN_BOTTOM_LEFT:
            return flip_rows(frame)
        return np.array(frame, dtype=np.uint8, copy=True, order="C")

    def to_bytes(self, surface: DrawingSurface, origin: str | None = None) -> bytes:
        return self.export(surface, origin).tobytes()

    def to_tensor(self, surface: DrawingSurface, origin: str | None = None) -> Any:
        if torch is None:
            raise RuntimeError("torch is required for tensor export")
        return torch.from_numpy(self.export(surface, origin))
