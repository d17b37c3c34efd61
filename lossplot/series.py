from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from lossplot.style import RGBA


Extent = tuple[float, float]


@dataclass(frozen=True)
class Series:
    x: np.ndarray
    y: np.ndarray
    color: RGBA
    label: str | None = None
    line_width: float = 2.0

    @property
    def mask(self) -> np.ndarray:
        return np.isfinite(self.x) & np.isfinite(self.y)

    @property
    def point_count(self) -> int:
        return int(np.count_nonzero(self.mask))

    @property
    def has_label(self) -> bool:
        return bool(self.label)

    def extent(self) -> tuple[Extent, Extent] | None:
        """Finite (x, y) extents, or None when the series has no drawable point."""
        mask = self.mask
        if not np.any(mask):
            return None
        vx = self.x[mask]
        vy = self.y[mask]
        return (float(np.min(vx)), float(np.max(vx))), (float(np.min(vy)), float(np.max(vy)))
