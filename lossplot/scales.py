from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import math
import sys

import numpy as np


DEGENERATE_SPAN = 1e-4
DEGENERATE_PAD = 1.0
DEGENERATE_RELATIVE_PAD = 1e-6
MAX_TICKS = 1000
TICK_TOLERANCE = 0.001
DEFAULT_TARGET_TICKS = 5


@dataclass(frozen=True)
class AxisRange:
    vmin: float
    vmax: float
    interval: float


def nice_tick_interval(vmin: float, vmax: float, target: int = DEFAULT_TARGET_TICKS) -> float:
    """Pick a 1/2/5/10 x 10^k spacing giving roughly ``target`` ticks over the range."""
    if target <= 0:
        raise ValueError("target must be > 0")
    # half-span stays finite even when vmax - vmin overflows
    half_span = vmax / 2.0 - vmin / 2.0
    if not math.isfinite(half_span) or half_span <= 0:
        return 1.0

    rough = min(half_span / target * 2.0, sys.float_info.max)
    if rough < sys.float_info.min:
        return 1.0
    magnitude = 10.0 ** math.floor(math.log10(rough))
    normalized = rough / magnitude

    if normalized <= 1.5:
        nice = 1.0
    elif normalized <= 3.0:
        nice = 2.0
    elif normalized <= 7.0:
        nice = 5.0
    else:
        nice = 10.0
    interval = nice * magnitude
    if math.isinf(interval):
        return magnitude
    return interval


def generate_ticks(vmin: float, vmax: float, target: int = DEFAULT_TARGET_TICKS) -> np.ndarray:
    interval = nice_tick_interval(vmin, vmax, target)
    first = math.ceil(vmin / interval) * interval
    limit = vmax + interval * TICK_TOLERANCE

    ticks: list[float] = []
    i = 0
    tick = first
    while tick <= limit and math.isfinite(tick) and len(ticks) < MAX_TICKS:
        if ticks and tick <= ticks[-1]:
            break
        ticks.append(tick)
        i += 1
        tick = first + i * interval

    out = np.asarray(ticks, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    out[np.isclose(out, 0.0, rtol=0.0, atol=interval * 1e-9)] = 0.0
    return out


def compute_axis_range(
    extents: Iterable[tuple[float, float]],
    *,
    target_ticks: int = DEFAULT_TARGET_TICKS,
    default: tuple[float, float] | None = None,
) -> AxisRange | None:
    """Union the per-series extents of one axis and align the result to nice ticks.

    Returns ``default`` (aligned the same way) or ``None`` when no series
    contributed a point.
    """
    extents = list(extents)
    if extents:
        vmin = min(lo for lo, _ in extents)
        vmax = max(hi for _, hi in extents)
    elif default is not None:
        vmin, vmax = default
    else:
        return None

    vmin = float(vmin)
    vmax = float(vmax)
    if abs(vmax - vmin) < DEGENERATE_SPAN:
        center_lo, center_hi = vmin, vmax
        vmin = center_lo - DEGENERATE_PAD
        vmax = center_hi + DEGENERATE_PAD
        if not vmax > vmin:
            # a unit pad is below float resolution at this magnitude
            pad = max(abs(center_lo), abs(center_hi)) * DEGENERATE_RELATIVE_PAD
            vmin = center_lo - pad
            vmax = center_hi + pad

    step = nice_tick_interval(vmin, vmax, target_ticks)
    vmin = _align_down(vmin, step)
    vmax = _align_up(vmax, step)
    return AxisRange(vmin=vmin, vmax=vmax, interval=nice_tick_interval(vmin, vmax, target_ticks))


def _align_down(value: float, step: float) -> float:
    aligned = math.floor(value / step) * step
    if aligned > value:
        aligned -= step
    # keep the data bound when the tick boundary is not representable
    return aligned if math.isfinite(aligned) else value


def _align_up(value: float, step: float) -> float:
    aligned = math.ceil(value / step) * step
    if aligned < value:
        aligned += step
    return aligned if math.isfinite(aligned) else value


def format_number(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    abs_v = abs(value)
    if abs_v >= 1000 or (abs_v < 0.01 and value != 0):
        mantissa, exponent = f"{value:.2e}".split("e")
        return f"{_trim_fraction(mantissa)}E{int(exponent)}"
    if abs_v < 10:
        return _trim_fraction(f"{value:.2f}")
    return _trim_fraction(f"{value:.1f}")


def format_ticks(ticks: np.ndarray) -> list[str]:
    return [format_number(float(v)) for v in ticks]


def _trim_fraction(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text
