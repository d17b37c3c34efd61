from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from lossplot.errors import PlotDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_xy(y: Any = None, *, x: Any = None, data: Any = None) -> tuple[np.ndarray, np.ndarray]:
    """Coerce producer output into float64 x/y arrays of equal length.

    ``y`` may be a sequence, ndarray, torch tensor, pandas Series, a single
    numeric DataFrame column, or a column name when ``data`` is a DataFrame.
    When ``x`` is omitted the sample index is used. ``None`` entries become NaN
    and are masked out downstream. An empty ``y`` yields empty arrays.
    """
    y_values = _resolve_input(y, key="y", data=data)
    if y_values is None:
        raise PlotDataError("y input is required")
    y_arr = _coerce_1d_numeric(y_values, label="y")

    if x is None:
        x_arr = np.arange(y_arr.size, dtype=np.float64)
    else:
        x_values = _resolve_input(x, key="x", data=data)
        x_arr = _coerce_1d_numeric(x_values, label="x")

    if x_arr.shape != y_arr.shape:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
    return x_arr, y_arr


def normalize_pairs(points: Any) -> tuple[np.ndarray, np.ndarray]:
    """Split a sequence of ``(x, y)`` pairs (or an (N, 2) array/tensor) into arrays."""
    if torch is not None and isinstance(points, torch.Tensor):
        points = points.detach().cpu().to(torch.float64).numpy()
    if isinstance(points, np.ndarray):
        arr = points
        if arr.size == 0:
            return np.empty(0, dtype=np.float64), np.empty(0, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise PlotDataError(f"points must have shape (N, 2), got {arr.shape}")
        return (
            _coerce_ndarray(arr[:, 0], label="x"),
            _coerce_ndarray(arr[:, 1], label="y"),
        )
    if not isinstance(points, Sequence) or isinstance(points, (str, bytes, bytearray)):
        raise PlotDataError(f"unsupported points input type: {type(points)!r}")

    xs: list[Any] = []
    ys: list[Any] = []
    for i, pair in enumerate(points):
        try:
            px, py = pair
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"point at index {i} is not an (x, y) pair: {pair!r}") from exc
        xs.append(px)
        ys.append(py)
    return (
        _coerce_ndarray(np.asarray(xs, dtype=object), label="x"),
        _coerce_ndarray(np.asarray(ys, dtype=object), label="y"),
    )


def _resolve_input(value: Any, key: str, data: Any) -> Any:
    if data is not None:
        if pd is None:
            raise PlotDataError("pandas is required when using `data=`")
        if not isinstance(data, pd.DataFrame):
            raise PlotDataError("`data` must be a pandas DataFrame")
        if isinstance(value, str):
            if value not in data.columns:
                raise PlotDataError(f"column not found: {value}")
            return data[value]
        if value is None:
            if key == "y":
                numeric_cols = [c for c in data.columns if _is_numeric_dtype(data[c])]
                if len(numeric_cols) != 1:
                    raise PlotDataError("when y is omitted, data must have exactly one numeric column")
                return data[numeric_cols[0]]
            return None
        return value

    if pd is not None and isinstance(value, pd.DataFrame):
        numeric_cols = [c for c in value.columns if _is_numeric_dtype(value[c])]
        if len(numeric_cols) != 1:
            raise PlotDataError("DataFrame input must contain exactly one numeric column")
        return value[numeric_cols[0]]

    return value


def _is_numeric_dtype(column: Any) -> bool:
    if pd is None:
        return False
    return bool(pd.api.types.is_numeric_dtype(column))


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return _coerce_ndarray(tensor.to(torch.float64).numpy(), label=label)

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        arr = np.asarray(value, dtype=object)
        if arr.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(arr, label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        if isinstance(raw, (str, bytes)):
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}")
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
