from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd

from plotlayout.errors import PlotDataError
from plotlayout.series import SeriesData


def normalize_xy(
    y: Any = None,
    *,
    x: Any = None,
    data: Any = None,
    source_name: str | None = None,
) -> SeriesData:
    y_values = _resolve_input(y, key="y", data=data)
    if y_values is None:
        raise PlotDataError("y input is required")

    y_arr = coerce_1d(y_values, label="y")
    if y_arr.size == 0:
        raise PlotDataError("empty series")

    if x is None:
        x_arr = np.arange(y_arr.size, dtype=np.float64)
    else:
        x_arr = coerce_1d(_resolve_input(x, key="x", data=data), label="x")

    if x_arr.shape != y_arr.shape:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")

    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    if not np.any(mask):
        raise PlotDataError("series contains no finite points")

    return SeriesData(x=x_arr, y=y_arr, mask=mask, source_name=source_name)


def normalize_values(*columns: tuple[str, Any], data: Any = None) -> list[np.ndarray]:
    """Coerce several same-length columns, e.g. ``("x", x), ("lo", lo)``."""
    arrays = [coerce_1d(_resolve_input(value, key=label, data=data), label=label) for label, value in columns]
    if not arrays or arrays[0].size == 0:
        raise PlotDataError("empty series")
    first_label = columns[0][0]
    for (label, _), arr in zip(columns[1:], arrays[1:]):
        if arr.shape != arrays[0].shape:
            raise PlotDataError(f"{first_label} and {label} length mismatch: {arrays[0].size} != {arr.size}")
    return arrays


def _resolve_input(value: Any, key: str, data: Any) -> Any:
    if data is not None:
        if not isinstance(data, pd.DataFrame):
            raise PlotDataError("`data` must be a pandas DataFrame")
        if isinstance(value, str):
            if value not in data.columns:
                raise PlotDataError(f"column not found: {value}")
            return data[value]
        if value is None:
            if key == "y":
                numeric_cols = [c for c in data.columns if pd.api.types.is_numeric_dtype(data[c])]
                if len(numeric_cols) != 1:
                    raise PlotDataError("when y is omitted, data must have exactly one numeric column")
                return data[numeric_cols[0]]
            return None
        return value

    if isinstance(value, pd.DataFrame):
        numeric_cols = [c for c in value.columns if pd.api.types.is_numeric_dtype(value[c])]
        if len(numeric_cols) != 1:
            raise PlotDataError(f"DataFrame input for {key} must contain exactly one numeric column")
        return value[numeric_cols[0]]

    return value


def coerce_1d(value: Any, *, label: str) -> np.ndarray:
    if isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(value, dtype=object), label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D")
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
