"""
Record builders shared by the pyplot and plotnine processors.

Both paradigms end up with the same normalized points; these helpers own
the rules that must not drift between them (reference line endpoints,
smoother normalization, heatmap row order, box records).
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from rendering.scales import format_value, to_number

RANGE_PADDING = 0.05
DENSITY_GRID_POINTS = 512


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def sort_pairs(pairs: list[tuple], *keys: str) -> list[tuple]:
    """Stable sort of ``(point, selector)`` pairs by point fields, ascending."""
    return sorted(pairs, key=lambda pair: tuple(_sort_key(pair[0].get(k)) for k in keys))


def _sort_key(value: Any) -> tuple:
    # Strings compare lexicographically; numbers before strings so mixed keys never raise
    if isinstance(value, str):
        return (1, value, 0)
    return (0, "", value if value is not None else 0)


# ---------------------------------------------------------------------------
# Reference lines
# ---------------------------------------------------------------------------

def padded_range(values: Sequence, padding: float = RANGE_PADDING) -> Optional[tuple[float, float]]:
    """(min, max) of the finite values, widened by *padding* of the span on each side."""
    arr = np.asarray([v for v in values if v is not None], dtype=float)
    arr = arr[np.isfinite(arr)] if arr.size else arr
    if arr.size == 0:
        return None
    lo, hi = float(arr.min()), float(arr.max())
    span = hi - lo
    if span == 0:
        span = abs(lo) or 1.0
    return lo - padding * span, hi + padding * span


def reference_line_points(
    kind: str,
    host_range: Optional[tuple[float, float]],
    value: Optional[float] = None,
    slope: Optional[float] = None,
    intercept: Optional[float] = None,
) -> list[dict]:
    """Two endpoints of a reference line across the host data range.

    kind "h": constant y = value across the x range.
    kind "v": constant x = value across the y range.
    kind "ab": y = intercept + slope * x at both ends of the x range.
    """
    if host_range is None:
        return []
    lo, hi = host_range
    if kind == "h" and value is not None:
        return [{"x": to_number(lo), "y": to_number(value)},
                {"x": to_number(hi), "y": to_number(value)}]
    if kind == "v" and value is not None:
        return [{"x": to_number(value), "y": to_number(lo)},
                {"x": to_number(value), "y": to_number(hi)}]
    if kind == "ab" and slope is not None and intercept is not None:
        return [{"x": to_number(x), "y": to_number(intercept + slope * x)} for x in (lo, hi)]
    return []


# ---------------------------------------------------------------------------
# Smoothers
# ---------------------------------------------------------------------------

def _xy_points(x, y) -> list[dict]:
    x = np.asarray(x).ravel()
    y = np.asarray(y).ravel()
    if x.size != y.size:
        return []
    return [{"x": to_number(a), "y": to_number(b)} for a, b in zip(x, y)]


def normalize_smooth(obj: Any, y: Any = None) -> list[dict]:
    """Normalize a smoother's output to an ordered ``[{x, y}]`` list.

    Accepts an (x, y) pair (also as two arguments), an object with ``x``
    and ``y`` attributes, a mapping with "x"/"y" keys, a two-column array
    (``lowess`` output) or a ``gaussian_kde``-style callable carrying
    ``dataset``. Anything else yields an empty list.
    """
    if obj is None:
        return []
    if y is not None:
        return _xy_points(obj, y)
    if isinstance(obj, dict):
        if "x" in obj and "y" in obj:
            return _xy_points(obj["x"], obj["y"])
        return []
    if hasattr(obj, "dataset") and callable(obj):
        data = np.asarray(obj.dataset, dtype=float).ravel()
        if data.size == 0:
            return []
        lo, hi = padded_range(data, padding=0.1)
        grid = np.linspace(lo, hi, DENSITY_GRID_POINTS)
        return _xy_points(grid, obj(grid))
    if hasattr(obj, "x") and hasattr(obj, "y") and not isinstance(obj, np.ndarray):
        return _xy_points(obj.x, obj.y)
    if isinstance(obj, (list, tuple)) and len(obj) == 2 and not np.isscalar(obj[0]):
        return _xy_points(obj[0], obj[1])
    arr = np.asarray(obj) if isinstance(obj, (np.ndarray, list, tuple)) else None
    if arr is not None and arr.ndim == 2 and arr.shape[1] == 2:
        return _xy_points(arr[:, 0], arr[:, 1])
    return []


# ---------------------------------------------------------------------------
# Heatmaps
# ---------------------------------------------------------------------------

def heatmap_data(matrix, x_labels: Sequence, y_labels: Sequence, fill_label: str = "value") -> dict:
    """Heatmap payload with rows in reverse of the matrix's own row order.

    The first data row is drawn at the bottom, so the last matrix row comes
    first when reading top to bottom.
    """
    values = np.asarray(matrix, dtype=object)
    if values.ndim != 2:
        return {"points": [], "x": [], "y": [], "fill_label": fill_label}
    rows = [[to_number(v) for v in row] for row in values.tolist()]
    return {
        "points": rows[::-1],
        "x": [format_value(v) for v in x_labels],
        "y": [format_value(v) for v in list(y_labels)[::-1]],
        "fill_label": fill_label,
    }


# ---------------------------------------------------------------------------
# Boxes
# ---------------------------------------------------------------------------

def box_record(fill: Any, low: float, q1: float, q2: float, q3: float, high: float,
               outliers: Sequence = ()) -> dict:
    """Five-number summary plus outliers split at the whisker ends."""
    outliers = [float(v) for v in outliers if v is not None]
    return {
        "fill": format_value(fill),
        "lowerOutliers": [to_number(v) for v in sorted(v for v in outliers if v < low)],
        "min": to_number(low),
        "q1": to_number(q1),
        "q2": to_number(q2),
        "q3": to_number(q3),
        "max": to_number(high),
        "upperOutliers": [to_number(v) for v in sorted(v for v in outliers if v > high)],
    }


def series_name(name: Any, position: int, matrix_columns: bool = False) -> str:
    """Series label, with "Series N" / "Col N" for unnamed series (1-based N)."""
    if name is None or (isinstance(name, str) and (not name or name.startswith("_"))):
        return f"Col {position}" if matrix_columns else f"Series {position}"
    return format_value(name)


def nest_by_series(pairs: list[tuple]) -> tuple[list, list]:
    """Split ``(point, selector)`` pairs sorted by fill into per-series data and selectors."""
    data: list[list] = []
    selectors: list[list] = []
    current = object()
    for point, selector in pairs:
        if point["fill"] != current:
            current = point["fill"]
            data.append([])
            selectors.append([])
        data[-1].append(point)
        selectors[-1].append(selector)
    if any(sel is None for row in selectors for sel in row):
        selectors = []
    return data, selectors
