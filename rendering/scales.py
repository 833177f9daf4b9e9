"""
Scale and axis helpers shared by the layer processors.

Discrete positions in a built plotnine plot are integers (1..n); the
helpers here map them back to the category labels the reader sees, and
recover axis/title text from plot labels or recorded call arguments.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Optional

import numpy as np
import pandas as pd


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

def to_native(value: Any) -> Any:
    """Convert numpy/pandas scalars to plain Python; NaN/NA become None."""
    if value is None:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT or (not isinstance(value, (str, bytes, list, tuple, dict)) and pd.isna(value) is True):
        return None
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    return value


def format_value(value: Any) -> str:
    """Stringify a value the way axis labels read: ``1.0`` → ``"1"``."""
    value = to_native(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return format(value, ".15g")
    return str(value)


def to_number(value: Any) -> Any:
    """Plain Python number for numeric values, formatted string otherwise."""
    value = to_native(value)
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, float)):
        return value
    return format_value(value)


# ---------------------------------------------------------------------------
# Scale mapping
# ---------------------------------------------------------------------------

def apply_scale_mapping(values, mapping: Optional[dict] = None) -> list:
    """Replace positions with their labels; unmapped values are stringified.

    ``apply_scale_mapping([1, 2, 5], {1: "A", 2: "B", 3: "C"})``
    → ``["A", "B", "5"]``. No position is ever dropped.
    """
    values = list(values)
    if mapping is None:
        return values
    lookup = {format_value(k): v for k, v in mapping.items()}
    return [lookup.get(format_value(v), format_value(v)) for v in values]


def axis_category_labels(axis: Any, positions) -> list[str]:
    """Labels for numeric *positions* on a matplotlib axis.

    Positions that carry an explicitly set tick label (``set_xticks(x,
    labels)``) read that label; everything else is stringified.
    """
    positions = list(positions)
    fixed = {}
    formatter = axis.get_major_formatter() if axis is not None else None
    seq = getattr(formatter, "seq", None)
    if seq is not None and type(formatter).__name__ == "FixedFormatter":
        fixed = dict(zip(np.asarray(axis.get_majorticklocs(), dtype=float), seq))
    labels = []
    for pos in positions:
        label = None
        if fixed and isinstance(to_native(pos), (int, float)):
            for loc, text in fixed.items():
                if np.isclose(loc, float(pos)):
                    label = str(text)
                    break
        labels.append(label if label is not None else format_value(pos))
    return labels


def _is_discrete_scale(scale: Any) -> bool:
    return any(cls.__name__ == "scale_discrete" for cls in type(scale).__mro__)


def scale_limits(scale: Any) -> list:
    for attr in ("final_limits", "limits"):
        try:
            limits = getattr(scale, attr)
        except (AttributeError, TypeError, ValueError):
            continue
        if limits is not None and not callable(limits):
            return list(limits)
    return []


def get_panel_scale(built: Any, panel: Optional[int] = None, axis: str = "x") -> Any:
    """The x (or y) scale that applies to *panel* of a built plot."""
    layout = getattr(built, "layout", None)
    scales = getattr(layout, f"panel_scales_{axis}", None)
    if not scales:
        return None
    idx = 0
    table = getattr(layout, "layout", None)
    column = f"SCALE_{axis.upper()}"
    if panel is not None and isinstance(table, pd.DataFrame) and column in table:
        rows = table[table["PANEL"].astype(int) == int(panel)]
        if len(rows):
            idx = int(rows[column].iloc[0]) - 1
    return scales[idx] if 0 <= idx < len(scales) else scales[0]


def extract_scale_mapping(built: Any, panel: Optional[int] = None, axis: str = "x") -> Optional[dict]:
    """Position → label table of a discrete axis scale.

    Returns None for continuous scales or when the scale has no breaks.
    """
    scale = get_panel_scale(built, panel, axis)
    if scale is None or not _is_discrete_scale(scale):
        return None
    limits = scale_limits(scale)
    breaks = list(scale.get_breaks())
    if not breaks:
        return None
    labels = list(scale.get_labels(breaks))
    mapping = {}
    for brk, label in zip(breaks, labels):
        if brk in limits:
            mapping[limits.index(brk) + 1] = str(label)
    return mapping or None


# ---------------------------------------------------------------------------
# Axis and title text
# ---------------------------------------------------------------------------

def plot_label(plot: Any, key: str, default: str = "") -> str:
    """Read a label ("title", "x", "y", "fill", ...) from a plotnine plot."""
    labels = getattr(plot, "labels", None)
    if labels is None:
        return default
    getter = getattr(labels, "get", None)
    value = getter(key, None) if callable(getter) else getattr(labels, key, None)
    return default if value is None else str(value)


_LABEL_CALLS = {
    "set_title": ("title", "label"),
    "set_xlabel": ("x", "xlabel"),
    "set_ylabel": ("y", "ylabel"),
}


def resolve_call_labels(calls, axes: Any = None) -> dict:
    """Title and axis labels for an imperative chart.

    The last ``set_title``/``set_xlabel``/``set_ylabel`` call among *calls*
    wins; anything not set that way is read from the axes, then "".
    """
    labels = {"title": "", "x": "", "y": ""}
    found = set()
    for call in calls:
        entry = _LABEL_CALLS.get(call.function_name)
        if entry is None:
            continue
        key, arg = entry
        value = call.args.get(arg, 0)
        if value is not None:
            labels[key] = str(value)
            found.add(key)
    if axes is not None:
        getters = {"title": axes.get_title, "x": axes.get_xlabel, "y": axes.get_ylabel}
        for key, getter in getters.items():
            if key not in found:
                labels[key] = getter() or ""
    return labels
