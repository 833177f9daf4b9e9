"""
Line charts: ``plot`` (HIGH), ``lines`` (plot on a charted axes) and the
reference lines ``axhline`` / ``axvline`` / ``axline``.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np
from matplotlib.collections import PathCollection
from matplotlib.lines import Line2D
from matplotlib.patches import Rectangle

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import padded_range, reference_line_points, series_name
from rendering.scales import format_value, to_number
from rendering.tree import build_child_selector
from .base import PyplotGroupedProcessor, iter_artists

REFERENCE_LINES = frozenset({"axhline", "axvline", "axline"})


def _numeric(values) -> list[float]:
    out = []
    for v in np.asarray(values, dtype=object).ravel():
        try:
            out.append(float(v))
        except (TypeError, ValueError):
            continue
    return out


def host_data_range(group, axis: str = "x") -> Optional[tuple[float, float]]:
    """Padded data range of the group's chart along *axis* ("x" or "y")."""
    if group is None:
        return None
    values: list[float] = []
    for artist in iter_artists(group.high_call.result):
        if isinstance(artist, Line2D):
            values += _numeric(artist.get_xdata() if axis == "x" else artist.get_ydata())
        elif isinstance(artist, PathCollection):
            offsets = np.asarray(artist.get_offsets())
            if offsets.ndim == 2 and len(offsets):
                values += _numeric(offsets[:, 0 if axis == "x" else 1])
        elif isinstance(artist, Rectangle):
            if axis == "x":
                values += [artist.get_x(), artist.get_x() + artist.get_width()]
            else:
                values += [artist.get_y(), artist.get_y() + artist.get_height()]
    return padded_range(values)


def reference_points(call, group) -> list[dict]:
    """Two endpoints for an axhline/axvline/axline call."""
    name = call.function_name
    if name == "axhline":
        return reference_line_points("h", host_data_range(group, "x"), value=call.args.get("y", 0, 0))
    if name == "axvline":
        return reference_line_points("v", host_data_range(group, "y"), value=call.args.get("x", 0, 0))
    xy1 = call.args.get("xy1", 0)
    xy2 = call.args.get("xy2", 1)
    slope = call.args.get("slope")
    if xy1 is None:
        return []
    x1, y1 = float(xy1[0]), float(xy1[1])
    if xy2 is not None:
        x2, y2 = float(xy2[0]), float(xy2[1])
        if x1 == x2:
            return reference_line_points("v", host_data_range(group, "y"), value=x1)
        slope = (y2 - y1) / (x2 - x1)
    if slope is None:
        return []
    return reference_line_points("ab", host_data_range(group, "x"),
                                 slope=float(slope), intercept=y1 - float(slope) * x1)


def _is_matrix_call(call) -> bool:
    positional = [a for a in call.args.positional if not isinstance(a, str)]
    y = positional[1] if len(positional) > 1 else (positional[0] if positional else None)
    return y is not None and np.ndim(y) == 2


def line_series(call) -> list[tuple[Any, list[dict]]]:
    """``(label, points)`` per Line2D the call drew, x stringified."""
    series = []
    for artist in iter_artists(call.result):
        if not isinstance(artist, Line2D):
            continue
        xs = np.asarray(artist.get_xdata(), dtype=object).ravel()
        ys = np.asarray(artist.get_ydata(), dtype=object).ravel()
        points = [{"x": format_value(x), "y": to_number(y)} for x, y in zip(xs, ys)]
        series.append((artist.get_label(), points))
    return series


class LineLayerProcessor(PyplotGroupedProcessor):
    """Single line, multiline (one sequence per series) or reference line."""

    chart_type = ChartType.LINE

    def extract_data(self, ctx: ProcessingContext) -> list:
        call = ctx.call if ctx is not None else None
        if call is None:
            return []
        if call.function_name in REFERENCE_LINES:
            return reference_points(call, ctx.group)
        series = line_series(call)
        if len(series) == 1:
            return series[0][1]
        matrix = _is_matrix_call(call)
        data = []
        for position, (label, points) in enumerate(series, start=1):
            fill = series_name(label, position, matrix_columns=matrix)
            data.append([{**p, "fill": fill} for p in points])
        return data

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        if ctx is None or ctx.call is None:
            return []
        nodes = self.rendered_nodes(ctx, "lines")
        if not nodes or any(n is None for n in nodes):
            return []
        return [build_child_selector(name, "path") for name in nodes]
