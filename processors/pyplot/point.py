"""Scatter plots drawn with ``Axes.scatter``."""

from __future__ import annotations

import numpy as np
from matplotlib.colors import is_color_like, to_hex

from core.types import ChartType
from processors.base import ProcessingContext
from rendering.scales import format_value, to_number
from rendering.tree import build_child_selector
from .base import PyplotGroupedProcessor, as_array


def _color_text(value) -> str:
    if isinstance(value, str):
        return value
    if np.ndim(value) == 1 and is_color_like(value):
        return to_hex(value, keep_alpha=False)
    return format_value(value)


def point_colors(call, n: int) -> list[str]:
    """Colours given for the first points of a scatter call.

    A single colour applies to every point; a sequence colours only as
    many points as it has entries.
    """
    c = call.args.get("c", 3)
    if c is None:
        c = call.args.get("color")
    if c is None:
        return []
    if isinstance(c, str) or (isinstance(c, tuple) and len(c) in (3, 4) and is_color_like(c)):
        return [_color_text(c)] * n
    values = list(c) if np.ndim(c) == 2 else list(as_array(c))
    return [_color_text(v) for v in values[:n]]


def scatter_points(call) -> list[dict]:
    x = as_array(call.args.get("x", 0))
    y = as_array(call.args.get("y", 1))
    n = min(len(x), len(y))
    colors = point_colors(call, n)
    points = []
    for i in range(n):
        point = {"x": to_number(x[i]), "y": to_number(y[i])}
        if i < len(colors):
            point["color"] = colors[i]
        points.append(point)
    return points


class PointLayerProcessor(PyplotGroupedProcessor):
    """Points in call order; one selector addresses every marker of the layer."""

    chart_type = ChartType.POINT

    def extract_data(self, ctx: ProcessingContext) -> list:
        if ctx is None or ctx.call is None:
            return []
        return scatter_points(ctx.call)

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        if ctx is None or ctx.call is None:
            return []
        nodes = [n for n in self.rendered_nodes(ctx, "points") if n]
        if not nodes:
            return []
        # The SVG backend only switches to <defs>/<use> for two or more markers
        tag = "use" if len(self.extract_data(ctx)) > 1 else "path"
        return [build_child_selector(name, tag, direct=False) for name in nodes]
