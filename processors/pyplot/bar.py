"""Bar charts drawn with ``Axes.bar`` / ``Axes.barh``."""

from __future__ import annotations

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import sort_pairs
from rendering.scales import axis_category_labels, format_value, to_number
from rendering.tree import build_child_selector
from .base import PyplotLayerProcessor, as_array


def is_horizontal(call) -> bool:
    return call.function_name == "barh" or call.args.named.get("orientation") == "horizontal"


def bar_values(call, axes=None) -> tuple[list[str], list]:
    """Category labels and values of one bar call, broadcast to equal length."""
    horizontal = is_horizontal(call)
    if horizontal:
        positions = as_array(call.args.get("y", 0))
        values = as_array(call.args.get("width", 1))
    else:
        positions = as_array(call.args.get("x", 0))
        values = as_array(call.args.get("height", 1))
    if len(values) == 1 and len(positions) > 1:
        values = values.repeat(len(positions))
    if len(positions) == 1 and len(values) > 1:
        positions = positions.repeat(len(values))
    n = min(len(positions), len(values))
    positions, values = positions[:n], values[:n]

    if any(isinstance(p, str) for p in positions):
        labels = [format_value(p) for p in positions]
    else:
        axis = None
        if axes is not None:
            axis = axes.yaxis if horizontal else axes.xaxis
        labels = axis_category_labels(axis, positions)
    return labels, [to_number(v) for v in values]


class BarLayerProcessor(PyplotLayerProcessor):
    """One point per bar, sorted by category label."""

    chart_type = ChartType.BAR

    def needs_reordering(self) -> bool:
        return True

    def reorder_layer_data(self, rows: list, ctx: ProcessingContext) -> list:
        return sort_pairs(rows, "x")

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        call = ctx.call
        if call is None:
            return []
        labels, values = bar_values(call, ctx.axes or call.axes)
        nodes = self.rendered_nodes(ctx, "rect")
        pairs = []
        for i, (label, value) in enumerate(zip(labels, values)):
            name = nodes[i] if i < len(nodes) else None
            selector = build_child_selector(name, "path") if name else None
            pairs.append(({"x": label, "y": value}, selector))
        return pairs

    def result_options(self, ctx: ProcessingContext) -> dict:
        if ctx is not None and ctx.call is not None and is_horizontal(ctx.call):
            return {"orientation": "horz"}
        return {}
