"""
Grouped bar charts: one ``bar`` call per series on the same axes.

The first call is the chart's HIGH call; later ones are recorded as
``bar_series``. Data is nested series → categories, both sorted.
"""

from __future__ import annotations

from core.types import ChartType, LayerResult
from processors.base import ProcessingContext
from processors.records import nest_by_series, series_name, sort_pairs
from rendering.tree import build_child_selector
from .bar import bar_values
from .base import PyplotLayerProcessor


def series_calls(group) -> list:
    """HIGH bar call followed by every ``bar_series`` call of the group."""
    if group is None:
        return []
    return [group.high_call] + [c for c in group.low_calls if c.function_name == "bar_series"]


class DodgedBarLayerProcessor(PyplotLayerProcessor):
    chart_type = ChartType.DODGED_BAR

    def needs_reordering(self) -> bool:
        return True

    def reorder_layer_data(self, rows: list, ctx: ProcessingContext) -> list:
        return sort_pairs(rows, "fill", "x")

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        calls = series_calls(ctx.group)
        nodes = self.rendered_nodes(ctx, "rect")
        pairs = []
        offset = 0
        for position, call in enumerate(calls, start=1):
            fill = series_name(call.args.named.get("label"), position)
            labels, values = bar_values(call, ctx.axes or call.axes)
            for label, value in zip(labels, values):
                name = nodes[offset] if offset < len(nodes) else None
                selector = build_child_selector(name, "path") if name else None
                pairs.append(({"x": label, "y": value, "fill": fill}, selector))
                offset += 1
        return pairs

    def extract_data(self, ctx: ProcessingContext) -> list:
        return nest_by_series(self._ordered_pairs(ctx))[0]

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        return nest_by_series(self._ordered_pairs(ctx))[1]

    def process(self, ctx: ProcessingContext) -> LayerResult:
        data, selectors = nest_by_series(self._ordered_pairs(ctx))
        return LayerResult(
            type=self.chart_type,
            data=data,
            selectors=selectors,
            title=self.extract_title(ctx),
            axes={**self.extract_axes(ctx), "fill": ctx.labels.get("fill", "")},
        )
