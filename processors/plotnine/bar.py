"""Simple bar charts: ``geom_bar`` / ``geom_col`` with one series."""

from __future__ import annotations

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import sort_pairs
from rendering.scales import to_number
from rendering.tree import build_child_selector
from .base import PlotnineLayerProcessor, position_label


def bar_rows(processor, ctx: ProcessingContext) -> list[tuple[dict, int]]:
    """``(row, k)`` for every drawn bar; k is the 1-based drawing position."""
    data = processor.layer_data(ctx)
    return [(row, k) for k, row in enumerate(data.to_dict("records"), start=1)]


def rect_selector(name, k: int):
    return build_child_selector(name, "path", nth=k) if name else None


class BarLayerProcessor(PlotnineLayerProcessor):
    """One point per bar, sorted by category label."""

    chart_type = ChartType.BAR

    def needs_reordering(self) -> bool:
        return True

    def reorder_layer_data(self, rows: list, ctx: ProcessingContext) -> list:
        return sort_pairs(rows, "x")

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        name = self.first_node(ctx, "polygon")
        pairs = []
        for row, k in bar_rows(self, ctx):
            point = {"x": position_label(row.get("x"), ctx.scale_mapping), "y": to_number(row.get("y"))}
            pairs.append((point, rect_selector(name, k)))
        return pairs
