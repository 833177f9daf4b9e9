"""Histograms: ``geom_histogram`` (stat_bin)."""

from __future__ import annotations

from core.types import ChartType
from processors.base import ProcessingContext
from rendering.scales import to_number
from .bar import bar_rows, rect_selector
from .base import PlotnineLayerProcessor


class HistogramLayerProcessor(PlotnineLayerProcessor):
    """One point per bin: centre, count and the bin's bounds."""

    chart_type = ChartType.HIST

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        name = self.first_node(ctx, "polygon")
        pairs = []
        for row, k in bar_rows(self, ctx):
            count = to_number(row.get("y"))
            point = {
                "x": to_number(row.get("x")),
                "y": count,
                "xMin": to_number(row.get("xmin")),
                "xMax": to_number(row.get("xmax")),
                "yMin": 0,
                "yMax": count,
            }
            pairs.append((point, rect_selector(name, k)))
        return pairs
