"""
Grouped bars: ``geom_bar``/``geom_col`` with a fill and a dodge position.

Series names come back from the fill scale: every drawn colour is looked
up among the colours the scale assigns to its limits.
"""

from __future__ import annotations

from typing import Optional

from core.types import ChartType, LayerResult
from processors.base import ProcessingContext
from processors.records import nest_by_series, series_name, sort_pairs
from rendering.scales import to_number
from .bar import bar_rows, rect_selector
from .base import PlotnineLayerProcessor, color_text, position_label, scale_legend


class SeriesBarProcessor(PlotnineLayerProcessor):
    """Bars keyed by (fill series, category); nested series → categories."""

    def bar_value(self, row: dict):
        return to_number(row.get("y"))

    def needs_reordering(self) -> bool:
        return True

    def reorder_layer_data(self, rows: list, ctx: ProcessingContext) -> list:
        return sort_pairs(rows, "fill", "x")

    def fill_names(self, ctx: ProcessingContext, rows: list[dict]) -> list[str]:
        legend = scale_legend(ctx.built, "fill")
        seen: dict[Optional[str], str] = {}
        names = []
        for row in rows:
            color = color_text(row.get("fill"))
            if color in legend:
                names.append(legend[color])
                continue
            if color not in seen:
                seen[color] = series_name(None, len(seen) + 1)
            names.append(seen[color])
        return names

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        rows = bar_rows(self, ctx)
        names = self.fill_names(ctx, [row for row, _ in rows])
        name = self.first_node(ctx, "polygon")
        pairs = []
        for (row, k), fill in zip(rows, names):
            point = {
                "x": position_label(row.get("x"), ctx.scale_mapping),
                "y": self.bar_value(row),
                "fill": fill,
            }
            pairs.append((point, rect_selector(name, k)))
        return pairs

    def extract_data(self, ctx: ProcessingContext) -> list:
        return nest_by_series(self._ordered_pairs(ctx))[0]

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        return nest_by_series(self._ordered_pairs(ctx))[1]

    def extract_axes(self, ctx: ProcessingContext) -> dict:
        axes = super().extract_axes(ctx)
        axes["fill"] = ctx.labels.get("fill", "") if ctx is not None else ""
        return axes

    def process(self, ctx: ProcessingContext) -> LayerResult:
        data, selectors = nest_by_series(self._ordered_pairs(ctx))
        return LayerResult(
            type=self.chart_type,
            data=data,
            selectors=selectors,
            title=self.extract_title(ctx),
            axes=self.extract_axes(ctx),
        )


class DodgedBarLayerProcessor(SeriesBarProcessor):
    chart_type = ChartType.DODGED_BAR
