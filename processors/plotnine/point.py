"""Scatter plots: ``geom_point`` / ``geom_jitter``."""

from __future__ import annotations

from core.types import ChartType
from processors.base import ProcessingContext
from rendering.scales import to_number
from rendering.tree import build_child_selector
from .base import PlotnineGroupedProcessor, color_text, position_label


class PointLayerProcessor(PlotnineGroupedProcessor):
    """Points in data order; a colour field only when colour is mapped."""

    chart_type = ChartType.POINT

    def extract_data(self, ctx: ProcessingContext) -> list:
        if ctx is None:
            return []
        data = self.layer_data(ctx)
        colored = self.mapped_column(ctx, "colour") is not None or self.mapped_column(ctx, "color") is not None
        points = []
        for row in data.to_dict("records"):
            x = row.get("x")
            x = position_label(x, ctx.scale_mapping) if ctx.scale_mapping else to_number(x)
            point = {"x": x, "y": to_number(row.get("y"))}
            color = color_text(row.get("colour")) if colored else None
            if color is not None:
                point["color"] = color
            points.append(point)
        return points

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        if ctx is None:
            return []
        nodes = self.layer_nodes(ctx, "points")
        if not nodes:
            return []
        tag = "use" if len(self.layer_data(ctx)) > 1 else "path"
        return [build_child_selector(name, tag, direct=False) for name in nodes]
