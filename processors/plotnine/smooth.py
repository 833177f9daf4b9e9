"""Smoothers and density curves: ``geom_smooth`` / ``geom_density``."""

from __future__ import annotations

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import normalize_smooth
from rendering.tree import build_child_selector
from .base import PlotnineGroupedProcessor
from .line import split_groups


class SmoothLayerProcessor(PlotnineGroupedProcessor):
    """The fitted curve per group; the confidence band is not addressed."""

    chart_type = ChartType.SMOOTH

    def extract_data(self, ctx: ProcessingContext) -> list:
        if ctx is None:
            return []
        data = self.layer_data(ctx)
        if not {"x", "y"} <= set(data.columns):
            return []
        groups = split_groups(data)
        curves = [normalize_smooth(rows["x"].to_numpy(), rows["y"].to_numpy()) for _, rows in groups]
        if len(curves) == 1:
            return curves[0]
        names = self.series_names(ctx, groups)
        return [[{**p, "fill": name} for p in points] for name, points in zip(names, curves)]

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        if ctx is None:
            return []
        nodes = self.layer_nodes(ctx, "lines")
        if nodes:
            return [build_child_selector(name, "path") for name in nodes]
        polygons = self.layer_nodes(ctx, "polygon")
        return [build_child_selector(polygons[0], "path")] if polygons else []
