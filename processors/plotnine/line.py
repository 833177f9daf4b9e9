"""
Line charts: ``geom_line`` / ``geom_path`` / ``geom_step`` and the
reference lines ``geom_hline`` / ``geom_vline`` / ``geom_abline``.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import padded_range, reference_line_points
from rendering.scales import to_number
from rendering.tree import build_child_selector
from .base import PlotnineGroupedProcessor, position_label

REFERENCE_GEOMS = frozenset({"geom_hline", "geom_vline", "geom_abline"})

_RANGE_COLUMNS = {"x": ("x", "xmin", "xmax", "xend"), "y": ("y", "ymin", "ymax", "yend")}


def host_data_range(built, panel: int, axis: str = "x") -> Optional[tuple[float, float]]:
    """Padded range along *axis* of every non-reference layer on *panel*."""
    values: list[float] = []
    for layer in getattr(built, "layers", []):
        if type(getattr(layer, "geom", None)).__name__ in REFERENCE_GEOMS:
            continue
        data = getattr(layer, "data", None)
        if not isinstance(data, pd.DataFrame):
            continue
        if "PANEL" in data.columns:
            data = data[data["PANEL"].astype(int) == panel]
        for column in _RANGE_COLUMNS[axis]:
            if column in data.columns:
                values += list(pd.to_numeric(data[column], errors="coerce").dropna())
    return padded_range(values)


def split_groups(data: pd.DataFrame) -> list[tuple[int, pd.DataFrame]]:
    """``(group id, rows)`` in group order; ungrouped data is one group."""
    if "group" not in data.columns:
        return [(-1, data)]
    return [(int(g), rows) for g, rows in data.groupby("group", sort=True)]


class LineLayerProcessor(PlotnineGroupedProcessor):
    """Single line, one sequence per group, or a reference line."""

    chart_type = ChartType.LINE

    @property
    def is_reference(self) -> bool:
        return self.geom_name in REFERENCE_GEOMS

    def reference_data(self, ctx: ProcessingContext) -> list:
        panel = self.panel_of(ctx)
        lines = []
        for row in self.layer_data(ctx).to_dict("records"):
            if self.geom_name == "geom_hline":
                points = reference_line_points("h", host_data_range(ctx.built, panel, "x"),
                                               value=row.get("yintercept"))
            elif self.geom_name == "geom_vline":
                points = reference_line_points("v", host_data_range(ctx.built, panel, "y"),
                                               value=row.get("xintercept"))
            else:
                points = reference_line_points("ab", host_data_range(ctx.built, panel, "x"),
                                               slope=row.get("slope"), intercept=row.get("intercept"))
            lines.append(points)
        if len(lines) == 1:
            return lines[0]
        return [[{**p, "fill": f"Series {i}"} for p in points] for i, points in enumerate(lines, start=1)]

    def extract_data(self, ctx: ProcessingContext) -> list:
        if ctx is None:
            return []
        if self.is_reference:
            return self.reference_data(ctx)
        groups = split_groups(self.layer_data(ctx))
        series = [
            [{"x": position_label(r.get("x"), ctx.scale_mapping), "y": to_number(r.get("y"))}
             for r in rows.to_dict("records")]
            for _, rows in groups
        ]
        if len(groups) <= 1 or all(g == -1 for g, _ in groups):
            return series[0] if series else []
        names = self.series_names(ctx, groups)
        return [[{**p, "fill": name} for p in points] for name, points in zip(names, series)]

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        if ctx is None:
            return []
        if self.is_reference:
            name = self.first_node(ctx, "segments")
            if name is None:
                return []
            n = len(self.layer_data(ctx))
            if n == 1:
                return [build_child_selector(name, "path")]
            return [build_child_selector(name, "path", nth=k) for k in range(1, n + 1)]
        nodes = self.layer_nodes(ctx, "lines")
        if nodes:
            return [build_child_selector(name, "path") for name in nodes]
        # Lines whose colour varies along the path are drawn as one segment collection
        segments = self.layer_nodes(ctx, "segments")
        return [build_child_selector(segments[0], "path", direct=False)] if segments else []
