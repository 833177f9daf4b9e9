"""Heatmaps: ``geom_tile`` / ``geom_rect`` grids and ``geom_raster``."""

from __future__ import annotations

import pandas as pd

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import heatmap_data
from rendering.scales import format_value, plot_label
from rendering.tree import build_child_selector, build_css_selector
from .base import PlotnineGroupedProcessor


def ordered_levels(series: pd.Series) -> list:
    """Categories in scale order: categorical order, else sorted."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        return [c for c in series.cat.categories if c in set(series)]
    return sorted(series.dropna().unique(), key=lambda v: (isinstance(v, str), v))


def pivot_fill(data: pd.DataFrame, x: str, y: str, fill: str) -> tuple[list, list, list]:
    """Matrix of *fill* values with one row per y level and one column per x level."""
    x_levels = ordered_levels(data[x])
    y_levels = ordered_levels(data[y])
    cells = {}
    for row in data[[x, y, fill]].itertuples(index=False):
        cells.setdefault((format_value(row[1]), format_value(row[0])), row[2])
    matrix = [[cells.get((format_value(yv), format_value(xv))) for xv in x_levels] for yv in y_levels]
    return matrix, x_levels, y_levels


class HeatmapLayerProcessor(PlotnineGroupedProcessor):
    """Matrix data from the mapped fill column; rows emitted top row first."""

    chart_type = ChartType.HEAT

    def extract_data(self, ctx: ProcessingContext) -> dict:
        columns = [self.mapped_column(ctx, a) for a in ("x", "y", "fill")] if ctx is not None else [None]
        data = self.source_data(ctx, columns) if None not in columns else None
        if data is None:
            return heatmap_data([], [], [])
        data = self.panel_rows(ctx, data)
        x, y, fill = columns
        matrix, x_levels, y_levels = pivot_fill(data, x, y, fill)
        fill_label = plot_label(ctx.built, "fill", fill) or fill
        return heatmap_data(matrix, x_levels, y_levels, fill_label=fill_label)

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        if ctx is None:
            return []
        image = self.first_node(ctx, "image")
        if image is not None:
            return [build_css_selector(image, "image")]
        polygon = self.first_node(ctx, "polygon")
        return [build_child_selector(polygon, "path")] if polygon else []

    def result_options(self, ctx: ProcessingContext) -> dict:
        return {"dom_mapping": {"order": "row"}}
