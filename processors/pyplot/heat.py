"""Heatmaps drawn with ``imshow``/``matshow`` or ``pcolormesh``/``pcolor``."""

from __future__ import annotations

import numpy as np
import pandas as pd
from matplotlib.image import AxesImage

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import heatmap_data
from rendering.scales import axis_category_labels, format_value
from rendering.tree import build_child_selector, build_css_selector
from .base import PyplotGroupedProcessor, iter_artists

IMAGE_CALLS = frozenset({"imshow", "matshow"})


def heat_matrix(call):
    """The value matrix a heatmap call was given (DataFrame kept as-is)."""
    if call.function_name == "imshow":
        return call.args.get("X", 0)
    if call.function_name == "matshow":
        return call.args.get("Z", 0)
    if "C" in call.args.named:
        return call.args.named["C"]
    positional = call.args.positional
    if len(positional) in (1, 3):
        return positional[-1]
    return None


def heat_labels(call, matrix, axes) -> tuple[list, list]:
    """Column and row labels: DataFrame labels, fixed tick labels, else indices."""
    if isinstance(matrix, pd.DataFrame):
        return list(matrix.columns), list(matrix.index)
    nrows, ncols = np.shape(matrix)[:2]
    # Cell centres sit on integers for images, half-integers for meshes without coordinates
    offset = 0.0 if call.function_name in IMAGE_CALLS else 0.5
    cols = [j + offset for j in range(ncols)]
    rows = [i + offset for i in range(nrows)]
    return (_tick_or_index(axes.xaxis if axes is not None else None, cols),
            _tick_or_index(axes.yaxis if axes is not None else None, rows))


def _tick_or_index(axis, positions: list) -> list[str]:
    labels = axis_category_labels(axis, positions)
    return [label if label != format_value(pos) else str(i)
            for i, (label, pos) in enumerate(zip(labels, positions))]


class HeatmapLayerProcessor(PyplotGroupedProcessor):
    """Matrix data; rows emitted last-first and traversed by row."""

    chart_type = ChartType.HEAT

    def extract_data(self, ctx: ProcessingContext) -> dict:
        call = ctx.call if ctx is not None else None
        matrix = heat_matrix(call) if call is not None else None
        if matrix is None or np.ndim(matrix) != 2:
            return heatmap_data([], [], [])
        x_labels, y_labels = heat_labels(call, matrix, ctx.axes or call.axes)
        values = matrix.to_numpy() if isinstance(matrix, pd.DataFrame) else np.asarray(matrix)
        fill = call.args.named.get("label") or ctx.labels.get("fill") or "value"
        return heatmap_data(values, x_labels, y_labels, fill_label=str(fill))

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        if ctx is None or ctx.call is None:
            return []
        nodes = self.rendered_nodes(ctx, "image")
        if not nodes or nodes[0] is None:
            return []
        artist = next(iter(iter_artists(ctx.call.result)), None)
        if isinstance(artist, AxesImage):
            # The SVG backend puts an image's gid on the <image> element itself
            return [build_css_selector(nodes[0], "image")]
        return [build_child_selector(nodes[0], "path")]

    def result_options(self, ctx: ProcessingContext) -> dict:
        return {"dom_mapping": {"order": "row"}}
