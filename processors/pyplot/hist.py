"""Histograms drawn with ``Axes.hist``.

A hist of several datasets becomes one series per dataset, named by its
label; stacked datasets report their own count and the bar's extent.
"""

from __future__ import annotations

import numpy as np

from core.types import ChartType, LayerResult
from processors.base import ProcessingContext
from processors.records import nest_by_series, series_name
from rendering.scales import to_number
from rendering.tree import build_child_selector
from .base import PyplotLayerProcessor


def histogram_bins(result) -> tuple[list[np.ndarray], np.ndarray]:
    """Per-dataset counts and the shared edges of an ``Axes.hist`` return value."""
    if not isinstance(result, tuple) or len(result) < 2:
        return [], np.asarray([])
    counts = np.asarray(result[0], dtype=float)
    edges = np.asarray(result[1], dtype=float)
    if counts.ndim == 1:
        return [counts], edges
    return list(counts), edges


def dataset_labels(call, n: int) -> list[str]:
    label = call.args.named.get("label")
    if isinstance(label, str):
        label = [label]
    labels = list(label) if label is not None else []
    return [series_name(labels[i] if i < len(labels) else None, i + 1) for i in range(n)]


class HistogramLayerProcessor(PyplotLayerProcessor):
    """One point per bin: centre, count and the bin's bounds."""

    chart_type = ChartType.HIST

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        if ctx.call is None:
            return []
        datasets, edges = histogram_bins(ctx.call.result)
        stacked = bool(ctx.call.args.named.get("stacked"))
        names = dataset_labels(ctx.call, len(datasets)) if len(datasets) > 1 else [None]
        nodes = self.rendered_nodes(ctx, "rect")
        pairs = []
        offset = 0
        previous = np.zeros(len(edges) - 1) if len(edges) else np.asarray([])
        for counts, fill in zip(datasets, names):
            bottoms = previous if stacked else np.zeros(len(counts))
            for i, top in enumerate(counts):
                lo, hi = edges[i], edges[i + 1]
                point = {
                    "x": to_number((lo + hi) / 2),
                    "y": to_number(top - bottoms[i]),
                    "xMin": to_number(lo),
                    "xMax": to_number(hi),
                    "yMin": to_number(bottoms[i]),
                    "yMax": to_number(top),
                }
                if fill is not None:
                    point["fill"] = fill
                name = nodes[offset] if offset < len(nodes) else None
                pairs.append((point, build_child_selector(name, "path") if name else None))
                offset += 1
            previous = counts
        return pairs

    def _is_multi(self, pairs: list[tuple]) -> bool:
        return bool(pairs) and "fill" in pairs[0][0]

    def extract_data(self, ctx: ProcessingContext) -> list:
        pairs = self._ordered_pairs(ctx)
        return nest_by_series(pairs)[0] if self._is_multi(pairs) else super().extract_data(ctx)

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        pairs = self._ordered_pairs(ctx)
        return nest_by_series(pairs)[1] if self._is_multi(pairs) else super().generate_selectors(ctx)

    def process(self, ctx: ProcessingContext) -> LayerResult:
        pairs = self._ordered_pairs(ctx)
        if not self._is_multi(pairs):
            return super().process(ctx)
        data, selectors = nest_by_series(pairs)
        return LayerResult(
            type=self.chart_type,
            data=data,
            selectors=selectors,
            title=self.extract_title(ctx),
            axes=self.extract_axes(ctx),
        )
