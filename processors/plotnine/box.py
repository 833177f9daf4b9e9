"""
Box plots: ``geom_boxplot``.

Each box is drawn as its outliers (if any), the two whiskers as one
segment collection (upper first), the box polygon, then the median
segment. Boxes are drawn in group order.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import box_record
from rendering.tree import build_child_selector
from .base import PlotnineLayerProcessor, position_label


def _outliers(value) -> list:
    if value is None:
        return []
    return [v for v in np.asarray(value, dtype=float).ravel() if np.isfinite(v)]


def _at(nodes: list, i: int) -> Optional[str]:
    return nodes[i] if 0 <= i < len(nodes) else None


class BoxplotLayerProcessor(PlotnineLayerProcessor):
    """One summary record per box, in category order."""

    chart_type = ChartType.BOX

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        data = self.layer_data(ctx)
        if "group" in data.columns:
            data = data.sort_values("group", kind="stable")
        polygons = self.layer_nodes(ctx, "polygon")
        segments = self.layer_nodes(ctx, "segments")
        points = self.layer_nodes(ctx, "points")

        pairs = []
        n_outlier_sets = 0
        for k, row in enumerate(data.to_dict("records")):
            outliers = _outliers(row.get("outliers"))
            record = box_record(
                position_label(row.get("x"), ctx.scale_mapping),
                row.get("ymin"), row.get("lower"), row.get("middle"),
                row.get("upper"), row.get("ymax"), outliers,
            )
            outlier_node = None
            if outliers:
                outlier_node = _at(points, n_outlier_sets)
                n_outlier_sets += 1
            box = _at(polygons, k)
            whiskers = _at(segments, 2 * k)
            median = _at(segments, 2 * k + 1)
            selector = None
            if box is not None and whiskers is not None and median is not None:
                outlier_sel = build_child_selector(outlier_node, "use", direct=False) if outlier_node else None
                selector = {
                    "lowerOutliers": [outlier_sel] if outlier_sel and record["lowerOutliers"] else [],
                    "min": build_child_selector(whiskers, "path", nth=2),
                    "iq": build_child_selector(box, "path"),
                    "q2": build_child_selector(median, "path"),
                    "max": build_child_selector(whiskers, "path", nth=1),
                    "upperOutliers": [outlier_sel] if outlier_sel and record["upperOutliers"] else [],
                }
            pairs.append((record, selector))
        return pairs

    def result_options(self, ctx: ProcessingContext) -> dict:
        coord = getattr(ctx.built, "coordinates", None) if ctx is not None else None
        return {"orientation": "horz" if type(coord).__name__ == "coord_flip" else "vert"}
