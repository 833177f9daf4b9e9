"""Box plots drawn with ``Axes.boxplot``."""

from __future__ import annotations

from typing import Optional

from matplotlib import cbook

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import box_record
from rendering.tree import build_child_selector
from .base import PyplotLayerProcessor


def is_vertical(call) -> bool:
    named = call.args.named
    if named.get("orientation") == "horizontal":
        return False
    return named.get("vert", True) is not False


def box_stats(call) -> list[dict]:
    """Statistics per box, computed the way ``Axes.boxplot`` does."""
    data = call.args.get("x", 0)
    if data is None:
        return []
    labels = call.args.named.get("tick_labels", call.args.named.get("labels"))
    whis = call.args.named.get("whis", 1.5)
    return cbook.boxplot_stats(data, whis=whis, labels=labels)


def _selector(name: Optional[str], tag: str = "path", direct: bool = True) -> Optional[str]:
    return build_child_selector(name, tag, direct=direct) if name else None


class BoxplotLayerProcessor(PyplotLayerProcessor):
    """One summary record per box; horizontal boxes read bottom to top."""

    chart_type = ChartType.BOX

    def needs_reordering(self) -> bool:
        return True

    def reorder_layer_data(self, rows: list, ctx: ProcessingContext) -> list:
        if ctx.call is not None and not is_vertical(ctx.call):
            return list(reversed(rows))
        return rows

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        if ctx.call is None:
            return []
        boxes = self.rendered_nodes(ctx, "polygon")
        medians = self.rendered_nodes(ctx, "segments")
        whiskers = self.rendered_nodes(ctx, "lines")
        fliers = self.rendered_nodes(ctx, "points")

        pairs = []
        for i, stats in enumerate(box_stats(ctx.call)):
            record = box_record(
                stats.get("label", i + 1),
                stats["whislo"], stats["q1"], stats["med"], stats["q3"], stats["whishi"],
                stats.get("fliers", []),
            )
            iq = _selector(boxes[i] if i < len(boxes) else None)
            outliers = _selector(fliers[i] if i < len(fliers) else None, "use", direct=False)
            selector = None
            if iq is not None:
                selector = {
                    "lowerOutliers": [outliers] if outliers and record["lowerOutliers"] else [],
                    "min": _selector(whiskers[2 * i] if 2 * i < len(whiskers) else None),
                    "iq": iq,
                    "q2": _selector(medians[i] if i < len(medians) else None),
                    "max": _selector(whiskers[2 * i + 1] if 2 * i + 1 < len(whiskers) else None),
                    "upperOutliers": [outliers] if outliers and record["upperOutliers"] else [],
                }
            pairs.append((record, selector))
        return pairs

    def result_options(self, ctx: ProcessingContext) -> dict:
        if ctx is None or ctx.call is None:
            return {}
        return {"orientation": "vert" if is_vertical(ctx.call) else "horz"}
