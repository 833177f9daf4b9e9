"""Smoothers and density curves drawn with ``plot`` (label names the smoother)."""

from __future__ import annotations

import re

from core.types import ChartType
from processors.base import ProcessingContext
from processors.records import normalize_smooth
from rendering.tree import build_child_selector
from .base import PyplotGroupedProcessor

SMOOTH_LABEL = re.compile(r"lowess|loess|smooth|density|kde|spline", re.IGNORECASE)


def is_smooth_call(call) -> bool:
    label = call.args.named.get("label")
    return isinstance(label, str) and bool(SMOOTH_LABEL.search(label))


def smooth_points(call) -> list[dict]:
    """The smoother curve from the call's data arguments."""
    data = [a for a in call.args.positional if not isinstance(a, str)]
    if len(data) >= 2:
        return normalize_smooth(data[0], data[1])
    if len(data) == 1:
        return normalize_smooth(data[0])
    return []


class SmoothLayerProcessor(PyplotGroupedProcessor):
    chart_type = ChartType.SMOOTH

    def extract_data(self, ctx: ProcessingContext) -> list:
        if ctx is None or ctx.call is None:
            return []
        return smooth_points(ctx.call)

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        if ctx is None or ctx.call is None:
            return []
        nodes = [n for n in self.rendered_nodes(ctx, "lines") if n]
        return [build_child_selector(nodes[0], "path")] if nodes else []
