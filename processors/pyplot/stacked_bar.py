"""Stacked bar charts: series drawn with ``bottom=`` (or ``left=`` for barh)."""

from core.types import ChartType
from .dodged_bar import DodgedBarLayerProcessor


def is_stacked(calls) -> bool:
    return any(
        c.args.named.get("bottom") is not None or c.args.named.get("left") is not None
        for c in calls
    )


class StackedBarLayerProcessor(DodgedBarLayerProcessor):
    """Same series/category structure as dodged bars; each value is its own segment."""

    chart_type = ChartType.STACKED_BAR
