"""Stacked bars: each segment's value is its height, not its top."""

from __future__ import annotations

from core.types import ChartType
from rendering.scales import to_number
from .dodged_bar import SeriesBarProcessor


class StackedBarLayerProcessor(SeriesBarProcessor):
    chart_type = ChartType.STACKED_BAR

    def bar_value(self, row: dict):
        if row.get("ymax") is not None and row.get("ymin") is not None:
            return to_number(row["ymax"] - row["ymin"])
        return to_number(row.get("y"))
