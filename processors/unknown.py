"""Processor for layers no chart type matched: empty data, empty selectors."""

from core.types import ChartType
from .base import LayerProcessor, ProcessingContext

DEFAULT_TITLE = "Unknown Plot Type"
DEFAULT_AXES = {"x": "X", "y": "Y"}


class UnknownLayerProcessor(LayerProcessor):
    chart_type = ChartType.UNKNOWN

    def extract_data(self, ctx: ProcessingContext) -> list:
        return []

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        return []

    def extract_title(self, ctx: ProcessingContext) -> str:
        return super().extract_title(ctx) or DEFAULT_TITLE

    def extract_axes(self, ctx: ProcessingContext) -> dict:
        axes = super().extract_axes(ctx)
        return {k: axes.get(k) or DEFAULT_AXES[k] for k in DEFAULT_AXES}
