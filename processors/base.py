"""
Layer processor base classes.

A processor turns one detected layer into a LayerResult: data points in
the normalized schema plus CSS selectors into the rendered SVG. Paired
processors build ``(data point, selector)`` tuples and only split them
when the result is produced, so reordering the data can never detach a
point from the element that draws it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from core.types import ChartType, LayerDescriptor, LayerResult


@dataclass
class ProcessingContext:
    """Everything a processor may read for one layer (and one panel).

    Attributes:
        plot: The user's plot object (plotnine), or None.
        built: Built copy of the plot (plotnine), or None.
        tree: Root of the rendered tree, shared by every layer of the plot.
        panel: PANEL number being processed (1 for unfaceted plots).
        scale_mapping: Discrete x position → label table for this panel.
        group: PlotGroup the layer belongs to (pyplot).
        call: RecordedCall the layer was detected from (pyplot).
        axes: matplotlib Axes the layer is drawn on.
        labels: Resolved ``{"title", "x", "y"}`` text.
    """
    plot: Any = None
    built: Any = None
    tree: Any = None
    panel: Optional[int] = None
    scale_mapping: Optional[dict] = None
    group: Any = None
    call: Any = None
    axes: Any = None
    labels: dict = field(default_factory=dict)


class LayerProcessor:
    """Base class: one instance per layer, created by a processor factory."""

    chart_type = ChartType.UNKNOWN

    def __init__(self, descriptor: LayerDescriptor):
        self.descriptor = descriptor

    @property
    def layer_index(self) -> int:
        return self.descriptor.index

    # ---- contract -----------------------------------------------------------

    def extract_data(self, ctx: ProcessingContext) -> Any:
        raise NotImplementedError(f"{type(self).__name__} does not implement extract_data()")

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        raise NotImplementedError(f"{type(self).__name__} does not implement generate_selectors()")

    def needs_reordering(self) -> bool:
        return False

    def reorder_layer_data(self, rows: list, ctx: ProcessingContext) -> list:
        return rows

    # ---- metadata -----------------------------------------------------------

    def extract_title(self, ctx: ProcessingContext) -> str:
        return ctx.labels.get("title", "") if ctx is not None else ""

    def extract_axes(self, ctx: ProcessingContext) -> dict:
        labels = ctx.labels if ctx is not None else {}
        return {"x": labels.get("x", ""), "y": labels.get("y", "")}

    def result_options(self, ctx: ProcessingContext) -> dict:
        """Extra LayerResult fields (orientation, dom_mapping) for this layer."""
        return {}

    def process(self, ctx: ProcessingContext) -> LayerResult:
        return LayerResult(
            type=self.chart_type,
            data=self.extract_data(ctx),
            selectors=self.generate_selectors(ctx),
            title=self.extract_title(ctx),
            axes=self.extract_axes(ctx),
            **self.result_options(ctx),
        )


class PairedLayerProcessor(LayerProcessor):
    """Processor whose data and selectors are bound one-to-one."""

    def build_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        """``(data point, selector or None)`` in rendered order."""
        raise NotImplementedError(f"{type(self).__name__} does not implement build_pairs()")

    def _ordered_pairs(self, ctx: ProcessingContext) -> list[tuple]:
        if ctx is None:
            return []
        pairs = self.build_pairs(ctx)
        if self.needs_reordering():
            pairs = self.reorder_layer_data(pairs, ctx)
        return pairs

    def extract_data(self, ctx: ProcessingContext) -> list:
        return [point for point, _ in self._ordered_pairs(ctx)]

    def generate_selectors(self, ctx: ProcessingContext) -> list:
        selectors = [sel for _, sel in self._ordered_pairs(ctx)]
        return [] if any(sel is None for sel in selectors) else selectors

    def process(self, ctx: ProcessingContext) -> LayerResult:
        return LayerResult.from_pairs(
            self.chart_type,
            self._ordered_pairs(ctx),
            title=self.extract_title(ctx),
            axes=self.extract_axes(ctx),
            **self.result_options(ctx),
        )
