"""
Plot orchestrator base class.

An orchestrator turns one plot into an AccessibleDocument: it enumerates
layer descriptors, resolves the rendered tree once, creates one processor
per layer through the paradigm's factory and runs them panel by panel.
A processor that fails only costs its own layer.
"""

from __future__ import annotations

import secrets
import time
from typing import Any, Optional

from core.logging import get_logger, log_error, set_render_id, tagged
from core.types import AccessibleDocument, ChartType, LayerDescriptor, LayerResult, Subplot
from processors.base import LayerProcessor, ProcessingContext
from processors.unknown import UnknownLayerProcessor

logger = get_logger()


def new_document_id() -> str:
    """``maidr-plot-<milliseconds>-<8 hex digits>``, unique per render."""
    return f"maidr-plot-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def subplot_id(row: int, col: int) -> str:
    return f"subplot-{row}-{col}"


def arrange_grid(cells: dict[tuple[int, int], list[LayerResult]]) -> list[list[Subplot]]:
    """Row-major grid of subplots from ``(row, col)`` (1-based) → layers."""
    grid: list[list[Subplot]] = []
    for row in sorted({r for r, _ in cells}):
        grid.append([
            Subplot(id=subplot_id(row, col), layers=cells[(row, col)])
            for col in sorted(c for r, c in cells if r == row)
        ])
    return grid


class PlotOrchestrator:
    """Base orchestrator.

    Subclasses provide ``get_layers``, ``get_rendered_tree``, the
    ``figure`` that gets saved, and ``get_combined_data``.
    """

    def __init__(self, plot: Any, adapter=None, factory=None):
        self.plot = plot
        self.adapter = adapter
        self.factory = factory
        self._processors: Optional[list[LayerProcessor]] = None

    # ---- contract -----------------------------------------------------------

    def get_layers(self) -> list[LayerDescriptor]:
        raise NotImplementedError(f"{type(self).__name__} does not implement get_layers()")

    def get_rendered_tree(self) -> Any:
        raise NotImplementedError(f"{type(self).__name__} does not implement get_rendered_tree()")

    def get_combined_data(self) -> list[list[Subplot]]:
        raise NotImplementedError(f"{type(self).__name__} does not implement get_combined_data()")

    @property
    def figure(self) -> Any:
        raise NotImplementedError(f"{type(self).__name__} does not implement figure")

    def is_faceted_plot(self) -> bool:
        return False

    def is_patchwork_plot(self) -> bool:
        return False

    # ---- shared -------------------------------------------------------------

    def create_processor(self, descriptor: LayerDescriptor) -> LayerProcessor:
        if self.factory is None:
            return UnknownLayerProcessor(descriptor)
        return self.factory.create_processor(descriptor.type, descriptor)

    def get_layer_processors(self) -> list[LayerProcessor]:
        """One processor per layer in layer order, text-only layers excluded (cached)."""
        if self._processors is None:
            self._processors = [
                self.create_processor(d) for d in self.get_layers() if d.type != ChartType.SKIP
            ]
        return self._processors

    def process_layer(self, processor: LayerProcessor, ctx: ProcessingContext) -> LayerResult:
        """Run one processor; a failure degrades the layer to an Unknown result."""
        descriptor = processor.descriptor
        try:
            result = processor.process(ctx)
        except Exception as exc:
            log_error(
                f"Layer {descriptor.index} ({descriptor.type.value}) failed; emitting it as unknown",
                exc,
                context={"function": descriptor.function_name, "panel": ctx.panel},
            )
            return UnknownLayerProcessor(descriptor).process(ctx)
        logger.debug(
            f"Layer {descriptor.index} ({descriptor.type.value}): "
            f"{len(result.data) if hasattr(result.data, '__len__') else 0} points, "
            f"{len(result.selectors)} selectors",
            extra=tagged("layer"),
        )
        return result

    def generate_document(self, document_id: Optional[str] = None) -> AccessibleDocument:
        """Assemble the AccessibleDocument for this plot."""
        document_id = document_id or new_document_id()
        set_render_id(document_id)
        document = AccessibleDocument(id=document_id, subplots=self.get_combined_data())
        logger.debug(
            f"Built document with {len(document.layers())} layers in "
            f"{sum(len(row) for row in document.subplots)} subplots",
            extra=tagged("render"),
        )
        return document
