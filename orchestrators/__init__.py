"""Plot orchestrators: one per plotting paradigm."""

from .base import PlotOrchestrator, arrange_grid, new_document_id

__all__ = ["PlotOrchestrator", "arrange_grid", "new_document_id"]
