"""Layer processors: one per chart type and plotting paradigm."""

from .base import LayerProcessor, PairedLayerProcessor, ProcessingContext
from .unknown import UnknownLayerProcessor

__all__ = [
    "LayerProcessor",
    "PairedLayerProcessor",
    "ProcessingContext",
    "UnknownLayerProcessor",
]
