"""Plotting systems: adapters, processor factories and their registry."""

from processors.plotnine import PROCESSORS as PLOTNINE_PROCESSORS
from processors.pyplot import PROCESSORS as PYPLOT_PROCESSORS
from .adapter import SystemAdapter
from .factory import ProcessorFactory
from .plotnine_adapter import PlotnineAdapter
from .pyplot_adapter import PyplotAdapter
from .registry import SystemRegistry


def create_default_registry(session) -> SystemRegistry:
    """Registry with plotnine and pyplot, in that order.

    plotnine goes first: its plots are recognized by type, while the
    pyplot adapter claims any call that finds recorded calls.
    """
    registry = SystemRegistry()
    registry.register_system("plotnine", PlotnineAdapter(session), ProcessorFactory(PLOTNINE_PROCESSORS))
    registry.register_system("pyplot", PyplotAdapter(session), ProcessorFactory(PYPLOT_PROCESSORS))
    return registry


__all__ = [
    "SystemAdapter",
    "ProcessorFactory",
    "PlotnineAdapter",
    "PyplotAdapter",
    "SystemRegistry",
    "create_default_registry",
]
