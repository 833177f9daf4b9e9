"""
Registry of plotting systems.

Each system is a named (adapter, processor factory) pair. Detection asks
the adapters in registration order and the first one that claims the
plot wins.
"""

from __future__ import annotations

from typing import Any, Optional

from core.errors import NO_SYSTEM, UnsupportedPlotError
from core.logging import get_logger
from .adapter import SystemAdapter
from .factory import ProcessorFactory

logger = get_logger()


class SystemRegistry:
    """Named plotting systems, kept in registration order."""

    def __init__(self):
        self._systems: dict[str, tuple[SystemAdapter, ProcessorFactory]] = {}

    def register_system(self, name: str, adapter: SystemAdapter, processor_factory: ProcessorFactory) -> None:
        """Register (or replace) a system."""
        adapter.factory = processor_factory
        self._systems[name] = (adapter, processor_factory)
        logger.debug(f"Registered plotting system '{name}'")

    def unregister_system(self, name: str) -> bool:
        """Remove a system; returns False if it was not registered."""
        return self._systems.pop(name, None) is not None

    def list_systems(self) -> list[str]:
        return list(self._systems)

    def is_system_registered(self, name: str) -> bool:
        return name in self._systems

    def get_adapter(self, name: str) -> Optional[SystemAdapter]:
        entry = self._systems.get(name)
        return entry[0] if entry else None

    def get_processor_factory(self, name: str) -> Optional[ProcessorFactory]:
        entry = self._systems.get(name)
        return entry[1] if entry else None

    def detect_system(self, plot: Any) -> str:
        """Name of the first system whose adapter can handle *plot*.

        Raises:
            UnsupportedPlotError: No registered system claims the plot.
        """
        for name, (adapter, _) in self._systems.items():
            if adapter.can_handle(plot):
                return name
        raise UnsupportedPlotError(NO_SYSTEM)
