"""
System adapter base class.

An adapter recognizes the plot objects of one plotting paradigm,
classifies their layers, and builds the orchestrator that processes them.
"""

from __future__ import annotations

from typing import Any

from core.types import ChartType


class SystemAdapter:
    """Base adapter; subclasses implement the three operations below."""

    name = ""

    def __init__(self, session, factory=None):
        self.session = session
        self.factory = factory

    def can_handle(self, plot: Any) -> bool:
        raise NotImplementedError(f"{type(self).__name__} does not implement can_handle()")

    def detect_layer_type(self, layer: Any, plot: Any = None) -> ChartType:
        raise NotImplementedError(f"{type(self).__name__} does not implement detect_layer_type()")

    def create_orchestrator(self, plot: Any = None):
        raise NotImplementedError(f"{type(self).__name__} does not implement create_orchestrator()")
