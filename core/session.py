"""
Session context shared by recording, detection and processing.

A Session owns everything that would otherwise be ambient global state:
the per-surface call stores and device states, the plotting-system
registry, and the re-entrancy flag that keeps matplotlib's own nested
calls (hist → bar) out of the recording. Entry points take an explicit
session; ``get_session()`` returns the process-wide default one.

Single-threaded by contract: a surface id identifies one logical plot
session and nothing here arbitrates concurrent writers.
"""

from __future__ import annotations

import weakref
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from recording.state import DeviceState
from recording.store import CallStore


def surface_id_of(figure: Any) -> int:
    """Surface id of a matplotlib figure (the root figure for subfigures)."""
    root = getattr(figure, "figure", None) or figure
    return id(root)


class Session:
    """Per-process recording and detection context.

    Attributes:
        calls: surface id → CallStore.
        states: surface id → DeviceState.
        registry: The SystemRegistry consulted by ``detect_system``.
        recording_enabled: Wrappers record only while this is true.
        in_internal_call: True while an intercepted call is running.
        call_counter: Total calls recorded by this session.
        current_surface: Surface written to most recently.
    """

    def __init__(self, registry=None) -> None:
        self.calls: dict[int, CallStore] = {}
        self.states: dict[int, DeviceState] = {}
        self._figures: dict[int, weakref.ref] = {}
        self.recording_enabled = True
        self.in_internal_call = False
        self.call_counter = 0
        self.current_surface: Optional[int] = None
        if registry is None:
            from systems import create_default_registry
            registry = create_default_registry(self)
        self.registry = registry

    # ---- surfaces ----------------------------------------------------------

    def attach_figure(self, figure: Any) -> int:
        """Register *figure* as a surface and make it current.

        If the id was last used by a figure that no longer exists, the
        stale calls and state are dropped first.
        Closing the figure's window clears the surface.
        """
        root = getattr(figure, "figure", None) or figure
        sid = id(root)
        ref = self._figures.get(sid)
        if ref is not None and ref() is not root:
            self.clear_surface(sid)
        if sid not in self._figures:
            self._figures[sid] = weakref.ref(root)
            canvas = getattr(root, "canvas", None)
            if canvas is not None:
                canvas.mpl_connect("close_event", lambda event: self.clear_surface(sid))
        self.current_surface = sid
        return sid

    def get_figure(self, surface_id: Optional[int] = None) -> Any:
        """Return the live figure of a surface (default: current), or None."""
        sid = self.current_surface if surface_id is None else surface_id
        ref = self._figures.get(sid)
        return ref() if ref is not None else None

    def store(self, surface_id: int) -> CallStore:
        if surface_id not in self.calls:
            self.calls[surface_id] = CallStore()
        return self.calls[surface_id]

    def surfaces(self) -> list[int]:
        return list(self.calls)

    def clear_surface(self, surface_id: int) -> None:
        """Forget everything recorded for one surface."""
        self.calls.pop(surface_id, None)
        self.states.pop(surface_id, None)
        self._figures.pop(surface_id, None)
        if self.current_surface == surface_id:
            self.current_surface = None

    def prune(self, is_closed: Callable[[Any], bool]) -> list[int]:
        """Clear every surface whose figure is gone or reported closed."""
        pruned = []
        for sid in list(self._figures):
            figure = self.get_figure(sid)
            if figure is None or is_closed(figure):
                self.clear_surface(sid)
                pruned.append(sid)
        return pruned

    def clear_all(self) -> None:
        self.calls.clear()
        self.states.clear()
        self._figures.clear()
        self.current_surface = None
        self.call_counter = 0

    @contextmanager
    def paused(self) -> Iterator[Session]:
        """Suspend recording while library code draws on its own figures."""
        previous = self.in_internal_call
        self.in_internal_call = True
        try:
            yield self
        finally:
            self.in_internal_call = previous


# Module-level default session
_session: Optional[Session] = None


def get_session() -> Session:
    """Return the process-wide default Session."""
    global _session
    if _session is None:
        _session = Session()
    return _session


def reset_session() -> None:
    """Reset the default Session (mainly for testing)."""
    global _session
    _session = None
