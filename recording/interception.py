"""
Transparent interception of matplotlib drawing calls.

The interceptors live in an explicit, reversible registration table of
``{owner, name, original, wrapped}`` entries. ``set_recording(True)``
installs every wrapper; ``set_recording(False)`` puts the originals back
exactly as they were. Wrappers return whatever the original returns and
keep it on the RecordedCall so processors can read the drawn artists.
``pyplot.close`` is wrapped as well; the surfaces of figures it closes
are cleared.

Usage:
    with recording() as session:
        fig, ax = plt.subplots()
        ax.bar(["A", "B"], [10, 20])
    doc = build_document(fig, session=session)
"""

from __future__ import annotations

import functools
import inspect
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

import matplotlib.pyplot as plt
from matplotlib import _pylab_helpers
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from core.logging import get_logger
from .classification import demote, HIGH_LEVEL_FUNCTIONS, LOW_LEVEL_FUNCTIONS
from .recorder import log_call
from .state import get_device_state
from .store import CallArgs

logger = get_logger()

# Only plain Axes methods are wrapped; "lines" is also an Axes property and must stay one
AXES_METHODS = tuple(sorted(
    name for name in HIGH_LEVEL_FUNCTIONS | LOW_LEVEL_FUNCTIONS
    if inspect.isfunction(inspect.getattr_static(Axes, name, None))
))
FIGURE_METHODS = ("subplots", "subplot_mosaic")
PYPLOT_FUNCTIONS = ("close",)


def figure_closed(figure: Any) -> bool:
    """True once pyplot has let go of a figure it managed."""
    manager = getattr(getattr(figure, "canvas", None), "manager", None)
    if manager is None:
        return False
    return _pylab_helpers.Gcf.figs.get(manager.num) is not manager


@dataclass
class PatchEntry:
    """One intercepted attribute.

    ``owned`` is False when the attribute was inherited, in which case
    uninstalling deletes the wrapper instead of re-setting the original.
    """
    owner: Any
    name: str
    original: Callable
    wrapped: Callable
    owned: bool


class InterceptionTable:
    """Reversible set of wrapped matplotlib methods bound to one session."""

    def __init__(self, session) -> None:
        self.session = session
        self.entries: list[PatchEntry] = []
        self.installed = False

    def register(self, owner: type, name: str, make_wrapper: Callable[[str, Callable], Callable]) -> None:
        original = getattr(owner, name)
        self.entries.append(PatchEntry(
            owner=owner,
            name=name,
            original=original,
            wrapped=make_wrapper(name, original),
            owned=name in owner.__dict__,
        ))

    def install(self) -> None:
        if self.installed:
            return
        for entry in self.entries:
            setattr(entry.owner, entry.name, entry.wrapped)
        self.installed = True
        logger.debug(f"Installed {len(self.entries)} matplotlib interceptors")

    def uninstall(self) -> None:
        if not self.installed:
            return
        for entry in reversed(self.entries):
            if entry.owned:
                setattr(entry.owner, entry.name, entry.original)
            else:
                delattr(entry.owner, entry.name)
        self.installed = False
        logger.debug("Restored original matplotlib methods")

    # ---- wrappers -----------------------------------------------------------

    def _run(self, original: Callable, obj: Any, args: tuple, kwargs: dict) -> Any:
        self.session.in_internal_call = True
        try:
            return original(obj, *args, **kwargs)
        finally:
            self.session.in_internal_call = False

    def axes_wrapper(self, name: str, original: Callable) -> Callable:
        @functools.wraps(original)
        def wrapper(ax, *args, **kwargs):
            session = self.session
            if not session.recording_enabled or session.in_internal_call:
                return original(ax, *args, **kwargs)
            surface_id = session.attach_figure(ax.figure)
            state = get_device_state(session, surface_id)
            recorded_name = demote(name) if id(ax) in state.charted_axes else name
            result = self._run(original, ax, args, kwargs)
            log_call(session, recorded_name, None, CallArgs(args, dict(kwargs)),
                     surface_id, axes=ax, result=result)
            return result
        return wrapper

    def figure_wrapper(self, name: str, original: Callable) -> Callable:
        @functools.wraps(original)
        def wrapper(fig, *args, **kwargs):
            session = self.session
            if not session.recording_enabled or session.in_internal_call:
                return original(fig, *args, **kwargs)
            surface_id = session.attach_figure(fig)
            result = self._run(original, fig, args, kwargs)
            log_call(session, name, None, CallArgs(args, dict(kwargs)), surface_id, result=result)
            return result
        return wrapper

    def close_wrapper(self, name: str, original: Callable) -> Callable:
        @functools.wraps(original)
        def wrapper(*args, **kwargs):
            result = original(*args, **kwargs)
            pruned = self.session.prune(figure_closed)
            if pruned:
                logger.debug(f"Cleared {len(pruned)} closed surface(s)")
            return result
        return wrapper


def build_interception_table(session) -> InterceptionTable:
    """Create (but do not install) the table for all intercepted methods."""
    table = InterceptionTable(session)
    for name in AXES_METHODS:
        table.register(Axes, name, table.axes_wrapper)
    for name in FIGURE_METHODS:
        table.register(Figure, name, table.figure_wrapper)
    for name in PYPLOT_FUNCTIONS:
        table.register(plt, name, table.close_wrapper)
    return table


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

_table: Optional[InterceptionTable] = None


def set_recording(enabled: bool, session=None) -> Optional[InterceptionTable]:
    """Install (``True``) or remove (``False``) the interceptors.

    Args:
        enabled: Whether drawing calls should be recorded.
        session: Session to record into (default: the process-wide one).

    Returns:
        The installed table, or None after disabling.
    """
    global _table
    if not enabled:
        if _table is not None:
            _table.session.recording_enabled = False
            _table.uninstall()
            _table = None
        return None

    if session is None:
        from core.session import get_session
        session = get_session()
    if _table is not None and _table.session is not session:
        _table.uninstall()
        _table = None
    if _table is None:
        _table = build_interception_table(session)
        _table.install()
    session.recording_enabled = True
    return _table


def is_recording() -> bool:
    return _table is not None and _table.installed


@contextmanager
def recording(session=None) -> Iterator:
    """Record matplotlib calls for the duration of the block, then restore."""
    table = set_recording(True, session)
    try:
        yield table.session
    finally:
        set_recording(False)
