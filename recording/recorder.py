"""
Recording façade: append calls to a surface and keep its state current.

``log_call`` is what the matplotlib interceptors call; applications that
prefer explicit recording over interception can call it directly.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Optional

from core.logging import get_logger
from .classification import CallClass, classify_function, normalize_function_name
from .state import on_high_level_call, on_layout_call, get_device_state, reset_device_state
from .store import CallArgs, RecordedCall

if TYPE_CHECKING:
    from core.session import Session

logger = get_logger()


def format_call_expression(function_name: str, args: CallArgs) -> str:
    """Short, diagnostic-only rendering of a call: ``bar(<list>, height=<ndarray>)``."""
    parts = [f"<{type(v).__name__}>" for v in args.positional]
    parts += [f"{k}=<{type(v).__name__}>" for k, v in args.named.items()]
    return f"{function_name}({', '.join(parts)})"


def log_call(
    session: Session,
    function_name: str,
    call_expr: Optional[str],
    args: CallArgs,
    surface_id: int,
    axes: Any = None,
    result: Any = None,
) -> RecordedCall:
    """Classify and record one drawing call, then update the device state.

    HIGH calls advance the current plot (and panel under a layout);
    LAYOUT calls may replace the panel configuration.
    """
    name = normalize_function_name(function_name)
    class_level = classify_function(name)
    store = session.store(surface_id)
    call = RecordedCall(
        function_name=name,
        class_level=class_level,
        args=args,
        call_expression=call_expr or format_call_expression(name, args),
        timestamp=time.time(),
        sequence_index=store.next_index,
        axes=axes,
        result=result,
    )
    store.append(call)
    session.call_counter += 1
    if session.current_surface is None:
        session.current_surface = surface_id

    if class_level == CallClass.HIGH:
        state = get_device_state(session, surface_id)
        on_high_level_call(session, surface_id, state.current_plot_index + 1, call.sequence_index)
        if axes is not None:
            state.charted_axes.add(id(axes))
    elif class_level == CallClass.LAYOUT:
        on_layout_call(session, surface_id, name, args)

    logger.debug(f"Recorded {class_level.value} call #{call.sequence_index}: {call.call_expression}")
    return call


def get_calls(session: Session, surface_id: int) -> list[RecordedCall]:
    store = session.calls.get(surface_id)
    return store.get_calls() if store is not None else []


def get_calls_by_class(session: Session, surface_id: int, class_level: CallClass) -> list[RecordedCall]:
    """Calls of one class on a surface, in recorded order."""
    store = session.calls.get(surface_id)
    return store.get_calls_by_class(class_level) if store is not None else []


def has_calls(session: Session, surface_id: Optional[int]) -> bool:
    if surface_id is None:
        return False
    store = session.calls.get(surface_id)
    return store is not None and len(store) > 0


def get_call_count(session: Session, surface_id: int) -> int:
    store = session.calls.get(surface_id)
    return len(store) if store is not None else 0


def clear(session: Session, surface_id: int) -> None:
    """Drop a surface's calls and reset its device state."""
    store = session.calls.get(surface_id)
    if store is not None:
        store.clear()
    reset_device_state(session, surface_id)


def clear_all(session: Session) -> None:
    session.clear_all()
