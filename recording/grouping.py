"""
Grouping of recorded calls into plots.

Each HIGH call opens a group; LOW calls attach to the group opened most
recently. LOW calls recorded before any HIGH call belong to no chart and
are dropped. LAYOUT calls are collected on the side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from core.logging import get_logger
from .classification import CallClass
from .recorder import get_calls, get_calls_by_class
from .state import PanelConfig, panel_config_from_call
from .store import RecordedCall

if TYPE_CHECKING:
    from core.session import Session

logger = get_logger()


@dataclass
class PlotGroup:
    """One chart: its HIGH call plus the LOW calls that annotate it.

    Indices are positions in the surface's call list (0-based).
    """
    high_call: RecordedCall
    high_call_index: int
    low_calls: list[RecordedCall] = field(default_factory=list)
    low_call_indices: list[int] = field(default_factory=list)

    @property
    def axes(self):
        return self.high_call.axes

    def calls(self) -> list[RecordedCall]:
        """HIGH call first, then LOW calls in encounter order."""
        return [self.high_call, *self.low_calls]


@dataclass
class GroupedCalls:
    groups: list[PlotGroup]
    layout_calls: list[RecordedCall]

    @property
    def total_groups(self) -> int:
        return len(self.groups)

    @property
    def total_layout_calls(self) -> int:
        return len(self.layout_calls)


def group_calls(session: Session, surface_id: int) -> GroupedCalls:
    """Partition a surface's calls into plot groups in a single pass."""
    groups: list[PlotGroup] = []
    layout_calls: list[RecordedCall] = []
    current: Optional[PlotGroup] = None

    for i, call in enumerate(get_calls(session, surface_id)):
        if call.class_level == CallClass.LAYOUT:
            layout_calls.append(call)
        elif call.class_level == CallClass.HIGH:
            current = PlotGroup(high_call=call, high_call_index=i)
            groups.append(current)
        elif call.class_level == CallClass.LOW:
            if current is None:
                logger.debug(f"Dropping orphan LOW call '{call.function_name}' (no chart yet)")
                continue
            current.low_calls.append(call)
            current.low_call_indices.append(i)

    return GroupedCalls(groups=groups, layout_calls=layout_calls)


def get_plot_group(session: Session, surface_id: int, n: int) -> Optional[PlotGroup]:
    """Return the nth group (1-based), or None if there is no such group."""
    groups = group_calls(session, surface_id).groups
    if n < 1 or n > len(groups):
        return None
    return groups[n - 1]


def detect_panel_configuration(session: Session, surface_id: int) -> Optional[PanelConfig]:
    """Re-derive panel geometry from the LAYOUT calls recorded so far.

    The last call that defines a layout wins; None if no call does.
    """
    config = None
    for call in get_calls_by_class(session, surface_id, CallClass.LAYOUT):
        parsed = panel_config_from_call(call.function_name, call.args)
        if parsed is not None:
            config = parsed
    return config
