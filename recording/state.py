"""
Device state tracking for imperative surfaces.

Each surface carries one DeviceState: which plot is current, which panel
of a multi-panel layout it occupies, and the layout geometry derived from
LAYOUT calls (``subplots``, ``subplot_mosaic``, ``par``, ``layout``).

Index convention: plot and panel numbers are 1-based; 0 means "none yet".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from .store import CallArgs

if TYPE_CHECKING:
    from core.session import Session


# ---------------------------------------------------------------------------
# Panel configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PanelConfig:
    """Multi-panel geometry of a surface.

    Attributes:
        type: "single", "mfrow" (row-major fill), "mfcol" (column-major
            fill) or "layout" (explicit matrix of panel ids).
        nrows: Grid rows.
        ncols: Grid columns.
        total_panels: nrows*ncols for grids; distinct positive ids for layouts.
        matrix: Panel id per grid cell (layout only), 0 for empty cells.
    """
    type: str = "single"
    nrows: int = 1
    ncols: int = 1
    total_panels: int = 1
    matrix: Optional[tuple] = None

    @classmethod
    def grid(cls, type_: str, nrows: int, ncols: int) -> PanelConfig:
        return cls(type=type_, nrows=nrows, ncols=ncols, total_panels=nrows * ncols)

    @classmethod
    def from_matrix(cls, matrix: list[list[int]]) -> PanelConfig:
        ids = {v for row in matrix for v in row if v > 0}
        return cls(
            type="layout",
            nrows=len(matrix),
            ncols=len(matrix[0]) if matrix else 0,
            total_panels=len(ids),
            matrix=tuple(tuple(row) for row in matrix),
        )

    @property
    def is_multi_panel(self) -> bool:
        return self.type != "single"

    def position_of(self, panel: int) -> tuple[int, int]:
        """0-based (row, col) of the 1-based *panel* in this grid."""
        if panel < 1:
            raise ValueError(f"Panel must be >= 1, got {panel}")
        i = panel - 1
        if self.type == "mfrow":
            return divmod(i, self.ncols)
        if self.type == "mfcol":
            col, row = divmod(i, self.nrows)
            return row, col
        if self.type == "layout" and self.matrix:
            for r, row in enumerate(self.matrix):
                for c, value in enumerate(row):
                    if value == panel:
                        return r, c
        return i, 0

    def to_dict(self) -> dict:
        result = {
            "type": self.type,
            "nrows": self.nrows,
            "ncols": self.ncols,
            "total_panels": self.total_panels,
        }
        if self.matrix is not None:
            result["matrix"] = [list(row) for row in self.matrix]
        return result


def _int_pair(value: Any) -> Optional[tuple[int, int]]:
    try:
        values = [int(v) for v in value]
    except (TypeError, ValueError):
        return None
    if len(values) != 2 or min(values) < 1:
        return None
    return values[0], values[1]


def _parse_mosaic(mosaic: Any) -> Optional[list[list[int]]]:
    """Turn a mosaic (nested list or ``"AB;CC"`` string) into panel ids.

    Integer cells keep their value; labels get ids in order of first
    appearance; ``"."`` and non-positive integers are empty cells (0).
    """
    if isinstance(mosaic, str):
        text = mosaic.strip()
        sep = ";" if ";" in text else "\n"
        rows = [list(line.strip()) for line in text.split(sep) if line.strip()]
    elif isinstance(mosaic, np.ndarray):
        rows = mosaic.tolist()
    elif isinstance(mosaic, (list, tuple)):
        rows = [list(row) if isinstance(row, (list, tuple, np.ndarray)) else [row] for row in mosaic]
    else:
        return None
    if not rows or any(len(row) != len(rows[0]) for row in rows) or not rows[0]:
        return None

    ids: dict[Any, int] = {}
    matrix = []
    for row in rows:
        out = []
        for cell in row:
            if isinstance(cell, (int, np.integer)) and not isinstance(cell, bool):
                out.append(int(cell) if cell > 0 else 0)
            elif isinstance(cell, str) and cell != ".":
                ids.setdefault(cell, len(ids) + 1)
                out.append(ids[cell])
            else:
                out.append(0)
        matrix.append(out)
    return matrix


def panel_config_from_call(function_name: str, args: CallArgs) -> Optional[PanelConfig]:
    """Derive a PanelConfig from one LAYOUT call, or None if the call does not define one."""
    if function_name == "subplots":
        nrows = args.get("nrows", 0, 1)
        ncols = args.get("ncols", 1, 1)
        pair = _int_pair((nrows, ncols))
        if pair is None:
            return None
        if pair == (1, 1):
            return PanelConfig()
        return PanelConfig.grid("mfrow", *pair)
    if function_name == "par":
        for key in ("mfrow", "mfcol"):
            pair = _int_pair(args.get(key)) if args.has(key) else None
            if pair is not None:
                return PanelConfig.grid(key, *pair)
        return None
    if function_name in ("subplot_mosaic", "layout"):
        mosaic = args.get("mosaic", 0)
        if mosaic is None:
            mosaic = args.get("mat")
        matrix = _parse_mosaic(mosaic)
        if matrix is None:
            return None
        return PanelConfig.from_matrix(matrix)
    return None


# ---------------------------------------------------------------------------
# Device state
# ---------------------------------------------------------------------------

@dataclass
class DeviceState:
    """Mutable per-surface plotting state.

    Attributes:
        current_plot_index: Number of the most recent HIGH call's plot (0 = none).
        current_panel: Panel of a multi-panel layout in use (0 = none yet).
        panel_config: Layout geometry.
        layout_active: True once a layout call has been recognized.
        last_high_call_index: sequence_index of the most recent HIGH call.
        charted_axes: ids of axes that already hold a chart.
    """
    current_plot_index: int = 0
    current_panel: int = 0
    panel_config: PanelConfig = field(default_factory=PanelConfig)
    layout_active: bool = False
    last_high_call_index: int = 0
    charted_axes: set = field(default_factory=set)

    def to_dict(self) -> dict:
        return {
            "current_plot_index": self.current_plot_index,
            "current_panel": self.current_panel,
            "panel_config": self.panel_config.to_dict(),
            "layout_active": self.layout_active,
            "last_high_call_index": self.last_high_call_index,
        }


def get_device_state(session: Session, surface_id: int) -> DeviceState:
    """Return the surface's state, creating a default one on first use."""
    if surface_id not in session.states:
        session.states[surface_id] = DeviceState()
    return session.states[surface_id]


def reset_device_state(session: Session, surface_id: int) -> None:
    session.states[surface_id] = DeviceState()


def on_high_level_call(
    session: Session,
    surface_id: int,
    new_index: int,
    call_index: Optional[int] = None,
) -> None:
    """Record that a new chart started on the surface.

    Under a multi-panel layout the panel number advances by one. It is not
    wrapped: drawing more charts than the layout holds is the caller's
    problem and is left visible here.
    """
    state = get_device_state(session, surface_id)
    state.current_plot_index = new_index
    if call_index is not None:
        state.last_high_call_index = call_index
    if state.layout_active:
        state.current_panel += 1


def on_layout_call(session: Session, surface_id: int, function_name: str, args: CallArgs) -> None:
    """Apply a LAYOUT call; argument shapes that define no layout change nothing."""
    config = panel_config_from_call(function_name, args)
    if config is None:
        return
    state = get_device_state(session, surface_id)
    state.panel_config = config
    state.current_panel = 0
    state.current_plot_index = 0
    state.layout_active = config.is_multi_panel
