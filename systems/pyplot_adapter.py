"""
Adapter for the imperative paradigm (matplotlib calls recorded per figure).

Unlike the declarative adapter it does not look at the plot object's
contents: a surface is handled when calls were recorded on it.
"""

from __future__ import annotations

from typing import Any, Optional

from matplotlib.axes import Axes
from matplotlib.figure import FigureBase

from core.errors import NO_PLOTS_DETECTED, NoPlotError
from core.session import surface_id_of
from core.types import ChartType
from processors.pyplot.smooth import is_smooth_call
from processors.pyplot.stacked_bar import is_stacked
from recording.grouping import PlotGroup
from recording.recorder import has_calls
from orchestrators.pyplot_orchestrator import PyplotOrchestrator
from .adapter import SystemAdapter

BAR_CALLS = frozenset({"bar", "barh"})
HEAT_CALLS = frozenset({"imshow", "matshow", "pcolormesh", "pcolor"})
LINE_CALLS = frozenset({"plot", "step", "lines", "axhline", "axvline", "axline"})
POINT_CALLS = frozenset({"scatter", "points"})
# bar_series calls are folded into the dodged/stacked layer of their HIGH bar
SKIP_CALLS = frozenset({
    "text", "annotate", "legend", "set_title", "set_xlabel", "set_ylabel", "bar_series",
})


class PyplotAdapter(SystemAdapter):
    name = "pyplot"

    def surface_of(self, plot: Any = None) -> Optional[int]:
        """Surface id a plot argument refers to (None → the current surface)."""
        if isinstance(plot, Axes):
            return surface_id_of(plot.figure)
        if isinstance(plot, FigureBase):
            return surface_id_of(plot)
        return self.session.current_surface

    def can_handle(self, plot: Any = None) -> bool:
        return has_calls(self.session, self.surface_of(plot))

    def detect_layer_type(self, layer: Any, plot: Any = None, group: Optional[PlotGroup] = None) -> ChartType:
        """Chart type of a recorded call (or of a group's HIGH call)."""
        if layer is None:
            return ChartType.UNKNOWN
        if isinstance(layer, PlotGroup):
            group = layer
            layer = layer.high_call
        name = layer.function_name

        if name in BAR_CALLS:
            series = [layer]
            if group is not None and layer is group.high_call:
                series += [c for c in group.low_calls if c.function_name == "bar_series"]
            if len(series) == 1:
                return ChartType.BAR
            return ChartType.STACKED_BAR if is_stacked(series) else ChartType.DODGED_BAR
        if name == "hist":
            return ChartType.HIST
        if name == "boxplot":
            return ChartType.BOX
        if name in HEAT_CALLS:
            return ChartType.HEAT
        if name in ("plot", "lines") and is_smooth_call(layer):
            return ChartType.SMOOTH
        if name in LINE_CALLS:
            return ChartType.LINE
        if name in POINT_CALLS:
            return ChartType.POINT
        if name in SKIP_CALLS:
            return ChartType.SKIP
        return ChartType.UNKNOWN

    def create_orchestrator(self, plot: Any = None):
        surface_id = self.surface_of(plot)
        if not self.can_handle(plot):
            raise NoPlotError(NO_PLOTS_DETECTED)
        return PyplotOrchestrator(self.session, surface_id, adapter=self, factory=self.factory)
