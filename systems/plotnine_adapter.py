"""Adapter for the declarative paradigm (plotnine ggplot objects and compositions)."""

from __future__ import annotations

from typing import Any

import pandas as pd
from plotnine import ggplot

from core.errors import UNSUPPORTED_INPUT, UnsupportedPlotError
from core.types import ChartType
from orchestrators.plotnine_orchestrator import PlotnineOrchestrator, is_composition
from .adapter import SystemAdapter

BAR_GEOMS = frozenset({"geom_bar", "geom_col"})
HIST_GEOMS = frozenset({"geom_histogram"})
HEAT_GEOMS = frozenset({"geom_tile", "geom_raster"})
SMOOTH_GEOMS = frozenset({"geom_smooth", "geom_density"})
SMOOTH_STATS = frozenset({"stat_smooth", "stat_density"})
LINE_GEOMS = frozenset({"geom_line", "geom_path", "geom_step", "geom_hline", "geom_vline", "geom_abline"})
POINT_GEOMS = frozenset({"geom_point", "geom_jitter"})
TEXT_GEOMS = frozenset({"geom_text", "geom_label", "annotate"})

DODGE_POSITIONS = frozenset({"position_dodge", "position_dodge2"})
STACK_POSITIONS = frozenset({"position_stack", "position_fill"})


def layer_classes(layer) -> tuple[str, str, str]:
    """(geom, stat, position) class names of a plotnine layer."""
    return (
        type(getattr(layer, "geom", None)).__name__,
        type(getattr(layer, "stat", None)).__name__,
        type(getattr(layer, "position", None)).__name__,
    )


def has_fill_groups(layer) -> bool:
    """True when the layer's computed data carries more than one fill colour."""
    data = getattr(layer, "data", None)
    return isinstance(data, pd.DataFrame) and "fill" in data.columns and data["fill"].nunique() > 1


class PlotnineAdapter(SystemAdapter):
    name = "plotnine"

    def can_handle(self, plot: Any) -> bool:
        return isinstance(plot, ggplot) or is_composition(plot)

    def detect_layer_type(self, layer: Any, plot: Any = None) -> ChartType:
        """Chart type of a built plotnine layer."""
        if layer is None:
            return ChartType.UNKNOWN
        geom, stat, position = layer_classes(layer)

        if geom in BAR_GEOMS and stat != "stat_bin":
            if has_fill_groups(layer):
                if position in DODGE_POSITIONS:
                    return ChartType.DODGED_BAR
                if position in STACK_POSITIONS:
                    return ChartType.STACKED_BAR
            return ChartType.BAR
        if geom in HIST_GEOMS or (geom in BAR_GEOMS and stat == "stat_bin"):
            return ChartType.HIST
        if geom == "geom_boxplot":
            return ChartType.BOX
        if geom in HEAT_GEOMS:
            return ChartType.HEAT
        if geom in SMOOTH_GEOMS or stat in SMOOTH_STATS:
            return ChartType.SMOOTH
        if geom in LINE_GEOMS:
            return ChartType.LINE
        if geom in POINT_GEOMS:
            return ChartType.POINT
        if geom in TEXT_GEOMS:
            return ChartType.SKIP
        return ChartType.UNKNOWN

    def create_orchestrator(self, plot: Any = None):
        if not self.can_handle(plot):
            raise UnsupportedPlotError(UNSUPPORTED_INPUT)
        return PlotnineOrchestrator(plot, adapter=self, factory=self.factory)
