"""
Shared plumbing for plotnine layer processors.

Before the figure is saved, every data artist of layer L on panel P is
named ``{geom}.{kind}.{L}.{P}.{j}``; j counts per kind in drawing order.
Processors read the layer's computed data for their panel and find their
nodes in the rendered tree with exact patterns on those names.
"""

from __future__ import annotations

import re
from typing import Any, Optional

import pandas as pd
from matplotlib.colors import is_color_like, to_hex

from processors.base import LayerProcessor, PairedLayerProcessor, ProcessingContext
from processors.records import series_name
from rendering.scales import apply_scale_mapping, format_value, scale_limits, to_number
from rendering.tree import find_nodes_by_pattern

# Aesthetics that split a layer into named series, by precedence
SERIES_AESTHETICS = ("colour", "color", "fill", "group", "linetype", "shape")
COLOR_ALIASES = {"colour": ("colour", "color"), "fill": ("fill",)}


def node_name(geom: str, kind: str, layer: int, panel: int, j: int) -> str:
    return f"{geom}.{kind}.{layer}.{panel}.{j}"


def node_pattern(geom: str, kind: str, layer: int, panel: int) -> str:
    return rf"^{re.escape(geom)}\.{kind}\.{layer}\.{panel}\.[0-9]+$"


def _trailing_number(name: str) -> int:
    return int(name.rsplit(".", 1)[-1])


def color_text(value: Any) -> Optional[str]:
    """Hex colour of a plotnine colour value, or None when it is not a colour."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if is_color_like(value):
        return to_hex(value, keep_alpha=False)
    return None


def scale_legend(built, aesthetic: str) -> dict[str, str]:
    """Drawn colour (hex) → legend label of a discrete colour or fill scale."""
    scales = getattr(built, "scales", None)
    scale = scales.get_scales(aesthetic) if scales is not None else None
    if scale is None:
        return {}
    limits = scale_limits(scale)
    try:
        colors = list(scale.map(limits))
    except (AttributeError, TypeError, ValueError):
        return {}
    legend = {}
    for limit, color in zip(limits, colors):
        hex_color = color_text(color)
        if hex_color is not None:
            legend.setdefault(hex_color, format_value(limit))
    return legend


def position_label(x: Any, mapping: Optional[dict]) -> str:
    """Category label of an x position; dodged positions snap to their category."""
    if mapping is None:
        return format_value(x)
    value = to_number(x)
    if isinstance(value, (int, float)):
        value = int(round(value))
    return apply_scale_mapping([value], mapping)[0]


class PlotnineLayerMixin:
    """Data, mapping and node lookups for one plotnine layer."""

    @property
    def geom_name(self) -> str:
        return self.descriptor.function_name

    def panel_of(self, ctx: ProcessingContext) -> int:
        return int(ctx.panel) if ctx is not None and ctx.panel is not None else 1

    def layer_data(self, ctx: ProcessingContext) -> pd.DataFrame:
        """Computed data of this layer, restricted to the panel being processed."""
        layer = self.descriptor.source
        data = getattr(layer, "data", None)
        if not isinstance(data, pd.DataFrame):
            return pd.DataFrame()
        if "PANEL" in data.columns:
            data = data[data["PANEL"].astype(int) == self.panel_of(ctx)]
        return data.reset_index(drop=True)

    # Layout columns that are not facet variables
    _LAYOUT_COLUMNS = frozenset({"PANEL", "ROW", "COL", "SCALE_X", "SCALE_Y", "AXIS_X", "AXIS_Y"})

    def source_data(self, ctx: ProcessingContext, columns=()) -> Optional[pd.DataFrame]:
        """The frame the user handed to this layer (or to the plot).

        Computed frames (they carry ``PANEL``) and frames missing any of
        *columns* are passed over.
        """
        plot = ctx.plot if ctx is not None else None
        layers = list(getattr(plot, "layers", []) or [])
        index = self.descriptor.index - 1
        candidates = []
        if 0 <= index < len(layers):
            candidates.append(getattr(layers[index], "data", None))
        candidates.append(getattr(plot, "data", None))
        for data in candidates:
            if not isinstance(data, pd.DataFrame) or "PANEL" in data.columns:
                continue
            if all(c in data.columns for c in columns):
                return data
        return None

    def panel_rows(self, ctx: ProcessingContext, data: pd.DataFrame) -> pd.DataFrame:
        """Rows of a user frame that fall on the panel being processed."""
        table = getattr(getattr(ctx.built, "layout", None), "layout", None)
        if not isinstance(table, pd.DataFrame) or "PANEL" not in table.columns:
            return data
        panel = table[table["PANEL"].astype(int) == self.panel_of(ctx)]
        if panel.empty:
            return data
        for column in table.columns:
            if column in self._LAYOUT_COLUMNS or column not in data.columns:
                continue
            value = format_value(panel[column].iloc[0])
            data = data[data[column].map(format_value) == value]
        return data.reset_index(drop=True)

    def mapped_column(self, ctx: ProcessingContext, aesthetic: str) -> Optional[str]:
        """Column name an aesthetic is mapped to, if it is a plain column."""
        mappings = [getattr(self.descriptor.source, "mapping", None)]
        if getattr(self.descriptor.source, "inherit_aes", True) and ctx is not None:
            mappings.append(getattr(ctx.plot, "mapping", None))
        for mapping in mappings:
            if mapping is None:
                continue
            value = mapping.get(aesthetic) if hasattr(mapping, "get") else None
            if isinstance(value, str):
                return value
        return None

    def series_column(self, ctx: ProcessingContext) -> Optional[str]:
        for aesthetic in SERIES_AESTHETICS:
            column = self.mapped_column(ctx, aesthetic)
            if column is not None:
                return column
        return None

    def series_names(self, ctx: ProcessingContext, groups: list[tuple[int, pd.DataFrame]]) -> list[str]:
        """Names of the ``(group id, rows)`` series drawn on this panel.

        The legend of a mapped colour/fill scale names a series by its
        drawn colour. Otherwise plotnine's group ids (1-based, in the
        sorted or categorical order of the grouping values) index the
        values of the grouping column. "Series N" is the last resort.
        """
        for aesthetic in ("colour", "fill"):
            if not any(self.mapped_column(ctx, a) is not None for a in COLOR_ALIASES[aesthetic]):
                continue
            legend = scale_legend(ctx.built, aesthetic)
            colors = [
                color_text(rows[aesthetic].iloc[0]) if aesthetic in rows.columns and len(rows) else None
                for _, rows in groups
            ]
            if legend and all(c in legend for c in colors):
                return [legend[c] for c in colors]

        column = self.series_column(ctx)
        data = self.source_data(ctx, [column]) if column is not None else None
        values: list = []
        if data is not None:
            series = data[column]
            if isinstance(series.dtype, pd.CategoricalDtype):
                values = list(series.cat.categories)
            else:
                values = sorted(series.dropna().unique(), key=format_value)
        all_data = getattr(self.descriptor.source, "data", None)
        n_total = all_data["group"].nunique() if isinstance(all_data, pd.DataFrame) and "group" in all_data else None
        names = []
        for position, (group, _) in enumerate(groups, start=1):
            if values and len(values) == n_total and 1 <= group <= len(values):
                names.append(format_value(values[group - 1]))
            else:
                names.append(series_name(None, position))
        return names

    def layer_nodes(self, ctx: ProcessingContext, kind: str) -> list[str]:
        """This layer's node names of *kind* on the current panel, in drawing order."""
        pattern = node_pattern(self.geom_name, kind, self.descriptor.index, self.panel_of(ctx))
        names = find_nodes_by_pattern(ctx.tree, pattern)
        return sorted(set(names), key=_trailing_number)

    def first_node(self, ctx: ProcessingContext, kind: str) -> Optional[str]:
        nodes = self.layer_nodes(ctx, kind)
        return nodes[0] if nodes else None


class PlotnineLayerProcessor(PlotnineLayerMixin, PairedLayerProcessor):
    """Paired processor over one layer's computed data."""


class PlotnineGroupedProcessor(PlotnineLayerMixin, LayerProcessor):
    """Processor whose selectors address whole series or the whole layer."""
