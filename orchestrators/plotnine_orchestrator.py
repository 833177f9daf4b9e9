"""
Orchestrator for plotnine plots and plot compositions.

The plot is built on a deep copy (layer data, panel layout, scales) and
drawn once to a matplotlib figure. plotnine draws layer i with zorder i,
which is how the data artists of each axes are attributed to layers
before they are named ``{geom}.{kind}.{layer}.{panel}.{j}``.

Facets produce one subplot per panel at the panel's ROW/COL. A
composition produces one subplot per panel of each of its plots, laid
out left to right for side-by-side items and top to bottom for stacked
ones.
"""

from __future__ import annotations

from collections import Counter
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd
from plotnine import ggplot

from core.logging import get_logger
from core.types import ChartType, LayerDescriptor, Subplot
from processors.base import ProcessingContext
from processors.plotnine.base import node_name
from rendering.artists import artist_kind, artists_by_layer
from rendering.scales import extract_scale_mapping, plot_label
from rendering.tree import as_node
from .base import PlotOrchestrator, arrange_grid

logger = get_logger()


def is_composition(obj: Any) -> bool:
    """True for plotnine compositions (``p1 | p2``, ``p1 / p2``, ...)."""
    return type(obj).__module__.startswith("plotnine.composition") and hasattr(obj, "items")


def build_plot(plot: ggplot) -> ggplot:
    """Built deep copy of *plot*; the user's object is left untouched."""
    built = deepcopy(plot)
    built._build()
    return built


def composition_cells(item: Any, row: int = 1, col: int = 1) -> tuple[list[tuple[ggplot, int, int]], int, int]:
    """Leaf plots of a composition with their 1-based grid cell, plus the grid size."""
    if isinstance(item, ggplot):
        return [(item, row, col)], 1, 1
    vertical = type(item).__name__ == "Stack"
    cells: list[tuple[ggplot, int, int]] = []
    r, c = row, col
    height = width = 0
    for child in getattr(item, "items", []):
        sub, nrows, ncols = composition_cells(child, r, c)
        cells += sub
        if vertical:
            r += nrows
            height += nrows
            width = max(width, ncols)
        else:
            c += ncols
            width += ncols
            height = max(height, nrows)
    return cells, height, width


def panel_table(built: ggplot) -> pd.DataFrame:
    """PANEL/ROW/COL table of a built plot (a single panel when absent)."""
    table = getattr(getattr(built, "layout", None), "layout", None)
    if isinstance(table, pd.DataFrame) and {"PANEL", "ROW", "COL"} <= set(table.columns):
        return table
    return pd.DataFrame({"PANEL": [1], "ROW": [1], "COL": [1]})


@dataclass
class LeafPlot:
    """One ggplot of the figure: its build and the axes of its panels."""
    plot: ggplot
    built: ggplot
    row: int
    col: int
    axes: list
    layers: list[LayerDescriptor]


class PlotnineOrchestrator(PlotOrchestrator):
    """Processes a ggplot (faceted or not) or a composition of ggplots."""

    def __init__(self, plot: Any, adapter=None, factory=None):
        super().__init__(plot, adapter=adapter, factory=factory)
        self._figure = None
        self._leaves: Optional[list[LeafPlot]] = None
        self._tree = None

    # ---- build and draw -----------------------------------------------------

    def _draw(self) -> Any:
        # draw() builds the plot in place
        plot = deepcopy(self.plot)
        session = getattr(self.adapter, "session", None)
        if session is None:
            return plot.draw()
        with session.paused():
            return plot.draw()

    @property
    def figure(self) -> Any:
        if self._figure is None:
            self._figure = self._draw()
        return self._figure

    def leaves(self) -> list[LeafPlot]:
        """Built leaf plots, each bound to its consecutive share of the figure's axes."""
        if self._leaves is not None:
            return self._leaves
        if is_composition(self.plot):
            cells = composition_cells(self.plot)[0]
        else:
            cells = [(self.plot, 1, 1)]
        figure_axes = list(self.figure.axes)
        leaves: list[LeafPlot] = []
        offset = 0
        for plot, row, col in cells:
            built = build_plot(plot)
            n_panels = len(panel_table(built))
            leaves.append(LeafPlot(
                plot=plot,
                built=built,
                row=row,
                col=col,
                axes=figure_axes[offset:offset + n_panels],
                layers=self._describe(built),
            ))
            offset += n_panels
        self._leaves = leaves
        return leaves

    def _describe(self, built: ggplot) -> list[LayerDescriptor]:
        layers = []
        for index, layer in enumerate(built.layers, start=1):
            layers.append(LayerDescriptor(
                index=index,
                type=self.adapter.detect_layer_type(layer, built),
                function_name=type(layer.geom).__name__,
                stat=type(layer.stat).__name__,
                position=type(layer.position).__name__,
                source=layer,
            ))
        return layers

    def assign_nodes(self) -> None:
        """Name the data artists of every panel of every leaf plot."""
        for leaf in self.leaves():
            geoms = {d.index: d.function_name for d in leaf.layers}
            for panel, ax in enumerate(leaf.axes, start=1):
                for layer_index, artists in artists_by_layer(ax, len(leaf.layers)).items():
                    counters: Counter = Counter()
                    for artist in artists:
                        kind = artist_kind(artist)
                        if kind is None:
                            continue
                        counters[kind] += 1
                        artist.set_gid(node_name(geoms[layer_index], kind, layer_index, panel, counters[kind]))

    # ---- contract -----------------------------------------------------------

    def get_layers(self) -> list[LayerDescriptor]:
        return [d for leaf in self.leaves() for d in leaf.layers]

    def get_rendered_tree(self) -> Any:
        if self._tree is None:
            self.assign_nodes()
            self._tree = as_node(self.figure)
        return self._tree

    def is_faceted_plot(self) -> bool:
        if is_composition(self.plot):
            return any(type(leaf.built.facet).__name__ != "facet_null" for leaf in self.leaves())
        return type(getattr(self.plot, "facet", None)).__name__ not in ("facet_null", "NoneType")

    def is_patchwork_plot(self) -> bool:
        return is_composition(self.plot)

    def get_combined_data(self) -> list[list[Subplot]]:
        tree = self.get_rendered_tree()
        cells: dict[tuple[int, int], list] = {}
        for leaf in self.leaves():
            processors = [self.create_processor(d) for d in leaf.layers if d.type != ChartType.SKIP]
            labels = {
                "title": plot_label(leaf.built, "title"),
                "x": plot_label(leaf.built, "x"),
                "y": plot_label(leaf.built, "y"),
                "fill": plot_label(leaf.built, "fill"),
            }
            faceted = type(leaf.built.facet).__name__ != "facet_null"
            table = panel_table(leaf.built)
            for position, panel in enumerate(table.to_dict("records")):
                panel_number = int(panel["PANEL"])
                if faceted and not is_composition(self.plot):
                    cell = (int(panel["ROW"]), int(panel["COL"]))
                else:
                    cell = (leaf.row, leaf.col + position)
                ctx_axes = leaf.axes[position] if position < len(leaf.axes) else None
                results = []
                for processor in processors:
                    ctx = ProcessingContext(
                        plot=leaf.plot,
                        built=leaf.built,
                        tree=tree,
                        panel=panel_number,
                        scale_mapping=extract_scale_mapping(leaf.built, panel_number, "x"),
                        axes=ctx_axes,
                        labels=labels,
                    )
                    results.append(self.process_layer(processor, ctx))
                cells[cell] = results
        return arrange_grid(cells)

