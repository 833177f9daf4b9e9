"""
Orchestrator for recorded matplotlib surfaces.

Layers come from plot groups: each group's HIGH call is a layer, and so
is every LOW call that draws a chart element of its own (``lines``,
``points``, reference lines). Text, legends and axis labels are skipped;
the extra series of a grouped bar chart fold into the HIGH bar's layer.
Each axes becomes one subplot, placed by its position in the grid.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Optional

from core.logging import get_logger
from core.types import ChartType, LayerDescriptor, Subplot
from processors.base import ProcessingContext
from processors.pyplot.base import iter_call_artists, node_name
from recording.grouping import PlotGroup, detect_panel_configuration, group_calls
from recording.state import PanelConfig
from rendering.scales import resolve_call_labels
from rendering.tree import as_node
from .base import PlotOrchestrator, arrange_grid

logger = get_logger()

SERIES_TYPES = (ChartType.DODGED_BAR, ChartType.STACKED_BAR)


class PyplotOrchestrator(PlotOrchestrator):
    """Processes the plot groups recorded on one surface."""

    def __init__(self, session, surface_id: int, adapter=None, factory=None):
        super().__init__(session.get_figure(surface_id), adapter=adapter, factory=factory)
        self.session = session
        self.surface_id = surface_id
        self.groups: list[PlotGroup] = group_calls(session, surface_id).groups
        self.panel_config: PanelConfig = detect_panel_configuration(session, surface_id) or PanelConfig()
        self._nodes: Optional[dict[int, list[str]]] = None
        self._layers: Optional[list[LayerDescriptor]] = None
        self._tree = None

    @property
    def figure(self) -> Any:
        if self.plot is not None:
            return self.plot
        for group in self.groups:
            for call in group.calls():
                if call.axes is not None:
                    return call.axes.figure
        return None

    # ---- node naming --------------------------------------------------------

    def assign_nodes(self) -> dict[int, list[str]]:
        """Name every addressable artist per group; returns ``id(call)`` → names.

        n counts per kind within the group, in call order, so names are the
        same on every run over the same calls.
        """
        if self._nodes is not None:
            return self._nodes
        nodes: dict[int, list[str]] = {}
        for group_index, group in enumerate(self.groups, start=1):
            counters: Counter = Counter()
            for call in group.calls():
                own = []
                for kind, artist in iter_call_artists(call):
                    counters[kind] += 1
                    name = node_name(group_index, kind, counters[kind])
                    artist.set_gid(name)
                    own.append(name)
                nodes[id(call)] = own
        self._nodes = nodes
        return nodes

    # ---- layers -------------------------------------------------------------

    def get_layers(self) -> list[LayerDescriptor]:
        if self._layers is not None:
            return self._layers
        nodes = self.assign_nodes()
        layers: list[LayerDescriptor] = []
        for group_index, group in enumerate(self.groups, start=1):
            for call in group.calls():
                layer_type = self.adapter.detect_layer_type(call, group=group)
                if layer_type == ChartType.SKIP:
                    continue
                if layer_type == ChartType.UNKNOWN and call is not group.high_call:
                    logger.debug(f"Ignoring LOW call '{call.function_name}' with no chart type")
                    continue
                own = list(nodes.get(id(call), []))
                if layer_type in SERIES_TYPES:
                    for low in group.low_calls:
                        if low.function_name == "bar_series":
                            own += nodes.get(id(low), [])
                layers.append(LayerDescriptor(
                    index=len(layers) + 1,
                    type=layer_type,
                    function_name=call.function_name,
                    group_index=group_index,
                    source=call,
                    nodes=tuple(own),
                ))
        self._layers = layers
        return layers

    def get_rendered_tree(self) -> Any:
        if self._tree is None:
            self.assign_nodes()
            self._tree = as_node(self.figure)
        return self._tree

    # ---- panels -------------------------------------------------------------

    def _axes_of(self, descriptor: LayerDescriptor) -> Any:
        call = descriptor.source
        return call.axes if call.axes is not None else self.groups[descriptor.group_index - 1].axes

    def _panel_key(self, descriptor: LayerDescriptor) -> Any:
        axes = self._axes_of(descriptor)
        if axes is not None:
            return id(axes)
        # Calls recorded without an axes occupy one panel per group under a layout
        return f"group-{descriptor.group_index}" if self.panel_config.is_multi_panel else "single"

    def _position(self, axes: Any, order: int) -> tuple[int, int]:
        """1-based (row, col) of an axes: its subplot spec, else the layout order."""
        get_spec = getattr(axes, "get_subplotspec", None)
        spec = get_spec() if callable(get_spec) else None
        if spec is not None:
            return spec.rowspan.start + 1, spec.colspan.start + 1
        if self.panel_config.is_multi_panel:
            row, col = self.panel_config.position_of(order)
            return row + 1, col + 1
        return order, 1

    def is_faceted_plot(self) -> bool:
        keys = {self._panel_key(d) for d in self.get_layers()}
        return len(keys) > 1 or self.panel_config.is_multi_panel

    def get_combined_data(self) -> list[list[Subplot]]:
        layers = self.get_layers()
        tree = self.get_rendered_tree()

        keys: list[Any] = []
        calls_by_key: dict[Any, list] = {}
        axes_by_key: dict[Any, Any] = {}
        for descriptor in layers:
            key = self._panel_key(descriptor)
            if key not in calls_by_key:
                keys.append(key)
                calls_by_key[key] = []
                axes_by_key[key] = self._axes_of(descriptor)
        for group in self.groups:
            for call in group.calls():
                axes = call.axes if call.axes is not None else group.axes
                key = id(axes) if axes is not None else None
                if key in calls_by_key:
                    calls_by_key[key].append(call)
        for key in keys:
            if not calls_by_key[key]:
                calls_by_key[key] = [d.source for d in layers if self._panel_key(d) == key]

        labels = {key: resolve_call_labels(calls_by_key[key], axes_by_key[key]) for key in keys}
        positions = {key: self._position(axes_by_key[key], order) for order, key in enumerate(keys, start=1)}

        cells: dict[tuple[int, int], list] = {}
        for processor in self.get_layer_processors():
            descriptor = processor.descriptor
            key = self._panel_key(descriptor)
            ctx = ProcessingContext(
                tree=tree,
                panel=keys.index(key) + 1,
                group=self.groups[descriptor.group_index - 1],
                call=descriptor.source,
                axes=axes_by_key[key],
                labels=labels[key],
            )
            cells.setdefault(positions[key], []).append(self.process_layer(processor, ctx))
        return arrange_grid(cells)
