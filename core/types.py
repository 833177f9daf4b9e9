"""
Shared data model: chart type tags, layer descriptors, layer results and
the accessible document handed to the SVG/HTML assembly step.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ChartType(Enum):
    """Semantic chart types a layer can be classified as."""
    BAR = "bar"
    DODGED_BAR = "dodged_bar"
    STACKED_BAR = "stacked_bar"
    POINT = "point"
    LINE = "line"
    HIST = "hist"
    BOX = "box"
    HEAT = "heat"
    SMOOTH = "smooth"
    SKIP = "skip"
    UNKNOWN = "unknown"


# Bar-family charts share the maidr "bar" navigation model
_MAIDR_TYPES = {
    ChartType.BAR: "bar",
    ChartType.DODGED_BAR: "dodged_bar",
    ChartType.STACKED_BAR: "stacked_bar",
    ChartType.POINT: "point",
    ChartType.LINE: "line",
    ChartType.HIST: "hist",
    ChartType.BOX: "box",
    ChartType.HEAT: "heat",
    ChartType.SMOOTH: "smooth",
    ChartType.UNKNOWN: "unknown",
}


@dataclass(frozen=True)
class LayerDescriptor:
    """One detected chart layer, created once per orchestrator run.

    Attributes:
        index: 1-based layer number within the plot.
        type: Detected chart type.
        function_name: Imperative call name, or the geom class name.
        stat: Stat class name (declarative only).
        position: Position class name (declarative only).
        group_index: 1-based plot group the layer belongs to.
        source: Raw reference to the layer's build data (a plotnine layer,
            or the RecordedCall/PlotGroup it came from).
        nodes: Node numbers assigned to this layer's artists (imperative).
    """
    index: int
    type: ChartType
    function_name: str = ""
    stat: str = ""
    position: str = ""
    group_index: int = 1
    source: Any = None
    nodes: tuple = ()


@dataclass
class LayerResult:
    """What a layer processor produces for one layer.

    ``data`` and ``selectors`` are aligned one-to-one (bars, boxes,
    histograms) or group-wise (one selector per series or per layer).
    An empty ``selectors`` list marks a layer whose nodes could not be
    found in the rendered tree.
    """
    type: ChartType
    data: Any = field(default_factory=list)
    selectors: list = field(default_factory=list)
    title: str = ""
    axes: dict = field(default_factory=lambda: {"x": "", "y": ""})
    dom_mapping: Optional[dict] = None
    orientation: Optional[str] = None

    @classmethod
    def from_pairs(cls, chart_type: ChartType, pairs: list[tuple], **kwargs) -> "LayerResult":
        """Build a result from ``(data point, selector)`` pairs.

        A pair whose selector is None (node not rendered) makes the whole
        layer unaddressable rather than misaligning the rest.
        """
        data = [point for point, _ in pairs]
        selectors = [sel for _, sel in pairs]
        if any(sel is None for sel in selectors):
            selectors = []
        return cls(type=chart_type, data=data, selectors=selectors, **kwargs)

    @property
    def is_unknown(self) -> bool:
        return self.type == ChartType.UNKNOWN

    def to_dict(self, layer_id: str) -> dict:
        """Convert to the JSON shape the maidr client reads."""
        result = {
            "id": layer_id,
            "type": _MAIDR_TYPES.get(self.type, "unknown"),
            "title": self.title,
            "axes": dict(self.axes),
            "data": self.data,
            "selectors": self.selectors,
        }
        if self.dom_mapping is not None:
            result["domMapping"] = dict(self.dom_mapping)
        if self.orientation is not None:
            result["orientation"] = self.orientation
        return result


@dataclass
class Subplot:
    """One cell of the document grid: a panel and its layers."""
    id: str
    layers: list[LayerResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "layers": [
                layer.to_dict(f"{self.id}-layer-{i}")
                for i, layer in enumerate(self.layers, start=1)
            ],
        }


@dataclass
class AccessibleDocument:
    """The accessible data model of one rendered plot.

    Attributes:
        id: Unique per render (``maidr-plot-<timestamp>-<hex>``).
        subplots: Row-major grid of subplots.
    """
    id: str
    subplots: list[list[Subplot]] = field(default_factory=list)

    def layers(self) -> list[LayerResult]:
        """All layer results in grid order."""
        return [layer for row in self.subplots for cell in row for layer in cell.layers]

    def has_accessible_layers(self) -> bool:
        """True if at least one layer is of a known chart type."""
        return any(not layer.is_unknown for layer in self.layers())

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "subplots": [[cell.to_dict() for cell in row] for row in self.subplots],
        }
