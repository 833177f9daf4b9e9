"""Layer processors for recorded matplotlib (pyplot) calls."""

from core.types import ChartType
from .bar import BarLayerProcessor
from .box import BoxplotLayerProcessor
from .dodged_bar import DodgedBarLayerProcessor
from .heat import HeatmapLayerProcessor
from .hist import HistogramLayerProcessor
from .line import LineLayerProcessor
from .point import PointLayerProcessor
from .smooth import SmoothLayerProcessor
from .stacked_bar import StackedBarLayerProcessor

PROCESSORS = {
    ChartType.BAR: BarLayerProcessor,
    ChartType.DODGED_BAR: DodgedBarLayerProcessor,
    ChartType.STACKED_BAR: StackedBarLayerProcessor,
    ChartType.POINT: PointLayerProcessor,
    ChartType.LINE: LineLayerProcessor,
    ChartType.HIST: HistogramLayerProcessor,
    ChartType.BOX: BoxplotLayerProcessor,
    ChartType.HEAT: HeatmapLayerProcessor,
    ChartType.SMOOTH: SmoothLayerProcessor,
}

__all__ = [
    "PROCESSORS",
    "BarLayerProcessor",
    "BoxplotLayerProcessor",
    "DodgedBarLayerProcessor",
    "HeatmapLayerProcessor",
    "HistogramLayerProcessor",
    "LineLayerProcessor",
    "PointLayerProcessor",
    "SmoothLayerProcessor",
    "StackedBarLayerProcessor",
]
