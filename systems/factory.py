"""Processor factories: chart type tag → layer processor class."""

from __future__ import annotations

from typing import Optional, Union

from core.types import ChartType, LayerDescriptor
from processors.base import LayerProcessor
from processors.unknown import UnknownLayerProcessor


def as_chart_type(layer_type: Union[ChartType, str, None]) -> ChartType:
    """Coerce a tag ("bar", ChartType.BAR) to a ChartType; unknown tags → UNKNOWN."""
    if isinstance(layer_type, ChartType):
        return layer_type
    try:
        return ChartType(layer_type)
    except ValueError:
        return ChartType.UNKNOWN


class ProcessorFactory:
    """Creates one processor per layer; types without a processor get the Unknown one."""

    def __init__(self, processors: Optional[dict] = None, default: type = UnknownLayerProcessor):
        self._processors: dict[ChartType, type] = dict(processors or {})
        self._default = default

    def register(self, layer_type: Union[ChartType, str], processor_class: type) -> None:
        self._processors[as_chart_type(layer_type)] = processor_class

    def get_supported_types(self) -> list[str]:
        return sorted(t.value for t in self._processors)

    def get_processor_class(self, layer_type: Union[ChartType, str, None]) -> type:
        return self._processors.get(as_chart_type(layer_type), self._default)

    def create_processor(self, layer_type: Union[ChartType, str, None], descriptor: LayerDescriptor) -> LayerProcessor:
        return self.get_processor_class(layer_type)(descriptor)
