"""
Tests for plotting-system detection: processor factories, the system
registry, adapters and the public entry point errors.

Run with: python -m pytest tests/test_systems.py
"""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest

from core.api import get_orchestrator
from core.errors import NO_PLOTS_DETECTED, NO_SYSTEM, UNSUPPORTED_INPUT, NoPlotError, UnsupportedPlotError
from core.session import Session
from core.types import ChartType, LayerDescriptor
from processors.base import LayerProcessor, ProcessingContext
from processors.pyplot import PROCESSORS as PYPLOT_PROCESSORS
from processors.pyplot.bar import BarLayerProcessor
from processors.unknown import UnknownLayerProcessor
from recording.interception import recording
from systems import PyplotAdapter, SystemAdapter, create_default_registry
from systems.factory import ProcessorFactory, as_chart_type
from systems.registry import SystemRegistry


class _AlwaysAdapter(SystemAdapter):
    def can_handle(self, plot):
        return True


class _NeverAdapter(SystemAdapter):
    def can_handle(self, plot):
        return False


class TestProcessorFactory:
    def test_tag_coercion(self):
        assert as_chart_type("bar") == ChartType.BAR
        assert as_chart_type(ChartType.HEAT) == ChartType.HEAT
        assert as_chart_type("violin") == ChartType.UNKNOWN
        assert as_chart_type(None) == ChartType.UNKNOWN

    def test_unknown_type_gets_unknown_processor(self):
        factory = ProcessorFactory(PYPLOT_PROCESSORS)
        descriptor = LayerDescriptor(index=1, type=ChartType.UNKNOWN)
        assert isinstance(factory.create_processor("violin", descriptor), UnknownLayerProcessor)

    def test_register_and_supported_types(self):
        factory = ProcessorFactory()
        assert factory.get_supported_types() == []
        factory.register("bar", BarLayerProcessor)
        assert factory.get_supported_types() == ["bar"]
        assert factory.get_processor_class(ChartType.BAR) is BarLayerProcessor

    def test_pyplot_factory_covers_chart_types(self):
        supported = set(ProcessorFactory(PYPLOT_PROCESSORS).get_supported_types())
        assert {"bar", "dodged_bar", "stacked_bar", "point", "line", "hist", "box", "heat", "smooth"} <= supported


class TestLayerProcessors:
    def test_base_contract_raises(self):
        processor = LayerProcessor(LayerDescriptor(index=1, type=ChartType.BAR))
        with pytest.raises(NotImplementedError, match="extract_data"):
            processor.extract_data(ProcessingContext())
        with pytest.raises(NotImplementedError, match="generate_selectors"):
            processor.generate_selectors(ProcessingContext())

    def test_unknown_processor_defaults(self):
        result = UnknownLayerProcessor(LayerDescriptor(index=1, type=ChartType.UNKNOWN)).process(ProcessingContext())
        assert result.data == []
        assert result.selectors == []
        assert result.title == "Unknown Plot Type"
        assert result.axes == {"x": "X", "y": "Y"}

    def test_unknown_processor_keeps_known_labels(self):
        ctx = ProcessingContext(labels={"title": "Mine", "x": "Time", "y": ""})
        result = UnknownLayerProcessor(LayerDescriptor(index=1, type=ChartType.UNKNOWN)).process(ctx)
        assert result.title == "Mine"
        assert result.axes == {"x": "Time", "y": "Y"}


class TestSystemRegistry:
    def test_registration_order_decides(self):
        registry = SystemRegistry()
        registry.register_system("never", _NeverAdapter(None), ProcessorFactory())
        registry.register_system("first", _AlwaysAdapter(None), ProcessorFactory())
        registry.register_system("second", _AlwaysAdapter(None), ProcessorFactory())
        assert registry.list_systems() == ["never", "first", "second"]
        assert registry.detect_system(object()) == "first"

    def test_no_system(self):
        registry = SystemRegistry()
        registry.register_system("never", _NeverAdapter(None), ProcessorFactory())
        with pytest.raises(UnsupportedPlotError, match=NO_SYSTEM):
            registry.detect_system(object())

    def test_unregister(self):
        registry = SystemRegistry()
        registry.register_system("a", _AlwaysAdapter(None), ProcessorFactory())
        assert registry.is_system_registered("a")
        assert registry.unregister_system("a") is True
        assert registry.unregister_system("a") is False
        assert registry.get_adapter("a") is None
        assert registry.get_processor_factory("a") is None

    def test_factory_attached_to_adapter(self):
        registry = SystemRegistry()
        factory = ProcessorFactory()
        adapter = _AlwaysAdapter(None)
        registry.register_system("a", adapter, factory)
        assert adapter.factory is factory
        assert registry.get_processor_factory("a") is factory

    def test_default_registry_order(self):
        registry = create_default_registry(Session(registry=SystemRegistry()))
        assert registry.list_systems() == ["plotnine", "pyplot"]

    def test_base_adapter_raises(self):
        adapter = SystemAdapter(None)
        with pytest.raises(NotImplementedError, match="can_handle"):
            adapter.can_handle(None)
        with pytest.raises(NotImplementedError, match="create_orchestrator"):
            adapter.create_orchestrator(None)


class TestPyplotAdapter:
    def teardown_method(self):
        plt.close("all")

    def test_classifies_recorded_calls(self):
        session = Session()
        with recording(session):
            fig, ax = plt.subplots()
            ax.bar(["A", "B"], [1, 2])
            ax.plot([0, 1], [1, 2])
            ax.axhline(1)
            ax.legend(["a"])
        adapter = session.registry.get_adapter("pyplot")
        assert isinstance(adapter, PyplotAdapter)
        calls = session.store(adapter.surface_of(fig)).get_calls()
        types = [adapter.detect_layer_type(c) for c in calls if c.function_name != "subplots"]
        assert types == [ChartType.BAR, ChartType.LINE, ChartType.LINE, ChartType.SKIP]

    def test_smoother_label(self):
        session = Session()
        with recording(session):
            fig, ax = plt.subplots()
            ax.plot([0, 1], [1, 2], label="lowess fit")
        adapter = session.registry.get_adapter("pyplot")
        call = session.store(adapter.surface_of(fig)).get_calls()[-1]
        assert adapter.detect_layer_type(call) == ChartType.SMOOTH

    def test_unrecorded_surface(self):
        adapter = PyplotAdapter(Session(registry=SystemRegistry()))
        fig, _ = plt.subplots()
        assert adapter.can_handle(fig) is False
        with pytest.raises(NoPlotError):
            adapter.create_orchestrator(fig)


class TestEntryPointErrors:
    def teardown_method(self):
        plt.close("all")

    def test_unsupported_input(self):
        with pytest.raises(UnsupportedPlotError, match=UNSUPPORTED_INPUT):
            get_orchestrator("not a plot", session=Session())

    def test_unsupported_is_type_error(self):
        with pytest.raises(TypeError):
            get_orchestrator(42, session=Session())

    def test_nothing_recorded(self):
        with pytest.raises(NoPlotError, match=NO_PLOTS_DETECTED):
            get_orchestrator(None, session=Session())

    def test_figure_without_calls(self):
        fig, _ = plt.subplots()
        with pytest.raises(NoPlotError, match=NO_PLOTS_DETECTED):
            get_orchestrator(fig, session=Session())
