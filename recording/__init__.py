"""Imperative call recording: classification, storage, state and grouping."""

from .classification import CallClass, classify_function, normalize_function_name
from .store import CallArgs, RecordedCall, CallStore
from .state import (
    DeviceState,
    PanelConfig,
    get_device_state,
    reset_device_state,
    on_high_level_call,
    on_layout_call,
)
from .recorder import log_call, get_calls, get_calls_by_class, get_call_count, has_calls, clear, clear_all
from .grouping import PlotGroup, GroupedCalls, group_calls, get_plot_group, detect_panel_configuration

__all__ = [
    "CallClass",
    "classify_function",
    "normalize_function_name",
    "CallArgs",
    "RecordedCall",
    "CallStore",
    "DeviceState",
    "PanelConfig",
    "get_device_state",
    "reset_device_state",
    "on_high_level_call",
    "on_layout_call",
    "log_call",
    "get_calls",
    "get_calls_by_class",
    "get_call_count",
    "has_calls",
    "clear",
    "clear_all",
    "PlotGroup",
    "GroupedCalls",
    "group_calls",
    "get_plot_group",
    "detect_panel_configuration",
]
