"""
Classification of imperative drawing calls.

Every intercepted matplotlib call is HIGH (starts a new chart), LOW
(annotates the current chart), LAYOUT (arranges panels) or UNKNOWN.
The table is fixed; names are normalized before lookup.
"""

import re
from enum import Enum


class CallClass(Enum):
    """Role of a drawing call in building a chart."""
    HIGH = "HIGH"
    LOW = "LOW"
    LAYOUT = "LAYOUT"
    UNKNOWN = "UNKNOWN"


HIGH_LEVEL_FUNCTIONS = frozenset({
    "bar", "barh", "hist", "boxplot", "plot", "scatter",
    "imshow", "matshow", "pcolormesh", "pcolor",
    "pie", "stackplot", "violinplot", "errorbar", "step", "fill_between",
})

LOW_LEVEL_FUNCTIONS = frozenset({
    "lines",        # plot() on an axes that already holds a chart
    "points",       # scatter() on an axes that already holds a chart
    "bar_series",   # bar()/barh() adding a series to an existing bar chart
    "axhline", "axvline", "axline",
    "text", "annotate", "legend",
    "set_title", "set_xlabel", "set_ylabel",
    "fill",
})

LAYOUT_FUNCTIONS = frozenset({
    "subplots", "subplot_mosaic",
    "par", "layout",  # names used through the log_call() facade
})

# Chart calls made on an axes that already holds a chart
DEMOTIONS = {
    "plot": "lines",
    "scatter": "points",
    "bar": "bar_series",
    "barh": "bar_series",
}

_DISPATCH_SUFFIX = re.compile(r"\.default$")


def normalize_function_name(function_name: str) -> str:
    """Strip a default-dispatch suffix and any class qualifier.

    ``"Axes.bar"`` → ``"bar"``, ``"hist.default"`` → ``"hist"``.
    """
    name = _DISPATCH_SUFFIX.sub("", function_name.strip())
    return name.rsplit(".", 1)[-1]


def classify_function(function_name: str) -> CallClass:
    """Classify a drawing function by name."""
    name = normalize_function_name(function_name)
    if name in HIGH_LEVEL_FUNCTIONS:
        return CallClass.HIGH
    if name in LOW_LEVEL_FUNCTIONS:
        return CallClass.LOW
    if name in LAYOUT_FUNCTIONS:
        return CallClass.LAYOUT
    return CallClass.UNKNOWN


def is_high_level(function_name: str) -> bool:
    return classify_function(function_name) == CallClass.HIGH


def is_low_level(function_name: str) -> bool:
    return classify_function(function_name) == CallClass.LOW


def is_layout(function_name: str) -> bool:
    return classify_function(function_name) == CallClass.LAYOUT


def demote(function_name: str) -> str:
    """Return the LOW twin of a chart call (``plot`` → ``lines``), or the name unchanged."""
    return DEMOTIONS.get(normalize_function_name(function_name), function_name)
