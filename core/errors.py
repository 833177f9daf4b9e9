"""
Exceptions raised to callers.

Caller misuse (unsupported plot, nothing recorded) fails immediately with
one of these. Missing or partial data inside a plot never raises; it is
resolved to a documented default where it is found.
"""


class MaidrError(Exception):
    """Base class for errors surfaced to callers."""


class UnsupportedPlotError(MaidrError, TypeError):
    """Raised when a plot object is of a type no plotting system handles.

    The message is user-facing and names the problem.
    """


class NoPlotError(MaidrError, ValueError):
    """Raised when an operation needs a recorded plot but none exists."""


NO_PLOTS_DETECTED = "No plots detected on this surface"
UNSUPPORTED_INPUT = "Input must be a supported plot object"
NO_SYSTEM = "No registered system can handle this plot object"
