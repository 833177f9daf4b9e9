"""
Public entry points.

Every function takes the plot to process, or None for the surface that
matplotlib calls were recorded on most recently:

    from core.api import show
    from recording.interception import recording

    with recording():
        fig, ax = plt.subplots()
        ax.bar(["A", "B"], [10, 20])
    show()

plotnine plots are passed in directly: ``show(ggplot(df, aes("x", "y")) + geom_point())``.
"""

from __future__ import annotations

import tempfile
import webbrowser
from pathlib import Path
from typing import Any, Optional, Union

from matplotlib.axes import Axes
from matplotlib.figure import FigureBase

import config
from core.errors import NO_PLOTS_DETECTED, UNSUPPORTED_INPUT, NoPlotError, UnsupportedPlotError
from core.logging import get_logger, tagged
from core.session import Session, get_session, surface_id_of
from core.types import AccessibleDocument
from recording.recorder import has_calls
from rendering import fallback, html, svg

logger = get_logger()


def _is_plotnine(plot: Any) -> bool:
    module = type(plot).__module__
    return module.startswith("plotnine.ggplot") or module.startswith("plotnine.composition")


def _surface_of(plot: Any, session: Session) -> Optional[int]:
    if plot is None:
        return session.current_surface
    if isinstance(plot, Axes):
        return surface_id_of(plot.figure)
    return surface_id_of(plot)


def get_orchestrator(plot: Any = None, session: Optional[Session] = None):
    """Orchestrator for *plot* from the system that claims it.

    Raises:
        UnsupportedPlotError: *plot* is not a plotnine plot, Figure or Axes,
            or no registered system handles it.
        NoPlotError: Nothing was recorded on the target surface.
    """
    session = session or get_session()
    if plot is not None and not (_is_plotnine(plot) or isinstance(plot, (FigureBase, Axes))):
        raise UnsupportedPlotError(UNSUPPORTED_INPUT)
    if plot is None or isinstance(plot, (FigureBase, Axes)):
        if not has_calls(session, _surface_of(plot, session)):
            raise NoPlotError(NO_PLOTS_DETECTED)
    name = session.registry.detect_system(plot)
    logger.debug(f"Plot handled by the '{name}' system", extra=tagged("render"))
    return session.registry.get_adapter(name).create_orchestrator(plot)


def build_document(plot: Any = None, session: Optional[Session] = None) -> AccessibleDocument:
    """Accessible document (data, selectors, labels) of a plot."""
    return get_orchestrator(plot, session).generate_document()


def render(plot: Any = None, session: Optional[Session] = None) -> str:
    """SVG markup of the plot with the document in its ``maidr-data`` attribute."""
    orchestrator = get_orchestrator(plot, session)
    document = orchestrator.generate_document()
    return svg.render_to_svg_with_data(document, orchestrator.get_rendered_tree())


def to_html(plot: Any = None, session: Optional[Session] = None) -> str:
    """Standalone HTML page for the plot.

    When no layer is accessible and the image fallback is enabled, the
    page shows a static image instead of the interactive SVG.
    """
    orchestrator = get_orchestrator(plot, session)
    document = orchestrator.generate_document()
    settings = config.get_fallback()
    if settings["enabled"] and not document.has_accessible_layers():
        body = fallback.fallback_image_html(orchestrator.figure, settings=settings)
        return html.wrap_as_html(body)
    return html.wrap_as_html(svg.render_to_svg_with_data(document, orchestrator.get_rendered_tree()))


def save_html(plot: Any, path: Union[str, Path], session: Optional[Session] = None) -> Path:
    """Write the plot's HTML page to *path* (the directory must exist)."""
    return html.save_html(to_html(plot, session), path)


def show(plot: Any = None, session: Optional[Session] = None) -> Path:
    """Open the plot's HTML page in the default web browser."""
    page = to_html(plot, session)
    with tempfile.NamedTemporaryFile("w", suffix=".html", delete=False, encoding="utf-8") as f:
        f.write(page)
        path = Path(f.name)
    webbrowser.open(path.as_uri())
    return path


def widget(
    plot: Any = None,
    width: Optional[Union[int, str]] = None,
    height: Optional[Union[int, str]] = None,
    element_id: Optional[str] = None,
    session: Optional[Session] = None,
) -> html.MaidrWidget:
    """Notebook widget holding the plot's accessible SVG."""
    return html.wrap_as_widget(render(plot, session), width=width, height=height, element_id=element_id)
