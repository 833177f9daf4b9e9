"""
SVG rendering with the accessible document embedded.

The figure is saved with the SVG backend (artist gids become element
ids), then the document is serialized to JSON and set as the
``maidr-data`` attribute of the root ``<svg>`` element.
"""

from __future__ import annotations

import io
import json
import xml.etree.ElementTree as ET
from typing import Any

import matplotlib
import numpy as np

from core.logging import get_logger, tagged
from core.types import AccessibleDocument
from .tree import Node

logger = get_logger()

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
DATA_ATTRIBUTE = "maidr-data"

# Fixed salt so clip-path and marker ids are the same on every render
SVG_RC = {"svg.hashsalt": "maidr"}

_NAMESPACES = {
    "": SVG_NS,
    "xlink": XLINK_NS,
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "dc": "http://purl.org/dc/elements/1.1/",
    "cc": "http://creativecommons.org/ns#",
}
for _prefix, _uri in _NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)


def _json_default(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def document_json(document: AccessibleDocument) -> str:
    return json.dumps(document.to_dict(), default=_json_default)


def figure_of(tree_or_figure: Any) -> Any:
    """The matplotlib figure behind a rendered tree (or the figure itself)."""
    if isinstance(tree_or_figure, Node):
        return tree_or_figure.artist
    return tree_or_figure


def figure_to_svg(figure: Any) -> str:
    buffer = io.StringIO()
    with matplotlib.rc_context(SVG_RC):
        figure.savefig(buffer, format="svg", metadata={"Date": None})
    return buffer.getvalue()


def render_to_svg_with_data(document: AccessibleDocument, tree_or_figure: Any) -> str:
    """SVG markup of the figure with *document* on the root element.

    Raises:
        ValueError: If there is no figure to render.
    """
    figure = figure_of(tree_or_figure)
    if figure is None or not hasattr(figure, "savefig"):
        raise ValueError("Nothing to render: the rendered tree has no figure")
    root = ET.fromstring(figure_to_svg(figure))
    root.set("id", document.id)
    root.set(DATA_ATTRIBUTE, document_json(document))
    logger.debug(f"Rendered SVG for {document.id}", extra=tagged("render"))
    return ET.tostring(root, encoding="unicode")
