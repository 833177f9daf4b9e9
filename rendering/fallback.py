"""
Static image fallback for plots with no accessible layer.

The figure is embedded as a base64 ``data:`` URI so the page still shows
the chart.
"""

from __future__ import annotations

import base64
import html as html_lib
import io
from typing import Any, Optional

import config
from core.logging import get_logger, tagged

logger = get_logger()

MIME_TYPES = {"png": "image/png", "svg": "image/svg+xml", "jpeg": "image/jpeg"}


def figure_data_uri(figure: Any, format: str = "png") -> str:
    """``data:<mime>;base64,...`` of the figure saved as *format*."""
    if format not in MIME_TYPES:
        raise ValueError(f"'format' must be one of: {', '.join(MIME_TYPES)}")
    buffer = io.BytesIO()
    figure.savefig(buffer, format=format)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:{MIME_TYPES[format]};base64,{encoded}"


def fallback_image_html(figure: Any, alt: str = "Plot", settings: Optional[dict] = None) -> str:
    """``<img>`` element showing the figure in the configured fallback format."""
    settings = settings or config.get_fallback()
    if settings.get("warning", True):
        logger.warning(
            "No accessible layers found in this plot; showing a static image instead",
            extra=tagged("fallback"),
        )
    uri = figure_data_uri(figure, settings.get("format", "png"))
    return f'<img src="{uri}" alt="{html_lib.escape(alt)}">'
