"""
HTML shells around the rendered SVG: a standalone page and a notebook widget.

Both declare the maidr client (``maidr.js`` and ``maidr.css``) from the
CDN configured in ``config.py``.
"""

from __future__ import annotations

import html as html_lib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import config
from core.logging import get_logger, tagged

logger = get_logger()

SIZING_POLICY = {"defaultWidth": "100%", "defaultHeight": 400, "knitr": {"figure": True}}


def maidr_dependency(version: Optional[str] = None) -> dict:
    """Script and stylesheet of the maidr client."""
    version = version or config.MAIDR_VERSION
    return {
        "name": "maidr",
        "version": version,
        "src": config.get_cdn_url(version),
        "script": "maidr.js",
        "stylesheet": "maidr.css",
    }


def dependency_tags(dependencies: list[dict]) -> str:
    tags = []
    for dep in dependencies:
        if dep.get("stylesheet"):
            tags.append(f'<link rel="stylesheet" href="{dep["src"]}/{dep["stylesheet"]}">')
        if dep.get("script"):
            tags.append(f'<script type="text/javascript" src="{dep["src"]}/{dep["script"]}"></script>')
    return "\n".join(tags)


def wrap_as_html(svg: str, title: str = "maidr plot", version: Optional[str] = None) -> str:
    """Standalone HTML page holding *svg* and the maidr client."""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{html_lib.escape(title)}</title>\n"
        f"{dependency_tags([maidr_dependency(version)])}\n"
        "</head>\n<body>\n"
        f"<div>\n{svg}\n</div>\n"
        "</body>\n</html>\n"
    )


@dataclass
class MaidrWidget:
    """Embeddable widget: the SVG plus what a host page needs to load maidr.

    ``_repr_html_`` lets notebooks display it inline.
    """
    svg_content: str
    width: Optional[Union[int, str]] = None
    height: Optional[Union[int, str]] = None
    element_id: Optional[str] = None
    dependencies: list = field(default_factory=lambda: [maidr_dependency()])
    sizing_policy: dict = field(default_factory=lambda: dict(SIZING_POLICY))

    def to_dict(self) -> dict:
        return {
            "svg_content": self.svg_content,
            "width": self.width,
            "height": self.height,
            "element_id": self.element_id,
            "dependencies": [dict(dep) for dep in self.dependencies],
            "sizingPolicy": self.sizing_policy,
        }

    def _style(self) -> str:
        parts = []
        for key, value in (("width", self.width), ("height", self.height)):
            if value is not None:
                parts.append(f"{key}: {value}px" if isinstance(value, (int, float)) else f"{key}: {value}")
        return "; ".join(parts)

    def _repr_html_(self) -> str:
        attrs = ""
        if self.element_id:
            attrs += f' id="{html_lib.escape(self.element_id)}"'
        if self._style():
            attrs += f' style="{self._style()}"'
        return f"{dependency_tags(self.dependencies)}\n<div{attrs}>\n{self.svg_content}\n</div>"


def wrap_as_widget(
    svg: str,
    width: Optional[Union[int, str]] = None,
    height: Optional[Union[int, str]] = None,
    element_id: Optional[str] = None,
) -> MaidrWidget:
    return MaidrWidget(svg_content=svg, width=width, height=height, element_id=element_id)


def save_html(html: str, path: Union[str, Path]) -> Path:
    """Write *html* to *path*; the parent directory must already exist.

    Raises:
        FileNotFoundError: If the parent directory does not exist.
    """
    path = Path(path)
    if not path.parent.is_dir():
        raise FileNotFoundError(f"Directory does not exist: {path.parent}")
    path.write_text(html, encoding="utf-8")
    logger.debug(f"Saved HTML to {path}", extra=tagged("render"))
    return path
