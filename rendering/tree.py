"""
Renderable tree and CSS selector helpers.

The rendered plot is exposed as a tree of ``Node`` objects with a single
``children()`` operation, whatever the host structure looks like:
matplotlib artists (``get_children()``), or plain dicts whose children sit
under "children", "grobs" or a name→child map. Layer processors search it
with exact name patterns and turn the names they find into CSS selectors
against the SVG the figure saves to (the SVG backend writes artist gids as
element ids).
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterator, Optional, Union


class Node:
    """A named node of a rendered tree. Children are resolved lazily."""

    __slots__ = ("name", "artist", "_children")

    def __init__(
        self,
        name: Optional[str],
        children: Union[list, Callable[[], list], None] = None,
        artist: Any = None,
    ):
        self.name = name
        self.artist = artist
        self._children = children

    def children(self) -> list[Node]:
        if callable(self._children):
            self._children = self._children()
        return list(self._children or [])

    @classmethod
    def from_artist(cls, artist: Any) -> Node:
        """Wrap a matplotlib artist; ``name`` is its gid."""
        return cls(
            artist.get_gid(),
            lambda: [cls.from_artist(child) for child in artist.get_children()],
            artist=artist,
        )

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal."""
        yield self
        for child in self.children():
            yield from child.walk()

    def __repr__(self) -> str:
        return f"Node({self.name!r})"


def _dict_children(d: dict) -> list:
    for key in ("children", "grobs"):
        kids = d.get(key)
        if isinstance(kids, dict):
            return [as_node(v, name=k) for k, v in kids.items()]
        if isinstance(kids, (list, tuple)):
            return [as_node(v) for v in kids]
    return []


def as_node(obj: Any, name: Optional[str] = None) -> Optional[Node]:
    """Adapt a host tree (Node, matplotlib artist, dict) to a Node, or None."""
    if obj is None:
        return None
    if isinstance(obj, Node):
        return obj
    if hasattr(obj, "get_children") and hasattr(obj, "get_gid"):
        return Node.from_artist(obj)
    if isinstance(obj, dict):
        return Node(obj.get("name", name), lambda: _dict_children(obj))
    if isinstance(obj, (list, tuple)):
        return Node(name, lambda: [as_node(v) for v in obj])
    return Node(name)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def _compile(pattern: str, index: Optional[int]) -> re.Pattern:
    if index is not None:
        pattern = pattern.replace("{index}", str(index))
    return re.compile(pattern)


def find_nodes_by_pattern(tree: Any, pattern: str, index: Optional[int] = None) -> list[str]:
    """All node names that match *pattern* exactly, in pre-order.

    ``{index}`` in *pattern* is replaced by *index* before compiling.
    """
    root = as_node(tree)
    if root is None:
        return []
    regex = _compile(pattern, index)
    return [
        node.name for node in root.walk()
        if isinstance(node.name, str) and regex.fullmatch(node.name)
    ]


def find_node_by_pattern(tree: Any, pattern: str, index: Optional[int] = None) -> Optional[str]:
    """First node name that matches *pattern* exactly, or None.

    Matching is whole-name: a name with an extra prefix or suffix misses.
    """
    root = as_node(tree)
    if root is None:
        return None
    regex = _compile(pattern, index)
    for node in root.walk():
        if isinstance(node.name, str) and regex.fullmatch(node.name):
            return node.name
    return None


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

def escape_id(node_name: str) -> str:
    """Escape literal dots so the name can sit in a CSS id selector."""
    return node_name.replace(".", "\\.")


def build_css_selector(node_name: str, element_tag: str, max_elements: int = 0) -> str:
    """``tag#escaped_name``, capped with ``:nth-child(-n+K)`` when max_elements > 0."""
    selector = f"{element_tag}#{escape_id(node_name)}"
    if max_elements > 0:
        selector += f":nth-child(-n+{max_elements})"
    return selector


def build_child_selector(
    node_name: str,
    element_tag: str,
    nth: Optional[int] = None,
    direct: bool = True,
) -> str:
    """Selector for elements inside the group carrying *node_name*.

    matplotlib writes a patch/line/collection gid on a wrapping ``<g>``
    and draws the shapes inside it. ``direct`` limits the match to the
    group's own children; ``nth`` picks the 1-based nth child.
    """
    combinator = " > " if direct else " "
    selector = f"#{escape_id(node_name)}{combinator}{element_tag}"
    if nth is not None:
        selector += f":nth-child({nth})"
    return selector
