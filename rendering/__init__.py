"""Rendered tree, scale helpers, and SVG/HTML output."""

from .tree import (
    Node,
    as_node,
    find_node_by_pattern,
    find_nodes_by_pattern,
    escape_id,
    build_css_selector,
    build_child_selector,
)
from .scales import apply_scale_mapping, extract_scale_mapping, format_value

__all__ = [
    "Node",
    "as_node",
    "find_node_by_pattern",
    "find_nodes_by_pattern",
    "escape_id",
    "build_css_selector",
    "build_child_selector",
    "apply_scale_mapping",
    "extract_scale_mapping",
    "format_value",
]
