"""
Tests for rendering.tree - node search and CSS selectors.

Run with: python -m pytest tests/test_tree.py
"""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from rendering.tree import (
    Node,
    as_node,
    build_child_selector,
    build_css_selector,
    escape_id,
    find_node_by_pattern,
    find_nodes_by_pattern,
)


def _tree():
    """Heterogeneous tree: unnamed children list, a named-children map and a grobs list."""
    return {
        "name": "layout",
        "children": [
            {"name": "panel", "grobs": [
                {"name": "graphics-plot-1-rect-1"},
                {"name": "graphics-plot-1-rect-2"},
            ]},
            {"name": "guides", "children": {
                "axis": {"grobs": []},
                "ticks": {"name": "graphics-plot-1-rect-10-extra"},
            }},
        ],
    }


class TestFindNode:
    def test_finds_in_grobs_list(self):
        assert find_node_by_pattern(_tree(), r"^graphics-plot-1-rect-[0-9]+$") == "graphics-plot-1-rect-1"

    def test_index_substitution(self):
        assert find_node_by_pattern(_tree(), r"^graphics-plot-{index}-rect-2$", index=1) == "graphics-plot-1-rect-2"

    def test_exact_match_only(self):
        assert find_node_by_pattern(_tree(), r"graphics-plot-1-rect-10") is None
        assert find_node_by_pattern(_tree(), r"plot-1-rect-1") is None

    def test_none_input(self):
        assert find_node_by_pattern(None, r".*") is None
        assert find_nodes_by_pattern(None, r".*") == []

    def test_find_all_in_preorder(self):
        names = find_nodes_by_pattern(_tree(), r"^graphics-plot-1-rect-[0-9]+$")
        assert names == ["graphics-plot-1-rect-1", "graphics-plot-1-rect-2"]

    def test_named_children_map(self):
        assert find_node_by_pattern(_tree(), r"^axis$") == "axis"
        assert find_node_by_pattern(_tree(), r"^graphics-plot-1-rect-10-extra$") is not None


class TestMatplotlibTree:
    def test_artist_gids_are_names(self):
        fig, ax = plt.subplots()
        bars = ax.bar(["A", "B"], [1, 2])
        bars[0].set_gid("graphics-plot-1-rect-1")
        root = as_node(fig)
        assert isinstance(root, Node)
        assert find_node_by_pattern(root, r"^graphics-plot-1-rect-1$") == "graphics-plot-1-rect-1"
        plt.close(fig)


class TestSelectors:
    def test_escape_dots(self):
        assert escape_id("geom_bar.polygon.1.1.1") == "geom_bar\\.polygon\\.1\\.1\\.1"

    def test_css_selector(self):
        assert build_css_selector("a.b", "image") == "image#a\\.b"

    def test_css_selector_cap(self):
        assert build_css_selector("a", "path", max_elements=3) == "path#a:nth-child(-n+3)"

    def test_child_selector(self):
        assert build_child_selector("a.b", "path") == "#a\\.b > path"
        assert build_child_selector("a", "path", nth=2) == "#a > path:nth-child(2)"
        assert build_child_selector("a", "use", direct=False) == "#a use"
