"""
End-to-end tests for plotnine plots: layer detection, computed data,
facets and node naming.

Run with: python -m pytest tests/test_plotnine_pipeline.py
"""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import pytest

plotnine = pytest.importorskip("plotnine")
from plotnine import (
    aes, facet_wrap, geom_abline, geom_bar, geom_boxplot, geom_col, geom_histogram, geom_hline, geom_line,
    geom_point, geom_smooth, geom_text, geom_tile, geom_vline, ggplot, labs,
)

from core.api import build_document, get_orchestrator
from core.session import Session
from core.types import ChartType


@pytest.fixture
def df():
    return pd.DataFrame({
        "x": ["B", "A", "C", "B", "A", "C"],
        "y": [2, 1, 3, 5, 4, 6],
        "g": ["m", "m", "m", "n", "n", "n"],
    })


def _layers(plot):
    return build_document(plot, session=Session()).layers()


class TestPlotnineBar:
    def teardown_method(self):
        plt.close("all")

    def test_bar_sorted_by_category(self, df):
        plot = ggplot(df[df["g"] == "m"], aes("x", "y")) + geom_col()
        layers = _layers(plot)
        assert len(layers) == 1
        bar = layers[0]
        assert bar.type == ChartType.BAR
        assert bar.data == [{"x": "A", "y": 1}, {"x": "B", "y": 2}, {"x": "C", "y": 3}]
        assert len(bar.selectors) == 3
        assert all(sel.startswith("#geom_col\\.polygon\\.1\\.1\\.") for sel in bar.selectors)

    def test_labels(self, df):
        plot = ggplot(df, aes("x", "y")) + geom_col() + labs(title="Totals", x="Letter", y="Count")
        bar = _layers(plot)[0]
        assert bar.title == "Totals"
        assert bar.axes == {"x": "Letter", "y": "Count"}

    def test_dodged_detected(self, df):
        plot = ggplot(df, aes("x", "y", fill="g")) + geom_col(position="dodge")
        dodged = _layers(plot)[0]
        assert dodged.type == ChartType.DODGED_BAR
        assert len(dodged.data) == 2
        assert [len(series) for series in dodged.data] == [3, 3]

    def test_stacked_detected(self, df):
        plot = ggplot(df, aes("x", "y", fill="g")) + geom_col()
        assert _layers(plot)[0].type == ChartType.STACKED_BAR


class TestPlotnineOtherLayers:
    def teardown_method(self):
        plt.close("all")

    def test_point_colour_only_when_mapped(self, df):
        numeric = pd.DataFrame({"a": [1, 2, 3], "b": [4, 5, 6], "g": ["m", "n", "m"]})
        plain = _layers(ggplot(numeric, aes("a", "b")) + geom_point())[0]
        assert plain.type == ChartType.POINT
        assert plain.data == [{"x": 1, "y": 4}, {"x": 2, "y": 5}, {"x": 3, "y": 6}]
        colored = _layers(ggplot(numeric, aes("a", "b", color="g")) + geom_point())[0]
        assert all(p["color"].startswith("#") for p in colored.data)

    def test_histogram(self):
        data = pd.DataFrame({"v": [1, 2, 2, 3, 3, 3, 4, 4, 5]})
        hist = _layers(ggplot(data, aes("v")) + geom_histogram(bins=3))[0]
        assert hist.type == ChartType.HIST
        assert len(hist.data) == 3
        assert sum(p["y"] for p in hist.data) == 9
        assert all(p["xMin"] < p["xMax"] for p in hist.data)

    def test_text_layer_skipped(self, df):
        plot = ggplot(df, aes("x", "y")) + geom_col() + geom_text(aes(label="y"))
        assert [layer.type for layer in _layers(plot)] == [ChartType.BAR]


class TestPlotnineStructure:
    def teardown_method(self):
        plt.close("all")

    def test_facets_become_subplots(self, df):
        plot = ggplot(df, aes("x", "y")) + geom_col() + facet_wrap("~g")
        document = build_document(plot, session=Session())
        cells = [cell for row in document.subplots for cell in row]
        assert len(cells) == 2
        assert cells[0].id == "subplot-1-1"
        assert [layer.type for cell in cells for layer in cell.layers] == [ChartType.BAR, ChartType.BAR]
        assert get_orchestrator(plot, session=Session()).is_faceted_plot()

    def test_user_plot_untouched(self, df):
        plot = ggplot(df, aes("x", "y")) + geom_col()
        layers_before = len(plot.layers)
        build_document(plot, session=Session())
        assert len(plot.layers) == layers_before

    def test_repeatable(self, df):
        plot = ggplot(df, aes("x", "y")) + geom_col()
        first = build_document(plot, session=Session()).to_dict()
        second = build_document(plot, session=Session()).to_dict()
        first.pop("id")
        second.pop("id")
        assert first == second

    def test_drawing_leaves_plot_unbuilt(self, df):
        plot = ggplot(df, aes("x", "y")) + geom_col()
        build_document(plot, session=Session())
        assert plot.layers[0].data is None or "PANEL" not in plot.layers[0].data.columns

    def test_composition_becomes_subplots(self, df):
        left = ggplot(df, aes("x", "y")) + geom_col()
        right = ggplot(df, aes("y", "y")) + geom_point()
        document = build_document(left | right, session=Session())
        cells = [cell for row in document.subplots for cell in row]
        assert len(cells) == 2
        assert [layer.type for cell in cells for layer in cell.layers] == [ChartType.BAR, ChartType.POINT]


@pytest.fixture
def tiles():
    return pd.DataFrame({
        "col": ["a", "b", "a", "b"],
        "row": ["r1", "r1", "r2", "r2"],
        "v": [1, 2, 3, 4],
    })


class TestPlotnineHeatmap:
    def teardown_method(self):
        plt.close("all")

    def test_tile_values_top_row_first(self, tiles):
        heat = _layers(ggplot(tiles, aes("col", "row", fill="v")) + geom_tile())[0]
        assert heat.type == ChartType.HEAT
        assert heat.data["points"] == [[3, 4], [1, 2]]
        assert heat.data["x"] == ["a", "b"]
        assert heat.data["y"] == ["r2", "r1"]
        assert heat.dom_mapping == {"order": "row"}
        assert len(heat.selectors) == 1

    def test_faceted_tiles_keep_their_panel(self, tiles):
        both = pd.concat([tiles.assign(g="m"), tiles.assign(v=tiles["v"] * 10, g="n")])
        document = build_document(
            ggplot(both, aes("col", "row", fill="v")) + geom_tile() + facet_wrap("~g"),
            session=Session(),
        )
        cells = [cell for row in document.subplots for cell in row]
        assert [cell.layers[0].data["points"] for cell in cells] == [
            [[3, 4], [1, 2]],
            [[30, 40], [10, 20]],
        ]


class TestPlotnineSeries:
    def teardown_method(self):
        plt.close("all")

    def test_plain_bar_counts(self, df):
        bar = _layers(ggplot(df, aes("x")) + geom_bar())[0]
        assert bar.type == ChartType.BAR
        assert bar.data == [{"x": "A", "y": 2}, {"x": "B", "y": 2}, {"x": "C", "y": 2}]

    def test_dodged_series_named_by_fill(self, df):
        dodged = _layers(ggplot(df, aes("x", "y", fill="g")) + geom_col(position="dodge"))[0]
        assert [series[0]["fill"] for series in dodged.data] == ["m", "n"]

    def test_grouped_lines_named_by_colour(self):
        data = pd.DataFrame({
            "t": [1, 2, 3, 1, 2, 3],
            "v": [1, 2, 3, 3, 2, 1],
            "grp": ["south", "south", "south", "north", "north", "north"],
        })
        line = _layers(ggplot(data, aes("t", "v", color="grp")) + geom_line())[0]
        assert line.type == ChartType.LINE
        assert len(line.data) == 2
        names = {series[0]["fill"] for series in line.data}
        assert names == {"north", "south"}
        north = next(series for series in line.data if series[0]["fill"] == "north")
        assert [p["y"] for p in north] == [3, 2, 1]

    def test_boxplot(self):
        data = pd.DataFrame({
            "k": ["A"] * 5 + ["B"] * 6,
            "v": [1, 2, 3, 4, 5, 2, 3, 4, 5, 6, 30],
        })
        box = _layers(ggplot(data, aes("k", "v")) + geom_boxplot())[0]
        assert box.type == ChartType.BOX
        assert [b["fill"] for b in box.data] == ["A", "B"]
        assert [b["q2"] for b in box.data] == [3, 4.5]
        assert box.data[1]["upperOutliers"] == [30]
        assert box.data[0]["upperOutliers"] == []

    def test_smooth(self):
        data = pd.DataFrame({"a": [1, 2, 3, 4, 5], "b": [2, 4, 6, 8, 10]})
        layers = _layers(ggplot(data, aes("a", "b")) + geom_point() + geom_smooth(method="lm", se=False))
        assert [layer.type for layer in layers] == [ChartType.POINT, ChartType.SMOOTH]
        smooth = layers[1]
        assert smooth.data[0]["y"] == pytest.approx(2)
        assert smooth.data[-1]["y"] == pytest.approx(10)
        assert smooth.selectors


class TestPlotnineReferenceLines:
    def teardown_method(self):
        plt.close("all")

    @pytest.fixture
    def base(self):
        data = pd.DataFrame({"a": [1, 2, 3], "b": [10, 20, 30]})
        return ggplot(data, aes("a", "b")) + geom_point()

    def test_hline_spans_padded_x_range(self, base):
        ref = _layers(base + geom_hline(yintercept=15))[1]
        assert ref.type == ChartType.LINE
        assert [p["y"] for p in ref.data] == [15, 15]
        assert ref.data[0]["x"] == pytest.approx(0.9)
        assert ref.data[1]["x"] == pytest.approx(3.1)

    def test_vline_spans_padded_y_range(self, base):
        ref = _layers(base + geom_vline(xintercept=2))[1]
        assert [p["x"] for p in ref.data] == [2, 2]
        assert ref.data[0]["y"] == pytest.approx(9)
        assert ref.data[1]["y"] == pytest.approx(31)

    def test_abline_endpoints(self, base):
        ref = _layers(base + geom_abline(slope=10, intercept=0))[1]
        assert [p["x"] for p in ref.data] == [pytest.approx(0.9), pytest.approx(3.1)]
        assert [p["y"] for p in ref.data] == [pytest.approx(9), pytest.approx(31)]
