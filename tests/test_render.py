"""
Tests for interception lifecycle and the SVG / HTML / widget output.

Run with: python -m pytest tests/test_render.py
"""

import json
import xml.etree.ElementTree as ET

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest
from matplotlib.axes import Axes
from matplotlib.figure import Figure

import config
from core.api import build_document, render, save_html, to_html, widget
from core.session import Session
from recording.interception import is_recording, recording, set_recording
from recording.recorder import get_calls
from rendering.fallback import figure_data_uri
from rendering.html import MaidrWidget, wrap_as_html
from rendering.svg import DATA_ATTRIBUTE


def _bar_session():
    session = Session()
    with recording(session):
        fig, ax = plt.subplots()
        ax.bar(["A", "B"], [10, 20])
    return session, fig


class TestInterception:
    def teardown_method(self):
        set_recording(False)
        plt.close("all")

    def test_uninstall_restores_originals(self):
        originals = {name: getattr(Axes, name) for name in ("bar", "plot", "set_title")}
        subplots = Figure.subplots
        set_recording(True, Session())
        assert is_recording()
        assert Axes.bar is not originals["bar"]
        set_recording(False)
        assert not is_recording()
        for name, original in originals.items():
            assert getattr(Axes, name) is original
        assert Figure.subplots is subplots

    def test_nested_calls_not_recorded(self):
        session = Session()
        with recording(session):
            fig, ax = plt.subplots()
            ax.hist([1, 2, 2, 3])
        names = [c.function_name for c in get_calls(session, session.current_surface)]
        assert names == ["subplots", "hist"]

    def test_return_value_passed_through(self):
        session = Session()
        with recording(session):
            fig, ax = plt.subplots()
            bars = ax.bar(["A", "B"], [1, 2])
        assert len(bars) == 2
        call = get_calls(session, session.current_surface)[-1]
        assert call.result is bars

    def test_disabled_session_does_not_record(self):
        session = Session()
        with recording(session):
            session.recording_enabled = False
            fig, ax = plt.subplots()
            ax.bar(["A"], [1])
        assert session.current_surface is None


class TestSvg:
    def teardown_method(self):
        plt.close("all")

    def test_document_on_root(self):
        session, fig = _bar_session()
        root = ET.fromstring(render(fig, session=session))
        assert root.get("id").startswith("maidr-plot-")
        payload = json.loads(root.get(DATA_ATTRIBUTE))
        assert payload["id"] == root.get("id")
        layer = payload["subplots"][0][0]["layers"][0]
        assert layer["id"] == "subplot-1-1-layer-1"
        assert layer["type"] == "bar"
        assert layer["data"] == [{"x": "A", "y": 10}, {"x": "B", "y": 20}]

    def test_gids_present_in_svg(self):
        session, fig = _bar_session()
        svg = render(fig, session=session)
        assert 'id="graphics-plot-1-rect-1"' in svg
        assert 'id="graphics-plot-1-rect-2"' in svg


class TestHtml:
    def setup_method(self):
        self._saved = config.get_fallback()

    def teardown_method(self):
        config.set_fallback(**self._saved)
        plt.close("all")

    def test_page_loads_client(self):
        page = wrap_as_html("<svg></svg>", version="1.0.0")
        assert "maidr@1.0.0" in page
        assert "maidr.js" in page
        assert "maidr.css" in page

    def test_accessible_page_has_svg(self):
        session, fig = _bar_session()
        page = to_html(fig, session=session)
        assert DATA_ATTRIBUTE in page
        assert "<img" not in page

    def test_fallback_image_for_unknown_layers(self):
        config.set_fallback(enabled=True, format="png", warning=False)
        session = Session()
        with recording(session):
            fig, ax = plt.subplots()
            ax.pie([1, 2])
        assert not build_document(fig, session=session).has_accessible_layers()
        page = to_html(fig, session=session)
        assert '<img src="data:image/png;base64,' in page

    def test_fallback_disabled(self):
        config.set_fallback(enabled=False)
        session = Session()
        with recording(session):
            fig, ax = plt.subplots()
            ax.pie([1, 2])
        page = to_html(fig, session=session)
        assert "<img" not in page
        assert DATA_ATTRIBUTE in page

    def test_data_uri_format(self):
        fig, _ = plt.subplots()
        assert figure_data_uri(fig, "svg").startswith("data:image/svg+xml;base64,")
        with pytest.raises(ValueError):
            figure_data_uri(fig, "gif")

    def test_save_html(self, tmp_path):
        session, fig = _bar_session()
        path = save_html(fig, tmp_path / "plot.html", session=session)
        assert path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_save_html_missing_directory(self, tmp_path):
        session, fig = _bar_session()
        with pytest.raises(FileNotFoundError, match="Directory does not exist"):
            save_html(fig, tmp_path / "missing" / "plot.html", session=session)


class TestWidget:
    def teardown_method(self):
        plt.close("all")

    def test_widget_fields(self):
        session, fig = _bar_session()
        w = widget(fig, width=600, height="50vh", element_id="chart", session=session)
        assert isinstance(w, MaidrWidget)
        d = w.to_dict()
        assert d["width"] == 600
        assert d["element_id"] == "chart"
        assert d["sizingPolicy"]["defaultHeight"] == 400
        assert d["dependencies"][0]["name"] == "maidr"
        html = w._repr_html_()
        assert 'id="chart"' in html
        assert "width: 600px; height: 50vh" in html
