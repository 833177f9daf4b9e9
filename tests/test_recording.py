"""
Tests for call recording: store, device state, panel layouts and grouping.

Run with: python -m pytest tests/test_recording.py
"""

import pytest

from core.session import Session, get_session, reset_session
from recording import (
    CallArgs,
    CallClass,
    CallStore,
    RecordedCall,
    clear,
    detect_panel_configuration,
    get_call_count,
    get_calls,
    get_calls_by_class,
    get_device_state,
    get_plot_group,
    group_calls,
    has_calls,
    log_call,
)
from recording.state import PanelConfig, panel_config_from_call

SURFACE = 1


@pytest.fixture
def session():
    """Fresh session with an empty registry (no plotting systems needed)."""
    from systems.registry import SystemRegistry
    return Session(registry=SystemRegistry())


def _log(session, name, *args, surface=SURFACE, **kwargs):
    return log_call(session, name, None, CallArgs(args, kwargs), surface)


# ---------------------------------------------------------------------------
# CallArgs / CallStore
# ---------------------------------------------------------------------------

class TestCallArgs:
    def test_named_wins_over_position(self):
        args = CallArgs((1, 2), {"height": 5})
        assert args.get("height", 1) == 5

    def test_position_fallback(self):
        args = CallArgs((1, 2), {})
        assert args.get("height", 1) == 2

    def test_default(self):
        assert CallArgs((), {}).get("x", 0, "none") == "none"


class TestCallStore:
    def _call(self, index):
        return RecordedCall(
            function_name="bar", class_level=CallClass.HIGH, args=CallArgs((), {}),
            call_expression="bar()", timestamp=0.0, sequence_index=index,
        )

    def test_append_in_order(self):
        store = CallStore()
        store.append(self._call(store.next_index))
        store.append(self._call(store.next_index))
        assert [c.sequence_index for c in store.get_calls()] == [1, 2]

    def test_rejects_non_increasing_index(self):
        store = CallStore()
        store.append(self._call(1))
        with pytest.raises(ValueError):
            store.append(self._call(1))


# ---------------------------------------------------------------------------
# log_call and lifecycle
# ---------------------------------------------------------------------------

class TestLogCall:
    def test_classifies_and_records(self, session):
        call = _log(session, "Axes.bar", ["A"], [1])
        assert call.function_name == "bar"
        assert call.class_level == CallClass.HIGH
        assert has_calls(session, SURFACE)
        assert get_call_count(session, SURFACE) == 1

    def test_sequence_strictly_increasing(self, session):
        for name in ("bar", "text", "plot"):
            _log(session, name)
        indices = [c.sequence_index for c in get_calls(session, SURFACE)]
        assert indices == sorted(indices)
        assert len(set(indices)) == 3

    def test_get_calls_by_class(self, session):
        _log(session, "bar")
        _log(session, "text")
        _log(session, "subplots", 2, 2)
        assert [c.function_name for c in get_calls_by_class(session, SURFACE, CallClass.LOW)] == ["text"]

    def test_clear_resets_state(self, session):
        _log(session, "bar")
        clear(session, SURFACE)
        assert not has_calls(session, SURFACE)
        assert get_device_state(session, SURFACE).current_plot_index == 0

    def test_no_surface_has_no_calls(self, session):
        assert not has_calls(session, None)


# ---------------------------------------------------------------------------
# Device state
# ---------------------------------------------------------------------------

class TestDeviceState:
    def test_high_call_advances_plot_index(self, session):
        _log(session, "bar")
        _log(session, "plot")
        assert get_device_state(session, SURFACE).current_plot_index == 2

    def test_layout_resets_plot_and_panel(self, session):
        _log(session, "bar")
        _log(session, "par", mfrow=(2, 2))
        state = get_device_state(session, SURFACE)
        assert state.layout_active
        assert state.current_plot_index == 0
        assert state.current_panel == 0

    def test_panel_does_not_wrap(self, session):
        _log(session, "par", mfrow=(1, 2))
        for _ in range(3):
            _log(session, "plot")
        assert get_device_state(session, SURFACE).current_panel == 3

    def test_single_panel_layout_is_inactive(self, session):
        _log(session, "subplots", 1, 1)
        _log(session, "bar")
        _log(session, "plot")
        state = get_device_state(session, SURFACE)
        assert not state.layout_active
        assert state.current_panel == 0

    def test_unrecognized_layout_args_change_nothing(self, session):
        _log(session, "par", cex=2)
        state = get_device_state(session, SURFACE)
        assert not state.layout_active
        assert state.panel_config == PanelConfig()


# ---------------------------------------------------------------------------
# Panel configuration
# ---------------------------------------------------------------------------

class TestPanelConfig:
    def test_mfrow(self):
        config = panel_config_from_call("par", CallArgs((), {"mfrow": (2, 3)}))
        assert config.to_dict() == {"type": "mfrow", "nrows": 2, "ncols": 3, "total_panels": 6}

    def test_mfcol(self):
        config = panel_config_from_call("par", CallArgs((), {"mfcol": (3, 2)}))
        assert config.type == "mfcol"
        assert config.position_of(2) == (1, 0)

    def test_layout_matrix_counts_distinct_ids(self):
        config = panel_config_from_call("layout", CallArgs(([[1, 2], [3, 3]],), {}))
        assert config.type == "layout"
        assert (config.nrows, config.ncols, config.total_panels) == (2, 2, 3)

    def test_mosaic_string(self):
        config = panel_config_from_call("subplot_mosaic", CallArgs(("AB;CC",), {}))
        assert config.total_panels == 3
        assert config.position_of(3) == (1, 0)

    def test_mosaic_empty_cells(self):
        config = panel_config_from_call("subplot_mosaic", CallArgs(([["A", "."], ["B", "B"]],), {}))
        assert config.total_panels == 2

    def test_subplots_single(self):
        assert panel_config_from_call("subplots", CallArgs((1, 1), {})) == PanelConfig()

    def test_subplots_grid(self):
        config = panel_config_from_call("subplots", CallArgs((), {"nrows": 2, "ncols": 2}))
        assert config.type == "mfrow"
        assert config.total_panels == 4

    def test_position_rejects_zero(self):
        with pytest.raises(ValueError):
            PanelConfig.grid("mfrow", 2, 2).position_of(0)

    def test_detect_last_layout_wins(self, session):
        _log(session, "par", mfrow=(2, 3))
        _log(session, "layout", [[1, 2], [3, 3]])
        config = detect_panel_configuration(session, SURFACE)
        assert config.type == "layout"
        assert config.total_panels == 3

    def test_detect_none_without_layout_calls(self, session):
        _log(session, "bar")
        assert detect_panel_configuration(session, SURFACE) is None


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

class TestGrouping:
    def test_high_low_sequence(self, session):
        for name in ("bar", "text", "legend", "plot", "axhline"):
            _log(session, name)
        grouped = group_calls(session, SURFACE)
        assert grouped.total_groups == 2
        assert len(grouped.groups[0].low_calls) == 2
        assert len(grouped.groups[1].low_calls) == 1

    def test_leading_low_is_dropped(self, session):
        for name in ("text", "bar", "legend"):
            _log(session, name)
        grouped = group_calls(session, SURFACE)
        assert grouped.total_groups == 1
        assert [c.function_name for c in grouped.groups[0].low_calls] == ["legend"]

    def test_layout_calls_collected_apart(self, session):
        _log(session, "subplots", 1, 2)
        _log(session, "bar")
        grouped = group_calls(session, SURFACE)
        assert grouped.total_layout_calls == 1
        assert grouped.total_groups == 1

    def test_low_call_indices(self, session):
        for name in ("bar", "text", "legend"):
            _log(session, name)
        group = group_calls(session, SURFACE).groups[0]
        assert group.high_call_index == 0
        assert group.low_call_indices == [1, 2]

    def test_get_plot_group_is_one_based(self, session):
        _log(session, "bar")
        _log(session, "plot")
        assert get_plot_group(session, SURFACE, 1).high_call.function_name == "bar"
        assert get_plot_group(session, SURFACE, 2).high_call.function_name == "plot"
        assert get_plot_group(session, SURFACE, 0) is None
        assert get_plot_group(session, SURFACE, 3) is None


class TestDefaultSession:
    def teardown_method(self):
        reset_session()

    def test_default_session_is_shared(self):
        assert get_session() is get_session()

    def test_reset_gives_fresh_session(self):
        first = get_session()
        _log(first, "bar", ["A"], [1])
        reset_session()
        second = get_session()
        assert second is not first
        assert not has_calls(second, SURFACE)


class _Figure:
    """Stand-in figure: only needs to be weak-referenceable."""


class TestSurfaceLifecycle:
    def test_prune_clears_closed_figures(self, session):
        open_fig, closed_fig = _Figure(), _Figure()
        open_sid = session.attach_figure(open_fig)
        _log(session, "bar", surface=open_sid)
        closed_sid = session.attach_figure(closed_fig)
        _log(session, "bar", surface=closed_sid)
        assert session.prune(lambda fig: fig is closed_fig) == [closed_sid]
        assert session.surfaces() == [open_sid]
        assert session.current_surface is None

    def test_prune_clears_collected_figures(self, session):
        sid = session.attach_figure(_Figure())
        _log(session, "bar", surface=sid)
        assert session.prune(lambda fig: False) == [sid]
        assert not has_calls(session, sid)
