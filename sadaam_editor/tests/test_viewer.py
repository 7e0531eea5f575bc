"""Tests for the result viewer state."""

import random

import pytest

from ..core.viewer import ViewerState
from ..domain.value_objects.viewer import MAX_SCALE, MIN_SCALE


class TestZoom:
    """Test wheel and button zoom."""

    def test_wheel_up_zooms_in(self):
        state = ViewerState()
        state.wheel(-120)
        assert state.scale == pytest.approx(1.2)

    def test_wheel_down_zooms_out(self):
        state = ViewerState()
        state.wheel(120)
        assert state.scale == pytest.approx(0.8)

    def test_wheel_zero_is_ignored(self):
        state = ViewerState()
        state.wheel(0)
        assert state.scale == 1.0

    def test_buttons(self):
        state = ViewerState()
        state.zoom_in()
        assert state.scale == pytest.approx(1.5)
        state.zoom_out()
        state.zoom_out()
        assert state.scale == pytest.approx(0.5)
        assert state.zoom_percent == 50

    def test_scale_stays_in_bounds(self):
        rng = random.Random(42)
        state = ViewerState()
        actions = [state.zoom_in, state.zoom_out, lambda: state.wheel(1), lambda: state.wheel(-1)]

        for _ in range(500):
            rng.choice(actions)()
            assert MIN_SCALE <= state.scale <= MAX_SCALE

    def test_clamps_at_max(self):
        state = ViewerState()
        for _ in range(20):
            state.zoom_in()
        assert state.scale == MAX_SCALE
        assert state.zoom_percent == 500


class TestPan:
    """Test drag-to-pan."""

    def test_drag_moves_offset(self):
        state = ViewerState()
        state.begin_drag(10, 10)
        state.drag_to(40, 25)
        assert state.offset == (30, 15)

    def test_second_drag_continues_from_offset(self):
        state = ViewerState()
        state.begin_drag(0, 0)
        state.drag_to(20, 20)
        state.end_drag()

        state.begin_drag(100, 100)
        state.drag_to(110, 90)
        assert state.offset == (30, 10)

    def test_move_without_drag_is_ignored(self):
        state = ViewerState()
        state.drag_to(50, 50)
        assert state.offset == (0.0, 0.0)

    def test_end_drag(self):
        state = ViewerState()
        state.begin_drag(0, 0)
        assert state.is_dragging
        state.end_drag()
        assert not state.is_dragging
        state.drag_to(5, 5)
        assert state.offset == (0.0, 0.0)


class TestSourceChange:
    """Test view reset when the displayed image changes."""

    def test_new_source_resets_view(self):
        state = ViewerState()
        state.set_source("data:image/png;base64,AAAA")
        state.zoom_in()
        state.begin_drag(0, 0)
        state.drag_to(30, 30)

        assert state.set_source("data:image/png;base64,BBBB")
        assert state.transform.is_identity
        assert not state.is_dragging

    def test_same_source_keeps_view(self):
        state = ViewerState()
        state.set_source("a")
        state.zoom_in()

        assert not state.set_source("a")
        assert state.scale == pytest.approx(1.5)

    def test_reset_view(self):
        state = ViewerState()
        state.zoom_in()
        state.begin_drag(0, 0)
        state.drag_to(3, 4)
        state.reset_view()
        assert state.transform.is_identity
