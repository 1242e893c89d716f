"""Tests for sitrep.view.controller."""

import pytest

from sitrep.view.controller import MAX_ZOOM, ViewController, ViewState


class TestSetView:

    def test_default_state(self):
        ctl = ViewController()
        assert ctl.state == ViewState("global", 1.0, (0.0, 0.0))

    def test_change_requests_recompose(self):
        ctl = ViewController()
        assert ctl.set_view("ukraine") is True
        assert ctl.mode == "ukraine"

    def test_same_view_is_noop(self):
        ctl = ViewController("mideast")
        assert ctl.set_view("mideast") is False

    def test_switch_resets_zoom_and_pan(self):
        ctl = ViewController()
        ctl.zoom_in()
        ctl.begin_pan(0, 0)
        ctl.drag_to(50, 50)
        ctl.set_view("taiwan")
        assert ctl.zoom == 1.0
        assert ctl.pan == (0.0, 0.0)
        assert not ctl.panning

    def test_unknown_view_raises(self):
        with pytest.raises(ValueError):
            ViewController().set_view("arctic")
        with pytest.raises(ValueError):
            ViewController("arctic")


class TestZoom:

    def test_steps_and_clamp(self):
        ctl = ViewController()
        for _ in range(10):
            ctl.zoom_in()
        assert ctl.zoom == MAX_ZOOM
        for _ in range(10):
            ctl.zoom_out()
        assert ctl.zoom == 1.0

    def test_zoom_label(self):
        ctl = ViewController()
        ctl.zoom_in()
        assert ctl.zoom_label == "1.5x"

    @pytest.mark.parametrize("delta,expected", [(-100, 1.5), (100, 1.0)])
    def test_wheel_direction(self, delta, expected):
        assert ViewController().wheel(delta) == expected

    def test_zoom_out_to_one_clears_pan(self):
        ctl = ViewController()
        ctl.zoom_in()
        ctl.begin_pan(0, 0)
        ctl.drag_to(40, -40)
        assert ctl.pan != (0.0, 0.0)
        ctl.zoom_out()
        assert ctl.pan == (0.0, 0.0)
        assert not ctl.pan_hint_visible

    def test_zoom_out_reclamps_pan(self):
        ctl = ViewController()
        ctl.zoom_in()
        ctl.zoom_in()                      # 2.0, limit 200
        ctl.begin_pan(0, 0)
        ctl.drag_to(1000, 0)
        assert ctl.pan == (200.0, 0.0)
        ctl.zoom_out()                     # 1.5, limit 100
        assert ctl.pan == (100.0, 0.0)

    def test_reset(self):
        ctl = ViewController("us")
        ctl.zoom_in()
        ctl.reset()
        assert ctl.state == ViewState("us")


class TestPan:

    def test_refused_at_zoom_one(self):
        ctl = ViewController()
        assert ctl.begin_pan(10, 10) is False
        assert ctl.drag_to(100, 100) == (0.0, 0.0)

    def test_drag_divides_by_zoom(self):
        ctl = ViewController()
        ctl.zoom_in()
        ctl.zoom_in()
        ctl.begin_pan(100, 100)
        assert ctl.drag_to(160, 80) == (30.0, -10.0)

    def test_drag_clamped(self):
        ctl = ViewController()
        ctl.zoom_in()                      # 1.5, limit 100
        ctl.begin_pan(0, 0)
        assert ctl.drag_to(-5000, 5000) == (-100.0, 100.0)

    def test_second_drag_continues_from_pan(self):
        ctl = ViewController()
        ctl.zoom_in()
        ctl.zoom_in()
        ctl.begin_pan(0, 0)
        ctl.drag_to(40, 0)                 # pan 20
        ctl.end_pan()
        ctl.begin_pan(500, 500)
        assert ctl.drag_to(520, 500) == (30.0, 0.0)

    def test_drag_after_end_is_ignored(self):
        ctl = ViewController()
        ctl.zoom_in()
        ctl.begin_pan(0, 0)
        ctl.end_pan()
        assert ctl.drag_to(50, 50) == (0.0, 0.0)

    def test_transform(self):
        ctl = ViewController()
        ctl.zoom_in()
        ctl.zoom_in()
        ctl.begin_pan(0, 0)
        ctl.drag_to(20, 40)
        assert ctl.transform() == (2.0, 10.0, 20.0)
        assert ctl.pan_hint_visible
