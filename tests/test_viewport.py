import pytest

from motrak.liveplot.viewport import MAX_SCALE, MIN_SCALE, ViewportController, ViewportState


def test_initial_state_is_default_view() -> None:
    controller = ViewportController(chart_width_px=900)
    assert controller.scale == 1.0
    assert controller.pan_offset_px == 0.0
    assert controller.state.pan_clamp_max == 0.0


def test_pinch_saturates_at_max_scale() -> None:
    controller = ViewportController(chart_width_px=900)
    for _ in range(5):
        controller.on_pinch(10.0)
        assert controller.scale <= MAX_SCALE
    assert controller.scale == MAX_SCALE


def test_pinch_saturates_at_min_scale() -> None:
    controller = ViewportController(chart_width_px=900)
    controller.on_pinch(3.0)
    for _ in range(5):
        controller.on_pinch(0.01)
    assert controller.scale == MIN_SCALE


def test_pinch_multiplies_scale() -> None:
    controller = ViewportController(chart_width_px=900)
    assert controller.on_pinch(1.5)
    assert controller.on_pinch(2.0)
    assert controller.scale == pytest.approx(3.0)


def test_drag_is_ignored_at_scale_one() -> None:
    controller = ViewportController(chart_width_px=900)
    assert not controller.on_drag(100)
    assert controller.pan_offset_px == 0.0


def test_drag_pans_and_clamps_when_zoomed() -> None:
    controller = ViewportController(chart_width_px=900)
    controller.on_pinch(2.0)
    assert controller.state.pan_clamp_max == pytest.approx(900.0)

    controller.on_drag(100)
    assert controller.pan_offset_px == pytest.approx(100.0)

    controller.on_drag(5000)
    assert controller.pan_offset_px == pytest.approx(900.0)

    controller.on_drag(-10000)
    assert controller.pan_offset_px == 0.0


def test_zooming_out_reclamps_pan() -> None:
    controller = ViewportController(chart_width_px=900)
    controller.on_pinch(3.0)
    controller.on_drag(1500)
    controller.on_pinch(0.5)
    state = controller.state
    assert state.scale == pytest.approx(1.5)
    assert state.pan_offset_px == pytest.approx(state.pan_clamp_max)


def test_reset_gesture_restores_default_view_after_any_history() -> None:
    controller = ViewportController(chart_width_px=900)
    controller.on_pinch(4.0)
    controller.on_drag(250)
    controller.on_pinch(0.8)
    controller.on_drag(-30)

    assert controller.on_reset_gesture()
    assert controller.scale == 1.0
    assert controller.pan_offset_px == 0.0
    assert not controller.on_reset_gesture()


def test_disabled_controller_ignores_gestures() -> None:
    controller = ViewportController(chart_width_px=900, enabled=False)
    assert not controller.on_pinch(3.0)
    assert not controller.on_drag(50)
    assert controller.state == ViewportState(chart_width_px=900)


def test_disabled_controller_ignores_reset_gesture_but_allows_programmatic_reset() -> None:
    controller = ViewportController(chart_width_px=900)
    controller.on_pinch(2.0)
    controller.set_enabled(False)

    assert not controller.on_reset_gesture()
    assert controller.scale == 2.0

    assert controller.reset()
    assert controller.scale == 1.0


def test_chart_resize_reclamps_pan() -> None:
    controller = ViewportController(chart_width_px=900)
    controller.on_pinch(2.0)
    controller.on_drag(800)
    controller.set_chart_width(400)
    assert controller.pan_offset_px == pytest.approx(400.0)


def test_state_objects_are_immutable_and_replaced() -> None:
    controller = ViewportController(chart_width_px=900)
    before = controller.state
    controller.on_pinch(2.0)
    assert before.scale == 1.0
    assert controller.state is not before
    with pytest.raises(AttributeError):
        controller.state.scale = 3.0
