import numpy as np
import pytest

from motrak.liveplot.coordinate_transform import ChartGeometry, CoordinateTransform, ValueRange
from motrak.liveplot.viewport import ViewportState


@pytest.fixture
def geometry() -> ChartGeometry:
    # 1160x660 view with 80px padding -> 1000x500 chart at (80, 80)
    return ChartGeometry.from_view_size(1160, 660, padding_px=80)


def test_geometry_from_view_size(geometry: ChartGeometry) -> None:
    assert (geometry.left, geometry.top) == (80.0, 80.0)
    assert (geometry.width, geometry.height) == (1000.0, 500.0)
    assert (geometry.right, geometry.bottom) == (1080.0, 580.0)


def test_geometry_never_negative() -> None:
    geometry = ChartGeometry.from_view_size(100, 100, padding_px=80)
    assert geometry.width == 0.0
    assert geometry.height == 0.0


def test_horizontal_interval_uses_capacity(geometry: ChartGeometry) -> None:
    transform = CoordinateTransform(geometry, ValueRange(-10, 10), capacity=101)
    assert transform.x_for_index(0) == pytest.approx(80.0)
    assert transform.x_for_index(50) == pytest.approx(80.0 + 500.0)
    assert transform.x_for_index(100) == pytest.approx(1080.0)


def test_partial_buffer_occupies_left_portion(geometry: ChartGeometry) -> None:
    transform = CoordinateTransform(geometry, ValueRange(-10, 10), capacity=101)
    xs, _ = transform.channel_points(np.zeros(11))
    assert xs[-1] == pytest.approx(80.0 + 100.0)


def test_vertical_mapping_is_inverted(geometry: ChartGeometry) -> None:
    transform = CoordinateTransform(geometry, ValueRange(-15, 15), capacity=100)
    assert transform.y_for_value(15) == pytest.approx(80.0)
    assert transform.y_for_value(-15) == pytest.approx(580.0)
    assert transform.y_for_value(0) == pytest.approx(330.0)
    assert transform.zero_y == pytest.approx(330.0)


def test_out_of_range_values_are_not_clamped(geometry: ChartGeometry) -> None:
    transform = CoordinateTransform(geometry, ValueRange(-1, 1), capacity=100)
    assert transform.y_for_value(2) < geometry.top
    assert transform.y_for_value(-3) > geometry.bottom


def test_zero_line_for_asymmetric_range(geometry: ChartGeometry) -> None:
    transform = CoordinateTransform(geometry, ValueRange(0, 10), capacity=100)
    assert transform.zero_y == pytest.approx(geometry.bottom)


def test_same_inputs_map_to_same_point(geometry: ChartGeometry) -> None:
    viewport = ViewportState(scale=2.5, pan_offset_px=300, chart_width_px=1000)
    a = CoordinateTransform(geometry, ValueRange(-10, 10), 100, viewport)
    b = CoordinateTransform(geometry, ValueRange(-10, 10), 100, viewport)
    assert a.to_screen(42, 3.3) == b.to_screen(42, 3.3)
    assert a.to_screen(42, 3.3) == a.to_screen(42, 3.3)


def test_zoom_and_pan_shift_horizontal_positions(geometry: ChartGeometry) -> None:
    viewport = ViewportState(scale=2.0, pan_offset_px=250, chart_width_px=1000)
    transform = CoordinateTransform(geometry, ValueRange(-10, 10), 101, viewport)
    assert transform.x_interval == pytest.approx(20.0)
    assert transform.x_for_index(50) == pytest.approx(80.0 + 1000.0 - 250.0)
    # Vertical mapping is unaffected by zoom
    assert transform.y_for_value(10) == pytest.approx(80.0)


def test_index_at_x_inverts_x_for_index(geometry: ChartGeometry) -> None:
    viewport = ViewportState(scale=3.0, pan_offset_px=700, chart_width_px=1000)
    transform = CoordinateTransform(geometry, ValueRange(-10, 10), 200, viewport)
    for index in (0, 17, 133, 199):
        assert transform.index_at_x(transform.x_for_index(index)) == pytest.approx(index)


def test_area_polygon_closes_on_zero_baseline(geometry: ChartGeometry) -> None:
    transform = CoordinateTransform(geometry, ValueRange(-10, 10), 101)
    polygon = transform.area_polygon(np.array([5.0, -5.0, 10.0]))

    assert polygon.shape == (5, 2)
    assert tuple(polygon[0]) == pytest.approx((80.0, transform.zero_y))
    assert tuple(polygon[-1]) == pytest.approx((100.0, transform.zero_y))
    assert polygon[3, 1] == pytest.approx(80.0)


def test_area_polygon_empty_for_no_values(geometry: ChartGeometry) -> None:
    transform = CoordinateTransform(geometry, ValueRange(-10, 10), 101)
    assert transform.area_polygon(np.array([])).shape == (0, 2)
