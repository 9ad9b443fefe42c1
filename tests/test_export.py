import os
from datetime import datetime

from motrak.capture.export import (
    HEADER_LINE,
    export_csv,
    export_filename,
    format_value,
    has_data,
    write_csv,
)
from motrak.capture.sensors import SensorKind
from motrak.liveplot.telemetry_buffer import TelemetryBuffer


def test_export_two_samples_exactly() -> None:
    buffer = TelemetryBuffer()
    buffer.append(1, 2, 3, 0)
    buffer.append(4, 5, 6, 10)

    assert export_csv(buffer.snapshot()) == "Time (ms),X,Y,Z\n0,1,2,3\n10,4,5,6\n"


def test_empty_buffer_exports_header_only() -> None:
    buffer = TelemetryBuffer()
    assert export_csv(buffer.snapshot()) == "Time (ms),X,Y,Z\n"

    buffer.append(1, 2, 3, 0)
    buffer.clear()
    assert export_csv(buffer.snapshot()) == HEADER_LINE


def test_export_is_lossless_for_stored_floats() -> None:
    values = [0.1, -2.5e-7, 9.80665, 1 / 3]
    buffer = TelemetryBuffer()
    for i, v in enumerate(values):
        buffer.append(v, -v, v * 2, i * 7)

    lines = export_csv(buffer.snapshot()).splitlines()[1:]
    for line, v in zip(lines, values):
        t, x, y, z = line.split(",")
        assert float(x) == v
        assert float(y) == -v
        assert float(z) == v * 2


def test_export_keeps_buffer_order_after_eviction() -> None:
    buffer = TelemetryBuffer(capacity=50)
    for i in range(60):
        buffer.append(i, 0, 0, i)
    lines = export_csv(buffer.snapshot()).splitlines()
    assert len(lines) == 51
    assert lines[1] == "10,10,0,0"
    assert lines[-1] == "59,59,0,0"


def test_format_value() -> None:
    assert format_value(1.0) == "1"
    assert format_value(-3.0) == "-3"
    assert format_value(0.1) == "0.1"
    assert format_value(2.75) == "2.75"


def test_format_value_keeps_extreme_magnitudes_compact() -> None:
    assert format_value(1e-300) == "1e-300"
    assert format_value(-2.5e-7) == "-2.5e-07"
    assert format_value(1e22) == "1e+22"
    for value in (1e-300, -2.5e-7, 1e22):
        assert float(format_value(value)) == value


def test_has_data() -> None:
    assert not has_data("")
    assert not has_data(HEADER_LINE)
    assert has_data(HEADER_LINE + "0,1,2,3\n")


def test_export_filename_uses_sensor_label_and_timestamp() -> None:
    when = datetime(2024, 1, 31, 14, 25, 0)
    assert export_filename(SensorKind.ROTATION_VECTOR, when) == "Rotation Vector_20240131_142500.csv"
    assert export_filename("gyroscope", when) == "Gyroscope_20240131_142500.csv"


def test_write_csv_creates_directory(tmp_path) -> None:
    directory = tmp_path / "exports" / "motrak"
    path = write_csv("Time (ms),X,Y,Z\n0,1,2,3\n", str(directory), "out.csv")

    assert path == os.path.join(str(directory), "out.csv")
    with open(path, encoding="utf-8") as fh:
        assert fh.read() == "Time (ms),X,Y,Z\n0,1,2,3\n"
