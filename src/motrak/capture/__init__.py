"""
Motion-capture components for motrak.

This package contains the pieces specific to capturing X/Y/Z motion sensor
streams: sensor kinds and their ranges, configuration, CSV export and the
capture session that wires everything together.
"""

from motrak.capture.config import CaptureConfig, configure_logging
from motrak.capture.export import export_csv, export_filename, has_data, write_csv
from motrak.capture.sensors import SENSOR_RANGES, SensorKind, value_range_for
from motrak.capture.session import CaptureSession
from motrak.capture.source import SyntheticMotionSource

__all__ = [
    "CaptureSession",
    "CaptureConfig",
    "configure_logging",
    "SensorKind",
    "SENSOR_RANGES",
    "value_range_for",
    "export_csv",
    "export_filename",
    "has_data",
    "write_csv",
    "SyntheticMotionSource",
]
