"""
motrak: live motion telemetry plotting

A library for capturing three-channel sensor streams into a bounded buffer
and rendering them as a scrolling, zoomable time-series chart.
"""

# Import from liveplot subpackage
from motrak.liveplot.coordinate_transform import (
    ChartGeometry,
    CoordinateTransform,
    ValueRange,
)
from motrak.liveplot.plot import LiveTelemetryPlot
from motrak.liveplot.telemetry_buffer import TelemetryBuffer, TelemetrySnapshot
from motrak.liveplot.viewport import ViewportController, ViewportState

# Import from capture subpackage
from motrak.capture.config import CaptureConfig, configure_logging
from motrak.capture.export import export_csv
from motrak.capture.sensors import SensorKind, value_range_for
from motrak.capture.session import CaptureSession
from motrak.capture.source import SyntheticMotionSource

__all__ = [
    # General live plotting
    "LiveTelemetryPlot",
    "TelemetryBuffer",
    "TelemetrySnapshot",
    "ViewportController",
    "ViewportState",
    "CoordinateTransform",
    "ChartGeometry",
    "ValueRange",
    # Motion capture
    "CaptureSession",
    "CaptureConfig",
    "configure_logging",
    "SensorKind",
    "value_range_for",
    "export_csv",
    "SyntheticMotionSource",
]
