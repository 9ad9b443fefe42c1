"""
General-purpose live plotting components for motrak.

This package contains the bounded buffer, viewport, coordinate transform and
render pipeline, which work with any three-channel stream, not just motion
sensors.
"""

from motrak.liveplot.coordinate_transform import (
    ChartGeometry,
    CoordinateTransform,
    ValueRange,
)
from motrak.liveplot.plot import LiveTelemetryPlot
from motrak.liveplot.telemetry_buffer import (
    CHANNEL_NAMES,
    MINIMUM_CAPACITY,
    clamp_capacity,
    TelemetryBuffer,
    TelemetrySnapshot,
)
from motrak.liveplot.theme import (
    DARK_THEME,
    DEFAULT_CHANNEL_STYLES,
    LIGHT_THEME,
    ChannelStyle,
    Theme,
)
from motrak.liveplot.viewport import MAX_SCALE, MIN_SCALE, ViewportController, ViewportState

__all__ = [
    "LiveTelemetryPlot",
    "TelemetryBuffer",
    "TelemetrySnapshot",
    "CHANNEL_NAMES",
    "MINIMUM_CAPACITY",
    "clamp_capacity",
    "ViewportController",
    "ViewportState",
    "MIN_SCALE",
    "MAX_SCALE",
    "CoordinateTransform",
    "ChartGeometry",
    "ValueRange",
    "ChannelStyle",
    "Theme",
    "LIGHT_THEME",
    "DARK_THEME",
    "DEFAULT_CHANNEL_STYLES",
]
