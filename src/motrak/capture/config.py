import sys
from dataclasses import dataclass, fields
from typing import Any, Mapping

from loguru import logger

from motrak.capture.sensors import SensorKind
from motrak.liveplot.plot import LiveTelemetryPlot
from motrak.liveplot.telemetry_buffer import DEFAULT_CAPACITY, clamp_capacity


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure loguru logging with specified level.

    Parameters
    ----------
    log_level : str, default="INFO"
        Logging level: DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class CaptureConfig:
    """
    Options recognised by a capture session.

    ``capacity`` below the buffer minimum is clamped up rather than rejected,
    and an unknown ``sensor_kind`` falls back to the accelerometer.
    """

    sensor_kind: SensorKind = SensorKind.ACCELEROMETER
    capacity: int = DEFAULT_CAPACITY
    dark_mode: bool = False
    zoom_enabled: bool = True
    width_px: int = LiveTelemetryPlot.DEFAULT_WIDTH_PX
    height_px: int = LiveTelemetryPlot.DEFAULT_HEIGHT_PX
    dpi: int = LiveTelemetryPlot.DEFAULT_DPI
    padding_px: float = LiveTelemetryPlot.DEFAULT_PADDING_PX
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.sensor_kind = SensorKind.parse(self.sensor_kind)
        self.capacity = clamp_capacity(self.capacity)
        self.dark_mode = _as_bool(self.dark_mode)
        self.zoom_enabled = _as_bool(self.zoom_enabled)
        self.width_px = int(self.width_px)
        self.height_px = int(self.height_px)
        self.dpi = int(self.dpi)
        self.padding_px = float(self.padding_px)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "CaptureConfig":
        """
        Build a config from a mapping such as a script's ``CONFIG`` dict.

        Keys may be field names (``capacity``) or their upper-case form
        (``CAPACITY``); other keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (raw or {}).items():
            name = str(key).lower()
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)
