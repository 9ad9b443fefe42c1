import threading
import time
from datetime import datetime
from typing import Optional, Union

import numpy as np
from loguru import logger

from motrak.capture.config import CaptureConfig
from motrak.capture.export import export_csv, export_filename, has_data, write_csv
from motrak.capture.sensors import SensorKind, value_range_for
from motrak.liveplot.plot import LiveTelemetryPlot
from motrak.liveplot.telemetry_buffer import TelemetryBuffer, TelemetrySnapshot
from motrak.liveplot.viewport import ViewportController


class CaptureSession:
    """
    Wires a sample source, the telemetry buffer, the viewport and the plot.

    The session exclusively owns the buffer. A sample source calls
    :meth:`on_sample` from its own thread; gesture input calls
    :meth:`pinch`, :meth:`drag` and :meth:`reset_view`; the redraw tick calls
    :meth:`redraw`, which only ever renders a snapshot.
    """

    def __init__(self, config: Optional[CaptureConfig] = None):
        """
        Initialise an idle session.

        Parameters
        ----------
        config : Optional[CaptureConfig], default=None
            Session options. Defaults to ``CaptureConfig()``.
        """
        self.config = config or CaptureConfig()
        self.sensor_kind = self.config.sensor_kind

        self.buffer = TelemetryBuffer(self.config.capacity)
        self.plot = LiveTelemetryPlot(
            width_px=self.config.width_px,
            height_px=self.config.height_px,
            title=self.sensor_kind.label,
            value_range=value_range_for(self.sensor_kind),
            dark_mode=self.config.dark_mode,
            padding_px=self.config.padding_px,
            dpi=self.config.dpi,
        )
        self.viewport = ViewportController(
            self.plot.geometry.width, enabled=self.config.zoom_enabled
        )

        self._capturing = False
        self._dirty = threading.Event()
        self._dirty.set()

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    def invalidate(self) -> None:
        """Request a redraw on the next tick."""
        self._dirty.set()

    def _invalidate_if(self, changed: bool) -> bool:
        if changed:
            self._dirty.set()
        return changed

    # Lifecycle

    def start(self, sensor_kind: Union[SensorKind, str, None] = None) -> None:
        """Start a new capture, clearing previous data and resetting the view."""
        if sensor_kind is not None:
            self._select_sensor(SensorKind.parse(sensor_kind))
        self.buffer.clear()
        self.viewport.reset()
        self._capturing = True
        self.invalidate()
        logger.info(f"Started capture: {self.sensor_kind.label}")

    def stop(self) -> None:
        """Stop accepting samples. The captured data is kept for export."""
        if not self._capturing:
            return
        self._capturing = False
        logger.info(f"Stopped capture with {len(self.buffer)} samples retained")

    # Ingestion

    def on_sample(
        self, x: float, y: float, z: float, timestamp_ms: Optional[int] = None
    ) -> bool:
        """
        Ingest one sample from the sample source.

        Parameters
        ----------
        x, y, z : float
            Channel values.
        timestamp_ms : Optional[int], default=None
            Sample time in milliseconds. None uses the monotonic clock.

        Returns
        -------
        bool
            False if the sample was dropped because capture is stopped.
        """
        if not self._capturing:
            return False
        if timestamp_ms is None:
            timestamp_ms = int(time.monotonic() * 1000)
        self.buffer.append(x, y, z, timestamp_ms)
        self._dirty.set()
        return True

    def set_capacity(self, capacity: int) -> int:
        applied = self.buffer.set_capacity(capacity)
        self.invalidate()
        return applied

    def clear(self) -> None:
        self.buffer.clear()
        self.invalidate()

    # Configuration

    def _select_sensor(self, kind: SensorKind) -> None:
        self.sensor_kind = kind
        self.plot.set_title(kind.label)
        self.plot.set_value_range(value_range_for(kind))
        self.viewport.reset()

    def set_sensor_kind(self, sensor_kind: Union[SensorKind, str]) -> SensorKind:
        """
        Switch the sensor kind, selecting its value range.

        Resets the viewport, and clears previous data if a capture is running.
        """
        kind = SensorKind.parse(sensor_kind)
        self._select_sensor(kind)
        if self._capturing:
            self.buffer.clear()
        self.invalidate()
        logger.info(f"Sensor kind set to {kind.label}")
        return kind

    def set_dark_mode(self, dark_mode: bool) -> None:
        self.plot.set_dark_mode(dark_mode)
        self.invalidate()

    def set_zoom_enabled(self, enabled: bool) -> None:
        self.viewport.set_enabled(enabled)

    def resize(self, width_px: int, height_px: int) -> None:
        self.plot.resize(width_px, height_px)
        self.viewport.set_chart_width(self.plot.geometry.width)
        self.invalidate()

    # Gestures

    def pinch(self, scale_delta: float) -> bool:
        return self._invalidate_if(self.viewport.on_pinch(scale_delta))

    def drag(self, delta_px: float) -> bool:
        return self._invalidate_if(self.viewport.on_drag(delta_px))

    def reset_view(self) -> bool:
        return self._invalidate_if(self.viewport.on_reset_gesture())

    # Query

    def snapshot(self) -> TelemetrySnapshot:
        return self.buffer.snapshot()

    def export_csv(self) -> str:
        return export_csv(self.buffer.snapshot())

    def export_to_directory(
        self, directory: str, when: Optional[datetime] = None
    ) -> Optional[str]:
        """
        Export the captured window to a timestamped CSV file.

        Returns
        -------
        Optional[str]
            Path of the written file, or None when there is no data to export.
        """
        csv_text = self.export_csv()
        if not has_data(csv_text):
            logger.warning("No data to export")
            return None
        return write_csv(csv_text, directory, export_filename(self.sensor_kind, when))

    # Rendering

    @property
    def needs_redraw(self) -> bool:
        return self._dirty.is_set()

    def redraw(self, force: bool = False) -> Optional[np.ndarray]:
        """
        Render a frame if samples or view state changed since the last one.

        Parameters
        ----------
        force : bool, default=False
            Render even if nothing changed.

        Returns
        -------
        Optional[np.ndarray]
            The RGBA framebuffer, or None if no redraw was needed.
        """
        if not force and not self._dirty.is_set():
            return None
        # Clear before the snapshot so samples appended meanwhile trigger the next tick
        self._dirty.clear()
        return self.plot.render(self.buffer.snapshot(), self.viewport.state)
