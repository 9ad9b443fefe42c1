import math
import threading
import time
from typing import Callable, Optional

import numpy as np
from loguru import logger

SampleSink = Callable[[float, float, float, int], None]


class SyntheticMotionSource:
    """
    Background thread that pushes simulated motion samples into a sink.

    Samples are noisy sinusoids on three channels, delivered at a jittered
    rate so the consumer sees the same irregular spacing as a real sensor.
    Stands in for a physical sensor in demos and tests.
    """

    def __init__(
        self,
        sink: SampleSink,
        rate_hz: float = 50.0,
        amplitude: float = 9.81,
        jitter: float = 0.3,
        seed: Optional[int] = None,
    ):
        """
        Parameters
        ----------
        sink : Callable[[float, float, float, int], None]
            Receives ``(x, y, z, timestamp_ms)`` for every sample.
        rate_hz : float, default=50.0
            Mean delivery rate.
        amplitude : float, default=9.81
            Peak value of the simulated signal.
        jitter : float, default=0.3
            Relative random variation of the sample interval, in ``[0, 1)``.
        seed : Optional[int], default=None
            Seed for reproducible noise.
        """
        if rate_hz <= 0:
            raise ValueError(f"rate_hz must be positive. Got {rate_hz}")
        self.sink = sink
        self.rate_hz = float(rate_hz)
        self.amplitude = float(amplitude)
        self.jitter = min(max(float(jitter), 0.0), 0.99)
        self._rng = np.random.default_rng(seed)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.samples_sent = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sample_at(self, t_s: float) -> tuple:
        """Simulated ``(x, y, z)`` at ``t_s`` seconds."""
        noise = self._rng.normal(0.0, 0.05 * self.amplitude, size=3)
        x = self.amplitude * math.sin(2 * math.pi * 0.5 * t_s) + noise[0]
        y = 0.5 * self.amplitude * math.cos(2 * math.pi * 0.25 * t_s) + noise[1]
        z = self.amplitude + noise[2]
        return float(x), float(y), float(z)

    def _run(self) -> None:
        start = time.monotonic()
        interval = 1.0 / self.rate_hz
        while not self._stop.is_set():
            now = time.monotonic()
            x, y, z = self.sample_at(now - start)
            self.sink(x, y, z, int(round((now - start) * 1000)))
            self.samples_sent += 1
            delay = interval * (1.0 + self._rng.uniform(-self.jitter, self.jitter))
            self._stop.wait(delay)
        logger.debug(f"Synthetic source stopped after {self.samples_sent} samples")

    def start(self) -> None:
        if self.is_running:
            logger.warning("Synthetic source already running")
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="synthetic-motion-source", daemon=True
        )
        self._thread.start()
        logger.info(f"Synthetic source started at ~{self.rate_hz:.0f} Hz")

    def stop(self, join: bool = True, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if join and self._thread is not None:
            self._thread.join(timeout)
