import threading
from collections import deque
from typing import Deque, Iterator, Optional, Tuple

import numpy as np
from loguru import logger

CHANNEL_NAMES = ("X", "Y", "Z")

DEFAULT_CAPACITY = 100
MINIMUM_CAPACITY = 50


def clamp_capacity(capacity: int) -> int:
    """Clamp a requested capacity up to ``MINIMUM_CAPACITY``, with a warning."""
    capacity = int(capacity)
    if capacity < MINIMUM_CAPACITY:
        logger.warning(
            f"Capacity {capacity} is below the minimum of {MINIMUM_CAPACITY}, clamping"
        )
        return MINIMUM_CAPACITY
    return capacity


def _frozen(values, dtype) -> np.ndarray:
    arr = np.fromiter(values, dtype=dtype, count=len(values))
    arr.flags.writeable = False
    return arr


class TelemetrySnapshot:
    """
    Immutable, consistent copy of a telemetry buffer.

    All four arrays have the same length and are read-only, so a snapshot can
    be iterated by the render or export code while the producer keeps
    appending to the live buffer.
    """

    __slots__ = ("timestamps", "x", "y", "z", "capacity")

    def __init__(
        self,
        timestamps: np.ndarray,
        x: np.ndarray,
        y: np.ndarray,
        z: np.ndarray,
        capacity: int,
    ):
        self.timestamps = timestamps
        self.x = x
        self.y = y
        self.z = z
        self.capacity = capacity

    @classmethod
    def empty(cls, capacity: int = DEFAULT_CAPACITY) -> "TelemetrySnapshot":
        """Snapshot of a buffer with no samples."""
        return cls(
            _frozen([], np.int64),
            _frozen([], np.float64),
            _frozen([], np.float64),
            _frozen([], np.float64),
            capacity,
        )

    def __len__(self) -> int:
        return len(self.timestamps)

    @property
    def is_empty(self) -> bool:
        return len(self.timestamps) == 0

    @property
    def channels(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.x, self.y, self.z

    def channel(self, index: int) -> np.ndarray:
        """
        Get the values of one channel.

        Parameters
        ----------
        index : int
            Channel index, 0 for X, 1 for Y and 2 for Z.

        Returns
        -------
        np.ndarray
            Read-only channel values, oldest first.
        """
        if index < 0 or index >= len(CHANNEL_NAMES):
            raise ValueError(
                f"Invalid channel index: {index}. Must be between 0 and {len(CHANNEL_NAMES) - 1}."
            )
        return self.channels[index]

    @property
    def duration_ms(self) -> int:
        """Time covered by the snapshot, from oldest to newest sample."""
        if self.is_empty:
            return 0
        return int(self.timestamps[-1] - self.timestamps[0])

    def rows(self) -> Iterator[Tuple[int, float, float, float]]:
        """Iterate ``(timestamp_ms, x, y, z)`` tuples in buffer order."""
        for i in range(len(self.timestamps)):
            yield (
                int(self.timestamps[i]),
                float(self.x[i]),
                float(self.y[i]),
                float(self.z[i]),
            )

    def __repr__(self) -> str:
        return f"TelemetrySnapshot(samples={len(self)}, capacity={self.capacity})"


class TelemetryBuffer:
    """
    Bounded FIFO storage for a three-channel stream plus timestamps.

    The four parallel sequences always have identical length, which never
    exceeds ``capacity``; when an append would overflow, the oldest sample is
    dropped first. A single re-entrant lock wraps the combined evict+append
    step and the copy taken by :meth:`snapshot`, so a concurrent reader never
    observes a partially appended sample.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Initialise an empty buffer.

        Parameters
        ----------
        capacity : int, default=100
            Maximum number of retained samples. Values below
            ``MINIMUM_CAPACITY`` are clamped up.
        """
        self._lock = threading.RLock()
        self._capacity = clamp_capacity(capacity)
        self._timestamps: Deque[int] = deque()
        self._x: Deque[float] = deque()
        self._y: Deque[float] = deque()
        self._z: Deque[float] = deque()
        # Relative time origin, fixed by the first sample after a clear
        self._origin_ms: Optional[int] = None

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._timestamps)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def _evict_to(self, length: int) -> int:
        evicted = 0
        while len(self._timestamps) > length:
            self._timestamps.popleft()
            self._x.popleft()
            self._y.popleft()
            self._z.popleft()
            evicted += 1
        return evicted

    def append(self, x: float, y: float, z: float, timestamp_ms: int) -> None:
        """
        Append one sample to all channels, evicting the oldest on overflow.

        Parameters
        ----------
        x, y, z : float
            Channel values.
        timestamp_ms : int
            Sample time in milliseconds. The first sample after construction
            or :meth:`clear` becomes the time origin; stored timestamps are
            relative to it.
        """
        timestamp_ms = int(timestamp_ms)
        with self._lock:
            if self._origin_ms is None:
                self._origin_ms = timestamp_ms
            relative_ms = max(0, timestamp_ms - self._origin_ms)

            self._timestamps.append(relative_ms)
            self._x.append(float(x))
            self._y.append(float(y))
            self._z.append(float(z))
            self._evict_to(self._capacity)

    def set_capacity(self, capacity: int) -> int:
        """
        Change the capacity, trimming the oldest samples if necessary.

        Parameters
        ----------
        capacity : int
            New capacity. Values below ``MINIMUM_CAPACITY`` are clamped up.

        Returns
        -------
        int
            The capacity actually applied.
        """
        capacity = clamp_capacity(capacity)
        with self._lock:
            self._capacity = capacity
            evicted = self._evict_to(capacity)
        if evicted:
            logger.debug(f"Capacity shrink to {capacity} evicted {evicted} samples")
        logger.info(f"Buffer capacity set to {capacity}")
        return capacity

    def snapshot(self) -> TelemetrySnapshot:
        """Return a read-only copy of the current contents, oldest first."""
        with self._lock:
            return TelemetrySnapshot(
                _frozen(self._timestamps, np.int64),
                _frozen(self._x, np.float64),
                _frozen(self._y, np.float64),
                _frozen(self._z, np.float64),
                self._capacity,
            )

    def clear(self) -> None:
        """Drop all samples and reset the relative time origin."""
        with self._lock:
            self._timestamps.clear()
            self._x.clear()
            self._y.clear()
            self._z.clear()
            self._origin_ms = None
        logger.debug("Telemetry buffer cleared")
