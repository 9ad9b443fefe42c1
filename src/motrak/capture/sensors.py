from enum import Enum
from typing import Dict, Union

from loguru import logger

from motrak.liveplot.coordinate_transform import ValueRange


class SensorKind(Enum):
    """Motion sensors whose X/Y/Z output can be captured."""

    ACCELEROMETER = "Accelerometer"
    GYROSCOPE = "Gyroscope"
    GRAVITY = "Gravity"
    ROTATION_VECTOR = "Rotation Vector"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union["SensorKind", str, None]) -> "SensorKind":
        """
        Resolve a sensor kind from an enum member, label or member name.

        Labels and names are matched case-insensitively, with spaces,
        underscores and hyphens treated alike. Anything unrecognised falls
        back to the accelerometer.

        Parameters
        ----------
        value : Union[SensorKind, str, None]
            Sensor kind, e.g. ``"Rotation Vector"`` or ``"rotation_vector"``.

        Returns
        -------
        SensorKind
            Matching sensor kind, or ``ACCELEROMETER``.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("_", " ").replace("-", " ")
            for kind in cls:
                if key in (kind.value.lower(), kind.name.lower().replace("_", " ")):
                    return kind
        logger.warning(f"Unknown sensor kind {value!r}, falling back to Accelerometer")
        return cls.ACCELEROMETER


SENSOR_RANGES: Dict[SensorKind, ValueRange] = {
    SensorKind.ACCELEROMETER: ValueRange(-15.0, 15.0),
    SensorKind.GRAVITY: ValueRange(-15.0, 15.0),
    SensorKind.GYROSCOPE: ValueRange(-10.0, 10.0),
    SensorKind.ROTATION_VECTOR: ValueRange(-1.0, 1.0),
}


def value_range_for(kind: Union[SensorKind, str, None]) -> ValueRange:
    """Value range of a sensor kind; unknown kinds get the accelerometer range."""
    return SENSOR_RANGES.get(
        SensorKind.parse(kind), SENSOR_RANGES[SensorKind.ACCELEROMETER]
    )
