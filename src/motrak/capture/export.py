"""CSV export of captured telemetry."""

import csv
import io
import os
from datetime import datetime
from typing import Optional, Union

from loguru import logger

from motrak.capture.sensors import SensorKind
from motrak.liveplot.telemetry_buffer import TelemetrySnapshot

CSV_HEADER = ("Time (ms)", "X", "Y", "Z")
HEADER_LINE = ",".join(CSV_HEADER) + "\n"


def format_value(value: float) -> str:
    """
    Shortest decimal text that reads back as the same float.

    Integral values drop the trailing point, so ``1.0`` becomes ``"1"``; very
    large or small magnitudes keep exponent form, e.g. ``"1e-300"``.
    """
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def export_csv(snapshot: TelemetrySnapshot) -> str:
    """
    Serialise a snapshot as CSV text.

    Parameters
    ----------
    snapshot : TelemetrySnapshot
        Buffer contents to export, oldest sample first.

    Returns
    -------
    str
        ``Time (ms),X,Y,Z`` header followed by one line per sample. An empty
        snapshot gives the header alone.
    """
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(
        (str(t), format_value(x), format_value(y), format_value(z))
        for t, x, y, z in snapshot.rows()
    )
    return out.getvalue()


def has_data(csv_text: str) -> bool:
    """False for empty or header-only export text."""
    return bool(csv_text) and csv_text != HEADER_LINE


def export_filename(
    sensor_kind: Union[SensorKind, str], when: Optional[datetime] = None
) -> str:
    """File name for an export, e.g. ``Gyroscope_20240131_142500.csv``."""
    when = when or datetime.now()
    label = SensorKind.parse(sensor_kind).label
    return f"{label}_{when:%Y%m%d_%H%M%S}.csv"


def write_csv(csv_text: str, directory: str, filename: str) -> str:
    """
    Write export text to ``directory/filename``, creating the directory.

    Returns
    -------
    str
        Path of the written file.

    Raises
    ------
    OSError
        If the destination cannot be written.
    """
    path = os.path.join(directory, filename)
    try:
        os.makedirs(directory, exist_ok=True)
        with open(path, "w", newline="", encoding="utf-8") as fh:
            fh.write(csv_text)
    except OSError as e:
        logger.error(f"Error exporting data to {path}: {e}")
        raise
    logger.info(f"Data exported to {path}")
    return path
