import os
import time

from loguru import logger

from motrak.capture import (
    CaptureConfig,
    CaptureSession,
    SyntheticMotionSource,
    configure_logging,
)

# --- User configuration dictionary ---
CONFIG = {
    "SENSOR_KIND": "Accelerometer",  # Accelerometer, Gyroscope, Gravity or Rotation Vector
    "CAPACITY": 200,  # samples kept in the scrolling window (min 50)
    "DARK_MODE": True,  # dark background, grid and text
    "ZOOM_ENABLED": True,  # handle pinch/drag/reset gestures
    "WIDTH_PX": 1080,
    "HEIGHT_PX": 720,
    "LOG_LEVEL": "INFO",  # DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
    # ---
    "RATE_HZ": 60,  # mean rate of the synthetic source
    "DURATION_S": 5.0,  # how long to capture
    "FRAME_INTERVAL_S": 1 / 30,  # redraw tick
    "OUTPUT_PATH": "./capture_output/",
}


def main() -> None:
    """
    Capture synthetic motion data, redraw while it streams, then save the
    last frame and export the captured window.
    """
    config = CaptureConfig.from_mapping(CONFIG)
    configure_logging(config.log_level)

    session = CaptureSession(config)
    source = SyntheticMotionSource(session.on_sample, rate_hz=CONFIG["RATE_HZ"])

    session.start()
    source.start()

    frames = 0
    zoomed = False
    deadline = time.monotonic() + CONFIG["DURATION_S"]
    try:
        while time.monotonic() < deadline:
            if session.redraw() is not None:
                frames += 1
            # Zoom in halfway through to exercise the viewport
            if frames >= 60 and not zoomed:
                session.pinch(2.0)
                session.drag(150.0)
                zoomed = True
            time.sleep(CONFIG["FRAME_INTERVAL_S"])
    finally:
        source.stop()
        session.stop()

    session.redraw(force=True)
    logger.success(f"Rendered {frames} frames, {len(session.buffer)} samples buffered")

    output_path = CONFIG["OUTPUT_PATH"]
    os.makedirs(output_path, exist_ok=True)
    session.plot.save(os.path.join(output_path, f"{config.sensor_kind.label}_frame.png"))
    session.export_to_directory(output_path)


if __name__ == "__main__":
    main()
