from dataclasses import dataclass, replace

from loguru import logger

# Zoom bounds
MIN_SCALE = 1.0
MAX_SCALE = 5.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


@dataclass(frozen=True)
class ViewportState:
    """
    Zoom and pan state of the chart.

    Instances are immutable; the controller swaps in a new object on every
    change so readers always see a consistent ``(scale, pan_offset_px)`` pair.
    """

    scale: float = MIN_SCALE
    pan_offset_px: float = 0.0
    chart_width_px: float = 0.0

    @property
    def effective_width_px(self) -> float:
        """Width of the whole zoomed content."""
        return self.chart_width_px * self.scale

    @property
    def pan_clamp_max(self) -> float:
        """Largest pan offset that keeps the chart filled with content."""
        return max(0.0, self.effective_width_px - self.chart_width_px)

    @property
    def is_zoomed(self) -> bool:
        return self.scale > MIN_SCALE


class ViewportController:
    """
    Interprets pinch and drag gesture deltas into zoom and pan state.

    The controller is owned by the gesture-input side; the render cycle only
    reads :attr:`state`. Every handler returns True when the state changed,
    which callers use to request a redraw.
    """

    def __init__(self, chart_width_px: float = 0.0, enabled: bool = True):
        """
        Initialise the controller at the default view.

        Parameters
        ----------
        chart_width_px : float, default=0.0
            Width of the chart interior in pixels, used to bound panning.
        enabled : bool, default=True
            Whether gesture input is handled at all.
        """
        self._state = ViewportState(chart_width_px=max(0.0, float(chart_width_px)))
        self.enabled = enabled

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def scale(self) -> float:
        return self._state.scale

    @property
    def pan_offset_px(self) -> float:
        return self._state.pan_offset_px

    def _apply(self, new_state: ViewportState) -> bool:
        if new_state == self._state:
            return False
        self._state = new_state
        return True

    def set_enabled(self, enabled: bool) -> None:
        """Turn gesture handling on or off."""
        self.enabled = bool(enabled)
        logger.debug(f"Viewport gestures {'enabled' if self.enabled else 'disabled'}")

    def set_chart_width(self, chart_width_px: float) -> bool:
        """Update the chart width after a resize, re-clamping the pan offset."""
        state = replace(self._state, chart_width_px=max(0.0, float(chart_width_px)))
        state = replace(
            state, pan_offset_px=_clamp(state.pan_offset_px, 0.0, state.pan_clamp_max)
        )
        return self._apply(state)

    def on_pinch(self, scale_delta: float) -> bool:
        """
        Apply a pinch gesture.

        Parameters
        ----------
        scale_delta : float
            Multiplicative scale change reported by the gesture detector.

        Returns
        -------
        bool
            True if the viewport changed.
        """
        if not self.enabled:
            return False

        scale = _clamp(self._state.scale * float(scale_delta), MIN_SCALE, MAX_SCALE)
        state = replace(self._state, scale=scale)
        # Zooming out shrinks the pannable range
        state = replace(
            state, pan_offset_px=_clamp(state.pan_offset_px, 0.0, state.pan_clamp_max)
        )
        changed = self._apply(state)
        if changed:
            logger.debug(f"Pinch x{scale_delta:.3f} -> scale={self._state.scale:.3f}")
        return changed

    def on_drag(self, delta_px: float) -> bool:
        """
        Apply a horizontal drag gesture.

        Panning only has an effect while zoomed in; at scale 1.0 there is
        nothing to pan into.

        Parameters
        ----------
        delta_px : float
            Drag distance in pixels.

        Returns
        -------
        bool
            True if the viewport changed.
        """
        if not self.enabled or not self._state.is_zoomed:
            return False

        pan = _clamp(
            self._state.pan_offset_px + float(delta_px), 0.0, self._state.pan_clamp_max
        )
        changed = self._apply(replace(self._state, pan_offset_px=pan))
        if changed:
            logger.debug(f"Drag {delta_px:+.1f}px -> pan={self._state.pan_offset_px:.1f}px")
        return changed

    def on_reset_gesture(self) -> bool:
        """Double-tap equivalent: restore the default view if gestures are enabled."""
        if not self.enabled:
            return False
        return self.reset()

    def reset(self) -> bool:
        """Restore ``scale=1.0`` and ``pan_offset_px=0`` unconditionally."""
        changed = self._apply(
            ViewportState(chart_width_px=self._state.chart_width_px)
        )
        if changed:
            logger.debug("Viewport reset to default view")
        return changed
