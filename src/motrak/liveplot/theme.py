"""Colours and stroke styles for the live telemetry chart."""

from dataclasses import dataclass
from typing import Tuple

# Alpha of the top of the area gradient, out of 255
DEFAULT_FILL_ALPHA = 70
DEFAULT_STROKE_WIDTH_PX = 4.0


@dataclass(frozen=True)
class ChannelStyle:
    """Stroke and fill style of one data channel."""

    color: str
    stroke_width: float = DEFAULT_STROKE_WIDTH_PX
    fill_alpha: int = DEFAULT_FILL_ALPHA

    @property
    def fill_alpha_fraction(self) -> float:
        return self.fill_alpha / 255.0


DEFAULT_CHANNEL_STYLES: Tuple[ChannelStyle, ChannelStyle, ChannelStyle] = (
    ChannelStyle("#FF5252"),  # X, red
    ChannelStyle("#4CAF50"),  # Y, green
    ChannelStyle("#2196F3"),  # Z, blue
)


@dataclass(frozen=True)
class Theme:
    """Non-data colours of the chart. Data colours never depend on the theme."""

    name: str
    background: str
    text: str
    grid: str
    zero_line: str
    title_shadow: str


LIGHT_THEME = Theme(
    name="light",
    background="#FFFFFF",
    text="#444444",
    grid="#CCCCCC",
    zero_line="#444444",
    title_shadow="#CCCCCC",
)

DARK_THEME = Theme(
    name="dark",
    background="#121212",
    text="#CCCCCC",
    grid="#333333",
    zero_line="#777777",
    title_shadow="#000000",
)


def theme_for(dark_mode: bool) -> Theme:
    return DARK_THEME if dark_mode else LIGHT_THEME
