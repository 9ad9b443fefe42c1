from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from loguru import logger
from matplotlib import patheffects
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.patches import Polygon, Rectangle
from PIL import Image

from .coordinate_transform import ChartGeometry, CoordinateTransform, ValueRange
from .telemetry_buffer import CHANNEL_NAMES, TelemetrySnapshot
from .theme import DEFAULT_CHANNEL_STYLES, ChannelStyle, Theme, theme_for
from .viewport import ViewportState


class LiveTelemetryPlot:
    """
    Render pipeline for a scrolling three-channel telemetry chart.

    Each redraw composes a frame description from an immutable buffer
    snapshot and a viewport state, then paints it with matplotlib's Agg
    canvas in screen-pixel coordinates (origin top left, y growing
    downward). The result is an RGBA framebuffer.

    The plot never touches the live buffer; callers hand it a snapshot.
    """

    # Layout constants, in pixels
    DEFAULT_WIDTH_PX = 1080
    DEFAULT_HEIGHT_PX = 720
    DEFAULT_DPI = 100
    DEFAULT_PADDING_PX = 80.0
    DEFAULT_TEXT_SIZE_PX = 36.0
    TITLE_OFFSET_PX = 30.0
    LEGEND_RIGHT_INSET_PX = 250.0
    LEGEND_BOX_PX = 20.0
    LEGEND_ROW_PX = 40.0
    LEGEND_TEXT_GAP_PX = 10.0
    Y_LABEL_GAP_PX = 10.0
    X_LABEL_GAP_PX = 30.0

    # Grid
    HORIZONTAL_GRID_DIVISIONS = 10
    VERTICAL_GRID_DIVISIONS = 5
    GRID_LINE_WIDTH_PX = 1.0
    GRID_DASH_PX = 5.0
    ZERO_LINE_WIDTH_PX = 2.0

    GRADIENT_STEPS = 256

    def __init__(
        self,
        width_px: int = DEFAULT_WIDTH_PX,
        height_px: int = DEFAULT_HEIGHT_PX,
        title: str = "Sensor Data",
        value_range: ValueRange = ValueRange(-15.0, 15.0),
        dark_mode: bool = False,
        channel_styles: Optional[Sequence[ChannelStyle]] = None,
        padding_px: float = DEFAULT_PADDING_PX,
        text_size_px: float = DEFAULT_TEXT_SIZE_PX,
        dpi: int = DEFAULT_DPI,
    ):
        """
        Initialise the render pipeline.

        Parameters
        ----------
        width_px, height_px : int
            Size of the rendered view in pixels.
        title : str, default="Sensor Data"
            Chart title, usually the sensor label.
        value_range : ValueRange, default=ValueRange(-15, 15)
            Value domain mapped onto the chart height.
        dark_mode : bool, default=False
            Use the dark theme for background, grid and text.
        channel_styles : Optional[Sequence[ChannelStyle]], default=None
            Styles for the X, Y and Z channels. Defaults to red, green, blue.
        padding_px : float, default=80.0
            Padding between the view edge and the chart interior.
        text_size_px : float, default=36.0
            Height of title, legend and axis label text.
        dpi : int, default=100
            Resolution used to convert pixel sizes to matplotlib points.

        Raises
        ------
        ValueError
            If the view size is not positive or the wrong number of channel
            styles is given.
        """
        if channel_styles is None:
            channel_styles = DEFAULT_CHANNEL_STYLES
        if len(channel_styles) != len(CHANNEL_NAMES):
            raise ValueError(
                f"Expected {len(CHANNEL_NAMES)} channel styles, got {len(channel_styles)}"
            )

        self.title = title
        self.value_range = value_range
        self.dark_mode = dark_mode
        self.channel_styles = tuple(channel_styles)
        self.padding_px = float(padding_px)
        self.text_size_px = float(text_size_px)
        self.dpi = dpi

        self.fig: Optional[Figure] = None
        self.ax = None
        self.canvas: Optional[FigureCanvasAgg] = None
        self._frame: Optional[np.ndarray] = None
        self.frames_rendered = 0

        self.resize(width_px, height_px)

    @property
    def theme(self) -> Theme:
        return theme_for(self.dark_mode)

    @property
    def geometry(self) -> ChartGeometry:
        return ChartGeometry.from_view_size(
            self.width_px, self.height_px, self.padding_px
        )

    @property
    def last_frame(self) -> Optional[np.ndarray]:
        return self._frame

    def resize(self, width_px: int, height_px: int) -> None:
        """Change the view size, recreating the off-screen canvas."""
        if width_px <= 0 or height_px <= 0:
            raise ValueError(
                f"View size must be positive. Got {width_px}x{height_px}"
            )
        self.width_px = int(width_px)
        self.height_px = int(height_px)

        self.fig = Figure(
            figsize=(self.width_px / self.dpi, self.height_px / self.dpi), dpi=self.dpi
        )
        self.canvas = FigureCanvasAgg(self.fig)
        self.ax = self.fig.add_axes((0.0, 0.0, 1.0, 1.0))
        self._frame = None
        logger.debug(f"Canvas resized to {self.width_px}x{self.height_px}px")

    def set_dark_mode(self, dark_mode: bool) -> None:
        self.dark_mode = bool(dark_mode)

    def set_title(self, title: str) -> None:
        self.title = title

    def set_value_range(self, value_range: ValueRange) -> None:
        self.value_range = value_range

    def _px_to_pt(self, px: float) -> float:
        return px * 72.0 / self.dpi

    def make_transform(
        self, capacity: int, viewport: Optional[ViewportState] = None
    ) -> CoordinateTransform:
        """Coordinate transform for the current geometry and value range."""
        geometry = self.geometry
        if viewport is None:
            viewport = ViewportState(chart_width_px=geometry.width)
        return CoordinateTransform(geometry, self.value_range, capacity, viewport)

    def compose_frame(
        self, snapshot: TelemetrySnapshot, viewport: Optional[ViewportState] = None
    ) -> Dict[str, Any]:
        """
        Describe everything a frame contains without painting it.

        Parameters
        ----------
        snapshot : TelemetrySnapshot
            Immutable copy of the buffer to draw.
        viewport : Optional[ViewportState], default=None
            Zoom and pan state. None means the default view.

        Returns
        -------
        Dict[str, Any]
            Keys ``theme``, ``title``, ``legend``, ``h_grid``, ``v_grid``,
            ``zero_line``, ``clip`` and ``channels``. Coordinates are screen
            pixels.
        """
        transform = self.make_transform(snapshot.capacity, viewport)
        geometry = transform.geometry
        vr = self.value_range

        title = {
            "text": self.title,
            "x": self.padding_px,
            "y": self.padding_px - self.TITLE_OFFSET_PX,
        }

        legend: List[Dict[str, Any]] = []
        legend_x = self.width_px - self.LEGEND_RIGHT_INSET_PX
        legend_y = self.padding_px - self.TITLE_OFFSET_PX
        for name, style in zip(CHANNEL_NAMES, self.channel_styles):
            legend.append(
                {
                    "label": f"{name}-axis",
                    "color": style.color,
                    "box": (
                        legend_x,
                        legend_y - self.LEGEND_BOX_PX + 5,
                        self.LEGEND_BOX_PX,
                        self.LEGEND_BOX_PX,
                    ),
                    "text_xy": (legend_x + self.LEGEND_BOX_PX + 10, legend_y + 5),
                }
            )
            legend_y += self.LEGEND_ROW_PX

        h_grid: List[Dict[str, Any]] = []
        for i in range(self.HORIZONTAL_GRID_DIVISIONS + 1):
            y = geometry.top + i * geometry.height / self.HORIZONTAL_GRID_DIVISIONS
            value = vr.max - i * vr.span / self.HORIZONTAL_GRID_DIVISIONS
            h_grid.append(
                {
                    "y": y,
                    "x0": geometry.left,
                    "x1": geometry.right,
                    "value": value,
                    "label": f"{value:.1f}",
                }
            )

        v_grid: List[Dict[str, Any]] = []
        n = len(snapshot)
        if n > 0:
            # Index span visible in the chart, which is [0, n - 1] when not zoomed
            lo = min(max(transform.index_at_x(geometry.left), 0.0), n - 1)
            hi = min(max(transform.index_at_x(geometry.right), 0.0), n - 1)
        for i in range(self.VERTICAL_GRID_DIVISIONS + 1):
            x = geometry.left + i * geometry.width / self.VERTICAL_GRID_DIVISIONS
            label = None
            if n > 0:
                fraction = i / self.VERTICAL_GRID_DIVISIONS
                index = min(n - 1, int(np.floor(lo + fraction * (hi - lo) + 0.5)))
                label = f"{snapshot.timestamps[index] / 1000.0:.1f}s"
            v_grid.append({"x": x, "y0": geometry.top, "y1": geometry.bottom, "label": label})

        channels: List[Dict[str, Any]] = []
        for name, style, values in zip(CHANNEL_NAMES, self.channel_styles, snapshot.channels):
            if values.size == 0:
                continue
            xs, ys = transform.channel_points(values)
            channels.append(
                {
                    "name": name,
                    "style": style,
                    "line": (xs, ys),
                    "area": transform.area_polygon(values),
                }
            )

        return {
            "theme": self.theme,
            "title": title,
            "legend": legend,
            "h_grid": h_grid,
            "v_grid": v_grid,
            "zero_line": {
                "y": transform.zero_y,
                "x0": geometry.left,
                "x1": geometry.right,
            },
            "clip": (geometry.left, geometry.top, geometry.width, geometry.height),
            "channels": channels,
        }

    def render(
        self, snapshot: TelemetrySnapshot, viewport: Optional[ViewportState] = None
    ) -> np.ndarray:
        """
        Compose and paint one frame.

        Parameters
        ----------
        snapshot : TelemetrySnapshot
            Immutable copy of the buffer to draw.
        viewport : Optional[ViewportState], default=None
            Zoom and pan state. None means the default view.

        Returns
        -------
        np.ndarray
            RGBA framebuffer of shape ``(height_px, width_px, 4)``.
        """
        frame = self.compose_frame(snapshot, viewport)
        theme = frame["theme"]

        self.ax.cla()
        self.ax.set_axis_off()
        self.ax.set_autoscale_on(False)
        self.fig.patch.set_facecolor(theme.background)

        self._draw_background(theme)
        self._draw_title_and_legend(frame, theme)
        self._draw_grid(frame, theme)
        self._draw_zero_line(frame, theme)
        self._draw_channels(frame)

        # Screen coordinates: origin top left, y grows downward
        self.ax.set_xlim(0, self.width_px)
        self.ax.set_ylim(self.height_px, 0)

        self.canvas.draw()
        self._frame = np.asarray(self.canvas.buffer_rgba()).copy()
        self.frames_rendered += 1
        logger.debug(
            f"Rendered frame {self.frames_rendered}: {len(snapshot)} samples, "
            f"{len(frame['channels'])} channels, theme={theme.name}"
        )
        return self._frame

    def _draw_background(self, theme: Theme) -> None:
        self.ax.add_patch(
            Rectangle(
                (0, 0),
                self.width_px,
                self.height_px,
                facecolor=theme.background,
                edgecolor="none",
                zorder=0,
            )
        )

    def _text(self, x: float, y: float, s: str, color: str, ha: str = "left", **kwargs):
        return self.ax.text(
            x,
            y,
            s,
            color=color,
            fontsize=self._px_to_pt(self.text_size_px),
            ha=ha,
            va="baseline",
            zorder=10,
            **kwargs,
        )

    def _draw_title_and_legend(self, frame: Dict[str, Any], theme: Theme) -> None:
        title = frame["title"]
        shadow_offset = self._px_to_pt(1.0)
        self._text(
            title["x"],
            title["y"],
            title["text"],
            theme.text,
            path_effects=[
                patheffects.withSimplePatchShadow(
                    offset=(shadow_offset, -shadow_offset),
                    shadow_rgbFace=theme.title_shadow,
                    alpha=1.0,
                )
            ],
        )

        for entry in frame["legend"]:
            x, y, w, h = entry["box"]
            self.ax.add_patch(
                Rectangle((x, y), w, h, facecolor=entry["color"], edgecolor="none", zorder=10)
            )
            tx, ty = entry["text_xy"]
            self._text(tx, ty, entry["label"], theme.text)

    def _draw_grid(self, frame: Dict[str, Any], theme: Theme) -> None:
        dash = self._px_to_pt(self.GRID_DASH_PX)
        line_kwargs = dict(
            color=theme.grid,
            linewidth=self._px_to_pt(self.GRID_LINE_WIDTH_PX),
            linestyle=(0, (dash, dash)),
            zorder=1,
        )

        for line in frame["h_grid"]:
            self.ax.add_line(Line2D([line["x0"], line["x1"]], [line["y"], line["y"]], **line_kwargs))
            self._text(
                line["x0"] - self.Y_LABEL_GAP_PX, line["y"] + 10, line["label"], theme.text, ha="right"
            )

        for line in frame["v_grid"]:
            self.ax.add_line(Line2D([line["x"], line["x"]], [line["y0"], line["y1"]], **line_kwargs))
            if line["label"] is not None:
                self._text(
                    line["x"], line["y1"] + self.X_LABEL_GAP_PX, line["label"], theme.text, ha="center"
                )

    def _draw_zero_line(self, frame: Dict[str, Any], theme: Theme) -> None:
        zero = frame["zero_line"]
        self.ax.add_line(
            Line2D(
                [zero["x0"], zero["x1"]],
                [zero["y"], zero["y"]],
                color=theme.zero_line,
                linewidth=self._px_to_pt(self.ZERO_LINE_WIDTH_PX),
                linestyle="-",
                zorder=2,
            )
        )

    def _gradient_image(self, style: ChannelStyle, zero_y: float, top: float, bottom: float) -> np.ndarray:
        """
        Vertical gradient over the chart height: the channel colour at
        ``fill_alpha`` down to the baseline, fading to transparent at the
        bottom edge.
        """
        rows = np.linspace(top, bottom, self.GRADIENT_STEPS)
        fade_span = bottom - zero_y
        if fade_span > 0:
            alpha = np.clip((bottom - rows) / fade_span, 0.0, 1.0)
        else:
            alpha = np.ones_like(rows)

        image = np.zeros((self.GRADIENT_STEPS, 1, 4), dtype=np.float64)
        image[:, 0, :3] = to_rgba(style.color)[:3]
        image[:, 0, 3] = alpha * style.fill_alpha_fraction
        return image

    def _draw_channels(self, frame: Dict[str, Any]) -> None:
        left, top, width, height = frame["clip"]
        if width <= 0 or height <= 0:
            return
        clip_rect = Rectangle((left, top), width, height, transform=self.ax.transData)
        zero_y = frame["zero_line"]["y"]

        for zorder, channel in enumerate(frame["channels"], start=3):
            style: ChannelStyle = channel["style"]

            area = Polygon(channel["area"], closed=True, transform=self.ax.transData)
            gradient = self.ax.imshow(
                self._gradient_image(style, zero_y, top, top + height),
                extent=(left, left + width, top + height, top),
                origin="upper",
                aspect="auto",
                interpolation="bilinear",
                zorder=zorder,
            )
            # Image extent is the chart box, so clipping to the area is enough
            gradient.set_clip_path(area)

            xs, ys = channel["line"]
            line = Line2D(
                xs,
                ys,
                color=style.color,
                linewidth=self._px_to_pt(style.stroke_width),
                solid_joinstyle="round",
                solid_capstyle="round",
                antialiased=True,
                zorder=zorder + 0.5,
            )
            self.ax.add_line(line)
            line.set_clip_path(clip_rect)

    def save(self, filepath: str) -> None:
        """
        Save the last rendered frame to an image file.

        Parameters
        ----------
        filepath : str
            Destination path; the format follows the extension.
        """
        if self._frame is None:
            raise RuntimeError("No frame has been rendered yet.")
        self.to_image().save(filepath)
        logger.info(f"Frame saved to {filepath}")

    def to_image(self) -> Image.Image:
        """Last rendered frame as a Pillow RGBA image."""
        if self._frame is None:
            raise RuntimeError("No frame has been rendered yet.")
        return Image.fromarray(self._frame)
