"""Matplotlib-based canvas and frame-loop host for the water sketch."""
from __future__ import annotations

import logging
import time
from typing import List, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib import animation
from matplotlib.axes import Axes
from matplotlib.collections import LineCollection, PolyCollection
from matplotlib.figure import Figure
from matplotlib.image import AxesImage
from matplotlib.text import Text

from .constants import CANVAS_HEIGHT, CANVAS_WIDTH, FPS, HUD_COLOR, RIPPLE_COLOR, WATER_CMAP
from .controls import ControlPanel
from .presets import DEFAULT_PRESET, SketchApp
from .sketch import SketchFactory

logger = logging.getLogger(__name__)

_CIRCLE = np.linspace(0.0, 2.0 * np.pi, 33)


class MatplotlibCanvas:
    """Draw frames onto a matplotlib Axes laid out like a canvas (y down)."""

    def __init__(self, ax: Axes | None, width: float = CANVAS_WIDTH, height: float = CANVAS_HEIGHT) -> None:
        self.ax = ax
        self.width = width
        self.height = height
        self._water: AxesImage | None = None
        self._fish: PolyCollection | None = None
        self._ripples: LineCollection | None = None
        self._texts: List[Text] = []
        self._outlines: List[np.ndarray] = []
        self._colors: List[Tuple[float, ...]] = []
        self._rings: List[np.ndarray] = []
        self._ring_colors: List[Tuple[float, ...]] = []
        self._labels: List[Tuple[float, float, str]] = []

    @property
    def is_ready(self) -> bool:
        return self.ax is not None and self.ax.figure is not None and self.width > 0 and self.height > 0

    def bind(self) -> None:
        ax = self.ax
        self._water = ax.imshow(
            np.zeros((2, 2)),
            extent=(0, self.width, self.height, 0),
            cmap=WATER_CMAP,
            vmin=-2.0,
            vmax=2.0,
            interpolation="bicubic",
            alpha=0.8,
            zorder=0,
        )
        self._fish = PolyCollection([], closed=True, linewidths=0.6, zorder=2)
        self._ripples = LineCollection([], linewidths=1.4, zorder=3)
        ax.add_collection(self._fish, autolim=False)
        ax.add_collection(self._ripples, autolim=False)
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.height, 0)
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])

    def release(self) -> None:
        for artist in (self._water, self._fish, self._ripples, *self._texts):
            if artist is not None:
                artist.remove()
        self._water = self._fish = self._ripples = None
        self._texts = []

    def begin_frame(self, background: str) -> None:
        self.ax.set_facecolor(background)
        self._outlines = []
        self._colors = []
        self._rings = []
        self._ring_colors = []
        self._labels = []

    def draw_water(self, heights: np.ndarray) -> None:
        self._water.set_data(heights)

    def draw_fish(self, fish_id: int, outline: np.ndarray, color) -> None:
        self._outlines.append(outline)
        self._colors.append(tuple(color))

    def draw_ripple(self, x: float, y: float, radius: float, alpha: float) -> None:
        self._rings.append(np.column_stack([x + radius * np.cos(_CIRCLE), y + radius * np.sin(_CIRCLE)]))
        self._ring_colors.append((*RIPPLE_COLOR, max(0.0, min(1.0, alpha))))

    def draw_text(self, x: float, y: float, text: str) -> None:
        self._labels.append((x, y, text))

    def end_frame(self) -> None:
        # every collection is replaced wholesale: nothing from the last frame lingers
        self._fish.set_verts(self._outlines)
        self._fish.set_facecolor(self._colors)
        self._fish.set_edgecolor([(r * 0.6, g * 0.6, b * 0.6) for r, g, b in self._colors])
        self._ripples.set_segments(self._rings)
        self._ripples.set_color(self._ring_colors)
        while len(self._texts) < len(self._labels):
            self._texts.append(self.ax.text(0, 0, "", color=HUD_COLOR, fontsize=10, zorder=4))
        for artist, (x, y, text) in zip(self._texts, self._labels):
            artist.set_position((x, y))
            artist.set_text(text)
        for artist in self._texts[len(self._labels):]:
            artist.set_text("")


class MatplotlibHost:
    """Instance-mode runtime: owns one sketch on one Axes.

    ``setup`` runs on construction, ``tick`` runs from a ``FuncAnimation``
    timer with the measured frame time, and presses inside the Axes reach
    ``mouse_pressed``. :meth:`remove` stops all of it.
    """

    def __init__(
        self,
        factory: SketchFactory,
        ax: Axes | None = None,
        figure: Figure | None = None,
        fps: int = FPS,
        width: float = CANVAS_WIDTH,
        height: float = CANVAS_HEIGHT,
    ) -> None:
        if ax is not None:
            figure = ax.figure
        elif figure is not None:
            ax = figure.add_subplot(111)
        self.figure = figure
        self.canvas = MatplotlibCanvas(ax, width, height)
        self.sketch = factory(self.canvas)
        self.removed = False
        self._last_time: float | None = None
        self._connections: List[int] = []
        self._animation: animation.FuncAnimation | None = None

        self.sketch.setup()
        self._connections = [
            figure.canvas.mpl_connect("button_press_event", self._on_press),
            figure.canvas.mpl_connect("close_event", self._on_close),
        ]
        self._animation = animation.FuncAnimation(
            figure,
            self._on_frame,
            interval=1000.0 / fps,
            blit=False,
            cache_frame_data=False,
        )

    def _on_frame(self, _frame: int) -> tuple:
        if self.removed:
            return ()
        now = time.perf_counter()
        elapsed = 0.0 if self._last_time is None else now - self._last_time
        self._last_time = now
        self.sketch.tick(elapsed)
        return ()

    def _on_press(self, event) -> None:
        if self.removed or event.inaxes is not self.canvas.ax or event.xdata is None:
            return
        fish = self.sketch.mouse_pressed(float(event.xdata), float(event.ydata))
        if fish is not None:
            logger.info("Captured fish %d", fish.id)

    def _on_close(self, _event) -> None:
        self.remove()

    def remove(self) -> None:
        """Stop frame and input delivery and tear the sketch down. Idempotent."""
        if self.removed:
            return
        self.removed = True
        try:
            anim = self._animation
            if anim is not None:
                if anim.event_source is not None:
                    anim.pause()
                    anim.event_source.stop()
                # FuncAnimation (matplotlib 3.x) starts its timer from a one-shot draw_event
                # callback kept in _first_draw_id; once removed, that draw must not restart it
                first_draw = getattr(anim, "_first_draw_id", None)
                if first_draw is not None:
                    self.figure.canvas.mpl_disconnect(first_draw)
            for cid in self._connections:
                self.figure.canvas.mpl_disconnect(cid)
        except Exception:
            logger.exception("Stopping the animation failed during remove")
        self._connections = []
        self._animation = None
        self.sketch.teardown()


def run_viewer(
    seed: int | None = None,
    fps: int = FPS,
    debug: bool = False,
    preset_id: str = DEFAULT_PRESET,
) -> SketchApp:
    """Open a window with the scene; with ``debug`` also show the slider panel."""
    fig = plt.figure(figsize=(8, 7.2) if debug else (8, 5.6))
    fig.patch.set_facecolor("#f3f6f9")
    ax = fig.add_axes((0.03, 0.38, 0.94, 0.52) if debug else (0.03, 0.03, 0.94, 0.86))

    def host_factory(factory: SketchFactory) -> MatplotlibHost:
        return MatplotlibHost(factory, ax=ax, fps=fps)

    app = SketchApp(host_factory, sketch_options={"seed": seed, "strict": debug})
    app.activate(preset_id)
    preset = app.preset
    fig.suptitle(preset.title, fontsize=15, fontweight="bold")
    ax.set_title(preset.subtitle, fontsize=9, color="#4b5563")
    if fig.canvas.manager is not None:
        fig.canvas.manager.set_window_title(preset.name)

    panel = None
    if debug:
        panel = ControlPanel(fig, preset.parameter_defs, app.store)
    plt.show()
    app.shutdown()
    if panel is not None:
        panel.disconnect()
    return app
