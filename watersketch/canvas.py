"""Drawing surfaces the render pass can target."""
from __future__ import annotations

from typing import Any, Dict, List, Protocol, Sequence

import numpy as np

from .constants import CANVAS_HEIGHT, CANVAS_WIDTH

Color = Sequence[float]


class Canvas(Protocol):
    """Immediate-mode surface: each frame is drawn from scratch between
    :meth:`begin_frame` and :meth:`end_frame`."""

    width: float
    height: float

    @property
    def is_ready(self) -> bool: ...

    def bind(self) -> None: ...

    def release(self) -> None: ...

    def begin_frame(self, background: str) -> None: ...

    def draw_water(self, heights: np.ndarray) -> None: ...

    def draw_fish(self, fish_id: int, outline: np.ndarray, color: Color) -> None: ...

    def draw_ripple(self, x: float, y: float, radius: float, alpha: float) -> None: ...

    def draw_text(self, x: float, y: float, text: str) -> None: ...

    def end_frame(self) -> None: ...


class RecordingCanvas:
    """Canvas that keeps the last finished frame as plain data.

    Used headless by the server, which ships :attr:`frame` to browsers, and
    by the tests.
    """

    def __init__(self, width: float = CANVAS_WIDTH, height: float = CANVAS_HEIGHT, precision: int = 2) -> None:
        self.width = width
        self.height = height
        self.precision = precision
        self.bound = False
        self.bind_count = 0
        self.release_count = 0
        self.frames_drawn = 0
        self.frame: Dict[str, Any] | None = None
        self._pending: Dict[str, Any] | None = None

    @property
    def is_ready(self) -> bool:
        return self.width > 0 and self.height > 0

    def bind(self) -> None:
        self.bound = True
        self.bind_count += 1

    def release(self) -> None:
        self.bound = False
        self.release_count += 1

    def begin_frame(self, background: str) -> None:
        self._pending = {
            "width": self.width,
            "height": self.height,
            "background": background,
            "water": [],
            "fish": [],
            "ripples": [],
            "text": [],
        }

    def _current(self) -> Dict[str, Any]:
        if self._pending is None:
            raise RuntimeError("draw call outside begin_frame/end_frame")
        return self._pending

    def draw_water(self, heights: np.ndarray) -> None:
        self._current()["water"] = np.round(heights, 3).tolist()

    def draw_fish(self, fish_id: int, outline: np.ndarray, color: Color) -> None:
        self._current()["fish"].append(
            {
                "id": fish_id,
                "outline": np.round(outline, self.precision).tolist(),
                "color": [round(float(c), 3) for c in color],
            }
        )

    def draw_ripple(self, x: float, y: float, radius: float, alpha: float) -> None:
        self._current()["ripples"].append({"x": x, "y": y, "radius": radius, "alpha": alpha})

    def draw_text(self, x: float, y: float, text: str) -> None:
        self._current()["text"].append({"x": x, "y": y, "text": text})

    def end_frame(self) -> None:
        self.frame = self._current()
        self._pending = None
        self.frames_drawn += 1

    def drawn_fish_ids(self) -> List[int]:
        if self.frame is None:
            return []
        return [entry["id"] for entry in self.frame["fish"]]
