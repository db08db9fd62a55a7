"""Scene controller: one water scene bound to one canvas."""
from __future__ import annotations

import enum
import logging
from typing import Callable

from .canvas import Canvas
from .drawing import draw_scene
from .errors import InvalidCanvasTarget, SketchLifecycleError
from .interaction import capture_at
from .parameters import ParameterStore
from .simulation import Fish, WaterSimulation

logger = logging.getLogger(__name__)


class SketchState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    TORN_DOWN = "torn_down"


class WaterSketch:
    """Frame-loop unit for the water scene.

    A host calls :meth:`setup` once, then :meth:`tick` every frame and
    :meth:`mouse_pressed` on pointer presses, and finally :meth:`teardown`.
    Calls arriving outside the running state are ignored.
    """

    def __init__(
        self,
        store: ParameterStore,
        canvas: Canvas | None,
        seed: int | None = None,
        strict: bool = False,
    ) -> None:
        self.store = store
        self.canvas = canvas
        self.seed = seed
        self.strict = strict
        self.state = SketchState.UNINITIALIZED
        self.simulation: WaterSimulation | None = None
        self._canvas_bound = False

    @property
    def running(self) -> bool:
        return self.state is SketchState.RUNNING

    def setup(self) -> None:
        if self.state is not SketchState.UNINITIALIZED:
            raise SketchLifecycleError(f"setup() called on a {self.state.value} sketch")
        canvas = self.canvas
        if canvas is None or not canvas.is_ready:
            raise InvalidCanvasTarget("water sketch needs a ready canvas to bind")
        try:
            canvas.bind()
            self._canvas_bound = True
            self.simulation = WaterSimulation(
                canvas.width,
                canvas.height,
                fish_count=int(round(self.store.get("fish_count"))),
                seed=self.seed,
                strict=self.strict,
            )
        except Exception:
            self.teardown()
            raise
        self.state = SketchState.RUNNING
        logger.info("Water sketch running with %d fish", len(self.simulation.fish))

    def tick(self, elapsed: float) -> None:
        if not self.running:
            return
        # one snapshot per frame: slider writes land on the next frame
        params = self.store.snapshot()
        self.simulation.step(elapsed, params)
        draw_scene(self.simulation, self.canvas, params)

    def mouse_pressed(self, x: float, y: float) -> Fish | None:
        if not self.running:
            return None
        return capture_at(self.simulation, x, y, self.store.snapshot())

    def teardown(self) -> None:
        """Release the canvas. Safe to call any number of times, in any state."""
        if self.state is SketchState.TORN_DOWN:
            return
        self.state = SketchState.TORN_DOWN
        if self._canvas_bound:
            self._canvas_bound = False
            try:
                self.canvas.release()
            except Exception:
                logger.exception("Canvas release failed during teardown")
        logger.debug("Water sketch torn down")


SketchFactory = Callable[[Canvas], WaterSketch]


def create_sketch(store: ParameterStore, *, seed: int | None = None, strict: bool = False) -> SketchFactory:
    """Bind ``store`` to a scene factory; nothing starts until a host calls setup."""

    def factory(canvas: Canvas) -> WaterSketch:
        return WaterSketch(store, canvas, seed=seed, strict=strict)

    return factory
