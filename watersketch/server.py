"""Remote canvas: one headless water sketch streamed to browsers over a WebSocket.

Handlers are all ``async`` so that parameter writes, captures and frame ticks
interleave on a single event loop, never in parallel.
"""
from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .canvas import RecordingCanvas
from .constants import CANVAS_HEIGHT, CANVAS_WIDTH, TICK_HZ
from .errors import InvalidParameterValue, SketchError, UnknownParameter
from .parameters import ParameterStore
from .presets import DEFAULT_PRESET, PRESETS
from .sketch import WaterSketch

logger = logging.getLogger(__name__)


class ParameterUpdate(BaseModel):
    value: float


class CapturePoint(BaseModel):
    x: float
    y: float


class ConnectionManager:
    def __init__(self) -> None:
        self.active: List[WebSocket] = []

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        self.active.append(ws)
        logger.info("Viewer connected (%d active)", len(self.active))

    def disconnect(self, ws: WebSocket) -> None:
        if ws in self.active:
            self.active.remove(ws)
            logger.info("Viewer disconnected (%d active)", len(self.active))

    async def broadcast(self, message: str) -> None:
        # viewers that vanished mid-send are dropped
        dead = []
        for ws in self.active:
            try:
                await ws.send_text(message)
            except (WebSocketDisconnect, RuntimeError):
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws)


class SketchService:
    """Headless sketch bound to a :class:`RecordingCanvas`."""

    def __init__(
        self,
        store: ParameterStore,
        preset_id: str = DEFAULT_PRESET,
        seed: int | None = None,
        strict: bool = False,
        width: float = CANVAS_WIDTH,
        height: float = CANVAS_HEIGHT,
    ) -> None:
        self.preset_id = preset_id
        self.preset = PRESETS[preset_id]
        self.store = store
        self.canvas = RecordingCanvas(width, height)
        self.sketch: WaterSketch = self.preset.create_sketch(store, seed=seed, strict=strict)(self.canvas)
        self.sketch.setup()
        # draw once so the first viewer has something to show
        self.sketch.tick(0.0)

    def frame_message(self) -> Dict[str, Any]:
        return {"type": "frame", **(self.canvas.frame or {})}

    def handle_message(self, message: Dict[str, Any]) -> Dict[str, Any] | None:
        """Apply one viewer message; returns a reply for the sender, if any."""
        if not isinstance(message, dict):
            return {"type": "error", "detail": "messages must be JSON objects"}
        kind = message.get("type")
        if kind == "capture":
            fish = self.sketch.mouse_pressed(float(message["x"]), float(message["y"]))
            return {"type": "captured", "fish": None if fish is None else fish.to_dict()}
        if kind == "set":
            value = self.store.set(message["key"], message["value"])
            return {"type": "parameter", "key": message["key"], "value": value}
        return {"type": "error", "detail": f"unknown message type {kind!r}"}


async def simulation_loop(service: SketchService, manager: ConnectionManager, tick_hz: float = TICK_HZ) -> None:
    tick = 1.0 / tick_hz
    loop = asyncio.get_running_loop()
    last = loop.time()
    while service.sketch.running:
        await asyncio.sleep(tick)
        now = loop.time()
        try:
            service.sketch.tick(now - last)
        except SketchError:
            logger.exception("Simulation loop stopped; tearing the sketch down")
            service.sketch.teardown()
            return
        last = now
        if manager.active:
            await manager.broadcast(json.dumps(service.frame_message()))


def create_app(
    store: ParameterStore | None = None,
    *,
    seed: int | None = None,
    strict: bool = False,
    tick_hz: float = TICK_HZ,
) -> FastAPI:
    preset = PRESETS[DEFAULT_PRESET]
    service = SketchService(store if store is not None else preset.init_store(), seed=seed, strict=strict)
    manager = ConnectionManager()

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI):
        task = asyncio.create_task(simulation_loop(service, manager, tick_hz))
        logger.info("Simulation loop started at %s Hz", tick_hz)
        try:
            yield
        finally:
            task.cancel()
            try:
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            finally:
                service.sketch.teardown()

    app = FastAPI(title=preset.name, lifespan=lifespan)
    app.state.service = service
    app.state.manager = manager

    @app.exception_handler(UnknownParameter)
    async def unknown_parameter(_request: Request, exc: UnknownParameter) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidParameterValue)
    async def invalid_parameter(_request: Request, exc: InvalidParameterValue) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/api/preset")
    async def get_preset() -> Dict[str, Any]:
        return {
            "id": service.preset_id,
            "name": service.preset.name,
            "title": service.preset.title,
            "subtitle": service.preset.subtitle,
        }

    @app.get("/api/parameters")
    async def list_parameters() -> Dict[str, Any]:
        return {
            key: {**definition.to_dict(), "value": service.store.get(key)}
            for key, definition in service.store.definitions.items()
        }

    @app.get("/api/parameters/{key}")
    async def get_parameter(key: str) -> Dict[str, Any]:
        return {"key": key, "value": service.store.get(key)}

    @app.put("/api/parameters/{key}")
    async def put_parameter(key: str, update: ParameterUpdate) -> Dict[str, Any]:
        return {"key": key, "value": service.store.set(key, update.value)}

    @app.get("/api/state")
    async def get_state() -> Dict[str, Any]:
        return service.sketch.simulation.snapshot()

    @app.post("/api/capture")
    async def capture(point: CapturePoint) -> Dict[str, Any]:
        fish = service.sketch.mouse_pressed(point.x, point.y)
        return {"captured": None if fish is None else fish.to_dict()}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket) -> None:
        await manager.connect(ws)
        try:
            await ws.send_text(json.dumps(service.frame_message()))
            while True:
                text = await ws.receive_text()
                try:
                    reply = service.handle_message(json.loads(text))
                except (UnknownParameter, InvalidParameterValue, KeyError, TypeError, ValueError) as exc:
                    reply = {"type": "error", "detail": str(exc)}
                if reply is not None:
                    await ws.send_json(reply)
        except WebSocketDisconnect:
            pass
        finally:
            manager.disconnect(ws)

    return app
