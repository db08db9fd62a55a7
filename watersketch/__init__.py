"""Animated water scene with live-tunable parameters and click-to-capture fish."""
from __future__ import annotations

from typing import TYPE_CHECKING

from .canvas import Canvas, RecordingCanvas
from .errors import (
    InvalidCanvasTarget,
    InvalidParameterValue,
    InvariantViolation,
    SketchError,
    SketchLifecycleError,
    UnknownParameter,
    UnknownPreset,
)
from .parameters import NUMERIC_PARAMETER_DEFS, ParameterDefinition, ParameterStore, init_parameter_store
from .presets import PRESETS, SketchApp, SketchPreset
from .simulation import Fish, WaterSimulation
from .sketch import SketchState, WaterSketch, create_sketch

__version__ = "0.1.0"

__all__ = [
    "Canvas",
    "RecordingCanvas",
    "SketchError",
    "UnknownParameter",
    "InvalidParameterValue",
    "InvalidCanvasTarget",
    "InvariantViolation",
    "UnknownPreset",
    "SketchLifecycleError",
    "NUMERIC_PARAMETER_DEFS",
    "ParameterDefinition",
    "ParameterStore",
    "init_parameter_store",
    "PRESETS",
    "SketchApp",
    "SketchPreset",
    "Fish",
    "WaterSimulation",
    "SketchState",
    "WaterSketch",
    "create_sketch",
    "MatplotlibHost",
    "create_app",
]

if TYPE_CHECKING:  # pragma: no cover
    from .renderer import MatplotlibHost
    from .server import create_app


def __getattr__(name: str):
    # pyplot picks a GUI backend on import and fastapi is only needed to serve,
    # so neither is loaded until asked for
    if name == "MatplotlibHost":
        from .renderer import MatplotlibHost as _Host

        return _Host
    if name == "create_app":
        from .server import create_app as _create_app

        return _create_app
    raise AttributeError(name)
