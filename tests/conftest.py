"""Pytest configuration and fixtures for water sketch tests."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from watersketch.canvas import RecordingCanvas
from watersketch.parameters import init_parameter_store
from watersketch.simulation import Fish, WaterSimulation


@pytest.fixture
def store():
    return init_parameter_store()


@pytest.fixture
def params(store):
    return store.snapshot()


@pytest.fixture
def still_params(store):
    """Parameters under which fish only drift with their own heading."""
    store.set("turbulence", 0.0)
    store.set("wander", 0.0)
    store.set("separation", 0.0)
    return store.snapshot()


@pytest.fixture
def canvas():
    return RecordingCanvas(800, 500)


@pytest.fixture
def simulation():
    """Seeded simulation with a deterministic initial school."""
    return WaterSimulation(800, 500, fish_count=12, seed=42)


@pytest.fixture
def make_fish():
    def _make(fish_id=0, x=100.0, y=100.0, heading=0.0, size=1.0, alive=True):
        return Fish(
            id=fish_id,
            position=np.array([x, y], dtype=np.float64),
            heading=heading,
            velocity=np.zeros(2),
            size=size,
            hue=0.05,
            speed_factor=1.0,
            tail_phase=0.0,
            wander_phase=0.0,
            turn_freq=1.0,
            alive=alive,
        )

    return _make


@pytest.fixture
def empty_simulation():
    return WaterSimulation(800, 500, fish_count=0, seed=0)
