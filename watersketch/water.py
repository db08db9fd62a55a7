"""Ambient water motion: a sum of travelling waves evaluated on demand.

The field keeps no noise buffers. Its only state is a phase accumulator, so
every height or flow sample is a pure function of (phase, position,
parameters).
"""
from __future__ import annotations

import math
from typing import Mapping, Sequence, Tuple

import numpy as np

from .constants import FLOW_SCALE, WAVELENGTH, WAVES


class WaterField:
    def __init__(
        self,
        width: float,
        height: float,
        waves: Sequence[Tuple[float, float, float, float]] = WAVES,
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.waves = tuple(waves)
        self.phase = 0.0

    def advance(self, dt: float, params: Mapping[str, float]) -> None:
        self.phase += dt * params["wave_speed"]

    def _arguments(self, kx: float, ky: float, omega: float, x, y, scale: float):
        k = 2.0 * math.pi * scale / WAVELENGTH
        return k * (kx * x + ky * y) + omega * self.phase

    def height_at(self, x, y, params: Mapping[str, float]):
        """Surface displacement at ``(x, y)``; accepts scalars or arrays."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        total = np.zeros(np.broadcast(x, y).shape)
        for kx, ky, omega, amp in self.waves:
            total += amp * np.sin(self._arguments(kx, ky, omega, x, y, params["wave_scale"]))
        return params["turbulence"] * total

    def flow_at(self, position: np.ndarray, params: Mapping[str, float]) -> np.ndarray:
        """Drift velocity in px/s at ``position``.

        Each wave contributes along its crest direction, which keeps the
        flow divergence-free: fish swirl instead of piling up.
        """
        x, y = float(position[0]), float(position[1])
        flow = np.zeros(2)
        for kx, ky, omega, amp in self.waves:
            norm = math.hypot(kx, ky)
            strength = amp * math.cos(self._arguments(kx, ky, omega, x, y, params["wave_scale"]))
            flow[0] += strength * ky / norm
            flow[1] -= strength * kx / norm
        return flow * params["turbulence"] * FLOW_SCALE

    def sample(self, params: Mapping[str, float], columns: int, rows: int) -> np.ndarray:
        """Height grid of shape ``(rows, columns)`` covering the canvas."""
        xs = (np.arange(columns) + 0.5) * (self.width / columns)
        ys = (np.arange(rows) + 0.5) * (self.height / rows)
        grid_x, grid_y = np.meshgrid(xs, ys)
        return self.height_at(grid_x, grid_y, params)
