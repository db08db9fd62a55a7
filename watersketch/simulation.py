"""Fish schooling in drifting water, advanced one frame at a time."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

import numpy as np

from .constants import (
    MAX_STEP,
    RIPPLE_LIFETIME,
    SEPARATION_FACTOR,
    SIZE_FACTOR_RANGE,
    SPEED_FACTOR_RANGE,
    SPEED_SCALE,
    TAIL_BEAT,
    TURN_FREQ_RANGE,
)
from .errors import InvariantViolation
from .water import WaterField

logger = logging.getLogger(__name__)

TAU = 2.0 * math.pi


def _wrap_angle(angle: float) -> float:
    return (angle + math.pi) % TAU - math.pi


@dataclass
class Fish:
    id: int
    position: np.ndarray  # shape (2,), px, y grows downward
    heading: float
    velocity: np.ndarray  # shape (2,), px/s
    size: float
    hue: float
    speed_factor: float
    tail_phase: float
    wander_phase: float
    turn_freq: float
    alive: bool = True

    def is_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.position))
            and np.all(np.isfinite(self.velocity))
            and math.isfinite(self.heading)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "x": float(self.position[0]),
            "y": float(self.position[1]),
            "heading": self.heading,
            "vx": float(self.velocity[0]),
            "vy": float(self.velocity[1]),
            "size": self.size,
            "hue": self.hue,
            "alive": self.alive,
            "flip": -1 if self.velocity[0] < 0 else 1,
        }


@dataclass
class Ripple:
    x: float
    y: float
    age: float = 0.0

    @property
    def progress(self) -> float:
        return min(1.0, self.age / RIPPLE_LIFETIME)


class WaterSimulation:
    """Schooling fish on a 2D canvas.

    All randomness is drawn from the owned generator while spawning; ``step``
    itself is deterministic in (state, elapsed, params).
    """

    def __init__(
        self,
        width: float,
        height: float,
        fish_count: int,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        strict: bool = False,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas must have a positive size, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.strict = strict
        self.water = WaterField(self.width, self.height)
        self.fish: List[Fish] = [self._spawn_fish(idx) for idx in range(max(0, int(fish_count)))]
        self.ripples: List[Ripple] = []
        self.captured_count = 0
        self.time = 0.0

    def _spawn_fish(self, idx: int) -> Fish:
        rng = self.rng
        position = rng.uniform((0.1, 0.1), (0.9, 0.9)) * (self.width, self.height)
        heading = float(rng.uniform(-math.pi, math.pi))
        return Fish(
            id=idx,
            position=position,
            heading=heading,
            velocity=np.zeros(2),
            size=float(rng.uniform(*SIZE_FACTOR_RANGE)),
            hue=float(rng.uniform(0.0, 0.12)),
            speed_factor=float(rng.uniform(*SPEED_FACTOR_RANGE)),
            tail_phase=float(rng.uniform(0.0, TAU)),
            wander_phase=float(rng.uniform(0.0, TAU)),
            turn_freq=float(rng.uniform(*TURN_FREQ_RANGE)),
        )

    # ------------------------------------------------------------------
    def live_fish(self) -> List[Fish]:
        return [f for f in self.fish if f.alive]

    def get_fish(self, fish_id: int) -> Fish | None:
        for fish in self.fish:
            if fish.id == fish_id:
                return fish
        return None

    def capture(self, fish_id: int) -> bool:
        """Take a fish out of the live set.

        Returns False, changing nothing, if the fish is unknown or was
        already captured.
        """
        fish = self.get_fish(fish_id)
        if fish is None or not fish.alive:
            return False
        fish.alive = False
        self.captured_count += 1
        self.ripples.append(Ripple(float(fish.position[0]), float(fish.position[1])))
        logger.debug("Captured fish %d at (%.1f, %.1f)", fish.id, fish.position[0], fish.position[1])
        return True

    # ------------------------------------------------------------------
    def step(self, elapsed: float, params: Mapping[str, float]) -> None:
        dt = float(elapsed)
        if not math.isfinite(dt):
            # NaN would pass straight through the clamp below
            logger.debug("Ignoring non-finite elapsed time %r", elapsed)
            dt = 0.0
        dt = min(max(dt, 0.0), MAX_STEP)
        self.water.advance(dt, params)

        live = self.live_fish()
        # neighbour positions are taken before anyone moves this frame
        positions = np.array([f.position for f in live]) if live else np.zeros((0, 2))
        body_length = params["fish_size"]
        cruise = params["speed"] * SPEED_SCALE

        for idx, fish in enumerate(live):
            turn = params["wander"] * math.sin(self.time * fish.turn_freq + fish.wander_phase)
            turn += self._separation_turn(idx, fish, positions, body_length) * params["separation"]
            fish.heading = _wrap_angle(fish.heading + turn * dt)

            direction = np.array([math.cos(fish.heading), math.sin(fish.heading)])
            flow = self.water.flow_at(fish.position, params)
            fish.velocity = direction * cruise * fish.speed_factor + flow
            fish.position = fish.position + fish.velocity * dt
            self._bounce(fish, body_length * fish.size * 0.5)

            fish.tail_phase = (fish.tail_phase + dt * (TAIL_BEAT + params["speed"] * 1.5)) % TAU

        for ripple in self.ripples:
            ripple.age += dt
        self.ripples = [r for r in self.ripples if r.age < RIPPLE_LIFETIME]
        self.time += dt
        self._check_invariants(live)

    def _separation_turn(self, idx: int, fish: Fish, positions: np.ndarray, body_length: float) -> float:
        if len(positions) < 2:
            return 0.0
        offsets = positions[idx] - positions
        distances = np.hypot(offsets[:, 0], offsets[:, 1])
        radius = body_length * SEPARATION_FACTOR
        near = (distances > 1e-6) & (distances < radius)
        if not near.any():
            return 0.0
        weights = (radius - distances[near]) / radius
        push = (offsets[near] / distances[near][:, None] * weights[:, None]).sum(axis=0)
        if not push.any():
            return 0.0
        desired = math.atan2(push[1], push[0])
        return _wrap_angle(desired - fish.heading) * float(weights.max())

    def _bounce(self, fish: Fish, margin: float) -> None:
        margin_x = min(margin, self.width * 0.5)
        margin_y = min(margin, self.height * 0.5)
        x, y = fish.position
        if x < margin_x or x > self.width - margin_x:
            fish.position[0] = min(max(x, margin_x), self.width - margin_x)
            inward = 1.0 if x < margin_x else -1.0
            if math.cos(fish.heading) * inward < 0:
                fish.heading = _wrap_angle(math.pi - fish.heading)
            fish.velocity[0] = inward * abs(fish.velocity[0])
        if y < margin_y or y > self.height - margin_y:
            fish.position[1] = min(max(y, margin_y), self.height - margin_y)
            inward = 1.0 if y < margin_y else -1.0
            if math.sin(fish.heading) * inward < 0:
                fish.heading = _wrap_angle(-fish.heading)
            fish.velocity[1] = inward * abs(fish.velocity[1])

    def _check_invariants(self, fish_list: List[Fish]) -> None:
        for fish in fish_list:
            if fish.is_finite():
                continue
            if self.strict:
                raise InvariantViolation(
                    f"fish {fish.id} left the finite domain: position={fish.position!r} "
                    f"heading={fish.heading!r}"
                )
            logger.warning("Fish %d had non-finite state; resetting to canvas centre", fish.id)
            fish.position = np.array([self.width * 0.5, self.height * 0.5])
            fish.velocity = np.zeros(2)
            fish.heading = 0.0

    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "width": self.width,
            "height": self.height,
            "captured": self.captured_count,
            "fish": [f.to_dict() for f in self.fish],
        }
