"""Click-to-capture hit testing."""
from __future__ import annotations

import math
from typing import Iterable, Mapping

from .simulation import Fish, WaterSimulation


def distance(fish: Fish, x: float, y: float) -> float:
    return math.hypot(float(fish.position[0]) - x, float(fish.position[1]) - y)


def find_target(fish_list: Iterable[Fish], x: float, y: float, capture_radius: float) -> Fish | None:
    """Nearest live fish whose scaled capture radius contains ``(x, y)``.

    Equal distances resolve to the fish seen first.
    """
    best: Fish | None = None
    best_distance = math.inf
    for fish in fish_list:
        if not fish.alive:
            continue
        d = distance(fish, x, y)
        if d <= capture_radius * fish.size and d < best_distance:
            best, best_distance = fish, d
    return best


def capture_at(simulation: WaterSimulation, x: float, y: float, params: Mapping[str, float]) -> Fish | None:
    """Hit-test a pointer press and capture the fish under it, if any."""
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    target = find_target(simulation.live_fish(), x, y, params["capture_radius"])
    if target is None or not simulation.capture(target.id):
        return None
    return target
