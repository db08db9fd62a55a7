"""Render pass: paints the current simulation state onto a canvas."""
from __future__ import annotations

import math
from typing import Mapping

from matplotlib.colors import hsv_to_rgb

from .canvas import Canvas
from .constants import BACKGROUND_COLOR, FISH_SATURATION, FISH_VALUE, RIPPLE_RADIUS, WATER_GRID
from .shape import fish_outline, place_outline
from .simulation import Fish, WaterSimulation


def fish_color(fish: Fish) -> tuple[float, float, float]:
    # the tail beat shimmers the hue slightly
    hue = (fish.hue + 0.015 * math.sin(fish.tail_phase)) % 1.0
    r, g, b = hsv_to_rgb((hue, FISH_SATURATION, FISH_VALUE))
    return float(r), float(g), float(b)


def draw_scene(simulation: WaterSimulation, canvas: Canvas, params: Mapping[str, float]) -> None:
    """Redraw the whole frame. Reads ``simulation``, never mutates it."""
    canvas.begin_frame(BACKGROUND_COLOR)
    columns, rows = WATER_GRID
    canvas.draw_water(simulation.water.sample(params, columns, rows))

    length = params["fish_size"]
    for fish in simulation.live_fish():
        outline = place_outline(
            fish_outline(math.sin(fish.tail_phase)),
            fish.position,
            fish.heading,
            length * fish.size,
        )
        canvas.draw_fish(fish.id, outline, fish_color(fish))

    for ripple in simulation.ripples:
        canvas.draw_ripple(ripple.x, ripple.y, RIPPLE_RADIUS * ripple.progress, 1.0 - ripple.progress)

    canvas.draw_text(12.0, 22.0, f"captured {simulation.captured_count}")
    canvas.end_frame()
