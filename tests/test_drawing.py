import copy
import math

import numpy as np

from watersketch.constants import WATER_GRID
from watersketch.drawing import draw_scene, fish_color
from watersketch.shape import fish_outline, place_outline


def test_draws_every_live_fish(simulation, canvas, params):
    draw_scene(simulation, canvas, params)
    assert canvas.drawn_fish_ids() == [f.id for f in simulation.fish]
    assert canvas.frames_drawn == 1


def test_captured_fish_are_not_drawn(simulation, canvas, params):
    simulation.capture(5)
    draw_scene(simulation, canvas, params)
    assert 5 not in canvas.drawn_fish_ids()
    assert len(canvas.drawn_fish_ids()) == 11
    assert len(canvas.frame["ripples"]) == 1


def test_each_frame_starts_from_scratch(simulation, canvas, params):
    draw_scene(simulation, canvas, params)
    simulation.capture(0)
    simulation.capture(1)
    draw_scene(simulation, canvas, params)
    assert canvas.frames_drawn == 2
    assert canvas.drawn_fish_ids() == [f.id for f in simulation.fish[2:]]
    assert len(canvas.frame["text"]) == 1


def test_render_does_not_mutate_state(simulation, canvas, params):
    simulation.step(0.05, params)
    before = copy.deepcopy(simulation.fish)
    phase = simulation.water.phase
    draw_scene(simulation, canvas, params)
    assert simulation.water.phase == phase
    for fish, old in zip(simulation.fish, before):
        assert np.array_equal(fish.position, old.position)
        assert fish.heading == old.heading
        assert fish.tail_phase == old.tail_phase


def test_water_grid_and_hud(simulation, canvas, params):
    simulation.capture(2)
    draw_scene(simulation, canvas, params)
    columns, rows = WATER_GRID
    assert len(canvas.frame["water"]) == rows
    assert len(canvas.frame["water"][0]) == columns
    assert canvas.frame["text"][0]["text"] == "captured 1"


def test_fish_outline_points_along_heading():
    outline = fish_outline()
    assert outline.ndim == 2 and outline.shape[1] == 2
    nose = outline[np.argmax(outline[:, 0])]
    placed = place_outline(outline, (100.0, 50.0), math.pi / 2, 20.0)
    placed_nose = placed[np.argmax(outline[:, 0])]
    # facing +y on the canvas: the nose sits below the centre
    assert np.allclose(placed_nose, [100.0 - nose[1] * 20.0, 50.0 + nose[0] * 20.0])


def test_tail_swing_only_moves_the_tail():
    still = fish_outline(0.0)
    swung = fish_outline(1.0)
    moved = np.any(~np.isclose(still, swung), axis=1)
    assert moved.any()
    assert np.all(still[moved][:, 0] < 0)


def test_fish_color_is_rgb(make_fish):
    rgb = fish_color(make_fish())
    assert len(rgb) == 3
    assert all(0.0 <= c <= 1.0 for c in rgb)
