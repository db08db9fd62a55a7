import math

from watersketch.interaction import capture_at, distance, find_target


def test_click_inside_capture_radius_hits(make_fish):
    fish = make_fish(x=100.0, y=100.0)
    assert math.isclose(distance(fish, 105, 108), math.hypot(5, 8))
    assert find_target([fish], 105, 108, capture_radius=15) is fish


def test_click_outside_capture_radius_misses(make_fish):
    fish = make_fish(x=100.0, y=100.0)
    assert find_target([fish], 130, 130, capture_radius=15) is None


def test_radius_boundary_is_inclusive(make_fish):
    fish = make_fish(x=0.0, y=0.0)
    assert find_target([fish], 15.0, 0.0, capture_radius=15) is fish


def test_radius_scales_with_fish_size(make_fish):
    big = make_fish(x=100.0, y=100.0, size=1.2)
    assert find_target([big], 117.0, 100.0, capture_radius=15) is big
    small = make_fish(x=100.0, y=100.0, size=0.8)
    assert find_target([small], 117.0, 100.0, capture_radius=15) is None


def test_nearest_fish_wins(make_fish):
    far = make_fish(0, x=100.0, y=100.0)
    near = make_fish(1, x=110.0, y=100.0)
    assert find_target([far, near], 108.0, 100.0, capture_radius=15) is near


def test_equal_distance_goes_to_first(make_fish):
    a = make_fish(0, x=90.0, y=100.0)
    b = make_fish(1, x=110.0, y=100.0)
    assert find_target([a, b], 100.0, 100.0, capture_radius=15) is a
    assert find_target([b, a], 100.0, 100.0, capture_radius=15) is b


def test_captured_fish_are_ignored(make_fish):
    dead = make_fish(0, x=100.0, y=100.0, alive=False)
    assert find_target([dead], 100.0, 100.0, capture_radius=15) is None


def test_capture_at_exact_position(simulation, params):
    fish = simulation.fish[4]
    x, y = fish.position
    captured = capture_at(simulation, float(x), float(y), params)
    assert captured is not None
    assert not captured.alive
    assert simulation.captured_count == 1


def test_capture_twice_is_noop(empty_simulation, make_fish, params):
    empty_simulation.fish = [make_fish(0, x=200.0, y=200.0)]
    assert capture_at(empty_simulation, 200.0, 200.0, params) is not None
    assert capture_at(empty_simulation, 200.0, 200.0, params) is None
    assert empty_simulation.captured_count == 1


def test_click_outside_canvas_changes_nothing(simulation, params):
    before = [(f.alive, f.position.copy()) for f in simulation.fish]
    assert capture_at(simulation, -500.0, -500.0, params) is None
    assert capture_at(simulation, math.nan, 10.0, params) is None
    assert simulation.captured_count == 0
    for fish, (alive, position) in zip(simulation.fish, before):
        assert fish.alive == alive
        assert (fish.position == position).all()
