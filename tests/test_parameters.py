import math
from types import MappingProxyType

import pytest

from watersketch.errors import InvalidParameterValue, SketchError, UnknownParameter
from watersketch.parameters import (
    NUMERIC_PARAMETER_DEFS,
    ParameterDefinition,
    ParameterStore,
    clamp,
    define_parameters,
    init_parameter_store,
)


def test_init_store_matches_defaults():
    store = init_parameter_store()
    assert set(store) == set(NUMERIC_PARAMETER_DEFS)
    for key, definition in NUMERIC_PARAMETER_DEFS.items():
        assert store.get(key) == definition.default_value


def test_each_init_returns_independent_store():
    first = init_parameter_store()
    second = init_parameter_store()
    first.set("speed", 7.5)
    assert second.get("speed") == NUMERIC_PARAMETER_DEFS["speed"].default_value


@pytest.mark.parametrize("key", sorted(NUMERIC_PARAMETER_DEFS))
def test_set_then_get_is_clamped(key):
    definition = NUMERIC_PARAMETER_DEFS[key]
    store = init_parameter_store()
    span = definition.max - definition.min
    for value in (definition.min - 5, definition.min, definition.min + span / 3, definition.max, definition.max + 100):
        stored = store.set(key, value)
        assert stored == store.get(key) == clamp(value, definition.min, definition.max)


def test_speed_scenario():
    defs = define_parameters(ParameterDefinition("speed", 0, 10, 0.1, 2))
    store = ParameterStore(defs)
    assert store.snapshot() == {"speed": 2}
    store.set("speed", 15)
    assert store.get("speed") == 10
    store.set("speed", -3)
    assert store.get("speed") == 0


def test_unknown_key_fails_on_get_and_set(store):
    with pytest.raises(UnknownParameter):
        store.get("gravity")
    with pytest.raises(UnknownParameter):
        store.set("gravity", 1.0)
    with pytest.raises(KeyError):
        store["gravity"]
    assert "gravity" not in store


def test_unknown_parameter_is_a_sketch_error(store):
    with pytest.raises(SketchError) as excinfo:
        store.get("nope")
    assert "nope" in str(excinfo.value)


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, "fast", None])
def test_non_numeric_values_are_rejected(store, value):
    before = store.get("speed")
    with pytest.raises(InvalidParameterValue):
        store.set("speed", value)
    assert store.get("speed") == before


def test_numeric_strings_are_accepted(store):
    assert store.set("speed", "3.5") == 3.5


def test_snapshot_is_a_copy(store):
    snap = store.snapshot()
    store.set("speed", 9)
    assert snap["speed"] == NUMERIC_PARAMETER_DEFS["speed"].default_value


def test_mapping_access(store):
    store["turbulence"] = 2.5
    assert store["turbulence"] == 2.5
    assert len(store) == len(NUMERIC_PARAMETER_DEFS)


def test_definitions_are_read_only():
    assert isinstance(NUMERIC_PARAMETER_DEFS, MappingProxyType)
    with pytest.raises(TypeError):
        NUMERIC_PARAMETER_DEFS["speed"] = ParameterDefinition("speed", 0, 1, 0.1, 0.5)
    with pytest.raises(AttributeError):
        NUMERIC_PARAMETER_DEFS["speed"].max = 100


def test_definitions_are_consistent():
    for key, definition in NUMERIC_PARAMETER_DEFS.items():
        assert definition.key == key
        assert definition.min <= definition.default_value <= definition.max
        assert definition.step > 0


@pytest.mark.parametrize(
    "args",
    [
        ("bad", 0, 10, 0, 5),
        ("bad", 0, 10, -1, 5),
        ("bad", 0, 10, 1, 11),
        ("bad", 0, 10, 1, -1),
    ],
)
def test_invalid_definitions_are_rejected(args):
    with pytest.raises(ValueError):
        ParameterDefinition(*args)


def test_duplicate_keys_are_rejected():
    with pytest.raises(ValueError):
        define_parameters(
            ParameterDefinition("speed", 0, 10, 0.1, 2),
            ParameterDefinition("speed", 0, 5, 0.1, 2),
        )


def test_definition_export_uses_panel_field_names():
    exported = NUMERIC_PARAMETER_DEFS["speed"].to_dict()
    assert exported == {"min": 0.0, "max": 10.0, "step": 0.1, "defaultValue": 2.0}
