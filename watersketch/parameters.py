"""Live-tunable numeric parameters shared by the control panel and the scene."""
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping

from .errors import InvalidParameterValue, UnknownParameter


@dataclass(frozen=True)
class ParameterDefinition:
    """Bounds, slider step and default of one numeric parameter."""

    key: str
    min: float
    max: float
    step: float
    default_value: float

    def __post_init__(self) -> None:
        if self.step <= 0:
            raise ValueError(f"{self.key}: step must be positive, got {self.step}")
        if not self.min <= self.default_value <= self.max:
            raise ValueError(
                f"{self.key}: default {self.default_value} outside [{self.min}, {self.max}]"
            )

    def clamp(self, value: float) -> float:
        return clamp(value, self.min, self.max)

    def to_dict(self) -> Dict[str, float]:
        return {
            "min": self.min,
            "max": self.max,
            "step": self.step,
            "defaultValue": self.default_value,
        }


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def define_parameters(*definitions: ParameterDefinition) -> Mapping[str, ParameterDefinition]:
    """Index definitions by key and freeze the result."""
    table: Dict[str, ParameterDefinition] = {}
    for definition in definitions:
        if definition.key in table:
            raise ValueError(f"duplicate parameter key {definition.key!r}")
        table[definition.key] = definition
    return MappingProxyType(table)


NUMERIC_PARAMETER_DEFS: Mapping[str, ParameterDefinition] = define_parameters(
    ParameterDefinition("fish_count", 1, 60, 1, 14),
    ParameterDefinition("speed", 0.0, 10.0, 0.1, 2.0),
    ParameterDefinition("turbulence", 0.0, 5.0, 0.05, 1.0),
    ParameterDefinition("wave_scale", 0.1, 5.0, 0.1, 1.0),
    ParameterDefinition("wave_speed", 0.0, 5.0, 0.1, 1.0),
    ParameterDefinition("fish_size", 6, 60, 1, 22),
    ParameterDefinition("capture_radius", 4, 60, 1, 15),
    ParameterDefinition("wander", 0.0, 3.0, 0.05, 0.8),
    ParameterDefinition("separation", 0.0, 3.0, 0.05, 1.0),
)


class ParameterStore:
    """Mutable key -> value mapping, one entry per definition.

    The store is shared by reference: the control panel writes to it and the
    scene reads a :meth:`snapshot` once per frame. There is no locking; both
    sides run on the same event loop and the last writer wins.
    """

    def __init__(self, definitions: Mapping[str, ParameterDefinition]) -> None:
        self.definitions = definitions
        self._values: Dict[str, float] = {
            key: float(definition.default_value) for key, definition in definitions.items()
        }

    def _definition(self, key: str) -> ParameterDefinition:
        try:
            return self.definitions[key]
        except KeyError:
            raise UnknownParameter(key) from None

    def get(self, key: str) -> float:
        self._definition(key)
        return self._values[key]

    def set(self, key: str, value: float) -> float:
        """Clamp ``value`` into the parameter's range and store it.

        Returns the value actually stored.
        """
        definition = self._definition(key)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidParameterValue(f"{key}: {value!r} is not a number") from None
        if not math.isfinite(number):
            raise InvalidParameterValue(f"{key}: {value!r} is not finite")
        stored = definition.clamp(number)
        self._values[key] = stored
        return stored

    def snapshot(self) -> Dict[str, float]:
        return dict(self._values)

    def __getitem__(self, key: str) -> float:
        return self.get(key)

    def __setitem__(self, key: str, value: float) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParameterStore({self._values!r})"


def init_parameter_store() -> ParameterStore:
    """Fresh store at the water preset's defaults."""
    return ParameterStore(NUMERIC_PARAMETER_DEFS)
