"""Registered scene presets and the composition root that switches them."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Protocol

from .errors import UnknownPreset
from .parameters import NUMERIC_PARAMETER_DEFS, ParameterDefinition, ParameterStore, init_parameter_store
from .sketch import SketchFactory, WaterSketch, create_sketch

logger = logging.getLogger(__name__)

DEFAULT_PRESET = "default"


@dataclass(frozen=True)
class SketchPreset:
    name: str
    title: str
    subtitle: str
    create_sketch: Callable[..., SketchFactory]
    parameter_defs: Mapping[str, ParameterDefinition]
    init_store: Callable[[], ParameterStore]


PRESETS: Mapping[str, SketchPreset] = MappingProxyType(
    {
        DEFAULT_PRESET: SketchPreset(
            name="Water Sketch",
            title="this is a water sketch",
            subtitle="click to capture fish",
            create_sketch=create_sketch,
            parameter_defs=NUMERIC_PARAMETER_DEFS,
            init_store=init_parameter_store,
        ),
    }
)


class SketchHost(Protocol):
    sketch: WaterSketch

    def remove(self) -> None: ...


HostFactory = Callable[[SketchFactory], SketchHost]


class SketchApp:
    """Owns the active preset id, its parameter store and the running host.

    Switching presets is an explicit lifecycle transition: the old host is
    removed before a fresh store and a new host are created, so the new
    scene always starts from defaults.
    """

    def __init__(
        self,
        host_factory: HostFactory,
        presets: Mapping[str, SketchPreset] = PRESETS,
        sketch_options: Mapping[str, Any] | None = None,
    ) -> None:
        self.host_factory = host_factory
        self.presets = presets
        self.sketch_options = dict(sketch_options or {})
        self.active_preset_id: str | None = None
        self.store: ParameterStore | None = None
        self.host: SketchHost | None = None

    @property
    def preset(self) -> SketchPreset | None:
        if self.active_preset_id is None:
            return None
        return self.presets[self.active_preset_id]

    def activate(self, preset_id: str = DEFAULT_PRESET) -> SketchHost:
        try:
            preset = self.presets[preset_id]
        except KeyError:
            raise UnknownPreset(preset_id) from None
        self.shutdown()
        store = preset.init_store()
        host = self.host_factory(preset.create_sketch(store, **self.sketch_options))
        self.active_preset_id = preset_id
        self.store = store
        self.host = host
        logger.info("Activated preset %r (%s)", preset_id, preset.name)
        return host

    def shutdown(self) -> None:
        host, self.host = self.host, None
        if host is not None:
            host.remove()
            logger.debug("Removed host for preset %r", self.active_preset_id)
