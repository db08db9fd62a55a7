"""Debug slider panel writing straight into a live parameter store."""
from __future__ import annotations

import logging
from functools import partial
from typing import Dict, Mapping, Tuple

from matplotlib.figure import Figure
from matplotlib.widgets import Slider

from .parameters import ParameterDefinition, ParameterStore

logger = logging.getLogger(__name__)


class ControlPanel:
    """One slider per parameter definition.

    Moving a slider calls :meth:`ParameterStore.set`; the running scene picks
    the value up on its next frame.
    """

    def __init__(
        self,
        figure: Figure,
        definitions: Mapping[str, ParameterDefinition],
        store: ParameterStore,
        rect: Tuple[float, float, float, float] = (0.22, 0.03, 0.6, 0.3),
    ) -> None:
        self.figure = figure
        self.store = store
        self.sliders: Dict[str, Slider] = {}
        self._connections: Dict[str, int] = {}
        left, bottom, width, height = rect
        row = height / max(1, len(definitions))
        for idx, (key, definition) in enumerate(definitions.items()):
            ax = figure.add_axes((left, bottom + height - (idx + 1) * row + row * 0.2, width, row * 0.6))
            slider = Slider(
                ax,
                key,
                definition.min,
                definition.max,
                valinit=store.get(key),
                valstep=definition.step,
            )
            self._connections[key] = slider.on_changed(partial(self._on_changed, key))
            self.sliders[key] = slider

    def _on_changed(self, key: str, value: float) -> None:
        stored = self.store.set(key, value)
        logger.debug("%s -> %s", key, stored)

    def bind(self, store: ParameterStore) -> None:
        """Point the sliders at another store and show its values."""
        self.store = store
        for key, slider in self.sliders.items():
            slider.set_val(store.get(key))

    def disconnect(self) -> None:
        for key, cid in self._connections.items():
            self.sliders[key].disconnect(cid)
        self._connections = {}
