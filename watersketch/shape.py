"""Procedural 2D fish silhouette."""
from __future__ import annotations

import math

import numpy as np

BODY_WIDTH = 0.2
BODY_FRONT = 0.5
BODY_BACK = -0.3
TAIL_LENGTH = 0.28
TAIL_SPREAD = 0.17
TAIL_SWAY = 0.12


def _body_profile(segments: int) -> tuple[np.ndarray, np.ndarray]:
    t = np.linspace(0.0, 1.0, segments)
    xs = BODY_FRONT - t * (BODY_FRONT - BODY_BACK)
    bulge = np.sin(np.pi * np.clip(t * 0.92 + 0.04, 0.0, 1.0)) ** 0.7
    taper_tail = 1.0 - 0.6 * np.exp(-(1.0 - t) * 4.0)
    return xs, BODY_WIDTH * bulge * taper_tail


def fish_outline(tail_swing: float = 0.0, segments: int = 9) -> np.ndarray:
    """Closed polygon of a fish one unit long, nose pointing along +x.

    ``tail_swing`` in [-1, 1] bends the tail fan sideways.
    """
    xs, half_widths = _body_profile(segments)
    sway = TAIL_SWAY * tail_swing
    tail_x = BODY_BACK - TAIL_LENGTH
    top = np.column_stack([xs, half_widths])
    bottom = np.column_stack([xs[::-1], -half_widths[::-1]])
    tail = np.array(
        [
            [BODY_BACK - 0.02, sway * 0.4],
            [tail_x, TAIL_SPREAD + sway],
            [tail_x + 0.07, sway],
            [tail_x, -TAIL_SPREAD + sway],
        ]
    )
    return np.vstack([top, tail, bottom])


def place_outline(outline: np.ndarray, position, heading: float, length: float) -> np.ndarray:
    """Scale, rotate by ``heading`` and move a local outline onto the canvas."""
    cos_h, sin_h = math.cos(heading), math.sin(heading)
    rotation = np.array([[cos_h, -sin_h], [sin_h, cos_h]])
    return (outline * length) @ rotation.T + np.asarray(position, dtype=np.float64)
