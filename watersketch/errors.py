"""Water sketch exception hierarchy.

Every error raised on purpose by the package derives from
:class:`SketchError` so callers can catch the whole family at once.
"""


class SketchError(Exception):
    """Root of all water-sketch exceptions."""


class UnknownParameter(SketchError, KeyError):
    """A parameter key that is not part of the active definitions."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"unknown parameter {self.key!r}"


class InvalidParameterValue(SketchError, ValueError):
    """A parameter write that is not a finite number."""


class InvalidCanvasTarget(SketchError):
    """The scene was asked to bind a missing or unready canvas."""


class InvariantViolation(SketchError):
    """The simulation produced non-finite or out-of-domain entity state."""


class UnknownPreset(SketchError, KeyError):
    """A preset id that is not registered."""

    def __init__(self, preset_id: str) -> None:
        super().__init__(preset_id)
        self.preset_id = preset_id

    def __str__(self) -> str:
        return f"unknown preset {self.preset_id!r}"


class SketchLifecycleError(SketchError):
    """A lifecycle call made in the wrong state (e.g. setup after teardown)."""
