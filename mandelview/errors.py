"""Errors raised between the viewer components.

None of these are allowed to escape the render loop: the controller and the
scheduler catch them, log them and carry on with the next tick.
"""


class EngineFailure(RuntimeError):
    """The rendering engine could not produce a buffer for the current view."""


class BufferSizeMismatch(ValueError):
    """A pixel buffer does not hold the bytes its dimensions call for."""

    def __init__(self, expected: int, actual: int, width: int, height: int):
        super().__init__(
            f"expected {expected} bytes for a {width}x{height} pixel buffer, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class InvalidInputValue(ValueError):
    """An input value (slider depth, zoom factor, click) is unusable."""
