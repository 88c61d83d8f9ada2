"""Logical view state and the input-to-view transforms."""

from dataclasses import dataclass, replace
from typing import Optional
import logging
import math

from .config import (
    BASE_EXTENT,
    DEFAULT_ITERATION_DEPTH,
    MAX_ITERATION_DEPTH,
    MIN_ITERATION_DEPTH,
    WHEEL_SENSITIVITY,
)
from .errors import InvalidInputValue

logger = logging.getLogger(__name__)


@dataclass
class ViewState:
    """Center, zoom and iteration depth of the displayed region.

    ``zoom`` scales the extent of the view: at 1.0 each axis spans
    ``BASE_EXTENT`` plane units, at 0.5 half of that.
    """
    center_x: float = 0.0
    center_y: float = 0.0
    zoom: float = 1.0
    iteration_depth: int = DEFAULT_ITERATION_DEPTH

    @property
    def view_width(self) -> float:
        return BASE_EXTENT * self.zoom

    @property
    def view_height(self) -> float:
        return BASE_EXTENT * self.zoom


class DirtyFlag:
    """Marks the displayed image as out of date with the view."""

    def __init__(self, initial: bool = True):
        self._set = initial

    def set(self):
        self._set = True

    def clear(self):
        self._set = False

    @property
    def is_set(self) -> bool:
        return self._set

    def __bool__(self) -> bool:
        return self._set

    def __repr__(self) -> str:
        return f"DirtyFlag({self._set})"


def wheel_zoom_factor(delta_y: float) -> float:
    """Zoom factor for a wheel delta; positive deltas (scroll down) zoom out."""
    return 1.0 + delta_y / WHEEL_SENSITIVITY


def parse_iteration_depth(value) -> int:
    """Parse a slider value into a depth clamped to the supported range.

    Raises InvalidInputValue for values that are not finite numbers.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputValue(f"iteration depth is not a number: {value!r}") from None
    if not math.isfinite(number):
        raise InvalidInputValue(f"iteration depth is not finite: {value!r}")
    depth = int(round(number))
    return max(MIN_ITERATION_DEPTH, min(MAX_ITERATION_DEPTH, depth))


class ViewportController:
    """Owns the ViewState and the dirty flag.

    Every successful transform sets ``dirty``; none of them paints. The
    scheduler is the only reader that clears the flag.
    """

    def __init__(self, surface_width: int, surface_height: int,
                 engine=None, view: Optional[ViewState] = None):
        if surface_width <= 0 or surface_height <= 0:
            raise ValueError(
                f"surface size must be positive, got {surface_width}x{surface_height}"
            )
        self.surface_width = surface_width
        self.surface_height = surface_height
        self._engine = engine
        self._initial_view = replace(view) if view is not None else ViewState()
        self._view = replace(self._initial_view)
        self.dirty = DirtyFlag(True)

    @property
    def view(self) -> ViewState:
        """A copy of the current view."""
        return replace(self._view)

    def view_window(self) -> tuple[float, float, float, float]:
        """(left, top, width, height) of the view in plane coordinates."""
        v = self._view
        width, height = v.view_width, v.view_height
        return (v.center_x - width / 2, v.center_y - height / 2, width, height)

    # =========================================================================
    # Transforms
    # =========================================================================

    def recenter(self, surface_x: float, surface_y: float,
                 displayed_width: Optional[float] = None,
                 displayed_height: Optional[float] = None) -> bool:
        """Move the center to the clicked surface position.

        Coordinates are relative to the displayed surface. When the surface
        is shown at a size other than its backing resolution, pass the
        displayed size so the click is scaled back to surface pixels.
        """
        try:
            x, y = self._to_surface_pixels(surface_x, surface_y,
                                           displayed_width, displayed_height)
        except InvalidInputValue as exc:
            logger.warning("Ignoring click: %s", exc)
            return False

        v = self._view
        center_x = v.center_x + (x / self.surface_width - 0.5) * v.view_width
        center_y = v.center_y + (y / self.surface_height - 0.5) * v.view_height
        if not (math.isfinite(center_x) and math.isfinite(center_y)):
            logger.warning("Ignoring click: center would become (%r, %r)",
                           center_x, center_y)
            return False
        v.center_x = center_x
        v.center_y = center_y
        self.dirty.set()
        return True

    def zoom(self, factor: float) -> bool:
        """Multiply the zoom by ``factor`` (> 1 zooms out, < 1 zooms in)."""
        if not (math.isfinite(factor) and factor > 0):
            logger.warning("Ignoring zoom factor %r", factor)
            return False
        zoom = self._view.zoom * factor
        if not (math.isfinite(zoom) and zoom > 0):
            logger.warning("Ignoring zoom factor %r: zoom would become %r", factor, zoom)
            return False
        self._view.zoom = zoom
        self.dirty.set()
        return True

    def zoom_by_wheel(self, delta_y: float) -> bool:
        return self.zoom(wheel_zoom_factor(delta_y))

    def set_iteration_depth(self, value) -> bool:
        try:
            depth = parse_iteration_depth(value)
        except InvalidInputValue as exc:
            logger.warning("Ignoring depth update: %s", exc)
            return False

        self._view.iteration_depth = depth
        if self._engine is not None:
            self._engine.set_iteration_depth(depth)
        self.dirty.set()
        return True

    def reset(self):
        """Return to the starting center and zoom; the depth is kept."""
        depth = self._view.iteration_depth
        self._view = replace(self._initial_view, iteration_depth=depth)
        self.dirty.set()
        logger.info("View reset")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _to_surface_pixels(self, x, y, displayed_width, displayed_height):
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidInputValue(f"non-finite position ({x}, {y})")
        scale_x = scale_y = 1.0
        if displayed_width is not None:
            if not displayed_width > 0:
                raise InvalidInputValue(f"displayed width must be positive, got {displayed_width}")
            scale_x = self.surface_width / displayed_width
        if displayed_height is not None:
            if not displayed_height > 0:
                raise InvalidInputValue(f"displayed height must be positive, got {displayed_height}")
            scale_y = self.surface_height / displayed_height
        return x * scale_x, y * scale_y
