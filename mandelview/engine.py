"""Escape-time Mandelbrot engine producing RGBA pixel buffers.

The viewer only talks to the engine through the ``RenderEngine`` protocol,
so any other plot can be swapped in.
"""

from typing import NamedTuple, Protocol
import logging
import math
import time

import numpy as np

from .config import BASE_EXTENT, DEFAULT_ITERATION_DEPTH, MAX_ITERATION_DEPTH, MIN_ITERATION_DEPTH
from .errors import EngineFailure

logger = logging.getLogger(__name__)

ESCAPE_RADIUS_SQ = 4.0


class PixelBuffer(NamedTuple):
    """A borrowed engine buffer.

    ``data`` is a read-only view into engine storage. It is only valid until
    the next ``regenerate()``; consumers copy it before then.
    """
    data: memoryview
    width: int
    height: int


class RenderEngine(Protocol):
    """Operations the scheduler and controller need from a renderer."""

    def set_view(self, center_x: float, center_y: float, zoom: float) -> None: ...

    def regenerate(self) -> None: ...

    def get_pixel_buffer(self) -> PixelBuffer: ...

    def set_iteration_depth(self, value: int) -> None: ...

    def get_max_iteration_depth(self) -> int: ...

    def get_iteration_counts(self) -> PixelBuffer: ...


def escape_palette(counts: np.ndarray, max_iterations: int) -> np.ndarray:
    """Map one-byte iteration counts to RGBA.

    Bits 0-1, 2-3 and 4-5 of the count select red, green and blue in steps
    of 64. Points that never escaped are opaque black.
    """
    counts = counts.astype(np.uint8, copy=False)
    rgba = np.empty(counts.shape + (4,), dtype=np.uint8)
    rgba[..., 0] = (counts & 0x03) * 64
    rgba[..., 1] = ((counts & 0x0C) >> 2) * 64
    rgba[..., 2] = ((counts & 0x30) >> 4) * 64
    rgba[..., 3] = 255
    rgba[counts >= max_iterations, :3] = 0
    return rgba


class MandelbrotEngine:
    """Numpy-vectorised Mandelbrot renderer for a fixed plot size."""

    def __init__(self, width: int, height: int,
                 max_iterations: int = DEFAULT_ITERATION_DEPTH):
        if width < 2 or height < 2:
            raise ValueError(f"plot must be at least 2x2 pixels, got {width}x{height}")
        self.width = width
        self.height = height
        self.view_left = -BASE_EXTENT / 2
        self.view_top = -BASE_EXTENT / 2
        self.view_width = BASE_EXTENT
        self.view_height = BASE_EXTENT
        self.max_iterations = DEFAULT_ITERATION_DEPTH
        self.set_iteration_depth(max_iterations)

        self._plot = np.zeros((height, width), dtype=np.uint8)
        self._plot_rgba = np.zeros((height, width, 4), dtype=np.uint8)
        self.regenerations = 0
        self.last_generate_ms = 0.0

    # =========================================================================
    # View
    # =========================================================================

    def set_view(self, center_x: float, center_y: float, zoom: float):
        """Place the view window around a center; zoom scales the extent."""
        if not (math.isfinite(center_x) and math.isfinite(center_y)):
            raise EngineFailure(f"non-finite view center ({center_x}, {center_y})")
        if not (math.isfinite(zoom) and zoom > 0):
            raise EngineFailure(f"degenerate zoom {zoom!r}")
        extent = BASE_EXTENT * zoom
        if extent == 0.0 or not math.isfinite(extent):
            raise EngineFailure(f"zoom {zoom!r} gives a degenerate view extent")
        self.view_width = extent
        self.view_height = extent
        self.view_left = center_x - extent / 2
        self.view_top = center_y - extent / 2

    def set_iteration_depth(self, value: int):
        if not MIN_ITERATION_DEPTH <= int(value) <= MAX_ITERATION_DEPTH:
            raise EngineFailure(
                f"iteration depth {value} outside [{MIN_ITERATION_DEPTH}, {MAX_ITERATION_DEPTH}]"
            )
        self.max_iterations = int(value)

    def get_max_iteration_depth(self) -> int:
        return self.max_iterations

    # =========================================================================
    # Generation
    # =========================================================================

    def regenerate(self):
        """Recompute iteration counts and RGBA pixels for the current view.

        Numpy failures (out of memory, bad arrays) surface as EngineFailure
        and leave the previous plot in place.
        """
        t0 = time.perf_counter()
        try:
            counts = self._escape_counts()
            rgba = escape_palette(counts, self.max_iterations)
        except (MemoryError, ValueError, FloatingPointError) as exc:
            raise EngineFailure(f"regeneration failed: {exc!r}") from exc

        self._plot[...] = counts
        self._plot_rgba[...] = rgba

        self.regenerations += 1
        self.last_generate_ms = (time.perf_counter() - t0) * 1000
        logger.debug("Generated %dx%d plot in %.1fms (depth %d)",
                     self.width, self.height, self.last_generate_ms, self.max_iterations)

    def _escape_counts(self) -> np.ndarray:
        xs = self.view_left + np.arange(self.width) / (self.width - 1) * self.view_width
        ys = self.view_top + np.arange(self.height) / (self.height - 1) * self.view_height
        c = xs[np.newaxis, :] + 1j * ys[:, np.newaxis]

        counts = np.full(c.shape, self.max_iterations, dtype=np.uint8)
        z = np.zeros_like(c)
        active = np.ones(c.shape, dtype=bool)

        with np.errstate(over="ignore", invalid="ignore"):
            for i in range(self.max_iterations):
                z[active] = z[active] * z[active] + c[active]
                escaped = active & ((z.real * z.real + z.imag * z.imag) > ESCAPE_RADIUS_SQ)
                counts[escaped] = i
                active &= ~escaped
                if not active.any():
                    break
        return counts

    def get_pixel_buffer(self) -> PixelBuffer:
        return PixelBuffer(self._readonly_view(self._plot_rgba), self.width, self.height)

    def get_iteration_counts(self) -> PixelBuffer:
        return PixelBuffer(self._readonly_view(self._plot), self.width, self.height)

    def rgba_array(self) -> np.ndarray:
        """Copy of the current RGBA plot as a (height, width, 4) array."""
        return self._plot_rgba.copy()

    @staticmethod
    def _readonly_view(array: np.ndarray) -> memoryview:
        flat = array.reshape(-1)
        return memoryview(flat).toreadonly()
