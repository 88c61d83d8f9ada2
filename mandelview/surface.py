"""Display surface and the strategies that paint engine output onto it."""

from typing import Callable, Protocol

import numpy as np
import pygame

from .engine import escape_palette
from .errors import BufferSizeMismatch


class DisplaySurface(Protocol):
    """A 2D raster sink with a backing resolution and an on-screen box."""

    def get_bounding_box(self) -> pygame.Rect: ...

    def get_size(self) -> tuple[int, int]: ...

    def draw_image(self, image: pygame.Surface, x: int, y: int) -> None: ...


class PygameDisplaySurface:
    """Plot area of the pygame window.

    Images are drawn into a backing surface at plot resolution. ``present``
    scales that surface into the window area above the control panel, so
    the plot can be displayed at a different size than it is computed.
    """

    def __init__(self, window: pygame.Surface, plot_width: int, plot_height: int,
                 panel_height: int = 0):
        self.window = window
        self.panel_height = panel_height
        self.backing = pygame.Surface((plot_width, plot_height))

    def get_size(self) -> tuple[int, int]:
        return self.backing.get_size()

    def get_bounding_box(self) -> pygame.Rect:
        win_w, win_h = self.window.get_size()
        return pygame.Rect(0, 0, max(win_w, 1), max(win_h - self.panel_height, 1))

    def draw_image(self, image: pygame.Surface, x: int, y: int):
        self.backing.blit(image, (x, y))

    def set_window(self, window: pygame.Surface):
        self.window = window

    def present(self):
        """Copy the backing surface into the window's plot area."""
        box = self.get_bounding_box()
        if box.size == self.backing.get_size():
            self.window.blit(self.backing, box.topleft)
        else:
            self.window.blit(pygame.transform.scale(self.backing, box.size), box.topleft)


# =============================================================================
# Paint Strategies
# =============================================================================

class DisplaySurfaceAdapter:
    """Paints engine output onto a DisplaySurface."""

    def __init__(self, surface: DisplaySurface):
        self.surface = surface
        self.paints = 0

    def paint_from_engine(self, engine):
        raise NotImplementedError


class RgbaSurfaceAdapter(DisplaySurfaceAdapter):
    """Paints RGBA buffers (row-major, top-to-bottom, 4 bytes per pixel)."""

    def paint(self, buffer, width: int, height: int):
        """Replace the whole surface with ``buffer``.

        The buffer is copied before returning, so a borrowed engine buffer
        may be invalidated afterwards.
        """
        view = memoryview(buffer)
        expected = width * height * 4
        if view.nbytes != expected:
            raise BufferSizeMismatch(expected, view.nbytes, width, height)

        pixels = np.frombuffer(view, dtype=np.uint8).reshape(height, width, 4)
        rgb = pixels[..., :3].copy()  # detach from the borrowed buffer
        image = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
        self.surface.draw_image(image, 0, 0)
        self.paints += 1

    def paint_from_engine(self, engine):
        data, width, height = engine.get_pixel_buffer()
        self.paint(data, width, height)


class IterationCountSurfaceAdapter(DisplaySurfaceAdapter):
    """Paints one-byte iteration counts through the escape-time palette."""

    def __init__(self, surface: DisplaySurface,
                 max_depth_provider: Callable[[], int]):
        super().__init__(surface)
        self._rgba = RgbaSurfaceAdapter(surface)
        self._max_depth = max_depth_provider

    def paint(self, buffer, width: int, height: int):
        view = memoryview(buffer)
        expected = width * height
        if view.nbytes != expected:
            raise BufferSizeMismatch(expected, view.nbytes, width, height)

        counts = np.frombuffer(view, dtype=np.uint8).reshape(height, width)
        rgba = escape_palette(counts, self._max_depth())
        self._rgba.paint(rgba.reshape(-1), width, height)
        self.paints += 1

    def paint_from_engine(self, engine):
        data, width, height = engine.get_iteration_counts()
        self.paint(data, width, height)
