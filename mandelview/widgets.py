"""Control panel widgets and text overlays drawn with pygame."""

from typing import Optional

import pygame

from .config import (
    HELP_OVERLAY_ALPHA,
    MAX_ITERATION_DEPTH,
    MIN_ITERATION_DEPTH,
    PADDING,
)


HELP_LINES = [
    "Keybindings:",
    "",
    "  Click          Center on point",
    "  Scroll         Zoom in/out",
    "  Slider, + / -  Iteration depth",
    "  0 / D          Reset view",
    "  S              Save snapshot",
    "  F              Toggle FPS",
    "  H / ?          This help",
    "  Q / ESC        Quit",
]


def draw_text(screen: pygame.Surface, font: pygame.font.Font, text: str,
              x: int, y: int, color=(255, 255, 255)) -> int:
    """Render one line at position and return the new x position."""
    surf = font.render(text, True, color, (0, 0, 0))
    screen.blit(surf, (x, y))
    return x + surf.get_width()


def draw_lines(screen: pygame.Surface, font: pygame.font.Font, lines: list[str],
               x: int, y: int, alpha: Optional[int] = None) -> pygame.Rect:
    """Render a block of lines on a black background."""
    line_height = font.get_linesize()
    width = max(font.size(line)[0] for line in lines) + PADDING * 2
    height = len(lines) * line_height + PADDING * 2

    bg = pygame.Surface((width, height))
    if alpha is not None:
        bg.set_alpha(alpha)
    bg.fill((0, 0, 0))
    screen.blit(bg, (x, y))

    for i, line in enumerate(lines):
        text_surface = font.render(line, True, (255, 255, 255))
        screen.blit(text_surface, (x + PADDING, y + PADDING + i * line_height))
    return pygame.Rect(x, y, width, height)


def draw_fps_overlay(screen: pygame.Surface, font: pygame.font.Font, text: str):
    draw_lines(screen, font, text.splitlines(), PADDING, PADDING)


def draw_help_overlay(screen: pygame.Surface, font: pygame.font.Font):
    help_width = max(font.size(line)[0] for line in HELP_LINES) + PADDING * 2
    x = max(PADDING, screen.get_width() - help_width - PADDING)
    draw_lines(screen, font, HELP_LINES, x, PADDING, alpha=HELP_OVERLAY_ALPHA)


class DepthSlider:
    """Horizontal integer slider with a numeric readout label.

    The slider holds no view state. It reports value changes from
    ``set_value``/``value_at``; the caller decides what to do with them.
    """

    KNOB_WIDTH = 8

    def __init__(self, rect: pygame.Rect, value: int,
                 minimum: int = MIN_ITERATION_DEPTH,
                 maximum: int = MAX_ITERATION_DEPTH,
                 label: str = "depth"):
        self.rect = pygame.Rect(rect)
        self.minimum = minimum
        self.maximum = maximum
        self.label = label
        self.value = self._clamp(value)
        self.readout = str(self.value)
        self.dragging = False

    def _clamp(self, value: int) -> int:
        return max(self.minimum, min(self.maximum, int(value)))

    def set_value(self, value: int) -> bool:
        """Move the knob; returns True when the value changed."""
        value = self._clamp(value)
        if value == self.value:
            return False
        self.value = value
        return True

    def update_readout(self):
        self.readout = str(self.value)

    def value_at(self, x: int) -> int:
        """Slider value under a window x coordinate."""
        span = max(self.rect.width - 1, 1)
        frac = (x - self.rect.left) / span
        frac = max(0.0, min(1.0, frac))
        return self._clamp(round(self.minimum + frac * (self.maximum - self.minimum)))

    def hit(self, pos) -> bool:
        return self.rect.inflate(0, PADDING).collidepoint(pos)

    def knob_rect(self) -> pygame.Rect:
        span = self.maximum - self.minimum
        frac = (self.value - self.minimum) / span if span else 0.0
        cx = self.rect.left + round(frac * (self.rect.width - 1))
        return pygame.Rect(cx - self.KNOB_WIDTH // 2, self.rect.top,
                           self.KNOB_WIDTH, self.rect.height)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        label_x = self.rect.left - PADDING - font.size(self.label)[0]
        text_y = self.rect.centery - font.get_linesize() // 2
        draw_text(screen, font, self.label, label_x, text_y)

        track = pygame.Rect(self.rect.left, self.rect.centery - 2, self.rect.width, 4)
        pygame.draw.rect(screen, (90, 90, 90), track)
        pygame.draw.rect(screen, (100, 200, 255), self.knob_rect())

        draw_text(screen, font, self.readout, self.rect.right + PADDING, text_y,
                  color=(255, 255, 0))
