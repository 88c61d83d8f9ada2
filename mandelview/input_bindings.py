"""Routes pygame input events to the viewport controller."""

from typing import Callable, Optional
import logging

import pygame

from .config import DEPTH_KEY_STEP, WHEEL_STEP_PIXELS
from .errors import InvalidInputValue
from .viewport import parse_iteration_depth

logger = logging.getLogger(__name__)


class InputBindingLayer:
    """Maps host events to controller calls.

    Click on the plot recenters, the wheel zooms, and the depth slider (or
    +/-) sets the iteration depth. The handlers only mutate the view through
    the controller; painting is left to the scheduler. The only state kept
    here is which overlays are shown.
    """

    def __init__(self, controller, surface, slider,
                 on_quit: Optional[Callable[[], None]] = None,
                 on_snapshot: Optional[Callable[[], None]] = None,
                 on_resize: Optional[Callable[[], None]] = None):
        self.controller = controller
        self.surface = surface
        self.slider = slider
        self.on_quit = on_quit
        self.on_snapshot = on_snapshot
        self.on_resize = on_resize
        self.show_fps = True
        self.show_help = False

    def pump(self):
        """Drain the pygame event queue."""
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event) -> bool:
        """Dispatch one event. Returns True when the event was consumed."""
        handler = self._event_handlers.get(event.type)
        if handler is None:
            return False
        return bool(handler(self, event))

    @property
    def _event_handlers(self) -> dict:
        """Map event types to handler methods."""
        return {
            pygame.QUIT: InputBindingLayer._on_quit,
            pygame.KEYDOWN: InputBindingLayer._on_keydown,
            pygame.MOUSEBUTTONDOWN: InputBindingLayer._on_mouse_down,
            pygame.MOUSEBUTTONUP: InputBindingLayer._on_mouse_up,
            pygame.MOUSEMOTION: InputBindingLayer._on_mouse_motion,
            pygame.MOUSEWHEEL: InputBindingLayer._on_mouse_wheel,
            pygame.VIDEORESIZE: InputBindingLayer._on_resize,
            pygame.WINDOWRESIZED: InputBindingLayer._on_resize,
        }

    # =========================================================================
    # Slider
    # =========================================================================

    def on_slider_input(self, value) -> bool:
        """Slider moved to ``value``: update the readout and the depth."""
        try:
            depth = parse_iteration_depth(value)
        except InvalidInputValue as exc:
            logger.warning("Ignoring slider input: %s", exc)
            return False
        if not self.slider.set_value(depth):
            return False
        self.slider.update_readout()
        return self.controller.set_iteration_depth(self.slider.value)

    # =========================================================================
    # Mouse
    # =========================================================================

    def _on_mouse_down(self, event):
        if event.button != 1:  # Left click only
            return False

        if self.slider.hit(event.pos):
            self.slider.dragging = True
            self.on_slider_input(self.slider.value_at(event.pos[0]))
            return True

        box = self.surface.get_bounding_box()
        if not box.collidepoint(event.pos):
            return False
        return self.controller.recenter(
            event.pos[0] - box.left, event.pos[1] - box.top,
            box.width, box.height,
        )

    def _on_mouse_up(self, event):
        if event.button == 1 and self.slider.dragging:
            self.slider.dragging = False
            return True
        return False

    def _on_mouse_motion(self, event):
        if not self.slider.dragging:
            return False
        self.on_slider_input(self.slider.value_at(event.pos[0]))
        return True

    def _on_mouse_wheel(self, event):
        """Zoom on wheel over the plot; the event goes no further."""
        pos = getattr(event, "pos", None) or pygame.mouse.get_pos()
        if not self.surface.get_bounding_box().collidepoint(pos):
            return False
        # pygame reports notches with up positive; convert to a scroll delta
        # where down is positive.
        notches = getattr(event, "precise_y", event.y)
        self.controller.zoom_by_wheel(-notches * WHEEL_STEP_PIXELS)
        return True

    # =========================================================================
    # Keyboard
    # =========================================================================

    def _on_keydown(self, event):
        handler = self._key_handlers.get(event.key)
        if handler is None:
            return False
        handler(self, event)
        return True

    @property
    def _key_handlers(self) -> dict:
        """Map keys to handler methods."""
        return {
            pygame.K_ESCAPE: InputBindingLayer._on_quit,
            pygame.K_q: InputBindingLayer._on_quit,
            pygame.K_f: InputBindingLayer._toggle_fps,
            pygame.K_h: InputBindingLayer._toggle_help,
            pygame.K_QUESTION: InputBindingLayer._toggle_help,
            pygame.K_SLASH: InputBindingLayer._toggle_help,
            pygame.K_0: lambda s, e: s.controller.reset(),
            pygame.K_d: lambda s, e: s.controller.reset(),
            pygame.K_s: InputBindingLayer._snapshot,
            pygame.K_EQUALS: lambda s, e: s._step_depth(e, 1),
            pygame.K_PLUS: lambda s, e: s._step_depth(e, 1),
            pygame.K_KP_PLUS: lambda s, e: s._step_depth(e, 1),
            pygame.K_MINUS: lambda s, e: s._step_depth(e, -1),
            pygame.K_KP_MINUS: lambda s, e: s._step_depth(e, -1),
        }

    def _step_depth(self, event, direction: int):
        step = DEPTH_KEY_STEP * (10 if getattr(event, "mod", 0) & pygame.KMOD_SHIFT else 1)
        self.on_slider_input(self.slider.value + direction * step)

    def _toggle_fps(self, event):
        self.show_fps = not self.show_fps

    def _toggle_help(self, event):
        self.show_help = not self.show_help

    def _snapshot(self, event):
        if self.on_snapshot is not None:
            self.on_snapshot()

    # =========================================================================
    # Window
    # =========================================================================

    def _on_quit(self, event):
        logger.info("Quit requested")
        if self.on_quit is not None:
            self.on_quit()
        return True

    def _on_resize(self, event):
        if self.on_resize is not None:
            self.on_resize()
        return True
