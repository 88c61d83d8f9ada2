"""Interactive Mandelbrot viewer: pygame window, input and render loop."""

from typing import Optional
import logging
import os
import time

import pygame

from .config import FONT_SIZE, PADDING, PANEL_HEIGHT, SLIDER_WIDTH, ViewerConfig
from .engine import MandelbrotEngine
from .frame_stats import FrameStatsTracker
from .input_bindings import InputBindingLayer
from .scheduler import FrameTimer, RenderScheduler
from .snapshot import save_snapshot
from .surface import IterationCountSurfaceAdapter, PygameDisplaySurface, RgbaSurfaceAdapter
from .viewport import ViewportController, ViewState
from .widgets import DepthSlider, draw_fps_overlay, draw_help_overlay

logger = logging.getLogger(__name__)


def build_engine(config: ViewerConfig) -> MandelbrotEngine:
    engine = MandelbrotEngine(config.width, config.height, config.iteration_depth)
    engine.set_view(config.center_x, config.center_y, config.zoom)
    return engine


def initial_view(config: ViewerConfig) -> ViewState:
    return ViewState(config.center_x, config.center_y, config.zoom, config.iteration_depth)


def render_to_file(config: ViewerConfig, path: str) -> str:
    """Render one frame without opening a window and save it."""
    engine = build_engine(config)
    engine.regenerate()
    logger.info("Rendered %dx%d in %.1fms", config.width, config.height, engine.last_generate_ms)
    return save_snapshot(engine, path)


class MandelbrotViewer:
    """Wires engine, controller, scheduler and pygame together."""

    def __init__(self, config: Optional[ViewerConfig] = None):
        self.config = config or ViewerConfig()
        self.engine = build_engine(self.config)
        self.controller = ViewportController(
            self.config.width, self.config.height,
            engine=self.engine, view=initial_view(self.config),
        )
        self.stats = FrameStatsTracker()

        # Pygame objects (initialized in run())
        self.screen: Optional[pygame.Surface] = None
        self.font: Optional[pygame.font.Font] = None
        self.surface: Optional[PygameDisplaySurface] = None
        self.slider: Optional[DepthSlider] = None
        self.bindings: Optional[InputBindingLayer] = None
        self.scheduler: Optional[RenderScheduler] = None

    def run(self):
        """Main entry point - initialize pygame and run the render loop."""
        self._init_pygame()
        self._build_ui()
        logger.info("Viewer started: %dx%d, depth %d",
                    self.config.width, self.config.height, self.config.iteration_depth)
        try:
            self.scheduler.run()
        finally:
            logger.info(self.scheduler.summary())
            pygame.quit()

    def _init_pygame(self):
        pygame.init()
        pygame.key.set_repeat(150, 25)
        self.screen = pygame.display.set_mode(
            (self.config.width, self.config.height + PANEL_HEIGHT), pygame.RESIZABLE
        )
        pygame.display.set_caption("Mandelbrot")
        self.font = pygame.font.SysFont("monospace", FONT_SIZE)

    def _build_ui(self):
        self.surface = PygameDisplaySurface(
            self.screen, self.config.width, self.config.height, PANEL_HEIGHT
        )
        if self.config.legacy_palette:
            adapter = IterationCountSurfaceAdapter(self.surface, self.engine.get_max_iteration_depth)
        else:
            adapter = RgbaSurfaceAdapter(self.surface)

        self.slider = DepthSlider(self._slider_rect(), self.config.iteration_depth)
        self.bindings = InputBindingLayer(
            self.controller, self.surface, self.slider,
            on_quit=self._quit,
            on_snapshot=self._save_snapshot,
            on_resize=self._on_resize,
        )
        self.scheduler = RenderScheduler(
            self.controller, self.engine, adapter, self.stats,
            timer=FrameTimer(self.config.fps),
            on_frame=self.bindings.pump,
            on_present=self._present,
            always_redraw=self.config.always_redraw,
        )

    def _slider_rect(self) -> pygame.Rect:
        _, win_h = self.screen.get_size()
        label_w = self.font.size("depth")[0]
        return pygame.Rect(PADDING * 2 + label_w, win_h - PANEL_HEIGHT + PADDING,
                           SLIDER_WIDTH, PANEL_HEIGHT - PADDING * 2)

    # =========================================================================
    # Callbacks
    # =========================================================================

    def _quit(self):
        self.scheduler.stop()

    def _on_resize(self):
        self.screen = pygame.display.get_surface()
        self.surface.set_window(self.screen)
        self.slider.rect = self._slider_rect()

    def _save_snapshot(self):
        path = os.path.abspath(time.strftime("mandelview_%Y%m%d_%H%M%S.png"))
        try:
            save_snapshot(self.engine, path)
        except OSError as exc:
            logger.error("Could not save snapshot: %s", exc)

    def _present(self, painted: bool):
        """Draw plot, control panel and overlays, then flip."""
        self.screen.fill((0, 0, 0))
        self.surface.present()
        self.slider.draw(self.screen, self.font)
        if self.bindings.show_fps:
            draw_fps_overlay(self.screen, self.font, self.stats.format())
        if self.bindings.show_help:
            draw_help_overlay(self.screen, self.font)
        pygame.display.flip()
