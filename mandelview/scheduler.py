"""Per-frame driver: frame statistics, dirty check, regenerate and paint."""

from typing import Callable, Optional
import logging
import time

import pygame

from .config import RENDER_BUDGET_MS, TARGET_FPS
from .errors import BufferSizeMismatch, EngineFailure

logger = logging.getLogger(__name__)


class FrameTimer:
    """Paces the loop at a target frame rate using pygame's clock."""

    def __init__(self, fps: int = TARGET_FPS, clock: Optional[pygame.time.Clock] = None):
        self.fps = fps
        self.clock = clock or pygame.time.Clock()

    def wait(self):
        self.clock.tick(self.fps)


class RenderScheduler:
    """Runs one tick per display refresh.

    Each tick records a frame sample. When the controller's dirty flag is
    set (or ``always_redraw`` is on) the engine is pointed at the latest
    view, regenerated, and its buffer painted before the tick returns.
    Engine and buffer errors are logged and skip the paint; they never stop
    the loop.
    """

    def __init__(self, controller, engine, adapter, stats, *,
                 timer: Optional[FrameTimer] = None,
                 on_frame: Optional[Callable[[], None]] = None,
                 on_present: Optional[Callable[[bool], None]] = None,
                 always_redraw: bool = False,
                 render_budget_ms: float = RENDER_BUDGET_MS):
        self.controller = controller
        self.engine = engine
        self.adapter = adapter
        self.stats = stats
        self.timer = timer
        self.on_frame = on_frame
        self.on_present = on_present
        self.always_redraw = always_redraw
        self.render_budget_ms = render_budget_ms

        self.ticks = 0
        self.failures = 0
        self.render_times: list[float] = []
        self.last_render_ms = 0.0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    # =========================================================================
    # Tick
    # =========================================================================

    def tick(self) -> bool:
        """Advance one frame. Returns True if a new image was painted."""
        self.ticks += 1
        self.stats.record_frame()

        dirty = self.controller.dirty
        if not (dirty or self.always_redraw):
            return False

        t0 = time.perf_counter()
        # Read the view and clear the flag together, so input arriving after
        # this point marks the next tick dirty again.
        view = self.controller.view
        dirty.clear()

        try:
            self.engine.set_view(view.center_x, view.center_y, view.zoom)
            self.engine.regenerate()
            self.adapter.paint_from_engine(self.engine)
        except EngineFailure as exc:
            self.failures += 1
            logger.warning("Render skipped, engine failed: %s", exc)
            return False
        except BufferSizeMismatch as exc:
            self.failures += 1
            logger.error("Render skipped, bad pixel buffer: %s", exc)
            return False

        self.last_render_ms = (time.perf_counter() - t0) * 1000
        self.render_times.append(self.last_render_ms)
        if self.last_render_ms > self.render_budget_ms:
            logger.debug("Render took %.1fms (budget %.1fms)",
                         self.last_render_ms, self.render_budget_ms)
        return True

    # =========================================================================
    # Loop
    # =========================================================================

    def run(self, max_ticks: Optional[int] = None):
        """Tick until ``stop()`` is called or ``max_ticks`` ticks have run."""
        self._running = True
        count = 0
        try:
            while self._running:
                if self.on_frame is not None:
                    self.on_frame()
                    if not self._running:
                        break
                painted = self.tick()
                if self.on_present is not None:
                    self.on_present(painted)
                count += 1
                if max_ticks is not None and count >= max_ticks:
                    break
                if self.timer is not None:
                    self.timer.wait()
        finally:
            self._running = False

    def stop(self):
        self._running = False

    def summary(self) -> str:
        if not self.render_times:
            return "No frames rendered"
        avg_ms = sum(self.render_times) / len(self.render_times)
        return (f"Rendered {len(self.render_times)} frames in {self.ticks} ticks, "
                f"average render time: {avg_ms:.1f}ms")
