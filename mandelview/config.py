"""Viewer constants and run configuration."""

from dataclasses import dataclass
from typing import Optional
import math


# =============================================================================
# Constants
# =============================================================================

# Plot
DEFAULT_WIDTH = 500
DEFAULT_HEIGHT = 500
BASE_EXTENT = 4.0  # Plane units spanned by each axis at zoom 1.0

# Iteration depth (the engine stores counts in a single byte)
MIN_ITERATION_DEPTH = 1
MAX_ITERATION_DEPTH = 255
DEFAULT_ITERATION_DEPTH = 16

# Input
WHEEL_SENSITIVITY = 1000.0  # Wheel delta that doubles (or zeroes) the zoom
WHEEL_STEP_PIXELS = 100.0   # Delta reported for one wheel notch
DEPTH_KEY_STEP = 1

# Timing
TARGET_FPS = 60
FRAME_HISTORY = 100
RENDER_BUDGET_MS = 250.0

# Display
FONT_SIZE = 16
PADDING = 8
PANEL_HEIGHT = 40
SLIDER_WIDTH = 255
HELP_OVERLAY_ALPHA = 200


@dataclass
class ViewerConfig:
    """Run configuration for the interactive viewer."""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    iteration_depth: int = DEFAULT_ITERATION_DEPTH
    center_x: float = 0.0
    center_y: float = 0.0
    zoom: float = 1.0
    fps: int = TARGET_FPS
    always_redraw: bool = False
    legacy_palette: bool = False
    snapshot: Optional[str] = None

    def __post_init__(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"plot must be at least 2x2 pixels, got {self.width}x{self.height}")
        if not MIN_ITERATION_DEPTH <= self.iteration_depth <= MAX_ITERATION_DEPTH:
            raise ValueError(
                f"iteration depth must be in [{MIN_ITERATION_DEPTH}, {MAX_ITERATION_DEPTH}], "
                f"got {self.iteration_depth}"
            )
        if not (math.isfinite(self.zoom) and self.zoom > 0):
            raise ValueError(f"zoom must be a positive finite number, got {self.zoom}")
        if not (math.isfinite(self.center_x) and math.isfinite(self.center_y)):
            raise ValueError("center must be finite")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
