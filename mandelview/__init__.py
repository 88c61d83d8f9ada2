"""Interactive Mandelbrot viewer with a dirty-flag render scheduler."""

from .config import ViewerConfig
from .engine import MandelbrotEngine, PixelBuffer, RenderEngine
from .errors import BufferSizeMismatch, EngineFailure, InvalidInputValue
from .frame_stats import FrameStats, FrameStatsTracker
from .viewport import DirtyFlag, ViewportController, ViewState, wheel_zoom_factor

__version__ = "0.1.0"

__all__ = [
    "BufferSizeMismatch",
    "DirtyFlag",
    "EngineFailure",
    "FrameStats",
    "FrameStatsTracker",
    "InvalidInputValue",
    "MandelbrotEngine",
    "PixelBuffer",
    "RenderEngine",
    "ViewState",
    "ViewerConfig",
    "ViewportController",
    "wheel_zoom_factor",
]
