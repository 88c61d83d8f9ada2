"""Save the engine's current plot as an image file."""

import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def save_snapshot(engine, path: str) -> str:
    """Write the engine's current RGBA buffer to ``path`` and return it."""
    data, width, height = engine.get_pixel_buffer()
    # Copy out of the borrowed buffer before handing it to Pillow
    rgba = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 4).copy()
    Image.fromarray(rgba).save(path)
    logger.info("Saved %dx%d snapshot to %s", width, height, path)
    return path
