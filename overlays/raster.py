"""Rasterize vector scenes into transparent overlay bitmaps."""

from __future__ import annotations

import logging
from io import BytesIO

import cairosvg
from PIL import Image

from . import config
from .errors import RasterError
from .scene import VectorScene

logger = logging.getLogger(__name__)


def rasterize_png(scene: VectorScene) -> bytes:
    """Render ``scene`` at its intrinsic size and return PNG bytes.

    Areas not covered by any fill stay fully transparent.

    Raises:
        RasterError: If the canvas size is empty or too large, or the
            renderer rejects the scene.
    """
    if scene.width <= 0 or scene.height <= 0:
        raise RasterError(f"Cannot rasterize a {scene.width}x{scene.height} canvas.")
    if scene.width * scene.height > config.MAX_RASTER_PIXELS:
        raise RasterError(
            f"Canvas {scene.width}x{scene.height} exceeds the limit of "
            f"{config.MAX_RASTER_PIXELS} pixels."
        )
    try:
        return cairosvg.svg2png(
            bytestring=scene.markup,
            output_width=scene.width,
            output_height=scene.height,
        )
    except Exception as e:
        logger.error("Rasterization failed: %s", e)
        raise RasterError(f"Failed to rasterize overlay: {e}") from e


def rasterize(scene: VectorScene) -> Image.Image:
    """Render ``scene`` into an RGBA pixel buffer."""
    data = rasterize_png(scene)
    try:
        with Image.open(BytesIO(data)) as img:
            overlay = img.convert("RGBA")
    except OSError as e:
        raise RasterError(f"Renderer produced an unreadable bitmap: {e}") from e
    if overlay.size != (scene.width, scene.height):
        raise RasterError(
            f"Rendered overlay is {overlay.width}x{overlay.height}, "
            f"expected {scene.width}x{scene.height}."
        )
    return overlay
