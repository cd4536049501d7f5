"""The caption overlay pipeline.

``process_image_overlay`` is the single entry point used by the HTTP
layer. Stages run strictly in sequence and the first failure aborts the
request; callers receive either complete PNG bytes or an
:class:`~overlays.errors.OverlayError` whose ``kind`` names the failing
stage.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx
from PIL import Image

from . import image_ops, raster, scene, template
from .errors import OverlayError
from .fetch import fetch_image
from .fonts import FontRegistry, get_registry
from .models import OverlayRequest

logger = logging.getLogger(__name__)


def create_overlay(
    caption_lines, fonts: Optional[FontRegistry] = None, template_source: Optional[str] = None
) -> Image.Image:
    """Render the caption lines into a transparent overlay bitmap."""
    markup = template.render(template_source or template.load_default_template(), caption_lines)
    if fonts is None:
        fonts = get_registry()
    vector_scene = scene.build(markup, fonts)
    return raster.rasterize(vector_scene)


async def process_image_overlay(
    request: OverlayRequest,
    *,
    client: Optional[httpx.AsyncClient] = None,
    fonts: Optional[FontRegistry] = None,
    template_source: Optional[str] = None,
) -> bytes:
    """Produce the composited PNG for ``request``.

    Args:
        request: Caption lines and base image URL.
        client: Optional HTTP client used to download the base image.
        fonts: Font registry; defaults to the process-wide registry.
        template_source: Overlay SVG template; defaults to the built-in one.

    Returns:
        PNG bytes of the cropped base image with the caption overlay.

    Raises:
        OverlayError: Any stage failure, carrying its specific kind.
    """
    logger.info("Processing overlay for %s", request.image_url)
    try:
        base = await fetch_image(request.image_url, client=client)
        # Rendering and encoding are CPU-bound; keep them off the event loop.
        if fonts is None:
            fonts = get_registry()
        overlay = await asyncio.to_thread(
            create_overlay, request.caption_lines, fonts, template_source
        )
        png_bytes = await asyncio.to_thread(image_ops.compose, base, overlay)
    except OverlayError as e:
        logger.warning("Overlay pipeline failed [%s]: %s", e.kind, e.message)
        raise
    logger.info("Overlay complete: %d bytes", len(png_bytes))
    return png_bytes
