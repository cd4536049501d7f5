"""Runtime settings for the overlay service.

Values are read from environment variables once at import time.

Environment variables:
    FETCH_TIMEOUT_SECONDS: Timeout for downloading the base image
        (default 20).
    MAX_RASTER_PIXELS: Upper bound on width * height of the rendered
        overlay (default 16000000).
    LOG_LEVEL: Logging level configured by ``main.py`` (default 'INFO').
    OVERLAY_TEMPLATE_PATH: Path to an alternative overlay SVG template.
        Defaults to the template shipped in ``overlays/assets``.
"""

from __future__ import annotations

import os

ASSETS_DIR: str = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets")
FONTS_DIR: str = os.path.join(ASSETS_DIR, "fonts")

FETCH_TIMEOUT_SECONDS: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "20"))
MAX_RASTER_PIXELS: int = int(os.getenv("MAX_RASTER_PIXELS", "16000000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
OVERLAY_TEMPLATE_PATH: str = os.getenv(
    "OVERLAY_TEMPLATE_PATH", os.path.join(ASSETS_DIR, "overlay.svg")
)

FONT_FILES = (
    os.path.join(FONTS_DIR, "SourceCodePro-Bold.ttf"),
    os.path.join(FONTS_DIR, "SourceCodePro-Regular.ttf"),
)
