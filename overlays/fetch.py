"""Download and decode base images.

A single GET is issued per request; there is no retry. Transport failures
and non-2xx responses raise :class:`NetworkError`, unreadable bytes raise
:class:`DecodeError`.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError

from . import config
from .errors import DecodeError, NetworkError

logger = logging.getLogger(__name__)

USER_AGENT = "caption-overlay/0.1"


def decode_image(data: bytes) -> Image.Image:
    """Decode image bytes of any Pillow-supported format to RGBA."""
    if not data:
        raise DecodeError("Base image response was empty.")
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            if img.mode == "I" or img.mode.startswith("I;16"):
                # Scale 16-bit samples down to 8 bits instead of clipping.
                return img.convert("I").point(lambda v: v * (1 / 257)).convert("L").convert("RGBA")
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Unsupported base image: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Corrupt base image: {e}") from e


async def _get(client: httpx.AsyncClient, locator: str) -> bytes:
    try:
        r = await client.get(
            locator,
            headers={"User-Agent": USER_AGENT},
            timeout=config.FETCH_TIMEOUT_SECONDS,
            follow_redirects=True,
        )
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise NetworkError(
            f"Base image request returned HTTP {e.response.status_code}."
        ) from e
    except httpx.TimeoutException as e:
        raise NetworkError(f"Timed out fetching base image from {locator}.") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise NetworkError(f"Could not fetch base image from {locator}: {e}") from e
    return r.content


async def fetch_image(locator: str, client: Optional[httpx.AsyncClient] = None) -> Image.Image:
    """Retrieve ``locator`` and decode it into an RGBA image.

    Args:
        locator: http(s) URL of the base image.
        client: Optional shared client; a short-lived one is created if
            omitted.

    Raises:
        NetworkError: If the image cannot be retrieved.
        DecodeError: If the retrieved bytes are not a valid image.
    """
    if client is None:
        async with httpx.AsyncClient() as own_client:
            data = await _get(own_client, locator)
    else:
        data = await _get(client, locator)
    logger.debug("Fetched %d bytes from %s", len(data), locator)
    return decode_image(data)
