"""Image compositing utilities.

This module crops the decoded base image to the fixed output frame,
composites the rendered caption overlay onto it and encodes the result as
PNG. All buffers are Pillow images in RGBA mode.
"""

from __future__ import annotations

from io import BytesIO
from typing import Tuple

from PIL import Image  # type: ignore[import]

from .errors import CropOutOfBoundsError, EncodeError

# (left, top, right, bottom): a 440x768 frame starting at x=164.
CROP_BOX: Tuple[int, int, int, int] = (164, 0, 604, 768)
FRAME_SIZE: Tuple[int, int] = (CROP_BOX[2] - CROP_BOX[0], CROP_BOX[3] - CROP_BOX[1])
OVERLAY_OFFSET: Tuple[int, int] = (10, 608)


def _rgba(img: Image.Image) -> Image.Image:
    return img if img.mode == "RGBA" else img.convert("RGBA")


def crop_frame(base: Image.Image) -> Image.Image:
    """Crop ``base`` to :data:`CROP_BOX`.

    Raises:
        CropOutOfBoundsError: If ``base`` does not fully contain the box.
    """
    right, bottom = CROP_BOX[2], CROP_BOX[3]
    if base.width < right or base.height < bottom:
        raise CropOutOfBoundsError(
            f"Base image is {base.width}x{base.height}; at least {right}x{bottom} "
            "is required for the output frame."
        )
    return _rgba(base).crop(CROP_BOX)


def composite(
    frame: Image.Image, overlay: Image.Image, offset: Tuple[int, int] = OVERLAY_OFFSET
) -> Image.Image:
    """Alpha-composite ``overlay`` onto ``frame`` with its top-left at ``offset``.

    Uses source-over blending. Parts of the overlay outside the frame are
    clipped. ``frame`` is not modified.
    """
    result = _rgba(frame).copy()
    result.alpha_composite(_rgba(overlay), dest=offset)
    return result


def encode_png(img: Image.Image) -> bytes:
    """Encode ``img`` as PNG, keeping the alpha channel."""
    buffer = BytesIO()
    try:
        img.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode PNG: {e}") from e
    return buffer.getvalue()


def compose(base: Image.Image, overlay: Image.Image) -> bytes:
    """Crop ``base``, composite ``overlay`` at the caption offset and encode.

    Args:
        base: Decoded base image, at least 604x768 pixels.
        overlay: Rendered caption bitmap with a transparent background.

    Returns:
        The final image as PNG bytes.
    """
    frame = crop_frame(base)
    return encode_png(composite(frame, overlay))
