"""Tests for cropping, compositing and PNG encoding."""

import io

import pytest
from PIL import Image

from overlays import image_ops
from overlays.errors import CropOutOfBoundsError

SAMPLES = [(164, 0), (165, 1), (300, 400), (603, 0), (164, 767), (603, 767)]


def _marked_base(size=(700, 900)):
    base = Image.new("RGBA", size, (0, 0, 0, 255))
    for i, (x, y) in enumerate(SAMPLES):
        base.putpixel((x, y), (10 * i + 5, 200, 255 - i, 255))
    return base


def test_crop_frame_takes_fixed_region():
    base = _marked_base()
    frame = image_ops.crop_frame(base)
    assert frame.size == (440, 768)
    for x, y in SAMPLES:
        assert frame.getpixel((x - 164, y)) == base.getpixel((x, y))


def test_crop_frame_accepts_exact_minimum():
    assert image_ops.crop_frame(Image.new("RGB", (604, 768))).size == (440, 768)


@pytest.mark.parametrize("size", [(100, 100), (603, 768), (604, 767)])
def test_crop_frame_rejects_small_images(size):
    with pytest.raises(CropOutOfBoundsError):
        image_ops.crop_frame(Image.new("RGBA", size))


def test_transparent_overlay_leaves_base_unchanged():
    frame = image_ops.crop_frame(_marked_base())
    overlay = Image.new("RGBA", (420, 150), (255, 0, 0, 0))
    result = image_ops.composite(frame, overlay)
    assert result.tobytes() == frame.tobytes()


def test_opaque_overlay_pixel_replaces_base():
    frame = Image.new("RGBA", image_ops.FRAME_SIZE, (0, 0, 255, 255))
    overlay = Image.new("RGBA", (420, 150), (0, 0, 0, 0))
    overlay.putpixel((0, 0), (255, 0, 0, 255))
    result = image_ops.composite(frame, overlay)
    assert result.getpixel((10, 608)) == (255, 0, 0, 255)
    assert result.getpixel((9, 608)) == (0, 0, 255, 255)
    assert frame.getpixel((10, 608)) == (0, 0, 255, 255)


def test_source_over_blending():
    frame = Image.new("RGBA", image_ops.FRAME_SIZE, (0, 0, 0, 255))
    overlay = Image.new("RGBA", (4, 4), (255, 255, 255, 128))
    r, g, b, a = image_ops.composite(frame, overlay).getpixel((11, 609))
    assert abs(r - 128) <= 1 and abs(g - 128) <= 1 and abs(b - 128) <= 1
    assert a == 255


def test_overlay_past_frame_is_clipped():
    frame = Image.new("RGBA", image_ops.FRAME_SIZE, (0, 0, 0, 255))
    overlay = Image.new("RGBA", (500, 300), (0, 255, 0, 255))
    result = image_ops.composite(frame, overlay)
    assert result.size == image_ops.FRAME_SIZE
    assert result.getpixel((439, 767)) == (0, 255, 0, 255)
    assert result.getpixel((9, 607)) == (0, 0, 0, 255)


def test_compose_returns_png_of_frame_size():
    overlay = Image.new("RGBA", (420, 150), (255, 255, 255, 0))
    data = image_ops.compose(_marked_base(), overlay)
    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "PNG"
        assert img.size == (440, 768)
        assert img.mode == "RGBA"
