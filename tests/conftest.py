"""Shared fixtures for the overlay test suite.

Network access is never performed: base images are served through
``httpx.MockTransport`` so that fetch behaviour (success, HTTP errors,
connection failures) is fully controlled by each test.
"""

import io

import httpx
import pytest
from PIL import Image

from overlays import fonts, template


def image_bytes(size, color=(30, 60, 90), fmt="JPEG") -> bytes:
    """Encode a solid-colour image of ``size`` in ``fmt``."""
    mode = "RGBA" if fmt == "PNG" and len(color) == 4 else "RGB"
    img = Image.new(mode, size, color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def serve_bytes(data: bytes, status_code: int = 200, content_type: str = "image/jpeg"):
    """Build a MockTransport handler that answers every request with ``data``."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=data, headers={"Content-Type": content_type})

    return handler


def refuse_connection(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture(scope="session")
def registry():
    return fonts.get_registry()


@pytest.fixture(scope="session")
def default_template():
    return template.load_default_template()
