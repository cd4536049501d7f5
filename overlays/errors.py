"""Error types raised by the overlay pipeline.

Every stage raises a subclass of :class:`OverlayError`. The ``kind``
attribute names the failing stage so that the HTTP layer can map it to a
status code without inspecting the message.
"""

from __future__ import annotations


class OverlayError(Exception):
    """Base class for all pipeline failures."""

    kind = "OverlayError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class NetworkError(OverlayError):
    """The base image could not be retrieved."""

    kind = "NetworkError"


class DecodeError(OverlayError):
    """The base image bytes are not a supported image container."""

    kind = "DecodeError"


class TemplateError(OverlayError):
    kind = "TemplateError"


class SceneParseError(OverlayError):
    kind = "SceneParseError"


class FontResolutionError(OverlayError):
    """A font family/weight referenced by the template is not registered."""

    kind = "FontResolutionError"


class RasterError(OverlayError):
    kind = "RasterError"


class CropOutOfBoundsError(OverlayError):
    """The base image is smaller than the fixed crop frame."""

    kind = "CropOutOfBoundsError"


class EncodeError(OverlayError):
    kind = "EncodeError"
