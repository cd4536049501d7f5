"""Font registry for text-to-outline conversion.

The overlay template only uses the two embedded Source Code Pro faces
(regular and bold). They are parsed once per process with fontTools and
shared read-only by every request, so no font bytes are re-parsed per call
and no system fonts are ever consulted.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Dict, Iterable, List, Optional, Tuple, Union

from fontTools.ttLib import TTFont, TTLibError

from . import config
from .errors import FontResolutionError

logger = logging.getLogger(__name__)

FontKey = Tuple[str, int]

_WEIGHT_KEYWORDS = {"normal": 400, "bold": 700}
_REGISTRY: Optional["FontRegistry"] = None


def parse_weight(value: Union[str, int, None]) -> int:
    """Convert an SVG ``font-weight`` value to a numeric weight."""
    if value is None:
        return 400
    if isinstance(value, int):
        return value
    value = value.strip().lower()
    if value in _WEIGHT_KEYWORDS:
        return _WEIGHT_KEYWORDS[value]
    try:
        return int(value)
    except ValueError:
        raise FontResolutionError(f"Unsupported font-weight '{value}'.") from None


def parse_families(value: str) -> List[str]:
    """Split a CSS ``font-family`` list into lower-cased family names."""
    families = []
    for part in value.split(","):
        name = part.strip().strip("'\"").strip().lower()
        if name:
            families.append(name)
    return families


class FontRegistry:
    """Immutable lookup of parsed font faces keyed by family and weight."""

    def __init__(self, faces: Dict[FontKey, TTFont]):
        self._faces = dict(faces)

    @property
    def faces(self) -> List[FontKey]:
        return sorted(self._faces)

    def __len__(self) -> int:
        return len(self._faces)

    def resolve(self, families: str, weight: Union[str, int, None] = None) -> TTFont:
        """Return the face for the first registered family at ``weight``.

        Raises:
            FontResolutionError: If no listed family is registered at the
                requested weight.
        """
        wanted = parse_weight(weight)
        for family in parse_families(families):
            face = self._faces.get((family, wanted))
            if face is not None:
                return face
        raise FontResolutionError(
            f"No font registered for family '{families}' at weight {wanted}."
        )


def _read_face(data: bytes) -> Tuple[FontKey, TTFont]:
    try:
        font = TTFont(BytesIO(data), lazy=False)
        font.ensureDecompiled(recurse=True)
        family = font["name"].getBestFamilyName()
        weight = font["OS/2"].usWeightClass
    except (TTLibError, KeyError, AssertionError, ValueError, OSError) as e:
        raise FontResolutionError(f"Embedded font could not be parsed: {e}") from e
    if not family:
        raise FontResolutionError("Embedded font has no family name.")
    return (family.lower(), int(weight)), font


def load(font_blobs: Optional[Iterable[bytes]] = None) -> FontRegistry:
    """Build a registry from raw font bytes.

    Args:
        font_blobs: TrueType/OpenType font data. Defaults to the embedded
            bold and regular faces.

    Returns:
        A new :class:`FontRegistry`.
    """
    if font_blobs is None:
        font_blobs = []
        for path in config.FONT_FILES:
            with open(path, "rb") as f:
                font_blobs.append(f.read())
    faces: Dict[FontKey, TTFont] = {}
    for data in font_blobs:
        key, font = _read_face(data)
        faces[key] = font
        logger.debug("Registered font face %s weight %d", key[0], key[1])
    return FontRegistry(faces)


def get_registry() -> FontRegistry:
    """Return the process-wide registry, loading it on first use."""
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = load()
        logger.info("Font registry loaded: %s", _REGISTRY.faces)
    return _REGISTRY
