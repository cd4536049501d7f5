"""SVG scene building and text-to-outline conversion.

The rendered template is parsed with lxml and every ``<text>`` element is
replaced by a ``<path>`` built from the glyph outlines of the registered
fonts. The resulting scene contains only geometry, so rasterizing it never
depends on fonts installed on the host.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from fontTools.pens.svgPathPen import SVGPathPen
from fontTools.pens.transformPen import TransformPen
from fontTools.ttLib import TTFont
from lxml import etree

from .errors import SceneParseError
from .fonts import FontRegistry

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
_TEXT_TAG = f"{{{SVG_NS}}}text"
_PATH_TAG = f"{{{SVG_NS}}}path"

# Font properties inherited from ancestors.
_FONT_PROPS = ("font-family", "font-size", "font-weight", "text-anchor")
# Presentation attributes copied from a <text> onto its outline <path>.
_PAINT_ATTRS = (
    "id",
    "class",
    "style",
    "transform",
    "fill",
    "fill-opacity",
    "fill-rule",
    "opacity",
    "stroke",
    "stroke-width",
    "stroke-opacity",
    "stroke-linejoin",
)
_DEFAULTS = {
    "font-family": "sans-serif",
    "font-size": "16",
    "font-weight": "normal",
    "text-anchor": "start",
}
_LENGTH = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*(px)?\s*$")


@dataclass(frozen=True)
class VectorScene:
    """A parsed SVG document whose text has been converted to paths.

    Attributes:
        markup: Serialized SVG document.
        width: Intrinsic canvas width in pixels.
        height: Intrinsic canvas height in pixels.
        text_runs: Number of text elements converted to outlines.
    """

    markup: bytes
    width: int
    height: int
    text_runs: int = 0


def _parse_length(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    match = _LENGTH.match(value)
    if not match:
        return None
    return float(match.group(1))


def _intrinsic_size(root: etree._Element) -> Tuple[int, int]:
    width = _parse_length(root.get("width"))
    height = _parse_length(root.get("height"))
    view_box = root.get("viewBox")
    if (width is None or height is None) and view_box:
        parts = view_box.replace(",", " ").split()
        if len(parts) == 4:
            try:
                vb_width, vb_height = float(parts[2]), float(parts[3])
            except ValueError:
                raise SceneParseError(f"Invalid viewBox '{view_box}'.") from None
            width = vb_width if width is None else width
            height = vb_height if height is None else height
    if width is None or height is None:
        raise SceneParseError("SVG root does not declare a usable width and height.")
    return math.ceil(width), math.ceil(height)


def _style_props(element: etree._Element) -> Dict[str, str]:
    props = {}
    for declaration in (element.get("style") or "").split(";"):
        if ":" in declaration:
            name, value = declaration.split(":", 1)
            props[name.strip()] = value.strip()
    return props


def _font_props(element: etree._Element) -> Dict[str, str]:
    """Resolve the font properties of ``element``, inheriting from ancestors."""
    resolved: Dict[str, str] = {}
    chain = [element] + list(element.iterancestors())
    for prop in _FONT_PROPS:
        for node in chain:
            value = _style_props(node).get(prop) or node.get(prop)
            if value:
                resolved[prop] = value
                break
        else:
            resolved[prop] = _DEFAULTS[prop]
    return resolved


def _text_content(element: etree._Element) -> str:
    # Default xml:space handling: strip and collapse whitespace.
    return " ".join("".join(element.itertext()).split())


def _coordinate(element: etree._Element, name: str) -> float:
    # Only the first value of a coordinate list is honored.
    raw = (element.get(name) or "0").replace(",", " ").split()
    value = _parse_length(raw[0]) if raw else 0.0
    if value is None:
        raise SceneParseError(f"Invalid <text> {name} coordinate '{element.get(name)}'.")
    return value


def text_to_path(
    text: str, font: TTFont, size: float, x: float, y: float, anchor: str = "start"
) -> str:
    """Return SVG path data for ``text`` set in ``font``.

    Glyphs are placed on the baseline ``y`` starting at ``x`` and advance by
    their horizontal metrics. ``anchor`` follows SVG ``text-anchor``.
    """
    glyph_set = font.getGlyphSet()
    cmap = font.getBestCmap() or {}
    scale = size / font["head"].unitsPerEm

    glyph_names = [cmap.get(ord(ch), ".notdef") for ch in text]
    advance = sum(glyph_set[name].width for name in glyph_names) * scale
    if anchor == "middle":
        x -= advance / 2
    elif anchor == "end":
        x -= advance

    pen = SVGPathPen(glyph_set)
    cursor = x
    for name in glyph_names:
        glyph = glyph_set[name]
        # Font units are y-up; flip onto the SVG baseline.
        glyph.draw(TransformPen(pen, (scale, 0, 0, -scale, cursor, y)))
        cursor += glyph.width * scale
    return pen.getCommands()


def _convert_text(element: etree._Element, fonts: FontRegistry) -> etree._Element:
    props = _font_props(element)
    font = fonts.resolve(props["font-family"], props["font-weight"])
    size = _parse_length(props["font-size"])
    if size is None:
        raise SceneParseError(f"Invalid font-size '{props['font-size']}'.")

    path = etree.Element(_PATH_TAG)
    for name in _PAINT_ATTRS:
        value = element.get(name)
        if value is not None:
            path.set(name, value)
    path.set(
        "d",
        text_to_path(
            _text_content(element),
            font,
            size,
            _coordinate(element, "x"),
            _coordinate(element, "y"),
            props["text-anchor"],
        ),
    )
    path.tail = element.tail
    return path


def build(markup: str, fonts: FontRegistry) -> VectorScene:
    """Parse SVG markup and convert all text to outlines.

    Args:
        markup: A complete SVG document.
        fonts: Registry used to resolve every text element's font.

    Returns:
        The :class:`VectorScene` ready for rasterization.

    Raises:
        SceneParseError: If the markup is malformed or has no intrinsic size.
        FontResolutionError: If a text element references an unregistered
            family/weight.
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root = etree.fromstring(markup.encode("utf-8"), parser)
    except (etree.XMLSyntaxError, UnicodeEncodeError) as e:
        raise SceneParseError(f"Overlay markup is not well-formed: {e}") from e
    if root.tag != f"{{{SVG_NS}}}svg":
        raise SceneParseError(f"Expected an <svg> root element, got <{etree.QName(root).localname}>.")

    width, height = _intrinsic_size(root)
    texts = list(root.iter(_TEXT_TAG))
    for element in texts:
        path = _convert_text(element, fonts)
        if path.get("d"):
            element.getparent().replace(element, path)
        else:
            element.getparent().remove(element)

    logger.debug("Built %dx%d scene with %d text run(s)", width, height, len(texts))
    return VectorScene(
        markup=etree.tostring(root, xml_declaration=False, encoding="utf-8"),
        width=width,
        height=height,
        text_runs=len(texts),
    )
