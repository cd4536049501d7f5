"""Caption template rendering.

The overlay template is an SVG document with three Jinja2 placeholders
(``line_one``, ``line_two``, ``line_three``). Rendering escapes caption
text so that arbitrary user input always yields well-formed markup.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError, meta

from . import config
from .errors import TemplateError

logger = logging.getLogger(__name__)

PLACEHOLDERS = ("line_one", "line_two", "line_three")

# Characters outside the XML 1.0 Char production.
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

_env = Environment(autoescape=True, undefined=StrictUndefined, keep_trailing_newline=True)


def load_default_template() -> str:
    """Read the overlay SVG template from disk."""
    with open(config.OVERLAY_TEMPLATE_PATH, "r", encoding="utf-8") as f:
        return f.read()


def _clean(text: str) -> str:
    return _XML_ILLEGAL.sub("", text)


def render(template: str, caption_lines: Sequence[str]) -> str:
    """Fill the caption placeholders of an SVG template.

    Args:
        template: Template source containing all three placeholders.
        caption_lines: Exactly three caption strings, in order.

    Returns:
        The rendered markup. Caption text is XML-escaped.

    Raises:
        TemplateError: If the template cannot be parsed, does not reference
            every placeholder, or the wrong number of lines is supplied.
    """
    if len(caption_lines) != len(PLACEHOLDERS):
        raise TemplateError(
            f"Expected {len(PLACEHOLDERS)} caption lines, got {len(caption_lines)}."
        )
    try:
        ast = _env.parse(template)
        missing = set(PLACEHOLDERS) - meta.find_undeclared_variables(ast)
        if missing:
            raise TemplateError(
                "Template is missing placeholder(s): " + ", ".join(sorted(missing))
            )
        values = {name: _clean(str(line)) for name, line in zip(PLACEHOLDERS, caption_lines)}
        return _env.from_string(template).render(**values)
    except JinjaTemplateError as e:
        logger.error("Overlay template failed to render: %s", e)
        raise TemplateError(f"Invalid overlay template: {e}") from e
