"""Pydantic models for overlay requests.

The wire names (``aikuText``, ``imageUrl``, ``lineOne`` ...) are the JSON
keys accepted by ``POST /api/v1/images/overlays``. Python code uses the
snake_case field names.
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class CaptionLines(BaseModel):
    """The three caption lines. Empty strings are allowed.

    Attributes:
        line_one: First (bold) caption line.
        line_two: Second caption line.
        line_three: Third caption line.
    """

    model_config = ConfigDict(populate_by_name=True)

    line_one: str = Field(alias="lineOne")
    line_two: str = Field(alias="lineTwo")
    line_three: str = Field(alias="lineThree")


class OverlayRequest(BaseModel):
    """A validated request for one composited overlay image."""

    model_config = ConfigDict(populate_by_name=True)

    caption: CaptionLines = Field(alias="aikuText")
    image_url: str = Field(alias="imageUrl")

    @property
    def caption_lines(self) -> Tuple[str, str, str]:
        return (self.caption.line_one, self.caption.line_two, self.caption.line_three)
