"""Tests for the font registry."""

import pytest

from overlays import config, fonts
from overlays.errors import FontResolutionError


def test_registry_holds_regular_and_bold(registry):
    assert registry.faces == [("source code pro", 400), ("source code pro", 700)]


def test_resolve_by_keyword_and_number(registry):
    bold = registry.resolve("Source Code Pro", "bold")
    assert registry.resolve("Source Code Pro", 700) is bold
    assert registry.resolve("Source Code Pro", "normal") is not bold
    assert registry.resolve("Source Code Pro", None) is registry.resolve("Source Code Pro", "400")


def test_resolve_walks_family_list(registry):
    face = registry.resolve("'Missing Sans', \"Source Code Pro\", monospace", "normal")
    assert face is registry.resolve("Source Code Pro", 400)


def test_unknown_family_raises(registry):
    with pytest.raises(FontResolutionError):
        registry.resolve("Comic Sans MS", "normal")


def test_unknown_weight_raises(registry):
    with pytest.raises(FontResolutionError):
        registry.resolve("Source Code Pro", 300)
    with pytest.raises(FontResolutionError):
        registry.resolve("Source Code Pro", "heavy")


def test_get_registry_is_shared():
    assert fonts.get_registry() is fonts.get_registry()


def test_load_from_blobs():
    with open(config.FONT_FILES[0], "rb") as f:
        registry = fonts.load([f.read()])
    assert registry.faces == [("source code pro", 700)]


def test_malformed_blob_raises():
    with pytest.raises(FontResolutionError):
        fonts.load([b"not a font"])
