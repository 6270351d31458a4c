"""Tests for timeline colors."""

from __future__ import annotations

from keyline.core.config.models import PaletteConfig
from keyline.core.stylesheet.colors import build_palette, color_for, hsl_to_hex


def test_palette_is_deterministic() -> None:
    assert build_palette(PaletteConfig()) == build_palette(PaletteConfig(seed=7))


def test_palette_size_and_shape() -> None:
    colors = build_palette(PaletteConfig(size=4, seed=1))
    assert len(colors) == 4
    assert all(color.startswith("hsl(") and color.endswith("%)") for color in colors)


def test_seed_changes_palette() -> None:
    assert build_palette(PaletteConfig(seed=1)) != build_palette(PaletteConfig(seed=2))


def test_color_for_wraps_around() -> None:
    palette = PaletteConfig(size=3)
    assert color_for(3, palette) == color_for(0, palette)
    assert color_for(4, palette) == color_for(1, palette)


def test_hsl_to_hex() -> None:
    assert hsl_to_hex("hsl(0,100%,50%)") == "#ff0000"
    assert hsl_to_hex("hsl(240, 100%, 50%)") == "#0000ff"
    assert hsl_to_hex("red") is None


def test_palette_colors_convert_to_hex() -> None:
    for color in build_palette(PaletteConfig()):
        hex_color = hsl_to_hex(color)
        assert hex_color is not None
        assert len(hex_color) == 7
