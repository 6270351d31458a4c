"""Deterministic timeline colors."""

from __future__ import annotations

import colorsys
from functools import lru_cache
import random
import re

from keyline.core.config.models import PaletteConfig
from keyline.core.curves.timing import format_number
from keyline.core.utils.math import clamp


@lru_cache(maxsize=16)
def build_palette(palette: PaletteConfig) -> tuple[str, ...]:
    """Generate the base colors for a palette config.

    The generator is seeded, so a given config always yields the same colors.

    Args:
        palette: Palette settings

    Returns:
        ``hsl(h,s%,l%)`` strings, ``palette.size`` of them
    """
    rng = random.Random(palette.seed)
    sat_low, sat_high = palette.saturation
    light_low, light_high = palette.lightness

    colors = []
    for _ in range(palette.size):
        hue = 360 * rng.random()
        saturation = clamp(rng.uniform(sat_low, sat_high), 0.0, 100.0)
        lightness = clamp(rng.uniform(light_low, light_high), 0.0, 100.0)
        colors.append(
            f"hsl({format_number(hue)},{format_number(saturation)}%,{format_number(lightness)}%)"
        )
    return tuple(colors)


def color_for(position: int, palette: PaletteConfig) -> str:
    """Round-robin color for the rule at ``position`` in the output list."""
    colors = build_palette(palette)
    return colors[position % len(colors)]


_HSL_RE = re.compile(r"hsl\(\s*([\d.]+)\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*\)")


def hsl_to_hex(color: str) -> str | None:
    """Convert an ``hsl(h,s%,l%)`` palette color to ``#rrggbb``."""
    match = _HSL_RE.fullmatch(color.strip())
    if match is None:
        return None
    hue, saturation, lightness = (float(group) for group in match.groups())
    red, green, blue = colorsys.hls_to_rgb((hue % 360) / 360, lightness / 100, saturation / 100)
    return "#{:02x}{:02x}{:02x}".format(*(round(channel * 255) for channel in (red, green, blue)))
