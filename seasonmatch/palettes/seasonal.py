# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
The twelve seasonal color palettes.

Each of the four seasons is split into three sub-seasons along the
warm/cool, light/deep and clear/muted axes. Keys are stable: callers
persist them as the user's chosen season.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from seasonmatch.schema import Color, Palette

logger = logging.getLogger(__name__)


class UnknownPaletteError(KeyError):
    """Raised for a palette key that is not one of the twelve seasons.

    This usually means a stale persisted preference; the caller should ask
    the user to pick a season again.
    """

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown palette {self.key!r}; expected one of: {', '.join(PALETTE_KEYS)}"


# (key, name, description, emoji, colors)
_PALETTE_DATA: tuple[tuple[str, str, str, str, tuple[str, ...]], ...] = (
    # Spring
    ("bright-spring", "Bright Spring", "Warm, clear, vivid colors", "🌺", (
        "#FF6347",  # bright coral
        "#FFD700",  # golden yellow
        "#FF69B4",  # hot pink
        "#00CED1",  # turquoise
        "#FF8C00",
        "#32CD32",  # lime green
        "#FF1493",
        "#00BFFF",
        "#FFB6C1",
        "#FFA500",
        "#98FB98",
        "#87CEEB",
        "#FF4500",
        "#7FFF00",  # chartreuse
        "#FF69B4",
    )),
    ("warm-spring", "Warm Spring", "Warm, golden, peachy colors", "🌸", (
        "#FFE5B4",  # peach
        "#FFDAB9",
        "#FFD700",
        "#FFA07A",  # light salmon
        "#F0E68C",
        "#FA8072",
        "#FFE4B5",
        "#FF6347",
        "#F08080",
        "#FFEFD5",
        "#98FB98",
        "#7FFFD4",  # aquamarine
        "#FFB6C1",
        "#90EE90",
        "#FFDB58",  # mustard
    )),
    ("light-spring", "Light Spring", "Warm, light, delicate pastels", "🌼", (
        "#FFF8DC",  # cornsilk
        "#FFE4E1",
        "#FFFACD",
        "#FFE4B5",
        "#FAFAD2",
        "#F0E68C",
        "#EEE8AA",
        "#FFB6C1",
        "#FFDAB9",
        "#E0FFFF",
        "#F5FFFA",
        "#FFF0F5",
        "#FFFAF0",
        "#F0FFF0",
        "#FFE4E1",
    )),
    # Summer
    ("soft-summer", "Soft Summer", "Cool, muted, gentle colors", "🌿", (
        "#E6E6FA",  # lavender
        "#D8BFD8",
        "#DDA0DD",
        "#C5B4E3",  # periwinkle
        "#B0C4DE",
        "#B0E0E6",
        "#AFEEEE",
        "#D3D3D3",
        "#C0C0C0",
        "#F5F5DC",
        "#E0B0FF",  # mauve
        "#FADADD",
        "#C9C0BB",  # mushroom
        "#B8B4A1",  # sage
        "#CBBEB5",  # dusty rose
    )),
    ("cool-summer", "Cool Summer", "Cool, soft, blue-based colors", "🌊", (
        "#B0E0E6",  # powder blue
        "#87CEEB",
        "#ADD8E6",
        "#B0C4DE",
        "#AFEEEE",
        "#E0FFFF",
        "#F0F8FF",
        "#E6E6FA",
        "#D8BFD8",
        "#DDA0DD",
        "#FFB6C1",
        "#FFE4E1",
        "#F0E68C",
        "#C0C0C0",
        "#B0E0E6",
    )),
    ("light-summer", "Light Summer", "Cool, light, airy pastels", "☁️", (
        "#F0F8FF",  # alice blue
        "#F5FFFA",
        "#F0FFF0",
        "#FFFAF0",
        "#FFF0F5",
        "#E6E6FA",
        "#F0FFFF",
        "#E0FFFF",
        "#FFE4E1",
        "#FFDAB9",
        "#EEE8AA",
        "#F5F5DC",
        "#FAF0E6",
        "#FFF5EE",
        "#F8F8FF",
    )),
    # Autumn
    ("deep-autumn", "Deep Autumn", "Warm, rich, intense colors", "🍁", (
        "#8B4513",  # saddle brown
        "#A0522D",
        "#D2691E",
        "#B8860B",
        "#8B0000",
        "#800000",
        "#556B2F",
        "#6B8E23",
        "#8B4789",  # warm orchid
        "#704214",  # sepia
        "#654321",
        "#8B7355",
        "#C04000",  # mahogany
        "#5C4033",  # coffee
        "#3B2F2F",  # dark charcoal
    )),
    ("warm-autumn", "Warm Autumn", "Warm, golden, earthy colors", "🍂", (
        "#D2691E",  # chocolate
        "#CD853F",
        "#DEB887",
        "#DAA520",
        "#B8860B",
        "#F4A460",
        "#BC8F8F",
        "#CC7722",  # ochre
        "#FF8C00",
        "#FFA500",
        "#C19A6B",  # camel
        "#826644",  # raw umber
        "#E97451",  # burnt sienna
        "#6B8E23",
        "#8B7355",
    )),
    ("soft-autumn", "Soft Autumn", "Warm, muted, gentle earth tones", "🌾", (
        "#DEB887",  # burlywood
        "#D2B48C",
        "#BC8F8F",
        "#F5DEB3",
        "#FFE4C4",
        "#FFDEAD",
        "#BDB76B",
        "#DAA520",
        "#C19A6B",
        "#B8860B",
        "#CD853F",
        "#A0522D",
        "#9C8D7B",  # warm gray
        "#8B7D6B",  # taupe
        "#C4A582",  # desert sand
    )),
    # Winter
    ("bright-winter", "Bright Winter", "Cool, clear, highly saturated", "💎", (
        "#FF0000",  # true red
        "#0000FF",
        "#FF00FF",
        "#00FFFF",
        "#FF1493",
        "#00FF00",
        "#FFD700",
        "#8B00FF",  # electric violet
        "#FF4500",
        "#1E90FF",
        "#FF69B4",
        "#00CED1",
        "#FF6347",
        "#4169E1",  # royal blue
        "#FF1493",
    )),
    ("cool-winter", "Cool Winter", "Cool, icy, blue-based colors", "❄️", (
        "#000000",
        "#FFFFFF",
        "#0000FF",
        "#4B0082",  # indigo
        "#191970",
        "#483D8B",
        "#6A5ACD",
        "#C71585",
        "#8B008B",
        "#4682B4",
        "#2F4F4F",
        "#708090",
        "#B0C4DE",
        "#E6E6FA",
        "#C0C0C0",
    )),
    ("deep-winter", "Deep Winter", "Cool, dark, intense colors", "🌑", (
        "#000000",
        "#8B008B",
        "#800080",
        "#4B0082",
        "#191970",
        "#000080",  # navy
        "#800000",
        "#8B0000",
        "#2F4F4F",
        "#0B1F3E",  # oxford blue
        "#1C1C1C",
        "#483D8B",
        "#DC143C",  # crimson
        "#8B4513",
        "#2C1E3F",
    )),
)


def _build_palettes() -> Mapping[str, Palette]:
    palettes = {}
    for key, name, description, emoji, colors in _PALETTE_DATA:
        palettes[key] = Palette(
            key=key,
            name=name,
            description=description,
            emoji=emoji,
            colors=tuple(Color.from_hex(h) for h in colors),
        )
    return MappingProxyType(palettes)


SEASONAL_PALETTES: Mapping[str, Palette] = _build_palettes()

PALETTE_KEYS: tuple[str, ...] = tuple(SEASONAL_PALETTES)


def get_palette(key: str) -> Palette:
    """
    Look up a palette by key.

    Raises:
        UnknownPaletteError: If key is not a known season
    """
    try:
        return SEASONAL_PALETTES[key]
    except KeyError:
        logger.warning("Unknown palette key %r", key)
        raise UnknownPaletteError(key) from None


def list_palettes() -> tuple[Palette, ...]:
    """All palettes in canonical order (spring, summer, autumn, winter)."""
    return tuple(SEASONAL_PALETTES.values())
