# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Color-name vocabulary.

CSS named colors (via webcolors) extended with fashion-industry names
("burgundy", "camel", "sage") and multi-word names ("navy blue",
"forest green"). Used to turn text mentions and swatch labels into
colors.
"""

from __future__ import annotations

import re
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

import webcolors

from seasonmatch.schema import Color
from seasonmatch.measure.colorspace import color_distance


FASHION_COLORS: dict[str, str] = {
    # Reds
    "burgundy": "#800020",
    "wine": "#722F37",
    "brick": "#CB4154",
    "rust": "#B7410E",
    "cherry": "#DE3163",
    "scarlet": "#FF2400",
    "ruby": "#E0115F",
    "garnet": "#733635",
    # Blues
    "cobalt": "#0047AB",
    "cerulean": "#007BA7",
    "sapphire": "#0F52BA",
    "denim": "#1560BD",
    "periwinkle": "#CCCCFF",
    # Greens
    "emerald": "#50C878",
    "jade": "#00A86B",
    "sage": "#9DC183",
    "mint": "#98FF98",
    "pistachio": "#93C572",
    "moss": "#8A9A5B",
    # Neutrals
    "cream": "#FFFDD0",
    "ecru": "#C2B280",
    "taupe": "#483C32",
    "charcoal": "#36454F",
    "slate": "#708090",
    "stone": "#928E85",
    "ash": "#B2BEB5",
    "pewter": "#96A8A1",
    "graphite": "#383428",
    # Pinks and purples
    "blush": "#DE5D83",
    "rose": "#FF007F",
    "mauve": "#E0B0FF",
    "lilac": "#C8A2C8",
    "amethyst": "#9966CC",
    "eggplant": "#614051",
    # Oranges and yellows
    "peach": "#FFE5B4",
    "apricot": "#FBCEB1",
    "tangerine": "#F28500",
    "mustard": "#FFDB58",
    "amber": "#FFBF00",
    "honey": "#FFB30F",
    "caramel": "#C68E17",
    "butterscotch": "#E2A76F",
    # Browns
    "camel": "#C19A6B",
    "mocha": "#967969",
    "coffee": "#6F4E37",
    "espresso": "#4E312D",
    "cinnamon": "#D2691E",
    "chestnut": "#954535",
    "mahogany": "#C04000",
    "umber": "#635147",
    # Metallics
    "platinum": "#E5E4E2",
    "bronze": "#CD7F32",
    "copper": "#B87333",
    "brass": "#B5A642",
    "champagne": "#F7E7CE",
}

MULTI_WORD_COLORS: dict[str, str] = {
    "electric blue": "#7DF9FF",
    "hunter green": "#355E3B",
    "rose gold": "#B76E79",
    "forest green": "#228B22",
    "sky blue": "#87CEEB",
    "hot pink": "#FF69B4",
    "lime green": "#32CD32",
    "burnt orange": "#CC5500",
    "dusty rose": "#DCAE96",
    "powder blue": "#B0E0E6",
    "olive green": "#808000",
    "navy blue": "#000080",
    "royal blue": "#4169E1",
    "light blue": "#ADD8E6",
    "dark blue": "#00008B",
    "light green": "#90EE90",
    "dark green": "#006400",
    "light pink": "#FFB6C1",
    "dark pink": "#E75480",
    "light purple": "#B19CD9",
    "dark purple": "#301934",
    "light gray": "#D3D3D3",
    "dark gray": "#A9A9A9",
    "light brown": "#B5651D",
    "dark brown": "#654321",
    "bright red": "#FF0000",
    "bright blue": "#0096FF",
    "bright green": "#66FF00",
    "bright yellow": "#FFFD01",
    "bright orange": "#FFB600",
    "bright pink": "#FF007F",
    "pale blue": "#AFEEEE",
    "pale green": "#98FB98",
    "pale pink": "#FADADD",
    "pale yellow": "#FFFF99",
    "deep red": "#8B0000",
    "deep blue": "#00008B",
    "deep green": "#013220",
    "deep purple": "#301934",
    "soft pink": "#FFB6C1",
    "soft blue": "#A8C7DD",
    "soft green": "#8FBC8F",
    "pastel pink": "#FFD1DC",
    "pastel blue": "#AEC6CF",
    "pastel green": "#77DD77",
    "pastel yellow": "#FDFD96",
    "pastel purple": "#B39EB5",
    "warm gray": "#8D8D86",
    "cool gray": "#8C92AC",
}

COLOR_ALIASES: dict[str, str] = {
    "grey": "gray",
    "lightgrey": "lightgray",
    "darkgrey": "darkgray",
    "dimgrey": "dimgray",
    "slategrey": "slategray",
    "lightslategrey": "lightslategray",
    "darkslategrey": "darkslategray",
    "light grey": "light gray",
    "dark grey": "dark gray",
    "warm grey": "warm gray",
    "cool grey": "cool gray",
    "aqua": "cyan",
}

_SUFFIX_RE = re.compile(r"\s+(colou?red|colou?r|shade|tone|hue)$")
_PREFIX_RE = re.compile(r"^(solid|pure|true)\s+")


def _build_dictionary() -> Mapping[str, str]:
    names: dict[str, str] = {
        name: webcolors.name_to_hex(name) for name in webcolors.names(webcolors.CSS3)
    }
    names.update(FASHION_COLORS)
    names.update(MULTI_WORD_COLORS)
    return MappingProxyType({k: v.upper() for k, v in names.items()})


COLOR_DICTIONARY: Mapping[str, str] = _build_dictionary()


def normalize_color_name(name: Optional[str]) -> str:
    """
    Normalize a color name for lookup.

    Lowercases, collapses whitespace, drops modifiers that do not change
    the base color ("navy colored" → "navy", "true red" → "red") and
    applies spelling aliases ("grey" → "gray").
    """
    if not name:
        return ""
    normalized = " ".join(name.lower().split())
    normalized = _SUFFIX_RE.sub("", normalized)
    normalized = _PREFIX_RE.sub("", normalized)
    return COLOR_ALIASES.get(normalized, normalized)


def is_color_name(name: Optional[str]) -> bool:
    return normalize_color_name(name) in COLOR_DICTIONARY


def lookup_hex(name: Optional[str]) -> Optional[str]:
    """Hex string for a color name, or None if unknown."""
    return COLOR_DICTIONARY.get(normalize_color_name(name))


def lookup_color(name: Optional[str]) -> Optional[Color]:
    """Color for a color name, or None if unknown."""
    hex_value = lookup_hex(name)
    if hex_value is None:
        return None
    return Color.from_hex(hex_value)


@lru_cache(maxsize=1)
def color_names() -> tuple[str, ...]:
    """Every known name and alias, longest first (so multi-word names match first)."""
    names = set(COLOR_DICTIONARY) | set(COLOR_ALIASES)
    return tuple(sorted(names, key=lambda n: (-len(n), n)))


@lru_cache(maxsize=1)
def _named_colors() -> tuple[tuple[str, Color], ...]:
    return tuple((name, Color.from_hex(value)) for name, value in COLOR_DICTIONARY.items())


def nearest_color_name(color: Color) -> str:
    """Closest vocabulary name to a color (CIE76 ΔE)."""
    name, _ = min(_named_colors(), key=lambda item: color_distance(color, item[1]))
    return name
