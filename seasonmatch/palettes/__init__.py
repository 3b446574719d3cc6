# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Palette store: the fixed table of seasonal palettes."""

from seasonmatch.palettes.seasonal import (
    PALETTE_KEYS,
    SEASONAL_PALETTES,
    UnknownPaletteError,
    get_palette,
    list_palettes,
)

__all__ = [
    "PALETTE_KEYS",
    "SEASONAL_PALETTES",
    "UnknownPaletteError",
    "get_palette",
    "list_palettes",
]
