# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for the seasonal palette store."""

import pytest

from seasonmatch.schema import Color
from seasonmatch.palettes import (
    PALETTE_KEYS,
    SEASONAL_PALETTES,
    UnknownPaletteError,
    get_palette,
    list_palettes,
)


class TestPaletteStore:

    def test_twelve_seasons(self):
        assert len(PALETTE_KEYS) == 12
        assert len(list_palettes()) == 12

    def test_canonical_order(self):
        seasons = [key.split("-")[1] for key in PALETTE_KEYS]
        assert seasons[:3] == ["spring"] * 3
        assert seasons[-3:] == ["winter"] * 3

    def test_every_palette_has_fifteen_colors(self):
        for palette in list_palettes():
            assert len(palette.colors) == 15, palette.key

    def test_lookup(self):
        palette = get_palette("deep-winter")
        assert palette.name == "Deep Winter"
        assert Color(0, 0, 0) in palette.colors

    def test_shared_instances(self):
        assert get_palette("soft-summer") is get_palette("soft-summer")

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            SEASONAL_PALETTES["custom"] = get_palette("deep-winter")


class TestUnknownPalette:

    def test_raises(self):
        with pytest.raises(UnknownPaletteError, match="no-such-season"):
            get_palette("no-such-season")

    def test_is_key_error(self):
        with pytest.raises(KeyError):
            get_palette("winter")

    def test_carries_key(self):
        with pytest.raises(UnknownPaletteError) as info:
            get_palette("stale")
        assert info.value.key == "stale"
        assert "deep-winter" in str(info.value)
