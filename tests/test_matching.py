# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for palette matching, season ranking and compatibility."""

import pytest

from seasonmatch.schema import Color, CompatibilityType, Palette
from seasonmatch.measure.colorspace import color_distance
from seasonmatch.measure.matching import (
    MatchPolicy,
    check_match,
    classify_seasons,
    closest_match,
    season_compatibility,
)
from seasonmatch.palettes import get_palette

BLACK = Color(0, 0, 0)
NAVY = Color(0, 0, 128)
YELLOW = Color(255, 255, 0)
RED = Color(255, 0, 0)
ROYAL_BLUE = Color.from_hex("#4169E1")


def _palette(key, *colors):
    return Palette(key=key, name=key.title(), colors=tuple(colors))


class TestClosestMatch:

    def test_exact_member(self):
        cm = closest_match(NAVY, _palette("p", BLACK, NAVY, YELLOW))
        assert cm.closest_color == NAVY
        assert cm.delta_e == 0.0
        assert cm.is_match

    def test_is_true_minimum(self):
        palette = get_palette("deep-winter")
        for color in [Color(26, 43, 60), Color(200, 30, 40), Color(240, 230, 200)]:
            cm = closest_match(color, palette)
            assert all(cm.delta_e <= color_distance(color, p) for p in palette.colors)

    def test_threshold_is_strict(self):
        cm = closest_match(RED, _palette("p", YELLOW), threshold=color_distance(RED, YELLOW))
        assert not cm.is_match

    def test_empty_palette_rejected(self):
        with pytest.raises(ValueError, match="at least one color"):
            _palette("p")


class TestCheckMatch:

    def test_one_of_two_matches(self):
        palette = _palette("deep", BLACK, ROYAL_BLUE)
        result = check_match([Color(10, 10, 10), RED], palette)
        assert result.matches
        assert result.match_count == 1
        assert result.total_checked == 2
        assert result.confidence_percent == pytest.approx(50.0)

    def test_details_per_color(self):
        result = check_match([Color(10, 10, 10), RED], _palette("deep", BLACK, ROYAL_BLUE))
        assert [d.is_match for d in result.details] == [True, False]
        assert result.details[0].closest_palette_color == BLACK

    def test_only_first_colors_checked(self):
        result = check_match([RED, BLACK], _palette("dark", BLACK), MatchPolicy(colors_to_check=1))
        assert not result.matches
        assert result.total_checked == 1

    def test_threshold_above_checked_never_matches(self):
        policy = MatchPolicy(colors_to_check=1, match_threshold=2)
        result = check_match([BLACK, NAVY], _palette("dark", BLACK, NAVY), policy)
        assert result.match_count == 1
        assert not result.matches

    def test_stricter_policy(self):
        palette = _palette("dark", BLACK, NAVY)
        policy = MatchPolicy(colors_to_check=3, match_threshold=2)
        assert check_match([BLACK, YELLOW, NAVY], palette, policy).matches
        assert not check_match([BLACK, YELLOW, RED], palette, policy).matches

    def test_empty_colors(self):
        result = check_match([], _palette("dark", BLACK))
        assert not result.matches
        assert result.total_checked == 0
        assert result.confidence_percent == 0.0

    def test_invalid_policy(self):
        with pytest.raises(ValueError, match="colors_to_check"):
            MatchPolicy(colors_to_check=0)
        with pytest.raises(ValueError, match="delta_e_threshold"):
            MatchPolicy(delta_e_threshold=0)


class TestClassifySeasons:

    PALETTES = [
        _palette("c", YELLOW),
        _palette("b", BLACK, YELLOW),
        _palette("a", BLACK, NAVY),
    ]

    def test_primary_by_match_count(self):
        result = classify_seasons([BLACK, NAVY], self.PALETTES)
        assert result.primary.key == "a"
        assert not result.no_match

    def test_secondary_within_one_match(self):
        result = classify_seasons([BLACK, NAVY], self.PALETTES)
        assert [s.key for s in result.secondary] == ["b"]

    def test_tie_broken_by_mean_delta_e(self):
        near = _palette("near", Color(20, 20, 20))
        exact = _palette("exact", BLACK)
        result = classify_seasons([BLACK], [near, exact])
        assert result.primary.key == "exact"

    def test_no_match(self):
        result = classify_seasons([YELLOW], [_palette("a", BLACK, NAVY)])
        assert result.primary is not None
        assert result.no_match
        assert result.secondary == ()

    def test_empty_colors(self):
        result = classify_seasons([], self.PALETTES)
        assert result.primary is None
        assert result.no_match

    def test_scores_cover_every_palette(self):
        result = classify_seasons([BLACK, NAVY], self.PALETTES)
        assert {s.key for s in result.scores} == {"a", "b", "c"}


class TestSeasonCompatibility:

    PALETTES = TestClassifySeasons.PALETTES

    def test_primary(self):
        c = season_compatibility(classify_seasons([BLACK, NAVY], self.PALETTES), "a")
        assert c.compatible
        assert c.match_type == CompatibilityType.PRIMARY
        assert "strong match for A" in c.reason

    def test_secondary(self):
        c = season_compatibility(classify_seasons([BLACK, NAVY], self.PALETTES), "b")
        assert c.compatible
        assert c.match_type == CompatibilityType.SECONDARY

    def test_unrelated_season(self):
        c = season_compatibility(classify_seasons([BLACK, NAVY], self.PALETTES), "c")
        assert not c.compatible
        assert c.match_type == CompatibilityType.NONE

    def test_no_match(self):
        c = season_compatibility(classify_seasons([YELLOW], [_palette("a", BLACK)]), "a")
        assert not c.compatible
        assert c.match_type == CompatibilityType.NONE
        assert "do not match any" in c.reason
