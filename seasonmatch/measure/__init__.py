# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Measurement core for seasonmatch.

Color science and decision logic: CIELAB conversion and ΔE, palette
matching, the color-name vocabulary, text evidence and fusion. The
end-to-end pipeline lives in seasonmatch.measure.evaluate.
"""

from seasonmatch.measure.colorspace import color_distance, delta_e, is_neutral, rgb_to_lab
from seasonmatch.measure.matching import (
    MatchPolicy,
    check_match,
    classify_seasons,
    closest_match,
    season_compatibility,
)

__all__ = [
    "rgb_to_lab",
    "delta_e",
    "color_distance",
    "is_neutral",
    "MatchPolicy",
    "closest_match",
    "check_match",
    "classify_seasons",
    "season_compatibility",
]
