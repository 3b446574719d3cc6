# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Palette matching.

Decides whether a ranked list of product colors belongs to a seasonal
palette, and ranks a product against every palette.

Strictness is an explicit policy (MatchPolicy), not a hidden constant:
the default is lenient, any 1 of the top 2 colors matching is enough.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from seasonmatch.schema import (
    Color,
    ColorMatchDetail,
    Compatibility,
    CompatibilityType,
    MatchResult,
    Palette,
    SeasonClassification,
    SeasonScore,
)
from seasonmatch.measure.colorspace import delta_e

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchPolicy:
    """How strictly a product must match a palette."""

    # Only the first N ranked colors are inspected
    colors_to_check: int = 2

    # Matches required among the inspected colors
    match_threshold: int = 1

    # ΔE (CIE76) below which a color counts as a palette member
    delta_e_threshold: float = 20.0

    # Cap on secondary seasons reported by classify_seasons
    max_secondary: int = 3

    def __post_init__(self) -> None:
        if self.colors_to_check < 1:
            raise ValueError(f"colors_to_check must be >= 1, got {self.colors_to_check}")
        if self.match_threshold < 1:
            raise ValueError(f"match_threshold must be >= 1, got {self.match_threshold}")
        if self.delta_e_threshold <= 0:
            raise ValueError(f"delta_e_threshold must be > 0, got {self.delta_e_threshold}")


@dataclass(frozen=True, slots=True)
class ClosestMatch:
    """Nearest palette color to one input color."""
    closest_color: Color
    delta_e: float
    is_match: bool


def closest_match(
    color: Color,
    palette: Palette,
    *,
    threshold: float = 20.0,
) -> ClosestMatch:
    """
    Find the palette color nearest to ``color``.

    Linear scan; on ties the earlier palette color wins.

    Args:
        color: Color to look up
        palette: Palette to scan
        threshold: ΔE below which the nearest color counts as a match

    Returns:
        ClosestMatch with the nearest color and its ΔE
    """
    lab = color.lab
    best = palette.colors[0]
    best_de = delta_e(lab, best.lab)
    for candidate in palette.colors[1:]:
        de = delta_e(lab, candidate.lab)
        if de < best_de:
            best, best_de = candidate, de
    return ClosestMatch(closest_color=best, delta_e=best_de, is_match=best_de < threshold)


def check_match(
    colors: Sequence[Color],
    palette: Palette,
    policy: Optional[MatchPolicy] = None,
) -> MatchResult:
    """
    Check a ranked color list against a palette.

    Only the first ``policy.colors_to_check`` colors are inspected. The
    product matches when at least ``policy.match_threshold`` of them are
    within ``policy.delta_e_threshold`` of some palette color.

    Args:
        colors: Product colors, most important first
        palette: Palette to check against
        policy: Strictness settings (defaults if None)

    Returns:
        MatchResult with per-color detail
    """
    cfg = policy or MatchPolicy()
    if cfg.match_threshold > cfg.colors_to_check:
        logger.warning(
            "match_threshold %d exceeds colors_to_check %d; nothing can match",
            cfg.match_threshold, cfg.colors_to_check,
        )

    checked = list(colors[:cfg.colors_to_check])
    if not checked:
        return MatchResult(matches=False, match_count=0, total_checked=0)

    details = []
    for color in checked:
        cm = closest_match(color, palette, threshold=cfg.delta_e_threshold)
        details.append(ColorMatchDetail(
            color=color,
            closest_palette_color=cm.closest_color,
            delta_e=cm.delta_e,
            is_match=cm.is_match,
        ))

    match_count = sum(1 for d in details if d.is_match)
    matches = match_count >= cfg.match_threshold and cfg.match_threshold <= cfg.colors_to_check

    return MatchResult(
        matches=matches,
        match_count=match_count,
        total_checked=len(details),
        details=tuple(details),
        confidence_percent=match_count / len(details) * 100.0,
    )


def _ranking_delta_e(result: MatchResult) -> float:
    """Mean ΔE of matched colors, or of all checked colors when none matched."""
    matched = [d.delta_e for d in result.details if d.is_match]
    pool = matched or [d.delta_e for d in result.details]
    if not pool:
        return float("inf")
    return sum(pool) / len(pool)


def classify_seasons(
    colors: Sequence[Color],
    palettes: Iterable[Palette],
    policy: Optional[MatchPolicy] = None,
) -> SeasonClassification:
    """
    Rank a product against every palette.

    Palettes are ordered by match count (descending), then by mean ΔE of
    the matched colors (ascending), then by their given order. Secondary
    seasons are those with at least one match and a match count within 1
    of the primary's.

    Args:
        colors: Product colors, most important first
        palettes: Palettes to rank (e.g. list_palettes())
        policy: Strictness settings (defaults if None)

    Returns:
        SeasonClassification; primary is None when colors is empty
    """
    cfg = policy or MatchPolicy()
    scores = []
    for palette in palettes:
        result = check_match(colors, palette, cfg)
        scores.append(SeasonScore(
            palette=palette,
            result=result,
            mean_delta_e=_ranking_delta_e(result),
        ))
    if not colors or not scores:
        return SeasonClassification(primary=None, scores=tuple(scores), no_match=True)

    # sorted() is stable, so palette order breaks remaining ties
    ranked = sorted(scores, key=lambda s: (-s.match_count, s.mean_delta_e))
    primary = ranked[0]
    secondary = [
        s for s in ranked[1:]
        if s.match_count > 0 and s.match_count >= primary.match_count - 1
    ][:cfg.max_secondary]

    return SeasonClassification(
        primary=primary,
        secondary=tuple(secondary),
        scores=tuple(ranked),
        no_match=primary.match_count == 0,
    )


def season_compatibility(
    classification: SeasonClassification,
    user_season: str,
) -> Compatibility:
    """
    Tell whether a classified product suits the user's season.

    Args:
        classification: Result of classify_seasons
        user_season: The user's palette key

    Returns:
        Compatibility with a short reason and recommendation
    """
    primary = classification.primary
    if primary is None or classification.no_match:
        return Compatibility(
            compatible=False,
            match_type=CompatibilityType.NONE,
            reason="The product colors do not match any seasonal palette.",
            recommendation="Consider items in colors closer to your palette.",
        )

    if primary.key == user_season:
        return Compatibility(
            compatible=True,
            match_type=CompatibilityType.PRIMARY,
            reason=f"This item is a strong match for {primary.palette.name}.",
            recommendation="A great choice for your season.",
        )

    for score in classification.secondary:
        if score.key == user_season:
            return Compatibility(
                compatible=True,
                match_type=CompatibilityType.SECONDARY,
                reason=(
                    f"This item best suits {primary.palette.name} "
                    f"but also works for {score.palette.name}."
                ),
                recommendation="Can work well, especially when styled with your core colors.",
            )

    return Compatibility(
        compatible=False,
        match_type=CompatibilityType.NONE,
        reason=f"This item best suits {primary.palette.name}.",
        recommendation="Look for colors from your own palette instead.",
    )
