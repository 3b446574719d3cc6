# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Evidence fusion.

Combines image-derived dominant colors with swatch and text evidence into
one ranked list of at most five colors:

1. Every dominant color starts at weight 1.0.
2. Swatch boost: a dominant color within ΔE 25 of a confident swatch color
   is multiplied by ``10 × confidence × (1 − ΔE/25)``.
3. Text boost: each named color within ΔE 28 multiplies the weight by
   ``1 + source weight + frequency + first-mention + multi-word bonuses``.
4. Augmentation: confident text colors (>= 0.7) with nothing within ΔE 32
   in the dominant list are appended (at most 2).
5. Selection: up to 2 evidence-matched colors lead the list, then the
   rest follow by weight, so a large neutral backdrop cannot crowd a
   confirmed garment color out of the top of the ranking.

Without any evidence the dominant colors come back unchanged, in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from seasonmatch.schema import Color, ColorEvidence, TextMention, WeightedColor
from seasonmatch.measure.colorspace import color_distance
from seasonmatch.measure.text import TextEvidenceConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FusionConfig:
    """Fusion thresholds (CIE76 ΔE scale) and boost sizes."""

    # Swatch boost
    swatch_delta_e: float = 25.0
    swatch_boost: float = 10.0
    swatch_min_confidence: float = 0.5

    # Text boost
    text_delta_e: float = 28.0
    frequency_step: float = 0.3
    frequency_cap: float = 2.0
    first_mention_bonus: float = 0.2
    multi_word_bonus: float = 0.1

    # Text augmentation: colors at least this far from every dominant color
    augment_delta_e: float = 32.0
    augment_min_confidence: float = 0.7
    max_augmented: int = 2

    # Final selection
    max_colors: int = 5
    guaranteed_slots: int = 2

    # Source weights of text mentions
    sources: TextEvidenceConfig = field(default_factory=TextEvidenceConfig)

    def __post_init__(self) -> None:
        if self.max_colors < 1:
            raise ValueError(f"max_colors must be >= 1, got {self.max_colors}")
        if not 0 <= self.guaranteed_slots <= self.max_colors:
            raise ValueError(
                f"guaranteed_slots must be within 0-{self.max_colors}, got {self.guaranteed_slots}"
            )


def text_boost(mention: TextMention, config: Optional[FusionConfig] = None) -> float:
    """
    Additive weight of one text mention (the multiplier is 1 + this).

    Source weight, plus 0.3 per mention capped at 2.0, plus 0.2 for a
    mention at the very start of its text, plus 0.1 for multi-word names.
    """
    cfg = config or FusionConfig()
    boost = cfg.sources.confidence_for(mention.source)
    boost += min(mention.count * cfg.frequency_step, cfg.frequency_cap)
    if mention.first_position == 0:
        boost += cfg.first_mention_bonus
    if mention.multi_word:
        boost += cfg.multi_word_bonus
    return boost


def _swatch_factor(color: Color, swatch: ColorEvidence, cfg: FusionConfig) -> Optional[float]:
    if swatch.color is None:
        return None
    de = color_distance(color, swatch.color)
    if de >= cfg.swatch_delta_e:
        return None
    return cfg.swatch_boost * swatch.confidence * (1.0 - de / cfg.swatch_delta_e)


def _augment(
    dominant: Sequence[Color],
    text_evidence: Sequence[ColorEvidence],
    cfg: FusionConfig,
) -> list[WeightedColor]:
    added: list[WeightedColor] = []
    for evidence in sorted(text_evidence, key=lambda e: -e.confidence):
        if len(added) >= cfg.max_augmented:
            break
        if evidence.confidence < cfg.augment_min_confidence or evidence.color is None:
            continue
        if any(color_distance(c, evidence.color) < cfg.augment_delta_e for c in dominant):
            continue
        logger.debug("Adding text color %s (%s)", evidence.color.hex, evidence.label)
        added.append(WeightedColor(evidence.color, 1.0, -1, evidence))
    return added


def weigh(
    dominant: Sequence[Color],
    swatch_evidence: Optional[ColorEvidence] = None,
    text_evidence: Sequence[ColorEvidence] = (),
    config: Optional[FusionConfig] = None,
) -> tuple[WeightedColor, ...]:
    """
    Weight dominant colors by the evidence that confirms them.

    Args:
        dominant: Image-derived colors, most dominant first
        swatch_evidence: Color of the selected swatch, if any
        text_evidence: Color names found in nearby text
        config: Fusion settings (defaults if None)

    Returns:
        Weighted colors (augmented text colors included), highest weight
        first; equal weights keep their input order
    """
    cfg = config or FusionConfig()
    swatch = swatch_evidence
    if swatch is not None and (swatch.color is None or swatch.confidence < cfg.swatch_min_confidence):
        logger.debug("Swatch evidence too weak for boosting (confidence %.2f)", swatch.confidence)
        swatch = None

    weighted: list[WeightedColor] = []
    for index, color in enumerate(dominant):
        weight = 1.0
        matched: Optional[ColorEvidence] = None

        if swatch is not None:
            factor = _swatch_factor(color, swatch, cfg)
            if factor is not None:
                weight *= factor
                matched = swatch

        best_text: Optional[tuple[float, ColorEvidence]] = None
        for evidence in text_evidence:
            if evidence.color is None or evidence.mention is None:
                continue
            de = color_distance(color, evidence.color)
            if de >= cfg.text_delta_e:
                continue
            weight *= 1.0 + text_boost(evidence.mention, cfg)
            if best_text is None or de < best_text[0]:
                best_text = (de, evidence)

        if matched is None and best_text is not None:
            matched = best_text[1]
        weighted.append(WeightedColor(color, weight, index, matched))

    weighted.extend(_augment(dominant, text_evidence, cfg))
    weighted.sort(key=lambda w: -w.weight)
    return tuple(weighted)


def select_final(
    weighted: Sequence[WeightedColor],
    config: Optional[FusionConfig] = None,
) -> tuple[WeightedColor, ...]:
    """
    Pick at most ``max_colors`` from a weight-ranked list.

    The evidence-matched colors with the most trusted evidence take the
    first ``guaranteed_slots`` places, even when an unmatched color
    outweighs them. The remaining places go to the other colors by weight.
    """
    cfg = config or FusionConfig()
    matched = [w for w in weighted if w.matched_evidence is not None]
    matched.sort(key=lambda w: -w.matched_evidence.confidence)
    reserved = {id(w) for w in matched[:cfg.guaranteed_slots]}

    head = [w for w in weighted if id(w) in reserved]
    rest = [w for w in weighted if id(w) not in reserved]
    return tuple(head + rest[:cfg.max_colors - len(head)])


def fuse(
    dominant: Sequence[Color],
    swatch_evidence: Optional[ColorEvidence] = None,
    text_evidence: Sequence[ColorEvidence] = (),
    config: Optional[FusionConfig] = None,
) -> tuple[Color, ...]:
    """
    Final ranked colors for a product.

    Args:
        dominant: Image-derived colors, most dominant first
        swatch_evidence: Color of the selected swatch, if any
        text_evidence: Color names found in nearby text
        config: Fusion settings (defaults if None)

    Returns:
        At most ``max_colors`` colors, best first
    """
    weighted = weigh(dominant, swatch_evidence, text_evidence, config)
    return tuple(w.color for w in select_final(weighted, config))
