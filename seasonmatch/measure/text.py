# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Color-name evidence from text.

Scans a piece of text for known color names and turns the plausible
mentions into ColorEvidence:

- Names are matched longest first on word boundaries, without overlaps,
  so "navy blue" wins over "navy" and "blue".
- Text that only counts colors ("12 colors", "various colors") is skipped.
- A mention is rejected in negative context ("not available in red",
  "red logo", "except red").
- Ambiguous words ("orange", "olive", "mint", ...) are rejected next to a
  non-fashion context word ("juice", "oil", "tea", ...) unless a fashion
  word ("dress", "color", "available in", ...) is also nearby.

Repeated mentions fold into one record whose count feeds the fusion
frequency boost. Gathering text from the page lives in
seasonmatch.dom.text_sources.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Iterable, Optional

from seasonmatch.schema import ColorEvidence, SourceKind, TextMention, TextSource
from seasonmatch.measure.vocabulary import color_names, lookup_color, normalize_color_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextEvidenceConfig:
    """
    Confidence per text source and scanning limits.

    Attributes:
        image_attribute_confidence: alt / title / aria-label of the image
        variant_selector_confidence: Variant and swatch selector text
        structured_data_confidence: JSON-LD Product.color
        title_confidence: Product title
        description_confidence: Description, badges and labels
        nearby_confidence: Text near an image with no product card
        default_weight: Fusion weight of a source with no known weight
        context_window: Characters either side of a mention checked for context
        max_chars_per_element: Text read from any one element
        max_elements: Product card elements read
    """
    image_attribute_confidence: float = 0.9
    variant_selector_confidence: float = 0.8
    structured_data_confidence: float = 0.85
    title_confidence: float = 0.7
    description_confidence: float = 0.5
    nearby_confidence: float = 0.4
    default_weight: float = 0.3
    context_window: int = 30
    max_chars_per_element: int = 200
    max_elements: int = 10

    def confidence_for(self, source: TextSource) -> float:
        return {
            TextSource.IMAGE_ATTRIBUTE: self.image_attribute_confidence,
            TextSource.VARIANT_SELECTOR: self.variant_selector_confidence,
            TextSource.STRUCTURED_DATA: self.structured_data_confidence,
            TextSource.PRODUCT_TITLE: self.title_confidence,
            TextSource.PRODUCT_DESCRIPTION: self.description_confidence,
            TextSource.NEARBY_TEXT: self.nearby_confidence,
        }.get(source, self.default_weight)


# Non-fashion senses of ambiguous color words
AMBIGUOUS_COLORS: dict[str, tuple[str, ...]] = {
    "orange": ("juice", "peel", "fruit", "county", "brand"),
    "olive": ("oil", "tree", "branch", "food"),
    "rose": ("flower", "garden", "bush", "plant"),
    "coral": ("reef", "island", "sea"),
    "mint": ("leaves", "tea", "flavor", "candy"),
    "peach": ("fruit", "tree"),
    "cherry": ("fruit", "tree", "blossom"),
    "lime": ("fruit", "juice"),
    "chocolate": ("bar", "candy", "cake", "dessert"),
    "coffee": ("drink", "cup", "beans", "shop"),
    "honey": ("bee", "comb", "jar"),
}

FASHION_CONTEXT_TERMS = (
    "dress", "shirt", "pants", "jeans", "shorts", "skirt", "jacket",
    "coat", "sweater", "hoodie", "top", "bottom", "shoes", "boots",
    "color", "colour", "shade", "hue", "tone", "available in", "comes in",
    "choose from", "select", "option", "variant", "style",
)

SKIP_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"\d+ colou?rs?\b",
    r"\bmany colou?rs?\b",
    r"\bvarious colou?rs?\b",
    r"\bmultiple colou?rs?\b",
    r"\ball colou?rs?\b",
    r"\bevery colou?rs?\b",
    r"\bseveral colou?rs?\b",
))

# {name} is replaced by the escaped color name
_NEGATIVE_TEMPLATES = (
    r"\bnot (?:available|sold|offered|made|coming) in {name}\b",
    r"\bno longer (?:available|sold|offered) in {name}\b",
    r"\bout of stock in {name}\b",
    r"\bdiscontinued in {name}\b",
    r"\b{name} (?:logo|brand|company|store|site|website)\b",
    r"\bexcept {name}\b",
    r"\bexcluding {name}\b",
)


@lru_cache(maxsize=None)
def _name_pattern(name: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(name)}\b")


@lru_cache(maxsize=None)
def _negative_patterns(name: str) -> tuple[re.Pattern, ...]:
    escaped = re.escape(name)
    return tuple(re.compile(t.format(name=escaped)) for t in _NEGATIVE_TEMPLATES)


def _has_term(text: str, terms: Iterable[str]) -> bool:
    return any(_name_pattern(t).search(text) for t in terms)


def is_generic_color_mention(text: str) -> bool:
    """Text that counts colors without naming one ("12 colors")."""
    return any(p.search(text) for p in SKIP_PATTERNS)


def is_likely_product_color(name: str, context: str) -> bool:
    """
    Whether a color name in its surrounding text describes a product.

    Args:
        name: Matched color name (lowercase)
        context: Lowercase text around the mention
    """
    if any(p.search(context) for p in _negative_patterns(name)):
        return False

    other_senses = AMBIGUOUS_COLORS.get(name)
    if other_senses and _has_term(context, other_senses):
        return _has_term(context, FASHION_CONTEXT_TERMS)
    return True


@dataclass(frozen=True)
class _Mention:
    name: str
    position: int


def find_color_mentions(text: str, window: int = 30) -> list[_Mention]:
    """
    Plausible color-name mentions in text, in order of position.

    Longest names are matched first and claim their characters, so
    shorter names inside them are not matched again.
    """
    lowered = text.lower()
    claimed = bytearray(len(lowered))
    mentions: list[_Mention] = []

    for name in color_names():
        if name not in lowered:
            continue
        for m in _name_pattern(name).finditer(lowered):
            start, end = m.span()
            if any(claimed[start:end]):
                continue
            context = lowered[max(0, start - window):end + window]
            if not is_likely_product_color(name, context):
                logger.debug("Rejected color mention %r in %r", name, context)
                continue
            claimed[start:end] = b"\x01" * (end - start)
            mentions.append(_Mention(name, start))

    mentions.sort(key=lambda m: m.position)
    return mentions


def extract_color_keywords(
    text: Optional[str],
    source: TextSource,
    confidence: float,
    config: Optional[TextEvidenceConfig] = None,
) -> list[ColorEvidence]:
    """
    Color evidence found in one piece of text.

    Args:
        text: Text to scan (None or empty yields nothing)
        source: Where the text came from
        confidence: Confidence assigned to every mention from this text
        config: Scanning settings (defaults if None)

    Returns:
        One ColorEvidence per distinct color, in order of first mention
    """
    if not text:
        return []
    cfg = config or TextEvidenceConfig()
    if is_generic_color_mention(text):
        logger.debug("Skipping generic color text: %r", text[:60])
        return []

    grouped: dict[str, TextMention] = {}
    for mention in find_color_mentions(text, cfg.context_window):
        keyword = normalize_color_name(mention.name)
        if keyword in grouped:
            seen = grouped[keyword]
            grouped[keyword] = replace(seen, count=seen.count + 1)
        else:
            grouped[keyword] = TextMention(
                keyword=keyword,
                source=source,
                first_position=mention.position,
                multi_word=" " in keyword,
            )

    evidence = []
    for keyword, mention in grouped.items():
        color = lookup_color(keyword)
        if color is None:
            continue
        evidence.append(ColorEvidence(
            color=color,
            confidence=confidence,
            source_kind=SourceKind.TEXT_DICTIONARY,
            label=keyword,
            mention=mention,
        ))
    return evidence


def merge_text_evidence(evidence: Iterable[ColorEvidence]) -> tuple[ColorEvidence, ...]:
    """
    Deduplicate text evidence by color name.

    The highest-confidence record of each name is kept (earlier records
    win ties); its count becomes the total count over all sources.

    Returns:
        Merged evidence, highest confidence first
    """
    ranked = sorted(evidence, key=lambda e: -e.confidence)
    best: dict[str, ColorEvidence] = {}
    totals: dict[str, int] = {}
    for item in ranked:
        key = item.label or ""
        count = item.mention.count if item.mention else 1
        totals[key] = totals.get(key, 0) + count
        best.setdefault(key, item)

    merged = []
    for key, item in best.items():
        if item.mention is not None and item.mention.count != totals[key]:
            item = replace(item, mention=replace(item.mention, count=totals[key]))
        merged.append(item)
    return tuple(merged)
