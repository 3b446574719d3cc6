# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Swatch color extraction.

Given one swatch element, try a fixed cascade of methods and return the
first that produces a color:

1. Inline background color                       (0.95)
2. Computed background color, not neutral       (0.85)
3. Nested color-bearing child, recursively      (child × 0.9)
4. Color/hex data attribute, not neutral        (0.80)
5. Computed border color, not neutral           (0.60)
6. Dominant color of a swatch image, not neutral (0.75)
7. Radio value parsed as hex                    (0.70)

Each method is a small function returning Optional[ColorEvidence]; the
cascade stops at the first hit. Nothing here raises for unreadable
markup: "can't tell" is None.

describe_swatch() builds on the cascade to produce full swatch metadata
(label, disabled and pattern flags) with two extra fallbacks for swatches
that show a pattern or carry only a color name.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Optional

from seasonmatch.schema import (
    Color,
    ColorEvidence,
    SourceKind,
    SwatchCandidate,
    SwatchDescription,
)
from seasonmatch.dom.snapshot import Element
from seasonmatch.measure.colorspace import is_neutral, parse_css_color, parse_hex
from seasonmatch.measure.sampler import AccessDenied, ColorSampler, PixelSampler
from seasonmatch.measure.vocabulary import color_names, lookup_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionConfig:
    """Confidence assigned to each extraction method."""

    inline_confidence: float = 0.95
    computed_confidence: float = 0.85
    nested_factor: float = 0.9
    data_attribute_confidence: float = 0.8
    border_confidence: float = 0.6
    image_confidence: float = 0.75
    value_confidence: float = 0.7

    # Fallbacks used by describe_swatch only
    label_confidence: float = 0.7
    background_image_confidence: float = 0.4

    # Recursion limit for nested children
    max_depth: int = 3


DATA_COLOR_ATTRIBUTES = ("data-color", "data-hex", "data-color-value", "data-value")

PATTERN_KEYWORDS = ("stripe", "polka", "dot", "floral", "checkered", "plaid", "pattern", "print")

DISABLED_CLASS_FRAGMENTS = ("disabled", "sold-out", "unavailable", "out-of-stock")

_CAPITALIZED_RE = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\b")


@dataclass
class _Extraction:
    """Per-call state shared by the cascade steps."""
    config: ExtractionConfig
    sampler: ColorSampler
    depth: int = 0


# =============================================================================
# Cascade Steps
# =============================================================================


def _from_inline(el: Element, ctx: _Extraction) -> Optional[ColorEvidence]:
    color = parse_css_color(el.inline("background-color") or el.inline("background"))
    if color is None:
        return None
    return ColorEvidence(color, ctx.config.inline_confidence, SourceKind.INLINE_STYLE)


def _from_computed(el: Element, ctx: _Extraction) -> Optional[ColorEvidence]:
    color = parse_css_color(el.computed.get("background-color"))
    if color is None or is_neutral(color):
        return None
    return ColorEvidence(color, ctx.config.computed_confidence, SourceKind.COMPUTED_STYLE)


def _is_color_child(el: Element) -> bool:
    return el.class_contains("color", "swatch") or any(p.startswith("background") for p in el.style)


def _from_child(el: Element, ctx: _Extraction) -> Optional[ColorEvidence]:
    if ctx.depth >= ctx.config.max_depth:
        return None
    child = el.find(_is_color_child)
    if child is None:
        return None
    inner = _Extraction(ctx.config, ctx.sampler, ctx.depth + 1)
    evidence = _run_cascade(child, inner)
    if evidence is None or evidence.color is None or is_neutral(evidence.color):
        return None
    return evidence.nested(ctx.config.nested_factor)


def _from_data_attribute(el: Element, ctx: _Extraction) -> Optional[ColorEvidence]:
    raw = next((el.get(a) for a in DATA_COLOR_ATTRIBUTES if el.get(a)), None)
    if raw is None:
        return None
    color = parse_hex(raw)
    if color is None and "rgb" in raw.lower():
        color = parse_css_color(raw)
    if color is None or is_neutral(color):
        return None
    return ColorEvidence(color, ctx.config.data_attribute_confidence, SourceKind.DATA_ATTRIBUTE)


def _from_border(el: Element, ctx: _Extraction) -> Optional[ColorEvidence]:
    color = parse_css_color(el.computed.get("border-color"))
    if color is None or is_neutral(color):
        return None
    return ColorEvidence(color, ctx.config.border_confidence, SourceKind.BORDER)


def _from_image(el: Element, ctx: _Extraction) -> Optional[ColorEvidence]:
    img = el if el.tag == "img" else el.find(lambda n: n.tag == "img")
    if img is None or img.image is None:
        return None
    result = ctx.sampler.sample(img.image, max_colors=5)
    if isinstance(result, AccessDenied):
        logger.debug("Swatch image unreadable (%s); skipping image sampling", result.reason)
        return None
    if not result.colors or is_neutral(result.colors[0]):
        return None
    return ColorEvidence(result.colors[0], ctx.config.image_confidence, SourceKind.IMAGE_SAMPLE)


def _from_value(el: Element, ctx: _Extraction) -> Optional[ColorEvidence]:
    if not el.is_radio:
        return None
    color = parse_hex(el.value)
    if color is None:
        return None
    return ColorEvidence(color, ctx.config.value_confidence, SourceKind.VALUE_FIELD)


_CASCADE: tuple[Callable[[Element, _Extraction], Optional[ColorEvidence]], ...] = (
    _from_inline,
    _from_computed,
    _from_child,
    _from_data_attribute,
    _from_border,
    _from_image,
    _from_value,
)


def _run_cascade(el: Element, ctx: _Extraction) -> Optional[ColorEvidence]:
    for step in _CASCADE:
        evidence = step(el, ctx)
        if evidence is not None:
            return evidence
    return None


def extract_swatch_color(
    element: Element,
    *,
    sampler: Optional[ColorSampler] = None,
    config: Optional[ExtractionConfig] = None,
) -> Optional[ColorEvidence]:
    """
    Extract the color a swatch element represents.

    Args:
        element: Swatch element
        sampler: Image sampler for image swatches (PixelSampler if None)
        config: Confidence settings (defaults if None)

    Returns:
        ColorEvidence from the first successful method, or None
    """
    ctx = _Extraction(config or ExtractionConfig(), sampler or PixelSampler())
    evidence = _run_cascade(element, ctx)
    if evidence is None:
        logger.debug("No color found for swatch <%s class=%r>", element.tag, element.class_name)
    return evidence


# =============================================================================
# Swatch Metadata
# =============================================================================


def extract_swatch_label(element: Element) -> Optional[str]:
    """
    Human-readable label of a swatch.

    Priority: aria-label (its first run of capitalized words), title,
    short text, image alt, data-color-name / data-variant-name.
    """
    aria = element.get("aria-label", "").strip()
    if aria:
        m = _CAPITALIZED_RE.search(aria)
        return m.group(1) if m else aria

    title = element.get("title", "").strip()
    if title:
        return title

    text = element.text_content.strip()
    if text and len(text) < 50:
        return text

    if element.tag == "img":
        alt = element.get("alt", "").strip()
        if alt:
            return alt

    named = (element.get("data-color-name") or element.get("data-variant-name") or "").strip()
    return named or None


def color_from_label(label: Optional[str]) -> Optional[Color]:
    """
    Resolve a swatch label through the color vocabulary.

    The whole label is tried first, then the longest color name it contains.
    """
    if not label:
        return None
    color = lookup_color(label)
    if color is not None:
        return color
    lowered = label.lower()
    for name in color_names():
        if re.search(rf"\b{re.escape(name)}\b", lowered):
            return lookup_color(name)
    return None


def is_swatch_disabled(element: Element) -> bool:
    """Sold out, unavailable or otherwise not selectable."""
    if element.disabled or element.get("aria-disabled") == "true":
        return True
    if element.class_contains(*DISABLED_CLASS_FRAGMENTS):
        return True
    if element.opacity < 0.5:
        return True
    parent = element.parent
    return parent is not None and parent.class_contains(*DISABLED_CLASS_FRAGMENTS[:3])


def is_pattern_swatch(element: Element, label: Optional[str] = None) -> bool:
    """True if the swatch shows an image/pattern rather than a solid color."""
    if element.background_image:
        return True
    label = label if label is not None else extract_swatch_label(element)
    if label:
        lowered = label.lower()
        return any(k in lowered for k in PATTERN_KEYWORDS)
    return False


def extract_swatch_image(element: Element) -> Optional[str]:
    """Image URL shown by a swatch, if any."""
    if element.tag == "img":
        return element.image.src if element.image else element.get("src")
    bg = element.background_image
    if bg:
        m = re.search(r"url\(['\"]?([^'\")]+)['\"]?\)", bg)
        if m:
            return m.group(1)
    img = element.find(lambda n: n.tag == "img")
    if img is not None:
        return img.image.src if img.image else img.get("src")
    return None


def describe_swatch(
    candidate: SwatchCandidate,
    index: int,
    *,
    sampler: Optional[ColorSampler] = None,
    config: Optional[ExtractionConfig] = None,
) -> SwatchDescription:
    """
    Full metadata for one discovered swatch.

    When the color cascade fails, the label is looked up in the color
    vocabulary; failing that, a swatch with a background image is recorded
    as a pattern with no color.
    """
    cfg = config or ExtractionConfig()
    el = candidate.element
    label = extract_swatch_label(el)
    pattern = is_pattern_swatch(el, label)

    evidence = extract_swatch_color(el, sampler=sampler, config=cfg)
    if evidence is not None:
        evidence = replace(evidence, label=label, is_pattern=pattern)
    else:
        by_name = color_from_label(label)
        if by_name is not None:
            evidence = ColorEvidence(
                by_name, cfg.label_confidence, SourceKind.TEXT_DICTIONARY,
                label=label, is_pattern=pattern,
            )
    if evidence is None and el.background_image:
        evidence = ColorEvidence(
            None, cfg.background_image_confidence, SourceKind.BACKGROUND_IMAGE_ONLY,
            label=label, is_pattern=True,
        )

    return SwatchDescription(
        candidate=candidate,
        index=index,
        label=label,
        evidence=evidence,
        is_disabled=is_swatch_disabled(el),
        is_pattern=pattern,
        image_src=extract_swatch_image(el),
    )
