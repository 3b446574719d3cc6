# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Swatch discovery and product-container resolution.

Three independent strategies find swatch candidates inside a container:

1. Semantic: class / attribute naming conventions ("swatch", "color-option",
   data-color, aria-label mentioning color, ...)
2. Visual: small elements (10-150px) with a fill or background image
3. Spatial clustering: 3+ similar-sized elements aligned in a row or column

Results are unioned, filtered for validity (visible, sized 10-150px, not
part of our own injected UI), deduplicated, and ordered top-to-bottom then
left-to-right.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from seasonmatch.schema import SwatchCandidate
from seasonmatch.dom.snapshot import Element
from seasonmatch.measure.colorspace import parse_css_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryConfig:
    """Size limits and tolerances for swatch discovery."""

    # Valid swatch size range (px, per side)
    min_size: float = 10.0
    max_size: float = 150.0

    # Spatial clustering: candidate size range, size delta (|dw| + |dh|),
    # alignment tolerance on top or left edges, minimum members
    cluster_min_size: float = 10.0
    cluster_max_size: float = 100.0
    cluster_size_tolerance: float = 20.0
    cluster_alignment_tolerance: float = 50.0
    cluster_min_members: int = 3

    # Elements whose tops differ by at most this are on the same row
    row_tolerance: float = 5.0

    # Safety cap on returned swatches
    max_swatches: int = 50

    # Upward search limit when resolving the product container
    container_max_depth: int = 15

    # Generic "has swatches" probe: small filled elements needed
    probe_min_size: float = 20.0
    probe_max_size: float = 100.0
    probe_min_count: int = 2


# Classes carried by this library's own rendered UI
SELF_CLASSES = (
    "season-badge",
    "season-color-swatch",
    "color-palette-swatch-container",
    "season-filter-container",
    "season-overlay",
    "season-color-checker-cors-badge",
)

_SEMANTIC_CLASS_FRAGMENTS = ("swatch", "color-option", "color-selector", "colour", "variant")
_SEMANTIC_ATTRIBUTES = ("data-color", "data-swatch", "data-variant-color")
_VISUAL_TAGS = ("div", "span", "button", "li", "a", "img")

_PROBE_CLASS_FRAGMENTS = ("swatch", "color-option", "variant-option", "color-selector")

_PRODUCT_CLASS_RE = re.compile(
    r"\b(product-item|product-tile|product-card|product-grid-item|productcard|producttile)\b",
    re.IGNORECASE,
)


# =============================================================================
# Validity
# =============================================================================


def is_self_element(element: Element) -> bool:
    """True for elements that belong to our own injected UI."""
    return element.closest(lambda el: any(el.has_class(c) for c in SELF_CLASSES)) is not None


def has_fill(element: Element) -> bool:
    """Non-transparent background color or a background image."""
    if element.background_image:
        return True
    return parse_css_color(element.resolved("background-color")) is not None


def is_valid_swatch_element(element: Element, config: Optional[DiscoveryConfig] = None) -> bool:
    """
    Whether an element can be a swatch.

    Must be rendered (not display:none, not hidden, not fully transparent),
    sized within the configured range on both sides, and not part of our
    own UI. Radio inputs are exempt from the size check: they are often
    visually hidden behind a styled label.
    """
    cfg = config or DiscoveryConfig()
    if is_self_element(element):
        return False
    if not element.is_rendered or element.opacity <= 0.0:
        return False
    if element.is_radio:
        return True
    w, h = element.rect.width, element.rect.height
    return cfg.min_size <= w <= cfg.max_size and cfg.min_size <= h <= cfg.max_size


# =============================================================================
# Strategies
# =============================================================================


def _is_semantic_swatch(el: Element) -> bool:
    if el.class_contains(*_SEMANTIC_CLASS_FRAGMENTS):
        return True
    if any(el.has(a) for a in _SEMANTIC_ATTRIBUTES):
        return True
    for attr in ("aria-label", "title"):
        value = el.get(attr, "").lower()
        if "color" in value or "colour" in value:
            return True
    return False


def find_semantic_swatches(container: Element) -> list[Element]:
    return container.find_all(_is_semantic_swatch)


def find_visual_swatches(container: Element, config: Optional[DiscoveryConfig] = None) -> list[Element]:
    cfg = config or DiscoveryConfig()

    def is_visual(el: Element) -> bool:
        if el.tag not in _VISUAL_TAGS:
            return False
        w, h = el.rect.width, el.rect.height
        if not (cfg.min_size <= w <= cfg.max_size and cfg.min_size <= h <= cfg.max_size):
            return False
        return has_fill(el)

    return container.find_all(is_visual)


def find_clustered_swatches(container: Element, config: Optional[DiscoveryConfig] = None) -> list[Element]:
    """
    Elements forming rows or columns of similar-sized small blocks.

    Candidates are small elements with a fill, or images. Each unclaimed
    candidate seeds a group of unclaimed candidates of similar size that
    share its top or left edge within tolerance; groups of at least
    ``cluster_min_members`` are kept.
    """
    cfg = config or DiscoveryConfig()

    def is_candidate(el: Element) -> bool:
        w, h = el.rect.width, el.rect.height
        lo, hi = cfg.cluster_min_size, cfg.cluster_max_size
        if not (lo <= w <= hi and lo <= h <= hi):
            return False
        return el.tag == "img" or has_fill(el)

    candidates = container.find_all(is_candidate)
    claimed: set[int] = set()
    clustered: list[Element] = []

    for seed in candidates:
        if id(seed) in claimed:
            continue
        group = [seed]
        for other in candidates:
            if other is seed or id(other) in claimed:
                continue
            size_diff = (abs(other.rect.width - seed.rect.width)
                         + abs(other.rect.height - seed.rect.height))
            if size_diff > cfg.cluster_size_tolerance:
                continue
            same_row = abs(other.rect.top - seed.rect.top) < cfg.cluster_alignment_tolerance
            same_column = abs(other.rect.left - seed.rect.left) < cfg.cluster_alignment_tolerance
            if same_row or same_column:
                group.append(other)

        if len(group) >= cfg.cluster_min_members:
            claimed.update(id(el) for el in group)
            clustered.extend(group)

    return clustered


def discover_swatches(
    container: Element,
    config: Optional[DiscoveryConfig] = None,
) -> list[SwatchCandidate]:
    """
    Find every plausible swatch inside a container.

    Args:
        container: Element to search (usually the product container)
        config: Discovery settings (defaults if None)

    Returns:
        Deduplicated candidates, top-to-bottom then left-to-right,
        at most ``config.max_swatches``
    """
    cfg = config or DiscoveryConfig()

    found: dict[int, Element] = {}
    for strategy in (
        find_semantic_swatches(container),
        find_visual_swatches(container, cfg),
        find_clustered_swatches(container, cfg),
    ):
        for el in strategy:
            if id(el) not in found and is_valid_swatch_element(el, cfg):
                found[id(el)] = el

    ordered = sort_by_position(list(found.values()), cfg.row_tolerance)
    if len(ordered) > cfg.max_swatches:
        logger.debug("Capping %d swatches at %d", len(ordered), cfg.max_swatches)
        ordered = ordered[:cfg.max_swatches]

    return [SwatchCandidate(element=el, rect=el.rect) for el in ordered]


def sort_by_position(elements: list[Element], row_tolerance: float = 5.0) -> list[Element]:
    """
    Reading order: top-to-bottom, then left-to-right within a row.

    Elements whose tops are within ``row_tolerance`` of the row's first
    element share a row.
    """
    by_top = sorted(elements, key=lambda el: (el.rect.top, el.rect.left))
    rows: list[list[Element]] = []
    for el in by_top:
        if rows and abs(el.rect.top - rows[-1][0].rect.top) <= row_tolerance:
            rows[-1].append(el)
        else:
            rows.append([el])
    return [el for row in rows for el in sorted(row, key=lambda e: e.rect.left)]


# =============================================================================
# Product Container
# =============================================================================


def _is_probe_swatch(el: Element) -> bool:
    if el.class_contains(*_PROBE_CLASS_FRAGMENTS) or el.has("data-color"):
        return True
    testid = el.get("data-testid", "").lower()
    if "swatch" in testid or "color" in testid:
        return True
    return el.tag in ("button", "a") and el.class_contains("color")


def has_swatches(element: Element, config: Optional[DiscoveryConfig] = None) -> bool:
    """
    Cheap probe: does this element contain swatch-like descendants?

    True on any swatch-named descendant, or at least ``probe_min_count``
    small elements with a fill.
    """
    cfg = config or DiscoveryConfig()
    if element.find(_is_probe_swatch) is not None:
        return True

    filled = 0
    for el in element.iter_descendants():
        w, h = el.rect.width, el.rect.height
        if not (cfg.probe_min_size <= w <= cfg.probe_max_size):
            continue
        if not (cfg.probe_min_size <= h <= cfg.probe_max_size):
            continue
        if has_fill(el):
            filled += 1
            if filled >= cfg.probe_min_count:
                return True
    return False


def is_product_boundary(element: Element) -> bool:
    """Element named or marked up as a product card / tile."""
    if "product" in element.get("data-testid", "").lower():
        return True
    if element.has("data-product-id") or element.has("data-product"):
        return True
    if element.tag == "article":
        return True
    return bool(_PRODUCT_CLASS_RE.search(element.class_name))


def find_product_container(
    image: Element,
    config: Optional[DiscoveryConfig] = None,
) -> Optional[Element]:
    """
    Resolve the element holding a product image and its swatches.

    Phase 1 walks up from the image looking for a product boundary that
    also contains swatches. Phase 2 takes the first ancestor containing
    swatches at all. Both walks stop after ``container_max_depth`` levels
    so a listing item never expands to the whole grid. Falls back to the
    image's parent.

    Returns:
        Container element, or None if the image has no parent
    """
    cfg = config or DiscoveryConfig()

    ancestors = []
    for depth, node in enumerate(image.ancestors()):
        if depth >= cfg.container_max_depth:
            break
        ancestors.append(node)

    for node in ancestors:
        if is_product_boundary(node) and has_swatches(node, cfg):
            logger.debug("Product container: semantic boundary <%s class=%r>", node.tag, node.class_name)
            return node

    for node in ancestors:
        if has_swatches(node, cfg):
            logger.debug("Product container: first ancestor with swatches <%s>", node.tag)
            return node

    if image.parent is None:
        logger.debug("Product container unresolved: image has no parent")
    return image.parent
