# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Selected swatch resolution.

A strict-priority cascade; the first tier that yields an element wins:

1. Checked native radio input (color / variant named), via its label
2. "selected" / "active" class naming (exact, fuzzy and BEM forms)
3. ARIA selection state (aria-checked, aria-selected, aria-current)
4. Generic data-* state fields on swatch-related elements
5. Visual emphasis: thick border, outline, inset shadow, scale transform
6. Listing pages only: first swatch of the nearest swatch row around the
   product image

No tier firing means "no selection". That is absence of evidence, not an
error, and the resolver never guesses a default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from seasonmatch.schema import SelectedSwatchResult, SelectionTier, SwatchCandidate
from seasonmatch.dom.snapshot import Element, Rect
from seasonmatch.dom.discovery import DiscoveryConfig, is_self_element, is_valid_swatch_element
from seasonmatch.dom.swatch_color import is_pattern_swatch, is_swatch_disabled

logger = logging.getLogger(__name__)


class PageType(Enum):
    """Kind of page the product image sits on."""

    DETAIL = "detail"
    LISTING = "listing"


@dataclass(frozen=True)
class SelectionConfig:
    """
    Thresholds for the visual and layout tiers.

    Attributes:
        min_border_width: Border width (px) above which a swatch reads as selected
        row_min_size: Smallest swatch image side in a layout row (px)
        row_max_size: Largest swatch image side in a layout row (px)
        row_min_count: Images needed to form a row
        row_bucket: Rows are keyed by top rounded to this many px
        row_size_tolerance: Max deviation from the row's mean width/height (px)
        min_aspect: Lowest width/height ratio of a row image
        max_aspect: Highest width/height ratio of a row image
        max_row_distance: Absolute cap on row-to-image distance (px)
        row_distance_ratio: Cap on row-to-image distance as a fraction of image height
        overlap_tolerance: Horizontal slack when checking row/image overlap (px)
    """
    min_border_width: float = 1.0
    row_min_size: float = 10.0
    row_max_size: float = 100.0
    row_min_count: int = 3
    row_bucket: float = 10.0
    row_size_tolerance: float = 5.0
    min_aspect: float = 0.8
    max_aspect: float = 1.2
    max_row_distance: float = 150.0
    row_distance_ratio: float = 0.5
    overlap_tolerance: float = 50.0


# =============================================================================
# Tier 1: Native controls
# =============================================================================


_RADIO_RULES: tuple[Callable[[Element], bool], ...] = (
    lambda el: "color" in el.get("name", "").lower(),
    lambda el: "variant" in el.get("name", "").lower(),
    lambda el: el.class_contains("color"),
    lambda el: el.class_contains("swatch"),
)


def _swatch_for_radio(radio: Element, container: Element, valid: Callable[[Element], bool]) -> Optional[Element]:
    if radio.id:
        label = container.find(lambda el: el.tag == "label" and el.get("for") == radio.id)
        if label is not None and valid(label):
            return label

    enclosing = radio.closest(lambda el: el.tag == "label")
    if enclosing is not None and valid(enclosing):
        return enclosing

    sibling = radio.next_sibling
    if sibling is not None and valid(sibling):
        return sibling

    if radio.parent is not None and valid(radio.parent):
        return radio.parent

    if radio.get("data-color") or radio.value:
        return radio
    return None


def find_by_radio_input(container: Element, valid: Callable[[Element], bool]) -> Optional[Element]:
    radios = container.find_all(lambda el: el.is_radio and el.checked)
    for rule in _RADIO_RULES:
        for radio in radios:
            if not rule(radio):
                continue
            if radio.disabled or radio.has_class("disabled"):
                continue
            swatch = _swatch_for_radio(radio, container, valid)
            if swatch is not None:
                return swatch
    return None


# =============================================================================
# Tiers 2-4: Naming and state attributes
# =============================================================================


# (exact classes, class fragments), most specific first
_CLASS_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("swatch", "selected"), ()),
    (("swatch", "active"), ()),
    (("swatch-option", "active"), ()),
    (("color-swatch", "selected"), ()),
    (("color-option", "selected"), ()),
    (("form-option", "is-selected"), ()),
    (("swatch", "is-active"), ()),
    ((), ("swatch", "selected")),
    ((), ("swatch", "active")),
    ((), ("color", "selected")),
    ((), ("color", "active")),
    ((), ("variant", "selected")),
    ((), ("swatch--selected",)),
    ((), ("swatch--active",)),
    ((), ("color--selected",)),
)

_SKIP_CLASSES = ("disabled", "is-disabled-option", "sold-out")


def _class_rule(exact: tuple[str, ...], fragments: tuple[str, ...]) -> Callable[[Element], bool]:
    def matches(el: Element) -> bool:
        return all(el.has_class(c) for c in exact) and all(el.class_contains(f) for f in fragments)
    return matches


def find_by_class_name(container: Element, valid: Callable[[Element], bool]) -> Optional[Element]:
    for exact, fragments in _CLASS_RULES:
        for el in container.find_all(_class_rule(exact, fragments)):
            if any(el.has_class(c) for c in _SKIP_CLASSES):
                continue
            if valid(el):
                return el
    return None


# (role or None, state attribute, required class fragment or None)
_ARIA_RULES: tuple[tuple[Optional[str], str, Optional[str]], ...] = (
    ("radio", "aria-checked", None),
    ("option", "aria-selected", None),
    (None, "aria-checked", "swatch"),
    (None, "aria-checked", "color"),
    ("tab", "aria-selected", "color"),
    (None, "aria-current", "swatch"),
    (None, "aria-current", "color"),
)


def find_by_aria_state(container: Element, valid: Callable[[Element], bool]) -> Optional[Element]:
    for role, attr, fragment in _ARIA_RULES:
        def matches(el: Element) -> bool:
            if el.get(attr) != "true":
                return False
            if role is not None and el.get("role") != role:
                return False
            return fragment is None or el.class_contains(fragment)

        el = container.find(matches)
        if el is not None and valid(el):
            return el
    return None


_DATA_STATE_RULES: tuple[tuple[str, str], ...] = (
    ("data-selected", "true"),
    ("data-selected", "1"),
    ("data-active", "true"),
    ("data-active", "1"),
    ("data-state", "selected"),
    ("data-state", "active"),
)


def _is_swatch_related(el: Element) -> bool:
    if el.class_contains("swatch", "color", "variant"):
        return True
    return el.find(lambda n: n.class_contains("swatch", "color")) is not None


def find_by_data_state(container: Element, valid: Callable[[Element], bool]) -> Optional[Element]:
    for attr, expected in _DATA_STATE_RULES:
        for el in container.find_all(lambda n: n.get(attr) == expected):
            if _is_swatch_related(el) and valid(el):
                return el
    return None


# =============================================================================
# Tier 5: Visual emphasis
# =============================================================================


def is_visually_emphasized(el: Element, min_border_width: float = 1.0) -> bool:
    """Thick border, outline, inset shadow or scale transform."""
    if el.resolved_px("border-width") > min_border_width:
        return True
    outline = el.resolved("outline").strip().lower()
    if outline and outline != "none":
        return True
    if "inset" in el.resolved("box-shadow").lower():
        return True
    transform = el.resolved("transform").lower()
    return transform != "none" and "scale" in transform


def find_by_visual_style(
    container: Element,
    valid: Callable[[Element], bool],
    config: SelectionConfig,
) -> Optional[Element]:
    for el in container.find_all(lambda n: n.class_contains("swatch", "color", "variant")):
        if is_self_element(el) or not valid(el):
            continue
        if is_visually_emphasized(el, config.min_border_width):
            return el
    return None


# =============================================================================
# Tier 6: Listing layout
# =============================================================================


@dataclass(frozen=True)
class _Row:
    elements: tuple[Element, ...]
    distance: float
    direction: str


def _row_distance(row: Rect, image: Rect, config: SelectionConfig) -> tuple[float, str]:
    """Distance from a swatch row to the image, and the direction it lies in."""
    if row.top > image.bottom:
        return row.top - image.bottom, "below"
    if row.top < image.top:
        return image.top - row.bottom, "above"
    if abs(row.top - image.top) < config.overlap_tolerance:
        right_side = abs(row.left - image.right)
        left_side = abs(image.left - row.right)
        return min(right_side, left_side), "beside"
    return float("inf"), "unknown"


def _overlaps_horizontally(row: Rect, image: Rect, tolerance: float) -> bool:
    lo, hi = image.left - tolerance, image.right + tolerance
    return (
        lo <= row.left <= hi
        or lo <= row.right <= hi
        or (row.left <= image.left and row.right >= image.right)
    )


def find_swatch_rows(container: Element, config: Optional[SelectionConfig] = None) -> list[tuple[Element, ...]]:
    """
    Rows of similar-sized, roughly square small images.

    Images are bucketed by top edge, then each bucket must hold at least
    ``row_min_count`` images within ``row_size_tolerance`` of the mean size
    and with an aspect ratio between ``min_aspect`` and ``max_aspect``.

    Returns:
        Rows in top-to-bottom order, each sorted left-to-right
    """
    cfg = config or SelectionConfig()

    def is_small_image(el: Element) -> bool:
        w, h = el.rect.width, el.rect.height
        return (
            el.tag == "img"
            and cfg.row_min_size <= w <= cfg.row_max_size
            and cfg.row_min_size <= h <= cfg.row_max_size
        )

    buckets: dict[float, list[Element]] = {}
    for img in container.find_all(is_small_image):
        key = round(img.rect.top / cfg.row_bucket) * cfg.row_bucket
        buckets.setdefault(key, []).append(img)

    rows = []
    for key in sorted(buckets):
        images = sorted(buckets[key], key=lambda el: el.rect.left)
        if len(images) < cfg.row_min_count:
            continue
        mean_w = sum(el.rect.width for el in images) / len(images)
        mean_h = sum(el.rect.height for el in images) / len(images)
        if any(
            abs(el.rect.width - mean_w) > cfg.row_size_tolerance
            or abs(el.rect.height - mean_h) > cfg.row_size_tolerance
            for el in images
        ):
            continue
        if any(not cfg.min_aspect <= el.rect.width / el.rect.height <= cfg.max_aspect for el in images):
            continue
        rows.append(tuple(images))
    return rows


def find_by_layout(
    container: Element,
    image: Element,
    config: SelectionConfig,
) -> Optional[Element]:
    """First element of the closest swatch row near the product image."""
    target = image.rect
    max_distance = min(config.max_row_distance, target.height * config.row_distance_ratio)

    nearby: list[_Row] = []
    for images in find_swatch_rows(container, config):
        first, last = images[0].rect, images[-1].rect
        span = Rect(
            left=first.left,
            top=first.top,
            width=last.right - first.left,
            height=max(el.rect.height for el in images),
        )
        distance, direction = _row_distance(span, target, config)
        if distance < max_distance and _overlaps_horizontally(span, target, config.overlap_tolerance):
            nearby.append(_Row(images, distance, direction))
        else:
            logger.debug("Swatch row at y=%.0f rejected (%s, distance=%.0f)", span.top, direction, distance)

    if not nearby:
        return None
    closest = min(nearby, key=lambda row: row.distance)
    logger.debug("Using swatch row %s of image, distance=%.0f", closest.direction, closest.distance)
    return closest.elements[0]


# =============================================================================
# Cascade
# =============================================================================


def resolve_selected_swatch(
    container: Element,
    image: Optional[Element] = None,
    page_type: PageType = PageType.DETAIL,
    config: Optional[SelectionConfig] = None,
    discovery: Optional[DiscoveryConfig] = None,
) -> Optional[SelectedSwatchResult]:
    """
    Decide which swatch in a product container is currently chosen.

    Args:
        container: Product container to search
        image: Product image (needed for the listing layout tier)
        page_type: LISTING enables the layout fallback tier
        config: Visual / layout thresholds (defaults if None)
        discovery: Size limits for swatch validity (defaults if None)

    Returns:
        SelectedSwatchResult, or None if no tier fired
    """
    cfg = config or SelectionConfig()

    def valid(el: Element) -> bool:
        return is_valid_swatch_element(el, discovery)

    tiers: list[tuple[SelectionTier, Callable[[], Optional[Element]]]] = [
        (SelectionTier.NATIVE_CONTROL, lambda: find_by_radio_input(container, valid)),
        (SelectionTier.CLASS_NAME, lambda: find_by_class_name(container, valid)),
        (SelectionTier.ARIA_STATE, lambda: find_by_aria_state(container, valid)),
        (SelectionTier.DATA_STATE, lambda: find_by_data_state(container, valid)),
        (SelectionTier.VISUAL_STYLE, lambda: find_by_visual_style(container, valid, cfg)),
    ]
    if page_type is PageType.LISTING and image is not None:
        tiers.append((SelectionTier.LISTING_LAYOUT, lambda: find_by_layout(container, image, cfg)))

    for tier, find in tiers:
        element = find()
        if element is None:
            continue
        logger.debug("Selected swatch via tier %d (%s): <%s>", tier, tier.name, element.tag)
        return SelectedSwatchResult(
            candidate=SwatchCandidate(element=element, rect=element.rect),
            tier=tier,
            is_disabled=is_swatch_disabled(element),
            is_pattern=is_pattern_swatch(element),
        )

    logger.debug("No selected swatch detected")
    return None
