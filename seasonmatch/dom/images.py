# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Product image discovery.

Picks the images on a page worth evaluating. Logos, icons, sprites and
social buttons are skipped by src, alt text or class name, as are images
whose natural size is known to be under the minimum. Images that have not
loaded yet (natural size 0) are kept; the pipeline's size gate decides
for them once their size is known.
"""

from __future__ import annotations

import logging

from seasonmatch.dom.snapshot import Element
from seasonmatch.dom.discovery import is_self_element

logger = logging.getLogger(__name__)

UI_IMAGE_MARKERS = ("logo", "icon", "sprite")
SOCIAL_MARKERS = ("facebook", "twitter", "instagram", "pinterest", "social")


def image_src(element: Element) -> str:
    if element.image is not None and element.image.src:
        return element.image.src
    return element.get("src", "") or ""


def is_ui_image(element: Element) -> bool:
    """Logo, icon, sprite or social-network image."""
    src = image_src(element).lower()
    alt = element.get("alt", "").lower()
    cls = element.class_name.lower()

    if any(m in src or m in cls for m in UI_IMAGE_MARKERS):
        return True
    if any(m in alt for m in ("logo", "icon")):
        return True
    return any(m in src for m in SOCIAL_MARKERS) or "social" in cls


def _has_source(element: Element) -> bool:
    if image_src(element):
        return True
    res = element.image
    return res is not None and (res.pixels is not None or res.path is not None)


def _too_small(element: Element, min_width: float, min_height: float) -> bool:
    res = element.image
    if res is None or not (res.natural_width and res.natural_height):
        return False
    return res.natural_width < min_width or res.natural_height < min_height


def find_product_images(
    root: Element,
    *,
    min_width: float = 100.0,
    min_height: float = 100.0,
) -> list[Element]:
    """
    Find the product images under ``root``, in document order.

    Args:
        root: Page (or section) to search
        min_width: Skip loaded images narrower than this (px)
        min_height: Skip loaded images shorter than this (px)

    Returns:
        Image elements to evaluate
    """
    found = []
    skipped = 0
    for el in root.find_all(lambda n: n.tag == "img"):
        if (
            is_ui_image(el)
            or is_self_element(el)
            or not el.is_rendered
            or not _has_source(el)
            or _too_small(el, min_width, min_height)
        ):
            skipped += 1
            continue
        found.append(el)
    logger.debug("Found %d product images (%d skipped)", len(found), skipped)
    return found
