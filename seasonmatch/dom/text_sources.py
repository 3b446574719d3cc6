# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Text gathered around a product image for color-name evidence.

Sources, in priority order:

1. Image attributes (alt, title, data-color, aria-label)
2. Variant / swatch selector text in the product card
3. Product card title, description, badges and labels
4. JSON-LD structured data (Product.color)

When the image sits in no recognizable product card, text of the image's
parent is read as nearby text at a lower confidence.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Optional

from seasonmatch.schema import ColorEvidence, TextSource
from seasonmatch.dom.snapshot import Element
from seasonmatch.measure.text import TextEvidenceConfig, extract_color_keywords, merge_text_evidence

logger = logging.getLogger(__name__)


IMAGE_TEXT_ATTRIBUTES = ("alt", "title", "data-color", "aria-label")

# Our own rendered swatches, never read back as page text
_OWN_SWATCH_CLASSES = ("season-swatch", "color-swatch", "color-palette-swatch-container")

_TITLE_TAGS = ("h1", "h2", "h3", "h4")


def find_product_card(image: Element) -> Optional[Element]:
    """Nearest ancestor named or marked up as a product."""
    for predicate in (
        lambda el: el.class_contains("product"),
        lambda el: el.has("data-product-id"),
        lambda el: el.tag == "article",
    ):
        for node in image.ancestors():
            if predicate(node):
                return node
    return None


def _is_variant_element(el: Element) -> bool:
    own = any(el.has_class(c) for c in _OWN_SWATCH_CLASSES)
    if el.class_contains("color", "swatch") and not own:
        return True
    if el.class_contains("variant") or el.has("data-color"):
        return True
    if "color" in el.get("aria-label", "").lower():
        return True
    if el.tag == "option" and el.flag("selected"):
        select = el.closest(lambda n: n.tag == "select")
        return select is not None and "color" in select.get("name", "").lower()
    return False


def _variant_text(card: Element) -> str:
    parts = []
    for el in card.find_all(_is_variant_element):
        text = el.text_content.strip()
        if text:
            parts.append(text)
        for attr in ("data-color", "aria-label", "title"):
            value = el.get(attr)
            if value:
                parts.append(value)
    return " ".join(parts)


def _is_title(el: Element) -> bool:
    return el.tag in _TITLE_TAGS or el.class_contains("title", "name")


def _card_texts(scope: Element, config: TextEvidenceConfig) -> list[tuple[str, bool]]:
    """(text, is_title) for the title, description and badge elements of a card."""
    elements = [
        scope.find(_is_title),
        scope.find(lambda el: el.class_contains("description", "detail")),
        *scope.find_all(lambda el: el.class_contains("badge", "label")),
    ]
    elements = [el for el in elements if el is not None][:config.max_elements]
    return [
        (el.text_content.strip()[:config.max_chars_per_element], _is_title(el))
        for el in elements
    ]


def _product_colors(data: Any) -> Iterator[str]:
    """Color values of every Product node in a JSON-LD document."""
    if isinstance(data, list):
        for item in data:
            yield from _product_colors(item)
        return
    if not isinstance(data, dict):
        return
    if "@graph" in data:
        yield from _product_colors(data["@graph"])
    if data.get("@type") == "Product" and data.get("color"):
        color = data["color"]
        for value in color if isinstance(color, list) else [color]:
            if isinstance(value, str):
                yield value


def structured_data_text(root: Element) -> str:
    """Product colors from every JSON-LD block in the page, space-joined."""
    colors: list[str] = []
    for script in root.find_all(lambda el: el.tag == "script" and el.get("type") == "application/ld+json"):
        try:
            data = json.loads(script.text)
        except json.JSONDecodeError as exc:
            logger.debug("Ignoring malformed JSON-LD block: %s", exc)
            continue
        colors.extend(_product_colors(data))
    return " ".join(colors)


def gather_text_evidence(
    image: Element,
    config: Optional[TextEvidenceConfig] = None,
) -> tuple[ColorEvidence, ...]:
    """
    Color-name evidence from every text source around a product image.

    Args:
        image: Product image element
        config: Source confidences and limits (defaults if None)

    Returns:
        Deduplicated evidence, highest confidence first
    """
    cfg = config or TextEvidenceConfig()
    found: list[ColorEvidence] = []

    def scan(text: str, source: TextSource) -> None:
        found.extend(extract_color_keywords(text, source, cfg.confidence_for(source), cfg))

    attrs = " ".join(image.get(a) for a in IMAGE_TEXT_ATTRIBUTES if image.get(a))
    scan(attrs, TextSource.IMAGE_ATTRIBUTE)

    card = find_product_card(image)
    if card is not None:
        scan(_variant_text(card), TextSource.VARIANT_SELECTOR)
        for text, is_title in _card_texts(card, cfg):
            scan(text, TextSource.PRODUCT_TITLE if is_title else TextSource.PRODUCT_DESCRIPTION)
    elif image.parent is not None:
        for text, _ in _card_texts(image.parent, cfg):
            scan(text, TextSource.NEARBY_TEXT)

    scan(structured_data_text(image.root), TextSource.STRUCTURED_DATA)

    merged = merge_text_evidence(found)
    if merged:
        logger.debug("Text color evidence: %s", ", ".join(e.label or "?" for e in merged))
    return merged
