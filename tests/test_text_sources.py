# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for gathering text evidence around a product image."""

import json

import pytest

from seasonmatch.schema import TextSource
from seasonmatch.dom.snapshot import Element, Rect
from seasonmatch.dom.text_sources import (
    find_product_card,
    gather_text_evidence,
    structured_data_text,
)


def _json_ld(data):
    text = data if isinstance(data, str) else json.dumps(data)
    return Element("script", attributes={"type": "application/ld+json"}, text=text)


def _by_label(evidence):
    return {e.label: e for e in evidence}


class TestFindProductCard:

    def test_product_class(self):
        image = Element("img")
        card = Element("div", attributes={"class": "product-tile"}, children=[Element("div", children=[image])])
        assert find_product_card(image) is card

    def test_product_id_attribute(self):
        image = Element("img")
        card = Element("li", attributes={"data-product-id": "7"}, children=[image])
        assert find_product_card(image) is card

    def test_none(self):
        image = Element("img")
        Element("div", children=[image])
        assert find_product_card(image) is None


class TestStructuredData:

    def test_product_color(self):
        root = Element("html", children=[_json_ld({"@type": "Product", "name": "Coat", "color": "Navy"})])
        assert structured_data_text(root) == "Navy"

    def test_graph_and_lists(self):
        root = Element("html", children=[_json_ld({"@graph": [
            {"@type": "BreadcrumbList"},
            {"@type": "Product", "color": ["Sage", "Cream"]},
        ]})])
        assert structured_data_text(root) == "Sage Cream"

    def test_malformed_block_ignored(self):
        root = Element("html", children=[
            _json_ld("{not json"),
            _json_ld([{"@type": "Product", "color": "Rust"}]),
        ])
        assert structured_data_text(root) == "Rust"

    def test_other_scripts_ignored(self):
        root = Element("html", children=[Element("script", text='{"@type": "Product", "color": "Red"}')])
        assert structured_data_text(root) == ""


class TestGatherTextEvidence:

    def _page(self):
        image = Element(
            "img",
            attributes={"alt": "Burgundy wool coat"},
            rect=Rect(0, 0, 300, 400),
        )
        card = Element("article", children=[
            image,
            Element("h2", text="Classic Coat in Burgundy"),
            Element("p", attributes={"class": "product-description"}, text="Lined with cream satin."),
        ])
        root = Element("html", children=[
            Element("body", children=[card]),
            _json_ld({"@type": "Product", "color": "Navy"}),
        ])
        return root, image

    def test_sources_and_confidences(self):
        _, image = self._page()
        evidence = _by_label(gather_text_evidence(image))
        assert set(evidence) == {"burgundy", "navy", "cream"}
        assert evidence["burgundy"].confidence == pytest.approx(0.9)
        assert evidence["burgundy"].mention.source == TextSource.IMAGE_ATTRIBUTE
        assert evidence["navy"].mention.source == TextSource.STRUCTURED_DATA
        assert evidence["cream"].mention.source == TextSource.PRODUCT_DESCRIPTION

    def test_counts_merged_across_sources(self):
        _, image = self._page()
        evidence = _by_label(gather_text_evidence(image))
        assert evidence["burgundy"].mention.count == 2

    def test_highest_confidence_first(self):
        _, image = self._page()
        confidences = [e.confidence for e in gather_text_evidence(image)]
        assert confidences == sorted(confidences, reverse=True)

    def test_variant_selector(self):
        image = Element("img")
        Element("div", attributes={"class": "product-card"}, children=[
            image,
            Element("span", attributes={"class": "selected-variant"}, text="Forest Green"),
        ])
        (evidence,) = gather_text_evidence(image)
        assert evidence.label == "forest green"
        assert evidence.mention.source == TextSource.VARIANT_SELECTOR
        assert evidence.confidence == pytest.approx(0.8)

    def test_nearby_text_without_card(self):
        image = Element("img")
        Element("div", children=[image, Element("h3", text="Mustard beanie")])
        (evidence,) = gather_text_evidence(image)
        assert evidence.label == "mustard"
        assert evidence.mention.source == TextSource.NEARBY_TEXT
        assert evidence.confidence == pytest.approx(0.4)

    def test_no_text(self):
        image = Element("img")
        Element("div", children=[image])
        assert gather_text_evidence(image) == ()
