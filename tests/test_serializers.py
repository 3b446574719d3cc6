# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for the runtime delivery layer (reports and result tags)."""

import json

from seasonmatch import Color, Element, ImageResource, Rect, evaluate
from seasonmatch.schema import Evaluation, MatchResult
from seasonmatch.runtime import SerializerFormat, apply_result_tags, result_tags, to_report

NAVY = Color.from_hex("#1A2B3C")
BEIGE = Color(200, 200, 195)


def _product_image(width=300, **attributes):
    return Element(
        "img",
        attributes=attributes,
        rect=Rect(0, 0, width, width),
        image=ImageResource(src="product.jpg", natural_width=width, natural_height=width),
    )


def _evaluated(**image_attributes):
    image = _product_image(**image_attributes)
    Element("div", attributes={"class": "product-card"}, children=[
        image,
        Element("span", attributes={"class": "swatch selected"},
                style={"background-color": NAVY.hex}, rect=Rect(0, 320, 30, 30)),
    ])
    return evaluate(image, "deep-winter", dominant_colors=[BEIGE, NAVY], tag=False)


def _skipped():
    image = _product_image(width=60)
    return evaluate(image, "deep-winter", dominant_colors=[NAVY], tag=False)


# ---------------------------------------------------------------------------
# to_report: natural language
# ---------------------------------------------------------------------------

class TestReportNatural:

    def test_header_and_result(self):
        text = to_report(_evaluated())
        assert text.startswith("## Season Match: deep-winter\n")
        assert "**Result:** Match (" in text
        assert "% of checked colors)" in text

    def test_colors_listed_in_order(self):
        text = to_report(_evaluated())
        lines = [line for line in text.splitlines() if line[:2] in ("1.", "2.")]
        assert NAVY.hex in lines[0]
        assert BEIGE.hex in lines[1]
        assert "ΔE" in lines[0]

    def test_selected_swatch(self):
        text = to_report(_evaluated())
        assert "**Selected swatch:**" in text
        assert "inline-style" in text
        assert "tier 2" in text

    def test_text_mentions(self):
        text = to_report(_evaluated(alt="Navy blue wool coat"))
        assert "**Text mentions:** navy blue (image-attribute)" in text

    def test_evidence_omitted(self):
        text = to_report(_evaluated(), include_evidence=False)
        assert "**Selected swatch:**" not in text

    def test_best_suits(self):
        text = to_report(_evaluated())
        assert "**Best suits:**" in text

    def test_skipped(self):
        text = to_report(_skipped())
        assert "**Result:** Skipped" in text
        assert "- IMAGE_TOO_SMALL:" in text
        assert "**Colors:**" not in text

    def test_no_colors(self):
        evaluation = Evaluation(palette_key="soft-summer", match=MatchResult(False, 0, 0))
        text = to_report(evaluation)
        assert "**Result:** No match (0% of checked colors)" in text
        assert "(none)" in text


# ---------------------------------------------------------------------------
# to_report: JSON
# ---------------------------------------------------------------------------

class TestReportJSON:

    def test_compact(self):
        evaluation = _evaluated()
        text = to_report(evaluation, format=SerializerFormat.JSON)
        assert "\n" not in text
        assert json.loads(text) == json.loads(evaluation.to_json())

    def test_pretty(self):
        text = to_report(_evaluated(), format=SerializerFormat.JSON_PRETTY)
        assert "\n  " in text
        data = json.loads(text)
        assert data["palette"] == "deep-winter"
        assert data["final_colors"][0] == NAVY.hex

    def test_skipped_has_null_match(self):
        data = json.loads(to_report(_skipped(), format=SerializerFormat.JSON))
        assert data["match"] is None
        assert data["issues"][0]["type"] == "IMAGE_TOO_SMALL"


# ---------------------------------------------------------------------------
# Result tags
# ---------------------------------------------------------------------------

class TestResultTags:

    def test_tags(self):
        evaluation = _evaluated()
        tags = result_tags(evaluation)
        assert tags["data-season-match"] == "true"
        assert tags["data-match-score"] == f"{evaluation.match.confidence_percent:.0f}"
        assert json.loads(tags["data-dominant-colors"]) == [NAVY.hex, BEIGE.hex]

    def test_no_match(self):
        evaluation = Evaluation(palette_key="soft-summer", match=MatchResult(False, 0, 0))
        tags = result_tags(evaluation)
        assert tags["data-season-match"] == "false"
        assert tags["data-match-score"] == "0"
        assert tags["data-dominant-colors"] == "[]"

    def test_skipped_has_no_tags(self):
        assert result_tags(_skipped()) == {}

    def test_apply_is_idempotent(self):
        element = Element("img")
        evaluation = _evaluated()
        apply_result_tags(element, evaluation)
        first = dict(element.result_tags)
        apply_result_tags(element, evaluation)
        assert element.result_tags == first

    def test_apply_skipped_leaves_element(self):
        element = Element("img")
        assert apply_result_tags(element, _skipped()) == {}
        assert element.result_tags == {}
