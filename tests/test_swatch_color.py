# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for swatch color extraction and swatch metadata."""

import numpy as np
import pytest

from seasonmatch.schema import Color, SourceKind, SwatchCandidate
from seasonmatch.dom.snapshot import Element, ImageResource, Rect
from seasonmatch.dom.swatch_color import (
    ExtractionConfig,
    color_from_label,
    describe_swatch,
    extract_swatch_color,
    extract_swatch_image,
    extract_swatch_label,
    is_pattern_swatch,
    is_swatch_disabled,
)

NAVY = Color(26, 43, 60)


def _solid_image(rgb, size=20, **kwargs):
    pixels = np.full((size, size, 3), rgb, dtype=np.uint8)
    return ImageResource(src="swatch.png", natural_width=size, natural_height=size, pixels=pixels, **kwargs)


def _candidate(element):
    return SwatchCandidate(element=element, rect=element.rect)


class TestCascade:
    """Each method in order, first hit wins."""

    def test_inline_background(self):
        ev = extract_swatch_color(Element("span", style={"background-color": "#1A2B3C"}))
        assert ev.color == NAVY
        assert ev.source_kind == SourceKind.INLINE_STYLE
        assert ev.confidence == pytest.approx(0.95)

    def test_inline_accepts_neutral(self):
        ev = extract_swatch_color(Element("span", style="background-color: #FFFFFF"))
        assert ev.color == Color(255, 255, 255)

    def test_computed_background(self):
        ev = extract_swatch_color(Element("span", computed={"background-color": "rgb(26, 43, 60)"}))
        assert ev.source_kind == SourceKind.COMPUTED_STYLE
        assert ev.confidence == pytest.approx(0.85)

    def test_computed_neutral_rejected(self):
        el = Element("span", computed={
            "background-color": "rgb(250, 250, 250)",
            "border-color": "rgb(2, 2, 2)",
        })
        assert extract_swatch_color(el) is None

    def test_nested_child(self):
        child = Element("span", attributes={"class": "swatch-color"}, style={"background-color": "#C04000"})
        ev = extract_swatch_color(Element("label", children=[child]))
        assert ev.color == Color.from_hex("#C04000")
        assert ev.source_kind == SourceKind.NESTED_ELEMENT
        assert ev.confidence == pytest.approx(0.95 * 0.9)

    def test_nested_neutral_rejected(self):
        child = Element("span", attributes={"class": "swatch-inner"}, style={"background-color": "rgb(252, 252, 252)"})
        assert extract_swatch_color(Element("label", children=[child])) is None

    def test_data_attribute(self):
        ev = extract_swatch_color(Element("button", attributes={"data-color": "#0047AB"}))
        assert ev.color == Color.from_hex("#0047AB")
        assert ev.source_kind == SourceKind.DATA_ATTRIBUTE
        assert ev.confidence == pytest.approx(0.8)

    def test_data_attribute_neutral_rejected(self):
        assert extract_swatch_color(Element("button", attributes={"data-hex": "#808080"})) is None

    def test_data_attribute_color_name_ignored(self):
        assert extract_swatch_color(Element("button", attributes={"data-color": "navy"})) is None

    def test_border(self):
        ev = extract_swatch_color(Element("span", computed={"border-color": "rgb(200, 30, 40)"}))
        assert ev.source_kind == SourceKind.BORDER
        assert ev.confidence == pytest.approx(0.6)

    @pytest.mark.parametrize("border", ["rgb(128, 128, 130)", "rgb(252, 252, 251)", "rgb(3, 2, 4)"])
    def test_border_neutral_rejected(self, border):
        assert extract_swatch_color(Element("span", computed={"border-color": border})) is None

    def test_image(self):
        img = Element("img", image=_solid_image((200, 30, 40)))
        ev = extract_swatch_color(img)
        assert ev.color == Color(200, 30, 40)
        assert ev.source_kind == SourceKind.IMAGE_SAMPLE
        assert ev.confidence == pytest.approx(0.75)

    def test_cross_origin_image_yields_nothing(self):
        img = Element("img", image=_solid_image((200, 30, 40), cross_origin=True))
        assert extract_swatch_color(img) is None

    def test_neutral_image_rejected(self):
        assert extract_swatch_color(Element("img", image=_solid_image((255, 255, 255)))) is None

    def test_radio_value(self):
        radio = Element("input", attributes={"type": "radio", "value": "#1A2B3C"})
        ev = extract_swatch_color(radio)
        assert ev.source_kind == SourceKind.VALUE_FIELD
        assert ev.confidence == pytest.approx(0.7)

    def test_inline_beats_data_attribute(self):
        el = Element("span", attributes={"data-color": "#0047AB"}, style={"background-color": "#1A2B3C"})
        assert extract_swatch_color(el).source_kind == SourceKind.INLINE_STYLE

    def test_nothing_found(self):
        assert extract_swatch_color(Element("span", text="Navy")) is None

    def test_custom_confidence(self):
        cfg = ExtractionConfig(inline_confidence=0.5)
        ev = extract_swatch_color(Element("span", style={"background-color": "#1A2B3C"}), config=cfg)
        assert ev.confidence == pytest.approx(0.5)


class TestLabels:

    def test_aria_label_capitalized_run(self):
        el = Element("button", attributes={"aria-label": "select Forest Green variant"})
        assert extract_swatch_label(el) == "Forest Green"

    def test_title(self):
        assert extract_swatch_label(Element("span", attributes={"title": "Burgundy"})) == "Burgundy"

    def test_short_text(self):
        assert extract_swatch_label(Element("span", text="Sage")) == "Sage"

    def test_img_alt(self):
        assert extract_swatch_label(Element("img", attributes={"alt": "Cobalt"})) == "Cobalt"

    def test_data_name(self):
        el = Element("span", attributes={"data-color-name": "Camel"})
        assert extract_swatch_label(el) == "Camel"

    def test_color_from_label(self):
        assert color_from_label("Burgundy") == Color.from_hex("#800020")
        assert color_from_label("Deep burgundy velvet") == Color.from_hex("#800020")
        assert color_from_label("Midnight Dream") is None
        assert color_from_label(None) is None


class TestFlags:

    def test_disabled_attribute(self):
        assert is_swatch_disabled(Element("button", attributes={"disabled": ""}))

    def test_sold_out_class(self):
        assert is_swatch_disabled(Element("span", attributes={"class": "swatch sold-out"}))

    def test_faded(self):
        assert is_swatch_disabled(Element("span", computed={"opacity": "0.3"}))

    def test_available(self):
        assert not is_swatch_disabled(Element("span", attributes={"class": "swatch"}))

    def test_pattern_background_image(self):
        assert is_pattern_swatch(Element("span", style={"background-image": "url(stripe.png)"}))

    def test_pattern_label(self):
        assert is_pattern_swatch(Element("span", attributes={"title": "Floral Print"}))

    def test_swatch_image(self):
        el = Element("span", style={"background-image": "url('swatches/plaid.jpg')"})
        assert extract_swatch_image(el) == "swatches/plaid.jpg"


class TestDescribeSwatch:

    def test_cascade_hit_keeps_label(self):
        el = Element("span", attributes={"title": "Navy"}, style={"background-color": "#1A2B3C"})
        desc = describe_swatch(_candidate(el), 3)
        assert desc.index == 3
        assert desc.label == "Navy"
        assert desc.evidence.color == NAVY
        assert desc.evidence.label == "Navy"
        assert desc.confidence == pytest.approx(0.95)

    def test_label_fallback(self):
        el = Element("span", attributes={"title": "Burgundy"})
        desc = describe_swatch(_candidate(el), 0)
        assert desc.evidence.source_kind == SourceKind.TEXT_DICTIONARY
        assert desc.evidence.color == Color.from_hex("#800020")
        assert desc.confidence == pytest.approx(0.7)

    def test_background_image_only(self):
        el = Element("span", style={"background-image": "url(x.png)"})
        desc = describe_swatch(_candidate(el), 0)
        assert desc.evidence.source_kind == SourceKind.BACKGROUND_IMAGE_ONLY
        assert desc.evidence.color is None
        assert desc.is_pattern
        assert desc.image_src == "x.png"
        assert desc.confidence == pytest.approx(0.4)

    def test_no_evidence(self):
        desc = describe_swatch(_candidate(Element("span", rect=Rect(0, 0, 30, 30))), 0)
        assert desc.evidence is None
        assert desc.confidence == 0.0
