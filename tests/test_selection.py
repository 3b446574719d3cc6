# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for the selected-swatch cascade."""

from seasonmatch.schema import SelectionTier
from seasonmatch.dom.snapshot import Element, Rect
from seasonmatch.dom.selection import (
    PageType,
    SelectionConfig,
    find_swatch_rows,
    is_visually_emphasized,
    resolve_selected_swatch,
)


def _swatch(cls="swatch", left=0, top=400, size=30, **attributes):
    attributes["class"] = cls
    return Element("span", attributes=attributes, rect=Rect(left, top, size, size))


def _radio(**attributes):
    attributes.setdefault("type", "radio")
    attributes.setdefault("name", "color")
    return Element("input", attributes=attributes)


class TestNativeControl:

    def test_label_for_checked_radio(self):
        label = Element("label", attributes={"for": "c1"}, rect=Rect(0, 400, 30, 30))
        active = _swatch("swatch active", left=40)
        container = Element("div", children=[_radio(id="c1", checked=""), label, active])
        result = resolve_selected_swatch(container)
        assert result.tier == SelectionTier.NATIVE_CONTROL
        assert result.element is label

    def test_enclosing_label(self):
        radio = _radio(checked="")
        label = Element("label", rect=Rect(0, 400, 30, 30), children=[radio])
        result = resolve_selected_swatch(Element("div", children=[label]))
        assert result.element is label

    def test_next_sibling(self):
        sibling = _swatch(left=0)
        container = Element("fieldset", rect=Rect(0, 0, 600, 600), children=[_radio(checked=""), sibling])
        assert resolve_selected_swatch(container).element is sibling

    def test_unchecked_ignored(self):
        label = Element("label", attributes={"for": "c1"}, rect=Rect(0, 400, 30, 30))
        container = Element("div", children=[_radio(id="c1"), label])
        assert resolve_selected_swatch(container) is None

    def test_disabled_radio_skipped(self):
        label = Element("label", attributes={"for": "c1"}, rect=Rect(0, 400, 30, 30))
        active = _swatch("swatch active", left=40)
        container = Element("div", children=[_radio(id="c1", checked="", disabled=""), label, active])
        result = resolve_selected_swatch(container)
        assert result.tier == SelectionTier.CLASS_NAME
        assert result.element is active

    def test_color_name_before_variant_name(self):
        variant_label = Element("label", attributes={"for": "v1"}, rect=Rect(0, 400, 30, 30))
        color_label = Element("label", attributes={"for": "c1"}, rect=Rect(40, 400, 30, 30))
        container = Element("div", children=[
            _radio(id="v1", name="variant-size", checked=""), variant_label,
            _radio(id="c1", name="Color", checked=""), color_label,
        ])
        assert resolve_selected_swatch(container).element is color_label


class TestClassName:

    def test_exact_classes(self):
        plain = _swatch("swatch", left=0)
        chosen = _swatch("swatch selected", left=40)
        container = Element("div", children=[plain, chosen])
        result = resolve_selected_swatch(container)
        assert result.tier == SelectionTier.CLASS_NAME
        assert result.element is chosen

    def test_bem_modifier(self):
        chosen = _swatch("product-swatch product-swatch--selected")
        assert resolve_selected_swatch(Element("div", children=[chosen])).element is chosen

    def test_sold_out_skipped(self):
        sold = _swatch("swatch selected sold-out")
        assert resolve_selected_swatch(Element("div", children=[sold])) is None

    def test_invalid_size_skipped(self):
        huge = _swatch("swatch selected", size=300)
        assert resolve_selected_swatch(Element("div", children=[huge])) is None


class TestAriaAndData:

    def test_aria_radio(self):
        el = Element("div", attributes={"role": "radio", "aria-checked": "true"}, rect=Rect(0, 0, 30, 30))
        result = resolve_selected_swatch(Element("div", children=[el]))
        assert result.tier == SelectionTier.ARIA_STATE
        assert result.element is el

    def test_aria_false_ignored(self):
        el = Element("div", attributes={"role": "radio", "aria-checked": "false"}, rect=Rect(0, 0, 30, 30))
        assert resolve_selected_swatch(Element("div", children=[el])) is None

    def test_aria_current_swatch(self):
        el = _swatch("color-chip", **{"aria-current": "true"})
        assert resolve_selected_swatch(Element("div", children=[el])).tier == SelectionTier.ARIA_STATE

    def test_data_selected(self):
        el = _swatch("color-chip", **{"data-selected": "true"})
        result = resolve_selected_swatch(Element("div", children=[el]))
        assert result.tier == SelectionTier.DATA_STATE
        assert result.element is el

    def test_data_state_needs_swatch_context(self):
        el = Element("div", attributes={"data-state": "active"}, rect=Rect(0, 0, 30, 30))
        assert resolve_selected_swatch(Element("div", children=[el])) is None


class TestVisualStyle:

    def test_thick_border(self):
        thin = _swatch(left=0)
        thin.computed["border-width"] = "1px"
        thick = _swatch(left=40)
        thick.computed["border-width"] = "2px"
        result = resolve_selected_swatch(Element("div", children=[thin, thick]))
        assert result.tier == SelectionTier.VISUAL_STYLE
        assert result.element is thick

    def test_emphasis_signals(self):
        assert is_visually_emphasized(Element("span", computed={"outline": "2px solid black"}))
        assert is_visually_emphasized(Element("span", computed={"box-shadow": "inset 0 0 0 2px #000"}))
        assert is_visually_emphasized(Element("span", computed={"transform": "scale(1.1)"}))
        assert not is_visually_emphasized(Element("span", computed={"outline": "none", "transform": "none"}))

    def test_own_ui_skipped(self):
        el = _swatch("season-color-swatch")
        el.computed["border-width"] = "3px"
        assert resolve_selected_swatch(Element("div", children=[el])) is None


class TestListingLayout:

    def _listing(self, row_top=310):
        image = Element("img", rect=Rect(0, 0, 200, 300))
        row = [Element("img", rect=Rect(40 * i, row_top, 30, 30)) for i in range(3)]
        container = Element("div", children=[image, *row])
        return container, image, row

    def test_row_below_image(self):
        container, image, row = self._listing()
        result = resolve_selected_swatch(container, image, PageType.LISTING)
        assert result.tier == SelectionTier.LISTING_LAYOUT
        assert result.element is row[0]

    def test_detail_page_has_no_layout_tier(self):
        container, image, _ = self._listing()
        assert resolve_selected_swatch(container, image, PageType.DETAIL) is None

    def test_row_too_far(self):
        container, image, _ = self._listing(row_top=600)
        assert resolve_selected_swatch(container, image, PageType.LISTING) is None

    def test_explicit_selection_wins(self):
        container, image, _ = self._listing()
        chosen = container.append(_swatch("swatch active", left=300, top=310))
        result = resolve_selected_swatch(container, image, PageType.LISTING)
        assert result.element is chosen

    def test_rows_need_uniform_size(self):
        row = [Element("img", rect=Rect(40 * i, 310, 20 + 15 * i, 20 + 15 * i)) for i in range(3)]
        assert find_swatch_rows(Element("div", children=row)) == []

    def test_rows_need_square_images(self):
        row = [Element("img", rect=Rect(60 * i, 310, 50, 20)) for i in range(3)]
        assert find_swatch_rows(Element("div", children=row)) == []

    def test_custom_distance(self):
        container, image, _ = self._listing(row_top=330)
        cfg = SelectionConfig(max_row_distance=20)
        assert resolve_selected_swatch(container, image, PageType.LISTING, cfg) is None
