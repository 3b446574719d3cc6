# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for schema types and serialization."""

import json

import pytest

from seasonmatch.schema import (
    Color,
    ColorEvidence,
    ColorMatchDetail,
    Evaluation,
    EvaluationIssue,
    IssueType,
    MatchResult,
    PageEvaluation,
    Palette,
    SourceKind,
    TextMention,
    TextSource,
    WeightedColor,
)
from seasonmatch.dom.snapshot import Element


class TestColor:

    def test_from_dict_roundtrip(self):
        c = Color(26, 43, 60)
        assert Color.from_dict(c.to_dict()) == c

    def test_from_dict_hex_only(self):
        assert Color.from_dict({"hex": "#1A2B3C"}) == Color(26, 43, 60)

    def test_hashable(self):
        assert len({Color(1, 2, 3), Color(1, 2, 3)}) == 1


class TestColorEvidence:

    def test_invalid_confidence(self):
        with pytest.raises(ValueError, match="Confidence"):
            ColorEvidence(Color(0, 0, 0), 1.2, SourceKind.INLINE_STYLE)

    def test_colorless_requires_pattern(self):
        with pytest.raises(ValueError, match="is_pattern"):
            ColorEvidence(None, 0.4, SourceKind.BACKGROUND_IMAGE_ONLY)

    def test_nested(self):
        ev = ColorEvidence(Color(1, 2, 3), 0.8, SourceKind.DATA_ATTRIBUTE).nested(0.9)
        assert ev.confidence == pytest.approx(0.72)
        assert ev.source_kind == SourceKind.NESTED_ELEMENT

    def test_to_dict(self):
        mention = TextMention("navy", TextSource.PRODUCT_TITLE, count=2)
        ev = ColorEvidence(Color(0, 0, 128), 0.7, SourceKind.TEXT_DICTIONARY, label="navy", mention=mention)
        d = ev.to_dict()
        assert d["color"] == "#000080"
        assert d["source"] == "text-dictionary"
        assert d["label"] == "navy"
        assert d["mention"]["count"] == 2
        assert "is_pattern" not in d


class TestTextMention:

    def test_invalid_count(self):
        with pytest.raises(ValueError, match="count"):
            TextMention("red", TextSource.PRODUCT_TITLE, count=0)


class TestWeightedColor:

    def test_negative_weight(self):
        with pytest.raises(ValueError, match="Weight"):
            WeightedColor(Color(0, 0, 0), weight=-1.0)

    def test_to_dict(self):
        d = WeightedColor(Color(0, 0, 0), weight=2.123456, original_index=0).to_dict()
        assert d == {"color": "#000000", "weight": 2.1235, "original_index": 0, "evidence": None}


class TestMatchResult:

    def test_count_bounds(self):
        with pytest.raises(ValueError, match="match_count"):
            MatchResult(matches=True, match_count=3, total_checked=2)

    def test_json(self):
        detail = ColorMatchDetail(Color(0, 0, 0), Color(0, 0, 0), 0.0, True)
        result = MatchResult(True, 1, 1, (detail,), 100.0)
        data = json.loads(result.to_json())
        assert data["matches"] is True
        assert data["match_count"] == 1


class TestPalette:

    def test_requires_key(self):
        with pytest.raises(ValueError, match="key"):
            Palette(key="", name="Nameless", colors=(Color(0, 0, 0),))

    def test_to_dict(self):
        d = Palette("k", "K", (Color(0, 0, 0),)).to_dict()
        assert d["colors"] == ["#000000"]


class TestEvaluationIssue:

    def test_to_dict(self):
        issue = EvaluationIssue(IssueType.NO_SWATCHES_FOUND, "none", {"container_size": 3})
        assert issue.to_dict() == {
            "type": "NO_SWATCHES_FOUND",
            "message": "none",
            "context": {"container_size": 3},
        }


class TestPageEvaluation:

    def _evaluations(self):
        matched = Evaluation("deep-winter", MatchResult(True, 1, 2))
        unmatched = Evaluation("deep-winter", MatchResult(False, 0, 2))
        skipped = Evaluation("deep-winter", None)
        return (matched, unmatched, skipped)

    def test_stats(self):
        page = PageEvaluation(evaluations=self._evaluations())
        assert page.total_images == 2
        assert page.matching_images == 1
        assert page.skipped_images == 1
        assert page.total_swatches == 0

    def test_images_must_align(self):
        with pytest.raises(ValueError, match="differ in length"):
            PageEvaluation(evaluations=self._evaluations(), images=(Element("img"),))

    def test_json(self):
        data = json.loads(PageEvaluation(evaluations=self._evaluations()).to_json())
        assert data["stats"]["matching_images"] == 1
        assert len(data["evaluations"]) == 3
        assert data["swatches"] is None
