# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
seasonmatch -- Seasonal palette matching for product images.

Decides which color a product on a commerce page actually is, by fusing
image dominant colors with swatch and text evidence, and whether that
color belongs to a seasonal palette.

Quick start::

    from seasonmatch import Element, evaluate

    page = Element.from_dict(snapshot)
    image = page.find(lambda el: el.tag == "img")

    result = evaluate(image, "deep-winter")
    result.matches          # Match decision
    result.final_colors     # Fused, ranked colors
    result.to_json()        # Full result
"""

from __future__ import annotations

import logging

__version__ = "1.0.0"

from seasonmatch.schema import (
    Color,
    ColorEvidence,
    Evaluation,
    EvaluationIssue,
    IssueType,
    MatchResult,
    PageEvaluation,
    Palette,
    SeasonClassification,
    SourceKind,
)
from seasonmatch.dom import Element, ImageResource, Rect
from seasonmatch.measure import MatchPolicy, check_match, classify_seasons, season_compatibility
from seasonmatch.palettes import UnknownPaletteError, get_palette, list_palettes
from seasonmatch.measure.evaluate import EvaluationConfig, evaluate, evaluate_page
from seasonmatch.dom.selection import PageType
from seasonmatch.runtime import SerializerFormat, to_report

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core API
    "evaluate",
    "evaluate_page",
    "EvaluationConfig",
    "PageType",
    "Evaluation",
    "PageEvaluation",
    "to_report",
    "SerializerFormat",
    # Matching
    "check_match",
    "classify_seasons",
    "season_compatibility",
    "MatchPolicy",
    "MatchResult",
    "SeasonClassification",
    # Palettes
    "get_palette",
    "list_palettes",
    "UnknownPaletteError",
    "Palette",
    # Types (commonly needed)
    "Color",
    "ColorEvidence",
    "SourceKind",
    "EvaluationIssue",
    "IssueType",
    # Page snapshot
    "Element",
    "ImageResource",
    "Rect",
    # Version
    "__version__",
]
