# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Schema definitions for color evidence and match results.

All types in this module are immutable (frozen dataclasses).
Apart from Palette, every value is produced for a single product
evaluation and never cached across evaluations.
"""

from seasonmatch.schema.color_evidence import (
    Color,
    ColorEvidence,
    ColorMatchDetail,
    Compatibility,
    CompatibilityType,
    Evaluation,
    EvaluationIssue,
    IssueType,
    MatchResult,
    Palette,
    PageEvaluation,
    SeasonClassification,
    SeasonScore,
    SelectedSwatchResult,
    SelectionTier,
    SourceKind,
    SwatchCandidate,
    SwatchDescription,
    SwatchReport,
    TextMention,
    TextSource,
    WeightedColor,
)

__all__ = [
    # Core types
    "Color",
    "Palette",
    # Evidence
    "SourceKind",
    "TextSource",
    "TextMention",
    "ColorEvidence",
    # Swatches
    "SwatchCandidate",
    "SelectionTier",
    "SelectedSwatchResult",
    "SwatchDescription",
    "SwatchReport",
    # Issues
    "IssueType",
    "EvaluationIssue",
    # Fusion and matching
    "WeightedColor",
    "ColorMatchDetail",
    "MatchResult",
    "SeasonScore",
    "SeasonClassification",
    "CompatibilityType",
    "Compatibility",
    # Top-level container
    "Evaluation",
    "PageEvaluation",
]
