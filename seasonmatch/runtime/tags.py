# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Result tags written onto the product image element.

Tags are the only thing the engine writes into a page snapshot. Writing
the tags of the same evaluation twice leaves the element unchanged.
"""

from __future__ import annotations

import json

from seasonmatch.schema import Evaluation
from seasonmatch.dom.snapshot import Element

SEASON_MATCH = "data-season-match"
MATCH_SCORE = "data-match-score"
DOMINANT_COLORS = "data-dominant-colors"

# Colors listed in the dominant-colors tag
TAGGED_COLORS = 3


def result_tags(evaluation: Evaluation) -> dict[str, str]:
    """Tags for an evaluation; empty for a skipped image."""
    if evaluation.match is None:
        return {}
    return {
        SEASON_MATCH: "true" if evaluation.match.matches else "false",
        MATCH_SCORE: f"{evaluation.match.confidence_percent:.0f}",
        DOMINANT_COLORS: json.dumps([c.hex for c in evaluation.final_colors[:TAGGED_COLORS]]),
    }


def apply_result_tags(element: Element, evaluation: Evaluation) -> dict[str, str]:
    tags = result_tags(evaluation)
    if tags:
        element.tag_result(tags)
    return tags
