# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Evaluation report serializer.

Renders an Evaluation as a short human-readable summary ("best suits
Deep Winter") or as JSON for logging and downstream tools.
"""

from __future__ import annotations

import json

from seasonmatch.runtime.serializers.base import SerializerFormat
from seasonmatch.schema import Color, Evaluation
from seasonmatch.measure.vocabulary import nearest_color_name


def to_report(
    evaluation: Evaluation,
    *,
    format: SerializerFormat = SerializerFormat.NATURAL,
    include_evidence: bool = True,
) -> str:
    """Serialize an Evaluation as a report.

    Args:
        evaluation: The Evaluation to serialize.
        format: NATURAL (human-readable), JSON or JSON_PRETTY.
        include_evidence: List swatch and text evidence (NATURAL only).

    Returns:
        Report string.

    Example (NATURAL)::

        ## Season Match: deep-winter

        **Result:** Match (50% of checked colors)

        **Colors:**
        1. Navy #1A2B3C (ΔE 4.1 to #1B1F3B)
        2. Beige #C8C8C3 (ΔE 27.3 to #FFFFFF)

        **Best suits:** Deep Winter (also: Cool Winter)
    """
    if format == SerializerFormat.JSON:
        return evaluation.to_json()
    if format == SerializerFormat.JSON_PRETTY:
        return evaluation.to_json(indent=2)
    return _to_natural(evaluation, include_evidence)


def _to_natural(evaluation: Evaluation, include_evidence: bool) -> str:
    lines: list[str] = [f"## Season Match: {evaluation.palette_key}", ""]

    match = evaluation.match
    if match is None:
        lines.append("**Result:** Skipped")
        for issue in evaluation.issues:
            lines.append(f"- {issue.type.value}: {issue.message}")
        return "\n".join(lines)

    verdict = "Match" if match.matches else "No match"
    lines.append(f"**Result:** {verdict} ({match.confidence_percent:.0f}% of checked colors)")
    lines.append("")

    lines.append("**Colors:**")
    details = {d.color: d for d in match.details}
    for i, color in enumerate(evaluation.final_colors, 1):
        detail = details.get(color)
        line = f"{i}. {_describe_color(color)}"
        if detail is not None:
            line += f" (ΔE {detail.delta_e:.1f} to {detail.closest_palette_color.hex})"
        lines.append(line)
    if not evaluation.final_colors:
        lines.append("(none)")
    lines.append("")

    if include_evidence:
        swatch = evaluation.swatch_evidence
        if swatch is not None and swatch.color is not None:
            tier = evaluation.selected_swatch.tier if evaluation.selected_swatch else None
            via = f", tier {int(tier)}" if tier is not None else ""
            lines.append(
                f"**Selected swatch:** {_describe_color(swatch.color)} "
                f"({swatch.source_kind.value}, confidence {swatch.confidence:.2f}{via})"
            )
        if evaluation.text_evidence:
            names = ", ".join(
                f"{e.label} ({e.mention.source.value if e.mention else e.source_kind.value})"
                for e in evaluation.text_evidence
            )
            lines.append(f"**Text mentions:** {names}")
        if swatch is not None or evaluation.text_evidence:
            lines.append("")

    classification = evaluation.classification
    if classification is not None and classification.primary is not None:
        if classification.no_match:
            lines.append("**Best suits:** no seasonal palette")
        else:
            also = ", ".join(s.palette.name for s in classification.secondary)
            suffix = f" (also: {also})" if also else ""
            lines.append(f"**Best suits:** {classification.primary.palette.name}{suffix}")

    return "\n".join(lines).rstrip() + "\n"


def _describe_color(color: Color) -> str:
    return f"{nearest_color_name(color).title()} {color.hex}"
