# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Swatch report: every swatch in a container, described and filtered.

Given a palette, each swatch color is also matched against it so a page
can mark which of its color options suit the shopper.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from seasonmatch.schema import (
    ColorMatchDetail,
    EvaluationIssue,
    IssueType,
    Palette,
    SwatchDescription,
    SwatchReport,
)
from seasonmatch.dom.snapshot import Element
from seasonmatch.dom.discovery import DiscoveryConfig, discover_swatches
from seasonmatch.dom.selection import PageType, SelectionConfig, resolve_selected_swatch
from seasonmatch.dom.swatch_color import ExtractionConfig, describe_swatch
from seasonmatch.measure.matching import MatchPolicy, closest_match
from seasonmatch.measure.sampler import ColorSampler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportConfig:
    """
    Swatch report filtering.

    Attributes:
        min_confidence: Drop swatches whose evidence confidence is lower
        max_swatches: Cap on reported swatches
        include_disabled: Keep sold-out / unavailable swatches
        include_patterns: Keep pattern swatches
        match: Palette match policy; its ΔE threshold applies per swatch
    """
    min_confidence: float = 0.3
    max_swatches: int = 50
    include_disabled: bool = False
    include_patterns: bool = True
    match: MatchPolicy = field(default_factory=MatchPolicy)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be 0-1, got {self.min_confidence}")
        if self.max_swatches < 1:
            raise ValueError(f"max_swatches must be >= 1, got {self.max_swatches}")


def _keep(swatch: SwatchDescription, cfg: ReportConfig) -> bool:
    if swatch.confidence < cfg.min_confidence:
        return False
    if swatch.is_disabled and not cfg.include_disabled:
        return False
    return cfg.include_patterns or not swatch.is_pattern


def _selected_index(swatches: list[SwatchDescription], selected: Optional[Element]) -> int:
    if selected is None:
        return -1
    for i, swatch in enumerate(swatches):
        el = swatch.candidate.element
        if el is selected or el.contains(selected) or selected.contains(el):
            return i
    return -1


def match_swatch(
    swatch: SwatchDescription,
    palette: Palette,
    policy: Optional[MatchPolicy] = None,
) -> SwatchDescription:
    """
    Match a swatch's color against a palette.

    Swatches without a solid color (patterns, unreadable images) come back
    unchanged with ``palette_match`` None.
    """
    if swatch.evidence is None or swatch.evidence.color is None:
        return swatch
    cfg = policy or MatchPolicy()
    color = swatch.evidence.color
    nearest = closest_match(color, palette, threshold=cfg.delta_e_threshold)
    detail = ColorMatchDetail(color, nearest.closest_color, nearest.delta_e, nearest.is_match)
    return replace(swatch, palette_match=detail)


def report_swatches(
    container: Element,
    *,
    image: Optional[Element] = None,
    page_type: PageType = PageType.DETAIL,
    sampler: Optional[ColorSampler] = None,
    palette: Optional[Palette] = None,
    config: Optional[ReportConfig] = None,
) -> SwatchReport:
    """
    Describe every swatch in a container.

    Swatches below ``min_confidence``, disabled swatches and (optionally)
    pattern swatches are dropped. The selected swatch is resolved with the
    selection cascade and marked.

    Args:
        container: Element holding the swatches
        image: Product image, for the listing layout tier
        page_type: Page kind passed to the selection cascade
        sampler: Image sampler for image swatches
        palette: Match every swatch color against this palette
        config: Report settings (defaults if None)

    Returns:
        SwatchReport; an empty container yields a NO_SWATCHES_FOUND issue
    """
    cfg = config or ReportConfig()
    issues: list[EvaluationIssue] = []

    candidates = discover_swatches(container, cfg.discovery)
    if not candidates:
        logger.debug("No swatches in <%s> (%s)", container.tag, container.rect.size)
        issue = EvaluationIssue(
            IssueType.NO_SWATCHES_FOUND,
            "No color swatches detected in container",
            {"container_size": container.rect.size},
        )
        return SwatchReport(swatches=(), issues=(issue,))

    swatches: list[SwatchDescription] = []
    for index, candidate in enumerate(candidates):
        try:
            swatch = describe_swatch(candidate, index, sampler=sampler, config=cfg.extraction)
        except ValueError as exc:
            issues.append(EvaluationIssue(
                IssueType.METADATA_EXTRACTION_FAILED, str(exc), {"element_index": index},
            ))
            continue
        if _keep(swatch, cfg):
            if palette is not None:
                swatch = match_swatch(swatch, palette, cfg.match)
            swatches.append(swatch)
        if len(swatches) >= cfg.max_swatches:
            break

    selected = resolve_selected_swatch(
        container, image, page_type, cfg.selection, cfg.discovery,
    )
    selected_index = _selected_index(swatches, selected.element if selected else None)
    if selected_index >= 0:
        swatches[selected_index] = replace(swatches[selected_index], is_selected=True)

    return SwatchReport(
        swatches=tuple(swatches),
        selected_index=selected_index,
        total_count=len(swatches),
        issues=tuple(issues),
    )
