# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Product evaluation pipeline.

evaluate() runs every stage for one product image:

    image ──► dominant colors (sampler) ─────────────────┐
      │                                                  │
      ├──► product container ──► selected swatch ──► swatch evidence
      │                                                  │
      └──► text sources ──────────────────────────► text evidence
                                                         │
                                 fusion ◄────────────────┘
                                   │
                          palette match + season ranking
                                   │
                             result tags on the image

Each call builds its own EvaluationContext; nothing is cached between
calls, so an unchanged snapshot always gives the same Evaluation.

evaluate_page() runs evaluate() for every product image on a page and
matches the page's swatches against the same palette.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Mapping, Optional, Sequence, Union, get_type_hints

from seasonmatch.schema import (
    Color,
    Evaluation,
    EvaluationIssue,
    IssueType,
    PageEvaluation,
    Palette,
)
from seasonmatch.dom.snapshot import Element
from seasonmatch.dom.discovery import DiscoveryConfig, discover_swatches, find_product_container
from seasonmatch.dom.images import find_product_images
from seasonmatch.dom.report import ReportConfig, report_swatches
from seasonmatch.dom.selection import PageType, SelectionConfig, resolve_selected_swatch
from seasonmatch.dom.swatch_color import ExtractionConfig, extract_swatch_color
from seasonmatch.dom.text_sources import gather_text_evidence
from seasonmatch.measure.fusion import FusionConfig, select_final, weigh
from seasonmatch.measure.matching import MatchPolicy, check_match, classify_seasons
from seasonmatch.measure.sampler import AccessDenied, ColorSampler, PixelSampler
from seasonmatch.measure.text import TextEvidenceConfig
from seasonmatch.palettes import get_palette, list_palettes
from seasonmatch.runtime.tags import apply_result_tags

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class EvaluationConfig:
    """
    Settings for every pipeline stage.

    Attributes:
        match: Palette match strictness
        discovery: Swatch discovery and container search limits
        selection: Selected swatch visual / layout thresholds
        extraction: Swatch color confidences
        text: Text source confidences
        fusion: Fusion thresholds and boosts
        min_image_width: Images narrower than this (px) are skipped
        min_image_height: Images shorter than this (px) are skipped
        max_dominant: Dominant colors requested from the sampler
        classify: Also rank the product against every palette
    """
    match: MatchPolicy = field(default_factory=MatchPolicy)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    text: TextEvidenceConfig = field(default_factory=TextEvidenceConfig)
    fusion: FusionConfig = field(default_factory=FusionConfig)
    min_image_width: int = 100
    min_image_height: int = 100
    max_dominant: int = 5
    classify: bool = True

    def __post_init__(self) -> None:
        if self.min_image_width < 0:
            raise ValueError(f"min_image_width must be >= 0, got {self.min_image_width}")
        if self.min_image_height < 0:
            raise ValueError(f"min_image_height must be >= 0, got {self.min_image_height}")
        if self.max_dominant < 1:
            raise ValueError(f"max_dominant must be >= 1, got {self.max_dominant}")

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> EvaluationConfig:
        """
        Build a config from nested overrides, e.g. loaded from JSON.

        Example::

            EvaluationConfig.from_dict({
                "match": {"colors_to_check": 3, "match_threshold": 2},
                "fusion": {"max_colors": 4},
            })

        Raises:
            ValueError: On an unknown option name or an invalid value
        """
        return _from_dict(cls, d)


def _from_dict(cls: type, data: Mapping[str, Any]) -> Any:
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} option(s): {', '.join(sorted(unknown))}")

    hints = get_type_hints(cls)
    kwargs = {}
    for name, value in data.items():
        field_type = hints.get(name)
        if is_dataclass(field_type) and isinstance(value, Mapping):
            value = _from_dict(field_type, value)
        kwargs[name] = value
    return cls(**kwargs)


# =============================================================================
# Context
# =============================================================================


@dataclass
class EvaluationContext:
    """State of one evaluation; created per call and then discarded."""
    config: EvaluationConfig
    sampler: ColorSampler
    page_type: PageType
    issues: list[EvaluationIssue] = field(default_factory=list)

    def report(self, issue_type: IssueType, message: str, **context: Any) -> None:
        logger.debug("%s: %s %s", issue_type.value, message, context)
        self.issues.append(EvaluationIssue(issue_type, message, context))


def _image_size(image: Element) -> tuple[float, float]:
    """Natural size when known, else the rendered size."""
    res = image.image
    if res is not None and res.natural_width and res.natural_height:
        return float(res.natural_width), float(res.natural_height)
    return image.rect.width, image.rect.height


def _dominant_colors(image: Element, ctx: EvaluationContext) -> tuple[Color, ...]:
    if image.image is None:
        logger.debug("Image element has no pixel source")
        return ()
    result = ctx.sampler.sample(image.image, max_colors=ctx.config.max_dominant)
    if isinstance(result, AccessDenied):
        logger.debug("Dominant colors unavailable: %s", result.reason)
        return ()
    return result.colors[:ctx.config.max_dominant]


# =============================================================================
# Pipeline
# =============================================================================


def evaluate(
    image: Element,
    palette: Union[Palette, str],
    *,
    page_type: PageType = PageType.DETAIL,
    dominant_colors: Optional[Sequence[Color]] = None,
    sampler: Optional[ColorSampler] = None,
    config: Optional[EvaluationConfig] = None,
    tag: bool = True,
) -> Evaluation:
    """
    Evaluate one product image against a seasonal palette.

    Args:
        image: Product image element in a page snapshot
        palette: Palette or palette key (e.g. "deep-winter")
        page_type: LISTING enables the swatch-row fallback
        dominant_colors: Precomputed dominant colors (sampled if None)
        sampler: Image sampler (PixelSampler if None)
        config: Stage settings (defaults if None)
        tag: Write result tags onto the image element

    Returns:
        Evaluation; ``match`` is None when the image was skipped

    Raises:
        UnknownPaletteError: If palette is a key with no palette
    """
    target = get_palette(palette) if isinstance(palette, str) else palette
    cfg = config or EvaluationConfig()
    ctx = EvaluationContext(cfg, sampler or PixelSampler(), page_type)

    width, height = _image_size(image)
    if width < cfg.min_image_width or height < cfg.min_image_height:
        ctx.report(
            IssueType.IMAGE_TOO_SMALL,
            f"Image smaller than {cfg.min_image_width}x{cfg.min_image_height}px",
            width=width,
            height=height,
        )
        return Evaluation(palette_key=target.key, match=None, issues=tuple(ctx.issues))

    if dominant_colors is None:
        dominant = _dominant_colors(image, ctx)
    else:
        dominant = tuple(dominant_colors)

    selected = None
    swatch_evidence = None
    container = find_product_container(image, cfg.discovery)
    if container is None:
        ctx.report(IssueType.CONTAINER_UNRESOLVED, "Image has no product container")
    else:
        selected = resolve_selected_swatch(
            container, image, page_type, cfg.selection, cfg.discovery,
        )
        if selected is not None:
            swatch_evidence = extract_swatch_color(
                selected.element, sampler=ctx.sampler, config=cfg.extraction,
            )
        elif not discover_swatches(container, cfg.discovery):
            ctx.report(
                IssueType.NO_SWATCHES_FOUND,
                "No color swatches detected in container",
                container_size=container.rect.size,
            )

    text_evidence = gather_text_evidence(image, cfg.text)

    weighted = select_final(
        weigh(dominant, swatch_evidence, text_evidence, cfg.fusion), cfg.fusion,
    )
    final_colors = tuple(w.color for w in weighted)

    match = check_match(final_colors, target, cfg.match)
    classification = classify_seasons(final_colors, list_palettes(), cfg.match) if cfg.classify else None

    evaluation = Evaluation(
        palette_key=target.key,
        match=match,
        final_colors=final_colors,
        dominant_colors=dominant,
        weighted=weighted,
        selected_swatch=selected,
        swatch_evidence=swatch_evidence,
        text_evidence=text_evidence,
        classification=classification,
        issues=tuple(ctx.issues),
    )
    logger.debug(
        "Evaluated against %s: matches=%s (%d/%d)",
        target.key, match.matches, match.match_count, match.total_checked,
    )

    if tag:
        apply_result_tags(image, evaluation)
    return evaluation


def evaluate_page(
    root: Element,
    palette: Union[Palette, str],
    *,
    page_type: PageType = PageType.DETAIL,
    sampler: Optional[ColorSampler] = None,
    config: Optional[EvaluationConfig] = None,
    include_swatches: bool = True,
    tag: bool = True,
) -> PageEvaluation:
    """
    Evaluate every product image on a page.

    Images come from find_product_images(). A skipped or anomalous image
    only shows up in its own Evaluation's issues; the rest of the page is
    still evaluated.

    Args:
        root: Page snapshot root
        palette: Palette or palette key
        page_type: Page kind passed to every evaluation
        sampler: Image sampler shared by all evaluations
        config: Stage settings (defaults if None)
        include_swatches: Also match every page swatch against the palette
        tag: Write result tags onto each image element

    Returns:
        PageEvaluation with per-image results and page statistics

    Raises:
        UnknownPaletteError: If palette is a key with no palette
    """
    target = get_palette(palette) if isinstance(palette, str) else palette
    cfg = config or EvaluationConfig()
    shared_sampler = sampler or PixelSampler()

    images = find_product_images(
        root, min_width=cfg.min_image_width, min_height=cfg.min_image_height,
    )
    evaluations = tuple(
        evaluate(image, target, page_type=page_type, sampler=shared_sampler, config=cfg, tag=tag)
        for image in images
    )

    swatches = None
    if include_swatches:
        report_cfg = ReportConfig(
            match=cfg.match,
            discovery=cfg.discovery,
            extraction=cfg.extraction,
            selection=cfg.selection,
        )
        swatches = report_swatches(root, sampler=shared_sampler, palette=target, config=report_cfg)

    page = PageEvaluation(evaluations=evaluations, images=tuple(images), swatches=swatches)
    logger.debug(
        "Page evaluated against %s: %d/%d images match, %d skipped, %d/%d swatches match",
        target.key, page.matching_images, page.total_images, page.skipped_images,
        page.matching_swatches, page.total_swatches,
    )
    return page
