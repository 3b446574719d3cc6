# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Color evidence schema for seasonal palette matching.

Design principles:
- Immutable: All types are frozen dataclasses
- Per-evaluation: Everything except Palette is created for one product
  evaluation and discarded afterwards
- Typed provenance: Every piece of evidence says where it came from and
  how much it should be trusted
- Serializable: JSON-ready via to_dict() / to_json()

Colors are stored as sRGB triples (0-255). The CIELAB representation used
for perceptual distance is derived on demand (D65 white point).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from seasonmatch.dom.snapshot import Element, Rect


# =============================================================================
# Parsing Helpers
# =============================================================================

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def _clamp_channel(value: float) -> int:
    return int(min(255, max(0, round(float(value)))))


# =============================================================================
# Core Color Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class Color:
    """
    A single sRGB color.

    Channel values outside 0-255 are clamped and fractional values are
    rounded on construction, so a Color is always a valid 8-bit triple.

    Attributes:
        r: Red channel (0-255)
        g: Green channel (0-255)
        b: Blue channel (0-255)
    """
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        """Clamp channels into range."""
        object.__setattr__(self, "r", _clamp_channel(self.r))
        object.__setattr__(self, "g", _clamp_channel(self.g))
        object.__setattr__(self, "b", _clamp_channel(self.b))

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """
        Build a Color from a 6-digit hex string ("#1A2B3C" or "1a2b3c").

        Raises:
            ValueError: If the string is not a 6-digit hex color
        """
        m = _HEX_RE.match(value.strip())
        if not m:
            raise ValueError(f"Not a 6-digit hex color: {value!r}")
        return cls(*(int(part, 16) for part in m.groups()))

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> str:
        """Hex string like "#1A2B3C"."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    @property
    def lab(self) -> tuple[float, float, float]:
        """CIELAB (L, a, b) under D65."""
        from seasonmatch.measure.colorspace import rgb_to_lab
        return rgb_to_lab(self.rgb)

    def to_dict(self) -> dict:
        return {"hex": self.hex, "rgb": list(self.rgb)}

    @classmethod
    def from_dict(cls, d: dict) -> Color:
        if "rgb" in d:
            return cls(*d["rgb"])
        return cls.from_hex(d["hex"])


@dataclass(frozen=True, slots=True)
class Palette:
    """
    A named seasonal palette.

    Palettes are loaded once and shared for the whole session.

    Attributes:
        key: Stable identifier persisted as user preference (e.g. "deep-winter")
        name: Display name
        description: One-line description of the season
        emoji: Icon key for display
        colors: Reference colors (never empty)
    """
    key: str
    name: str
    colors: tuple[Color, ...]
    description: str = ""
    emoji: str = ""

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Palette key must be non-empty")
        if not self.colors:
            raise ValueError(f"Palette {self.key!r} must contain at least one color")

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "emoji": self.emoji,
            "colors": [c.hex for c in self.colors],
        }


# =============================================================================
# Evidence
# =============================================================================


class SourceKind(Enum):
    """Provenance of a piece of color evidence."""

    INLINE_STYLE = "inline-style"
    COMPUTED_STYLE = "computed-style"
    NESTED_ELEMENT = "nested-element"
    DATA_ATTRIBUTE = "data-attribute"
    BORDER = "border"
    IMAGE_SAMPLE = "image-sample"
    VALUE_FIELD = "value-field"
    TEXT_DICTIONARY = "text-dictionary"
    BACKGROUND_IMAGE_ONLY = "background-image-only"


class TextSource(Enum):
    """Where a color name was read from."""

    IMAGE_ATTRIBUTE = "image-attribute"
    VARIANT_SELECTOR = "variant-selector"
    STRUCTURED_DATA = "structured-data"
    PRODUCT_TITLE = "product-title"
    PRODUCT_DESCRIPTION = "product-description"
    NEARBY_TEXT = "nearby-text"


@dataclass(frozen=True, slots=True)
class TextMention:
    """
    Frequency and position facts about a color name found in text.

    Attributes:
        keyword: Normalized color name as found in the vocabulary
        source: Text source the (highest-confidence) mention came from
        count: Number of mentions folded into this record
        first_position: Character offset of the first mention in its text
        multi_word: True for names like "navy blue"
    """
    keyword: str
    source: TextSource
    count: int = 1
    first_position: int = 0
    multi_word: bool = False

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"Mention count must be >= 1, got {self.count}")

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "source": self.source.value,
            "count": self.count,
            "first_position": self.first_position,
            "multi_word": self.multi_word,
        }


@dataclass(frozen=True, slots=True)
class ColorEvidence:
    """
    One typed observation about a product's color.

    Pattern swatches carry no color but a label; they must be flagged
    with is_pattern.

    Attributes:
        color: Observed color, or None for pattern swatches
        confidence: Trust in the observation, 0-1
        source_kind: Provenance
        label: Human-readable name (swatch label or color name)
        is_pattern: True when the swatch shows a pattern, not a solid color
        mention: Text frequency facts (text evidence only)
    """
    color: Optional[Color]
    confidence: float
    source_kind: SourceKind
    label: Optional[str] = None
    is_pattern: bool = False
    mention: Optional[TextMention] = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be 0-1, got {self.confidence}")
        if self.color is None and not self.is_pattern:
            raise ValueError("Evidence without a color must be flagged is_pattern")

    def nested(self, factor: float) -> ColorEvidence:
        """Re-attribute evidence found on a child element, scaling its confidence."""
        return replace(
            self,
            confidence=self.confidence * factor,
            source_kind=SourceKind.NESTED_ELEMENT,
        )

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "color": self.color.hex if self.color is not None else None,
            "confidence": round(self.confidence, 4),
            "source": self.source_kind.value,
        }
        if self.label is not None:
            d["label"] = self.label
        if self.is_pattern:
            d["is_pattern"] = True
        if self.mention is not None:
            d["mention"] = self.mention.to_dict()
        return d


# =============================================================================
# Swatches
# =============================================================================


@dataclass(frozen=True, slots=True)
class SwatchCandidate:
    """
    A page element that may represent one selectable product color.

    Only valid for the discovery pass that produced it.
    """
    element: Element
    rect: Rect

    def to_dict(self) -> dict:
        return {
            "tag": self.element.tag,
            "class": self.element.class_name,
            "rect": self.rect.to_dict(),
        }


class SelectionTier(IntEnum):
    """Which rule of the selection cascade produced a result (1 = strongest)."""

    NATIVE_CONTROL = 1
    CLASS_NAME = 2
    ARIA_STATE = 3
    DATA_STATE = 4
    VISUAL_STYLE = 5
    LISTING_LAYOUT = 6


@dataclass(frozen=True, slots=True)
class SelectedSwatchResult:
    """The swatch the shopper has currently chosen."""
    candidate: SwatchCandidate
    tier: SelectionTier
    is_disabled: bool = False
    is_pattern: bool = False

    @property
    def element(self) -> Element:
        return self.candidate.element

    def to_dict(self) -> dict:
        return {
            "swatch": self.candidate.to_dict(),
            "tier": int(self.tier),
            "is_disabled": self.is_disabled,
            "is_pattern": self.is_pattern,
        }


@dataclass(frozen=True, slots=True)
class SwatchDescription:
    """
    Metadata for one discovered swatch.

    Attributes:
        candidate: The discovered element
        index: Position in the ordered swatch list
        label: Human-readable variant name, if any
        evidence: Extracted color evidence, if any
        is_selected: True for the resolved selected swatch
        is_disabled: Sold out / unavailable
        is_pattern: Patterned rather than solid
        image_src: Source of a swatch image, if the swatch is an image
        palette_match: Nearest palette color, when matched against a palette
    """
    candidate: SwatchCandidate
    index: int
    label: Optional[str] = None
    evidence: Optional[ColorEvidence] = None
    is_selected: bool = False
    is_disabled: bool = False
    is_pattern: bool = False
    image_src: Optional[str] = None
    palette_match: Optional[ColorMatchDetail] = None

    @property
    def confidence(self) -> float:
        return self.evidence.confidence if self.evidence is not None else 0.0

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "label": self.label,
            "evidence": self.evidence.to_dict() if self.evidence else None,
            "is_selected": self.is_selected,
            "is_disabled": self.is_disabled,
            "is_pattern": self.is_pattern,
            "image_src": self.image_src,
            "palette_match": self.palette_match.to_dict() if self.palette_match else None,
        }


# =============================================================================
# Issues (typed, non-fatal)
# =============================================================================


class IssueType(Enum):
    """Structural anomalies reported instead of raised."""

    NO_SWATCHES_FOUND = "NO_SWATCHES_FOUND"
    CONTAINER_UNRESOLVED = "CONTAINER_UNRESOLVED"
    IMAGE_TOO_SMALL = "IMAGE_TOO_SMALL"
    METADATA_EXTRACTION_FAILED = "METADATA_EXTRACTION_FAILED"


@dataclass(frozen=True, slots=True)
class EvaluationIssue:
    """A non-fatal problem the caller may use to skip a product."""
    type: IssueType
    message: str
    context: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"type": self.type.value, "message": self.message, "context": dict(self.context)}


@dataclass(frozen=True, slots=True)
class SwatchReport:
    """All swatches of one container plus the selected index (-1 if none)."""
    swatches: tuple[SwatchDescription, ...]
    selected_index: int = -1
    total_count: int = 0
    issues: tuple[EvaluationIssue, ...] = ()

    @property
    def selected(self) -> Optional[SwatchDescription]:
        if 0 <= self.selected_index < len(self.swatches):
            return self.swatches[self.selected_index]
        return None

    @property
    def matching_count(self) -> int:
        """Swatches whose color is in the palette they were matched against."""
        return sum(1 for s in self.swatches if s.palette_match is not None and s.palette_match.is_match)

    def to_dict(self) -> dict:
        return {
            "swatches": [s.to_dict() for s in self.swatches],
            "selected_index": self.selected_index,
            "total_count": self.total_count,
            "matching_count": self.matching_count,
            "issues": [i.to_dict() for i in self.issues],
        }


# =============================================================================
# Fusion
# =============================================================================


@dataclass(frozen=True, slots=True)
class WeightedColor:
    """
    A dominant color with its fusion weight.

    Attributes:
        color: The color
        weight: Ranking weight (>= 0, starts at 1.0)
        original_index: Position in the dominant color list (-1 for
            colors added from text evidence)
        matched_evidence: Evidence that boosted or introduced this color
    """
    color: Color
    weight: float = 1.0
    original_index: int = -1
    matched_evidence: Optional[ColorEvidence] = None

    def __post_init__(self) -> None:
        if self.weight < 0.0:
            raise ValueError(f"Weight must be >= 0, got {self.weight}")

    def to_dict(self) -> dict:
        return {
            "color": self.color.hex,
            "weight": round(self.weight, 4),
            "original_index": self.original_index,
            "evidence": self.matched_evidence.to_dict() if self.matched_evidence else None,
        }


# =============================================================================
# Matching
# =============================================================================


@dataclass(frozen=True, slots=True)
class ColorMatchDetail:
    """How one checked color compares with its nearest palette color."""
    color: Color
    closest_palette_color: Color
    delta_e: float
    is_match: bool

    def to_dict(self) -> dict:
        return {
            "color": self.color.hex,
            "closest_palette_color": self.closest_palette_color.hex,
            "delta_e": round(self.delta_e, 2),
            "is_match": self.is_match,
        }


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of checking a ranked color list against one palette."""
    matches: bool
    match_count: int
    total_checked: int
    details: tuple[ColorMatchDetail, ...] = ()
    confidence_percent: float = 0.0

    def __post_init__(self) -> None:
        if not 0 <= self.match_count <= self.total_checked:
            raise ValueError(
                f"match_count must be within 0-{self.total_checked}, got {self.match_count}"
            )

    @property
    def mean_delta_e(self) -> Optional[float]:
        if not self.details:
            return None
        return sum(d.delta_e for d in self.details) / len(self.details)

    def to_dict(self) -> dict:
        return {
            "matches": self.matches,
            "match_count": self.match_count,
            "total_checked": self.total_checked,
            "confidence_percent": round(self.confidence_percent, 1),
            "details": [d.to_dict() for d in self.details],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass(frozen=True, slots=True)
class SeasonScore:
    """A palette's result within a season classification."""
    palette: Palette
    result: MatchResult
    mean_delta_e: float

    @property
    def key(self) -> str:
        return self.palette.key

    @property
    def match_count(self) -> int:
        return self.result.match_count

    def to_dict(self) -> dict:
        return {
            "season": self.palette.key,
            "name": self.palette.name,
            "match_count": self.result.match_count,
            "mean_delta_e": round(self.mean_delta_e, 2),
            "confidence_percent": round(self.result.confidence_percent, 1),
        }


@dataclass(frozen=True, slots=True)
class SeasonClassification:
    """
    Ranking of a product against every palette.

    Attributes:
        primary: Best-ranked season (None when no colors were given)
        secondary: Close runners-up (match count within 1 of primary)
        scores: Every palette, ranked
        no_match: True when even the primary matched nothing
    """
    primary: Optional[SeasonScore]
    secondary: tuple[SeasonScore, ...] = ()
    scores: tuple[SeasonScore, ...] = ()
    no_match: bool = True

    def to_dict(self) -> dict:
        return {
            "primary": self.primary.to_dict() if self.primary else None,
            "secondary": [s.to_dict() for s in self.secondary],
            "no_match": self.no_match,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class CompatibilityType(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class Compatibility:
    """Whether a classified product suits a given user season."""
    compatible: bool
    match_type: CompatibilityType
    reason: str
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "compatible": self.compatible,
            "match_type": self.match_type.value,
            "reason": self.reason,
            "recommendation": self.recommendation,
        }


# =============================================================================
# Top-level Result
# =============================================================================


@dataclass(frozen=True, slots=True)
class Evaluation:
    """
    Complete result of evaluating one product image against one palette.

    Attributes:
        palette_key: Palette the product was checked against
        match: Match decision (None when the image was skipped)
        final_colors: Fused, ranked colors (at most 5)
        dominant_colors: Image-derived colors before fusion
        weighted: Fusion weights, in final rank order
        selected_swatch: Resolved selected swatch, if any
        swatch_evidence: Color evidence of the selected swatch, if any
        text_evidence: Color names found near the product
        classification: Ranking against all palettes (optional)
        issues: Non-fatal anomalies encountered
    """
    palette_key: str
    match: Optional[MatchResult]
    final_colors: tuple[Color, ...] = ()
    dominant_colors: tuple[Color, ...] = ()
    weighted: tuple[WeightedColor, ...] = ()
    selected_swatch: Optional[SelectedSwatchResult] = None
    swatch_evidence: Optional[ColorEvidence] = None
    text_evidence: tuple[ColorEvidence, ...] = ()
    classification: Optional[SeasonClassification] = None
    issues: tuple[EvaluationIssue, ...] = ()

    @property
    def matches(self) -> bool:
        return self.match is not None and self.match.matches

    @property
    def skipped(self) -> bool:
        return self.match is None

    def to_dict(self) -> dict:
        return {
            "palette": self.palette_key,
            "match": self.match.to_dict() if self.match else None,
            "final_colors": [c.hex for c in self.final_colors],
            "dominant_colors": [c.hex for c in self.dominant_colors],
            "weighted": [w.to_dict() for w in self.weighted],
            "selected_swatch": self.selected_swatch.to_dict() if self.selected_swatch else None,
            "swatch_evidence": self.swatch_evidence.to_dict() if self.swatch_evidence else None,
            "text_evidence": [e.to_dict() for e in self.text_evidence],
            "classification": self.classification.to_dict() if self.classification else None,
            "issues": [i.to_dict() for i in self.issues],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass(frozen=True, slots=True)
class PageEvaluation:
    """
    Results for every product image on a page.

    Attributes:
        evaluations: One Evaluation per product image, in page order
        images: The evaluated image elements, parallel to ``evaluations``
        swatches: Page swatches matched against the same palette, if requested
    """
    evaluations: tuple[Evaluation, ...] = ()
    images: tuple[Element, ...] = ()
    swatches: Optional[SwatchReport] = None

    def __post_init__(self) -> None:
        if self.images and len(self.images) != len(self.evaluations):
            raise ValueError(
                f"images ({len(self.images)}) and evaluations ({len(self.evaluations)}) differ in length"
            )

    @property
    def total_images(self) -> int:
        """Images that were evaluated (skipped images not counted)."""
        return sum(1 for e in self.evaluations if not e.skipped)

    @property
    def matching_images(self) -> int:
        return sum(1 for e in self.evaluations if e.matches)

    @property
    def skipped_images(self) -> int:
        return sum(1 for e in self.evaluations if e.skipped)

    @property
    def total_swatches(self) -> int:
        return len(self.swatches.swatches) if self.swatches else 0

    @property
    def matching_swatches(self) -> int:
        return self.swatches.matching_count if self.swatches else 0

    def to_dict(self) -> dict:
        return {
            "stats": {
                "total_images": self.total_images,
                "matching_images": self.matching_images,
                "skipped_images": self.skipped_images,
                "total_swatches": self.total_swatches,
                "matching_swatches": self.matching_swatches,
            },
            "evaluations": [e.to_dict() for e in self.evaluations],
            "swatches": self.swatches.to_dict() if self.swatches else None,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)
