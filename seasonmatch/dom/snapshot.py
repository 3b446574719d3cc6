# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Read-only page snapshot.

A minimal element tree carrying what the swatch and text heuristics need:
tag, attributes, inline and computed style, geometry, own text, and an
optional image resource. Snapshots are usually built from JSON with
Element.from_dict.

The tree is never mutated by the engine, with one exception: result tags
(``result_tags``) written for downstream rendering. Writing the same tags
twice leaves the element unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

import numpy as np
from numpy.typing import NDArray


# =============================================================================
# Geometry
# =============================================================================


@dataclass(frozen=True, slots=True)
class Rect:
    """Bounding box in page pixels."""
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def size(self) -> dict:
        return {"width": self.width, "height": self.height}

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.width / 2, self.top + self.height / 2)

    def overlaps(self, other: Rect) -> bool:
        return not (
            self.right < other.left or other.right < self.left
            or self.bottom < other.top or other.bottom < self.top
        )

    def gap(self, other: Rect) -> float:
        """Euclidean gap between two boxes, 0 if they overlap."""
        if self.overlaps(other):
            return 0.0
        dx = max(0.0, other.left - self.right, self.left - other.right)
        dy = max(0.0, other.top - self.bottom, self.top - other.bottom)
        return float(np.hypot(dx, dy))

    def to_dict(self) -> dict:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, d: dict) -> Rect:
        return cls(
            left=float(d.get("left", d.get("x", 0.0))),
            top=float(d.get("top", d.get("y", 0.0))),
            width=float(d.get("width", 0.0)),
            height=float(d.get("height", 0.0)),
        )


# =============================================================================
# Image Resources
# =============================================================================


@dataclass(frozen=True, eq=False)
class ImageResource:
    """
    Pixel source behind an image element.

    Attributes:
        src: Image URL
        natural_width: Intrinsic width in pixels
        natural_height: Intrinsic height in pixels
        pixels: Decoded (H, W, 3) uint8 sRGB pixels, if available
        path: Local file holding the image, if available
        cross_origin: True when the page may not read the pixels
    """
    src: str = ""
    natural_width: int = 0
    natural_height: int = 0
    pixels: Optional[NDArray[np.uint8]] = None
    path: Optional[str] = None
    cross_origin: bool = False

    @classmethod
    def from_dict(cls, d: dict) -> ImageResource:
        pixels = d.get("pixels")
        return cls(
            src=d.get("src", ""),
            natural_width=int(d.get("natural_width", 0)),
            natural_height=int(d.get("natural_height", 0)),
            pixels=np.asarray(pixels, dtype=np.uint8) if pixels is not None else None,
            path=d.get("path"),
            cross_origin=bool(d.get("cross_origin", False)),
        )


# =============================================================================
# Elements
# =============================================================================


def _parse_style(value: Any) -> dict[str, str]:
    """Accept a style mapping or a ``"a: b; c: d"`` declaration string."""
    if not value:
        return {}
    if isinstance(value, dict):
        return {str(k).strip().lower(): str(v).strip() for k, v in value.items()}
    style = {}
    for decl in str(value).split(";"):
        name, sep, val = decl.partition(":")
        if sep and name.strip():
            style[name.strip().lower()] = val.strip()
    return style


@dataclass(eq=False)
class Element:
    """
    One element of a page snapshot.

    Elements compare by identity. Parent links are set when children are
    attached at construction time.

    Attributes:
        tag: Lowercase tag name
        attributes: Attribute values (``class``, ``id``, ``data-*``, ...)
        style: Inline style declarations
        computed: Resolved style values; inline values are used when absent
        rect: Bounding box
        text: The element's own text (children excluded)
        children: Child elements in document order
        image: Pixel source for ``img`` elements
        result_tags: Derived result metadata written for rendering
    """
    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    style: dict[str, str] = field(default_factory=dict)
    computed: dict[str, str] = field(default_factory=dict)
    rect: Rect = field(default_factory=Rect)
    text: str = ""
    children: list[Element] = field(default_factory=list)
    image: Optional[ImageResource] = None
    parent: Optional[Element] = field(default=None, repr=False)
    result_tags: dict[str, str] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.tag = self.tag.lower()
        if isinstance(self.style, str):
            self.style = _parse_style(self.style)
        if "style" in self.attributes and not self.style:
            self.style = _parse_style(self.attributes["style"])
        for child in self.children:
            child.parent = self

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, d: dict) -> Element:
        """
        Build an element tree from a JSON-like snapshot.

        Expected keys (all optional except ``tag``): ``attributes``,
        ``style``, ``computed``, ``rect``, ``text``, ``children``, ``image``.
        """
        return cls(
            tag=d["tag"],
            attributes={k: str(v) for k, v in d.get("attributes", {}).items()},
            style=_parse_style(d.get("style")),
            computed=_parse_style(d.get("computed")),
            rect=Rect.from_dict(d.get("rect", {})),
            text=d.get("text", ""),
            children=[cls.from_dict(c) for c in d.get("children", [])],
            image=ImageResource.from_dict(d["image"]) if d.get("image") else None,
        )

    def append(self, child: Element) -> Element:
        child.parent = self
        self.children.append(child)
        return child

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def has(self, name: str) -> bool:
        return name in self.attributes

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    @property
    def class_name(self) -> str:
        return self.attributes.get("class", "")

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple(self.class_name.split())

    def class_contains(self, *fragments: str) -> bool:
        """True if the class string contains any fragment (case-insensitive)."""
        lowered = self.class_name.lower()
        return any(f in lowered for f in fragments)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    @property
    def input_type(self) -> str:
        return self.attributes.get("type", "").lower() if self.tag == "input" else ""

    @property
    def is_radio(self) -> bool:
        return self.input_type == "radio"

    def flag(self, name: str) -> bool:
        """Boolean attribute semantics: present and not explicitly "false"."""
        value = self.attributes.get(name)
        return value is not None and value.lower() != "false"

    @property
    def checked(self) -> bool:
        return self.flag("checked")

    @property
    def disabled(self) -> bool:
        return self.flag("disabled")

    @property
    def value(self) -> str:
        return self.attributes.get("value", "")

    # -------------------------------------------------------------------------
    # Style
    # -------------------------------------------------------------------------

    def inline(self, prop: str) -> str:
        return self.style.get(prop, "")

    def resolved(self, prop: str) -> str:
        """Computed value of a style property, falling back to inline style."""
        value = self.computed.get(prop)
        if value is None:
            value = self.style.get(prop, "")
        return value

    def resolved_px(self, prop: str) -> float:
        """Numeric pixel value of a style property (0 if not numeric)."""
        raw = self.resolved(prop).strip().lower()
        if raw.endswith("px"):
            raw = raw[:-2]
        try:
            return float(raw)
        except ValueError:
            return 0.0

    @property
    def opacity(self) -> float:
        raw = self.resolved("opacity")
        if not raw:
            return 1.0
        try:
            return float(raw)
        except ValueError:
            return 1.0

    @property
    def background_image(self) -> str:
        """Background image URL value, or "" when there is none."""
        value = self.resolved("background-image") or self.inline("background")
        return value if "url(" in value else ""

    @property
    def is_rendered(self) -> bool:
        """False if this element or an ancestor is display:none or visibility:hidden."""
        node: Optional[Element] = self
        while node is not None:
            if node.resolved("display") == "none":
                return False
            if node.resolved("visibility") == "hidden":
                return False
            node = node.parent
        return True

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    @property
    def text_content(self) -> str:
        """Own text plus all descendant text, whitespace-joined."""
        parts = [self.text.strip()] if self.text.strip() else []
        for child in self.children:
            if child.tag in ("script", "style"):
                continue
            child_text = child.text_content
            if child_text:
                parts.append(child_text)
        return " ".join(parts)

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def iter_descendants(self) -> Iterator[Element]:
        """All descendants in document (pre-)order, excluding self."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self) -> Iterator[Element]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def closest(self, predicate: Callable[[Element], bool]) -> Optional[Element]:
        """Nearest element, starting with self and walking up, matching predicate."""
        if predicate(self):
            return self
        for node in self.ancestors():
            if predicate(node):
                return node
        return None

    def find(self, predicate: Callable[[Element], bool]) -> Optional[Element]:
        for node in self.iter_descendants():
            if predicate(node):
                return node
        return None

    def find_all(self, predicate: Callable[[Element], bool]) -> list[Element]:
        return [node for node in self.iter_descendants() if predicate(node)]

    def contains(self, other: Element) -> bool:
        """True if other is self or a descendant of self."""
        return other is self or any(a is self for a in other.ancestors())

    @property
    def next_sibling(self) -> Optional[Element]:
        if self.parent is None:
            return None
        siblings = self.parent.children
        for i, node in enumerate(siblings):
            if node is self:
                return siblings[i + 1] if i + 1 < len(siblings) else None
        return None

    @property
    def root(self) -> Element:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        if not element_id:
            return None
        if self.id == element_id:
            return self
        return self.find(lambda el: el.id == element_id)

    # -------------------------------------------------------------------------
    # Result tags
    # -------------------------------------------------------------------------

    def tag_result(self, tags: dict[str, str]) -> None:
        """Write derived result metadata (idempotent)."""
        self.result_tags.update(tags)
