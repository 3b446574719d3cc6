# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Color space conversions and perceptual distance.

Conversion chain: sRGB → Linear RGB → XYZ (D65) → CIELAB

ΔE is the CIE76 Euclidean distance in CIELAB. Every threshold used by
matching and fusion (20, 25, 28, 32) is calibrated on this scale, where
values below ~20 read as "the same color family".

Also provides lenient parsers for the color strings found in page markup
(hex, rgb()/rgba(), CSS named colors) and the neutral-color test used to
reject backgrounds and borders.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Sequence

import numpy as np
import webcolors
from numpy.typing import NDArray

from seasonmatch.schema import Color


# =============================================================================
# sRGB → Linear RGB
# =============================================================================


def srgb_to_linear(srgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert sRGB values [0,1] to linear RGB.

    sRGB uses a piecewise gamma curve:
    - For values <= 0.04045: linear/12.92
    - For values > 0.04045: ((value + 0.055) / 1.055) ^ 2.4
    """
    srgb = np.asarray(srgb, dtype=np.float64)
    linear = np.where(
        srgb <= 0.04045,
        srgb / 12.92,
        np.power((srgb + 0.055) / 1.055, 2.4)
    )
    return linear


# =============================================================================
# Linear RGB → XYZ → CIELAB
# =============================================================================

# sRGB primaries, D65 white (IEC 61966-2-1)
_RGB_TO_XYZ = np.array([
    [0.4124, 0.3576, 0.1805],
    [0.2126, 0.7152, 0.0722],
    [0.0193, 0.1192, 0.9505],
], dtype=np.float64)

# D65 reference white on the 0-100 XYZ scale
D65_WHITE = np.array([95.047, 100.000, 108.883], dtype=np.float64)

_LAB_EPSILON = 0.008856
_LAB_KAPPA_SLOPE = 7.787


def linear_rgb_to_xyz(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert linear RGB to XYZ scaled 0-100.

    Args:
        rgb: Array of shape (..., 3) with linear RGB values

    Returns:
        Array of shape (..., 3) with XYZ values
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    return np.einsum('...j,ij->...i', rgb * 100.0, _RGB_TO_XYZ)


def xyz_to_lab(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert XYZ (0-100, D65) to CIELAB.

    Args:
        xyz: Array of shape (..., 3)

    Returns:
        Array of shape (..., 3) with (L, a, b)
    """
    t = np.asarray(xyz, dtype=np.float64) / D65_WHITE
    f = np.where(
        t > _LAB_EPSILON,
        np.cbrt(t),
        _LAB_KAPPA_SLOPE * t + 16.0 / 116.0,
    )
    L = 116.0 * f[..., 1] - 16.0
    a = 500.0 * (f[..., 0] - f[..., 1])
    b = 200.0 * (f[..., 1] - f[..., 2])
    return np.stack([L, a, b], axis=-1)


def rgb_array_to_lab(pixels: NDArray) -> NDArray[np.float64]:
    """
    Convert sRGB pixels [0,255] to CIELAB.

    Values outside 0-255 are clipped first.

    Args:
        pixels: Array of shape (..., 3)

    Returns:
        Array of shape (..., 3) with (L, a, b)
    """
    srgb = np.clip(np.asarray(pixels, dtype=np.float64), 0.0, 255.0) / 255.0
    return xyz_to_lab(linear_rgb_to_xyz(srgb_to_linear(srgb)))


@lru_cache(maxsize=4096)
def _lab_for_triple(r: int, g: int, b: int) -> tuple[float, float, float]:
    L, a, b_ = rgb_array_to_lab(np.array([r, g, b], dtype=np.float64))
    return float(L), float(a), float(b_)


def rgb_to_lab(rgb: Sequence[float]) -> tuple[float, float, float]:
    """
    Convert one RGB triple to CIELAB.

    Channels are clamped to 0-255 and rounded, never rejected.

    Args:
        rgb: (r, g, b) in 0-255

    Returns:
        (L, a, b) tuple
    """
    c = Color(*rgb)
    return _lab_for_triple(c.r, c.g, c.b)


# =============================================================================
# ΔE Distance (Perceptual Color Difference)
# =============================================================================


def delta_e(lab1: Sequence[float], lab2: Sequence[float]) -> float:
    """
    CIE76 color difference: Euclidean distance in CIELAB.

    Reference points on this scale:
    - ΔE < 2: barely perceptible
    - ΔE < 20: same color family (palette match)
    - ΔE > 32: clearly different colors

    Args:
        lab1: First color (L, a, b)
        lab2: Second color (L, a, b)

    Returns:
        ΔE value (lower = more similar, symmetric, 0 for identical input)
    """
    dl = lab1[0] - lab2[0]
    da = lab1[1] - lab2[1]
    db = lab1[2] - lab2[2]
    return float(np.sqrt(dl * dl + da * da + db * db))


def color_distance(c1: Color, c2: Color) -> float:
    """ΔE between two Colors."""
    return delta_e(c1.lab, c2.lab)


def delta_e_batch(
    labs1: NDArray[np.float64],
    labs2: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Vectorized ΔE for arrays of CIELAB colors (broadcasting).

    Args:
        labs1: Array of shape (..., 3)
        labs2: Array of shape (..., 3)

    Returns:
        Array of ΔE values with the broadcast shape minus the last axis
    """
    delta = np.asarray(labs1, dtype=np.float64) - np.asarray(labs2, dtype=np.float64)
    return np.sqrt(np.sum(delta ** 2, axis=-1))


# =============================================================================
# Neutral Colors
# =============================================================================

NEUTRAL_WHITE_FLOOR = 250
NEUTRAL_BLACK_CEILING = 5
NEUTRAL_SATURATION = 0.1


def saturation(color: Color) -> float:
    """HSV saturation: (max - min) / max, 0 for black."""
    hi = max(color.rgb)
    lo = min(color.rgb)
    if hi == 0:
        return 0.0
    return (hi - lo) / hi


def is_neutral(color: Color) -> bool:
    """
    True for near-white, near-black and gray colors.

    Backgrounds and borders are frequently neutral regardless of the
    swatch color they frame, so these are not accepted as swatch evidence.
    """
    if all(ch > NEUTRAL_WHITE_FLOOR for ch in color.rgb):
        return True
    if all(ch < NEUTRAL_BLACK_CEILING for ch in color.rgb):
        return True
    return saturation(color) < NEUTRAL_SATURATION


# =============================================================================
# Parsing
# =============================================================================

_RGB_FUNC_RE = re.compile(
    r"rgba?\(\s*(\d+(?:\.\d+)?)\s*[,\s]\s*(\d+(?:\.\d+)?)\s*[,\s]\s*(\d+(?:\.\d+)?)"
    r"(?:\s*[,/]\s*([\d.]+%?))?\s*\)",
    re.IGNORECASE,
)
_HEX6_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")
_HEX_ANY_RE = re.compile(r"#[0-9a-fA-F]{6}\b|#[0-9a-fA-F]{3}\b")


def parse_hex(value: Optional[str]) -> Optional[Color]:
    """
    Parse a strict 6-digit hex value, with or without the leading "#".

    Returns None for anything else.
    """
    if not value:
        return None
    value = value.strip()
    if not _HEX6_RE.match(value):
        return None
    return Color.from_hex(value)


def _alpha_is_zero(alpha: Optional[str]) -> bool:
    if alpha is None:
        return False
    try:
        if alpha.endswith("%"):
            return float(alpha[:-1]) == 0.0
        return float(alpha) == 0.0
    except ValueError:
        return False


def parse_css_color(value: Optional[str]) -> Optional[Color]:
    """
    Parse a CSS color value as found in styles and data fields.

    Accepts ``rgb()`` / ``rgba()``, 3- or 6-digit hex, and CSS named
    colors. Fully transparent values (``transparent``, alpha 0) and
    anything unparseable yield None. A color embedded in a longer value
    (e.g. a ``background`` shorthand) is found as well.

    Args:
        value: Raw style or attribute string

    Returns:
        Parsed Color, or None
    """
    if not value:
        return None
    text = value.strip().lower()
    if not text or text in ("transparent", "none", "initial", "inherit", "currentcolor"):
        return None

    m = _RGB_FUNC_RE.search(text)
    if m:
        if _alpha_is_zero(m.group(4)):
            return None
        return Color(float(m.group(1)), float(m.group(2)), float(m.group(3)))

    m = _HEX_ANY_RE.search(text)
    if m:
        try:
            rgb = webcolors.hex_to_rgb(webcolors.normalize_hex(m.group(0)))
        except ValueError:
            return None
        return Color(rgb.red, rgb.green, rgb.blue)

    for token in text.replace(",", " ").split():
        try:
            rgb = webcolors.name_to_rgb(token)
        except ValueError:
            continue
        return Color(rgb.red, rgb.green, rgb.blue)

    return None
