# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Image dominant-color sampling.

PixelSampler clusters the opaque pixels of a product image in CIELAB and
reports each cluster as a real pixel from it, largest cluster first. With
``use_mode`` it counts exact pixel values instead, which suits flat shots
on a solid backdrop.

Pixel reads can be refused (cross-origin images). A sampler never raises
for that: it returns AccessDenied, which callers treat as "no evidence".
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

import numpy as np
from numpy.typing import NDArray

from seasonmatch.schema import Color
from seasonmatch.dom.snapshot import ImageResource
from seasonmatch.measure.colorspace import rgb_array_to_lab

logger = logging.getLogger(__name__)


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True, slots=True)
class Sampled:
    """Dominant colors of an image, most dominant first."""
    colors: tuple[Color, ...]


@dataclass(frozen=True, slots=True)
class AccessDenied:
    """The image's pixels could not be read."""
    reason: str


SampleResult = Union[Sampled, AccessDenied]


class ColorSampler(Protocol):
    """Anything that can report the dominant colors of an image."""

    def sample(self, image: ImageResource, *, max_colors: int = 5) -> SampleResult:
        ...


# =============================================================================
# Default Sampler
# =============================================================================


# Pixels below this alpha are backdrop, not product
MIN_ALPHA = 125

_ALPHA_MODES = ("RGBA", "LA", "PA")


def _load_pixels(image: ImageResource) -> NDArray[np.uint8]:
    """
    Load an image resource as (N, 3) uint8 sRGB pixels.

    Mostly transparent pixels (alpha < MIN_ALPHA) are dropped, whether
    they come from an RGBA array or an image file with an alpha band.

    Raises:
        PermissionError: If the resource is cross-origin restricted
        OSError: If the backing file cannot be read
        ValueError: If there is no pixel source at all
    """
    if image.cross_origin:
        raise PermissionError(f"cross-origin image: {image.src or '<unknown>'}")

    if image.pixels is not None:
        arr = np.asarray(image.pixels, dtype=np.uint8)
    elif image.path is not None:
        from PIL import Image

        with Image.open(Path(image.path)) as img:
            has_alpha = img.mode in _ALPHA_MODES or "transparency" in img.info
            arr = np.array(img.convert("RGBA" if has_alpha else "RGB"), dtype=np.uint8)
    else:
        raise ValueError("image has no pixel data")

    if arr.ndim == 3 and arr.shape[-1] == 4:
        arr = arr[arr[..., 3] >= MIN_ALPHA][:, :3]
    return arr.reshape(-1, 3)


@dataclass(frozen=True)
class PixelSampler:
    """
    Default dominant-color sampler.

    Attributes:
        use_mode: Count exact pixel values instead of clustering
        max_pixels: Subsample larger images to this many pixels (0 = all)
        max_iter: K-means iteration cap
        seed: K-means seed, fixed so repeated runs agree
    """
    use_mode: bool = False
    max_pixels: int = 10_000
    max_iter: int = 50
    seed: Optional[int] = 42

    def sample(self, image: ImageResource, *, max_colors: int = 5) -> SampleResult:
        """
        Sample up to ``max_colors`` dominant colors.

        Returns:
            Sampled on success (possibly empty), AccessDenied if the
            pixels could not be read
        """
        try:
            pixels = _load_pixels(image)
        except PermissionError as exc:
            logger.debug("Pixel access denied: %s", exc)
            return AccessDenied(reason=str(exc))
        except (OSError, ValueError) as exc:
            logger.debug("Pixel data unavailable for %s: %s", image.src, exc)
            return AccessDenied(reason=str(exc))

        if len(pixels) == 0:
            return Sampled(colors=())

        if self.max_pixels and len(pixels) > self.max_pixels:
            step = int(np.ceil(len(pixels) / self.max_pixels))
            pixels = pixels[::step]

        if self.use_mode:
            colors = extract_colors_mode(pixels, n_colors=max_colors)
        else:
            colors = extract_colors_kmeans(
                pixels, n_colors=max_colors, max_iter=self.max_iter, seed=self.seed,
            )
        return Sampled(colors=colors)


# =============================================================================
# Extraction
# =============================================================================


def extract_colors_kmeans(
    rgb_pixels: NDArray[np.uint8],
    n_colors: int = 5,
    max_iter: int = 50,
    seed: Optional[int] = 42,
) -> tuple[Color, ...]:
    """
    Dominant colors by k-means in CIELAB.

    Each cluster is reported as its nearest real pixel, ordered by
    cluster size (largest first).

    Args:
        rgb_pixels: Array of shape (N, 3) with RGB values [0-255]
        n_colors: Maximum number of colors (fewer if the image has fewer)
        max_iter: Maximum k-means iterations
        seed: Random seed for reproducibility (None for random)

    Returns:
        Tuple of Colors, most dominant first
    """
    if len(rgb_pixels) == 0:
        raise ValueError("Cannot extract colors from empty pixel array")

    lab_pixels = rgb_array_to_lab(rgb_pixels)
    centroids, labels = _kmeans(lab_pixels, k=n_colors, max_iter=max_iter, seed=seed)

    clusters = []
    for i in range(len(centroids)):
        mask = labels == i
        count = int(np.count_nonzero(mask))
        if count == 0:
            continue
        cluster_lab = lab_pixels[mask]
        nearest = np.argmin(np.sum((cluster_lab - centroids[i]) ** 2, axis=1))
        r, g, b = rgb_pixels[mask][nearest]
        clusters.append((count, Color(int(r), int(g), int(b))))

    clusters.sort(key=lambda x: x[0], reverse=True)
    return tuple(color for _, color in clusters)


def _nearest(data: NDArray[np.float64], centers: NDArray[np.float64]) -> NDArray[np.intp]:
    """Index of the closest center for every row of ``data``."""
    sq = np.sum((data[:, np.newaxis, :] - centers[np.newaxis, :, :]) ** 2, axis=2)
    return np.argmin(sq, axis=1)


def _initial_centers(
    points: NDArray[np.float64],
    k: int,
    rng: np.random.Generator,
) -> NDArray[np.float64]:
    """Spread ``k`` starting centers over distinct Lab points (k-means++)."""
    centers = [points[rng.integers(len(points))]]
    while len(centers) < k:
        sq = np.min(
            np.sum((points[:, np.newaxis, :] - np.array(centers)[np.newaxis, :, :]) ** 2, axis=2),
            axis=1,
        )
        total = sq.sum()
        pick = rng.integers(len(points)) if total == 0 else rng.choice(len(points), p=sq / total)
        centers.append(points[pick])
    return np.array(centers, dtype=np.float64)


def _kmeans(
    data: NDArray[np.float64],
    k: int,
    max_iter: int = 50,
    seed: Optional[int] = None,
) -> tuple[NDArray[np.float64], NDArray[np.intp]]:
    """
    Cluster Lab pixels into at most ``k`` groups.

    ``k`` shrinks to the number of distinct pixels. Stops once no pixel
    changes cluster or after ``max_iter`` center updates.

    Returns:
        (centers, labels): (k, 3) cluster means and one label per pixel
    """
    points = np.unique(data, axis=0)
    k = min(k, len(points))
    if k == 0:
        raise ValueError("No valid data points for clustering")

    centers = _initial_centers(points, k, np.random.default_rng(seed))
    labels = _nearest(data, centers)
    for _ in range(max_iter):
        for j in range(k):
            members = data[labels == j]
            if len(members):
                centers[j] = members.mean(axis=0)
        updated = _nearest(data, centers)
        if np.array_equal(updated, labels):
            break
        labels = updated

    return centers, labels


def extract_colors_mode(
    rgb_pixels: NDArray[np.uint8],
    n_colors: int = 5,
) -> tuple[Color, ...]:
    """
    Dominant colors as the most common exact pixel values.

    More faithful than k-means for flat product shots on solid backdrops.

    Args:
        rgb_pixels: Array of shape (N, 3) with RGB values [0-255]
        n_colors: Maximum number of colors to return

    Returns:
        Tuple of Colors ordered by frequency
    """
    if len(rgb_pixels) == 0:
        raise ValueError("Cannot extract colors from empty pixel array")

    counter = Counter(tuple(int(v) for v in p) for p in rgb_pixels)
    return tuple(Color(*rgb) for rgb, _ in counter.most_common(n_colors))
