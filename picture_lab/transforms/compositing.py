"""Color distance and chroma-key compositing."""
from __future__ import annotations

from typing import Sequence

import numpy as np

from picture_lab.errors import DimensionMismatchError


def channel_distance(pixels: np.ndarray, color: Sequence[int]) -> np.ndarray:
    """Euclidean RGB distance from every pixel to ``color``.

    Returns
    -------
    numpy.ndarray
        ``(height, width)`` float64 array.
    """
    target = np.asarray(color, dtype=np.float64).reshape(1, 1, 3)
    diff = pixels.astype(np.float64) - target
    return np.sqrt(np.sum(diff * diff, axis=-1))


def pairwise_distance(pixels_a: np.ndarray, pixels_b: np.ndarray) -> np.ndarray:
    """Per-cell Euclidean RGB distance between two same-shaped arrays."""
    diff = pixels_a.astype(np.float64) - pixels_b.astype(np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def require_same_shape(pixels: np.ndarray, other: np.ndarray, operation: str) -> None:
    if pixels.shape != other.shape:
        raise DimensionMismatchError(
            f"{operation} needs pictures of identical size: "
            f"{pixels.shape[1]}x{pixels.shape[0]} vs {other.shape[1]}x{other.shape[0]}."
        )


def chromakey(
    pixels: np.ndarray,
    other: np.ndarray,
    key_color: Sequence[int],
    threshold: float,
) -> np.ndarray:
    """Replace pixels close to ``key_color`` with the pixels of ``other``.

    A cell is replaced when its distance to ``key_color`` is strictly less
    than ``threshold``.
    """
    require_same_shape(pixels, other, "chromakey")
    matches = channel_distance(pixels, key_color) < threshold
    return np.where(matches[..., np.newaxis], other, pixels).astype(np.uint8)
