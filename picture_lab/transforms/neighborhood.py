"""Neighborhood filters: blurs, edge detection and the glass effect."""
from __future__ import annotations

from typing import Optional

import numpy as np

from picture_lab.errors import InvalidArgumentError
from picture_lab.pixel import BLACK, WHITE
from picture_lab.transforms.compositing import pairwise_distance
from picture_lab.utils.logging import get_logger

_LOGGER = get_logger(__name__)


def simple_blur(pixels: np.ndarray) -> np.ndarray:
    """Average each cell with its in-bounds up/down/left/right neighbors."""
    values = pixels.astype(np.int32)
    total = values.copy()
    count = np.ones(pixels.shape[:2], dtype=np.int32)

    total[1:] += values[:-1]
    count[1:] += 1
    total[:-1] += values[1:]
    count[:-1] += 1
    total[:, 1:] += values[:, :-1]
    count[:, 1:] += 1
    total[:, :-1] += values[:, 1:]
    count[:, :-1] += 1

    return (total // count[..., np.newaxis]).astype(np.uint8)


def _window_bounds(size: int, radius: int) -> tuple[np.ndarray, np.ndarray]:
    centers = np.arange(size)
    start = np.clip(centers - radius, 0, size)
    stop = np.clip(centers + radius + 1, 0, size)
    return start, stop


def blur(pixels: np.ndarray, radius: int) -> np.ndarray:
    """Box blur over a ``(2 * radius + 1)`` square window clipped to the grid.

    Window sums come from a summed-area table, so the cost does not depend
    on ``radius``.

    Parameters
    ----------
    pixels:
        RGB array.
    radius:
        Half-size of the window. ``0`` returns an identical copy.

    Returns
    -------
    numpy.ndarray
        Blurred RGB array with integer-truncated means.
    """
    if int(radius) != radius or radius < 0:
        raise InvalidArgumentError(f"Blur radius must be a non-negative integer, got {radius}.")
    radius = int(radius)
    height, width = pixels.shape[:2]

    table = np.zeros((height + 1, width + 1, 3), dtype=np.int64)
    table[1:, 1:] = pixels.astype(np.int64).cumsum(axis=0).cumsum(axis=1)

    top, bottom = _window_bounds(height, radius)
    left, right = _window_bounds(width, radius)
    sums = (
        table[bottom][:, right]
        - table[top][:, right]
        - table[bottom][:, left]
        + table[top][:, left]
    )
    counts = (bottom - top)[:, np.newaxis] * (right - left)[np.newaxis, :]
    return (sums // counts[..., np.newaxis]).astype(np.uint8)


def edge_detection(pixels: np.ndarray, threshold: float) -> np.ndarray:
    """Mark cells whose right or lower neighbor differs by more than ``threshold``.

    Distances are truncated to whole numbers before the comparison. A cell
    becomes black when either truncated distance exceeds the threshold and
    white otherwise. The bottom row and right column are copied unchanged.
    """
    result = pixels.copy()
    inner = pixels[:-1, :-1]
    below = np.floor(pairwise_distance(inner, pixels[1:, :-1]))
    right = np.floor(pairwise_distance(inner, pixels[:-1, 1:]))
    is_edge = (below > threshold) | (right > threshold)
    result[:-1, :-1] = np.where(
        is_edge[..., np.newaxis],
        np.array(BLACK, dtype=np.uint8),
        np.array(WHITE, dtype=np.uint8),
    )
    return result


def glass_filter(
    pixels: np.ndarray,
    distance: int,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Scatter pixels as if seen through textured glass.

    Each cell copies the color of a random cell at most ``distance - 1``
    rows and columns away. Candidates that fall outside the grid are drawn
    again until every cell has an in-bounds source.

    Parameters
    ----------
    pixels:
        RGB array.
    distance:
        Scatter distance, at least 1. ``1`` returns an identical copy.
    rng:
        Random number generator; a fresh unseeded one when omitted.

    Returns
    -------
    numpy.ndarray
        Scattered RGB array.
    """
    if int(distance) != distance or distance < 1:
        raise InvalidArgumentError(f"Glass distance must be an integer >= 1, got {distance}.")
    distance = int(distance)
    rng = rng if rng is not None else np.random.default_rng()
    height, width = pixels.shape[:2]

    rows = np.repeat(np.arange(height), width)
    cols = np.tile(np.arange(width), height)
    source_rows = rows.copy()
    source_cols = cols.copy()

    pending = np.arange(height * width)
    rounds = 0
    while pending.size:
        rounds += 1
        candidate_rows = rows[pending] + rng.integers(-(distance - 1), distance, size=pending.size)
        candidate_cols = cols[pending] + rng.integers(-(distance - 1), distance, size=pending.size)
        inside = (
            (candidate_rows >= 0)
            & (candidate_rows < height)
            & (candidate_cols >= 0)
            & (candidate_cols < width)
        )
        accepted = pending[inside]
        source_rows[accepted] = candidate_rows[inside]
        source_cols[accepted] = candidate_cols[inside]
        pending = pending[~inside]

    _LOGGER.debug("Glass filter resolved %d cells in %d sampling rounds", height * width, rounds)
    return pixels[source_rows, source_cols].reshape(pixels.shape)
