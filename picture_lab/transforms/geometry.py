"""Geometric mirror and flip transforms.

The mirror functions are one-directional: they overwrite one half of the
image from the other half and leave the source half untouched.
``vertical_flip`` swaps the halves instead.
"""
from __future__ import annotations

import numpy as np

from picture_lab.errors import InvalidArgumentError

# Row/column window of the temple roof repaired by ``fix_roof``.
ROOF_WINDOW = (35, 97, 300, 488)


def mirror_vertical(pixels: np.ndarray) -> np.ndarray:
    """Copy the right half onto the left half, reflected about the midline."""
    result = pixels.copy()
    half = pixels.shape[1] // 2
    result[:, :half] = pixels[:, ::-1][:, :half]
    return result


def mirror_right_to_left(pixels: np.ndarray) -> np.ndarray:
    """Same reflection as ``mirror_vertical``."""
    return mirror_vertical(pixels)


def mirror_horizontal(pixels: np.ndarray) -> np.ndarray:
    """Copy the bottom half onto the top half, reflected about the midline."""
    result = pixels.copy()
    half = pixels.shape[0] // 2
    result[:half] = pixels[::-1][:half]
    return result


def mirror_top_to_bottom(pixels: np.ndarray) -> np.ndarray:
    """Copy the top half onto the bottom half, reflected about the midline."""
    result = pixels.copy()
    half = pixels.shape[0] // 2
    result[::-1][:half] = pixels[:half]
    return result


def vertical_flip(pixels: np.ndarray) -> np.ndarray:
    """Turn the image upside down by swapping mirrored rows."""
    return pixels[::-1].copy()


def mirror_region(pixels: np.ndarray, top: int, bottom: int, left: int, right: int) -> np.ndarray:
    """Reflect a rectangular window from the opposite side of the image.

    Each cell ``(row, col)`` with ``top <= row < bottom`` and
    ``left <= col < right`` takes the color at column ``width - col``.
    Columns are processed left to right against the partially updated grid,
    so a source column that was already rewritten contributes its new value.

    Parameters
    ----------
    pixels:
        RGB array.
    top, bottom:
        Row range, bottom exclusive.
    left, right:
        Column range, right exclusive. ``left`` must be at least 1.

    Returns
    -------
    numpy.ndarray
        Array with the window rewritten.
    """
    height, width = pixels.shape[:2]
    if not (0 <= top < bottom <= height):
        raise InvalidArgumentError(
            f"Row window [{top}, {bottom}) does not fit a picture of height {height}."
        )
    if not (1 <= left < right <= width):
        raise InvalidArgumentError(
            f"Column window [{left}, {right}) does not fit a picture of width {width}."
        )
    result = pixels.copy()
    for col in range(left, right):
        result[top:bottom, col] = result[top:bottom, width - col]
    return result


def fix_roof(pixels: np.ndarray) -> np.ndarray:
    """Repair the temple roof fixture by mirroring ``ROOF_WINDOW``."""
    top, bottom, left, right = ROOF_WINDOW
    return mirror_region(pixels, top, bottom, left, right)
