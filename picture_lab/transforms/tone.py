"""Per-pixel tone transforms.

Every function takes an ``(height, width, 3)`` uint8 RGB array and returns a
new array of the same shape; the input is never modified.
"""
from __future__ import annotations

import numpy as np

from picture_lab.errors import InvalidArgumentError


def _channels(pixels: np.ndarray) -> np.ndarray:
    return pixels.astype(np.int32)


def zero_blue(pixels: np.ndarray) -> np.ndarray:
    """Set the blue channel of every pixel to 0."""
    result = pixels.copy()
    result[..., 2] = 0
    return result


def keep_only_blue(pixels: np.ndarray) -> np.ndarray:
    """Set the red and green channels of every pixel to 0."""
    result = pixels.copy()
    result[..., :2] = 0
    return result


def negate(pixels: np.ndarray) -> np.ndarray:
    """Replace each channel value ``v`` with ``255 - v``."""
    return (255 - _channels(pixels)).astype(np.uint8)


def grayscale(pixels: np.ndarray) -> np.ndarray:
    """Replace every channel with the truncated mean ``(r + g + b) // 3``."""
    mean = _channels(pixels).sum(axis=-1) // 3
    return np.repeat(mean[..., np.newaxis], 3, axis=-1).astype(np.uint8)


def solarize(pixels: np.ndarray, threshold: float) -> np.ndarray:
    """Invert each channel independently when it is below ``threshold``."""
    values = _channels(pixels)
    return np.where(values < threshold, 255 - values, values).astype(np.uint8)


def tint(pixels: np.ndarray, red: float, blue: float, green: float) -> np.ndarray:
    """Scale each channel by its factor, clamping to [0, 255].

    Parameters
    ----------
    pixels:
        RGB array.
    red:
        Factor applied to the red channel.
    blue:
        Factor applied to the blue channel.
    green:
        Factor applied to the green channel.

    Returns
    -------
    numpy.ndarray
        Tinted RGB array. Products are truncated toward zero.
    """
    factors = np.array([red, green, blue], dtype=np.float64)
    product = pixels.astype(np.float64) * factors
    scaled = np.where(product <= 255.0, np.trunc(product), 255.0)
    return np.clip(scaled, 0.0, 255.0).astype(np.uint8)


def posterize(pixels: np.ndarray, span: int) -> np.ndarray:
    """Quantize each channel down to a multiple of ``span``."""
    if int(span) != span or span <= 0:
        raise InvalidArgumentError(f"Posterize span must be a positive integer, got {span}.")
    span = int(span)
    return ((_channels(pixels) // span) * span).astype(np.uint8)
