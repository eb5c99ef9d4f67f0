"""Red-channel parity steganography.

One bit is hidden per pixel in the least significant bit of the red
channel: odd means "message pixel is dark", even means "background".
"""
from __future__ import annotations

import numpy as np

from picture_lab.pixel import BLACK, WHITE
from picture_lab.transforms.compositing import channel_distance, require_same_shape

# Message cells closer than this to black are hidden as set bits.
DEFAULT_BLACK_THRESHOLD = 50.0


def threshold_message(message: np.ndarray, threshold: float = DEFAULT_BLACK_THRESHOLD) -> np.ndarray:
    """Reduce a message image to black (dark cells) and white (everything else)."""
    dark = channel_distance(message, BLACK) < threshold
    result = np.empty_like(message, dtype=np.uint8)
    result[...] = np.array(WHITE, dtype=np.uint8)
    result[dark] = np.array(BLACK, dtype=np.uint8)
    return result


def encode(
    pixels: np.ndarray,
    message: np.ndarray,
    threshold: float = DEFAULT_BLACK_THRESHOLD,
) -> np.ndarray:
    """Hide ``message`` in the red-channel parity of ``pixels``.

    Parameters
    ----------
    pixels:
        Cover RGB array.
    message:
        Message RGB array of the same shape.
    threshold:
        Message cells with a distance to black strictly below this value
        are encoded as odd red values.

    Returns
    -------
    numpy.ndarray
        Cover array carrying the message.
    """
    require_same_shape(pixels, message, "encode")
    result = pixels.copy()
    red = result[..., 0] & np.uint8(0xFE)
    dark = channel_distance(message, BLACK) < threshold
    result[..., 0] = red + dark.astype(np.uint8)
    return result


def decode(pixels: np.ndarray) -> np.ndarray:
    """Recover the hidden message: black where red is odd, white elsewhere."""
    result = np.empty_like(pixels, dtype=np.uint8)
    result[...] = np.array(WHITE, dtype=np.uint8)
    result[(pixels[..., 0] % 2) == 1] = np.array(BLACK, dtype=np.uint8)
    return result
