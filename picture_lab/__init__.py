"""Raster picture manipulation: tone, geometry, filters, compositing and steganography."""
from .errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    PictureConstructionError,
    PictureError,
    PictureSinkError,
    PixelBoundsError,
)
from .picture import Picture
from .pixel import BLACK, WHITE, Color, Pixel

__all__ = [
    "BLACK",
    "WHITE",
    "Color",
    "Pixel",
    "Picture",
    "PictureError",
    "PictureConstructionError",
    "PixelBoundsError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "PictureSinkError",
]
