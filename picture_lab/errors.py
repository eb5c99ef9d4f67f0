"""Error types raised by the picture engine."""
from __future__ import annotations


class PictureError(Exception):
    """Base class for all picture engine errors."""


class PictureConstructionError(PictureError, ValueError):
    """Raised when a Picture cannot be built from its source."""


class PixelBoundsError(PictureError, IndexError):
    """Raised when a coordinate falls outside the pixel grid."""


class InvalidArgumentError(PictureError, ValueError):
    """Raised when a transform receives an unusable parameter."""


class DimensionMismatchError(InvalidArgumentError):
    """Raised when two pictures must share dimensions but do not."""


class PictureSinkError(PictureError, OSError):
    """Raised when a picture cannot be written to its destination."""
