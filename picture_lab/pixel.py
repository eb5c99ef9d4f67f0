"""RGB pixel value type."""
from __future__ import annotations

import math
import numbers
from typing import Tuple, Union

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)

CHANNEL_MIN = 0
CHANNEL_MAX = 255


def clamp_channel(value: float) -> int:
    """Coerce a channel value to an int in [0, 255].

    NaN maps to 0 and infinities saturate.
    """
    if isinstance(value, numbers.Integral):
        return max(CHANNEL_MIN, min(CHANNEL_MAX, int(value)))
    if math.isnan(value):
        return CHANNEL_MIN
    if math.isinf(value):
        return CHANNEL_MAX if value > 0 else CHANNEL_MIN
    return max(CHANNEL_MIN, min(CHANNEL_MAX, int(value)))


def as_color(value: Union["Pixel", Color]) -> Color:
    if isinstance(value, Pixel):
        return value.get_color()
    red, green, blue = value
    return red, green, blue


class Pixel:
    """A mutable red/green/blue triple.

    Every setter clamps into [0, 255] instead of raising, so computed
    intermediate values from the transforms can be written back directly.
    """

    __slots__ = ("_red", "_green", "_blue")

    def __init__(self, red: float = 0, green: float = 0, blue: float = 0) -> None:
        self._red = clamp_channel(red)
        self._green = clamp_channel(green)
        self._blue = clamp_channel(blue)

    @classmethod
    def from_color(cls, color: Color) -> "Pixel":
        red, green, blue = color
        return cls(red, green, blue)

    @property
    def red(self) -> int:
        return self._red

    @red.setter
    def red(self, value: float) -> None:
        self._red = clamp_channel(value)

    @property
    def green(self) -> int:
        return self._green

    @green.setter
    def green(self, value: float) -> None:
        self._green = clamp_channel(value)

    @property
    def blue(self) -> int:
        return self._blue

    @blue.setter
    def blue(self, value: float) -> None:
        self._blue = clamp_channel(value)

    def get_red(self) -> int:
        return self._red

    def get_green(self) -> int:
        return self._green

    def get_blue(self) -> int:
        return self._blue

    def set_red(self, value: float) -> None:
        self.red = value

    def set_green(self, value: float) -> None:
        self.green = value

    def set_blue(self, value: float) -> None:
        self.blue = value

    def get_color(self) -> Color:
        return self._red, self._green, self._blue

    def set_color(self, *args) -> None:
        """Set all channels from a color tuple, a Pixel, or three values."""
        if len(args) == 1:
            red, green, blue = as_color(args[0])
        elif len(args) == 3:
            red, green, blue = args
        else:
            raise TypeError(f"set_color expects a color or 3 channel values, got {len(args)} arguments.")
        self._red = clamp_channel(red)
        self._green = clamp_channel(green)
        self._blue = clamp_channel(blue)

    def color_distance(self, other: Union["Pixel", Color]) -> float:
        """Euclidean distance between this pixel and another color."""
        red, green, blue = as_color(other)
        return math.sqrt(
            (self._red - red) ** 2 + (self._green - green) ** 2 + (self._blue - blue) ** 2
        )

    def copy(self) -> "Pixel":
        return Pixel(self._red, self._green, self._blue)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Pixel):
            return self.get_color() == other.get_color()
        if isinstance(other, tuple) and len(other) == 3:
            return self.get_color() == tuple(other)
        return NotImplemented

    def __iter__(self):
        return iter(self.get_color())

    def __repr__(self) -> str:
        return f"Pixel(red={self._red}, green={self._green}, blue={self._blue})"
