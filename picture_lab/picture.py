"""The Picture grid and its transform library."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from picture_lab.config import IOSettings
from picture_lab.errors import PictureConstructionError, PixelBoundsError
from picture_lab.pixel import WHITE, Color, Pixel, as_color, clamp_channel
from picture_lab.transforms import compositing, geometry, neighborhood, steganography, tone
from picture_lab.utils.io import normalize_save_path, read_rgb_array, resolve_image_path, to_rgb_array, write_rgb_array
from picture_lab.utils.logging import get_logger, log_timer

_LOGGER = get_logger(__name__)

ColorLike = Union[Pixel, Color]


class Picture:
    """A rectangle of RGB pixels.

    The grid is stored as a private ``(height, width, 3)`` uint8 array that
    no other object references. Accessors hand out copies, so a ``Pixel``
    returned by ``get_pixel`` is detached from the picture.

    Transforms either mutate the picture in place (tone and geometric
    transforms, ``chromakey``, ``encode``) or return a new Picture and leave
    the receiver unchanged (``simple_blur``, ``blur``, ``edge_detection``,
    ``glass_filter``, ``decode``). In-place transforms compute their full
    result before replacing the grid, so a failing call changes nothing.
    """

    def __init__(self, samples: np.ndarray) -> None:
        self._pixels = to_rgb_array(samples)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def _wrap(cls, pixels: np.ndarray) -> "Picture":
        picture = cls.__new__(cls)
        picture._pixels = pixels
        return picture

    @classmethod
    def from_array(cls, samples: np.ndarray) -> "Picture":
        """Build a picture from decoded ``(H, W, 3)`` or ``(H, W)`` samples."""
        return cls(samples)

    @classmethod
    def from_file(
        cls,
        name: Union[str, Path],
        images_dir: Optional[Path] = None,
    ) -> "Picture":
        """Decode an image file.

        Parameters
        ----------
        name:
            Path to the image, or a file name inside ``images_dir``.
        images_dir:
            Fallback directory for bare names. Defaults to the configured
            ``images`` directory.
        """
        if images_dir is None:
            images_dir = IOSettings().images_dir
        return cls(read_rgb_array(resolve_image_path(name, images_dir)))

    @classmethod
    def solid(cls, height: int, width: int, color: ColorLike = WHITE) -> "Picture":
        """A ``height`` x ``width`` picture filled with ``color`` (white by default)."""
        if height <= 0 or width <= 0:
            raise PictureConstructionError(
                f"Picture dimensions must be positive, got height={height}, width={width}."
            )
        fill = np.array([clamp_channel(v) for v in as_color(color)], dtype=np.uint8)
        pixels = np.empty((int(height), int(width), 3), dtype=np.uint8)
        pixels[...] = fill
        return cls._wrap(pixels)

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[ColorLike]]) -> "Picture":
        """Build a picture from rows of pixels; the grid must be a non-empty rectangle."""
        if len(grid) == 0 or len(grid[0]) == 0:
            raise PictureConstructionError("Can't have an empty image!")
        width = len(grid[0])
        for index, row in enumerate(grid):
            if len(row) != width:
                raise PictureConstructionError(
                    f"Pictures must be rectangles. len(grid[0])={width} != len(grid[{index}])={len(row)}!"
                )
        pixels = np.empty((len(grid), width, 3), dtype=np.uint8)
        for y, row in enumerate(grid):
            for x, cell in enumerate(row):
                pixels[y, x] = [clamp_channel(v) for v in as_color(cell)]
        return cls._wrap(pixels)

    @classmethod
    def from_picture(cls, picture: "Picture") -> "Picture":
        """Deep copy of another picture."""
        return cls._wrap(picture._pixels.copy())

    def copy(self) -> "Picture":
        return Picture.from_picture(self)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    def get_width(self) -> int:
        return self.width

    def get_height(self) -> int:
        return self.height

    def _check_bounds(self, x: int, y: int) -> None:
        if not all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in (x, y)):
            raise PixelBoundsError(f"No pixel at ({x}, {y})")
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelBoundsError(f"No pixel at ({x}, {y})")

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Copy of the pixel in column ``x``, row ``y``."""
        self._check_bounds(x, y)
        red, green, blue = self._pixels[y, x]
        return Pixel(int(red), int(green), int(blue))

    def set_pixel(self, x: int, y: int, pixel: ColorLike) -> None:
        """Write ``pixel`` into column ``x``, row ``y``."""
        self._check_bounds(x, y)
        if pixel is None:
            raise TypeError("Pixel is null")
        self._pixels[y, x] = [clamp_channel(v) for v in as_color(pixel)]

    def get_pixels(self) -> List[List[Pixel]]:
        """The grid as rows of detached Pixel copies."""
        return [
            [Pixel(int(r), int(g), int(b)) for r, g, b in row]
            for row in self._pixels.tolist()
        ]

    def to_array(self) -> np.ndarray:
        """Copy of the grid as an ``(height, width, 3)`` uint8 array."""
        return self._pixels.copy()

    # ------------------------------------------------------------------
    # Transform plumbing
    # ------------------------------------------------------------------
    def _replace(self, name: str, transform: Callable[..., np.ndarray], *args) -> None:
        with log_timer(_LOGGER, f"{name} on {self.width}x{self.height}"):
            result = transform(self._pixels, *args)
        self._pixels = result

    def _derive(self, name: str, transform: Callable[..., np.ndarray], *args) -> "Picture":
        with log_timer(_LOGGER, f"{name} on {self.width}x{self.height}"):
            result = transform(self._pixels, *args)
        return Picture._wrap(result)

    # Tone -------------------------------------------------------------
    def zero_blue(self) -> None:
        """Remove all blue from the picture."""
        self._replace("zero_blue", tone.zero_blue)

    def keep_only_blue(self) -> None:
        """Remove everything but blue from the picture."""
        self._replace("keep_only_blue", tone.keep_only_blue)

    def negate(self) -> None:
        """Invert the picture's colors."""
        self._replace("negate", tone.negate)

    def grayscale(self) -> None:
        self._replace("grayscale", tone.grayscale)

    def solarize(self, threshold: float) -> None:
        """Simulate over-exposure: invert channels darker than ``threshold``."""
        self._replace("solarize", tone.solarize, threshold)

    def tint(self, red: float, blue: float, green: float) -> None:
        """Scale channels by the given factors (note the red, blue, green order)."""
        self._replace("tint", tone.tint, red, blue, green)

    def posterize(self, span: int) -> None:
        """Reduce the number of colors for a graphic poster effect."""
        self._replace("posterize", tone.posterize, span)

    # Geometry ---------------------------------------------------------
    def mirror_vertical(self) -> None:
        """Mirror about the vertical midline; only the left half changes."""
        self._replace("mirror_vertical", geometry.mirror_vertical)

    def mirror_right_to_left(self) -> None:
        self._replace("mirror_right_to_left", geometry.mirror_right_to_left)

    def mirror_horizontal(self) -> None:
        """Mirror about the horizontal midline; only the top half changes."""
        self._replace("mirror_horizontal", geometry.mirror_horizontal)

    def mirror_top_to_bottom(self) -> None:
        """Mirror about the horizontal midline; only the bottom half changes."""
        self._replace("mirror_top_to_bottom", geometry.mirror_top_to_bottom)

    def vertical_flip(self) -> None:
        """Flip the picture upside down."""
        self._replace("vertical_flip", geometry.vertical_flip)

    def mirror_region(self, top: int, bottom: int, left: int, right: int) -> None:
        self._replace("mirror_region", geometry.mirror_region, top, bottom, left, right)

    def fix_roof(self) -> None:
        """Fix the roof on the greek temple picture."""
        self._replace("fix_roof", geometry.fix_roof)

    # Neighborhood -----------------------------------------------------
    def simple_blur(self) -> "Picture":
        return self._derive("simple_blur", neighborhood.simple_blur)

    def blur(self, radius: int) -> "Picture":
        """Blur using the pixels within ``radius`` of each pixel."""
        return self._derive("blur", neighborhood.blur, radius)

    def edge_detection(self, threshold: float) -> "Picture":
        """Black-on-white edge map; see ``neighborhood.edge_detection``."""
        return self._derive("edge_detection", neighborhood.edge_detection, threshold)

    def glass_filter(
        self,
        distance: int,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Picture":
        """Simulate looking at the picture through a pane of glass.

        Pass ``seed`` or ``rng`` for a reproducible result.
        """
        if rng is None:
            rng = np.random.default_rng(seed)
        return self._derive("glass_filter", neighborhood.glass_filter, distance, rng)

    # Compositing and steganography ------------------------------------
    def chromakey(self, other: "Picture", key_color: ColorLike, threshold: float) -> None:
        """Copy ``other``'s pixels wherever this picture is within ``threshold`` of ``key_color``."""
        self._replace("chromakey", compositing.chromakey, other._pixels, as_color(key_color), threshold)

    def encode(self, message: "Picture", threshold: float = steganography.DEFAULT_BLACK_THRESHOLD) -> None:
        """Hide ``message`` in this picture."""
        self._replace("encode", steganography.encode, message._pixels, threshold)

    def decode(self) -> "Picture":
        """Return a new picture containing the message hidden in this one."""
        return self._derive("decode", steganography.decode)

    # ------------------------------------------------------------------
    # Sinks
    # ------------------------------------------------------------------
    def save(self, path: Union[str, Path], settings: Optional[IOSettings] = None) -> Path:
        """Write the picture to ``path`` and return the path actually written.

        An extension outside ``settings.allowed_extensions`` gets
        ``settings.default_extension`` appended.
        """
        settings = settings or IOSettings()
        target = normalize_save_path(
            Path(path), settings.allowed_extensions, settings.default_extension
        )
        return write_rgb_array(target, self._pixels, quality=settings.jpeg_quality)

    def view(self, title: Optional[str] = None):
        """Render the picture in a matplotlib window and return the figure."""
        from picture_lab.visualize import show_picture

        return show_picture(self, title=title)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Picture):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __repr__(self) -> str:
        return f"Picture(width={self.width}, height={self.height})"
