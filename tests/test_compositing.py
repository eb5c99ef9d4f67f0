import numpy as np
import pytest

from picture_lab.errors import DimensionMismatchError
from picture_lab.picture import Picture
from picture_lab.pixel import Pixel
from picture_lab.transforms.compositing import channel_distance

GREEN = (0, 255, 0)


def _green_screen() -> Picture:
    picture = Picture.solid(2, 3, GREEN)
    picture.set_pixel(0, 0, Pixel(200, 10, 10))
    picture.set_pixel(2, 1, Pixel(10, 240, 5))
    return picture


def test_channel_distance() -> None:
    samples = np.array([[[3, 4, 0], [0, 0, 0]]], dtype=np.uint8)
    assert channel_distance(samples, (0, 0, 0)).tolist() == [[5.0, 0.0]]


def test_chromakey_replaces_pixels_near_key() -> None:
    picture = _green_screen()
    background = Picture.solid(2, 3, (1, 2, 3))
    picture.chromakey(background, Pixel(*GREEN), 30)
    assert picture.get_pixel(0, 0) == (200, 10, 10)
    assert picture.get_pixel(1, 0) == (1, 2, 3)
    # (10, 240, 5) is about 18.7 away from pure green
    assert picture.get_pixel(2, 1) == (1, 2, 3)


def test_chromakey_threshold_is_exclusive() -> None:
    picture = _green_screen()
    original = picture.copy()
    picture.chromakey(Picture.solid(2, 3, (1, 2, 3)), GREEN, 0)
    assert picture == original


def test_chromakey_rejects_mismatched_sizes() -> None:
    picture = _green_screen()
    original = picture.copy()
    with pytest.raises(DimensionMismatchError):
        picture.chromakey(Picture.solid(3, 3), GREEN, 100)
    assert picture == original
