import numpy as np
import pytest

from picture_lab.errors import DimensionMismatchError
from picture_lab.picture import Picture
from picture_lab.pixel import BLACK, WHITE, Pixel
from picture_lab.transforms.steganography import threshold_message


def _message(shape, rng: np.random.Generator) -> Picture:
    samples = rng.integers(0, 256, size=shape + (3,), dtype=np.uint8)
    # sprinkle cells that are clearly dark
    dark = rng.random(shape) < 0.3
    samples[dark] = rng.integers(0, 20, size=(int(dark.sum()), 3), dtype=np.uint8)
    return Picture.from_array(samples)


def test_decode_of_encode_recovers_thresholded_message(random_picture: Picture, rng: np.random.Generator) -> None:
    message = _message((random_picture.height, random_picture.width), rng)
    random_picture.encode(message)
    decoded = random_picture.decode()
    assert np.array_equal(decoded.to_array(), threshold_message(message.to_array()))


def test_encode_changes_red_by_at_most_one(random_picture: Picture, rng: np.random.Generator) -> None:
    before = random_picture.to_array().astype(np.int32)
    random_picture.encode(_message((random_picture.height, random_picture.width), rng))
    after = random_picture.to_array().astype(np.int32)
    assert np.all(np.abs(after[..., 0] - before[..., 0]) <= 1)
    assert np.array_equal(after[..., 1:], before[..., 1:])


def test_black_distance_fifty_is_exclusive() -> None:
    cover = Picture.solid(1, 3, (255, 0, 0))
    message = Picture.solid(1, 3)
    message.set_pixel(0, 0, Pixel(*BLACK))
    message.set_pixel(1, 0, Pixel(30, 40, 0))  # exactly 50 from black
    message.set_pixel(2, 0, Pixel(30, 39, 0))  # just under 50
    cover.encode(message)
    assert [cover.get_pixel(x, 0).red for x in range(3)] == [255, 254, 255]
    decoded = cover.decode()
    assert [decoded.get_pixel(x, 0) == BLACK for x in range(3)] == [True, False, True]


def test_decode_defaults_to_white() -> None:
    decoded = Picture.solid(2, 2, (128, 1, 1)).decode()
    assert decoded == Picture.solid(2, 2, WHITE)


def test_encode_rejects_mismatched_sizes(random_picture: Picture) -> None:
    original = random_picture.copy()
    with pytest.raises(DimensionMismatchError):
        random_picture.encode(Picture.solid(2, 2))
    assert random_picture == original
