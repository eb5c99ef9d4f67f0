import numpy as np
import pytest

from picture_lab.errors import InvalidArgumentError
from picture_lab.picture import Picture
from picture_lab.pixel import BLACK, WHITE, Pixel
from picture_lab.transforms import neighborhood


def _naive_blur(samples: np.ndarray, radius: int) -> np.ndarray:
    height, width = samples.shape[:2]
    out = np.zeros_like(samples)
    for y in range(height):
        for x in range(width):
            window = samples[max(0, y - radius) : y + radius + 1, max(0, x - radius) : x + radius + 1]
            flat = window.reshape(-1, 3).astype(np.int64)
            out[y, x] = flat.sum(axis=0) // flat.shape[0]
    return out


def test_simple_blur_uses_in_bounds_neighbors() -> None:
    samples = np.zeros((3, 3, 3), dtype=np.uint8)
    samples[1, 1] = 50
    picture = Picture.from_array(samples)
    blurred = picture.simple_blur()
    # center: (50 + 4 * 0) // 5
    assert blurred.get_pixel(1, 1) == (10, 10, 10)
    # edge (1, 0): itself, left, right, below -> 50 // 4
    assert blurred.get_pixel(1, 0) == (12, 12, 12)
    # corner touches neither the center nor its neighbors
    assert blurred.get_pixel(0, 0) == BLACK
    assert picture.get_pixel(1, 1) == (50, 50, 50)


def test_simple_blur_single_pixel() -> None:
    picture = Picture.solid(1, 1, (9, 8, 7))
    assert picture.simple_blur() == picture


def test_blur_radius_zero_is_identity(random_picture: Picture) -> None:
    assert random_picture.blur(0) == random_picture


@pytest.mark.parametrize("radius", [1, 2, 5, 20])
def test_blur_matches_naive_window_mean(random_picture: Picture, radius: int) -> None:
    expected = _naive_blur(random_picture.to_array(), radius)
    assert np.array_equal(random_picture.blur(radius).to_array(), expected)


def test_blur_rejects_negative_radius(random_picture: Picture) -> None:
    with pytest.raises(InvalidArgumentError):
        random_picture.blur(-1)


def test_blur_returns_new_picture(random_picture: Picture) -> None:
    original = random_picture.copy()
    blurred = random_picture.blur(1)
    assert blurred is not random_picture
    assert random_picture == original


def test_edge_detection_marks_either_neighbor() -> None:
    picture = Picture.solid(3, 3, (100, 100, 100))
    picture.set_pixel(2, 0, Pixel(0, 0, 0))  # right neighbor of (1, 0)
    picture.set_pixel(0, 2, Pixel(0, 0, 0))  # lower neighbor of (0, 1)
    edges = picture.edge_detection(50)
    assert edges.get_pixel(1, 0) == BLACK
    assert edges.get_pixel(0, 1) == BLACK
    assert edges.get_pixel(0, 0) == WHITE
    assert edges.get_pixel(1, 1) == WHITE
    # bottom row and right column keep their source colors
    assert edges.get_pixel(2, 0) == BLACK
    assert edges.get_pixel(2, 1) == (100, 100, 100)
    assert edges.get_pixel(1, 2) == (100, 100, 100)


def test_edge_detection_truncates_distance() -> None:
    picture = Picture.solid(2, 2, (0, 0, 0))
    picture.set_pixel(1, 0, Pixel(1, 1, 0))  # distance sqrt(2) ~ 1.41
    assert picture.edge_detection(1).get_pixel(0, 0) == WHITE
    assert picture.edge_detection(0).get_pixel(0, 0) == BLACK


def test_edge_detection_single_row_is_unchanged() -> None:
    picture = Picture.solid(1, 4, (3, 4, 5))
    assert picture.edge_detection(10) == picture


def test_glass_filter_is_reproducible_with_seed(random_picture: Picture) -> None:
    first = random_picture.glass_filter(3, seed=99)
    second = random_picture.glass_filter(3, seed=99)
    assert first == second


def test_glass_filter_distance_one_is_identity(random_picture: Picture) -> None:
    assert random_picture.glass_filter(1, seed=0) == random_picture


def test_glass_filter_samples_within_distance() -> None:
    height, width = 6, 8
    samples = np.zeros((height, width, 3), dtype=np.uint8)
    samples[..., 0] = np.arange(width, dtype=np.uint8)[np.newaxis, :]
    samples[..., 1] = np.arange(height, dtype=np.uint8)[:, np.newaxis]
    result = neighborhood.glass_filter(samples, 3, rng=np.random.default_rng(5))
    cols = result[..., 0].astype(int)
    rows = result[..., 1].astype(int)
    assert np.all(np.abs(cols - np.arange(width)[np.newaxis, :]) <= 2)
    assert np.all(np.abs(rows - np.arange(height)[:, np.newaxis]) <= 2)


@pytest.mark.parametrize("distance", [0, -3])
def test_glass_filter_rejects_bad_distance(random_picture: Picture, distance: int) -> None:
    with pytest.raises(InvalidArgumentError):
        random_picture.glass_filter(distance)
