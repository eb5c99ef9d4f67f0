"""Shared picture fixtures."""
from __future__ import annotations

import numpy as np
import pytest

from picture_lab.picture import Picture


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def random_picture(rng: np.random.Generator) -> Picture:
    samples = rng.integers(0, 256, size=(7, 9, 3), dtype=np.uint8)
    return Picture.from_array(samples)


@pytest.fixture
def gradient_picture() -> Picture:
    height, width = 4, 6
    samples = np.zeros((height, width, 3), dtype=np.uint8)
    samples[..., 0] = np.arange(width, dtype=np.uint8)[np.newaxis, :] * 40
    samples[..., 1] = np.arange(height, dtype=np.uint8)[:, np.newaxis] * 60
    samples[..., 2] = 7
    return Picture.from_array(samples)
