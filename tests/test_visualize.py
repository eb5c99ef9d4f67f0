from pathlib import Path

import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

from picture_lab.picture import Picture
from picture_lab.visualize import MatplotlibSink, save_comparison_panel


def test_save_comparison_panel(tmp_path: Path) -> None:
    before = Picture.solid(4, 6, (10, 200, 30))
    after = before.copy()
    after.negate()
    path = save_comparison_panel(tmp_path / "panels" / "negate.png", before, after, title="negate")
    assert path.exists()


def test_matplotlib_sink_draws_at_position() -> None:
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots()
    sink = MatplotlibSink(100, 50, axes=ax)
    sink.draw(Picture.solid(2, 2), 10, 5, 20, 10)
    image = ax.get_images()[0]
    assert tuple(image.get_extent()) == (10, 30, 15, 5)
    plt.close(fig)
