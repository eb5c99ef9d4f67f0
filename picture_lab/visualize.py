"""Render sinks built on matplotlib."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Protocol

if TYPE_CHECKING:
    from picture_lab.picture import Picture


def _pyplot():
    try:
        import matplotlib.pyplot as plt
    except ImportError as exc:
        raise ImportError(
            "matplotlib is required to render pictures. Install picture-lab[viz]."
        ) from exc
    return plt


class RenderSink(Protocol):
    """Anything that can draw a picture at a position and size."""

    def draw(self, picture: "Picture", x: float, y: float, width: float, height: float) -> None:
        ...


class MatplotlibSink:
    """Draw pictures into a matplotlib Axes using data coordinates.

    ``y`` grows downward like screen coordinates, so the Axes is created
    with an inverted y-axis spanning the canvas size.
    """

    def __init__(self, canvas_width: float, canvas_height: float, axes: Any = None) -> None:
        if axes is None:
            plt = _pyplot()
            _, axes = plt.subplots()
        axes.set_xlim(0, canvas_width)
        axes.set_ylim(canvas_height, 0)
        axes.set_aspect("equal")
        axes.axis("off")
        self.axes = axes

    def draw(self, picture: "Picture", x: float, y: float, width: float, height: float) -> None:
        self.axes.imshow(
            picture.to_array(),
            extent=(x, x + width, y + height, y),
            interpolation="nearest",
        )


def show_picture(picture: "Picture", title: Optional[str] = None, block: bool = False):
    """Display a picture in its own figure and return the figure."""
    plt = _pyplot()
    fig, ax = plt.subplots(figsize=(picture.width / 100.0 + 0.5, picture.height / 100.0 + 0.5))
    sink = MatplotlibSink(picture.width, picture.height, axes=ax)
    sink.draw(picture, 0, 0, picture.width, picture.height)
    if title:
        ax.set_title(title)
    plt.show(block=block)
    return fig


def save_comparison_panel(path: Path, before: "Picture", after: "Picture", title: str = "") -> Path:
    """Save a side-by-side before/after panel.

    Parameters
    ----------
    path:
        Output path for the figure.
    before:
        Picture prior to the transform.
    after:
        Picture after the transform.
    title:
        Figure title, typically the operation chain.
    """
    plt = _pyplot()
    fig, axes = plt.subplots(1, 2, figsize=(8, 4))
    for ax, picture, label in zip(axes, (before, after), ("before", "after")):
        ax.imshow(picture.to_array(), interpolation="nearest")
        ax.set_title(f"{label} ({picture.width}x{picture.height})")
        ax.axis("off")
    if title:
        fig.suptitle(title)
    fig.tight_layout()
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path
