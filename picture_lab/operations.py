"""Named operation registry and pipeline runner."""
from __future__ import annotations

from dataclasses import dataclass
import inspect
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from picture_lab.errors import InvalidArgumentError
from picture_lab.picture import Picture
from picture_lab.utils.logging import get_logger

_LOGGER = get_logger(__name__)

# Parameters that name a second picture rather than a scalar.
PICTURE_PARAMS = ("other", "message")

PictureLoader = Callable[[Path], Picture]


@dataclass(frozen=True)
class Operation:
    """A picture transform exposed under a stable key."""

    key: str
    label: str
    description: str
    returns_new: bool

    def apply(self, picture: Picture, **params: Any) -> Picture:
        """Run the transform and return the resulting picture.

        In-place operations mutate and return ``picture``; the others return
        the new picture they build.
        """
        method = getattr(picture, self.key)
        try:
            inspect.signature(method).bind(**params)
        except TypeError as exc:
            raise InvalidArgumentError(f"Bad parameters for '{self.key}': {exc}") from exc
        result = method(**params)
        return result if self.returns_new else picture


def build_operation_registry() -> Dict[str, Operation]:
    """Build the registry of every picture transform."""
    operations = [
        Operation("zero_blue", "Zero blue", "Set the blue channel to 0.", False),
        Operation("keep_only_blue", "Keep only blue", "Set red and green to 0.", False),
        Operation("negate", "Negate", "Invert every channel.", False),
        Operation("grayscale", "Grayscale", "Average the channels.", False),
        Operation("solarize", "Solarize", "Invert channels below a threshold.", False),
        Operation("tint", "Tint", "Scale channels by red, blue and green factors.", False),
        Operation("posterize", "Posterize", "Quantize channels to multiples of span.", False),
        Operation("mirror_vertical", "Mirror vertical", "Copy the right half onto the left.", False),
        Operation("mirror_right_to_left", "Mirror right to left", "Copy the right half onto the left.", False),
        Operation("mirror_horizontal", "Mirror horizontal", "Copy the bottom half onto the top.", False),
        Operation("mirror_top_to_bottom", "Mirror top to bottom", "Copy the top half onto the bottom.", False),
        Operation("vertical_flip", "Vertical flip", "Turn the picture upside down.", False),
        Operation("mirror_region", "Mirror region", "Reflect a window from the opposite side.", False),
        Operation("fix_roof", "Fix roof", "Repair the temple roof window.", False),
        Operation("simple_blur", "Simple blur", "Average with the four neighbors.", True),
        Operation("blur", "Blur", "Box blur within a radius.", True),
        Operation("edge_detection", "Edge detection", "Black-on-white edge map.", True),
        Operation("glass_filter", "Glass filter", "Scatter pixels within a distance.", True),
        Operation("chromakey", "Chroma key", "Replace key-colored pixels from another picture.", False),
        Operation("encode", "Steganography encode", "Hide a message picture in red parity.", False),
        Operation("decode", "Steganography decode", "Reveal a hidden message picture.", True),
    ]
    return {operation.key: operation for operation in operations}


def operation_labels(registry: Mapping[str, Operation]) -> List[str]:
    """Return operation labels in registry order."""
    return [operation.label for operation in registry.values()]


def _resolve_params(params: Dict[str, Any], loader: PictureLoader) -> Dict[str, Any]:
    resolved = dict(params)
    for name in PICTURE_PARAMS:
        value = resolved.get(name)
        if isinstance(value, (str, Path)):
            resolved[name] = loader(Path(value))
    if "key_color" in resolved and isinstance(resolved["key_color"], list):
        resolved["key_color"] = tuple(resolved["key_color"])
    return resolved


def apply_pipeline(
    picture: Picture,
    steps: Sequence[Mapping[str, Any]],
    registry: Optional[Mapping[str, Operation]] = None,
    loader: Optional[PictureLoader] = None,
) -> Picture:
    """Apply ``steps`` to a copy of ``picture`` and return the result.

    Parameters
    ----------
    picture:
        Input picture; it is not modified.
    steps:
        Sequence of ``{"op": key, **params}`` mappings.
    registry:
        Operation registry. Defaults to ``build_operation_registry()``.
    loader:
        Loads pictures named by path in ``other``/``message`` parameters.
        Defaults to ``Picture.from_file``.

    Returns
    -------
    Picture
        The transformed picture.
    """
    registry = registry if registry is not None else build_operation_registry()
    loader = loader if loader is not None else Picture.from_file

    current = picture.copy()
    for index, step in enumerate(steps):
        params = dict(step)
        key = params.pop("op", None)
        if key not in registry:
            raise InvalidArgumentError(
                f"Unknown operation '{key}' at step {index}. Known: {', '.join(registry)}"
            )
        operation = registry[key]
        current = operation.apply(current, **_resolve_params(params, loader))
        _LOGGER.debug("Step %d: %s %s", index, key, params)
    return current
