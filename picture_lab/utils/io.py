"""Image IO: decode files into RGB arrays and encode arrays back to files."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from picture_lab.errors import PictureConstructionError, PictureSinkError
from picture_lab.utils.logging import get_logger

_LOGGER = get_logger(__name__)

IMAGE_EXTENSIONS = (".png", ".tif", ".tiff", ".bmp", ".jpg", ".jpeg", ".gif")
JPEG_EXTENSIONS = (".jpg", ".jpeg")


def collect_image_paths(directory: Path, recursive: bool = False) -> List[Path]:
    """Collect image paths from a directory.

    Parameters
    ----------
    directory:
        Directory to scan for images.
    recursive:
        When True, scan subdirectories recursively.

    Returns
    -------
    list of Path
        Sorted list of image paths.
    """
    if not directory.exists():
        raise FileNotFoundError(f"Input directory not found: {directory}")
    iterator = directory.rglob("*") if recursive else directory.iterdir()
    return sorted(p for p in iterator if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS)


def resolve_image_path(name: str | Path, images_dir: Optional[Path] = None) -> Path:
    """Find an image by path, falling back to ``images_dir / name``."""
    path = Path(name)
    if path.exists():
        return path
    if images_dir is not None and not path.is_absolute():
        candidate = Path(images_dir) / path
        if candidate.exists():
            return candidate
        raise FileNotFoundError(f"No picture at the location {candidate}!")
    raise FileNotFoundError(f"No picture at the location {path}!")


def to_rgb_array(array: np.ndarray) -> np.ndarray:
    """Coerce decoded samples to an ``(height, width, 3)`` uint8 array.

    Grayscale input is broadcast to three channels and an alpha channel is
    dropped. Values are clamped into [0, 255].
    """
    array = np.asarray(array)
    if array.ndim == 2:
        array = np.repeat(array[..., np.newaxis], 3, axis=-1)
    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise PictureConstructionError(f"Expected (H, W) or (H, W, 3) samples, got shape={array.shape}.")
    array = array[..., :3]
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise PictureConstructionError("Can't have an empty image!")
    if array.dtype == np.uint8:
        return array.copy()
    if not (np.issubdtype(array.dtype, np.integer) or np.issubdtype(array.dtype, np.floating)):
        raise PictureConstructionError(f"Unsupported sample dtype: {array.dtype}.")
    if np.issubdtype(array.dtype, np.floating):
        if not np.isfinite(array).all():
            raise PictureConstructionError("Samples contain NaN or infinite values.")
        array = np.trunc(array)
    return np.clip(array, 0, 255).astype(np.uint8)


def read_rgb_array(path: Path) -> np.ndarray:
    """Decode an image file into an RGB uint8 array.

    Raises
    ------
    FileNotFoundError
        When ``path`` does not exist.
    PictureConstructionError
        When the file is not a decodable raster image.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No picture at the location {path}!")
    try:
        with Image.open(path) as img:
            original_mode = img.mode
            array = np.array(img.convert("RGB"))
    except (UnidentifiedImageError, OSError) as exc:
        raise PictureConstructionError(f"Could not decode image {path}: {exc}") from exc
    _LOGGER.info(
        "Loaded image %s | mode=%s | size=%dx%d", path, original_mode, array.shape[1], array.shape[0]
    )
    return to_rgb_array(array)


def normalize_save_path(
    path: Path,
    allowed_extensions: Iterable[str] = JPEG_EXTENSIONS,
    default_extension: str = ".jpg",
) -> Path:
    """Append ``default_extension`` unless the suffix is already allowed.

    ``lilies`` and ``lilies.bmp`` become ``lilies.jpg`` and ``lilies.bmp.jpg``
    with the default settings; ``lilies.JPEG`` is kept.
    """
    path = Path(path)
    allowed = {ext.lower() for ext in allowed_extensions}
    if path.suffix.lower() in allowed:
        return path
    return path.with_name(path.name + default_extension)


def write_rgb_array(path: Path, array: np.ndarray, quality: int = 95) -> Path:
    """Encode an RGB uint8 array to ``path``; the format follows the suffix.

    Raises
    ------
    PictureSinkError
        When the file cannot be written.
    """
    path = Path(path)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected (H, W, 3) image, got shape {array.shape}.")
    save_kwargs = {"quality": int(quality)} if path.suffix.lower() in JPEG_EXTENSIONS else {}
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8)).save(path, **save_kwargs)
    except (OSError, ValueError) as exc:
        _LOGGER.error("Can't write to location: %s (%s)", path, exc)
        raise PictureSinkError(f"Can't write to location: {path}") from exc
    _LOGGER.info("File created at %s", path.resolve())
    return path
