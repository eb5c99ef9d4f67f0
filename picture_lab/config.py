"""Typed settings built from the YAML configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from picture_lab.transforms.steganography import DEFAULT_BLACK_THRESHOLD
from picture_lab.utils.io import JPEG_EXTENSIONS

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG = REPO_ROOT / "configs/default.yaml"


@dataclass
class IOSettings:
    """Where pictures are loaded from and how they are saved."""

    images_dir: Path = Path("images")
    default_extension: str = ".jpg"
    allowed_extensions: Tuple[str, ...] = JPEG_EXTENSIONS
    jpeg_quality: int = 95

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "IOSettings":
        defaults = cls()
        return cls(
            images_dir=Path(cfg.get("images_dir", defaults.images_dir)),
            default_extension=str(cfg.get("default_extension", defaults.default_extension)),
            allowed_extensions=tuple(cfg.get("allowed_extensions", defaults.allowed_extensions)),
            jpeg_quality=int(cfg.get("jpeg_quality", defaults.jpeg_quality)),
        )


@dataclass
class StegoSettings:
    """Steganography parameters."""

    black_threshold: float = DEFAULT_BLACK_THRESHOLD

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "StegoSettings":
        return cls(black_threshold=float(cfg.get("black_threshold", DEFAULT_BLACK_THRESHOLD)))


@dataclass
class LabSettings:
    """All settings shared by the library and scripts."""

    io: IOSettings = field(default_factory=IOSettings)
    stego: StegoSettings = field(default_factory=StegoSettings)
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "LabSettings":
        seed = config.get("glass", {}).get("seed")
        return cls(
            io=IOSettings.from_dict(config.get("io", {})),
            stego=StegoSettings.from_dict(config.get("steganography", {})),
            seed=int(seed) if seed is not None else None,
        )
