"""CLI for hiding a message picture inside a cover picture and revealing it."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from picture_lab.config import LabSettings
from picture_lab.errors import PictureError
from picture_lab.picture import Picture
from picture_lab.utils.config import deep_update, load_config, parse_set_overrides
from picture_lab.utils.logging import log_timer, resolve_log_level, setup_logging

STEGO_CONFIG = REPO_ROOT / "configs/stego.yaml"


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Hide a black-and-white message in the red channel of a picture, or reveal it."
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config.")
    parser.add_argument("--set", action="append", default=[], help="Override config values (dot notation).")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level.",
    )
    parser.add_argument("--quiet", action="store_true", help="Reduce logging to WARNING and above.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    encode = subparsers.add_parser("encode", help="Hide a message picture.")
    encode.add_argument("--cover", type=str, required=True, help="Cover picture.")
    encode.add_argument("--message", type=str, required=True, help="Message picture of the same size.")
    encode.add_argument("--output", type=str, required=True, help="Output path (use a lossless format).")

    decode = subparsers.add_parser("decode", help="Reveal a hidden message picture.")
    decode.add_argument("--input", type=str, required=True, help="Picture carrying a message.")
    decode.add_argument("--output", type=str, required=True, help="Output path for the message.")
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> LabSettings:
    config: Dict[str, Any] = load_config(Path(args.config) if args.config else STEGO_CONFIG)
    if args.set:
        deep_update(config, parse_set_overrides(args.set))
    return LabSettings.from_dict(config)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    logger = setup_logging("run_stego", level=resolve_log_level(args.log_level, quiet=args.quiet))
    settings = load_settings(args)

    try:
        if args.command == "encode":
            cover = Picture.from_file(args.cover, settings.io.images_dir)
            message = Picture.from_file(args.message, settings.io.images_dir)
            with log_timer(logger, "encode"):
                cover.encode(message, threshold=settings.stego.black_threshold)
            written = cover.save(args.output, settings.io)
            if written.suffix.lower() in (".jpg", ".jpeg"):
                logger.warning("JPEG output is lossy and will likely destroy the hidden message: %s", written)
        else:
            carrier = Picture.from_file(args.input, settings.io.images_dir)
            with log_timer(logger, "decode"):
                revealed = carrier.decode()
            written = revealed.save(args.output, settings.io)
    except (PictureError, OSError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1

    logger.info("%s complete: %s", args.command, written)
    return 0


if __name__ == "__main__":
    sys.exit(main())
