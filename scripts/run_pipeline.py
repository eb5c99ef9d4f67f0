"""CLI for applying a picture operation pipeline to images."""
from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from picture_lab.config import DEFAULT_CONFIG, LabSettings
from picture_lab.errors import PictureError
from picture_lab.operations import apply_pipeline, build_operation_registry
from picture_lab.picture import Picture
from picture_lab.utils.config import deep_update, load_config, parse_set_overrides
from picture_lab.utils.io import collect_image_paths
from picture_lab.utils.logging import (
    ProgressLogger,
    collect_environment,
    resolve_log_level,
    setup_logging,
    summarize_images,
    write_manifest,
)
from picture_lab.utils.run import resolve_run_dir


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply picture transforms to an image or a directory.")
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config.")
    parser.add_argument("--input", type=str, required=True, help="Image file or directory of images.")
    parser.add_argument(
        "--recursive-input",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Recursively scan an input directory for images.",
    )
    parser.add_argument("--output-dir", type=str, default=None, help="Override output directory.")
    parser.add_argument(
        "--op",
        action="append",
        default=[],
        help="Operation step, e.g. 'negate' or 'blur:radius=2'. Repeatable; replaces the config pipeline.",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        help="Override config values with dot notation, e.g. io.jpeg_quality=80.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the glass filter.")
    parser.add_argument("--visualize", action="store_true", help="Save before/after panels.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--run-tag",
        type=str,
        default=None,
        help="Append a timestamped run tag to the output directory.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level.",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Optional log file path.")
    parser.add_argument("--quiet", action="store_true", help="Reduce logging to WARNING and above.")
    parser.add_argument("--run-id", type=str, default=None, help="Optional run identifier to include in logs.")
    return parser.parse_args(argv)


def _split_top_level(text: str, separator: str = ",") -> List[str]:
    parts: List[str] = []
    depth = 0
    current = ""
    for char in text:
        if char in "[{(":
            depth += 1
        elif char in "]})":
            depth -= 1
        if char == separator and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)
    return [part for part in parts if part.strip()]


def parse_op_spec(spec: str) -> Dict[str, Any]:
    """Parse ``name`` or ``name:key=value,key=value`` into a pipeline step.

    Values are parsed as YAML, so ``key_color=[0, 255, 0]`` becomes a list.
    """
    name, _, raw_params = spec.partition(":")
    name = name.strip()
    if not name:
        raise ValueError(f"Invalid --op '{spec}'. Expected name[:key=value,...].")
    step: Dict[str, Any] = {"op": name}
    for item in _split_top_level(raw_params):
        if "=" not in item:
            raise ValueError(f"Invalid parameter '{item}' in --op '{spec}'. Expected key=value.")
        key, value_str = item.split("=", 1)
        try:
            step[key.strip()] = yaml.safe_load(value_str)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML value for {key} in --op '{spec}': {exc}") from exc
    return step


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.output_dir:
        overrides.setdefault("output", {})["out_dir"] = args.output_dir
    if args.seed is not None:
        overrides.setdefault("glass", {})["seed"] = args.seed
    if args.visualize:
        overrides.setdefault("output", {})["visualize"] = True
    if args.op:
        overrides["pipeline"] = [parse_op_spec(spec) for spec in args.op]
    if args.set:
        deep_update(overrides, parse_set_overrides(args.set))
    return overrides


def load_base_config(args: argparse.Namespace) -> Dict[str, Any]:
    if args.config:
        return load_config(Path(args.config))
    return load_config(DEFAULT_CONFIG)


def resolve_steps(config: Dict[str, Any], settings: LabSettings) -> List[Dict[str, Any]]:
    """Pipeline steps from the config, with configured defaults filled in."""
    steps = [dict(step) for step in config.get("pipeline") or []]
    if not steps:
        raise ValueError("No pipeline steps configured. Pass --op or set 'pipeline' in the config.")
    for step in steps:
        if step.get("op") == "glass_filter" and settings.seed is not None:
            step.setdefault("seed", settings.seed)
        if step.get("op") == "encode":
            step.setdefault("threshold", settings.stego.black_threshold)
    return steps


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    log_level = resolve_log_level(args.log_level, debug=args.debug, quiet=args.quiet)
    log_file = Path(args.log_file) if args.log_file else None
    run_id = args.run_id or args.run_tag
    logger = setup_logging("run_pipeline", level=log_level, log_file=log_file, run_id=run_id)

    config = deep_update(load_base_config(args), build_overrides(args))
    output_cfg = config.setdefault("output", {})
    output_dir = resolve_run_dir(Path(output_cfg.get("out_dir", "outputs/pictures")), args.run_tag)
    output_cfg["out_dir"] = str(output_dir)
    settings = LabSettings.from_dict(config)
    steps = resolve_steps(config, settings)

    registry = build_operation_registry()
    unknown = [step.get("op") for step in steps if step.get("op") not in registry]
    if unknown:
        logger.error("Unknown operations %s. Known: %s", unknown, ", ".join(registry))
        return 2

    input_path = Path(args.input)
    manifest: Dict[str, Any] = {
        "created_at": time.strftime("%Y-%m-%d %H:%M:%S"),
        "args": vars(args),
        "environment": collect_environment(),
        "config": config,
        "outputs": [],
        "failures": [],
    }

    start_time = time.perf_counter()
    try:
        if input_path.is_dir():
            inputs = collect_image_paths(input_path, recursive=args.recursive_input)
        else:
            inputs = [input_path]
        if not inputs:
            raise ValueError(f"No input images found in {input_path}")

        summary = summarize_images(inputs)
        logger.info(
            "Pre-flight: %d inputs | extensions=%s | size range=%s -> %s",
            summary["total"],
            summary["extensions"],
            summary["min_size"],
            summary["max_size"],
        )
        logger.info("Pipeline: %s", " -> ".join(step["op"] for step in steps))

        def loader(path: Path) -> Picture:
            return Picture.from_file(path, settings.io.images_dir)

        progress = ProgressLogger(total=len(inputs), logger=logger)
        for path in inputs:
            try:
                picture = Picture.from_file(path, settings.io.images_dir)
                result = apply_pipeline(picture, steps, registry=registry, loader=loader)
                written = result.save(output_dir / path.name, settings.io)
                manifest["outputs"].append({"input": str(path), "output": str(written)})
                if output_cfg.get("visualize"):
                    from picture_lab.visualize import save_comparison_panel

                    save_comparison_panel(
                        output_dir / "panels" / f"{path.stem}.png",
                        picture,
                        result,
                        title=" -> ".join(step["op"] for step in steps),
                    )
            except (PictureError, OSError, ValueError) as exc:
                manifest["failures"].append({"input": str(path), "error": str(exc)})
                logger.exception("Failed to process %s", path)
            progress.update()
    except Exception as exc:
        manifest["failures"].append({"error": str(exc)})
        logger.exception("Pipeline run failed")
        raise
    finally:
        duration = time.perf_counter() - start_time
        manifest["timings"] = {"wall_time_s": duration}
        write_manifest(output_dir, manifest)
        if manifest["failures"]:
            error_report = output_dir / "error_report.json"
            error_report.write_text(json.dumps(manifest["failures"], indent=2))
            logger.warning("Failures recorded in %s", error_report)
        logger.info(
            "Summary: outputs=%d | failures=%d | runtime=%.2fs | output_dir=%s",
            len(manifest["outputs"]),
            len(manifest["failures"]),
            duration,
            output_dir,
        )

    return 1 if manifest["failures"] else 0


if __name__ == "__main__":
    sys.exit(main())
