"""Logging utilities for the picture lab scripts and library."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
import json
import logging
import os
from pathlib import Path
import platform
import sys
import time
from typing import Any, Dict, Iterable, Optional, Sequence

from PIL import Image

_LOGGER_CONFIGURED = False
_CONTEXT_FILTER: Optional["RunContextFilter"] = None


@dataclass
class ProgressSnapshot:
    """State of a batch run after an update."""

    processed: int
    percent: float


class StructuredFormatter(logging.Formatter):
    """Prefix records with timestamp, level, script name and run id."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        script_name = getattr(record, "script_name", record.name)
        run_id = getattr(record, "run_id", None)
        prefix = f"[{timestamp}][{record.levelname}][{script_name}]"
        if run_id:
            prefix = f"{prefix}[{run_id}]"
        message = record.getMessage()
        if record.exc_info:
            return f"{prefix} {message}\n{self.formatException(record.exc_info)}"
        return f"{prefix} {message}"


class RunContextFilter(logging.Filter):
    """Attach the active script name and run id to every record."""

    def __init__(self, script_name: str, run_id: Optional[str]) -> None:
        super().__init__()
        self.script_name = script_name
        self.run_id = run_id

    def update(self, script_name: str, run_id: Optional[str]) -> None:
        self.script_name = script_name
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.script_name = self.script_name
        record.run_id = self.run_id
        return True


def _configure_root(level: int, script_name: str, run_id: Optional[str]) -> None:
    global _LOGGER_CONFIGURED, _CONTEXT_FILTER
    root = logging.getLogger()
    root.setLevel(level)

    if not _LOGGER_CONFIGURED:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        _LOGGER_CONFIGURED = True

    for handler in root.handlers:
        handler.setLevel(level)

    if _CONTEXT_FILTER is None:
        _CONTEXT_FILTER = RunContextFilter(script_name, run_id)
        for handler in root.handlers:
            handler.addFilter(_CONTEXT_FILTER)
    else:
        _CONTEXT_FILTER.update(script_name, run_id)
        for handler in root.handlers:
            if _CONTEXT_FILTER not in handler.filters:
                handler.addFilter(_CONTEXT_FILTER)


def resolve_log_level(level: str | int | None, debug: bool = False, quiet: bool = False) -> int:
    """Resolve a logging level from CLI flags; ``quiet`` wins over ``debug``."""
    if quiet:
        return logging.WARNING
    if debug:
        return logging.DEBUG
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return logging.INFO


def setup_logging(
    script_name: str,
    level: int | str | None = logging.INFO,
    log_file: Optional[Path] = None,
    run_id: Optional[str] = None,
) -> logging.Logger:
    """Configure structured logging for a CLI script and return its logger."""
    resolved = resolve_log_level(level)
    _configure_root(resolved, script_name, run_id)
    logger = logging.getLogger(script_name)
    logger.setLevel(resolved)
    if log_file is not None:
        add_file_handler(log_file, level=resolved)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, installing the structured handler on first use.

    The logger level is left unset so it follows the root level chosen by
    ``setup_logging``.
    """
    if not _LOGGER_CONFIGURED:
        _configure_root(logging.INFO, name, None)
    return logging.getLogger(name)


def add_file_handler(log_path: Path, level: int = logging.INFO) -> None:
    """Mirror root logging into ``log_path`` (appending, UTF-8)."""
    root = logging.getLogger()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(log_path.resolve()):
            return
    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(StructuredFormatter())
    if _CONTEXT_FILTER is not None:
        file_handler.addFilter(_CONTEXT_FILTER)
    root.addHandler(file_handler)


def summarize_images(paths: Sequence[Path], sample_n: int = 20) -> Dict[str, Any]:
    """Pre-flight summary of input images: extensions, sizes and modes."""
    extensions: Dict[str, int] = {}
    for path in paths:
        suffix = path.suffix.lower()
        extensions[suffix] = extensions.get(suffix, 0) + 1

    sizes = []
    modes = []
    errors = []
    for path in paths[:sample_n]:
        try:
            with Image.open(path) as img:
                modes.append(img.mode)
                sizes.append((img.width, img.height))
        except OSError as exc:
            errors.append({"path": str(path), "error": str(exc)})

    min_size = None
    max_size = None
    if sizes:
        widths, heights = zip(*sizes)
        min_size = {"width": int(min(widths)), "height": int(min(heights))}
        max_size = {"width": int(max(widths)), "height": int(max(heights))}

    return {
        "total": len(paths),
        "extensions": extensions,
        "sample_count": len(sizes),
        "min_size": min_size,
        "max_size": max_size,
        "sample_modes": modes,
        "errors": errors,
    }


def format_duration(seconds: float) -> str:
    seconds = max(seconds, 0.0)
    minutes, sec = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{sec:02d}"


class ProgressLogger:
    """Log batch progress every ``every`` items and at completion."""

    def __init__(self, total: int, logger: logging.Logger, every: int = 10, unit: str = "images") -> None:
        self.total = total
        self.logger = logger
        self.every = max(1, every)
        self.unit = unit
        self.start = time.perf_counter()
        self.count = 0

    def update(self, increment: int = 1) -> ProgressSnapshot:
        self.count += increment
        elapsed = time.perf_counter() - self.start
        remaining = max(self.total - self.count, 0)
        eta = remaining * elapsed / max(self.count, 1)
        percent = (self.count / self.total * 100.0) if self.total else 100.0
        if self.count == self.total or self.count % self.every == 0:
            self.logger.info(
                "Processed %d/%d %s (%.1f%%) | ETA %s",
                self.count,
                self.total,
                self.unit,
                percent,
                format_duration(eta),
            )
        return ProgressSnapshot(processed=self.count, percent=percent)


@contextmanager
def log_timer(logger: logging.Logger, label: str, level: int = logging.DEBUG) -> Iterable[None]:
    """Log how long the wrapped block took."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        logger.log(level, "%s completed in %.3fs", label, elapsed)


def write_manifest(output_dir: Path, manifest: Dict[str, Any], filename: str = "manifest.json") -> Path:
    """Write a JSON run manifest into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = output_dir / filename
    manifest_path.write_text(json.dumps(manifest, indent=2, default=str))
    return manifest_path


def collect_environment() -> Dict[str, Any]:
    """Interpreter, platform and working directory of the current run."""
    return {
        "python": sys.version.replace("\n", " "),
        "platform": platform.platform(),
        "cwd": os.getcwd(),
    }
