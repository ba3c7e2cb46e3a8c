"""Loguru helpers: diagnostics go to stderr only, stdout carries the protocol."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

STDERR_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | [Bridge] <level>{message}</level>"

_SINK_IDS: dict[str, int] = {}


def configure_stderr_logging(verbose: bool = False) -> int:
    """Replace every sink with a single stderr sink; DEBUG when verbose."""
    logger.remove()
    _SINK_IDS.clear()
    sink_id = logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=STDERR_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS["stderr"] = sink_id
    return sink_id


def ensure_rotating_log_file(path: str | Path, level: str = "DEBUG") -> Path:
    """Add a rotating file sink once per path."""
    log_path = Path(path).expanduser()
    key = str(log_path.resolve())
    if key in _SINK_IDS:
        return log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    sink_id = logger.add(
        str(log_path),
        level=level,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS[key] = sink_id
    return log_path
