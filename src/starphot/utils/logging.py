# src/starphot/utils/logging.py
"""
starphot: Unified Logging Utility
---------------------------------

Structured logging for the photometry CLI and batch driver:
- Rich console output (colorized, human-friendly) on a terminal.
- Plain ``LEVEL: message`` lines otherwise (pipes, CI).
- Optional JSONL file log (machine-readable), one object per record.

Console output goes to stderr so photometry records on stdout stay clean.

Usage
-----
from starphot.utils.logging import get_logger

logger = get_logger(__name__)
logger.info("Processing file %s", path, extra={"source": str(path)})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "starphot"
_CONTEXT_KEYS = ("source", "slice", "radius", "stage")

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


class JSONLFormatter(logging.Formatter):
    """Formatter that emits one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        base: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_KEYS:
            if hasattr(record, key):
                base[key] = getattr(record, key)
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


def level_from_env(default: str = "WARNING") -> int:
    """Resolve STARPHOT_LOGLEVEL (DEBUG/INFO/WARNING/ERROR/CRITICAL)."""
    return _LEVELS.get(os.environ.get("STARPHOT_LOGLEVEL", default).upper(), logging.WARNING)


def configure_logging(level: Optional[int] = None, log_file: Optional[Path] = None) -> logging.Logger:
    """
    (Re)configure the package logger. Safe to call more than once: previously
    installed starphot handlers are replaced, never stacked.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    lvl = level if level is not None else level_from_env()
    logger.setLevel(lvl)
    logger.propagate = False

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if sys.stderr.isatty():
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_path=False,
        )
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    console_handler.setLevel(lvl)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(JSONLFormatter())
        logger.addHandler(fh)
        logger.setLevel(min(lvl, logging.DEBUG))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a logger under the ``starphot`` namespace.

    Handlers live on the package root logger only, so module loggers created
    before or after ``configure_logging`` behave the same.
    """
    if not name or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
