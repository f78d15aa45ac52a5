# src/starphot/utils/io.py
"""
starphot: I/O Utilities
-----------------------
Small, safe file helpers shared by the config loader and the report writers:

- Path utils: expand env/user, ensure directories
- Atomic writes to prevent partial files on crash
- Read JSON / YAML, write text

Usage
-----
from starphot.utils.io import p, ensure_dir, atomic_write, read_json, read_yaml, write_text
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Union

import yaml


# -------------------------------------------------------------------
# Path helpers
# -------------------------------------------------------------------

def p(path: Union[str, Path]) -> Path:
    """Normalize a path: expand env vars and ~, return Path."""
    return Path(os.path.expandvars(os.path.expanduser(str(path)))).resolve()


def ensure_dir(path: Union[str, Path]) -> Path:
    """Ensure directory exists; returns the directory as Path."""
    d = p(path)
    d.mkdir(parents=True, exist_ok=True)
    return d


# -------------------------------------------------------------------
# Atomic write
# -------------------------------------------------------------------

@contextmanager
def atomic_write(dest: Union[str, Path], mode: str = "w", encoding: str = "utf-8"):
    """
    Atomically write to file: write to temp in same dir, then replace.
    Guarantees destination is either old file or fully written new file.
    """
    dest_path = p(dest)
    ensure_dir(dest_path.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=dest_path.name + ".", dir=dest_path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, mode, encoding=encoding, newline="") as f:
            yield f
        tmp_path.replace(dest_path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


# -------------------------------------------------------------------
# JSON
# -------------------------------------------------------------------

def read_json(path: Union[str, Path]) -> Any:
    with p(path).open("r", encoding="utf-8") as f:
        return json.load(f)


# -------------------------------------------------------------------
# YAML
# -------------------------------------------------------------------

def read_yaml(path: Union[str, Path]) -> Any:
    with p(path).open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


# -------------------------------------------------------------------
# Text
# -------------------------------------------------------------------

def write_text(text: str, path: Union[str, Path]) -> Path:
    dest = p(path)
    with atomic_write(dest, "w") as f:
        f.write(text)
    return dest
