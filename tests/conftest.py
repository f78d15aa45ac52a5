# tests/conftest.py
# =============================================================================
# starphot: Test Bootstrap (pytest)
# -----------------------------------------------------------------------------
# Goals
#   • Deterministic tests (seeded RNGs)
#   • src/ importable without an install
#   • CLI runner for the `starphot` Typer app
#   • FITS writers for building input files under tmp_path
#   • Package logger reset between tests
#
# Usage
#   pytest -q
#   pytest -q -k "centroid" STARPHOT_TEST_SEED=7
# =============================================================================

from __future__ import annotations

import logging
import os
import random
import sys
from pathlib import Path
from typing import Callable, Optional

import numpy as np
import pytest
from astropy.io import fits
from typer.testing import CliRunner


# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────
def _find_repo_root(start: Optional[Path] = None) -> Path:
    """Ascend from `start` (or this file) until a repo root marker is found."""
    start = (start or Path(__file__).parent).resolve()
    cur = start
    while True:
        if (cur / "pyproject.toml").exists():
            return cur
        if cur.parent == cur:
            return start
        cur = cur.parent


def _add_src_to_syspath(repo_root: Path) -> None:
    src = repo_root / "src"
    if src.exists() and str(src) not in sys.path:
        sys.path.insert(0, str(src))


REPO_ROOT = _find_repo_root()
_add_src_to_syspath(REPO_ROOT)


# ──────────────────────────────────────────────────────────────────────────────
# Session-scoped fixtures
# ──────────────────────────────────────────────────────────────────────────────
@pytest.fixture(scope="session")
def repo_root() -> Path:
    return REPO_ROOT


# ──────────────────────────────────────────────────────────────────────────────
# Function-scoped fixtures
# ──────────────────────────────────────────────────────────────────────────────
@pytest.fixture
def rng_seed() -> int:
    """Default seed value (override via env STARPHOT_TEST_SEED)."""
    return int(os.environ.get("STARPHOT_TEST_SEED", "1337"))


@pytest.fixture(autouse=True)
def seeded(rng_seed: int) -> None:
    random.seed(rng_seed)
    np.random.seed(rng_seed)


@pytest.fixture(autouse=True)
def _reset_starphot_logger():
    """Drop handlers a test (or a CLI invocation) installed on the package logger."""
    yield
    logger = logging.getLogger("starphot")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def write_fits(tmp_path: Path) -> Callable[..., Path]:
    """
    Write an array as a primary-HDU FITS file under tmp_path.

    Arrays are indexed [row, col] (2-D) or [slice, row, col] (3-D), i.e. FITS
    NAXIS1 is the last axis.
    """
    def _write(name: str, data: np.ndarray, **header) -> Path:
        path = tmp_path / name
        hdu = fits.PrimaryHDU(np.asarray(data))
        for key, value in header.items():
            hdu.header[key] = value
        hdu.writeto(path, overwrite=True)
        return path

    return _write


def star_frame(
    ny: int = 200,
    nx: int = 200,
    *,
    x: int = 100,
    y: int = 100,
    half: int = 2,
    amp: float = 1000.0,
    sky: float = 0.0,
) -> np.ndarray:
    """
    Frame with a flat square star of side 2*half+1 centered on 1-based FITS
    pixel (x, y), over a constant sky.
    """
    frame = np.full((ny, nx), sky, dtype=np.float32)
    r, c = y - 1, x - 1
    frame[r - half:r + half + 1, c - half:c + half + 1] = amp
    return frame


@pytest.fixture
def make_star_frame() -> Callable[..., np.ndarray]:
    return star_frame
