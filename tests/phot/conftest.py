# tests/phot/conftest.py
from __future__ import annotations

from typing import Tuple

import numpy as np
import pytest

from starphot.phot.grid import PixelGrid

# ---------------------------------------------------------------------------
# Randomness: one session RNG, then a child generator per test
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def rng_session() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def rng(rng_session: np.random.Generator) -> np.random.Generator:
    """Fresh substream for each test (reproducible & isolated)."""
    return np.random.Generator(np.random.PCG64(rng_session.integers(0, 2**63 - 1)))

# ---------------------------------------------------------------------------
# Utility builders
# ---------------------------------------------------------------------------

def _make_mesh(n: int) -> Tuple[np.ndarray, np.ndarray]:
    y, x = np.mgrid[:n, :n]
    return y.astype(np.float64), x.astype(np.float64)


def _gaussian_2d(y: np.ndarray, x: np.ndarray, cy: float, cx: float, sigma: float, amp: float) -> np.ndarray:
    return amp * np.exp(-(((x - cx) ** 2) + ((y - cy) ** 2)) / (2.0 * sigma**2))

# ---------------------------------------------------------------------------
# Grid fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def block_grid() -> PixelGrid:
    """
    50×50 zero grid with a 5×5 block of 1000 at local rows/cols 23..27,
    anchored at (100, 100). The block is centered on local cell (25, 25),
    i.e. absolute (100, 100).
    """
    data = np.zeros((50, 50))
    data[23:28, 23:28] = 1000.0
    return PixelGrid(data, 100, 100)


@pytest.fixture
def gaussian_grid(rng: np.random.Generator) -> PixelGrid:
    """
    64×64 grid: sky 100 with mild noise plus a Gaussian PSF (sigma 2, peak
    5000) centered on local cell (32, 32), anchored at (500, 400).
    """
    n = 64
    y, x = _make_mesh(n)
    sky = 100.0 + rng.normal(0.0, 1.0, size=(n, n))
    psf = _gaussian_2d(y, x, cy=32.0, cx=32.0, sigma=2.0, amp=5000.0)
    return PixelGrid(sky + psf, 500, 400)
