# src/starphot/phot/geometry.py
# =============================================================================
# starphot: Shared geometry: centers, annuli, distances, coverage weights
# -----------------------------------------------------------------------------
# One distance implementation serves both the sky annulus and the apertures so
# the two masks are always computed on identical coordinates.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from starphot.errors import BoxTooSmall
from starphot.phot.grid import PixelGrid

__all__ = [
    "Centroid",
    "Annulus",
    "distance_field",
    "pixel_distance",
    "coverage_weight",
    "annulus_for",
]

ANNULUS_INNER_OFFSET = 10.0
ANNULUS_WIDTH = 15.0

ArrayOrFloat = Union[float, np.ndarray]


@dataclass(frozen=True)
class Centroid:
    """Absolute image coordinates of a source center."""
    x: float
    y: float


@dataclass(frozen=True)
class Annulus:
    """Sky-sampling ring between ``inner`` and ``outer`` radii (pixels)."""
    inner: float
    outer: float

    def check_fits(self, boxdims: int) -> None:
        """Raise BoxTooSmall unless the ring lies inside a grid of side ``boxdims``."""
        half = boxdims // 2
        if self.outer > half:
            raise BoxTooSmall(
                f"annulus outer radius {self.outer:g} exceeds half the box ({half}); "
                "need a larger box around the center",
                inner=self.inner,
                outer=self.outer,
                boxdims=boxdims,
            )


def annulus_for(
    base_radius: float,
    inner_offset: float = ANNULUS_INNER_OFFSET,
    width: float = ANNULUS_WIDTH,
) -> Annulus:
    """inner = base + inner_offset, outer = inner + width."""
    inner = float(base_radius) + float(inner_offset)
    return Annulus(inner=inner, outer=inner + float(width))


def _euclidean(dx: ArrayOrFloat, dy: ArrayOrFloat) -> ArrayOrFloat:
    return np.sqrt(dx * dx + dy * dy)


def distance_field(grid: PixelGrid, center: Centroid) -> np.ndarray:
    """
    Distance from every grid cell (in absolute coordinates) to ``center``.

    Returns
    -------
    ndarray [boxdims, boxdims], float64, indexed [row, col]
    """
    x, y = grid.absolute_mesh()
    return _euclidean(x - center.x, y - center.y)


def pixel_distance(grid: PixelGrid, col: int, row: int, center: Centroid) -> float:
    """Distance from local cell (col, row) to ``center``; bounds-checked."""
    grid.at(row, col)
    x, y = grid.to_absolute(float(col), float(row))
    return float(_euclidean(np.float64(x - center.x), np.float64(y - center.y)))


def coverage_weight(d: ArrayOrFloat, radius: float) -> ArrayOrFloat:
    """
    Fraction of a pixel at distance ``d`` counted inside an aperture of ``radius``.

    Rules in precedence order:
      d == r        -> 0.5
      d <  r - 0.5  -> 1
      d >  r + 0.5  -> 0
      otherwise     -> r + 0.5 - d   (linear across the half-pixel band)
    """
    d_arr = np.asarray(d, dtype=np.float64)
    scalar = d_arr.ndim == 0
    d_arr = np.atleast_1d(d_arr)
    r = float(radius)
    w = np.select(
        [d_arr == r, d_arr < r - 0.5, d_arr > r + 0.5],
        [0.5, 1.0, 0.0],
        default=r + 0.5 - d_arr,
    )
    if scalar:
        return float(w[0])
    return w
