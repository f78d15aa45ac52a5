# src/starphot/phot/sky.py
# =============================================================================
# starphot: Annulus sky background
# -----------------------------------------------------------------------------
# Median of the raw intensities of pixels lying wholly inside a ring around
# the centroid. Partial pixels are excluded here; apertures weight them.
# =============================================================================

from __future__ import annotations

from typing import Optional

import numpy as np

from starphot.errors import EmptyAnnulus
from starphot.phot.geometry import (
    ANNULUS_INNER_OFFSET,
    ANNULUS_WIDTH,
    Annulus,
    Centroid,
    annulus_for,
    distance_field,
)
from starphot.phot.grid import PixelGrid
from starphot.phot.median import median

__all__ = ["annulus_mask", "sky_background"]


def annulus_mask(grid: PixelGrid, center: Centroid, annulus: Annulus) -> np.ndarray:
    """Boolean [row, col] mask of whole pixels with inner + 0.5 < d < outer - 0.5."""
    d = distance_field(grid, center)
    return (d > annulus.inner + 0.5) & (d < annulus.outer - 0.5)


def sky_background(
    grid: PixelGrid,
    center: Centroid,
    base_radius: float = 0.0,
    *,
    inner_offset: float = ANNULUS_INNER_OFFSET,
    width: float = ANNULUS_WIDTH,
    annulus: Optional[Annulus] = None,
) -> float:
    """
    Local sky level around ``center``.

    The ring runs from ``base_radius + inner_offset`` to ``inner + width``
    unless an explicit ``annulus`` is given.

    Raises
    ------
    BoxTooSmall
        The ring does not fit inside the grid (checked before sampling).
    EmptyAnnulus
        No whole pixel falls inside the ring.
    NonFiniteSample
        A sampled pixel is NaN or infinite.
    """
    ring = annulus if annulus is not None else annulus_for(base_radius, inner_offset, width)
    ring.check_fits(grid.boxdims)

    samples = grid.data[annulus_mask(grid, center, ring)]
    if samples.size == 0:
        raise EmptyAnnulus(
            f"no whole pixel inside annulus {ring.inner:g}..{ring.outer:g}",
            inner=ring.inner,
            outer=ring.outer,
        )
    return median(samples)
