# src/starphot/phot/__init__.py
# =============================================================================
# starphot: Photometry engine
# -----------------------------------------------------------------------------
#   • grid      → PixelGrid, the bounds-checked square cutout
#   • geometry  → centers, annuli, the shared distance field, coverage weights
#   • median    → median selection with non-finite rejection
#   • centroid  → threshold-mask centroiding
#   • sky       → annulus median sky background
#   • aperture  → partial-pixel aperture flux and instrumental magnitude
#   • growth    → centroid + sky + apertures over a radius list
#
# Everything here is pure: no I/O, no printing, no shared state.
# =============================================================================

from __future__ import annotations

from starphot.phot.aperture import (
    DEFAULT_ZERO_POINT,
    PhotometryRecord,
    aperture_weights,
    instrumental_magnitude,
    measure_aperture,
)
from starphot.phot.centroid import find_centroid, threshold_mask
from starphot.phot.geometry import (
    Annulus,
    Centroid,
    annulus_for,
    coverage_weight,
    distance_field,
    pixel_distance,
)
from starphot.phot.grid import PixelGrid
from starphot.phot.growth import GrowthCurve, measure_growth_curve
from starphot.phot.median import median
from starphot.phot.sky import annulus_mask, sky_background

__all__ = [
    "DEFAULT_ZERO_POINT",
    "Annulus",
    "Centroid",
    "GrowthCurve",
    "PhotometryRecord",
    "PixelGrid",
    "annulus_for",
    "annulus_mask",
    "aperture_weights",
    "coverage_weight",
    "distance_field",
    "find_centroid",
    "instrumental_magnitude",
    "measure_aperture",
    "measure_growth_curve",
    "median",
    "pixel_distance",
    "sky_background",
    "threshold_mask",
]
