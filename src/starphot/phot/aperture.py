# src/starphot/phot/aperture.py
# =============================================================================
# starphot: Circular aperture photometry
# -----------------------------------------------------------------------------
# Partial-pixel weighted sum inside a circle around the centroid, sky
# subtraction scaled by the effective pixel count, and conversion of the net
# flux to an instrumental magnitude against a configurable zero-point.
# =============================================================================

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

import numpy as np

from starphot.errors import NonFiniteSample, NonPositiveFlux
from starphot.phot.geometry import Centroid, coverage_weight, distance_field
from starphot.phot.grid import PixelGrid

__all__ = ["DEFAULT_ZERO_POINT", "PhotometryRecord", "aperture_weights", "measure_aperture", "instrumental_magnitude"]

DEFAULT_ZERO_POINT = 24.0


@dataclass(frozen=True)
class PhotometryRecord:
    """
    Photometry of one source at one aperture radius.

    radius          : aperture radius (pixels)
    centroid_x/y    : absolute centroid used for the measurement
    raw_sum         : S, coverage-weighted sum of intensities
    net_flux        : I = S - sky_background * area
    sky_background  : per-pixel sky level subtracted
    magnitude       : -2.5 * log10(I) + zero-point
    area            : N_eff, sum of coverage weights
    """
    radius: float
    centroid_x: float
    centroid_y: float
    raw_sum: float
    net_flux: float
    sky_background: float
    magnitude: float
    area: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def aperture_weights(grid: PixelGrid, center: Centroid, radius: float) -> np.ndarray:
    """Coverage weight of every grid cell for a circle of ``radius`` around ``center``."""
    return coverage_weight(distance_field(grid, center), radius)


def instrumental_magnitude(net_flux: float, zero_point: float = DEFAULT_ZERO_POINT) -> float:
    """-2.5 log10(flux) + zero_point; the flux must be positive and finite."""
    if not (math.isfinite(net_flux) and net_flux > 0.0):
        raise NonPositiveFlux(f"net flux {net_flux!r} has no magnitude", net_flux=net_flux)
    return -2.5 * math.log10(net_flux) + float(zero_point)


def measure_aperture(
    grid: PixelGrid,
    center: Centroid,
    radius: float,
    sky: float,
    *,
    zero_point: float = DEFAULT_ZERO_POINT,
) -> PhotometryRecord:
    """
    Aperture flux and magnitude at one radius.

    Raises
    ------
    NonFiniteSample
        A pixel with non-zero weight is NaN or infinite.
    NonPositiveFlux
        When the sky-subtracted flux is zero, negative or non-finite.
    """
    w = aperture_weights(grid, center, radius)
    inside = w > 0.0
    weights, values = w[inside], grid.data[inside]
    bad = ~np.isfinite(values)
    if bad.any():
        raise NonFiniteSample(
            f"{int(bad.sum())} non-finite pixel(s) inside aperture",
            radius=float(radius),
        )
    area = float(weights.sum())
    raw_sum = float((weights * values).sum())
    net_flux = raw_sum - float(sky) * area

    try:
        magnitude = instrumental_magnitude(net_flux, zero_point)
    except NonPositiveFlux as e:
        raise e.with_context(radius=radius, raw_sum=raw_sum, sky=sky)

    return PhotometryRecord(
        radius=float(radius),
        centroid_x=center.x,
        centroid_y=center.y,
        raw_sum=raw_sum,
        net_flux=net_flux,
        sky_background=float(sky),
        magnitude=magnitude,
        area=area,
    )
