# src/starphot/phot/growth.py
# =============================================================================
# starphot: Growth curve
# -----------------------------------------------------------------------------
# grid -> centroid -> sky background -> one aperture measurement per radius.
# The sky is estimated once from the annulus at `sky_base_radius` and reused
# for every aperture, unless `sky_per_aperture` is set, in which case each
# aperture gets its own annulus starting `annulus_inner_offset` beyond it.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple

from starphot.errors import StarPhotError
from starphot.phot.aperture import PhotometryRecord, measure_aperture
from starphot.phot.centroid import find_centroid
from starphot.phot.geometry import Centroid
from starphot.phot.grid import PixelGrid
from starphot.phot.sky import sky_background

if TYPE_CHECKING:  # pragma: no cover
    from starphot.config import PhotometryConfig

__all__ = ["GrowthCurve", "measure_growth_curve"]


@dataclass(frozen=True)
class GrowthCurve:
    """Centroid, base sky level and per-radius records for one grid."""
    centroid: Centroid
    sky_background: float
    records: Tuple[PhotometryRecord, ...]


def measure_growth_curve(grid: PixelGrid, config: "PhotometryConfig") -> GrowthCurve:
    """
    Measure one source over every radius in ``config.radii`` (in order).

    Any geometry or numeric failure propagates; the caller decides whether the
    whole slice is lost.
    """
    center = find_centroid(grid, config.threshold)
    base_sky = _sky(grid, center, config, config.sky_base_radius)

    records: List[PhotometryRecord] = []
    for radius in config.radii:
        sky = base_sky
        if config.sky_per_aperture:
            sky = _sky(grid, center, config, radius)
        records.append(
            measure_aperture(grid, center, radius, sky, zero_point=config.zero_point)
        )
    return GrowthCurve(centroid=center, sky_background=base_sky, records=tuple(records))


def _sky(grid: PixelGrid, center: Centroid, config: "PhotometryConfig", base_radius: float) -> float:
    try:
        return sky_background(
            grid,
            center,
            base_radius,
            inner_offset=config.annulus_inner_offset,
            width=config.annulus_width,
        )
    except StarPhotError as e:
        raise e.with_context(base_radius=base_radius)
