# tests/phot/test_growth.py
from __future__ import annotations

import math

import numpy as np
import pytest

from starphot.config import PhotometryConfig
from starphot.errors import BoxTooSmall, EmptyAnnulus, NoSourceDetected
from starphot.phot.grid import PixelGrid
from starphot.phot.growth import measure_growth_curve


def _cfg(**kw) -> PhotometryConfig:
    kw.setdefault("xpos", 100)
    kw.setdefault("ypos", 100)
    return PhotometryConfig(**kw)


def test_one_record_per_radius_in_order(block_grid):
    curve = measure_growth_curve(block_grid, _cfg(radii=(3.0, 1.0, 2.0)))
    assert [r.radius for r in curve.records] == [3.0, 1.0, 2.0]
    assert (curve.centroid.x, curve.centroid.y) == (100.0, 100.0)
    assert curve.sky_background == 0.0


def test_default_radii_growth_is_monotonic_and_saturates(block_grid):
    curve = measure_growth_curve(block_grid, _cfg())
    assert len(curve.records) == 17
    sums = np.array([r.raw_sum for r in curve.records])
    assert np.all(np.diff(sums) >= 0)
    # Past radius 4 the whole block is inside the aperture
    assert sums[-1] == pytest.approx(25 * 1000.0)
    mags = np.array([r.magnitude for r in curve.records])
    assert np.all(np.diff(mags) <= 1e-12)
    assert mags[-1] == pytest.approx(-2.5 * math.log10(25000.0) + 24.0)


def test_measurement_is_deterministic(gaussian_grid):
    cfg = PhotometryConfig(xpos=500, ypos=400, boxsize=64, threshold=1000.0)
    a = measure_growth_curve(gaussian_grid, cfg)
    b = measure_growth_curve(gaussian_grid, cfg)
    assert a == b


def test_gaussian_total_flux(gaussian_grid):
    cfg = PhotometryConfig(xpos=500, ypos=400, boxsize=64, threshold=1000.0, radii=(12.0,))
    rec = measure_growth_curve(gaussian_grid, cfg).records[0]
    assert rec.net_flux == pytest.approx(2 * math.pi * 4.0 * 5000.0, rel=0.01)


def test_sky_per_aperture_uses_a_ring_per_radius():
    n = 100
    data = np.full((n, n), 10.0)
    data[48:53, 48:53] = 1000.0
    # Raise the sky beyond radius 22 so the two modes disagree
    yy, xx = np.mgrid[:n, :n]
    d = np.hypot(xx - 50, yy - 50)
    data[d > 22] = 30.0
    g = PixelGrid(data, 200, 200)

    fixed = measure_growth_curve(g, PhotometryConfig(xpos=200, ypos=200, boxsize=n, radii=(2.0, 12.0)))
    per = measure_growth_curve(
        g, PhotometryConfig(xpos=200, ypos=200, boxsize=n, radii=(2.0, 12.0), sky_per_aperture=True)
    )
    assert fixed.records[0].sky_background == fixed.records[1].sky_background == 10.0
    assert per.records[0].sky_background == 10.0
    assert per.records[1].sky_background == 30.0
    assert per.sky_background == 10.0


def test_failures_propagate(block_grid):
    with pytest.raises(NoSourceDetected):
        measure_growth_curve(block_grid, _cfg(threshold=2000.0))
    with pytest.raises(EmptyAnnulus) as ei:
        measure_growth_curve(block_grid, _cfg(annulus_width=1.0))
    assert ei.value.context["base_radius"] == 0.0
    small = PixelGrid(block_grid.data[5:45, 5:45], 100, 100)
    with pytest.raises(BoxTooSmall):
        measure_growth_curve(small, _cfg(boxsize=40))


def test_gaussian_growth_curve_rises_then_levels_off(gaussian_grid):
    cfg = PhotometryConfig(xpos=500, ypos=400, boxsize=64, threshold=1000.0)
    curve = measure_growth_curve(gaussian_grid, cfg)
    flux = np.array([r.net_flux for r in curve.records])
    total = 2 * math.pi * 4.0 * 5000.0
    assert len(flux) == 17
    # Noise may wiggle the plateau by a few counts, never by a visible fraction
    assert np.all(np.diff(flux) > -0.005 * total)
    assert np.all(np.diff(flux[:6]) > 0)
    assert flux[0] < 0.2 * total
    assert flux[-1] == pytest.approx(total, rel=0.01)
    assert flux[9:] == pytest.approx(np.full(8, flux[-1]), rel=0.01)


def test_nan_border_does_not_spoil_the_slice(block_grid):
    data = np.array(block_grid.data)
    data[0, 0] = np.nan
    curve = measure_growth_curve(PixelGrid(data, 100, 100), _cfg())
    assert curve == measure_growth_curve(block_grid, _cfg())
