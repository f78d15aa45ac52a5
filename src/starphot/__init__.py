"""
starphot: centroid and aperture photometry of point sources.

Locates a star's center in an image cutout, estimates the local sky from an
annulus median, and integrates partial-pixel weighted flux over concentric
apertures to build a photometric growth curve with instrumental magnitudes.

Public API
----------
- __version__: str                → package version from installed metadata (or fallback)
- get_version(): str              → safe accessor for the version
- get_logger(name): Logger        → project-scoped logger
- PixelGrid, Centroid, PhotometryRecord, measure_growth_curve → the engine
- PhotometryConfig, load_config   → run configuration
"""
from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError, version as _pkg_version

from starphot.config import PhotometryConfig, load_config
from starphot.phot import Centroid, PhotometryRecord, PixelGrid, measure_growth_curve
from starphot.utils.logging import get_logger

__all__ = [
    "__version__",
    "get_version",
    "get_logger",
    "Centroid",
    "PhotometryConfig",
    "PhotometryRecord",
    "PixelGrid",
    "load_config",
    "measure_growth_curve",
    "PKG_DIST_NAME",
]

# Keep this aligned with pyproject.toml [project].name
PKG_DIST_NAME = "starphot"


def _resolve_version() -> str:
    # 1) Installed metadata (wheel/sdist/editable)
    try:
        return _pkg_version(PKG_DIST_NAME)
    except PackageNotFoundError:
        pass
    # 2) Explicit env override
    v = os.environ.get("STARPHOT_VERSION")
    if v:
        return v
    # 3) Last resort, keep in sync with pyproject
    return "0.1.0"


__version__ = _resolve_version()


def get_version() -> str:
    """Return the best-known package version."""
    return __version__
