from __future__ import annotations
import math
from typing import TYPE_CHECKING

from .base import ValidationResult

if TYPE_CHECKING:  # pragma: no cover
    from starphot.config import PhotometryConfig

def _finite(x: float) -> bool:
    return isinstance(x, (int, float)) and math.isfinite(x)

def validate_config(cfg: "PhotometryConfig") -> ValidationResult:
    """Collect every input problem in ``cfg`` (does not check geometry fit)."""
    res = ValidationResult()
    if cfg.xpos is None or cfg.ypos is None:
        res.add("source position is required", xpos=cfg.xpos, ypos=cfg.ypos)
    if cfg.boxsize <= 0:
        res.add("boxsize must be positive", boxsize=cfg.boxsize)
    if not _finite(cfg.threshold):
        res.add("threshold must be finite", threshold=cfg.threshold)
    if not cfg.radii:
        res.add("at least one aperture radius is required")
    bad = [r for r in cfg.radii if not (_finite(r) and r > 0)]
    if bad:
        res.add("aperture radii must be positive and finite", bad=bad)
    if not _finite(cfg.zero_point):
        res.add("zero_point must be finite", zero_point=cfg.zero_point)
    if not (_finite(cfg.sky_base_radius) and cfg.sky_base_radius >= 0):
        res.add("sky_base_radius must be >= 0", sky_base_radius=cfg.sky_base_radius)
    if not (_finite(cfg.annulus_inner_offset) and cfg.annulus_inner_offset >= 0):
        res.add("annulus_inner_offset must be >= 0", annulus_inner_offset=cfg.annulus_inner_offset)
    if not (_finite(cfg.annulus_width) and cfg.annulus_width > 1.0):
        res.add("annulus_width must exceed one pixel", annulus_width=cfg.annulus_width)
    return res
