# src/starphot/config.py
"""
Photometry run configuration.

One immutable ``PhotometryConfig`` per run. Values are layered, lowest to
highest precedence:

1. dataclass defaults
2. a YAML or JSON file
3. dotted ``key=value`` overrides (merged with OmegaConf)
4. explicit keyword values (the CLI options the user actually passed)
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from starphot.errors import BoxTooSmall, InputError
from starphot.phot.aperture import DEFAULT_ZERO_POINT
from starphot.phot.geometry import ANNULUS_INNER_OFFSET, ANNULUS_WIDTH, Annulus, annulus_for
from starphot.utils.io import p, read_json, read_yaml
from starphot.validators import validate_config

__all__ = ["DEFAULT_RADII", "PhotometryConfig", "parse_radii", "load_config"]

DEFAULT_RADII: Tuple[float, ...] = tuple(float(r) for r in range(1, 18))


@dataclass(frozen=True)
class PhotometryConfig:
    # Source position (absolute, 1-based FITS pixel coordinates) and cutout size
    xpos: Optional[int] = None
    ypos: Optional[int] = None
    boxsize: int = 50

    # Centroiding
    threshold: float = 660.0

    # Apertures
    radii: Tuple[float, ...] = field(default=DEFAULT_RADII)
    zero_point: float = DEFAULT_ZERO_POINT

    # Sky annulus
    sky_base_radius: float = 0.0
    sky_per_aperture: bool = False
    annulus_inner_offset: float = ANNULUS_INNER_OFFSET
    annulus_width: float = ANNULUS_WIDTH

    def annulus(self, base_radius: Optional[float] = None) -> Annulus:
        base = self.sky_base_radius if base_radius is None else base_radius
        return annulus_for(base, self.annulus_inner_offset, self.annulus_width)

    def validate(self) -> "PhotometryConfig":
        """
        Raise InputError listing every invalid value, or BoxTooSmall when the
        box cannot hold the sky annulus or the largest aperture.
        """
        res = validate_config(self)
        if not res.ok:
            raise InputError(f"invalid configuration: {res.summary()}")

        half = self.boxsize // 2
        rings = [self.annulus()]
        if self.sky_per_aperture:
            rings.append(self.annulus(max(self.radii)))
        for ring in rings:
            ring.check_fits(self.boxsize)
        largest = max(self.radii)
        if largest + 0.5 > half:
            raise BoxTooSmall(
                f"aperture radius {largest:g} does not fit in a box of {self.boxsize}",
                radius=largest,
                boxdims=self.boxsize,
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["radii"] = list(self.radii)
        return d

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PhotometryConfig":
        """Build from a plain mapping, coercing types; unknown keys are an error."""
        return cls(**_coerce_mapping(data))


def _coerce_mapping(data: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(PhotometryConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InputError(f"unknown configuration key(s): {', '.join(unknown)}")
    out: Dict[str, Any] = {}
    for name, raw in data.items():
        if raw is None:
            if name in {"xpos", "ypos"}:
                out[name] = None
            continue
        try:
            out[name] = _coerce(name, raw)
        except (TypeError, ValueError) as e:
            raise InputError(f"invalid value for {name}: {raw!r}") from e
    return out


def _coerce(name: str, raw: Any) -> Any:
    if name == "radii":
        return parse_radii(raw)
    if name in {"xpos", "ypos", "boxsize"}:
        if isinstance(raw, float) and not raw.is_integer():
            raise ValueError("expected an integer")
        return int(raw)
    if name == "sky_per_aperture":
        if isinstance(raw, str):
            lv = raw.strip().lower()
            if lv in {"true", "yes", "y", "on", "1"}:
                return True
            if lv in {"false", "no", "n", "off", "0"}:
                return False
            raise ValueError("expected a boolean")
        return bool(raw)
    return float(raw)


def parse_radii(value: Union[str, Sequence[Any]]) -> Tuple[float, ...]:
    """
    Parse a radius list.

    Accepts a sequence of numbers, or a string of comma-separated items where
    each item is a number or an inclusive integer range ``a-b``:
    ``"1-17"``, ``"1,2,5"``, ``"1-5,8,10.5"``.
    """
    if isinstance(value, str):
        out = []
        for item in value.split(","):
            item = item.strip()
            if not item:
                continue
            if "-" in item.lstrip("-"):
                lo, hi = item.split("-", 1)
                a, b = int(lo), int(hi)
                if b < a:
                    raise ValueError(f"descending range {item!r}")
                out.extend(float(r) for r in range(a, b + 1))
            else:
                out.append(float(item))
        radii = tuple(out)
    elif isinstance(value, (int, float)):
        radii = (float(value),)
    else:
        radii = tuple(float(r) for r in value)
    if not radii:
        raise ValueError("empty radius list")
    if any(not math.isfinite(r) for r in radii):
        raise ValueError("radii must be finite")
    return radii


def _read_any(path: Path) -> Dict[str, Any]:
    src = p(path)
    if not src.exists():
        raise InputError(f"config not found: {src}")
    if src.suffix.lower() == ".json":
        data = read_json(src)
    else:
        data = read_yaml(src)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InputError(f"config must be a mapping: {src}")
    return data


def _merge_overrides(base: Dict[str, Any], overrides: Iterable[str]) -> Dict[str, Any]:
    overrides = list(overrides)
    if not overrides:
        return base
    try:
        merged = OmegaConf.merge(OmegaConf.create(base), OmegaConf.from_dotlist(overrides))
    except OmegaConfBaseException as e:
        raise InputError(f"failed to apply overrides {overrides}: {e}") from e
    result = OmegaConf.to_container(merged, resolve=True)
    return dict(result) if isinstance(result, dict) else base


def load_config(
    path: Optional[Path] = None,
    overrides: Iterable[str] = (),
    *,
    validate: bool = True,
    **explicit: Any,
) -> PhotometryConfig:
    """
    Layer file, overrides and explicit values over the defaults.

    ``explicit`` values of ``None`` are treated as "not given".
    """
    data: Dict[str, Any] = _read_any(path) if path is not None else {}
    data = _merge_overrides(data, overrides)
    cfg = PhotometryConfig.from_mapping(data)
    given = {k: v for k, v in explicit.items() if v is not None}
    if given:
        cfg = replace(cfg, **_coerce_mapping(given))
    return cfg.validate() if validate else cfg

