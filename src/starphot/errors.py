# src/starphot/errors.py
"""
starphot: Typed failures
------------------------

Every failure the photometry engine or its I/O collaborators can raise.
Errors carry a ``context`` dict (source file, slice index, radius) so a batch
driver can report *where* a unit of work failed and move on to the next one.

Hierarchy
---------
StarPhotError
├── InputError          invalid configuration, missing files
├── ImageReadError      image data could not be opened / decoded
│   └── CutoutOutOfBounds
├── GeometryError       requested geometry does not fit the grid
│   ├── BoxTooSmall
│   └── EmptyAnnulus
└── NumericError        no meaningful number can be produced
    ├── NoSourceDetected
    ├── NonPositiveFlux
    └── NonFiniteSample
"""

from __future__ import annotations

from typing import Any, Dict

__all__ = [
    "StarPhotError",
    "InputError",
    "ImageReadError",
    "CutoutOutOfBounds",
    "GeometryError",
    "BoxTooSmall",
    "EmptyAnnulus",
    "NumericError",
    "NoSourceDetected",
    "NonPositiveFlux",
    "NonFiniteSample",
]


class StarPhotError(RuntimeError):
    """Base class for starphot failures."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    def with_context(self, **context: Any) -> "StarPhotError":
        """Attach context (keeps existing keys) and return self for re-raising."""
        for k, v in context.items():
            if v is not None:
                self.context.setdefault(k, v)
        return self

    def __str__(self) -> str:
        if not self.context:
            return self.message
        ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} [{ctx}]"


class InputError(StarPhotError):
    """Invalid configuration or missing input."""


class ImageReadError(StarPhotError):
    """Image data could not be read."""


class CutoutOutOfBounds(ImageReadError):
    """The requested box does not fit inside the image frame."""


class GeometryError(StarPhotError):
    """Requested geometry does not fit the supplied grid."""


class BoxTooSmall(GeometryError):
    """The grid cannot contain the requested annulus or aperture."""


class EmptyAnnulus(GeometryError):
    """No whole pixel falls inside the sky annulus."""


class NumericError(StarPhotError):
    """A computation has no finite, meaningful result."""


class NoSourceDetected(NumericError):
    """No pixel exceeds the centroiding threshold."""


class NonPositiveFlux(NumericError):
    """Net aperture flux is not positive, so no magnitude exists."""


class NonFiniteSample(NumericError):
    """A NaN or infinite value reached a statistic that cannot order it."""
