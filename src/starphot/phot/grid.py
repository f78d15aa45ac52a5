# src/starphot/phot/grid.py
# =============================================================================
# starphot: Pixel grid
# -----------------------------------------------------------------------------
# A square cutout of an image, anchored at absolute image coordinates.
#   - Read-only float64 buffer, row-major: data[row, col]
#   - Anchor (xpos, ypos) marks the cutout center in the full frame
#   - origin = anchor - boxdims // 2 is the absolute position of cell (0, 0)
#   - Bounds-checked element access
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from starphot.errors import InputError

__all__ = ["PixelGrid"]


@dataclass(frozen=True, eq=False)
class PixelGrid:
    """
    Square cutout of pixel intensities.

    data  : ndarray [boxdims, boxdims], float64, read-only
    xpos  : absolute x (column) coordinate of the cutout center
    ypos  : absolute y (row) coordinate of the cutout center
    """
    data: np.ndarray
    xpos: int
    ypos: int

    def __post_init__(self) -> None:
        a = np.array(self.data, dtype=np.float64, copy=True)
        if a.ndim != 2:
            raise InputError(f"pixel grid must be 2-D; got shape {a.shape}")
        if a.shape[0] != a.shape[1]:
            raise InputError(f"pixel grid must be square; got shape {a.shape}")
        if a.shape[0] == 0:
            raise InputError("pixel grid must not be empty")
        a.flags.writeable = False
        object.__setattr__(self, "data", a)
        object.__setattr__(self, "xpos", int(self.xpos))
        object.__setattr__(self, "ypos", int(self.ypos))

    @classmethod
    def from_flat(cls, values, boxdims: int, xpos: int, ypos: int) -> "PixelGrid":
        """Build a grid from a flat row-major buffer of ``boxdims * boxdims`` values."""
        if boxdims <= 0:
            raise InputError(f"boxdims must be positive; got {boxdims}")
        flat = np.asarray(values, dtype=np.float64).reshape(-1)
        if flat.size != boxdims * boxdims:
            raise InputError(f"buffer holds {flat.size} values; expected {boxdims * boxdims}")
        return cls(flat.reshape(boxdims, boxdims), xpos, ypos)

    @property
    def boxdims(self) -> int:
        return int(self.data.shape[0])

    @property
    def origin(self) -> Tuple[int, int]:
        """Absolute (x, y) coordinate of local cell (row 0, col 0)."""
        half = self.boxdims // 2
        return self.xpos - half, self.ypos - half

    def at(self, row: int, col: int) -> float:
        """Intensity at local (row, col); raises IndexError outside the grid."""
        n = self.boxdims
        if not (0 <= row < n and 0 <= col < n):
            raise IndexError(f"cell (row={row}, col={col}) outside grid of size {n}")
        return float(self.data[row, col])

    def to_absolute(self, col, row):
        """Map local (col, row) indices (scalars or arrays) to absolute (x, y)."""
        ox, oy = self.origin
        return col + ox, row + oy

    def absolute_mesh(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return (X, Y) float64 meshes of absolute coordinates, each [boxdims, boxdims]."""
        n = self.boxdims
        rows, cols = np.mgrid[0:n, 0:n].astype(np.float64, copy=False)
        x, y = self.to_absolute(cols, rows)
        return x, y
