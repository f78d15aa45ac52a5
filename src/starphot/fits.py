# src/starphot/fits.py
"""
starphot: FITS image supplier
-----------------------------

Thin adapter between FITS files (decoded by ``astropy.io.fits``) and the
photometry engine:

- discover_sources(path) : sorted ``*.fits`` files in a directory, or one file
- cutout_bounds(...)     : 0-based slice bounds of a box around (xpos, ypos)
- iter_cutouts(...)      : one PixelGrid per image slice (2-D image or 3-D cube)
- list_headers(path)     : per-HDU header card listing

Coordinates follow the FITS convention: pixel (1, 1) is the first pixel, x is
the column (NAXIS1) and y the row (NAXIS2). A box of side ``boxsize`` around
(xpos, ypos) spans x = xpos - boxsize//2 ... xpos - boxsize//2 + boxsize - 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple, Union

import numpy as np
from astropy.io import fits

from starphot.errors import CutoutOutOfBounds, ImageReadError, InputError
from starphot.phot.grid import PixelGrid

__all__ = [
    "FITS_SUFFIXES",
    "Cutout",
    "discover_sources",
    "cutout_bounds",
    "iter_cutouts",
    "list_headers",
]

FITS_SUFFIXES = (".fits",)
CARD_LENGTH = 80

PathLike = Union[str, Path]


@dataclass(frozen=True)
class Cutout:
    """One slice's pixel grid, with the file and 1-based slice index it came from."""
    source: Path
    slice_index: int
    grid: PixelGrid


def discover_sources(path: PathLike) -> List[Path]:
    """
    Files to process: ``path`` itself if it is a file, else the ``*.fits``
    files directly inside the directory in alphabetical order.
    """
    src = Path(path)
    if src.is_file():
        return [src]
    if not src.is_dir():
        raise InputError(f"no such file or directory: {src}", source=str(src))
    files = sorted(
        (f for f in src.iterdir() if f.is_file() and f.suffix.lower() in FITS_SUFFIXES),
        key=lambda f: f.name,
    )
    if not files:
        raise InputError(f"no FITS files found in {src}", source=str(src))
    return files


def cutout_bounds(nx: int, ny: int, xpos: int, ypos: int, boxsize: int) -> Tuple[int, int, int, int]:
    """
    Return 0-based ``(x0, x1, y0, y1)`` so that ``data[y0:y1, x0:x1]`` is the box.

    Raises CutoutOutOfBounds when any part of the box falls outside a frame of
    ``nx`` columns by ``ny`` rows.
    """
    half = boxsize // 2
    first_x, first_y = xpos - half, ypos - half
    last_x, last_y = first_x + boxsize - 1, first_y + boxsize - 1
    if first_x < 1 or first_y < 1 or last_x > nx or last_y > ny:
        raise CutoutOutOfBounds(
            "not able to get a box area around the x,y coordinate",
            xpos=xpos,
            ypos=ypos,
            boxsize=boxsize,
            frame=f"{nx}x{ny}",
        )
    return first_x - 1, last_x, first_y - 1, last_y


def _image_hdu(hdul: fits.HDUList):
    for hdu in hdul:
        if hdu.is_image and hdu.header.get("NAXIS", 0) >= 2:
            return hdu
    return None


def iter_cutouts(path: PathLike, xpos: int, ypos: int, boxsize: int) -> Iterator[Cutout]:
    """
    Yield a ``boxsize`` square cutout around (xpos, ypos) for every slice.

    A 2-D image yields one cutout (slice 1); a 3-D cube yields one per plane
    (slices 1..NAXIS3). Each cutout owns a copy of its pixels.

    Raises
    ------
    ImageReadError
        File cannot be opened or holds no usable image.
    CutoutOutOfBounds
        The box does not fit inside the frame (raised before any slice).
    """
    src = Path(path)
    try:
        hdul = fits.open(src, memmap=True)
    except (OSError, ValueError) as e:
        raise ImageReadError(f"cannot open FITS file: {e}", source=str(src)) from e

    with hdul:
        hdu = _image_hdu(hdul)
        if hdu is None:
            raise ImageReadError("no image data in file", source=str(src))
        try:
            data = hdu.data
        except (OSError, ValueError, TypeError) as e:
            raise ImageReadError(f"cannot read image data: {e}", source=str(src)) from e
        if data is None:
            raise ImageReadError("no image data in file", source=str(src))

        if data.ndim == 2:
            planes = data[np.newaxis, ...]
        elif data.ndim == 3:
            planes = data
        else:
            raise ImageReadError(
                f"unsupported image dimensionality {data.ndim} (expected 2 or 3)",
                source=str(src),
            )

        ny, nx = planes.shape[-2], planes.shape[-1]
        x0, x1, y0, y1 = cutout_bounds(nx, ny, xpos, ypos, boxsize)

        for k in range(planes.shape[0]):
            try:
                box = np.array(planes[k, y0:y1, x0:x1], dtype=np.float64)
            except (OSError, ValueError) as e:
                raise ImageReadError(
                    f"failed to read subset of the image: {e}", source=str(src), slice=k + 1
                ) from e
            yield Cutout(source=src, slice_index=k + 1, grid=PixelGrid(box, xpos, ypos))


def _records(image: str) -> List[str]:
    """Split a card image into its 80-character header records (CONTINUE cards span several)."""
    return [image[i:i + CARD_LENGTH].rstrip() for i in range(0, len(image), CARD_LENGTH)]


def list_headers(path: PathLike) -> str:
    """
    Header cards of every HDU, in the form::

        Header listing for HDU 1
        SIMPLE  =                    T / ...
        ...
        END
        <blank line>
    """
    src = Path(path)
    lines: List[str] = []
    try:
        with fits.open(src) as hdul:
            for pos, hdu in enumerate(hdul, start=1):
                lines.append(f"Header listing for HDU {pos}")
                for card in hdu.header.cards:
                    lines.extend(_records(card.image))
                lines.append("END")
                lines.append("")
    except (OSError, ValueError) as e:
        raise ImageReadError(f"cannot read FITS headers: {e}", source=str(src)) from e
    return "\n".join(lines) + "\n"
