# src/starphot/pipeline.py
"""
starphot: Batch driver
======================

files → cutouts (one per slice) → growth curve per cutout → results

Failure scope
-------------
• GeometryError / NumericError  → the slice is skipped, the file continues
• ImageReadError                → the rest of the file is skipped
• the batch always continues with the next file

Files may be processed on a thread pool (``jobs > 1``). Each worker reads its
own cutouts; results come back in input-file order, then slice order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from starphot.config import PhotometryConfig
from starphot.errors import GeometryError, ImageReadError, NumericError, StarPhotError
from starphot.fits import iter_cutouts
from starphot.phot.aperture import PhotometryRecord
from starphot.phot.geometry import Centroid
from starphot.phot.grid import PixelGrid
from starphot.phot.growth import measure_growth_curve
from starphot.utils.logging import get_logger

__all__ = ["SliceResult", "Failure", "BatchReport", "process_grid", "process_file", "run_batch"]

logger = get_logger(__name__)


@dataclass(frozen=True)
class SliceResult:
    """Growth curve of one slice of one file."""
    source: Optional[Path]
    slice_index: Optional[int]
    centroid: Centroid
    sky_background: float
    records: Tuple[PhotometryRecord, ...]


@dataclass(frozen=True)
class Failure:
    """A slice (``slice_index`` set) or a whole file (``slice_index`` None) that failed."""
    source: Path
    slice_index: Optional[int]
    error: StarPhotError

    @property
    def kind(self) -> str:
        return type(self.error).__name__


@dataclass
class BatchReport:
    results: List[SliceResult] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def extend(self, results: Iterable[SliceResult], failures: Iterable[Failure]) -> None:
        self.results.extend(results)
        self.failures.extend(failures)


def process_grid(
    grid: PixelGrid,
    config: PhotometryConfig,
    *,
    source: Optional[Path] = None,
    slice_index: Optional[int] = None,
) -> SliceResult:
    """Growth curve for one grid; errors gain ``source`` / ``slice`` context."""
    try:
        curve = measure_growth_curve(grid, config)
    except StarPhotError as e:
        raise e.with_context(source=str(source) if source else None, slice=slice_index)
    return SliceResult(
        source=source,
        slice_index=slice_index,
        centroid=curve.centroid,
        sky_background=curve.sky_background,
        records=curve.records,
    )


def process_file(path: Path, config: PhotometryConfig) -> Tuple[List[SliceResult], List[Failure]]:
    """All slices of one file. Never raises a StarPhotError; failures are returned."""
    results: List[SliceResult] = []
    failures: List[Failure] = []
    logger.info("Processing file %s", path, extra={"source": str(path)})
    try:
        for cut in iter_cutouts(path, config.xpos, config.ypos, config.boxsize):
            logger.info("Working on image %d", cut.slice_index, extra={"source": str(path), "slice": cut.slice_index})
            try:
                results.append(process_grid(cut.grid, config, source=path, slice_index=cut.slice_index))
            except (GeometryError, NumericError) as e:
                logger.error("Skipping slice: %s", e, extra={"source": str(path), "slice": cut.slice_index})
                failures.append(Failure(path, cut.slice_index, e))
    except ImageReadError as e:
        e.with_context(source=str(path))
        logger.error("Skipping file: %s", e, extra={"source": str(path)})
        failures.append(Failure(path, e.context.get("slice"), e))
    return results, failures


def run_batch(
    sources: Sequence[Path],
    config: PhotometryConfig,
    *,
    jobs: int = 1,
    on_file_done: Optional[Callable[[Path, List[SliceResult], List[Failure]], None]] = None,
) -> BatchReport:
    """
    Process every file in ``sources``.

    ``on_file_done`` is called once per file, in input order, as soon as that
    file (and every file before it) has finished.
    """
    report = BatchReport()
    logger.info("Processing %d files", len(sources))

    def _emit(path: Path, out: Tuple[List[SliceResult], List[Failure]]) -> None:
        results, failures = out
        report.extend(results, failures)
        if on_file_done is not None:
            on_file_done(path, results, failures)

    if jobs <= 1 or len(sources) <= 1:
        for path in sources:
            _emit(path, process_file(path, config))
        return report

    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="starphot") as pool:
        for path, out in zip(sources, pool.map(lambda s: process_file(s, config), sources)):
            _emit(path, out)
    return report
