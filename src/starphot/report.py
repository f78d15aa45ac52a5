# src/starphot/report.py
"""
Presentation of photometry records.

The text table is a stable contract for downstream consumers:

    Radius     X        Y          S       I       SkyB       Magnitude
          1 100.0000 100.0000 ...

columns ``Radius X Y S I SkyB Magnitude``; radius as an integer-width field,
coordinates and sums to 4 decimals, sky to 2, magnitude to 5. Each slice's
table is preceded by a ``# <source> slice <n>`` line.

CSV and JSONL carry the full record plus ``source`` and ``slice``.
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Literal

from starphot.phot.aperture import PhotometryRecord
from starphot.utils.io import write_text

__all__ = [
    "HEADER",
    "OUTPUT_FORMATS",
    "OutputFormat",
    "format_record",
    "format_table",
    "record_rows",
    "render",
    "write_records",
]

OutputFormat = Literal["text", "csv", "jsonl"]
OUTPUT_FORMATS = ("text", "csv", "jsonl")

HEADER = "Radius     X        Y          S       I       SkyB       Magnitude"


def format_record(rec: PhotometryRecord) -> str:
    """One fixed-width line for a record."""
    return (
        f"{rec.radius:7.0f} {rec.centroid_x:7.4f} {rec.centroid_y:7.4f} "
        f"{rec.raw_sum:7.4f} {rec.net_flux:7.4f} {rec.sky_background:7.2f} {rec.magnitude:7.5f}"
    )


def format_table(records: Iterable[PhotometryRecord], *, header: bool = True) -> Iterator[str]:
    """Header line (optional) followed by one line per record."""
    if header:
        yield HEADER
    for rec in records:
        yield format_record(rec)


def record_rows(results: Iterable[Any]) -> List[Dict[str, Any]]:
    """Flatten slice results into dict rows tagged with ``source`` and ``slice``."""
    rows: List[Dict[str, Any]] = []
    for res in results:
        for rec in res.records:
            rows.append({"source": str(res.source), "slice": res.slice_index, **rec.to_dict()})
    return rows


def render(results: Iterable[Any], fmt: OutputFormat = "text", *, header: bool = True) -> str:
    """
    Render slice results (anything with source, slice_index, records) as one string.

    ``header`` controls the table header line (text) and the header row (csv).
    """
    if fmt == "jsonl":
        return "".join(json.dumps(row, ensure_ascii=False) + "\n" for row in record_rows(results))
    if fmt == "csv":
        rows = record_rows(results)
        if not rows:
            return ""
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=list(rows[0].keys()), lineterminator="\n")
        if header:
            writer.writeheader()
        writer.writerows(rows)
        return buf.getvalue()
    if fmt != "text":
        raise ValueError(f"unknown output format {fmt!r}; expected one of {OUTPUT_FORMATS}")
    lines: List[str] = []
    for res in results:
        lines.append(f"# {res.source} slice {res.slice_index}")
        lines.extend(format_table(res.records, header=header))
    return "".join(line + "\n" for line in lines)


def write_records(results: Iterable[Any], path: Path, fmt: OutputFormat = "text", *, header: bool = True) -> Path:
    """Write slice results to ``path`` atomically."""
    return write_text(render(results, fmt, header=header), path)
