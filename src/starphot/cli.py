# src/starphot/cli.py
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from starphot import get_logger, get_version
from starphot.config import load_config
from starphot.errors import ImageReadError, StarPhotError
from starphot.fits import discover_sources, list_headers
from starphot.pipeline import Failure, SliceResult, run_batch
from starphot.report import OUTPUT_FORMATS, format_table, render, write_records
from starphot.utils.logging import configure_logging, level_from_env

__all__ = ["app", "main"]

# ======================================================================================
# App declaration
# ======================================================================================

app = typer.Typer(
    name="starphot",
    help="starphot: centroid, sky annulus and aperture photometry of a point source in FITS images.",
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)

logger = get_logger(__name__)

# Records go to stdout; everything else goes to stderr.
_err = Console(stderr=True)

# ======================================================================================
# Feedback
# ======================================================================================

def _ok(msg: str) -> None:
    _err.print(f"[bold green]✓[/bold green] {escape(msg)}")


def _warn(msg: str) -> None:
    _err.print(f"[yellow]warn:[/yellow] {escape(msg)}")


def _fail(msg: str, code: int = 1) -> None:
    _err.print(f"[bold red]error:[/bold red] {escape(msg)}")
    raise typer.Exit(code=code)


def _describe(f: Failure) -> str:
    where = str(f.source) if f.slice_index is None else f"{f.source} slice {f.slice_index}"
    return f"{where}: {f.kind}: {f.error.message}"

# ======================================================================================
# Global flags / callback
# ======================================================================================

@app.callback()
def _global(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging (INFO)"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet mode (errors only)"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write JSONL log records here"),
) -> None:
    """
    Global flags for logging. STARPHOT_LOGLEVEL applies when neither
    --verbose nor --quiet is given.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = level_from_env()
    configure_logging(level, log_file)

# ======================================================================================
# run
# ======================================================================================

@app.command("run")
def run_cmd(
    source: Path = typer.Argument(..., help="A FITS file, or a directory of *.fits files"),
    xpos: Optional[int] = typer.Option(None, "--xpos", "-x", help="Source x (1-based column)"),
    ypos: Optional[int] = typer.Option(None, "--ypos", "-y", help="Source y (1-based row)"),
    boxsize: Optional[int] = typer.Option(None, "--boxsize", "-b", help="Cutout side length in pixels"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t", help="Centroid threshold (pixel > T)"),
    radii: Optional[str] = typer.Option(None, "--radii", "-r", help='Aperture radii, e.g. "1-17" or "2,4,6.5"'),
    zero_point: Optional[float] = typer.Option(None, "--zero-point", help="Magnitude zero point"),
    sky_base_radius: Optional[float] = typer.Option(None, "--sky-base-radius", help="Annulus base radius"),
    sky_per_aperture: Optional[bool] = typer.Option(
        None, "--sky-per-aperture/--fixed-sky", help="Re-estimate the sky around each aperture"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML or JSON config file"),
    overrides: List[str] = typer.Option([], "--set", "-s", help="Override a config key: key=value (repeatable)"),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Files processed in parallel"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write records here instead of stdout"),
    fmt: str = typer.Option("text", "--format", "-f", help="text | csv | jsonl"),
    no_header: bool = typer.Option(False, "--no-header", help="Omit the text table header or the CSV header row"),
) -> None:
    """
    Measure the growth curve of one source in every slice of every file.

    Exit code 0 when every slice was measured, 1 when any slice or file failed,
    2 when the configuration or the input path is invalid.
    """
    if fmt not in OUTPUT_FORMATS:
        _fail(f"unknown format {fmt!r}; choose one of {', '.join(OUTPUT_FORMATS)}", code=2)

    try:
        cfg = load_config(
            config,
            overrides,
            xpos=xpos,
            ypos=ypos,
            boxsize=boxsize,
            threshold=threshold,
            radii=radii,
            zero_point=zero_point,
            sky_base_radius=sky_base_radius,
            sky_per_aperture=sky_per_aperture,
        )
        sources = discover_sources(source)
    except StarPhotError as e:
        _fail(str(e), code=2)

    header = not no_header
    csv_header_written = False

    def _stream(path: Path, results: List[SliceResult], failures: List[Failure]) -> None:
        nonlocal csv_header_written
        if output is not None:
            return
        if fmt == "text":
            for res in results:
                for line in format_table(res.records, header=header):
                    typer.echo(line)
        elif fmt == "csv":
            # One header row for the whole run
            text = render(results, fmt, header=header and not csv_header_written)
            if text:
                csv_header_written = True
                typer.echo(text, nl=False)
        else:
            typer.echo(render(results, fmt), nl=False)

    report = run_batch(sources, cfg, jobs=jobs, on_file_done=_stream)

    if output is not None:
        dest = write_records(report.results, output, fmt, header=header)
        logger.info("Wrote %d slice(s) to %s", len(report.results), dest)

    if report.failures:
        _err.print(
            Panel.fit(
                escape("\n".join(_describe(f) for f in report.failures)),
                title=f"{len(report.failures)} failure(s)",
                border_style="red",
            )
        )
        _warn(f"{len(report.results)} slice(s) measured, {len(report.failures)} failed")
        raise typer.Exit(code=1)
    if output is not None:
        _ok(f"{len(report.results)} slice(s) measured → {output}")

# ======================================================================================
# headers / config / version
# ======================================================================================

@app.command("headers")
def headers_cmd(
    path: Path = typer.Argument(..., help="FITS file whose headers to list"),
) -> None:
    """Print the header cards of every HDU in a FITS file."""
    try:
        typer.echo(list_headers(path), nl=False)
    except ImageReadError as e:
        _fail(str(e), code=1)


@app.command("config")
def config_cmd(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML or JSON config file"),
    overrides: List[str] = typer.Option([], "--set", "-s", help="Override a config key: key=value (repeatable)"),
    check: bool = typer.Option(False, "--check", help="Also validate the merged configuration"),
) -> None:
    """Print the merged configuration as JSON."""
    try:
        cfg = load_config(config, overrides, validate=check)
    except StarPhotError as e:
        _fail(str(e), code=2)
    typer.echo(json.dumps(cfg.to_dict(), indent=2))


@app.command("version")
def version_cmd() -> None:
    """Print package and Python versions."""
    info = {"starphot": get_version(), "python": sys.version.split()[0], "platform": sys.platform}
    typer.echo(json.dumps(info, indent=2))

# ======================================================================================
# entrypoint
# ======================================================================================

def main() -> None:
    app()


if __name__ == "__main__":
    main()
