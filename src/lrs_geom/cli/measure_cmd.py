"""Commands that assign measures to a line."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from lrs_geom.cli.output import emit, fail, load_or_exit
from lrs_geom.io.geojson import measured_feature
from lrs_geom.mgeom.collection import MeasuredPathCollection
from lrs_geom.mgeom.errors import MeasuredGeometryError

app = typer.Typer(help="Assign measures to the vertices of a line")


@app.command("on-length")
def on_length(
    path: Path = typer.Argument(..., help="GeoJSON line feature"),
    keep_begin: bool = typer.Option(False, "--keep-begin", help="Keep the measure of the first vertex"),
    gap: Optional[float] = typer.Option(None, "--gap", help="Measure gap between parts of a multi line"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Path to save GeoJSON"),
) -> None:
    """Measure every vertex by its distance along the line."""
    lrs = load_or_exit(path)
    if gap is not None and isinstance(lrs, MeasuredPathCollection):
        lrs.gap = gap
    lrs.measure_on_length(keep_begin)
    try:
        feature = measured_feature(lrs, monotone=lrs.is_monotone())
    except ValueError as e:
        fail(e)
    emit(feature, output)


@app.command()
def interpolate(
    path: Path = typer.Argument(..., help="GeoJSON LineString feature"),
    begin: float = typer.Argument(..., help="measure of the first vertex"),
    end: float = typer.Argument(..., help="measure of the last vertex"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Path to save GeoJSON"),
) -> None:
    """Interpolate measures between a begin and an end measure."""
    lrs = load_or_exit(path)
    if isinstance(lrs, MeasuredPathCollection):
        typer.echo("Interpolation needs a single LineString", err=True)
        raise typer.Exit(1)
    lrs.interpolate(begin, end)
    try:
        feature = measured_feature(lrs, monotone=lrs.is_monotone())
    except (MeasuredGeometryError, ValueError) as e:
        fail(e)
    emit(feature, output)
