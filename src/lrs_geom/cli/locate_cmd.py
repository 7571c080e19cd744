"""Commands that query a measured line."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from lrs_geom.cli.output import emit, fail, load_or_exit
from lrs_geom.core.config import get_config
from lrs_geom.io.geojson import measured_feature, point_feature
from lrs_geom.locate.event_locator import point_at_measure, sub_path_between
from lrs_geom.mgeom.errors import MeasuredGeometryError
from lrs_geom.mgeom.vertex import MeasuredVertex

app = typer.Typer(help="Locate points and ranges on a measured line")


@app.command()
def point(
    path: Path = typer.Argument(..., help="GeoJSON line feature with measures"),
    m: float = typer.Argument(..., help="measure to locate"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Path to save GeoJSON"),
) -> None:
    """Locate the point at a measure."""
    lrs = load_or_exit(path)
    try:
        located = point_at_measure(lrs, m)
    except MeasuredGeometryError as e:
        fail(e)
    if located.is_empty:
        typer.echo(f"Measure {m} is not on the line", err=True)
        raise typer.Exit(1)
    emit(point_feature(located, m), output)


@app.command("range")
def measure_range(
    path: Path = typer.Argument(..., help="GeoJSON line feature with measures"),
    begin: float = typer.Argument(..., help="begin measure"),
    end: float = typer.Argument(..., help="end measure"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Path to save GeoJSON"),
) -> None:
    """Extract the stretches of the line between two measures."""
    lrs = load_or_exit(path)
    try:
        located = sub_path_between(lrs, begin, end)
    except MeasuredGeometryError as e:
        fail(e)
    emit(measured_feature(located, begin=begin, end=end), output)


@app.command("measure-at")
def measure_at(
    path: Path = typer.Argument(..., help="GeoJSON line feature with measures"),
    x: float = typer.Argument(..., help="x of the query point"),
    y: float = typer.Argument(..., help="y of the query point"),
    tolerance: Optional[float] = typer.Option(None, "--tolerance", "-t", help="Maximum distance to the line"),
) -> None:
    """Print the measure of the line at the point closest to (x, y)."""
    lrs = load_or_exit(path)
    if tolerance is None:
        tolerance = get_config().locate.snap_tolerance
    try:
        closest = lrs.get_closest_point(MeasuredVertex.create_2d(x, y), tolerance)
    except MeasuredGeometryError as e:
        fail(e)
    if closest is None:
        typer.echo(f"No point of the line within {tolerance} of ({x}, {y})", err=True)
        raise typer.Exit(1)
    typer.echo(f"{closest.m}")
