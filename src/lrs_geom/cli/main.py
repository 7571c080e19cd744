"""Typer CLI for measuring and querying measured lines."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from lrs_geom.cli import locate_cmd, measure_cmd
from lrs_geom.cli.output import load_or_exit
from lrs_geom.core.config import get_config
from lrs_geom.mgeom.collection import MeasuredPathCollection

app = typer.Typer(help="Linear referencing on measured lines")
app.add_typer(measure_cmd.app, name="measure")
app.add_typer(locate_cmd.app, name="locate")


@app.callback()
def main(
    config: Optional[Path] = typer.Option(None, "--config", help="YAML configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
) -> None:
    settings = get_config(config)
    level = "DEBUG" if verbose else settings.logging.level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def info(
    path: Path = typer.Argument(..., help="GeoJSON line feature with measures"),
) -> None:
    """Show the measure properties of a line."""
    lrs = load_or_exit(path)
    if isinstance(lrs, MeasuredPathCollection):
        typer.echo(f"Parts: {len(lrs)} (gap {lrs.gap})")
        typer.echo(f"Vertices: {sum(len(p) for p in lrs)}")
    else:
        typer.echo(f"Vertices: {len(lrs)}")
        typer.echo(f"Length: {lrs.length}")
        typer.echo(f"Measure length: {lrs.m_length}")
    typer.echo(f"Monotone: {lrs.is_monotone()}")
    typer.echo(f"Strict monotone: {lrs.is_monotone(strict=True)}")
    typer.echo(f"Direction: {lrs.measure_direction.name}")
    typer.echo(f"Measures: {lrs.min_m} .. {lrs.max_m}")


if __name__ == "__main__":
    app()
