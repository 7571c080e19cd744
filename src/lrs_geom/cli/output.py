"""Shared helpers for CLI commands."""
from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn, Optional

import typer

from lrs_geom.io.geojson import MeasuredGeometry, load_measured_geometry
from lrs_geom.mgeom.errors import MeasuredGeometryError


def load_or_exit(path: Path) -> MeasuredGeometry:
    try:
        return load_measured_geometry(path)
    except (OSError, ValueError, KeyError) as e:
        typer.echo(f"Could not read measured line from {path}: {e}", err=True)
        raise typer.Exit(1)


def fail(error: MeasuredGeometryError | ValueError) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


def emit(feature: dict, output: Optional[Path]) -> None:
    text = json.dumps(feature, indent=2)
    if output:
        output.write_text(text)
        typer.echo(f"Saved feature to {output}")
    else:
        typer.echo(text)
