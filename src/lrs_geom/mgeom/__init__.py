"""Measured geometries for linear referencing."""

from lrs_geom.mgeom.collection import MeasuredPathCollection
from lrs_geom.mgeom.errors import (
    DisjointUnionError,
    InvalidOrdinateError,
    MeasuredGeometryError,
    NotMonotoneError,
)
from lrs_geom.mgeom.factory import DEFAULT_FACTORY, MeasuredGeometryFactory
from lrs_geom.mgeom.path import MeasureDirection, MeasuredPath, MeasureQueryable
from lrs_geom.mgeom.vertex import M, X, Y, Z, MeasuredVertex

__all__ = [
    "DEFAULT_FACTORY",
    "DisjointUnionError",
    "InvalidOrdinateError",
    "M",
    "MeasureDirection",
    "MeasureQueryable",
    "MeasuredGeometryError",
    "MeasuredGeometryFactory",
    "MeasuredPath",
    "MeasuredPathCollection",
    "MeasuredVertex",
    "NotMonotoneError",
    "X",
    "Y",
    "Z",
]
