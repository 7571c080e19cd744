"""Linear referencing on measured polylines."""

from lrs_geom.core.approx import approx_equals
from lrs_geom.locate.event_locator import point_at_measure, sub_path_between
from lrs_geom.mgeom import (
    DisjointUnionError,
    InvalidOrdinateError,
    MeasureDirection,
    MeasuredGeometryError,
    MeasuredGeometryFactory,
    MeasuredPath,
    MeasuredPathCollection,
    MeasuredVertex,
    MeasureQueryable,
    NotMonotoneError,
)

__all__ = [
    "DisjointUnionError",
    "InvalidOrdinateError",
    "MeasureDirection",
    "MeasureQueryable",
    "MeasuredGeometryError",
    "MeasuredGeometryFactory",
    "MeasuredPath",
    "MeasuredPathCollection",
    "MeasuredVertex",
    "NotMonotoneError",
    "approx_equals",
    "point_at_measure",
    "sub_path_between",
]
