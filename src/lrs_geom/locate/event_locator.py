"""Translate measure events on measured geometries into output geometries."""
from __future__ import annotations

import logging
from typing import Optional

from shapely.geometry import Point

from lrs_geom.mgeom.collection import MeasuredPathCollection
from lrs_geom.mgeom.factory import DEFAULT_FACTORY, MeasuredGeometryFactory
from lrs_geom.mgeom.path import MeasureQueryable


logger = logging.getLogger(__name__)


def point_at_measure(
    lrs: MeasureQueryable,
    position: float,
    factory: Optional[MeasuredGeometryFactory] = None,
) -> Point:
    """Return the point where the measure of ``lrs`` equals ``position``.

    An empty point is returned when the measure is not on the geometry.

    Raises:
        NotMonotoneError: If the measures of ``lrs`` are not monotone.
    """
    factory = factory or DEFAULT_FACTORY
    vertex = lrs.get_coordinate_at_m(position)
    if vertex is None:
        logger.debug("Measure %s not found on %r", position, lrs)
    return factory.create_point(vertex)


def sub_path_between(
    lrs: MeasureQueryable,
    begin: float,
    end: float,
    factory: Optional[MeasuredGeometryFactory] = None,
) -> MeasuredPathCollection:
    """Return the linear stretches of ``lrs`` between two measures.

    Sub-paths with fewer than two vertices cannot form a line and are dropped.

    Raises:
        NotMonotoneError: If the measures of ``lrs`` are not monotone.
    """
    factory = factory or DEFAULT_FACTORY
    sub_paths = [p for p in lrs.get_coordinates_between(begin, end) if len(p) >= 2]
    return factory.create_collection(sub_paths)
