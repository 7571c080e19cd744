"""Builders for measured geometries and their shapely counterparts."""
from __future__ import annotations

import math
from typing import Any, Iterable, Optional, Sequence

from shapely.geometry import LineString, MultiLineString, Point

from lrs_geom.mgeom.collection import MeasuredPathCollection
from lrs_geom.mgeom.path import MeasuredPath
from lrs_geom.mgeom.vertex import MeasuredVertex


class MeasuredGeometryFactory:
    """Creates measured paths from vertex lists and shapely output geometries.

    Shapely geometries carry x, y and z only; measures stay on the measured
    objects. z is emitted only when every vertex of the geometry has one.
    """

    def create_path(self, vertices: Optional[Iterable[Any]] = None) -> MeasuredPath:
        return MeasuredPath(vertices or ())

    def create_collection(self, paths: Iterable[MeasuredPath] = (), gap: float = 0.0) -> MeasuredPathCollection:
        return MeasuredPathCollection(paths, gap)

    def create_point(self, vertex: Optional[MeasuredVertex]) -> Point:
        if vertex is None:
            return Point()
        if vertex.has_z:
            return Point(vertex.x, vertex.y, vertex.z)
        return Point(vertex.x, vertex.y)

    def create_line_string(self, path: MeasuredPath) -> LineString:
        if path.is_empty:
            return LineString()
        if len(path) < 2:
            raise ValueError("A line string needs at least two vertices")
        return LineString(_coords(path.vertices))

    def create_multi_line_string(self, collection: MeasuredPathCollection) -> MultiLineString:
        lines = [self.create_line_string(p) for p in collection if len(p) >= 2]
        return MultiLineString(lines)

    def path_from_shapely(self, line: LineString, measures: Optional[Sequence[float]] = None) -> MeasuredPath:
        """Build a measured path from a shapely line and optional measures."""
        coords = list(line.coords)
        if measures is None:
            measures = [math.nan] * len(coords)
        if len(measures) != len(coords):
            raise ValueError(f"Got {len(measures)} measures for {len(coords)} vertices")
        vertices = []
        for coord, m in zip(coords, measures):
            z = coord[2] if len(coord) > 2 else math.nan
            vertices.append(MeasuredVertex(float(coord[0]), float(coord[1]), float(z), float(m)))
        return MeasuredPath(vertices)

    def collection_from_shapely(
        self,
        lines: MultiLineString,
        measures: Optional[Sequence[Sequence[float]]] = None,
        gap: float = 0.0,
    ) -> MeasuredPathCollection:
        parts = list(lines.geoms)
        if measures is None:
            measures = [None] * len(parts)
        if len(measures) != len(parts):
            raise ValueError(f"Got {len(measures)} measure lists for {len(parts)} lines")
        return MeasuredPathCollection(
            [self.path_from_shapely(line, m) for line, m in zip(parts, measures)],
            gap,
        )


def _coords(vertices: Sequence[MeasuredVertex]) -> list[tuple[float, ...]]:
    if all(v.has_z for v in vertices):
        return [(v.x, v.y, v.z) for v in vertices]
    return [(v.x, v.y) for v in vertices]


DEFAULT_FACTORY = MeasuredGeometryFactory()
