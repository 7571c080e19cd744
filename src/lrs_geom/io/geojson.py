"""GeoJSON features carrying measures in their properties."""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Optional, Union

from shapely.geometry import LineString, MultiLineString, Point, mapping, shape

from lrs_geom.mgeom.collection import MeasuredPathCollection
from lrs_geom.mgeom.factory import DEFAULT_FACTORY, MeasuredGeometryFactory
from lrs_geom.mgeom.path import MeasuredPath


MeasuredGeometry = Union[MeasuredPath, MeasuredPathCollection]


def load_measured_geometry(
    path: Path,
    factory: Optional[MeasuredGeometryFactory] = None,
) -> MeasuredGeometry:
    """Load the first line feature of a GeoJSON file as a measured geometry.

    Measures are read from ``properties.measures`` (a list for a LineString,
    a list of lists for a MultiLineString); missing measures are NaN. A
    MultiLineString may carry ``properties.gap``.
    """
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    return measured_geometry_from_feature(data, factory)


def measured_geometry_from_feature(
    data: dict,
    factory: Optional[MeasuredGeometryFactory] = None,
) -> MeasuredGeometry:
    factory = factory or DEFAULT_FACTORY
    if not isinstance(data, dict):
        raise ValueError("Expected a GeoJSON Feature or FeatureCollection object")
    feature = data
    if data.get("type") == "FeatureCollection":
        features = list(data.get("features", []))
        if not features:
            raise ValueError("FeatureCollection contains no features")
        feature = features[0]
        if not isinstance(feature, dict):
            raise ValueError("First feature is not a GeoJSON object")
    props = feature.get("properties") or {}
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        raise ValueError("Feature has no geometry")
    geom = shape(geometry)
    measures = props.get("measures")
    if isinstance(geom, LineString):
        return factory.path_from_shapely(geom, _as_measures(measures))
    if isinstance(geom, MultiLineString):
        nested = None if measures is None else [_as_measures(m) for m in measures]
        return factory.collection_from_shapely(geom, nested, gap=float(props.get("gap") or 0.0))
    raise ValueError(f"Unsupported geometry type {geom.geom_type!r}; expected a line")


def measured_feature(
    lrs: MeasuredGeometry,
    factory: Optional[MeasuredGeometryFactory] = None,
    **properties: Any,
) -> dict:
    """GeoJSON feature for a measured path or collection."""
    factory = factory or DEFAULT_FACTORY
    if isinstance(lrs, MeasuredPathCollection):
        geom = factory.create_multi_line_string(lrs)
        measures = [_json_measures(p) for p in lrs if len(p) >= 2]
        properties.setdefault("gap", lrs.gap)
    else:
        geom = factory.create_line_string(lrs)
        measures = _json_measures(lrs)
    return {
        "type": "Feature",
        "properties": {"measures": measures, **properties},
        "geometry": mapping(geom),
    }


def point_feature(point: Point, m: float, **properties: Any) -> dict:
    return {
        "type": "Feature",
        "properties": {"measure": _json_float(m), **properties},
        "geometry": None if point.is_empty else mapping(point),
    }


def _as_measures(values: Any) -> Optional[list[float]]:
    if values is None:
        return None
    return [math.nan if v is None else float(v) for v in values]


def _json_float(value: float) -> Optional[float]:
    # NaN is not valid JSON
    return None if math.isnan(value) else float(value)


def _json_measures(path: MeasuredPath) -> list[Optional[float]]:
    return [_json_float(m) for m in path.measures]
