from __future__ import annotations

import json
import math
from pathlib import Path

import pytest
from shapely.geometry import LineString, MultiLineString

from lrs_geom.io.geojson import load_measured_geometry, measured_feature, point_feature
from lrs_geom.mgeom.collection import MeasuredPathCollection
from lrs_geom.mgeom.factory import MeasuredGeometryFactory
from lrs_geom.mgeom.path import MeasuredPath
from lrs_geom.mgeom.vertex import MeasuredVertex


def _line_feature(coords, measures=None, **props):
    properties = dict(props)
    if measures is not None:
        properties["measures"] = measures
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "LineString", "coordinates": coords},
    }


def test_factory_builds_shapely_geometries() -> None:
    factory = MeasuredGeometryFactory()
    path = factory.create_path([(0, 0, 0), (10, 0, 10)])
    line = factory.create_line_string(path)

    assert isinstance(line, LineString)
    assert list(line.coords) == [(0, 0), (10, 0)]
    assert factory.create_point(None).is_empty
    assert factory.create_line_string(MeasuredPath()).is_empty
    with pytest.raises(ValueError):
        factory.create_line_string(factory.create_path([(0, 0, 0)]))


def test_factory_multi_line_skips_degenerate_parts() -> None:
    factory = MeasuredGeometryFactory()
    collection = factory.create_collection(
        [factory.create_path([(0, 0, 0), (1, 0, 1)]), factory.create_path([(5, 5, 3)])],
        gap=1.0,
    )
    multi = factory.create_multi_line_string(collection)
    assert isinstance(multi, MultiLineString)
    assert len(multi.geoms) == 1


def test_path_from_shapely_with_z_and_measures() -> None:
    factory = MeasuredGeometryFactory()
    path = factory.path_from_shapely(LineString([(0, 0, 1), (3, 4, 2)]), [0, 5])

    assert [(v.z, v.m) for v in path] == [(1, 0), (2, 5)]
    assert list(factory.create_line_string(path).coords) == [(0, 0, 1), (3, 4, 2)]
    with pytest.raises(ValueError):
        factory.path_from_shapely(LineString([(0, 0), (1, 1)]), [0])


def test_load_line_feature(tmp_path: Path) -> None:
    src = tmp_path / "line.geojson"
    src.write_text(json.dumps(_line_feature([[0, 0], [10, 0]], [0, None])))

    lrs = load_measured_geometry(src)
    assert isinstance(lrs, MeasuredPath)
    assert lrs.get_measure_at_index(0) == 0
    assert math.isnan(lrs.get_measure_at_index(1))


def test_load_multi_line_feature_collection(tmp_path: Path) -> None:
    feature = {
        "type": "Feature",
        "properties": {"measures": [[0, 10], [12, 22]], "gap": 2},
        "geometry": {
            "type": "MultiLineString",
            "coordinates": [[[0, 0], [10, 0]], [[20, 0], [30, 0]]],
        },
    }
    src = tmp_path / "multi.geojson"
    src.write_text(json.dumps({"type": "FeatureCollection", "features": [feature]}))

    lrs = load_measured_geometry(src)
    assert isinstance(lrs, MeasuredPathCollection)
    assert lrs.gap == 2
    assert (lrs.min_m, lrs.max_m) == (0, 22)


def test_load_rejects_points(tmp_path: Path) -> None:
    src = tmp_path / "point.geojson"
    src.write_text(json.dumps({"type": "Feature", "properties": {}, "geometry": {"type": "Point", "coordinates": [0, 0]}}))
    with pytest.raises(ValueError):
        load_measured_geometry(src)


def test_measured_feature_replaces_nan_with_null() -> None:
    path = MeasuredPath([MeasuredVertex.create_2d(0, 0), MeasuredVertex.create_2d_with_measure(1, 0, 1)])
    feature = measured_feature(path, source="test")

    assert feature["properties"] == {"measures": [None, 1.0], "source": "test"}
    assert feature["geometry"]["type"] == "LineString"
    json.dumps(feature, allow_nan=False)


def test_point_feature() -> None:
    factory = MeasuredGeometryFactory()
    feature = point_feature(factory.create_point(MeasuredVertex(1, 2)), 4.5)
    assert feature["properties"]["measure"] == 4.5
    assert feature["geometry"]["coordinates"] == (1.0, 2.0)
    assert point_feature(factory.create_point(None), float("nan"))["geometry"] is None
