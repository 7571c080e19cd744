from __future__ import annotations

import math

import pytest

from lrs_geom.mgeom.errors import DisjointUnionError, InvalidOrdinateError, NotMonotoneError
from lrs_geom.mgeom.path import MeasureDirection, MeasuredPath, compute_monotonicity
from lrs_geom.mgeom.vertex import M, X, Z, MeasuredVertex


NAN = float("nan")


def _path(*coords: tuple[float, float, float]) -> MeasuredPath:
    """Build a 2D path from (x, y, m) triples."""
    return MeasuredPath(MeasuredVertex.create_2d_with_measure(x, y, m) for x, y, m in coords)


def _xym(vertex: MeasuredVertex) -> tuple[float, float, float]:
    return vertex.x, vertex.y, vertex.m


def _flat(path: MeasuredPath) -> list[float]:
    return [value for v in path for value in _xym(v)]


@pytest.mark.parametrize(
    "measures, monotone, strict",
    [
        ([], True, True),
        ([3.0], True, True),
        ([0, 1, 2, 3, 4], True, True),
        ([4, 3, 2, 1], True, True),
        ([0, 1, 1, 2, 3], True, False),
        ([5, 3, 3, 0], True, False),
        ([0, 1, 1, 0], False, False),
        ([0, 2, 1], False, False),
        ([NAN, 1, 2], False, False),
        ([0, NAN, 2], False, False),
    ],
)
def test_compute_monotonicity(measures: list[float], monotone: bool, strict: bool) -> None:
    assert compute_monotonicity(measures) == (monotone, strict)


def test_measure_on_length_assigns_distances() -> None:
    path = _path((0, 0, 0), (10, 0, NAN))
    path.measure_on_length(False)

    assert [_xym(v) for v in path] == [(0, 0, 0), (10, 0, 10)]
    assert path.is_monotone(strict=True)
    assert path.measure_direction is MeasureDirection.INCREASING


def test_measure_on_length_keeps_begin_measure() -> None:
    path = _path((0, 0, 100), (3, 4, NAN), (3, 10, NAN))
    path.measure_on_length(True)
    assert list(path.measures) == [100, 105, 111]

    path.measure_on_length(False)
    assert list(path.measures) == [0, 5, 11]


def test_measure_on_length_ignores_nan_begin_measure() -> None:
    path = _path((0, 0, NAN), (0, 2, NAN))
    path.measure_on_length(True)
    assert list(path.measures) == [0, 2]


def test_measure_on_length_is_idempotent() -> None:
    path = _path((0, 0, 7), (1, 1, 2), (4, 5, 9), (4, 9, 1))
    path.measure_on_length(False)
    once = list(path.measures)
    path.measure_on_length(False)
    assert list(path.measures) == once


def test_measure_on_length_uses_z_when_present() -> None:
    path = MeasuredPath([
        MeasuredVertex.create_3d(0, 0, 0),
        MeasuredVertex.create_3d(3, 0, 4),
        MeasuredVertex.create_2d(6, 0),
    ])
    path.measure_on_length(False)
    assert list(path.measures) == [0, 5, 8]


def test_interpolate_proportional_to_length() -> None:
    path = _path((0, 0, NAN), (2, 0, NAN), (10, 0, NAN))
    path.interpolate(100, 200)

    assert path.measures[0] == 100
    assert path.measures[1] == pytest.approx(120)
    assert path.measures[2] == 200
    assert path.is_monotone(strict=True)


def test_interpolate_decreasing_measures() -> None:
    path = _path((0, 0, NAN), (5, 0, NAN), (10, 0, NAN))
    path.interpolate(10, 0)

    assert list(path.measures) == pytest.approx([10, 5, 0])
    assert path.measure_direction is MeasureDirection.DECREASING


def test_interpolate_equal_measures_is_constant() -> None:
    path = _path((0, 0, 1), (5, 0, 2), (10, 0, 3))
    path.interpolate(4.0, 4.0 + 1e-12)

    assert list(path.measures) == [4.0, 4.0, 4.0]
    assert path.is_monotone()
    assert not path.is_monotone(strict=True)
    assert path.measure_direction is MeasureDirection.CONSTANT


def test_interpolate_zero_length_path_stays_monotone() -> None:
    path = _path((1, 1, NAN), (1, 1, NAN), (1, 1, NAN))
    path.interpolate(0, 10)
    assert list(path.measures) == [0, 5, 10]


def test_interpolate_empty_path_is_noop() -> None:
    path = MeasuredPath()
    path.interpolate(0, 10)
    assert path.is_empty
    assert path.is_monotone(strict=True)


def test_m_length() -> None:
    assert math.isnan(MeasuredPath().m_length)
    assert _path((0, 0, 5)).m_length == 0
    assert _path((0, 0, 10), (1, 0, 2)).m_length == 8
    assert math.isnan(_path((0, 0, 10), (1, 0, NAN)).m_length)


def test_min_max_measures() -> None:
    increasing = _path((0, 0, 1), (1, 0, 4))
    decreasing = _path((0, 0, 4), (1, 0, 1))
    wavy = _path((0, 0, 3), (1, 0, 9), (2, 0, -2))

    assert (increasing.min_m, increasing.max_m) == (1, 4)
    assert (decreasing.min_m, decreasing.max_m) == (1, 4)
    assert wavy.measure_direction is MeasureDirection.NON_MONOTONE
    assert (wavy.min_m, wavy.max_m) == (-2, 9)
    assert math.isnan(MeasuredPath().min_m)


def test_get_coordinate_at_m_interpolates() -> None:
    path = _path((0, 0, 0), (5, 0, 5), (10, 0, 10))
    vertex = path.get_coordinate_at_m(7.5)

    assert vertex is not None
    assert _xym(vertex) == (7.5, 0, 7.5)


def test_get_coordinate_at_m_on_decreasing_path() -> None:
    path = _path((0, 0, 10), (0, 10, 0))
    vertex = path.get_coordinate_at_m(2.5)

    assert vertex is not None
    assert _xym(vertex) == pytest.approx((0, 7.5, 2.5))


def test_get_coordinate_at_m_interpolates_z() -> None:
    path = MeasuredPath([
        MeasuredVertex.create_3d_with_measure(0, 0, 10, 0),
        MeasuredVertex.create_3d_with_measure(4, 0, 20, 4),
    ])
    vertex = path.get_coordinate_at_m(1)
    assert vertex is not None
    assert (vertex.x, vertex.z, vertex.m) == (1, 12.5, 1)


def test_get_coordinate_at_m_every_measure_in_range() -> None:
    path = _path((0, 0, 0), (3, 4, 5), (3, 10, 11), (-1, 10, 15))
    for m in [0, 0.25, 4.999, 5, 7.3, 11, 14.5, 15]:
        vertex = path.get_coordinate_at_m(m)
        assert vertex is not None
        assert vertex.m == m


def test_get_coordinate_at_m_outside_range() -> None:
    path = _path((0, 0, 0), (10, 0, 10))
    assert path.get_coordinate_at_m(-0.1) is None
    assert path.get_coordinate_at_m(10.1) is None
    assert path.get_coordinate_at_m(NAN) is None
    assert MeasuredPath().get_coordinate_at_m(1) is None


def test_get_coordinate_at_m_flat_segment_returns_first_bracket() -> None:
    path = _path((0, 0, 0), (5, 0, 5), (8, 0, 5), (10, 0, 7))
    vertex = path.get_coordinate_at_m(5)
    assert vertex is not None
    assert _xym(vertex) == (5, 0, 5)


def test_get_coordinate_at_m_requires_monotone() -> None:
    path = _path((0, 0, 0), (5, 0, 10), (10, 0, 3))
    with pytest.raises(NotMonotoneError):
        path.get_coordinate_at_m(4)


def test_get_coordinates_between_inside_one_segment() -> None:
    path = _path((0, 0, 0), (10, 0, 10))
    result = path.get_coordinates_between(3, 7)

    assert len(result) == 1
    assert [_xym(v) for v in result[0]] == [(3, 0, 3), (7, 0, 7)]


def test_get_coordinates_between_swapped_bounds() -> None:
    path = _path((0, 0, 0), (10, 0, 10))
    result = path.get_coordinates_between(7, 3)
    assert [_xym(v) for v in result[0]] == [(3, 0, 3), (7, 0, 7)]


def test_get_coordinates_between_keeps_inner_vertices() -> None:
    path = _path((0, 0, 0), (5, 0, 5), (5, 5, 10), (10, 5, 15))
    result = path.get_coordinates_between(2, 12)

    assert [_xym(v) for v in result[0]] == [(2, 0, 2), (5, 0, 5), (5, 5, 10), (7, 5, 12)]
    assert result[0].measure_direction is MeasureDirection.INCREASING


def test_get_coordinates_between_on_existing_vertices() -> None:
    path = _path((0, 0, 0), (5, 0, 5), (10, 0, 10))
    result = path.get_coordinates_between(5, 10)
    assert [_xym(v) for v in result[0]] == [(5, 0, 5), (10, 0, 10)]


def test_get_coordinates_between_clipped_to_path() -> None:
    path = _path((0, 0, 0), (5, 0, 5), (10, 0, 10))
    result = path.get_coordinates_between(-5, 7)
    assert [_xym(v) for v in result[0]] == [(0, 0, 0), (5, 0, 5), (7, 0, 7)]


def test_get_coordinates_between_decreasing_path() -> None:
    path = _path((0, 0, 15), (5, 0, 10), (10, 0, 5), (15, 0, 0))
    result = path.get_coordinates_between(3, 12)

    assert _flat(result[0]) == pytest.approx([3, 0, 12, 5, 0, 10, 10, 0, 5, 12, 0, 3])
    assert result[0].measure_direction is MeasureDirection.DECREASING


def test_get_coordinates_between_decreasing_inside_one_segment() -> None:
    path = _path((0, 0, 10), (10, 0, 0))
    result = path.get_coordinates_between(3, 7)
    assert _flat(result[0]) == pytest.approx([3, 0, 7, 7, 0, 3])


def test_get_coordinates_between_no_overlap() -> None:
    path = _path((0, 0, 0), (10, 0, 10))
    assert path.get_coordinates_between(11, 20) == []
    assert path.get_coordinates_between(-5, -1) == []
    assert MeasuredPath().get_coordinates_between(0, 1) == []


def test_get_coordinates_between_single_point_interval() -> None:
    path = _path((0, 0, 0), (10, 0, 10))
    result = path.get_coordinates_between(4, 4)
    assert [_xym(v) for v in result[0]] == [(4, 0, 4), (4, 0, 4)]


def test_get_coordinates_between_requires_monotone() -> None:
    path = _path((0, 0, 0), (5, 0, 10), (10, 0, 3))
    with pytest.raises(NotMonotoneError):
        path.get_coordinates_between(1, 2)


def test_get_closest_point_projects_on_segment() -> None:
    path = _path((0, 0, 0), (10, 0, 10), (10, 10, 20))
    closest = path.get_closest_point(MeasuredVertex.create_2d(4, 1), 1.5)

    assert closest is not None
    assert _xym(closest) == pytest.approx((4, 0, 4))
    assert path.get_measure_at((11, 5), 1.5) == pytest.approx(15)


def test_get_closest_point_prefers_lowest_measure_on_ties() -> None:
    # The point (5, 5) is equally far from the first and the last segment
    path = _path((0, 0, 0), (10, 0, 10), (10, 10, 20), (0, 10, 30))
    closest = path.get_closest_point((5, 5), 10)
    assert closest is not None
    assert closest.m == pytest.approx(5)


def test_get_closest_point_outside_tolerance() -> None:
    path = _path((0, 0, 0), (10, 0, 10))
    assert path.get_closest_point((5, 3), 1.0) is None
    assert math.isnan(path.get_measure_at((5, 3), 1.0))


def test_get_closest_point_requires_monotone() -> None:
    path = _path((0, 0, 0), (5, 0, 10), (10, 0, 3))
    with pytest.raises(NotMonotoneError):
        path.get_closest_point((1, 0), 1.0)


def test_reverse_measures_twice_restores_measures() -> None:
    path = _path((0, 0, 0), (1, 0, 1.5), (4, 0, 7.25))
    original = list(path.measures)

    path.reverse_measures()
    assert list(path.measures) == [7.25, 1.5, 0]
    assert path.measure_direction is MeasureDirection.DECREASING
    assert [v.x for v in path] == [0, 1, 4]

    path.reverse_measures()
    assert list(path.measures) == original
    assert path.measure_direction is MeasureDirection.INCREASING


def test_shift_measure() -> None:
    path = _path((0, 0, 0), (10, 0, 10))
    path.shift_measure(-25)
    assert list(path.measures) == [-25, -15]
    assert path.is_monotone(strict=True)


def test_set_measure_at_rebuilds_monotonicity() -> None:
    path = _path((0, 0, 0), (5, 0, 5), (10, 0, 10))
    path.set_measure_at(1, 20)
    assert not path.is_monotone()
    assert path.measure_direction is MeasureDirection.NON_MONOTONE

    path.set_measure_at(1, 5)
    assert path.is_monotone(strict=True)
    assert path.get_measure_at_index(1) == 5


def test_ordinate_access() -> None:
    path = MeasuredPath([(1, 2, 3, 4)])
    assert path.get_ordinate(0, X) == 1
    assert path.get_ordinate(0, Z) == 3
    path.set_ordinate(0, M, 9)
    assert path.get_measure_at_index(0) == 9
    with pytest.raises(InvalidOrdinateError):
        path.get_ordinate(0, 7)
    with pytest.raises(InvalidOrdinateError):
        path.set_ordinate(0, -1, 0.0)


def test_constructor_copies_vertices() -> None:
    source = _path((0, 0, 0), (10, 0, 10))
    copied = MeasuredPath(source)
    copied.shift_measure(5)

    assert list(source.measures) == [0, 10]
    assert list(copied.measures) == [5, 15]


def test_union_appends_matching_path() -> None:
    a = _path((0, 0, 0), (10, 0, 10))
    b = _path((10, 0, 10), (20, 0, 20))
    union = a.union_with(b)

    assert [_xym(v) for v in union] == [(0, 0, 0), (10, 0, 10), (20, 0, 20)]
    assert union.is_monotone(strict=True)


def test_union_is_symmetric() -> None:
    a = _path((0, 0, 0), (10, 0, 10))
    b = _path((10, 0, 10), (20, 5, 20))

    forward = [_xym(v) for v in a.union_with(b)]
    backward = [_xym(v) for v in b.union_with(a)]
    assert sorted(forward) == sorted(backward)


def test_union_normalizes_decreasing_paths() -> None:
    a = _path((10, 0, 10), (0, 0, 0))
    b = _path((20, 0, 20), (10, 0, 10))
    union = a.union_with(b)

    assert [_xym(v) for v in union] == [(0, 0, 0), (10, 0, 10), (20, 0, 20)]
    assert union.measure_direction is MeasureDirection.INCREASING


def test_union_tolerates_measure_noise() -> None:
    a = _path((0, 0, 0), (10, 0, 10))
    b = _path((10, 0, 10 + 1e-12), (20, 0, 20))
    assert len(a.union_with(b)) == 3


def test_union_disjoint_paths() -> None:
    a = _path((0, 0, 0), (10, 0, 10))
    c = _path((50, 50, 50), (60, 60, 60))
    with pytest.raises(DisjointUnionError):
        a.union_with(c)


def test_union_same_position_different_measure_is_disjoint() -> None:
    a = _path((0, 0, 0), (10, 0, 10))
    b = _path((10, 0, 12), (20, 0, 22))
    with pytest.raises(DisjointUnionError):
        a.union_with(b)


def test_union_requires_monotone() -> None:
    a = _path((0, 0, 0), (10, 0, 10))
    bad = _path((10, 0, 10), (15, 0, 30), (20, 0, 12))
    with pytest.raises(NotMonotoneError):
        a.union_with(bad)


def test_union_with_empty_path() -> None:
    a = _path((0, 0, 0), (10, 0, 10))
    union = a.union_with(MeasuredPath())
    assert [_xym(v) for v in union] == [(0, 0, 0), (10, 0, 10)]
    assert union is not a
