"""Measured polyline with monotonicity analysis and linear referencing queries."""
from __future__ import annotations

from enum import Enum
import logging
import math
from typing import Any, Iterable, Iterator, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from lrs_geom.core.approx import approx_equals
from lrs_geom.core.config import get_config
from lrs_geom.mgeom.errors import DisjointUnionError, NotMonotoneError
from lrs_geom.mgeom.vertex import M, NAN, MeasuredVertex, as_vertex


logger = logging.getLogger(__name__)


class MeasureDirection(Enum):
    """Direction of the measures with respect to the vertex order."""

    INCREASING = 1
    CONSTANT = 0
    DECREASING = -1
    NON_MONOTONE = -3


@runtime_checkable
class MeasureQueryable(Protocol):
    """Capability shared by geometries that answer measure queries."""

    @property
    def min_m(self) -> float:
        ...

    @property
    def max_m(self) -> float:
        ...

    def is_monotone(self, strict: bool = False) -> bool:
        ...

    def measure_on_length(self, keep_begin_measure: bool) -> None:
        ...

    def get_coordinate_at_m(self, m: float) -> Optional[MeasuredVertex]:
        ...

    def get_coordinates_between(self, begin: float, end: float) -> list["MeasuredPath"]:
        ...

    def get_measure_at(self, point: Any, tolerance: Optional[float] = None) -> float:
        ...


def compute_monotonicity(measures: Sequence[float]) -> Tuple[bool, bool]:
    """Return ``(monotone, strict_monotone)`` for a sequence of measures.

    An empty sequence is monotone. Any NaN measure makes the sequence
    non-monotone. Equal consecutive measures are allowed for non-strict
    monotonicity; every non-zero step must share the sign of the first one.
    """
    m = np.asarray(measures, dtype=float)
    if m.size == 0:
        return True, True
    if np.isnan(m).any():
        return False, False
    signs = np.sign(np.diff(m))
    steps = signs[signs != 0]
    monotone = bool(steps.size == 0 or np.all(steps == steps[0]))
    strict = monotone and bool(np.all(signs != 0))
    return monotone, strict


def direction_of(measures: Sequence[float], monotone: bool) -> MeasureDirection:
    if not monotone:
        return MeasureDirection.NON_MONOTONE
    if len(measures) == 0:
        return MeasureDirection.CONSTANT
    first, last = measures[0], measures[-1]
    if first < last:
        return MeasureDirection.INCREASING
    if first > last:
        return MeasureDirection.DECREASING
    return MeasureDirection.CONSTANT


def segment_lengths(vertices: Sequence[MeasuredVertex]) -> np.ndarray:
    """Length of each segment; z contributes only where both ends carry one."""
    if len(vertices) < 2:
        return np.zeros(0)
    coords = np.array([(v.x, v.y, v.z) for v in vertices], dtype=float)
    deltas = np.diff(coords, axis=0)
    dz = np.where(np.isnan(deltas[:, 2]), 0.0, deltas[:, 2])
    return np.sqrt(deltas[:, 0] ** 2 + deltas[:, 1] ** 2 + dz ** 2)


def cumulative_lengths(vertices: Sequence[MeasuredVertex]) -> np.ndarray:
    """Distance along the path from the first vertex to every vertex."""
    if not vertices:
        return np.zeros(0)
    return np.concatenate(([0.0], np.cumsum(segment_lengths(vertices))))


def _projection_factor(p0: MeasuredVertex, p1: MeasuredVertex, point: MeasuredVertex) -> float:
    """Clamped 2D projection factor of ``point`` onto segment p0-p1."""
    dx = p1.x - p0.x
    dy = p1.y - p0.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return 0.0
    t = ((point.x - p0.x) * dx + (point.y - p0.y) * dy) / length_sq
    return max(0.0, min(1.0, t))


def _interpolate_vertex(mco1: MeasuredVertex, mco2: MeasuredVertex, m: float) -> MeasuredVertex:
    """Vertex at measure ``m`` on the segment between two vertices."""
    if mco1.m > mco2.m:
        mco1, mco2 = mco2, mco1
    if m < mco1.m or m > mco2.m:
        raise ValueError(f"Internal error: measure {m} not in interval [{mco1.m}, {mco2.m}]")
    span = mco2.m - mco1.m
    r = (m - mco1.m) / span if span != 0 else 0.0
    return MeasuredVertex(
        mco1.x + r * (mco2.x - mco1.x),
        mco1.y + r * (mco2.y - mco1.y),
        mco1.z + r * (mco2.z - mco1.z),
        float(m),
    )


class MeasuredPath:
    """A single contiguous polyline with a measure on every vertex.

    Vertices are immutable; every mutating method replaces them and rebuilds
    the cached monotonicity flags before returning, so readers never observe a
    stale flag.
    """

    def __init__(self, vertices: Iterable[Any] = ()) -> None:
        self._vertices: list[MeasuredVertex] = [as_vertex(v) for v in vertices]
        self._monotone = True
        self._strict_monotone = True
        self._rebuild()

    @classmethod
    def _wrap(cls, vertices: list[MeasuredVertex]) -> "MeasuredPath":
        """Alias an existing vertex list without copying it."""
        path = cls.__new__(cls)
        path._vertices = vertices
        path._rebuild()
        return path

    def copy(self) -> "MeasuredPath":
        return MeasuredPath._wrap(list(self._vertices))

    def _rebuild(self) -> None:
        self._monotone, self._strict_monotone = compute_monotonicity(self.measures)

    # --------------- Accessors -----------------------------

    @property
    def vertices(self) -> Tuple[MeasuredVertex, ...]:
        return tuple(self._vertices)

    @property
    def measures(self) -> np.ndarray:
        return np.array([v.m for v in self._vertices], dtype=float)

    @property
    def is_empty(self) -> bool:
        return not self._vertices

    @property
    def num_points(self) -> int:
        return len(self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[MeasuredVertex]:
        return iter(tuple(self._vertices))

    def __getitem__(self, index: int) -> MeasuredVertex:
        return self._vertices[index]

    @property
    def length(self) -> float:
        return float(segment_lengths(self._vertices).sum())

    @property
    def m_length(self) -> float:
        """Absolute measure difference between the end vertices.

        NaN for an empty path or when either end has no measure; zero for a
        single vertex.
        """
        if not self._vertices:
            return NAN
        if len(self._vertices) == 1:
            return 0.0
        begin = self._vertices[0].m
        end = self._vertices[-1].m
        if math.isnan(begin) or math.isnan(end):
            return NAN
        return abs(end - begin)

    def is_monotone(self, strict: bool = False) -> bool:
        return self._strict_monotone if strict else self._monotone

    @property
    def measure_direction(self) -> MeasureDirection:
        if not self._monotone:
            return MeasureDirection.NON_MONOTONE
        return direction_of(self.measures, True)

    @property
    def min_m(self) -> float:
        if not self._vertices:
            return NAN
        measures = self.measures
        direction = self.measure_direction
        if direction is MeasureDirection.INCREASING:
            return float(measures[0])
        if direction in (MeasureDirection.DECREASING, MeasureDirection.CONSTANT):
            return float(measures[-1])
        valid = measures[~np.isnan(measures)]
        return float(valid.min()) if valid.size else NAN

    @property
    def max_m(self) -> float:
        if not self._vertices:
            return NAN
        measures = self.measures
        direction = self.measure_direction
        if direction is MeasureDirection.INCREASING:
            return float(measures[-1])
        if direction in (MeasureDirection.DECREASING, MeasureDirection.CONSTANT):
            return float(measures[0])
        valid = measures[~np.isnan(measures)]
        return float(valid.max()) if valid.size else NAN

    def get_measure_at_index(self, n: int) -> float:
        return self._vertices[n].m

    def get_ordinate(self, index: int, ordinate: int) -> float:
        return self._vertices[index].get_ordinate(ordinate)

    # --------------- Mutations -----------------------------

    def set_ordinate(self, index: int, ordinate: int, value: float) -> None:
        self._vertices[index] = self._vertices[index].with_ordinate(ordinate, value)
        self._rebuild()

    def set_measure_at(self, index: int, m: float) -> None:
        self.set_ordinate(index, M, m)

    def _assign_measures(self, measures: Sequence[float]) -> None:
        self._vertices = [v.with_measure(m) for v, m in zip(self._vertices, measures)]
        self._rebuild()

    def measure_on_length(self, keep_begin_measure: bool) -> None:
        """Assign every vertex its distance along the path.

        With ``keep_begin_measure`` the first vertex keeps its measure (unless
        it is NaN) and the distances are offset from it; otherwise the first
        vertex gets measure 0.
        """
        if not self._vertices:
            return
        first = self._vertices[0].m
        start = first if keep_begin_measure and not math.isnan(first) else 0.0
        self._assign_measures(start + cumulative_lengths(self._vertices))
        logger.debug("Measured %d vertices on length starting at %s", len(self._vertices), start)

    def interpolate(self, begin_measure: float, end_measure: float) -> None:
        """Assign measures proportionally to the distance along the path.

        The first vertex gets ``begin_measure`` and the last ``end_measure``.
        When the two compare equal every vertex gets ``begin_measure``.
        """
        if not self._vertices:
            return
        n = len(self._vertices)
        begin_measure = float(begin_measure)
        end_measure = float(end_measure)
        if approx_equals(begin_measure, end_measure):
            measures = np.full(n, begin_measure)
        else:
            cumulative = cumulative_lengths(self._vertices)
            total = cumulative[-1]
            if total > 0:
                measures = begin_measure + cumulative / total * (end_measure - begin_measure)
            else:
                # All vertices coincide; spread measures by vertex index.
                measures = np.linspace(begin_measure, end_measure, n)
            low, high = min(begin_measure, end_measure), max(begin_measure, end_measure)
            measures = np.clip(measures, low, high)
            measures[0] = begin_measure
            if n > 1:
                measures[-1] = end_measure
        self._assign_measures(measures)
        logger.debug("Interpolated measures %s..%s over %d vertices", begin_measure, end_measure, n)

    def reverse_measures(self) -> None:
        """Reverse the measures over the vertices without moving them."""
        if not self._vertices:
            return
        self._assign_measures(self.measures[::-1])

    def shift_measure(self, delta: float) -> None:
        """Add ``delta`` to every measure; the result may be negative."""
        if not self._vertices:
            return
        self._assign_measures(self.measures + delta)

    # --------------- Queries -----------------------------

    def _require_monotone(self, operation: str) -> None:
        if not self._monotone:
            logger.debug("%s called on a path with non-monotone measures", operation)
            raise NotMonotoneError()

    def get_coordinate_at_m(self, m: float) -> Optional[MeasuredVertex]:
        """Vertex on the path where the measure equals ``m``, or None.

        The position is interpolated linearly inside the first segment whose
        measure interval contains ``m``. On a segment with equal end measures
        its start position is returned.
        """
        self._require_monotone("get_coordinate_at_m")
        if not self._vertices:
            return None
        if m < self.min_m or m > self.max_m:
            return None
        if len(self._vertices) == 1:
            vertex = self._vertices[0]
            return vertex.with_measure(m) if vertex.m == m else None
        measures = self.measures
        for i in range(1, len(measures)):
            m0 = measures[i - 1]
            m1 = measures[i]
            if m0 <= m <= m1 or m1 <= m <= m0:
                p0 = self._vertices[i - 1]
                p1 = self._vertices[i]
                if m1 == m0:
                    return p0.with_measure(m)
                # r indicates how far in this segment the measure lies
                r = (m - m0) / (m1 - m0)
                return MeasuredVertex(
                    p0.x + r * (p1.x - p0.x),
                    p0.y + r * (p1.y - p0.y),
                    p0.z + r * (p1.z - p0.z),
                    float(m),
                )
        return None

    def get_coordinates_between(self, begin: float, end: float) -> list["MeasuredPath"]:
        """Sub-paths covering the closed measure interval between two measures.

        The bounds may be given in either order. Vertices inside the interval
        are kept and interpolated vertices are added where the interval ends
        inside a segment. The result follows the measure order of this path.
        """
        self._require_monotone("get_coordinates_between")
        if math.isnan(begin) or math.isnan(end):
            return []
        if begin > end:
            begin, end = end, begin
        if not self._overlaps(begin, end):
            return []
        first_index, last_index, collected = self._collect_between(begin, end)
        vertices = self._add_interpolated_end_points(begin, end, first_index, last_index, collected)
        return [MeasuredPath._wrap(vertices)]

    def _overlaps(self, from_m: float, to_m: float) -> bool:
        if not self._vertices:
            return False
        begin_m = self._vertices[0].m
        end_m = self._vertices[-1].m
        return not (from_m > max(begin_m, end_m) or to_m < min(begin_m, end_m))

    def _collect_between(self, from_m: float, to_m: float) -> Tuple[int, int, list[MeasuredVertex]]:
        """Copy the vertices with measures in [from_m, to_m].

        Returns the index of the first copied vertex (-1 when none) and the
        index of the last vertex before the walk leaves the interval.
        """
        increasing = self.measure_direction is MeasureDirection.INCREASING
        collected: list[MeasuredVertex] = []
        first_index = -1
        last_index = -1
        for i, vertex in enumerate(self._vertices):
            m = vertex.m
            if from_m <= m <= to_m:
                collected.append(vertex)
                if first_index == -1:
                    first_index = i
            if increasing:
                if m > to_m:
                    break
            elif m < from_m:
                break
            last_index = i
        return first_index, last_index, collected

    def _add_interpolated_end_points(
        self,
        from_m: float,
        to_m: float,
        first_index: int,
        last_index: int,
        collected: list[MeasuredVertex],
    ) -> list[MeasuredVertex]:
        vertices = self._vertices
        increasing = self.measure_direction is MeasureDirection.INCREASING
        if increasing:
            first_m, last_m = from_m, to_m
        else:
            first_m, last_m = to_m, from_m

        if first_index == -1:
            # The interval lies inside a single segment
            p0 = vertices[last_index]
            p1 = vertices[last_index + 1]
            return [_interpolate_vertex(p0, p1, first_m), _interpolate_vertex(p0, p1, last_m)]

        result = list(collected)
        head_m = vertices[first_index].m
        if first_index > 0 and ((increasing and head_m > from_m) or (not increasing and head_m < to_m)):
            result.insert(0, _interpolate_vertex(vertices[first_index - 1], vertices[first_index], first_m))
        tail_m = vertices[last_index].m
        if last_index < len(vertices) - 1 and ((increasing and tail_m < to_m) or (not increasing and tail_m > from_m)):
            result.append(_interpolate_vertex(vertices[last_index], vertices[last_index + 1], last_m))
        return result

    def get_closest_point(self, point: Any, tolerance: float) -> Optional[MeasuredVertex]:
        """Closest point on the path within ``tolerance`` of ``point``.

        The measure of the returned vertex is interpolated on its segment.
        Among equally close candidates the lowest measure wins. Returns None
        when no segment lies within ``tolerance``.
        """
        self._require_monotone("get_closest_point")
        target = as_vertex(point)
        best: Optional[MeasuredVertex] = None
        best_dist = math.inf
        for p0, p1 in _pairwise(self._vertices):
            factor = _projection_factor(p0, p1, target)
            cx = p0.x + factor * (p1.x - p0.x)
            cy = p0.y + factor * (p1.y - p0.y)
            d = math.hypot(cx - target.x, cy - target.y)
            if d <= tolerance and d <= best_dist:
                m = p0.m + factor * (p1.m - p0.m)
                if best is None or d < best_dist or m < best.m:
                    cz = p0.z + factor * (p1.z - p0.z)
                    best = MeasuredVertex(cx, cy, cz, m)
                    best_dist = d
        return best

    def get_measure_at(self, point: Any, tolerance: Optional[float] = None) -> float:
        """Measure of the closest point within ``tolerance``, NaN if none."""
        if tolerance is None:
            tolerance = get_config().locate.snap_tolerance
        closest = self.get_closest_point(point, tolerance)
        return closest.m if closest is not None else NAN

    # --------------- Union -----------------------------

    def _increasing_vertices(self) -> list[MeasuredVertex]:
        if self.measure_direction is MeasureDirection.DECREASING:
            return self._vertices[::-1]
        return list(self._vertices)

    def union_with(self, other: "MeasuredPath") -> "MeasuredPath":
        """Join two monotone paths that share an end vertex.

        Both paths are put in increasing measure order (by reversing their
        vertex order) and concatenated at the shared vertex, which appears
        once in the result.
        """
        if not self._monotone or not other.is_monotone():
            raise NotMonotoneError()
        if other.is_empty:
            return self.copy()
        if self.is_empty:
            return other.copy()

        this_vertices = self._increasing_vertices()
        other_vertices = other._increasing_vertices()
        if this_vertices[-1].equals_2d_with_measure(other_vertices[0]):
            merged = this_vertices + other_vertices[1:]
        elif other_vertices[-1].equals_2d_with_measure(this_vertices[0]):
            merged = other_vertices + this_vertices[1:]
        else:
            logger.debug(
                "Disjoint union: ends %s/%s do not meet %s/%s",
                this_vertices[0], this_vertices[-1], other_vertices[0], other_vertices[-1],
            )
            raise DisjointUnionError()

        result = MeasuredPath._wrap(merged)
        if not result.is_monotone():
            raise NotMonotoneError("Union of measured paths is not monotone")
        logger.debug("Union produced %d vertices", len(merged))
        return result

    def __repr__(self) -> str:
        return f"MeasuredPath({len(self._vertices)} vertices, {self.measure_direction.name})"

    def __str__(self) -> str:
        return "".join(f"{v.x} {v.y} {v.m}\n" for v in self._vertices)


def _pairwise(vertices: Sequence[MeasuredVertex]) -> Iterator[Tuple[MeasuredVertex, MeasuredVertex]]:
    for idx in range(len(vertices) - 1):
        yield vertices[idx], vertices[idx + 1]
