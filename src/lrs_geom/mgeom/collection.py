"""Measured path made of several disjoint segments."""
from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Iterator, Optional, Tuple

import numpy as np
from shapely.geometry import LineString, Point

from lrs_geom.core.config import get_config
from lrs_geom.mgeom.errors import NotMonotoneError
from lrs_geom.mgeom.path import (
    MeasureDirection,
    MeasuredPath,
    compute_monotonicity,
    direction_of,
)
from lrs_geom.mgeom.vertex import NAN, MeasuredVertex, as_vertex


logger = logging.getLogger(__name__)


class MeasuredPathCollection:
    """Ordered measured paths with an optional measure gap between them.

    Monotonicity is derived from the member paths on every read: the
    collection is monotone when the measures of its non-empty paths, taken
    in order, form one monotone sequence. That makes all paths share a
    direction (constant paths fit any direction) and keeps consecutive
    measure ranges from overlapping. Strict monotonicity also rules out a
    boundary measure shared by consecutive paths.
    """

    def __init__(self, paths: Iterable[MeasuredPath] = (), gap: float = 0.0) -> None:
        self._paths: list[MeasuredPath] = list(paths)
        self.gap = float(gap)

    def copy(self) -> "MeasuredPathCollection":
        return MeasuredPathCollection([p.copy() for p in self._paths], self.gap)

    @property
    def paths(self) -> Tuple[MeasuredPath, ...]:
        return tuple(self._paths)

    def append(self, path: MeasuredPath) -> None:
        self._paths.append(path)

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[MeasuredPath]:
        return iter(tuple(self._paths))

    def __getitem__(self, index: int) -> MeasuredPath:
        return self._paths[index]

    @property
    def is_empty(self) -> bool:
        return all(p.is_empty for p in self._paths)

    def _non_empty(self) -> list[MeasuredPath]:
        return [p for p in self._paths if not p.is_empty]

    def _chained_measures(self) -> np.ndarray:
        parts = [p.measures for p in self._non_empty()]
        if not parts:
            return np.zeros(0)
        return np.concatenate(parts)

    def is_monotone(self, strict: bool = False) -> bool:
        monotone, strict_monotone = compute_monotonicity(self._chained_measures())
        return strict_monotone if strict else monotone

    @property
    def measure_direction(self) -> MeasureDirection:
        measures = self._chained_measures()
        monotone, _ = compute_monotonicity(measures)
        return direction_of(measures, monotone)

    @property
    def min_m(self) -> float:
        values = [p.min_m for p in self._non_empty()]
        values = [v for v in values if not math.isnan(v)]
        return min(values) if values else NAN

    @property
    def max_m(self) -> float:
        values = [p.max_m for p in self._non_empty()]
        values = [v for v in values if not math.isnan(v)]
        return max(values) if values else NAN

    def _require_monotone(self, operation: str) -> None:
        if not self.is_monotone():
            logger.debug("%s called on a collection with non-monotone measures", operation)
            raise NotMonotoneError()

    def measure_on_length(self, keep_begin_measure: bool) -> None:
        """Measure every path on its length, chaining paths with ``gap``.

        The first path follows its own rule; each later path starts at the
        end measure of the previous one plus the gap.
        """
        previous_end: Optional[float] = None
        for path in self._non_empty():
            if previous_end is None:
                path.measure_on_length(keep_begin_measure)
            else:
                path.measure_on_length(False)
                path.shift_measure(previous_end + self.gap)
            previous_end = path.get_measure_at_index(len(path) - 1)
        logger.debug("Measured %d paths on length with gap %s", len(self._paths), self.gap)

    def shift_measure(self, delta: float) -> None:
        for path in self._paths:
            path.shift_measure(delta)

    def get_coordinate_at_m(self, m: float) -> Optional[MeasuredVertex]:
        self._require_monotone("get_coordinate_at_m")
        for path in self._paths:
            vertex = path.get_coordinate_at_m(m)
            if vertex is not None:
                return vertex
        return None

    def get_coordinates_between(self, begin: float, end: float) -> list[MeasuredPath]:
        self._require_monotone("get_coordinates_between")
        result: list[MeasuredPath] = []
        for path in self._paths:
            for sub_path in path.get_coordinates_between(begin, end):
                if not sub_path.is_empty:
                    result.append(sub_path)
        return result

    def get_closest_point(self, point: Any, tolerance: float) -> Optional[MeasuredVertex]:
        """Closest point over all paths within ``tolerance`` of ``point``.

        Ties between parts go to the point with the smaller measure, as they
        do within a single path.
        """
        self._require_monotone("get_closest_point")
        target = as_vertex(point)
        target_point = Point(target.x, target.y)
        best: Optional[MeasuredVertex] = None
        best_dist = math.inf
        for path in self._paths:
            if len(path) < 2:
                continue
            # skip paths that are out of reach of the point
            if LineString([(v.x, v.y) for v in path]).distance(target_point) > tolerance:
                continue
            candidate = path.get_closest_point(target, tolerance)
            if candidate is None:
                continue
            d = candidate.distance_2d(target)
            if d > tolerance or d > best_dist:
                continue
            # equally close parts resolve to the smaller measure
            if best is None or d < best_dist or candidate.m < best.m:
                best = candidate
                best_dist = d
        return best

    def get_measure_at(self, point: Any, tolerance: Optional[float] = None) -> float:
        if tolerance is None:
            tolerance = get_config().locate.snap_tolerance
        closest = self.get_closest_point(point, tolerance)
        return closest.m if closest is not None else NAN

    def __repr__(self) -> str:
        return f"MeasuredPathCollection({len(self._paths)} paths, gap={self.gap})"
