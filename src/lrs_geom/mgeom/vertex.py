"""Vertices carrying x, y, z and a linear referencing measure."""
from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Any, Sequence

from lrs_geom.core.approx import approx_equals
from lrs_geom.mgeom.errors import InvalidOrdinateError


X = 0
Y = 1
Z = 2
M = 3

NAN = float("nan")


@dataclass(frozen=True, slots=True, eq=False)
class MeasuredVertex:
    """A 4D vertex: x, y, z position plus a measure m.

    ``z`` and ``m`` are NaN when unused. The measure is independent of z, so a
    2D vertex can carry a measure.

    Default equality is 2D positional equality; use ``equals_3d`` or the
    ``*_with_measure`` variants for stricter comparisons.
    """

    x: float
    y: float
    z: float = NAN
    m: float = NAN

    @classmethod
    def create_2d(cls, x: float, y: float) -> "MeasuredVertex":
        return cls(float(x), float(y))

    @classmethod
    def create_2d_with_measure(cls, x: float, y: float, m: float) -> "MeasuredVertex":
        return cls(float(x), float(y), NAN, float(m))

    @classmethod
    def create_3d(cls, x: float, y: float, z: float) -> "MeasuredVertex":
        return cls(float(x), float(y), float(z))

    @classmethod
    def create_3d_with_measure(cls, x: float, y: float, z: float, m: float) -> "MeasuredVertex":
        return cls(float(x), float(y), float(z), float(m))

    @classmethod
    def from_tuple(cls, values: Sequence[float]) -> "MeasuredVertex":
        """Build a vertex from ``(x, y)``, ``(x, y, m)`` or ``(x, y, z, m)``.

        Three values follow the XYM convention of measured line strings.
        """
        n = len(values)
        if n == 2:
            return cls.create_2d(values[0], values[1])
        if n == 3:
            return cls.create_2d_with_measure(values[0], values[1], values[2])
        if n == 4:
            return cls.create_3d_with_measure(values[0], values[1], values[2], values[3])
        raise ValueError(f"Expected 2, 3 or 4 values for a vertex, got {n}")

    @property
    def has_z(self) -> bool:
        return not math.isnan(self.z)

    @property
    def has_measure(self) -> bool:
        return not math.isnan(self.m)

    def with_measure(self, m: float) -> "MeasuredVertex":
        return replace(self, m=float(m))

    def get_ordinate(self, ordinate: int) -> float:
        if ordinate == X:
            return self.x
        if ordinate == Y:
            return self.y
        if ordinate == Z:
            return self.z
        if ordinate == M:
            return self.m
        raise InvalidOrdinateError(ordinate)

    def with_ordinate(self, ordinate: int, value: float) -> "MeasuredVertex":
        if ordinate == X:
            return replace(self, x=float(value))
        if ordinate == Y:
            return replace(self, y=float(value))
        if ordinate == Z:
            return replace(self, z=float(value))
        if ordinate == M:
            return replace(self, m=float(value))
        raise InvalidOrdinateError(ordinate)

    def equals_2d(self, other: Any) -> bool:
        return self.x == other.x and self.y == other.y

    def equals_3d(self, other: Any) -> bool:
        other_z = getattr(other, "z", NAN)
        same_z = self.z == other_z or (math.isnan(self.z) and math.isnan(other_z))
        return self.equals_2d(other) and same_z

    def equals_2d_with_measure(self, other: "MeasuredVertex") -> bool:
        return self.equals_2d(other) and approx_equals(self.m, other.m)

    def equals_3d_with_measure(self, other: "MeasuredVertex") -> bool:
        return self.equals_3d(other) and approx_equals(self.m, other.m)

    def distance(self, other: Any) -> float:
        """Euclidean distance; z is included when both vertices carry it."""
        dx = self.x - other.x
        dy = self.y - other.y
        other_z = getattr(other, "z", NAN)
        if math.isnan(self.z) or math.isnan(other_z):
            return math.hypot(dx, dy)
        return math.sqrt(dx * dx + dy * dy + (self.z - other_z) ** 2)

    def distance_2d(self, other: Any) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MeasuredVertex):
            return NotImplemented
        return self.equals_2d(other)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x},{self.y},{self.z}, m={self.m})"


def as_vertex(value: Any) -> MeasuredVertex:
    """Coerce a vertex, a shapely point or a coordinate tuple into a MeasuredVertex."""
    if isinstance(value, MeasuredVertex):
        return value
    if hasattr(value, "x") and hasattr(value, "y"):
        z = value.z if getattr(value, "has_z", False) else NAN
        if hasattr(value, "has_m"):
            m = value.m if value.has_m else NAN
        else:
            m = getattr(value, "m", NAN)
        return MeasuredVertex(float(value.x), float(value.y), float(z), float(m))
    return MeasuredVertex.from_tuple(tuple(value))
