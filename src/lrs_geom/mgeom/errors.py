"""Exceptions raised by measured geometries."""
from __future__ import annotations


class MeasuredGeometryError(Exception):
    """Base class for precondition failures on measured geometries."""


class NotMonotoneError(MeasuredGeometryError):
    """An operation requires monotone measures but the geometry is not monotone."""

    def __init__(self, message: str = "Operation requires geometry with monotonic measures") -> None:
        super().__init__(message)


class DisjointUnionError(MeasuredGeometryError):
    """The paths of a union do not share an end vertex."""

    def __init__(self, message: str = "Cannot union measured paths that do not share an end vertex") -> None:
        super().__init__(message)


class InvalidOrdinateError(MeasuredGeometryError, IndexError):
    """An ordinate index outside X, Y, Z, M was requested."""

    def __init__(self, ordinate: int) -> None:
        super().__init__(f"Invalid ordinate index {ordinate!r}; expected one of 0 (X), 1 (Y), 2 (Z), 3 (M)")
        self.ordinate = ordinate
