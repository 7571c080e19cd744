"""Tolerance based floating point comparison for measures and ordinates."""
from __future__ import annotations

import math
from typing import Optional

import numpy as np

from lrs_geom.core.config import get_config


MACHINE_EPSILON = float(np.finfo(np.float64).eps)
DEFAULT_PRECISION = math.sqrt(MACHINE_EPSILON)


def resolve_precision(precision: Optional[float] = None) -> float:
    """Return ``precision`` or the configured default when it is None."""
    if precision is not None:
        return precision
    configured = get_config().measures.precision
    if configured is None:
        return DEFAULT_PRECISION
    return float(configured)


def approx_equals(a: float, b: float, precision: Optional[float] = None) -> bool:
    """Compare two floats using a relative precision.

    Values are equal when both are within ``precision`` of zero, or when their
    difference is below ``precision`` times the larger magnitude. Two NaNs are
    reported equal.
    """
    precision = resolve_precision(precision)
    norm = max(abs(a), abs(b))
    if norm < precision or abs(a - b) < precision * norm:
        return True
    return math.isnan(a) and math.isnan(b)
