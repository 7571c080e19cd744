"""Configuration and numeric helpers."""

from lrs_geom.core.approx import DEFAULT_PRECISION, approx_equals
from lrs_geom.core.config import LrsConfig, get_config, reload_config

__all__ = [
    "DEFAULT_PRECISION",
    "LrsConfig",
    "approx_equals",
    "get_config",
    "reload_config",
]
