"""Measure based event location."""

from lrs_geom.locate.event_locator import point_at_measure, sub_path_between

__all__ = [
    "point_at_measure",
    "sub_path_between",
]
