"""Input and output helpers for measured geometries."""
