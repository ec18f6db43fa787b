"""Shared constants for coordinate bounds and indexed-shape defaults.

Centralises coordinate bounds, default indexed-shape locations and the
field-type label used in error messages.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# WGS 84 coordinate bounds
# ---------------------------------------------------------------------------

MIN_LONGITUDE: float = -180.0
MAX_LONGITUDE: float = 180.0
MIN_LATITUDE: float = -90.0
MAX_LATITUDE: float = 90.0

#: Full longitude turn, used when shifting coordinates across the antimeridian.
LONGITUDE_SPAN: float = 360.0

#: Consecutive vertices further apart than this cross the antimeridian.
DATELINE_DELTA: float = 180.0

# ---------------------------------------------------------------------------
# Polygon structure
# ---------------------------------------------------------------------------

#: Minimum vertices for a closed ring (3 distinct + closing = 4).
MIN_RING_VERTICES: int = 4

#: Minimum distinct vertices for a ring to enclose any area.
MIN_DISTINCT_RING_VERTICES: int = 3

#: Minimum vertices for a line.
MIN_LINE_VERTICES: int = 2

# ---------------------------------------------------------------------------
# Indexed shapes
# ---------------------------------------------------------------------------

DEFAULT_SHAPE_INDEX: str = "shapes"
"""Default index holding pre-indexed query shapes."""

DEFAULT_SHAPE_PATH: str = "shape"
"""Default field path of a pre-indexed query shape."""

POINT_FIELD_TYPE: str = "geo_point"
"""Field type label for points-only fields (used in error messages)."""
