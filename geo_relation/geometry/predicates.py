"""Point-versus-component location tests.

Classifies an indexed point against one antimeridian-safe component as
``DISJOINT``, ``ON_BOUNDARY`` or ``INSIDE``.  Components never cross the
dateline, so every test here is planar.

Boundary membership is exact coordinate match by default.  A non-zero
``tolerance`` (degrees) widens edges and vertices into bands of that
half-width; it is configured through ``RelationConfig.boundary_tolerance``.
"""

from __future__ import annotations

import enum
import math
from itertools import pairwise
from typing import TYPE_CHECKING

from geo_relation.models.geometry import Line, Point, Polygon, Rectangle

if TYPE_CHECKING:
    from collections.abc import Sequence

    from geo_relation.models.geometry import Coordinate, NormalizedComponent


class PointLocation(enum.Enum):
    """Where a point lies relative to a component."""

    DISJOINT = "disjoint"
    ON_BOUNDARY = "on_boundary"
    INSIDE = "inside"

    @property
    def intersects(self) -> bool:
        return self is not PointLocation.DISJOINT


def point_relates_to_component(
    point: Coordinate,
    component: NormalizedComponent,
    tolerance: float = 0.0,
) -> PointLocation:
    """Locate *point* relative to one normalized component.

    Args:
        point: ``(lon, lat)`` of the indexed point.
        component: An antimeridian-safe component with its bounding box.
        tolerance: Boundary half-width in degrees (``0.0`` = exact).

    Returns:
        ``INSIDE`` only for areal components (polygons, rectangles);
        lines and points yield ``ON_BOUNDARY`` or ``DISJOINT``.
    """
    lon, lat = point
    if not component.bbox.contains(lon, lat, tolerance):
        return PointLocation.DISJOINT

    match component.geometry:
        case Rectangle() as rect:
            return _locate_in_rectangle(lon, lat, rect, tolerance)
        case Polygon() as polygon:
            return _locate_in_polygon(lon, lat, polygon, tolerance)
        case Line() as line:
            if _on_path(lon, lat, line.coords, tolerance):
                return PointLocation.ON_BOUNDARY
            return PointLocation.DISJOINT
        case Point() as other:
            if coincident(point, other.coordinate, tolerance):
                return PointLocation.ON_BOUNDARY
            return PointLocation.DISJOINT
    msg = f"Unknown component {type(component.geometry).__name__}"
    raise TypeError(msg)


def coincident(a: Coordinate, b: Coordinate, tolerance: float = 0.0) -> bool:
    """Whether two coordinates match (exactly, or within *tolerance* on each axis)."""
    if tolerance == 0.0:
        return a == b
    return abs(a[0] - b[0]) <= tolerance and abs(a[1] - b[1]) <= tolerance


# ---------------------------------------------------------------------------
# Rectangles
# ---------------------------------------------------------------------------


def _locate_in_rectangle(lon: float, lat: float, rect: Rectangle, tolerance: float) -> PointLocation:
    on_edge = (
        abs(lon - rect.min_lon) <= tolerance
        or abs(lon - rect.max_lon) <= tolerance
        or abs(lat - rect.min_lat) <= tolerance
        or abs(lat - rect.max_lat) <= tolerance
    )
    return PointLocation.ON_BOUNDARY if on_edge else PointLocation.INSIDE


# ---------------------------------------------------------------------------
# Polygons
# ---------------------------------------------------------------------------


def _locate_in_polygon(lon: float, lat: float, polygon: Polygon, tolerance: float) -> PointLocation:
    rings = (polygon.shell.coords, *(h.coords for h in polygon.holes))
    if any(_on_path(lon, lat, ring, tolerance) for ring in rings):
        return PointLocation.ON_BOUNDARY
    if not point_in_ring(lon, lat, polygon.shell.coords):
        return PointLocation.DISJOINT
    for hole in polygon.holes:
        if point_in_ring(lon, lat, hole.coords):
            return PointLocation.DISJOINT
    return PointLocation.INSIDE


def point_in_ring(lon: float, lat: float, ring: Sequence[Coordinate]) -> bool:
    """Crossing-number test for a closed ring.

    Points on the boundary give an unspecified answer; callers test the
    boundary first.
    """
    inside = False
    for (x1, y1), (x2, y2) in pairwise(ring):
        if (y1 > lat) != (y2 > lat):
            x_at_lat = x1 + (lat - y1) * (x2 - x1) / (y2 - y1)
            if lon < x_at_lat:
                inside = not inside
    return inside


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


def _on_path(lon: float, lat: float, coords: Sequence[Coordinate], tolerance: float) -> bool:
    return any(on_segment(lon, lat, a, b, tolerance) for a, b in pairwise(coords))


def on_segment(
    lon: float,
    lat: float,
    a: Coordinate,
    b: Coordinate,
    tolerance: float = 0.0,
) -> bool:
    """Whether ``(lon, lat)`` lies on the segment ``a``-``b``.

    Exact mode requires a zero cross product and a position within the
    segment's extent.  With a tolerance, the perpendicular distance to the
    segment must not exceed it.
    """
    (x1, y1), (x2, y2) = a, b
    if not (
        min(x1, x2) - tolerance <= lon <= max(x1, x2) + tolerance
        and min(y1, y2) - tolerance <= lat <= max(y1, y2) + tolerance
    ):
        return False

    cross = (x2 - x1) * (lat - y1) - (y2 - y1) * (lon - x1)
    if tolerance == 0.0:
        return cross == 0.0

    length = math.hypot(x2 - x1, y2 - y1)
    if length == 0.0:
        return math.hypot(lon - x1, lat - y1) <= tolerance
    return abs(cross) / length <= tolerance
