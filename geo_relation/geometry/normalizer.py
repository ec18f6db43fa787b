"""Antimeridian normalization of query geometries.

Decomposes a geometry that crosses the ±180° meridian into components
that do not, and fixes ring winding to the canonical convention (shells
counter-clockwise, holes clockwise) so that point-membership tests can
assume a single winding.

Per base kind:
- **Point / MultiPoint**: pass through, one component per point.
- **Rectangle**: ``min_lon > max_lon`` splits into ``[min_lon, 180]`` and
  ``[-180, max_lon]``.
- **Line / MultiLine**: an edge whose longitude delta exceeds 180° is cut
  at an interpolated ±180° vertex; the remainder restarts at ∓180°.
  An edge lying along the antimeridian is kept at both +180° and -180°.
- **Polygon / MultiPolygon**: a shell wound against the requested
  orientation whose longitude range exceeds 180° encloses the
  antimeridian.  Its western-hemisphere longitudes are shifted by +360,
  the shifted polygon is clipped against the ``[-180, 180]`` and
  ``[180, 540]`` slabs with shapely, and the eastern piece is shifted back.
  Holes travel with the clip, so each lands in the piece that contains it.

All helpers are pure functions over coordinate tuples; input geometries
are never mutated.
"""

from __future__ import annotations

import logging
from itertools import pairwise
from typing import TYPE_CHECKING

from geo_relation.core.constants import DATELINE_DELTA, LONGITUDE_SPAN, MAX_LONGITUDE, MIN_LONGITUDE
from geo_relation.core.exceptions import InvalidGeometry, UnsupportedGeometryType
from geo_relation.geometry.validation import validate_polygon_rings
from geo_relation.models.geometry import (
    Circle,
    Coordinate,
    Line,
    LinearRing,
    MultiLine,
    MultiPoint,
    MultiPolygon,
    NormalizedComponent,
    NormalizedGeometry,
    Point,
    Polygon,
    Rectangle,
    ShapeType,
)
from geo_relation.models.relation import Orientation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from geo_relation.models.geometry import Component, Geometry

logger = logging.getLogger("geo_relation.geometry.normalizer")

Ring = tuple[Coordinate, ...]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(
    geometry: Geometry,
    orientation: Orientation = Orientation.CCW,
    *,
    field: str = "",
) -> NormalizedGeometry:
    """Decompose *geometry* into antimeridian-safe, canonically wound components.

    Args:
        geometry: A query geometry (already checked by ``validate_for_query``).
        orientation: Winding convention used to read polygon shells.
        field: Field name, carried into error context.

    Returns:
        A ``NormalizedGeometry`` whose components never cross ±180°.

    Raises:
        UnsupportedGeometryType: For a Circle or a bare LinearRing.
        InvalidGeometry: For degenerate rings or failed splits.
    """
    components: list[Component]
    match geometry:
        case Point():
            components = [geometry]
        case MultiPoint():
            components = list(geometry.points)
        case Rectangle():
            components = split_rectangle(geometry)
        case Line():
            components = [Line(part) for part in split_line(geometry.coords)]
        case MultiLine():
            components = [Line(part) for line in geometry.lines for part in split_line(line.coords)]
        case Polygon():
            components = _normalize_polygon(geometry, orientation, field)
        case MultiPolygon():
            components = [
                piece
                for polygon in geometry.polygons
                for piece in _normalize_polygon(polygon, orientation, field)
            ]
        case Circle():
            msg = f"failed to create query: {ShapeType.CIRCLE} geometry is not supported"
            raise UnsupportedGeometryType(msg, field=field, shape_type=geometry.kind)
        case LinearRing():
            msg = f"Field [{field}] found an unsupported shape {geometry.kind}"
            raise UnsupportedGeometryType(msg, field=field, shape_type=geometry.kind)
        case _:
            msg = f"Cannot normalize {type(geometry).__name__}"
            raise UnsupportedGeometryType(msg, field=field, shape_type=type(geometry).__name__)

    if needs_normalization(geometry, orientation):
        logger.debug(
            "Normalized %s for field [%s] into %d component(s)",
            geometry.kind,
            field,
            len(components),
        )
    return NormalizedGeometry(
        source_type=geometry.shape_type,
        components=tuple(NormalizedComponent.of(c) for c in components),
    )


def needs_normalization(geometry: Geometry, orientation: Orientation = Orientation.CCW) -> bool:
    """Return ``True`` when ``normalize`` would split or shift *geometry*.

    Re-orientation alone does not count.

    Raises:
        UnsupportedGeometryType: For a Circle.
    """
    match geometry:
        case Point() | MultiPoint():
            return False
        case Rectangle():
            return geometry.crosses_dateline
        case Line() | LinearRing():
            return any(crosses_dateline(a, b) for a, b in pairwise(geometry.coords))
        case MultiLine():
            return any(needs_normalization(line, orientation) for line in geometry.lines)
        case Polygon():
            return ring_spans_dateline(geometry.shell.coords, orientation)
        case MultiPolygon():
            return any(needs_normalization(p, orientation) for p in geometry.polygons)
        case _:
            msg = f"failed to create query: {geometry.shape_type} geometry is not supported"
            raise UnsupportedGeometryType(msg, shape_type=geometry.kind)


# ---------------------------------------------------------------------------
# Ring helpers
# ---------------------------------------------------------------------------


def signed_area(ring: Sequence[Coordinate]) -> float:
    """Shoelace signed area of a closed ring; positive when counter-clockwise."""
    total = 0.0
    for (x1, y1), (x2, y2) in pairwise(ring):
        total += x1 * y2 - x2 * y1
    return total / 2.0


def is_ccw(ring: Sequence[Coordinate]) -> bool:
    return signed_area(ring) > 0


def orient_ring(ring: Ring, *, ccw: bool) -> Ring:
    """Return *ring* wound counter-clockwise (``ccw=True``) or clockwise."""
    if is_ccw(ring) == ccw:
        return ring
    return tuple(reversed(ring))


def ring_spans_dateline(shell: Sequence[Coordinate], orientation: Orientation) -> bool:
    """A shell encloses the antimeridian when wound against *orientation* and wider than 180°."""
    lons = [lon for lon, _ in shell]
    if max(lons) - min(lons) <= DATELINE_DELTA:
        return False
    return is_ccw(shell) != orientation.is_ccw


def crosses_dateline(a: Coordinate, b: Coordinate) -> bool:
    return abs(b[0] - a[0]) > DATELINE_DELTA


# ---------------------------------------------------------------------------
# Rectangles and lines
# ---------------------------------------------------------------------------


def split_rectangle(rect: Rectangle) -> list[Rectangle]:
    """Split a dateline-spanning rectangle into its eastern and western halves."""
    if not rect.crosses_dateline:
        return [rect]
    return [
        Rectangle(rect.min_lon, MAX_LONGITUDE, rect.max_lat, rect.min_lat),
        Rectangle(MIN_LONGITUDE, rect.max_lon, rect.max_lat, rect.min_lat),
    ]


def split_line(coords: Sequence[Coordinate]) -> list[Ring]:
    """Cut a vertex sequence wherever an edge crosses the antimeridian.

    The crossing latitude is linearly interpolated on the unwrapped edge.
    An edge running from +180 to -180 (or back) lies along the meridian
    and is kept on both sides of it.
    Each returned part has at least two vertices.
    """
    parts: list[Ring] = []
    current: list[Coordinate] = [coords[0]]
    for (lon1, lat1), (lon2, lat2) in pairwise(coords):
        delta = lon2 - lon1
        if abs(delta) == LONGITUDE_SPAN:
            # Both ends on the antimeridian: the edge runs along it, so keep
            # one copy at each of +180 and -180.
            current.append((lon1, lat2))
            parts.append(tuple(current))
            current = [(lon2, lat1)]
        elif abs(delta) > DATELINE_DELTA:
            # Positive delta means the short way round runs west through -180.
            if delta > 0:
                meridian, unwrapped = MIN_LONGITUDE, lon2 - LONGITUDE_SPAN
            else:
                meridian, unwrapped = MAX_LONGITUDE, lon2 + LONGITUDE_SPAN
            t = (meridian - lon1) / (unwrapped - lon1)
            lat = lat1 + t * (lat2 - lat1)
            current.append((meridian, lat))
            parts.append(tuple(current))
            current = [(-meridian, lat)]
        current.append((lon2, lat2))
    parts.append(tuple(current))
    return parts


# ---------------------------------------------------------------------------
# Polygons
# ---------------------------------------------------------------------------


def _normalize_polygon(polygon: Polygon, orientation: Orientation, field: str) -> list[Polygon]:
    shell = polygon.shell.coords
    holes = tuple(h.coords for h in polygon.holes)

    if not ring_spans_dateline(shell, orientation):
        validate_polygon_rings(shell, holes, field=field)
        return [_canonical_polygon(shell, holes, field)]

    shifted_shell = _shift_west(shell)
    shifted_holes = tuple(_shift_west(h) for h in holes)
    validate_polygon_rings(shifted_shell, shifted_holes, field=field)

    # Shifted western vertices map back to the caller's exact values.
    originals: dict[Coordinate, Coordinate] = {}
    for source, shifted in zip((shell, *holes), (shifted_shell, *shifted_holes), strict=True):
        originals.update((s, o) for s, o in zip(shifted, source, strict=True) if o[0] < 0)

    return _split_shifted_polygon(shifted_shell, shifted_holes, originals, field)


def _shift_west(ring: Ring) -> Ring:
    return tuple((lon + LONGITUDE_SPAN if lon < 0 else lon, lat) for lon, lat in ring)


def _split_shifted_polygon(
    shell: Ring,
    holes: tuple[Ring, ...],
    originals: dict[Coordinate, Coordinate],
    field: str,
) -> list[Polygon]:
    """Clip a polygon in [0, 360] longitude space into the two hemispheres."""
    from shapely.geometry import Polygon as ShapelyPolygon
    from shapely.geometry import box

    def west(x: float, y: float) -> Coordinate:
        return (x, y)

    def east(x: float, y: float) -> Coordinate:
        if x == MAX_LONGITUDE:
            return (MIN_LONGITUDE, y)
        return originals.get((x, y), (x - LONGITUDE_SPAN, y))

    shifted = ShapelyPolygon(shell, holes)
    slabs = (
        (box(MIN_LONGITUDE, -90.0, MAX_LONGITUDE, 90.0), west),
        (box(MAX_LONGITUDE, -90.0, MAX_LONGITUDE + LONGITUDE_SPAN, 90.0), east),
    )

    pieces: list[Polygon] = []
    for slab, restore in slabs:
        clipped = shifted.intersection(slab)
        for part in getattr(clipped, "geoms", (clipped,)):
            if part.geom_type != "Polygon" or part.is_empty or part.area == 0:
                continue
            piece_shell = tuple(restore(x, y) for x, y in part.exterior.coords)
            piece_holes = tuple(
                tuple(restore(x, y) for x, y in hole.coords) for hole in part.interiors
            )
            pieces.append(_canonical_polygon(piece_shell, piece_holes, field))

    logger.debug(
        "Polygon for field [%s] encloses the antimeridian; split into %d piece(s)",
        field,
        len(pieces),
    )
    if not pieces:
        msg = f"Antimeridian split of polygon for field [{field}] produced no area"
        raise InvalidGeometry(msg, field=field, shape_type="Polygon")
    return pieces


def _canonical_polygon(shell: Ring, holes: tuple[Ring, ...], field: str) -> Polygon:
    try:
        return Polygon(
            LinearRing(orient_ring(shell, ccw=True)),
            tuple(LinearRing(orient_ring(h, ccw=False)) for h in holes),
        )
    except InvalidGeometry as exc:
        raise InvalidGeometry(exc.message, field=field, shape_type="Polygon") from exc
