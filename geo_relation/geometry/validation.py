"""Validation helpers for query and indexed shapes.

Responsibilities:
- Query-shape legality (Circle and bare LinearRing are rejected)
- Indexed-shape legality for points-only fields
- Coordinate bounds checking (WGS 84)
- Polygon validity checks with shapely
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from geo_relation.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    POINT_FIELD_TYPE,
)
from geo_relation.core.exceptions import (
    InvalidGeometry,
    UnsupportedGeometryType,
    UnsupportedIndexedShape,
)
from geo_relation.models.geometry import (
    Circle,
    Line,
    LinearRing,
    MultiLine,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Rectangle,
    ShapeType,
)
from geo_relation.models.relation import IndexedPoint

if TYPE_CHECKING:
    from collections.abc import Iterable

    from geo_relation.models.geometry import Coordinate, Geometry

logger = logging.getLogger("geo_relation.geometry.validation")


# ---------------------------------------------------------------------------
# Query side
# ---------------------------------------------------------------------------


def validate_for_query(geometry: Geometry, field: str = "") -> None:
    """Check that *geometry* may be used as a query shape.

    Raises:
        UnsupportedGeometryType: For a Circle (any relation) or a bare
            LinearRing.
        InvalidGeometry: If any coordinate is outside WGS 84 bounds.
    """
    match geometry:
        case Circle():
            msg = f"failed to create query: {ShapeType.CIRCLE} geometry is not supported"
            raise UnsupportedGeometryType(msg, field=field, shape_type=geometry.kind)
        case LinearRing():
            msg = f"Field [{field}] found an unsupported shape {geometry.kind}"
            raise UnsupportedGeometryType(msg, field=field, shape_type=geometry.kind)
        case Point() | MultiPoint() | Line() | MultiLine() | Polygon() | MultiPolygon():
            validate_coordinates(geometry.coordinates(), geometry.kind, field=field)
        case Rectangle():
            _validate_rectangle(geometry, field)
        case _:
            msg = f"Field [{field}] found an unsupported shape {type(geometry).__name__}"
            raise UnsupportedGeometryType(msg, field=field, shape_type=type(geometry).__name__)


def _validate_rectangle(rect: Rectangle, field: str) -> None:
    for lon in (rect.min_lon, rect.max_lon):
        if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
            msg = f"Rectangle longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}]"
            raise InvalidGeometry(msg, field=field, shape_type=rect.kind)
    for lat in (rect.min_lat, rect.max_lat):
        if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
            msg = f"Rectangle latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}]"
            raise InvalidGeometry(msg, field=field, shape_type=rect.kind)


# ---------------------------------------------------------------------------
# Indexed side
# ---------------------------------------------------------------------------


def validate_for_index(geometry: Geometry, field: str = "") -> tuple[IndexedPoint, ...]:
    """Convert a geometry offered to a points-only field into indexed points.

    A ``Point`` yields one value; a ``MultiPoint`` yields one value per
    member (a multi-valued field).

    Raises:
        UnsupportedIndexedShape: For any non-point kind (Line, MultiLine,
            Polygon, ...).
        InvalidGeometry: If a point is outside WGS 84 bounds.
    """
    match geometry:
        case Point():
            points = (geometry,)
        case MultiPoint():
            points = geometry.points
        case _:
            msg = (
                f"Field [{field}] of type [{POINT_FIELD_TYPE}] does not support "
                f"indexing shape {geometry.kind}"
            )
            raise UnsupportedIndexedShape(msg, field=field, shape_type=geometry.kind)

    indexed = []
    for point in points:
        try:
            indexed.append(IndexedPoint(point.lon, point.lat))
        except InvalidGeometry as exc:
            raise InvalidGeometry(exc.message, field=field, shape_type=geometry.kind) from exc
    return tuple(indexed)


# ---------------------------------------------------------------------------
# Coordinate validation
# ---------------------------------------------------------------------------


def validate_coordinates(coords: Iterable[Coordinate], kind: str, *, field: str = "") -> None:
    """Validate that all coordinates are within WGS 84 bounds.

    Raises:
        InvalidGeometry: If any coordinate is out of bounds.
    """
    for lon, lat in coords:
        if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
            msg = (
                f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}] "
                f"in {kind} for field [{field}]"
            )
            raise InvalidGeometry(msg, field=field, shape_type=kind)
        if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
            msg = (
                f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}] "
                f"in {kind} for field [{field}]"
            )
            raise InvalidGeometry(msg, field=field, shape_type=kind)


# ---------------------------------------------------------------------------
# Shapely polygon validation
# ---------------------------------------------------------------------------


def validate_polygon_rings(
    shell: tuple[Coordinate, ...],
    holes: tuple[tuple[Coordinate, ...], ...],
    *,
    field: str = "",
) -> None:
    """Validate a (possibly dateline-shifted) polygon using shapely.

    Raises:
        InvalidGeometry: If shapely reports the polygon invalid or empty.
    """
    from shapely.geometry import Polygon as ShapelyPolygon
    from shapely.validation import explain_validity

    try:
        poly = ShapelyPolygon(shell, holes)
    except Exception as exc:
        msg = f"Cannot build polygon for field [{field}]: {exc}"
        raise InvalidGeometry(msg, field=field, shape_type="Polygon") from exc

    if poly.is_empty or poly.area == 0:
        msg = f"Zero-area polygon for field [{field}]"
        raise InvalidGeometry(msg, field=field, shape_type="Polygon")

    if not poly.is_valid:
        reason = explain_validity(poly)
        logger.debug("Rejecting invalid polygon for field [%s]: %s", field, reason)
        msg = f"Invalid polygon for field [{field}]: {reason}"
        raise InvalidGeometry(msg, field=field, shape_type="Polygon")
