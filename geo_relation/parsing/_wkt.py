"""WKT parsing.

Standard WKT goes through ``shapely.wkt``; the ``BBOX`` / ``ENVELOPE``
and ``CIRCLE`` extensions are matched here because shapely does not
know them.
"""

from __future__ import annotations

import re

from geo_relation.core.exceptions import GeometryParseError
from geo_relation.models.geometry import (
    Circle,
    Geometry,
    Line,
    LinearRing,
    MultiLine,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Rectangle,
)

_BBOX_RE = re.compile(r"^\s*(?:BBOX|ENVELOPE)\s*\((?P<body>[^()]*)\)\s*$", re.IGNORECASE)
_CIRCLE_RE = re.compile(r"^\s*CIRCLE\s*\((?P<body>[^()]*)\)\s*$", re.IGNORECASE)


def parse_wkt(text: str) -> Geometry:
    """Parse WKT text into a geometry.

    ``BBOX(minLon, maxLon, maxLat, minLat)`` yields a ``Rectangle`` and
    ``CIRCLE(lon lat radius_m)`` a ``Circle``.

    Raises:
        GeometryParseError: If the text is not valid WKT.
    """
    match = _BBOX_RE.match(text)
    if match:
        min_lon, max_lon, max_lat, min_lat = _numbers(match["body"].split(","), 4, "BBOX")
        return Rectangle(min_lon, max_lon, max_lat, min_lat)

    match = _CIRCLE_RE.match(text)
    if match:
        lon, lat, radius = _numbers(match["body"].split(), 3, "CIRCLE")
        return Circle(lon, lat, radius)

    from shapely import wkt
    from shapely.errors import ShapelyError

    try:
        shape = wkt.loads(text)
    except (ShapelyError, TypeError, ValueError) as exc:
        msg = f"Invalid WKT {text!r}: {exc}"
        raise GeometryParseError(msg) from exc
    return from_shapely(shape)


def _numbers(tokens: list[str], expected: int, kind: str) -> list[float]:
    if len(tokens) != expected:
        msg = f"{kind} expects {expected} numbers, got {len(tokens)}"
        raise GeometryParseError(msg, shape_type=kind)
    try:
        return [float(t) for t in tokens]
    except ValueError as exc:
        msg = f"{kind} has a non-numeric value: {tokens}"
        raise GeometryParseError(msg, shape_type=kind) from exc


# ---------------------------------------------------------------------------
# Shapely conversion
# ---------------------------------------------------------------------------


def from_shapely(shape: object) -> Geometry:
    """Convert a shapely geometry to the engine's model, dropping any Z values.

    Raises:
        GeometryParseError: For empty shapes and unsupported kinds
            (e.g. ``GeometryCollection``).
    """
    geom_type = getattr(shape, "geom_type", type(shape).__name__)
    if getattr(shape, "is_empty", False):
        msg = f"Empty {geom_type} is not a valid shape"
        raise GeometryParseError(msg, shape_type=geom_type)

    match geom_type:
        case "Point":
            return Point(shape.x, shape.y)  # type: ignore[attr-defined]
        case "MultiPoint":
            return MultiPoint(Point(p.x, p.y) for p in shape.geoms)  # type: ignore[attr-defined]
        case "LineString":
            return Line(_xy(shape.coords))  # type: ignore[attr-defined]
        case "LinearRing":
            return LinearRing(_xy(shape.coords))  # type: ignore[attr-defined]
        case "MultiLineString":
            return MultiLine(Line(_xy(g.coords)) for g in shape.geoms)  # type: ignore[attr-defined]
        case "Polygon":
            return _polygon(shape)
        case "MultiPolygon":
            return MultiPolygon(_polygon(g) for g in shape.geoms)  # type: ignore[attr-defined]
    msg = f"Unsupported geometry type {geom_type}"
    raise GeometryParseError(msg, shape_type=geom_type)


def _xy(coords: object) -> list[tuple[float, float]]:
    return [(c[0], c[1]) for c in coords]  # type: ignore[attr-defined]


def _polygon(shape: object) -> Polygon:
    return Polygon(
        LinearRing(_xy(shape.exterior.coords)),  # type: ignore[attr-defined]
        tuple(LinearRing(_xy(h.coords)) for h in shape.interiors),  # type: ignore[attr-defined]
    )
