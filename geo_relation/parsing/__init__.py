"""Geometry parsing.

Turns wire encodings (WKT text, GeoJSON objects, point value arrays)
into the engine's geometry model.

Public API:
    parse_geometry(value) -> Geometry
    parse_point_value(value, field) -> tuple[IndexedPoint, ...]
"""

from __future__ import annotations

from collections.abc import Mapping

from geo_relation.core.exceptions import GeometryParseError
from geo_relation.models.geometry import Geometry
from geo_relation.parsing._geojson import parse_distance, parse_geojson
from geo_relation.parsing._points import parse_point_value
from geo_relation.parsing._wkt import from_shapely, parse_wkt

__all__ = [
    "from_shapely",
    "parse_distance",
    "parse_geojson",
    "parse_geometry",
    "parse_point_value",
    "parse_wkt",
]


def parse_geometry(value: object) -> Geometry:
    """Parse a query shape from WKT text, GeoJSON text, or a GeoJSON mapping.

    A ``Geometry`` instance is returned unchanged.

    Raises:
        GeometryParseError: If the value is in no recognised encoding.
    """
    if isinstance(value, Geometry):
        return value
    if isinstance(value, Mapping):
        return parse_geojson(value)
    if isinstance(value, str):
        if value.lstrip().startswith("{"):
            return parse_geojson(value)
        return parse_wkt(value)
    msg = f"Cannot parse a geometry from {type(value).__name__}"
    raise GeometryParseError(msg)
