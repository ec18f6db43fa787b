"""Shared constants for geometry parsing."""

from __future__ import annotations

# GeoJSON type names (lower-cased) accepted by shapely.geometry.shape
GEOJSON_TYPES: dict[str, str] = {
    "point": "Point",
    "multipoint": "MultiPoint",
    "linestring": "LineString",
    "multilinestring": "MultiLineString",
    "polygon": "Polygon",
    "multipolygon": "MultiPolygon",
}

# Non-standard GeoJSON extensions
GEOJSON_ENVELOPE = "envelope"
GEOJSON_CIRCLE = "circle"

# Distance units for circle radii, in metres per unit
DISTANCE_UNITS_M: dict[str, float] = {
    "mm": 0.001,
    "cm": 0.01,
    "m": 1.0,
    "km": 1000.0,
    "in": 0.0254,
    "ft": 0.3048,
    "yd": 0.9144,
    "mi": 1609.344,
    "nmi": 1852.0,
}

DEFAULT_DISTANCE_UNIT = "m"
