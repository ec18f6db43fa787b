"""GeoJSON parsing.

Standard types go through ``shapely.geometry.shape``.  Two non-standard
types are handled here:

- ``envelope``: ``{"type": "envelope", "coordinates": [[minLon, maxLat], [maxLon, minLat]]}``
- ``circle``: ``{"type": "circle", "coordinates": [lon, lat], "radius": "100m"}``

Type names are matched case-insensitively.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping

from geo_relation.core.exceptions import GeometryParseError
from geo_relation.models.geometry import Circle, Geometry, Rectangle
from geo_relation.parsing._constants import (
    DEFAULT_DISTANCE_UNIT,
    DISTANCE_UNITS_M,
    GEOJSON_CIRCLE,
    GEOJSON_ENVELOPE,
    GEOJSON_TYPES,
)
from geo_relation.parsing._wkt import from_shapely

_DISTANCE_RE = re.compile(r"^\s*(?P<value>[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?)\s*(?P<unit>[a-zA-Z]*)\s*$")


def parse_geojson(data: Mapping[str, object] | str) -> Geometry:
    """Parse a GeoJSON geometry object (or its JSON text).

    Raises:
        GeometryParseError: On malformed JSON, an unknown ``type``, or
            coordinates shapely cannot build a geometry from.
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            msg = f"Invalid GeoJSON text: {exc}"
            raise GeometryParseError(msg) from exc
    if not isinstance(data, Mapping):
        msg = f"GeoJSON geometry must be an object, got {type(data).__name__}"
        raise GeometryParseError(msg)

    raw_type = data.get("type")
    if not isinstance(raw_type, str):
        msg = "GeoJSON geometry has no [type]"
        raise GeometryParseError(msg)
    geo_type = raw_type.lower()

    if geo_type == GEOJSON_ENVELOPE:
        return _envelope(data.get("coordinates"))
    if geo_type == GEOJSON_CIRCLE:
        return _circle(data.get("coordinates"), data.get("radius"))
    if geo_type not in GEOJSON_TYPES:
        msg = f"Unknown GeoJSON geometry type [{raw_type}]"
        raise GeometryParseError(msg, shape_type=raw_type)

    from shapely.geometry import shape

    try:
        geometry = shape({"type": GEOJSON_TYPES[geo_type], "coordinates": data.get("coordinates")})
    except Exception as exc:
        # shapely raises a mix of TypeError, ValueError, IndexError and
        # GEOSException for bad coordinate arrays
        msg = f"Invalid GeoJSON {raw_type} coordinates: {exc}"
        raise GeometryParseError(msg, shape_type=raw_type) from exc
    return from_shapely(geometry)


def _envelope(coordinates: object) -> Rectangle:
    try:
        (min_lon, max_lat), (max_lon, min_lat) = coordinates  # type: ignore[misc]
        return Rectangle(float(min_lon), float(max_lon), float(max_lat), float(min_lat))
    except (TypeError, ValueError) as exc:
        msg = f"envelope expects [[minLon, maxLat], [maxLon, minLat]], got {coordinates!r}"
        raise GeometryParseError(msg, shape_type="Rectangle") from exc


def _circle(coordinates: object, radius: object) -> Circle:
    try:
        lon, lat = coordinates  # type: ignore[misc]
        center = (float(lon), float(lat))
    except (TypeError, ValueError) as exc:
        msg = f"circle expects [lon, lat] coordinates, got {coordinates!r}"
        raise GeometryParseError(msg, shape_type="Circle") from exc
    return Circle(center[0], center[1], parse_distance(radius))


def parse_distance(value: object) -> float:
    """Convert a distance such as ``100``, ``"250m"`` or ``"1.5km"`` to metres.

    Raises:
        GeometryParseError: For an unknown unit or a non-numeric value.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        msg = f"Distance must be a number or string, got {value!r}"
        raise GeometryParseError(msg, shape_type="Circle")
    match = _DISTANCE_RE.match(value)
    if not match:
        msg = f"Invalid distance {value!r}"
        raise GeometryParseError(msg, shape_type="Circle")
    unit = match["unit"].lower() or DEFAULT_DISTANCE_UNIT
    if unit not in DISTANCE_UNITS_M:
        msg = f"Unknown distance unit [{match['unit']}] in {value!r}"
        raise GeometryParseError(msg, shape_type="Circle")
    return float(match["value"]) * DISTANCE_UNITS_M[unit]
