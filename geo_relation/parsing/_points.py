"""Indexed point value parsing.

A points-only field accepts the usual point encodings:

- ``[lon, lat]`` array (GeoJSON order)
- ``{"lat": .., "lon": ..}`` object
- ``"lat,lon"`` string (note: latitude first)
- WKT ``POINT`` / ``MULTIPOINT`` text
- GeoJSON ``Point`` / ``MultiPoint`` objects
- a list of any of the above (multi-valued field)
- ``None`` (no value)

Any other shape kind is rejected with ``UnsupportedIndexedShape``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from geo_relation.core.exceptions import GeometryParseError
from geo_relation.geometry.validation import validate_for_index
from geo_relation.models.geometry import Geometry
from geo_relation.models.relation import IndexedPoint
from geo_relation.parsing._geojson import parse_geojson
from geo_relation.parsing._wkt import parse_wkt

_LAT_LON_RE = re.compile(r"^\s*(?P<lat>[-+]?\d*\.?\d+)\s*,\s*(?P<lon>[-+]?\d*\.?\d+)\s*$")


def parse_point_value(value: object, field: str = "") -> tuple[IndexedPoint, ...]:
    """Turn one field value into the document's indexed points.

    Raises:
        GeometryParseError: If the value is in no recognised encoding.
        UnsupportedIndexedShape: If it encodes a non-point shape.
        InvalidGeometry: If a point is outside WGS 84 bounds.
    """
    if value is None:
        return ()
    if isinstance(value, IndexedPoint):
        return (value,)
    if isinstance(value, Geometry):
        return validate_for_index(value, field)
    if isinstance(value, str):
        return _parse_text(value, field)
    if isinstance(value, Mapping):
        return _parse_object(value, field)
    if isinstance(value, Sequence):
        if _is_lon_lat(value):
            return (IndexedPoint(float(value[0]), float(value[1])),)
        points: list[IndexedPoint] = []
        for item in value:
            points.extend(parse_point_value(item, field))
        return tuple(points)
    msg = f"Field [{field}] cannot parse point value {value!r}"
    raise GeometryParseError(msg, field=field)


def _parse_text(text: str, field: str) -> tuple[IndexedPoint, ...]:
    match = _LAT_LON_RE.match(text)
    if match:
        return (IndexedPoint(float(match["lon"]), float(match["lat"])),)
    if text.lstrip().startswith("{"):
        return validate_for_index(parse_geojson(text), field)
    return validate_for_index(parse_wkt(text), field)


def _parse_object(data: Mapping[str, object], field: str) -> tuple[IndexedPoint, ...]:
    if "lat" in data and "lon" in data:
        try:
            return (IndexedPoint(float(data["lon"]), float(data["lat"])),)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            msg = f"Field [{field}] has a non-numeric lat/lon: {dict(data)!r}"
            raise GeometryParseError(msg, field=field) from exc
    if "type" in data:
        return validate_for_index(parse_geojson(data), field)
    msg = f"Field [{field}] expects an object with [lat] and [lon], got {dict(data)!r}"
    raise GeometryParseError(msg, field=field)


def _is_lon_lat(value: Sequence[object]) -> bool:
    # [lon, lat] or [lon, lat, z]
    return 2 <= len(value) <= 3 and all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in value
    )
