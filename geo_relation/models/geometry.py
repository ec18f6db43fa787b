"""Geometry data model.

A ``Geometry`` is a closed union of immutable shape classes.  All
coordinates are WGS 84 ``(lon, lat)`` tuples in degrees.  Constructors
check structural invariants only (vertex counts, ring closure, latitude
ordering); coordinate bounds and query/index legality are checked by
``geo_relation.geometry.validation``.

Design notes:
- All models are frozen, slotted dataclasses.  Sequence fields accept
  any iterable and are stored as tuples so that a geometry can be shared
  between threads once built.
- ``Rectangle`` takes its bounds in WKT ``BBOX`` order
  ``(min_lon, max_lon, max_lat, min_lat)``; ``min_lon > max_lon`` means
  the rectangle spans the antimeridian.
- ``kind`` is the human-readable name used in error messages
  (``"Line"``, ``"LinearRing"``, ...).
"""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import ClassVar

from geo_relation.core.constants import MIN_DISTINCT_RING_VERTICES, MIN_LINE_VERTICES
from geo_relation.core.exceptions import InvalidGeometry

Coordinate = tuple[float, float]


class ShapeType(enum.Enum):
    """Geometry kinds understood by the engine."""

    POINT = "point"
    MULTIPOINT = "multipoint"
    LINESTRING = "linestring"
    MULTILINESTRING = "multilinestring"
    LINEARRING = "linearring"
    POLYGON = "polygon"
    MULTIPOLYGON = "multipolygon"
    ENVELOPE = "envelope"
    CIRCLE = "circle"

    def __str__(self) -> str:
        return self.name


def _coordinate(raw: Iterable[float], kind: str) -> Coordinate:
    """Coerce a raw ``(lon, lat)`` pair to a float tuple.

    Raises:
        InvalidGeometry: If the pair is malformed or not finite.
    """
    try:
        lon, lat = (float(v) for v in raw)
    except (TypeError, ValueError) as exc:
        msg = f"{kind} coordinate must be a (lon, lat) pair, got {raw!r}"
        raise InvalidGeometry(msg, shape_type=kind) from exc
    if not (math.isfinite(lon) and math.isfinite(lat)):
        msg = f"{kind} coordinate ({lon}, {lat}) is not finite"
        raise InvalidGeometry(msg, shape_type=kind)
    return (lon, lat)


def _coordinates(raw: Iterable[Iterable[float]], kind: str) -> tuple[Coordinate, ...]:
    return tuple(_coordinate(c, kind) for c in raw)


# ---------------------------------------------------------------------------
# Geometry classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """A single position."""

    shape_type: ClassVar[ShapeType] = ShapeType.POINT
    kind: ClassVar[str] = "Point"

    lon: float
    lat: float

    def __post_init__(self) -> None:
        lon, lat = _coordinate((self.lon, self.lat), self.kind)
        object.__setattr__(self, "lon", lon)
        object.__setattr__(self, "lat", lat)

    @property
    def coordinate(self) -> Coordinate:
        return (self.lon, self.lat)

    def coordinates(self) -> Iterator[Coordinate]:
        yield self.coordinate


@dataclass(frozen=True, slots=True)
class MultiPoint:
    """A collection of points."""

    shape_type: ClassVar[ShapeType] = ShapeType.MULTIPOINT
    kind: ClassVar[str] = "MultiPoint"

    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        points = tuple(self.points)
        if not points:
            msg = "MultiPoint must contain at least one point"
            raise InvalidGeometry(msg, shape_type=self.kind)
        object.__setattr__(self, "points", points)

    def coordinates(self) -> Iterator[Coordinate]:
        for point in self.points:
            yield point.coordinate


@dataclass(frozen=True, slots=True)
class Line:
    """An open polyline of two or more vertices."""

    shape_type: ClassVar[ShapeType] = ShapeType.LINESTRING
    kind: ClassVar[str] = "Line"

    coords: tuple[Coordinate, ...]

    def __post_init__(self) -> None:
        coords = _coordinates(self.coords, self.kind)
        if len(coords) < MIN_LINE_VERTICES:
            msg = f"{self.kind} needs at least {MIN_LINE_VERTICES} vertices, got {len(coords)}"
            raise InvalidGeometry(msg, shape_type=self.kind)
        object.__setattr__(self, "coords", coords)

    def coordinates(self) -> Iterator[Coordinate]:
        yield from self.coords


@dataclass(frozen=True, slots=True)
class MultiLine:
    """A collection of lines."""

    shape_type: ClassVar[ShapeType] = ShapeType.MULTILINESTRING
    kind: ClassVar[str] = "MultiLine"

    lines: tuple[Line, ...]

    def __post_init__(self) -> None:
        lines = tuple(self.lines)
        if not lines:
            msg = "MultiLine must contain at least one line"
            raise InvalidGeometry(msg, shape_type=self.kind)
        object.__setattr__(self, "lines", lines)

    def coordinates(self) -> Iterator[Coordinate]:
        for line in self.lines:
            yield from line.coords


@dataclass(frozen=True, slots=True)
class LinearRing:
    """A closed vertex sequence (first == last).

    Only legal as the shell or a hole of a ``Polygon``; never as a
    first-class query shape.
    """

    shape_type: ClassVar[ShapeType] = ShapeType.LINEARRING
    kind: ClassVar[str] = "LinearRing"

    coords: tuple[Coordinate, ...]

    def __post_init__(self) -> None:
        coords = _coordinates(self.coords, self.kind)
        if len(coords) < 3:
            msg = f"{self.kind} needs at least 3 vertices, got {len(coords)}"
            raise InvalidGeometry(msg, shape_type=self.kind)
        if coords[0] != coords[-1]:
            msg = f"{self.kind} is not closed: first {coords[0]} != last {coords[-1]}"
            raise InvalidGeometry(msg, shape_type=self.kind)
        object.__setattr__(self, "coords", coords)

    def coordinates(self) -> Iterator[Coordinate]:
        yield from self.coords


@dataclass(frozen=True, slots=True)
class Polygon:
    """A shell ring with zero or more hole rings."""

    shape_type: ClassVar[ShapeType] = ShapeType.POLYGON
    kind: ClassVar[str] = "Polygon"

    shell: LinearRing
    holes: tuple[LinearRing, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        holes = tuple(self.holes)
        for ring in (self.shell, *holes):
            if len(set(ring.coords)) < MIN_DISTINCT_RING_VERTICES:
                msg = (
                    f"Polygon ring has fewer than {MIN_DISTINCT_RING_VERTICES} "
                    f"distinct vertices: {ring.coords}"
                )
                raise InvalidGeometry(msg, shape_type=self.kind)
        object.__setattr__(self, "holes", holes)

    def coordinates(self) -> Iterator[Coordinate]:
        yield from self.shell.coords
        for hole in self.holes:
            yield from hole.coords


@dataclass(frozen=True, slots=True)
class MultiPolygon:
    """A collection of polygons."""

    shape_type: ClassVar[ShapeType] = ShapeType.MULTIPOLYGON
    kind: ClassVar[str] = "MultiPolygon"

    polygons: tuple[Polygon, ...]

    def __post_init__(self) -> None:
        polygons = tuple(self.polygons)
        if not polygons:
            msg = "MultiPolygon must contain at least one polygon"
            raise InvalidGeometry(msg, shape_type=self.kind)
        object.__setattr__(self, "polygons", polygons)

    def coordinates(self) -> Iterator[Coordinate]:
        for polygon in self.polygons:
            yield from polygon.coordinates()


@dataclass(frozen=True, slots=True)
class Rectangle:
    """An axis-aligned lon/lat box, in WKT ``BBOX`` argument order.

    ``min_lon > max_lon`` denotes a box spanning the antimeridian.
    """

    shape_type: ClassVar[ShapeType] = ShapeType.ENVELOPE
    kind: ClassVar[str] = "Rectangle"

    min_lon: float
    max_lon: float
    max_lat: float
    min_lat: float

    def __post_init__(self) -> None:
        for name in ("min_lon", "max_lon", "max_lat", "min_lat"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                msg = f"Rectangle {name}={value} is not finite"
                raise InvalidGeometry(msg, shape_type=self.kind)
            object.__setattr__(self, name, value)
        if self.max_lat < self.min_lat:
            msg = f"Rectangle max_lat {self.max_lat} cannot be less than min_lat {self.min_lat}"
            raise InvalidGeometry(msg, shape_type=self.kind)

    @property
    def crosses_dateline(self) -> bool:
        return self.min_lon > self.max_lon

    def coordinates(self) -> Iterator[Coordinate]:
        yield (self.min_lon, self.min_lat)
        yield (self.max_lon, self.min_lat)
        yield (self.max_lon, self.max_lat)
        yield (self.min_lon, self.max_lat)


@dataclass(frozen=True, slots=True)
class Circle:
    """A centre and a radius in metres.  Never valid for indexing or querying."""

    shape_type: ClassVar[ShapeType] = ShapeType.CIRCLE
    kind: ClassVar[str] = "Circle"

    lon: float
    lat: float
    radius_m: float

    def __post_init__(self) -> None:
        lon, lat = _coordinate((self.lon, self.lat), self.kind)
        object.__setattr__(self, "lon", lon)
        object.__setattr__(self, "lat", lat)
        if not self.radius_m >= 0:
            msg = f"Circle radius must be >= 0 metres, got {self.radius_m}"
            raise InvalidGeometry(msg, shape_type=self.kind)

    def coordinates(self) -> Iterator[Coordinate]:
        yield (self.lon, self.lat)


Geometry = (
    Point | MultiPoint | Line | MultiLine | LinearRing | Polygon | MultiPolygon | Rectangle | Circle
)

#: Shapes a normalized geometry is made of.
Component = Point | Line | Polygon | Rectangle


# ---------------------------------------------------------------------------
# Normalized form
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounds in (−180, 180] longitude space."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def of(cls, coords: Iterable[Coordinate]) -> BoundingBox:
        lons, lats = zip(*coords, strict=True)
        return cls(min(lons), min(lats), max(lons), max(lats))

    def contains(self, lon: float, lat: float, tolerance: float = 0.0) -> bool:
        return (
            self.min_lon - tolerance <= lon <= self.max_lon + tolerance
            and self.min_lat - tolerance <= lat <= self.max_lat + tolerance
        )


@dataclass(frozen=True, slots=True)
class NormalizedComponent:
    """One antimeridian-safe piece of a query geometry."""

    geometry: Component
    bbox: BoundingBox

    @classmethod
    def of(cls, geometry: Component) -> NormalizedComponent:
        return cls(geometry=geometry, bbox=BoundingBox.of(geometry.coordinates()))


@dataclass(frozen=True, slots=True)
class NormalizedGeometry:
    """Output of normalization: antimeridian-safe, canonically oriented components.

    Attributes:
        source_type: Shape type of the geometry that was normalized.
        components: Components of a single base kind, each with its bbox.
    """

    source_type: ShapeType
    components: tuple[NormalizedComponent, ...]

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[NormalizedComponent]:
        return iter(self.components)

    @property
    def geometries(self) -> tuple[Component, ...]:
        return tuple(c.geometry for c in self.components)
