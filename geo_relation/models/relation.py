"""Relation query models.

- ``ShapeRelation``: the topological predicate being tested.
- ``Orientation``: ring-winding convention for interpreting polygons.
- ``IndexedPoint`` / ``IndexedDocument``: the stored (indexed) side.
- ``IndexedShapeRef``: pointer to a pre-indexed query shape.
- ``RelationQuery``: one request: field, shape (or reference) and relation.

All models are frozen dataclasses; a query is built once per request
and read-only from then on.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from geo_relation.core.constants import (
    DEFAULT_SHAPE_INDEX,
    DEFAULT_SHAPE_PATH,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from geo_relation.core.exceptions import InvalidGeometry
from geo_relation.models.geometry import Coordinate, Geometry

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ShapeRelation(enum.Enum):
    """Relation between the indexed shape and the query shape.

    Values:
        INTERSECTS: The shapes share at least one position (default).
        DISJOINT:   The shapes share no position.
        WITHIN:     The indexed shape lies entirely within the query shape.
        CONTAINS:   The indexed shape contains the entire query shape.
    """

    INTERSECTS = "intersects"
    DISJOINT = "disjoint"
    WITHIN = "within"
    CONTAINS = "contains"

    @classmethod
    def from_value(cls, value: ShapeRelation | str) -> ShapeRelation:
        """Parse a relation name case-insensitively.

        Raises:
            ValueError: If the name is not a known relation.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(r.value for r in cls)
            msg = f"Unknown shape relation {value!r} (expected one of: {valid})"
            raise ValueError(msg) from None


class Orientation(enum.Enum):
    """Winding convention for polygon shells.

    ``CCW`` (a.k.a. ``RIGHT``) is the default: a counter-clockwise shell
    encloses the area to its left.  A shell wound against the convention
    whose longitude range exceeds 180° is read as enclosing the antimeridian.
    """

    CCW = "ccw"
    CW = "cw"

    @classmethod
    def from_value(cls, value: Orientation | str) -> Orientation:
        """Parse an orientation name, accepting the ``right``/``left`` aliases.

        Raises:
            ValueError: If the name is not a known orientation.
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name in _ORIENTATION_ALIASES:
            return _ORIENTATION_ALIASES[name]
        valid = ", ".join(sorted(_ORIENTATION_ALIASES))
        msg = f"Unknown orientation {value!r} (expected one of: {valid})"
        raise ValueError(msg)

    @property
    def is_ccw(self) -> bool:
        return self is Orientation.CCW


_ORIENTATION_ALIASES: dict[str, Orientation] = {
    "ccw": Orientation.CCW,
    "right": Orientation.CCW,
    "counterclockwise": Orientation.CCW,
    "cw": Orientation.CW,
    "left": Orientation.CW,
    "clockwise": Orientation.CW,
}


# ---------------------------------------------------------------------------
# Indexed side
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IndexedPoint:
    """One stored location of a document.

    Raises:
        InvalidGeometry: If the coordinate is outside WGS 84 bounds.
    """

    lon: float
    lat: float

    def __post_init__(self) -> None:
        if not (MIN_LONGITUDE <= self.lon <= MAX_LONGITUDE):
            msg = f"Longitude {self.lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}]"
            raise InvalidGeometry(msg, shape_type="Point")
        if not (MIN_LATITUDE <= self.lat <= MAX_LATITUDE):
            msg = f"Latitude {self.lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}]"
            raise InvalidGeometry(msg, shape_type="Point")

    @property
    def coordinate(self) -> Coordinate:
        return (self.lon, self.lat)


@dataclass(frozen=True, slots=True)
class IndexedDocument:
    """A document and the points stored in its points-only field.

    ``points`` may be empty (the field was null) or hold several values
    (a multi-valued field).
    """

    doc_id: str
    points: tuple[IndexedPoint, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))


# ---------------------------------------------------------------------------
# Query side
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IndexedShapeRef:
    """Reference to a query shape stored in another index.

    Attributes:
        shape_id: Identifier of the document holding the shape.
        index: Index holding the shape document.
        path: Dotted field path of the shape within the document.
        routing: Optional routing key forwarded to the resolver.
    """

    shape_id: str
    index: str = DEFAULT_SHAPE_INDEX
    path: str = DEFAULT_SHAPE_PATH
    routing: str | None = None


@dataclass(frozen=True, slots=True)
class RelationQuery:
    """A single relation request against one field.

    Attributes:
        field: Name of the points-only field being queried.
        shape: Inline query geometry, or a reference to a stored one.
        relation: Relation to test (default ``INTERSECTS``).
        orientation: Winding convention for polygon shells.
    """

    field: str
    shape: Geometry | IndexedShapeRef
    relation: ShapeRelation = ShapeRelation.INTERSECTS
    orientation: Orientation = Orientation.CCW

    def __post_init__(self) -> None:
        object.__setattr__(self, "relation", ShapeRelation.from_value(self.relation))
        object.__setattr__(self, "orientation", Orientation.from_value(self.orientation))

    @property
    def is_reference(self) -> bool:
        return isinstance(self.shape, IndexedShapeRef)
