"""Data models.

Defines the data structures used throughout the engine:
- Geometry shapes: Point, MultiPoint, Line, MultiLine, LinearRing,
  Polygon, MultiPolygon, Rectangle, Circle
- NormalizedGeometry: antimeridian-safe components of a query shape
- IndexedPoint / IndexedDocument: the stored side of a relation
- RelationQuery / IndexedShapeRef: a single relation request
"""

from geo_relation.models.geometry import (
    BoundingBox,
    Circle,
    Component,
    Coordinate,
    Geometry,
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
from geo_relation.models.relation import (
    IndexedDocument,
    IndexedPoint,
    IndexedShapeRef,
    Orientation,
    RelationQuery,
    ShapeRelation,
)

__all__ = [
    "BoundingBox",
    "Circle",
    "Component",
    "Coordinate",
    "Geometry",
    "IndexedDocument",
    "IndexedPoint",
    "IndexedShapeRef",
    "Line",
    "LinearRing",
    "MultiLine",
    "MultiPoint",
    "MultiPolygon",
    "NormalizedComponent",
    "NormalizedGeometry",
    "Orientation",
    "Point",
    "Polygon",
    "Rectangle",
    "RelationQuery",
    "ShapeRelation",
    "ShapeType",
]
