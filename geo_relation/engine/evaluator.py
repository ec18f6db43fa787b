"""Relation evaluation for indexed points.

Combines per-component point locations into a relation verdict:

- **INTERSECTS**: the point is inside or on the boundary of any component.
- **DISJOINT**: exact negation of INTERSECTS.
- **WITHIN**: the point is inside or on an areal component, or coincides
  with a point component.  Lines have no interior, so WITHIN against a
  Line or MultiLine query is rejected outright.
- **CONTAINS**: a point contains only what collapses onto it; every
  coordinate of the query must coincide with the indexed point(s).

Evaluation is a pure function of (points, normalized geometry, relation);
nothing is cached between calls, so one ``NormalizedGeometry`` can be
shared by any number of threads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from geo_relation.core.exceptions import UnsupportedShapeForRelation
from geo_relation.geometry.predicates import PointLocation, coincident, point_relates_to_component
from geo_relation.models.geometry import Line, Point, ShapeType
from geo_relation.models.relation import ShapeRelation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from geo_relation.models.geometry import Coordinate, NormalizedGeometry
    from geo_relation.models.relation import IndexedPoint

#: Query kinds without an interior; nothing can be WITHIN them.
_LINEAR_TYPES = frozenset({ShapeType.LINESTRING, ShapeType.MULTILINESTRING})

#: Query kinds made only of points.
_POINT_TYPES = frozenset({ShapeType.POINT, ShapeType.MULTIPOINT})


def check_relation_supported(
    normalized: NormalizedGeometry,
    relation: ShapeRelation,
    field: str = "",
) -> None:
    """Reject relation/shape combinations that can never be evaluated.

    Raises:
        UnsupportedShapeForRelation: For WITHIN against a Line or MultiLine.
    """
    if relation is ShapeRelation.WITHIN and normalized.source_type in _LINEAR_TYPES:
        msg = f"Field [{field}] found an unsupported shape {Line.kind}"
        raise UnsupportedShapeForRelation(
            msg,
            field=field,
            shape_type=Line.kind,
            relation=relation.value,
        )


def evaluate(
    point: IndexedPoint,
    normalized: NormalizedGeometry,
    relation: ShapeRelation,
    *,
    field: str = "",
    tolerance: float = 0.0,
) -> bool:
    """Decide whether *relation* holds between one indexed point and the query.

    Raises:
        UnsupportedShapeForRelation: For WITHIN against a Line or MultiLine.
    """
    return evaluate_document((point,), normalized, relation, field=field, tolerance=tolerance)


def evaluate_document(
    points: Sequence[IndexedPoint],
    normalized: NormalizedGeometry,
    relation: ShapeRelation,
    *,
    field: str = "",
    tolerance: float = 0.0,
) -> bool:
    """Decide whether *relation* holds for a document with a multi-valued point field.

    The indexed shape is the set of all *points*.  A document without
    points matches no relation, DISJOINT included.

    Raises:
        UnsupportedShapeForRelation: For WITHIN against a Line or MultiLine.
    """
    check_relation_supported(normalized, relation, field)
    if not points:
        return False

    coords = [p.coordinate for p in points]
    match relation:
        case ShapeRelation.INTERSECTS:
            return any(_intersects(c, normalized, tolerance) for c in coords)
        case ShapeRelation.DISJOINT:
            return not any(_intersects(c, normalized, tolerance) for c in coords)
        case ShapeRelation.WITHIN:
            return all(_within(c, normalized, tolerance) for c in coords)
        case ShapeRelation.CONTAINS:
            return _contains(coords, normalized, tolerance)
    msg = f"Unknown relation {relation!r}"
    raise ValueError(msg)


# ---------------------------------------------------------------------------
# Combination rules
# ---------------------------------------------------------------------------


def locate(
    point: Coordinate,
    normalized: NormalizedGeometry,
    tolerance: float = 0.0,
) -> list[PointLocation]:
    """Location of *point* against every component, in component order."""
    return [point_relates_to_component(point, c, tolerance) for c in normalized]


def _intersects(point: Coordinate, normalized: NormalizedGeometry, tolerance: float) -> bool:
    return any(point_relates_to_component(point, c, tolerance).intersects for c in normalized)


def _within(point: Coordinate, normalized: NormalizedGeometry, tolerance: float) -> bool:
    # Line components never reach here (rejected in check_relation_supported);
    # point components only ever report ON_BOUNDARY on coincidence.
    return _intersects(point, normalized, tolerance)


def _contains(
    coords: Sequence[Coordinate],
    normalized: NormalizedGeometry,
    tolerance: float,
) -> bool:
    if normalized.source_type in _POINT_TYPES:
        query_points = [g.coordinate for g in normalized.geometries if isinstance(g, Point)]
        return all(any(coincident(q, c, tolerance) for c in coords) for q in query_points)

    # Lines, polygons and rectangles are contained only when every vertex
    # collapses onto a single indexed coordinate.
    vertices = [v for g in normalized.geometries for v in g.coordinates()]
    anchor = vertices[0]
    if not all(coincident(v, anchor, tolerance) for v in vertices):
        return False
    return any(coincident(anchor, c, tolerance) for c in coords)
