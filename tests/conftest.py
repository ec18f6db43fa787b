"""Shared pytest fixtures for the geo relation test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from geo_relation.models.geometry import LinearRing, MultiPolygon, Point, Polygon, Rectangle
from geo_relation.models.relation import IndexedDocument, IndexedPoint
from geo_relation.resolvers.memory import InMemoryShapeResolver

FIELD = "geo"

# ---------------------------------------------------------------------------
# Query shape fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def square() -> Polygon:
    """CCW square [-35, -25] x [-35, -25]."""
    return Polygon(LinearRing([(-35, -35), (-25, -35), (-25, -25), (-35, -25), (-35, -35)]))


@pytest.fixture()
def square_with_hole() -> Polygon:
    """CCW square [0, 10] x [0, 10] with a CW hole [4, 6] x [4, 6]."""
    return Polygon(
        LinearRing([(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]),
        (LinearRing([(4, 4), (4, 6), (6, 6), (6, 4), (4, 4)]),),
    )


@pytest.fixture()
def dateline_polygon() -> Polygon:
    """Clockwise shell spanning 177°E to 177°W between 5°N and 10°N."""
    return Polygon(LinearRing([(-177, 10), (177, 10), (177, 5), (-177, 5), (-177, 10)]))


@pytest.fixture()
def dateline_multipolygon(dateline_polygon: Polygon) -> MultiPolygon:
    """Two shells that both enclose the antimeridian."""
    wide = Polygon(LinearRing([(-167, 10), (-171, 10), (171, 5), (-167, 5), (-167, 10)]))
    return MultiPolygon((wide, dateline_polygon))


@pytest.fixture()
def dateline_rectangle() -> Rectangle:
    """BBOX(169, -178, 1, -1): spans the antimeridian."""
    return Rectangle(169, -178, 1, -1)


@pytest.fixture()
def origin() -> Point:
    return Point(0, 0)


# ---------------------------------------------------------------------------
# Indexed side fixtures
# ---------------------------------------------------------------------------


def doc(doc_id: str, *coords: tuple[float, float]) -> IndexedDocument:
    """Build an ``IndexedDocument`` from ``(lon, lat)`` pairs."""
    return IndexedDocument(doc_id, tuple(IndexedPoint(lon, lat) for lon, lat in coords))


@pytest.fixture()
def make_doc() -> Callable[..., IndexedDocument]:
    """Factory: ``make_doc("id", (lon, lat), ...)``."""
    return doc


@pytest.fixture()
def two_point_docs() -> list[IndexedDocument]:
    """Documents at (-30, -30) and (-45, -50)."""
    return [doc("point1", (-30, -30)), doc("point2", (-45, -50))]


@pytest.fixture()
def shape_resolver() -> InMemoryShapeResolver:
    """Resolver holding two rectangles in ``indexed_query_shapes``."""
    return InMemoryShapeResolver(
        {
            "indexed_query_shapes": {
                "shape1": {"shape": "BBOX(-50, -40, -45, -55)"},
                "shape2": {"shape": "BBOX(-60, -50, -50, -60)"},
            },
        }
    )
