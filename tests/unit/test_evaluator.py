"""Tests for relation evaluation.

Covers:
- Combination rules per relation (INTERSECTS / DISJOINT / WITHIN / CONTAINS)
- Multi-valued and empty documents
- WITHIN rejected for linear query shapes
- Property checks: DISJOINT negates INTERSECTS, vertices of a shape
  intersect it, WITHIN implies INTERSECTS, rectangles behave as interval
  tests, CONTAINS needs a single coordinate, plain shapes normalize whole
"""

from __future__ import annotations

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from geo_relation.core.exceptions import UnsupportedShapeForRelation
from geo_relation.engine.evaluator import (
    check_relation_supported,
    evaluate,
    evaluate_document,
    locate,
)
from geo_relation.geometry.normalizer import needs_normalization, normalize
from geo_relation.geometry.predicates import PointLocation
from geo_relation.models.geometry import (
    Line,
    LinearRing,
    MultiLine,
    MultiPoint,
    Point,
    Polygon,
    Rectangle,
)
from geo_relation.models.relation import IndexedPoint, Orientation, ShapeRelation

ALL_RELATIONS = list(ShapeRelation)

lons = st.floats(min_value=-180, max_value=180, allow_nan=False)
lats = st.floats(min_value=-90, max_value=90, allow_nan=False)
narrow_lons = st.floats(min_value=-89, max_value=89, allow_nan=False)


class TestIntersectsAndDisjoint:
    def test_point_inside_polygon(self, square: Polygon) -> None:
        norm = normalize(square)
        assert evaluate(IndexedPoint(-30, -30), norm, ShapeRelation.INTERSECTS)
        assert not evaluate(IndexedPoint(-30, -30), norm, ShapeRelation.DISJOINT)

    def test_point_outside_polygon(self, square: Polygon) -> None:
        norm = normalize(square)
        assert not evaluate(IndexedPoint(-40, -40), norm, ShapeRelation.INTERSECTS)
        assert evaluate(IndexedPoint(-40, -40), norm, ShapeRelation.DISJOINT)

    def test_multi_valued_intersects_if_any(self, square: Polygon) -> None:
        norm = normalize(square)
        points = (IndexedPoint(-40, -40), IndexedPoint(-30, -30))
        assert evaluate_document(points, norm, ShapeRelation.INTERSECTS)
        assert not evaluate_document(points, norm, ShapeRelation.DISJOINT)


class TestWithin:
    def test_all_points_must_be_inside(self, square: Polygon) -> None:
        norm = normalize(square)
        inside = (IndexedPoint(-30, -30), IndexedPoint(-26, -34))
        mixed = (IndexedPoint(-30, -30), IndexedPoint(-40, -40))
        assert evaluate_document(inside, norm, ShapeRelation.WITHIN)
        assert not evaluate_document(mixed, norm, ShapeRelation.WITHIN)

    def test_boundary_counts_as_within(self, square: Polygon) -> None:
        assert evaluate(IndexedPoint(-35, -30), normalize(square), ShapeRelation.WITHIN)

    def test_point_within_multipoint(self) -> None:
        norm = normalize(MultiPoint([Point(-35, -25), Point(-15, -5)]))
        assert evaluate(IndexedPoint(-35, -25), norm, ShapeRelation.WITHIN)

    @pytest.mark.parametrize(
        "shape",
        [
            Line([(-25, -35), (-25, -35)]),
            MultiLine([Line([(-35, -25), (-35, -25)]), Line([(-15, -5), (-15, -5)])]),
        ],
    )
    def test_linear_query_rejected(self, shape: object) -> None:
        norm = normalize(shape)  # type: ignore[arg-type]
        with pytest.raises(UnsupportedShapeForRelation) as exc_info:
            evaluate(IndexedPoint(-25, -35), norm, ShapeRelation.WITHIN, field="geo")
        assert "Field [geo] found an unsupported shape Line" in str(exc_info.value)
        assert exc_info.value.relation == "within"

    def test_linear_query_rejected_even_for_empty_document(self) -> None:
        norm = normalize(Line([(0, 0), (1, 1)]))
        with pytest.raises(UnsupportedShapeForRelation):
            evaluate_document((), norm, ShapeRelation.WITHIN)

    def test_other_relations_allowed_on_lines(self) -> None:
        norm = normalize(Line([(0, 0), (1, 1)]))
        for relation in (ShapeRelation.INTERSECTS, ShapeRelation.DISJOINT, ShapeRelation.CONTAINS):
            check_relation_supported(norm, relation)


class TestContains:
    def test_point_contains_same_point(self) -> None:
        norm = normalize(Point(-35, -25))
        assert evaluate(IndexedPoint(-35, -25), norm, ShapeRelation.CONTAINS)

    def test_point_cannot_contain_two_points(self) -> None:
        norm = normalize(MultiPoint([Point(-35, -25), Point(-15, -5)]))
        assert not evaluate(IndexedPoint(-35, -25), norm, ShapeRelation.CONTAINS)

    def test_multi_valued_contains_multipoint(self) -> None:
        norm = normalize(MultiPoint([Point(-35, -25), Point(-15, -5)]))
        points = (IndexedPoint(-35, -25), IndexedPoint(-15, -5), IndexedPoint(0, 0))
        assert evaluate_document(points, norm, ShapeRelation.CONTAINS)

    def test_point_cannot_contain_polygon(self, square: Polygon) -> None:
        assert not evaluate(IndexedPoint(-30, -30), normalize(square), ShapeRelation.CONTAINS)

    def test_degenerate_line_contained(self) -> None:
        norm = normalize(Line([(-25, -35), (-25, -35)]))
        assert evaluate(IndexedPoint(-25, -35), norm, ShapeRelation.CONTAINS)

    def test_zero_area_rectangle_contained(self) -> None:
        norm = normalize(Rectangle(5, 5, 5, 5))
        assert evaluate(IndexedPoint(5, 5), norm, ShapeRelation.CONTAINS)
        assert not evaluate(IndexedPoint(5, 6), norm, ShapeRelation.CONTAINS)


class TestEmptyDocument:
    @pytest.mark.parametrize("relation", ALL_RELATIONS)
    def test_matches_nothing(self, relation: ShapeRelation, square: Polygon) -> None:
        assert evaluate_document((), normalize(square), relation) is False


class TestLocate:
    def test_one_location_per_component(self, dateline_rectangle: Rectangle) -> None:
        norm = normalize(dateline_rectangle)
        assert locate((-179, 0), norm) == [PointLocation.DISJOINT, PointLocation.INSIDE]


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestRelationProperties:
    """Invariants that hold for arbitrary inputs."""

    @given(lon=lons, lat=lats)
    @settings(max_examples=200)
    def test_disjoint_negates_intersects(self, lon: float, lat: float) -> None:
        shape = Polygon(LinearRing([(-177, 10), (177, 10), (177, 5), (-177, 5), (-177, 10)]))
        norm = normalize(shape)
        point = IndexedPoint(lon, lat)
        assert evaluate(point, norm, ShapeRelation.DISJOINT) is not evaluate(
            point, norm, ShapeRelation.INTERSECTS
        )

    @given(lon=lons, lat=lats)
    @settings(max_examples=200)
    def test_within_implies_intersects(self, lon: float, lat: float) -> None:
        norm = normalize(Rectangle(169, -178, 1, -1))
        point = IndexedPoint(lon, lat)
        if evaluate(point, norm, ShapeRelation.WITHIN):
            assert evaluate(point, norm, ShapeRelation.INTERSECTS)

    @given(st.lists(st.tuples(narrow_lons, lats), min_size=2, max_size=8))
    def test_line_vertices_intersect_line(self, coords: list[tuple[float, float]]) -> None:
        line = Line(coords)
        assume(not needs_normalization(line))
        norm = normalize(line)
        for lon, lat in coords:
            assert evaluate(IndexedPoint(lon, lat), norm, ShapeRelation.INTERSECTS)

    @given(
        x=st.tuples(narrow_lons, narrow_lons),
        y=st.tuples(st.floats(min_value=-89, max_value=89), st.floats(min_value=-89, max_value=89)),
    )
    def test_polygon_vertices_intersect_polygon(
        self, x: tuple[float, float], y: tuple[float, float]
    ) -> None:
        (x1, x2), (y1, y2) = sorted(x), sorted(y)
        assume(x2 - x1 > 1e-3 and y2 - y1 > 1e-3)
        ring = [(x1, y1), (x2, y1), (x2, y2), (x1, y2), (x1, y1)]
        norm = normalize(Polygon(LinearRing(ring)))
        for lon, lat in ring:
            assert evaluate(IndexedPoint(lon, lat), norm, ShapeRelation.INTERSECTS)

    @given(
        lon_range=st.tuples(lons, lons),
        lat_range=st.tuples(lats, lats),
        lon=lons,
        lat=lats,
    )
    @settings(max_examples=200)
    def test_plain_rectangle_is_interval_test(
        self,
        lon_range: tuple[float, float],
        lat_range: tuple[float, float],
        lon: float,
        lat: float,
    ) -> None:
        (west, east), (south, north) = sorted(lon_range), sorted(lat_range)
        norm = normalize(Rectangle(west, east, north, south))
        expected = west <= lon <= east and south <= lat <= north
        assert evaluate(IndexedPoint(lon, lat), norm, ShapeRelation.INTERSECTS) is expected

    @given(
        west=st.floats(min_value=0.5, max_value=180, allow_nan=False),
        east=st.floats(min_value=-180, max_value=-0.5, allow_nan=False),
        lat_range=st.tuples(lats, lats),
        lon=lons,
        lat=lats,
    )
    @settings(max_examples=200)
    def test_dateline_rectangle_is_union_of_halves(
        self,
        west: float,
        east: float,
        lat_range: tuple[float, float],
        lon: float,
        lat: float,
    ) -> None:
        south, north = sorted(lat_range)
        norm = normalize(Rectangle(west, east, north, south))
        in_lon = west <= lon <= 180 or -180 <= lon <= east
        expected = in_lon and south <= lat <= north
        assert len(norm) == 2
        assert evaluate(IndexedPoint(lon, lat), norm, ShapeRelation.INTERSECTS) is expected

    @given(st.lists(st.tuples(lons, lats), min_size=2, max_size=8))
    def test_line_with_distinct_vertices_never_contained(
        self, coords: list[tuple[float, float]]
    ) -> None:
        assume(len(set(coords)) > 1)
        norm = normalize(Line(coords))
        points = tuple(IndexedPoint(lon, lat) for lon, lat in coords)
        assert not evaluate_document(points, norm, ShapeRelation.CONTAINS)

    @given(lon_range=st.tuples(lons, lons), lat_range=st.tuples(lats, lats))
    def test_rectangle_with_extent_never_contained(
        self, lon_range: tuple[float, float], lat_range: tuple[float, float]
    ) -> None:
        rect = Rectangle(lon_range[0], lon_range[1], max(lat_range), min(lat_range))
        assume(len(set(rect.coordinates())) > 1)
        norm = normalize(rect)
        points = tuple(IndexedPoint(lon, lat) for lon, lat in rect.coordinates())
        assert not evaluate_document(points, norm, ShapeRelation.CONTAINS)

    @given(
        x=st.tuples(narrow_lons, narrow_lons),
        y=st.tuples(st.floats(min_value=-89, max_value=89), st.floats(min_value=-89, max_value=89)),
    )
    def test_polygon_never_contained(self, x: tuple[float, float], y: tuple[float, float]) -> None:
        (x1, x2), (y1, y2) = sorted(x), sorted(y)
        assume(x2 - x1 > 1e-3 and y2 - y1 > 1e-3)
        ring = [(x1, y1), (x2, y1), (x2, y2), (x1, y2), (x1, y1)]
        norm = normalize(Polygon(LinearRing(ring)))
        points = tuple(IndexedPoint(lon, lat) for lon, lat in ring)
        assert not evaluate_document(points, norm, ShapeRelation.CONTAINS)


class TestNormalizeProperties:
    """A geometry that stays clear of the antimeridian comes back whole."""

    @given(lon_range=st.tuples(lons, lons), lat_range=st.tuples(lats, lats))
    def test_plain_rectangle_single_component(
        self, lon_range: tuple[float, float], lat_range: tuple[float, float]
    ) -> None:
        (west, east), (south, north) = sorted(lon_range), sorted(lat_range)
        rect = Rectangle(west, east, north, south)
        assert normalize(rect).geometries == (rect,)

    @given(st.lists(st.tuples(narrow_lons, lats), min_size=2, max_size=8))
    def test_plain_line_single_component(self, coords: list[tuple[float, float]]) -> None:
        line = Line(coords)
        assume(not needs_normalization(line))
        assert normalize(line).geometries == (line,)

    @given(
        x=st.tuples(narrow_lons, narrow_lons),
        y=st.tuples(st.floats(min_value=-89, max_value=89), st.floats(min_value=-89, max_value=89)),
        clockwise=st.booleans(),
    )
    def test_plain_polygon_single_component_up_to_winding(
        self, x: tuple[float, float], y: tuple[float, float], clockwise: bool
    ) -> None:
        (x1, x2), (y1, y2) = sorted(x), sorted(y)
        assume(x2 - x1 > 1e-3 and y2 - y1 > 1e-3)
        ring = ((x1, y1), (x2, y1), (x2, y2), (x1, y2), (x1, y1))
        given_ring = tuple(reversed(ring)) if clockwise else ring
        orientation = Orientation.CW if clockwise else Orientation.CCW
        (piece,) = normalize(Polygon(LinearRing(given_ring)), orientation).geometries
        assert isinstance(piece, Polygon)
        assert piece.shell.coords == ring
        assert piece.holes == ()
