"""Query entry point.

Runs one relation request end to end:

    RelationQuery
      -> resolve (indexed shape reference only)
      -> validate_for_query
      -> normalize           (once per request)
      -> evaluate            (per indexed point / document)

``prepare_query`` does the first three steps and returns a
``PreparedQuery`` that is immutable and may be shared by any number of
threads.  ``ShapeQueryEngine`` binds ``RelationConfig`` defaults and a
resolver, and fans document evaluation out over a thread pool when
``max_workers > 1``.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geo_relation.core.config import RelationConfig
from geo_relation.core.exceptions import GeoRelationError, ShapeNotFound
from geo_relation.engine.evaluator import check_relation_supported, evaluate, evaluate_document
from geo_relation.geometry.normalizer import normalize
from geo_relation.geometry.validation import validate_for_query
from geo_relation.models.relation import (
    IndexedShapeRef,
    Orientation,
    RelationQuery,
    ShapeRelation,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from geo_relation.models.geometry import Geometry, NormalizedGeometry
    from geo_relation.models.relation import IndexedDocument, IndexedPoint
    from geo_relation.resolvers.base import ShapeResolver

logger = logging.getLogger("geo_relation.engine.query")


# ---------------------------------------------------------------------------
# Prepared query
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PreparedQuery:
    """A validated, normalized relation request ready for evaluation.

    Attributes:
        field: Name of the points-only field being queried.
        relation: Relation tested by every call.
        shape: The concrete query geometry (after resolution).
        normalized: Antimeridian-safe components of ``shape``.
        tolerance: Boundary tolerance in degrees (``0.0`` is exact).
    """

    field: str
    relation: ShapeRelation
    shape: Geometry
    normalized: NormalizedGeometry
    tolerance: float = 0.0

    def matches(self, point: IndexedPoint) -> bool:
        """Whether the relation holds for a single indexed point."""
        return evaluate(
            point,
            self.normalized,
            self.relation,
            field=self.field,
            tolerance=self.tolerance,
        )

    def matches_document(self, points: Sequence[IndexedPoint]) -> bool:
        """Whether the relation holds for a document holding *points*."""
        return evaluate_document(
            points,
            self.normalized,
            self.relation,
            field=self.field,
            tolerance=self.tolerance,
        )

    def filter(self, points: Iterable[IndexedPoint]) -> list[bool]:
        """Batch form of ``matches``; one verdict per point, in order."""
        return [self.matches(p) for p in points]

    def matching_ids(self, documents: Iterable[IndexedDocument]) -> list[str]:
        """Ids of the documents the relation holds for, in input order."""
        return [doc.doc_id for doc in documents if self.matches_document(doc.points)]


def prepare_query(
    query: RelationQuery,
    resolver: ShapeResolver | None = None,
    *,
    tolerance: float = 0.0,
) -> PreparedQuery:
    """Resolve, validate and normalize *query*.

    Args:
        query: The relation request.
        resolver: Store for indexed-shape references.  Required only when
            ``query.shape`` is an ``IndexedShapeRef``.
        tolerance: Boundary tolerance in degrees.

    Raises:
        ShapeNotFound: If the reference cannot be resolved (or no resolver
            was given for a reference).
        ShapeStoreUnavailable: If the resolver backend is down (retryable).
        GeometryParseError: If a stored shape cannot be parsed.
        UnsupportedGeometryType: For a Circle or bare LinearRing.
        UnsupportedShapeForRelation: For WITHIN against a Line or MultiLine.
        InvalidGeometry: For out-of-range coordinates or degenerate rings.
    """
    shape = _resolve_shape(query.shape, resolver, query.field)
    validate_for_query(shape, query.field)
    normalized = normalize(shape, query.orientation, field=query.field)
    check_relation_supported(normalized, query.relation, query.field)

    logger.debug(
        "Prepared %s query on field [%s] with %s (%d component(s))",
        query.relation.value,
        query.field,
        shape.kind,
        len(normalized),
    )
    return PreparedQuery(
        field=query.field,
        relation=query.relation,
        shape=shape,
        normalized=normalized,
        tolerance=tolerance,
    )


def _resolve_shape(
    shape: Geometry | IndexedShapeRef,
    resolver: ShapeResolver | None,
    field: str,
) -> Geometry:
    if not isinstance(shape, IndexedShapeRef):
        return shape
    if resolver is None:
        msg = (
            f"Cannot resolve shape with ID [{shape.shape_id}] in index [{shape.index}]: "
            "no shape resolver configured"
        )
        raise ShapeNotFound(msg, field=field)
    try:
        return resolver.resolve(shape)
    except GeoRelationError as exc:
        exc.field = field
        raise


def matches(
    field: str,
    shape: Geometry | IndexedShapeRef,
    relation: ShapeRelation | str,
    point: IndexedPoint,
    *,
    orientation: Orientation | str = Orientation.CCW,
    resolver: ShapeResolver | None = None,
    tolerance: float = 0.0,
) -> bool:
    """One-shot form: prepare a query and test a single point against it."""
    query = RelationQuery(field=field, shape=shape, relation=relation, orientation=orientation)
    return prepare_query(query, resolver, tolerance=tolerance).matches(point)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ShapeQueryEngine:
    """Runs relation queries with configured defaults.

    Example usage::

        engine = ShapeQueryEngine(RelationConfig.from_env(), resolver)
        query = engine.build_query("location", engine.shape_ref("shape1"))
        ids = engine.search(query, documents)
    """

    def __init__(
        self,
        config: RelationConfig | None = None,
        resolver: ShapeResolver | None = None,
    ) -> None:
        self.config = config or RelationConfig()
        self.resolver = resolver

    def build_query(
        self,
        field: str,
        shape: Geometry | IndexedShapeRef,
        relation: ShapeRelation | str | None = None,
        orientation: Orientation | str | None = None,
    ) -> RelationQuery:
        """Build a ``RelationQuery``, filling unset options from config."""
        return RelationQuery(
            field=field,
            shape=shape,
            relation=relation if relation is not None else self.config.default_relation,
            orientation=orientation if orientation is not None else self.config.orientation,
        )

    def shape_ref(self, shape_id: str, routing: str | None = None) -> IndexedShapeRef:
        """Reference a stored shape in the configured index and path."""
        return IndexedShapeRef(
            shape_id=shape_id,
            index=self.config.shape_index,
            path=self.config.shape_path,
            routing=routing,
        )

    def prepare(self, query: RelationQuery) -> PreparedQuery:
        return prepare_query(query, self.resolver, tolerance=self.config.boundary_tolerance)

    def search(self, query: RelationQuery, documents: Sequence[IndexedDocument]) -> list[str]:
        """Return the ids of *documents* matching *query*, in input order."""
        prepared = self.prepare(query)
        workers = min(self.config.max_workers, len(documents))

        if workers <= 1:
            ids = prepared.matching_ids(documents)
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="geo-relation") as pool:
                verdicts = list(pool.map(lambda doc: prepared.matches_document(doc.points), documents))
            ids = [doc.doc_id for doc, hit in zip(documents, verdicts, strict=True) if hit]

        logger.info(
            "%s query on field [%s] matched %d of %d document(s)",
            query.relation.value,
            query.field,
            len(ids),
            len(documents),
        )
        return ids
