"""ShapeResolver abstract base class.

Defines the contract for fetching a pre-indexed query shape.  The query
layer interacts exclusively with this interface; it never knows which
store sits behind it.

Lifecycle:
    1. ``resolve(ref)`` is called once per request, before normalization.
    2. The returned geometry is treated exactly like an inline one.
    3. A failure aborts the request; nothing is evaluated.

Concrete resolvers (``InMemoryShapeResolver``, or an adapter around a
real document store) implement ``fetch_source`` only.
"""

from __future__ import annotations

import abc
import logging

from geo_relation.core.exceptions import GeometryParseError, MalformedShapeSource, ShapeNotFound
from geo_relation.models.geometry import Geometry
from geo_relation.models.relation import IndexedShapeRef
from geo_relation.parsing import parse_geometry

logger = logging.getLogger("geo_relation.resolvers")


class ShapeResolver(abc.ABC):
    """Abstract base class for indexed-shape stores.

    Example usage::

        resolver = InMemoryShapeResolver()
        resolver.put("shapes", "shape1", {"shape": "BBOX(-50, -40, -45, -55)"})
        geometry = resolver.resolve(IndexedShapeRef("shape1"))
    """

    @abc.abstractmethod
    def fetch_source(self, index: str, doc_id: str, routing: str | None = None) -> dict[str, object]:
        """Return the stored source document.

        Raises:
            ShapeNotFound: If the index or document does not exist.
            ShapeStoreUnavailable: If the backing store cannot be reached.
        """

    def resolve(self, ref: IndexedShapeRef) -> Geometry:
        """Fetch the geometry that *ref* points at.

        Raises:
            ShapeNotFound: If the index, document or field path does not
                exist, or the path holds no value.
            GeometryParseError: If the stored value is not a valid shape.
            MalformedShapeSource: If ``fetch_source`` returns a non-mapping.
        """
        source = self.fetch_source(ref.index, ref.shape_id, ref.routing)
        if not isinstance(source, dict):
            msg = (
                f"Shape with ID [{ref.shape_id}] in index [{ref.index}] returned a "
                f"{type(source).__name__} source, expected an object"
            )
            raise MalformedShapeSource(msg)
        value = extract_path(source, ref)
        geometry = self._to_geometry(value, ref)
        logger.debug(
            "Resolved indexed shape [%s/%s] at path [%s] to %s",
            ref.index,
            ref.shape_id,
            ref.path,
            geometry.kind,
        )
        return geometry

    def resolve_id(self, index: str, doc_id: str, path: str) -> Geometry:
        """Convenience form of ``resolve`` taking the reference parts."""
        return self.resolve(IndexedShapeRef(shape_id=doc_id, index=index, path=path))

    @staticmethod
    def _to_geometry(value: object, ref: IndexedShapeRef) -> Geometry:
        if isinstance(value, Geometry):
            return value
        try:
            return parse_geometry(value)
        except GeometryParseError as exc:
            logger.warning(
                "Indexed shape [%s/%s] at path [%s] could not be parsed: %s",
                ref.index,
                ref.shape_id,
                ref.path,
                exc.message,
            )
            raise


def extract_path(source: dict[str, object], ref: IndexedShapeRef) -> object:
    """Walk a dotted field path through a source document.

    Raises:
        ShapeNotFound: If any path segment is missing or the value is null.
    """
    current: object = source
    for segment in ref.path.split("."):
        if not isinstance(current, dict) or segment not in current:
            msg = (
                f"Shape with ID [{ref.shape_id}] in index [{ref.index}] "
                f"has no field at path [{ref.path}]"
            )
            raise ShapeNotFound(msg)
        current = current[segment]
    if current is None:
        msg = f"Shape with ID [{ref.shape_id}] in index [{ref.index}] has a null [{ref.path}]"
        raise ShapeNotFound(msg)
    return current
