"""Indexed-shape resolvers.

A resolver turns an ``IndexedShapeRef`` into a concrete ``Geometry``
before the query is normalized.
"""

from geo_relation.resolvers.base import ShapeResolver, extract_path
from geo_relation.resolvers.memory import InMemoryShapeResolver

__all__ = [
    "InMemoryShapeResolver",
    "ShapeResolver",
    "extract_path",
]
