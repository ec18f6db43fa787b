"""In-memory shape resolver.

Holds shape documents in a dict keyed by index and document id.  Used in
tests and by callers that pre-load a small catalogue of named shapes.
Values stored at the shape path may be ``Geometry`` instances, WKT
strings or GeoJSON mappings; the latter two are parsed on resolve.
"""

from __future__ import annotations

import threading

from geo_relation.core.exceptions import ShapeNotFound
from geo_relation.resolvers.base import ShapeResolver


class InMemoryShapeResolver(ShapeResolver):
    """Thread-safe dict-backed resolver."""

    def __init__(self, documents: dict[str, dict[str, dict[str, object]]] | None = None) -> None:
        self._lock = threading.Lock()
        self._indices: dict[str, dict[str, dict[str, object]]] = {
            index: dict(docs) for index, docs in (documents or {}).items()
        }

    def put(self, index: str, doc_id: str, source: dict[str, object]) -> None:
        """Store (or replace) a shape document."""
        with self._lock:
            self._indices.setdefault(index, {})[doc_id] = source

    def delete(self, index: str, doc_id: str) -> bool:
        """Remove a shape document; return whether it existed."""
        with self._lock:
            return self._indices.get(index, {}).pop(doc_id, None) is not None

    def fetch_source(self, index: str, doc_id: str, routing: str | None = None) -> dict[str, object]:
        with self._lock:
            if index not in self._indices:
                msg = f"Index [{index}] not found while resolving shape with ID [{doc_id}]"
                raise ShapeNotFound(msg)
            source = self._indices[index].get(doc_id)
            if source is None:
                msg = f"Shape with ID [{doc_id}] in index [{index}] not found"
                raise ShapeNotFound(msg)
            return _copy_containers(source)  # type: ignore[return-value]


def _copy_containers(value: object) -> object:
    # Geometry values are immutable; only dicts and lists need copying.
    if isinstance(value, dict):
        return {k: _copy_containers(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy_containers(v) for v in value]
    return value
