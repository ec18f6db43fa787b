"""Unified exception taxonomy for shape relation queries.

Provides a shared base exception hierarchy for every stage of a relation
query (parse, resolve, validate, normalize, evaluate).  Every domain
exception inherits from ``GeoRelationError`` and carries structured
context fields (field name, shape kind, relation) so failures can be
diagnosed without re-running the request.

Taxonomy categories
-------------------
- ``ValidationError``: input/contract violations, never retryable.
- ``TransientError``: temporary failures (resolver backend hiccups), retryable.
- ``PermanentError``: unrecoverable domain failures, not retryable.
- ``ContractError``: payload/schema drift between collaborators, never retryable.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for the search-request layer and for logging.
Nothing in this package retries; the caller decides.
"""

from __future__ import annotations


class GeoRelationError(Exception):
    """Base exception for all shape-relation errors.

    Attributes:
        message: Human-readable error description.
        stage: Query stage where the error occurred
            (e.g. ``"normalize"``, ``"evaluate"``).
        code: Machine-readable error code (e.g. ``"INVALID_GEOMETRY"``).
        retryable: Whether the caller may retry the request.
        field: Name of the queried field, when known.
        shape_type: Kind of the offending geometry (e.g. ``"Line"``), when known.
        relation: Relation being evaluated (e.g. ``"within"``), when known.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        field: str = "",
        shape_type: str = "",
        relation: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.field = field
        self.shape_type = shape_type
        self.relation = relation
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "field": self.field,
            "shape_type": self.shape_type,
            "relation": self.relation,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(GeoRelationError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(GeoRelationError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(GeoRelationError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(GeoRelationError):
    """Payload or schema drift between collaborators. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class UnsupportedGeometryType(ValidationError):
    """A geometry kind that can never be used as a query shape (Circle, bare LinearRing)."""

    default_stage = "validate"
    default_code = "UNSUPPORTED_GEOMETRY_TYPE"


class UnsupportedIndexedShape(ValidationError):
    """A non-point geometry offered to a points-only field."""

    default_stage = "index"
    default_code = "UNSUPPORTED_INDEXED_SHAPE"


class UnsupportedShapeForRelation(ValidationError):
    """The relation cannot be evaluated against this query shape (e.g. WITHIN a Line)."""

    default_stage = "evaluate"
    default_code = "UNSUPPORTED_SHAPE_FOR_RELATION"


class InvalidGeometry(ValidationError):
    """Degenerate or malformed geometry, including failed antimeridian splits."""

    default_stage = "normalize"
    default_code = "INVALID_GEOMETRY"


class GeometryParseError(ValidationError):
    """WKT / GeoJSON / point input could not be parsed."""

    default_stage = "parse"
    default_code = "GEOMETRY_PARSE_FAILED"


class ShapeNotFound(PermanentError):
    """An indexed-shape reference did not resolve to a stored geometry."""

    default_stage = "resolve"
    default_code = "SHAPE_NOT_FOUND"


class ShapeStoreUnavailable(TransientError):
    """The store behind a shape resolver could not be reached."""

    default_stage = "resolve"
    default_code = "SHAPE_STORE_UNAVAILABLE"


class MalformedShapeSource(ContractError):
    """A shape resolver returned something other than a source document."""

    default_stage = "resolve"
    default_code = "MALFORMED_SHAPE_SOURCE"
