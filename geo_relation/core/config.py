"""Engine configuration loaded from environment variables.

All configuration values have defaults that reproduce exact-match
behaviour (no boundary tolerance, single-threaded evaluation).

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range.  This catches bad configuration at startup
    instead of on the first query.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from geo_relation.core.constants import DEFAULT_SHAPE_INDEX, DEFAULT_SHAPE_PATH
from geo_relation.core.exceptions import GeoRelationError
from geo_relation.models.relation import Orientation, ShapeRelation

#: Upper bound on the boundary tolerance, in degrees.
MAX_BOUNDARY_TOLERANCE = 1.0

#: Upper bound on evaluation worker threads.
MAX_WORKERS_LIMIT = 64


class ConfigValidationError(GeoRelationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class RelationConfig:
    """Immutable engine configuration.

    Loaded once at startup and handed to ``ShapeQueryEngine``.

    Attributes:
        default_relation: Relation used when a request does not name one.
        orientation: Default winding convention for polygon shells.
        boundary_tolerance: Distance in degrees within which a point counts
            as lying on a boundary.  ``0.0`` means exact coordinate match.
        max_workers: Threads used to evaluate candidate documents
            (``1`` evaluates inline).
        shape_index: Default index for indexed-shape references.
        shape_path: Default field path for indexed-shape references.
    """

    default_relation: ShapeRelation = ShapeRelation.INTERSECTS
    orientation: Orientation = Orientation.CCW
    boundary_tolerance: float = 0.0
    max_workers: int = 1
    shape_index: str = DEFAULT_SHAPE_INDEX
    shape_path: str = DEFAULT_SHAPE_PATH

    @classmethod
    def from_env(cls) -> RelationConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range, an enum name
                is unknown, or a required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``GEO_MAX_WORKERS=abc``).
        """
        relation_raw = os.getenv("GEO_DEFAULT_RELATION", "intersects")
        orientation_raw = os.getenv("GEO_ORIENTATION", "ccw")
        try:
            relation = ShapeRelation.from_value(relation_raw)
        except ValueError as exc:
            raise ConfigValidationError("GEO_DEFAULT_RELATION", relation_raw, str(exc)) from exc
        try:
            orientation = Orientation.from_value(orientation_raw)
        except ValueError as exc:
            raise ConfigValidationError("GEO_ORIENTATION", orientation_raw, str(exc)) from exc

        config = cls(
            default_relation=relation,
            orientation=orientation,
            boundary_tolerance=float(os.getenv("GEO_BOUNDARY_TOLERANCE", "0")),
            max_workers=int(os.getenv("GEO_MAX_WORKERS", "1")),
            shape_index=os.getenv("GEO_SHAPE_INDEX", DEFAULT_SHAPE_INDEX),
            shape_path=os.getenv("GEO_SHAPE_PATH", DEFAULT_SHAPE_PATH),
        )
        _validate(config)
        return config


def _validate(config: RelationConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not 0.0 <= config.boundary_tolerance < MAX_BOUNDARY_TOLERANCE:
        raise ConfigValidationError(
            "GEO_BOUNDARY_TOLERANCE",
            config.boundary_tolerance,
            f"must be >= 0 and < {MAX_BOUNDARY_TOLERANCE} (degrees)",
        )

    if not 1 <= config.max_workers <= MAX_WORKERS_LIMIT:
        raise ConfigValidationError(
            "GEO_MAX_WORKERS",
            config.max_workers,
            f"must be between 1 and {MAX_WORKERS_LIMIT}",
        )

    if not config.shape_index:
        raise ConfigValidationError(
            "GEO_SHAPE_INDEX",
            config.shape_index,
            "must not be empty",
        )

    if not config.shape_path:
        raise ConfigValidationError(
            "GEO_SHAPE_PATH",
            config.shape_path,
            "must not be empty",
        )
