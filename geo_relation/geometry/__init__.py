"""Geometry processing: validation, antimeridian normalization, point predicates."""

from geo_relation.geometry.normalizer import needs_normalization, normalize
from geo_relation.geometry.predicates import PointLocation, point_relates_to_component
from geo_relation.geometry.validation import validate_for_index, validate_for_query

__all__ = [
    "PointLocation",
    "needs_normalization",
    "normalize",
    "point_relates_to_component",
    "validate_for_index",
    "validate_for_query",
]
