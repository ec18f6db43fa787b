"""Relation evaluation and the query entry point."""

from geo_relation.engine.evaluator import check_relation_supported, evaluate, evaluate_document
from geo_relation.engine.query import PreparedQuery, ShapeQueryEngine, matches, prepare_query

__all__ = [
    "PreparedQuery",
    "ShapeQueryEngine",
    "check_relation_supported",
    "evaluate",
    "evaluate_document",
    "matches",
    "prepare_query",
]
