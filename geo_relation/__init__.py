"""Geo-point shape relation engine.

Decides whether the points stored in a points-only geo field INTERSECT,
are DISJOINT from, are WITHIN, or CONTAIN a query geometry.  Query shapes
may be given inline or fetched from an index of stored shapes, and are
normalized across the antimeridian before evaluation.
"""

__version__ = "0.1.0"
