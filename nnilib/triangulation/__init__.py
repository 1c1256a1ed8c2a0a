"""
Triangulation service consumed by the coordinate and derivative engines.

Submodules
----------
_triangulation : Triangulation (scipy Delaunay wrapper), InsertionEnvelope
_predicates    : orientation, in-circle, circumcentre and polygon-area primitives
"""

from nnilib.triangulation._triangulation import InsertionEnvelope, Triangulation
from nnilib.triangulation._predicates import (
    circumcenter,
    convex_polygon_area,
    incircle,
    orient,
)

__all__ = [
    'Triangulation', 'InsertionEnvelope',
    'circumcenter', 'convex_polygon_area', 'incircle', 'orient',
]
