"""
Natural-neighbour coordinate schemes.

Submodules
----------
_natural_coordinates : NaturalCoordinates record, NeighbourCache
_compute             : compute_natural_coordinates (scheme dispatch)
_sibson              : area-stealing Sibson coordinates
_laplace             : facet-length / distance Laplace coordinates
_triangle            : barycentric coordinates in the enclosing triangle
_nearest             : nearest data site
_extrapolation       : data-site, hull-edge and exterior special cases
"""

from nnilib.coordinates._natural_coordinates import NaturalCoordinates, NeighbourCache
from nnilib.coordinates._compute import (
    compute_natural_coordinates,
    coordinate_methods,
)
from nnilib.coordinates._sibson import compute_sibson_coordinates
from nnilib.coordinates._laplace import compute_laplace_coordinates
from nnilib.coordinates._triangle import compute_triangle_coordinates
from nnilib.coordinates._nearest import compute_nearest_coordinates

__all__ = [
    'NaturalCoordinates', 'NeighbourCache',
    'compute_natural_coordinates', 'coordinate_methods',
    'compute_sibson_coordinates', 'compute_laplace_coordinates',
    'compute_triangle_coordinates', 'compute_nearest_coordinates',
]
