"""
Natural-neighbour interpolation.

Submodules
----------
_evaluate    : values from natural coordinates, Sibson C1 blend
_interpolant : NaturalNeighboursInterpolant, interpolate
"""

from nnilib.interpolation._evaluate import (
    coordinate_value,
    natural_coordinate_value,
    sibson_1_value,
)
from nnilib.interpolation._interpolant import NaturalNeighboursInterpolant, interpolate

__all__ = [
    'coordinate_value', 'natural_coordinate_value', 'sibson_1_value',
    'NaturalNeighboursInterpolant', 'interpolate',
]
