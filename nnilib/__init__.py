"""
nnilib: natural-neighbour interpolation and derivative estimation for
scattered planar data.

Subpackages
-----------
triangulation   : Triangulation (scipy Delaunay wrapper) and predicates
coordinates     : Sibson, Laplace, Triangle and Nearest coordinates
interpolation   : NaturalNeighboursInterpolant, interpolate
differentiation : NaturalNeighboursDifferentiator, bulk derivative generation
"""

from nnilib._config import (
    DifferentiationConfig,
    DifferentiationMethod,
    Direct,
    EvaluationConfig,
    Interpolator,
    InterpolatorKind,
    Iterative,
    Laplace,
    Nearest,
    Sibson,
    Triangle,
)
from nnilib._errors import (
    ConvexHullLockedError,
    MissingGradientError,
    NaturalNeighboursError,
    ShapeMismatchError,
)
from nnilib._registry import MethodRegistry
from nnilib.triangulation import Triangulation
from nnilib.coordinates import NaturalCoordinates, compute_natural_coordinates
from nnilib.interpolation import NaturalNeighboursInterpolant, interpolate
from nnilib.differentiation import (
    NaturalNeighboursDifferentiator,
    differentiate,
    generate_derivatives,
    generate_gradients,
    generate_gradients_and_hessians,
)

__version__ = '0.1.0'

__all__ = [
    'interpolate', 'differentiate',
    'generate_derivatives', 'generate_gradients',
    'generate_gradients_and_hessians', 'compute_natural_coordinates',
    'Triangulation', 'NaturalCoordinates',
    'NaturalNeighboursInterpolant', 'NaturalNeighboursDifferentiator',
    'Interpolator', 'InterpolatorKind', 'Sibson', 'Triangle', 'Nearest', 'Laplace',
    'DifferentiationMethod', 'Direct', 'Iterative',
    'EvaluationConfig', 'DifferentiationConfig', 'MethodRegistry',
    'NaturalNeighboursError', 'ShapeMismatchError', 'ConvexHullLockedError',
    'MissingGradientError',
]
