"""
Derivative estimation from scattered data.

Submodules
----------
_cache          : DerivativeCache, per-worker least-squares buffers
_lstsq          : pivoted-QR least squares with rank detection
_neighbourhood  : taylor_neighbourhood (data sites used by a local fit)
_direct         : single weighted Taylor fit
_iterative      : Taylor fit refined with known neighbour gradients
_differentiator : NaturalNeighboursDifferentiator, differentiate
_generate       : generate_derivatives, generate_gradients,
                  generate_gradients_and_hessians
"""

from nnilib.differentiation._cache import DerivativeCache
from nnilib.differentiation._lstsq import solve_least_squares
from nnilib.differentiation._neighbourhood import taylor_neighbourhood
from nnilib.differentiation._direct import direct_gradient, direct_gradient_and_hessian
from nnilib.differentiation._iterative import (
    iterative_gradient,
    iterative_gradient_and_hessian,
)
from nnilib.differentiation._differentiator import (
    NaturalNeighboursDifferentiator,
    differentiate,
)
from nnilib.differentiation._generate import (
    generate_derivatives,
    generate_gradients,
    generate_gradients_and_hessians,
)

__all__ = [
    'DerivativeCache', 'solve_least_squares', 'taylor_neighbourhood',
    'direct_gradient', 'direct_gradient_and_hessian',
    'iterative_gradient', 'iterative_gradient_and_hessian',
    'NaturalNeighboursDifferentiator', 'differentiate',
    'generate_derivatives', 'generate_gradients',
    'generate_gradients_and_hessians',
]
