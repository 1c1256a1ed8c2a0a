"""
Bulk derivative generation at every data site.

Usage
-----
    from nnilib import generate_derivatives, Direct, Iterative

    grads = generate_derivatives(points, z, 1, method=Direct)
    grads, hessians = generate_derivatives(x, y, z, 2, method=Iterative,
                                           gradient=grads)
"""

import logging

import numpy as np

from nnilib._config import DifferentiationConfig
from nnilib._parallel import run_chunked
from nnilib.differentiation._differentiator import NaturalNeighboursDifferentiator

logger = logging.getLogger(__name__)


def _generate(differentiator, order, method, parallel, gradient, use_cubic_terms,
              alpha, use_sibson_weight):
    itp = differentiator.interpolant
    cfg = DifferentiationConfig(method=method, parallel=parallel,
                                use_cubic_terms=use_cubic_terms, alpha=alpha,
                                use_sibson_weight=use_sibson_weight)
    n = itp.triangulation.num_points
    grads = np.empty((n, 2), dtype=itp.z.dtype)
    hessians = np.empty((n, 3), dtype=itp.z.dtype) if order == 2 else None

    def body(start, stop, worker, rng):
        for i in range(start, stop):
            result = differentiator.evaluate_at_site(
                i, worker, order=order, method=cfg.method, cfg=cfg,
                gradients=gradient,
            )
            if order == 1:
                grads[i] = result
            else:
                grads[i] = result[0]
                hessians[i] = result[1]

    n_workers = itp.n_workers if parallel else 1
    logger.info("Estimating order-%d derivatives at %d data sites (%s)",
                order, n, cfg.method.value if cfg.method else "default")
    run_chunked(n, n_workers, body)
    degenerate = int(np.isinf(grads).any(axis=1).sum())
    if degenerate:
        logger.debug("%d data sites have degenerate neighbourhoods", degenerate)
    if order == 1:
        return grads
    return grads, hessians


def generate_gradients(differentiator, method, parallel=True, *, gradient=None,
                       use_cubic_terms=True, alpha=0.1, use_sibson_weight=True):
    """Gradients at every data site, shape ``(n, 2)``.

    Parameters
    ----------
    differentiator : NaturalNeighboursDifferentiator
    method : DifferentiationMethod or str
        ``Direct`` or ``Iterative``.
    parallel : bool
        Spread the data sites over the interpolant's workers.
    gradient : ndarray or None
        Initial gradients for ``Iterative``; defaults to the interpolant's.
    """
    return _generate(differentiator, 1, method, parallel, gradient,
                     use_cubic_terms, alpha, use_sibson_weight)


def generate_gradients_and_hessians(differentiator, method, parallel=True, *,
                                    gradient=None, use_cubic_terms=True,
                                    alpha=0.1, use_sibson_weight=True):
    """Gradients ``(n, 2)`` and Hessians ``(n, 3)`` at every data site.

    Hessian columns are ``(dxx, dyy, dxy)``.
    """
    return _generate(differentiator, 2, method, parallel, gradient,
                     use_cubic_terms, alpha, use_sibson_weight)


def generate_derivatives(*args, method, parallel=True, gradient=None,
                         n_workers=None, use_cubic_terms=True, alpha=0.1,
                         use_sibson_weight=True):
    """Derivatives at every data site of a point set.

    Accepts ``(tri, z, order)``, ``(points, z, order)`` or
    ``(x, y, z, order)``.

    Parameters
    ----------
    method : DifferentiationMethod or str
        Required; ``Direct`` or ``Iterative``. ``Iterative`` needs
        ``gradient``.
    parallel : bool
    gradient : array_like, shape (n, 2), or None
        Initial gradients for ``Iterative``.
    n_workers : int or None
        Worker count of the temporary interpolant.

    Returns
    -------
    ndarray or tuple of ndarray
        ``(n, 2)`` gradients for order 1, ``((n, 2), (n, 3))`` for order 2.
    """
    from nnilib.interpolation import interpolate

    if len(args) == 3:
        data, z, order = args
        data = (data,)
    elif len(args) == 4:
        *data, z, order = args
    else:
        raise TypeError(
            "generate_derivatives expects (tri, z, order), (points, z, order) "
            "or (x, y, z, order)"
        )
    if order not in (1, 2):
        raise ValueError(f"order must be 1 or 2, got {order!r}")

    itp = interpolate(*data, z, gradient=gradient, parallel=parallel,
                      n_workers=n_workers)
    differentiator = NaturalNeighboursDifferentiator(itp, order)
    generate = generate_gradients if order == 1 else generate_gradients_and_hessians
    return generate(differentiator, method, parallel, use_cubic_terms=use_cubic_terms,
                    alpha=alpha, use_sibson_weight=use_sibson_weight)
