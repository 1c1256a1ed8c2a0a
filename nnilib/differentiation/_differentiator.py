"""
Derivative estimation at arbitrary points and at data sites.

A ``NaturalNeighboursDifferentiator`` wraps an interpolant and an order
(1 for gradients, 2 for gradients and Hessians). Every estimate is a local
weighted least-squares Taylor fit over a neighbourhood of natural
neighbours, solved in the worker's ``DerivativeCache``.

Usage
-----
    from nnilib import interpolate, differentiate, Direct

    itp = interpolate(points, z)
    d = differentiate(itp, 2)
    (gx, gy), (hxx, hyy, hxy) = d(0.3, 0.4)
    grads, hessians = d(xs, ys, method=Direct)
"""

import logging

import numpy as np

from nnilib._config import (
    DifferentiationConfig,
    DifferentiationMethod,
    InterpolatorKind,
    Sibson,
    as_differentiation_method,
)
from nnilib._errors import MissingGradientError, ShapeMismatchError
from nnilib._parallel import as_generator, run_chunked
from nnilib.coordinates import compute_natural_coordinates
from nnilib.differentiation._direct import direct_gradient, direct_gradient_and_hessian
from nnilib.differentiation._iterative import (
    iterative_gradient,
    iterative_gradient_and_hessian,
)
from nnilib.differentiation._neighbourhood import taylor_neighbourhood
from nnilib.interpolation._evaluate import coordinate_value

logger = logging.getLogger(__name__)

INF_GRADIENT = (np.inf, np.inf)
INF_HESSIAN = (np.inf, np.inf, np.inf)


class NaturalNeighboursDifferentiator:
    """Gradient (``order=1``) or gradient and Hessian (``order=2``) estimator.

    Parameters
    ----------
    interpolant : NaturalNeighboursInterpolant
        Supplies the triangulation, data values, optional gradients and the
        per-worker caches.
    order : int
        1 or 2.

    Notes
    -----
    Degenerate neighbourhoods (collinear or too few neighbours) and points
    outside the hull without projection produce ``inf`` in every component
    of the result.
    """

    def __init__(self, interpolant, order: int):
        if order not in (1, 2):
            raise ValueError(f"order must be 1 or 2, got {order!r}")
        self.interpolant = interpolant
        self.order = order

    def __repr__(self):
        return (f"NaturalNeighboursDifferentiator(order={self.order}, "
                f"num_points={self.interpolant.triangulation.num_points})")

    def default_method(self) -> DifferentiationMethod:
        """``Iterative`` if the interpolant carries gradients, else ``Direct``."""
        if self.interpolant.gradient is not None:
            return DifferentiationMethod.ITERATIVE
        return DifferentiationMethod.DIRECT

    def _method(self, method) -> DifferentiationMethod:
        if method is None:
            return self.default_method()
        return as_differentiation_method(method)

    def _inf(self, order):
        if order == 1:
            return INF_GRADIENT
        return INF_GRADIENT, INF_HESSIAN

    @staticmethod
    def neighbourhood_depth(method, order, use_cubic_terms) -> int:
        """Rings of neighbours needed by the local fit."""
        if order == 1 or method is DifferentiationMethod.ITERATIVE:
            return 1
        return 3 if use_cubic_terms else 2

    def _solve(self, cache, p, zi, lam, E, method, order, cfg, gradients):
        tri = self.interpolant.triangulation
        z = self.interpolant.z
        if method is DifferentiationMethod.DIRECT:
            if order == 1:
                return direct_gradient(tri, z, zi, p, lam, E, cache)
            return direct_gradient_and_hessian(tri, z, zi, p, lam, E, cache,
                                               cfg.use_cubic_terms)
        if order == 1:
            return iterative_gradient(tri, z, zi, p, lam, E, cache, gradients,
                                      cfg.alpha)
        return iterative_gradient_and_hessian(tri, z, zi, p, lam, E, cache,
                                              gradients, cfg.alpha,
                                              cfg.use_sibson_weight)

    def _checked(self, result, order, p):
        values = result if order == 1 else result[0] + result[1]
        if np.isnan(values).any():
            logger.debug("Degenerate local fit at %s", p)
            return self._inf(order)
        return result

    def _gradients(self, method, gradients=None):
        if method is not DifferentiationMethod.ITERATIVE:
            return None
        if gradients is None:
            gradients = self.interpolant.gradient
        if gradients is None:
            raise MissingGradientError(
                "The Iterative method needs gradients at the data sites; "
                "supply them to the interpolant or use Direct."
            )
        return np.asarray(gradients)

    # ------------------------------------------------------------------
    # Call shape 1: known coordinates
    # ------------------------------------------------------------------

    def evaluate_with_coordinates(self, x, y, zi, nc, worker: int = 0, *,
                                  method=None, use_cubic_terms=True, alpha=0.1,
                                  use_sibson_weight=True):
        """Derivatives at ``(x, y)`` given the value estimate and coordinates.

        Parameters
        ----------
        x, y : float
            Query point.
        zi : float
            Interpolated value at the point.
        nc : NaturalCoordinates
            Natural coordinates of the point.
        worker : int
            Cache slot to use.
        method : DifferentiationMethod, str or None
            Defaults to :meth:`default_method`.

        Returns
        -------
        tuple
            ``(dx, dy)`` for order 1, ``((dx, dy), (dxx, dyy, dxy))`` for
            order 2.
        """
        cfg = DifferentiationConfig(method=method, use_cubic_terms=use_cubic_terms,
                                    alpha=alpha, use_sibson_weight=use_sibson_weight)
        method = self._method(cfg.method)
        gradients = self._gradients(method)
        return self._from_coordinates(float(x), float(y), zi, nc, worker, method,
                                      cfg, gradients)

    def _from_coordinates(self, x, y, zi, nc, worker, method, cfg, gradients):
        if not nc.defined or not np.isfinite(zi):
            return self._inf(self.order)
        cache = self.interpolant.derivative_caches[worker]
        depth = self.neighbourhood_depth(method, self.order, cfg.use_cubic_terms)
        lam, E = taylor_neighbourhood(cache, self.interpolant.triangulation, depth, nc)
        p = (x, y)
        result = self._solve(cache, p, zi, lam, E, method, self.order, cfg, gradients)
        return self._checked(result, self.order, p)

    # ------------------------------------------------------------------
    # Call shapes 2-4: points
    # ------------------------------------------------------------------

    def _evaluate_point(self, x, y, worker, method, cfg, gradients, rng):
        itp = self.interpolant
        value_method = cfg.interpolant_method
        coordinate_method = value_method
        if value_method.kind in (InterpolatorKind.TRIANGLE, InterpolatorKind.NEAREST):
            coordinate_method = Sibson()
        p = (x, y)
        nc = compute_natural_coordinates(coordinate_method, itp.triangulation, p,
                                         itp.neighbour_caches[worker], rng=rng,
                                         project=cfg.project)
        if not nc.defined:
            return self._inf(self.order)
        if coordinate_method is value_method:
            zi = coordinate_value(itp, nc, value_method)
        else:
            value_nc = compute_natural_coordinates(value_method, itp.triangulation, p,
                                                   itp.neighbour_caches[worker],
                                                   rng=rng, project=cfg.project)
            zi = coordinate_value(itp, value_nc, value_method)
        return self._from_coordinates(x, y, zi, nc, worker, method, cfg, gradients)

    def _config(self, method, interpolant_method, parallel, project, rng,
                use_cubic_terms, alpha, use_sibson_weight):
        cfg = DifferentiationConfig(
            method=method, interpolant_method=interpolant_method,
            parallel=parallel, project=project, use_cubic_terms=use_cubic_terms,
            alpha=alpha, use_sibson_weight=use_sibson_weight, rng=rng,
        )
        method = self._method(cfg.method)
        return method, cfg, self._gradients(method)

    def __call__(self, x, y, worker: int = 0, *, method=None,
                 interpolant_method=Sibson(), parallel=True, project=False,
                 rng=None, use_cubic_terms=True, alpha=0.1,
                 use_sibson_weight=True):
        """Derivatives at a point, or at every point of the arrays ``x, y``.

        Scalars give a tuple (see :meth:`evaluate_with_coordinates`).
        Arrays of shape ``s`` give an array of shape ``s + (2,)`` for order
        1 and a pair of arrays ``(s + (2,), s + (3,))`` for order 2.
        """
        method, cfg, gradients = self._config(method, interpolant_method, parallel,
                                              project, rng, use_cubic_terms,
                                              alpha, use_sibson_weight)
        if np.ndim(x) == 0 and np.ndim(y) == 0:
            if rng is not None:
                rng = as_generator(rng)
            return self._evaluate_point(float(x), float(y), worker, method, cfg,
                                        gradients, rng)

        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if x.shape != y.shape:
            raise ShapeMismatchError(
                f"x and y must have the same shape, got {x.shape} and {y.shape}"
            )
        n = x.size
        if self.order == 1:
            out = np.empty((n, 2))
        else:
            out = (np.empty((n, 2)), np.empty((n, 3)))
        self._evaluate_all(out, x.ravel(), y.ravel(), method, cfg, gradients)
        if self.order == 1:
            return out.reshape(x.shape + (2,))
        return out[0].reshape(x.shape + (2,)), out[1].reshape(x.shape + (3,))

    def evaluate_into(self, out, x, y, *, method=None, interpolant_method=Sibson(),
                      parallel=True, project=False, rng=None, use_cubic_terms=True,
                      alpha=0.1, use_sibson_weight=True):
        """Fill ``out`` with derivatives at the points ``x, y``.

        ``out`` is an ``(n, 2)`` array for order 1 and a pair of ``(n, 2)``
        and ``(n, 3)`` arrays for order 2.
        """
        method, cfg, gradients = self._config(method, interpolant_method, parallel,
                                              project, rng, use_cubic_terms,
                                              alpha, use_sibson_weight)
        x = np.asarray(x, dtype=float).ravel()
        y = np.asarray(y, dtype=float).ravel()
        if len(x) != len(y):
            raise ShapeMismatchError("x and y must have the same length")
        n = len(x)
        shapes = [(n, 2)] if self.order == 1 else [(n, 2), (n, 3)]
        arrays = [out] if self.order == 1 else list(out)
        if [np.shape(a) for a in arrays] != shapes:
            raise ShapeMismatchError(
                f"out must have shape(s) {shapes}, got {[np.shape(a) for a in arrays]}"
            )
        self._evaluate_all(out, x, y, method, cfg, gradients)
        return out

    def _evaluate_all(self, out, x, y, method, cfg, gradients):
        order = self.order

        def body(start, stop, worker, rng):
            for i in range(start, stop):
                result = self._evaluate_point(x[i], y[i], worker, method, cfg,
                                              gradients, rng)
                if order == 1:
                    out[i] = result
                else:
                    out[0][i] = result[0]
                    out[1][i] = result[1]

        n_workers = self.interpolant.n_workers if cfg.parallel else 1
        run_chunked(len(x), n_workers, body, rng=cfg.rng)

    # ------------------------------------------------------------------
    # Data sites
    # ------------------------------------------------------------------

    def evaluate_at_site(self, i: int, worker: int = 0, *, order=None,
                         method=None, cfg=None, gradients=None):
        """Derivatives at data site ``i`` from its surrounding rings."""
        if cfg is None:
            cfg = DifferentiationConfig(method=method)
        method = self._method(method if method is not None else cfg.method)
        gradients = self._gradients(method, gradients)
        order = self.order if order is None else order
        itp = self.interpolant
        tri = itp.triangulation
        cache = itp.derivative_caches[worker]
        depth = self.neighbourhood_depth(method, order, cfg.use_cubic_terms)
        _, E = taylor_neighbourhood(cache, tri, depth, vertex=i)
        p = tri.get_point(i)
        result = self._solve(cache, p, itp.z[i], None, E, method, order, cfg,
                             gradients)
        return self._checked(result, order, p)


def differentiate(interpolant, order: int) -> NaturalNeighboursDifferentiator:
    """Derivative estimator of the given order for ``interpolant``."""
    return NaturalNeighboursDifferentiator(interpolant, order)
