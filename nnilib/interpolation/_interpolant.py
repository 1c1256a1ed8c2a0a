"""
Natural-neighbour interpolant over a Delaunay triangulation.

Usage
-----
    import numpy as np
    from nnilib import interpolate, Sibson, Laplace

    points = np.random.default_rng(0).random((50, 2))
    z = np.sin(points[:, 0] * points[:, 1])
    itp = interpolate(points, z, derivatives=True)

    itp(0.3, 0.4)                        # scalar, Sibson(0)
    itp(xs, ys, method=Sibson(1))        # array, C1 blend
    itp(xs, ys, method="laplace", project=False)
"""

import logging

import numpy as np

from nnilib._config import (
    DifferentiationMethod,
    EvaluationConfig,
    Sibson,
)
from nnilib._errors import (
    ConvexHullLockedError,
    ShapeMismatchError,
)
from nnilib._parallel import as_generator, default_worker_count, run_chunked
from nnilib.coordinates import NeighbourCache, compute_natural_coordinates
from nnilib.differentiation._cache import DerivativeCache
from nnilib.interpolation._evaluate import check_gradient_available, coordinate_value
from nnilib.triangulation import Triangulation

logger = logging.getLogger(__name__)


class NaturalNeighboursInterpolant:
    """Interpolant of values ``z`` at the vertices of a triangulation.

    Parameters
    ----------
    triangulation : Triangulation
        Must not have a locked convex hull.
    z : array_like, shape (n,)
        Data values, one per vertex.
    gradient : array_like, shape (n, 2), or None
        Gradients at the data sites, used by ``Sibson(1)`` and by
        ``Iterative`` differentiation.
    hessian : array_like, shape (n, 3), or None
        Hessians ``(dxx, dyy, dxy)`` at the data sites.
    derivatives : bool
        Estimate whichever of ``gradient`` and ``hessian`` was not given
        (Direct method, second order).
    parallel : bool
        Parallelise the derivative estimation.
    n_workers : int or None
        Number of worker slots, each with its own caches. Defaults to the
        CPU count.
    **derivative_options
        ``use_cubic_terms``, ``alpha``, ``use_sibson_weight``, forwarded to
        the derivative estimation.
    """

    def __init__(self, triangulation, z, gradient=None, hessian=None,
                 derivatives=False, parallel=True, n_workers=None,
                 **derivative_options):
        if triangulation.convex_hull_locked:
            raise ConvexHullLockedError(
                "Cannot interpolate over a triangulation whose convex hull is "
                "locked; call unlock_convex_hull() first."
            )
        n = triangulation.num_points
        z = np.asarray(z, dtype=triangulation.dtype)
        if z.shape != (n,):
            raise ShapeMismatchError(
                f"Expected {n} data values, got array of shape {z.shape}"
            )
        self.triangulation = triangulation
        self.z = z
        self.gradient = self._checked_field(gradient, (n, 2), "gradient")
        self.hessian = self._checked_field(hessian, (n, 3), "hessian")

        if n_workers is None:
            n_workers = default_worker_count()
        if n_workers < 1:
            raise ValueError("n_workers must be >= 1")
        self.n_workers = int(n_workers)
        self.neighbour_caches = [NeighbourCache() for _ in range(self.n_workers)]
        self.derivative_caches = [DerivativeCache(triangulation.dtype)
                                  for _ in range(self.n_workers)]
        logger.debug("Interpolant over %d sites with %d workers", n, self.n_workers)

        if derivatives and (self.gradient is None or self.hessian is None):
            self._generate_missing_derivatives(parallel, derivative_options)

    def _checked_field(self, values, shape, name):
        if values is None:
            return None
        values = np.asarray(values, dtype=self.triangulation.dtype)
        if values.shape != shape:
            raise ShapeMismatchError(
                f"{name} must have shape {shape}, got {values.shape}"
            )
        return values

    def _generate_missing_derivatives(self, parallel, options):
        from nnilib.differentiation import (
            NaturalNeighboursDifferentiator,
            generate_gradients_and_hessians,
        )

        differentiator = NaturalNeighboursDifferentiator(self, 2)
        gradient, hessian = generate_gradients_and_hessians(
            differentiator, DifferentiationMethod.DIRECT, parallel, **options
        )
        if self.gradient is None:
            self.gradient = gradient
        if self.hessian is None:
            self.hessian = hessian

    def __repr__(self):
        return (f"NaturalNeighboursInterpolant(num_points={len(self.z)}, "
                f"gradient={self.gradient is not None}, "
                f"hessian={self.hessian is not None})")

    @property
    def points(self) -> np.ndarray:
        return self.triangulation.points

    def _evaluate_point(self, x, y, worker, cfg, rng):
        nc = compute_natural_coordinates(cfg.method, self.triangulation, (x, y),
                                         self.neighbour_caches[worker], rng=rng,
                                         project=cfg.project)
        return coordinate_value(self, nc, cfg.method)

    def __call__(self, x, y, worker: int = 0, *, method=Sibson(), parallel=True,
                 project=True, rng=None):
        """Interpolated value at a point, or at every point of arrays ``x, y``.

        Parameters
        ----------
        x, y : float or array_like
            Query coordinates. Arrays must share a shape, which the result
            keeps.
        worker : int
            Cache slot for scalar evaluation.
        method : Interpolator or str
            ``Sibson()``, ``Sibson(1)``, ``Triangle()``, ``Nearest()``,
            ``Laplace()`` or one of their names.
        parallel : bool
            Spread array evaluation over the workers.
        project : bool
            Project exterior points onto the hull; otherwise they give
            ``nan``.
        rng : None, int or numpy Generator
            Randomises point location.
        """
        cfg = EvaluationConfig(method=method, parallel=parallel, project=project,
                               rng=rng)
        check_gradient_available(self, cfg.method)
        if np.ndim(x) == 0 and np.ndim(y) == 0:
            if rng is not None:
                rng = as_generator(rng)
            return self._evaluate_point(float(x), float(y), worker, cfg, rng)

        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if x.shape != y.shape:
            raise ShapeMismatchError(
                f"x and y must have the same shape, got {x.shape} and {y.shape}"
            )
        out = np.empty(x.size, dtype=self.z.dtype)
        self._evaluate_all(out, x.ravel(), y.ravel(), cfg)
        return out.reshape(x.shape)

    def evaluate_into(self, out, x, y, *, method=Sibson(), parallel=True,
                      project=True, rng=None):
        """Write the interpolated values at ``x, y`` into the 1-D array ``out``."""
        cfg = EvaluationConfig(method=method, parallel=parallel, project=project,
                               rng=rng)
        check_gradient_available(self, cfg.method)
        x = np.asarray(x, dtype=float).ravel()
        y = np.asarray(y, dtype=float).ravel()
        if not (len(x) == len(y) == len(out)):
            raise ShapeMismatchError(
                f"x, y and out must have the same length, got "
                f"{len(x)}, {len(y)} and {len(out)}"
            )
        self._evaluate_all(out, x, y, cfg)
        return out

    def _evaluate_all(self, out, x, y, cfg):
        def body(start, stop, worker, rng):
            for i in range(start, stop):
                out[i] = self._evaluate_point(x[i], y[i], worker, cfg, rng)

        n_workers = self.n_workers if cfg.parallel else 1
        run_chunked(len(x), n_workers, body, rng=cfg.rng)


def interpolate(*args, gradient=None, hessian=None, derivatives=False,
                parallel=True, n_workers=None, **derivative_options):
    """Build a :class:`NaturalNeighboursInterpolant`.

    Accepts ``(tri, z)``, ``(points, z)`` or ``(x, y, z)``.

    Raises
    ------
    ShapeMismatchError
        If the number of values differs from the number of points, or ``x``
        and ``y`` differ in length.
    ConvexHullLockedError
        If ``tri`` has a locked convex hull.
    """
    if len(args) == 2:
        data, z = args
        if isinstance(data, Triangulation):
            tri = data
        else:
            tri = Triangulation(data)
    elif len(args) == 3:
        x, y, z = args
        x = np.asarray(x, dtype=float).ravel()
        y = np.asarray(y, dtype=float).ravel()
        if len(x) != len(y):
            raise ShapeMismatchError(
                f"x and y must have the same length, got {len(x)} and {len(y)}"
            )
        tri = Triangulation(np.column_stack([x, y]))
    else:
        raise TypeError("interpolate expects (tri, z), (points, z) or (x, y, z)")
    return NaturalNeighboursInterpolant(tri, z, gradient=gradient, hessian=hessian,
                                        derivatives=derivatives, parallel=parallel,
                                        n_workers=n_workers, **derivative_options)
