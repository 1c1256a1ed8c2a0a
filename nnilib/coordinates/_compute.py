"""
Natural-coordinate resolver: dispatch from a coordinate scheme to its
implementation.

Usage
-----
    from nnilib.coordinates import compute_natural_coordinates, NeighbourCache

    nc = compute_natural_coordinates("sibson", tri, (0.3, 0.4), NeighbourCache())
    for weight, index in nc:
        ...
"""

import numpy as np

from nnilib._config import as_interpolator
from nnilib._registry import MethodRegistry
from nnilib.coordinates._laplace import compute_laplace_coordinates
from nnilib.coordinates._natural_coordinates import NaturalCoordinates, NeighbourCache
from nnilib.coordinates._nearest import compute_nearest_coordinates
from nnilib.coordinates._sibson import compute_sibson_coordinates
from nnilib.coordinates._triangle import compute_triangle_coordinates

coordinate_methods = MethodRegistry("natural coordinate")
coordinate_methods.register("sibson", compute_sibson_coordinates)
coordinate_methods.register("laplace", compute_laplace_coordinates)
coordinate_methods.register("triangle", compute_triangle_coordinates)
coordinate_methods.register("nearest", compute_nearest_coordinates)


def compute_natural_coordinates(method, tri, point, cache=None, *, rng=None,
                                project=True) -> NaturalCoordinates:
    """Natural coordinates of ``point`` for the given scheme.

    The triangulation is left untouched: insertion of ``point`` is only
    simulated.

    Parameters
    ----------
    method : Interpolator or str
        ``Sibson(d)``, ``Laplace()``, ``Triangle()`` or ``Nearest()``. The
        Sibson coordinates are the same for ``d = 0`` and ``d = 1``.
    tri : Triangulation
    point : pair of float
    cache : NeighbourCache or None
        Worker's point-location cache; a fresh one is used if None.
    rng : None, int or numpy Generator
        Randomises point location.
    project : bool
        If True, points outside the convex hull are projected onto the
        nearest hull edge; otherwise their coordinates are undefined.

    Returns
    -------
    NaturalCoordinates
    """
    method = as_interpolator(method)
    if cache is None:
        cache = NeighbourCache()
    if rng is not None and not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)
    p = (float(point[0]), float(point[1]))
    fn = coordinate_methods[method.kind.value]
    return fn(tri, p, cache, rng=rng, project=project)
