"""Barycentric coordinates in the enclosing triangle (piecewise linear, C(0))."""

import numpy as np

from nnilib.coordinates._extrapolation import locate_interior
from nnilib.coordinates._natural_coordinates import NaturalCoordinates
from nnilib.triangulation._predicates import orient


def compute_triangle_coordinates(tri, p, cache, rng=None, project=True) -> NaturalCoordinates:
    nc, t = locate_interior(tri, p, cache, rng, project, check_hull_edge=False)
    if nc is not None:
        return nc
    i, j, k = tri.triangle_vertices(t)
    a, b, c = tri.get_point(i), tri.get_point(j), tri.get_point(k)
    area = orient(a, b, c)
    la = orient(p, b, c) / area
    lb = orient(a, p, c) / area
    lc = 1.0 - la - lb
    return NaturalCoordinates(np.array([la, lb, lc]), np.array([i, j, k]), tuple(p))
