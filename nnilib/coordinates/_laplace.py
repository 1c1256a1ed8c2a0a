"""
Laplace (non-Sibsonian) coordinates.

The weight of a natural neighbour ``v`` is the length of the Voronoi facet
shared by ``p`` and ``v`` after insertion, divided by ``|p - v|``.
"""

import numpy as np

from nnilib.coordinates._extrapolation import locate_interior
from nnilib.coordinates._natural_coordinates import NaturalCoordinates
from nnilib.coordinates._sibson import new_voronoi_vertices
from nnilib.triangulation._predicates import distance


def compute_laplace_coordinates(tri, p, cache, rng=None, project=True) -> NaturalCoordinates:
    """Laplace coordinates of ``p``; arguments as for Sibson coordinates."""
    nc, t = locate_interior(tri, p, cache, rng, project)
    if nc is not None:
        return nc
    envelope = tri.simulate_insertion(p, t)
    vertices = envelope.vertices
    g = new_voronoi_vertices(tri, envelope.point, vertices)
    weights = np.empty(len(vertices))
    for i, v in enumerate(vertices):
        facet = distance(g[i - 1], g[i])
        weights[i] = facet / distance(envelope.point, tri.get_point(v))
    weights /= weights.sum()
    return NaturalCoordinates(weights, np.asarray(vertices), tuple(p))
