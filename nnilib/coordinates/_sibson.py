"""
Sibson (area-stealing) natural coordinates.

Inserting a point ``p`` creates a Voronoi cell ``V_p``. The Sibson
coordinate of a natural neighbour ``v`` is the fraction of ``V_p`` taken
from the old cell of ``v``:

    lambda_v = area(V_v ∩ V_p) / area(V_p)

``V_v ∩ V_p`` is convex. Its vertices are the two new Voronoi vertices on
the bisector of ``p`` and ``v`` (circumcentres of ``(p, v_prev, v)`` and
``(p, v, v_next)``) and the old Voronoi vertices of ``v`` that fall inside
``V_p``, i.e. the circumcentres of the cavity triangles incident to ``v``.
"""

import numpy as np

from nnilib.coordinates._extrapolation import locate_interior
from nnilib.coordinates._natural_coordinates import NaturalCoordinates
from nnilib.triangulation._predicates import circumcenter, convex_polygon_area


def new_voronoi_vertices(tri, p, vertices) -> list:
    """Circumcentres of ``(p, v_i, v_{i+1})`` around the envelope."""
    xy = [tri.get_point(v) for v in vertices]
    m = len(vertices)
    return [circumcenter(p, xy[i], xy[(i + 1) % m]) for i in range(m)]


def sibson_weights(tri, envelope) -> np.ndarray:
    """Normalised Sibson coordinates of ``envelope.vertices``."""
    p = envelope.point
    vertices = envelope.vertices
    g = new_voronoi_vertices(tri, p, vertices)

    old_vertices = {v: [] for v in vertices}
    for t in envelope.cavity:
        c = tri.circumcenter(t)
        for v in tri.triangle_vertices(t):
            old_vertices.setdefault(v, []).append(c)

    areas = np.empty(len(vertices))
    for i, v in enumerate(vertices):
        polygon = old_vertices[v] + [g[i - 1], g[i]]
        areas[i] = convex_polygon_area(polygon)
    return areas / areas.sum()


def compute_sibson_coordinates(tri, p, cache, rng=None, project=True) -> NaturalCoordinates:
    """Sibson coordinates of ``p``.

    Parameters
    ----------
    tri : Triangulation
    p : tuple
        Query point.
    cache : NeighbourCache
        Worker's point-location cache.
    rng : numpy Generator or None
        Randomises point location.
    project : bool
        Extrapolation policy for points outside the hull.
    """
    nc, t = locate_interior(tri, p, cache, rng, project)
    if nc is not None:
        return nc
    envelope = tri.simulate_insertion(p, t)
    weights = sibson_weights(tri, envelope)
    return NaturalCoordinates(weights, np.asarray(envelope.vertices), tuple(p))
