"""
Special cases shared by the coordinate schemes: query points on a data
site, on the convex hull, or outside it.
"""

import numpy as np

from nnilib.coordinates._natural_coordinates import NaturalCoordinates


def extrapolate(tri, p, project: bool) -> NaturalCoordinates:
    """Coordinates for a point outside the convex hull.

    With ``project`` the point is projected onto the nearest hull edge and
    the edge's endpoints are blended linearly; otherwise the result is
    undefined. A point within ``tri.vertex_tol`` of a hull edge counts as
    lying on it and is blended whatever ``project`` says.
    """
    u, w, s = tri.nearest_hull_edge(p)
    a, b = tri.points[u], tri.points[w]
    dist = float(np.hypot(*(a + s * (b - a) - np.asarray(p, dtype=float))))
    if not project and dist > tri.vertex_tol:
        return NaturalCoordinates.undefined(p)
    return NaturalCoordinates.two_point(u, w, s, p)


def locate_interior(tri, p, cache, rng=None, project=True, check_hull_edge=True):
    """Handle the special cases before a scheme computes its weights.

    Returns
    -------
    nc : NaturalCoordinates or None
        Final coordinates when ``p`` is a data site, outside the hull or
        (with ``check_hull_edge``) on a hull edge; None otherwise.
    t : int
        Triangle containing ``p``, or -1.
    """
    i, dist = tri.nearest_vertex(p)
    if dist <= tri.vertex_tol:
        return NaturalCoordinates.exact(i, p), -1
    t = tri.locate(p, cache.last_triangle, rng)
    if t == -1:
        return extrapolate(tri, p, project), -1
    cache.last_triangle = t
    if check_hull_edge:
        edge = tri.hull_edge_through(t, p)
        if edge is not None:
            u, w, s = edge
            return NaturalCoordinates.two_point(u, w, s, p), t
    return None, t
