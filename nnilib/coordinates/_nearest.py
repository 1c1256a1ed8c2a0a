"""Nearest-site coordinates (the Voronoi cell containing the point)."""

from nnilib.coordinates._natural_coordinates import NaturalCoordinates


def compute_nearest_coordinates(tri, p, cache, rng=None, project=True) -> NaturalCoordinates:
    """Weight one on the nearest data site.

    The nearest site's Voronoi cell contains ``p``, so it is always a
    natural neighbour, and the result is defined everywhere in the plane:
    ``project`` is accepted for a uniform signature and ignored.
    """
    i, _ = tri.nearest_vertex(p)
    return NaturalCoordinates.exact(i, p)
