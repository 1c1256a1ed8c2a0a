"""
Taylor neighbourhoods: the data sites used in a local derivative fit.
"""


def taylor_neighbourhood(cache, tri, depth: int, nc=None, vertex=None):
    """Populate the cache's neighbourhood sets and return ``(lam, E)``.

    Parameters
    ----------
    cache : DerivativeCache
        Worker's cache; its ``iterated_neighbourhood`` and
        ``second_iterated_neighbourhood`` sets are overwritten.
    tri : Triangulation
    depth : int
        Number of rings around the data site or the natural neighbours.
    nc : NaturalCoordinates or None
        Coordinates of the query point.
    vertex : int or None
        Data-site index, when estimating at a data site.

    Returns
    -------
    lam : ndarray or None
        Weight of each neighbour, or None for uniform weights.
    E : list of int
        Neighbour indices.

    Notes
    -----
    At a data site the ``depth``-ring neighbourhood is used (the site
    itself excluded) with uniform weights. At a query point with
    ``depth == 1`` the natural neighbours are used with their coordinates
    as weights. Otherwise the natural neighbours are widened by
    ``depth - 1`` rings, or by one ring for a two-point hull blend, with
    uniform weights.
    """
    S = cache.iterated_neighbourhood
    S2 = cache.second_iterated_neighbourhood
    if vertex is None and nc.is_exact:
        vertex = int(nc.indices[0])
    if vertex is not None:
        tri.iterated_neighbourhood(S, S2, (vertex,), depth, exclude=vertex)
        return None, sorted(S)

    seeds = nc.indices.tolist()
    if depth == 1 and len(seeds) >= 3:
        return nc.coordinates, seeds
    rings = max(depth - 1, 1)
    tri.iterated_neighbourhood(S, S2, seeds, rings)
    S.update(seeds)
    return None, sorted(S)
