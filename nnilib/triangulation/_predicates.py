"""
Planar geometric primitives used by the triangulation service and the
coordinate schemes.

Scalar predicates work on plain ``(x, y)`` pairs and return Python floats;
``circumcenters`` is vectorised over an ``(m, 3, 2)`` array of triangles.
"""

import math

import numpy as np


def orient(a, b, c) -> float:
    """Twice the signed area of triangle abc (> 0 if counter-clockwise)."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def incircle(a, b, c, d) -> float:
    """In-circle determinant for the counter-clockwise triangle abc.

    Positive if d lies strictly inside the circumcircle of abc, negative if
    outside and zero if the four points are cocircular.
    """
    adx, ady = a[0] - d[0], a[1] - d[1]
    bdx, bdy = b[0] - d[0], b[1] - d[1]
    cdx, cdy = c[0] - d[0], c[1] - d[1]
    ad = adx * adx + ady * ady
    bd = bdx * bdx + bdy * bdy
    cd = cdx * cdx + cdy * cdy
    return (ad * (bdx * cdy - cdx * bdy)
            + bd * (cdx * ady - adx * cdy)
            + cd * (adx * bdy - bdx * ady))


def circumcenter(a, b, c) -> tuple[float, float]:
    """Circumcentre of triangle abc; ``(inf, inf)`` for collinear points."""
    bx, by = b[0] - a[0], b[1] - a[1]
    cx, cy = c[0] - a[0], c[1] - a[1]
    d = 2.0 * (bx * cy - by * cx)
    if d == 0.0:
        return math.inf, math.inf
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (cy * b2 - by * c2) / d
    uy = (bx * c2 - cx * b2) / d
    return a[0] + ux, a[1] + uy


def circumcenters(tri_points: np.ndarray) -> np.ndarray:
    """Circumcentres of an ``(m, 3, 2)`` stack of triangles, shape ``(m, 2)``."""
    a = tri_points[:, 0, :]
    b = tri_points[:, 1, :] - a
    c = tri_points[:, 2, :] - a
    d = 2.0 * (b[:, 0] * c[:, 1] - b[:, 1] * c[:, 0])
    b2 = np.sum(b * b, axis=1)
    c2 = np.sum(c * c, axis=1)
    with np.errstate(divide='ignore', invalid='ignore'):
        ux = (c[:, 1] * b2 - b[:, 1] * c2) / d
        uy = (b[:, 0] * c2 - c[:, 0] * b2) / d
    return a + np.column_stack([ux, uy])


def convex_polygon_area(points) -> float:
    """Area of the convex polygon with the given (unordered) vertices.

    The vertices are sorted by angle about their centroid before applying
    the shoelace formula, so any vertex order is accepted. Fewer than three
    vertices give zero area.
    """
    pts = np.asarray(points, dtype=float)
    if len(pts) < 3:
        return 0.0
    centroid = pts.mean(axis=0)
    angles = np.arctan2(pts[:, 1] - centroid[1], pts[:, 0] - centroid[0])
    pts = pts[np.argsort(angles)]
    x, y = pts[:, 0], pts[:, 1]
    return 0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def distance(a, b) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])
