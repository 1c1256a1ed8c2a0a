"""
Read-only Delaunay triangulation service built on ``scipy.spatial.Delaunay``.

The interpolation engines only need a handful of queries: point storage,
vertex and triangle adjacency, convex-hull membership, point location and
the Bowyer-Watson cavity a point *would* create if it were inserted. This
module wraps qhull's output and answers those queries without ever
modifying it, so one triangulation can be shared by any number of
concurrent evaluations.

Usage
-----
    from nnilib.triangulation import Triangulation

    tri = Triangulation(points)
    t = tri.locate((0.3, 0.4))
    envelope = tri.simulate_insertion((0.3, 0.4), t)
    envelope.vertices   # natural neighbours, counter-clockwise
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy.spatial import Delaunay, QhullError, cKDTree

from nnilib.triangulation._predicates import (
    circumcenters,
    incircle,
    orient,
)

logger = logging.getLogger(__name__)


@dataclass
class InsertionEnvelope:
    """Result of simulating the insertion of a point.

    Attributes
    ----------
    point : tuple
        The (virtually) inserted point.
    cavity : list of int
        Triangles whose circumcircle strictly contains the point; these
        would be deleted by the insertion.
    vertices : list of int
        Boundary of the cavity in counter-clockwise order, starting at the
        smallest vertex index. These are the natural neighbours of the point.
    """
    point: tuple
    cavity: list
    vertices: list


class Triangulation:
    """Delaunay triangulation of a planar point set.

    Parameters
    ----------
    points : array_like, shape (n, 2)
        Data sites. Every point becomes a vertex; duplicates are rejected.
    vertex_tol : float or None
        Distance below which a query point is considered to coincide with a
        vertex or lie on a hull edge. Defaults to ``1e-12`` times the
        diagonal of the bounding box.
    qhull_options : str or None
        Passed through to ``scipy.spatial.Delaunay``.
    """

    def __init__(self, points, vertex_tol=None, qhull_options=None):
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError("points must have shape (n, 2)")
        if len(points) < 3:
            raise ValueError("At least 3 points are needed to triangulate")

        try:
            delaunay = Delaunay(points, qhull_options=qhull_options)
        except QhullError as exc:
            raise ValueError(f"Could not triangulate points: {exc}") from exc
        if len(delaunay.coplanar):
            dup = sorted(int(i) for i in delaunay.coplanar[:, 0])
            raise ValueError(
                f"Points {dup} were not included in the triangulation "
                f"(duplicate or numerically coincident sites)"
            )

        simplices = delaunay.simplices.copy()
        neighbours = delaunay.neighbors.copy()
        # Orient every triangle counter-clockwise; neighbours[t, k] stays
        # the triangle opposite simplices[t, k].
        tp = points[simplices]
        area2 = ((tp[:, 1, 0] - tp[:, 0, 0]) * (tp[:, 2, 1] - tp[:, 0, 1])
                 - (tp[:, 1, 1] - tp[:, 0, 1]) * (tp[:, 2, 0] - tp[:, 0, 0]))
        cw = area2 < 0
        simplices[cw] = simplices[cw][:, [0, 2, 1]]
        neighbours[cw] = neighbours[cw][:, [0, 2, 1]]

        self._delaunay = delaunay
        self._points = points
        self._triangles = simplices
        self._triangle_neighbours = neighbours
        self._circumcenters = circumcenters(points[simplices])
        self._indptr, self._indices = delaunay.vertex_neighbor_vertices
        self._vertex_to_triangle = delaunay.vertex_to_simplex
        self._tree = cKDTree(points)

        # Python-level copies for the per-point walks
        self._xy = [tuple(p) for p in points.tolist()]
        self._tri_list = simplices.tolist()
        self._nbr_list = neighbours.tolist()

        # Hull edges, oriented so the interior lies on their left
        t, k = np.nonzero(neighbours == -1)
        self._hull_edges = np.column_stack([
            simplices[t, (k + 1) % 3],
            simplices[t, (k + 2) % 3],
        ])
        self._boundary = np.zeros(len(points), dtype=bool)
        self._boundary[self._hull_edges.ravel()] = True

        if vertex_tol is None:
            diag = float(np.linalg.norm(points.max(axis=0) - points.min(axis=0)))
            vertex_tol = 1e-12 * max(diag, 1.0)
        self.vertex_tol = vertex_tol
        self.convex_hull_locked = False

        logger.debug("Triangulated %d points into %d triangles",
                     len(points), len(simplices))

    # ------------------------------------------------------------------
    # Storage and adjacency
    # ------------------------------------------------------------------

    @property
    def points(self) -> np.ndarray:
        """Vertex coordinates, shape ``(n, 2)``."""
        return self._points

    @property
    def triangles(self) -> np.ndarray:
        """Counter-clockwise vertex triples, shape ``(m, 3)``."""
        return self._triangles

    @property
    def dtype(self):
        """Scalar type of the coordinates."""
        return self._points.dtype

    @property
    def num_points(self) -> int:
        return len(self._points)

    @property
    def num_triangles(self) -> int:
        return len(self._triangles)

    def get_point(self, i: int) -> tuple:
        return self._xy[i]

    def neighbours(self, i: int) -> np.ndarray:
        """Vertices adjacent to vertex ``i`` (its 1-ring)."""
        return self._indices[self._indptr[i]:self._indptr[i + 1]]

    def triangle_neighbours(self, t: int) -> list:
        """Triangles opposite each vertex of ``t``; -1 across hull edges."""
        return self._nbr_list[t]

    def triangle_vertices(self, t: int) -> list:
        return self._tri_list[t]

    def circumcenter(self, t: int) -> tuple:
        return tuple(self._circumcenters[t])

    def is_boundary_vertex(self, i: int) -> bool:
        """True if vertex ``i`` lies on the convex hull."""
        return bool(self._boundary[i])

    @property
    def hull_edges(self) -> np.ndarray:
        """Convex-hull edges ``(u, w)`` with the interior on their left."""
        return self._hull_edges

    def iterated_neighbourhood(self, S: set, S2: set, seeds, depth: int,
                               exclude=None) -> set:
        """Fill ``S`` with everything within ``depth`` rings of ``seeds``.

        ``depth = 1`` gives the union of the seeds' 1-rings. ``S2`` is
        scratch space for the ring being added. ``exclude`` (a vertex) is
        removed from the result.
        """
        S.clear()
        for i in seeds:
            S.update(self.neighbours(i).tolist())
        for _ in range(depth - 1):
            S2.clear()
            for j in S:
                S2.update(self.neighbours(j).tolist())
            S.update(S2)
        if exclude is not None:
            S.discard(exclude)
        return S

    # ------------------------------------------------------------------
    # Convex hull
    # ------------------------------------------------------------------

    def lock_convex_hull(self) -> None:
        """Forbid operations that may modify the convex hull."""
        self.convex_hull_locked = True

    def unlock_convex_hull(self) -> None:
        self.convex_hull_locked = False

    def _hull_projection(self, p):
        a = self._points[self._hull_edges[:, 0]]
        b = self._points[self._hull_edges[:, 1]]
        ab = b - a
        ap = np.asarray(p, dtype=np.float64) - a
        s = np.clip(np.sum(ap * ab, axis=1) / np.sum(ab * ab, axis=1), 0.0, 1.0)
        d = np.hypot(ap[:, 0] - s * ab[:, 0], ap[:, 1] - s * ab[:, 1])
        return s, d, ab, ap

    def nearest_hull_edge(self, p) -> tuple[int, int, float]:
        """Closest convex-hull edge to ``p``.

        Returns
        -------
        u, w : int
            Edge endpoints.
        s : float
            Parameter of the projection of ``p`` onto the edge, clipped to
            ``[0, 1]`` (``0`` at ``u``, ``1`` at ``w``).
        """
        s, d, _, _ = self._hull_projection(p)
        e = int(np.argmin(d))
        u, w = self._hull_edges[e]
        return int(u), int(w), float(s[e])

    def distance_to_convex_hull(self, p) -> float:
        """Signed distance from ``p`` to the hull boundary (positive inside)."""
        _, d, ab, ap = self._hull_projection(p)
        inside = np.all(ab[:, 0] * ap[:, 1] - ab[:, 1] * ap[:, 0] >= 0.0)
        dist = float(d.min())
        return dist if inside else -dist

    def hull_edge_through(self, t: int, p):
        """Hull edge of triangle ``t`` on which ``p`` lies, or None.

        Returns ``(u, w, s)`` as :meth:`nearest_hull_edge` does.
        """
        tv = self._tri_list[t]
        nb = self._nbr_list[t]
        for k in range(3):
            if nb[k] != -1:
                continue
            u, w = tv[(k + 1) % 3], tv[(k + 2) % 3]
            a, b = self._xy[u], self._xy[w]
            length2 = (b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2
            if abs(orient(a, b, p)) <= self.vertex_tol * length2 ** 0.5:
                s = ((p[0] - a[0]) * (b[0] - a[0])
                     + (p[1] - a[1]) * (b[1] - a[1])) / length2
                return u, w, min(max(s, 0.0), 1.0)
        return None

    # ------------------------------------------------------------------
    # Point location
    # ------------------------------------------------------------------

    def nearest_vertex(self, p) -> tuple[int, float]:
        """Index of, and distance to, the data site closest to ``p``."""
        dist, i = self._tree.query(p)
        return int(i), float(dist)

    def _jump(self, p, rng=None) -> int:
        n = self.num_points
        m = max(1, int(round(n ** (1.0 / 3.0))))
        if rng is None:
            candidates = np.linspace(0, n - 1, m).astype(int)
        else:
            candidates = rng.integers(0, n, size=m)
        d = np.hypot(self._points[candidates, 0] - p[0],
                     self._points[candidates, 1] - p[1])
        v = candidates[int(np.argmin(d))]
        return int(self._vertex_to_triangle[v])

    def locate(self, p, start: int = -1, rng=None) -> int:
        """Triangle containing ``p``, or -1 if ``p`` is outside the hull.

        Jump-and-march: start at triangle ``start`` (or at a triangle
        incident to the nearest of a small vertex sample) and walk towards
        ``p`` across any edge that separates them. ``rng`` randomises the
        order in which edges are tested. Points on an edge are located in
        either adjacent triangle.
        """
        p = (float(p[0]), float(p[1]))
        t = start if 0 <= start < self.num_triangles else self._jump(p, rng)
        xy = self._xy
        for _ in range(4 * self.num_triangles + 4):
            tv = self._tri_list[t]
            first = int(rng.integers(3)) if rng is not None else 0
            for r in range(3):
                k = (first + r) % 3
                a = xy[tv[(k + 1) % 3]]
                b = xy[tv[(k + 2) % 3]]
                if orient(a, b, p) < 0.0:
                    t = self._nbr_list[t][k]
                    if t == -1:
                        return -1
                    break
            else:
                return t
        logger.debug("Walk to %s did not terminate; using qhull search", p)
        return int(self._delaunay.find_simplex(np.asarray(p)))

    # ------------------------------------------------------------------
    # Simulated insertion
    # ------------------------------------------------------------------

    def in_circumcircle(self, t: int, p) -> bool:
        """True if ``p`` lies strictly inside the circumcircle of ``t``."""
        a, b, c = (self._xy[v] for v in self._tri_list[t])
        return incircle(a, b, c, p) > 0.0

    def simulate_insertion(self, p, t0: int) -> InsertionEnvelope:
        """Bowyer-Watson cavity and envelope of ``p`` without inserting it.

        Parameters
        ----------
        p : tuple
            Point strictly inside the convex hull and not on a vertex.
        t0 : int
            A triangle containing ``p`` (from :meth:`locate`).
        """
        p = (float(p[0]), float(p[1]))
        nbr = self._nbr_list
        cavity = [t0]
        in_cavity = {t0}
        seen = {t0}
        stack = [t0]
        while stack:
            t = stack.pop()
            for s in nbr[t]:
                if s == -1 or s in seen:
                    continue
                seen.add(s)
                if self.in_circumcircle(s, p):
                    in_cavity.add(s)
                    cavity.append(s)
                    stack.append(s)

        successor = {}
        for t in cavity:
            tv = self._tri_list[t]
            for k in range(3):
                s = nbr[t][k]
                if s == -1 or s not in in_cavity:
                    successor[tv[(k + 1) % 3]] = tv[(k + 2) % 3]

        start = min(successor)
        vertices = [start]
        v = successor[start]
        while v != start and len(vertices) <= len(successor):
            vertices.append(v)
            v = successor[v]
        return InsertionEnvelope(point=p, cavity=cavity, vertices=vertices)
