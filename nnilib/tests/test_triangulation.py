"""Tests for nnilib.triangulation package."""

import numpy as np
import numpy.testing as npt
import pytest

from nnilib.triangulation import (
    Triangulation,
    circumcenter,
    convex_polygon_area,
    incircle,
    orient,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def points():
    """Unit-square corners plus 46 random interior sites."""
    rng = np.random.default_rng(0)
    corners = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    return np.vstack([corners, rng.uniform(0.02, 0.98, size=(46, 2))])


@pytest.fixture
def tri(points):
    return Triangulation(points)


@pytest.fixture
def queries():
    return np.random.default_rng(1).uniform(0.1, 0.9, size=(25, 2))


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

class TestPredicates:
    def test_orient_sign(self):
        assert orient((0, 0), (1, 0), (0, 1)) > 0
        assert orient((0, 0), (0, 1), (1, 0)) < 0
        assert orient((0, 0), (1, 1), (2, 2)) == 0

    def test_incircle_sign(self):
        a, b, c = (0.0, 0.0), (1.0, 0.0), (0.0, 1.0)
        assert incircle(a, b, c, (0.4, 0.4)) > 0
        assert incircle(a, b, c, (2.0, 2.0)) < 0
        assert incircle(a, b, c, (1.0, 1.0)) == pytest.approx(0.0)

    def test_circumcenter_right_triangle(self):
        npt.assert_allclose(circumcenter((0, 0), (2, 0), (0, 2)), (1.0, 1.0))

    def test_circumcenter_collinear_is_infinite(self):
        cx, cy = circumcenter((0, 0), (1, 0), (2, 0))
        assert np.isinf(cx) and np.isinf(cy)

    def test_convex_polygon_area_any_order(self):
        square = [(0, 0), (1, 1), (1, 0), (0, 1)]
        assert convex_polygon_area(square) == pytest.approx(1.0)

    def test_convex_polygon_area_degenerate(self):
        assert convex_polygon_area([(0, 0), (1, 1)]) == 0.0


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_counts(self, tri, points):
        assert tri.num_points == len(points)
        assert tri.num_triangles == len(tri.triangles)
        assert tri.dtype == np.float64

    def test_triangles_counter_clockwise(self, tri):
        for t in range(tri.num_triangles):
            a, b, c = (tri.get_point(v) for v in tri.triangle_vertices(t))
            assert orient(a, b, c) > 0

    def test_neighbour_opposite_vertex(self, tri):
        for t in range(tri.num_triangles):
            tv = tri.triangle_vertices(t)
            for k, s in enumerate(tri.triangle_neighbours(t)):
                if s == -1:
                    continue
                shared = {tv[(k + 1) % 3], tv[(k + 2) % 3]}
                assert shared <= set(tri.triangle_vertices(s))
                assert tv[k] not in tri.triangle_vertices(s)

    def test_duplicate_points_rejected(self, points):
        with pytest.raises(ValueError):
            Triangulation(np.vstack([points, points[5]]))

    def test_collinear_points_rejected(self):
        with pytest.raises(ValueError):
            Triangulation([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])

    def test_bad_shape_rejected(self):
        with pytest.raises(ValueError, match="shape"):
            Triangulation(np.zeros((5, 3)))

    def test_hull_is_unit_square(self, tri):
        hull_vertices = set(tri.hull_edges.ravel().tolist())
        assert hull_vertices == {0, 1, 2, 3}
        assert tri.is_boundary_vertex(0)
        assert not tri.is_boundary_vertex(10)

    def test_hull_edges_have_interior_on_left(self, tri):
        centre = (0.5, 0.5)
        for u, w in tri.hull_edges:
            assert orient(tri.get_point(u), tri.get_point(w), centre) > 0


# ---------------------------------------------------------------------------
# Adjacency
# ---------------------------------------------------------------------------

class TestNeighbourhoods:
    def test_one_ring_is_neighbours(self, tri):
        S, S2 = set(), set()
        tri.iterated_neighbourhood(S, S2, (7,), 1)
        assert S == set(tri.neighbours(7).tolist())

    def test_exclude_removes_vertex(self, tri):
        S, S2 = set(), set()
        tri.iterated_neighbourhood(S, S2, (7,), 2, exclude=7)
        assert 7 not in S

    def test_rings_are_nested(self, tri):
        S1, S2, scratch = set(), set(), set()
        tri.iterated_neighbourhood(S1, scratch, (7,), 1)
        tri.iterated_neighbourhood(S2, scratch, (7,), 2)
        assert S1 < S2


# ---------------------------------------------------------------------------
# Location and simulated insertion
# ---------------------------------------------------------------------------

class TestLocate:
    def test_located_triangle_contains_point(self, tri, queries):
        for p in queries:
            t = tri.locate(p)
            assert t >= 0
            a, b, c = (tri.get_point(v) for v in tri.triangle_vertices(t))
            assert orient(a, b, p) >= 0
            assert orient(b, c, p) >= 0
            assert orient(c, a, p) >= 0

    def test_locate_with_rng_and_start(self, tri, queries):
        rng = np.random.default_rng(3)
        for p in queries:
            t_walk = tri.locate(p, start=0, rng=rng)
            t_jump = tri.locate(p)
            assert t_walk == t_jump

    def test_outside_returns_minus_one(self, tri):
        assert tri.locate((1.5, 0.5)) == -1
        assert tri.locate((-0.2, -3.0)) == -1

    def test_nearest_vertex(self, tri, points):
        i, dist = tri.nearest_vertex(points[12] + 1e-3)
        assert i == 12
        assert dist == pytest.approx(np.sqrt(2) * 1e-3)


class TestHullQueries:
    def test_signed_distance(self, tri):
        assert tri.distance_to_convex_hull((0.5, 0.9)) == pytest.approx(0.1)
        assert tri.distance_to_convex_hull((1.5, 0.5)) == pytest.approx(-0.5)

    def test_nearest_hull_edge_projection(self, tri):
        u, w, s = tri.nearest_hull_edge((1.5, 0.25))
        a = np.asarray(tri.get_point(u))
        b = np.asarray(tri.get_point(w))
        npt.assert_allclose((1 - s) * a + s * b, (1.0, 0.25))

    def test_lock_and_unlock(self, tri):
        assert not tri.convex_hull_locked
        tri.lock_convex_hull()
        assert tri.convex_hull_locked
        tri.unlock_convex_hull()
        assert not tri.convex_hull_locked


class TestSimulatedInsertion:
    def test_cavity_matches_brute_force(self, tri, queries):
        for p in queries:
            envelope = tri.simulate_insertion(p, tri.locate(p))
            expected = {t for t in range(tri.num_triangles)
                        if tri.in_circumcircle(t, p)}
            assert set(envelope.cavity) == expected

    def test_envelope_counter_clockwise(self, tri, queries):
        for p in queries:
            vertices = tri.simulate_insertion(p, tri.locate(p)).vertices
            assert vertices[0] == min(vertices)
            assert len(set(vertices)) == len(vertices) >= 3
            for i in range(len(vertices)):
                a = tri.get_point(vertices[i])
                b = tri.get_point(vertices[(i + 1) % len(vertices)])
                assert orient(p, a, b) > 0

    def test_triangulation_untouched(self, tri, queries):
        before = tri.triangles.copy()
        for p in queries:
            tri.simulate_insertion(p, tri.locate(p))
        npt.assert_array_equal(tri.triangles, before)
