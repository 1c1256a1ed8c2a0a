"""Tests for nnilib.interpolation package."""

import numpy as np
import numpy.testing as npt
import pytest

from nnilib import (
    ConvexHullLockedError,
    Laplace,
    MissingGradientError,
    NaturalNeighboursError,
    NaturalNeighboursInterpolant,
    Nearest,
    ShapeMismatchError,
    Sibson,
    Triangle,
    Triangulation,
    interpolate,
)
from nnilib.coordinates import NaturalCoordinates
from nnilib.interpolation import natural_coordinate_value, sibson_1_value


METHODS = [Sibson(), Sibson(1), Laplace(), Triangle(), Nearest()]


def f(x, y):
    return np.sin(x * y) - np.cos(x - y) * np.exp(-(x - y) ** 2)


def linear(x, y):
    return 1.0 + 2.0 * x - 3.0 * y


def spherical_quadratic(x, y, mu=0.7, a=(0.3, 0.6)):
    return 1.0 + x - 2.0 * y + mu * ((x - a[0]) ** 2 + (y - a[1]) ** 2)


def spherical_quadratic_gradient(x, y, mu=0.7, a=(0.3, 0.6)):
    return np.column_stack([1.0 + 2 * mu * (x - a[0]), -2.0 + 2 * mu * (y - a[1])])


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def points():
    rng = np.random.default_rng(0)
    corners = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    return np.vstack([corners, rng.uniform(0.02, 0.98, size=(46, 2))])


@pytest.fixture
def tri(points):
    return Triangulation(points)


@pytest.fixture
def queries():
    return np.random.default_rng(1).uniform(0.1, 0.9, size=(30, 2))


@pytest.fixture
def itp(tri, points):
    return interpolate(tri, f(points[:, 0], points[:, 1]), derivatives=True,
                       n_workers=3)


# ---------------------------------------------------------------------------
# Scattered-data scenario
# ---------------------------------------------------------------------------

class TestRandomScenario:
    """50 uniform random sites in the unit square, sampled on a 50x50 grid."""

    @pytest.fixture
    def scenario(self):
        rng = np.random.default_rng(123)
        x = rng.random(50)
        y = rng.random(50)
        return x, y, f(x, y)

    def test_exact_at_sites(self, scenario):
        x, y, z = scenario
        itp = interpolate(x, y, z)
        npt.assert_allclose(itp(x, y), z, rtol=0, atol=1e-12)

    def test_grid_away_from_boundary(self, scenario):
        x, y, z = scenario
        itp = interpolate(x, y, z)
        X, Y = np.meshgrid(np.linspace(0, 1, 50), np.linspace(0, 1, 50))
        vals = itp(X, Y)
        assert vals.shape == (50, 50)
        inside = np.array([itp.triangulation.distance_to_convex_hull(p) > 0.1
                           for p in zip(X.ravel(), Y.ravel())]).reshape(X.shape)
        assert inside.any()
        err = np.abs(vals - f(X, Y))[inside]
        assert err.max() < 0.1


# ---------------------------------------------------------------------------
# Exactness and reproduction
# ---------------------------------------------------------------------------

class TestValues:
    @pytest.mark.parametrize("method", METHODS, ids=repr)
    def test_exact_at_data_sites(self, itp, points, method):
        z = itp.z
        for i, (x, y) in enumerate(points):
            assert itp(x, y, method=method) == pytest.approx(z[i], abs=1e-14)

    @pytest.mark.parametrize("method", [Sibson(), Laplace(), Triangle()], ids=repr)
    def test_linear_reproduction(self, tri, points, queries, method):
        itp = interpolate(tri, linear(points[:, 0], points[:, 1]))
        vals = itp(queries[:, 0], queries[:, 1], method=method)
        npt.assert_allclose(vals, linear(queries[:, 0], queries[:, 1]), atol=1e-10)

    def test_sibson_1_reproduces_spherical_quadratic(self, tri, points, queries):
        x, y = points[:, 0], points[:, 1]
        itp = interpolate(tri, spherical_quadratic(x, y),
                          gradient=spherical_quadratic_gradient(x, y))
        vals = itp(queries[:, 0], queries[:, 1], method=Sibson(1))
        npt.assert_allclose(vals, spherical_quadratic(queries[:, 0], queries[:, 1]),
                            rtol=0, atol=1e-12)

    def test_sibson_1_reproduces_spherical_quadratic_on_grid(self):
        X, Y = np.meshgrid(np.linspace(0, 1, 25), np.linspace(0, 1, 25))
        x, y = X.ravel(), Y.ravel()
        itp = interpolate(x, y, spherical_quadratic(x, y),
                          gradient=spherical_quadratic_gradient(x, y),
                          derivatives=True)
        Xq, Yq = np.meshgrid(np.linspace(0, 1, 40), np.linspace(0, 1, 40))
        q = np.column_stack([Xq.ravel(), Yq.ravel()])
        inside = np.array([itp.triangulation.distance_to_convex_hull(p) > 1e-7
                           for p in q])
        q = q[inside]
        vals = itp(q[:, 0], q[:, 1], method=Sibson(1))
        npt.assert_allclose(vals, spherical_quadratic(q[:, 0], q[:, 1]),
                            rtol=0, atol=1e-13)

    def test_sibson_0_does_not_reproduce_quadratic(self, tri, points, queries):
        x, y = points[:, 0], points[:, 1]
        itp = interpolate(tri, spherical_quadratic(x, y))
        vals = itp(queries[:, 0], queries[:, 1])
        exact = spherical_quadratic(queries[:, 0], queries[:, 1])
        # The C0 blend overestimates a convex function
        assert np.all(vals >= exact - 1e-12)
        assert np.any(vals > exact + 1e-6)

    def test_nearest(self, itp, points):
        p = points[9] + 1e-4
        assert itp(*p, method=Nearest()) == itp.z[9]

    def test_methods_by_name(self, itp, queries):
        x, y = queries[:, 0], queries[:, 1]
        npt.assert_array_equal(itp(x, y, method="laplace"), itp(x, y, method=Laplace()))
        npt.assert_array_equal(itp(x, y, method="sibson_1"), itp(x, y, method=Sibson(1)))


class TestEvaluateHelpers:
    def test_natural_coordinate_value(self):
        z = np.array([1.0, 2.0, 4.0])
        nc = NaturalCoordinates(np.array([0.5, 0.25, 0.25]), np.array([0, 1, 2]),
                                (0.0, 0.0))
        assert natural_coordinate_value(nc, z) == pytest.approx(2.0)

    def test_undefined_is_nan(self):
        nc = NaturalCoordinates.undefined((2.0, 2.0))
        assert np.isnan(natural_coordinate_value(nc, np.zeros(3)))

    def test_sibson_1_two_point_falls_back(self):
        points = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
        z = np.array([0.0, 1.0, 2.0])
        gradient = np.full((3, 2), 5.0)
        nc = NaturalCoordinates.two_point(0, 1, 0.5, (0.5, 0.0))
        assert sibson_1_value(nc, points, z, gradient) == pytest.approx(0.5)


# ---------------------------------------------------------------------------
# Extrapolation
# ---------------------------------------------------------------------------

class TestExtrapolation:
    def test_projection_blends_hull_edge(self, tri, points):
        itp = interpolate(tri, linear(points[:, 0], points[:, 1]))
        assert itp(1.5, 0.25) == pytest.approx(linear(1.0, 0.25))

    @pytest.mark.parametrize("method", [Sibson(), Sibson(1), Laplace(), Triangle()],
                             ids=repr)
    def test_no_projection_gives_nan(self, itp, method):
        assert np.isnan(itp(1.5, 0.25, method=method, project=False))

    def test_nearest_ignores_projection(self, itp):
        assert np.isfinite(itp(1.5, 0.25, method=Nearest(), project=False))

    @pytest.mark.parametrize("method", [Sibson(), Laplace(), Triangle()], ids=repr)
    def test_slanted_hull_edges_without_projection(self, method):
        sites = np.random.default_rng(5).random((60, 2))
        tri = Triangulation(sites)
        itp = interpolate(tri, linear(sites[:, 0], sites[:, 1]))
        a = sites[tri.hull_edges[:, 0]]
        b = sites[tri.hull_edges[:, 1]]
        samples = np.vstack([a + s * (b - a) for s in (0.3, 0.5, 0.77)])
        vals = itp(samples[:, 0], samples[:, 1], method=method, project=False)
        assert np.isfinite(vals).all()
        npt.assert_allclose(vals, linear(samples[:, 0], samples[:, 1]), atol=1e-12)


# ---------------------------------------------------------------------------
# Call shapes and parallel evaluation
# ---------------------------------------------------------------------------

class TestCallShapes:
    def test_scalar_returns_float(self, itp):
        assert isinstance(itp(0.3, 0.4), float)

    def test_array_shape_preserved(self, itp):
        X, Y = np.meshgrid(np.linspace(0.1, 0.9, 4), np.linspace(0.1, 0.9, 5))
        assert itp(X, Y).shape == (5, 4)

    def test_evaluate_into(self, itp, queries):
        out = np.empty(len(queries))
        result = itp.evaluate_into(out, queries[:, 0], queries[:, 1], method=Laplace())
        assert result is out
        npt.assert_array_equal(out, itp(queries[:, 0], queries[:, 1], method=Laplace()))

    def test_evaluate_into_length_mismatch(self, itp, queries):
        with pytest.raises(ShapeMismatchError):
            itp.evaluate_into(np.empty(3), queries[:, 0], queries[:, 1])

    @pytest.mark.parametrize("method", METHODS, ids=repr)
    def test_serial_equals_parallel(self, itp, queries, method):
        x, y = queries[:, 0], queries[:, 1]
        serial = itp(x, y, method=method, parallel=False, rng=42)
        parallel = itp(x, y, method=method, parallel=True, rng=42)
        npt.assert_allclose(serial, parallel, rtol=1e-13, atol=1e-15)

    def test_worker_slots(self, itp):
        assert itp.n_workers == 3
        a = itp(0.3, 0.4, 0)
        b = itp(0.3, 0.4, 2)
        assert a == pytest.approx(b, rel=1e-13)

    def test_points_property(self, itp, points):
        npt.assert_array_equal(itp.points, points)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_points_signature(self, points):
        itp = interpolate(points, linear(points[:, 0], points[:, 1]))
        assert isinstance(itp, NaturalNeighboursInterpolant)
        assert itp.gradient is None and itp.hessian is None

    def test_derivatives_generated(self, itp, points):
        assert itp.gradient.shape == (len(points), 2)
        assert itp.hessian.shape == (len(points), 3)

    def test_supplied_gradient_kept(self, tri, points):
        x, y = points[:, 0], points[:, 1]
        g = spherical_quadratic_gradient(x, y)
        itp = interpolate(tri, spherical_quadratic(x, y), gradient=g,
                          derivatives=True)
        npt.assert_array_equal(itp.gradient, g)
        assert itp.hessian.shape == (len(points), 3)

    def test_length_mismatch(self, tri):
        with pytest.raises(ShapeMismatchError):
            interpolate(tri, np.zeros(tri.num_points - 1))

    def test_length_mismatch_is_value_and_assertion_error(self, tri):
        with pytest.raises(ValueError):
            interpolate(tri, np.zeros(3))
        with pytest.raises(AssertionError):
            interpolate(tri, np.zeros(3))

    def test_xy_length_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            interpolate([0.0, 1.0, 0.0], [0.0, 0.0], [1.0, 2.0, 3.0])

    def test_bad_gradient_shape(self, tri):
        with pytest.raises(ShapeMismatchError, match="gradient"):
            interpolate(tri, np.zeros(tri.num_points), gradient=np.zeros((3, 2)))

    def test_locked_hull(self, tri):
        tri.lock_convex_hull()
        with pytest.raises(ConvexHullLockedError):
            interpolate(tri, np.zeros(tri.num_points))
        tri.unlock_convex_hull()
        interpolate(tri, np.zeros(tri.num_points))

    def test_sibson_1_needs_gradient(self, tri):
        itp = interpolate(tri, np.zeros(tri.num_points))
        with pytest.raises(MissingGradientError):
            itp(0.3, 0.4, method=Sibson(1))
        with pytest.raises(NaturalNeighboursError):
            itp([0.3], [0.4], method="sibson_1")

    def test_bad_argument_count(self, tri):
        with pytest.raises(TypeError):
            interpolate(np.zeros(tri.num_points))
