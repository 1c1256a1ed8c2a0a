"""
Direct derivative estimation: one weighted Taylor fit around the point.

For neighbours ``s`` with offsets ``(dx, dy)`` from the point and distance
``delta``, the rows are scaled by ``sqrt(lam_s) / delta`` so that

    sum_s  lam_s / delta_s**2 * (z_s - z_0 - T_s)**2

is minimised, where ``T_s`` is the Taylor polynomial with the unknown
derivatives as coefficients. ``lam_s = 1`` when no natural coordinates
are available.
"""

import numpy as np

from nnilib.differentiation._lstsq import solve_least_squares


def local_offsets(tri, p, E):
    """Index array, x/y offsets and distances of ``E`` relative to ``p``."""
    E = np.asarray(E, dtype=np.intp)
    d = tri.points[E] - np.asarray(p, dtype=tri.dtype)
    dx = d[:, 0]
    dy = d[:, 1]
    return E, dx, dy, np.hypot(dx, dy)


def row_weights(lam, delta):
    w = 1.0 / delta
    if lam is not None:
        w = w * np.sqrt(lam)
    return w


def direct_gradient(tri, z, zi, p, lam, E, cache):
    """Least-squares gradient ``(dx, dy)`` at ``p``."""
    E, dx, dy, delta = local_offsets(tri, p, E)
    w = row_weights(lam, delta)
    m = len(E)
    A = cache.linear_matrix(m)
    b = cache.rhs_vector(m)
    A[:, 0] = w * dx
    A[:, 1] = w * dy
    b[:] = w * (z[E] - zi)
    sol = solve_least_squares(A, b, cache.linear_sol)
    return float(sol[0]), float(sol[1])


def direct_gradient_and_hessian(tri, z, zi, p, lam, E, cache, use_cubic_terms=True):
    """Least-squares ``((dx, dy), (dxx, dyy, dxy))`` at ``p``.

    With ``use_cubic_terms`` the fit also carries the four cubic monomials;
    their coefficients are discarded.
    """
    E, dx, dy, delta = local_offsets(tri, p, E)
    w = row_weights(lam, delta)
    m = len(E)
    if use_cubic_terms:
        A = cache.quadratic_matrix(m)
        sol = cache.quadratic_sol
    else:
        A = cache.quadratic_matrix_no_cubic(m)
        sol = cache.quadratic_sol_no_cubic
    b = cache.rhs_vector(m)

    A[:, 0] = w * dx
    A[:, 1] = w * dy
    A[:, 2] = w * dx ** 2 / 2
    A[:, 3] = w * dy ** 2 / 2
    A[:, 4] = w * dx * dy
    if use_cubic_terms:
        A[:, 5] = w * dx ** 3 / 6
        A[:, 6] = w * dy ** 3 / 6
        A[:, 7] = w * dx ** 2 * dy / 2
        A[:, 8] = w * dx * dy ** 2 / 2
    b[:] = w * (z[E] - zi)

    solve_least_squares(A, b, sol)
    return (float(sol[0]), float(sol[1])), (float(sol[2]), float(sol[3]), float(sol[4]))
