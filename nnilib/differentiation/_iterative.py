"""
Iterative derivative estimation.

Given gradients ``g_s`` already known at every data site, each neighbour
contributes one value residual and two gradient residuals:

    alpha     * W_s * (z_s - z_0 - grad . d_s - d_s' H d_s / 2)**2
    (1-alpha) * W_s * |g_s - grad - H d_s|**2

with ``W_s = 1 / |d_s|**2``, multiplied by the natural coordinate of ``s``
when Sibson weighting applies. For a gradient-only estimate the Hessian
terms are dropped.
"""

import numpy as np

from nnilib.differentiation._direct import local_offsets
from nnilib.differentiation._lstsq import solve_least_squares


def _weights(lam, delta, alpha, use_lam):
    W = 1.0 / delta ** 2
    if use_lam and lam is not None:
        W = W * lam
    return np.sqrt(alpha * W), np.sqrt((1.0 - alpha) * W)


def iterative_gradient(tri, z, zi, p, lam, E, cache, initial_gradients, alpha=0.1):
    """Gradient at ``p`` from neighbouring values and gradients."""
    E, dx, dy, delta = local_offsets(tri, p, E)
    wv, wg = _weights(lam, delta, alpha, use_lam=True)
    m = len(E)
    A = cache.linear_matrix(3 * m)
    b = cache.rhs_vector(3 * m)
    g = initial_gradients[E]

    A[:m, 0] = wv * dx
    A[:m, 1] = wv * dy
    b[:m] = wv * (z[E] - zi)
    A[m:2 * m, 0] = wg
    b[m:2 * m] = wg * g[:, 0]
    A[2 * m:, 1] = wg
    b[2 * m:] = wg * g[:, 1]

    sol = solve_least_squares(A, b, cache.linear_sol)
    return float(sol[0]), float(sol[1])


def iterative_gradient_and_hessian(tri, z, zi, p, lam, E, cache, initial_gradients,
                                   alpha=0.1, use_sibson_weight=True):
    """``((dx, dy), (dxx, dyy, dxy))`` at ``p`` from neighbouring values and gradients."""
    E, dx, dy, delta = local_offsets(tri, p, E)
    wv, wg = _weights(lam, delta, alpha, use_lam=use_sibson_weight)
    m = len(E)
    A = cache.quadratic_matrix_no_cubic(3 * m)
    b = cache.rhs_vector(3 * m)
    g = initial_gradients[E]

    # value residuals
    A[:m, 0] = wv * dx
    A[:m, 1] = wv * dy
    A[:m, 2] = wv * dx ** 2 / 2
    A[:m, 3] = wv * dy ** 2 / 2
    A[:m, 4] = wv * dx * dy
    b[:m] = wv * (z[E] - zi)
    # x-gradient residuals: g_x = dx_ + dxx * dx + dxy * dy
    A[m:2 * m, 0] = wg
    A[m:2 * m, 2] = wg * dx
    A[m:2 * m, 4] = wg * dy
    b[m:2 * m] = wg * g[:, 0]
    # y-gradient residuals: g_y = dy_ + dyy * dy + dxy * dx
    A[2 * m:, 1] = wg
    A[2 * m:, 3] = wg * dy
    A[2 * m:, 4] = wg * dx
    b[2 * m:] = wg * g[:, 1]

    sol = solve_least_squares(A, b, cache.quadratic_sol_no_cubic)
    return (float(sol[0]), float(sol[1])), (float(sol[2]), float(sol[3]), float(sol[4]))
