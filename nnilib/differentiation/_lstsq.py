"""Small dense least-squares solves with explicit rank detection."""

import logging

import numpy as np
from scipy.linalg import qr, solve_triangular

logger = logging.getLogger(__name__)

# Relative size of the smallest pivot, after column equilibration, below
# which the local system is treated as rank deficient.
RANK_TOL = 1e-12


def solve_least_squares(A: np.ndarray, b: np.ndarray, out: np.ndarray) -> np.ndarray:
    """Solve ``min ||A x - b||`` into ``out``.

    Columns are equilibrated and factorised with column-pivoted QR. If the
    system is under-determined, rank deficient (e.g. collinear
    neighbours) or contains non-finite entries, ``out`` is filled with NaN
    instead of returning a minimum-norm solution.
    """
    m, k = A.shape
    if m < k or not (np.isfinite(A).all() and np.isfinite(b).all()):
        out.fill(np.nan)
        return out

    norms = np.linalg.norm(A, axis=0)
    if np.any(norms == 0.0):
        out.fill(np.nan)
        return out
    Q, R, perm = qr(A / norms, mode='economic', pivoting=True, check_finite=False)
    pivots = np.abs(np.diag(R))
    if pivots[-1] <= RANK_TOL * pivots[0]:
        logger.debug("Rank-deficient local system (pivots %s)", pivots)
        out.fill(np.nan)
        return out

    y = solve_triangular(R, Q.T @ b, check_finite=False)
    out[perm] = y
    out /= norms
    return out
