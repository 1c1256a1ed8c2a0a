"""
Interpolated values from natural coordinates.

The ``C(0)`` schemes return the blend ``sum_k lambda_k z_k``. Sibson's
``C(1)`` interpolant also uses the gradients ``g_k`` at the data sites:

    r_k   = |p - p_k|
    zeta  = sum(lambda_k / r_k * (z_k + g_k . (p - p_k))) / sum(lambda_k / r_k)
    alpha = sum(lambda_k * r_k) / sum(lambda_k / r_k)
    beta  = sum(lambda_k * r_k**2)
    value = (alpha * sib0 + beta * zeta) / (alpha + beta)

which reproduces spherical quadratics ``a + b.x + c |x|**2`` exactly.
"""

import numpy as np

from nnilib._config import InterpolatorKind
from nnilib._errors import MissingGradientError


def natural_coordinate_value(nc, z) -> float:
    """``sum_k lambda_k z_k``; ``nan`` for undefined coordinates."""
    if not nc.defined:
        return np.nan
    return float(np.dot(nc.coordinates, z[nc.indices]))


def sibson_1_value(nc, points, z, gradient, sib0=None) -> float:
    """Sibson ``C(1)`` value at ``nc.point``.

    Parameters
    ----------
    nc : NaturalCoordinates
        Sibson coordinates of the point.
    points : ndarray, shape (n, 2)
    z : ndarray, shape (n,)
    gradient : ndarray, shape (n, 2)
    sib0 : float or None
        The ``C(0)`` value, computed from ``nc`` if not given.
    """
    if not nc.defined:
        return np.nan
    if sib0 is None:
        sib0 = natural_coordinate_value(nc, z)
    if len(nc) <= 2:
        return sib0

    idx = nc.indices
    lam = nc.coordinates
    d = np.asarray(nc.point) - points[idx]
    r = np.hypot(d[:, 0], d[:, 1])
    lam_r = lam / r
    tangent = z[idx] + np.einsum('ij,ij->i', gradient[idx], d)
    zeta = float(np.dot(lam_r, tangent) / lam_r.sum())
    alpha = float(np.dot(lam, r) / lam_r.sum())
    beta = float(np.dot(lam, r ** 2))
    return (alpha * sib0 + beta * zeta) / (alpha + beta)


def check_gradient_available(interpolant, method) -> None:
    """Raise ``MissingGradientError`` if ``method`` needs absent gradients."""
    if (method.kind is InterpolatorKind.SIBSON and method.continuity == 1
            and interpolant.gradient is None):
        raise MissingGradientError(
            "Sibson(1) needs gradients at the data sites; construct the "
            "interpolant with gradient=... or derivatives=True."
        )


def coordinate_value(interpolant, nc, method) -> float:
    """Value of ``interpolant`` for coordinates computed with ``method``."""
    if method.kind is InterpolatorKind.SIBSON and method.continuity == 1:
        check_gradient_available(interpolant, method)
        return sibson_1_value(nc, interpolant.triangulation.points, interpolant.z,
                              interpolant.gradient)
    return natural_coordinate_value(nc, interpolant.z)
