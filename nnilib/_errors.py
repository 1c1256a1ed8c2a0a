"""Exception types raised by nnilib.

Precondition and missing-capability failures raise immediately. Numerical
degeneracy is never an exception: the affected point gets a sentinel
(``inf`` for derivatives, ``nan`` for undefined extrapolated values).
"""


class NaturalNeighboursError(Exception):
    """Base class for all nnilib errors."""


class ShapeMismatchError(NaturalNeighboursError, ValueError, AssertionError):
    """Raised when coordinate, value or output arrays have inconsistent lengths.

    Subclasses both ``ValueError`` and ``AssertionError`` so callers can catch
    it as a bad argument or as a failed size assertion.
    """


class ConvexHullLockedError(NaturalNeighboursError, ValueError):
    """Raised when the triangulation's convex hull is locked against modification.

    Point insertion (even simulated) can change the hull, so an interpolant
    cannot be built over a triangulation whose hull has been locked with
    :meth:`Triangulation.lock_convex_hull`.
    """


class MissingGradientError(NaturalNeighboursError, ValueError):
    """Raised when a gradient-dependent method is requested without gradients.

    Sibson-1 interpolation and iterative differentiation both need a gradient
    at every data site, e.g. from ``interpolate(tri, z, derivatives=True)``.
    """
