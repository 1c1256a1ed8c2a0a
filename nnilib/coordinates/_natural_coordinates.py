"""Natural-coordinate records and the per-worker neighbour cache."""

from dataclasses import dataclass

import numpy as np


@dataclass
class NaturalCoordinates:
    """Blending weights of a query point with respect to the data sites.

    Attributes
    ----------
    coordinates : ndarray of float
        Weights, non-negative and summing to one.
    indices : ndarray of int
        Data-site index of each weight.
    point : tuple
        The query point.
    defined : bool
        False for a point outside the convex hull when projection is
        disabled; ``coordinates`` and ``indices`` are then empty.

    Notes
    -----
    The length carries meaning: one weight means the point is a data site,
    two weights mean a blend of the endpoints of a hull edge, and three or
    more are a genuine natural-neighbour blend.
    """
    coordinates: np.ndarray
    indices: np.ndarray
    point: tuple
    defined: bool = True

    @classmethod
    def exact(cls, i: int, point) -> 'NaturalCoordinates':
        return cls(np.ones(1), np.array([i]), tuple(point))

    @classmethod
    def two_point(cls, u: int, w: int, s: float, point) -> 'NaturalCoordinates':
        """Linear blend along edge ``(u, w)`` at parameter ``s``."""
        return cls(np.array([1.0 - s, s]), np.array([u, w]), tuple(point))

    @classmethod
    def undefined(cls, point) -> 'NaturalCoordinates':
        return cls(np.empty(0), np.empty(0, dtype=int), tuple(point), defined=False)

    def __len__(self) -> int:
        return len(self.coordinates)

    def __iter__(self):
        return zip(self.coordinates.tolist(), self.indices.tolist())

    @property
    def is_exact(self) -> bool:
        return len(self.coordinates) == 1

    @property
    def is_two_point(self) -> bool:
        return len(self.coordinates) == 2


@dataclass
class NeighbourCache:
    """Per-worker point-location state.

    Only accelerates the walk in :meth:`Triangulation.locate`; results never
    depend on it.
    """
    last_triangle: int = -1
