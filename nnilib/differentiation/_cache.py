"""Per-worker scratch space for local derivative fits."""

import numpy as np


class DerivativeCache:
    """Neighbourhood sets and growable least-squares buffers.

    One instance belongs to each worker of an interpolant. Buffers are
    handed out as zeroed leading slices; they grow (doubling) when a
    neighbourhood needs more rows and are never shrunk.

    Parameters
    ----------
    dtype : numpy dtype
        Scalar type of the buffers.
    capacity : int
        Initial number of rows.
    """

    def __init__(self, dtype=np.float64, capacity: int = 32):
        self.dtype = np.dtype(dtype)
        self.iterated_neighbourhood: set = set()
        self.second_iterated_neighbourhood: set = set()
        self._capacity = 0
        self._linear = None
        self._quadratic = None
        self._quadratic_no_cubic = None
        self._rhs = None
        self._allocate(capacity)
        self.linear_sol = np.zeros(2, dtype=self.dtype)
        self.quadratic_sol = np.zeros(9, dtype=self.dtype)
        self.quadratic_sol_no_cubic = np.zeros(5, dtype=self.dtype)

    @property
    def capacity(self) -> int:
        return self._capacity

    def _allocate(self, rows: int) -> None:
        self._capacity = rows
        self._linear = np.zeros((rows, 2), dtype=self.dtype)
        self._quadratic = np.zeros((rows, 9), dtype=self.dtype)
        self._quadratic_no_cubic = np.zeros((rows, 5), dtype=self.dtype)
        self._rhs = np.zeros(rows, dtype=self.dtype)

    def reserve(self, rows: int) -> None:
        """Make room for at least ``rows`` rows."""
        if rows > self._capacity:
            self._allocate(max(rows, 2 * self._capacity))

    @staticmethod
    def _cleared(buffer, rows):
        view = buffer[:rows]
        view.fill(0.0)
        return view

    def linear_matrix(self, rows: int) -> np.ndarray:
        """Zeroed ``(rows, 2)`` design matrix for gradient fits."""
        self.reserve(rows)
        return self._cleared(self._linear, rows)

    def quadratic_matrix(self, rows: int) -> np.ndarray:
        """Zeroed ``(rows, 9)`` design matrix (quadratic plus cubic terms)."""
        self.reserve(rows)
        return self._cleared(self._quadratic, rows)

    def quadratic_matrix_no_cubic(self, rows: int) -> np.ndarray:
        """Zeroed ``(rows, 5)`` design matrix (quadratic terms only)."""
        self.reserve(rows)
        return self._cleared(self._quadratic_no_cubic, rows)

    def rhs_vector(self, rows: int) -> np.ndarray:
        self.reserve(rows)
        return self._cleared(self._rhs, rows)
