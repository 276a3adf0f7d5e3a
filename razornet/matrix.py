import numpy as np


def as_square_matrix(D, name: str = "D") -> np.ndarray:
    """
    Copy `D` into a float ndarray and check that it is square.

    Raises
    ------
    ValueError
        If `D` is not a 2-D square matrix.
    """
    A = np.array(D, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"{name} must be a square matrix, got shape {A.shape}")
    return A


class MutableD:
    """
    Growable symmetric distance matrix.

    Vertices are only ever appended; there is no removal. Storage grows
    geometrically so that repeated append_vertex() calls stay cheap.
    """

    __slots__ = ("_data", "_n")

    def __init__(self, initial):
        A = as_square_matrix(initial)
        n = A.shape[0]
        self._data = np.zeros((max(n, 4), max(n, 4)), dtype=float)
        self._data[:n, :n] = A
        self._n = n

    def size(self) -> int:
        return self._n

    def __len__(self) -> int:
        return self._n

    def _check(self, i: int):
        if not 0 <= i < self._n:
            raise IndexError(f"vertex {i} out of range for matrix of size {self._n}")

    def get(self, i: int, j: int) -> float:
        self._check(i)
        self._check(j)
        return float(self._data[i, j])

    def set(self, i: int, j: int, value: float):
        self._check(i)
        self._check(j)
        self._data[i, j] = value
        self._data[j, i] = value

    def append_vertex(self, row) -> int:
        """
        Add one vertex whose distances to vertices 0..n-1 are `row`.

        Returns the new vertex index (the previous size).
        """
        row = np.asarray(row, dtype=float)
        n = self._n
        if row.shape != (n,):
            raise ValueError(f"candidate row must have length {n}, got shape {row.shape}")
        if n == self._data.shape[0]:
            grown = np.zeros((2 * n, 2 * n), dtype=float)
            grown[:n, :n] = self._data[:n, :n]
            self._data = grown
        self._data[n, :n] = row
        self._data[:n, n] = row
        self._data[n, n] = 0.0
        self._n = n + 1
        return n

    def view(self) -> np.ndarray:
        """Read-only view of the current n x n block (invalidated by growth)."""
        v = self._data[: self._n, : self._n]
        v.flags.writeable = False
        return v

    def to_array(self) -> np.ndarray:
        return self._data[: self._n, : self._n].copy()

    def __repr__(self) -> str:
        return f"MutableD(size={self._n})"
