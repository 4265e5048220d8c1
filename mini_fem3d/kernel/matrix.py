# mini_fem3d/kernel/matrix.py
"""
DENSE CONTAINERS: Matrix and Vector
===================================

PURPOSE:
--------
Thin, size-tracked wrappers around float64 numpy arrays that expose the
handful of mutations the FEM pipeline relies on:

    get / set / add      element access (add accumulates, used by assembly)
    init                 zero-fill at the current size
    set_size             reallocate (contents undefined until init)
    clone                deep copy
    remove_row/column    shrink by one, keeping the order of what remains
                         (used by Dirichlet condensation)

The raw array is always available as `.data` for vectorised work.
Bounds are the caller's responsibility: out-of-range indices raise the
underlying IndexError.

USAGE:
------
    K = Matrix(4, 4)
    K.init()
    K.add(2.5, 0, 1)      # K[0, 1] += 2.5
    K.remove_row(0)       # K is now 3×4
"""

import numpy as np


class Matrix:
    """A dense 2D float matrix with explicit row/column counts."""

    def __init__(self, nrows: int = 0, ncols: int = 0):
        self.data = np.zeros((nrows, ncols), dtype=float)

    @classmethod
    def from_array(cls, values) -> "Matrix":
        arr = np.array(values, dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"Matrix needs a 2D array, got shape {arr.shape}")
        M = cls()
        M.data = arr
        return M

    @property
    def nrows(self) -> int:
        return self.data.shape[0]

    @property
    def ncols(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> tuple:
        return self.data.shape

    def get(self, r: int, c: int) -> float:
        return float(self.data[r, c])

    def set(self, value: float, r: int, c: int) -> None:
        self.data[r, c] = value

    def add(self, value: float, r: int, c: int) -> None:
        self.data[r, c] += value

    def init(self) -> None:
        self.data.fill(0.0)

    def set_size(self, nrows: int, ncols: int) -> None:
        self.data = np.empty((nrows, ncols), dtype=float)

    def clone(self) -> "Matrix":
        return Matrix.from_array(self.data.copy())

    def remove_row(self, row: int) -> None:
        self.data = np.delete(self.data, row, axis=0)

    def remove_column(self, col: int) -> None:
        self.data = np.delete(self.data, col, axis=1)

    def to_numpy(self) -> np.ndarray:
        return self.data.copy()

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self.data
        return self.data.astype(dtype)

    def __repr__(self) -> str:
        return f"Matrix({self.nrows}x{self.ncols})\n{self.data}"


class Vector:
    """A dense 1D float vector with an explicit size."""

    def __init__(self, size: int = 0):
        self.data = np.zeros(size, dtype=float)

    @classmethod
    def from_array(cls, values) -> "Vector":
        arr = np.array(values, dtype=float)
        if arr.ndim != 1:
            raise ValueError(f"Vector needs a 1D array, got shape {arr.shape}")
        V = cls()
        V.data = arr
        return V

    @property
    def size(self) -> int:
        return self.data.shape[0]

    def get(self, i: int) -> float:
        return float(self.data[i])

    def set(self, value: float, i: int) -> None:
        self.data[i] = value

    def add(self, value: float, i: int) -> None:
        self.data[i] += value

    def init(self) -> None:
        self.data.fill(0.0)

    def set_size(self, size: int) -> None:
        self.data = np.empty(size, dtype=float)

    def clone(self) -> "Vector":
        return Vector.from_array(self.data.copy())

    def remove_row(self, i: int) -> None:
        self.data = np.delete(self.data, i)

    def to_numpy(self) -> np.ndarray:
        return self.data.copy()

    def __len__(self) -> int:
        return self.size

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self.data
        return self.data.astype(dtype)

    def __repr__(self) -> str:
        return f"Vector({self.size})\n{self.data}"
