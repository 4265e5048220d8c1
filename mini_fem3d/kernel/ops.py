# mini_fem3d/kernel/ops.py
"""
DENSE ALGEBRA: Products, Determinants and the Cholesky Inverse
==============================================================

PURPOSE:
--------
The linear-algebra kernel used by the local system builder and by the
reduced system solve:

    transpose, product_matrix_by_matrix, product_scalar_by_matrix,
    product_matrix_by_vector, determinant, get_minor, cofactor_matrix,
    calculate_inverse

Every function returns a new Matrix/Vector and leaves its inputs alone.

THE CHOLESKY INVERSE:
---------------------
For a symmetric positive definite A:

    1. A = L·Lᵀ                 (Cholesky recurrence, L lower triangular)
    2. Y = L⁻¹                  (forward substitution)
    3. X = (Lᵀ)⁻¹·Y = A⁻¹       (back substitution)

A pivot A[j,j] - Σ L[j,k]² that is not strictly positive means A is not
positive definite in that direction. Instead of failing, the diagonal
entry L[j,j] is set to a small epsilon, so the effective pivot is
epsilon². The solve stays alive on singular or degenerate systems but
the answer there is an approximation, not a solution: this is a lossy
fallback, not a robust general-purpose solver.
"""

import logging
from typing import Optional

import numpy as np

from ..config import DEGENERACY_EPSILON
from .matrix import Matrix, Vector

logger = logging.getLogger(__name__)


class DimensionMismatchError(ValueError):
    """Raised when operand shapes are incompatible for a product."""
    pass


def transpose(M: Matrix) -> Matrix:
    return Matrix.from_array(M.data.T.copy())


def product_matrix_by_matrix(A: Matrix, B: Matrix) -> Matrix:
    """
    R = A·B.

    Raises:
        DimensionMismatchError: if A.ncols != B.nrows
    """
    if A.ncols != B.nrows:
        raise DimensionMismatchError(
            f"Cannot multiply {A.nrows}x{A.ncols} by {B.nrows}x{B.ncols}: "
            f"inner dimensions {A.ncols} and {B.nrows} differ"
        )
    return Matrix.from_array(A.data @ B.data)


def product_scalar_by_matrix(scalar: float, M: Matrix) -> Matrix:
    return Matrix.from_array(scalar * M.data)


def product_matrix_by_vector(M: Matrix, V: Vector) -> Vector:
    """
    R = M·V, each entry the dot product of a row of M with V.

    Raises:
        DimensionMismatchError: if M.ncols != V.size
    """
    if M.ncols != V.size:
        raise DimensionMismatchError(
            f"Cannot multiply {M.nrows}x{M.ncols} matrix by vector of size {V.size}"
        )
    return Vector.from_array(M.data @ V.data)


def determinant(M: Matrix) -> float:
    """
    Determinant of a square matrix.

    Sizes 1-3 use closed forms. Larger sizes use Laplace (cofactor)
    expansion along the first row, which is recursive and exponential in
    cost. Fine for the 4×4 element matrices; never use it on the global
    system.
    """
    n = M.ncols
    if M.nrows != n:
        raise DimensionMismatchError(f"Determinant of non-square {M.nrows}x{n} matrix")

    a = M.data
    if n == 0:
        return 1.0
    if n == 1:
        return float(a[0, 0])
    if n == 2:
        return float(a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0])
    if n == 3:
        return float(
            a[0, 0] * a[1, 1] * a[2, 2]
            - a[0, 0] * a[1, 2] * a[2, 1]
            - a[0, 1] * a[1, 0] * a[2, 2]
            + a[0, 1] * a[1, 2] * a[2, 0]
            + a[0, 2] * a[1, 0] * a[2, 1]
            - a[0, 2] * a[1, 1] * a[2, 0]
        )

    acc = 0.0
    for c in range(n):
        sign = 1.0 if c % 2 == 0 else -1.0
        acc += sign * a[0, c] * get_minor(M, 0, c)
    return acc


def get_minor(M: Matrix, r: int, c: int) -> float:
    """Determinant of M with row r and column c removed."""
    sub = M.clone()
    sub.remove_row(r)
    sub.remove_column(c)
    return determinant(sub)


def cofactor_matrix(M: Matrix) -> Matrix:
    """C[r, c] = (-1)^(r+c) · minor(r, c)."""
    n = M.nrows
    C = Matrix(n, n)
    for r in range(n):
        for c in range(n):
            sign = 1.0 if (r + c) % 2 == 0 else -1.0
            C.set(sign * get_minor(M, r, c), r, c)
    return C


def calculate_inverse(A: Matrix, n: Optional[int] = None, epsilon: float = DEGENERACY_EPSILON) -> Matrix:
    """
    Invert a symmetric positive (semi-)definite matrix via Cholesky.

    Args:
        A: Matrix to invert (only its leading n×n block is read)
        n: Size of the system (default: A.nrows)
        epsilon: Value of L[j, j] where the pivot is not positive
            (the effective pivot is then epsilon²)

    Returns:
        X: Approximation of A⁻¹ (exact up to rounding when A is SPD)
    """
    if n is None:
        n = A.nrows
    a = A.data

    # Step 1: A = L·Lᵀ
    L = np.zeros((n, n), dtype=float)
    substituted = 0
    for j in range(n):
        pivot = a[j, j] - L[j, :j] @ L[j, :j]
        # `not >` also catches NaN
        if not pivot > 0:
            logger.debug("Non-positive Cholesky pivot %.3e at row %d, setting L[j, j] to %.1e",
                         pivot, j, epsilon)
            L[j, j] = epsilon
            substituted += 1
        else:
            L[j, j] = np.sqrt(pivot)

        for i in range(j + 1, n):
            L[i, j] = (a[i, j] - L[i, :j] @ L[j, :j]) / L[j, j]

    if substituted:
        logger.warning(
            "Matrix is not positive definite: %d of %d diagonal entries of L set to %.1e; "
            "the inverse is approximate", substituted, n, epsilon
        )

    # Step 2: Y = L⁻¹ (lower triangular)
    Y = np.zeros((n, n), dtype=float)
    for i in range(n):
        Y[i, i] = 1.0 / L[i, i]
        for j in range(i):
            Y[i, j] = -(L[i, j:i] @ Y[j:i, j]) / L[i, i]

    # Step 3: Lᵀ·X = Y, solved bottom-up
    X = np.zeros((n, n), dtype=float)
    for i in range(n - 1, -1, -1):
        X[i, :] = (Y[i, :] - L[i + 1:, i] @ X[i + 1:, :]) / L[i, i]

    return Matrix.from_array(X)
