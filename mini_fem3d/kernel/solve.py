# mini_fem3d/kernel/solve.py
"""Reduced system solve: Cholesky inverse (default) or a LAPACK reference."""

import logging

import numpy as np
import scipy.linalg

from ..config import DEGENERACY_EPSILON, SOLVE_METHODS
from .matrix import Matrix, Vector
from .ops import DimensionMismatchError, calculate_inverse, product_matrix_by_vector

logger = logging.getLogger(__name__)


def solve_system(
    K: Matrix,
    b: Vector,
    method: str = "cholesky_inverse",
    epsilon: float = DEGENERACY_EPSILON,
    cond_limit: float = 1e12
) -> Vector:
    """
    Solve the condensed system K·X = b.

    Args:
        K: Reduced (Dirichlet-free) matrix, n × n, symmetric
        b: Reduced right-hand side, size n
        method: 'cholesky_inverse' computes K⁻¹ with the hand-written
            kernel and multiplies; 'lapack' calls scipy.linalg.solve as a
            reference for well-posed systems
        epsilon: Cholesky diagonal used where a pivot is not positive
        cond_limit: Condition number above which a warning is logged.
            A matrix with NaN/inf entries is only logged and always goes
            through the Cholesky inverse.

    Returns:
        X: Reduced solution, size n

    Raises:
        DimensionMismatchError: If K is not square or b does not match K
        ValueError: For an unknown method
    """
    if method not in SOLVE_METHODS:
        raise ValueError(f"Unknown solve method '{method}'. Choose one of: {', '.join(SOLVE_METHODS)}")

    n = K.nrows
    if K.ncols != n or b.size != n:
        raise DimensionMismatchError(
            f"Reduced system is inconsistent: K is {K.nrows}x{K.ncols}, b has {b.size} entries"
        )
    if n == 0:
        return Vector(0)

    # Ill-conditioning is reported, not rejected: degenerate meshes are
    # solved through the epsilon fallback.
    finite = bool(np.isfinite(K.data).all())
    if not finite:
        logger.warning("Reduced system has non-finite entries; results are not reliable")
    else:
        cond = np.linalg.cond(K.data)
        if not np.isfinite(cond) or cond > cond_limit:
            logger.warning("Reduced system is ill-conditioned (cond=%.2e); results may be inaccurate", cond)

    # LAPACK rejects NaN/inf input and non positive definite K, the Cholesky
    # inverse does not
    if method == "lapack" and finite and np.isfinite(b.data).all():
        logger.info("Solving %dx%d system with LAPACK", n, n)
        try:
            return Vector.from_array(scipy.linalg.solve(K.data, b.data, assume_a="pos"))
        except scipy.linalg.LinAlgError as e:
            logger.warning("LAPACK solve failed (%s); falling back to the Cholesky inverse", e)

    logger.info("Calculating inverse of %dx%d global matrix", n, n)
    K_inv = calculate_inverse(K, n, epsilon=epsilon)
    return product_matrix_by_vector(K_inv, b)
