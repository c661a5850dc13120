# dsfem/kernel/inversion.py
"""
MATRIX INVERSION STRATEGIES
===========================

The static solve needs K^-1. Inversion sits behind a one-argument callable,

    invert(Matrix) -> Matrix

so the analysis never cares which algorithm produced the inverse.

Two strategies ship:

    "cpu"     Gauss-Jordan elimination with partial pivoting on [A | I].
              Reference implementation, pure numpy row operations.

    "lapack"  LU factorisation (scipy.linalg.lu_factor / lu_solve).
              Same partial-pivoting order, so its pivots are the Gauss-Jordan
              pivots and it rejects the same singular inputs.

Both raise DimensionError for non-square input and SingularityError when a
pivot magnitude falls below CONFIG.min_inversion_pivot.
"""

import logging
import warnings
from typing import Callable, Dict, Optional, Union

import numpy as np
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve

from ..config import CONFIG
from ..errors import DimensionError, SingularityError
from .matrix import Matrix

logger = logging.getLogger(__name__)

InversionStrategy = Callable[[Matrix], Matrix]


def _square_array(matrix: Matrix) -> np.ndarray:
    if not matrix.is_square():
        raise DimensionError(
            f"Matrix ({matrix.n}, {matrix.m}) not square, cannot be inverted"
        )
    return matrix.to_numpy()


def gauss_jordan_inverse(matrix: Matrix, min_pivot: Optional[float] = None) -> Matrix:
    """
    Invert a square matrix by Gauss-Jordan elimination.

    ALGORITHM:
    ----------
    aug = [A | I]                     (n x 2n)
    for each pivot column j:
        p = row in j..n-1 with the largest |aug[p, j]|
        if |aug[p, j]| < min_pivot: singular
        swap rows p and j
        row j /= aug[j, j]
        every other row i -= aug[i, j] * row j
    A^-1 = right half of aug

    Parameters:
    -----------
    matrix : Matrix
        Square matrix to invert (left untouched)
    min_pivot : float, optional
        Pivot magnitude threshold, defaults to CONFIG.min_inversion_pivot

    Returns:
    --------
    Matrix
        The inverse, same origin as the input

    Raises:
    -------
    DimensionError
        If the matrix is not square
    SingularityError
        If a pivot magnitude falls below min_pivot
    """
    a = _square_array(matrix)
    threshold = CONFIG.min_inversion_pivot if min_pivot is None else min_pivot
    n = a.shape[0]

    aug = np.zeros((n, 2 * n), dtype=float)
    aug[:, :n] = a
    aug[:, n:] = np.eye(n)

    for j in range(n):
        # Pivot on magnitude, not on the signed value
        p = j + int(np.argmax(np.abs(aug[j:, j])))
        pivot = aug[p, j]
        if abs(pivot) < threshold:
            logger.warning("Pivot %.3e at column %d is below %.1e", pivot, j, threshold)
            raise SingularityError(
                f"Matrix is singular or ill-conditioned: pivot {pivot:.3e} at column {j} "
                f"is below {threshold:.1e}"
            )

        if p != j:
            aug[[j, p]] = aug[[p, j]]

        aug[j] /= aug[j, j]
        factors = aug[:, j].copy()
        factors[j] = 0.0
        aug -= np.outer(factors, aug[j])

    return Matrix(n, n, aug[:, n:], origin=matrix.origin)


def lapack_inverse(matrix: Matrix, min_pivot: Optional[float] = None) -> Matrix:
    """
    Invert a square matrix through LAPACK LU factorisation.

    Drop-in replacement for gauss_jordan_inverse: the diagonal of U holds
    the partial-pivoting pivots, which are checked against the same
    threshold before solving A X = I.
    """
    a = _square_array(matrix)
    threshold = CONFIG.min_inversion_pivot if min_pivot is None else min_pivot
    n = a.shape[0]

    with warnings.catch_warnings():
        # Exactly singular factors are reported below as SingularityError
        warnings.simplefilter("ignore", LinAlgWarning)
        lu, piv = lu_factor(a)

    pivots = np.abs(np.diag(lu))
    j = int(np.argmin(pivots))
    if pivots[j] < threshold:
        logger.warning("Pivot %.3e at column %d is below %.1e", lu[j, j], j, threshold)
        raise SingularityError(
            f"Matrix is singular or ill-conditioned: pivot {lu[j, j]:.3e} at column {j} "
            f"is below {threshold:.1e}"
        )

    inv = lu_solve((lu, piv), np.eye(n))
    return Matrix(n, n, inv, origin=matrix.origin)


INVERSION_STRATEGIES: Dict[str, InversionStrategy] = {
    "cpu": gauss_jordan_inverse,
    "lapack": lapack_inverse,
}


def get_inversion_strategy(strategy: Union[str, InversionStrategy, None] = None) -> InversionStrategy:
    """
    Resolve a strategy name (or callable) to an inversion function.

    None picks CONFIG.default_inversion.
    """
    if strategy is None:
        strategy = CONFIG.default_inversion
    if callable(strategy):
        return strategy
    try:
        return INVERSION_STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown inversion strategy '{strategy}'. "
            f"Available: {sorted(INVERSION_STRATEGIES)}"
        ) from None


def is_inverse(matrix: Matrix, inverse: Matrix, tol: Optional[float] = None) -> bool:
    """True when inverse * matrix is the identity within tol."""
    tol = CONFIG.inverse_check_tolerance if tol is None else tol
    if not matrix.is_square() or inverse.shape != matrix.shape:
        return False
    product = (inverse * matrix).to_numpy()
    return bool(np.all(np.abs(product - np.eye(matrix.n)) < tol))
