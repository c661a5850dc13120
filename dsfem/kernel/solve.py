# dsfem/kernel/solve.py
"""Linear system solve through a pluggable inversion strategy."""

import logging
from typing import Union

from ..errors import DimensionError
from .inversion import InversionStrategy, get_inversion_strategy
from .matrix import Matrix

logger = logging.getLogger(__name__)


def solve_linear(
    K: Matrix,
    F: Matrix,
    inversion: Union[str, InversionStrategy, None] = None
) -> Matrix:
    """
    Solve K·u = F as u = K⁻¹·F.

    Args:
        K: Global stiffness matrix (ndof x ndof), restrained DOFs already removed
        F: Global force vector (ndof)
        inversion: Strategy name ("cpu", "lapack"), callable, or None for the default

    Returns:
        u: Displacement vector (ndof x 1)

    Raises:
        DimensionError: If K is not square or F does not match it
        SingularityError: If the inversion strategy finds a pivot below threshold
    """
    if not K.is_square():
        raise DimensionError(f"Stiffness matrix ({K.n}, {K.m}) is not square")
    if not F.is_vector() or F.length() != K.n:
        raise DimensionError(
            f"Force vector of length {F.length()} doesn't match stiffness size {K.n}"
        )

    invert = get_inversion_strategy(inversion)
    K_inv = invert(K)

    # Column orientation regardless of how F was built
    f = F if F.m == 1 else F.transpose()
    u = K_inv * f
    u.name = "u"
    logger.debug("Solved %d x %d system", K.n, K.n)
    return u
