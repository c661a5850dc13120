# dsfem/kernel/assemble.py
"""
ASSEMBLY: Direct-Stiffness Scatter-Add
======================================

PURPOSE:
--------
This module adds element contributions into the global system. Assembly
doesn't care about element TYPE. It just needs:

- The number of equations (ndof)
- For each contribution: its DOF map and its matrix (or vector)

DOF maps hold 1-based global indices straight from the numbered nodes.
Entries that point at restrained (-1) or unnumbered (0) DOFs are skipped,
which is how restrained DOFs drop out of the system.

USAGE:
------
    contributions = []
    for element in model.get_elements():
        dof_map = DOFManager.element_dof_map(element)   # e.g. [-1, -1, 1, 2, ...]
        contributions.append((dof_map, element.get_stiffness_global()))

    K = assemble_global_K(ndof, contributions)
"""

import logging
from typing import List, Sequence, Tuple, Union

import numpy as np

from ..errors import DimensionError, DOFError
from .dof import is_free
from .matrix import Matrix

logger = logging.getLogger(__name__)

ArrayLike = Union[Matrix, np.ndarray]


def _as_array(value: ArrayLike) -> np.ndarray:
    if isinstance(value, Matrix):
        return value.to_numpy()
    return np.asarray(value, dtype=float)


def _check_map(dof_map: Sequence[int], ndof: int) -> None:
    for gid in dof_map:
        if gid > ndof:
            raise DOFError(f"Global DOF {gid} exceeds system size {ndof}")


def assemble_global_K(
    ndof: int,
    contributions: List[Tuple[Sequence[int], ArrayLike]]
) -> Matrix:
    """
    Assemble the global stiffness matrix from element contributions.

    ALGORITHM:
    ----------
    K = zeros(ndof × ndof)
    for each element:
        for each (r, s) in element ke:
            i = dof_map[r]
            j = dof_map[s]
            if i and j are free:
                K[i, j] += ke[r, s]          (1-based i, j)

    Parameters:
    -----------
    ndof : int
        Number of equations (free DOFs)
    contributions : list of (dof_map, ke)
        dof_map holds one global index per element DOF, ke is the square
        element stiffness matrix in global coordinates

    Returns:
    --------
    Matrix
        Global stiffness matrix, ndof × ndof
    """
    K = np.zeros((ndof, ndof), dtype=float)

    for dof_map, ke in contributions:
        ke = _as_array(ke)
        n_element_dofs = len(dof_map)
        if ke.shape != (n_element_dofs, n_element_dofs):
            raise DimensionError(
                f"Element ke shape {ke.shape} doesn't match dof_map length {n_element_dofs}"
            )
        _check_map(dof_map, ndof)

        for r in range(n_element_dofs):
            i = dof_map[r]
            if not is_free(i):
                continue
            for s in range(n_element_dofs):
                j = dof_map[s]
                if is_free(j):
                    K[i - 1, j - 1] += ke[r, s]

    return Matrix(ndof, ndof, K, name="K")


def assemble_global_F(
    ndof: int,
    contributions: List[Tuple[Sequence[int], ArrayLike]]
) -> Matrix:
    """
    Assemble the global force vector.

    Same scatter-add as assemble_global_K, for vectors: contributions are
    (dof_map, fe) pairs, with fe holding one force per mapped DOF.
    """
    F = np.zeros(ndof, dtype=float)

    for dof_map, fe in contributions:
        fe = _as_array(fe).ravel()
        if fe.shape != (len(dof_map),):
            raise DimensionError(
                f"Force vector length {fe.size} doesn't match dof_map length {len(dof_map)}"
            )
        _check_map(dof_map, ndof)

        for r, i in enumerate(dof_map):
            if is_free(i):
                F[i - 1] += fe[r]

    return Matrix(ndof, 1, F, name="F")
