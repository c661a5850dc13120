# dsfem/model/node.py
"""
NODE: A Point With Degrees of Freedom
=====================================

A node owns four vectors of length ndof (2 for a plane node, 3 in space):

    coordinates     position (x, y[, z])
    dofid           global equation index per local DOF (see kernel.dof)
    displacements   solved displacement per local DOF
    reactions       out-of-balance force accumulator
    loads           total applied external load

Local DOF ids are 1-based: 1 = ux, 2 = uy, 3 = uz.

Loads and element forces meet in the reaction accumulator:

    apply_load(P)             reaction -= P
    apply_element_stress(f)   reaction += f

After a solve, every element adds its resistant force, so the accumulator
holds K·u - P: about zero at free DOFs and the support reaction at
restrained ones.
"""

from typing import Optional

from ..errors import DimensionError, DOFError
from ..kernel.dof import DOF_PENDING
from ..kernel.matrix import Matrix
from .component import ModelComponent


class Node(ModelComponent):
    """
    Structural node in 2D or 3D.

    Parameters:
    -----------
    tag : str
        Unique identifier in the model
    x, y : float
        Coordinates
    z : float, optional
        Third coordinate; giving it makes a 3-DOF node

    Examples:
    ---------
    >>> n = Node("N1", 0.0, 2.0)
    >>> n.get_ndof()
    2
    >>> n.get_dof(1)
    0
    """

    def __init__(self, tag: str, x: float, y: float, z: Optional[float] = None):
        super().__init__(tag)
        coords = [x, y] if z is None else [x, y, z]
        self._ndof = len(coords)
        self._coords = Matrix.column(coords)
        self._dofid = Matrix.vector(self._ndof)
        self._displ = Matrix.vector(self._ndof)
        self._reaction = Matrix.vector(self._ndof)
        self._loads = Matrix.vector(self._ndof)

    def get_ndof(self) -> int:
        return self._ndof

    # Coordinates ---------------------------------------------------------

    @property
    def x(self) -> float:
        return self._coords.get(0)

    @property
    def y(self) -> float:
        return self._coords.get(1)

    @property
    def z(self) -> float:
        if self._ndof == 2:
            raise DimensionError(f"Node {self.tag}: z-coordinate does not exist in a 2D node")
        return self._coords.get(2)

    def get_coordinates(self) -> Matrix:
        return self._coords.clone()

    # Validation ------------------------------------------------------------

    def _check_local(self, local_id: int) -> int:
        if local_id < 1 or local_id > self._ndof:
            raise DOFError(
                f"Node {self.tag}: local DOF {local_id} outside 1..{self._ndof}"
            )
        return local_id - 1

    def _check_vector(self, vector: Matrix, what: str) -> None:
        if not vector.is_vector():
            raise DimensionError(f"Node {self.tag}: {what} must be a vector")
        if vector.length() != self._ndof:
            raise DimensionError(
                f"Node {self.tag}: {what} has {vector.length()} components, node has {self._ndof} DOFs"
            )

    @staticmethod
    def _column(vector: Matrix) -> Matrix:
        return vector.clone() if vector.m == 1 else vector.transpose()

    # DOF indices -----------------------------------------------------------

    def get_dof(self, local_id: int) -> int:
        return int(round(self._dofid.get(self._check_local(local_id))))

    def set_dof(self, local_id: int, global_id: int) -> None:
        self._dofid.set(self._check_local(local_id), global_id)

    def set_dofid(self, dofid: Matrix) -> None:
        self._check_vector(dofid, "DOF-index vector")
        self._dofid = Matrix(self._ndof, 1, dofid.get_array())

    def get_dofid(self) -> Matrix:
        return self._dofid.clone()

    # Displacements ---------------------------------------------------------

    def get_displacement(self, local_id: int) -> float:
        return self._displ.get(self._check_local(local_id))

    def set_displacement(self, local_id: int, value: float) -> None:
        self._displ.set(self._check_local(local_id), value)

    def set_displacements(self, displ: Matrix) -> None:
        self._check_vector(displ, "displacement vector")
        self._displ = Matrix(self._ndof, 1, displ.get_array())

    def get_displacements(self) -> Matrix:
        return self._displ.clone()

    # Loads and reactions ---------------------------------------------------

    def apply_load(self, load: Matrix) -> None:
        """Add an external load: recorded in loads, subtracted from reactions."""
        self._check_vector(load, "load vector")
        load = self._column(load)
        self._loads += load
        self._reaction -= load

    def apply_element_stress(self, force: Matrix) -> None:
        """Add an element resistant force into the reaction accumulator."""
        self._check_vector(force, "element force")
        self._reaction += self._column(force)

    def get_load_results(self) -> Matrix:
        return self._loads.clone()

    def get_reactions(self) -> Matrix:
        return self._reaction.clone()

    def get_reaction(self, local_id: int) -> float:
        return self._reaction.get(self._check_local(local_id))

    def reset(self) -> None:
        """Back to the freshly built state: pending DOFs, no loads, no results."""
        self._dofid.fill(DOF_PENDING)
        self._displ.fill_zeros()
        self._reaction.fill_zeros()
        self._loads.fill_zeros()
