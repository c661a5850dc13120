# dsfem/model/element.py
"""
ELEMENT: What the Analysis Needs From Any Element
=================================================

The static analysis only ever asks an element for three things:

1. DOF gather     set_dofid() / get_dofid(): global indices of its DOFs,
                  read from the numbered nodes
2. Stiffness      get_stiffness_global(): square matrix in DOF order
3. Resistant force
                  get_force_local(), get_force_global(),
                  add_force_to_reaction()

Element kinds subclass Element, set NODE_DOFS (which local DOFs of each
node they connect to) and fill in the stiffness matrices. Elements without
a local/global rotation (axis-aligned membranes) can use everything here
as is.
"""

from typing import List, Sequence, Tuple

from ..errors import DOFError
from ..kernel.matrix import Matrix
from .component import ModelComponent
from .node import Node


class Element(ModelComponent):
    """
    Base element: node references, DOF map, stiffness, equivalent forces.

    Parameters:
    -----------
    tag : str
        Unique identifier in the model
    nodes : sequence of Node
        Connected nodes, in element order. The element keeps references,
        the model owns the nodes.
    """

    # Local DOF ids (1-based) each node contributes to the element
    NODE_DOFS: Tuple[int, ...] = (1, 2)

    def __init__(self, tag: str, nodes: Sequence[Node]):
        super().__init__(tag)
        self._nodes: List[Node] = list(nodes)
        self._ndof = len(self._nodes) * len(self.NODE_DOFS)
        self._dofid = Matrix.vector(self._ndof)
        self._feq = Matrix.vector(self._ndof)
        self._stiffness_local = Matrix(self._ndof, self._ndof, name="k_local")
        self._stiffness_global = Matrix(self._ndof, self._ndof, name="k_global")

    # Topology ----------------------------------------------------------

    def get_nodes(self) -> List[Node]:
        return list(self._nodes)

    def get_node_number(self) -> int:
        return len(self._nodes)

    def get_ndof(self) -> int:
        return self._ndof

    # DOF gather --------------------------------------------------------

    def set_dofid(self) -> None:
        """Gather global DOF indices from the nodes, in element DOF order."""
        values = [node.get_dof(k) for node in self._nodes for k in self.NODE_DOFS]
        self._dofid = Matrix(self._ndof, 1, values)

    def get_dofid(self) -> Matrix:
        return self._dofid.clone()

    # Stiffness ---------------------------------------------------------

    def get_stiffness_local(self) -> Matrix:
        return self._stiffness_local.clone()

    def get_stiffness_global(self) -> Matrix:
        return self._stiffness_global.clone()

    # Forces ------------------------------------------------------------

    def get_element_displacements(self) -> Matrix:
        """Nodal displacements in element DOF order."""
        values = [node.get_displacement(k) for node in self._nodes for k in self.NODE_DOFS]
        return Matrix(self._ndof, 1, values)

    def add_equivalent_force_node(self, node_number: int, force: Matrix) -> None:
        """
        Accumulate an equivalent nodal force at local node node_number (1-based).

        force holds one component per entry of NODE_DOFS.
        """
        per_node = len(self.NODE_DOFS)
        if node_number < 1 or node_number > len(self._nodes):
            raise DOFError(
                f"Element {self.tag}: node number {node_number} outside 1..{len(self._nodes)}"
            )
        if not force.is_vector() or force.length() != per_node:
            raise DOFError(
                f"Element {self.tag}: equivalent force needs {per_node} components"
            )
        base = (node_number - 1) * per_node
        for k, value in enumerate(force.get_array()):
            self._feq.set(base + k, self._feq.get(base + k) + value)

    def get_equivalent_forces(self) -> Matrix:
        return self._feq.clone()

    def get_force_local(self) -> Matrix:
        """Resistant force k_local · d from the current nodal displacements."""
        return self._stiffness_local * self.get_element_displacements()

    def get_force_global(self) -> Matrix:
        """Element end forces: resistant force minus equivalent nodal forces."""
        return self.get_force_local() - self._feq

    def add_force_to_reaction(self) -> None:
        """Push each node's slice of the resistant force into its reactions."""
        force = self.get_force_local().get_array()
        per_node = len(self.NODE_DOFS)
        for i, node in enumerate(self._nodes):
            contribution = Matrix.vector(node.get_ndof())
            for k, local_id in enumerate(self.NODE_DOFS):
                contribution.set(local_id - 1, force[i * per_node + k])
            node.apply_element_stress(contribution)

    def properties(self) -> List[Tuple[str, str]]:
        """Label/value pairs describing the element, for reports."""
        return [("Nodes", ", ".join(n.tag for n in self._nodes))]

    def reset(self) -> None:
        """Drop the DOF map and any equivalent forces."""
        self._dofid.fill_zeros()
        self._feq.fill_zeros()
