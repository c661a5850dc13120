# dsfem/kernel/dof.py
"""
DOF MANAGER: Restraint-Aware Degree of Freedom Numbering
========================================================

PURPOSE:
--------
This module maps every nodal DOF to an equation number in the global system.
Each node carries a DOF-index vector, one entry per local DOF:

    DOF_RESTRAINED (-1)   the DOF is fixed, it never enters the system
    DOF_PENDING     (0)   free, not numbered yet
    1, 2, 3, ...          global equation index (1-based)

Restraints write the -1 sentinel first. Numbering then walks the nodes in
model order, and each local DOF in order, handing out 1, 2, 3, ... to every
DOF that is not restrained. Restrained DOFs are dropped from the system
(static condensation), so the assembled size is

    ndof = (total nodal DOFs) - (restrained DOFs)

USAGE:
------
    dof = DOFManager()
    ndof = dof.number(model.get_nodes())     # writes indices into the nodes
    for element in model.get_elements():
        element.set_dofid()                  # gather from the numbered nodes

    dof.node_dofs(node)              # → [1, 2] or [-1, -1] ...
    dof.element_dof_map(element)     # → [-1, -1, -1, -1, 1, 2, 3, 4]
"""

import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)

DOF_PENDING = 0
DOF_RESTRAINED = -1


def is_free(global_id: int) -> bool:
    """True for a numbered (unrestrained) global DOF index."""
    return global_id > DOF_PENDING


@dataclass
class DOFManager:
    """
    Assigns sequential 1-based equation numbers to unrestrained DOFs.

    Attributes:
    -----------
    ndof : int
        Number of equations after the last call to number()
        (0 before numbering)
    """
    ndof: int = 0

    def number(self, nodes) -> int:
        """
        Number the free DOFs of nodes, in order, writing into each node.

        Parameters:
        -----------
        nodes : list of Node
            Nodes in model order, restraints already applied

        Returns:
        --------
        int
            Number of equations in the global system
        """
        count = 0
        for node in nodes:
            for local_id in range(1, node.get_ndof() + 1):
                if node.get_dof(local_id) == DOF_RESTRAINED:
                    continue
                count += 1
                node.set_dof(local_id, count)
        self.ndof = count
        logger.debug("Numbered %d free DOFs over %d nodes", count, len(nodes))
        return count

    @staticmethod
    def node_dofs(node) -> List[int]:
        """Global indices of every local DOF of a node."""
        return [node.get_dof(k) for k in range(1, node.get_ndof() + 1)]

    @staticmethod
    def element_dof_map(element) -> List[int]:
        """
        Global indices of an element's DOFs, in element DOF order.

        Restrained and pending entries are kept so positions line up with
        the rows of the element stiffness matrix.
        """
        return [int(round(v)) for v in element.get_dofid().get_array()]
