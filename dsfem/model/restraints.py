# dsfem/model/restraints.py
"""
Support conditions.

A restraint marks local DOFs of one node as fixed by writing the
DOF_RESTRAINED sentinel into the node's DOF-index vector. Numbering later
skips those entries, so fixed DOFs never reach the global system.
"""

import logging
from typing import Iterable, List, Optional

from ..errors import DOFError
from ..kernel.dof import DOF_RESTRAINED
from .component import ModelComponent
from .node import Node

logger = logging.getLogger(__name__)


class Restraint(ModelComponent):
    """Anything that constrains DOFs before numbering."""

    def apply(self) -> None:
        raise NotImplementedError


class RestraintNode(Restraint):
    """
    Restrain a set of local DOFs of a node.

    Parameters:
    -----------
    tag : str
        Unique identifier
    node : Node
        Restrained node
    dofs : iterable of int, optional
        Local DOF ids (1-based) to fix. More can be added later with
        add_dofid() or add_all().

    Examples:
    ---------
    >>> r = RestraintNode("R1", node, dofs=[1, 2])    # pinned
    >>> r = RestraintNode("R2", node); r.add_dofid(2)  # roller
    """

    def __init__(self, tag: str, node: Node, dofs: Optional[Iterable[int]] = None):
        super().__init__(tag)
        self._node = node
        self._dofs: List[int] = []
        for local_id in dofs or ():
            self.add_dofid(local_id)

    def get_node(self) -> Node:
        return self._node

    def get_restrained_dofs(self) -> List[int]:
        return list(self._dofs)

    def add_dofid(self, local_id: int) -> None:
        """Fix one more local DOF (1-based). Repeats are ignored."""
        local_id = int(local_id)
        if local_id < 1 or local_id > self._node.get_ndof():
            raise DOFError(
                f"Restraint {self.tag}: DOF {local_id} outside 1..{self._node.get_ndof()} "
                f"of node {self._node.tag}"
            )
        if local_id not in self._dofs:
            self._dofs.append(local_id)

    def add_all(self) -> None:
        """Fix every DOF of the node."""
        for local_id in range(1, self._node.get_ndof() + 1):
            self.add_dofid(local_id)

    def apply(self) -> None:
        for local_id in self._dofs:
            self._node.set_dof(local_id, DOF_RESTRAINED)
        logger.debug("Restraint %s fixes DOFs %s of node %s", self.tag, self._dofs, self._node.tag)
