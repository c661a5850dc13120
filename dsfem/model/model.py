# dsfem/model/model.py
"""
MODEL: Container for Nodes, Elements, Restraints and Load Patterns
==================================================================

The model owns every structural entity. Elements, restraints and loads
only hold references to nodes that the model owns.

LIFECYCLE:
----------
    model = Model(ndim=2, ndof=2)
    model.add_nodes([n1, n2, n3, n4])
    model.add_elements([mem])
    model.add_restraints([r1, r2])
    model.add_load_patterns([pattern])

    StaticAnalysis(model).analyze()   # restrains, loads, solves, update()s

    model.save_results("out/results.txt")
    model.clear()                     # back to the unloaded, unnumbered state

update(u) is where results come back: every node picks its displacements
out of u through its DOF indices, then every element pushes its resistant
force into the node reactions.
"""

import logging
from typing import Dict, Iterable, List, Optional, TypeVar

from ..errors import DOFError
from ..kernel.dof import is_free
from ..kernel.matrix import Matrix
from .component import ModelComponent
from .element import Element
from .loads import LoadPattern
from .node import Node
from .restraints import Restraint

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=ModelComponent)


class Model:
    """
    Structural model.

    Parameters:
    -----------
    ndim : int
        Spatial dimension, 1..3
    ndof : int
        Nominal DOFs per node (the assembled system size comes from numbering)
    """

    def __init__(self, ndim: int, ndof: int):
        if ndim < 1 or ndim > 3:
            raise ValueError(f"Dimension number must be between 1 and 3, got {ndim}")
        if ndof < 1:
            raise ValueError(f"DOF per node must be at least 1, got {ndof}")
        self.ndim = int(ndim)
        self.ndof = int(ndof)

        self._nodes: List[Node] = []
        self._elements: List[Element] = []
        self._restraints: List[Restraint] = []
        self._load_patterns: List[LoadPattern] = []

    # Collections -----------------------------------------------------------

    @staticmethod
    def _extend(target: List[T], items: Iterable[T], kind: str) -> None:
        tags = {item.tag for item in target}
        for item in items:
            if item.tag in tags:
                raise ValueError(f"Duplicate {kind} tag '{item.tag}'")
            tags.add(item.tag)
            target.append(item)

    def add_nodes(self, nodes: Iterable[Node]) -> None:
        self._extend(self._nodes, nodes, "node")

    def add_elements(self, elements: Iterable[Element]) -> None:
        self._extend(self._elements, elements, "element")

    def add_restraints(self, restraints: Iterable[Restraint]) -> None:
        self._extend(self._restraints, restraints, "restraint")

    def add_load_patterns(self, load_patterns: Iterable[LoadPattern]) -> None:
        self._extend(self._load_patterns, load_patterns, "load pattern")

    def get_nodes(self) -> List[Node]:
        return list(self._nodes)

    def get_elements(self) -> List[Element]:
        return list(self._elements)

    def get_restraints(self) -> List[Restraint]:
        return list(self._restraints)

    def get_load_patterns(self) -> List[LoadPattern]:
        return list(self._load_patterns)

    def get_node(self, tag: str) -> Node:
        for node in self._nodes:
            if node.tag == tag:
                return node
        raise KeyError(f"Node '{tag}' not found")

    def get_element(self, tag: str) -> Element:
        for element in self._elements:
            if element.tag == tag:
                return element
        raise KeyError(f"Element '{tag}' not found")

    def total_dofs(self) -> int:
        """Sum of every node's DOF count, before restraints."""
        return sum(node.get_ndof() for node in self._nodes)

    # Analysis hooks --------------------------------------------------------

    def apply_restraints(self) -> None:
        for restraint in self._restraints:
            restraint.apply()

    def apply_load_patterns(self, factor: float = 1.0) -> None:
        for pattern in self._load_patterns:
            pattern.apply(factor)

    def update(self, u: Matrix) -> None:
        """
        Write the solved displacements into the model.

        Parameters:
        -----------
        u : Matrix
            Displacement vector indexed by global DOF (entry gid-1 belongs
            to global index gid). Restrained DOFs keep zero displacement.
        """
        values = u.get_array()
        for node in self._nodes:
            for local_id in range(1, node.get_ndof() + 1):
                gid = node.get_dof(local_id)
                if not is_free(gid):
                    node.set_displacement(local_id, 0.0)
                    continue
                if gid > values.size:
                    raise DOFError(
                        f"Node {node.tag}: global DOF {gid} exceeds displacement vector length {values.size}"
                    )
                node.set_displacement(local_id, values[gid - 1])

        for element in self._elements:
            element.add_force_to_reaction()
        logger.debug("Updated %d nodes and %d elements", len(self._nodes), len(self._elements))

    def clear(self) -> None:
        """Drop DOF numbering, loads and results from every node and element."""
        for node in self._nodes:
            node.reset()
        for element in self._elements:
            element.reset()

    # Output ------------------------------------------------------------------

    def save_results(self, path, npoints: Optional[int] = None) -> None:
        from ..report import save_results
        save_results(self, path, npoints)

    def summary(self) -> Dict[str, int]:
        return {
            "ndim": self.ndim,
            "ndof": self.ndof,
            "nodes": len(self._nodes),
            "elements": len(self._elements),
            "restraints": len(self._restraints),
            "load_patterns": len(self._load_patterns),
        }

    def __repr__(self) -> str:
        return (
            f"Model(ndim={self.ndim}, ndof={self.ndof}, nodes={len(self._nodes)}, "
            f"elements={len(self._elements)})"
        )
