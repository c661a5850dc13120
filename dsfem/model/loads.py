# dsfem/model/loads.py
"""
LOADS: Nodal Loads, Membrane Edge Loads and Load Patterns
=========================================================

Every load exposes apply(factor). Applying writes into the model state:

    LoadNode                  node.apply_load(factor · P)
    LoadMembraneDistributed   membrane Feq += f_eq,  edge nodes apply_load(f_eq)

Load patterns group loads and apply them together. The static analysis
later reads the node reaction accumulators (which loads decrement) to
build the global force vector.

DISTRIBUTED EDGE LOAD:
----------------------
A line load on the edge between adjacent local nodes i → j of a membrane,
varying linearly from q1 at s1 = dist1·L to q2 at s2 = dist2·L (s measured
from node i, zero elsewhere). Edges are axis-aligned, so the load acts
along the global axis normal to the edge (y for a horizontal edge, x for a
vertical one), positive toward +axis.

Equivalent nodal forces come from the linear edge shape functions:

    f_i = ∫ q(s) (1 - s/L) ds        f_j = ∫ q(s) (s/L) ds

The integrand is quadratic in s, so 2-point Gauss-Legendre is exact.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..config import CONFIG
from ..errors import DimensionError
from ..kernel.matrix import Matrix
from .component import ModelComponent
from .membrane import Membrane
from .node import Node

logger = logging.getLogger(__name__)

_GAUSS_POINTS, _GAUSS_WEIGHTS = np.polynomial.legendre.leggauss(2)


class Load(ModelComponent):
    """Anything that can be applied to the model with a load factor."""

    def apply(self, factor: float = 1.0) -> None:
        raise NotImplementedError


class LoadNode(Load):
    """
    Point load on a node.

    Parameters:
    -----------
    tag : str
        Unique identifier
    node : Node
        Loaded node
    load : Matrix
        Load vector, one component per node DOF
    """

    def __init__(self, tag: str, node: Node, load: Matrix):
        super().__init__(tag)
        if not load.is_vector() or load.length() != node.get_ndof():
            raise DimensionError(
                f"Load {tag}: vector has {load.length()} components, node {node.tag} "
                f"has {node.get_ndof()} DOFs"
            )
        self._node = node
        self._load = Matrix.column(load.get_array())

    def get_node(self) -> Node:
        return self._node

    def get_load(self) -> Matrix:
        return self._load.clone()

    def apply(self, factor: float = 1.0) -> None:
        self._node.apply_load(self._load * factor)


def edge_equivalent_forces(length: float, load1: float, s1: float,
                           load2: float, s2: float) -> Tuple[float, float]:
    """
    Equivalent end forces of a linear line load on a two-node edge.

    Parameters:
    -----------
    length : float
        Edge length L
    load1, load2 : float
        Load intensity at s1 and s2 (force per unit length)
    s1, s2 : float
        Positions along the edge, 0 <= s1 < s2 <= L

    Returns:
    --------
    (f_start, f_end) : tuple of float
        Forces at the edge's start and end node

    Examples:
    ---------
    >>> edge_equivalent_forces(4.0, 10.0, 0.0, 10.0, 4.0)
    (20.0, 20.0)
    """
    half = (s2 - s1) / 2.0
    mid = (s2 + s1) / 2.0
    f_start = 0.0
    f_end = 0.0
    for xi, w in zip(_GAUSS_POINTS, _GAUSS_WEIGHTS):
        s = mid + half * xi
        q = load1 + (load2 - load1) * (s - s1) / (s2 - s1)
        f_start += w * half * q * (1.0 - s / length)
        f_end += w * half * q * (s / length)
    return float(f_start), float(f_end)


class LoadMembraneDistributed(Load):
    """
    Linearly varying line load on one edge of a membrane.

    Local node numbering:

        4 ------------- 3
        |               |
        1 ------------- 2

    Only the edges 1-2, 2-3, 3-4 and 4-1 (either direction) are allowed.

    Parameters:
    -----------
    tag : str
        Unique identifier
    membrane : Membrane
        Loaded element
    node1, node2 : int
        Local node numbers (1..4) of the edge; distances run from node1
    load1, load2 : float
        Intensity at dist1 and dist2
    dist1, dist2 : float
        Fractions of the edge length, 0 <= dist1 < 1, 0 < dist2 <= 1

    Raises:
    -------
    ValueError
        For diagonals, repeated or out-of-range nodes, or bad distances
    """

    def __init__(self, tag: str, membrane: Membrane, node1: int, node2: int,
                 load1: float, dist1: float, load2: float, dist2: float):
        super().__init__(tag)

        if abs(node2 - node1) == 2:
            raise ValueError(f"Load {tag}: diagonal node definition is not allowed")
        if node1 < 1 or node1 > 4 or node2 < 1 or node2 > 4:
            raise ValueError(f"Load {tag}: node position must be between 1 and 4")
        if node1 == node2:
            raise ValueError(f"Load {tag}: node positions cannot be the same")
        if dist1 < 0 or dist1 >= 1 or dist2 <= 0 or dist2 > 1:
            raise ValueError(
                f"Load {tag}: load distances are not well defined, both must be between 0 and 1"
            )
        if abs(dist1 - dist2) < CONFIG.zero_tolerance:
            raise ValueError(f"Load {tag}: load distances cannot be the same")

        if dist1 > dist2:
            load1, dist1, load2, dist2 = load2, dist2, load1, dist1

        self._membrane = membrane
        self._node1 = int(node1)
        self._node2 = int(node2)
        self._load1 = float(load1)
        self._dist1 = float(dist1)
        self._load2 = float(load2)
        self._dist2 = float(dist2)

    def get_membrane(self) -> Membrane:
        return self._membrane

    def _edge(self) -> Tuple[Node, Node]:
        nodes = self._membrane.get_nodes()
        return nodes[self._node1 - 1], nodes[self._node2 - 1]

    def _normal_component(self) -> int:
        """0-based DOF index the load acts along: y for horizontal edges, x for vertical."""
        start, end = self._edge()
        if abs(start.y - end.y) <= CONFIG.zero_tolerance:
            return 1
        return 0

    def equivalent_forces(self, factor: float = 1.0) -> List[Matrix]:
        """
        Equivalent force vectors (fx, fy) at node1 and node2.
        """
        start, end = self._edge()
        length = float(np.hypot(end.x - start.x, end.y - start.y))
        f1, f2 = edge_equivalent_forces(
            length,
            self._load1, self._dist1 * length,
            self._load2, self._dist2 * length,
        )
        component = self._normal_component()
        forces = []
        for value in (f1, f2):
            f = Matrix.vector(2)
            f.set(component, factor * value)
            forces.append(f)
        return forces

    def apply(self, factor: float = 1.0) -> None:
        for local_node, force in zip((self._node1, self._node2), self.equivalent_forces(factor)):
            self._membrane.add_equivalent_force_node(local_node, force)

            node = self._membrane.get_nodes()[local_node - 1]
            load = Matrix.vector(node.get_ndof())
            load.set(0, force.get(0))
            load.set(1, force.get(1))
            node.apply_load(load)

        logger.debug(
            "Load %s: edge %d-%d of membrane %s, factor %g",
            self.tag, self._node1, self._node2, self._membrane.tag, factor,
        )


class LoadPattern(ModelComponent):
    """A named group of loads applied together."""

    def __init__(self, tag: str, loads: Optional[Sequence[Load]] = None):
        super().__init__(tag)
        self._loads: List[Load] = list(loads or [])

    def get_loads(self) -> List[Load]:
        return list(self._loads)

    def apply(self, factor: float = 1.0) -> None:
        raise NotImplementedError


class LoadPatternConstant(LoadPattern):
    """Every load applied once with the same factor."""

    def apply(self, factor: float = 1.0) -> None:
        for load in self._loads:
            load.apply(factor)
        logger.info("Applied load pattern %s (%d loads, factor %g)", self.tag, len(self._loads), factor)
