# dsfem/model - Structural entities
"""
Nodes, elements, restraints, loads and the Model that owns them.
"""

from .component import ModelComponent
from .node import Node
from .element import Element
from .membrane import Membrane, plane_stress_constitutive
from .restraints import Restraint, RestraintNode
from .loads import (
    Load,
    LoadMembraneDistributed,
    LoadNode,
    LoadPattern,
    LoadPatternConstant,
    edge_equivalent_forces,
)
from .model import Model

__all__ = [
    'ModelComponent', 'Node', 'Element', 'Membrane', 'plane_stress_constitutive',
    'Restraint', 'RestraintNode',
    'Load', 'LoadNode', 'LoadMembraneDistributed', 'LoadPattern', 'LoadPatternConstant',
    'edge_equivalent_forces',
    'Model',
]
