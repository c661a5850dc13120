# dsfem - Direct-Stiffness Finite Element Analysis
"""
DSFEM: Linear Static Analysis of Plane Membrane Models
======================================================

This package provides:
- A dense Matrix with 0/1-based views, predicates and determinant
- Pluggable inversion (Gauss-Jordan reference, LAPACK LU)
- Restraint-aware DOF numbering and direct-stiffness assembly
- Rectangular plane-stress membrane elements
- Nodal and distributed edge loads grouped in load patterns
- Static analysis, result reports and plots

ARCHITECTURE:
-------------
    kernel/         Element-agnostic numeric core (Matrix, inversion, DOF, assembly, solve)
    model/          Nodes, elements, restraints, loads and the Model container
    analysis.py     StaticAnalysis pipeline and its state machine
    report.py       Plain-text result file
    viz.py          Deformed shape and stress plots
    config.py       Numeric tolerances and defaults
    errors.py       Exception taxonomy
"""

from .config import CONFIG, SolverConfig
from .errors import (
    AnalysisStateError,
    DimensionError,
    DOFError,
    FEMError,
    GeometryError,
    MatrixIndexError,
    SingularityError,
)
from .kernel import DOFManager, Matrix, get_inversion_strategy, solve_linear
from .model import (
    LoadMembraneDistributed,
    LoadNode,
    LoadPatternConstant,
    Membrane,
    Model,
    Node,
    RestraintNode,
)
from .analysis import AnalysisState, StaticAnalysis
from .logging_config import setup_logging

__version__ = "0.1.0"

__all__ = [
    'CONFIG', 'SolverConfig',
    'FEMError', 'DimensionError', 'MatrixIndexError', 'SingularityError',
    'GeometryError', 'DOFError', 'AnalysisStateError',
    'Matrix', 'DOFManager', 'get_inversion_strategy', 'solve_linear',
    'Node', 'Membrane', 'RestraintNode', 'LoadNode', 'LoadMembraneDistributed',
    'LoadPatternConstant', 'Model',
    'AnalysisState', 'StaticAnalysis',
    'setup_logging',
]
