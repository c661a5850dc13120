# dsfem/analysis.py
"""
STATIC ANALYSIS: Linear Solve of a Model
========================================

PURPOSE:
--------
Turns a Model into K·u = F, solves it, and hands u back to the model.

PIPELINE (and state after each step):
-------------------------------------
    define_dof()              apply restraints, number free DOFs,
                              elements gather their DOF maps      → DOF_NUMBERED
    model.apply_load_patterns()
    build_stiffness_matrix()  scatter-add element stiffness
    build_force_vector()      F from the node accumulators        → ASSEMBLED
    solve()                   u = K⁻¹·F, model.update(u)          → SOLVED

analyze() runs the whole pipeline. It is all-or-nothing: if any step
fails, the model and the analysis are cleared and the error propagates.
Running again needs an explicit clear().

SIGN CONVENTION:
----------------
Applied loads are subtracted from the node reaction accumulators, so the
force vector takes the negated accumulator at every free DOF:

    F[gid] = -reaction[node, local]
"""

import logging
from enum import Enum
from typing import Optional, Union

from .errors import AnalysisStateError, DOFError
from .kernel.assemble import assemble_global_F, assemble_global_K
from .kernel.dof import DOFManager
from .kernel.inversion import InversionStrategy, get_inversion_strategy
from .kernel.matrix import Matrix
from .kernel.solve import solve_linear
from .model.model import Model

logger = logging.getLogger(__name__)


class AnalysisState(Enum):
    UNINITIALIZED = "uninitialized"
    DOF_NUMBERED = "dof-numbered"
    ASSEMBLED = "assembled"
    SOLVED = "solved"


class StaticAnalysis:
    """
    Linear static analysis bound to one model.

    Parameters:
    -----------
    model : Model
        Model to analyze
    inversion : str or callable, optional
        "cpu" (Gauss-Jordan), "lapack", or any invert(Matrix) -> Matrix.
        None uses CONFIG.default_inversion. An unknown name raises
        ValueError here, before the model is touched.

    Examples:
    ---------
    >>> analysis = StaticAnalysis(model, inversion="lapack")
    >>> analysis.analyze()
    >>> u = analysis.get_displacements_vector()
    """

    def __init__(self, model: Model, inversion: Union[str, InversionStrategy, None] = None):
        self.model = model
        self.inversion = get_inversion_strategy(inversion)
        self.state = AnalysisState.UNINITIALIZED
        self._dof = DOFManager()
        self._K: Optional[Matrix] = None
        self._F: Optional[Matrix] = None
        self._u: Optional[Matrix] = None

    def _require(self, state: AnalysisState, step: str) -> None:
        if self.state is not state:
            raise AnalysisStateError(
                f"Cannot {step}: analysis is {self.state.value}, expected {state.value}"
            )

    # Pipeline ----------------------------------------------------------------

    def analyze(self, load_factor: float = 1.0) -> None:
        """
        Run restraints, numbering, loading, assembly and the solve.

        Raises:
        -------
        AnalysisStateError
            If the analysis already ran and was not cleared
        DOFError
            If every DOF of the model is restrained
        SingularityError
            If the stiffness matrix cannot be inverted (mechanism)
        """
        self._require(AnalysisState.UNINITIALIZED, "analyze")
        logger.info("Starting static analysis")

        try:
            self.define_dof()
            self.model.apply_load_patterns(load_factor)
            self.build_stiffness_matrix()
            self.build_force_vector()
            self.solve()
        except Exception as exc:
            logger.error("Static analysis failed: %s", exc)
            self.clear()
            raise

        logger.info("Static analysis finished: %d equations", self._dof.ndof)

    def define_dof(self) -> int:
        """Apply restraints, number the free DOFs and refresh element DOF maps."""
        self._require(AnalysisState.UNINITIALIZED, "number DOFs")
        self.model.apply_restraints()

        nodes = self.model.get_nodes()
        ndof = self._dof.number(nodes)
        for element in self.model.get_elements():
            element.set_dofid()

        if ndof == 0:
            raise DOFError("Every DOF of the model is restrained, nothing to solve")

        restrained = self.model.total_dofs() - ndof
        logger.info("DOF numbering: %d free, %d restrained", ndof, restrained)
        self.state = AnalysisState.DOF_NUMBERED
        return ndof

    def build_stiffness_matrix(self) -> Matrix:
        self._require(AnalysisState.DOF_NUMBERED, "assemble stiffness")
        contributions = [
            (DOFManager.element_dof_map(element), element.get_stiffness_global())
            for element in self.model.get_elements()
        ]
        self._K = assemble_global_K(self._dof.ndof, contributions)
        logger.debug("Assembled %d x %d stiffness matrix", self._K.n, self._K.m)
        return self._K

    def build_force_vector(self) -> Matrix:
        self._require(AnalysisState.DOF_NUMBERED, "assemble forces")
        if self._K is None:
            raise AnalysisStateError("Cannot assemble forces before the stiffness matrix")
        contributions = [
            (DOFManager.node_dofs(node), -node.get_reactions())
            for node in self.model.get_nodes()
        ]
        self._F = assemble_global_F(self._dof.ndof, contributions)
        self.state = AnalysisState.ASSEMBLED
        return self._F

    def solve(self) -> Matrix:
        """Solve for u and push it back into the model."""
        self._require(AnalysisState.ASSEMBLED, "solve")
        self._u = solve_linear(self._K, self._F, self.inversion)
        self.model.update(self._u)
        self.state = AnalysisState.SOLVED
        return self._u

    def clear(self) -> None:
        """Forget every result and reset the model."""
        self.model.clear()
        self._dof = DOFManager()
        self._K = None
        self._F = None
        self._u = None
        self.state = AnalysisState.UNINITIALIZED

    # Results -----------------------------------------------------------------

    def get_ndof(self) -> int:
        return self._dof.ndof

    def _result(self, matrix: Optional[Matrix]) -> Optional[Matrix]:
        if self.state is not AnalysisState.SOLVED or matrix is None:
            return None
        return matrix.clone()

    def get_stiffness_matrix(self) -> Optional[Matrix]:
        return self._result(self._K)

    def get_force_vector(self) -> Optional[Matrix]:
        return self._result(self._F)

    def get_displacements_vector(self) -> Optional[Matrix]:
        return self._result(self._u)

    def summary(self) -> str:
        """Human-readable overview of the solved system."""
        lines = ["Static analysis information:"]
        if self.state is not AnalysisState.SOLVED:
            lines.append("\tAnalysis is not yet initialized")
            return "\n".join(lines)

        lines.append(f"\tEquations: {self._dof.ndof}")
        lines.append("\tStiffness matrix:")
        lines.extend("\t\t" + row for row in self._K.to_string().splitlines())
        lines.append(f"\tStiffness determinant: {self._K.det():g}")
        lines.append(f"\tStiffness symmetric: {'yes' if self._K.is_symmetric() else 'no'}")
        lines.append("\tForce vector:")
        lines.append("\t\t" + self._F.to_string_line())
        lines.append("\tDisplacements vector:")
        lines.append("\t\t" + self._u.to_string_line())
        return "\n".join(lines)
