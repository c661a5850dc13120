# dsfem/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Global numeric configuration shared by the kernel and the model."""

    # Absolute tolerance for every exact-value comparison (predicates, DOF sentinels)
    zero_tolerance: float = 1e-12

    # Gauss-Jordan aborts when the chosen pivot magnitude is below this value
    min_inversion_pivot: float = 5e-4

    # Tolerance used when checking invert(A) * A against the identity
    inverse_check_tolerance: float = 1e-9

    # Stress sampling grid per membrane: (N + 1) x (N + 1) points
    membrane_integration_npoints: int = 15

    # Cofactor expansion is O(n!); above this size det() switches to LU
    det_cofactor_max_dim: int = 6

    # Inversion strategy used when an analysis does not name one
    default_inversion: str = "cpu"


# Global config instance
CONFIG = SolverConfig()
