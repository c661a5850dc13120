# dsfem/kernel - Element-agnostic numeric core
"""
KERNEL: THE NUMERIC FOUNDATION
==============================

This package contains the pieces every analysis needs, whatever the element:

- Matrix: the dense matrix all model data is stored in
- Inversion strategies: Gauss-Jordan (reference) and LAPACK LU
- DOF numbering with restraint sentinels
- Scatter-add assembly of K and F
- The linear solve u = K⁻¹F

The ELEMENT implementations (Membrane, ...) live in dsfem.model, the
kernel plumbing is universal.
"""

from .matrix import Matrix
from .inversion import (
    INVERSION_STRATEGIES,
    gauss_jordan_inverse,
    get_inversion_strategy,
    is_inverse,
    lapack_inverse,
)
from .dof import DOF_PENDING, DOF_RESTRAINED, DOFManager, is_free
from .assemble import assemble_global_F, assemble_global_K
from .solve import solve_linear

__all__ = [
    'Matrix',
    'INVERSION_STRATEGIES', 'gauss_jordan_inverse', 'lapack_inverse',
    'get_inversion_strategy', 'is_inverse',
    'DOF_PENDING', 'DOF_RESTRAINED', 'DOFManager', 'is_free',
    'assemble_global_K', 'assemble_global_F',
    'solve_linear',
]
