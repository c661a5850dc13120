# dsfem/errors.py
"""Exception taxonomy for matrix, model and analysis failures."""


class FEMError(Exception):
    """Base class for every error raised by dsfem."""
    pass


class DimensionError(FEMError, ValueError):
    """Raised when matrix shapes do not match the requested operation."""
    pass


class MatrixIndexError(DimensionError, IndexError):
    """Raised when a matrix index falls outside [origin, origin + dim)."""
    pass


class SingularityError(FEMError, RuntimeError):
    """Raised when a pivot falls below the inversion threshold."""
    pass


class GeometryError(FEMError, ValueError):
    """Raised when element nodes do not describe a valid shape."""
    pass


class DOFError(FEMError, IndexError):
    """Raised for local DOF ids outside a node's or element's range."""
    pass


class AnalysisStateError(FEMError, RuntimeError):
    """Raised when an analysis is re-run without being cleared first."""
    pass
