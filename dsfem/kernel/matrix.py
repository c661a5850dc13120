# dsfem/kernel/matrix.py
"""
DENSE MATRIX: Fixed-Size Numeric Container for the Stiffness Method
===================================================================

PURPOSE:
--------
Every quantity the analysis moves around is a Matrix: node coordinates,
DOF-index vectors, element stiffness matrices, the assembled global system.
The class wraps a contiguous row-major numpy buffer and adds the operations
the structural code needs:

    - bounds-checked get/set, with an optional 1-based index origin
    - element-wise arithmetic and the matrix product
    - transpose (copying and in-place)
    - structural predicates (symmetric, identity, diagonal, ...)
    - determinant

INDEXING:
---------
The origin is fixed when the matrix is built. Call sites that read
naturally in 1-based form (stiffness tables, DOF numbering) ask for a view:

    >>> k = Matrix(8, 8)
    >>> k1 = k.with_origin(1)   # shares the buffer
    >>> k1.set(1, 1, 10.0)
    >>> k.get(0, 0)
    10.0

VECTORS:
--------
A vector is any Matrix with one row or one column. Vector accessors take a
single index along the long dimension:

    >>> v = Matrix.vector(3)    # 3x1
    >>> v.set(2, -5.0)
    >>> v.get(2)
    -5.0
"""

import numbers
from typing import Iterable, Optional, Sequence

import numpy as np

from ..config import CONFIG
from ..errors import DimensionError, MatrixIndexError


class Matrix:
    """
    Dense n x m matrix of floats.

    Parameters:
    -----------
    n, m : int
        Row and column count, both >= 1
    data : array-like, optional
        Initial values, either nested rows or a flat row-major sequence of
        n*m numbers. Always deep-copied.
    origin : int
        Index origin (0 or 1) for the public accessors
    name : str
        Optional label used in string output
    """

    __hash__ = None

    # numpy scalars on the left defer to __rmul__ instead of broadcasting
    __array_ufunc__ = None

    def __init__(self, n: int, m: int, data=None, origin: int = 0, name: str = ""):
        n = int(n)
        m = int(m)
        if n < 1 or m < 1:
            raise DimensionError(f"Matrix dimensions must be >= 1, got ({n}, {m})")
        if origin not in (0, 1):
            raise ValueError(f"Matrix origin must be 0 or 1, got {origin}")

        if data is None:
            buf = np.zeros((n, m), dtype=float)
        else:
            buf = np.array(data, dtype=float)
            if buf.size != n * m:
                raise DimensionError(
                    f"Cannot build a ({n}, {m}) matrix from {buf.size} values"
                )
            buf = buf.reshape(n, m)
        self._data = np.ascontiguousarray(buf)
        self._origin = origin
        self.name = name

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def _wrap(cls, array: np.ndarray, origin: int = 0, name: str = "") -> "Matrix":
        """Build a Matrix around an array without copying it."""
        obj = cls.__new__(cls)
        obj._data = np.ascontiguousarray(array, dtype=float)
        obj._origin = origin
        obj.name = name
        return obj

    @classmethod
    def vector(cls, n: int, origin: int = 0) -> "Matrix":
        """Zero column vector with n entries."""
        return cls(n, 1, origin=origin)

    @classmethod
    def identity(cls, n: int, origin: int = 0) -> "Matrix":
        n = int(n)
        if n < 1:
            raise DimensionError(f"Identity dimension must be >= 1, got {n}")
        return cls._wrap(np.eye(n), origin=origin)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]], origin: int = 0) -> "Matrix":
        try:
            arr = np.array(rows, dtype=float)
        except ValueError:
            raise DimensionError("from_rows expects a rectangular list of rows") from None
        if arr.ndim != 2:
            raise DimensionError("from_rows expects a rectangular list of rows")
        return cls(arr.shape[0], arr.shape[1], arr, origin=origin)

    @classmethod
    def column(cls, values: Iterable[float], origin: int = 0) -> "Matrix":
        """Column vector from a flat sequence."""
        arr = np.array(list(values), dtype=float)
        return cls(arr.size, 1, arr, origin=origin)

    def with_origin(self, origin: int) -> "Matrix":
        """
        View of this matrix with another index origin.

        The view shares the buffer, so writes through either object are
        visible through both (until one of them is resized).
        """
        if origin not in (0, 1):
            raise ValueError(f"Matrix origin must be 0 or 1, got {origin}")
        view = Matrix.__new__(Matrix)
        view._data = self._data
        view._origin = origin
        view.name = self.name
        return view

    def clone(self) -> "Matrix":
        """Independent deep copy, same origin."""
        return Matrix._wrap(self._data.copy(), origin=self._origin, name=self.name)

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def n(self) -> int:
        return self._data.shape[0]

    @property
    def m(self) -> int:
        return self._data.shape[1]

    @property
    def origin(self) -> int:
        return self._origin

    @property
    def shape(self):
        return self._data.shape

    def size(self):
        return (self.n, self.m)

    def length(self) -> int:
        """Largest dimension, the vector length for vectors."""
        return max(self.n, self.m)

    def get_square_dimension(self) -> int:
        if not self.is_square():
            raise DimensionError(f"Matrix ({self.n}, {self.m}) is not square")
        return self.n

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def _index(self, i: int, j: int):
        o = self._origin
        if not (o <= i < self.n + o) or not (o <= j < self.m + o):
            raise MatrixIndexError(
                f"Index ({i}, {j}) out of range for ({self.n}, {self.m}) matrix with origin {o}"
            )
        return i - o, j - o

    def _vector_index(self, i: int) -> int:
        if not self.is_vector():
            raise DimensionError(
                f"Single-index access needs a vector, matrix is ({self.n}, {self.m})"
            )
        o = self._origin
        if not (o <= i < self.length() + o):
            raise MatrixIndexError(
                f"Index {i} out of range for vector of length {self.length()} with origin {o}"
            )
        return i - o

    def get(self, i: int, j: Optional[int] = None) -> float:
        """A[i, j], or A[i] when called with one index on a vector."""
        if j is None:
            return float(self._data.flat[self._vector_index(i)])
        r, c = self._index(i, j)
        return float(self._data[r, c])

    def set(self, *args) -> None:
        """
        set(i, j, value) updates A[i, j]; set(i, value) updates a vector entry.
        """
        if len(args) == 3:
            i, j, value = args
            r, c = self._index(i, j)
            self._data[r, c] = value
        elif len(args) == 2:
            i, value = args
            self._data.flat[self._vector_index(i)] = value
        else:
            raise TypeError("set() takes (i, value) or (i, j, value)")

    def __getitem__(self, key):
        if isinstance(key, tuple):
            return self.get(*key)
        return self.get(key)

    def __setitem__(self, key, value):
        if isinstance(key, tuple):
            self.set(key[0], key[1], value)
        else:
            self.set(key, value)

    def get_row(self, i: int, start: Optional[int] = None, stop: Optional[int] = None) -> "Matrix":
        """Row i as a 1 x k vector, columns start..stop inclusive."""
        o = self._origin
        start = o if start is None else start
        stop = self.m - 1 + o if stop is None else stop
        r, c0 = self._index(i, start)
        _, c1 = self._index(i, stop)
        if c1 < c0:
            raise MatrixIndexError(f"Empty column range {start}..{stop}")
        return Matrix._wrap(self._data[r:r + 1, c0:c1 + 1].copy(), origin=o)

    def get_column(self, j: int, start: Optional[int] = None, stop: Optional[int] = None) -> "Matrix":
        """Column j as a k x 1 vector, rows start..stop inclusive."""
        o = self._origin
        start = o if start is None else start
        stop = self.n - 1 + o if stop is None else stop
        r0, c = self._index(start, j)
        r1, _ = self._index(stop, j)
        if r1 < r0:
            raise MatrixIndexError(f"Empty row range {start}..{stop}")
        return Matrix._wrap(self._data[r0:r1 + 1, c:c + 1].copy(), origin=o)

    def get_array(self) -> np.ndarray:
        """Row-major flat copy of the buffer."""
        return self._data.ravel().copy()

    def to_numpy(self) -> np.ndarray:
        """2-D copy of the buffer."""
        return self._data.copy()

    # ------------------------------------------------------------------
    # Filling
    # ------------------------------------------------------------------

    def fill(self, value: float) -> None:
        self._data.fill(value)

    def fill_zeros(self) -> None:
        self.fill(0.0)

    def fill_ones(self) -> None:
        self.fill(1.0)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _require_same_shape(self, other: "Matrix", op: str) -> None:
        if not isinstance(other, Matrix):
            raise TypeError(f"Cannot apply '{op}' to Matrix and {type(other).__name__}")
        if self.shape != other.shape:
            raise DimensionError(
                f"Shape mismatch for '{op}': {self.shape} vs {other.shape}"
            )

    def __add__(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "+")
        return Matrix._wrap(self._data + other._data, origin=self._origin)

    def __iadd__(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "+=")
        self._data += other._data
        return self

    def __sub__(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "-")
        return Matrix._wrap(self._data - other._data, origin=self._origin)

    def __isub__(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "-=")
        self._data -= other._data
        return self

    def __neg__(self) -> "Matrix":
        return Matrix._wrap(-self._data, origin=self._origin)

    def _product(self, other: "Matrix") -> np.ndarray:
        if self.m != other.n:
            raise DimensionError(
                f"Cannot multiply ({self.n}, {self.m}) by ({other.n}, {other.m})"
            )
        return self._data @ other._data

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return Matrix._wrap(self._product(other), origin=self._origin)
        if isinstance(other, numbers.Real):
            return Matrix._wrap(self._data * float(other), origin=self._origin)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return Matrix._wrap(self._data * float(other), origin=self._origin)
        return NotImplemented

    def __imul__(self, other):
        if isinstance(other, Matrix):
            self._data = np.ascontiguousarray(self._product(other))
            return self
        if isinstance(other, numbers.Real):
            self._data *= float(other)
            return self
        return NotImplemented

    def __matmul__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix._wrap(self._product(other), origin=self._origin)

    def transpose(self) -> "Matrix":
        return Matrix._wrap(self._data.T.copy(), origin=self._origin, name=self.name)

    def transpose_self(self) -> None:
        self._data = np.ascontiguousarray(self._data.T)

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    # ------------------------------------------------------------------
    # Predicates (absolute tolerance against exact values)
    # ------------------------------------------------------------------

    @staticmethod
    def _close(a, b) -> bool:
        return bool(np.all(np.abs(np.asarray(a) - b) < CONFIG.zero_tolerance))

    def is_square(self) -> bool:
        return self.n == self.m

    def is_vector(self) -> bool:
        return self.n == 1 or self.m == 1

    def is_identity(self) -> bool:
        return self.is_square() and self._close(self._data, np.eye(self.n))

    def is_symmetric(self) -> bool:
        return self.is_square() and self._close(self._data, self._data.T)

    def is_diag(self) -> bool:
        if not self.is_square():
            return False
        off = self._data - np.diag(np.diag(self._data))
        return self._close(off, 0.0)

    def is_double(self, value: float) -> bool:
        """True when every entry equals value."""
        return self._close(self._data, value)

    def is_zeros(self) -> bool:
        return self.is_double(0.0)

    def is_ones(self) -> bool:
        return self.is_double(1.0)

    def is_equal(self) -> bool:
        """True when all entries hold the same value."""
        return self.is_double(self._data.flat[0])

    def equals(self, other: "Matrix") -> bool:
        return (
            isinstance(other, Matrix)
            and self.shape == other.shape
            and self._close(self._data, other._data)
        )

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    def __ne__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return not self.equals(other)

    def make_symmetric(self, upper: bool = True) -> None:
        """Copy the upper (or lower) triangle onto the other one, in place."""
        if not self.is_square():
            raise DimensionError(f"Cannot symmetrize a ({self.n}, {self.m}) matrix")
        iu = np.triu_indices(self.n, 1)
        if upper:
            self._data[iu[1], iu[0]] = self._data[iu]
        else:
            self._data[iu] = self._data[iu[1], iu[0]]

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------

    def sum(self) -> float:
        return float(self._data.sum())

    def max(self) -> float:
        return float(self._data.max())

    def min(self) -> float:
        return float(self._data.min())

    def norm(self) -> float:
        """Euclidean norm of a vector."""
        if not self.is_vector():
            raise DimensionError("norm() is only defined for vectors")
        return float(np.sqrt(np.sum(self._data * self._data)))

    def det(self) -> float:
        """
        Determinant.

        1x1 and 2x2 are closed form. Up to CONFIG.det_cofactor_max_dim the
        cofactor expansion along the first row is used; larger matrices go
        through partial-pivoting LU elimination.
        """
        n = self.get_square_dimension()
        if n <= max(2, CONFIG.det_cofactor_max_dim):
            return float(_det_cofactor(self._data))
        return float(_det_lu(self._data))

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @staticmethod
    def _fmt(value: float, to_int: bool) -> str:
        if to_int:
            return str(int(round(value)))
        return f"{value:g}"

    def to_string(self, matlab_like: bool = False, sep: str = "\t", to_int: bool = False) -> str:
        """
        Text form of the matrix.

        matlab_like gives "[a b; c d]", otherwise one line per row with
        entries separated by sep.
        """
        rows = [[self._fmt(v, to_int) for v in row] for row in self._data]
        if matlab_like:
            return "[" + "; ".join(" ".join(r) for r in rows) + "]"
        return "\n".join(sep.join(r) for r in rows)

    def to_string_line(self, to_int: bool = False) -> str:
        """All entries on one tab-separated line."""
        return "\t".join(self._fmt(v, to_int) for v in self._data.flat)

    def save_to_file(self, path) -> None:
        np.savetxt(path, self._data, delimiter="\t")

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        label = f" '{self.name}'" if self.name else ""
        return f"Matrix{label}({self.n}x{self.m}, origin={self._origin}, {self.to_string(matlab_like=True)})"


def _det_cofactor(a: np.ndarray) -> float:
    n = a.shape[0]
    if n == 1:
        return a[0, 0]
    if n == 2:
        return a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0]
    total = 0.0
    rest = a[1:, :]
    for k in range(n):
        if a[0, k] == 0.0:
            continue
        minor = np.delete(rest, k, axis=1)
        sign = 1.0 if k % 2 == 0 else -1.0
        total += sign * a[0, k] * _det_cofactor(minor)
    return total


def _det_lu(a: np.ndarray) -> float:
    u = a.astype(float, copy=True)
    n = u.shape[0]
    sign = 1.0
    for j in range(n):
        p = j + int(np.argmax(np.abs(u[j:, j])))
        if u[p, j] == 0.0:
            return 0.0
        if p != j:
            u[[j, p]] = u[[p, j]]
            sign = -sign
        factors = u[j + 1:, j] / u[j, j]
        u[j + 1:, j:] -= np.outer(factors, u[j, j:])
    return sign * float(np.prod(np.diag(u)))
