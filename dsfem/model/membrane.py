# dsfem/model/membrane.py
"""
MEMBRANE: Four-Node Rectangular Plane-Stress Element
====================================================

GEOMETRY:
---------
Nodes go counter-clockwise from the lower-left corner. Local axes sit at
the element centre, aligned with the global axes:

        4 ------------- 3
        |       y       |
     2h |       o-- x   |
        |               |
        1 ------------- 2
               2b

DOF order: [u1, v1, u2, v2, u3, v3, u4, v4]

STIFFNESS:
----------
For a bilinear rectangle the stiffness integrals have a closed form. With
the plane-stress constitutive matrix C and thickness t:

    A1 = t·h·C11 / (6b)     A4 = t·b·C33 / (6h)
    A2 = t·b·C22 / (6h)     A5 = t·h·C33 / (6b)
    A3 = t·C12 / 4          A6 = t·C33 / 4

Every stiffness coefficient is a combination of two of them:

    k_a(i, j) = Ai + Aj
    k_b(i, j) = Ai - Aj
    k_c(i, j) = Ai - 2·Aj

The upper triangle is filled from those and mirrored. No rotation is
needed, so the global stiffness equals the local one.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from ..config import CONFIG
from ..errors import GeometryError
from ..kernel.matrix import Matrix
from .element import Element
from .node import Node

logger = logging.getLogger(__name__)

STRESS_COLUMNS = ["X", "Y", "x", "y", "sx", "sy", "sxy"]


def plane_stress_constitutive(E: float, poisson: float) -> Matrix:
    """
    3×3 plane-stress constitutive matrix.

        C = E · [ 1/(1-ν²)   ν/(1-ν²)   0          ]
                [ ν/(1-ν²)   1/(1-ν²)   0          ]
                [ 0          0          1/(2+2ν)   ]
    """
    d = 1.0 - poisson * poisson
    c = Matrix.from_rows([
        [1.0 / d, poisson / d, 0.0],
        [poisson / d, 1.0 / d, 0.0],
        [0.0, 0.0, 1.0 / (2.0 + 2.0 * poisson)],
    ])
    c *= E
    return c


def _k_a(A: Matrix, i: int, j: int) -> float:
    return A.get(i) + A.get(j)


def _k_b(A: Matrix, i: int, j: int) -> float:
    return A.get(i) - A.get(j)


def _k_c(A: Matrix, i: int, j: int) -> float:
    return A.get(i) - 2.0 * A.get(j)


class Membrane(Element):
    """
    Rectangular membrane element.

    Parameters:
    -----------
    tag : str
        Unique identifier
    n1, n2, n3, n4 : Node
        Corner nodes, counter-clockwise from lower-left
    E : float
        Elastic modulus
    poisson : float
        Poisson ratio, -1 < ν < 1
    thickness : float
        Section thickness, > 0

    Raises:
    -------
    GeometryError
        If the nodes do not form an axis-aligned, counter-clockwise rectangle
    """

    NODE_DOFS = (1, 2)

    def __init__(self, tag: str, n1: Node, n2: Node, n3: Node, n4: Node,
                 E: float, poisson: float, thickness: float):
        super().__init__(tag, [n1, n2, n3, n4])

        if not -1.0 < poisson < 1.0:
            raise ValueError(f"Membrane {tag}: Poisson ratio {poisson} outside (-1, 1)")
        if thickness <= 0.0:
            raise GeometryError(f"Membrane {tag}: thickness must be positive, got {thickness}")

        self.E = float(E)
        self.poisson = float(poisson)
        self.t = float(thickness)
        self.b, self.h = self._half_dimensions(n1, n2, n3, n4)

        self._constitutive = plane_stress_constitutive(self.E, self.poisson)
        self._generate_local_stiffness()
        self._stiffness_global = self._stiffness_local.clone()
        self._stiffness_global.name = "k_global"

    def _half_dimensions(self, n1: Node, n2: Node, n3: Node, n4: Node) -> Tuple[float, float]:
        tol = CONFIG.zero_tolerance
        db1 = abs(n1.x - n2.x) / 2
        db2 = abs(n3.x - n4.x) / 2
        dh1 = abs(n1.y - n4.y) / 2
        dh2 = abs(n2.y - n3.y) / 2

        if abs(db1 - db2) > tol:
            raise GeometryError(f"Membrane {self.tag}: invalid node dimension at x ({2 * db1} vs {2 * db2})")
        if abs(dh1 - dh2) > tol:
            raise GeometryError(f"Membrane {self.tag}: invalid node dimension at y ({2 * dh1} vs {2 * dh2})")

        aligned = (
            abs(n1.y - n2.y) <= tol and abs(n3.y - n4.y) <= tol
            and abs(n1.x - n4.x) <= tol and abs(n2.x - n3.x) <= tol
        )
        if not aligned:
            raise GeometryError(f"Membrane {self.tag}: nodes are not an axis-aligned rectangle")
        if n2.x <= n1.x or n4.y <= n1.y:
            raise GeometryError(
                f"Membrane {self.tag}: nodes must run counter-clockwise from the lower-left corner"
            )
        return db1, dh1

    def _generate_local_stiffness(self) -> None:
        C = self._constitutive
        t, b, h = self.t, self.b, self.h

        A = Matrix.vector(6, origin=1)
        A.set(1, t * h * C.get(0, 0) / (6 * b))
        A.set(2, t * b * C.get(1, 1) / (6 * h))
        A.set(3, t * C.get(0, 1) / 4)
        A.set(4, t * b * C.get(2, 2) / (6 * h))
        A.set(5, t * h * C.get(2, 2) / (6 * b))
        A.set(6, t * C.get(2, 2) / 4)

        k = Matrix(8, 8, origin=1, name="k_local")
        k.set(1, 1, 2 * _k_a(A, 1, 4))
        k.set(1, 2, _k_a(A, 3, 6))
        k.set(1, 3, _k_c(A, 4, 1))
        k.set(1, 4, _k_b(A, 3, 6))
        k.set(1, 5, -_k_a(A, 1, 4))
        k.set(1, 6, -_k_a(A, 3, 6))
        k.set(1, 7, _k_c(A, 1, 4))
        k.set(1, 8, _k_b(A, 6, 3))

        k.set(2, 2, 2 * _k_a(A, 2, 4))
        k.set(2, 3, _k_b(A, 6, 3))
        k.set(2, 4, _k_c(A, 2, 5))
        k.set(2, 5, -_k_a(A, 3, 6))
        k.set(2, 6, -_k_a(A, 2, 5))
        k.set(2, 7, _k_b(A, 3, 6))
        k.set(2, 8, _k_c(A, 5, 2))

        k.set(3, 3, 2 * _k_a(A, 1, 4))
        k.set(3, 4, -_k_a(A, 3, 6))
        k.set(3, 5, _k_c(A, 1, 4))
        k.set(3, 6, _k_b(A, 3, 6))
        k.set(3, 7, -_k_a(A, 1, 4))
        k.set(3, 8, _k_a(A, 6, 3))

        k.set(4, 4, 2 * _k_a(A, 2, 4))
        k.set(4, 5, _k_b(A, 6, 3))
        k.set(4, 6, _k_c(A, 5, 2))
        k.set(4, 7, _k_a(A, 3, 6))
        k.set(4, 8, -_k_a(A, 5, 2))

        k.set(5, 5, 2 * _k_a(A, 1, 4))
        k.set(5, 6, _k_a(A, 3, 6))
        k.set(5, 7, _k_c(A, 4, 1))
        k.set(5, 8, -_k_b(A, 6, 3))

        k.set(6, 6, 2 * _k_a(A, 2, 4))
        k.set(6, 7, _k_b(A, 6, 3))
        k.set(6, 8, _k_c(A, 2, 5))

        k.set(7, 7, 2 * _k_a(A, 1, 4))
        # u4-v4 coupling has the sign of u2-v2
        k.set(7, 8, -_k_a(A, 3, 6))

        k.set(8, 8, 2 * _k_a(A, 2, 4))

        k.make_symmetric(upper=True)
        self._stiffness_local = k.with_origin(0)

    # Geometry --------------------------------------------------------------

    def get_width(self) -> float:
        return 2 * self.b

    def get_height(self) -> float:
        return 2 * self.h

    def get_constitutive(self) -> Matrix:
        return self._constitutive.clone()

    def center(self) -> Tuple[float, float]:
        """Global coordinates of the local origin."""
        xs = [n.x for n in self._nodes]
        ys = [n.y for n in self._nodes]
        return sum(xs) / 4, sum(ys) / 4

    def _validate_xy(self, x: float, y: float) -> None:
        tol = CONFIG.zero_tolerance
        if abs(x) > self.b + tol or abs(y) > self.h + tol:
            raise GeometryError(
                f"Membrane {self.tag}: position ({x}, {y}) out of membrane (|x|<={self.b}, |y|<={self.h})"
            )

    # Interpolation -----------------------------------------------------------

    def _shape_functions(self, x: float, y: float) -> List[float]:
        b, h = self.b, self.h
        a = 4 * b * h
        return [
            (b - x) * (h - y) / a,
            (b + x) * (h - y) / a,
            (b + x) * (h + y) / a,
            (b - x) * (h + y) / a,
        ]

    def _strain_matrix(self, x: float, y: float) -> Matrix:
        """B such that strain = B · d, rows (εx, εy, γxy)."""
        b, h = self.b, self.h
        a = 4 * b * h
        dndx = [-(h - y) / a, (h - y) / a, (h + y) / a, -(h + y) / a]
        dndy = [-(b - x) / a, -(b + x) / a, (b + x) / a, (b - x) / a]

        B = Matrix(3, 8)
        for i in range(4):
            B.set(0, 2 * i, dndx[i])
            B.set(1, 2 * i + 1, dndy[i])
            B.set(2, 2 * i, dndy[i])
            B.set(2, 2 * i + 1, dndx[i])
        return B

    def get_displacement(self, x: float, y: float) -> Matrix:
        """Interpolated (u, v) at local point (x, y)."""
        self._validate_xy(x, y)
        N = Matrix(2, 8)
        for i, value in enumerate(self._shape_functions(x, y)):
            N.set(0, 2 * i, value)
            N.set(1, 2 * i + 1, value)
        return N * self.get_element_displacements()

    def get_deformation(self, x: float, y: float) -> Matrix:
        """Strain (εx, εy, γxy) at local point (x, y)."""
        self._validate_xy(x, y)
        return self._strain_matrix(x, y) * self.get_element_displacements()

    def get_stress(self, x: float, y: float) -> Matrix:
        """Stress (σx, σy, τxy) = C · ε at local point (x, y)."""
        return self._constitutive * self.get_deformation(x, y)

    def stress_samples(self, npoints: Optional[int] = None) -> pd.DataFrame:
        """
        Stress on a regular (N+1) × (N+1) grid spanning the element.

        Returns:
        --------
        pd.DataFrame
            One row per point: global X, Y, local x, y, sx, sy, sxy
        """
        npoints = CONFIG.membrane_integration_npoints if npoints is None else int(npoints)
        if npoints < 1:
            raise ValueError(f"npoints must be >= 1, got {npoints}")

        cx, cy = self.center()
        C = self._constitutive.to_numpy()
        d = self.get_element_displacements().to_numpy()

        rows = []
        for y in np.linspace(-self.h, self.h, npoints + 1):
            for x in np.linspace(-self.b, self.b, npoints + 1):
                sigma = C @ (self._strain_matrix(x, y).to_numpy() @ d)
                rows.append([cx + x, cy + y, x, y, sigma[0, 0], sigma[1, 0], sigma[2, 0]])
        return pd.DataFrame(rows, columns=STRESS_COLUMNS)

    def properties(self) -> List[Tuple[str, str]]:
        return super().properties() + [
            ("Width", f"{self.get_width():g}"),
            ("Height", f"{self.get_height():g}"),
            ("Thickness", f"{self.t:g}"),
            ("Elastic modulus", f"{self.E:g}"),
            ("Poisson ratio", f"{self.poisson:g}"),
        ]
