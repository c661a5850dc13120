"""
Tests for the rectangular membrane element.

Reference element: nodes (0,0), (250,0), (250,100), (0,100),
E = 300000, ν = 0.15, t = 20. Stiffness values are compared after
scaling by 1e-6, constitutive values after scaling by 1e-5.
"""

import numpy as np
import pytest

from dsfem.errors import DOFError, GeometryError
from dsfem.kernel.matrix import Matrix
from dsfem.model import Membrane, Node

K_ROWS = [
    # Upper triangle, row r starts at column r
    [2.9923273657289005, 0.88235294117647056, 0.26854219948849117, -0.42199488491048598,
     -1.4961636828644502, -0.88235294117647056, -1.7647058823529413, 0.42199488491048598],
    [7.2890025575447561, 0.42199488491048598, 2.2097186700767257, -0.88235294117647056,
     -2.731457800511508, -0.42199488491048598, -4.9411764705882346],
    [2.9923273657289005, -0.88235294117647056, -1.7647058823529413, -0.42199488491048598,
     -1.4961636828644502, 0.88235294117647056],
    [7.2890025575447561, 0.42199488491048598, -4.9411764705882346, 0.88235294117647056,
     -2.731457800511508],
    [2.9923273657289005, 0.88235294117647056, 0.26854219948849117, -0.42199488491048598],
    [7.2890025575447561, 0.42199488491048598, 2.2097186700767257],
    [2.9923273657289005, -0.88235294117647056],
    [7.2890025575447561],
]


def make_membrane():
    nodes = [Node("N1", 0, 0), Node("N2", 250, 0), Node("N3", 250, 100), Node("N4", 0, 100)]
    return nodes, Membrane("MEM", *nodes, E=300000, poisson=0.15, thickness=20)


def test_membrane_geometry():
    _, mem = make_membrane()
    assert mem.tag == "MEM"
    assert mem.get_width() == 250.0
    assert mem.get_height() == 100.0
    assert mem.get_node_number() == 4
    assert mem.get_ndof() == 8
    assert mem.center() == (125.0, 50.0)
    assert mem.get_dofid().is_zeros()


def test_membrane_constitutive():
    _, mem = make_membrane()
    C = mem.get_constitutive() * 1e-5

    assert C.get(0, 0) == pytest.approx(3.0690537084398981, abs=1e-12)
    assert C.get(1, 1) == pytest.approx(3.0690537084398981, abs=1e-12)
    assert C.get(0, 1) == pytest.approx(0.46035805626598458, abs=1e-12)
    assert C.get(1, 0) == pytest.approx(0.46035805626598458, abs=1e-12)
    assert C.get(2, 2) == pytest.approx(1.3043478260869568, abs=1e-12)
    assert C.get(0, 2) == 0.0
    assert C.get(1, 2) == 0.0


def test_membrane_stiffness_values():
    """
    WHAT IS THIS TEST?
    ==================
    The closed-form rectangle stiffness is checked coefficient by
    coefficient. Any slip in the A1..A6 placement shows up here.
    """
    _, mem = make_membrane()
    k = mem.get_stiffness_local() * 1e-6

    assert k.is_square()
    assert k.is_symmetric()
    for r, row in enumerate(K_ROWS):
        for offset, expected in enumerate(row):
            assert k.get(r, r + offset) == pytest.approx(expected, abs=1e-9), (r, r + offset)

    assert mem.get_stiffness_global() == mem.get_stiffness_local()


def test_membrane_stiffness_rigid_translation():
    """A rigid x-translation produces no resistant force."""
    _, mem = make_membrane()
    k = mem.get_stiffness_local().to_numpy()

    ux = np.tile([1.0, 0.0], 4)
    np.testing.assert_allclose(k @ ux, 0.0, atol=1e-6)


def test_square_membrane_rigid_translations():
    nodes = [Node("N1", 0, 0), Node("N2", 2, 0), Node("N3", 2, 2), Node("N4", 0, 2)]
    k = Membrane("SQ", *nodes, E=2000, poisson=0.2, thickness=1.0).get_stiffness_local().to_numpy()

    np.testing.assert_allclose(k @ np.tile([1.0, 0.0], 4), 0.0, atol=1e-9)
    np.testing.assert_allclose(k @ np.tile([0.0, 1.0], 4), 0.0, atol=1e-9)


def test_membrane_forces_zero_without_displacement():
    _, mem = make_membrane()
    assert mem.get_force_local().is_zeros()
    assert mem.get_force_global().is_zeros()


def test_membrane_equivalent_forces():
    nodes, mem = make_membrane()
    f = Matrix.column([-1.0, 5.0])
    mem.add_equivalent_force_node(4, f)
    mem.add_equivalent_force_node(4, f)

    fg = mem.get_force_global()
    assert fg.get(6) == 2.0
    assert fg.get(7) == -10.0
    assert mem.get_force_local().is_zeros()

    mem.add_force_to_reaction()
    for node in nodes:
        assert node.get_reactions().is_zeros()

    with pytest.raises(DOFError):
        mem.add_equivalent_force_node(5, f)
    with pytest.raises(DOFError):
        mem.add_equivalent_force_node(1, Matrix.vector(3))


def test_membrane_rejects_bad_geometry():
    n1, n2, n4 = Node("N1", 0, 0), Node("N2", 250, 0), Node("N4", 0, 100)

    with pytest.raises(GeometryError, match="dimension at x"):
        Membrane("M", n1, n2, Node("N3", 260, 100), n4, 300000, 0.15, 20)
    with pytest.raises(GeometryError, match="dimension at y"):
        Membrane("M", n1, n2, Node("N3", 250, 110), n4, 300000, 0.15, 20)
    with pytest.raises(GeometryError, match="axis-aligned"):
        Membrane("M", n1, n2, Node("N3", 260, 100), Node("N4", 10, 100), 300000, 0.15, 20)
    with pytest.raises(GeometryError, match="counter-clockwise"):
        Membrane("M", n2, n1, n4, Node("N3", 250, 100), 300000, 0.15, 20)
    with pytest.raises(GeometryError, match="thickness"):
        Membrane("M", n1, n2, Node("N3", 250, 100), n4, 300000, 0.15, 0)
    with pytest.raises(ValueError):
        Membrane("M", n1, n2, Node("N3", 250, 100), n4, 300000, 1.0, 20)


def _stretch(nodes, strain):
    """Give every node ux = strain · x, which is a uniform εx field."""
    for node in nodes:
        node.set_displacement(1, strain * node.x)


def test_membrane_uniform_strain_field():
    nodes, mem = make_membrane()
    _stretch(nodes, 1e-3)

    u = mem.get_displacement(0.0, 0.0)
    assert u.get(0) == pytest.approx(0.125)
    assert u.get(1) == pytest.approx(0.0)

    for x, y in [(0.0, 0.0), (125.0, 50.0), (-60.0, 20.0)]:
        eps = mem.get_deformation(x, y)
        np.testing.assert_allclose(eps.get_array(), [1e-3, 0.0, 0.0], atol=1e-15)

        sigma = mem.get_stress(x, y)
        C = mem.get_constitutive()
        np.testing.assert_allclose(
            sigma.get_array(),
            [C.get(0, 0) * 1e-3, C.get(1, 0) * 1e-3, 0.0],
            rtol=1e-12, atol=1e-12,
        )


def test_membrane_shear_field():
    """Nodal ux = γ·y gives pure shear strain γ."""
    nodes, mem = make_membrane()
    for node in nodes:
        node.set_displacement(1, 2e-3 * node.y)

    eps = mem.get_deformation(30.0, -10.0)
    np.testing.assert_allclose(eps.get_array(), [0.0, 0.0, 2e-3], atol=1e-15)


def test_membrane_rejects_points_outside():
    _, mem = make_membrane()
    with pytest.raises(GeometryError):
        mem.get_stress(200.0, 0.0)
    with pytest.raises(GeometryError):
        mem.get_displacement(0.0, -51.0)


def test_membrane_stress_samples():
    nodes, mem = make_membrane()
    _stretch(nodes, 1e-3)

    samples = mem.stress_samples()
    assert len(samples) == 16 * 16
    assert list(samples.columns) == ["X", "Y", "x", "y", "sx", "sy", "sxy"]
    assert samples["X"].min() == pytest.approx(0.0)
    assert samples["Y"].max() == pytest.approx(100.0)
    np.testing.assert_allclose(samples["sx"], mem.get_constitutive().get(0, 0) * 1e-3, rtol=1e-12)
    np.testing.assert_allclose(samples["sxy"], 0.0, atol=1e-9)

    assert len(mem.stress_samples(2)) == 9
    with pytest.raises(ValueError):
        mem.stress_samples(0)


def test_membrane_reset():
    nodes, mem = make_membrane()
    for i, node in enumerate(nodes):
        node.set_dof(1, 2 * i + 1)
        node.set_dof(2, 2 * i + 2)
    mem.set_dofid()
    mem.add_equivalent_force_node(1, Matrix.column([1.0, 1.0]))
    assert list(mem.get_dofid().get_array()) == [1, 2, 3, 4, 5, 6, 7, 8]

    mem.reset()
    assert mem.get_dofid().is_zeros()
    assert mem.get_equivalent_forces().is_zeros()
