"""
Tests for Node and RestraintNode.
"""

import pytest

from dsfem.errors import DimensionError, DOFError
from dsfem.kernel.dof import DOF_RESTRAINED
from dsfem.kernel.matrix import Matrix
from dsfem.model import Node, RestraintNode


def test_node_2d():
    n = Node("N1", 250, 100)
    assert n.tag == "N1"
    assert n.get_model_tag() == "N1"
    assert n.get_ndof() == 2
    assert (n.x, n.y) == (250.0, 100.0)
    assert n.get_dofid().is_zeros()
    assert n.get_displacements().is_zeros()

    with pytest.raises(DimensionError):
        n.z


def test_node_3d():
    n = Node("N", 250, 0, -543)
    assert n.get_ndof() == 3
    assert n.z == -543.0
    assert list(n.get_coordinates().get_array()) == [250.0, 0.0, -543.0]


def test_node_dof_range():
    n = Node("N1", 0, 0)
    n.set_dof(2, 7)
    assert n.get_dof(2) == 7

    with pytest.raises(DOFError):
        n.get_dof(0)
    with pytest.raises(DOFError):
        n.set_dof(3, 1)
    with pytest.raises(DOFError):
        n.set_displacement(3, 1.0)


def test_node_vector_setters_check_length():
    n = Node("N1", 0, 0)
    n.set_displacements(Matrix.column([0.5, -0.25]))
    assert n.get_displacement(1) == 0.5
    assert n.get_displacement(2) == -0.25

    n.set_dofid(Matrix(1, 2, [3, 4]))
    assert n.get_dof(1) == 3

    with pytest.raises(DimensionError):
        n.set_displacements(Matrix.vector(3))
    with pytest.raises(DimensionError):
        n.apply_load(Matrix(2, 2))


def test_load_and_reaction_sign_convention():
    """
    WHAT IS THIS TEST?
    ==================
    A load P is recorded in the loads and subtracted from the reactions.
    An element force f is added to the reactions. Once the element force
    balances the load, the reaction accumulator is back to zero.
    """
    n = Node("N1", 0, 0)
    P = Matrix.column([-5.0, 2.0])

    n.apply_load(P)
    assert list(n.get_load_results().get_array()) == [-5.0, 2.0]
    assert list(n.get_reactions().get_array()) == [5.0, -2.0]

    n.apply_load(P)
    assert n.get_load_results().get(0) == -10.0

    n.apply_element_stress(P * 2)
    assert n.get_reactions().is_zeros()
    assert n.get_reaction(1) == 0.0


def test_node_reset():
    n = Node("N1", 0, 0)
    n.set_dof(1, DOF_RESTRAINED)
    n.set_displacement(2, 3.0)
    n.apply_load(Matrix.column([1.0, 1.0]))

    n.reset()

    assert n.get_dofid().is_zeros()
    assert n.get_displacements().is_zeros()
    assert n.get_reactions().is_zeros()
    assert n.get_load_results().is_zeros()
    assert (n.x, n.y) == (0.0, 0.0)


def test_restraint_node():
    n = Node("N1", 0, 0)
    r = RestraintNode("R1", n)
    r.add_dofid(2)
    r.add_dofid(2)
    assert r.get_restrained_dofs() == [2]
    assert r.get_node() is n

    r.apply()
    assert n.get_dof(1) == 0
    assert n.get_dof(2) == DOF_RESTRAINED

    r.add_all()
    r.apply()
    assert n.get_dofid().is_double(DOF_RESTRAINED)


def test_restraint_rejects_bad_dof():
    n = Node("N1", 0, 0)
    with pytest.raises(DOFError):
        RestraintNode("R1", n, dofs=[3])
    with pytest.raises(DOFError):
        RestraintNode("R2", n).add_dofid(0)
