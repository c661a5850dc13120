"""
Tests for the dense Matrix: construction, indexing, arithmetic, predicates,
reductions and determinant.
"""

import numpy as np
import pytest

from dsfem.errors import DimensionError, MatrixIndexError
from dsfem.kernel.matrix import Matrix


def test_matrix_init_zero_filled():
    m = Matrix(3, 4)
    assert m.n == 3
    assert m.m == 4
    assert m.size() == (3, 4)
    assert m.is_zeros()
    assert m.origin == 0


def test_matrix_init_rejects_empty_dimensions():
    with pytest.raises(DimensionError):
        Matrix(0, 3)
    with pytest.raises(DimensionError):
        Matrix(2, -1)


def test_from_rows_rejects_ragged_rows():
    with pytest.raises(DimensionError, match="rectangular"):
        Matrix.from_rows([[1, 2, 3], [4, 5]])
    with pytest.raises(DimensionError, match="rectangular"):
        Matrix.from_rows([1, 2, 3])


def test_matrix_init_from_flat_buffer_is_row_major_copy():
    data = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    m = Matrix(2, 3, data)
    data[0] = 100.0

    assert m.get(0, 0) == 1.0
    assert m.get(0, 2) == 3.0
    assert m.get(1, 0) == 4.0
    with pytest.raises(DimensionError):
        Matrix(2, 2, data)


def test_get_set_bounds_checked():
    m = Matrix(2, 2)
    m.set(1, 1, 7.0)
    assert m.get(1, 1) == 7.0
    assert m[1, 1] == 7.0

    with pytest.raises(MatrixIndexError):
        m.get(2, 0)
    with pytest.raises(MatrixIndexError):
        m.set(0, -1, 1.0)
    # Still catchable as a plain IndexError
    with pytest.raises(IndexError):
        m.get(0, 5)


def test_one_based_view_shares_buffer():
    """
    WHAT IS THIS TEST?
    ==================
    Stiffness tables read naturally with 1-based indices. with_origin(1)
    returns a view: writing K(1, 1) through the view must show up as
    K[0, 0] in the 0-based matrix, and index 0 must be out of range.
    """
    k = Matrix(3, 3)
    k1 = k.with_origin(1)
    k1.set(1, 1, 10.0)
    k1.set(3, 3, -2.0)

    assert k.get(0, 0) == 10.0
    assert k.get(2, 2) == -2.0
    with pytest.raises(MatrixIndexError):
        k1.get(0, 0)
    with pytest.raises(MatrixIndexError):
        k.get(3, 3)


def test_vector_access():
    v = Matrix.vector(3)
    assert v.is_vector()
    assert v.length() == 3
    v.set(2, -5.0)
    assert v.get(2) == -5.0

    row = Matrix(1, 4)
    row.set(3, 2.5)
    assert row.get(0, 3) == 2.5

    with pytest.raises(DimensionError):
        Matrix(2, 2).get(0)
    with pytest.raises(MatrixIndexError):
        v.get(3)


def test_clone_is_independent():
    a = Matrix.from_rows([[1, 2], [3, 4]], origin=1)
    b = a.clone()
    b.set(1, 1, 99.0)

    assert a.get(1, 1) == 1.0
    assert b.origin == 1


def test_addition_and_subtraction():
    a = Matrix.from_rows([[1, 2], [3, 4]])
    b = Matrix.from_rows([[5, 6], [7, 8]])

    assert (a + b).equals(Matrix.from_rows([[6, 8], [10, 12]]))
    assert (b - a).equals(Matrix.from_rows([[4, 4], [4, 4]]))
    assert ((a + b) - b) == a
    assert (-a).equals(Matrix.from_rows([[-1, -2], [-3, -4]]))

    a += b
    assert a.equals(Matrix.from_rows([[6, 8], [10, 12]]))
    a -= b
    assert a.equals(Matrix.from_rows([[1, 2], [3, 4]]))


def test_arithmetic_shape_mismatch():
    a = Matrix(2, 2)
    b = Matrix(2, 3)
    with pytest.raises(DimensionError):
        a + b
    with pytest.raises(DimensionError):
        a - b
    with pytest.raises(DimensionError):
        a += b
    with pytest.raises(DimensionError):
        b * b


def test_matrix_product():
    a = Matrix.from_rows([[1, 2], [3, 4]])
    b = Matrix.from_rows([[5, 6], [7, 8]])
    c = a * b

    assert c.equals(Matrix.from_rows([[19, 22], [43, 50]]))
    assert (a @ b) == c
    assert c.max() == 50.0
    assert c.min() == 19.0
    assert c.sum() == 134.0


def test_product_resizes():
    a = Matrix(2, 3, [1, 2, 3, 4, 5, 6])
    x = Matrix.column([1, 1, 1])
    y = a * x
    assert y.shape == (2, 1)
    assert y.get(0) == 6.0
    assert y.get(1) == 15.0

    a *= x
    assert a.shape == (2, 1)


def test_scalar_multiply():
    a = Matrix.from_rows([[1, -2], [3, 4]])
    assert (a * 2).equals(Matrix.from_rows([[2, -4], [6, 8]]))
    assert (0.5 * a).equals(Matrix.from_rows([[0.5, -1], [1.5, 2]]))
    a *= -1
    assert a.equals(Matrix.from_rows([[-1, 2], [-3, -4]]))


def test_transpose():
    a = Matrix(2, 3, [1, 2, 3, 4, 5, 6])
    t = a.transpose()

    assert t.shape == (3, 2)
    assert t.get(2, 1) == 6.0
    assert t.get(0, 1) == 4.0
    assert t.transpose() == a
    assert a.T == t

    a.transpose_self()
    assert a.shape == (3, 2)
    assert a == t


def test_predicates():
    assert Matrix.identity(4).is_identity()
    assert Matrix.identity(4).is_diag()
    assert Matrix.identity(4).is_symmetric()

    d = Matrix.from_rows([[2, 0], [0, 3]])
    assert d.is_diag()
    assert not d.is_identity()

    s = Matrix.from_rows([[1, 2], [2, 1]])
    assert s.is_symmetric()
    assert not s.is_diag()
    assert not Matrix(2, 3).is_symmetric()

    ones = Matrix(2, 2)
    ones.fill_ones()
    assert ones.is_ones()
    assert ones.is_equal()
    ones.fill(4.0)
    assert ones.is_double(4.0)
    assert not ones.is_zeros()


def test_predicates_use_absolute_tolerance():
    m = Matrix.identity(2)
    m.set(0, 1, 1e-13)
    assert m.is_identity()
    m.set(0, 1, 1e-9)
    assert not m.is_identity()


def test_make_symmetric():
    a = Matrix.from_rows([[1, 2], [3, 4]])
    a.make_symmetric()
    assert a.equals(Matrix.from_rows([[1, 2], [2, 4]]))

    b = Matrix.from_rows([[1, 2], [3, 4]])
    b.make_symmetric(upper=False)
    assert b.equals(Matrix.from_rows([[1, 3], [3, 4]]))

    with pytest.raises(DimensionError):
        Matrix(2, 3).make_symmetric()


def test_row_and_column_extraction():
    a = Matrix(3, 3, range(1, 10))

    row = a.get_row(1)
    assert row.shape == (1, 3)
    assert list(row.get_array()) == [4.0, 5.0, 6.0]

    col = a.get_column(2, 1, 2)
    assert col.shape == (2, 1)
    assert list(col.get_array()) == [6.0, 9.0]

    a1 = a.with_origin(1)
    assert list(a1.get_row(3, 2, 3).get_array()) == [8.0, 9.0]


def test_norm():
    v = Matrix.column([3, 4, 5, 6, 7, 8])
    assert v.norm() == pytest.approx(14.10673597966588, abs=1e-12)
    with pytest.raises(DimensionError):
        Matrix(2, 2).norm()


def test_determinant_small():
    assert Matrix.from_rows([[3]]).det() == 3.0
    assert Matrix.from_rows([[2, 4], [7, 3]]).det() == pytest.approx(-22.0)
    assert Matrix.from_rows([[1, 2, 3], [5, 2, 1], [2, 2, 3]]).det() == pytest.approx(-4.0)

    a = Matrix.from_rows([[2, 4, 7, 8], [7, 3, 3, 5], [9, 7, 2, 1], [0, 5, 7, 3]])
    assert a.det() == pytest.approx(-580.0)


def test_determinant_all_ones_is_zero():
    for n in (2, 3, 5, 10):
        m = Matrix(n, n)
        m.fill_ones()
        assert m.det() == pytest.approx(0.0, abs=1e-12)


def test_determinant_large_matches_numpy():
    rng = np.random.default_rng(7)
    values = rng.normal(size=(9, 9))
    m = Matrix(9, 9, values)
    assert m.det() == pytest.approx(np.linalg.det(values), rel=1e-9)


def test_determinant_requires_square():
    with pytest.raises(DimensionError):
        Matrix(2, 3).det()


def test_string_output():
    a = Matrix.from_rows([[1, 2], [3, 4.5]])
    assert a.to_string(matlab_like=True) == "[1 2; 3 4.5]"
    assert a.to_string() == "1\t2\n3\t4.5"
    assert a.to_string_line(to_int=True) == "1\t2\t3\t4"


def test_save_to_file(tmp_path):
    a = Matrix.from_rows([[1, 2], [3, 4]])
    path = tmp_path / "m.txt"
    a.save_to_file(path)

    loaded = np.loadtxt(path, delimiter="\t")
    np.testing.assert_allclose(loaded, [[1, 2], [3, 4]])
