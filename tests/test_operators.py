import numpy as np
import pytest
import scipy.sparse as sp
from mgcycle.operators import SparseLevelOperator, ZeroOperator


def test_sparse_level_operator():
    A = SparseLevelOperator({1: sp.csr_matrix([[1.0, 2.0], [0.0, 3.0]]), 2: sp.identity(4)})
    assert (A.min_level, A.max_level) == (1, 2)
    assert A.size(1) == 2 and A.size(2) == 4
    src = np.array([1.0, 1.0])
    dst = np.empty(2)
    A.apply(1, dst, src)
    np.testing.assert_array_equal(dst, [3.0, 3.0])
    A.apply_transpose(1, dst, src)
    np.testing.assert_array_equal(dst, [1.0, 5.0])
    A.apply_add(1, dst, src)
    np.testing.assert_array_equal(dst, [4.0, 8.0])
    A.apply_transpose_add(1, dst, src)
    np.testing.assert_array_equal(dst, [5.0, 13.0])


def test_sparse_level_operator_levels():
    with pytest.raises(ValueError):
        SparseLevelOperator({})
    with pytest.raises(ValueError):
        SparseLevelOperator({0: sp.identity(2), 2: sp.identity(2)})


def test_zero_operator():
    Z = ZeroOperator(0, 3)
    dst = np.ones(3)
    Z.apply_add(1, dst, np.ones(3))
    np.testing.assert_array_equal(dst, np.ones(3))
    Z.apply_transpose(1, dst, np.ones(3))
    np.testing.assert_array_equal(dst, np.zeros(3))
    assert Z.size(0) is None
