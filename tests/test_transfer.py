import numpy as np
import pytest
from mgcycle.transfer import MatrixTransfer, linear_interpolation_1d, tensor_interpolation


def test_linear_interpolation_1d():
    P = linear_interpolation_1d(3)
    assert P.shape == (5, 2)
    np.testing.assert_array_equal(
        P.toarray(),
        [[0.5, 0.0], [1.0, 0.0], [0.5, 0.5], [0.0, 1.0], [0.0, 0.5]],
    )
    with pytest.raises(ValueError):
        linear_interpolation_1d(1)


def test_tensor_interpolation():
    assert tensor_interpolation(4, 3).shape == (7**3, 3**3)
    with pytest.raises(NotImplementedError):
        tensor_interpolation(4, 4)


def test_prolongate():
    transfer = MatrixTransfer({1: linear_interpolation_1d(4)})
    fine = np.empty(7)
    transfer.prolongate(1, fine, np.array([1.0, 2.0, 3.0]))
    np.testing.assert_allclose(fine, [0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 1.5])


def test_restrict_and_add():
    transfer = MatrixTransfer({1: linear_interpolation_1d(2)})
    coarse = np.array([1.0])
    transfer.restrict_and_add(1, coarse, np.array([1.0, 2.0, 3.0]))
    np.testing.assert_allclose(coarse, [1.0 + 0.5 + 2.0 + 1.5])
