import numpy as np
import pytest
from mgcycle.levels import LevelVector


def test_resize_and_levels():
    vector = LevelVector(2, 4)
    assert (vector.min_level, vector.max_level) == (2, 4)
    assert vector.levels() == range(2, 5)
    assert len(vector) == 3
    assert all(array.size == 0 for array in vector)


def test_resize_invalid_range():
    with pytest.raises(ValueError):
        LevelVector(3, 1)


def test_out_of_range_access():
    vector = LevelVector(1, 2)
    with pytest.raises(IndexError):
        vector[0]
    with pytest.raises(IndexError):
        vector[3] = np.ones(2)


def test_setitem_stores_contiguous_float():
    vector = LevelVector(0, 0)
    vector[0] = np.arange(6).reshape(2, 3).T
    assert vector[0].dtype == np.float64
    assert vector[0].flags["C_CONTIGUOUS"]
    np.testing.assert_array_equal(vector[0], [[0, 3], [1, 4], [2, 5]])


def test_reinit_like():
    defect = LevelVector(0, 1)
    defect[0] = np.ones(3)
    defect[1] = np.ones((2, 4))
    solution = LevelVector(0, 1)
    solution.reinit_like(defect)
    assert solution[0].shape == (3,)
    assert solution[1].shape == (2, 4)
    assert not np.any(solution[1])


def test_reinit_like_range_mismatch():
    with pytest.raises(ValueError):
        LevelVector(0, 1).reinit_like(LevelVector(0, 2))


def test_zero_and_norm():
    vector = LevelVector(0, 0)
    vector[0] = np.array([3.0, 4.0])
    assert vector.l2_norm(0) == pytest.approx(5.0)
    vector.zero(0)
    np.testing.assert_array_equal(vector[0], [0.0, 0.0])


def test_reinit_allocates_zeros_like():
    vector = LevelVector(0, 1)
    vector[1] = np.ones(2)
    like = np.ones((3, 2), dtype=np.float32)
    vector.reinit(1, like)
    assert vector[1].shape == (3, 2)
    assert vector[1].dtype == np.float32
    assert not np.any(vector[1])
