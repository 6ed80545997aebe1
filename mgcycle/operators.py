"""
Level operators for multigrid hierarchies.

A level operator applies a matrix on a given level of the hierarchy:
dst = A_level src. The same interface is used for the level matrices and for
the optional edge coupling matrices of locally refined hierarchies.
"""

from abc import ABC, abstractmethod
from typing import Dict
import numpy as np
import numpy.typing as npt
import scipy.sparse as sp
from . import utils


class LevelOperator(ABC):
    """Matrix hierarchy interface

    Subclasses implement apply and apply_transpose, the additive variants
    default to a temporary array.
    """

    @property
    @abstractmethod
    def min_level(self) -> int: ...

    @property
    @abstractmethod
    def max_level(self) -> int: ...

    @abstractmethod
    def apply(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        """dst = A_level src"""

    @abstractmethod
    def apply_transpose(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        """dst = A_level^T src"""

    def apply_add(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        """dst += A_level src"""
        tmp = np.empty_like(dst)
        self.apply(level, tmp, src)
        utils.add_vector_scalar_inplace(dst, tmp, 1.0)

    def apply_transpose_add(
        self, level: int, dst: npt.NDArray, src: npt.NDArray
    ) -> None:
        """dst += A_level^T src"""
        tmp = np.empty_like(dst)
        self.apply_transpose(level, tmp, src)
        utils.add_vector_scalar_inplace(dst, tmp, 1.0)

    def size(self, level: int) -> int | None:
        """Number of unknowns at level, None when unknown"""
        return None


class SparseLevelOperator(LevelOperator):
    """Level operator backed by one scipy sparse matrix per level

    Parameters
    ----------
    matrices : Dict[int, sp.spmatrix]
        Sparse matrix for each level, keys must be contiguous

    Examples
    --------
    >>> import numpy as np
    >>> import scipy.sparse as sp
    >>> from mgcycle.operators import SparseLevelOperator
    >>> A = SparseLevelOperator({0: sp.identity(3), 1: 2 * sp.identity(5)})
    >>> dst = np.empty(5)
    >>> A.apply(1, dst, np.ones(5))
    """

    def __init__(self, matrices: Dict[int, sp.spmatrix]) -> None:
        if len(matrices) == 0:
            raise ValueError("At least one level matrix is needed")
        levels = sorted(matrices)
        if levels != list(range(levels[0], levels[-1] + 1)):
            raise ValueError(f"Levels should be contiguous, got {levels}")
        self.matrices = {level: sp.csr_matrix(matrices[level]) for level in levels}
        self._min_level = levels[0]
        self._max_level = levels[-1]

    @property
    def min_level(self) -> int:
        return self._min_level

    @property
    def max_level(self) -> int:
        return self._max_level

    def __getitem__(self, level: int) -> sp.csr_matrix:
        return self.matrices[level]

    def apply(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        dst[...] = (self.matrices[level] @ src.ravel()).reshape(dst.shape)

    def apply_transpose(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        dst[...] = (self.matrices[level].T @ src.ravel()).reshape(dst.shape)

    def apply_add(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        dst += (self.matrices[level] @ src.ravel()).reshape(dst.shape)

    def apply_transpose_add(
        self, level: int, dst: npt.NDArray, src: npt.NDArray
    ) -> None:
        dst += (self.matrices[level].T @ src.ravel()).reshape(dst.shape)

    def size(self, level: int) -> int:
        return self.matrices[level].shape[1]


class ZeroOperator(LevelOperator):
    """Operator contributing exactly zero on every level

    Equivalent to an absent edge matrix in the multigrid cycles.

    Parameters
    ----------
    min_level : int
        Lowest level index
    max_level : int
        Highest level index
    """

    def __init__(self, min_level: int, max_level: int) -> None:
        self._min_level = min_level
        self._max_level = max_level

    @property
    def min_level(self) -> int:
        return self._min_level

    @property
    def max_level(self) -> int:
        return self._max_level

    def apply(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        utils.zero_initialise(dst)

    def apply_transpose(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        utils.zero_initialise(dst)

    def apply_add(self, level: int, dst: npt.NDArray, src: npt.NDArray) -> None:
        pass

    def apply_transpose_add(
        self, level: int, dst: npt.NDArray, src: npt.NDArray
    ) -> None:
        pass
