"""
Coarse-level solvers, called once per visit of the lowest level of a
multigrid cycle.
"""

from abc import ABC, abstractmethod
import logging
import numpy.typing as npt
import scipy.sparse.linalg as spla
from .operators import SparseLevelOperator
from .smoothers import Smoother
from . import utils


class CoarseSolver(ABC):
    """Coarse solver interface"""

    @abstractmethod
    def __call__(self, level: int, dst: npt.NDArray, rhs: npt.NDArray) -> None:
        """Solve A_level dst = rhs, writing dst in place"""


class DirectCoarseSolver(CoarseSolver):
    """Sparse LU solve \\
    The factorisation is computed at the first call on a level and reused afterwards.

    Parameters
    ----------
    operator : SparseLevelOperator
        Level matrices

    Examples
    --------
    >>> import numpy as np
    >>> import scipy.sparse as sp
    >>> from mgcycle.operators import SparseLevelOperator
    >>> from mgcycle.coarse import DirectCoarseSolver
    >>> solver = DirectCoarseSolver(SparseLevelOperator({0: 2 * sp.identity(3)}))
    >>> x = np.empty(3)
    >>> solver(0, x, np.ones(3))
    """

    def __init__(self, operator: SparseLevelOperator) -> None:
        self.operator = operator
        self._factors = {}

    def factor(self, level: int) -> spla.SuperLU:
        if level not in self._factors:
            logging.info(f"Factorise coarse matrix on {level=}")
            self._factors[level] = spla.splu(self.operator[level].tocsc())
        return self._factors[level]

    def __call__(self, level: int, dst: npt.NDArray, rhs: npt.NDArray) -> None:
        dst[...] = self.factor(level).solve(rhs.ravel()).reshape(dst.shape)


class SmoothingCoarseSolver(CoarseSolver):
    """Approximate coarse solve by smoothing from a zero initial guess

    Parameters
    ----------
    smoother : Smoother
        Smoother applied on the coarse level
    """

    def __init__(self, smoother: Smoother) -> None:
        self.smoother = smoother

    def __call__(self, level: int, dst: npt.NDArray, rhs: npt.NDArray) -> None:
        utils.zero_initialise(dst)
        self.smoother.smooth(level, dst, rhs)
