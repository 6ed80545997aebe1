"""
This module defines the smoothers applied before and after the coarse-grid
correction of a multigrid cycle: a no-op smoother, damped Jacobi and
Gauss-Seidel iterations on sparse level matrices.
"""

from abc import ABC, abstractmethod
import numpy as np
import numpy.typing as npt
from numba import njit
from .operators import SparseLevelOperator
from . import utils


class Smoother(ABC):
    """Smoother interface"""

    @abstractmethod
    def smooth(self, level: int, solution: npt.NDArray, rhs: npt.NDArray) -> None:
        """Smooth solution in place for A_level solution = rhs"""


class IdentitySmoother(Smoother):
    """Smoother leaving the solution unchanged"""

    def smooth(self, level: int, solution: npt.NDArray, rhs: npt.NDArray) -> None:
        pass


class JacobiSmoother(Smoother):
    """Damped Jacobi iterations \\
    x += omega D^-1 (b - Ax)

    Parameters
    ----------
    operator : SparseLevelOperator
        Level matrices
    n_iterations : int, optional
        Number of iterations, by default 2
    omega : float, optional
        Damping factor, by default 2/3

    Examples
    --------
    >>> import numpy as np
    >>> import scipy.sparse as sp
    >>> from mgcycle.operators import SparseLevelOperator
    >>> from mgcycle.smoothers import JacobiSmoother
    >>> A = SparseLevelOperator({0: 2 * sp.identity(4)})
    >>> x = np.zeros(4)
    >>> JacobiSmoother(A, n_iterations=1, omega=1.0).smooth(0, x, np.ones(4))
    """

    def __init__(
        self, operator: SparseLevelOperator, n_iterations: int = 2, omega: float = 2.0 / 3
    ) -> None:
        self.operator = operator
        self.n_iterations = n_iterations
        self.omega = omega
        self._inv_diagonal = {}

    def inv_diagonal(self, level: int) -> npt.NDArray[np.float64]:
        if level not in self._inv_diagonal:
            diagonal = self.operator[level].diagonal()
            if np.any(diagonal == 0):
                raise ValueError(f"Zero diagonal entry in level {level} matrix")
            self._inv_diagonal[level] = 1.0 / diagonal
        return self._inv_diagonal[level]

    def smooth(self, level: int, solution: npt.NDArray, rhs: npt.NDArray) -> None:
        inv_diagonal = self.inv_diagonal(level).reshape(solution.shape)
        residual = np.empty_like(solution)
        for _ in range(self.n_iterations):
            self.operator.apply(level, residual, solution)
            utils.linear_operator_vectors_inplace(residual, -1.0, rhs, 1.0)
            solution += self.omega * inv_diagonal * residual


@njit(fastmath=False, cache=True)
def gauss_seidel_sweep(
    indptr: npt.NDArray[np.int32],
    indices: npt.NDArray[np.int32],
    data: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    reverse: bool,
) -> None:
    """Gauss-Seidel sweep on CSR matrix \\
    Smooths x in Ax = b, in lexicographic (or reverse) ordering

    Parameters
    ----------
    indptr : npt.NDArray[np.int32]
        CSR row pointers
    indices : npt.NDArray[np.int32]
        CSR column indices
    data : npt.NDArray[np.float64]
        CSR values
    x : npt.NDArray[np.float64]
        Solution (mutable) [N]
    b : npt.NDArray[np.float64]
        Right-hand side [N]
    reverse : bool
        Sweep from last to first row
    """
    n = len(x)
    for ii in range(n):
        i = n - 1 - ii if reverse else ii
        diagonal = 0.0
        sigma = b[i]
        for jj in range(indptr[i], indptr[i + 1]):
            j = indices[jj]
            if j == i:
                diagonal += data[jj]
            else:
                sigma -= data[jj] * x[j]
        x[i] = sigma / diagonal


class GaussSeidelSmoother(Smoother):
    """Gauss-Seidel iterations \\
    With symmetric=True every iteration is a forward sweep followed by a backward sweep.

    Parameters
    ----------
    operator : SparseLevelOperator
        Level matrices
    n_iterations : int, optional
        Number of iterations, by default 2
    symmetric : bool, optional
        Symmetric Gauss-Seidel, by default False
    reverse : bool, optional
        Sweep from last to first unknown (non-symmetric only), by default False

    Examples
    --------
    >>> import numpy as np
    >>> import scipy.sparse as sp
    >>> from mgcycle.operators import SparseLevelOperator
    >>> from mgcycle.smoothers import GaussSeidelSmoother
    >>> A = SparseLevelOperator({0: 2 * sp.identity(4)})
    >>> x = np.zeros(4)
    >>> GaussSeidelSmoother(A, n_iterations=1).smooth(0, x, np.ones(4))
    """

    def __init__(
        self,
        operator: SparseLevelOperator,
        n_iterations: int = 2,
        symmetric: bool = False,
        reverse: bool = False,
    ) -> None:
        self.operator = operator
        self.n_iterations = n_iterations
        self.symmetric = symmetric
        self.reverse = reverse

    def smooth(self, level: int, solution: npt.NDArray, rhs: npt.NDArray) -> None:
        A = self.operator[level]
        x = solution.reshape(-1)
        b = np.ascontiguousarray(rhs.reshape(-1), dtype=x.dtype)
        for _ in range(self.n_iterations):
            if self.symmetric:
                gauss_seidel_sweep(A.indptr, A.indices, A.data, x, b, False)
                gauss_seidel_sweep(A.indptr, A.indices, A.data, x, b, True)
            else:
                gauss_seidel_sweep(A.indptr, A.indices, A.data, x, b, self.reverse)
