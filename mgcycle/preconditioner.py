"""
Multigrid preconditioner

Wraps a Multigrid object so that one cycle acts as an approximate inverse of
the finest-level matrix, usable by scipy Krylov solvers.
"""

import numpy as np
import numpy.typing as npt
from scipy.sparse.linalg import LinearOperator
from .multigrid import Cycle, Multigrid
from . import utils


class PreconditionMG:
    """One multigrid cycle per application

    Parameters
    ----------
    mg : Multigrid
        Configured multigrid object
    vcycle_only : bool, optional
        Always run the V pattern, whatever mg.cycle_type, by default False

    Examples
    --------
    >>> import numpy as np
    >>> from mgcycle.laplacian import poisson_hierarchy
    >>> from mgcycle.smoothers import JacobiSmoother
    >>> from mgcycle.coarse import DirectCoarseSolver
    >>> from mgcycle.multigrid import Multigrid
    >>> from mgcycle.preconditioner import PreconditionMG
    >>> matrix, transfer = poisson_hierarchy(ncells_coarse=2, nlevels=4, ndim=2)
    >>> smoother = JacobiSmoother(matrix)
    >>> mg = Multigrid(matrix, DirectCoarseSolver(matrix), transfer, smoother, smoother)
    >>> preconditioner = PreconditionMG(mg)
    >>> src = np.ones(matrix.size(3))
    >>> dst = np.empty_like(src)
    >>> preconditioner.vmult(dst, src)
    """

    def __init__(self, mg: Multigrid, vcycle_only: bool = False) -> None:
        self.mg = mg
        self.vcycle_only = vcycle_only

    @property
    def size(self) -> int:
        return self.mg.matrix.size(self.mg.max_level)

    def _uses_variable_cycle(self) -> bool:
        return not self.vcycle_only and self.mg.cycle_type != Cycle.V

    def copy_to_mg(self, src: npt.NDArray) -> None:
        """Fill the multigrid defect from a finest-level vector \\
        Coarser levels start from zero for the V-cycle, which restricts the
        residual additively. The variable cycle subtracts its corrections from
        the defect of every level, which then holds the restricted defect.

        Parameters
        ----------
        src : npt.NDArray
            Finest-level right-hand side
        """
        mg = self.mg
        sizes = {
            level: mg.matrix.size(level) for level in range(mg.min_level, mg.max_level)
        }
        if None in sizes.values():
            raise ValueError(
                "The level matrices must report their size to build the coarse defects"
            )
        mg.defect.resize(mg.min_level, mg.max_level)
        mg.defect[mg.max_level] = np.array(src, dtype=np.float64).reshape(-1)
        for level, size in sizes.items():
            mg.defect[level] = np.zeros(size)
        if self._uses_variable_cycle():
            for level in range(mg.max_level, mg.min_level, -1):
                mg.transfer.restrict_and_add(
                    level, mg.defect[level - 1], mg.defect[level]
                )

    def copy_from_mg(self, dst: npt.NDArray) -> None:
        utils.injection(dst, self.mg.solution[self.mg.max_level])

    def vmult(self, dst: npt.NDArray, src: npt.NDArray) -> None:
        """dst = M^-1 src, with M^-1 one multigrid cycle

        Parameters
        ----------
        dst : npt.NDArray
            Result (mutable, C-contiguous)
        src : npt.NDArray
            Right-hand side
        """
        self.copy_to_mg(src)
        if self.vcycle_only:
            self.mg.vcycle()
        else:
            self.mg.cycle()
        self.copy_from_mg(dst)

    def __call__(self, src: npt.NDArray) -> npt.NDArray:
        dst = np.empty(self.size)
        self.vmult(dst, src)
        return dst

    def aslinearoperator(self) -> LinearOperator:
        """scipy LinearOperator applying one cycle, for the M argument of scipy.sparse.linalg solvers"""
        return LinearOperator(
            shape=(self.size, self.size), matvec=self.__call__, dtype=np.float64
        )
