"""
Transfer operators between adjacent levels of a multigrid hierarchy.

Contains the restriction (fine to coarse, additive) and prolongation
(coarse to fine, overwriting) interface, a sparse-matrix implementation and
builders for linear interpolation on vertex-centred grids.
"""

from abc import ABC, abstractmethod
from functools import reduce
from typing import Dict
import numpy as np
import numpy.typing as npt
import scipy.sparse as sp


class Transfer(ABC):
    """Inter-level transfer interface"""

    @abstractmethod
    def restrict_and_add(
        self, level: int, coarse_dst: npt.NDArray, fine_src: npt.NDArray
    ) -> None:
        """coarse_dst += R_level fine_src, from level to level-1"""

    @abstractmethod
    def prolongate(
        self, level: int, fine_dst: npt.NDArray, coarse_src: npt.NDArray
    ) -> None:
        """fine_dst = P_level coarse_src, from level-1 to level"""


class MatrixTransfer(Transfer):
    """Transfer with explicit prolongation matrices \\
    Restriction is the transpose of the prolongation.

    Parameters
    ----------
    prolongations : Dict[int, sp.spmatrix]
        Prolongation matrix from level-1 to level, keyed by the fine level

    Examples
    --------
    >>> import numpy as np
    >>> from mgcycle.transfer import MatrixTransfer, linear_interpolation_1d
    >>> transfer = MatrixTransfer({1: linear_interpolation_1d(2)})
    >>> fine = np.empty(3)
    >>> transfer.prolongate(1, fine, np.ones(1))
    """

    def __init__(self, prolongations: Dict[int, sp.spmatrix]) -> None:
        self.prolongations = {
            level: sp.csr_matrix(matrix) for level, matrix in prolongations.items()
        }
        self.restrictions = {
            level: sp.csr_matrix(matrix.T) for level, matrix in self.prolongations.items()
        }

    def restrict_and_add(
        self, level: int, coarse_dst: npt.NDArray, fine_src: npt.NDArray
    ) -> None:
        coarse_dst += (self.restrictions[level] @ fine_src.ravel()).reshape(
            coarse_dst.shape
        )

    def prolongate(
        self, level: int, fine_dst: npt.NDArray, coarse_src: npt.NDArray
    ) -> None:
        fine_dst[...] = (self.prolongations[level] @ coarse_src.ravel()).reshape(
            fine_dst.shape
        )


def linear_interpolation_1d(ncells_coarse: int) -> sp.csr_matrix:
    """Linear interpolation on vertex-centred grid (1D) \\
    Maps the ncells_coarse - 1 interior points of the coarse grid to the 2*ncells_coarse - 1 interior points of the fine grid.

    Stencil:
        [1/2, 1, 1/2]

    Parameters
    ----------
    ncells_coarse : int
        Number of coarse cells

    Returns
    -------
    sp.csr_matrix
        Prolongation matrix [2*ncells_coarse - 1, ncells_coarse - 1]

    Examples
    --------
    >>> from mgcycle.transfer import linear_interpolation_1d
    >>> P = linear_interpolation_1d(4)
    >>> P.shape
    (7, 3)
    """
    if ncells_coarse < 2:
        raise ValueError(f"{ncells_coarse=}, should be >= 2")
    ncoarse = ncells_coarse - 1
    nfine = 2 * ncells_coarse - 1
    rows = []
    cols = []
    values = []
    for i in range(ncoarse):
        ii = 2 * i + 1
        rows += [ii - 1, ii, ii + 1]
        cols += [i, i, i]
        values += [0.5, 1.0, 0.5]
    return sp.csr_matrix(
        (np.array(values), (np.array(rows), np.array(cols))), shape=(nfine, ncoarse)
    )


def tensor_interpolation(ncells_coarse: int, ndim: int) -> sp.csr_matrix:
    """Tensor-product linear interpolation (bilinear in 2D, trilinear in 3D)

    Parameters
    ----------
    ncells_coarse : int
        Number of coarse cells along one direction
    ndim : int
        Dimension

    Returns
    -------
    sp.csr_matrix
        Prolongation matrix [(2*ncells_coarse - 1)**ndim, (ncells_coarse - 1)**ndim]

    Examples
    --------
    >>> from mgcycle.transfer import tensor_interpolation
    >>> P = tensor_interpolation(4, 2)
    >>> P.shape
    (49, 9)
    """
    if ndim not in (1, 2, 3):
        raise NotImplementedError(f"{ndim=}, should be 1, 2 or 3")
    P_1d = linear_interpolation_1d(ncells_coarse)
    return sp.csr_matrix(reduce(sp.kron, [P_1d] * ndim))
