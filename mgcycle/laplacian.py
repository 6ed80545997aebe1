"""
This module builds the discrete Poisson problem -Laplacian(u) = f with homogeneous
Dirichlet boundaries on the unit cube, and its multigrid hierarchy.
"""

from functools import reduce
from typing import Tuple
import numpy as np
import scipy.sparse as sp
from .operators import SparseLevelOperator
from .transfer import MatrixTransfer, tensor_interpolation


def poisson_matrix(ncells_1d: int, ndim: int) -> sp.csr_matrix:
    """Negative Laplacian with second-order finite differences \\
    Vertex-centred grid with ncells_1d - 1 interior points per direction, h = 1/ncells_1d

    Stencil (1D):
        1/h^2 [-1, 2, -1]

    Parameters
    ----------
    ncells_1d : int
        Number of cells along one direction
    ndim : int
        Dimension (1, 2 or 3)

    Returns
    -------
    sp.csr_matrix
        Poisson matrix [(ncells_1d - 1)**ndim, (ncells_1d - 1)**ndim]

    Examples
    --------
    >>> from mgcycle.laplacian import poisson_matrix
    >>> A = poisson_matrix(8, 2)
    >>> A.shape
    (49, 49)
    """
    if ndim not in (1, 2, 3):
        raise NotImplementedError(f"{ndim=}, should be 1, 2 or 3")
    if ncells_1d < 2:
        raise ValueError(f"{ncells_1d=}, should be >= 2")
    n = ncells_1d - 1
    invh2 = np.float64(ncells_1d**2)
    A_1d = invh2 * sp.diags(
        [-np.ones(n - 1), 2 * np.ones(n), -np.ones(n - 1)], [-1, 0, 1], format="csr"
    )
    identity = sp.identity(n, format="csr")
    A = sp.csr_matrix((n**ndim, n**ndim))
    for dim in range(ndim):
        factors = [A_1d if d == dim else identity for d in range(ndim)]
        A = A + reduce(sp.kron, factors)
    return sp.csr_matrix(A)


def poisson_hierarchy(
    ncells_coarse: int, nlevels: int, ndim: int, galerkin: bool = True
) -> Tuple[SparseLevelOperator, MatrixTransfer]:
    """Level matrices and transfer for the Poisson problem \\
    Level l has ncells_coarse * 2**l cells per direction.

    Parameters
    ----------
    ncells_coarse : int
        Number of cells along one direction on level 0
    nlevels : int
        Number of levels
    ndim : int
        Dimension (1, 2 or 3)
    galerkin : bool, optional
        Coarse matrices as P^T A P instead of rediscretisation, by default True

    Returns
    -------
    Tuple[SparseLevelOperator, MatrixTransfer]
        Level matrices, transfer operator

    Examples
    --------
    >>> from mgcycle.laplacian import poisson_hierarchy
    >>> matrix, transfer = poisson_hierarchy(ncells_coarse=2, nlevels=3, ndim=1)
    >>> [matrix.size(level) for level in range(3)]
    [1, 3, 7]
    """
    if nlevels < 1:
        raise ValueError(f"{nlevels=}, should be >= 1")
    prolongations = {
        level: tensor_interpolation(ncells_coarse * 2 ** (level - 1), ndim)
        for level in range(1, nlevels)
    }
    finest = nlevels - 1
    matrices = {finest: poisson_matrix(ncells_coarse * 2**finest, ndim)}
    for level in range(finest - 1, -1, -1):
        if galerkin:
            P = prolongations[level + 1]
            matrices[level] = sp.csr_matrix(P.T @ matrices[level + 1] @ P)
        else:
            # Restriction is P^T, 2**ndim times full weighting on each level below finest
            matrices[level] = 2 ** (ndim * (finest - level)) * poisson_matrix(
                ncells_coarse * 2**level, ndim
            )
    return SparseLevelOperator(matrices), MatrixTransfer(prolongations)
