"""
Multigrid-preconditioned solver for the Poisson problem

This module assembles multigrid objects from a parameter container and runs
the conjugate gradient method from scipy preconditioned by one multigrid
cycle per iteration.
"""

from typing import Dict, Tuple
import logging
import numpy as np
import numpy.typing as npt
import pandas as pd
import scipy.sparse.linalg as spla
from .coarse import CoarseSolver, DirectCoarseSolver, SmoothingCoarseSolver
from .laplacian import poisson_hierarchy
from .multigrid import Multigrid
from .operators import SparseLevelOperator
from .preconditioner import PreconditionMG
from .smoothers import GaussSeidelSmoother, JacobiSmoother, Smoother
from .transfer import Transfer
from . import iostream
from . import utils

DEFAULT_PARAM = {
    "ndim": 2,
    "ncoarse": 2,
    "nlevels": 5,
    "min_level": 0,
    "cycle": "V",
    "smoother": "jacobi",
    "Npre": 2,
    "Npost": 2,
    "omega": 2.0 / 3,
    "coarse_solver": "direct",
    "Ncoarse": 20,
    "mg_debug": 0,
    "epsrel": 1e-8,
    "maxiter": 100,
    "verbose": 1,
}


def with_defaults(param: pd.Series | Dict) -> pd.Series:
    """Complete parameter container with default values

    Parameters
    ----------
    param : pd.Series | Dict
        Parameter container

    Returns
    -------
    pd.Series
        Parameter container with every key of DEFAULT_PARAM

    Examples
    --------
    >>> from mgcycle.solver import with_defaults
    >>> param = with_defaults({"cycle": "W"})
    >>> param["Npre"]
    2
    """
    if isinstance(param, Dict):
        param = pd.Series(param, dtype=object)
    elif isinstance(param, pd.Series):
        param = param.copy()
    else:
        raise ValueError(f"{type(param)=}, should be a dictionnary or a Pandas Series")
    for key, value in DEFAULT_PARAM.items():
        if key not in param.index:
            param[key] = value
    return param


def smoothers(
    matrix: SparseLevelOperator, param: pd.Series
) -> Tuple[Smoother, Smoother]:
    """Pre- and post-smoothers \\
    The post-smoother of Gauss-Seidel sweeps backward, so that the cycle stays symmetric.

    Parameters
    ----------
    matrix : SparseLevelOperator
        Level matrices
    param : pd.Series
        Parameter container

    Returns
    -------
    Tuple[Smoother, Smoother]
        Pre-smoother, post-smoother
    """
    SMOOTHER = param["smoother"].casefold()
    match SMOOTHER:
        case "jacobi":
            return (
                JacobiSmoother(matrix, param["Npre"], param["omega"]),
                JacobiSmoother(matrix, param["Npost"], param["omega"]),
            )
        case "gauss_seidel":
            return (
                GaussSeidelSmoother(matrix, param["Npre"]),
                GaussSeidelSmoother(matrix, param["Npost"], reverse=True),
            )
        case _:
            raise NotImplementedError(
                f"{param['smoother']=}, should be 'jacobi' or 'gauss_seidel'"
            )


def coarse_solver(matrix: SparseLevelOperator, param: pd.Series) -> CoarseSolver:
    COARSE_SOLVER = param["coarse_solver"].casefold()
    match COARSE_SOLVER:
        case "direct":
            return DirectCoarseSolver(matrix)
        case "smoothing":
            return SmoothingCoarseSolver(
                GaussSeidelSmoother(matrix, param["Ncoarse"], symmetric=True)
            )
        case _:
            raise NotImplementedError(
                f"{param['coarse_solver']=}, should be 'direct' or 'smoothing'"
            )


def build_multigrid(
    param: pd.Series, matrix: SparseLevelOperator, transfer: Transfer
) -> Multigrid:
    """Multigrid object from parameters

    Parameters
    ----------
    param : pd.Series
        Parameter container
    matrix : SparseLevelOperator
        Level matrices
    transfer : Transfer
        Transfer operator

    Returns
    -------
    Multigrid
        Configured multigrid on levels [param["min_level"], matrix.max_level]

    Examples
    --------
    >>> from mgcycle.laplacian import poisson_hierarchy
    >>> from mgcycle.solver import build_multigrid, with_defaults
    >>> matrix, transfer = poisson_hierarchy(2, 4, 2)
    >>> mg = build_multigrid(with_defaults({"cycle": "F"}), matrix, transfer)
    """
    pre_smooth, post_smooth = smoothers(matrix, param)
    mg = Multigrid(
        matrix,
        coarse_solver(matrix, param),
        transfer,
        pre_smooth,
        post_smooth,
        min_level=param["min_level"],
        max_level=matrix.max_level,
        cycle=param["cycle"],
    )
    mg.set_debug(param["mg_debug"])
    return mg


@utils.time_me
def solve(
    param: pd.Series | Dict, rhs: npt.NDArray[np.float64] | None = None
) -> Tuple[npt.NDArray[np.float64], pd.DataFrame]:
    """Solve the Poisson problem with multigrid-preconditioned conjugate gradient

    Parameters
    ----------
    param : pd.Series | Dict
        Parameter container
    rhs : npt.NDArray[np.float64], optional
        Right-hand side on the finest level, by default ones

    Returns
    -------
    Tuple[npt.NDArray[np.float64], pd.DataFrame]
        Solution on the finest level, residual history

    Examples
    --------
    >>> from mgcycle.solver import solve
    >>> x, history = solve({"ndim": 2, "nlevels": 4})
    """
    param = with_defaults(param)
    matrix, transfer = poisson_hierarchy(param["ncoarse"], param["nlevels"], param["ndim"])
    mg = build_multigrid(param, matrix, transfer)
    preconditioner = PreconditionMG(mg)
    A = matrix[mg.max_level]
    if rhs is None:
        rhs = np.ones(A.shape[0])
    norm_rhs = np.linalg.norm(rhs)

    residuals = []

    def monitor(xk: npt.NDArray[np.float64]) -> None:
        residual = np.linalg.norm(rhs - A @ xk)
        residuals.append(residual)
        logging.info(f"iteration={len(residuals)} {residual=}")

    logging.warning(
        f"Solve {param['ndim']}D Poisson problem with {A.shape[0]} unknowns, {mg.cycle_type.value}-cycle preconditioner"
    )
    x, info = spla.cg(
        A,
        rhs,
        rtol=param["epsrel"],
        maxiter=param["maxiter"],
        M=preconditioner.aslinearoperator(),
        callback=monitor,
    )
    if info > 0:
        logging.warning(f"No convergence after {info} iterations")
    elif info < 0:
        raise ValueError(f"Conjugate gradient failed with {info=}")
    history = pd.DataFrame(
        {
            "iteration": np.arange(1, len(residuals) + 1),
            "residual": residuals,
            "relative_residual": np.array(residuals) / norm_rhs,
        }
    )
    logging.warning(f"Conjugate gradient stopped after {len(residuals)} iterations")
    if "output" in param.index and param["output"]:
        iostream.write_residual_history(history, param["output"])
    return x, history
