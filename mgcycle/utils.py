"""
This module contains a timing decorator and the in-place vector kernels
used by the multigrid cycles.
"""

from time import perf_counter
from typing import Callable
from functools import wraps
import numpy as np
import numpy.typing as npt
from numba import njit, prange
import logging


def time_me(func: Callable) -> Callable:
    """Decorator time

    Parameters
    ----------
    func : Callable
        Function to time

    Returns
    -------
    Callable
        Function wrapper which logs time (in seconds)

    Examples
    --------
    >>> from mgcycle.utils import time_me
    >>> @time_me
    ... def example_function():
    ...     # Code to be timed
    ...     pass
    >>> example_function()
    """

    @wraps(func)
    def time_func(*args, **kw):
        t1 = perf_counter()
        result = func(*args, **kw)
        logging.info(
            f"Function {func.__name__:->40} took {perf_counter() - t1:.12f} seconds{'':{'-'}<{10}}"
        )
        return result

    return time_func


@njit(fastmath=True, cache=True, parallel=True)
def zero_initialise(x: npt.NDArray[np.float64]) -> None:
    """Zero initialise array in place

    x[:] = 0

    Parameters
    ----------
    x : npt.NDArray[np.float64]
        Mutable array

    Examples
    --------
    >>> import numpy as np
    >>> from mgcycle.utils import zero_initialise
    >>> x = np.ones(8)
    >>> zero_initialise(x)
    """
    x_ravel = x.ravel()
    for i in prange(x_ravel.shape[0]):
        x_ravel[i] = 0


@njit(fastmath=True, cache=True, parallel=True)
def injection(a: npt.NDArray, b: npt.NDArray) -> None:
    """Straight injection

    a[:] = b[:]

    Parameters
    ----------
    a : npt.NDArray
        Mutable array
    b : npt.NDArray
        Array to copy

    Examples
    --------
    >>> import numpy as np
    >>> from mgcycle.utils import injection
    >>> a = np.random.rand(64)
    >>> b = np.random.rand(64)
    >>> injection(a, b)
    """
    ar = a.ravel()
    br = b.ravel()
    for i in prange(len(ar)):
        ar[i] = br[i]


@njit(fastmath=True, cache=True, parallel=True)
def add_vector_scalar_inplace(
    y: npt.NDArray[np.float64], x: npt.NDArray[np.float64], a: np.float64
) -> None:
    """Add vector times scalar inplace \\
    y += a*x

    Parameters
    ----------
    y : npt.NDArray[np.float64]
        Mutable array
    x : npt.NDArray[np.float64]
        Array to add (same shape as y)
    a : np.float64
        Scalar

    Examples
    --------
    >>> import numpy as np
    >>> from mgcycle.utils import add_vector_scalar_inplace
    >>> y_array = np.array([1.0, 2.0, 3.0])
    >>> x_array = np.array([4.0, 5.0, 6.0])
    >>> add_vector_scalar_inplace(y_array, x_array, 2.0)
    """
    y_ravel = y.ravel()
    x_ravel = x.ravel()
    if a == 1:
        for i in prange(y_ravel.shape[0]):
            y_ravel[i] += x_ravel[i]
    elif a == -1:
        for i in prange(y_ravel.shape[0]):
            y_ravel[i] -= x_ravel[i]
    else:
        for i in prange(y_ravel.shape[0]):
            y_ravel[i] += a * x_ravel[i]


@njit(fastmath=True, cache=True, parallel=True)
def linear_operator_vectors_inplace(
    y: npt.NDArray[np.float64],
    a: np.float64,
    x: npt.NDArray[np.float64],
    b: np.float64,
) -> None:
    """Scaled add inplace \\
    y = a*y + b*x

    Parameters
    ----------
    y : npt.NDArray[np.float64]
        Mutable array
    a : np.float64
        Factor on y
    x : npt.NDArray[np.float64]
        Array to add (same shape as y)
    b : np.float64
        Factor on x

    Examples
    --------
    >>> import numpy as np
    >>> from mgcycle.utils import linear_operator_vectors_inplace
    >>> y_array = np.array([1.0, 2.0, 3.0])
    >>> x_array = np.array([4.0, 5.0, 6.0])
    >>> linear_operator_vectors_inplace(y_array, -1.0, x_array, 1.0)
    """
    y_ravel = y.ravel()
    x_ravel = x.ravel()
    for i in prange(y_ravel.shape[0]):
        y_ravel[i] = a * y_ravel[i] + b * x_ravel[i]

