"""
Per-level vector storage for multigrid hierarchies.

A LevelVector holds one numpy array per level over a contiguous range of
level indices [min_level, max_level]. The multigrid cycles keep their
defect, solution, auxiliary and second defect vectors in such containers.
"""

from typing import Iterator
import numpy as np
import numpy.typing as npt
from . import utils


class LevelVector:
    """Container of numpy arrays indexed by level

    Parameters
    ----------
    min_level : int, optional
        Lowest level index, by default 0
    max_level : int, optional
        Highest level index, by default 0

    Examples
    --------
    >>> import numpy as np
    >>> from mgcycle.levels import LevelVector
    >>> defect = LevelVector(0, 2)
    >>> defect[2] = np.ones(7)
    >>> defect.levels()
    range(0, 3)
    """

    def __init__(self, min_level: int = 0, max_level: int = 0) -> None:
        self._min_level = 0
        self._arrays = []
        self.resize(min_level, max_level)

    @property
    def min_level(self) -> int:
        return self._min_level

    @property
    def max_level(self) -> int:
        return self._min_level + len(self._arrays) - 1

    def levels(self) -> range:
        return range(self.min_level, self.max_level + 1)

    def resize(self, min_level: int, max_level: int) -> None:
        """Resize the level range \\
        All previous content is dropped, every level in the new range holds an empty array.

        Parameters
        ----------
        min_level : int
            Lowest level index
        max_level : int
            Highest level index
        """
        if min_level > max_level:
            raise ValueError(f"{min_level=} > {max_level=}")
        self._min_level = min_level
        self._arrays = [np.empty(0) for _ in range(max_level - min_level + 1)]

    def _index(self, level: int) -> int:
        if level < self.min_level or level > self.max_level:
            raise IndexError(
                f"{level=} outside of [{self.min_level}, {self.max_level}]"
            )
        return level - self._min_level

    def __getitem__(self, level: int) -> npt.NDArray:
        return self._arrays[self._index(level)]

    def __setitem__(self, level: int, value: npt.ArrayLike) -> None:
        value = np.asarray(value)
        if not np.issubdtype(value.dtype, np.inexact):
            value = value.astype(np.float64)
        self._arrays[self._index(level)] = np.ascontiguousarray(value)

    def __len__(self) -> int:
        return len(self._arrays)

    def __iter__(self) -> Iterator[npt.NDArray]:
        return iter(self._arrays)

    def reinit(self, level: int, like: npt.NDArray) -> None:
        """Allocate a zero array at level with the shape and dtype of another array

        Parameters
        ----------
        level : int
            Level index
        like : npt.NDArray
            Reference array
        """
        self[level] = np.zeros_like(like)

    def reinit_like(self, other: "LevelVector") -> None:
        """Reinitialise every level from another container

        Parameters
        ----------
        other : LevelVector
            Container whose arrays define the shapes, on the same level range
        """
        if (self.min_level, self.max_level) != (other.min_level, other.max_level):
            raise ValueError(
                f"Level ranges differ: [{self.min_level}, {self.max_level}] != [{other.min_level}, {other.max_level}]"
            )
        for level in self.levels():
            self.reinit(level, other[level])

    def zero(self, level: int) -> None:
        utils.zero_initialise(self[level])

    def l2_norm(self, level: int) -> float:
        """Euclidean norm of the array at level (diagnostics only)"""
        return float(np.linalg.norm(self[level].ravel()))
