import numpy as np
from mgcycle.coarse import CoarseSolver
from mgcycle.operators import LevelOperator
from mgcycle.smoothers import Smoother
from mgcycle.transfer import Transfer


class IdentityOperator(LevelOperator):
    """Identity matrix on every level, all levels of the same size"""

    def __init__(self, min_level, max_level, n=3, scale=1.0):
        self._min_level = min_level
        self._max_level = max_level
        self.n = n
        self.scale = scale

    @property
    def min_level(self):
        return self._min_level

    @property
    def max_level(self):
        return self._max_level

    def apply(self, level, dst, src):
        dst[...] = self.scale * src

    def apply_transpose(self, level, dst, src):
        dst[...] = self.scale * src

    def size(self, level):
        return self.n


class IdentityTransfer(Transfer):
    def restrict_and_add(self, level, coarse_dst, fine_src):
        coarse_dst += fine_src

    def prolongate(self, level, fine_dst, coarse_src):
        fine_dst[...] = coarse_src


class RecordingCoarseSolver(CoarseSolver):
    """Records every call, writes factor * rhs + offset into dst"""

    def __init__(self, factor=1.0, offset=0.0):
        self.calls = []
        self.factor = factor
        self.offset = offset

    def __call__(self, level, dst, rhs):
        self.calls.append((level, rhs.copy()))
        dst[...] = self.factor * rhs + self.offset


class RecordingSmoother(Smoother):
    """Records levels and right-hand sides, leaves the solution unchanged"""

    def __init__(self):
        self.levels = []
        self.rhs = []

    def smooth(self, level, solution, rhs):
        self.levels.append(level)
        self.rhs.append(rhs.copy())


class FailingCoarseSolver(CoarseSolver):
    def __call__(self, level, dst, rhs):
        raise RuntimeError("coarse solve failed")


def fill_defect(mg, finest=None):
    """Zero defect on every level, finest level set to finest if given"""
    for level in mg.defect.levels():
        mg.defect[level] = np.zeros(mg.matrix.size(level))
    if finest is not None:
        mg.defect[mg.max_level] = np.array(finest, dtype=np.float64)
