"""
Geometric multigrid cycles (V, W and F) on level hierarchies, with sparse
collaborators, a preconditioner wrapper for scipy Krylov solvers and a
Poisson model problem.
"""

from .levels import LevelVector
from .multigrid import Cycle, Multigrid
from .preconditioner import PreconditionMG
from .main import run

__all__ = ["LevelVector", "Cycle", "Multigrid", "PreconditionMG", "run"]
