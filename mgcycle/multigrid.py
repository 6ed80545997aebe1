"""
Multigrid cycles

This module provides the recursive multigrid cycles on a hierarchy of level operators.
It includes the V-cycle, the variable cycle used for V-, W- and F-cycles,
and the workspace management sizing the per-level vectors before each cycle.
"""

from enum import Enum
from typing import Optional
import logging
from .levels import LevelVector
from .operators import LevelOperator
from .transfer import Transfer
from .smoothers import Smoother
from .coarse import CoarseSolver
from . import utils


class Cycle(Enum):
    """Multigrid traversal pattern"""

    V = "V"
    W = "W"
    F = "F"

    @classmethod
    def parse(cls, value: "Cycle | str") -> "Cycle":
        """Cycle from enum member or case-insensitive name

        Examples
        --------
        >>> from mgcycle.multigrid import Cycle
        >>> Cycle.parse("w")
        <Cycle.W: 'W'>
        """
        if isinstance(value, Cycle):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"{value=}, should be 'V', 'W' or 'F'") from None


class Multigrid:
    """Multigrid cycles on a level hierarchy

    The caller fills defect[min_level..max_level] before calling cycle() or
    vcycle(). The result is left in solution. The vectors solution, t and
    defect2 are re-derived from defect at each call.

    Parameters
    ----------
    matrix : LevelOperator
        Level matrices
    coarse : CoarseSolver
        Solver on the lowest level
    transfer : Transfer
        Restriction and prolongation between adjacent levels
    pre_smooth : Smoother
        Smoother before the coarse-grid correction
    post_smooth : Smoother
        Smoother after the coarse-grid correction
    min_level : int, optional
        Lowest active level, by default matrix.min_level
    max_level : int, optional
        Highest active level, by default matrix.max_level
    cycle : Cycle | str, optional
        Cycle type, by default "V"

    Examples
    --------
    >>> import numpy as np
    >>> from mgcycle.laplacian import poisson_hierarchy
    >>> from mgcycle.smoothers import JacobiSmoother
    >>> from mgcycle.coarse import DirectCoarseSolver
    >>> from mgcycle.multigrid import Multigrid
    >>> matrix, transfer = poisson_hierarchy(ncells_coarse=2, nlevels=4, ndim=1)
    >>> smoother = JacobiSmoother(matrix)
    >>> mg = Multigrid(matrix, DirectCoarseSolver(matrix), transfer, smoother, smoother)
    >>> for level in mg.defect.levels():
    ...     mg.defect[level] = np.zeros(matrix.size(level))
    >>> mg.defect[3] = np.ones(matrix.size(3))
    >>> mg.cycle()
    """

    def __init__(
        self,
        matrix: LevelOperator,
        coarse: CoarseSolver,
        transfer: Transfer,
        pre_smooth: Smoother,
        post_smooth: Smoother,
        min_level: Optional[int] = None,
        max_level: Optional[int] = None,
        cycle: "Cycle | str" = Cycle.V,
    ) -> None:
        self.matrix = matrix
        self.coarse = coarse
        self.transfer = transfer
        self.pre_smooth = pre_smooth
        self.post_smooth = post_smooth
        self.cycle_type = Cycle.parse(cycle)
        self.debug = 0
        self.edge_out: Optional[LevelOperator] = None
        self.edge_in: Optional[LevelOperator] = None
        self.edge_down: Optional[LevelOperator] = None
        self.edge_up: Optional[LevelOperator] = None
        self.defect = LevelVector()
        self.solution = LevelVector()
        self.t = LevelVector()
        self.defect2 = LevelVector()
        self.min_level = matrix.min_level
        self.max_level = matrix.max_level
        self.reinit(
            matrix.min_level if min_level is None else min_level,
            matrix.max_level if max_level is None else max_level,
        )

    def reinit(self, min_level: int, max_level: int) -> None:
        """Set the active level range \\
        The defect container is resized to the new range and its content dropped.

        Parameters
        ----------
        min_level : int
            Lowest active level
        max_level : int
            Highest active level

        Raises
        ------
        ValueError
            If the range is empty or outside of the matrix hierarchy
        """
        if min_level < self.matrix.min_level:
            raise ValueError(
                f"{min_level=} lower than matrix min_level={self.matrix.min_level}"
            )
        if max_level > self.matrix.max_level:
            raise ValueError(
                f"{max_level=} higher than matrix max_level={self.matrix.max_level}"
            )
        if min_level > max_level:
            raise ValueError(f"{min_level=} > {max_level=}")
        self.min_level = min_level
        self.max_level = max_level
        # solution, t and defect2 are resized in cycle()
        self.defect.resize(min_level, max_level)

    def set_maxlevel(self, level: int) -> None:
        self.reinit(self.min_level, level)

    def set_minlevel(self, level: int, relative: bool = False) -> None:
        """Set the lowest active level

        Parameters
        ----------
        level : int
            New lowest level, or its distance below max_level if relative
        relative : bool, optional
            Count from max_level downward, by default False
        """
        new_min_level = self.max_level - level if relative else level
        self.reinit(new_min_level, self.max_level)

    def set_cycle(self, cycle: "Cycle | str") -> None:
        self.cycle_type = Cycle.parse(cycle)

    def set_debug(self, debug: int) -> None:
        self.debug = debug

    def set_edge_matrices(
        self, edge_out: Optional[LevelOperator], edge_in: Optional[LevelOperator]
    ) -> None:
        """Install couplings between a level and the same-level defect \\
        edge_out is added to the level residual, the transpose of edge_in is subtracted from the defect after the coarse-grid correction.
        """
        self.edge_out = edge_out
        self.edge_in = edge_in

    def set_edge_flux_matrices(
        self, edge_down: Optional[LevelOperator], edge_up: Optional[LevelOperator]
    ) -> None:
        """Install couplings between a level and the next coarser level \\
        Both matrices map level to level-1, edge_up is applied transposed.
        """
        self.edge_down = edge_down
        self.edge_up = edge_up

    def _log(self, threshold: int, message: str) -> None:
        if self.debug > threshold:
            logging.info(message)

    def level_v_step(self, level: int) -> None:
        """V-cycle from level down to min_level

        Parameters
        ----------
        level : int
            Current level
        """
        self._log(0, f"V-cycle entering level {level}")
        if self.debug > 2:
            self._log(2, f"V-cycle  Defect norm   {self.defect.l2_norm(level)}")

        if level == self.min_level:
            self._log(0, f"Coarse level           {level}")
            self.coarse(level, self.solution[level], self.defect[level])
            return

        solution = self.solution[level]
        defect = self.defect[level]
        t = self.t[level]

        self._log(1, f"Smoothing on     level {level}")
        self.pre_smooth.smooth(level, solution, defect)
        if self.debug > 2:
            self._log(2, f"Solution norm          {self.solution.l2_norm(level)}")

        self._log(1, f"Residual on      level {level}")
        self.matrix.apply(level, t, solution)
        if self.debug > 2:
            self._log(2, f"Residual norm          {self.t.l2_norm(level)}")
        if self.edge_out is not None:
            self.edge_out.apply_add(level, t, solution)
            if self.debug > 2:
                self._log(2, f"Norm     t[{level}] {self.t.l2_norm(level)}")
        # t = defect - A solution
        utils.linear_operator_vectors_inplace(t, -1.0, defect, 1.0)

        if self.edge_down is not None:
            self.edge_down.apply(level, self.t[level - 1], solution)
            utils.add_vector_scalar_inplace(
                self.defect[level - 1], self.t[level - 1], -1.0
            )
        self.transfer.restrict_and_add(level, self.defect[level - 1], t)

        self.solution.zero(level - 1)
        self.level_v_step(level - 1)

        # t is scratch for the recursion, reset before reuse
        self.t.zero(level)
        self.transfer.prolongate(level, t, self.solution[level - 1])
        if self.debug > 2:
            self._log(2, f"Prolongate norm        {self.t.l2_norm(level)}")
        utils.add_vector_scalar_inplace(solution, t, 1.0)

        if self.edge_in is not None:
            self.edge_in.apply_transpose(level, t, solution)
            utils.add_vector_scalar_inplace(defect, t, -1.0)
        if self.edge_up is not None:
            self.edge_up.apply_transpose(level, t, self.solution[level - 1])
            utils.add_vector_scalar_inplace(defect, t, -1.0)
        if self.debug > 2:
            self._log(2, f"V-cycle  Defect norm   {self.defect.l2_norm(level)}")

        self._log(1, f"Smoothing on     level {level}")
        self.post_smooth.smooth(level, solution, defect)
        if self.debug > 2:
            self._log(2, f"Solution norm          {self.solution.l2_norm(level)}")
        self._log(1, f"V-cycle leaving  level {level}")

    def level_step(self, level: int, cycle: "Cycle | str") -> None:
        """Variable cycle from level down to min_level \\
        defect2 accumulates the contributions of the levels above, so that a
        level visited several times (W- and F-cycles) sees the defect net of
        all previous corrections.

        Parameters
        ----------
        level : int
            Current level
        cycle : Cycle | str
            Cycle type below this level
        """
        cycle = Cycle.parse(cycle)
        cychar = cycle.value
        self._log(0, f"{cychar}-cycle entering level {level}")

        if level > self.min_level:
            self.defect2.zero(level - 1)
            self.transfer.restrict_and_add(
                level, self.defect2[level - 1], self.defect2[level]
            )

        solution = self.solution[level]
        t = self.t[level]
        # t = defect - defect2
        utils.injection(t, self.defect[level])
        utils.add_vector_scalar_inplace(t, self.defect2[level], -1.0)
        if self.debug > 2:
            self._log(2, f"{cychar}-cycle defect norm    {self.t.l2_norm(level)}")

        if level == self.min_level:
            self._log(0, f"{cychar}-cycle coarse level   {level}")
            self.coarse(level, solution, t)
            return

        self._log(1, f"{cychar}-cycle smoothing level {level}")
        self.pre_smooth.smooth(level, solution, t)
        if self.debug > 2:
            self._log(
                2, f"{cychar}-cycle solution norm    {self.solution.l2_norm(level)}"
            )

        self._log(1, f"{cychar}-cycle residual level   {level}")
        self.matrix.apply(level, t, solution)
        if self.edge_out is not None:
            self.edge_out.apply_add(level, t, solution)
        if self.edge_down is not None:
            self.edge_down.apply_add(level, self.defect2[level - 1], solution)
        self.transfer.restrict_and_add(level, self.defect2[level - 1], t)

        self.solution.zero(level - 1)
        self.level_step(level - 1, cycle)
        # A second coarse-grid step is useless when level - 1 is solved exactly
        if level > self.min_level + 1:
            if cycle == Cycle.W:
                self.level_step(level - 1, cycle)
            elif cycle == Cycle.F:
                self.level_step(level - 1, Cycle.V)

        # t is scratch for the recursion, reset before reuse
        self.t.zero(level)
        self.transfer.prolongate(level, t, self.solution[level - 1])
        utils.add_vector_scalar_inplace(solution, t, 1.0)

        if self.edge_in is not None:
            self.edge_in.apply_transpose(level, t, solution)
        if self.edge_up is not None:
            self.edge_up.apply_transpose(level, t, self.solution[level - 1])

        # t = defect - defect2 - t
        utils.linear_operator_vectors_inplace(t, -1.0, self.defect2[level], -1.0)
        utils.add_vector_scalar_inplace(t, self.defect[level], 1.0)
        if self.debug > 2:
            self._log(2, f"{cychar}-cycle  Defect norm    {self.t.l2_norm(level)}")

        self._log(1, f"{cychar}-cycle smoothing level {level}")
        self.post_smooth.smooth(level, solution, t)
        self._log(1, f"{cychar}-cycle leaving level   {level}")

    def _check_defect(self) -> None:
        if (self.defect.min_level, self.defect.max_level) != (
            self.min_level,
            self.max_level,
        ):
            raise ValueError(
                f"defect covers [{self.defect.min_level}, {self.defect.max_level}], expected [{self.min_level}, {self.max_level}]"
            )
        for level in self.defect.levels():
            size = self.matrix.size(level)
            if size is not None and self.defect[level].size != size:
                raise ValueError(
                    f"Shape mismatch on {level=}: defect has {self.defect[level].size} entries, matrix has {size}"
                )

    def _resize_workspace(self, with_defect2: bool) -> None:
        self._check_defect()
        self.solution.resize(self.min_level, self.max_level)
        self.t.resize(self.min_level, self.max_level)
        self.solution.reinit_like(self.defect)
        self.t.reinit_like(self.defect)
        if with_defect2:
            self.defect2.resize(self.min_level, self.max_level)
            self.defect2.reinit_like(self.defect)

    @utils.time_me
    def cycle(self) -> None:
        """Run one cycle of the configured type from max_level \\
        defect[min_level..max_level] must be filled beforehand, the result is left in solution.
        """
        self._resize_workspace(with_defect2=self.cycle_type != Cycle.V)
        if self.cycle_type == Cycle.V:
            self.level_v_step(self.max_level)
        else:
            self.level_step(self.max_level, self.cycle_type)

    @utils.time_me
    def vcycle(self) -> None:
        """Run one V-cycle from max_level, whatever the configured cycle type"""
        self._resize_workspace(with_defect2=False)
        self.level_v_step(self.max_level)
