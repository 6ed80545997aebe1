import numpy as np
import pandas as pd
import pytest
from mgcycle import main, solver
from mgcycle.coarse import DirectCoarseSolver, SmoothingCoarseSolver
from mgcycle.laplacian import poisson_hierarchy
from mgcycle.multigrid import Cycle
from mgcycle.smoothers import GaussSeidelSmoother, JacobiSmoother


def test_with_defaults():
    param = solver.with_defaults({"cycle": "F", "Npre": 3})
    assert param["cycle"] == "F"
    assert param["Npre"] == 3
    assert param["Npost"] == 2
    with pytest.raises(ValueError):
        solver.with_defaults([("cycle", "F")])


def test_build_multigrid():
    matrix, transfer = poisson_hierarchy(2, 4, 2)
    param = solver.with_defaults(
        {"cycle": "f", "smoother": "Gauss_Seidel", "min_level": 1, "mg_debug": 2}
    )
    mg = solver.build_multigrid(param, matrix, transfer)
    assert (mg.min_level, mg.max_level) == (1, 3)
    assert mg.cycle_type == Cycle.F
    assert mg.debug == 2
    assert isinstance(mg.pre_smooth, GaussSeidelSmoother)
    assert mg.post_smooth.reverse
    assert isinstance(mg.coarse, DirectCoarseSolver)


def test_component_selection():
    matrix, _ = poisson_hierarchy(2, 3, 2)
    param = solver.with_defaults({"coarse_solver": "smoothing"})
    pre_smooth, post_smooth = solver.smoothers(matrix, param)
    assert isinstance(pre_smooth, JacobiSmoother)
    assert isinstance(post_smooth, JacobiSmoother)
    assert isinstance(solver.coarse_solver(matrix, param), SmoothingCoarseSolver)
    with pytest.raises(NotImplementedError):
        solver.smoothers(matrix, solver.with_defaults({"smoother": "sor"}))
    with pytest.raises(NotImplementedError):
        solver.coarse_solver(matrix, solver.with_defaults({"coarse_solver": "amg"}))


@pytest.mark.parametrize("smoother", ["jacobi", "gauss_seidel"])
def test_solve(smoother):
    x, history = solver.solve({"nlevels": 5, "smoother": smoother})
    assert list(history.columns) == ["iteration", "residual", "relative_residual"]
    assert history["relative_residual"].iloc[-1] < 1e-7
    assert len(history) < 20
    assert x.shape == (31**2,)


def test_solve_smoothing_coarse_solver():
    _, history = solver.solve(
        {"nlevels": 5, "min_level": 1, "coarse_solver": "smoothing", "Ncoarse": 30}
    )
    assert history["relative_residual"].iloc[-1] < 1e-7


def test_solve_with_rhs_and_output(tmp_path):
    matrix, _ = poisson_hierarchy(2, 4, 1)
    rhs = np.linspace(0, 1, matrix.size(3))
    filename = tmp_path / "residuals.csv"
    x, history = solver.solve(
        {"ndim": 1, "nlevels": 4, "output": str(filename)}, rhs=rhs
    )
    np.testing.assert_allclose(matrix[3] @ x, rhs, rtol=1e-6, atol=1e-8)
    assert len(pd.read_csv(filename)) == len(history)


def test_run():
    history = main.run({"nlevels": 4, "verbose": 0})
    assert isinstance(history, pd.DataFrame)
    history = main.run(pd.Series({"nlevels": 4, "verbose": 0}, dtype=object))
    assert history["relative_residual"].iloc[-1] < 1e-7


def test_run_invalid_param():
    with pytest.raises(ValueError):
        main.run({"verbose": 3})
    with pytest.raises(ValueError):
        main.run(["nlevels", 4])
