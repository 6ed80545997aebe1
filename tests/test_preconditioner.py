import numpy as np
import pytest
import scipy.sparse.linalg as spla
from conftest import IdentityTransfer, RecordingCoarseSolver
from mgcycle.coarse import DirectCoarseSolver
from mgcycle.laplacian import poisson_hierarchy
from mgcycle.multigrid import Multigrid
from mgcycle.operators import ZeroOperator
from mgcycle.preconditioner import PreconditionMG
from mgcycle.smoothers import GaussSeidelSmoother, IdentitySmoother, JacobiSmoother


def poisson_preconditioner(cycle="V", nlevels=4, ndim=2, vcycle_only=False):
    matrix, transfer = poisson_hierarchy(2, nlevels, ndim)
    smoother = JacobiSmoother(matrix)
    mg = Multigrid(
        matrix, DirectCoarseSolver(matrix), transfer, smoother, smoother, cycle=cycle
    )
    return PreconditionMG(mg, vcycle_only=vcycle_only), matrix, transfer


def test_copy_to_mg_v_cycle():
    preconditioner, matrix, _ = poisson_preconditioner("V")
    src = np.ones(preconditioner.size)
    preconditioner.copy_to_mg(src)
    mg = preconditioner.mg
    np.testing.assert_array_equal(mg.defect[3], src)
    for level in range(3):
        assert mg.defect[level].shape == (matrix.size(level),)
        assert not np.any(mg.defect[level])


@pytest.mark.parametrize("cycle", ["W", "F"])
def test_copy_to_mg_variable_cycle(cycle):
    preconditioner, _, transfer = poisson_preconditioner(cycle)
    src = np.ones(preconditioner.size)
    preconditioner.copy_to_mg(src)
    mg = preconditioner.mg
    for level in range(3, 0, -1):
        expected = transfer.restrictions[level] @ mg.defect[level]
        np.testing.assert_allclose(mg.defect[level - 1], expected)


def test_copy_to_mg_vcycle_only():
    preconditioner, _, _ = poisson_preconditioner("W", vcycle_only=True)
    preconditioner.copy_to_mg(np.ones(preconditioner.size))
    assert not np.any(preconditioner.mg.defect[0])


def test_vmult_matches_cycle():
    preconditioner, _, _ = poisson_preconditioner("V")
    src = np.random.default_rng(1).standard_normal(preconditioner.size)
    dst = np.empty_like(src)
    preconditioner.vmult(dst, src)
    np.testing.assert_array_equal(dst, preconditioner.mg.solution[3])
    np.testing.assert_array_equal(preconditioner(src), dst)


def test_preconditioner_is_symmetric():
    preconditioner, _, _ = poisson_preconditioner("V", nlevels=3)
    n = preconditioner.size
    M = np.column_stack([preconditioner(np.eye(n)[:, i]) for i in range(n)])
    np.testing.assert_allclose(M, M.T, atol=1e-10)


def test_conjugate_gradient():
    preconditioner, matrix, _ = poisson_preconditioner("V", nlevels=6)
    A = matrix[5]
    b = np.ones(A.shape[0])
    iterations = []
    x, info = spla.cg(
        A,
        b,
        rtol=1e-8,
        M=preconditioner.aslinearoperator(),
        callback=lambda xk: iterations.append(1),
    )
    assert info == 0
    assert len(iterations) < 20
    assert np.linalg.norm(b - A @ x) < 1e-7 * np.linalg.norm(b)


def test_conjugate_gradient_gauss_seidel():
    matrix, transfer = poisson_hierarchy(2, 4, 3)
    mg = Multigrid(
        matrix,
        DirectCoarseSolver(matrix),
        transfer,
        GaussSeidelSmoother(matrix),
        GaussSeidelSmoother(matrix, reverse=True),
    )
    A = matrix[3]
    b = np.ones(A.shape[0])
    x, info = spla.cg(A, b, rtol=1e-8, M=PreconditionMG(mg).aslinearoperator())
    assert info == 0


def test_copy_to_mg_needs_level_sizes():
    mg = Multigrid(
        ZeroOperator(0, 2),
        RecordingCoarseSolver(),
        IdentityTransfer(),
        IdentitySmoother(),
        IdentitySmoother(),
    )
    with pytest.raises(ValueError, match="report their size"):
        PreconditionMG(mg).vmult(np.empty(3), np.ones(3))
