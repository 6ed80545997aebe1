import pandas as pd
from mgcycle.iostream import read_param_file, write_residual_history


def test_read_param_file(tmp_path):
    filename = tmp_path / "param.ini"
    filename.write_text(
        "# Multigrid\n"
        "ndim = 3\n"
        "cycle = W\n"
        "omega = 0.8\n"
        "epsrel = 1e-10\n"
        "verbose = 0\n"
        "restart = TRUE\n"
        "output =\n"
    )
    param = read_param_file(filename)
    assert param["ndim"] == 3
    assert param["cycle"] == "W"
    assert param["omega"] == 0.8
    assert param["epsrel"] == 1e-10
    assert param["verbose"] == 0
    assert param["restart"] is True
    assert param["output"] is False


def test_write_residual_history(tmp_path):
    history = pd.DataFrame({"iteration": [1, 2], "residual": [1.0, 0.1]})
    filename = tmp_path / "residuals.csv"
    write_residual_history(history, filename)
    pd.testing.assert_frame_equal(pd.read_csv(filename), history)
