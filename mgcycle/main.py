#!/usr/bin/env python
"""\
Main executable module to solve the Poisson problem with multigrid-preconditioned conjugate gradient

Usage: python -m mgcycle.main -c param.ini
"""
__version__ = "1.0.0"
__status__ = "Production"

from time import perf_counter
from typing import Dict
import logging
import pandas as pd
from rich.logging import RichHandler
from . import iostream
from . import solver


def run(param) -> pd.DataFrame:
    """Run one multigrid-preconditioned solve

    Parameters
    ----------
    param : dict or pd.Series
        Parameter container

    Returns
    -------
    pd.DataFrame
        Residual history
    """
    if isinstance(param, Dict):
        param = pd.Series(param, dtype=object)
    elif isinstance(param, pd.Series):
        pass
    else:
        raise ValueError(f"{type(param)=}, should be a dictionnary or a Pandas Series")
    param = solver.with_defaults(param)

    # Ideally it would have been error/info/debug, but the latter triggers extensive Numba verbose
    if param["verbose"] == 0:
        logging_level = logging.ERROR
    elif param["verbose"] == 1:
        logging_level = logging.WARNING
    elif param["verbose"] == 2:
        logging_level = logging.INFO
    else:
        raise ValueError(f"{param['verbose']=}, should be 0, 1 or 2")
    logging.basicConfig(
        level=logging_level,
        format="%(message)s",
        datefmt="%d/%m/%Y %I:%M:%S %p",
        handlers=[
            RichHandler(
                show_time=False,
                show_level=False,
                show_path=False,
                enable_link_path=False,
                markup=True,
            )
        ],
        force=True,
    )

    logging.warning(f"\n[bold blue]----- Multigrid solve -----[/bold blue]\n")
    logging.warning(
        f"{param['cycle']=} {param['smoother']=} {param['coarse_solver']=} {param['nlevels']=}"
    )
    _, history = solver.solve(param)
    if len(history) > 0:
        logging.warning(
            f"Final relative residual {history['relative_residual'].iloc[-1]:.3e}"
        )
    return history


def main():
    import argparse

    print("Read configuration file")
    parser = argparse.ArgumentParser()
    parser.add_argument("-c", "--config_file", help="Configuration file", required=True)
    args = parser.parse_args()
    param = iostream.read_param_file(args.config_file)
    print(param)
    t_start = perf_counter()
    run(param)
    t_end = perf_counter()
    print(f"Solve run time: {t_end - t_start} seconds.")


def cli():
    from rich import print

    print(f"[bold]mgcycle[/bold] VERSION: {__version__}")
    print(f"{'':{'-'}<{71}}\n")
    main()
    print("Run Completed!")


if __name__ == "__main__":
    cli()
