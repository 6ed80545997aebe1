"""
This module contains the parameter file reader and the output of residual histories.
"""

import ast
import logging
import pandas as pd
from . import utils


def read_param_file(name: str) -> pd.Series:
    """Read parameter file into Pandas Series \\
    One "key = value" pair per line, "#" starts a comment.
    Numbers, booleans and Python literals are converted, anything else is kept as a string.

    Parameters
    ----------
    name : str
        Parameter file name

    Returns
    -------
    pd.Series
        Parameters container

    Examples
    --------
    >>> from mgcycle.iostream import read_param_file
    >>> param = read_param_file(f"./examples/param.ini")
    """
    param = pd.read_csv(
        name,
        delimiter="=",
        comment="#",
        skipinitialspace=True,
        skip_blank_lines=True,
        header=None,
        dtype=str,
    ).T
    # First row as header
    param = param.rename(columns=param.iloc[0]).drop(param.index[0])
    # Remove whitespaces from column names and values
    param = param.apply(lambda x: x.str.strip()).rename(columns=lambda x: x.strip())
    is_null = param.isnull()
    values = {}
    for key in param.columns:
        if is_null[key].item():
            values[key] = False
            continue
        value = param[key].item()
        if "true".casefold() == value.casefold():
            value = "True"
        elif "false".casefold() == value.casefold():
            value = "False"
        try:
            values[key] = ast.literal_eval(value)
        except (ValueError, SyntaxError):
            values[key] = value

    return pd.Series(values, dtype=object)


@utils.time_me
def write_residual_history(history: pd.DataFrame, filename: str) -> None:
    """Write residual history to CSV file

    Parameters
    ----------
    history : pd.DataFrame
        Residual history, one row per iteration
    filename : str
        Output file name

    Examples
    --------
    >>> import pandas as pd
    >>> from mgcycle.iostream import write_residual_history
    >>> history = pd.DataFrame({"iteration": [0, 1], "residual": [1.0, 0.1]})
    >>> write_residual_history(history, "residuals.csv")
    """
    logging.warning(f"Write residual history to {filename}")
    history.to_csv(filename, index=False)
