"""
Python interface to solve the Poisson problem with multigrid-preconditioned conjugate gradient.
It provides a convenient way to set the parameters and compare cycle types.
"""

from pathlib import Path
import mgcycle

path = Path(__file__).parent.absolute()

param = {
    "ndim": 2,
    "ncoarse": 2,
    "nlevels": 7,
    "min_level": 0,
    "cycle": "V",
    # "cycle": "W",
    # "cycle": "F",
    "smoother": "jacobi",
    "omega": 0.8,
    "Npre": 2,
    "Npost": 2,
    "coarse_solver": "direct",
    "mg_debug": 0,
    "epsrel": 1e-10,
    "maxiter": 50,
    "output": f"{path}/residuals.csv",
    "verbose": 1,
}

# Run solve
history = mgcycle.run(param)
print(history)

print("Run Completed!")
