"""
Example: sampling an expensive function in parallel with MPI, with the
interior X indices decomposed across ranks.

Run with, e.g., ``mpiexec -n 4 python example_mpi_sampling.py``.
"""

import numpy as np
from mpi4py import MPI
from interp3d import AxisConfig, Exponential, GridConfig, Interp3D

# Initialize MPI communicator
comm = MPI.COMM_WORLD
rank = comm.Get_rank()

# Define the node placement, identical on all ranks
axis = AxisConfig(n=48, min=0.0, max=3.0, spacing=Exponential(2.0))
config = GridConfig.uniform(axis)


# Pure function to tabulate; each rank counts its own calls
def f(x, y, z, counter):
    counter["calls"] += 1
    return np.sin(x) * np.cos(y) * np.exp(-z)


counter = {"calls": 0}

# --- Phase 1: Sample in parallel ---
# Every rank ends up with the full sample array
interp = Interp3D.from_config(f, config, context=counter, comm=comm)
calls_all = comm.gather(counter["calls"], root=0)

# --- Phase 2: Evaluate at query points ---
# Queries are local; here only rank 0 evaluates
if rank == 0:
    num_points = 10
    points = np.random.uniform(
        low=[0, 0, 0], high=[3, 3, 3], size=(num_points, 3)
    )
    values = interp(points)

    print ()
    print (f"Calls per rank: {calls_all} (total {sum(calls_all)})")
    print ("3D interpolation after MPI sampling:")
    print(f"{'Index':>8} | {'Value':>12}")
    for i, val in enumerate(values):
        print(f"{i:8d} | {val:12.6f}")
