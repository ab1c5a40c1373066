"""
Example: tricubic and bicubic-unilinear interpolation of a function sampled
on a non-uniform grid, on a single process.
"""

import numpy as np
from interp3d import (
    AxisConfig,
    Exponential,
    GridConfig,
    Interp3D,
    InterpType,
    Linear,
)

# Define the node placement along each axis
# X and Y: denser toward the origin, Z: evenly spaced angle
radial = AxisConfig(n=61, min=0.0, max=10.0, spacing=Exponential(4.0))
angle = AxisConfig(n=41, min=0.0, max=np.pi, spacing=Linear)
config = GridConfig(x=radial, y=radial, z=angle)


# Expensive function to tabulate; the context counts the calls
def f(x, y, z, counter):
    counter["calls"] += 1
    return np.exp(-(x * x + y * y) / 5.0) * np.cos(z)


counter = {"calls": 0}

# --- Phase 1: Sample the function on the grid ---
interp = Interp3D.from_config(f, config, context=counter)
print(f"Sampled f {counter['calls']} times.")

# Generate random query points within the domain bounds
num_points = 10
points = np.random.uniform(
    low=[0, 0, 0], high=[10, 10, np.pi], size=(num_points, 3)
)

# --- Phase 2: Evaluate at query points ---
tricubic = interp(points, kind=InterpType.TRICUBIC)
unilinear = interp(points, kind=InterpType.BICUBIC_UNILINEAR, linear_axis="z")
exact = np.exp(-(points[:,0]**2 + points[:,1]**2) / 5.0) * np.cos(points[:,2])

# --- Phase 3: Export and re-import ---
interp.export_data("example_single_process.ip3d")
reloaded = Interp3D.from_file("example_single_process.ip3d")
assert np.array_equal(reloaded(points), tricubic)

# Print the interpolated values
print ()
print ("3D interpolation (single process):")
print(f"{'Index':>8} | {'Tricubic':>12} | {'Unilinear':>12} | {'Exact':>12}")
for i in range(num_points):
    print(
        f"{i:8d} | {tricubic[i]:12.6f} | {unilinear[i]:12.6f} | "
        f"{exact[i]:12.6f}"
    )
