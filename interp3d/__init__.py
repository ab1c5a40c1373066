# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


"""
interp3d: tricubic and bicubic-unilinear interpolation of an expensive
function sampled once on a non-uniformly spaced 3D grid

Contributors:
    - Wenyang Zhao <wenyang.zhao@riken.jp>
    - Osamu Miyashita <osamu.miyashita@riken.jp>
    - Florence Tama <florence.tama@riken.jp>

Affiliation:
    Computational Structural Biology Research Team
    RIKEN Center for Computational Science
"""


__version__ = "0.1.0"

from .config import (
    GridSpacing,
    Linear,
    Exponential,
    AxisConfig,
    GridConfig,
    InterpType,
)
from .errors import ConfigError, DomainError
from .boundary import BoundaryPolicy, FlatExtrapolation
from .grid import grid_point_position, axis_positions, build_axis, build_grid
from .sampling import generate_samples
from .interpolator import GridData, Interp3D

# The MPI sampler is imported from interp3d.sampling_mpi_slab, so that
# mpi4py stays optional

__all__ = [
    "GridSpacing",
    "Linear",
    "Exponential",
    "AxisConfig",
    "GridConfig",
    "InterpType",
    "ConfigError",
    "DomainError",
    "BoundaryPolicy",
    "FlatExtrapolation",
    "grid_point_position",
    "axis_positions",
    "build_axis",
    "build_grid",
    "generate_samples",
    "GridData",
    "Interp3D",
]
