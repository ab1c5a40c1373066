# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import logging
from collections import namedtuple

from numba import set_num_threads

import numpy as np

from .boundary import FlatExtrapolation
from .config import AXIS_NAMES, InterpType
from .errors import DomainError
from .grid import build_grid
from .io import load_grid_data, save_grid_data
from .sampling import generate_samples
from .utils import (
    check_points,
    check_bounds,
    find_violation,
    stencil_weights,
    evaluate,
)


__all__ = ["GridData", "Interp3D"]


logger = logging.getLogger(__name__)


# Coordinate frame and samples, always replaced together
GridData = namedtuple("GridData", ["x", "y", "z", "values"])


class Interp3D:
    """
    Interpolator of an expensive scalar function f(x, y, z) sampled once
    on a non-uniformly spaced 3D grid.

    Set it up either by generating data (`generate_data`, `from_config`)
    or by loading a previous export (`import_data`, `from_file`). The grid
    and its samples are replaced as one unit, so a query never sees the
    coordinates of one generation paired with the samples of another.

    Parameters
    ----------
    boundary : BoundaryPolicy, optional
        Ghost layer policy. Default is `FlatExtrapolation()`.
    num_threads : int, optional
        Number of threads to use for parallel computations. Default is 1.
    """

    def __init__(self, boundary=None, num_threads=1):
        if boundary is None:
            boundary = FlatExtrapolation()
        self.boundary = boundary
        self.num_threads = num_threads
        self._data = None

    @classmethod
    def from_config(
        cls,
        f,
        config,
        context=None,
        comm=None,
        boundary=None,
        num_threads=1,
    ):
        """
        Construct an interpolator and generate its data in one step.

        See `generate_data` for a description of the parameters.
        """

        interp = cls(boundary=boundary, num_threads=num_threads)
        interp.generate_data(f, config, context=context, comm=comm)
        return interp

    @classmethod
    def from_file(cls, path, boundary=None, num_threads=1):
        """
        Construct an interpolator from a file written by `export_data`.

        The file may also be written by other tools, as long as it follows
        the layout described in `interp3d.io`.
        """

        interp = cls(boundary=boundary, num_threads=num_threads)
        interp.import_data(path)
        return interp

    @property
    def ready(self):
        return self._data is not None

    @property
    def data(self):
        """Current `GridData`, or None before any generation or import."""
        return self._data

    def generate_data(self, f, config, context=None, comm=None):
        """
        Build the grid from `config` and sample `f` on its interior nodes.

        `f` is called exactly once per interior node, in row-major order:
        ascending X index, then Y, then Z. A callback that needs mutable
        state should take it as a fourth argument and be given it through
        `context`, instead of capturing it implicitly.

        Parameters
        ----------
        f : callable
            f(x, y, z) -> float, or f(x, y, z, context) -> float when
            `context` is given.
        config : GridConfig
            Node placement along the three axes.
        context : object, optional
            Mutable state handed to every call of `f`.
        comm : MPI communicator, optional
            If given, sampling is decomposed along the X-axis across the
            ranks of `comm` (requires mpi4py). Only use this with a pure
            `f`, or one whose side effects are rank-local.

        Raises
        ------
        ConfigError
            If any axis configuration is invalid. The interpolator keeps
            its previous state.
        """

        boundary = self.boundary
        x, y, z, values = build_grid(config, boundary)

        if comm is None:
            values = generate_samples(
                f, x, y, z, boundary, context=context,
                num_threads=self.num_threads, out=values,
            )
        else:
            # mpi4py is only needed for parallel sampling
            from .sampling_mpi_slab import generate_samples_slab

            values = generate_samples_slab(
                comm, f, x, y, z, boundary, context=context,
                num_threads=self.num_threads, out=values,
            )

        self._data = GridData(x, y, z, values)
        logger.debug("Generated grid data of shape %s", values.shape)

    def import_data(self, path):
        """
        Load grid coordinates and samples from a file.

        Raises
        ------
        OSError
            If the file cannot be read.
        ValueError
            If the file content is not a valid grid.
        """

        self._data = GridData(*load_grid_data(path, self.boundary))

    def export_data(self, path):
        """
        Write grid coordinates and samples to a file.

        Raises
        ------
        OSError
            If the file cannot be written.
        """

        x, y, z, values = self._require_data()
        save_grid_data(path, x, y, z, values)

    @property
    def bounds(self):
        """
        Interior span ((xmin, xmax), (ymin, ymax), (zmin, zmax)) covered by
        the sampled nodes; queries must lie within it.
        """

        data = self._require_data()
        return self._interior_bounds(data.x, data.y, data.z)

    def _interior_bounds(self, *coords):
        bounds = []
        for coord in coords:
            inner = coord[self.boundary.interior(coord.shape[0])]
            bounds.append((float(inner[0]), float(inner[-1])))
        return tuple(bounds)

    def _require_data(self):
        data = self._data
        if data is None:
            raise RuntimeError(
                "Interpolator has no data: call generate_data() or "
                "import_data() first."
            )
        return data

    def _check_mode(self, kind, linear_axis):
        """
        Validate the interpolation mode.

        Returns
        -------
        cubic : tuple of bool
            Whether each of the X, Y, Z axes is interpolated with the
            cubic scheme.
        """

        msg = []
        try:
            kind = InterpType(kind)
        except ValueError:
            msg.append(
                f"Unknown interpolation type {kind!r} "
                "(Available: tricubic, bicubic-unilinear)."
            )

        if isinstance(linear_axis, str) and linear_axis.lower() in AXIS_NAMES:
            linear_axis = AXIS_NAMES.index(linear_axis.lower())
        if linear_axis not in (0, 1, 2):
            msg.append(
                f"Unknown linear axis {linear_axis!r} "
                "(Available: 0, 1, 2 or x, y, z)."
            )

        if msg:
            raise ValueError("\n".join(msg))

        if kind is InterpType.TRICUBIC:
            return (True, True, True)
        return tuple(axis != linear_axis for axis in range(3))

    def interpolate(
        self,
        x,
        y,
        z,
        kind=InterpType.TRICUBIC,
        linear_axis=2,
    ):
        """
        Interpolate at a single point.

        Parameters
        ----------
        x, y, z : float
            Query point coordinates.
        kind : InterpType or str, optional
            Interpolation scheme. Default is `InterpType.TRICUBIC`.
        linear_axis : int or str, optional
            Axis interpolated linearly in `InterpType.BICUBIC_UNILINEAR`
            mode. Default is 2 (Z).

        Returns
        -------
        value : float
            Interpolated value.

        Raises
        ------
        DomainError
            If the point lies outside the interior span on any axis.
        """

        values = self(
            [[x, y, z]], kind=kind, linear_axis=linear_axis
        )
        return float(values[0])

    def __call__(
        self,
        points,
        kind=InterpType.TRICUBIC,
        linear_axis=2,
        bounds_error=True,
        fill_value=np.nan,
    ):
        """
        Interpolate at the given query points.

        Parameters
        ----------
        points : array-like
            Input query point coordinates.
            Expected shape is (num_points, 3).
        kind : InterpType or str, optional
            Interpolation scheme. Default is `InterpType.TRICUBIC`.
        linear_axis : int or str, optional
            Axis interpolated linearly in `InterpType.BICUBIC_UNILINEAR`
            mode. Default is 2 (Z).
        bounds_error : bool, optional
            If True, raises a DomainError when a query point lies outside
            the interior span. Default is True.
        fill_value : float, optional
            Value to use for out-of-span points if `bounds_error` is False.
            Default is numpy.nan.

        Returns
        -------
        values : np.ndarray, shape (num_points,)
            Interpolated values at the input points.
        """

        # Unpack attributes
        cx, cy, cz, values = self._require_data()
        bounds = self._interior_bounds(cx, cy, cz)
        boundary = self.boundary
        num_threads = self.num_threads
        cubic = self._check_mode(kind, linear_axis)

        # Validate input points
        msg, points = check_points(points)
        if msg:
            raise ValueError(msg)

        # Check for out-of-bound points
        flag_all_in, mask_in, num_in = check_bounds(points, bounds)
        if bounds_error and not flag_all_in:
            raise DomainError(*find_violation(points, bounds))

        values_in = np.zeros((num_in), dtype=np.float64)
        if num_in != 0:
            # Locate cells and compute stencil weights along each axis
            px, py, pz = points[mask_in].T
            stencils = [
                stencil_weights(
                    p, coord, is_cubic,
                    boundary.num_lower, boundary.num_upper,
                )
                for p, coord, is_cubic in zip(
                    (px, py, pz), (cx, cy, cz), cubic
                )
            ]
            (index_x, wx), (index_y, wy), (index_z, wz) = stencils
            span = np.array(
                [(0, 4) if is_cubic else (1, 3) for is_cubic in cubic],
                dtype=np.int64,
            )

            # Tensor product using Numba JIT-parallelized function
            set_num_threads(num_threads)
            evaluate(
                values, wx, wy, wz,
                index_x, index_y, index_z,
                span, num_in, values_in
            )

        # Assign computed values into in-bound points
        result = np.full(points.shape[0], fill_value, dtype=np.float64)
        result[mask_in] = values_in

        return result
