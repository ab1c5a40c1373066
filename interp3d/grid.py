# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import logging

import numpy as np

from .boundary import FlatExtrapolation
from .config import AXIS_NAMES, Exponential
from .errors import ConfigError


__all__ = [
    "grid_point_position",
    "axis_positions",
    "build_axis",
    "build_grid",
]


logger = logging.getLogger(__name__)


def _spacing_law(offset, cfg):
    """
    Spacing law shared by the scalar and the vectorized entry points.

    The normalizing denominator is n - 1, with n the configured node
    count, so that interior offsets 0 .. n-1 span exactly [min, max].
    """

    if cfg.n < 2:
        raise ConfigError(
            f"Node count too low: expected at least 2, got {cfg.n}."
        )
    d = cfg.n - 1
    span = cfg.max - cfg.min
    if isinstance(cfg.spacing, Exponential) and cfg.spacing.k != 0.0:
        k = cfg.spacing.k
        with np.errstate(over="ignore", invalid="ignore"):
            return cfg.min + span * (
                (np.exp(np.log(2.0) * offset / d * k) - 1.0)
                / (np.power(2.0, k) - 1.0)
            )
    return cfg.min + span * offset / d


def grid_point_position(offset, cfg):
    """
    Coordinate of the node at a given offset along one axis.

    Parameters
    ----------
    offset : int
        Offset from the first interior node; 0 maps to `cfg.min` and
        `cfg.n - 1` maps to `cfg.max`. Ghost nodes use -1, n and n+1.
    cfg : AxisConfig
        Axis configuration.

    Returns
    -------
    position : float
        Node coordinate given by the spacing law.
    """

    return float(_spacing_law(np.float64(offset), cfg))


def axis_positions(cfg, num_lower=1, num_upper=2):
    """
    Evaluate the spacing law on every slot of an extended axis.

    Parameters
    ----------
    cfg : AxisConfig
        Axis configuration.
    num_lower, num_upper : int, optional
        Number of ghost slots below and above the interior nodes.

    Returns
    -------
    coord : np.ndarray, shape (num_lower + n + num_upper,)
        Spacing-law coordinates, ghost slots included.
    """

    offset = np.arange(-num_lower, cfg.n + num_upper, dtype=np.float64)
    return np.asarray(_spacing_law(offset, cfg), dtype=np.float64)


def build_axis(cfg, boundary=None, name="x"):
    """
    Build the extended coordinate array of one axis.

    Parameters
    ----------
    cfg : AxisConfig
        Axis configuration.
    boundary : BoundaryPolicy, optional
        Ghost layer policy. Default is `FlatExtrapolation()`.
    name : str, optional
        Axis name used in error messages.

    Returns
    -------
    coord : np.ndarray
        Strictly increasing 1D array of n + num_ghost coordinates.
    """

    if boundary is None:
        boundary = FlatExtrapolation()

    msg = cfg.problems(name)
    if msg:
        raise ConfigError("\n".join(msg))

    coord = axis_positions(cfg, boundary.num_lower, boundary.num_upper)

    # Interior ends sit exactly on the configured range
    inner = boundary.interior(coord.shape[0])
    coord[inner.start] = cfg.min
    coord[inner.stop - 1] = cfg.max

    coord = boundary.extend_coordinates(coord)

    if not np.isfinite(coord).all() or np.any(np.diff(coord) <= 0):
        raise ConfigError(
            f"{name.upper()} axis is degenerate: coordinates must be finite "
            f"and strictly increasing (spacing {cfg.spacing!r})."
        )

    logger.debug(
        "Built %s axis: %d slots over [%g, %g], spacing %r",
        name, coord.shape[0], cfg.min, cfg.max, cfg.spacing,
    )
    return coord


def build_grid(config, boundary=None):
    """
    Build the coordinate frame and the zero-initialized sample array.

    All three axes are validated before anything is built, so either a
    complete grid is returned or a ConfigError is raised.

    Parameters
    ----------
    config : GridConfig
        Node placement along the three axes.
    boundary : BoundaryPolicy, optional
        Ghost layer policy. Default is `FlatExtrapolation()`.

    Returns
    -------
    x, y, z : np.ndarray
        1D extended coordinate arrays.
    values : np.ndarray, shape (nx, ny, nz)
        Zero-initialized sample array.
    """

    if boundary is None:
        boundary = FlatExtrapolation()

    # Collect problems from all axes before building any of them
    msg = []
    for cfg, name in zip(config.axes(), AXIS_NAMES):
        msg.extend(cfg.problems(name))
    if msg:
        raise ConfigError("\n".join(msg))

    x, y, z = (
        build_axis(cfg, boundary, name)
        for cfg, name in zip(config.axes(), AXIS_NAMES)
    )

    nx, ny, nz = x.shape[0], y.shape[0], z.shape[0]
    values = np.zeros((nx, ny, nz), dtype=np.float64)
    logger.debug("Allocated sample array of shape (%d, %d, %d)", nx, ny, nz)

    return x, y, z, values
