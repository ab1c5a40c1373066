# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import logging

import numpy as np
from threadpoolctl import threadpool_limits

from .boundary import FlatExtrapolation


__all__ = ["sample_block", "generate_samples"]


logger = logging.getLogger(__name__)


def sample_block(f, px, py, pz, context=None):
    """
    Sample a function on the tensor product of three coordinate arrays.

    `f` is called exactly once per (i, j, k) triple, in row-major order:
    ascending i, then j, then k. When `context` is not None it is passed
    as a fourth argument on every call, so that the callback can update
    caller-owned state through it.

    Parameters
    ----------
    f : callable
        f(x, y, z) -> float, or f(x, y, z, context) -> float.
    px, py, pz : np.ndarray
        1D coordinate arrays to sample on.
    context : object, optional
        Mutable state handed to every call of `f`.

    Returns
    -------
    block : np.ndarray, shape (len(px), len(py), len(pz))
        Sampled values.
    """

    block = np.empty((px.shape[0], py.shape[0], pz.shape[0]), dtype=np.float64)
    if context is None:
        for i, xi in enumerate(px):
            for j, yj in enumerate(py):
                for k, zk in enumerate(pz):
                    block[i, j, k] = f(xi, yj, zk)
    else:
        for i, xi in enumerate(px):
            for j, yj in enumerate(py):
                for k, zk in enumerate(pz):
                    block[i, j, k] = f(xi, yj, zk, context)
    return block


def generate_samples(
    f,
    x,
    y,
    z,
    boundary=None,
    context=None,
    num_threads=1,
    out=None,
):
    """
    Sample `f` on every interior node and fill the ghost layer.

    Parameters
    ----------
    f : callable
        f(x, y, z) -> float, or f(x, y, z, context) -> float when a
        context is given. Called exactly once per interior node, in
        row-major order (ascending x index, then y, then z).
    x, y, z : np.ndarray
        1D extended coordinate arrays, ghost slots included.
    boundary : BoundaryPolicy, optional
        Ghost layer policy. Default is `FlatExtrapolation()`.
    context : object, optional
        Mutable state handed to every call of `f`.
    num_threads : int, optional
        Upper limit for the native thread pools (BLAS, OpenMP) that `f`
        may use. Default is 1.
    out : np.ndarray, optional
        Zero-initialized array of shape (nx, ny, nz) to sample into, as
        returned by `build_grid`. A new array is allocated if omitted.

    Returns
    -------
    values : np.ndarray, shape (nx, ny, nz)
        Sample array with interior and ghost entries set.
    """

    if boundary is None:
        boundary = FlatExtrapolation()

    sx = boundary.interior(x.shape[0])
    sy = boundary.interior(y.shape[0])
    sz = boundary.interior(z.shape[0])

    if out is None:
        values = np.zeros(
            (x.shape[0], y.shape[0], z.shape[0]), dtype=np.float64
        )
    else:
        values = out
    with threadpool_limits(limits=num_threads):
        values[sx, sy, sz] = sample_block(f, x[sx], y[sy], z[sz], context)

    logger.debug(
        "Sampled %d interior nodes", values[sx, sy, sz].size
    )
    return boundary.fill_values(values)
