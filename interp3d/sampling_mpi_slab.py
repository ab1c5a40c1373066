# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import logging

from mpi4py import MPI
from threadpoolctl import threadpool_limits

import numpy as np

from .boundary import FlatExtrapolation
from .sampling import sample_block
from .utils import scale_segments


__all__ = ["slab_segments", "generate_samples_slab"]


logger = logging.getLogger(__name__)


def slab_segments(num_ranks, NX):
    """
    Split NX interior X indices into contiguous slabs, one per rank.

    Parameters
    ----------
    num_ranks : int
        Number of MPI ranks.
    NX : int
        Number of interior nodes along the X-axis.

    Returns
    -------
    nx_all : np.ndarray, dtype=int
        1D array of slab sizes for all ranks.
    x_starts : np.ndarray, dtype=int
        1D array of slab start indices (relative to the first interior
        node) for all ranks.
    """

    nx_all = scale_segments(np.ones(num_ranks, dtype=np.int64), NX)
    x_starts = np.cumsum(np.insert(nx_all, 0, 0)[:-1])
    return nx_all, x_starts


def generate_samples_slab(
    comm,
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
    Sample `f` on every interior node with the work decomposed along the
    X-axis across MPI ranks, then fill the ghost layer.

    Each rank samples its own slab of interior X indices in row-major
    order, so that over all ranks `f` is called exactly once per interior
    node. The full sample array is then assembled on every rank.

    Only use this with a sampling function that is pure, or whose side
    effects are local to each rank. Every rank passes its own `context`.

    Parameters
    ----------
    comm : MPI communicator
        Communication handle for parallel sampling.
    f : callable
        f(x, y, z) -> float, or f(x, y, z, context) -> float when a
        context is given.
    x, y, z : np.ndarray
        1D extended coordinate arrays, identical on all ranks.
    boundary : BoundaryPolicy, optional
        Ghost layer policy. Default is `FlatExtrapolation()`.
    context : object, optional
        Rank-local mutable state handed to every call of `f`.
    num_threads : int, optional
        Upper limit for the native thread pools that `f` may use on each
        rank. Default is 1.
    out : np.ndarray, optional
        Zero-initialized array of shape (nx, ny, nz) to sample into.

    Returns
    -------
    values : np.ndarray, shape (nx, ny, nz)
        Sample array with interior and ghost entries set, on every rank.

    Raises
    ------
    RuntimeError
        On every rank, if `f` raised on any rank. The message lists the
        failing ranks and their errors.
    """

    if boundary is None:
        boundary = FlatExtrapolation()

    rank = comm.Get_rank()
    size = comm.Get_size()

    sx = boundary.interior(x.shape[0])
    sy = boundary.interior(y.shape[0])
    sz = boundary.interior(z.shape[0])
    px, py, pz = x[sx], y[sy], z[sz]
    NX, NY, NZ = px.shape[0], py.shape[0], pz.shape[0]

    # Local X-segment information
    nx_all, x_starts = slab_segments(size, NX)
    x_start = x_starts[rank]
    nx = nx_all[rank]
    logger.debug(
        "Rank %d samples X interior indices [%d, %d)",
        rank, x_start, x_start + nx,
    )

    # A failure on any rank is raised on every rank before Allgatherv
    error = None
    with threadpool_limits(limits=num_threads):
        try:
            block = sample_block(
                f, px[x_start : x_start + nx], py, pz, context
            )
        except Exception as exc:
            error = exc
    msg = "" if error is None else f"{type(error).__name__}: {error}"

    # Gather error messages from all ranks
    msg_all = comm.allgather(msg)
    if any(msg_all):
        raise RuntimeError(
            "Sampling failed:\n" + "\n".join(
                f"[Rank {i}] {m}" for i, m in enumerate(msg_all) if m
            )
        ) from error

    # ---------------------
    # Gather all slabs on every rank
    # ---------------------
    # Slabs are contiguous in row-major order, so the flattened blocks
    # concatenate into the flattened interior
    recvcounts = [int(n) * NY * NZ for n in nx_all]
    rdispls = [int(s) * NY * NZ for s in x_starts]
    sendbuf = np.ascontiguousarray(block, dtype=np.float64).ravel()
    recvbuf = np.empty((NX * NY * NZ), dtype=np.float64)
    comm.Allgatherv(
        [sendbuf, MPI.DOUBLE],
        [recvbuf, recvcounts, rdispls, MPI.DOUBLE]
    )

    if out is None:
        values = np.zeros(
            (x.shape[0], y.shape[0], z.shape[0]), dtype=np.float64
        )
    else:
        values = out
    values[sx, sy, sz] = np.reshape(recvbuf, (NX, NY, NZ))

    return boundary.fill_values(values)
