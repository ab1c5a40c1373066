# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


"""
Reading and writing of grid data.

Files are numpy ``.npz`` archives (whatever the file extension) holding:

- ``x``, ``y``, ``z``: 1D float64 extended coordinate arrays, ghost slots
  included, strictly increasing;
- ``values``: 3D float64 sample array of shape (len(x), len(y), len(z)),
  ghost layer included;
- ``format_version``: integer scalar, currently 1.

Arrays are stored uncompressed and in full precision, so a write followed
by a read reproduces coordinates and samples bit for bit.
"""


import logging

import numpy as np

from .boundary import FlatExtrapolation
from .config import AXIS_NAMES


__all__ = ["FORMAT_VERSION", "save_grid_data", "load_grid_data"]


logger = logging.getLogger(__name__)


FORMAT_VERSION = 1


def save_grid_data(path, x, y, z, values):
    """
    Write coordinates and samples to `path`.

    The file is written at exactly `path`; no extension is appended.
    Errors from the file system propagate unchanged.
    """

    with open(path, "wb") as fh:
        np.savez(
            fh,
            x=np.asarray(x, dtype=np.float64),
            y=np.asarray(y, dtype=np.float64),
            z=np.asarray(z, dtype=np.float64),
            values=np.asarray(values, dtype=np.float64),
            format_version=np.int64(FORMAT_VERSION),
        )
    logger.debug("Exported grid data of shape %s to %s", values.shape, path)


def load_grid_data(path, boundary=None):
    """
    Read coordinates and samples from `path`.

    Parameters
    ----------
    path : str or path-like
        File written by `save_grid_data`, or any ``.npz`` archive with the
        same layout.
    boundary : BoundaryPolicy, optional
        Ghost layer policy the data is meant for; used to check the
        minimum axis size. Default is `FlatExtrapolation()`.

    Returns
    -------
    x, y, z : np.ndarray
        1D extended coordinate arrays.
    values : np.ndarray
        3D sample array.

    Raises
    ------
    OSError
        If the file cannot be read.
    ValueError
        If the content does not describe a valid grid.
    """

    if boundary is None:
        boundary = FlatExtrapolation()

    npz = np.load(path, allow_pickle=False)
    if not isinstance(npz, np.lib.npyio.NpzFile):
        raise ValueError(
            f"Not an .npz archive: {path} holds a single array."
        )
    with npz:
        content = {key: npz[key] for key in npz.files}

    msg = []

    # Check that every array is present
    missing = [
        key for key in ("x", "y", "z", "values") if key not in content
    ]
    if missing:
        msg.append(f"Missing arrays: {', '.join(missing)}.")
        raise ValueError("\n".join(msg))

    version = content.get("format_version")
    if version is not None and int(version) != FORMAT_VERSION:
        msg.append(
            f"Unsupported format version {int(version)} "
            f"(expected {FORMAT_VERSION})."
        )

    # Validate coordinates
    coords = []
    min_size = boundary.num_ghost() + 2
    for name in AXIS_NAMES:
        coord = np.asarray(content[name], dtype=np.float64)
        coords.append(coord)
        if coord.ndim != 1:
            msg.append(f"{name.upper()} coordinates must be 1-dimensional.")
            continue
        if coord.shape[0] < min_size:
            msg.append(
                f"{name.upper()} size too small: "
                f"expected at least {min_size}, got {coord.shape[0]}."
            )
        if not np.isfinite(coord).all():
            msg.append(
                f"{name.upper()} coordinates must not contain "
                "NaNs or infinite values."
            )
        if np.any(np.diff(coord) <= 0):
            msg.append(
                f"{name.upper()} coordinates must be strictly increasing."
            )

    # Validate samples
    values = np.asarray(content["values"], dtype=np.float64)
    if values.ndim != 3:
        msg.append("Invalid values: a 3D array is expected.")
    else:
        if not np.isfinite(values).all():
            msg.append("values must not contain NaNs or infinite values.")
        for axis, (coord, name) in enumerate(zip(coords, AXIS_NAMES)):
            if coord.ndim == 1 and values.shape[axis] != coord.shape[0]:
                msg.append(
                    f"{name.upper()} size mismatch: "
                    f"expected {coord.shape[0]} from coordinates, "
                    f"got {values.shape[axis]} from values."
                )

    if msg:
        raise ValueError("\n".join(msg))

    x, y, z = coords
    logger.debug("Imported grid data of shape %s from %s", values.shape, path)
    return x, y, z, np.ascontiguousarray(values)
