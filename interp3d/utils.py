# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import numpy as np
import numba as nb

from .config import AXIS_NAMES


__all__ = [
    "check_points",
    "check_bounds",
    "find_violation",
    "stencil_weights",
    "scale_segments",
    "evaluate",
]


def check_points(points):
    """
    Validate the input array of query points.

    Parameters
    ----------
    points : array-like
        Input query point coordinates to be validated.
        Expected shape is (num_points, 3).

    Returns
    -------
    msg : str or None
        Error message if validation fails, otherwise None.
    points : np.ndarray or None
        Validated array of shape (num_points, 3), or None on failure.
    """

    try:
        points = np.asarray(points, dtype=np.float64)
    except (ValueError, TypeError):
        msg = "Invalid points: could not convert to a float64 array."
        return msg, None
    if points.ndim != 2 or points.shape[1] != 3:
        msg = (
            "Invalid points: expected a 2D array with shape (N, 3), "
            f"got shape {points.shape}."
        )
        return msg, None
    if points.shape[0] == 0:
        msg = "Invalid points: expected at least one point, got empty."
        return msg, None
    if not np.isfinite(points).all():
        msg = "Invalid points: must not contain infs or nans."
        return msg, None
    return None, points


def check_bounds(points, bounds):
    """
    Check whether points lie within the interior span of the grid.

    Parameters
    ----------
    points : np.ndarray, shape (num_points, 3)
        Query point coordinates.
    bounds : tuple of tuples
        ((xmin, xmax), (ymin, ymax), (zmin, zmax)) interior span.

    Returns
    -------
    flag_all_in : bool
        True if all points lie inside the bounds.
    mask_in : np.ndarray, dtype=bool
        1D boolean mask indicating which points lie inside the bounds.
    num_in : int
        Number of points that lie inside the bounds.
    """

    (xmin, xmax), (ymin, ymax), (zmin, zmax) = bounds
    mask_in_x = (xmin <= points[:,0]) & (points[:,0] <= xmax)
    mask_in_y = (ymin <= points[:,1]) & (points[:,1] <= ymax)
    mask_in_z = (zmin <= points[:,2]) & (points[:,2] <= zmax)
    mask_in = mask_in_x & mask_in_y & mask_in_z
    flag_all_in = bool(mask_in.all())
    num_in = np.count_nonzero(mask_in)
    return flag_all_in, mask_in, num_in


def find_violation(points, bounds):
    """
    Locate the first out-of-bounds coordinate among the query points.

    Points are scanned in order, and axes in X, Y, Z order within a point.

    Returns
    -------
    violation : tuple or None
        (axis_name, coordinate, (lower, upper)), or None if every point
        lies inside the bounds.
    """

    for point in points:
        for coord, (lower, upper), name in zip(point, bounds, AXIS_NAMES):
            if not lower <= coord <= upper:
                return name, float(coord), (float(lower), float(upper))
    return None


def stencil_weights(p, coord, cubic, num_lower=1, num_upper=2):
    """
    Locate the enclosing cell of each point along one axis and compute the
    weights of its 4-node stencil.

    For a point in the cell [c[m], c[m+1]] the stencil is m-1 .. m+2 and
    t = (p - c[m]) / (c[m+1] - c[m]).

    On a cubic axis the weights are those of the cubic Hermite polynomial
    through the two bracketing values, with slopes estimated by central
    differences over the actual (non-uniform) neighbor spacing,

        s[m] = (f[m+1] - f[m-1]) / (c[m+1] - c[m-1]),

    which reduces to Catmull-Rom on a uniform grid. The interpolant passes
    through the nodes and is C1 across cells. On a linear axis only the two
    bracketing nodes get nonzero weights (1 - t, t).

    Parameters
    ----------
    p : np.ndarray
        1D array of coordinates along a single axis of the query points,
        all within the interior span.
    coord : np.ndarray
        1D extended coordinate array of that axis.
    cubic : bool
        Cubic Hermite weights if True, linear weights otherwise.
    num_lower, num_upper : int, optional
        Number of ghost slots below and above the interior nodes.

    Returns
    -------
    index : np.ndarray, shape (num_points,), dtype=int
        Index of the first stencil node (m - 1) for each point.
    weights : np.ndarray, shape (num_points, 4)
        Weights of the stencil nodes m-1, m, m+1, m+2.
    """

    size = coord.shape[0]
    m = np.searchsorted(coord, p, side="right") - 1
    np.clip(m, num_lower, size - num_upper - 2, out=m)
    m = m.astype(np.int64)

    x0 = coord[m - 1]
    x1 = coord[m]
    x2 = coord[m + 1]
    x3 = coord[m + 2]
    h = x2 - x1
    t = (p - x1) / h

    weights = np.zeros((p.shape[0], 4), dtype=np.float64)
    if cubic:
        t2 = t * t
        t3 = t2 * t
        h00 = 2.0 * t3 - 3.0 * t2 + 1.0
        h10 = t3 - 2.0 * t2 + t
        h01 = -2.0 * t3 + 3.0 * t2
        h11 = t3 - t2
        a = h10 * h / (x2 - x0)
        b = h11 * h / (x3 - x1)
        weights[:,0] = -a
        weights[:,1] = h00 - b
        weights[:,2] = h01 + a
        weights[:,3] = b
    else:
        weights[:,1] = 1.0 - t
        weights[:,2] = t

    return m - 1, weights


def scale_segments(n1_all, N2):
    """
    Segment the global size N2 of a second axis across MPI ranks,
    proportionally to local sizes n1_all along a first axis.

    Parameters
    ----------
    n1_all : np.ndarray, dtype=int
        1D array of local sizes along the 1st axis for all ranks.
    N2 : int
        Global size along the second axis to be segmented.

    Returns
    -------
    n2_all : np.ndarray, dtype=int
        1D array of local sizes along the 2nd axis for all ranks.
    """

    N1 = np.sum(n1_all)
    ideal_n2_all = N2 * (n1_all / N1)
    n2_all = np.floor(ideal_n2_all).astype(np.int64)

    # Hand out the remainder by largest fractional part
    remainder = N2 - np.sum(n2_all)
    frac_parts = ideal_n2_all - n2_all
    indices = np.argsort(frac_parts, kind="stable")[::-1]
    for i in range(remainder):
        n2_all[indices[i]] += 1

    return n2_all


@nb.njit(parallel=True, fastmath=True)
def evaluate(
    values,
    wx,
    wy,
    wz,
    index_x,
    index_y,
    index_z,
    span,
    num,
    out,
):
    """
    Evaluate at multiple query points as the tensor product of per-axis
    stencil weights.

    Because the 1D schemes are separable, summing the stencil values with
    the product weights is the same as interpolating along Z on every
    stencil line, then along Y, then along X.

    Parameters
    ----------
    values : np.ndarray
        3D sample array, ghost layer included.
    wx, wy, wz : np.ndarray, shape (num, 4)
        Stencil weights of each point along the X, Y, and Z axes.
    index_x, index_y, index_z : np.ndarray, shape (num,), dtype=int
        Index of the first stencil node of each point along the X, Y, and
        Z axes.
    span : np.ndarray, shape (3, 2), dtype=int
        Range of stencil nodes used per axis: (0, 4) on a cubic axis,
        (1, 3) on a linear axis.
    num : int
        Number of query points.
    out : np.ndarray
        1D output array to store the evaluated values, modified in place.

    Returns
    -------
    None
        The evaluated results are stored in-place in the `out` array.
    """

    for i in nb.prange(0, num):
        value = 0.0
        for ix in range(span[0,0], span[0,1]):
            for iy in range(span[1,0], span[1,1]):
                for iz in range(span[2,0], span[2,1]):
                    value += (
                        values[
                            index_x[i] + ix,
                            index_y[i] + iy,
                            index_z[i] + iz,
                        ] *
                        wx[i, ix] *
                        wy[i, iy] *
                        wz[i, iz]
                    )
        out[i] = value
