# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


from abc import ABC, abstractmethod

import numpy as np


__all__ = ["BoundaryPolicy", "FlatExtrapolation"]


class BoundaryPolicy(ABC):
    """
    Padding rule for the ghost layer around the interior nodes.

    A policy decides how many ghost nodes sit below and above the interior
    nodes of every axis, where their coordinates go, and which values they
    carry. Grid construction, sampling and evaluation only go through this
    interface.

    Attributes
    ----------
    num_lower : int
        Ghost nodes before the first interior node.
    num_upper : int
        Ghost nodes after the last interior node.
    """

    num_lower = 1
    num_upper = 2

    def num_ghost(self):
        return self.num_lower + self.num_upper

    def interior(self, size):
        """
        Slice of the interior nodes in an extended axis of `size` slots.
        """
        return slice(self.num_lower, size - self.num_upper)

    @abstractmethod
    def extend_coordinates(self, coord):
        """
        Overwrite the ghost slots of an axis in place.

        Parameters
        ----------
        coord : np.ndarray
            1D extended coordinate array whose interior slots are set.

        Returns
        -------
        coord : np.ndarray
            The same array, with ghost coordinates set.
        """

    @abstractmethod
    def fill_values(self, values):
        """
        Fill the ghost layer of a 3D sample array from its interior.

        Parameters
        ----------
        values : np.ndarray
            3D array of shape (nx, ny, nz) whose interior is set.

        Returns
        -------
        values : np.ndarray
            Array with every ghost entry set.
        """


class FlatExtrapolation(BoundaryPolicy):
    """
    One ghost node below and two above the interior nodes.

    Ghost coordinates continue the spacing of the two nearest nodes
    (linear extrapolation), and ghost values repeat the nearest interior
    value (flat extrapolation).
    """

    num_lower = 1
    num_upper = 2

    def extend_coordinates(self, coord):
        last = coord.shape[0] - self.num_upper - 1
        coord[0] = 2.0 * coord[1] - coord[2]
        coord[last + 1] = 2.0 * coord[last] - coord[last - 1]
        coord[last + 2] = 2.0 * coord[last + 1] - coord[last]
        return coord

    def fill_values(self, values):
        # Clamp every axis independently against its own interior bounds,
        # so edges and corners take the nearest interior value too
        index = [
            np.clip(np.arange(size), self.num_lower, size - self.num_upper - 1)
            for size in values.shape
        ]
        return values[np.ix_(*index)]
