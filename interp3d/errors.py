# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


__all__ = ["ConfigError", "DomainError"]


class ConfigError(ValueError):
    """
    Raised when a grid configuration cannot be turned into a grid.

    The message lists every problem found, one per line.
    """


class DomainError(ValueError):
    """
    Raised when a query point lies outside the interior span of the grid.

    Parameters
    ----------
    axis : str
        Name of the violating axis ("x", "y" or "z").
    coordinate : float
        Offending query coordinate along that axis.
    bounds : tuple of float
        (lower, upper) valid span along that axis.
    """

    def __init__(self, axis, coordinate, bounds):
        self.axis = axis
        self.coordinate = coordinate
        self.bounds = bounds
        lower, upper = bounds
        super().__init__(
            f"{axis.upper()} coordinate {coordinate!r} is out of bounds "
            f"[{lower!r}, {upper!r}]."
        )
