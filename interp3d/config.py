# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import math
import numbers
from dataclasses import dataclass, field
from enum import Enum


__all__ = [
    "GridSpacing",
    "Linear",
    "Exponential",
    "AxisConfig",
    "GridConfig",
    "InterpType",
    "AXIS_NAMES",
]


AXIS_NAMES = ("x", "y", "z")


class GridSpacing:
    """
    Base class of the per-axis spacing laws.

    Use the `Linear` instance or an `Exponential(k)` instance.
    """


@dataclass(frozen=True)
class _Linear(GridSpacing):
    """Evenly spaced nodes."""

    def __repr__(self):
        return "Linear"


@dataclass(frozen=True)
class Exponential(GridSpacing):
    """
    Exponentially biased node density.

    Parameters
    ----------
    k : float
        Bias strength. k > 0 places more nodes toward the lower end of the
        range (min), k < 0 toward the upper end (max). k = 0 is the linear
        law. For k = 8, half of the nodes lie within roughly the first
        seventeenth of the range.
    """

    k: float

    def __post_init__(self):
        object.__setattr__(self, "k", float(self.k))

    def __repr__(self):
        return f"Exponential({self.k!r})"


Linear = _Linear()


@dataclass(frozen=True)
class AxisConfig:
    """
    Node placement along a single axis.

    Parameters
    ----------
    n : int
        Number of interior (sampled) nodes, at least 2.
    min, max : float
        Range covered by the interior nodes.
    spacing : GridSpacing
        Spacing law, `Linear` or `Exponential(k)`.
    """

    n: int = 300
    min: float = 0.0
    max: float = 15.0
    spacing: GridSpacing = field(default_factory=lambda: Exponential(8.0))

    def problems(self, name):
        """
        List what is wrong with this configuration.

        Parameters
        ----------
        name : str
            Axis name used in the messages.

        Returns
        -------
        msg : list of str
            Empty if the configuration is valid.
        """

        msg = []
        if (
            isinstance(self.n, bool)
            or not isinstance(self.n, numbers.Integral)
        ):
            msg.append(
                f"{name.upper()} node count must be an integer, "
                f"got {self.n!r}."
            )
        elif self.n < 2:
            msg.append(
                f"{name.upper()} node count too low: "
                f"expected at least 2, got {self.n}."
            )
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            msg.append(f"{name.upper()} range must be finite.")
        elif not self.min < self.max:
            msg.append(
                f"{name.upper()} range is empty: "
                f"min ({self.min}) must be smaller than max ({self.max})."
            )
        if not isinstance(self.spacing, GridSpacing):
            msg.append(
                f"{name.upper()} spacing must be Linear or Exponential(k), "
                f"got {self.spacing!r}."
            )
        elif isinstance(self.spacing, Exponential):
            if not math.isfinite(self.spacing.k):
                msg.append(f"{name.upper()} exponential factor must be finite.")
        return msg


@dataclass(frozen=True)
class GridConfig:
    """
    Node placement along the three axes.

    The defaults use a dense, low-end biased radial-like grid on X and Y and
    a linearly spaced angle on Z.
    """

    x: AxisConfig = field(default_factory=AxisConfig)
    y: AxisConfig = field(default_factory=AxisConfig)
    z: AxisConfig = field(
        default_factory=lambda: AxisConfig(
            n=40, min=0.0, max=math.pi, spacing=Linear
        )
    )

    @classmethod
    def uniform(cls, axis):
        """Use the same axis configuration for all three axes."""
        return cls(x=axis, y=axis, z=axis)

    def axes(self):
        return (self.x, self.y, self.z)


class InterpType(Enum):
    """Interpolation scheme used by the evaluator."""

    TRICUBIC = "tricubic"
    BICUBIC_UNILINEAR = "bicubic-unilinear"
