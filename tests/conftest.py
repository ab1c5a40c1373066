import numpy as np
import pytest

from interp3d import AxisConfig, Exponential, GridConfig, Interp3D, Linear


@pytest.fixture
def small_config() -> GridConfig:
    """Small grid with a different node count and spacing law per axis."""
    return GridConfig(
        x=AxisConfig(n=7, min=0.0, max=2.0, spacing=Exponential(2.0)),
        y=AxisConfig(n=6, min=-1.0, max=1.0, spacing=Linear),
        z=AxisConfig(n=5, min=0.5, max=3.0, spacing=Exponential(-1.5)),
    )


def smooth_function(x, y, z):
    return np.sin(x) * np.cos(y) + 0.5 * z * z


@pytest.fixture
def smooth_interp(small_config) -> Interp3D:
    """Interpolator of a smooth function on the small grid."""
    return Interp3D.from_config(smooth_function, small_config)
