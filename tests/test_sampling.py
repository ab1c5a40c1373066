import itertools

import numpy as np
import pytest

from interp3d import (
    AxisConfig,
    FlatExtrapolation,
    GridConfig,
    Linear,
    build_grid,
    generate_samples,
)


def _clamped(index, size):
    return min(max(index, 1), size - 3)


def test_call_count_and_order(small_config: GridConfig):
    """f is called once per interior node, in row-major order."""
    x, y, z, values = build_grid(small_config)
    calls = []

    def f(xi, yj, zk):
        calls.append((xi, yj, zk))
        return 0.0

    generate_samples(f, x, y, z, out=values)

    nx, ny, nz = small_config.x.n, small_config.y.n, small_config.z.n
    assert len(calls) == nx * ny * nz
    expected = list(itertools.product(x[1:-2], y[1:-2], z[1:-2]))
    assert calls == expected


def test_context_is_passed(small_config: GridConfig):
    """A context object is handed to every call as a fourth argument."""
    x, y, z, _ = build_grid(small_config)
    context = {"calls": 0, "total": 0.0}

    def f(xi, yj, zk, ctx):
        ctx["calls"] += 1
        ctx["total"] += xi
        return 1.0

    generate_samples(f, x, y, z, context=context)

    nx, ny, nz = small_config.x.n, small_config.y.n, small_config.z.n
    assert context["calls"] == nx * ny * nz
    assert context["total"] == pytest.approx(np.sum(x[1:-2]) * ny * nz)


def test_interior_values(small_config: GridConfig):
    """Interior entries hold f at the node coordinates."""
    x, y, z, _ = build_grid(small_config)

    values = generate_samples(lambda a, b, c: a + 10.0 * b + 100.0 * c, x, y, z)

    X, Y, Z = np.meshgrid(x[1:-2], y[1:-2], z[1:-2], indexing="ij")
    np.testing.assert_array_equal(values[1:-2, 1:-2, 1:-2], X + 10.0 * Y + 100.0 * Z)


def test_ghost_values_clamp_per_axis(small_config: GridConfig):
    """Every ghost entry copies the node clamped on each axis independently."""
    x, y, z, _ = build_grid(small_config)
    values = generate_samples(lambda a, b, c: a + 10.0 * b + 100.0 * c, x, y, z)

    nx, ny, nz = values.shape
    for i, j, k in itertools.product(range(nx), range(ny), range(nz)):
        ic, jc, kc = _clamped(i, nx), _clamped(j, ny), _clamped(k, nz)
        assert values[i, j, k] == values[ic, jc, kc]


def test_ghost_values_with_long_y_axis():
    """The Y clamp uses the Y bound even when Y is longer than X."""
    config = GridConfig(
        x=AxisConfig(n=2, min=0.0, max=1.0, spacing=Linear),
        y=AxisConfig(n=6, min=0.0, max=1.0, spacing=Linear),
        z=AxisConfig(n=3, min=0.0, max=1.0, spacing=Linear),
    )
    x, y, z, _ = build_grid(config)
    values = generate_samples(lambda a, b, c: a + 10.0 * b + 100.0 * c, x, y, z)

    # Interior Y nodes past the X bound keep their own samples
    for j in range(1, config.y.n + 1):
        assert values[1, j, 1] == pytest.approx(x[1] + 10.0 * y[j] + 100.0 * z[1])
    assert values[0, -1, -1] == values[1, config.y.n, config.z.n]


def test_constant_function_samples():
    """A constant function gives a constant sample array, ghosts included."""
    config = GridConfig.uniform(AxisConfig(n=4, min=0.0, max=1.0, spacing=Linear))
    x, y, z, _ = build_grid(config)

    values = generate_samples(lambda a, b, c: 1.0, x, y, z)

    assert values.shape == (7, 7, 7)
    assert np.all(values == 1.0)


def test_fill_values_policy():
    """The flat policy fills faces, edges and corners from the interior."""
    policy = FlatExtrapolation()
    values = np.zeros((5, 6, 7))
    values[1:-2, 1:-2, 1:-2] = np.arange(2 * 3 * 4).reshape(2, 3, 4) + 1.0

    filled = policy.fill_values(values)

    assert filled.shape == values.shape
    assert filled[0, 0, 0] == values[1, 1, 1]
    assert filled[-1, -1, -1] == values[2, 3, 4]
    assert filled[-2, 0, -1] == values[2, 1, 4]
    np.testing.assert_array_equal(filled[1:-2, 1:-2, 1:-2], values[1:-2, 1:-2, 1:-2])


def test_extend_coordinates_policy():
    """The flat policy extrapolates ghost coordinates linearly."""
    policy = FlatExtrapolation()
    coord = np.array([np.nan, 0.0, 1.0, 3.0, np.nan, np.nan])

    policy.extend_coordinates(coord)

    np.testing.assert_array_equal(coord, [-1.0, 0.0, 1.0, 3.0, 5.0, 7.0])
    assert policy.interior(6) == slice(1, 4)
    assert policy.num_ghost() == 3
