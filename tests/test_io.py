from pathlib import Path

import numpy as np
import pytest

from interp3d import Interp3D
from interp3d.io import FORMAT_VERSION, load_grid_data, save_grid_data


def test_round_trip_is_bit_exact(smooth_interp: Interp3D, tmp_path: Path):
    """Exported grids and samples come back identical."""
    path = tmp_path / "smooth.ip3d"

    smooth_interp.export_data(path)
    loaded = Interp3D.from_file(path)

    for original, restored in zip(smooth_interp.data, loaded.data):
        assert restored.dtype == np.float64
        np.testing.assert_array_equal(restored, original)
        assert restored.tobytes() == original.tobytes()
    assert loaded.bounds == smooth_interp.bounds


def test_round_trip_queries_agree(smooth_interp: Interp3D, tmp_path: Path):
    """A re-imported interpolator gives the same values."""
    path = tmp_path / "smooth.npz"
    smooth_interp.export_data(path)

    loaded = Interp3D()
    loaded.import_data(path)

    points = [[0.3, -0.2, 1.1], [1.9, 0.7, 2.8]]
    np.testing.assert_array_equal(loaded(points), smooth_interp(points))


def test_export_writes_exact_path(smooth_interp: Interp3D, tmp_path: Path):
    """No extension is appended to the given path."""
    path = tmp_path / "data_without_extension"

    smooth_interp.export_data(str(path))

    assert path.is_file()
    assert sorted(p.name for p in tmp_path.iterdir()) == [path.name]


def test_export_without_data(tmp_path: Path):
    """An interpolator without data has nothing to export."""
    with pytest.raises(RuntimeError):
        Interp3D().export_data(tmp_path / "empty.ip3d")


def test_missing_file(tmp_path: Path):
    """File system errors propagate unchanged."""
    with pytest.raises(FileNotFoundError):
        Interp3D.from_file(tmp_path / "missing.ip3d")


def test_unwritable_path(smooth_interp: Interp3D, tmp_path: Path):
    """Write errors propagate unchanged."""
    with pytest.raises(OSError):
        smooth_interp.export_data(tmp_path / "no" / "such" / "dir.ip3d")


def test_missing_arrays(tmp_path: Path):
    """Files without the expected arrays are rejected."""
    path = tmp_path / "partial.npz"
    np.savez(path, x=np.arange(6.0), y=np.arange(6.0))

    with pytest.raises(ValueError, match="Missing arrays: z, values"):
        load_grid_data(path)


def test_single_array_file(smooth_interp: Interp3D, tmp_path: Path):
    """A plain .npy file is rejected and the loaded data is kept."""
    path = tmp_path / "array.npy"
    np.save(path, np.zeros(3))
    previous = smooth_interp.data

    with pytest.raises(ValueError, match="Not an .npz archive"):
        load_grid_data(path)
    with pytest.raises(ValueError, match="Not an .npz archive"):
        smooth_interp.import_data(path)
    assert smooth_interp.data is previous


def test_inconsistent_content(tmp_path: Path):
    """Every problem in a malformed file is reported."""
    path = tmp_path / "broken.npz"
    x = np.array([0.0, 1.0, 1.0, 2.0, 3.0, 4.0])
    y = np.arange(3.0)
    z = np.arange(6.0)
    values = np.zeros((6, 3, 5))
    values[0, 0, 0] = np.inf
    save_grid_data(path, x, y, z, values)

    with pytest.raises(ValueError) as excinfo:
        load_grid_data(path)

    message = str(excinfo.value)
    assert "X coordinates must be strictly increasing" in message
    assert "Y size too small" in message
    assert "values must not contain NaNs" in message
    assert "Y size mismatch" not in message
    assert "Z size mismatch: expected 6 from coordinates, got 5" in message


def test_unsupported_version(tmp_path: Path):
    """Files from a newer format are rejected."""
    path = tmp_path / "future.npz"
    axis = np.arange(6.0)
    np.savez(
        path, x=axis, y=axis, z=axis, values=np.zeros((6, 6, 6)),
        format_version=FORMAT_VERSION + 1,
    )

    with pytest.raises(ValueError, match="Unsupported format version"):
        load_grid_data(path)


def test_hand_written_file(tmp_path: Path):
    """Files from other tools load as long as they follow the layout."""
    path = tmp_path / "external.npz"
    axis = np.array([-1.0, 0.0, 1.0, 2.0, 3.0])
    values = np.full((5, 5, 5), 4.0)
    np.savez(path, x=axis, y=axis, z=axis, values=values)

    interp = Interp3D.from_file(path)

    assert interp.bounds == ((0.0, 1.0),) * 3
    assert interp.interpolate(0.5, 0.5, 0.5) == pytest.approx(4.0)

