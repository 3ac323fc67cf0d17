"""Tests for Interpolator save/load."""

import pathlib
import pickle
import warnings

import numpy as np
import pytest

from ndinterp import Interpolator


class TestSerialization:
    """Tests for save/load round-trip on Interpolator."""

    TEST_POINTS = [
        [0.15, 0.9, 1.7],
        [-0.5, 0.0, 2.5],
        [0.9, 2.4, -1.9],
        [-1.4, 1.0, 6.0],
    ]

    def test_save_load_roundtrip(self, cubic_smooth_3d, tmp_path):
        path = tmp_path / "interp.pkl"
        cubic_smooth_3d.save(path)
        loaded = Interpolator.load(path)

        for pt in self.TEST_POINTS:
            orig = cubic_smooth_3d.evaluate(pt, derivatives=True)
            rest = loaded.evaluate(pt, derivatives=True)
            np.testing.assert_allclose(rest.values, orig.values, atol=0, rtol=0)
            np.testing.assert_allclose(rest.derivatives, orig.derivatives, atol=0, rtol=0)

    def test_loaded_configuration(self, cubic_smooth_3d, tmp_path):
        path = tmp_path / "interp.pkl"
        cubic_smooth_3d.save(path)
        loaded = Interpolator.load(path)

        assert loaded.kernels == cubic_smooth_3d.kernels
        assert loaded.policies == cubic_smooth_3d.policies
        assert loaded.grid.shape == cubic_smooth_3d.grid.shape
        for d in range(loaded.num_dimensions):
            assert loaded.grid.axes[d] == cubic_smooth_3d.grid.axes[d]

    def test_arrays_read_only_after_load(self, linear_plane_2d, tmp_path):
        path = tmp_path / "interp.pkl"
        linear_plane_2d.save(path)
        loaded = Interpolator.load(path)
        with pytest.raises(ValueError):
            loaded.grid.values[0, 0, 0] = 1.0
        with pytest.raises(ValueError):
            loaded.grid.axes[0].knots[0] = 1.0

    def test_load_wrong_type_raises(self, grid_plane_2d, tmp_path):
        path = tmp_path / "grid.pkl"
        with open(path, "wb") as f:
            pickle.dump(grid_plane_2d, f)
        with pytest.raises(TypeError, match="Interpolator"):
            Interpolator.load(path)

    def test_version_mismatch_warning(self, linear_plane_2d):
        state = linear_plane_2d.__getstate__()
        state["_ndinterp_version"] = "0.0.0-fake"

        obj = object.__new__(Interpolator)
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            obj.__setstate__(state)
            assert len(w) == 1
            assert "0.0.0-fake" in str(w[0].message)

    def test_same_version_is_silent(self, linear_plane_2d, tmp_path):
        path = tmp_path / "interp.pkl"
        linear_plane_2d.save(path)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            Interpolator.load(path)

    def test_pathlib_and_str_paths(self, linear_plane_2d, tmp_path):
        path = pathlib.Path(tmp_path) / "interp.pkl"
        linear_plane_2d.save(str(path))
        loaded = Interpolator.load(path)
        assert loaded.evaluate([1.5, 0.0]).value == pytest.approx(1.5)
