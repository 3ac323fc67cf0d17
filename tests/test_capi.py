"""Tests for the flat status-code surface in ndinterp.capi."""

import numpy as np
import pytest

from ndinterp import InsufficientKnotsError, Interpolator, ShapeMismatchError, Status
from ndinterp.capi import build, build_checked, evaluate_into

AXES_2D = [[0.0, 1.0, 2.0], [0.0, 1.0]]
PLANE_2D = [0.0, 10.0, 1.0, 11.0, 2.0, 12.0]


class TestBuild:
    def test_returns_interpolator(self):
        handle = build(AXES_2D, PLANE_2D)
        assert isinstance(handle, Interpolator)
        assert handle.evaluate([1.5, 0.0]).value == pytest.approx(1.5)

    def test_shape_mismatch_raises(self):
        with pytest.raises(ShapeMismatchError):
            build(AXES_2D, np.arange(5.0))

    def test_insufficient_knots_raises(self):
        with pytest.raises(InsufficientKnotsError):
            build(AXES_2D, PLANE_2D, kernels=["cubic", "linear"])

    def test_channels(self):
        handle = build([[0.0, 1.0]], [1.0, -1.0, 3.0, -3.0], channels=2)
        np.testing.assert_allclose(handle([0.5]), [2.0, -2.0])


class TestBuildChecked:
    def test_success(self):
        status, handle = build_checked(AXES_2D, PLANE_2D)
        assert status == Status.SUCCESS
        assert handle is not None

    def test_shape_mismatch(self):
        status, handle = build_checked(AXES_2D, np.arange(5.0))
        assert status == Status.SHAPE_MISMATCH
        assert handle is None

    def test_insufficient_knots(self):
        status, handle = build_checked(AXES_2D, PLANE_2D, kernels="cubic")
        assert status == Status.INSUFFICIENT_KNOTS
        assert handle is None

    def test_status_codes_are_ints(self):
        status, _ = build_checked(AXES_2D, np.arange(5.0))
        assert int(status) == 1

    def test_invalid_axis_still_raises(self):
        """Malformed knots are programming errors, not status codes."""
        with pytest.raises(ValueError, match="strictly increasing"):
            build_checked([[0.0, 2.0, 1.0]], [1.0, 2.0, 3.0])


class TestEvaluateInto:
    @pytest.fixture
    def handle(self):
        return build(AXES_2D, PLANE_2D, policies=["extrapolate", "reject"])

    def test_values_only(self, handle):
        out = np.zeros(1)
        assert evaluate_into(handle, [1.5, 0.5], out) == Status.SUCCESS
        assert out[0] == pytest.approx(6.5)

    def test_with_derivatives(self, handle):
        out = np.zeros(1)
        grad = np.zeros(2)
        assert evaluate_into(handle, [0.5, 0.5], out, grad) == Status.SUCCESS
        np.testing.assert_allclose(grad, [1.0, 10.0])

    def test_derivatives_2d_buffer(self):
        handle = build([[0.0, 1.0], [0.0, 1.0]], np.arange(8.0), channels=2)
        out = np.zeros(2)
        grad = np.zeros((2, 2))
        assert evaluate_into(handle, [0.5, 0.5], out, grad) == Status.SUCCESS
        np.testing.assert_allclose(out, [3.0, 4.0])
        np.testing.assert_allclose(grad, [[4.0, 4.0], [2.0, 2.0]])

    def test_extrapolation_succeeds(self, handle):
        out = np.zeros(1)
        assert evaluate_into(handle, [3.0, 0.0], out) == Status.SUCCESS
        assert out[0] == pytest.approx(3.0)

    def test_out_of_domain_leaves_buffers(self, handle):
        out = np.full(1, -7.0)
        grad = np.full(2, -7.0)
        assert evaluate_into(handle, [1.0, 2.0], out, grad) == Status.OUT_OF_DOMAIN
        np.testing.assert_array_equal(out, [-7.0])
        np.testing.assert_array_equal(grad, [-7.0, -7.0])

    def test_nan_query_is_out_of_domain(self, handle):
        out = np.zeros(1)
        assert evaluate_into(handle, [float("nan"), 0.0], out) == Status.OUT_OF_DOMAIN

    def test_non_positive_value(self):
        handle = build([[0.0, 1.0, 2.0]], [1.0, 0.0, 2.0], kernels="log_linear")
        out = np.full(1, 5.0)
        assert evaluate_into(handle, [0.5], out) == Status.NON_POSITIVE_VALUE
        assert out[0] == 5.0

    def test_wrong_value_buffer_raises(self, handle):
        with pytest.raises(ValueError, match="out_values"):
            evaluate_into(handle, [0.5, 0.5], np.zeros(2))

    def test_wrong_derivative_buffer_raises(self, handle):
        with pytest.raises(ValueError, match="out_derivatives"):
            evaluate_into(handle, [0.5, 0.5], np.zeros(1), np.zeros(3))

    def test_wrong_query_length_raises(self, handle):
        with pytest.raises(ValueError, match="coordinates"):
            evaluate_into(handle, [0.5], np.zeros(1))
