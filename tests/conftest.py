"""Shared test fixtures for ndinterp tests."""

import math

import numpy as np
import pytest

from ndinterp import Grid, Interpolator, KnotAxis


# ---------------------------------------------------------------------------
# Test functions
# ---------------------------------------------------------------------------

def plane_x_10y(x):
    """x + 10 y"""
    return x[0] + 10.0 * x[1]


def smooth_3d(x):
    """sin(x) + cos(y) * exp(z / 4)"""
    return math.sin(x[0]) + math.cos(x[1]) * math.exp(x[2] / 4.0)


def averaged_slopes(x, y):
    """Knot derivatives: mean of backward/forward divided differences, one-sided at the ends."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    d = np.diff(y) / np.diff(x)
    slopes = np.empty_like(y)
    slopes[0] = d[0]
    slopes[-1] = d[-1]
    slopes[1:-1] = 0.5 * (d[:-1] + d[1:])
    return slopes


# ---------------------------------------------------------------------------
# Grid fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def grid_plane_2d():
    """2D grid x=[0,1,2], y=[0,1] with v(x, y) = x + 10 y."""
    return Grid.from_function([[0.0, 1.0, 2.0], [0.0, 1.0]], plane_x_10y)


@pytest.fixture(scope="module")
def grid_smooth_3d():
    """3D non-uniform grid of sin(x) + cos(y) exp(z/4)."""
    axes = [
        KnotAxis([-1.0, -0.6, -0.1, 0.3, 0.8, 1.0]),
        KnotAxis([0.0, 0.5, 1.2, 1.5, 2.5]),
        KnotAxis([-2.0, -1.0, 0.5, 1.0, 3.0, 4.0, 5.5]),
    ]
    return Grid.from_function(axes, smooth_3d)


@pytest.fixture(scope="module")
def grid_positive_2d():
    """2D grid of exp(0.5 x + 0.2 y) on x in [0, 4], y in [-1, 2]."""
    axes = [np.linspace(0.0, 4.0, 5), np.array([-1.0, 0.0, 0.5, 2.0])]
    return Grid.from_function(axes, lambda p: math.exp(0.5 * p[0] + 0.2 * p[1]))


@pytest.fixture(scope="module")
def grid_two_channels():
    """2D grid with channels (x * y, x - y) on [0, 3] x [0, 2]."""
    return Grid.from_function(
        [[0.0, 1.0, 2.0, 3.0], [0.0, 0.5, 1.0, 2.0]],
        lambda p: (p[0] * p[1], p[0] - p[1]),
        channels=2,
    )


# ---------------------------------------------------------------------------
# Interpolator fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def linear_plane_2d(grid_plane_2d):
    """Linear interpolator on the x + 10 y plane, clamped."""
    return Interpolator(grid_plane_2d, "linear", "clamp")


@pytest.fixture(scope="module")
def cubic_smooth_3d(grid_smooth_3d):
    """Cubic interpolator on the 3D smooth grid, extrapolating."""
    return Interpolator(grid_smooth_3d, "cubic", "extrapolate")
