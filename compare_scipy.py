"""
Compare ndinterp Interpolator vs scipy RegularGridInterpolator on identical grids.

Tests:
1. 3D smooth function on a non-uniform grid: linear and cubic accuracy + timing
2. 2D exponential decay: linear vs log_linear vs scipy linear
3. Gradient accuracy: ndinterp analytical derivatives vs central differences

scipy's "cubic" method fits global splines along each axis; ndinterp's cubic
kernel is local (four knots per axis), so agreement is approximate.  The
linear kernels must agree to rounding.

Requires: scipy (installed with the ``test`` extra)

Usage:
    uv run python compare_scipy.py

NOTE: This script is for local benchmarking only. It is NOT part of the
test suite and is NOT run in CI.
"""

import math
import time
from typing import Callable, List, Tuple

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from ndinterp import Grid, Interpolator


def smooth_3d(x):
    return math.sin(x[0]) + math.cos(x[1]) * math.exp(x[2] / 4.0)


def decay_2d(x):
    return 50.0 * math.exp(-1.3 * x[0] + 0.4 * x[1])


def random_points(axes: List[np.ndarray], n: int, seed: int = 42) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return np.column_stack([rng.uniform(a[0], a[-1], n) for a in axes])


def timed(fn: Callable, points: np.ndarray) -> Tuple[np.ndarray, float]:
    start = time.time()
    out = fn(points)
    return out, time.time() - start


def header(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


# ============================================================================
# Test 1: 3D smooth function
# ============================================================================

def test_3d_smooth(n_points: int = 2000) -> None:
    header("Test 1: 3D sin(x) + cos(y) exp(z/4), non-uniform grid")
    axes = [
        np.sort(np.concatenate([[-1.0, 1.0], np.random.default_rng(1).uniform(-1, 1, 10)])),
        np.linspace(0.0, 2.5, 11),
        np.geomspace(0.1, 5.5, 14) - 2.1,
    ]
    grid = Grid.from_function(axes, smooth_3d, verbose=True)
    points = random_points(axes, n_points)
    exact = np.array([smooth_3d(p) for p in points])

    print(f"\n{'Method':<28} {'Max error':>12} {'Mean error':>12} {'Time (ms)':>10}")
    print("-" * 66)
    for kernel, method in (("linear", "linear"), ("cubic", "cubic")):
        interp = Interpolator(grid, kernel)
        ours, t_ours = timed(lambda p: interp.evaluate_batch(p)[:, 0], points)
        rgi = RegularGridInterpolator(axes, grid.values[..., 0], method=method)
        theirs, t_theirs = timed(rgi, points)

        for name, vals, t in (
            (f"ndinterp {kernel}", ours, t_ours),
            (f"scipy {method}", theirs, t_theirs),
        ):
            err = np.abs(vals - exact)
            print(f"{name:<28} {err.max():>12.2e} {err.mean():>12.2e} {t * 1e3:>10.2f}")

        if kernel == "linear":
            print(f"{'  max |ndinterp - scipy|':<28} {np.abs(ours - theirs).max():>12.2e}")


# ============================================================================
# Test 2: log-space kernels
# ============================================================================

def test_2d_decay(n_points: int = 1000) -> None:
    header("Test 2: 2D 50 exp(-1.3 x + 0.4 y), log-space kernels")
    axes = [np.array([0.0, 0.5, 1.5, 3.0, 5.0, 8.0]), np.linspace(-1.0, 1.0, 5)]
    grid = Grid.from_function(axes, decay_2d)
    points = random_points(axes, n_points, seed=7)
    exact = np.array([decay_2d(p) for p in points])

    rgi = RegularGridInterpolator(axes, grid.values[..., 0])
    print(f"\n{'Method':<28} {'Max rel error':>14}")
    print("-" * 44)
    print(f"{'scipy linear':<28} {np.max(np.abs(rgi(points) / exact - 1)):>14.2e}")
    for kernel in ("linear", "log_linear", "log_cubic"):
        vals = Interpolator(grid, kernel).evaluate_batch(points)[:, 0]
        print(f"{'ndinterp ' + kernel:<28} {np.max(np.abs(vals / exact - 1)):>14.2e}")


# ============================================================================
# Test 3: gradients
# ============================================================================

def test_gradients(n_points: int = 200, h: float = 1e-6) -> None:
    header("Test 3: analytical gradients vs central differences (cubic)")
    axes = [np.linspace(-1.0, 1.0, 9), np.linspace(0.0, 2.5, 9), np.linspace(-2.0, 5.5, 12)]
    interp = Interpolator(Grid.from_function(axes, smooth_3d), "cubic")
    points = random_points(axes, n_points, seed=3)
    _, grads = interp.evaluate_batch(points, derivatives=True)

    worst = np.zeros(3)
    for k, p in enumerate(points):
        for d in range(3):
            up, dn = p.copy(), p.copy()
            up[d] += h
            dn[d] -= h
            fd = (interp(up)[0] - interp(dn)[0]) / (2 * h)
            worst[d] = max(worst[d], abs(fd - grads[k, d, 0]))
    for d in range(3):
        print(f"  d/dx{d}: max |analytical - FD| = {worst[d]:.2e}")


if __name__ == "__main__":
    test_3d_smooth()
    test_2d_decay()
    test_gradients()
