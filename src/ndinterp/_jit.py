"""Numba JIT-compiled helpers for the per-query hot path."""

import numpy as np
from numba import njit


@njit(cache=True)
def locate_interval(knots: np.ndarray, x: float) -> int:
    """Index of the last knot that is <= x (bisection).

    Parameters
    ----------
    knots : ndarray
        Strictly increasing knot positions.
    x : float
        Query coordinate.

    Returns
    -------
    int
        ``-1`` if ``x < knots[0]``, ``len(knots) - 1`` if ``x >= knots[-1]``,
        otherwise ``i`` with ``knots[i] <= x < knots[i + 1]``.
    """
    lo = 0
    hi = knots.shape[0]
    while lo < hi:
        mid = (lo + hi) // 2
        if x < knots[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo - 1
