"""One-dimensional interpolation kernels.

Every kernel is linear in the samples it touches (or in their logarithms
for the log-space variants), so each one is reduced to a small window of
sample indices plus two weight vectors:

.. math::

    v(x) = \\sum_j w_j s_j, \\qquad
    \\frac{dv}{dx} = \\sum_j w'_j s_j

where :math:`s_j` are the samples (or :math:`\\log` of the samples).  The
cubic kernel is a cubic Hermite segment whose knot derivatives are the
average of the backward and forward divided differences, falling back to
the one-sided divided difference at the first and last knot.  Beyond the
edge knots the cubic continues linearly with the edge knot's derivative.

References
----------
- Fritsch & Carlson (1980), "Monotone Piecewise Cubic Interpolation",
  SIAM J. Numer. Anal. 17(2):238-246 (Hermite form)
- Buckley et al. (2015), "LHAPDF6: parton density access in the LHC
  precision era", Eur. Phys. J. C 75:132 (log-bicubic grid scheme)
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from ndinterp.axis import BracketResult, KnotAxis
from ndinterp.errors import NonPositiveValueError


class Kernel(Enum):
    """Interpolation scheme along one axis."""

    NEAREST = "nearest"
    LINEAR = "linear"
    LOG_LINEAR = "log_linear"
    CUBIC = "cubic"
    LOG_CUBIC = "log_cubic"

    @property
    def width(self) -> int:
        """Number of neighbouring samples used away from the axis edges."""
        if self in (Kernel.CUBIC, Kernel.LOG_CUBIC):
            return 4
        return 2

    @property
    def min_knots(self) -> int:
        """Smallest non-degenerate axis length the kernel accepts."""
        return self.width

    @property
    def log_space(self) -> bool:
        return self in (Kernel.LOG_LINEAR, Kernel.LOG_CUBIC)

    @classmethod
    def coerce(cls, kernel) -> "Kernel":
        """Return ``kernel`` as a :class:`Kernel`, accepting its string value.

        Raises
        ------
        ValueError
            If ``kernel`` is a string that names no kernel.
        TypeError
            If ``kernel`` is neither a :class:`Kernel` nor a string.
        """
        if isinstance(kernel, cls):
            return kernel
        if isinstance(kernel, str):
            try:
                return cls(kernel.lower().replace("-", "_"))
            except ValueError:
                names = [k.value for k in cls]
                raise ValueError(
                    f"Unknown kernel {kernel!r}; expected one of {names}"
                ) from None
        raise TypeError(
            f"kernel must be a Kernel or str, got {type(kernel).__name__}"
        )


# ----------------------------------------------------------------------
# Cubic Hermite basis
# ----------------------------------------------------------------------

def hermite_basis(t: float) -> Tuple[float, float, float, float]:
    """Cubic Hermite basis ``(h00, h10, h01, h11)`` at ``t``."""
    t2 = t * t
    t3 = t2 * t
    return (
        2.0 * t3 - 3.0 * t2 + 1.0,
        t3 - 2.0 * t2 + t,
        -2.0 * t3 + 3.0 * t2,
        t3 - t2,
    )


def hermite_basis_derivative(t: float) -> Tuple[float, float, float, float]:
    """Derivatives of :func:`hermite_basis` with respect to ``t``."""
    t2 = t * t
    return (
        6.0 * t2 - 6.0 * t,
        3.0 * t2 - 4.0 * t + 1.0,
        -6.0 * t2 + 6.0 * t,
        3.0 * t2 - 2.0 * t,
    )


def knot_derivative_coefficients(knots: np.ndarray, j: int) -> dict:
    """Coefficients of the finite-difference derivative estimate at knot ``j``.

    Interior knots use ``0.5 * (forward + backward)`` divided differences,
    the first and last knot the one-sided divided difference.

    Returns
    -------
    dict
        Maps sample index to its coefficient.
    """
    n = len(knots)
    if j == 0:
        h = knots[1] - knots[0]
        return {0: -1.0 / h, 1: 1.0 / h}
    if j == n - 1:
        h = knots[j] - knots[j - 1]
        return {j - 1: -1.0 / h, j: 1.0 / h}
    hb = knots[j] - knots[j - 1]
    hf = knots[j + 1] - knots[j]
    return {
        j - 1: -0.5 / hb,
        j: 0.5 / hb - 0.5 / hf,
        j + 1: 0.5 / hf,
    }


def _cubic_weights(knots: np.ndarray, i: int, t: float):
    n = len(knots)
    start = max(i - 1, 0)
    stop = min(i + 3, n)
    width = stop - start
    h = knots[i + 1] - knots[i]

    a = np.zeros(width)
    b = np.zeros(width)
    for j, c in knot_derivative_coefficients(knots, i).items():
        a[j - start] = c
    for j, c in knot_derivative_coefficients(knots, i + 1).items():
        b[j - start] = c
    e0 = np.zeros(width)
    e1 = np.zeros(width)
    e0[i - start] = 1.0
    e1[i + 1 - start] = 1.0

    if t < 0.0:
        return start, stop, e0 + (t * h) * a, a
    if t > 1.0:
        return start, stop, e1 + ((t - 1.0) * h) * b, b

    h00, h10, h01, h11 = hermite_basis(t)
    d00, d10, d01, d11 = hermite_basis_derivative(t)
    w = h00 * e0 + h01 * e1 + h * (h10 * a + h11 * b)
    dw = (d00 * e0 + d01 * e1) / h + d10 * a + d11 * b
    return start, stop, w, dw


def kernel_weights(
    kernel: Kernel, axis: KnotAxis, bracket: BracketResult
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sample window and weights for one kernel at one bracketed coordinate.

    Parameters
    ----------
    kernel : Kernel
        Interpolation scheme.
    axis : KnotAxis
        Axis the coordinate was bracketed on.
    bracket : BracketResult
        Output of :meth:`KnotAxis.bracket` (possibly adjusted by a
        boundary policy).

    Returns
    -------
    indices : ndarray of int
        Sample indices along the axis that the kernel reads.
    w : ndarray
        Value weights, one per index.
    dw : ndarray
        Weights of the derivative with respect to the coordinate.
    """
    if len(axis) == 1:
        return np.zeros(1, dtype=int), np.ones(1), np.zeros(1)

    i, t, _ = bracket
    if kernel is Kernel.NEAREST:
        w = np.zeros(2)
        w[0 if t < 0.5 else 1] = 1.0
        return np.arange(i, i + 2), w, np.zeros(2)
    if kernel is Kernel.LINEAR or kernel is Kernel.LOG_LINEAR:
        inv_h = 1.0 / axis.spacing(i)
        return (
            np.arange(i, i + 2),
            np.array([1.0 - t, t]),
            np.array([-inv_h, inv_h]),
        )
    if kernel is Kernel.CUBIC or kernel is Kernel.LOG_CUBIC:
        start, stop, w, dw = _cubic_weights(axis.knots, i, t)
        return np.arange(start, stop), w, dw
    raise ValueError(f"Unsupported kernel {kernel!r}")


# ----------------------------------------------------------------------
# Reduction along one axis
# ----------------------------------------------------------------------

def _contract(tensor: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """Contract the second-to-last (window) axis of ``tensor`` with ``weights``."""
    return np.swapaxes(tensor, -1, -2) @ weights


def contract_axis(
    values: np.ndarray,
    w: np.ndarray,
    dw: np.ndarray,
    partials: Optional[List[np.ndarray]] = None,
):
    """Collapse the window axis of ``values`` with linear weights.

    A window of a single sample (degenerate axis) is squeezed out and
    contributes a zero derivative.

    Parameters
    ----------
    values : ndarray of shape (..., window, C)
        Samples with the window axis second to last and channels last.
    w, dw : ndarray of shape (window,)
        Weights from :func:`kernel_weights`.
    partials : list of ndarray, optional
        Derivatives, with respect to axes reduced earlier, of every entry
        of ``values`` (same shape as ``values``).

    Returns
    -------
    reduced : ndarray of shape (..., C)
    derivative : ndarray of shape (..., C)
        Derivative with respect to this axis' coordinate.
    partials : list of ndarray
        The incoming partials carried through this reduction.
    """
    partials = partials or []
    if values.shape[-2] == 1:
        reduced = values[..., 0, :]
        return reduced, np.zeros_like(reduced), [g[..., 0, :] for g in partials]
    return (
        _contract(values, w),
        _contract(values, dw),
        [_contract(g, w) for g in partials],
    )


def to_log_space(values: np.ndarray, partials: List[np.ndarray]):
    """``log(values)`` and the matching partials ``g / values``.

    ``values`` must be strictly positive; callers check.
    """
    return np.log(values), [g / values for g in partials]


def from_log_space(logs: np.ndarray, partials: List[np.ndarray]):
    """Inverse of :func:`to_log_space`: ``exp(logs)`` and ``exp(logs) * g``."""
    values = np.exp(logs)
    return values, [values * g for g in partials]


def reduce_axis(
    kernel: Kernel,
    values: np.ndarray,
    w: np.ndarray,
    dw: np.ndarray,
    partials: Optional[List[np.ndarray]] = None,
):
    """Collapse the window axis of ``values`` with one kernel.

    Same as :func:`contract_axis` for linear-space kernels.  Log-space
    kernels contract ``log(values)`` and exponentiate the result.

    Returns
    -------
    reduced, derivative, partials
        As for :func:`contract_axis`, in linear space.

    Raises
    ------
    NonPositiveValueError
        If ``kernel`` works in log space and a sample in the window is
        not strictly positive.
    """
    partials = partials or []
    if values.shape[-2] == 1 or not kernel.log_space:
        return contract_axis(values, w, dw, partials)

    if np.any(values <= 0.0):
        bad = float(values[values <= 0.0].flat[0])
        raise NonPositiveValueError(
            f"{kernel.value} kernel requires strictly positive samples, "
            f"got {bad}"
        )
    logs, log_partials = to_log_space(values, partials)
    reduced, derivative, carried = contract_axis(logs, w, dw, log_partials)
    reduced, out = from_log_space(reduced, [derivative] + carried)
    return reduced, out[0], out[1:]
