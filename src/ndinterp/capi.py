"""Flat, status-code surface for foreign-function callers.

Mirrors the contract of a C-callable wrapper: construction from primitive
arrays, and evaluation that writes into caller-owned output buffers and
reports failures as :class:`~ndinterp.errors.Status` codes instead of
raising.  A handle is simply the :class:`~ndinterp.interpolator.Interpolator`
object; dropping the last reference destroys it.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from ndinterp.boundary import DEFAULT_POLICY
from ndinterp.errors import InterpolationError, Status
from ndinterp.grid import Grid
from ndinterp.interpolator import Interpolator, KernelSpec, PolicySpec
from ndinterp.kernels import Kernel


def build(
    axes: Sequence[Sequence[float]],
    values,
    kernels: KernelSpec = Kernel.LINEAR,
    policies: PolicySpec = DEFAULT_POLICY,
    channels: int = 1,
) -> Interpolator:
    """Build an interpolator from knot arrays and a flat row-major value array.

    Raises
    ------
    ShapeMismatchError, InsufficientKnotsError
        On inconsistent input.  Nothing is returned on failure.
    """
    return Interpolator(Grid(axes, values, channels=channels), kernels, policies)


def build_checked(
    axes: Sequence[Sequence[float]],
    values,
    kernels: KernelSpec = Kernel.LINEAR,
    policies: PolicySpec = DEFAULT_POLICY,
    channels: int = 1,
) -> Tuple[Status, Optional[Interpolator]]:
    """Like :func:`build`, but report taxonomy errors as a status code.

    Returns
    -------
    status : Status
    handle : Interpolator or None
        None unless ``status`` is ``Status.SUCCESS``.
    """
    try:
        handle = build(axes, values, kernels, policies, channels)
    except InterpolationError as exc:
        return exc.status, None
    return Status.SUCCESS, handle


def evaluate_into(
    handle: Interpolator,
    query: Sequence[float],
    out_values: np.ndarray,
    out_derivatives: Optional[np.ndarray] = None,
) -> Status:
    """Evaluate ``handle`` at ``query`` into caller-provided buffers.

    Parameters
    ----------
    handle : Interpolator
        Interpolator returned by :func:`build`.
    query : sequence of float
        One coordinate per axis.
    out_values : ndarray of shape (C,)
        Receives the channel values.
    out_derivatives : ndarray of shape (N, C) or (N * C,), optional
        Receives the partial derivatives, row-major.  Derivatives are only
        computed when this buffer is given.

    Returns
    -------
    Status
        ``Status.SUCCESS``, or the code of the error that prevented
        evaluation.  The output buffers are left untouched on failure.

    Raises
    ------
    ValueError
        If a buffer has the wrong size or the query the wrong length.
    """
    n, c = handle.num_dimensions, handle.channels
    if np.size(out_values) != c:
        raise ValueError(f"out_values must hold {c} entries, got {np.size(out_values)}")
    if out_derivatives is not None and np.size(out_derivatives) != n * c:
        raise ValueError(
            f"out_derivatives must hold {n * c} entries, got {np.size(out_derivatives)}"
        )

    try:
        result = handle.evaluate(query, derivatives=out_derivatives is not None)
    except InterpolationError as exc:
        return exc.status

    np.copyto(out_values, result.values.reshape(np.shape(out_values)))
    if out_derivatives is not None:
        np.copyto(out_derivatives, result.derivatives.reshape(np.shape(out_derivatives)))
    return Status.SUCCESS
