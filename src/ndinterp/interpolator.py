"""N-dimensional interpolation by dimensional reduction.

An :class:`Interpolator` pairs a :class:`~ndinterp.grid.Grid` with one
kernel and one boundary policy per axis.  Evaluation brackets every query
coordinate, gathers the small block of samples the kernels need, and then
collapses that block one axis at a time, starting from the last axis, until
only the value channels remain.  Tensor-product interpolation does not
depend on that order mathematically; the fixed order makes results
reproducible bit for bit.
"""

from __future__ import annotations

import os
import pickle
import warnings
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ndinterp.boundary import DEFAULT_POLICY, BoundaryPolicy, bracket_with_policy
from ndinterp.errors import InsufficientKnotsError, NonPositiveValueError
from ndinterp.grid import Grid
from ndinterp.kernels import (
    Kernel,
    contract_axis,
    from_log_space,
    kernel_weights,
    to_log_space,
)

KernelSpec = Union[Kernel, str, Sequence[Union[Kernel, str]]]
PolicySpec = Union[BoundaryPolicy, str, Sequence[Union[BoundaryPolicy, str]]]


@dataclass(frozen=True)
class EvaluationResult:
    """Interpolated channel values at one query point.

    Attributes
    ----------
    values : ndarray of shape (C,)
        One value per channel.
    derivatives : ndarray of shape (N, C) or None
        ``derivatives[d, c]`` is the partial derivative of channel ``c``
        with respect to coordinate ``d``; None unless requested.
    """

    values: np.ndarray
    derivatives: Optional[np.ndarray] = None

    @property
    def value(self) -> float:
        """The single channel value; raises ``ValueError`` for multi-channel grids."""
        if self.values.shape != (1,):
            raise ValueError(
                f"value is only defined for single-channel results, "
                f"got {self.values.shape[0]} channels"
            )
        return float(self.values[0])


def _per_axis(setting, n: int, coerce, name: str) -> tuple:
    if isinstance(setting, (str, Kernel, BoundaryPolicy)):
        return (coerce(setting),) * n
    setting = list(setting)
    if len(setting) != n:
        raise ValueError(f"Expected {n} {name}, one per axis, got {len(setting)}")
    return tuple(coerce(s) for s in setting)


class Interpolator:
    """Evaluate a gridded function anywhere via per-axis local kernels.

    Parameters
    ----------
    grid : Grid
        Sample table.  Shared, not copied, so several interpolators with
        different kernels may wrap the same grid.
    kernels : Kernel, str or sequence, optional
        One kernel for every axis, or one per axis.  Default is
        ``Kernel.LINEAR``.
    policies : BoundaryPolicy, str or sequence, optional
        One boundary policy for every axis, or one per axis.  Default is
        ``BoundaryPolicy.CLAMP``.

    Raises
    ------
    InsufficientKnotsError
        If a kernel needs more knots than its axis has.  Axes with a single
        knot are pass-through and accept every kernel.
    ValueError
        If the number of kernels or policies does not match the axes, or a
        name is unknown.

    Examples
    --------
    >>> grid = Grid([[0.0, 1.0, 2.0], [0.0, 1.0]], [0, 10, 1, 11, 2, 12])
    >>> interp = Interpolator(grid, "linear")
    >>> interp.evaluate([0.5, 0.5]).value
    5.5
    """

    def __init__(
        self,
        grid: Grid,
        kernels: KernelSpec = Kernel.LINEAR,
        policies: PolicySpec = DEFAULT_POLICY,
    ):
        if not isinstance(grid, Grid):
            raise TypeError(f"grid must be a Grid, got {type(grid).__name__}")
        n = grid.num_dimensions
        kernels = _per_axis(kernels, n, Kernel.coerce, "kernels")
        policies = _per_axis(policies, n, BoundaryPolicy.coerce, "policies")

        for d, (axis, kernel) in enumerate(zip(grid.axes, kernels)):
            if len(axis) != 1 and len(axis) < kernel.min_knots:
                raise InsufficientKnotsError(
                    f"{kernel.value} kernel needs at least {kernel.min_knots} "
                    f"knots, axis {d} has {len(axis)}"
                )

        self._grid = grid
        self._kernels = kernels
        self._policies = policies

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _prepare(self, query: Sequence[float]):
        """Bracket every coordinate and return per-axis windows and weights."""
        n = self._grid.num_dimensions
        if np.ndim(query) != 1 or len(query) != n:
            raise ValueError(
                f"query must have {n} coordinates, got {np.shape(query)}"
            )
        windows = []
        weights = []
        for d in range(n):
            axis = self._grid.axes[d]
            bracket, clamped = bracket_with_policy(
                axis, query[d], self._policies[d], dim=d
            )
            idx, w, dw = kernel_weights(self._kernels[d], axis, bracket)
            if clamped:
                dw = np.zeros_like(dw)
            windows.append(idx)
            weights.append((w, dw))
        return windows, weights

    def evaluate(
        self, query: Sequence[float], derivatives: bool = False
    ) -> EvaluationResult:
        """Interpolate every channel at one query point.

        Parameters
        ----------
        query : sequence of float
            One coordinate per axis.
        derivatives : bool, optional
            If True, also return the partial derivatives with respect to
            each coordinate.  Default is False.

        Returns
        -------
        EvaluationResult

        Raises
        ------
        OutOfDomainError
            If a coordinate is not finite, or lies outside an axis whose
            policy is ``REJECT``.
        NonPositiveValueError
            If any axis uses a log-space kernel and a grid sample the query
            reads is not strictly positive, or if the axes reduced before a
            log-space axis interpolate to a value that is not.
        """
        windows, weights = self._prepare(query)
        n = len(windows)

        current = self._grid.values[np.ix_(*windows, np.arange(self._grid.channels))]
        log_axes = [
            d for d in range(n) if self._kernels[d].log_space and len(windows[d]) > 1
        ]
        if log_axes:
            self._check_samples(current, windows, log_axes[-1])

        # Consecutive log-space axes are reduced without leaving log space.
        partials: List[np.ndarray] = []
        in_log = False
        for d in range(n - 1, -1, -1):
            kernel = self._kernels[d]
            w, dw = weights[d]
            if len(windows[d]) > 1 and kernel.log_space != in_log:
                if in_log:
                    current, partials = from_log_space(current, partials)
                else:
                    self._check_intermediate(current, d)
                    current, partials = to_log_space(current, partials)
                in_log = kernel.log_space
            current, deriv_d, carried = contract_axis(
                current, w, dw, partials if derivatives else None
            )
            if derivatives:
                partials = [deriv_d] + carried
        if in_log:
            current, partials = from_log_space(current, partials)

        values = np.array(current, dtype=float)
        if not derivatives:
            return EvaluationResult(values)
        return EvaluationResult(values, np.array(partials, dtype=float))

    def _check_samples(self, block: np.ndarray, windows, dim: int) -> None:
        """Raise if a gathered grid sample is out of a log kernel's domain."""
        bad = np.argwhere(block <= 0.0)
        if len(bad) == 0:
            return
        pos = bad[0]
        index = tuple(int(windows[k][pos[k]]) for k in range(len(windows)))
        raise NonPositiveValueError(
            f"{self._kernels[dim].value} kernel on axis {dim} requires strictly "
            f"positive samples, got {float(block[tuple(pos)])} at grid index "
            f"{index}, channel {int(pos[-1])}"
        )

    def _check_intermediate(self, current: np.ndarray, dim: int) -> None:
        """Raise if inner axes interpolated to a value a log kernel cannot take."""
        if not np.any(current <= 0.0):
            return
        bad = float(current[current <= 0.0].flat[0])
        raise NonPositiveValueError(
            f"{self._kernels[dim].value} kernel on axis {dim} needs strictly "
            f"positive values, but interpolating the inner axes "
            f"{list(range(dim + 1, self.num_dimensions))} gave {bad}; an inner "
            f"kernel extrapolates or overshoots below zero"
        )

    def evaluate_batch(
        self, points: np.ndarray, derivatives: bool = False
    ) -> Union[np.ndarray, Tuple[np.ndarray, np.ndarray]]:
        """Evaluate at multiple points.

        Parameters
        ----------
        points : ndarray of shape (M, N)
            Query points.
        derivatives : bool, optional
            If True, also return partial derivatives.

        Returns
        -------
        values : ndarray of shape (M, C)
        derivatives : ndarray of shape (M, N, C)
            Only when ``derivatives`` is True.
        """
        points = np.asarray(points, dtype=float)
        if points.ndim != 2 or points.shape[1] != self.num_dimensions:
            raise ValueError(
                f"points must have shape (M, {self.num_dimensions}), "
                f"got {points.shape}"
            )
        M = points.shape[0]
        values = np.empty((M, self.channels))
        grads = np.empty((M, self.num_dimensions, self.channels)) if derivatives else None
        for k in range(M):
            result = self.evaluate(points[k], derivatives=derivatives)
            values[k] = result.values
            if derivatives:
                grads[k] = result.derivatives
        if derivatives:
            return values, grads
        return values

    def __call__(self, query: Sequence[float]) -> np.ndarray:
        """Shorthand for ``evaluate(query).values``."""
        return self.evaluate(query).values

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def kernels(self) -> Tuple[Kernel, ...]:
        return self._kernels

    @property
    def policies(self) -> Tuple[BoundaryPolicy, ...]:
        return self._policies

    @property
    def num_dimensions(self) -> int:
        return self._grid.num_dimensions

    @property
    def channels(self) -> int:
        return self._grid.channels

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def __getstate__(self) -> dict:
        """Return picklable state stamped with the package version."""
        from ndinterp._version import __version__

        state = self.__dict__.copy()
        state["_ndinterp_version"] = __version__
        return state

    def __setstate__(self, state: dict) -> None:
        """Restore state from a pickled dict."""
        from ndinterp._version import __version__

        saved_version = state.pop("_ndinterp_version", None)
        if saved_version is not None and saved_version != __version__:
            warnings.warn(
                f"This object was saved with ndinterp {saved_version}, "
                f"but you are loading it with {__version__}. "
                f"Evaluation results may differ if internal data layout "
                f"changed.",
                UserWarning,
                stacklevel=2,
            )
        self.__dict__.update(state)

    def save(self, path: str | os.PathLike) -> None:
        """Save the interpolator, grid included, to a file.

        Parameters
        ----------
        path : str or path-like
            Destination file path.
        """
        with open(os.fspath(path), "wb") as f:
            pickle.dump(self, f, protocol=pickle.HIGHEST_PROTOCOL)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "Interpolator":
        """Load a previously saved interpolator from a file.

        Parameters
        ----------
        path : str or path-like
            Path to the saved file.

        Returns
        -------
        Interpolator
            The restored interpolator, ready to evaluate.

        Raises
        ------
        TypeError
            If the file does not hold an :class:`Interpolator`.

        Warns
        -----
        UserWarning
            If the file was saved with a different ndinterp version.

        .. warning::

            This method uses :mod:`pickle` internally.  Pickle can execute
            arbitrary code during deserialization.  **Only load files you
            trust.**
        """
        with open(os.fspath(path), "rb") as f:
            obj = pickle.load(f)  # noqa: S301
        if not isinstance(obj, cls):
            raise TypeError(
                f"Expected a {cls.__name__} instance, "
                f"got {type(obj).__name__}"
            )
        return obj

    # ------------------------------------------------------------------
    # Printing
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"Interpolator("
            f"dims={self.num_dimensions}, "
            f"shape={list(self._grid.shape)}, "
            f"channels={self.channels}, "
            f"kernels={[k.value for k in self._kernels]})"
        )

    def __str__(self) -> str:
        lines = [
            f"Interpolator ({self.num_dimensions}D, {self.channels} channel(s))"
        ]
        for d, axis in enumerate(self._grid.axes):
            lines.append(
                f"  Axis {d}: {len(axis)} knots on [{axis.lower:g}, {axis.upper:g}], "
                f"{self._kernels[d].value}, {self._policies[d].value}"
            )
        return "\n".join(lines)
