"""Dense N-dimensional sample tables on axis-aligned grids."""

from __future__ import annotations

import time
from typing import Callable, List, Sequence, Tuple, Union

import numpy as np

from ndinterp.axis import KnotAxis
from ndinterp.errors import ShapeMismatchError
from ndinterp.kernels import knot_derivative_coefficients

AxisLike = Union[KnotAxis, Sequence[float], np.ndarray]


def _as_axes(axes: Sequence[AxisLike]) -> Tuple[KnotAxis, ...]:
    if isinstance(axes, KnotAxis):
        axes = [axes]
    axes = tuple(a if isinstance(a, KnotAxis) else KnotAxis(a) for a in axes)
    if len(axes) == 0:
        raise ValueError("A grid needs at least one axis")
    return axes


class Grid:
    """Cartesian-product table of samples with one or more value channels.

    The table is the product of the per-axis knot sequences; sample
    ``values[i0, i1, ..., c]`` belongs to the point
    ``(axes[0][i0], axes[1][i1], ...)``.  Storage is row-major with the
    last axis varying fastest and the channel index innermost.

    Parameters
    ----------
    axes : sequence of KnotAxis or array-like
        One knot sequence per dimension.  ``KnotAxis`` instances are shared,
        not copied, so several grids can use the same axis.
    values : array-like
        Samples, either flat in row-major order (length
        ``prod(len(axis)) * channels``), shaped like the axes (single
        channel) or shaped like the axes plus a trailing channel axis.
    channels : int, optional
        Number of co-located value channels (default 1).

    Raises
    ------
    ShapeMismatchError
        If ``values`` does not hold exactly one sample per grid point and
        channel.
    ValueError
        If an axis is invalid, ``channels < 1`` or ``values`` contains NaN
        or Inf.

    Examples
    --------
    >>> grid = Grid([[0.0, 1.0, 2.0], [0.0, 1.0]], [0, 10, 1, 11, 2, 12])
    >>> grid.shape
    (3, 2)
    >>> float(grid.value_at((2, 1))[0])
    12.0
    """

    def __init__(
        self,
        axes: Sequence[AxisLike],
        values,
        channels: int = 1,
    ):
        axes = _as_axes(axes)
        if int(channels) != channels or channels < 1:
            raise ValueError(f"channels must be an int >= 1, got {channels}")
        channels = int(channels)

        shape = tuple(len(a) for a in axes)
        values = np.array(values, dtype=float)
        expected = int(np.prod(shape)) * channels
        if values.shape not in ((expected,), shape + (channels,)) and not (
            channels == 1 and values.shape == shape
        ):
            raise ShapeMismatchError(
                f"values with shape {values.shape} ({values.size} entries) do not "
                f"match axes of lengths {list(shape)} with {channels} channel(s) "
                f"({expected} entries)"
            )
        if not np.isfinite(values).all():
            raise ValueError("values contain NaN or Inf")

        values.flags.writeable = False
        values = values.reshape(shape + (channels,))
        self._axes = axes
        self._values = values

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_function(
        cls,
        axes: Sequence[AxisLike],
        function: Callable,
        channels: int = 1,
        verbose: bool = False,
    ) -> "Grid":
        """Tabulate ``function`` on every grid point.

        Parameters
        ----------
        axes : sequence of KnotAxis or array-like
            One knot sequence per dimension.
        function : callable
            ``f(point) -> float`` (or a sequence of ``channels`` floats),
            where ``point`` is a list of coordinates.
        channels : int, optional
            Number of values ``function`` returns per point (default 1).
        verbose : bool, optional
            If True, print tabulation progress.  Default is False.

        Returns
        -------
        Grid
        """
        axes = _as_axes(axes)
        shape = tuple(len(a) for a in axes)
        total = int(np.prod(shape))
        if verbose:
            print(f"Tabulating {len(axes)}D grid ({total:,} evaluations)...")

        start = time.time()
        values = np.empty(shape + (channels,))
        for idx in np.ndindex(*shape):
            point = [float(axes[d].knots[idx[d]]) for d in range(len(axes))]
            values[idx] = function(point)

        if verbose:
            print(f"  Tabulated in {time.time() - start:.3f}s")
        return cls(axes, values, channels=channels)

    def points(self) -> np.ndarray:
        """All grid points in row-major order, shape ``(prod(shape), N)``.

        Evaluate a function on these points and pass the results, in the
        same order, as ``values`` to build a grid externally.
        """
        mesh = np.meshgrid(*[a.knots for a in self._axes], indexing="ij")
        return np.stack(mesh, axis=-1).reshape(-1, len(self._axes))

    # ------------------------------------------------------------------
    # Lookup and metadata
    # ------------------------------------------------------------------

    def value_at(self, multi_index: Sequence[int]) -> np.ndarray:
        """Samples of every channel at one grid point, shape ``(C,)``.

        Bounds are only checked by ``assert``; callers deriving indices
        from the axis lengths may run with ``python -O``.
        """
        assert len(multi_index) == len(self._axes), (
            f"expected {len(self._axes)} indices, got {len(multi_index)}"
        )
        assert all(0 <= i < n for i, n in zip(multi_index, self.shape)), (
            f"index {tuple(multi_index)} out of bounds for shape {self.shape}"
        )
        return self._values[tuple(multi_index)]

    def derivative_at(self, dim: int, multi_index: Sequence[int]) -> np.ndarray:
        """Finite-difference derivative estimate along ``dim`` at a grid point.

        Uses the same estimate as the cubic kernel: the mean of the forward
        and backward divided differences at interior knots and the
        one-sided divided difference at the edges.

        Parameters
        ----------
        dim : int
            Axis to differentiate along.
        multi_index : sequence of int
            Grid point.

        Returns
        -------
        ndarray of shape (C,)
        """
        if len(self._axes[dim]) < 2:
            return np.zeros(self.channels)
        idx = list(multi_index)
        coeffs = knot_derivative_coefficients(self._axes[dim].knots, idx[dim])
        result = np.zeros(self.channels)
        for j, c in coeffs.items():
            idx[dim] = j
            result += c * self._values[tuple(idx)]
        return result

    def axis_count(self) -> int:
        return len(self._axes)

    def axis_len(self, dim: int) -> int:
        return len(self._axes[dim])

    def knot(self, dim: int, i: int) -> float:
        return float(self._axes[dim].knots[i])

    @property
    def axes(self) -> Tuple[KnotAxis, ...]:
        return self._axes

    @property
    def values(self) -> np.ndarray:
        """Read-only sample array of shape ``shape + (channels,)``."""
        return self._values

    @property
    def shape(self) -> Tuple[int, ...]:
        """Per-axis knot counts."""
        return self._values.shape[:-1]

    @property
    def channels(self) -> int:
        return self._values.shape[-1]

    @property
    def num_dimensions(self) -> int:
        return len(self._axes)

    # ------------------------------------------------------------------
    # Serialization and printing
    # ------------------------------------------------------------------

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)
        self._values.flags.writeable = False

    def __repr__(self) -> str:
        return (
            f"Grid(dims={self.num_dimensions}, "
            f"shape={list(self.shape)}, "
            f"channels={self.channels})"
        )

    def __str__(self) -> str:
        lines: List[str] = [
            f"Grid ({self.num_dimensions}D, {self.channels} channel(s), "
            f"{int(np.prod(self.shape)):,} points)"
        ]
        for d, axis in enumerate(self._axes):
            lines.append(f"  Axis {d}: {len(axis)} knots on [{axis.lower:g}, {axis.upper:g}]")
        return "\n".join(lines)
